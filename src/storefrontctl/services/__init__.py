"""Service layer — editing sessions and the publish workflow.

Services may import from domain and infrastructure layers.
They must never import from commands or output.
"""
