"""Infrastructure layer — REST gateway, local draft cache, template loading.

This layer depends on stdlib and third-party libs (httpx, Jinja2).
It must never import from services, commands, or output.
"""
