"""Domain layer — module types, settings, catalogs, and document rules.

This layer depends on stdlib, pydantic, ruamel.yaml, structlog, and the
shared Jinja2 template loader. It must never import from services,
commands, config, or output.
"""
