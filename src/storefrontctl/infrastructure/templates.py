"""Shared Jinja2 template loading for packaged templates."""

from __future__ import annotations

from functools import cache

from jinja2 import Environment, PackageLoader, StrictUndefined


@cache
def template_environment() -> Environment:
    """Build the Jinja2 environment over ``storefrontctl/templates``.

    Output is plain text (CSS), so autoescaping stays off. Undefined
    variables raise instead of rendering as empty strings.
    """
    return Environment(
        loader=PackageLoader("storefrontctl", "templates"),
        autoescape=False,
        undefined=StrictUndefined,
    )
