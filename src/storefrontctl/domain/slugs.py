"""Slug seeds for public storefront URLs."""

from __future__ import annotations

import re
import unicodedata

MAX_SLUG_LENGTH = 60

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(text: str, *, max_length: int = MAX_SLUG_LENGTH) -> str:
    """Turn *text* into a lowercase, hyphenated ASCII slug.

    Examples:
        >>> slugify("Green Acres Farm & Dairy")
        'green-acres-farm-dairy'
        >>> slugify("  Café Olé!  ")
        'cafe-ole'
    """
    folded = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    slug = _NON_ALNUM.sub("-", folded.lower()).strip("-")
    return slug[:max_length].rstrip("-")


def slug_seed(store_id: int, *, existing: str | None = None, store_name: str | None = None) -> str:
    """Pick the preferred slug: the current one, else the store name, else ``store-{id}``."""
    if existing:
        return existing
    if store_name:
        seed = slugify(store_name)
        if seed:
            return seed
    return f"store-{store_id}"
