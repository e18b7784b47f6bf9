"""Utility functions for wp2md."""

import re
from urllib.parse import urlparse

from slugify import slugify


def title_to_slug(title: str, fallback: str = "post") -> str:
    """Generate a filesystem-safe filename from a post title."""
    cleaned = re.sub(r"[^\w\s-]", "", title or "")
    slug = slugify(cleaned, lowercase=True).replace("*", "")
    return slug[:100] if slug else fallback


def link_path(url: str) -> str:
    """Path (plus query) of a post permalink, for ``redirect_from``."""
    parsed = urlparse(url)
    path = parsed.path or "/"
    if parsed.query:
        path += f"?{parsed.query}"
    return path
