"""URL slug helpers."""

import re
from typing import Callable

import ulid

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    """Lowercase, collapse non-alphanumerics to '-', trim dashes."""
    return _NON_ALNUM.sub("-", text.lower()).strip("-")


def unique_slug(text: str, taken: Callable[[str], bool]) -> str:
    """
    Slug for ``text`` that ``taken`` reports as free.

    Appends the random tail of a fresh ULID until the slug is unused.
    """
    base = slugify(text) or "item"
    candidate = base
    while taken(candidate):
        candidate = f"{base}-{str(ulid.ULID())[-6:].lower()}"
    return candidate
