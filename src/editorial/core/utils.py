"""
Identifier, timestamp and slug helpers.
"""

import re
import unicodedata
from collections.abc import Iterable
from datetime import datetime, timedelta, timezone
from uuid import uuid4


_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_MARKUP = re.compile(r"<[^>]*>")


def generate_id(prefix: str) -> str:
    """Generate an opaque unique identifier, e.g. ``art_3f2a...``."""
    return f"{prefix}_{uuid4().hex}"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def touch(previous: datetime | None = None) -> datetime:
    """
    Return a fresh timestamp strictly later than ``previous``.

    Two mutations inside the same clock tick still produce increasing
    ``updated_at`` values.
    """
    stamp = utcnow()
    if previous is not None and stamp <= previous:
        stamp = previous + timedelta(microseconds=1)
    return stamp


def slugify(text: str) -> str:
    """Convert free text to a URL-safe slug (accents stripped, lowercase, hyphenated)."""
    decomposed = unicodedata.normalize("NFD", str(text))
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    slug = _NON_ALNUM.sub("-", stripped.lower().strip())
    slug = slug.strip("-")
    return slug or "untitled"


def unique_slug(base: str, taken: Iterable[str]) -> str:
    """
    Disambiguate ``base`` against slugs already in use.

    Returns ``base`` when free, otherwise the first free ``base-1``,
    ``base-2``, ... candidate. To let a record keep its own slug, leave it
    out of ``taken``.
    """
    used = taken if isinstance(taken, (set, frozenset)) else set(taken)
    slug = base
    counter = 1
    while slug in used:
        slug = f"{base}-{counter}"
        counter += 1
    return slug


def strip_markup(text: str) -> str:
    """Remove HTML/XML tags."""
    return _MARKUP.sub("", text)
