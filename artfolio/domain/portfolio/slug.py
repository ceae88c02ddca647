"""
Slug rules for public portfolio URLs.

A slug is lower-case ASCII letters and digits separated by single hyphens,
e.g. ``jane-doe``. Uniqueness is checked against storage by the
data-access layer; this module only holds the pure text rules.
"""

import re
import secrets
import string

FALLBACK_SLUG = "portfolio"
SUFFIX_ALPHABET = string.ascii_lowercase + string.digits
SLUG_PATTERN = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")

_NON_SLUG_RUN = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    """Turn free text into a base slug.

    Lower-cases the input, collapses every run of characters outside
    ``[a-z0-9]`` into one hyphen and strips hyphens at either end.
    Falls back to ``"portfolio"`` when nothing is left.

    Args:
        text: Any text, typically the artist's name.

    Returns:
        A slug matching ``SLUG_PATTERN``.
    """
    slug = _NON_SLUG_RUN.sub("-", (text or "").lower()).strip("-")
    return slug or FALLBACK_SLUG


def random_suffix(length: int = 6) -> str:
    """Return a random lower-case alphanumeric string of the given length."""
    return "".join(secrets.choice(SUFFIX_ALPHABET) for _ in range(length))


def with_suffix(slug: str, length: int = 6) -> str:
    """Append a hyphen and a random suffix to a slug."""
    return f"{slug}-{random_suffix(length)}"


def is_valid_slug(value: str) -> bool:
    """Return True when the value is a well-formed slug."""
    return bool(SLUG_PATTERN.match(value or ""))
