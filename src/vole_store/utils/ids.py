"""Identifier generation."""

import re
import uuid

_IDENTIFIER_RE = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


def new_identifier() -> str:
    """Return a fresh random identifier safe to use as a directory name."""
    return uuid.uuid4().hex


def is_valid_identifier(value: object) -> bool:
    """Return True if ``value`` can name a user or post."""
    return isinstance(value, str) and bool(_IDENTIFIER_RE.match(value))
