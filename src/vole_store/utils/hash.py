# src/vole_store/utils/hash.py
"""Hashing helpers for content addressing."""

from __future__ import annotations

import hashlib
import re
from typing import Protocol

_HEX_DIGEST_RE = re.compile(r"^[0-9a-f]{32,128}$")


class Hasher(Protocol):
    """Protocol capturing the subset of the hashlib API we rely on."""

    def update(self, data: bytes, /) -> None: ...

    def hexdigest(self) -> str: ...


def new_hasher(algorithm: str) -> Hasher:
    """Return an incremental hasher for ``algorithm``.

    Raises:
        ValueError: If hashlib does not provide the algorithm.
    """
    return hashlib.new(algorithm)


def is_valid_hash(value: object) -> bool:
    """Return True if ``value`` is a lower-case hex digest string."""
    return isinstance(value, str) and bool(_HEX_DIGEST_RE.match(value))
