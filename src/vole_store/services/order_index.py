"""Monotonic per-owner order index helpers."""

from __future__ import annotations

from vole_store.repositories.post_repo import PostRepository


def next_order_index(repo: PostRepository, owner_id: str) -> int:
    """Return the next strictly increasing order index for ``owner_id``.

    Notes:
        Callers must hold the owner's lock for the whole transaction that
        inserts the post; the unique (owner_id, order_index) constraint turns
        any missed serialization into a ConflictError instead of a silent tie.
    """
    return repo.max_order_index(owner_id) + 1
