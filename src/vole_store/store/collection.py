"""Ordered, filterable, size-capped views over users and posts.

Collections are immutable. ``before_id`` and ``limit`` return new collections
so a view handed to one caller can never be narrowed by another.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, Generic, Protocol, TypeVar

from vole_store.services import codec
from vole_store.schemas.post import PostCollectionContainer
from vole_store.schemas.user import UserCollectionContainer

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from vole_store.store.post import Post
    from vole_store.store.user import User


class _Identified(Protocol):
    id: str | None


ItemT = TypeVar("ItemT", bound=_Identified)


class Collection(Generic[ItemT]):
    """Immutable ordered sequence with cursor and cap operations."""

    def __init__(
        self,
        items: Iterable[ItemT] = (),
        *,
        before: str | None = None,
        cap: int | None = None,
    ) -> None:
        self._items: tuple[ItemT, ...] = tuple(items)
        self.before = before
        self.cap = cap

    def __iter__(self) -> Iterator[ItemT]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> ItemT:
        return self._items[index]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({[item.id for item in self._items]!r})"

    @property
    def items(self) -> tuple[ItemT, ...]:
        """Return the items in order."""
        return self._items

    @property
    def ids(self) -> list[str | None]:
        """Return the item identifiers in order."""
        return [item.id for item in self._items]

    @property
    def is_empty(self) -> bool:
        """Return True if the collection holds nothing."""
        return not self._items

    def before_id(self, item_id: str | None) -> Collection[ItemT]:
        """Return the items strictly after ``item_id`` in this ordering.

        For newest-first collections that means strictly older items. An empty
        or missing id leaves the collection unfiltered. An id that is not in
        the collection yields an empty collection: nothing can be shown to be
        older than an unknown reference point.
        """
        if not item_id:
            return self
        for position, item in enumerate(self._items):
            if item.id == item_id:
                return self._derive(self._items[position + 1 :], before=item_id)
        return self._derive((), before=item_id)

    def limit(self, count: int | None) -> Collection[ItemT]:
        """Return at most ``count`` leading items. ``None`` means unbounded."""
        if count is None:
            return self
        return self._derive(self._items[: max(count, 0)], cap=count)

    def _derive(self, items: Iterable[ItemT], **changes: object) -> Collection[ItemT]:
        options = {"before": self.before, "cap": self.cap}
        options.update(changes)
        return type(self)(items, **options)  # type: ignore[arg-type]


class PostCollection(Collection["Post"]):
    """Posts ordered newest first."""

    def container(self) -> PostCollectionContainer:
        """Return the wire envelope for this page of posts."""
        return codec.posts_to_container(self, before=self.before, limit=self.cap)

    def json(self) -> str:
        """Return this page of posts as JSON text."""
        return codec.to_json(self.container())


class UserCollection(Collection["User"]):
    """Users in registry order."""

    @classmethod
    def empty(cls) -> UserCollection:
        """Return a collection with no users."""
        return cls()

    def container(self) -> UserCollectionContainer:
        """Return the wire envelope for these users."""
        return codec.users_to_container(self)

    def json(self) -> str:
        """Return these users as JSON text."""
        return codec.to_json(self.container())
