from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence

from .store import BlogEntry


class PostCollection(Sequence[BlogEntry]):
    """Immutable sequence of blog entries with filtering and sorting helpers."""

    def __init__(self, entries: Iterable[BlogEntry] = ()):
        self._entries = tuple(entries)
        # Entries never change, so the newest-first order is computed once
        self._sorted_cache: PostCollection | None = None

    def __iter__(self) -> Iterator[BlogEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, item):
        if isinstance(item, slice):
            return PostCollection(self._entries[item])
        return self._entries[item]

    def __eq__(self, other) -> bool:
        if isinstance(other, PostCollection):
            return self._entries == other._entries
        if isinstance(other, (list, tuple)):
            return list(self._entries) == list(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def published(self) -> PostCollection:
        return PostCollection(e for e in self._entries if not e.data.is_draft)

    def drafts(self) -> PostCollection:
        return PostCollection(e for e in self._entries if e.data.is_draft)

    def in_category(self, category_id: str) -> PostCollection:
        return PostCollection(
            e for e in self._entries if e.data.category.id == category_id
        )

    def sorted(self, reverse: bool = True) -> PostCollection:
        """Sort entries by publish date.

        The sort is stable in both directions: entries sharing a publish date
        keep the order they have in this collection.

        Args:
            reverse: If True (default), newest first. If False, oldest first.

        Returns:
            A new PostCollection with sorted entries.
        """
        if reverse and self._sorted_cache is not None:
            return self._sorted_cache
        ordered = PostCollection(
            sorted(self._entries, key=lambda e: e.data.publish_date, reverse=reverse)
        )
        if reverse:
            self._sorted_cache = ordered
        return ordered

    def ids(self) -> list[str]:
        return [e.id for e in self._entries]

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"PostCollection({len(self._entries)} posts)"
