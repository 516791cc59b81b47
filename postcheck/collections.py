from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from datetime import datetime

from .content import Post


class PostCollection(Sequence[Post]):
    """Lightweight helper for working with lists of Posts."""

    def __init__(self, posts: Iterable[Post]):
        self._posts = list(posts)

    def __iter__(self) -> Iterator[Post]:
        return iter(self._posts)

    def __len__(self) -> int:
        return len(self._posts)

    def __getitem__(self, item):
        return self._posts[item]

    def with_tag(self, tag: str) -> PostCollection:
        return PostCollection(p for p in self._posts if tag in p.tags)

    def drafts(self) -> PostCollection:
        return PostCollection(p for p in self._posts if p.draft)

    def published(self) -> PostCollection:
        return PostCollection(p for p in self._posts if not p.draft)

    def sorted(self, reverse: bool = True) -> PostCollection:
        """Sort posts by date, then by slug.

        Undated posts always come last, whichever direction is requested.

        Args:
            reverse: If True (default), newest first. If False, oldest first.

        Returns:
            A new PostCollection with sorted posts.
        """
        dated = [p for p in self._posts if p.date is not None]
        undated = [p for p in self._posts if p.date is None]
        dated.sort(key=lambda p: (_naive(p.date), p.slug), reverse=reverse)
        undated.sort(key=lambda p: p.slug)
        return PostCollection(dated + undated)

    def latest(self, count: int = 5) -> PostCollection:
        return PostCollection(self.sorted()[:count])

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"PostCollection({len(self._posts)} posts)"


def _naive(value: datetime) -> datetime:
    # Offset-aware and naive dates cannot be compared directly
    if value.tzinfo is not None:
        return value.replace(tzinfo=None) - value.utcoffset()
    return value


class TagCollection(Mapping[str, PostCollection]):
    """Mapping of tag name to PostCollection with convenience helpers."""

    def __init__(self, mapping: dict[str, Iterable[Post]]):
        self._mapping = {k: PostCollection(v) for k, v in mapping.items()}

    def __getitem__(self, key: str) -> PostCollection:
        return self._mapping[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._mapping)

    def __len__(self) -> int:
        return len(self._mapping)

    def counts(self) -> list[tuple[str, int]]:
        """Return (tag, count) pairs, most used first, then by name."""
        return sorted(
            ((tag, len(posts)) for tag, posts in self._mapping.items()),
            key=lambda item: (-item[1], item[0]),
        )

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"TagCollection({len(self._mapping)} tags)"


def build_tags_index(posts: Iterable[Post]) -> TagCollection:
    """Build an index mapping tags to the posts carrying them.

    Args:
        posts: Iterable of Post objects.

    Returns:
        TagCollection keyed by tag name.
    """
    tags: dict[str, list[Post]] = {}
    for post in posts:
        for tag in post.tags:
            tags.setdefault(tag, []).append(post)
    return TagCollection(tags)
