"""Protocol definitions for Postcheck.

This module defines the interfaces (protocols) used throughout Postcheck.
Loading, building and validating posts are separate seams so each can be
swapped or extended without touching the others.
"""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .content import Post
    from .validators import Issue


@runtime_checkable
class PostRule(Protocol):
    """Protocol for rules that inspect a single post."""

    @property
    @abstractmethod
    def rule_id(self) -> str:
        """Return the identifier reported with each issue (e.g. 'required')."""
        ...

    @abstractmethod
    def check(self, post: Post) -> list[Issue]:
        """Validate one post.

        Args:
            post: Post to inspect.

        Returns:
            Issues found, empty when the post satisfies the rule.
        """
        ...


@runtime_checkable
class CollectionRule(Protocol):
    """Protocol for rules that need to see every post at once."""

    @property
    @abstractmethod
    def rule_id(self) -> str:
        """Return the identifier reported with each issue."""
        ...

    @abstractmethod
    def check(self, posts: Sequence[Post]) -> list[Issue]:
        """Validate the whole collection.

        Args:
            posts: All loaded posts.

        Returns:
            Issues found across the collection.
        """
        ...


@runtime_checkable
class ContentLoader(Protocol):
    """Protocol for discovering content files."""

    @abstractmethod
    def iter_files(self, include_drafts: bool = False) -> list[Path]:
        """Iterate over all content files.

        Args:
            include_drafts: Whether to include draft files.

        Returns:
            List of paths to content files.
        """
        ...


@runtime_checkable
class PostBuilder(Protocol):
    """Protocol for building Post objects from files."""

    @abstractmethod
    def build(self, path: Path) -> Post:
        """Build a Post from a source file.

        Raises:
            FrontmatterError: If the front-matter cannot be parsed.
        """
        ...
