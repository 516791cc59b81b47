"""Content loading for Postcheck.

This module discovers post files, splits their front-matter and builds Post
records. The body of a post is kept verbatim and never interpreted.

Key classes:
- Post: Dataclass representing a post and its front-matter fields.
- FileContentLoader: Implementation of ContentLoader protocol for file-based content.
- DefaultPostBuilder: Implementation of PostBuilder protocol.
- ContentProcessor: Facade for loading every post in a content directory.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from .frontmatter import FrontmatterError, extract_frontmatter, has_frontmatter
from .utils import (
    extract_date_from_name,
    is_markdown,
    parse_date,
    parse_tags,
    slugify,
)


@dataclass
class Post:
    """Represents a post with its typed front-matter fields.

    Typed fields are coerced best-effort from the raw front-matter; a value
    of the wrong type falls back to the field default and stays available,
    untouched, in ``frontmatter`` for validation.

    Attributes:
        path: Path to the source file.
        layout: Layout name the renderer should use.
        title: Human-readable title.
        description: Short summary.
        tags: Unique tags in declaration order.
        toc: Whether the renderer should emit a table of contents.
        date: Publication date from front-matter or filename prefix.
        body: Raw text after the front-matter block.
        slug: Filename stem without date prefix.
        draft: Whether this is a draft post.
        has_frontmatter: Whether the file opened with a front-matter block.
        frontmatter: Raw parsed front-matter mapping.
    """

    path: Path
    layout: str = ""
    title: str = ""
    description: str = ""
    tags: list[str] = field(default_factory=list)
    toc: bool = False
    date: datetime | None = None
    body: str = ""
    slug: str = ""
    draft: bool = False
    has_frontmatter: bool = True
    frontmatter: dict[str, Any] = field(default_factory=dict)

    @property
    def filename(self) -> str:
        return self.path.name


class FileContentLoader:
    """Loads post files from a directory.

    Directories starting with ``_`` or ``.`` are skipped. Files starting
    with ``_`` are drafts and only included on request.

    Attributes:
        content_dir: Directory containing posts.
    """

    def __init__(self, content_dir: Path):
        self.content_dir = content_dir

    def iter_files(self, include_drafts: bool = False) -> list[Path]:
        """Iterate over all post files.

        Args:
            include_drafts: Whether to include draft files.

        Returns:
            Sorted list of paths to Markdown files.
        """
        files: list[Path] = []
        for path in self.content_dir.rglob("*"):
            if path.is_dir():
                continue
            rel = path.relative_to(self.content_dir)
            if any(part.startswith(("_", ".")) for part in rel.parts[:-1]):
                continue
            if rel.name.startswith("_") and not include_drafts:
                continue
            if is_markdown(path):
                files.append(path)
        return sorted(files)


class DefaultPostBuilder:
    """Builds Post objects from source files."""

    def build(self, path: Path) -> Post:
        """Build a Post from a source file.

        Args:
            path: Path to the source file.

        Returns:
            Post object.

        Raises:
            FrontmatterError: If the file is unreadable as UTF-8 or its
                front-matter is malformed.
        """
        try:
            raw = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise FrontmatterError(
                path, "file is not valid UTF-8", original_error=exc
            ) from exc
        frontmatter, body = extract_frontmatter(raw, path)
        return self.from_frontmatter(path, frontmatter, body, has_frontmatter(raw))

    def from_frontmatter(
        self,
        path: Path,
        frontmatter: dict[str, Any],
        body: str = "",
        present: bool = True,
    ) -> Post:
        """Coerce a parsed front-matter mapping into a Post."""
        return Post(
            path=path,
            layout=_string(frontmatter.get("layout")),
            title=_string(frontmatter.get("title")),
            description=_string(frontmatter.get("description")),
            tags=parse_tags(frontmatter.get("tags")),
            toc=frontmatter.get("toc") is True,
            date=self._resolve_date(path, frontmatter),
            body=body,
            slug=slugify(path.stem),
            draft=path.name.startswith("_") or frontmatter.get("draft") is True,
            has_frontmatter=present,
            frontmatter=frontmatter,
        )

    def _resolve_date(self, path: Path, frontmatter: dict[str, Any]) -> datetime | None:
        if "date" not in frontmatter:
            return extract_date_from_name(path.stem)
        try:
            return parse_date(frontmatter["date"])
        except ValueError:
            return None


def _string(value: Any) -> str:
    return value if isinstance(value, str) else ""


class ContentProcessor:
    """Facade for loading posts from a content directory.

    Attributes:
        content_dir: Directory containing posts.
    """

    def __init__(
        self,
        content_dir: Path,
        content_loader: FileContentLoader | None = None,
        post_builder: DefaultPostBuilder | None = None,
    ):
        self.content_dir = content_dir
        self._content_loader = content_loader or FileContentLoader(content_dir)
        self._post_builder = post_builder or DefaultPostBuilder()

    def load(self, include_drafts: bool = False) -> list[Post]:
        """Load every post, raising on the first malformed file.

        Args:
            include_drafts: Whether to include draft posts.

        Returns:
            List of Post objects.

        Raises:
            FrontmatterError: If any file fails to parse.
        """
        posts, errors = self.load_with_errors(include_drafts)
        if errors:
            raise errors[0]
        return posts

    def load_with_errors(
        self,
        include_drafts: bool = False,
        paths: Iterable[Path] | None = None,
    ) -> tuple[list[Post], list[FrontmatterError]]:
        """Load posts, collecting parse failures instead of raising.

        Args:
            include_drafts: Whether to include draft posts.
            paths: Optional files or directories to restrict loading to.

        Returns:
            Tuple of (posts, errors).
        """
        posts: list[Post] = []
        errors: list[FrontmatterError] = []
        for path in self._iter_paths(include_drafts, paths):
            try:
                posts.append(self._post_builder.build(path))
            except FrontmatterError as exc:
                errors.append(exc)
        return posts, errors

    def _iter_paths(
        self, include_drafts: bool, paths: Iterable[Path] | None
    ) -> list[Path]:
        if paths is None:
            return self._content_loader.iter_files(include_drafts)
        files: list[Path] = []
        for path in paths:
            if path.is_dir():
                files.extend(FileContentLoader(path).iter_files(include_drafts))
            else:
                files.append(path)
        return files
