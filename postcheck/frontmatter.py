"""Front-matter parsing for Postcheck.

A post starts with a YAML block delimited by ``---`` lines, followed by an
opaque body. This module splits the two and parses the block.

Key functions:
- extract_frontmatter: Split raw text into (mapping, body), raising
  FrontmatterError for malformed blocks.
- dump_frontmatter: Serialize a mapping back into a delimited block.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import yaml

FRONTMATTER_RE = re.compile(
    r"\A\ufeff?---[ \t]*\r?\n(?:(.*?)\r?\n)?(?:---|\.\.\.)[ \t]*(?:\r?\n|\Z)",
    re.DOTALL,
)
OPENING_RE = re.compile(r"\A\ufeff?---[ \t]*(?:\r?\n|\Z)")

_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class PostcheckError(Exception):
    """Base class for Postcheck errors."""


class FrontmatterError(PostcheckError):
    """Malformed front-matter with file context.

    Attributes:
        source_path: Path to the file that failed to parse (may be None).
        message: Human-readable error message.
        line: 1-based line number in the file, when known.
        original_error: The underlying exception, if any.
    """

    def __init__(
        self,
        source_path: Path | None,
        message: str,
        line: int | None = None,
        original_error: Exception | None = None,
    ):
        self.source_path = source_path
        self.message = message
        self.line = line
        self.original_error = original_error
        location = str(source_path) if source_path else "<string>"
        if line is not None:
            location = f"{location}:{line}"
        super().__init__(f"{location}: {message}")


class FrontmatterLoader(yaml.SafeLoader):
    """Safe loader that leaves timestamps as plain strings.

    Dates are validated separately so an impossible calendar date is
    reported as a bad value rather than a parse failure.
    """


FrontmatterLoader.yaml_implicit_resolvers = {
    key: [(tag, regexp) for tag, regexp in resolvers if tag != _TIMESTAMP_TAG]
    for key, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def has_frontmatter(text: str) -> bool:
    """Return True if the text opens with a front-matter marker."""
    return OPENING_RE.match(text) is not None


def extract_frontmatter(
    text: str, path: Path | None = None
) -> tuple[dict[str, Any], str]:
    """Extract YAML front-matter from content.

    Args:
        text: Raw file content.
        path: Source path, used for error context.

    Returns:
        Tuple of (front-matter dict, remaining body). Text without an
        opening marker yields an empty dict and the text unchanged.

    Raises:
        FrontmatterError: If the block is unterminated, is not valid YAML,
            or does not hold a mapping.
    """
    if not has_frontmatter(text):
        return {}, text
    match = FRONTMATTER_RE.match(text)
    if not match:
        raise FrontmatterError(path, "unterminated front-matter block", line=1)
    block = match.group(1) or ""
    try:
        data = yaml.load(block, Loader=FrontmatterLoader)
    except yaml.YAMLError as exc:
        mark = getattr(exc, "problem_mark", None)
        # Block content starts on the second line of the file
        line = mark.line + 2 if mark is not None else None
        problem = getattr(exc, "problem", None) or str(exc)
        raise FrontmatterError(
            path, f"invalid YAML: {problem}", line=line, original_error=exc
        ) from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontmatterError(
            path,
            f"front-matter must be a mapping, got {type(data).__name__}",
            line=2,
        )
    return data, text[match.end() :]


def dump_frontmatter(data: dict[str, Any]) -> str:
    """Serialize a mapping as a delimited front-matter block.

    Args:
        data: Front-matter values, written in insertion order.

    Returns:
        The block including both ``---`` markers and a trailing newline.
    """
    payload = yaml.safe_dump(
        data,
        allow_unicode=True,
        sort_keys=False,
        default_flow_style=False,
        width=1000,
    )
    return f"---\n{payload}---\n"
