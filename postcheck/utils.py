"""Utility functions for Postcheck.

This module contains small helpers used throughout the Postcheck codebase.
These include file name handling, slug derivation and coercion of loosely
typed front-matter values.

Key functions:
    slugify: Convert filenames to URL slugs.
    extract_date_from_name: Extract date from filename prefix.
    parse_date: Parse a front-matter date value.
    parse_tags: Normalize a front-matter tags value.
    is_markdown: Check if a path is a Markdown file.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import date, datetime
from pathlib import Path
from typing import Any

MARKDOWN_SUFFIXES = (".md", ".markdown")

DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M:%S %z",
    "%Y-%m-%d %H:%M:%S%z",
    "%Y-%m-%dT%H:%M",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%S%z",
)


def strip_date_prefix(name: str) -> str:
    """Remove a leading YYYY-MM-DD- prefix from a filename stem.

    Args:
        name: Filename stem.

    Returns:
        The stem without its date prefix.
    """
    parts = name.split("-")
    if len(parts) >= 4 and all(p.isdigit() for p in parts[:3]):
        return "-".join(parts[3:])
    return name


def slugify(name: str) -> str:
    """Convert filename (without extension) to slug, dropping date prefix.

    Args:
        name: Filename stem.

    Returns:
        URL-friendly slug.
    """
    cleaned = strip_date_prefix(name)
    cleaned = re.sub(r"[\W_]+", "-", cleaned)
    cleaned = cleaned.strip("-").lower()
    return cleaned or "index"


def extract_date_from_name(name: str) -> datetime | None:
    """Extract a date from a filename with YYYY-MM-DD prefix.

    Args:
        name: Filename stem (without extension).

    Returns:
        datetime object if a valid date prefix is found, None otherwise.
    """
    parts = name.split("-")
    if len(parts) >= 3 and all(p.isdigit() for p in parts[:3]):
        try:
            return datetime(int(parts[0]), int(parts[1]), int(parts[2]))
        except ValueError:
            return None
    return None


def parse_date(value: Any) -> datetime:
    """Parse a front-matter date value into a datetime.

    Accepts date and datetime objects as well as ISO-like strings, including
    the ``2024-01-15 10:00:00 +0000`` form many generators write.

    Args:
        value: Raw front-matter value.

    Returns:
        Parsed datetime.

    Raises:
        ValueError: If the value is not a valid calendar date.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        raise ValueError(f"expected a date, got {type(value).__name__}")
    text = value.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        raise ValueError(f"invalid date: {value!r}") from None


def parse_tags(value: Any) -> list[str]:
    """Normalize a front-matter tags value into a list of unique strings.

    Strings are split on commas when they contain one, otherwise on
    whitespace. Non-string list items are dropped.

    Examples:
        >>> parse_tags("python, testing")
        ['python', 'testing']

        >>> parse_tags(["db", "db", 3])
        ['db']
    """
    if value is None:
        return []
    if isinstance(value, str):
        items: Iterable[Any] = value.split(",") if "," in value else value.split()
    elif isinstance(value, (list, tuple, set)):
        items = value
    else:
        return []
    return unique(
        item.strip() for item in items if isinstance(item, str) and item.strip()
    )


def unique(items: Iterable[str]) -> list[str]:
    """Remove duplicates from an iterable, keeping first-seen order."""
    seen: list[str] = []
    for item in items:
        if item not in seen:
            seen.append(item)
    return seen


def is_markdown(path: Path) -> bool:
    """Check if a path is a Markdown file.

    Args:
        path: Path to check.

    Returns:
        True if the file has a .md or .markdown extension (case-insensitive).
    """
    return path.suffix.lower() in MARKDOWN_SUFFIXES

