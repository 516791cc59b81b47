"""Validation rules for Postcheck.

This module contains implementations of the PostRule and CollectionRule
protocols. Each rule checks a single property of the front-matter and
reports Issues; CompositeValidator runs them all.

Per-post rules:
- FrontmatterPresenceRule: A front-matter block exists.
- RequiredFieldsRule: Required fields are present and non-empty.
- FieldTypeRule: Known fields hold values of the expected type.
- TagsRule: Tags are strings.
- DateRule: Dates are valid calendar dates.
- LayoutRule: Layouts come from a configured allow-list.
- DatePrefixRule: Filename date prefix agrees with the front-matter date.

Collection rules:
- DuplicateRule: No two posts share a slug or title.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .content import Post
from .utils import extract_date_from_name, parse_date

ERROR = "error"
WARNING = "warning"

STRING_FIELDS = ("layout", "title", "description")
BOOLEAN_FIELDS = ("toc", "draft")
DEFAULT_REQUIRED_FIELDS = ("title", "layout")


@dataclass(frozen=True)
class Issue:
    """A single problem found in a post.

    Attributes:
        path: File the issue belongs to.
        rule: Identifier of the rule that reported it.
        message: Human-readable description.
        severity: "error" or "warning".
        line: 1-based line number, when known.
    """

    path: Path
    rule: str
    message: str
    severity: str = ERROR
    line: int | None = None

    @property
    def is_error(self) -> bool:
        return self.severity == ERROR

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": str(self.path),
            "rule": self.rule,
            "message": self.message,
            "severity": self.severity,
            "line": self.line,
        }


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, dict)):
        return not value
    return False


class FrontmatterPresenceRule:
    """Reports posts that do not open with a front-matter block."""

    rule_id = "frontmatter"

    def check(self, post: Post) -> list[Issue]:
        if post.has_frontmatter:
            return []
        return [Issue(post.path, self.rule_id, "missing front-matter block", line=1)]


class RequiredFieldsRule:
    """Reports required fields that are missing or empty.

    Type mismatches are left to FieldTypeRule so each problem is reported
    once.
    """

    rule_id = "required"

    def __init__(self, fields: Iterable[str] = DEFAULT_REQUIRED_FIELDS):
        self.fields = list(fields)

    def check(self, post: Post) -> list[Issue]:
        if not post.has_frontmatter:
            return []
        issues = []
        for name in self.fields:
            if name not in post.frontmatter:
                issues.append(
                    Issue(post.path, self.rule_id, f"missing required field '{name}'")
                )
            elif _is_empty(post.frontmatter[name]):
                issues.append(
                    Issue(post.path, self.rule_id, f"required field '{name}' is empty")
                )
        return issues


class FieldTypeRule:
    """Reports known fields holding values of the wrong type."""

    rule_id = "types"

    def check(self, post: Post) -> list[Issue]:
        issues = []
        for name in STRING_FIELDS:
            value = post.frontmatter.get(name)
            if value is not None and not isinstance(value, str):
                issues.append(
                    Issue(
                        post.path,
                        self.rule_id,
                        f"field '{name}' must be a string, got {type(value).__name__}",
                    )
                )
        for name in BOOLEAN_FIELDS:
            value = post.frontmatter.get(name)
            if value is not None and not isinstance(value, bool):
                issues.append(
                    Issue(
                        post.path,
                        self.rule_id,
                        f"field '{name}' must be true or false, got {value!r}",
                    )
                )
        return issues


class TagsRule:
    """Reports tag values that are not strings.

    Lists and YAML sets (`!!set`) are accepted; set items are checked in
    sorted order.
    """

    rule_id = "tags"

    def check(self, post: Post) -> list[Issue]:
        value = post.frontmatter.get("tags")
        if value is None or isinstance(value, str):
            return []
        if not isinstance(value, (list, set)):
            return [
                Issue(
                    post.path,
                    self.rule_id,
                    f"tags must be a list of strings, got {type(value).__name__}",
                )
            ]
        issues = []
        for index, tag in enumerate(_ordered(value)):
            if not isinstance(tag, str):
                issues.append(
                    Issue(
                        post.path,
                        self.rule_id,
                        f"tag #{index + 1} must be a string, got {tag!r}",
                    )
                )
            elif not tag.strip():
                issues.append(Issue(post.path, self.rule_id, f"tag #{index + 1} is empty"))
        return issues


def _ordered(value: list | set) -> list:
    if isinstance(value, set):
        return sorted(value, key=repr)
    return value


class DateRule:
    """Reports dates that are not valid calendar dates."""

    rule_id = "date"

    def __init__(self, required: bool = False):
        self.required = required

    def check(self, post: Post) -> list[Issue]:
        if "date" not in post.frontmatter:
            if self.required and post.has_frontmatter:
                return [Issue(post.path, self.rule_id, "missing required field 'date'")]
            return []
        value = post.frontmatter["date"]
        try:
            parse_date(value)
        except ValueError:
            return [Issue(post.path, self.rule_id, f"invalid date: {value!r}")]
        return []


class LayoutRule:
    """Reports layouts outside a configured allow-list.

    An empty allow-list accepts every layout.
    """

    rule_id = "layout"

    def __init__(self, layouts: Iterable[str] = ()):
        self.layouts = list(layouts)

    def check(self, post: Post) -> list[Issue]:
        if not self.layouts or not post.layout or post.layout in self.layouts:
            return []
        allowed = ", ".join(self.layouts)
        return [
            Issue(
                post.path,
                self.rule_id,
                f"unknown layout '{post.layout}' (expected one of: {allowed})",
            )
        ]


class DatePrefixRule:
    """Warns when a filename date prefix disagrees with the front-matter date."""

    rule_id = "date-prefix"

    def check(self, post: Post) -> list[Issue]:
        prefix = extract_date_from_name(post.path.stem)
        if prefix is None or post.date is None or "date" not in post.frontmatter:
            return []
        if prefix.date() == post.date.date():
            return []
        return [
            Issue(
                post.path,
                self.rule_id,
                f"filename date {prefix:%Y-%m-%d} does not match "
                f"front-matter date {post.date:%Y-%m-%d}",
                severity=WARNING,
            )
        ]


class DuplicateRule:
    """Warns about posts sharing a slug or a title.

    Each post in a duplicate group gets one warning naming the others.
    """

    rule_id = "duplicate"

    def __init__(self, root: Path | None = None):
        self.root = root

    def _display(self, path: Path) -> str:
        if self.root is not None:
            try:
                return path.resolve().relative_to(self.root.resolve()).as_posix()
            except ValueError:
                pass
        return path.as_posix()

    def check(self, posts: Sequence[Post]) -> list[Issue]:
        by_slug: dict[str, list[Post]] = {}
        by_title: dict[str, list[Post]] = {}
        for post in posts:
            by_slug.setdefault(post.slug, []).append(post)
            if post.title.strip():
                by_title.setdefault(post.title.strip().casefold(), []).append(post)

        reasons: dict[Path, dict[Path, list[str]]] = {}
        for label, groups in (("slug", by_slug), ("title", by_title)):
            for group in groups.values():
                if len(group) < 2:
                    continue
                for post in group:
                    for other in group:
                        if other is post:
                            continue
                        reasons.setdefault(post.path, {}).setdefault(
                            other.path, []
                        ).append(label)

        issues = []
        for path, others in reasons.items():
            for other_path, labels in others.items():
                issues.append(
                    Issue(
                        path,
                        self.rule_id,
                        f"duplicates {self._display(other_path)} (same {' and '.join(labels)})",
                        severity=WARNING,
                    )
                )
        return issues


class CompositeValidator:
    """Runs every post rule on each post, then every collection rule.

    Attributes:
        rules: Per-post rules.
        collection_rules: Rules that see all posts at once.
    """

    def __init__(
        self,
        rules: list | None = None,
        collection_rules: list | None = None,
    ):
        if rules is None:
            rules = [
                FrontmatterPresenceRule(),
                RequiredFieldsRule(),
                FieldTypeRule(),
                TagsRule(),
                DateRule(),
                DatePrefixRule(),
            ]
        if collection_rules is None:
            collection_rules = [DuplicateRule()]
        self.rules = list(rules)
        self.collection_rules = list(collection_rules)

    @classmethod
    def from_config(
        cls, config: dict[str, Any], root: Path | None = None
    ) -> CompositeValidator:
        """Build the default rule set tuned by configuration values.

        Args:
            config: Loaded configuration.
            root: Directory that duplicate warnings name other files relative to.
        """
        required = config.get("required_fields")
        if required is None:
            required = DEFAULT_REQUIRED_FIELDS
        return cls(
            rules=[
                FrontmatterPresenceRule(),
                RequiredFieldsRule(required),
                FieldTypeRule(),
                TagsRule(),
                DateRule(required=bool(config.get("date_required"))),
                LayoutRule(config.get("layouts") or ()),
                DatePrefixRule(),
            ],
            collection_rules=[DuplicateRule(root)],
        )

    def add_rule(self, rule) -> None:
        """Add a per-post rule."""
        self.rules.append(rule)

    def add_collection_rule(self, rule) -> None:
        """Add a collection rule."""
        self.collection_rules.append(rule)

    def validate(self, posts: Sequence[Post]) -> list[Issue]:
        """Validate posts and return issues ordered by path then rule."""
        issues: list[Issue] = []
        for post in posts:
            for rule in self.rules:
                issues.extend(rule.check(post))
        for rule in self.collection_rules:
            issues.extend(rule.check(posts))
        return sort_issues(issues)


def sort_issues(issues: Iterable[Issue]) -> list[Issue]:
    return sorted(issues, key=lambda i: (str(i.path), i.rule, i.message))
