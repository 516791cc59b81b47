"""Content checking for Postcheck.

This module ties loading and validation together. It loads configuration,
reads every post, turns parse failures into issues and runs the validators.

Key functions:
- check_content: Main function to check a project's posts.
- load_config: Loads configuration from postcheck.yaml.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .content import ContentProcessor, Post
from .frontmatter import FrontmatterError, PostcheckError
from .validators import CompositeValidator, Issue, sort_issues

CONFIG_FILENAME = "postcheck.yaml"

DEFAULT_CONFIG = {
    "content_dir": "posts",
    "required_fields": ["title", "layout"],
    "layouts": [],
    "date_required": False,
    "include_drafts": False,
    "strict": False,
}


class ConfigError(PostcheckError):
    """Unreadable postcheck.yaml.

    Attributes:
        source_path: Path to the configuration file.
        message: Human-readable error message.
        line: 1-based line number, when known.
    """

    def __init__(self, source_path: Path, message: str, line: int | None = None):
        self.source_path = source_path
        self.message = message
        self.line = line
        location = str(source_path) if line is None else f"{source_path}:{line}"
        super().__init__(f"{location}: {message}")


@dataclass
class CheckResult:
    """Result of a check run.

    Attributes:
        posts: Posts that parsed successfully.
        issues: Every issue found, ordered by path then rule.
        content_dir: Directory that was checked.
        strict: Whether warnings fail the check.
    """

    posts: list[Post]
    issues: list[Issue]
    content_dir: Path
    strict: bool = False
    files: int = 0

    @property
    def errors(self) -> list[Issue]:
        return [i for i in self.issues if i.is_error]

    @property
    def warnings(self) -> list[Issue]:
        return [i for i in self.issues if not i.is_error]

    @property
    def ok(self) -> bool:
        if self.strict:
            return not self.issues
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "content_dir": str(self.content_dir),
            "files": self.files,
            "posts": len(self.posts),
            "errors": len(self.errors),
            "warnings": len(self.warnings),
            "ok": self.ok,
            "issues": [issue.to_dict() for issue in self.issues],
        }


def load_config(project_root: Path) -> dict[str, Any]:
    """Load configuration from postcheck.yaml.

    Args:
        project_root: Root directory of the project.

    Returns:
        Dictionary containing configuration values, with defaults applied.

    Raises:
        ConfigError: If postcheck.yaml is not valid YAML.
    """
    config_path = project_root / CONFIG_FILENAME
    config = {k: list(v) if isinstance(v, list) else v for k, v in DEFAULT_CONFIG.items()}
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            try:
                loaded = yaml.safe_load(f) or {}
            except yaml.YAMLError as exc:
                mark = getattr(exc, "problem_mark", None)
                line = mark.line + 1 if mark is not None else None
                problem = getattr(exc, "problem", None) or "invalid YAML"
                raise ConfigError(config_path, problem, line=line) from exc
            if isinstance(loaded, dict):
                config.update(loaded)
    return config


def resolve_content_dir(project_root: Path, config: dict[str, Any]) -> Path:
    return project_root / str(config.get("content_dir") or DEFAULT_CONFIG["content_dir"])


def check_content(
    project_root: Path,
    include_drafts: bool | None = None,
    strict: bool | None = None,
    config: dict[str, Any] | None = None,
    paths: Iterable[Path] | None = None,
) -> CheckResult:
    """Check every post in a project.

    Args:
        project_root: Root directory of the project.
        include_drafts: Whether to check drafts; defaults to config.
        strict: Whether warnings fail the check; defaults to config.
        config: Pre-loaded configuration, loaded from disk when omitted.
        paths: Optional files or directories to check instead of the
            whole content directory.

    Returns:
        CheckResult with parsed posts and all issues.

    Raises:
        FileNotFoundError: If the content directory does not exist.
        ConfigError: If postcheck.yaml cannot be parsed.
    """
    if config is None:
        config = load_config(project_root)
    if include_drafts is None:
        include_drafts = bool(config.get("include_drafts"))
    if strict is None:
        strict = bool(config.get("strict"))

    content_dir = resolve_content_dir(project_root, config)
    if paths is None and not content_dir.exists():
        raise FileNotFoundError(f"Expected content directory at {content_dir}")

    processor = ContentProcessor(content_dir)
    posts, errors = processor.load_with_errors(include_drafts, paths=paths)
    validator = CompositeValidator.from_config(config, root=project_root)
    issues = validator.validate(posts)
    issues.extend(_error_to_issue(error) for error in errors)
    return CheckResult(
        posts=posts,
        issues=sort_issues(issues),
        content_dir=content_dir,
        strict=strict,
        files=len(posts) + len(errors),
    )


def _error_to_issue(error: FrontmatterError) -> Issue:
    return Issue(
        path=error.source_path,
        rule="frontmatter",
        message=error.message,
        line=error.line,
    )
