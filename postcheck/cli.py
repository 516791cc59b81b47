"""Command-line interface for Postcheck.

This module defines the CLI commands using Click framework.

Commands:
- check: Validate post front-matter.
- list: List posts, newest first.
- tags: Show tag usage counts.
- new: Create a new post interactively.
- init: Write a default postcheck.yaml.
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

import click
import questionary

from . import __version__
from .check import (
    CONFIG_FILENAME,
    DEFAULT_CONFIG,
    CheckResult,
    ConfigError,
    check_content,
    load_config,
    resolve_content_dir,
)
from .collections import PostCollection, build_tags_index
from .content import ContentProcessor, FileContentLoader, Post
from .templates import TemplateEngine
from .utils import slugify

_SEVERITY_COLORS = {"error": "red", "warning": "yellow"}


@click.group()
@click.version_option(version=__version__, prog_name="postcheck")
def cli():
    """Postcheck front-matter checker."""


@cli.command()
@click.argument(
    "paths", nargs=-1, type=click.Path(exists=True, path_type=Path)
)
@click.option("--drafts/--no-drafts", default=None, help="Include draft posts")
@click.option("--strict/--no-strict", default=None, help="Fail on warnings too")
@click.option("--json", "as_json", is_flag=True, help="Print a JSON report")
@click.option("--watch", is_flag=True, help="Re-check whenever posts change")
def check(
    paths: tuple[Path, ...],
    drafts: bool | None,
    strict: bool | None,
    as_json: bool,
    watch: bool,
):
    """Validate the front-matter of every post."""
    project_root = Path.cwd()

    def run() -> CheckResult:
        result = check_content(
            project_root,
            include_drafts=drafts,
            strict=strict,
            paths=list(paths) or None,
        )
        if as_json:
            click.echo(json.dumps(result.to_dict(), indent=2))
        else:
            _print_report(result, project_root)
        return result

    try:
        result = run()
    except (ConfigError, FileNotFoundError) as exc:
        raise click.ClickException(str(exc)) from None
    if watch:
        from .watcher import ContentWatcher

        click.echo("Watching for changes; press Ctrl-C to stop.", err=True)
        ContentWatcher(project_root, on_change=run, on_error=_echo_error).start()
        return
    if not result.ok:
        raise SystemExit(1)


@cli.command(name="list")
@click.option("--drafts", is_flag=True, help="Include draft posts")
@click.option("--tag", help="Only show posts with this tag")
def list_posts(drafts: bool, tag: str | None):
    """List posts, newest first."""
    project_root = Path.cwd()
    posts = PostCollection(_load_posts(project_root, drafts))
    if tag:
        posts = posts.with_tag(tag)
    for post in posts.sorted():
        date = post.date.strftime("%Y-%m-%d") if post.date else "----------"
        title = post.title or click.style("(untitled)", dim=True)
        click.echo(f"{date}  {_display(post.path, project_root)}  {title}")


@cli.command()
@click.option("--drafts", is_flag=True, help="Include draft posts")
def tags(drafts: bool):
    """Show how many posts use each tag."""
    project_root = Path.cwd()
    index = build_tags_index(_load_posts(project_root, drafts))
    if not index:
        click.echo("No tags found.")
        return
    for name, count in index.counts():
        click.echo(f"{count:>4}  {name}")


@cli.command()
@click.option("--title", help="Post title")
@click.option("--layout", help="Layout name")
@click.option("--description", default="", help="Short summary")
@click.option("--tag", "tag_names", multiple=True, help="Tag (repeatable)")
@click.option("--toc/--no-toc", default=False, help="Request a table of contents")
@click.option(
    "--date/--no-date",
    "with_date",
    default=True,
    help="Prefix the filename with today's date and set the date field",
)
def new(
    title: str | None,
    layout: str | None,
    description: str,
    tag_names: tuple[str, ...],
    toc: bool,
    with_date: bool,
):
    """Create a new post with a complete front-matter block."""
    project_root = Path.cwd()
    config = _load_config(project_root)
    content_dir = resolve_content_dir(project_root, config)

    if title is None:
        title = questionary.text(
            "Title:",
            validate=lambda x: len(x.strip()) > 0 or "Title cannot be empty",
            style=_questionary_style(),
        ).ask()
        if title is None:
            raise click.Abort()
    title = title.strip()
    if not title:
        raise click.ClickException("Title cannot be empty")

    if layout is None:
        layouts = list(config.get("layouts") or [])
        if layouts:
            layout = questionary.select(
                "Layout:", choices=layouts, style=_questionary_style()
            ).ask()
        else:
            layout = questionary.text(
                "Layout:", default="post", style=_questionary_style()
            ).ask()
        if layout is None:
            raise click.Abort()

    slug = slugify(title)
    now = datetime.now()
    filename = f"{now:%Y-%m-%d}-{slug}.md" if with_date else f"{slug}.md"
    target_path = content_dir / filename

    if target_path.exists():
        raise click.ClickException(
            f"File already exists: {_display(target_path, project_root)}"
        )
    if content_dir.exists():
        for existing in FileContentLoader(content_dir).iter_files(include_drafts=True):
            if slugify(existing.stem) == slug:
                raise click.ClickException(
                    f"A post with slug '{slug}' already exists: "
                    f"{_display(existing, project_root)}"
                )

    text = TemplateEngine().render_post(
        title=title,
        layout=layout,
        tags=list(tag_names),
        toc=toc,
        description=description,
        date=now if with_date else None,
    )
    content_dir.mkdir(parents=True, exist_ok=True)
    target_path.write_text(text, encoding="utf-8")
    click.echo(f"Created {_display(target_path, project_root)}")


@cli.command()
def init():
    """Write a default postcheck.yaml and create the content directory."""
    project_root = Path.cwd()
    config_path = project_root / CONFIG_FILENAME
    if config_path.exists():
        raise click.ClickException(f"Refusing to overwrite existing {CONFIG_FILENAME}")
    config_path.write_text(TemplateEngine().render_config(DEFAULT_CONFIG), encoding="utf-8")
    content_dir = resolve_content_dir(project_root, DEFAULT_CONFIG)
    content_dir.mkdir(parents=True, exist_ok=True)
    click.echo(f"Wrote {CONFIG_FILENAME}; posts go in {_display(content_dir, project_root)}/")


def _load_posts(project_root: Path, include_drafts: bool) -> list[Post]:
    """Load posts for read-only commands, reporting unparseable files."""
    content_dir = resolve_content_dir(project_root, _load_config(project_root))
    if not content_dir.exists():
        raise click.ClickException(f"Expected content directory at {content_dir}")
    posts, errors = ContentProcessor(content_dir).load_with_errors(include_drafts)
    for error in errors:
        click.echo(
            click.style(f"Skipped {error.source_path}: {error.message}", fg="yellow"),
            err=True,
        )
    return posts


def _load_config(project_root: Path) -> dict:
    try:
        return load_config(project_root)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from None


def _echo_error(exc: Exception) -> None:
    click.echo(click.style(f"Check failed: {exc}", fg="red"), err=True)


def _print_report(result: CheckResult, project_root: Path) -> None:
    for issue in result.issues:
        location = _display(issue.path, project_root)
        if issue.line is not None:
            location = f"{location}:{issue.line}"
        severity = click.style(issue.severity, fg=_SEVERITY_COLORS[issue.severity], bold=True)
        click.echo(f"{location}: {severity} [{issue.rule}] {issue.message}")

    summary = (
        f"Checked {result.files} files: "
        f"{len(result.errors)} errors, {len(result.warnings)} warnings"
    )
    click.echo(click.style(summary, fg="green" if result.ok else "red"), err=not result.ok)


def _display(path: Path, project_root: Path) -> str:
    try:
        return path.resolve().relative_to(project_root.resolve()).as_posix()
    except ValueError:
        return str(path)


def _questionary_style():
    """Return consistent questionary style."""
    return questionary.Style(
        [
            ("qmark", "fg:cyan bold"),
            ("question", "bold"),
            ("answer", "fg:cyan"),
            ("pointer", "fg:cyan bold"),
            ("highlighted", "fg:cyan bold"),
            ("selected", "fg:cyan"),
        ]
    )


def main():
    """Entry point for the CLI application."""
    cli()
