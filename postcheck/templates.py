"""Scaffold rendering for Postcheck.

This module uses Jinja2 to render the files Postcheck writes: new posts and
the default configuration file. Templates live in the package's templates/
directory.

Key class:
- TemplateEngine: Renders packaged scaffold templates.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from .frontmatter import dump_frontmatter

_TEMPLATES_DIR = Path(__file__).parent / "templates"


class TemplateEngine:
    """Renders packaged scaffold templates.

    Attributes:
        env: Jinja2 environment over the templates directory.
    """

    def __init__(self, templates_dir: Path | None = None):
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir or _TEMPLATES_DIR)),
            autoescape=False,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )

    def render(self, name: str, context: dict[str, Any]) -> str:
        return self.env.get_template(name).render(**context)

    def render_post(
        self,
        title: str,
        layout: str,
        tags: list[str] | None = None,
        toc: bool = False,
        description: str = "",
        date: datetime | None = None,
    ) -> str:
        """Render a new post with a complete front-matter block.

        Args:
            title: Post title.
            layout: Layout name.
            tags: Optional list of tags.
            toc: Whether the post requests a table of contents.
            description: Short summary, may be empty.
            date: Publication date; omitted from front-matter when None.

        Returns:
            The post source text.
        """
        frontmatter: dict[str, Any] = {
            "layout": layout,
            "title": title,
            "description": description,
            "tags": list(tags or []),
            "toc": toc,
        }
        if date is not None:
            frontmatter["date"] = date.date()
        return self.render(
            "post.md.jinja",
            {"frontmatter": dump_frontmatter(frontmatter), "title": title},
        )

    def render_config(self, config: dict[str, Any]) -> str:
        return self.render("postcheck.yaml.jinja", config)
