"""Postcheck content checker.

This package loads Markdown posts, parses their YAML front-matter into Post
records and validates them before an external static site generator renders
them. Bodies are never interpreted.

The main entry point is the CLI module, which provides commands for checking
content, listing posts and tags, and scaffolding new posts.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
