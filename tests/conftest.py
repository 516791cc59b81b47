from pathlib import Path

import pytest

GOOD_POST = """---
layout: post
title: Testing async database code
description: Fixtures, event loops and transactions
tags: [python, testing, asyncio]
toc: true
date: 2024-01-15
---
Body text is never interpreted.
"""


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def project(tmp_path: Path) -> Path:
    posts = tmp_path / "posts"
    write(posts / "2024-01-15-async-db-testing.md", GOOD_POST)
    write(
        posts / "notes" / "pytest-fixtures.md",
        "---\nlayout: post\ntitle: Pytest fixtures\ntags: python\n---\nbody\n",
    )
    write(posts / "_unfinished.md", "---\nlayout: post\ntitle: Draft\n---\n")
    write(posts / "_layouts" / "post.md", "---\ntitle: not content\n---\n")
    write(posts / "readme.txt", "ignored")
    return tmp_path
