#!/usr/bin/env python3
from pathlib import Path
from textwrap import dedent

import pytest

from contentschema.core.builtin_collections import default_registry
from contentschema.core.constants import DEFAULT_TEXT_ENCODING


@pytest.fixture
def registry():
    """Frozen registry with the built-in `blog` and `portfolio` collections."""
    return default_registry()


@pytest.fixture
def blog_post():
    """A valid raw blog record (as parsed from front matter)."""
    return {
        "title": "Hello",
        "publishDate": "2024-01-01",
        "description": "d",
        "author": "a",
        "tags": ["x", "y"],
    }


@pytest.fixture
def write_entry(tmp_path: Path):
    """Write `<tmp>/content/<collection>/<name>` and return its path."""
    root = tmp_path / "content"

    def _write(collection: str, name: str, text: str) -> Path:
        p = root / collection / name
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(dedent(text).lstrip(), encoding=DEFAULT_TEXT_ENCODING)
        return p

    _write.root = root
    return _write
