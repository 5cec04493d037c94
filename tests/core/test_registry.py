#!/usr/bin/env python3
import json
from datetime import date
from pathlib import Path

import pytest
from pydantic import ValidationError

from contentschema.core.builtin_collections import BLOG_SCHEMA, PORTFOLIO_SCHEMA
from contentschema.core.constants import DEFAULT_TEXT_ENCODING
from contentschema.core.errors import (
    DuplicateCollection,
    ErrorKind,
    RecordValidationError,
    RegistryFrozen,
    UnknownCollection,
)
from contentschema.core.registry import CollectionRegistry


def _write_schema(path: Path, payload: dict) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload), encoding=DEFAULT_TEXT_ENCODING)
    return path


# --- register / resolve --- #

def test_register_and_resolve():
    reg = CollectionRegistry()
    reg.register("blog", BLOG_SCHEMA)
    assert reg.resolve("blog") is BLOG_SCHEMA
    assert reg.resolve("BLOG") is BLOG_SCHEMA  # case-insensitive
    assert "blog" in reg and "portfolio" not in reg
    assert len(reg) == 1


def test_duplicate_registration_fails():
    reg = CollectionRegistry({"blog": BLOG_SCHEMA})
    with pytest.raises(DuplicateCollection, match="'blog' is already registered"):
        reg.register("Blog", PORTFOLIO_SCHEMA)
    # still the original
    assert reg.resolve("blog") is BLOG_SCHEMA


def test_duplicate_is_a_value_error():
    reg = CollectionRegistry({"blog": BLOG_SCHEMA})
    with pytest.raises(ValueError):
        reg.register("blog", BLOG_SCHEMA)


def test_unknown_collection():
    reg = CollectionRegistry({"blog": BLOG_SCHEMA})
    with pytest.raises(UnknownCollection, match="'news' not found; known collections: blog"):
        reg.resolve("news")
    with pytest.raises(LookupError):
        reg.validate("news", {})
    assert reg.get("news") is None


def test_register_rebinds_schema_name():
    reg = CollectionRegistry()
    schema = reg.register("posts", BLOG_SCHEMA)
    assert schema.name == "posts"
    assert schema.field_names == BLOG_SCHEMA.field_names
    assert BLOG_SCHEMA.name == "blog"


def test_register_from_dict():
    reg = CollectionRegistry()
    reg.register("notes", {"fields": [{"name": "title"}, {"name": "pinned", "type": "boolean", "default": False}]})
    assert reg.validate("notes", {"title": "x"}) == {"title": "x", "pinned": False}


def test_register_invalid_dict_schema():
    reg = CollectionRegistry()
    with pytest.raises(ValidationError):
        reg.register("notes", {"fields": [{"name": "x", "type": "enum"}]})
    assert "notes" not in reg


def test_register_invalid_name():
    with pytest.raises(ValueError, match="Invalid name"):
        CollectionRegistry().register("my blog", BLOG_SCHEMA)


def test_freeze_blocks_registration():
    reg = CollectionRegistry({"blog": BLOG_SCHEMA})
    reg.freeze()
    assert reg.frozen
    with pytest.raises(RegistryFrozen):
        reg.register("portfolio", PORTFOLIO_SCHEMA)
    # reads still work
    assert reg.names() == ["blog"]


def test_names_and_iteration_are_sorted():
    reg = CollectionRegistry({"portfolio": PORTFOLIO_SCHEMA, "blog": BLOG_SCHEMA})
    assert reg.names() == ["blog", "portfolio"]
    assert [s.name for s in reg] == ["blog", "portfolio"]


# --- validate / check --- #

def test_validate_delegates(blog_post):
    reg = CollectionRegistry({"blog": BLOG_SCHEMA})
    out = reg.validate("blog", blog_post)
    assert out["publishDate"] == date(2024, 1, 1)


def test_validate_error_carries_source(blog_post):
    reg = CollectionRegistry({"blog": BLOG_SCHEMA})
    blog_post["language"] = "fr"
    with pytest.raises(RecordValidationError) as ei:
        reg.validate("blog", blog_post, source=Path("content/blog/a.md"))
    diag = ei.value.to_diagnostic()
    assert diag.source_file == str(Path("content/blog/a.md"))
    assert diag.collection == "blog"
    assert diag.errors[0].kind is ErrorKind.INVALID_ENUM_VALUE


def test_check_is_non_raising(blog_post):
    reg = CollectionRegistry({"blog": BLOG_SCHEMA})
    del blog_post["tags"]
    result = reg.check("blog", blog_post)
    assert [e.kind for e in result] == [ErrorKind.MISSING_REQUIRED_FIELD]


# --- load_files --- #

def test_load_files_registers_schemas(tmp_path: Path):
    root = tmp_path / "schemas"
    _write_schema(root / "notes.json", {"fields": [{"name": "title"}]})
    _write_schema(root / "nested" / "events.json", {"name": "events", "fields": [{"name": "when", "type": "date"}]})
    (root / "readme.txt").write_text("ignored", encoding=DEFAULT_TEXT_ENCODING)

    reg = CollectionRegistry()
    loaded = reg.load_files([root])

    assert sorted(s.name for s in loaded) == ["events", "notes"]
    assert reg.names() == ["events", "notes"]
    entry = next(e for e in reg.entries() if e.name == "notes")
    assert entry.valid and entry.path == (root / "notes.json").resolve()


def test_load_files_records_invalid(tmp_path: Path):
    root = tmp_path / "schemas"
    _write_schema(root / "ok.json", {"fields": [{"name": "title"}]})
    _write_schema(root / "bad.json", {"fields": [{"name": "x", "type": "enum"}]})
    (root / "broken.json").write_text("{not json", encoding=DEFAULT_TEXT_ENCODING)

    reg = CollectionRegistry()
    reg.load_files([root])

    assert reg.names() == ["ok"]
    invalid = {e.name: e.reason for e in reg.invalid_entries()}
    assert set(invalid) == {"bad", "broken"}
    assert "spec" in invalid["bad"]


def test_load_files_strict_raises(tmp_path: Path):
    root = tmp_path / "schemas"
    _write_schema(root / "bad.json", {"fields": [{"name": "x", "type": "nope"}]})
    with pytest.raises(ValidationError):
        CollectionRegistry().load_files([root], strict=True)


def test_load_files_duplicate_with_builtin(tmp_path: Path):
    root = tmp_path / "schemas"
    _write_schema(root / "blog.json", {"fields": [{"name": "title"}]})
    reg = CollectionRegistry({"blog": BLOG_SCHEMA})
    with pytest.raises(DuplicateCollection):
        reg.load_files([root])


def test_load_files_ignores_missing_roots(tmp_path: Path):
    reg = CollectionRegistry()
    assert reg.load_files([tmp_path / "nope"]) == []
    assert len(reg) == 0
