#!/usr/bin/env python3
import json
from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest

import contentschema.core.app as app
import contentschema.core.app_context as ac
from contentschema.core.errors import RegistryFrozen


def _config(tmp_path: Path, **over):
    cfg = {
        "content_root": str(tmp_path / "content"),
        "schema_paths": [],
        "builtin_collections": True,
        "workers": 2,
        "logging": {"level": "INFO"},
    }
    cfg.update(over)
    return cfg


def _notes_schema(root: Path) -> Path:
    p = root / "notes.json"
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps({"fields": [{"name": "title"}]}), encoding="utf-8")
    return root


def test_build_context_with_builtins(tmp_path: Path):
    ctx = ac.build_context(config=_config(tmp_path))
    assert ctx.registry.names() == ["blog", "portfolio"]
    assert ctx.registry.frozen
    assert ctx.content_root == tmp_path / "content"
    assert ctx.workers == 2
    with pytest.raises(FrozenInstanceError):
        ctx.config = {}  # type: ignore[misc]
    with pytest.raises(RegistryFrozen):
        ctx.registry.register("late", {"fields": [{"name": "title"}]})


def test_build_context_loads_schema_paths_from_config(tmp_path: Path):
    roots = _notes_schema(tmp_path / "schemas")
    ctx = ac.build_context(config=_config(tmp_path, schema_paths=[str(roots)], builtin_collections=False))
    assert ctx.registry.names() == ["notes"]


def test_build_context_overrides(tmp_path: Path):
    roots = _notes_schema(tmp_path / "schemas")
    ctx = ac.build_context(config=_config(tmp_path), schema_roots=[roots], builtin=False)
    assert ctx.registry.names() == ["notes"]


def test_build_context_uses_load_config_when_missing(tmp_path: Path, monkeypatch):
    monkeypatch.setattr(ac, "load_config", lambda: _config(tmp_path, workers=0))
    ctx = ac.build_context()
    assert ctx.workers == 1
    assert "blog" in ctx.registry


def test_get_context_caches_and_reloads(tmp_path: Path, monkeypatch):
    monkeypatch.setattr(app, "_CTX", None)
    monkeypatch.setattr(ac, "load_config", lambda: _config(tmp_path))
    first = app.get_context()
    assert app.get_context() is first
    assert app.get_context(force_reload=True) is not first

    no_builtin = app.get_context(builtin_override=False)
    assert no_builtin.registry.names() == []
