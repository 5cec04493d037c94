#!/usr/bin/env python3
import json
import os
from pathlib import Path
import pytest

import contentschema.core.config as cfg

ENV_VARS = (
    "CONTENTSCHEMA_CONTENT_ROOT",
    "CONTENTSCHEMA_SCHEMA_PATHS",
    "CONTENTSCHEMA_WORKERS",
    "CONTENTSCHEMA_LOG_LEVEL",
)


# --- Helpers --- #

def _write_json(path: Path, payload: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload), encoding="utf-8")


@pytest.fixture
def clean_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(cfg, "GLOBAL_CONFIG_PATH", tmp_path / "no/such/config.json", raising=False)
    monkeypatch.chdir(tmp_path)
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


# --- load_config: defaults only --- #

def test_load_config_defaults_only(clean_env):
    result = cfg.load_config()
    assert result.keys() == cfg.DEFAULT_CONFIG.keys()
    assert result["schema_paths"] == []
    assert result["builtin_collections"] is True
    assert result["workers"] == 1
    assert result["logging"]["level"] == "INFO"


# --- Precedence: global < project < env --- #

def test_load_config_global_and_project_precedence(tmp_path: Path, clean_env):
    global_cfg = tmp_path / ".config/contentschema/config.json"
    project_dir = tmp_path / "proj"

    _write_json(global_cfg, {
        "logging": {"level": "DEBUG"},
        "schema_paths": ["/global/schemas"],
        "extra": 1,
    })
    _write_json(project_dir / "contentschema.json", {
        "logging": {"level": "WARNING"},
        "schema_paths": ["/project/schemas"],
        "content_root": "site/content",
    })

    clean_env.setattr(cfg, "GLOBAL_CONFIG_PATH", global_cfg, raising=False)
    clean_env.chdir(project_dir)

    result = cfg.load_config()
    assert result["logging"]["level"] == "WARNING"
    assert result["schema_paths"] == ["/project/schemas"]
    assert result["content_root"] == "site/content"
    assert result["extra"] == 1


def test_load_config_invalid_project_json(tmp_path: Path, clean_env):
    (tmp_path / "contentschema.json").write_text("{nope", encoding="utf-8")
    with pytest.raises(ValueError):
        cfg.load_config()


# --- Env overrides --- #

def test_load_config_env_overrides(clean_env):
    sep = os.pathsep
    clean_env.setenv("CONTENTSCHEMA_SCHEMA_PATHS", f"a{sep}~/b{sep}/tmp{sep}")
    clean_env.setenv("CONTENTSCHEMA_LOG_LEVEL", "ERROR")
    clean_env.setenv("CONTENTSCHEMA_WORKERS", "4")
    clean_env.setenv("CONTENTSCHEMA_CONTENT_ROOT", "~/site/content")

    result = cfg.load_config()

    paths = result["schema_paths"]
    assert paths[0] == "a"
    assert paths[1] != "~/b" and "b" in Path(paths[1]).parts
    assert Path(paths[2]).as_posix() == "/tmp"
    assert result["logging"]["level"] == "ERROR"
    assert result["workers"] == 4
    assert not result["content_root"].startswith("~")


def test_load_config_env_workers_must_be_int(clean_env):
    clean_env.setenv("CONTENTSCHEMA_WORKERS", "many")
    with pytest.raises(ValueError, match="CONTENTSCHEMA_WORKERS"):
        cfg.load_config()


# --- _split_paths_env internals --- #

@pytest.mark.parametrize("value,expected", [
    ("a", ["a"]),
    (f"a{os.pathsep}b", ["a", "b"]),
    (f"{os.pathsep}a{os.pathsep}", ["a"]),
    ("~/x", [str(Path("~/x").expanduser())]),
    ("  a  ", ["a"]),
])
def test_split_paths_env(value, expected):
    assert cfg._split_paths_env(value) == expected
