#!/usr/bin/env python3
"""
contentschema configuration loader.
"""

import copy
import os
from pathlib import Path
from typing import Any, Dict, Final, List

from contentschema.core.utils import merge_dicts, load_json_file

# --- Defaults & locations --- #

DEFAULT_CONFIG: Final[Dict[str, Any]] = {
    "content_root": str(Path("./src/content").resolve()),
    "schema_paths": [],
    "builtin_collections": True,
    "workers": 1,
    "logging": {"level": "INFO"},
}

GLOBAL_CONFIG_PATH: Final[Path] = Path.home() / ".config" / "contentschema" / "config.json"

PROJECT_CONFIG_NAME: Final[str] = "contentschema.json"


# --- Public API --- #

def load_config() -> Dict[str, Any]:
    """
    Load contentschema configuration with layered precedence.

    Order:
        1. Built-in defaults
        2. Global config (~/.config/contentschema/config.json)
        3. Project config (./contentschema.json)
        4. Environment overrides:
           - CONTENTSCHEMA_CONTENT_ROOT
           - CONTENTSCHEMA_SCHEMA_PATHS (pathsep-separated list)
           - CONTENTSCHEMA_WORKERS
           - CONTENTSCHEMA_LOG_LEVEL

    Returns:
        A merged configuration dictionary.

    Raises:
        ValueError: on invalid JSON or a non-integer CONTENTSCHEMA_WORKERS
    """
    # 1) start with defaults
    config = copy.deepcopy(DEFAULT_CONFIG)

    # 2) global config
    config = merge_dicts(config, load_json_file(GLOBAL_CONFIG_PATH))

    # 3) project config
    project_path = Path.cwd() / PROJECT_CONFIG_NAME
    config = merge_dicts(config, load_json_file(project_path))

    # 4) environment overrides
    content_root_env = os.getenv("CONTENTSCHEMA_CONTENT_ROOT")
    if content_root_env:
        config["content_root"] = str(Path(content_root_env).expanduser())

    schema_paths_env = os.getenv("CONTENTSCHEMA_SCHEMA_PATHS")
    if schema_paths_env:
        config["schema_paths"] = _split_paths_env(schema_paths_env)

    workers_env = os.getenv("CONTENTSCHEMA_WORKERS")
    if workers_env:
        try:
            config["workers"] = int(workers_env)
        except ValueError:
            raise ValueError(f"CONTENTSCHEMA_WORKERS must be an integer, got {workers_env!r}") from None

    log_level_env = os.getenv("CONTENTSCHEMA_LOG_LEVEL")
    if log_level_env:
        config.setdefault("logging", {})["level"] = log_level_env

    return config


# --- Internals --- #

def _split_paths_env(value: str) -> List[str]:
    """
    Split a path-list env var on os.pathsep, trimming empties and expanding '~'.

    Example:
        "a:~/b:/tmp" on Unix  -> ["a", "/home/user/b", "/tmp"] (no resolve here)
    """
    parts = [p.strip() for p in value.split(os.pathsep)]
    return [str(Path(p).expanduser()) for p in parts if p]
