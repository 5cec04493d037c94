#!/usr/bin/env python3
"""
Purpose:
    Wires together the contentschema application context by merging
    configuration, initializing the collection registry, and freezing it.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from contentschema.core.builtin_collections import register_builtin_collections
from contentschema.core.config import load_config
from contentschema.core.registry import CollectionRegistry

logger = logging.getLogger(__name__)


# --- Data model --- #

@dataclass(frozen=True)
class AppContext:
    """Immutable container for configuration and the collection registry."""
    config: Dict[str, Any]
    registry: CollectionRegistry

    @property
    def content_root(self) -> Path:
        return Path(self.config.get("content_root", "."))

    @property
    def workers(self) -> int:
        return max(1, int(self.config.get("workers", 1)))


# --- Factory --- #

def build_context(
    *,
    config: Optional[Dict[str, Any]] = None,
    schema_roots: Optional[Iterable[Path]] = None,
    builtin: Optional[bool] = None,
) -> AppContext:
    """
    Build an `AppContext`.

    Args:
        config:
            Pre-merged configuration. If omitted, `load_config()` is used.
        schema_roots:
            Optional override for schema search paths. Defaults to `config['schema_paths']`.
        builtin:
            Register the built-in `blog`/`portfolio` collections. Defaults to
            `config['builtin_collections']`.

    Returns:
        AppContext: config plus a populated, frozen registry.
    """
    cfg = config or load_config()

    registry = CollectionRegistry()
    use_builtin = cfg.get("builtin_collections", True) if builtin is None else builtin
    if use_builtin:
        register_builtin_collections(registry)

    schema_paths = [Path(p) for p in (schema_roots or cfg.get("schema_paths", []))]
    if schema_paths:
        registry.load_files(schema_paths)
    registry.freeze()

    logger.debug("Collections registered: %s", ", ".join(registry.names()) or "<none>")
    return AppContext(config=cfg, registry=registry)
