#!/usr/bin/env python3
"""
Purpose:
    Bridges a static CollectionSchema to a runtime-generated Pydantic model
    for validating content records, with caching keyed by a schema
    fingerprint.
"""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, create_model

from contentschema.core.schema.collection_schema import CollectionSchema
from contentschema.core.schema.field_type import Optionality


# --- Compiled model --- #

@dataclass(frozen=True)
class RecordModel:
    """
    A generated model plus the name mappings needed to read it back.
    - model: Pydantic model class (extra="forbid")
    - attr_by_field: schema field name -> model attribute name
    - field_by_loc: error `loc` head (alias or attribute) -> schema field name
    """
    model: type[BaseModel]
    attr_by_field: Dict[str, str]
    field_by_loc: Dict[str, str]


class _StrictModel(BaseModel):
    """Base model with `extra="forbid"` baked in for generated models."""
    model_config = ConfigDict(extra="forbid")


# Cache of compiled models keyed by schema fingerprint
_MODEL_CACHE: Dict[str, RecordModel] = {}
_CACHE_LOCK = threading.Lock()


def build_record_model(schema: CollectionSchema) -> RecordModel:
    """
    Build (or fetch from cache) the Pydantic model that validates records
    of `schema`.

    Behavior:
        - Each schema field becomes a model attribute (`f0`, `f1`, ...) aliased
          to the schema field name, so names like `json` or `copy` cannot
          shadow BaseModel attributes.
        - Required fields have no default; optional and defaulted fields get a
          placeholder default. Callers use `model_fields_set` to tell given
          from absent, and apply schema defaults themselves.
        - Unknown keys are rejected.

    Example:
        rm = build_record_model(schema)
        inst = rm.model.model_validate(raw)  # raises ValidationError if invalid
    """
    key = _schema_fingerprint(schema)
    cached = _MODEL_CACHE.get(key)
    if cached is not None:
        return cached

    with _CACHE_LOCK:
        cached = _MODEL_CACHE.get(key)
        if cached is None:
            cached = _compile(schema)
            _MODEL_CACHE[key] = cached
    return cached


def clear_model_cache() -> None:
    """Drop every compiled model (tests and long-running watchers)."""
    with _CACHE_LOCK:
        _MODEL_CACHE.clear()


# --- Internals --- #

def _schema_fingerprint(schema: CollectionSchema) -> str:
    """
    Stable cache key over schema identity and field shapes.

    Defaults are not part of the key: they are applied outside the model.
    """
    shape = [
        [fd.name, fd.fieldtype.value, fd.optionality.value, list(fd.options or ())]
        for fd in schema.fields
    ]
    # JSON keeps option strings unambiguous whatever characters they contain
    return json.dumps([schema.name, schema.type, shape])


def _compile(schema: CollectionSchema) -> RecordModel:
    field_defs: Dict[str, tuple[Any, Any]] = {}
    attr_by_field: Dict[str, str] = {}
    field_by_loc: Dict[str, str] = {}

    for i, fd in enumerate(schema.fields):
        attr = f"f{i}"
        # required: `...`; otherwise a placeholder that is never read back
        default = ... if fd.optionality == Optionality.REQUIRED else None
        field_defs[attr] = (fd.value_type(), Field(default, alias=fd.name))
        attr_by_field[fd.name] = attr
        field_by_loc[attr] = fd.name

    # aliases win over attribute names when both could match
    field_by_loc.update({name: name for name in attr_by_field})

    model = create_model(f"{schema.name}_Record", __base__=_StrictModel, **field_defs)  # type: ignore[call-overload]
    return RecordModel(model=model, attr_by_field=attr_by_field, field_by_loc=field_by_loc)
