#!/usr/bin/env python3
"""
Purpose:
    Defines the CollectionSchema model: a named, ordered, immutable set of
    field descriptors describing the front matter of one content collection.
"""

from __future__ import annotations

import json
from collections import Counter
from pathlib import Path
from typing import Any, Dict, Iterable, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from contentschema.core.annotated_types import CollectionName, OptionalText
from contentschema.core.constants import DEFAULT_TEXT_ENCODING, SUPPORTED_SCHEMA_EXT
from contentschema.core.schema.field_descriptor import FieldDescriptor
from contentschema.core.schema.field_type import Optionality


# --- Model --- #

class CollectionSchema(BaseModel):
    """
    Schema for one content collection (e.g. `blog`, `portfolio`).

    Fields:
    -------
    name:
        canonical collection identifier (lowercased, validated)
    type:
        `content` for entries with a body (Markdown + front matter) or
        `data` for entries that are pure records (YAML/JSON files)
    fields:
        ordered tuple of `FieldDescriptor` entries; validation output follows
        this order

    Notes:
    ------
    Instances are frozen. Field names must be unique within a schema.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: CollectionName = Field(...)
    type: Literal["content", "data"] = Field(default="content")
    description: OptionalText = Field(default=None)
    fields: tuple[FieldDescriptor, ...] = Field(default_factory=tuple)

    @field_validator("fields", mode="before")
    @classmethod
    def _coerce_fields(cls, v: Any) -> Any:
        """Accept any iterable of descriptors or descriptor dicts."""
        if isinstance(v, (list, tuple)):
            return tuple(v)
        return v

    @model_validator(mode="after")
    def _check_no_duplicates(self) -> "CollectionSchema":
        details = self._dup_details(fd.name for fd in self.fields)
        if details:
            raise ValueError(f"Duplicate field names in collection {self.name!r}: {details}")
        return self

    @staticmethod
    def _dup_details(names: Iterable[str]) -> str | None:
        counts = Counter(names)
        dups = [(n, c) for n, c in sorted(counts.items()) if c > 1]
        if not dups:
            return None
        return ", ".join(f"{n} ×{c}" for n, c in dups)

    # --- Convenience --- #

    @property
    def field_names(self) -> list[str]:
        return [fd.name for fd in self.fields]

    @property
    def required_fields(self) -> list[str]:
        return [fd.name for fd in self.fields if fd.optionality == Optionality.REQUIRED]

    def field(self, name: str) -> FieldDescriptor:
        """Return the descriptor for `name` or raise KeyError."""
        for fd in self.fields:
            if fd.name == name:
                return fd
        raise KeyError(f"Collection {self.name!r} has no field {name!r}")

    def renamed(self, name: str) -> "CollectionSchema":
        """Return a copy of this schema bound to another collection name."""
        return CollectionSchema(name=name, type=self.type, description=self.description, fields=self.fields)

    def to_dict(self) -> Dict[str, Any]:
        """Flat authoring shape, as accepted by `from_dict`."""
        payload: Dict[str, Any] = {"name": self.name, "type": self.type}
        if self.description:
            payload["description"] = self.description
        payload["fields"] = [fd.model_dump() for fd in self.fields]
        return payload

    # --- File IO --- #

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CollectionSchema":
        return cls.model_validate(data)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "CollectionSchema":
        """
        Load a CollectionSchema from a JSON file.

        The collection name defaults to the file stem when the payload has none.

        Raises:
            FileNotFoundError: if the file does not exist
            ValueError: if the file extension is not supported
            ValidationError: if the payload fails model validation
        """
        p = Path(path)
        if not p.exists():
            raise FileNotFoundError(f"The file {str(p)!r} does not exist")
        if p.suffix.lower() not in SUPPORTED_SCHEMA_EXT:
            raise ValueError(
                f"Invalid schema file extension for {p.name!r}; expected one of {sorted(SUPPORTED_SCHEMA_EXT)}"
            )
        data = json.loads(p.read_text(encoding=DEFAULT_TEXT_ENCODING))
        if isinstance(data, dict):
            data.setdefault("name", p.stem)
        return cls.model_validate(data)
