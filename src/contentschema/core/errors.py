#!/usr/bin/env python3
"""
Purpose:
    Error types for contentschema: registry misuse (startup-fatal) and
    per-record validation failures, plus the structured diagnostic handed to
    the build pipeline.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union


class ErrorKind(str, Enum):
    """Kinds of field-level problems reported for a content record."""

    MISSING_REQUIRED_FIELD = "MissingRequiredField"
    TYPE_MISMATCH = "TypeMismatch"
    INVALID_ENUM_VALUE = "InvalidEnumValue"
    UNEXPECTED_FIELD = "UnexpectedField"
    # reported by the content loader, not by schema validation
    UNKNOWN_COLLECTION = "UnknownCollection"
    MALFORMED_ENTRY = "MalformedEntry"


@dataclass(frozen=True)
class FieldError:
    """
    One problem with one field of a record.
    - field: field name (or `<root>` when the record itself is malformed)
    - kind: the ErrorKind
    - message: human-readable explanation
    - allowed: the option set, for InvalidEnumValue
    """
    field: str
    kind: ErrorKind
    message: str
    allowed: Optional[tuple[str, ...]] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "field": self.field,
            "errorKind": self.kind.value,
            "message": self.message,
        }
        if self.allowed is not None:
            payload["allowed"] = list(self.allowed)
        return payload

    def __str__(self) -> str:
        return f"{self.field}: [{self.kind.value}] {self.message}"


@dataclass(frozen=True)
class Diagnostic:
    """Everything wrong with one source file, in the shape the pipeline reports."""
    source_file: str
    collection: str
    errors: List[FieldError] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sourceFile": self.source_file,
            "collection": self.collection,
            "errors": [e.to_dict() for e in self.errors],
        }


# --- Exceptions --- #

class ContentSchemaError(Exception):
    """Base class for all contentschema errors."""


class DuplicateCollection(ContentSchemaError, ValueError):
    """A collection name was registered twice."""

    def __init__(self, name: str):
        super().__init__(f"Collection {name!r} is already registered")
        self.name = name


class UnknownCollection(ContentSchemaError, LookupError):
    """A collection name was never registered."""

    def __init__(self, name: str, known: Sequence[str] = ()):
        hint = f"; known collections: {', '.join(known)}" if known else ""
        super().__init__(f"Collection {name!r} not found{hint}")
        self.name = name


class RegistryFrozen(ContentSchemaError, RuntimeError):
    """`register` was called after the registry was frozen."""

    def __init__(self, name: str):
        super().__init__(f"Cannot register {name!r}: the collection registry is frozen")
        self.name = name


class RecordValidationError(ContentSchemaError, ValueError):
    """
    A record failed validation. Carries every field-level problem found,
    not just the first.
    """

    def __init__(
        self,
        collection: str,
        errors: Sequence[FieldError],
        source: Optional[Union[str, Path]] = None,
    ):
        self.collection = collection
        self.errors: List[FieldError] = list(errors)
        self.source = str(source) if source is not None else None
        where = f" in {self.source}" if self.source else ""
        lines = "\n".join(f"  - {e}" for e in self.errors)
        super().__init__(
            f"{len(self.errors)} validation error(s) for collection {collection!r}{where}\n{lines}"
        )

    @property
    def kinds(self) -> List[ErrorKind]:
        return [e.kind for e in self.errors]

    def for_field(self, name: str) -> List[FieldError]:
        return [e for e in self.errors if e.field == name]

    def to_diagnostic(self, source: Optional[Union[str, Path]] = None) -> Diagnostic:
        src = str(source) if source is not None else (self.source or "<unknown>")
        return Diagnostic(source_file=src, collection=self.collection, errors=list(self.errors))


class ContentLoadError(ContentSchemaError, ValueError):
    """A content file could not be read or its front matter could not be parsed."""

    def __init__(self, source: Union[str, Path], message: str):
        super().__init__(f"{source}: {message}")
        self.source = str(source)
        self.message = message
