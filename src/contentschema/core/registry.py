#!/usr/bin/env python3
"""
Purpose:
    Implements the CollectionRegistry, which maps collection names to their
    schemas, validates raw records against them, and can discover JSON
    schema files from given roots.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Union

from pydantic import ValidationError

from contentschema.core.annotated_types import normalize_collection_name
from contentschema.core.constants import SUPPORTED_SCHEMA_EXT
from contentschema.core.errors import DuplicateCollection, RegistryFrozen, UnknownCollection
from contentschema.core.formatting import format_pydantic_errors_simple
from contentschema.core.runtime_model import build_record_model
from contentschema.core.schema.collection_schema import CollectionSchema
from contentschema.core.validation import ValidationResult, check_record, validate_record

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CollectionEntry:
    """
    Where a collection (or a rejected schema file) came from.
    - name: collection name (file stem for files that failed to parse)
    - path: schema file, or None for collections registered in code
    - valid: False for schema files that could not be loaded
    - reason: diagnostic text for invalid entries
    """
    name: str
    path: Optional[Path]
    valid: bool
    reason: Optional[str] = None


class CollectionRegistry:
    """
    Process-wide map of collection name -> CollectionSchema.

    Populated once at startup (in code via `register`, or from JSON files via
    `load_files`), then optionally frozen. Lookups and validation never
    mutate state, so they are safe to call from several threads.
    """

    def __init__(self, schemas: Optional[Mapping[str, Union[CollectionSchema, Mapping[str, Any]]]] = None):
        self._schemas: Dict[str, CollectionSchema] = {}
        self._entries: List[CollectionEntry] = []
        self._frozen: bool = False
        for name, schema in (schemas or {}).items():
            self.register(name, schema)

    # --- Registration --- #

    def register(
        self,
        name: str,
        schema: Union[CollectionSchema, Mapping[str, Any]],
        *,
        path: Optional[Path] = None,
    ) -> CollectionSchema:
        """
        Register `schema` under `name` (normalized to lowercase).

        `schema` may be a CollectionSchema or its dict form; a schema whose own
        name differs from `name` is re-bound to `name`.

        Raises:
            DuplicateCollection: if `name` is already registered
            RegistryFrozen: if `freeze()` has been called
            ValueError: if `name` is not a valid collection name
            ValidationError: if a dict schema fails model validation
        """
        key = normalize_collection_name(name)
        if self._frozen:
            raise RegistryFrozen(key)
        if key in self._schemas:
            raise DuplicateCollection(key)

        if not isinstance(schema, CollectionSchema):
            schema = CollectionSchema.from_dict({**dict(schema), "name": key})
        elif schema.name != key:
            schema = schema.renamed(key)

        self._schemas[key] = schema
        self._entries.append(CollectionEntry(name=key, path=path, valid=True))
        # Warm model cache
        build_record_model(schema)
        logger.debug("Registered collection %r (%d fields)", key, len(schema.fields))
        return schema

    def load_files(self, roots: Iterable[Union[str, Path]], *, strict: bool = False) -> List[CollectionSchema]:
        """
        Register every JSON schema file found (recursively) under `roots`.

        Files are visited in sorted path order. A file that fails to parse is
        recorded as an invalid entry (or raised, if `strict`); a name clash
        always raises DuplicateCollection.
        """
        loaded: List[CollectionSchema] = []
        for p in self._iter_schema_files(roots):
            try:
                schema = CollectionSchema.from_file(p)
            except (ValidationError, ValueError) as e:
                if strict:
                    raise
                reason = "; ".join(format_pydantic_errors_simple(e))
                logger.warning("Skipping schema file %s: %s", p, reason)
                self._entries.append(CollectionEntry(name=p.stem.lower(), path=p.resolve(), valid=False, reason=reason))
                continue
            loaded.append(self.register(schema.name, schema, path=p.resolve()))
        return loaded

    def freeze(self) -> None:
        """Refuse further registrations."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    # --- Query API --- #

    def get(self, name: str) -> Optional[CollectionSchema]:
        """Return the schema for `name` (case-insensitive), or None."""
        return self._schemas.get(str(name).strip().lower())

    def resolve(self, name: str) -> CollectionSchema:
        """Return the schema for `name` or raise UnknownCollection."""
        schema = self.get(name)
        if schema is None:
            raise UnknownCollection(name, known=self.names())
        return schema

    def names(self) -> List[str]:
        """Sorted names of registered collections."""
        return sorted(self._schemas.keys())

    def entries(self) -> List[CollectionEntry]:
        """All entries (registered collections + rejected schema files)."""
        return list(self._entries)

    def invalid_entries(self) -> List[CollectionEntry]:
        return [e for e in self._entries if not e.valid]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def __len__(self) -> int:
        return len(self._schemas)

    def __iter__(self) -> Iterator[CollectionSchema]:
        return iter(self._schemas[n] for n in self.names())

    # --- Validation --- #

    def validate(self, name: str, raw: Any, source: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
        """
        Validate `raw` against the schema registered as `name`.

        Raises:
            UnknownCollection: if `name` was never registered
            RecordValidationError: listing every field problem in `raw`
        """
        return validate_record(self.resolve(name), raw, source=source)

    def check(self, name: str, raw: Any) -> ValidationResult:
        """Non-raising variant of `validate` (still raises UnknownCollection)."""
        return check_record(self.resolve(name), raw)

    # --- Loading Helpers --- #

    @staticmethod
    def _iter_schema_files(roots: Iterable[Union[str, Path]]) -> Iterator[Path]:
        for root in (Path(r) for r in roots):
            if root.is_file() and root.suffix.lower() in SUPPORTED_SCHEMA_EXT:
                yield root
                continue
            if not root.is_dir():
                continue
            for p in sorted(root.rglob("*")):
                if p.is_file() and p.suffix.lower() in SUPPORTED_SCHEMA_EXT:
                    yield p
