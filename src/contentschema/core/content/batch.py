#!/usr/bin/env python3
"""
Purpose:
    Validates many content files in one pass, collecting a diagnostic per
    bad file instead of stopping at the first one.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Union

from contentschema.core.constants import ROOT_LOCATION
from contentschema.core.content.loader import ContentEntry, ContentSource, load_entry
from contentschema.core.errors import (
    ContentLoadError,
    Diagnostic,
    ErrorKind,
    FieldError,
    RecordValidationError,
)
from contentschema.core.registry import CollectionRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidatedEntry:
    """A content entry together with its validated record."""
    entry: ContentEntry
    record: Dict[str, Any]

    @property
    def collection(self) -> str:
        return self.entry.collection

    @property
    def slug(self) -> str:
        return self.entry.slug


@dataclass
class BuildReport:
    """
    Outcome of a batch validation.
    - entries: valid entries, ordered by source path
    - diagnostics: one per failing file, ordered by source path
    """
    entries: List[ValidatedEntry] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.diagnostics

    @property
    def total(self) -> int:
        return len(self.entries) + len(self.diagnostics)

    def by_collection(self, name: str) -> List[ValidatedEntry]:
        key = name.strip().lower()
        return [e for e in self.entries if e.collection.lower() == key]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "valid": len(self.entries),
            "invalid": len(self.diagnostics),
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }


# --- Public API --- #

def validate_sources(
    registry: CollectionRegistry,
    sources: Iterable[ContentSource],
    *,
    workers: int = 1,
) -> BuildReport:
    """
    Load and validate every source against `registry`.

    Each file is independent, so with `workers > 1` they are processed in a
    thread pool; the report is ordered by source path either way.
    """
    ordered = sorted(sources, key=lambda s: str(s.path))
    if workers > 1 and len(ordered) > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            outcomes = list(executor.map(lambda s: _validate_source(registry, s), ordered))
    else:
        outcomes = [_validate_source(registry, s) for s in ordered]
    return _report(outcomes)


def validate_entries(
    registry: CollectionRegistry,
    entries: Iterable[ContentEntry],
    *,
    workers: int = 1,
) -> BuildReport:
    """Like `validate_sources`, for entries that are already loaded."""
    ordered = sorted(entries, key=lambda e: str(e.source))
    if workers > 1 and len(ordered) > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            outcomes = list(executor.map(lambda e: _validate_entry(registry, e), ordered))
    else:
        outcomes = [_validate_entry(registry, e) for e in ordered]
    return _report(outcomes)


# --- Internals --- #

def _report(outcomes: Iterable[Union[ValidatedEntry, Diagnostic]]) -> BuildReport:
    report = BuildReport()
    for outcome in outcomes:
        if isinstance(outcome, Diagnostic):
            report.diagnostics.append(outcome)
        else:
            report.entries.append(outcome)
    report.diagnostics.sort(key=lambda d: d.source_file)
    logger.info("Validated %d entries: %d valid, %d invalid",
                report.total, len(report.entries), len(report.diagnostics))
    return report


def _validate_source(registry: CollectionRegistry, source: ContentSource) -> Union[ValidatedEntry, Diagnostic]:
    if source.collection not in registry:
        return _unknown_collection(source.collection, str(source.path), registry)
    try:
        entry = load_entry(source)
    except ContentLoadError as e:
        logger.warning("%s", e)
        return Diagnostic(
            source_file=str(source.path),
            collection=source.collection,
            errors=[FieldError(ROOT_LOCATION, ErrorKind.MALFORMED_ENTRY, e.message)],
        )
    return _validate_entry(registry, entry)


def _validate_entry(registry: CollectionRegistry, entry: ContentEntry) -> Union[ValidatedEntry, Diagnostic]:
    if entry.collection not in registry:
        return _unknown_collection(entry.collection, str(entry.source), registry)
    try:
        record = registry.validate(entry.collection, entry.data, source=entry.source)
    except RecordValidationError as e:
        logger.warning("%s: %d problem(s) in %s entry", entry.source, len(e.errors), entry.collection)
        return e.to_diagnostic()
    return ValidatedEntry(entry=entry, record=record)


def _unknown_collection(name: str, source_file: str, registry: CollectionRegistry) -> Diagnostic:
    known = ", ".join(registry.names()) or "<none>"
    return Diagnostic(
        source_file=source_file,
        collection=name,
        errors=[FieldError(
            ROOT_LOCATION,
            ErrorKind.UNKNOWN_COLLECTION,
            f"no schema registered for collection {name!r} (known: {known})",
        )],
    )
