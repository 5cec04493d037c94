#!/usr/bin/env python3
"""
Formatting helpers for contentschema.

- Stable, minimal one-line formatting for Pydantic v2 `ValidationError`
  (schema-definition problems).
- One-line formatting for record diagnostics.
"""
from __future__ import annotations

from typing import Any, Iterable, List, Sequence

from contentschema.core.constants import ROOT_LOCATION
from contentschema.core.errors import Diagnostic


# --- Public API --- #

def format_pydantic_errors_simple(exc: Exception) -> List[str]:
    """
    Return stable one-line messages from a Pydantic v2 ValidationError.

    Example:
        fields[1].name: Field required

    Falls back to the first line of str(exc) if `exc` has no `errors()`.
    """
    errors: Sequence[dict[str, Any]] | None = None
    if callable(getattr(exc, "errors", None)):
        errors = exc.errors()  # type: ignore[attr-defined]

    if not errors:
        return [str(exc).splitlines()[0]]

    msgs: List[str] = []
    for err in errors:
        loc = err.get("loc", ())
        msg = err.get("msg", "Validation error")
        path = format_error_loc(loc)
        msgs.append(f"{path}: {msg}")
    return msgs


def format_diagnostic(diag: Diagnostic) -> List[str]:
    """
    Render a Diagnostic as a header line followed by one line per field error.

    Example:
        src/content/blog/hello.md (blog)
          - publishDate: [MissingRequiredField] Field required
    """
    lines = [f"{diag.source_file} ({diag.collection})"]
    lines.extend(f"  - {e}" for e in diag.errors)
    return lines


def format_error_loc(loc: Iterable[Any]) -> str:
    """
    Convert a Pydantic error `loc` tuple into a dotted path with index suffixes.

    Examples:
        ('fields', 1, 'name') -> "fields[1].name"
        (0, 'items')          -> "[0].items"
        ()                    -> "<root>"
    """
    parts: List[str] = []
    for seg in loc:
        if isinstance(seg, int):
            if parts:
                parts[-1] = f"{parts[-1]}[{seg}]"
            else:
                parts.append(f"[{seg}]")
        else:
            parts.append(str(seg))
    return ".".join(parts) if parts else ROOT_LOCATION
