#!/usr/bin/env python3
"""
Purpose:
    Maps field types to the Python value shapes accepted for record values,
    as typing objects Pydantic can validate.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Annotated, Any, List, Literal, Optional, Sequence

from pydantic import BeforeValidator, StrictBool, StrictStr

from contentschema.core.schema.field_type import FieldType


# --- Normalizers --- #

def _coerce_date(v: Any) -> date:
    """
    Accept a calendar date:
    - `datetime` → truncated to its date
    - `date` → as-is
    - ISO-8601 text (date or datetime, trailing 'Z' allowed) → parsed
    Anything else (numbers, booleans, free text) is rejected.
    """
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, date):
        return v
    if isinstance(v, str):
        text = v.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            raise ValueError(f"{v!r} is not a valid calendar date") from None
    raise ValueError(f"expected a date, got {type(v).__name__}")


def _require_explicit_array(v: Any) -> list:
    """Only lists/tuples count as arrays; a bare string is never wrapped."""
    if isinstance(v, (list, tuple)):
        return list(v)
    raise ValueError(f"expected an array of strings, got {type(v).__name__}")


# --- Reusable Annotated types --- #

DateValue = Annotated[date, BeforeValidator(_coerce_date)]
StringArrayValue = Annotated[List[StrictStr], BeforeValidator(_require_explicit_array)]


# --- Public API --- #

def value_type_for(fieldtype: FieldType, options: Optional[Sequence[str]] = None) -> Any:
    """
    Return the typing object describing valid values for `fieldtype`.

    `options` is required for `FieldType.ENUM` and ignored otherwise.

    Raises:
        ValueError: for `FieldType.INVALID` or an enum without options
    """
    if fieldtype == FieldType.STRING:
        return StrictStr

    if fieldtype == FieldType.DATE:
        return DateValue

    if fieldtype == FieldType.BOOLEAN:
        return StrictBool

    if fieldtype == FieldType.STRING_ARRAY:
        return StringArrayValue

    if fieldtype == FieldType.ENUM:
        if not options:
            raise ValueError("enum fields need at least one option")
        # Literal over the tuple of allowed choices
        return Literal[tuple(options)]  # type: ignore[misc,valid-type]

    raise ValueError(f"No value type for fieldtype {fieldtype.value!r}")
