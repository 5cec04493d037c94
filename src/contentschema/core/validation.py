#!/usr/bin/env python3
"""
Purpose:
    Validates and normalizes raw content records (front matter mappings)
    against a CollectionSchema, aggregating every field-level problem.
"""
from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Union

from pydantic import ValidationError

from contentschema.core.constants import ROOT_LOCATION
from contentschema.core.errors import ErrorKind, FieldError, RecordValidationError
from contentschema.core.formatting import format_error_loc
from contentschema.core.runtime_model import RecordModel, build_record_model
from contentschema.core.schema.collection_schema import CollectionSchema
from contentschema.core.schema.field_type import Optionality


class ValidationResult:
    """Field errors collected for one record, plus the record when valid."""

    def __init__(self):
        self.errors: List[FieldError] = []
        self.record: Optional[Dict[str, Any]] = None

    def add(self, error: FieldError):
        self.errors.append(error)

    def is_valid(self) -> bool:
        return not self.errors

    def __len__(self):
        return len(self.errors)

    def __iter__(self) -> Iterator[FieldError]:
        return iter(self.errors)

    def __repr__(self):
        return f"<ValidationResult valid={self.is_valid()} errors={len(self.errors)}>"


# --- Public API --- #

def validate_record(
    schema: CollectionSchema,
    raw: Any,
    source: Optional[Union[str, Path]] = None,
) -> Dict[str, Any]:
    """
    Validate `raw` against `schema` and return the normalized record.

    For each declared field, in schema order:
      - present: checked against its type (no coercion except date parsing)
      - absent + required: MissingRequiredField
      - absent + optional: left out of the result
      - absent + has-default: set to a copy of the schema's frozen default
    Keys the schema does not declare are reported as UnexpectedField.

    Raises:
        RecordValidationError: listing every problem found in the record
    """
    result = check_record(schema, raw)
    if not result.is_valid():
        raise RecordValidationError(schema.name, result.errors, source=source)
    assert result.record is not None  # for type-checkers
    return result.record


def check_record(schema: CollectionSchema, raw: Any) -> ValidationResult:
    """Non-raising variant of `validate_record`."""
    result = ValidationResult()
    if not isinstance(raw, Mapping):
        result.add(FieldError(
            field=ROOT_LOCATION,
            kind=ErrorKind.TYPE_MISMATCH,
            message=f"expected a mapping of fields, got {type(raw).__name__}",
        ))
        return result

    rm = build_record_model(schema)
    try:
        inst = rm.model.model_validate(dict(raw))
    except ValidationError as e:
        for err in e.errors():
            result.add(_to_field_error(schema, rm, err))
        return result

    result.record = _collect(schema, rm, inst)
    return result


# --- Internals --- #

def _collect(schema: CollectionSchema, rm: RecordModel, inst: Any) -> Dict[str, Any]:
    record: Dict[str, Any] = {}
    for fd in schema.fields:
        attr = rm.attr_by_field[fd.name]
        if attr in inst.model_fields_set:
            record[fd.name] = getattr(inst, attr)
        elif fd.optionality == Optionality.HAS_DEFAULT:
            record[fd.name] = copy.deepcopy(fd.default)
    return record


def _to_field_error(schema: CollectionSchema, rm: RecordModel, err: Mapping[str, Any]) -> FieldError:
    """Map one Pydantic error dict onto a FieldError."""
    loc = tuple(err.get("loc", ()))
    etype = err.get("type", "")
    if not loc:
        return FieldError(ROOT_LOCATION, ErrorKind.TYPE_MISMATCH, _clean_msg(err))

    head = str(loc[0])
    # extra keys are reported under the key as given
    undeclared = etype in ("extra_forbidden", "invalid_key")
    name = head if undeclared else rm.field_by_loc.get(head, head)

    if etype == "missing":
        return FieldError(name, ErrorKind.MISSING_REQUIRED_FIELD, "required field is missing")

    if undeclared:
        return FieldError(
            name,
            ErrorKind.UNEXPECTED_FIELD,
            f"field is not declared by collection {schema.name!r}",
        )

    if etype == "literal_error":
        allowed = tuple(schema.field(name).options or ())
        return FieldError(
            name,
            ErrorKind.INVALID_ENUM_VALUE,
            f"{err.get('input')!r} is not one of: {', '.join(allowed)}",
            allowed=allowed,
        )

    msg = _clean_msg(err)
    if len(loc) > 1:
        # nested position, e.g. tags[1]
        msg = f"{format_error_loc((name, *loc[1:]))}: {msg}"
    return FieldError(name, ErrorKind.TYPE_MISMATCH, msg)


def _clean_msg(err: Mapping[str, Any]) -> str:
    msg = str(err.get("msg", "Validation error"))
    prefix = "Value error, "
    return msg[len(prefix):] if msg.startswith(prefix) else msg
