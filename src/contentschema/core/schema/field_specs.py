#!/usr/bin/env python3
"""
Purpose:
    Defines Pydantic specification models for each supported field type,
    including constraint details, for use in collection schemas.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union, List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _FrozenSpec(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


# --- Per-type spec models --- #

class StringSpec(_FrozenSpec):
    """Specification for a string field."""
    kind: Literal["string"] = "string"


class DateSpec(_FrozenSpec):
    """Specification for a calendar date field."""
    kind: Literal["date"] = "date"


class BooleanSpec(_FrozenSpec):
    """Specification for a boolean field."""
    kind: Literal["boolean"] = "boolean"


class StringArraySpec(_FrozenSpec):
    """Specification for an explicit list of strings."""
    kind: Literal["string-array"] = "string-array"


class EnumSpec(_FrozenSpec):
    """Specification for an enum field (string constrained to fixed options)."""
    kind: Literal["enum"] = "enum"
    options: List[str] = Field(
        min_length=1,
        description="Allowed enum values (non-empty list).",
    )

    @field_validator("options")
    @classmethod
    def _check_options(cls, opts: List[str]) -> List[str]:
        if any(o.strip() == "" for o in opts):
            raise ValueError("ENUM 'options' must not contain empty strings")
        if len(set(opts)) != len(opts):
            raise ValueError("ENUM 'options' contain duplicates")
        return opts


# --- Discriminated union of all per-type specs --- #
# Used by FieldDescriptor to accept/validate the correct spec model
# based on the 'kind' field in schema JSON.

FieldSpec = Annotated[
    Union[StringSpec, DateSpec, BooleanSpec, StringArraySpec, EnumSpec],
    Field(discriminator="kind"),
]
