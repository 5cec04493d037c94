#!/usr/bin/env python3
"""
Purpose:
    Defines the FieldType and Optionality enumerations for content collection
    schemas, along with their parsing helpers.
"""

from __future__ import annotations

from enum import Enum


# Authoring aliases accepted by `FieldType.parse`
_FIELDTYPE_ALIASES: dict[str, str] = {
    "str": "string",
    "text": "string",
    "bool": "boolean",
    "array": "string-array",
    "list": "string-array",
    "string[]": "string-array",
    "string_array": "string-array",
    "enumeration": "enum",
}


class FieldType(str, Enum):
    """
    Supported field types in a collection schema.

    - string       : textual scalar, never coerced
    - date         : calendar date (date object or ISO-8601 text)
    - boolean      : literal true/false
    - string-array : explicit sequence of strings (a bare string is rejected)
    - enum         : string constrained to a fixed set of options
    - invalid      : unrecognized/unsupported type (returned by `parse`)
    """

    STRING = "string"
    DATE = "date"
    BOOLEAN = "boolean"
    STRING_ARRAY = "string-array"
    ENUM = "enum"
    INVALID = "invalid"

    # --- Parsing helpers --- #

    @classmethod
    def parse(cls, value: str | FieldType | None) -> FieldType:
        """
        Coerce arbitrary input to a `FieldType`.

        - `FieldType` instance → returned as-is
        - `None` or unknown strings → `FieldType.INVALID`
        - strings are trimmed and lowercased before lookup; aliases such as
          "array" or "string[]" resolve to `STRING_ARRAY`

        Examples
        --------
        >>> FieldType.parse(" Date ")
        <FieldType.DATE: 'date'>
        >>> FieldType.parse("string[]")
        <FieldType.STRING_ARRAY: 'string-array'>
        >>> FieldType.parse("number")
        <FieldType.INVALID: 'invalid'>
        """
        if isinstance(value, FieldType):
            return value
        if value is None:
            return cls.INVALID
        text = str(value).strip().lower()
        text = _FIELDTYPE_ALIASES.get(text, text)
        try:
            return cls(text)
        except ValueError:
            return cls.INVALID


class Optionality(str, Enum):
    """
    How a field behaves when a record omits it.

    - required    : absence is a validation error
    - optional    : absence leaves the field out of the validated record
    - has-default : absence fills in the field's (frozen) default
    """

    REQUIRED = "required"
    OPTIONAL = "optional"
    HAS_DEFAULT = "has-default"

    @classmethod
    def parse(cls, value: str | Optionality) -> Optionality:
        """Trim/lowercase text and accept `default` / `has_default` spellings."""
        if isinstance(value, Optionality):
            return value
        text = str(value).strip().lower().replace("_", "-")
        if text == "default":
            text = cls.HAS_DEFAULT.value
        return cls(text)
