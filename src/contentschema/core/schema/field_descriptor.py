#!/usr/bin/env python3
"""
Purpose:
    Implements the FieldDescriptor model for collection schemas, handling
    validation, normalization, packing/unpacking of type-specific specs,
    default resolution, and flat serialization.
"""
from __future__ import annotations

from typing import Any, Dict, Optional, Type

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    ValidationInfo,
    field_validator,
    model_serializer,
    model_validator,
)

from contentschema.core.schema.field_type import FieldType, Optionality
from contentschema.core.schema.field_specs import (
    FieldSpec,
    StringSpec,
    DateSpec,
    BooleanSpec,
    StringArraySpec,
    EnumSpec,
)
from contentschema.core.schema.value_types import value_type_for
from contentschema.core.utils import is_valid_fieldname_pattern
from contentschema.core import constants as C


# --- Spec key registry --- #
# Which flat keys belong to which FieldType.
SPEC_REGISTRY: Dict[FieldType, tuple[Type[BaseModel], set[str]]] = {
    FieldType.STRING:       (StringSpec, set()),
    FieldType.DATE:         (DateSpec, set()),
    FieldType.BOOLEAN:      (BooleanSpec, set()),
    FieldType.STRING_ARRAY: (StringArraySpec, set()),
    FieldType.ENUM:         (EnumSpec, {"options"}),
}


# --- Model --- #

class FieldDescriptor(BaseModel):
    """
    One field in a collection schema.

    Flat authoring:
      - Common keys: name, type, optionality, default, default_factory, description
      - `required: true|false` is accepted as sugar for `optionality`
      - Type-specific keys live at top-level but are packed into `spec` internally
        (enum: options)

    Defaults:
      - `default` or `default_factory` without `optionality` implies `has-default`
      - `default_factory` is called exactly once, while the descriptor is built;
        every record validated later receives that same frozen value
      - the default must itself be a valid value of the field's type
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    # Common (declaration order matters: `default` is checked against type/spec)
    name: str = Field(..., description="Name of the field.")
    fieldtype: FieldType = Field(default=FieldType.STRING, alias="type", description="Field type.")
    optionality: Optionality = Field(default=Optionality.REQUIRED, description="Behavior when absent.")
    spec: Optional[FieldSpec] = Field(default=None, description="Type-specific parameters.")
    default: Any | None = Field(default=None, description="Value used when the field is absent.")
    description: str | None = Field(default=None, description="Human-readable description.")

    # --- Pre-parse: pack flat keys into spec, resolve defaults --- #
    @model_validator(mode="before")
    @classmethod
    def _pack_flat_spec(cls, data: Any) -> Any:
        """
        Convert flat authoring keys into a typed `spec` based on `type`,
        evaluate `default_factory`, and infer `optionality`.
        """
        if not isinstance(data, dict):
            return data
        data = dict(data)

        raw_ft = data.get("type", data.get("fieldtype"))
        ft = FieldType.parse(raw_ft) if raw_ft is not None else FieldType.STRING
        spec_model, allowed_keys = SPEC_REGISTRY.get(ft, (None, set()))

        data = cls._fd_resolve_default_factory(data)
        data = cls._fd_resolve_optionality(data)

        if not spec_model:
            return data  # unknown type handled later

        flat = {k: v for k, v in data.items() if k in allowed_keys}
        has_spec = isinstance(data.get("spec"), dict)
        if flat and has_spec:
            raise ValueError("Provide either flat type-specific keys or 'spec', not both")
        cls._fd_raise_if_stray_keys(data, ft, allowed_keys)

        if flat:
            data = {k: v for k, v in data.items() if k not in allowed_keys}
            data["spec"] = {"kind": ft.value, **flat}
        elif not has_spec and data.get("spec") is None and not allowed_keys:
            data["spec"] = {"kind": ft.value}
        return data

    # --- Validators --- #

    @field_validator("fieldtype", mode="before")
    @classmethod
    def _parse_fieldtype(cls, v: Any) -> FieldType:
        """Coerce incoming values to FieldType (unknowns → INVALID)."""
        return FieldType.parse(v)

    @field_validator("optionality", mode="before")
    @classmethod
    def _parse_optionality(cls, v: Any) -> Optionality:
        return Optionality.parse(v)

    @field_validator("name", mode="before")
    @classmethod
    def _normalize_and_validate_name(cls, v: Any) -> str:
        """Strip whitespace and enforce FIELDNAME_ALLOWED_RE."""
        s = "" if v is None else str(v).strip()
        if not s:
            raise ValueError("The 'name' key is not set")
        if not is_valid_fieldname_pattern(s):
            raise ValueError(
                f"The field name {s!r} must match the pattern {C.FIELDNAME_ALLOWED_RE.pattern!r}"
            )
        return s

    @field_validator("default")
    @classmethod
    def _validate_default_value(cls, v: Any, info: ValidationInfo) -> Any:
        """Normalize the default through the field's own value type."""
        if v is None:
            return v
        ft = info.data.get("fieldtype")
        spec = info.data.get("spec")
        if ft is None or ft == FieldType.INVALID:
            return v  # reported by the fieldtype validator / _post
        if ft == FieldType.ENUM and spec is None:
            return v  # missing options reported by _post
        options = spec.options if isinstance(spec, EnumSpec) else None
        adapter = TypeAdapter(value_type_for(ft, options))
        try:
            return adapter.validate_python(v)
        except ValidationError as e:
            raise ValueError(f"default {v!r} is not a valid {ft.value} value") from e

    @model_validator(mode="after")
    def _post(self) -> "FieldDescriptor":
        """
        Final validation:
        - fieldtype must be known
        - enum requires options
        - spec.kind matches fieldtype
        - optionality and default agree
        """
        if self.fieldtype == FieldType.INVALID:
            valid = ", ".join(ft.value for ft in FieldType if ft != FieldType.INVALID)
            raise ValueError(f"Unknown fieldtype; valid types are: {valid}")
        if self.spec is None:
            raise ValueError(f"{self.fieldtype.value} requires a 'spec' block (or flat 'options')")
        if self.spec.kind != self.fieldtype.value:
            raise ValueError(f"'spec.kind' ({self.spec.kind}) does not match fieldtype '{self.fieldtype.value}'")

        has_default = self.default is not None
        if self.optionality == Optionality.HAS_DEFAULT and not has_default:
            raise ValueError(f"Field {self.name!r} is 'has-default' but declares no default")
        if self.optionality != Optionality.HAS_DEFAULT and has_default:
            raise ValueError(
                f"Field {self.name!r} declares a default but is {self.optionality.value!r}"
            )
        return self

    # --- Convenience --- #

    @property
    def is_required(self) -> bool:
        return self.optionality == Optionality.REQUIRED

    @property
    def options(self) -> list[str] | None:
        """Allowed values for enum fields; None otherwise."""
        if isinstance(self.spec, EnumSpec):
            return list(self.spec.options)
        return None

    def value_type(self) -> Any:
        """Typing object for values of this field."""
        return value_type_for(self.fieldtype, self.options)

    # --- Serializer: flatten spec back to top-level --- #
    @model_serializer(mode="plain")
    def _dump_flat(self) -> Dict[str, Any]:
        """Emit the flat authoring shape (enum options at the top level)."""
        base = {
            "name": self.name,
            "type": self.fieldtype.value,
            "optionality": self.optionality.value,
            "default": self.default,
            "description": self.description,
        }
        base = {k: v for k, v in base.items() if v is not None}
        if self.options is not None:
            base["options"] = self.options
        return base

    # --- Pack Flat Spec Helpers --- #
    @staticmethod
    def _fd_resolve_default_factory(data: dict) -> dict:
        if "default_factory" not in data:
            return data
        factory = data.pop("default_factory")
        if factory is None:
            return data
        if not callable(factory):
            raise ValueError("'default_factory' must be callable")
        if data.get("default") is not None:
            raise ValueError("Provide either 'default' or 'default_factory', not both")
        # Evaluated once here; the value is frozen into the descriptor.
        data["default"] = factory()
        return data

    @staticmethod
    def _fd_resolve_optionality(data: dict) -> dict:
        if "required" in data:
            if "optionality" in data:
                raise ValueError("Provide either 'required' or 'optionality', not both")
            required = data.pop("required")
            if not isinstance(required, bool):
                raise ValueError("'required' must be true or false")
            data["optionality"] = Optionality.REQUIRED if required else Optionality.OPTIONAL
        if data.get("optionality") is None:
            has_default = data.get("default") is not None
            data["optionality"] = Optionality.HAS_DEFAULT if has_default else Optionality.REQUIRED
        return data

    @staticmethod
    def _fd_raise_if_stray_keys(data: dict, ft: FieldType, allowed_keys: set[str]) -> None:
        stray = {k for k in data.keys() if k not in (_fd_common_keys() | allowed_keys)}
        suspicious = stray & _fd_other_type_keys(ft)
        if suspicious:
            allowed_fmt = "[" + ", ".join(repr(k) for k in sorted(allowed_keys)) + "]"
            raise ValueError(
                f"Unexpected key(s) for fieldtype {ft.value!r}: {sorted(suspicious)}. "
                f"Allowed: {allowed_fmt}"
            )


def _fd_common_keys() -> set[str]:
    return {"name", "type", "fieldtype", "optionality", "default", "description", "spec"}


def _fd_other_type_keys(this_ft: FieldType) -> set[str]:
    keys: set[str] = set()
    for t, (_, ks) in SPEC_REGISTRY.items():
        if t != this_ft:
            keys |= ks
    return keys
