#!/usr/bin/env python3
"""
Purpose:
    Provides reusable annotated types and normalization helpers for
    contentschema's Pydantic models, such as collection names.
"""

from typing import Any, Annotated, Optional
from pydantic import BeforeValidator

from contentschema.core.constants import COLLECTION_NAME_ALLOWED_RE
from contentschema.core.utils import is_valid_collection_name


# --- Normalizers --- #

def normalize_collection_name(v: Any) -> str:
    """
    Normalize a collection identifier:
    - coerce to str
    - strip surrounding whitespace
    - lowercase
    - validate via fullmatch against COLLECTION_NAME_ALLOWED_RE
    """
    text = "" if v is None else str(v).strip().lower()
    if not text:
        raise ValueError("Invalid name: must be a non-empty string")
    if not is_valid_collection_name(text):
        raise ValueError(
            f"Invalid name: {text!r}. Allowed pattern: {COLLECTION_NAME_ALLOWED_RE.pattern!r}"
        )
    return text


def _normalize_optional_text(v: Any) -> Optional[str]:
    """
    Normalize free-form text:
    - None stays None
    - coerce to str and trim whitespace
    - empty/whitespace-only -> None
    """
    if v is None:
        return None
    text = str(v).strip()
    return text if text != "" else None


# --- Reusable Annotated types --- #

CollectionName = Annotated[str, BeforeValidator(normalize_collection_name)]
OptionalText = Annotated[Optional[str], BeforeValidator(_normalize_optional_text)]
