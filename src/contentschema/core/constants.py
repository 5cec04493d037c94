#!/usr/bin/env python3
"""
Core constants used across contentschema.

- File handling: supported schema/content extensions and default text encoding.
- Locales: languages known to the built-in collections.
- Regular expressions: compiled patterns used by validators and normalizers.
"""

import re
from typing import Final, Mapping

# --- contentschema constants --- #

# Supported schema file extensions
SUPPORTED_SCHEMA_EXT: Final[frozenset[str]] = frozenset({".json"})

# Content files carrying YAML front matter
SUPPORTED_CONTENT_EXT: Final[frozenset[str]] = frozenset({".md", ".mdx", ".markdown"})

# Data-only entries (the whole file is the record)
SUPPORTED_DATA_EXT: Final[frozenset[str]] = frozenset({".yaml", ".yml", ".json"})

# Default text encoding
DEFAULT_TEXT_ENCODING: Final[str] = "utf-8"

# Front matter delimiter line
FRONT_MATTER_DELIMITER: Final[str] = "---"

# Location used in diagnostics when the whole record is at fault
ROOT_LOCATION: Final[str] = "<root>"

# Site languages and the locale used when an entry does not declare one
LANGUAGES: Final[Mapping[str, str]] = {
    "en": "English",
    "id": "Bahasa Indonesia",
}
DEFAULT_LANGUAGE: Final[str] = "en"


# --- Regular Expressions --- #
# Matches valid field names: leading letter/underscore, then letters/numbers/underscores
FIELDNAME_ALLOWED_RE: re.Pattern[str] = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# Allowed collection names: lowercase letters, digits, dot, underscore, hyphen
COLLECTION_NAME_ALLOWED_RE: re.Pattern[str] = re.compile(r"^[a-z0-9._-]+$")


# --- Runtime guard --- #
def validate_constants():
    """
    Ensure constants are valid at runtime.
    """
    if DEFAULT_LANGUAGE not in LANGUAGES:
        raise RuntimeError(
            f"DEFAULT_LANGUAGE must be one of {sorted(LANGUAGES)}, got {DEFAULT_LANGUAGE!r}"
        )

validate_constants()
