#!/usr/bin/env python3
"""
Purpose:
    Built-in collection schemas for the site: `blog` posts and `portfolio`
    items, both localized through a `language` field.
"""
from __future__ import annotations

from typing import Dict, Final

from contentschema.core.constants import DEFAULT_LANGUAGE, LANGUAGES
from contentschema.core.registry import CollectionRegistry
from contentschema.core.schema.collection_schema import CollectionSchema
from contentschema.core.schema.field_descriptor import FieldDescriptor


def _language_field() -> FieldDescriptor:
    return FieldDescriptor(
        name="language",
        type="enum",
        options=list(LANGUAGES),
        default=DEFAULT_LANGUAGE,
        description="Locale the entry is written in.",
    )


BLOG_SCHEMA: Final[CollectionSchema] = CollectionSchema(
    name="blog",
    description="Blog posts.",
    fields=[
        FieldDescriptor(name="title"),
        FieldDescriptor(name="publishDate", type="date"),
        FieldDescriptor(name="description"),
        FieldDescriptor(name="author"),
        FieldDescriptor(name="image", optionality="optional"),
        FieldDescriptor(name="tags", type="string-array"),
        _language_field(),
    ],
)

PORTFOLIO_SCHEMA: Final[CollectionSchema] = CollectionSchema(
    name="portfolio",
    description="Portfolio projects.",
    fields=[
        FieldDescriptor(name="title"),
        FieldDescriptor(name="description"),
        FieldDescriptor(name="image"),
        FieldDescriptor(name="demoUrl", optionality="optional"),
        FieldDescriptor(name="githubUrl", optionality="optional"),
        FieldDescriptor(name="technologies", type="string-array"),
        FieldDescriptor(name="featured", type="boolean", default=False),
        FieldDescriptor(name="completionDate", type="date"),
        _language_field(),
    ],
)

BUILTIN_COLLECTIONS: Final[Dict[str, CollectionSchema]] = {
    "blog": BLOG_SCHEMA,
    "portfolio": PORTFOLIO_SCHEMA,
}


def register_builtin_collections(registry: CollectionRegistry) -> CollectionRegistry:
    """Register `blog` and `portfolio` on `registry` (which must not have them yet)."""
    for name, schema in BUILTIN_COLLECTIONS.items():
        registry.register(name, schema)
    return registry


def default_registry() -> CollectionRegistry:
    """A frozen registry holding only the built-in collections."""
    registry = register_builtin_collections(CollectionRegistry())
    registry.freeze()
    return registry
