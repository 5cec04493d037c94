# cli/collection/__init__.py
from .tools import register, list_collections, show_collection, check_schema

__all__ = ["register", "list_collections", "show_collection", "check_schema"]
