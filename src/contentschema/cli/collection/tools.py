#!/usr/bin/env python3

import json
from pathlib import Path

from pydantic import ValidationError

from contentschema.core.app_context import AppContext
from contentschema.core.errors import UnknownCollection
from contentschema.core.formatting import format_pydantic_errors_simple
from contentschema.core.schema.collection_schema import CollectionSchema


def register(subparsers):
    sp = subparsers.add_parser("collections", help="Collection schema utilities")
    sps = sp.add_subparsers(dest="collections_cmd")

    # default when user runs: `contentschema collections`
    def collections_default(args, ctx: AppContext) -> int:
        sp.print_help()
        return 1
    sp.set_defaults(func=collections_default)

    lp = sps.add_parser("list", help="List registered collections")
    lp.add_argument("--all", action="store_true", help="Include schema files that failed to load")
    lp.add_argument("--json", action="store_true", help="JSON output")
    lp.set_defaults(func=list_collections)

    ssp = sps.add_parser("show", help="Show a collection schema as JSON")
    ssp.add_argument("name", help="Collection name")
    ssp.set_defaults(func=show_collection)

    csp = sps.add_parser("check", help="Check a JSON schema file without registering it")
    csp.add_argument("path", help="Schema file")
    csp.set_defaults(func=check_schema)


def list_collections(args, ctx: AppContext) -> int:
    entries = ctx.registry.entries() if args.all else [e for e in ctx.registry.entries() if e.valid]

    if args.json:
        payload = [{
            "name": e.name,
            "valid": e.valid,
            "path": str(e.path) if e.path else None,
            "fields": ctx.registry.resolve(e.name).field_names if e.valid else None,
            "reason": e.reason,
        } for e in entries]
        print(json.dumps(payload, indent=2))
        return 0 if payload else 1

    if not entries:
        print("No collections registered.")
        return 1

    print("\nCollections:")
    for e in sorted(entries, key=lambda x: (not x.valid, x.name)):
        if e.valid:
            schema = ctx.registry.resolve(e.name)
            status = f"✓ {len(schema.fields)} fields"
        else:
            status = f"✗ invalid ({(e.reason or '').splitlines()[0] if e.reason else 'unknown'})"
        origin = str(e.path) if e.path else "<builtin>"
        print(f"  - {e.name:20} {status:35}  {origin}")
    return 0


def show_collection(args, ctx: AppContext) -> int:
    try:
        schema = ctx.registry.resolve(args.name)
    except UnknownCollection as e:
        print(str(e))
        return 1
    print(json.dumps(schema.to_dict(), indent=2, default=str))
    return 0


def check_schema(args, ctx: AppContext) -> int:
    p = Path(args.path)
    try:
        schema = CollectionSchema.from_file(p)
    except ValidationError as e:
        print(f"Schema file invalid: {p}")
        for line in format_pydantic_errors_simple(e):
            print(f"  - {line}")
        return 1
    except (FileNotFoundError, ValueError) as e:
        print(f"Schema file invalid: {p}\n{e}")
        return 1
    print(f"Valid schema file: {p} -> collection '{schema.name}' ({len(schema.fields)} fields)")
    return 0
