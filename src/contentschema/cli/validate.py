#!/usr/bin/env python3
from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from contentschema.core.app_context import AppContext, build_context
from contentschema.core.content.batch import BuildReport, validate_sources
from contentschema.core.content.loader import discover_sources, sources_for_paths
from contentschema.core.errors import ContentSchemaError
from contentschema.core.formatting import format_diagnostic, format_pydantic_errors_simple
from contentschema.core.registry import CollectionRegistry



def _registry_for_run(args, ctx: AppContext) -> CollectionRegistry:
    """
    Use the preloaded registry from context unless this run adds schema roots
    or drops the built-ins. Overrides build a separate registry so the shared
    one is never mutated; `--schema-root` paths are added after the configured
    `schema_paths`.
    """
    if getattr(args, "schema_root", None) or getattr(args, "no_builtin", False):
        roots = [Path(p) for p in ctx.config.get("schema_paths", [])]
        roots += [Path(r) for r in (args.schema_root or [])]
        run_ctx = build_context(
            config=ctx.config,
            schema_roots=roots,
            builtin=not args.no_builtin,
        )
        return run_ctx.registry
    return ctx.registry


def validate(args, ctx: AppContext) -> int:
    try:
        registry = _registry_for_run(args, ctx)
    except ValidationError as e:
        print("Invalid collection schema:")
        for line in format_pydantic_errors_simple(e):
            print(f"  - {line}")
        return 1
    except ContentSchemaError as e:
        print(f"Error: {e}")
        return 1

    root = Path(args.content_root) if args.content_root else ctx.content_root
    try:
        if args.paths:
            sources = sources_for_paths(args.paths, root)
        else:
            sources = discover_sources(root, args.collection)
    except ContentSchemaError as e:
        print(f"Error: {e}")
        return 1

    if not sources:
        print(f"No content files found under {root}.")
        return 1

    report = validate_sources(registry, sources, workers=args.workers or ctx.workers)

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
        return 0 if report.ok else 1

    _print_report(report, verbose=args.verbose)
    return 0 if report.ok else 1


def _print_report(report: BuildReport, verbose: bool) -> None:
    if verbose:
        for v in report.entries:
            print(f"{v.entry.source}: Validation Passed")
    for diag in report.diagnostics:
        print()
        for line in format_diagnostic(diag):
            print(line)
    print(f"\nValidation complete: {len(report.entries)}/{report.total} passed.")


def register(subparser):
    parser = subparser.add_parser("validate", help="Validate content entries against their collection schemas.")
    parser.add_argument("paths", nargs="*", help="Files or directories to validate (default: the whole content root).")
    parser.add_argument("--content-root", default=None, help="Content root holding one directory per collection.")
    parser.add_argument(
        "--collection",
        action="append",
        default=None,
        help="Only validate these collections (can be used multiple times).",
    )
    parser.add_argument(
        "--schema-root",
        action="append",
        default=None,
        help="Extra schema roots, searched after the configured ones (can be used multiple times).",
    )
    parser.add_argument("--no-builtin", action="store_true", help="Do not register the built-in collections.")
    parser.add_argument("--workers", type=int, default=None, help="Validate files in parallel.")
    parser.add_argument("--json", action="store_true", help="JSON output.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Show all results, not only errors.")
    parser.set_defaults(func=validate)
