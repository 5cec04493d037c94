#!/usr/bin/env python3

import argparse
import sys

from contentschema.core.app import get_context
from contentschema.core.log import configure_logging
from contentschema.cli import config, validate, collection


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="contentschema", description="Content collection schema toolkit")
    parser.add_argument("--log-level", default=None, help="Override the configured log level.")
    subparsers = parser.add_subparsers(dest="command")

    # Register subcommands (they accept ctx)
    validate.register(subparsers)
    collection.register(subparsers)
    config.register(subparsers)
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    ctx = get_context()  # built once
    configure_logging(args.log_level or ctx.config.get("logging", {}).get("level", "INFO"))
    return args.func(args, ctx)


if __name__ == "__main__":
    sys.exit(main())
