#!/usr/bin/env python3
import argparse
import sys
from typing import Any, List

from treeforge_lib import DEFAULT_FUNCTIONS, ScaffoldError, ScriptExtension, load_context, parse_params, scaffold
from treeforge_lib import __version__
from treeforge_lib.generator import DEFAULT_TEMPLATE_SUFFIX
from treeforge_lib.log import configure_logging
from treeforge_lib.script import DEFAULT_SCRIPT_NAME


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="treeforge",
        description=(
            "Generate a directory tree from a template directory whose names, contents "
            "and symlink targets are Jinja2 templates."
        ),
    )
    parser.add_argument("template", help="Template directory")
    parser.add_argument("dest", help="Destination directory to generate into")
    parser.add_argument(
        "-c",
        "--context",
        help="JSON or YAML file containing the template context",
    )
    parser.add_argument(
        "-p",
        "--param",
        action="append",
        default=[],
        help=(
            "Context assignment. Repeatable; a repeated key becomes a list. Accepts key=value "
            "or key:value and overrides keys from --context. Example: -p Name=orders -p Port=8080"
        ),
    )
    parser.add_argument(
        "-x",
        "--exclude",
        action="append",
        default=[],
        help="Regular expression of template-relative paths to skip. Repeatable.",
    )
    parser.add_argument(
        "--script",
        default=DEFAULT_SCRIPT_NAME,
        help=f"Template script defining extra template functions (default: {DEFAULT_SCRIPT_NAME})",
    )
    parser.add_argument(
        "--suffix",
        default=DEFAULT_TEMPLATE_SUFFIX,
        help=f"Suffix stripped from generated names (default: {DEFAULT_TEMPLATE_SUFFIX})",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every generated entry")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: List[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    configure_logging(verbose=args.verbose)

    try:
        context: Any = load_context(args.context) if args.context else {}
        params = parse_params(args.param)
    except ValueError as e:
        print(f"Error loading context: {e}", file=sys.stderr)
        return 2
    if params:
        if not isinstance(context, dict):
            print("Error loading context: -p requires the context file to hold a mapping", file=sys.stderr)
            return 2
        context = {**context, **params}

    try:
        scaffold(
            args.template,
            args.dest,
            context,
            functions=DEFAULT_FUNCTIONS,
            extensions=[ScriptExtension(args.script)],
            exclude=args.exclude,
            template_suffix=args.suffix,
        )
    except ScaffoldError as e:
        print(f"Generation failed: {e}", file=sys.stderr)
        return 1

    print(f"Generation completed. Output at: {args.dest}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
