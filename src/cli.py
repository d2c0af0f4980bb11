"""
Command-line interface for scope-aware JavaScript rewrites.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from analyzer import ScopeResolutionError
from frontend import FrontEndResult, run_frontend
from query import Collection
from transformer import TransformError, find_variable_declarators

logger = logging.getLogger("scopeshift")


def _format_location(line: int | None, column: int | None) -> str:
    if line is None:
        return ""
    if column is None:
        return f":{line}"
    return f":{line}:{column}"


def _collect_diagnostics(frontend_result: FrontEndResult) -> List[str]:
    diagnostics: List[str] = []
    source_name = frontend_result.parse.source_name

    for error in frontend_result.parse.errors:
        loc = _format_location(error.line, error.column)
        diagnostics.append(f"ERROR {source_name}{loc}: {error.description}")

    analysis = frontend_result.analysis
    if analysis:
        for issue in analysis.issues:
            loc = _format_location(issue.loc.line, issue.loc.column)
            diagnostics.append(f"WARNING {source_name}{loc}: {issue.message}")

    return diagnostics


def _load(args: argparse.Namespace):
    """Read and parse the input file; returns `(frontend_result, root)` or None on failure."""
    input_path = Path(args.input).resolve()
    if not input_path.exists():
        logger.error("Input file not found: %s", input_path)
        return None

    try:
        source = input_path.read_text(encoding="utf-8")
    except OSError as exc:
        logger.error("Failed to read %s: %s", input_path, exc)
        return None

    frontend_result = run_frontend(
        source,
        source_name=str(input_path),
        tolerant=not args.strict,
        source_type="module" if args.module else "script",
    )
    if frontend_result.parse.ast is None:
        logger.error("Parsing failed; no AST produced.")
        for error in frontend_result.parse.errors:
            loc = _format_location(error.line, error.column)
            logger.error("  %s%s", error.description, loc)
        return None

    return frontend_result, Collection.from_document(frontend_result.to_document())


def _finish(args: argparse.Namespace, frontend_result: FrontEndResult, root: Collection) -> int:
    output = root.to_source()
    if args.out:
        output_path = Path(args.out)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(output, encoding="utf-8")
    else:
        sys.stdout.write(output)

    diagnostics = _collect_diagnostics(frontend_result)
    for message in diagnostics:
        sys.stderr.write(message + "\n")

    has_errors = bool(frontend_result.parse.errors)
    if args.strict and diagnostics:
        has_errors = True
    return 1 if has_errors else 0


def rename_command(args: argparse.Namespace) -> int:
    loaded = _load(args)
    if loaded is None:
        return 1
    frontend_result, root = loaded

    declarators = find_variable_declarators(root, args.old_name)
    if args.requires:
        declarators = declarators.requiring(args.requires)
    if not declarators.size():
        logger.warning("No variable declarator named %r found.", args.old_name)

    try:
        declarators.rename_to(args.new_name)
    except (TransformError, ScopeResolutionError) as exc:
        logger.error("Rename failed: %s", exc)
        return 1
    logger.info("Renamed %d declarator(s) of %r to %r", declarators.size(), args.old_name, args.new_name)

    return _finish(args, frontend_result, root)


def prune_command(args: argparse.Namespace) -> int:
    loaded = _load(args)
    if loaded is None:
        return 1
    frontend_result, root = loaded

    declarators = find_variable_declarators(root)
    try:
        survivors = declarators.remove_unreferenced()
    except (TransformError, ScopeResolutionError) as exc:
        logger.error("Pruning failed: %s", exc)
        return 1
    logger.info("Removed %d unreferenced declarator(s)", declarators.size() - survivors.size())

    return _finish(args, frontend_result, root)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("input", help="Path to the JavaScript file")
    parser.add_argument(
        "--out",
        help="Write the result to this path instead of standard output",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Treat warnings as errors and disable tolerant parsing.",
    )
    parser.add_argument(
        "--module",
        action="store_true",
        help="Parse the input as an ES module (enables import/export syntax).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every transform step.",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scopeshift", description="Scope-aware renaming and dead-declaration removal for JavaScript"
    )
    subparsers = parser.add_subparsers(dest="command")

    rename_parser = subparsers.add_parser("rename", help="Rename a variable and all its references")
    _add_common_arguments(rename_parser)
    rename_parser.add_argument("--from", dest="old_name", required=True, help="Current variable name")
    rename_parser.add_argument("--to", dest="new_name", required=True, help="New variable name")
    rename_parser.add_argument(
        "--requires",
        action="append",
        help="Only rename declarators initialised with require() of this module (repeatable)",
    )
    rename_parser.set_defaults(func=rename_command)

    prune_parser = subparsers.add_parser("prune", help="Remove unreferenced variable declarators")
    _add_common_arguments(prune_parser)
    prune_parser.set_defaults(func=prune_command)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return 1
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
