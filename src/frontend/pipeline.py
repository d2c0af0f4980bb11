"""
Front-end integration utilities stitching together parsing and scope analysis.

The `run_frontend` function accepts raw JavaScript source, invokes the parser to
obtain an AST, optionally runs scope analysis, and persists cached artefacts
when requested. `load` goes one step further and returns the root collection
of a fresh `Document`, ready for queries and transforms.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

from analyzer import ScopeTree, analyze_scopes
from parser import ParseResult, parse_js
from query import Collection
from transformer import TransformError

from .document import Document

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrontEndResult:
    """Combined output from the parsing and analysis pipeline."""

    parse: ParseResult
    analysis: Optional[ScopeTree]

    @property
    def has_ast(self) -> bool:
        return self.parse.ast is not None

    @property
    def diagnostics(self):
        """Aggregate diagnostics from parse recovery and semantic issues."""
        diagnostics = list(self.parse.errors)
        if self.analysis:
            diagnostics.extend(self.analysis.issues)
        return diagnostics

    def to_document(self) -> Document:
        if self.parse.ast is None:
            raise TransformError(f"No AST was produced for {self.parse.source_name}.")
        return Document.from_ast(
            self.parse.ast,
            source=self.parse.source,
            source_name=self.parse.source_name,
            scope_tree=self.analysis,
        )


def run_frontend(
    source: str,
    *,
    source_name: str = "<input>",
    tolerant: bool = True,
    analyze: bool = True,
    source_type: str = "script",
    cache_dir: Optional[Union[str, Path]] = None,
) -> FrontEndResult:
    """
    Execute parsing and optional scope analysis for JavaScript input.

    Args:
        source: Raw JavaScript source text.
        source_name: Identifier used in diagnostics, e.g. file path.
        tolerant: Forwarded to parser; when True esprima attempts recovery.
        analyze: Toggle to disable scope analysis.
        source_type: `"script"` or `"module"` to control parsing of import/export.
        cache_dir: Optional directory to write parse artefacts (`None` disables).

    Returns:
        FrontEndResult containing the parser output and optional scope tree.
    """
    parse_result = parse_js(
        source,
        source_name=source_name,
        tolerant=tolerant,
        source_type=source_type,
    )

    analysis_result: Optional[ScopeTree] = None
    if analyze and parse_result.ast is not None:
        analysis_result = analyze_scopes(parse_result.ast, source_name=source_name)

    if cache_dir is not None:
        _persist_parse(cache_dir, parse_result)

    return FrontEndResult(parse=parse_result, analysis=analysis_result)


def load(
    source: str,
    *,
    source_name: str = "<input>",
    tolerant: bool = True,
    source_type: str = "script",
) -> Collection:
    """
    Parse and analyse `source`, returning the root collection of its document.

    Raises:
        TransformError: If no AST could be produced.
    """
    result = run_frontend(
        source,
        source_name=source_name,
        tolerant=tolerant,
        source_type=source_type,
    )
    for error in result.parse.errors:
        logger.warning("%s: %s", source_name, error.description)
    return Collection.from_document(result.to_document())


def load_ast(
    ast: Dict[str, Any],
    *,
    source: Optional[str] = None,
    source_name: str = "<input>",
) -> Collection:
    """Wrap an already-built ESTree program (e.g. from a Flow-aware parser)."""
    return Collection.from_document(
        Document.from_ast(ast, source=source, source_name=source_name)
    )


def _persist_parse(cache_dir: Union[str, Path], parse_result: ParseResult) -> None:
    """Store the raw parse output to disk for reuse in subsequent runs."""
    path = Path(cache_dir)
    path.mkdir(parents=True, exist_ok=True)
    cache_file = path / f"{parse_result.source_hash}.json"
    cache_file.write_text(parse_result.to_json(), encoding="utf-8")


__all__ = ["FrontEndResult", "load", "load_ast", "run_frontend"]
