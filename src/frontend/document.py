"""A parsed program together with its scope tree and pending text edits."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from analyzer import ScopeTree, analyze_scopes
from emitter import EditList
from query import Path


@dataclass
class Document:
    ast: Dict[str, Any]
    source: Optional[str]
    source_name: str
    scope_tree: ScopeTree
    edits: EditList = field(default_factory=EditList)

    @classmethod
    def from_ast(
        cls,
        ast: Dict[str, Any],
        *,
        source: Optional[str] = None,
        source_name: str = "<input>",
        scope_tree: Optional[ScopeTree] = None,
    ) -> "Document":
        if scope_tree is None:
            scope_tree = analyze_scopes(ast, source_name=source_name)
        return cls(ast=ast, source=source, source_name=source_name, scope_tree=scope_tree)

    def root_path(self) -> Path:
        return Path(self.ast, None, self)


__all__ = ["Document"]
