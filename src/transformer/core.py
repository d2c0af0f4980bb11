"""
Shared pieces of the transformation layer: the error type raised when a
transform cannot be applied, and validation of identifier names supplied by
callers.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Optional


class TransformError(RuntimeError):
    """Raised when a transform cannot be applied to a node."""

    def __init__(self, message: str, node: Optional[Dict[str, Any]] = None):
        loc = ""
        if node and isinstance(node, dict):
            loc_meta = node.get("loc") or {}
            start = loc_meta.get("start") or {}
            line = start.get("line")
            column = start.get("column")
            if line is not None and column is not None:
                loc = f" (line {line}, column {column})"
        super().__init__(f"{message}{loc}")
        self.node = node


_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

RESERVED_WORDS = frozenset(
    """
    break case catch class const continue debugger default delete do else enum
    export extends false finally for function if import in instanceof new null
    return super switch this throw true try typeof var void while with yield
    let static implements interface package private protected public await
    """.split()
)


def is_valid_identifier(name: str) -> bool:
    return bool(_IDENTIFIER_RE.match(name or "")) and name not in RESERVED_WORDS


__all__ = ["RESERVED_WORDS", "TransformError", "is_valid_identifier"]
