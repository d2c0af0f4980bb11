"""
Write a transformed JavaScript document back to source text.

Transforms never regenerate code. Each mutation records a replacement over a
source range in an `EditList`, and `emit_source` splices those replacements
into the original text, so formatting and comments outside the edited ranges
survive unchanged.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Tuple

logger = logging.getLogger(__name__)

Span = Tuple[int, int]


class EmitError(RuntimeError):
    """Raised when a document cannot be written back to source."""


class EditList:
    """Pending text replacements keyed by source range."""

    def __init__(self) -> None:
        self._edits: Dict[Span, str] = {}

    def __len__(self) -> int:
        return len(self._edits)

    def replace(self, span: Span, text: str) -> None:
        # A later edit of the same range supersedes the earlier one.
        self._edits[(int(span[0]), int(span[1]))] = text

    def delete(self, span: Span) -> None:
        self.replace(span, "")

    def ordered(self) -> Iterator[Tuple[Span, str]]:
        """Edits by start offset, wider edits first at a shared start."""
        return iter(sorted(self._edits.items(), key=lambda item: (item[0][0], -item[0][1])))

    def apply(self, source: str) -> str:
        buffer = io.StringIO()
        cursor = 0
        for (start, end), text in self.ordered():
            if start < cursor:
                if end <= cursor:
                    # Inside a region an earlier edit already rewrote.
                    continue
                buffer.write(text)
                cursor = end
                continue
            buffer.write(source[cursor:start])
            buffer.write(text)
            cursor = end
        buffer.write(source[cursor:])
        return buffer.getvalue()


@dataclass(frozen=True)
class EmitOptions:
    ensure_trailing_newline: bool = False


@dataclass(frozen=True)
class EmitResult:
    source: str
    edit_count: int


def emit_source(document, options: Optional[EmitOptions] = None) -> EmitResult:
    """
    Render a document's source with all recorded edits applied.
    """
    options = options or EmitOptions()
    if document is None or document.source is None:
        raise EmitError("Document has no original source text to print from.")

    edits: EditList = document.edits
    source = edits.apply(document.source)
    if options.ensure_trailing_newline and not source.endswith("\n"):
        source += "\n"

    logger.debug("Emitted %s with %d edit(s)", document.source_name, len(edits))
    return EmitResult(source=source, edit_count=len(edits))


__all__ = ["EditList", "EmitError", "EmitOptions", "EmitResult", "emit_source"]
