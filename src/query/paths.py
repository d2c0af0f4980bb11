"""
Paths: handles on ESTree nodes that remember how they were reached.

A `Path` pairs a node with a `ParentLink` naming the parent path and the field
(and list index) of the parent that holds the node. Classification code reads
the link instead of comparing node identities, so a node's role in its parent
(property key versus value, callee versus argument) is explicit.

Mutations made through a path (`set_name`, `replace_text`, `prune`) update the
tree in place and record the matching text edit on the owning document, so the
emitter can reproduce everything else byte-for-byte.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .node_types import META_KEYS, NodeType, is_node, node_type, source_range


@dataclass(frozen=True)
class ParentLink:
    """Where a node sits in its parent: `parent.node[field]` or `parent.node[field][index]`."""

    path: "Path"
    field: str
    index: Optional[int] = None


class Path:
    """A node plus its chain of parent links up to the program root."""

    __slots__ = ("node", "link", "document")

    def __init__(self, node: Dict[str, Any], link: Optional[ParentLink] = None, document=None):
        self.node = node
        self.link = link
        self.document = document

    def __repr__(self) -> str:
        name = self.node.get("name")
        label = f"{self.node.get('type')}({name})" if name else str(self.node.get("type"))
        field = f" .{self.link.field}" if self.link else ""
        return f"<Path {label}{field}>"

    # ------------------------------------------------------------- navigation

    @property
    def parent(self) -> Optional["Path"]:
        return self.link.path if self.link else None

    @property
    def parent_node(self) -> Optional[Dict[str, Any]]:
        return self.link.path.node if self.link else None

    @property
    def field(self) -> Optional[str]:
        return self.link.field if self.link else None

    @property
    def type(self) -> Optional[NodeType]:
        return node_type(self.node)

    @property
    def scope(self):
        """The scope of the nearest scope-establishing node, this node included."""
        tree = self.document.scope_tree if self.document is not None else None
        if tree is None:
            return None
        path: Optional[Path] = self
        while path is not None:
            scope = tree.scope_for_node(path.node)
            if scope is not None:
                return scope
            path = path.parent
        return None

    def ancestors(self) -> Iterator["Path"]:
        """Yield this path and then each parent up to the root."""
        path: Optional[Path] = self
        while path is not None:
            yield path
            path = path.parent

    def children(self) -> Iterator["Path"]:
        for key, value in self.node.items():
            if key in META_KEYS:
                continue
            if isinstance(value, list):
                for index, item in enumerate(value):
                    if is_node(item):
                        yield Path(item, ParentLink(self, key, index), self.document)
            elif is_node(value):
                yield Path(value, ParentLink(self, key), self.document)

    def walk(self) -> Iterator["Path"]:
        """Yield this path and every descendant path in document order."""
        stack: List[Path] = [self]
        while stack:
            path = stack.pop()
            yield path
            stack.extend(reversed(list(path.children())))

    # --------------------------------------------------------------- mutation

    def set_name(self, name: str, text: Optional[str] = None) -> None:
        """Rename an identifier node; `text` overrides what is printed in its place."""
        self.node["name"] = name
        self.replace_text(name if text is None else text)

    def replace_text(self, text: str) -> None:
        self._record(source_range(self.node), text)

    def prune(self) -> None:
        """Remove this node from its parent, collapsing emptied declarations."""
        if self.link is None:
            raise ValueError("Cannot prune the root path.")
        parent = self.link.path
        if (
            self.type is NodeType.VARIABLE_DECLARATOR
            and parent.type is NodeType.VARIABLE_DECLARATION
        ):
            self._prune_declarator(parent)
            return
        container = parent.node.get(self.link.field)
        if isinstance(container, list):
            self._prune_from_list(parent, container)
        else:
            self._prune_slot(parent)

    def _prune_declarator(self, declaration: "Path") -> None:
        declarations = declaration.node.get("declarations") or []
        index = _index_of(declarations, self.node)
        if index is None:
            return
        if len(declarations) == 1:
            declaration.prune()
            return
        if index + 1 < len(declarations):
            edits = self._gap_edits(declarations[index + 1], forward=True)
        else:
            edits = self._gap_edits(declarations[index - 1], forward=False)
        del declarations[index]
        for span, text in edits:
            self._record(span, text)

    def _prune_from_list(self, parent: "Path", container: List[Any]) -> None:
        index = _index_of(container, self.node)
        if index is None:
            return
        if index + 1 < len(container):
            edits = self._gap_edits(container[index + 1], forward=True)
        elif index > 0:
            edits = self._gap_edits(container[index - 1], forward=False)
        else:
            edits = [(source_range(self.node), "")]
        del container[index]
        if not container and parent.type is NodeType.BLOCK_STATEMENT:
            parent.replace_text("{}")
            return
        for span, text in edits:
            self._record(span, text)

    def _prune_slot(self, parent: "Path") -> None:
        field = self.link.field
        if parent.node.get(field) is not self.node:
            return
        if parent.type is NodeType.FOR_STATEMENT and field in {"init", "update", "test"}:
            parent.node[field] = None
            self._record(source_range(self.node), "")
            return
        parent.node[field] = {"type": NodeType.EMPTY_STATEMENT.value, "range": self.node.get("range")}
        self.replace_text(";")

    def _gap_edits(
        self, neighbour: Dict[str, Any], *, forward: bool
    ) -> List[Tuple[Tuple[int, int], str]]:
        """
        Edits removing this node together with the gap up to the next sibling
        (`forward`) or back to the previous one. Comments in the gap stay; the
        text around them is dropped, keeping one line break where there was one.
        """
        own = source_range(self.node)
        other = source_range(neighbour)
        if own is None or other is None:
            return []
        gap = (own[1], other[0]) if forward else (other[1], own[0])
        comments = sorted(
            span for span in self._comment_ranges() if gap[0] <= span[0] and span[1] <= gap[1]
        )
        if not comments:
            return [((own[0], other[0]) if forward else (other[1], own[1]), "")]

        segments = []
        cursor = gap[0]
        for start, end in comments:
            segments.append((cursor, start))
            cursor = end
        segments.append((cursor, gap[1]))

        source = self.document.source or ""
        edits = []
        for index, (start, end) in enumerate(segments):
            if forward and index == 0:
                edits.append(((own[0], end), ""))
                continue
            text = "\n" if "\n" in source[start:end] else ""
            if start < end:
                edits.append(((start, end), text))
        if not forward:
            edits.append((own, ""))
        return edits

    def _comment_ranges(self) -> List[Tuple[int, int]]:
        program = self.document.ast if self.document is not None else None
        comments = (program.get("comments") if isinstance(program, dict) else None) or []
        return [span for span in map(source_range, comments) if span is not None]

    def _record(self, span: Optional[Tuple[int, int]], text: str) -> None:
        if span is None or self.document is None:
            return
        self.document.edits.replace(span, text)


def _index_of(items: List[Any], node: Dict[str, Any]) -> Optional[int]:
    for index, item in enumerate(items):
        if item is node:
            return index
    return None


__all__ = ["ParentLink", "Path"]
