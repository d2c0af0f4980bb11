"""
Result sets of paths and the generic query operations over them.

A `Collection` is an ordered list of `Path` objects. Queries (`find`,
`filter`) return new collections of the same class so typed collections such
as `transformer.VariableDeclarators` keep their transform methods through a
query chain. Collections never cache anything about the tree: every `find`
walks the tree as it is at call time.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Iterator, List, Mapping, Optional, Set, Type, TypeVar, Union

from emitter import EmitOptions, emit_source

from .builders import match_node
from .node_types import NodeType
from .paths import Path

C = TypeVar("C", bound="Collection")


class Collection:
    """An ordered set of paths into one document."""

    def __init__(self, paths: Iterable[Path], parent: Optional["Collection"] = None):
        self._paths: List[Path] = list(paths)
        self.parent = parent

    def __repr__(self) -> str:
        return f"<{type(self).__name__} size={len(self._paths)}>"

    def __len__(self) -> int:
        return len(self._paths)

    def __iter__(self) -> Iterator[Path]:
        return iter(self._paths)

    # ---------------------------------------------------------- construction

    @classmethod
    def from_paths(cls: Type[C], paths: Iterable[Path], parent: Optional["Collection"] = None) -> C:
        return cls(paths, parent=parent)

    @classmethod
    def from_document(cls: Type[C], document) -> C:
        return cls([document.root_path()])

    # -------------------------------------------------------------- accessors

    def paths(self) -> List[Path]:
        return list(self._paths)

    def nodes(self) -> List[Any]:
        return [path.node for path in self._paths]

    def size(self) -> int:
        return len(self._paths)

    def at(self, index: int) -> Path:
        return self._paths[index]

    def get_types(self) -> Set[str]:
        return {str(path.node.get("type")) for path in self._paths}

    @property
    def document(self):
        for path in self._paths:
            if path.document is not None:
                return path.document
        return self.parent.document if self.parent is not None else None

    # ---------------------------------------------------------------- queries

    def find(
        self,
        node_type: Union[NodeType, str],
        shape: Optional[Mapping[str, Any]] = None,
        *,
        collection_class: Optional[Type["Collection"]] = None,
    ) -> "Collection":
        """
        Find every node of `node_type` within the subtrees of this collection.

        The starting paths themselves are included. `shape` restricts matches
        to nodes whose fields match it (see `match_node`).
        """
        wanted = node_type.value if isinstance(node_type, NodeType) else node_type
        found: List[Path] = []
        for root in self._paths:
            for path in root.walk():
                if path.node.get("type") != wanted:
                    continue
                if shape is not None and not match_node(path.node, shape):
                    continue
                found.append(path)
        cls = collection_class or Collection
        return cls(found, parent=self)

    def filter(self: C, predicate: Callable[[Path], bool]) -> C:
        return type(self)([path for path in self._paths if predicate(path)], parent=self)

    def for_each(self: C, callback: Callable[[Path], Any]) -> C:
        for path in list(self._paths):
            callback(path)
        return self

    # ------------------------------------------------------------- mutations

    def remove(self: C) -> C:
        for path in self._paths:
            path.prune()
        return self

    def to_source(self, options: Optional[EmitOptions] = None) -> str:
        return emit_source(self.document, options).source


__all__ = ["Collection"]
