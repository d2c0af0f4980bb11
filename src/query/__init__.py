"""Generic path, query and builder primitives over ESTree dict ASTs."""

from .builders import identifier, literal, match_node, nodes_equivalent
from .collection import Collection
from .node_types import NodeType, is_identifier, node_type, source_range
from .paths import ParentLink, Path

__all__ = [
    "Collection",
    "NodeType",
    "ParentLink",
    "Path",
    "identifier",
    "is_identifier",
    "literal",
    "match_node",
    "node_type",
    "nodes_equivalent",
    "source_range",
]
