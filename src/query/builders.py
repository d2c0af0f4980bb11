"""Node builders and structural comparison for ESTree dicts."""

from __future__ import annotations

from typing import Any, Dict, Mapping

from .node_types import NodeType

# Metadata that does not take part in structural equality.
_IGNORED_KEYS = frozenset({"loc", "range", "raw", "comments", "leadingComments", "trailingComments"})


def identifier(name: str) -> Dict[str, Any]:
    return {"type": NodeType.IDENTIFIER.value, "name": name}


def literal(value: Any) -> Dict[str, Any]:
    return {"type": NodeType.LITERAL.value, "value": value}


def nodes_equivalent(left: Any, right: Any) -> bool:
    """True if two subtrees have the same shape and values, ignoring locations."""
    if isinstance(left, dict) and isinstance(right, dict):
        left_keys = {key for key, value in left.items() if key not in _IGNORED_KEYS and value is not None}
        right_keys = {key for key, value in right.items() if key not in _IGNORED_KEYS and value is not None}
        if left_keys != right_keys:
            return False
        return all(nodes_equivalent(left[key], right[key]) for key in left_keys)
    if isinstance(left, list) and isinstance(right, list):
        return len(left) == len(right) and all(
            nodes_equivalent(a, b) for a, b in zip(left, right)
        )
    return left == right


def match_node(node: Any, shape: Mapping[str, Any]) -> bool:
    """
    Check `node` against a partial shape.

    Every key of `shape` must be present in `node`; nested mappings are matched
    recursively, anything else by equality.
    """
    if not isinstance(node, dict):
        return False
    for key, expected in shape.items():
        if key not in node:
            return False
        actual = node[key]
        if isinstance(expected, Mapping):
            if not match_node(actual, expected):
                return False
        elif actual != expected:
            return False
    return True


__all__ = ["identifier", "literal", "match_node", "nodes_equivalent"]
