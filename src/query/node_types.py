"""
Node kinds the resolution engine distinguishes.

ESTree nodes stay plain dicts (as esprima produces them); this module gives the
`type` tags the engine branches on a closed enum so classification code can
compare against members instead of loose strings.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class NodeType(str, Enum):
    PROGRAM = "Program"
    IDENTIFIER = "Identifier"
    LITERAL = "Literal"

    VARIABLE_DECLARATION = "VariableDeclaration"
    VARIABLE_DECLARATOR = "VariableDeclarator"
    FUNCTION_DECLARATION = "FunctionDeclaration"
    FUNCTION_EXPRESSION = "FunctionExpression"
    ARROW_FUNCTION_EXPRESSION = "ArrowFunctionExpression"
    CLASS_DECLARATION = "ClassDeclaration"
    CLASS_EXPRESSION = "ClassExpression"
    TYPE_ALIAS = "TypeAlias"
    IMPORT_DECLARATION = "ImportDeclaration"
    EXPORT_NAMED_DECLARATION = "ExportNamedDeclaration"
    EXPORT_SPECIFIER = "ExportSpecifier"

    MEMBER_EXPRESSION = "MemberExpression"
    OPTIONAL_MEMBER_EXPRESSION = "OptionalMemberExpression"
    CALL_EXPRESSION = "CallExpression"
    PROPERTY = "Property"
    OBJECT_PROPERTY = "ObjectProperty"
    OBJECT_METHOD = "ObjectMethod"
    METHOD_DEFINITION = "MethodDefinition"
    CLASS_METHOD = "ClassMethod"
    OBJECT_TYPE_PROPERTY = "ObjectTypeProperty"

    ASSIGNMENT_PATTERN = "AssignmentPattern"
    ARRAY_PATTERN = "ArrayPattern"
    OBJECT_PATTERN = "ObjectPattern"
    REST_ELEMENT = "RestElement"

    BLOCK_STATEMENT = "BlockStatement"
    EMPTY_STATEMENT = "EmptyStatement"
    CATCH_CLAUSE = "CatchClause"
    FOR_STATEMENT = "ForStatement"
    FOR_IN_STATEMENT = "ForInStatement"
    FOR_OF_STATEMENT = "ForOfStatement"
    WITH_STATEMENT = "WithStatement"


FUNCTION_TYPES = frozenset(
    {
        NodeType.FUNCTION_DECLARATION,
        NodeType.FUNCTION_EXPRESSION,
        NodeType.ARROW_FUNCTION_EXPRESSION,
    }
)

# Keys holding metadata rather than child nodes.
META_KEYS = frozenset(
    {"loc", "range", "comments", "tokens", "errors", "leadingComments", "trailingComments"}
)


def node_type(node: Any) -> Optional[NodeType]:
    """Return the `NodeType` of an ESTree dict, or None for kinds outside the enum."""
    if not isinstance(node, dict):
        return None
    try:
        return NodeType(node.get("type"))
    except ValueError:
        return None


def is_node(value: Any) -> bool:
    return isinstance(value, dict) and isinstance(value.get("type"), str)


def is_identifier(node: Any) -> bool:
    return node_type(node) is NodeType.IDENTIFIER


def source_range(node: Dict[str, Any]):
    """Return `(start, end)` offsets for a node, or None when it has no range."""
    span = node.get("range") if isinstance(node, dict) else None
    if not span or len(span) != 2:
        return None
    return int(span[0]), int(span[1])


__all__ = [
    "FUNCTION_TYPES",
    "META_KEYS",
    "NodeType",
    "is_identifier",
    "is_node",
    "node_type",
    "source_range",
]
