"""
Identifier classification and reference matching.

Two identifiers with the same spelling are not necessarily the same variable.
`is_variable_reference` rules out name-only positions from syntax alone
(property keys, non-computed member properties, method names, type-member
keys). `is_reference_of` adds scope resolution: a reference belongs to a
declarator only if both resolve to the same declaring scope, so shadowing
declarations in nested functions are kept apart.
"""

from __future__ import annotations

from typing import Callable, Dict, Optional, Tuple

from analyzer import Scope, declaring_scope_of
from query import NodeType, Path, is_identifier, node_type

from .core import TransformError

# Parent kinds whose `field` holds a name rather than a variable. The flag says
# whether a truthy `computed` turns that field back into an expression.
_NAME_ONLY_FIELDS: Dict[NodeType, Tuple[str, bool]] = {
    NodeType.MEMBER_EXPRESSION: ("property", True),  # obj.name
    NodeType.OPTIONAL_MEMBER_EXPRESSION: ("property", True),  # obj?.name
    NodeType.PROPERTY: ("key", True),  # {name: expr}
    NodeType.OBJECT_PROPERTY: ("key", True),
    NodeType.OBJECT_METHOD: ("key", True),
    NodeType.METHOD_DEFINITION: ("key", True),  # class A { name() {} }
    NodeType.CLASS_METHOD: ("key", True),
    NodeType.OBJECT_TYPE_PROPERTY: ("key", False),  # type T = {name: U}
    NodeType.EXPORT_SPECIFIER: ("exported", False),  # export {local as name}
}

_BINDING_PARENTS = frozenset(
    {
        NodeType.VARIABLE_DECLARATOR,
        NodeType.FUNCTION_DECLARATION,
        NodeType.CLASS_DECLARATION,
        NodeType.TYPE_ALIAS,
    }
)


def is_variable_reference(path: Path) -> bool:
    """True unless the identifier at `path` only names a property, method or type member."""
    link = path.link
    if link is None:
        return True
    parent = link.path.node
    rule = _NAME_ONLY_FIELDS.get(node_type(parent))
    if rule is None:
        return True
    field, honours_computed = rule
    if link.field != field:
        return True
    if honours_computed and parent.get("computed"):
        return True
    return False


def is_declarator_binding_identifier(path: Path) -> bool:
    """True if `path` is the `id` of a variable, function, class or type-alias declaration."""
    link = path.link
    return (
        link is not None
        and link.field == "id"
        and node_type(link.path.node) in _BINDING_PARENTS
    )


def declared_name(declarator_path: Path) -> Optional[str]:
    """The name a declarator binds, or None for destructuring patterns."""
    identifier = declarator_path.node.get("id")
    if is_identifier(identifier):
        return identifier.get("name")
    return None


def _scope_of(path: Path) -> Scope:
    scope = path.scope
    if scope is None:
        raise TransformError("Path is not attached to a scope-analysed document.", path.node)
    return scope


def resolve_declarator(declarator_path: Path) -> Tuple[str, Scope]:
    """
    Return the declarator's name and its declaring scope.

    Raises:
        TransformError: for destructuring declarators.
        ScopeResolutionError: if no enclosing scope declares the name.
    """
    name = declared_name(declarator_path)
    if name is None:
        raise TransformError(
            "Declarator does not bind a plain identifier.", declarator_path.node
        )
    return name, declaring_scope_of(name, _scope_of(declarator_path))


def is_reference_of(declarator_path: Path) -> Callable[[Path], bool]:
    """
    Build a predicate matching identifiers that refer to the declarator's variable.

    The declaring scope is resolved now, before any caller mutates the tree.
    """
    name, declaring_scope = resolve_declarator(declarator_path)

    def predicate(path: Path) -> bool:
        if path.type is not NodeType.IDENTIFIER or path.node.get("name") != name:
            return False
        if not is_variable_reference(path):
            return False
        return declaring_scope_of(name, _scope_of(path)) is declaring_scope

    return predicate


__all__ = [
    "declared_name",
    "is_declarator_binding_identifier",
    "is_reference_of",
    "is_variable_reference",
    "resolve_declarator",
]
