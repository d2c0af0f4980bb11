"""
Queries and transforms over variable declarators.

`VariableDeclarators` is the typed collection returned by
`find_variable_declarators`; it carries the two scope-aware transforms:

- `rename_to` renames a declared variable together with every reference that
  resolves to it, leaving same-spelled property keys, method names and
  shadowing variables alone.
- `remove_unreferenced` deletes declarators whose variable is never referenced
  in its declaring scope.

Each declarator is resolved against the tree as it stands when it is
processed, so later declarators observe edits made for earlier ones.
"""

from __future__ import annotations

import copy
import logging
from typing import Callable, Iterable, Optional, Union

from analyzer import scope_anchor
from query import (
    Collection,
    NodeType,
    Path,
    identifier,
    is_identifier,
    literal,
    node_type,
    nodes_equivalent,
    source_range,
)

from .core import TransformError, is_valid_identifier
from .identifiers import (
    declared_name,
    is_declarator_binding_identifier,
    is_reference_of,
    resolve_declarator,
)

logger = logging.getLogger(__name__)

_LOOP_HEADS = frozenset({NodeType.FOR_IN_STATEMENT, NodeType.FOR_OF_STATEMENT})


class VariableDeclarators(Collection):
    """A collection of `VariableDeclarator` paths."""

    def requiring(self, names: Union[str, Iterable[str], None] = None) -> "VariableDeclarators":
        return self.filter(requires_module(names))

    def rename_to(self, new_name: str) -> "VariableDeclarators":
        """Rename each declarator's variable and all its references to `new_name`."""
        for path in self.paths():
            rename(path, new_name)
        return self

    def remove_unreferenced(self) -> "VariableDeclarators":
        """
        Remove declarators whose variable is never referenced.

        All declarators are checked first, then the unreferenced ones are
        pruned. Returns the surviving declarators.
        """
        unreferenced = self.filter(is_unreferenced)
        unreferenced.remove()
        removed = {id(path.node) for path in unreferenced}
        logger.debug("Removed %d of %d declarator(s)", len(removed), len(self))
        return VariableDeclarators(
            [path for path in self if id(path.node) not in removed], parent=self
        )


def find_variable_declarators(collection: Collection, name: Optional[str] = None) -> VariableDeclarators:
    """Find all variable declarators below `collection`, optionally by declared name."""
    shape = {"id": {"name": name}} if name else None
    return collection.find(
        NodeType.VARIABLE_DECLARATOR, shape, collection_class=VariableDeclarators
    )


def requires_module(names: Union[str, Iterable[str], None] = None) -> Callable[[Path], bool]:
    """
    Match declarators initialised with `require(<module>)`.

    Args:
        names: A module name or several; None accepts any module literal.
    """
    if isinstance(names, str):
        names = [names]
    elif names is not None:
        names = list(names)
    require = identifier("require")

    def predicate(path: Path) -> bool:
        node = path.node
        init = node.get("init")
        if (
            node_type(node) is not NodeType.VARIABLE_DECLARATOR
            or node_type(init) is not NodeType.CALL_EXPRESSION
            or not nodes_equivalent(init.get("callee"), require)
        ):
            return False
        if not names:
            return True
        arguments = init.get("arguments") or []
        return bool(arguments) and any(
            nodes_equivalent(arguments[0], literal(name)) for name in names
        )

    return predicate


def references_of(declarator_path: Path, *, include_binding: bool = True) -> Collection:
    """
    Identifiers in the declaring scope that refer to the declarator's variable.

    With `include_binding=False`, binding occurrences (declaration ids) are left out.
    """
    name, declaring_scope = resolve_declarator(declarator_path)
    anchor = scope_anchor(declarator_path, declaring_scope)
    candidates = Collection.from_paths([anchor]).find(NodeType.IDENTIFIER, {"name": name})
    if not include_binding:
        candidates = candidates.filter(lambda path: not is_declarator_binding_identifier(path))
    return candidates.filter(is_reference_of(declarator_path))


def rename(declarator_path: Path, new_name: str) -> int:
    """
    Rename one declarator's variable and its references; returns the number renamed.

    Raises:
        TransformError: for an invalid `new_name` or a destructuring declarator.
        ScopeResolutionError: if the declarator's name cannot be resolved.
    """
    if not is_valid_identifier(new_name):
        raise TransformError(f"{new_name!r} is not a valid identifier name.", declarator_path.node)
    if declared_name(declarator_path) is None:
        raise TransformError("Cannot rename a destructuring declarator.", declarator_path.node)

    # Resolve everything before the first edit: renaming the binding
    # occurrence changes what the declaring scope declares.
    matches = references_of(declarator_path).paths()
    old_name = declared_name(declarator_path)
    for path in matches:
        _rename_identifier(path, new_name)
    logger.debug("Renamed %d occurrence(s) of %r to %r", len(matches), old_name, new_name)
    return len(matches)


def _rename_identifier(path: Path, new_name: str) -> None:
    prop = _shorthand_property(path)
    if prop is not None:
        key = prop["key"]
        if key is path.node:
            key = prop["key"] = copy.deepcopy(key)
        shorthand = key.get("name") == new_name
        prop["shorthand"] = shorthand
        text = new_name if shorthand else f"{key.get('name')}: {new_name}"
        path.set_name(new_name, text=text)
        return
    specifier = path.parent_node
    if path.field == "local" and node_type(specifier) is NodeType.EXPORT_SPECIFIER:
        exported = specifier.get("exported")
        if exported is path.node:
            exported = specifier["exported"] = copy.deepcopy(exported)
        if is_identifier(exported) and source_range(exported) == source_range(path.node):
            # `export {x}` keeps exporting the name `x`.
            exported_name = exported.get("name")
            text = new_name if exported_name == new_name else f"{new_name} as {exported_name}"
            path.set_name(new_name, text=text)
            return
    path.set_name(new_name)


def _shorthand_property(path: Path):
    """The shorthand property (`{x}` or `{x = 1}`) whose value is `path`, if any."""
    value_path = path
    if path.field == "left" and path.parent.type is NodeType.ASSIGNMENT_PATTERN:
        # `{x = 1}` holds the identifier one level down.
        value_path = path.parent
    if value_path.field != "value" or value_path.parent.type is not NodeType.PROPERTY:
        return None
    prop = value_path.parent_node
    if not is_identifier(prop.get("key")) or not _was_shorthand(prop, path.node):
        return None
    return prop


def _was_shorthand(prop, value) -> bool:
    # An expanded `{x}` keeps key and value on the same source range.
    if prop.get("shorthand"):
        return True
    span = source_range(value)
    return span is not None and span == source_range(prop["key"])


def is_unreferenced(declarator_path: Path) -> bool:
    """True if a plain-identifier declarator has no references in its declaring scope."""
    if declared_name(declarator_path) is None:
        return False
    if _in_loop_head(declarator_path) or _is_exported(declarator_path):
        return False
    return references_of(declarator_path, include_binding=False).size() == 0


def _in_loop_head(declarator_path: Path) -> bool:
    declaration = declarator_path.parent
    if declaration is None or declaration.link is None:
        return False
    return declaration.field == "left" and node_type(declaration.parent_node) in _LOOP_HEADS


def _is_exported(declarator_path: Path) -> bool:
    declaration = declarator_path.parent
    if declaration is None or declaration.link is None:
        return False
    return node_type(declaration.parent_node) is NodeType.EXPORT_NAMED_DECLARATION


__all__ = [
    "VariableDeclarators",
    "find_variable_declarators",
    "is_unreferenced",
    "references_of",
    "rename",
    "requires_module",
]
