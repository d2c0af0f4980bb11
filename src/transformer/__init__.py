"""Scope-aware identifier classification, renaming and dead-declarator removal."""

from .core import TransformError, is_valid_identifier
from .declarators import (
    VariableDeclarators,
    find_variable_declarators,
    is_unreferenced,
    references_of,
    rename,
    requires_module,
)
from .identifiers import (
    declared_name,
    is_declarator_binding_identifier,
    is_reference_of,
    is_variable_reference,
    resolve_declarator,
)

__all__ = [
    "TransformError",
    "VariableDeclarators",
    "declared_name",
    "find_variable_declarators",
    "is_declarator_binding_identifier",
    "is_reference_of",
    "is_unreferenced",
    "is_valid_identifier",
    "is_variable_reference",
    "references_of",
    "rename",
    "requires_module",
    "resolve_declarator",
]
