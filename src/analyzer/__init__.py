"""Scope analysis and name resolution for JavaScript ASTs."""

from .resolution import ScopeResolutionError, declaring_scope_of, scope_anchor
from .scope_tracker import (
    AnalysisIssue,
    Binding,
    BindingKind,
    Scope,
    ScopeTree,
    ScopeType,
    analyze_scopes,
)

__all__ = [
    "AnalysisIssue",
    "Binding",
    "BindingKind",
    "Scope",
    "ScopeResolutionError",
    "ScopeTree",
    "ScopeType",
    "analyze_scopes",
    "declaring_scope_of",
    "scope_anchor",
]
