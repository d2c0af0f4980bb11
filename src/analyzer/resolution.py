"""
Declaring-scope resolution.

The declaring scope of a name, seen from a starting scope, is the first scope
on the chain `start, start.parent, ...` whose `declares(name)` holds. It is
discovered by walking, never assumed from syntax: a declaration's syntactic
scope may not be the scope that binds it (a `var` inside a catch body belongs
to the enclosing function).
"""

from __future__ import annotations

from .scope_tracker import Scope


class ScopeResolutionError(LookupError):
    """Raised when no scope on the chain declares a name."""

    def __init__(self, name: str, scope: Scope):
        super().__init__(
            f"No scope declares {name!r} (searched upward from scope {scope.scope_id})."
        )
        self.name = name
        self.scope = scope


def declaring_scope_of(name: str, start_scope: Scope) -> Scope:
    """
    Walk from `start_scope` toward the root and return the first scope declaring `name`.

    Raises:
        ScopeResolutionError: if no scope on the chain declares `name`.
    """
    scope = start_scope
    while scope is not None:
        if scope.declares(name):
            return scope
        scope = scope.parent
    raise ScopeResolutionError(name, start_scope)


def scope_anchor(path, scope: Scope):
    """
    Return the ancestor of `path` (inclusive) whose node establishes `scope`.

    Raises:
        ScopeResolutionError: if `scope` does not enclose `path`.
    """
    for ancestor in path.ancestors():
        if ancestor.node is scope.node:
            return ancestor
    raise ScopeResolutionError(str(path.node.get("name", path.node.get("type"))), scope)


__all__ = ["ScopeResolutionError", "declaring_scope_of", "scope_anchor"]
