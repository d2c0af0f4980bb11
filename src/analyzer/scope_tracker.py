"""
Scope analysis for JavaScript ASTs.

The analyzer walks an esprima-compatible AST and builds a tree of lexical
scopes at function/program granularity: one scope per program, function
(declaration, expression or arrow) and catch clause. Only the topology is
stored. Which names a scope binds is re-read from the tree on every query
(`Scope.scan`), so renames and removals made after analysis are observed
immediately without rebuilding the tree.

Block-scoped declarations (`let`, `const`, classes) are attributed to the
nearest enclosing function or program scope, as are `var` declarations found
inside catch bodies. The catch scope itself binds only its parameter, so a
declaration's syntactic scope can differ from the scope that declares it; see
`analyzer.resolution.declaring_scope_of`.

Constructs that make static resolution unreliable (`with`, direct `eval`) are
reported as issues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from query.node_types import FUNCTION_TYPES, META_KEYS, NodeType, node_type


class ScopeType(str, Enum):
    GLOBAL = "global"
    FUNCTION = "function"
    CATCH = "catch"


class BindingKind(str, Enum):
    VAR = "var"
    LET = "let"
    CONST = "const"
    FUNCTION = "function"
    CLASS = "class"
    PARAMETER = "parameter"
    CATCH_PARAMETER = "catch_parameter"
    TYPE_ALIAS = "type_alias"
    IMPORT = "import"


_DECLARATION_KINDS = {
    "var": BindingKind.VAR,
    "let": BindingKind.LET,
    "const": BindingKind.CONST,
}


@dataclass(frozen=True)
class SourcePosition:
    line: Optional[int]
    column: Optional[int]


@dataclass(frozen=True)
class Binding:
    """Represents a single identifier binding within a scope."""

    name: str
    kind: BindingKind
    loc: SourcePosition
    node: Dict[str, Any]


@dataclass(eq=False)
class Scope:
    """A lexical scope established by a program, function or catch clause."""

    scope_id: str
    scope_type: ScopeType
    node: Dict[str, Any] = field(repr=False)
    parent: Optional["Scope"] = field(default=None, repr=False)
    children: List["Scope"] = field(default_factory=list, repr=False)

    def add_child(self, child: "Scope") -> None:
        self.children.append(child)

    def scan(self) -> Dict[str, List[Binding]]:
        """Collect the bindings this scope (not an ancestor) holds in the current tree."""
        return _BindingCollector(self).collect()

    @property
    def bindings(self) -> Dict[str, List[Binding]]:
        return self.scan()

    def declares(self, name: str) -> bool:
        return name in self.scan()


@dataclass(frozen=True)
class AnalysisIssue:
    code: str
    message: str
    loc: SourcePosition


@dataclass(frozen=True)
class ScopeTree:
    source_name: str
    root_scope: Scope
    issues: List[AnalysisIssue]
    by_node: Dict[int, Scope] = field(repr=False)

    def scope_for_node(self, node: Any) -> Optional[Scope]:
        """Return the scope `node` establishes, or None."""
        scope = self.by_node.get(id(node))
        if scope is not None and scope.node is node:
            return scope
        return None

    def flatten_scopes(self) -> Iterable[Scope]:
        """Yield scopes in depth-first order."""
        stack = [self.root_scope]
        while stack:
            scope = stack.pop()
            yield scope
            stack.extend(reversed(scope.children))


def _source_position(node: Dict[str, Any]) -> SourcePosition:
    loc = node.get("loc") or {}
    start = loc.get("start") or {}
    return SourcePosition(
        line=start.get("line"),
        column=start.get("column"),
    )


class _ScopeBuilder:
    def __init__(self, source_name: str) -> None:
        self._source_name = source_name
        self._scope_counter = 0
        self._issues: List[AnalysisIssue] = []
        self._by_node: Dict[int, Scope] = {}

    def analyze(self, ast: Dict[str, Any]) -> ScopeTree:
        root_scope = self._new_scope(ScopeType.GLOBAL, ast, parent=None)
        self._generic_visit(ast, root_scope)
        return ScopeTree(
            source_name=self._source_name,
            root_scope=root_scope,
            issues=self._issues,
            by_node=self._by_node,
        )

    # ------------------------------------------------------------------ helpers

    def _new_scope(
        self, scope_type: ScopeType, node: Dict[str, Any], parent: Optional[Scope]
    ) -> Scope:
        scope_id = f"S{self._scope_counter}"
        self._scope_counter += 1
        scope = Scope(scope_id=scope_id, scope_type=scope_type, node=node, parent=parent)
        if parent:
            parent.add_child(scope)
        self._by_node[id(node)] = scope
        return scope

    def _add_issue(self, code: str, message: str, node: Dict[str, Any]) -> None:
        self._issues.append(
            AnalysisIssue(code=code, message=message, loc=_source_position(node))
        )

    def _visit(self, node: Any, scope: Scope) -> None:
        if node is None:
            return
        if isinstance(node, list):
            for element in node:
                self._visit(element, scope)
            return
        if not isinstance(node, dict):
            return

        handler = getattr(self, f"_visit_{node.get('type')}", None)
        if handler:
            handler(node, scope)
        else:
            self._generic_visit(node, scope)

    def _generic_visit(self, node: Dict[str, Any], scope: Scope) -> None:
        for key, value in node.items():
            if key in META_KEYS:
                continue
            self._visit(value, scope)

    # ----------------------------------------------------------------- visitors

    def _visit_function(self, node: Dict[str, Any], scope: Scope) -> None:
        function_scope = self._new_scope(ScopeType.FUNCTION, node, scope)
        self._generic_visit(node, function_scope)

    _visit_FunctionDeclaration = _visit_function
    _visit_FunctionExpression = _visit_function
    _visit_ArrowFunctionExpression = _visit_function

    def _visit_CatchClause(self, node: Dict[str, Any], scope: Scope) -> None:
        catch_scope = self._new_scope(ScopeType.CATCH, node, scope)
        self._generic_visit(node, catch_scope)

    def _visit_CallExpression(self, node: Dict[str, Any], scope: Scope) -> None:
        callee = node.get("callee")
        if node_type(callee) is NodeType.IDENTIFIER and callee.get("name") == "eval":
            self._add_issue(
                code="EVAL_CALL",
                message="Use of eval makes static analysis unreliable.",
                node=callee,
            )
        self._generic_visit(node, scope)

    def _visit_WithStatement(self, node: Dict[str, Any], scope: Scope) -> None:
        self._add_issue(
            code="WITH_STATEMENT",
            message="`with` statement changes scope resolution dynamically.",
            node=node,
        )
        self._generic_visit(node, scope)


class _BindingCollector:
    """Reads the bindings of one scope from the current state of its subtree."""

    def __init__(self, scope: Scope) -> None:
        self._scope = scope
        self._bindings: Dict[str, List[Binding]] = {}

    def collect(self) -> Dict[str, List[Binding]]:
        node = self._scope.node
        if self._scope.scope_type is ScopeType.CATCH:
            self._declare_pattern(node.get("param"), BindingKind.CATCH_PARAMETER)
            return self._bindings

        if node_type(node) in FUNCTION_TYPES:
            if node_type(node) is NodeType.FUNCTION_EXPRESSION:
                # Named function expressions bind the name within the inner scope.
                self._declare_pattern(node.get("id"), BindingKind.FUNCTION)
            for param in node.get("params") or []:
                self._declare_pattern(param, BindingKind.PARAMETER)
        self._visit(node.get("body"))
        return self._bindings

    def _declare(self, identifier: Dict[str, Any], kind: BindingKind) -> None:
        name = identifier.get("name")
        if not name:
            return
        self._bindings.setdefault(name, []).append(
            Binding(name=name, kind=kind, loc=_source_position(identifier), node=identifier)
        )

    def _declare_pattern(self, pattern: Any, kind: BindingKind) -> None:
        """Declare every identifier bound by a (possibly destructuring) pattern."""
        kind_of = node_type(pattern)
        if kind_of is NodeType.IDENTIFIER:
            self._declare(pattern, kind)
        elif kind_of is NodeType.ASSIGNMENT_PATTERN:
            self._declare_pattern(pattern.get("left"), kind)
        elif kind_of is NodeType.ARRAY_PATTERN:
            for element in pattern.get("elements") or []:
                self._declare_pattern(element, kind)
        elif kind_of is NodeType.OBJECT_PATTERN:
            for prop in pattern.get("properties") or []:
                if node_type(prop) is NodeType.REST_ELEMENT:
                    self._declare_pattern(prop, kind)
                else:
                    self._declare_pattern(prop.get("value"), kind)
        elif kind_of is NodeType.REST_ELEMENT:
            self._declare_pattern(pattern.get("argument"), kind)

    def _visit(self, node: Any) -> None:
        if node is None:
            return
        if isinstance(node, list):
            for element in node:
                self._visit(element)
            return
        if not isinstance(node, dict):
            return

        handler = getattr(self, f"_visit_{node.get('type')}", None)
        if handler:
            handler(node)
        else:
            for key, value in node.items():
                if key not in META_KEYS:
                    self._visit(value)

    def _visit_VariableDeclaration(self, node: Dict[str, Any]) -> None:
        kind = _DECLARATION_KINDS.get(node.get("kind"), BindingKind.VAR)
        for declarator in node.get("declarations") or []:
            self._declare_pattern(declarator.get("id"), kind)
            self._visit(declarator.get("init"))

    def _visit_FunctionDeclaration(self, node: Dict[str, Any]) -> None:
        # The name belongs here; the body is a scope of its own.
        self._declare_pattern(node.get("id"), BindingKind.FUNCTION)

    def _visit_FunctionExpression(self, node: Dict[str, Any]) -> None:
        return

    _visit_ArrowFunctionExpression = _visit_FunctionExpression

    def _visit_ClassDeclaration(self, node: Dict[str, Any]) -> None:
        self._declare_pattern(node.get("id"), BindingKind.CLASS)
        self._visit(node.get("superClass"))
        self._visit(node.get("body"))

    def _visit_TypeAlias(self, node: Dict[str, Any]) -> None:
        self._declare_pattern(node.get("id"), BindingKind.TYPE_ALIAS)

    def _visit_ImportDeclaration(self, node: Dict[str, Any]) -> None:
        for specifier in node.get("specifiers") or []:
            self._declare_pattern(specifier.get("local"), BindingKind.IMPORT)

    def _visit_CatchClause(self, node: Dict[str, Any]) -> None:
        # Only the parameter belongs to the catch scope; its body hoists here.
        self._visit(node.get("body"))


def analyze_scopes(ast: Dict[str, Any], *, source_name: str = "<input>") -> ScopeTree:
    """
    Build the scope tree of a JavaScript AST.

    Args:
        ast: esprima-compatible AST (result of `parse_js`).
        source_name: Label for diagnostics and reporting.

    Returns:
        ScopeTree with the root scope, a node-to-scope index and analysis issues.
    """
    builder = _ScopeBuilder(source_name=source_name)
    return builder.analyze(ast)


__all__ = [
    "AnalysisIssue",
    "Binding",
    "BindingKind",
    "Scope",
    "ScopeTree",
    "ScopeType",
    "SourcePosition",
    "analyze_scopes",
]
