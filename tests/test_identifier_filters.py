import pytest

from frontend import load, load_ast
from query import NodeType
from transformer import (
    TransformError,
    find_variable_declarators,
    is_declarator_binding_identifier,
    is_reference_of,
    is_variable_reference,
)


def _ident(name):
    return {"type": "Identifier", "name": name}


def _positions(root, name):
    """Map (parent type, field, computed) of each `name` identifier to its classification."""
    positions = {}
    for path in root.find(NodeType.IDENTIFIER, {"name": name}):
        parent = path.parent_node
        key = (parent["type"], path.field, bool(parent.get("computed")))
        positions[key] = is_variable_reference(path)
    return positions


def test_name_only_positions_are_not_variable_references():
    root = load(
        "var name = 1;\n"
        "obj.name;\n"
        "obj[name];\n"
        "var o = {name: 2, [name]: 3};\n"
        "class A { name() {} }\n"
        "class B { [name]() {} }\n"
    )

    assert _positions(root, "name") == {
        ("VariableDeclarator", "id", False): True,
        ("MemberExpression", "property", False): False,
        ("MemberExpression", "property", True): True,
        ("Property", "key", False): False,
        ("Property", "key", True): True,
        ("MethodDefinition", "key", False): False,
        ("MethodDefinition", "key", True): True,
    }


def test_object_method_and_property_value_positions():
    root = load("var o = {run() {}, other: run};\n")

    assert _positions(root, "run") == {
        ("Property", "key", False): False,
        ("Property", "value", False): True,
    }


def test_export_specifier_positions():
    root = load("var name = 1;\nexport {name as alias, alias as name};\n", source_type="module")

    assert _positions(root, "name") == {
        ("VariableDeclarator", "id", False): True,
        ("ExportSpecifier", "local", False): True,
        ("ExportSpecifier", "exported", False): False,
    }


def test_type_member_key_is_not_a_variable_reference():
    program = {
        "type": "Program",
        "body": [
            {
                "type": "TypeAlias",
                "id": _ident("T"),
                "typeParameters": None,
                "right": {
                    "type": "ObjectTypeAnnotation",
                    "properties": [
                        {
                            "type": "ObjectTypeProperty",
                            "key": _ident("size"),
                            "value": {"type": "GenericTypeAnnotation", "id": _ident("size")},
                            "optional": False,
                        }
                    ],
                },
            }
        ],
    }
    root = load_ast(program)

    assert _positions(root, "size") == {
        ("ObjectTypeProperty", "key", False): False,
        ("GenericTypeAnnotation", "id", False): True,
    }


def test_declaration_ids_are_binding_identifiers():
    root = load("var a = 1;\nfunction b(c) {}\nclass d {}\na(b, d);\n")

    bindings = {
        path.node["name"]
        for path in root.find(NodeType.IDENTIFIER)
        if is_declarator_binding_identifier(path)
    }
    assert bindings == {"a", "b", "d"}


def test_matcher_respects_shadowing():
    root = load(
        "var bar = 1;\n"
        "function inner(bar) {\n"
        "  return bar;\n"
        "}\n"
        "bar;\n"
    )
    declarator = find_variable_declarators(root, "bar").at(0)
    matches = root.find(NodeType.IDENTIFIER, {"name": "bar"}).filter(is_reference_of(declarator))

    assert matches.size() == 2
    assert {path.parent_node["type"] for path in matches} == {
        "VariableDeclarator",
        "ExpressionStatement",
    }


def test_matcher_ignores_other_spellings():
    root = load("var a = 1;\nvar b = a;\n")
    declarator = find_variable_declarators(root, "a").at(0)
    predicate = is_reference_of(declarator)

    assert not any(predicate(path) for path in root.find(NodeType.IDENTIFIER, {"name": "b"}))


def test_matcher_rejects_destructuring_declarators():
    root = load("var {a, b} = obj;\n")
    declarator = find_variable_declarators(root).at(0)

    with pytest.raises(TransformError):
        is_reference_of(declarator)


def test_removal_only_counts_variable_references():
    # var x = 3; class A { x() {} } type T = {x: number}; y.x = 5;
    program = {
        "type": "Program",
        "body": [
            {
                "type": "VariableDeclaration",
                "kind": "var",
                "declarations": [
                    {
                        "type": "VariableDeclarator",
                        "id": _ident("x"),
                        "init": {"type": "Literal", "value": 3},
                    }
                ],
            },
            {
                "type": "ClassDeclaration",
                "id": _ident("A"),
                "superClass": None,
                "body": {
                    "type": "ClassBody",
                    "body": [
                        {
                            "type": "MethodDefinition",
                            "key": _ident("x"),
                            "computed": False,
                            "static": False,
                            "kind": "method",
                            "value": {
                                "type": "FunctionExpression",
                                "id": None,
                                "params": [],
                                "body": {"type": "BlockStatement", "body": []},
                            },
                        }
                    ],
                },
            },
            {
                "type": "TypeAlias",
                "id": _ident("T"),
                "typeParameters": None,
                "right": {
                    "type": "ObjectTypeAnnotation",
                    "properties": [
                        {
                            "type": "ObjectTypeProperty",
                            "key": _ident("x"),
                            "value": {"type": "NumberTypeAnnotation"},
                            "optional": False,
                        }
                    ],
                },
            },
            {
                "type": "ExpressionStatement",
                "expression": {
                    "type": "AssignmentExpression",
                    "operator": "=",
                    "left": {
                        "type": "MemberExpression",
                        "computed": False,
                        "object": _ident("y"),
                        "property": _ident("x"),
                    },
                    "right": {"type": "Literal", "value": 5},
                },
            },
        ],
    }
    root = load_ast(program)

    survivors = find_variable_declarators(root).remove_unreferenced()

    assert survivors.size() == 0
    assert [statement["type"] for statement in program["body"]] == [
        "ClassDeclaration",
        "TypeAlias",
        "ExpressionStatement",
    ]
    assert root.find(NodeType.IDENTIFIER, {"name": "x"}).size() == 3
