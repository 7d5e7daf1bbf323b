"""Tests for hygienic temporaries and declaration insertion."""

import pytest

from es6_spread.errors import MalformedTreeError, ScopeExhaustedError
from es6_spread.frontend import parse
from es6_spread.middleend.scope import (
    Scope,
    allocate_name,
    directive_count,
    is_scope_node,
)
from es6_spread.nodes import identifier, var_declaration


def test_allocate_first_free_name() -> None:
    name, taken = allocate_name(frozenset())
    assert name == "$__0"
    assert taken == frozenset({"$__0"})


def test_allocate_skips_taken_names() -> None:
    taken = frozenset({"$__0", "$__1", "x"})
    name, updated = allocate_name(taken)
    assert name == "$__2"
    assert updated == taken | {"$__2"}


def test_allocate_does_not_modify_input() -> None:
    taken = frozenset({"a"})
    allocate_name(taken)
    assert taken == frozenset({"a"})


def test_allocate_custom_prefix() -> None:
    name, _ = allocate_name(frozenset({"$__spread0"}), "$__spread")
    assert name == "$__spread1"


def test_allocate_exhausted() -> None:
    with pytest.raises(ScopeExhaustedError) as info:
        allocate_name(frozenset({"t0", "t1"}), "t", limit=2)
    assert info.value.limit == 2


def test_is_scope_node() -> None:
    tree = parse("function f() {} x => x;")
    assert is_scope_node(tree)
    assert is_scope_node(tree["body"][0])  # type: ignore[index]
    assert is_scope_node(tree["body"][1]["expression"])  # type: ignore[index]
    assert not is_scope_node(identifier("x"))


def test_directive_count() -> None:
    tree = parse('"use strict"; "other"; x; "late";')
    assert directive_count(tree["body"]) == 2  # type: ignore[arg-type]


def test_flush_program_after_directives() -> None:
    tree = parse('"use strict"; x;')
    scope = Scope(tree)
    scope.declare("$__0")
    scope.declare("$__1")
    scope.flush()
    body = tree["body"]
    assert body[1] == var_declaration(["$__0", "$__1"])  # type: ignore[index]
    assert body[2]["type"] == "ExpressionStatement"  # type: ignore[index]
    assert scope.temporaries == []


def test_flush_injected_before_temporaries() -> None:
    tree = parse("x;")
    scope = Scope(tree)
    scope.declare("$__0")
    scope.inject({"type": "EmptyStatement"})
    scope.flush()
    kinds = [stmt["type"] for stmt in tree["body"]]  # type: ignore[union-attr]
    assert kinds == ["EmptyStatement", "VariableDeclaration", "ExpressionStatement"]


def test_flush_without_declarations_is_a_no_op() -> None:
    tree = parse("x => x;")
    arrow = tree["body"][0]["expression"]  # type: ignore[index]
    Scope(arrow).flush()
    assert arrow["body"]["type"] == "Identifier"
    assert "range" in arrow


def test_flush_arrow_expression_body() -> None:
    tree = parse("f = x => x;")
    arrow = tree["body"][0]["expression"]["right"]  # type: ignore[index]
    scope = Scope(arrow, Scope(tree))
    scope.declare("t")
    scope.flush()
    assert arrow["expression"] is False
    assert [stmt["type"] for stmt in arrow["body"]["body"]] == [
        "VariableDeclaration",
        "ReturnStatement",
    ]
    assert arrow["body"]["body"][1]["argument"]["name"] == "x"
    assert arrow["replaces"] == {"type": "ArrowFunctionExpression", "range": [4, 10]}
    assert "range" not in arrow


def test_flush_function_without_body() -> None:
    scope = Scope({"type": "FunctionExpression", "params": []})
    scope.declare("t")
    with pytest.raises(MalformedTreeError):
        scope.flush()
