"""Tests for the esprima adapter."""

import esprima
import pytest

from es6_spread.errors import ParseError
from es6_spread.frontend import check_parser, collect_names, from_esprima, parse


def test_parse_spread_argument() -> None:
    tree = parse("f(...a);")
    assert tree["type"] == "Program"
    call = tree["body"][0]["expression"]  # type: ignore[index]
    assert call["type"] == "CallExpression"
    assert call["arguments"][0]["type"] == "SpreadElement"
    assert call["arguments"][0]["argument"]["name"] == "a"
    assert call["range"] == [0, 7]
    assert call["loc"]["start"]["line"] == 1


def test_parse_module() -> None:
    tree = parse('import x from "y";', "module")
    assert tree["body"][0]["type"] == "ImportDeclaration"  # type: ignore[index]


def test_parse_module_syntax_in_script() -> None:
    with pytest.raises(ParseError):
        parse('import x from "y";')


def test_parse_unknown_source_type() -> None:
    with pytest.raises(ValueError):
        parse("x", "json")


def test_parse_error_location() -> None:
    with pytest.raises(ParseError) as info:
        parse("var a = 1;\nf(;")
    assert info.value.lineno == 2
    assert info.value.msg
    assert str(info.value).startswith("2:")


def test_renamed_keywords() -> None:
    tree = parse("async function f() {}\nclass A { static m() {} }")
    assert tree["body"][0]["async"] is True  # type: ignore[index]
    method = tree["body"][1]["body"]["body"][0]  # type: ignore[index]
    assert method["static"] is True


def test_from_esprima_plain_values() -> None:
    assert from_esprima(None) is None
    assert from_esprima([1, "a"]) == [1, "a"]
    converted = from_esprima(esprima.parseScript("a"))
    assert converted["body"][0]["expression"] == {"type": "Identifier", "name": "a"}  # type: ignore[index]


def test_check_parser() -> None:
    check_parser()


def test_collect_names() -> None:
    tree = parse("var a = b.c; function d(e) { f: for (;;) break f; }")
    assert collect_names(tree) == frozenset({"a", "b", "c", "d", "e", "f"})
