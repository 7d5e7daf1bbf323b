"""End-to-end compile tests driven by compile/*.tests files.

Format:

    === test name
    options: iteration=array-like source_type=module
    source code here
    ---
    expected output
    ---

The options line is optional; each key=value pair is passed to compile() as a
keyword override.
"""

import copy
from pathlib import Path

import esprima
import pytest

from es6_spread import (
    CompileOptions,
    ConfigError,
    IterationStrategy,
    MalformedTreeError,
    ParseError,
    compile,
    parse,
    transform,
)
from es6_spread.backend.printer import to_source
from es6_spread.nodes import call, identifier, member

from conftest import discover_specs

COMPILE_DIR = Path(__file__).parent / "compile"


def split_options(input_lines: list[str]) -> tuple[dict[str, str], str]:
    """Split the optional options: line off a test input."""
    options: dict[str, str] = {}
    if input_lines and input_lines[0].startswith("options:"):
        for pair in input_lines[0][len("options:") :].split():
            key, value = pair.split("=", 1)
            options[key] = value
        input_lines = input_lines[1:]
    return options, "\n".join(input_lines)


def pytest_generate_tests(metafunc):
    """Parametrize test_compile over compile/*.tests."""
    if "compile_case" in metafunc.fixturenames:
        params = [
            pytest.param((inp, exp), id=test_id)
            for test_id, inp, exp in discover_specs(COMPILE_DIR)
        ]
        metafunc.parametrize("compile_case", params)


def test_compile(compile_case: tuple[list[str], list[str]]) -> None:
    input_lines, expected_lines = compile_case
    overrides, source = split_options(input_lines)
    expected = "\n".join(expected_lines).strip()
    result = compile(source, **overrides)
    assert result.code.strip() == expected
    assert result.map is None


# --- transform ---


def test_transform_does_not_mutate_input() -> None:
    tree = parse("foo().bar(...a);")
    snapshot = copy.deepcopy(tree)
    out = transform(tree, IterationStrategy.ARRAY_LIKE)
    assert tree == snapshot
    assert out != tree


def test_transform_spread_free_tree_is_unchanged() -> None:
    tree = parse("f(a); [1, 2]; new Foo(b);")
    assert transform(tree) == tree


def test_transform_accepts_esprima_tree() -> None:
    out = transform(esprima.parseScript("f(...a)"), "array-like")
    assert to_source(out) == "f.apply(null, Array.prototype.slice.call(a));\n"


def test_transform_spread_without_argument() -> None:
    tree = {
        "type": "Program",
        "body": [
            {
                "type": "ExpressionStatement",
                "expression": call(identifier("f"), [{"type": "SpreadElement"}]),
            }
        ],
    }
    with pytest.raises(MalformedTreeError):
        transform(tree, "array-like")


def test_transform_arguments_not_a_list() -> None:
    bad = {"type": "CallExpression", "callee": identifier("f"), "arguments": None}
    tree = {"type": "Program", "body": [{"type": "ExpressionStatement", "expression": bad}]}
    with pytest.raises(MalformedTreeError):
        transform(tree)


def test_transform_temporary_needs_a_scope() -> None:
    spread = {"type": "SpreadElement", "argument": identifier("a")}
    root = call(member(call(identifier("g"), []), "m"), [spread])
    with pytest.raises(MalformedTreeError):
        transform(root, "array-like")


def test_transform_helper_needs_a_program() -> None:
    spread = {"type": "SpreadElement", "argument": identifier("a")}
    root = {"type": "ExpressionStatement", "expression": call(identifier("f"), [spread])}
    with pytest.raises(MalformedTreeError):
        transform(root, "iterator")


def test_transform_function_root_holds_its_own_temporary() -> None:
    tree = parse("(function () { g().h(...a); })")["body"][0]["expression"]  # type: ignore[index]
    out = transform(tree, "array-like")
    assert out["body"]["body"][0]["type"] == "VariableDeclaration"  # type: ignore[index]


# --- compile options ---


def test_compile_options_object() -> None:
    options = CompileOptions(iteration=IterationStrategy.ARRAY_LIKE)
    assert compile("[...a];", options).code == "Array.prototype.slice.call(a);"


def test_compile_override_beats_options() -> None:
    options = CompileOptions(iteration=IterationStrategy.ITERATOR)
    result = compile("[...a];", options, iteration="array-like")
    assert result.code == "Array.prototype.slice.call(a);"


def test_compile_unknown_override() -> None:
    with pytest.raises(ConfigError):
        compile("f();", sourceFile="x.js")


def test_compile_unknown_iteration() -> None:
    with pytest.raises(ConfigError):
        compile("f();", iteration="eager")


def test_compile_unknown_source_type() -> None:
    with pytest.raises(ConfigError):
        compile("f();", source_type="json")


def test_compile_map_needs_source_file_name() -> None:
    with pytest.raises(ConfigError):
        compile("f(...a);", source_map_name="out.js")


def test_compile_parse_error() -> None:
    with pytest.raises(ParseError) as info:
        compile("f(...a;\n")
    assert info.value.lineno == 1


def test_compile_is_deterministic() -> None:
    source = "function f() { return g().h(...a, ...b); }\n[...c];\n"
    assert compile(source).code == compile(source).code


def test_compile_source_map() -> None:
    result = compile(
        "f(...a);\n",
        source_file_name="in.js",
        source_map_name="out.js",
        iteration="array-like",
    )
    assert result.code == "f.apply(null, Array.prototype.slice.call(a));\n"
    assert result.map is not None
    assert result.map["version"] == 3
    assert result.map["file"] == "out.js"
    assert result.map["sources"] == ["in.js"]
    assert result.map["sourcesContent"] == ["f(...a);\n"]
    assert str(result.map["mappings"]).startswith("AAAA")
