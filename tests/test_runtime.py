"""Runtime tests: compiled output executed under node.

Each case compiles a small program and checks what it prints. Skipped when
node is not installed.
"""

import subprocess
from pathlib import Path

import pytest

from es6_spread import compile

STRATEGIES = ["iterator", "array-like"]


def run_js(node: str, tmp_path: Path, source: str, iteration: str) -> str:
    """Compile source with the given strategy, run it, return stdout."""
    code = compile(source, iteration=iteration).code
    assert "..." not in code
    script = tmp_path / "case.js"
    script.write_text(code)
    result = subprocess.run([node, str(script)], capture_output=True, text=True, timeout=30)
    assert result.returncode == 0, result.stderr + "\n" + code
    return result.stdout.strip()


@pytest.mark.parametrize("iteration", STRATEGIES)
def test_argument_order(node: str, tmp_path: Path, iteration: str) -> None:
    source = """
var log = [];
function t(x) { log.push(x); return x; }
function f() { return Array.prototype.slice.call(arguments); }
var r = f(t(1), ...t([2, 3]), t(4), ...t([5]));
console.log(JSON.stringify([log, r]));
"""
    assert run_js(node, tmp_path, source, iteration) == "[[1,[2,3],4,[5]],[1,2,3,4,5]]"


@pytest.mark.parametrize("iteration", STRATEGIES)
def test_receiver(node: str, tmp_path: Path, iteration: str) -> None:
    source = """
var a = { m: function () { return this === a; } };
console.log(a.m(...[]));
"""
    assert run_js(node, tmp_path, source, iteration) == "true"


@pytest.mark.parametrize("iteration", STRATEGIES)
def test_unsafe_receiver_evaluated_once(node: str, tmp_path: Path, iteration: str) -> None:
    source = """
var n = 0;
var o = { m: function (x, y) { return [this === o, x + y]; } };
function g() { n++; return o; }
var r = g().m(...[1, 2]);
console.log(JSON.stringify([n, r]));
"""
    assert run_js(node, tmp_path, source, iteration) == "[1,[true,3]]"


@pytest.mark.parametrize("iteration", STRATEGIES)
def test_array_literal(node: str, tmp_path: Path, iteration: str) -> None:
    source = """
var x = [9, 8];
console.log(JSON.stringify([1, 2, ...x, 3]));
"""
    assert run_js(node, tmp_path, source, iteration) == "[1,2,9,8,3]"


@pytest.mark.parametrize("iteration", STRATEGIES)
def test_constructor(node: str, tmp_path: Path, iteration: str) -> None:
    source = """
function Foo(a, b) { this.sum = a + b; }
var args = [1, 2];
var f = new Foo(...args);
console.log(f instanceof Foo, f.sum);
"""
    assert run_js(node, tmp_path, source, iteration) == "true 3"


@pytest.mark.parametrize("iteration", STRATEGIES)
def test_nested(node: str, tmp_path: Path, iteration: str) -> None:
    source = """
function inner() { return [arguments.length, 1]; }
function outer() { return arguments.length; }
console.log(outer(...inner(...[7, 8, 9])));
"""
    assert run_js(node, tmp_path, source, iteration) == "2"


@pytest.mark.parametrize("iteration", STRATEGIES)
def test_hygiene(node: str, tmp_path: Path, iteration: str) -> None:
    source = """
var $__0 = "keep";
var o = { m: function (x) { return x; } };
function g() { return o; }
console.log(g().m(...["ok"]), $__0);
"""
    assert run_js(node, tmp_path, source, iteration) == "ok keep"


@pytest.mark.parametrize("iteration", STRATEGIES)
def test_temporary_inside_function(node: str, tmp_path: Path, iteration: str) -> None:
    source = """
"use strict";
var o = { m: function () { return arguments.length; } };
function g() { return o; }
var h = () => g().m(...[1, 2, 3]);
function k() { return g().m(...[1]) + g().m(...[1, 2]); }
console.log(h(), k());
"""
    assert run_js(node, tmp_path, source, iteration) == "3 3"


@pytest.mark.parametrize("iteration", STRATEGIES)
def test_unterminated_previous_line(node: str, tmp_path: Path, iteration: str) -> None:
    source = """
var y = function () { throw new Error("y called"); }
var o = { m: function (a) { return a; } };
function foo() { return o; }
var x = y
var r = 0
foo().m(...[1])
function f() {
  r = 1
  foo().m(...[2])
  return r
}
console.log(f(), typeof x)
"""
    assert run_js(node, tmp_path, source, iteration) == "1 function"


def test_iterator_strategy_consumes_iterables(node: str, tmp_path: Path) -> None:
    source = """
function* gen() { yield 1; yield 2; }
var s = new Set(["a", "b"]);
console.log(JSON.stringify([0, ...gen(), ...s]));
"""
    assert run_js(node, tmp_path, source, "iterator") == '[0,1,2,"a","b"]'


def test_iterator_strategy_rejects_non_iterables(node: str, tmp_path: Path) -> None:
    source = """
function f() {}
try { f(...5); } catch (e) { console.log(e instanceof TypeError); }
"""
    assert run_js(node, tmp_path, source, "iterator") == "true"


def test_array_like_strategy_accepts_arguments(node: str, tmp_path: Path) -> None:
    source = """
function f() { return [0, ...arguments]; }
console.log(JSON.stringify(f(1, 2)));
"""
    assert run_js(node, tmp_path, source, "array-like") == "[0,1,2]"
