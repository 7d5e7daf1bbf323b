"""Turning a spread argument into a concrete array of its values.

Two strategies, fixed for one compiled unit:

| Strategy   | Output for `...x`                  | Works for                 |
|------------|------------------------------------|---------------------------|
| iterator   | `$__spread0(x)` (shared helper)    | any iterable              |
| array-like | `Array.prototype.slice.call(x)`    | arrays, `arguments`, etc. |

The iterator helper is declared once per program and referenced by name from
every spread site.
"""

from __future__ import annotations

import copy
import enum
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable

import esprima

from ..errors import ConfigError
from ..frontend.parse import from_esprima
from ..nodes import (
    ASTNode,
    FUNCTION_DECLARATION,
    call,
    dotted,
    identifier,
    node_type,
    strip_locations,
)

HELPER_PREFIX = "$__spread"

_HELPER_SOURCE = """\
function spread(iterable) {
  var method = typeof Symbol === "function" && iterable[Symbol.iterator] || iterable.iterator;
  if (typeof method !== "function") {
    throw new TypeError(iterable + " is not iterable");
  }
  var iterator = method.call(iterable);
  var values = [];
  for (var step = iterator.next(); !step.done; step = iterator.next()) {
    values.push(step.value);
  }
  return values;
}
"""


class IterationStrategy(enum.Enum):
    """How spread values are collected at runtime."""

    ITERATOR = "iterator"
    ARRAY_LIKE = "array-like"

    @classmethod
    def from_name(cls, name: str | IterationStrategy) -> IterationStrategy:
        if isinstance(name, IterationStrategy):
            return name
        for strategy in cls:
            if strategy.value == name:
                return strategy
        raise ConfigError(f"unknown iteration strategy: {name}")


@lru_cache(maxsize=1)
def _helper_template() -> ASTNode:
    program = from_esprima(esprima.parseScript(_HELPER_SOURCE))
    assert isinstance(program, dict)
    decl = program["body"][0]  # type: ignore[index]
    assert node_type(decl) == FUNCTION_DECLARATION
    return strip_locations(decl)


def helper_declaration(name: str) -> ASTNode:
    """A fresh copy of the iterator helper declared under name."""
    decl = copy.deepcopy(_helper_template())
    decl["id"] = identifier(name)
    return decl


@dataclass
class MaterializerCallbacks:
    """Hooks into the rewrite driver's scope bookkeeping."""

    # Allocates a hygienic name for the shared helper
    allocate_helper_name: Callable[[], str]
    # Queues the helper declaration at the top of the program
    inject_helper: Callable[[ASTNode], None]


class Materializer:
    """Materializes spread arguments for one compiled unit."""

    def __init__(self, strategy: IterationStrategy, callbacks: MaterializerCallbacks):
        self.strategy = strategy
        self._callbacks = callbacks
        self.helper_name: str | None = None

    def materialize(self, argument: ASTNode) -> ASTNode:
        """Build an expression that evaluates argument once into a new array."""
        if self.strategy == IterationStrategy.ARRAY_LIKE:
            return call(dotted("Array.prototype.slice.call"), [argument])
        return call(identifier(self._ensure_helper()), [argument])

    def _ensure_helper(self) -> str:
        if self.helper_name is None:
            self.helper_name = self._callbacks.allocate_helper_name()
            self._callbacks.inject_helper(helper_declaration(self.helper_name))
        return self.helper_name
