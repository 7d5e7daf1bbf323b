"""Spread detection and order-preserving concatenation of argument lists."""

from __future__ import annotations

from typing import Callable

from ..errors import MalformedTreeError
from ..nodes import ASTNode, SPREAD_ELEMENT, array, call, is_node, is_type, member


def has_spread(elements: object) -> bool:
    """True iff the argument/element list contains a spread element."""
    if not isinstance(elements, list):
        raise MalformedTreeError("argument list is not a list")
    for element in elements:
        if is_type(element, SPREAD_ELEMENT):
            return True
    return False


def spread_argument(element: ASTNode) -> ASTNode:
    """The expression a spread element iterates over."""
    argument = element.get("argument")
    if not is_node(argument):
        raise MalformedTreeError("spread element has no argument expression", element)
    return argument  # type: ignore[return-value]


def build_concat(
    elements: list[ASTNode | None], materialize: Callable[[ASTNode], ASTNode]
) -> ASTNode:
    """Build one expression equal to the elements evaluated left to right.

    Runs of plain elements become array literals, each spread becomes the
    materialized array of its values, and segments are joined with chained
    `.concat()` calls:

        1, 2, ...a, 3  ->  [1, 2].concat(<a>).concat([3])
    """
    if len(elements) == 0:
        raise AssertionError("cannot build a concatenation from an empty list")
    segments: list[ASTNode] = []
    run: list[ASTNode | None] | None = None
    for element in elements:
        if is_type(element, SPREAD_ELEMENT):
            if run is not None:
                segments.append(array(run))
                run = None
            segments.append(materialize(spread_argument(element)))  # type: ignore[arg-type]
        else:
            if run is None:
                run = []
            run.append(element)
    if run is not None:
        segments.append(array(run))
    result = segments[0]
    for segment in segments[1:]:
        result = call(member(result, "concat"), [segment])
    return result
