"""Call-context resolution for rewritten method calls.

`callee(...args)` becomes `callee.apply(receiver, array)`. The receiver must
be the value the original call would have bound to `this`:

| Callee            | Receiver | Callee after rewrite     |
|-------------------|----------|--------------------------|
| `f`               | `null`   | `f`                      |
| `a.m` / `this.m`  | `a`      | `a.m`                    |
| `super.m`         | `this`   | `super.m`                |
| `expr.m`          | `$__0`   | `($__0 = expr).m`        |

In the last row expr is evaluated exactly once, into a temporary declared in
the enclosing function or program.
"""

from __future__ import annotations

import copy
from typing import Callable

from ..errors import MalformedTreeError
from ..nodes import (
    ASTNode,
    IDENTIFIER,
    MEMBER_EXPRESSION,
    SUPER,
    THIS_EXPRESSION,
    assign,
    identifier,
    is_node,
    is_type,
    literal,
    member,
    this_expression,
)

# Object expressions that can be read twice with no observable difference
_REUSABLE_OBJECTS: tuple[str, ...] = (IDENTIFIER, THIS_EXPRESSION)


def resolve_receiver(
    callee: ASTNode, declare_temporary: Callable[[], str]
) -> tuple[ASTNode, ASTNode]:
    """Return (callee, receiver) for an indirect `.apply` invocation."""
    if not is_type(callee, MEMBER_EXPRESSION):
        return callee, literal(None)
    obj = callee.get("object")
    if not is_node(obj):
        raise MalformedTreeError("member expression has no object", callee)
    if is_type(obj, _REUSABLE_OBJECTS):
        return callee, copy.deepcopy(obj)  # type: ignore[return-value]
    if is_type(obj, SUPER):
        return callee, this_expression()
    temp = declare_temporary()
    prop = callee.get("property")
    if not is_node(prop):
        raise MalformedTreeError("member expression has no property", callee)
    rebound = member(
        assign(identifier(temp), obj),  # type: ignore[arg-type]
        prop,  # type: ignore[arg-type]
        bool(callee.get("computed", False)),
    )
    return rebound, identifier(temp)
