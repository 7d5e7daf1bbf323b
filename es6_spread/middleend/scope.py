"""Scopes, hygienic temporaries, and declaration insertion.

A Scope is the nearest enclosing function body or the program body: the place
where `var` declarations for temporaries (and the shared iteration helper)
are spliced in once the scope has been fully rewritten.

Temporary names are chosen against an explicit set of taken names and the
updated set is handed back to the caller; no allocation state outlives one
compilation.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..errors import MalformedTreeError, ScopeExhaustedError
from ..nodes import (
    ARROW_FUNCTION_EXPRESSION,
    ASTNode,
    BLOCK_STATEMENT,
    EXPRESSION_STATEMENT,
    FUNCTION_KINDS,
    PROGRAM,
    block,
    is_node,
    is_type,
    mark_replacement,
    node_type,
    return_,
    var_declaration,
)

TEMP_PREFIX = "$__"
MAX_TEMPORARIES = 10000


def allocate_name(
    taken: frozenset[str], prefix: str = TEMP_PREFIX, limit: int = MAX_TEMPORARIES
) -> tuple[str, frozenset[str]]:
    """Pick the first prefix+N not in taken. Returns (name, taken | {name})."""
    i = 0
    while i < limit:
        candidate = prefix + str(i)
        if candidate not in taken:
            return candidate, taken | {candidate}
        i += 1
    raise ScopeExhaustedError(prefix, limit)


@dataclass
class Scope:
    """A function or program body that can receive declarations."""

    node: ASTNode
    parent: Scope | None = None
    temporaries: list[str] = field(default_factory=list)
    injected: list[ASTNode] = field(default_factory=list)

    @property
    def is_program(self) -> bool:
        return node_type(self.node) == PROGRAM

    def declare(self, name: str) -> None:
        self.temporaries.append(name)

    def inject(self, stmt: ASTNode) -> None:
        """Queue a statement for the top of this scope's body."""
        self.injected.append(stmt)

    def flush(self) -> None:
        """Insert the queued helper statements and temporary declarations."""
        if not self.temporaries and not self.injected:
            return
        stmts = list(self.injected)
        if self.temporaries:
            stmts.append(var_declaration(self.temporaries))
        body = _body_statements(self.node)
        at = directive_count(body)
        body[at:at] = stmts
        self.temporaries = []
        self.injected = []


def is_scope_node(node: ASTNode) -> bool:
    return is_type(node, PROGRAM) or is_type(node, FUNCTION_KINDS)


def directive_count(body: list[ASTNode]) -> int:
    """Number of leading directive statements ("use strict" and friends)."""
    count = 0
    for stmt in body:
        if not is_type(stmt, EXPRESSION_STATEMENT) or "directive" not in stmt:
            break
        count += 1
    return count


def _body_statements(node: ASTNode) -> list[ASTNode]:
    """Statement list of a program or function, creating a block if needed."""
    if node_type(node) == PROGRAM:
        body = node.get("body")
        if not isinstance(body, list):
            raise MalformedTreeError("program body is not a statement list", node)
        return body
    body_node = node.get("body")
    if not is_node(body_node):
        raise MalformedTreeError("function has no body", node)
    if node_type(body_node) != BLOCK_STATEMENT:
        if node_type(node) != ARROW_FUNCTION_EXPRESSION:
            raise MalformedTreeError("function body is not a block", node)
        # x => expr becomes x => { return expr; }, reprinted in full
        body_node = block([return_(body_node)])
        node["body"] = body_node
        node["expression"] = False
        mark_replacement(node, node)
        node.pop("range", None)
    stmts = body_node.get("body")
    if not isinstance(stmts, list):
        raise MalformedTreeError("block body is not a statement list", body_node)
    return stmts
