"""Rewrite driver: replaces spread arguments and elements throughout a tree.

The walk is post-order. Children are rewritten before their parent is
inspected, so `outer(...inner(...x))` resolves the inner call first, and a
replacement is returned to the parent slot without being walked again.

| Node           | Rewrite                                                            |
|----------------|--------------------------------------------------------------------|
| CallExpression | `f(a, ...b)` -> `f.apply(null, [a].concat(<b>))`                   |
| ArrayExpression| `[a, ...b]` -> `[a].concat(<b>)`                                   |
| NewExpression  | `new F(...b)` -> `new (Function.prototype.bind.apply(F, [null].concat(<b>)))()` |

Everything else passes through unchanged.
"""

from __future__ import annotations

from ..errors import MalformedTreeError
from ..frontend.names import collect_names
from ..nodes import (
    ASTNode,
    NON_CHILD_KEYS,
    SUPER,
    call,
    dotted,
    is_node,
    is_type,
    literal,
    mark_replacement,
    member,
    new,
    node_type,
)
from .concat import build_concat, has_spread
from .context import resolve_receiver
from .iteration import (
    HELPER_PREFIX,
    IterationStrategy,
    Materializer,
    MaterializerCallbacks,
)
from .scope import TEMP_PREFIX, Scope, allocate_name, is_scope_node

# Function slots evaluated in the enclosing scope, not the function body
_OUTER_FUNCTION_KEYS: frozenset[str] = frozenset({"id", "params", "defaults"})


class SpreadRewriter:
    """Rewrites one compiled unit. Not reusable across trees."""

    def __init__(self, strategy: IterationStrategy, taken: frozenset[str]):
        self._taken = taken
        self._scopes: list[Scope] = []
        self.materializer = Materializer(
            strategy,
            MaterializerCallbacks(
                allocate_helper_name=self._allocate_helper_name,
                inject_helper=self._inject_helper,
            ),
        )

    @property
    def taken(self) -> frozenset[str]:
        return self._taken

    def rewrite(self, tree: ASTNode) -> ASTNode:
        return self._visit(tree)

    # --- Scopes ---

    def _current_scope(self, node: ASTNode) -> Scope:
        if not self._scopes:
            raise MalformedTreeError(
                "declaring a temporary requires a Program or function root", node
            )
        return self._scopes[-1]

    def _allocate(self, prefix: str) -> str:
        name, self._taken = allocate_name(self._taken, prefix)
        return name

    def _allocate_helper_name(self) -> str:
        return self._allocate(HELPER_PREFIX)

    def _inject_helper(self, decl: ASTNode) -> None:
        if not self._scopes or not self._scopes[0].is_program:
            raise MalformedTreeError(
                "the iteration helper requires a Program root", decl
            )
        self._scopes[0].inject(decl)

    # --- Traversal ---

    def _visit(self, node: ASTNode) -> ASTNode:
        if is_scope_node(node):
            self._visit_scope(node)
            return node
        self._visit_children(node, list(node.keys()))
        match node_type(node):
            case "CallExpression":
                return self._rewrite_call(node)
            case "NewExpression":
                return self._rewrite_new(node)
            case "ArrayExpression":
                return self._rewrite_array(node)
            case _:
                return node

    def _visit_scope(self, node: ASTNode) -> None:
        parent = self._scopes[-1] if self._scopes else None
        keys = list(node.keys())
        outer = [k for k in keys if k in _OUTER_FUNCTION_KEYS]
        inner = [k for k in keys if k not in _OUTER_FUNCTION_KEYS]
        self._visit_children(node, outer)
        scope = Scope(node, parent)
        self._scopes.append(scope)
        try:
            self._visit_children(node, inner)
        finally:
            self._scopes.pop()
        scope.flush()

    def _visit_children(self, node: ASTNode, keys: list[str]) -> None:
        for key in keys:
            if key in NON_CHILD_KEYS or key.startswith("_"):
                continue
            value = node[key]
            if is_node(value):
                node[key] = self._visit(value)  # type: ignore[arg-type]
            elif isinstance(value, list):
                for i, item in enumerate(value):
                    if is_node(item):
                        value[i] = self._visit(item)

    # --- Rewrites ---

    def _rewrite_call(self, node: ASTNode) -> ASTNode:
        args = node.get("arguments")
        if not has_spread(args):
            return node
        callee = node.get("callee")
        if not is_node(callee):
            raise MalformedTreeError("call has no callee", node)
        if is_type(callee, SUPER):
            # super(...args) has no indirect form outside a class transform
            return node

        def declare_temporary() -> str:
            name = self._allocate(TEMP_PREFIX)
            self._current_scope(node).declare(name)
            return name

        callee, receiver = resolve_receiver(callee, declare_temporary)  # type: ignore[arg-type]
        concat = build_concat(args, self.materializer.materialize)  # type: ignore[arg-type]
        result = call(member(callee, "apply"), [receiver, concat])
        return mark_replacement(result, node)

    def _rewrite_array(self, node: ASTNode) -> ASTNode:
        elements = node.get("elements")
        if not has_spread(elements):
            return node
        result = build_concat(elements, self.materializer.materialize)  # type: ignore[arg-type]
        return mark_replacement(result, node)

    def _rewrite_new(self, node: ASTNode) -> ASTNode:
        args = node.get("arguments")
        if not has_spread(args):
            return node
        callee = node.get("callee")
        if not is_node(callee):
            raise MalformedTreeError("new expression has no callee", node)
        concat = build_concat([literal(None)] + args, self.materializer.materialize)  # type: ignore[operator]
        bound = call(dotted("Function.prototype.bind.apply"), [callee, concat])  # type: ignore[list-item]
        return mark_replacement(new(bound, []), node)


def rewrite_spread(
    tree: ASTNode, strategy: IterationStrategy = IterationStrategy.ITERATOR
) -> ASTNode:
    """Rewrite every spread in call, array and new position, in place."""
    rewriter = SpreadRewriter(strategy, collect_names(tree))
    return rewriter.rewrite(tree)
