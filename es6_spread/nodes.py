"""ESTree node helpers: classification and construction over dict-based trees.

A node is a dict with a "type" key. Child slots hold nodes, lists of nodes
(array holes are None) or plain scalars. Parsed nodes carry "range" and "loc";
built nodes carry neither.
"""

from __future__ import annotations

from typing import Iterator

ASTNode = dict[str, object]

# Node kinds the transform inspects or builds
ARRAY_EXPRESSION = "ArrayExpression"
ARROW_FUNCTION_EXPRESSION = "ArrowFunctionExpression"
ASSIGNMENT_EXPRESSION = "AssignmentExpression"
BLOCK_STATEMENT = "BlockStatement"
CALL_EXPRESSION = "CallExpression"
EXPRESSION_STATEMENT = "ExpressionStatement"
FUNCTION_DECLARATION = "FunctionDeclaration"
FUNCTION_EXPRESSION = "FunctionExpression"
IDENTIFIER = "Identifier"
LITERAL = "Literal"
MEMBER_EXPRESSION = "MemberExpression"
NEW_EXPRESSION = "NewExpression"
PROGRAM = "Program"
RETURN_STATEMENT = "ReturnStatement"
SPREAD_ELEMENT = "SpreadElement"
SUPER = "Super"
THIS_EXPRESSION = "ThisExpression"
VARIABLE_DECLARATION = "VariableDeclaration"
VARIABLE_DECLARATOR = "VariableDeclarator"

FUNCTION_KINDS: tuple[str, ...] = (
    FUNCTION_DECLARATION,
    FUNCTION_EXPRESSION,
    ARROW_FUNCTION_EXPRESSION,
)

# Keys that hold bookkeeping rather than children
NON_CHILD_KEYS: frozenset[str] = frozenset({"range", "loc", "replaces"})


def is_node(value: object) -> bool:
    """Check if value is an AST node dict."""
    return isinstance(value, dict) and isinstance(value.get("type"), str)


def node_type(node: ASTNode) -> str:
    """Get node type string."""
    kind = node.get("type", "")
    if isinstance(kind, str):
        return kind
    return ""


def is_type(node: object, type_names: str | tuple[str, ...] | list[str]) -> bool:
    """Check if node is one of the given node kinds."""
    if not isinstance(node, dict):
        return False
    if isinstance(type_names, str):
        return node.get("type") == type_names
    return node.get("type") in type_names


def child_slots(node: ASTNode) -> Iterator[tuple[str, int | None, ASTNode]]:
    """Yield (key, index, child) for every child node, in key order.

    index is None for single-node slots and the list position for list slots.
    """
    for key, value in list(node.items()):
        if key in NON_CHILD_KEYS or key.startswith("_"):
            continue
        if is_node(value):
            yield key, None, value  # type: ignore[misc]
        elif isinstance(value, list):
            for i, item in enumerate(value):
                if is_node(item):
                    yield key, i, item


def walk(node: ASTNode) -> Iterator[ASTNode]:
    """Yield node and all of its descendants, pre-order."""
    stack: list[ASTNode] = [node]
    while stack:
        current = stack.pop()
        yield current
        children = [child for _, _, child in child_slots(current)]
        stack.extend(reversed(children))


def node_range(node: ASTNode) -> tuple[int, int] | None:
    """Source span of a parsed node, or None for built nodes."""
    span = node.get("range")
    if isinstance(span, (list, tuple)) and len(span) == 2:
        return int(span[0]), int(span[1])
    return None


def strip_locations(node: ASTNode) -> ASTNode:
    """Remove source positions in place so the subtree prints as built code."""
    for current in walk(node):
        current.pop("range", None)
        current.pop("loc", None)
    return node


def mark_replacement(new: ASTNode, old: ASTNode) -> ASTNode:
    """Record that new stands at old's source position."""
    span = node_range(old)
    if span is not None:
        new["replaces"] = {"type": node_type(old), "range": [span[0], span[1]]}
    elif "replaces" in old:
        new["replaces"] = old["replaces"]
    return new


# ============================================================
# BUILDERS
# ============================================================


def identifier(name: str) -> ASTNode:
    return {"type": IDENTIFIER, "name": name}


def this_expression() -> ASTNode:
    return {"type": THIS_EXPRESSION}


def literal(value: object) -> ASTNode:
    """Build a literal; raw text is derived when the printer needs it."""
    return {"type": LITERAL, "value": value}


def member(obj: ASTNode, prop: ASTNode | str, computed: bool = False) -> ASTNode:
    if isinstance(prop, str):
        prop = identifier(prop)
    return {
        "type": MEMBER_EXPRESSION,
        "computed": computed,
        "object": obj,
        "property": prop,
    }


def dotted(path: str) -> ASTNode:
    """Build a member chain from a dotted path: "Array.prototype.slice"."""
    parts = path.split(".")
    result = identifier(parts[0])
    for part in parts[1:]:
        result = member(result, part)
    return result


def call(callee: ASTNode, args: list[ASTNode]) -> ASTNode:
    return {"type": CALL_EXPRESSION, "callee": callee, "arguments": args}


def new(callee: ASTNode, args: list[ASTNode]) -> ASTNode:
    return {"type": NEW_EXPRESSION, "callee": callee, "arguments": args}


def array(elements: list[ASTNode | None]) -> ASTNode:
    return {"type": ARRAY_EXPRESSION, "elements": elements}


def assign(left: ASTNode, right: ASTNode, operator: str = "=") -> ASTNode:
    return {
        "type": ASSIGNMENT_EXPRESSION,
        "operator": operator,
        "left": left,
        "right": right,
    }


def var_declaration(names: list[str], kind: str = "var") -> ASTNode:
    """Build `var a, b;` with no initializers."""
    declarators: list[ASTNode] = []
    for name in names:
        declarators.append(
            {"type": VARIABLE_DECLARATOR, "id": identifier(name), "init": None}
        )
    return {"type": VARIABLE_DECLARATION, "declarations": declarators, "kind": kind}


def block(body: list[ASTNode]) -> ASTNode:
    return {"type": BLOCK_STATEMENT, "body": body}


def return_(argument: ASTNode | None) -> ASTNode:
    return {"type": RETURN_STATEMENT, "argument": argument}
