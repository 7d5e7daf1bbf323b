"""Printer: ESTree dict tree -> JavaScript source, optionally with a source map.

Two modes share one output stream:

- Reprint. When the original source text is supplied, parsed nodes (those
  with a "range") are copied from it verbatim. A parsed node with built
  descendants is patched: its text is copied around holes, and only the holes
  are printed. Comments and layout outside the holes survive untouched.
- Generic. Built nodes, and every node when no source is supplied, are
  printed from scratch with two-space indentation, `;`-terminated statements
  and precedence-driven parentheses.

A hole is one of:

| Hole      | Child                                  | Printed at             |
|-----------|----------------------------------------|------------------------|
| patch     | parsed child with built descendants    | its own range          |
| replace   | built child carrying "replaces"        | the replaced range     |
| before    | built statement inserted into a list   | next parsed sibling    |
| after     | built statement, no later sibling      | end of last sibling    |

A replacement is printed from the tree, so comments inside a rewritten call,
array or `new` expression are dropped unless they sit inside a reused
sub-expression: `f(a /* c */, ...b)` loses `/* c */`.

An expression statement whose reprinted text newly starts with `(` is given a
leading `;` when the statement before it in the same list is not terminated,
so it cannot be read as a call of the previous line.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass

from ..errors import ConfigError, MalformedTreeError, PrintError
from ..nodes import ASTNode, child_slots, is_node, is_type, node_range, node_type
from .sourcemap import Mapping, build_source_map
from .util import is_negative_number, render_literal

# Precedence levels (higher binds tighter)
_PREC_SEQUENCE: int = 0
_PREC_ASSIGNMENT: int = 1
_PREC_CONDITIONAL: int = 2
_PREC_OR: int = 3
_PREC_UNARY: int = 14
_PREC_POSTFIX: int = 15
_PREC_NEW: int = 16
_PREC_CALL: int = 17
_PREC_MEMBER: int = 18
_PREC_PRIMARY: int = 19

_BIN_PREC: dict[str, int] = {
    "||": 3,
    "&&": 4,
    "|": 5,
    "^": 6,
    "&": 7,
    "==": 8,
    "!=": 8,
    "===": 8,
    "!==": 8,
    "<": 9,
    ">": 9,
    "<=": 9,
    ">=": 9,
    "instanceof": 9,
    "in": 9,
    "<<": 10,
    ">>": 10,
    ">>>": 10,
    "+": 11,
    "-": 11,
    "*": 12,
    "/": 12,
    "%": 12,
    "**": 13,
}

# Expressions that cannot start a statement or be called/accessed bare
_NEEDS_PARENS_AT_HEAD: tuple[str, ...] = (
    "FunctionExpression",
    "ClassExpression",
    "ObjectExpression",
)

_INDENT = "  "


def _utf16_len(text: str) -> int:
    """Length of text in UTF-16 code units, the column unit of source maps."""
    return len(text.encode("utf-16-le")) // 2


@dataclass
class PrintResult:
    """Printed code plus the v3 source map, when one was requested."""

    code: str
    map: dict[str, object] | None = None


class _Output:
    """Accumulates output text and tracks the generated position."""

    def __init__(self, source: str | None) -> None:
        self.parts: list[str] = []
        self.mappings: list[Mapping] = []
        self.line: int = 0
        self.col: int = 0
        self._source = source
        self._line_starts: list[int] = [0]
        if source is not None:
            for i, ch in enumerate(source):
                if ch == "\n":
                    self._line_starts.append(i + 1)

    def write(self, text: str) -> None:
        if not text:
            return
        self.parts.append(text)
        newline = text.rfind("\n")
        if newline == -1:
            self.col += _utf16_len(text)
        else:
            self.line += text.count("\n")
            self.col = _utf16_len(text[newline + 1 :])

    def mark(self, offset: int) -> None:
        """Map the current generated position to a source offset."""
        assert self._source is not None
        line = bisect_right(self._line_starts, offset) - 1
        col = _utf16_len(self._source[self._line_starts[line] : offset])
        mapping = (self.line, self.col, line, col)
        if self.mappings and self.mappings[-1][:2] == mapping[:2]:
            self.mappings[-1] = mapping
        else:
            self.mappings.append(mapping)

    def copy(self, start: int, end: int) -> None:
        """Copy source[start:end], mapping each line it spans."""
        if start >= end or self._source is None:
            return
        text = self._source[start:end]
        self.mark(start)
        pos = 0
        while True:
            newline = text.find("\n", pos)
            if newline == -1 or newline + 1 == len(text):
                self.write(text[pos:])
                return
            self.write(text[pos : newline + 1])
            pos = newline + 1
            self.mark(start + pos)

    def code(self) -> str:
        return "".join(self.parts)


def _leftmost_slot(node: ASTNode) -> str | None:
    """The child slot holding the leftmost token of node, if it is a child."""
    match node_type(node):
        case "ExpressionStatement":
            return "expression"
        case "CallExpression":
            return "callee"
        case "MemberExpression":
            return "object"
        case "TaggedTemplateExpression":
            return "tag"
        case "BinaryExpression" | "LogicalExpression" | "AssignmentExpression":
            return "left"
        case "ConditionalExpression":
            return "test"
        case "UpdateExpression" if not node.get("prefix"):
            return "argument"
        case _:
            return None


def _contains_call(node: ASTNode) -> bool:
    """True if a call appears in the member chain of a `new` callee."""
    current: object = node
    while is_node(current):
        kind = node_type(current)  # type: ignore[arg-type]
        if kind == "CallExpression":
            return True
        if kind == "MemberExpression":
            current = current.get("object")  # type: ignore[union-attr]
        elif kind == "TaggedTemplateExpression":
            current = current.get("tag")  # type: ignore[union-attr]
        else:
            return False
    return False


class _Printer:
    """Prints one tree into one _Output."""

    def __init__(self, source: str | None) -> None:
        self._source = source
        self._out = _Output(source)
        self._indent = ""
        self._dirty: dict[int, bool] = {}

    # ============================================================
    # ENTRY
    # ============================================================

    def print_root(self, tree: ASTNode) -> None:
        span = self._span(tree)
        if span is None or self._source is None:
            self._emit(tree)
            return
        # Program ranges start at the first token; keep leading comments
        self._out.copy(0, span[0])
        self._emit(tree)
        self._out.copy(span[1], len(self._source))

    @property
    def code(self) -> str:
        return self._out.code()

    @property
    def mappings(self) -> list[Mapping]:
        return self._out.mappings

    # ============================================================
    # DISPATCH
    # ============================================================

    def _span(self, node: ASTNode) -> tuple[int, int] | None:
        if self._source is None:
            return None
        return node_range(node)

    def _emit(self, node: ASTNode) -> None:
        span = self._span(node)
        if span is not None:
            if self._is_dirty(node):
                self._patch(node, span)
            else:
                self._out.copy(span[0], span[1])
            return
        replaced = node.get("replaces")
        if self._source is not None and isinstance(replaced, dict):
            self._out.mark(int(replaced["range"][0]))  # type: ignore[index]
        self._generic(node)

    def _sub(self, parent: ASTNode, key: str, child: object) -> None:
        """Emit an expression child, parenthesized if its slot demands it."""
        if not is_node(child):
            return
        parens = self._needs_parens(parent, key, child)  # type: ignore[arg-type]
        if parens:
            self._out.write("(")
        self._emit(child)  # type: ignore[arg-type]
        if parens:
            self._out.write(")")

    def _is_dirty(self, node: ASTNode) -> bool:
        """True if any descendant was built by the transform."""
        key = id(node)
        if key in self._dirty:
            return self._dirty[key]
        dirty = False
        for _, _, child in child_slots(node):
            if node_range(child) is None or self._is_dirty(child):
                dirty = True
                break
        self._dirty[key] = dirty
        return dirty

    # ============================================================
    # PRECEDENCE
    # ============================================================

    def _precedence(self, node: ASTNode) -> int:
        match node_type(node):
            case "SequenceExpression":
                return _PREC_SEQUENCE
            case "AssignmentExpression" | "YieldExpression" | "ArrowFunctionExpression":
                return _PREC_ASSIGNMENT
            case "ConditionalExpression":
                return _PREC_CONDITIONAL
            case "BinaryExpression" | "LogicalExpression":
                return _BIN_PREC.get(str(node.get("operator")), _PREC_OR)
            case "UnaryExpression" | "AwaitExpression":
                return _PREC_UNARY
            case "UpdateExpression":
                return _PREC_UNARY if node.get("prefix") else _PREC_POSTFIX
            case "NewExpression":
                return _PREC_NEW if self._is_bare_new(node) else _PREC_MEMBER
            case "CallExpression":
                return _PREC_CALL
            case "MemberExpression" | "TaggedTemplateExpression" | "MetaProperty":
                return _PREC_MEMBER
            case "Literal":
                return _PREC_UNARY if is_negative_number(node) else _PREC_PRIMARY
            case _:
                return _PREC_PRIMARY

    def _is_bare_new(self, node: ASTNode) -> bool:
        """`new Foo` with no argument list; only parsed source can say so."""
        args = node.get("arguments")
        if isinstance(args, list) and args:
            return False
        span = self._span(node)
        callee = node.get("callee")
        if span is None or not is_node(callee) or self._source is None:
            return False
        callee_span = node_range(callee)  # type: ignore[arg-type]
        if callee_span is None:
            return False
        return "(" not in self._source[callee_span[1] : span[1]]

    def _slot_precedence(self, parent: ASTNode, key: str) -> int:
        """Lowest precedence an expression may have in parent[key] bare."""
        kind = node_type(parent)
        match kind:
            case "MemberExpression":
                return _PREC_CALL if key == "object" else _PREC_SEQUENCE
            case "CallExpression":
                return _PREC_CALL if key == "callee" else _PREC_ASSIGNMENT
            case "NewExpression" | "TaggedTemplateExpression":
                if key in ("callee", "tag"):
                    return _PREC_MEMBER
                return _PREC_SEQUENCE if key == "quasi" else _PREC_ASSIGNMENT
            case "ClassDeclaration" | "ClassExpression":
                return _PREC_CALL
            case "UnaryExpression" | "AwaitExpression":
                return _PREC_UNARY
            case "UpdateExpression":
                return _PREC_POSTFIX
            case "BinaryExpression" | "LogicalExpression":
                op = str(parent.get("operator"))
                prec = _BIN_PREC.get(op, _PREC_OR)
                if op == "**":
                    # Right-associative, and a unary base is a syntax error
                    return _PREC_POSTFIX if key == "left" else prec
                return prec if key == "left" else prec + 1
            case "ConditionalExpression":
                return _PREC_OR if key == "test" else _PREC_ASSIGNMENT
            case "AssignmentExpression":
                return _PREC_POSTFIX if key == "left" else _PREC_ASSIGNMENT
            case "TemplateLiteral":
                return _PREC_SEQUENCE
            case "Property" | "MethodDefinition":
                return _PREC_SEQUENCE if key == "key" else _PREC_ASSIGNMENT
            case _:
                if kind.endswith("Statement"):
                    return _PREC_SEQUENCE
                return _PREC_ASSIGNMENT

    def _needs_parens(self, parent: ASTNode, key: str, child: ASTNode) -> bool:
        if self._precedence(child) < self._slot_precedence(parent, key):
            return True
        kind = node_type(parent)
        head = (kind == "MemberExpression" and key == "object") or (
            kind == "CallExpression" and key == "callee"
        )
        if head and is_type(child, _NEEDS_PARENS_AT_HEAD):
            return True
        if kind == "MemberExpression" and key == "object" and not parent.get("computed"):
            if is_type(child, "Literal") and isinstance(child.get("value"), (int, float)):
                return not isinstance(child.get("value"), bool)
        if kind == "NewExpression" and key == "callee":
            return _contains_call(child)
        if kind == "ArrowFunctionExpression" and key == "body":
            return is_type(self._leftmost(child), "ObjectExpression")
        if kind == "ExpressionStatement" and key == "expression":
            return is_type(self._leftmost(child), _NEEDS_PARENS_AT_HEAD)
        return False

    def _leftmost(self, node: ASTNode) -> ASTNode:
        """The expression whose first token starts node's text."""
        current = node
        while True:
            slot = _leftmost_slot(current)
            if slot is None:
                return current
            nxt = current.get(slot)
            if not is_node(nxt) or self._needs_parens(current, slot, nxt):  # type: ignore[arg-type]
                return current
            current = nxt  # type: ignore[assignment]

    # ============================================================
    # REPRINT
    # ============================================================

    def _start(self, node: ASTNode) -> int | None:
        """Source offset where node's text is printed, parsed or replacing."""
        span = self._span(node)
        if span is not None:
            return span[0]
        replaced = node.get("replaces")
        if isinstance(replaced, dict):
            return int(replaced["range"][0])  # type: ignore[index]
        return None

    def _starts_with_paren(self, node: ASTNode) -> bool:
        """True if the reprinted text of node begins with `(`."""
        assert self._source is not None
        current = node
        while True:
            span = self._span(current)
            slot = _leftmost_slot(current)
            nxt = current.get(slot) if slot is not None else None
            if span is not None:
                # Source text leads unless a hole opens at span[0]
                if not self._is_dirty(current) or not is_node(nxt):
                    return self._source[span[0]] == "("
                if self._start(nxt) != span[0]:  # type: ignore[arg-type]
                    return self._source[span[0]] == "("
            elif not is_node(nxt):
                return is_type(current, "ArrowFunctionExpression") and not current.get("async")
            if span is None or self._span(nxt) is None:  # type: ignore[arg-type]
                if self._needs_parens(current, slot, nxt):  # type: ignore[arg-type]
                    return True
            current = nxt  # type: ignore[assignment]

    def _needs_asi_guard(self, parent: ASTNode, key: str, stmt: ASTNode) -> bool:
        """True if stmt's new text would be read as continuing the statement before it.

        `a = b\\nfoo().m(...x)` reprints its second line as `($__0 = foo())...`,
        which would call `b`; a leading `;` keeps the statements apart.
        """
        assert self._source is not None
        if not is_type(stmt, "ExpressionStatement"):
            return False
        siblings = parent.get(key)
        if not isinstance(siblings, list):
            return False
        index = next(i for i, sibling in enumerate(siblings) if sibling is stmt)
        if index == 0:
            return False
        prev = siblings[index - 1]
        prev_span = node_range(prev) if is_node(prev) else None
        # Built statements always print their own terminator
        if prev_span is None or self._source[prev_span[1] - 1] == ";":
            return False
        span = self._span(stmt)
        if span is None or self._source[span[0]] == "(":
            return False
        return self._starts_with_paren(stmt)

    def _line_start(self, offset: int) -> int:
        assert self._source is not None
        return self._source.rfind("\n", 0, offset) + 1

    def _line_indent(self, offset: int) -> str:
        """Leading whitespace of the source line holding offset."""
        assert self._source is not None
        start = self._line_start(offset)
        end = start
        while end < offset and self._source[end] in " \t":
            end += 1
        return self._source[start:end]

    def _patch(self, node: ASTNode, span: tuple[int, int]) -> None:
        holes: list[tuple[int, int, int, int, str, ASTNode, str]] = []
        for seq, (key, index, child) in enumerate(child_slots(node)):
            child_span = node_range(child)
            if child_span is not None:
                if self._is_dirty(child):
                    holes.append((child_span[0], 1, seq, child_span[1], "patch", child, key))
                continue
            replaced = child.get("replaces")
            if isinstance(replaced, dict):
                start, end = replaced["range"]  # type: ignore[misc]
                holes.append((int(start), 1, seq, int(end), "replace", child, key))
            elif index is not None:
                holes.append(self._insertion(node, key, index, child, seq))
            else:
                raise MalformedTreeError(
                    f"built {node_type(child)} in slot {key!r} has no source position",
                    node,
                )
        holes.sort(key=lambda hole: hole[:3])
        pos = span[0]
        for start, _, _, end, kind, child, key in holes:
            self._out.copy(pos, start)
            saved = self._indent
            match kind:
                case "patch":
                    if self._needs_asi_guard(node, key, child):
                        self._out.write(";")
                    self._emit(child)
                case "replace":
                    self._indent = self._line_indent(start)
                    self._sub(node, key, child)
                case "before":
                    self._insert_before(start, child)
                case "after":
                    self._indent = self._line_indent(start)
                    self._out.write("\n" + self._indent)
                    self._out.mark(start)
                    self._emit(child)
            self._indent = saved
            pos = max(pos, end)
        self._out.copy(pos, span[1])

    def _insertion(
        self, parent: ASTNode, key: str, index: int, child: ASTNode, seq: int
    ) -> tuple[int, int, int, int, str, ASTNode, str]:
        siblings = parent[key]
        assert isinstance(siblings, list)
        for sibling in siblings[index + 1 :]:
            sibling_span = node_range(sibling) if is_node(sibling) else None
            if sibling_span is not None:
                return (sibling_span[0], 0, seq, sibling_span[0], "before", child, key)
        for sibling in reversed(siblings[:index]):
            sibling_span = node_range(sibling) if is_node(sibling) else None
            if sibling_span is not None:
                return (sibling_span[1], 0, seq, sibling_span[1], "after", child, key)
        raise MalformedTreeError(
            f"cannot place a built {node_type(child)} among unpositioned siblings",
            parent,
        )

    def _insert_before(self, offset: int, stmt: ASTNode) -> None:
        assert self._source is not None
        prefix = self._source[self._line_start(offset) : offset]
        self._out.mark(offset)
        if prefix.strip() == "":
            self._indent = prefix
            self._emit(stmt)
            self._out.write("\n" + prefix)
        else:
            self._indent = self._line_indent(offset)
            self._emit(stmt)
            self._out.write(" ")

    # ============================================================
    # GENERIC
    # ============================================================

    def _generic(self, node: ASTNode) -> None:
        w = self._out.write
        kind = node_type(node)
        match kind:
            # --- Program and blocks ---
            case "Program":
                body = node.get("body") or []
                for i, stmt in enumerate(body):  # type: ignore[arg-type]
                    if i:
                        w("\n" + self._indent)
                    self._emit(stmt)
                if body:
                    w("\n")
            case "BlockStatement" | "ClassBody":
                self._block(node.get("body") or [])  # type: ignore[arg-type]
            # --- Statements ---
            case "ExpressionStatement":
                self._sub(node, "expression", node.get("expression"))
                w(";")
            case "EmptyStatement":
                w(";")
            case "DebuggerStatement":
                w("debugger;")
            case "WithStatement":
                w("with (")
                self._sub(node, "object", node.get("object"))
                w(") ")
                self._emit(node["body"])  # type: ignore[arg-type]
            case "ReturnStatement" | "ThrowStatement":
                w("return" if kind == "ReturnStatement" else "throw")
                if node.get("argument") is not None:
                    w(" ")
                    self._sub(node, "argument", node.get("argument"))
                w(";")
            case "LabeledStatement":
                self._emit(node["label"])  # type: ignore[arg-type]
                w(": ")
                self._emit(node["body"])  # type: ignore[arg-type]
            case "BreakStatement" | "ContinueStatement":
                w("break" if kind == "BreakStatement" else "continue")
                if node.get("label") is not None:
                    w(" ")
                    self._emit(node["label"])  # type: ignore[arg-type]
                w(";")
            case "IfStatement":
                w("if (")
                self._sub(node, "test", node.get("test"))
                w(") ")
                consequent = node["consequent"]
                self._emit(consequent)  # type: ignore[arg-type]
                if node.get("alternate") is not None:
                    if is_type(consequent, "BlockStatement"):
                        w(" else ")
                    else:
                        w("\n" + self._indent + "else ")
                    self._emit(node["alternate"])  # type: ignore[arg-type]
            case "SwitchStatement":
                w("switch (")
                self._sub(node, "discriminant", node.get("discriminant"))
                w(") {")
                saved = self._indent
                self._indent = saved + _INDENT
                for case in node.get("cases") or []:  # type: ignore[attr-defined]
                    w("\n" + self._indent)
                    self._emit(case)
                self._indent = saved
                w("\n" + self._indent + "}")
            case "SwitchCase":
                if node.get("test") is None:
                    w("default:")
                else:
                    w("case ")
                    self._sub(node, "test", node.get("test"))
                    w(":")
                saved = self._indent
                self._indent = saved + _INDENT
                for stmt in node.get("consequent") or []:  # type: ignore[attr-defined]
                    w("\n" + self._indent)
                    self._emit(stmt)
                self._indent = saved
            case "TryStatement":
                w("try ")
                self._emit(node["block"])  # type: ignore[arg-type]
                if node.get("handler") is not None:
                    w(" ")
                    self._emit(node["handler"])  # type: ignore[arg-type]
                if node.get("finalizer") is not None:
                    w(" finally ")
                    self._emit(node["finalizer"])  # type: ignore[arg-type]
            case "CatchClause":
                w("catch (")
                self._emit(node["param"])  # type: ignore[arg-type]
                w(") ")
                self._emit(node["body"])  # type: ignore[arg-type]
            case "WhileStatement":
                w("while (")
                self._sub(node, "test", node.get("test"))
                w(") ")
                self._emit(node["body"])  # type: ignore[arg-type]
            case "DoWhileStatement":
                w("do ")
                self._emit(node["body"])  # type: ignore[arg-type]
                w(" while (")
                self._sub(node, "test", node.get("test"))
                w(");")
            case "ForStatement":
                w("for (")
                self._for_head(node, "init")
                w(";")
                if node.get("test") is not None:
                    w(" ")
                    self._sub(node, "test", node.get("test"))
                w(";")
                if node.get("update") is not None:
                    w(" ")
                    self._sub(node, "update", node.get("update"))
                w(") ")
                self._emit(node["body"])  # type: ignore[arg-type]
            case "ForInStatement" | "ForOfStatement":
                w("for (")
                self._for_head(node, "left")
                w(" in " if kind == "ForInStatement" else " of ")
                self._sub(node, "right", node.get("right"))
                w(") ")
                self._emit(node["body"])  # type: ignore[arg-type]
            case "VariableDeclaration":
                self._variable_declaration(node)
                w(";")
            case "VariableDeclarator":
                self._emit(node["id"])  # type: ignore[arg-type]
                if node.get("init") is not None:
                    w(" = ")
                    self._sub(node, "init", node.get("init"))
            # --- Functions and classes ---
            case "FunctionDeclaration" | "FunctionExpression":
                if node.get("async"):
                    w("async ")
                w("function")
                if node.get("generator"):
                    w("*")
                if node.get("id") is not None:
                    w(" ")
                    self._emit(node["id"])  # type: ignore[arg-type]
                self._function_tail(node)
            case "ArrowFunctionExpression":
                if node.get("async"):
                    w("async ")
                self._params(node)
                w(" => ")
                body = node["body"]
                if is_type(body, "BlockStatement"):
                    self._emit(body)  # type: ignore[arg-type]
                else:
                    self._sub(node, "body", body)
            case "ClassDeclaration" | "ClassExpression":
                w("class")
                if node.get("id") is not None:
                    w(" ")
                    self._emit(node["id"])  # type: ignore[arg-type]
                if node.get("superClass") is not None:
                    w(" extends ")
                    self._sub(node, "superClass", node.get("superClass"))
                w(" ")
                self._emit(node["body"])  # type: ignore[arg-type]
            case "MethodDefinition":
                if node.get("static"):
                    w("static ")
                self._method(node, str(node.get("kind")))
            # --- Modules ---
            case "ImportDeclaration":
                self._import(node)
            case "ImportSpecifier":
                self._emit(node["imported"])  # type: ignore[arg-type]
                if node["imported"].get("name") != node["local"].get("name"):  # type: ignore[union-attr]
                    w(" as ")
                    self._emit(node["local"])  # type: ignore[arg-type]
            case "ImportDefaultSpecifier":
                self._emit(node["local"])  # type: ignore[arg-type]
            case "ImportNamespaceSpecifier":
                w("* as ")
                self._emit(node["local"])  # type: ignore[arg-type]
            case "ExportNamedDeclaration":
                w("export ")
                if node.get("declaration") is not None:
                    self._emit(node["declaration"])  # type: ignore[arg-type]
                else:
                    self._specifiers(node.get("specifiers") or [])  # type: ignore[arg-type]
                    if node.get("source") is not None:
                        w(" from ")
                        self._emit(node["source"])  # type: ignore[arg-type]
                    w(";")
            case "ExportSpecifier":
                self._emit(node["local"])  # type: ignore[arg-type]
                if node["exported"].get("name") != node["local"].get("name"):  # type: ignore[union-attr]
                    w(" as ")
                    self._emit(node["exported"])  # type: ignore[arg-type]
            case "ExportDefaultDeclaration":
                w("export default ")
                declaration = node["declaration"]
                if is_type(declaration, ("FunctionDeclaration", "ClassDeclaration")):
                    self._emit(declaration)  # type: ignore[arg-type]
                else:
                    self._sub(node, "declaration", declaration)
                    w(";")
            case "ExportAllDeclaration":
                w("export * from ")
                self._emit(node["source"])  # type: ignore[arg-type]
                w(";")
            # --- Expressions ---
            case "Identifier":
                w(str(node.get("name")))
            case "Literal":
                w(render_literal(node))
            case "ThisExpression":
                w("this")
            case "Super":
                w("super")
            case "Import":
                w("import")
            case "ArrayExpression" | "ArrayPattern":
                elements = node.get("elements") or []
                w("[")
                for i, element in enumerate(elements):  # type: ignore[arg-type]
                    if i:
                        w(", ")
                    self._sub(node, "elements", element)
                # A trailing hole needs its own comma: [1, ,]
                if elements and elements[-1] is None:  # type: ignore[index]
                    w(",")
                w("]")
            case "ObjectExpression" | "ObjectPattern":
                properties = node.get("properties") or []
                if not properties:
                    w("{}")
                else:
                    w("{ ")
                    self._comma_list(node, "properties")
                    w(" }")
            case "Property":
                self._property(node)
            case "TemplateLiteral":
                quasis = node.get("quasis") or []
                expressions = node.get("expressions") or []
                w("`")
                for i, quasi in enumerate(quasis):  # type: ignore[arg-type]
                    self._emit(quasi)
                    if i < len(expressions):  # type: ignore[arg-type]
                        w("${")
                        self._sub(node, "expressions", expressions[i])  # type: ignore[index]
                        w("}")
                w("`")
            case "TemplateElement":
                value = node.get("value")
                w(str(value.get("raw", "")) if isinstance(value, dict) else "")
            case "TaggedTemplateExpression":
                self._sub(node, "tag", node.get("tag"))
                self._emit(node["quasi"])  # type: ignore[arg-type]
            case "UnaryExpression":
                op = str(node.get("operator"))
                argument = node.get("argument")
                w(op)
                if op.isalpha():
                    w(" ")
                elif is_type(argument, ("UnaryExpression", "UpdateExpression")):
                    # - -x and + ++x must not fuse into -- and +++
                    inner = str(argument.get("operator", ""))  # type: ignore[union-attr]
                    if argument.get("prefix", True) and inner.startswith(op):  # type: ignore[union-attr]
                        w(" ")
                self._sub(node, "argument", argument)
            case "UpdateExpression":
                op = str(node.get("operator"))
                if node.get("prefix"):
                    w(op)
                    self._sub(node, "argument", node.get("argument"))
                else:
                    self._sub(node, "argument", node.get("argument"))
                    w(op)
            case "BinaryExpression" | "LogicalExpression" | "AssignmentExpression":
                self._sub(node, "left", node.get("left"))
                w(" " + str(node.get("operator")) + " ")
                self._sub(node, "right", node.get("right"))
            case "AssignmentPattern":
                self._emit(node["left"])  # type: ignore[arg-type]
                w(" = ")
                self._sub(node, "right", node.get("right"))
            case "ConditionalExpression":
                self._sub(node, "test", node.get("test"))
                w(" ? ")
                self._sub(node, "consequent", node.get("consequent"))
                w(" : ")
                self._sub(node, "alternate", node.get("alternate"))
            case "CallExpression":
                self._sub(node, "callee", node.get("callee"))
                self._arguments(node)
            case "NewExpression":
                w("new ")
                self._sub(node, "callee", node.get("callee"))
                self._arguments(node)
            case "MemberExpression":
                self._sub(node, "object", node.get("object"))
                if node.get("computed"):
                    w("[")
                    self._sub(node, "property", node.get("property"))
                    w("]")
                else:
                    w(".")
                    self._emit(node["property"])  # type: ignore[arg-type]
            case "MetaProperty":
                self._emit(node["meta"])  # type: ignore[arg-type]
                w(".")
                self._emit(node["property"])  # type: ignore[arg-type]
            case "SequenceExpression":
                self._comma_list(node, "expressions")
            case "YieldExpression":
                w("yield")
                if node.get("delegate"):
                    w("*")
                if node.get("argument") is not None:
                    w(" ")
                    self._sub(node, "argument", node.get("argument"))
            case "AwaitExpression":
                w("await ")
                self._sub(node, "argument", node.get("argument"))
            case "SpreadElement" | "RestElement":
                w("...")
                self._sub(node, "argument", node.get("argument"))
            case _:
                raise PrintError(f"cannot print node kind {kind!r}")

    # --- Generic helpers ---

    def _block(self, body: list[ASTNode]) -> None:
        w = self._out.write
        if not body:
            w("{}")
            return
        w("{")
        saved = self._indent
        self._indent = saved + _INDENT
        for stmt in body:
            w("\n" + self._indent)
            self._emit(stmt)
        self._indent = saved
        w("\n" + self._indent + "}")

    def _comma_list(self, node: ASTNode, key: str) -> None:
        for i, item in enumerate(node.get(key) or []):  # type: ignore[arg-type]
            if i:
                self._out.write(", ")
            self._sub(node, key, item)

    def _arguments(self, node: ASTNode) -> None:
        self._out.write("(")
        self._comma_list(node, "arguments")
        self._out.write(")")

    def _params(self, fn: ASTNode) -> None:
        self._out.write("(")
        self._comma_list(fn, "params")
        self._out.write(")")

    def _function_tail(self, fn: ASTNode) -> None:
        self._params(fn)
        self._out.write(" ")
        self._emit(fn["body"])  # type: ignore[arg-type]

    def _key(self, node: ASTNode) -> None:
        if node.get("computed"):
            self._out.write("[")
            self._sub(node, "key", node.get("key"))
            self._out.write("]")
        else:
            self._emit(node["key"])  # type: ignore[arg-type]

    def _method(self, node: ASTNode, kind: str) -> None:
        """Method-style member: `get k() {}`, `async *k() {}`, `k() {}`."""
        fn = node.get("value")
        if not is_node(fn):
            raise MalformedTreeError("method has no function value", node)
        if kind in ("get", "set"):
            self._out.write(kind + " ")
        if fn.get("async"):  # type: ignore[union-attr]
            self._out.write("async ")
        if fn.get("generator"):  # type: ignore[union-attr]
            self._out.write("*")
        self._key(node)
        self._function_tail(fn)  # type: ignore[arg-type]

    def _property(self, node: ASTNode) -> None:
        kind = str(node.get("kind", "init"))
        if node.get("shorthand"):
            self._emit(node["value"])  # type: ignore[arg-type]
        elif kind in ("get", "set") or node.get("method"):
            self._method(node, kind)
        else:
            self._key(node)
            self._out.write(": ")
            self._sub(node, "value", node.get("value"))

    def _variable_declaration(self, node: ASTNode) -> None:
        self._out.write(str(node.get("kind", "var")) + " ")
        self._comma_list(node, "declarations")

    def _for_head(self, node: ASTNode, key: str) -> None:
        head = node.get(key)
        if not is_node(head):
            return
        if is_type(head, "VariableDeclaration") and self._span(head) is None:  # type: ignore[arg-type]
            self._variable_declaration(head)  # type: ignore[arg-type]
        else:
            self._sub(node, key, head)

    def _specifiers(self, specifiers: list[ASTNode]) -> None:
        self._out.write("{ " if specifiers else "{")
        for i, spec in enumerate(specifiers):
            if i:
                self._out.write(", ")
            self._emit(spec)
        self._out.write(" }" if specifiers else "}")

    def _import(self, node: ASTNode) -> None:
        w = self._out.write
        specifiers: list[ASTNode] = list(node.get("specifiers") or [])  # type: ignore[call-overload]
        w("import ")
        if specifiers:
            named: list[ASTNode] = []
            leading: list[ASTNode] = []
            for spec in specifiers:
                if is_type(spec, "ImportSpecifier"):
                    named.append(spec)
                else:
                    leading.append(spec)
            for i, spec in enumerate(leading):
                if i:
                    w(", ")
                self._emit(spec)
            if named:
                if leading:
                    w(", ")
                self._specifiers(named)
            w(" from ")
        self._emit(node["source"])  # type: ignore[arg-type]
        w(";")


def print_tree(
    tree: ASTNode,
    source: str | None = None,
    *,
    source_file_name: str | None = None,
    source_map_name: str | None = None,
) -> PrintResult:
    """Print tree, reusing the text of source for every unchanged node."""
    if source_map_name is not None and source_file_name is None:
        raise ConfigError("source_map_name requires source_file_name")
    if not is_node(tree):
        raise MalformedTreeError("tree root is not an ESTree node")
    printer = _Printer(source)
    printer.print_root(tree)
    if source_map_name is None:
        return PrintResult(printer.code)
    assert source_file_name is not None
    source_map = build_source_map(
        printer.mappings,
        file=source_map_name,
        source_name=source_file_name,
        source_content=source,
    )
    return PrintResult(printer.code, source_map)


def to_source(tree: ASTNode) -> str:
    """Print tree from scratch, ignoring any source positions."""
    return print_tree(tree).code
