"""Parse ECMAScript source into a dict-based ESTree tree.

Parsing is delegated to esprima; its node objects are converted into plain
dicts so the rest of the pipeline never touches parser-specific classes.
"""

from __future__ import annotations

import esprima
from esprima.error_handler import Error as EsprimaError

from ..errors import ParseError, PreconditionError
from ..nodes import ASTNode, SPREAD_ELEMENT, node_type

SOURCE_TYPES: tuple[str, ...] = ("script", "module")

# esprima spells keyword-named attributes differently from ESTree
_RENAMED_KEYS: dict[str, str] = {
    "isAsync": "async",
    "allowAwait": "await",
    "isStatic": "static",
}

_PROBE_SOURCE = "f(...a)"


def from_esprima(value: object) -> object:
    """Convert esprima node objects (recursively) into ESTree dicts."""
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, (list, tuple)):
        return [from_esprima(item) for item in value]
    if isinstance(value, dict):
        return {key: from_esprima(item) for key, item in value.items()}
    if hasattr(value, "__dict__"):
        result: dict[str, object] = {}
        for key, item in vars(value).items():
            result[_RENAMED_KEYS.get(key, key)] = from_esprima(item)
        return result
    # Compiled regex values and other opaque scalars
    return value


def _run_parser(source: str, source_type: str) -> object:
    options = {"range": True, "loc": True}
    if source_type == "module":
        return esprima.parseModule(source, options)
    return esprima.parseScript(source, options)


def check_parser() -> None:
    """Fail fast unless the installed esprima understands spread arguments."""
    version = getattr(esprima, "version", "unknown")
    try:
        probe = from_esprima(_run_parser(_PROBE_SOURCE, "script"))
    except EsprimaError as e:
        raise PreconditionError(
            f"esprima {version} cannot parse spread arguments: {e}"
        ) from e
    found = False
    if isinstance(probe, dict):
        body = probe.get("body")
        if isinstance(body, list) and len(body) == 1:
            expr = body[0].get("expression")
            if isinstance(expr, dict):
                args = expr.get("arguments")
                if isinstance(args, list) and len(args) == 1:
                    found = node_type(args[0]) == SPREAD_ELEMENT
    if not found:
        raise PreconditionError(
            f"esprima {version} does not produce SpreadElement nodes"
        )


def parse(source: str, source_type: str = "script") -> ASTNode:
    """Parse source text into an ESTree Program dict."""
    if source_type not in SOURCE_TYPES:
        raise ValueError(f"unknown source type: {source_type}")
    try:
        program = _run_parser(source, source_type)
    except EsprimaError as e:
        msg = getattr(e, "description", None) or str(e)
        lineno = getattr(e, "lineNumber", None) or 0
        col = getattr(e, "column", None) or 0
        raise ParseError(str(msg), int(lineno), int(col)) from e
    tree = from_esprima(program)
    assert isinstance(tree, dict)
    return tree


check_parser()
