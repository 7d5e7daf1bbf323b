"""Shared utilities for the printer: literal rendering."""

from __future__ import annotations

import math

from ..errors import PrintError
from ..nodes import ASTNode


def escape_string(value: str) -> str:
    """Escape a string for use in a double-quoted literal (without quotes)."""
    return (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\t", "\\t")
        .replace("\r", "\\r")
        .replace("\f", "\\f")
        .replace("\v", "\\v")
        .replace("\x00", "\\x00")
        .replace("\u2028", "\\u2028")
        .replace("\u2029", "\\u2029")
    )


def render_number(value: int | float) -> str:
    """Render a number the way JavaScript's Number#toString would."""
    if isinstance(value, bool):
        raise PrintError(f"not a number: {value!r}")
    if isinstance(value, int):
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    text = repr(value)
    if "e" in text:
        # Python pads exponents ("1e-07"); JavaScript does not ("1e-7")
        mantissa, exponent = text.split("e")
        sign = "-" if exponent.startswith("-") else "+"
        digits = exponent.lstrip("+-").lstrip("0") or "0"
        text = mantissa + "e" + sign + digits
    return text


def render_literal(node: ASTNode) -> str:
    """Source text of a Literal node; parsed literals keep their raw text."""
    raw = node.get("raw")
    if isinstance(raw, str):
        return raw
    regex = node.get("regex")
    if isinstance(regex, dict):
        return "/" + str(regex.get("pattern", "")) + "/" + str(regex.get("flags", ""))
    value = node.get("value")
    if value is None:
        return "null"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, str):
        return '"' + escape_string(value) + '"'
    if isinstance(value, (int, float)):
        return render_number(value)
    raise PrintError(f"cannot render literal value {value!r}")


def is_negative_number(node: ASTNode) -> bool:
    """True for a built numeric literal that prints with a leading minus."""
    if "raw" in node:
        return False
    value = node.get("value")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return value < 0
