"""Frontend package - converts ECMAScript source to a dict-based ESTree tree."""

from .names import collect_names
from .parse import SOURCE_TYPES, check_parser, from_esprima, parse

__all__ = [
    "SOURCE_TYPES",
    "check_parser",
    "collect_names",
    "from_esprima",
    "parse",
]
