"""Backend package - prints ESTree trees back to JavaScript source."""

from .printer import PrintResult, print_tree, to_source
from .sourcemap import build_source_map, encode_vlq

__all__ = [
    "PrintResult",
    "build_source_map",
    "encode_vlq",
    "print_tree",
    "to_source",
]
