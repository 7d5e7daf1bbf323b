"""Middleend: the spread rewrite proper."""

from .iteration import IterationStrategy
from .scope import MAX_TEMPORARIES, TEMP_PREFIX, allocate_name
from .spread import SpreadRewriter, rewrite_spread

__all__ = [
    "IterationStrategy",
    "MAX_TEMPORARIES",
    "SpreadRewriter",
    "TEMP_PREFIX",
    "allocate_name",
    "rewrite_spread",
]
