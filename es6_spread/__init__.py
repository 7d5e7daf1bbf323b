"""Compile ES6 spread arguments and elements down to ES5.

    f(a, ...b)      ->  f.apply(null, [a].concat($__spread0(b)))
    [a, ...b]       ->  [a].concat($__spread0(b))
    new F(...b)     ->  new (Function.prototype.bind.apply(F, [null].concat($__spread0(b))))()

`transform` rewrites an ESTree tree; `compile` goes from source text to source
text (and an optional source map) through parse, transform and print.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, replace

from .backend.printer import PrintResult, print_tree
from .errors import (
    ConfigError,
    MalformedTreeError,
    ParseError,
    PreconditionError,
    PrintError,
    ScopeExhaustedError,
    SpreadError,
)
from .frontend.parse import SOURCE_TYPES, from_esprima, parse
from .middleend.iteration import IterationStrategy
from .middleend.spread import rewrite_spread
from .nodes import ASTNode, is_node


@dataclass(frozen=True)
class CompileOptions:
    """Options for one compilation unit."""

    # Origin file name, recorded in the source map
    source_file_name: str | None = None
    # Name of the generated file the source map describes; enables the map
    source_map_name: str | None = None
    iteration: IterationStrategy = IterationStrategy.ITERATOR
    source_type: str = "script"

    def validate(self) -> CompileOptions:
        """Normalize iteration names and reject inconsistent options."""
        options = replace(self, iteration=IterationStrategy.from_name(self.iteration))
        if options.source_type not in SOURCE_TYPES:
            raise ConfigError(f"unknown source type: {options.source_type}")
        if options.source_map_name is not None and options.source_file_name is None:
            raise ConfigError("source_map_name requires source_file_name")
        return options


def transform(
    tree: object, iteration: IterationStrategy | str = IterationStrategy.ITERATOR
) -> ASTNode:
    """Return a copy of tree with every spread rewritten. tree is not modified."""
    if is_node(tree):
        owned = copy.deepcopy(tree)
    else:
        owned = from_esprima(tree)
    if not is_node(owned):
        raise MalformedTreeError("tree root is not an ESTree node")
    return rewrite_spread(owned, IterationStrategy.from_name(iteration))  # type: ignore[arg-type]


def compile(
    source: str, options: CompileOptions | None = None, **overrides: object
) -> PrintResult:
    """Compile source text. Keyword overrides replace fields of options."""
    if options is None:
        options = CompileOptions()
    if overrides:
        unknown = set(overrides) - set(CompileOptions.__dataclass_fields__)
        if unknown:
            raise ConfigError("unknown compile options: " + ", ".join(sorted(unknown)))
        options = replace(options, **overrides)  # type: ignore[arg-type]
    options = options.validate()
    tree = parse(source, options.source_type)
    rewritten = rewrite_spread(tree, options.iteration)
    return print_tree(
        rewritten,
        source,
        source_file_name=options.source_file_name,
        source_map_name=options.source_map_name,
    )


__all__ = [
    "CompileOptions",
    "ConfigError",
    "IterationStrategy",
    "MalformedTreeError",
    "ParseError",
    "PreconditionError",
    "PrintError",
    "PrintResult",
    "ScopeExhaustedError",
    "SpreadError",
    "compile",
    "parse",
    "print_tree",
    "transform",
]
