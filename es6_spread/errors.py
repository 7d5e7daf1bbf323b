"""Errors raised while compiling spread syntax away.

Every error aborts the current compilation unit. Nothing is retried and no
partial output is produced.
"""

from __future__ import annotations


class SpreadError(Exception):
    """Base class for all es6-spread errors."""


class PreconditionError(SpreadError):
    """The installed parser cannot parse spread elements."""


class ParseError(SpreadError):
    """Parse error with location info."""

    def __init__(self, msg: str, lineno: int, col: int):
        self.msg: str = msg
        self.lineno: int = lineno
        self.col: int = col
        super().__init__(msg)

    def __str__(self) -> str:
        return f"{self.lineno}:{self.col}: {self.msg}"


class MalformedTreeError(SpreadError):
    """The tree handed to the transform or printer is inconsistent."""

    def __init__(self, msg: str, node: object = None):
        self.msg: str = msg
        self.node_type: str | None = None
        if isinstance(node, dict):
            kind = node.get("type")
            if isinstance(kind, str):
                self.node_type = kind
        if self.node_type is not None:
            msg = f"{self.node_type}: {msg}"
        super().__init__(msg)


class ScopeExhaustedError(SpreadError):
    """No unused temporary name was found within the search bound."""

    def __init__(self, prefix: str, limit: int):
        self.prefix: str = prefix
        self.limit: int = limit
        super().__init__(
            f"no free identifier with prefix {prefix!r} in {limit} candidates"
        )


class ConfigError(SpreadError):
    """Invalid compile options."""


class PrintError(SpreadError):
    """The printer met a node it cannot render."""
