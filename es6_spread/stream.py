"""Streaming adapter: buffer every chunk, compile once at end of input."""

from __future__ import annotations

from typing import IO

from . import CompileOptions, compile


class SpreadTransformStream:
    """Collects text or UTF-8 bytes; end() returns the compiled code."""

    def __init__(self, options: CompileOptions | None = None) -> None:
        self.options = options
        self._chunks: list[str] = []
        self._pending = b""
        self._ended = False

    def write(self, chunk: str | bytes) -> None:
        if self._ended:
            raise ValueError("write after end")
        if isinstance(chunk, bytes):
            self._pending += chunk
            return
        self._flush_bytes()
        self._chunks.append(chunk)

    def end(self) -> str:
        if self._ended:
            raise ValueError("stream already ended")
        self._flush_bytes()
        self._ended = True
        return compile("".join(self._chunks), self.options).code

    def _flush_bytes(self) -> None:
        # Multi-byte characters may straddle chunks, so bytes decode as a run
        if self._pending:
            self._chunks.append(self._pending.decode("utf-8"))
            self._pending = b""


def compile_stream(
    instream: IO[str] | IO[bytes],
    outstream: IO[str],
    options: CompileOptions | None = None,
) -> None:
    """Read instream to its end, compile, and write the code to outstream."""
    stream = SpreadTransformStream(options)
    while True:
        chunk = instream.read(65536)
        if not chunk:
            break
        stream.write(chunk)
    outstream.write(stream.end())
