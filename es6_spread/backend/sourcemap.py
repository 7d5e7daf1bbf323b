"""Source map v3 encoding.

A mapping is a tuple (generated line, generated column, original line,
original column), all zero-based. Every compiled unit has exactly one source,
so the source index field is always 0 and names are never recorded.
"""

from __future__ import annotations

Mapping = tuple[int, int, int, int]

_BASE64_DIGITS = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
_VLQ_SHIFT = 5
_VLQ_CONTINUATION = 1 << _VLQ_SHIFT
_VLQ_MASK = _VLQ_CONTINUATION - 1


def encode_vlq(value: int) -> str:
    """Base64 VLQ encoding of one signed integer."""
    vlq = ((-value) << 1) | 1 if value < 0 else value << 1
    digits: list[str] = []
    while True:
        digit = vlq & _VLQ_MASK
        vlq >>= _VLQ_SHIFT
        if vlq:
            digit |= _VLQ_CONTINUATION
        digits.append(_BASE64_DIGITS[digit])
        if not vlq:
            break
    return "".join(digits)


def decode_vlq(text: str) -> list[int]:
    """Decode a run of base64 VLQ digits into signed integers."""
    values: list[int] = []
    value = 0
    shift = 0
    for ch in text:
        digit = _BASE64_DIGITS.index(ch)
        value += (digit & _VLQ_MASK) << shift
        if digit & _VLQ_CONTINUATION:
            shift += _VLQ_SHIFT
            continue
        values.append(-(value >> 1) if value & 1 else value >> 1)
        value = 0
        shift = 0
    return values


def encode_mappings(mappings: list[Mapping]) -> str:
    """The "mappings" field: lines split by ';', segments by ','."""
    lines: list[list[str]] = []
    prev_column = 0
    prev_orig_line = 0
    prev_orig_column = 0
    for line, column, orig_line, orig_column in sorted(mappings):
        if line >= len(lines):
            while len(lines) <= line:
                lines.append([])
            prev_column = 0
        segment = (
            encode_vlq(column - prev_column)
            + encode_vlq(0)
            + encode_vlq(orig_line - prev_orig_line)
            + encode_vlq(orig_column - prev_orig_column)
        )
        lines[line].append(segment)
        prev_column = column
        prev_orig_line = orig_line
        prev_orig_column = orig_column
    return ";".join(",".join(segments) for segments in lines)


def build_source_map(
    mappings: list[Mapping],
    *,
    file: str,
    source_name: str,
    source_content: str | None,
) -> dict[str, object]:
    """Assemble a v3 source map dict, ready for json.dumps."""
    return {
        "version": 3,
        "file": file,
        "sources": [source_name],
        "sourcesContent": [source_content],
        "names": [],
        "mappings": encode_mappings(mappings),
    }
