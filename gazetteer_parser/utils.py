"""Tokenization and threshold helpers shared by the parser."""

from __future__ import annotations

import struct
from collections.abc import Iterator

METADATA_FILENAME = "metadata.json"
PARSER_FILE = "parser"

# Characters carrying the Unicode White_Space property.
_WHITESPACE = frozenset(
    [chr(code) for code in range(0x09, 0x0E)]
    + [" ", "\x85", "\xa0", "\u1680"]
    + [chr(code) for code in range(0x2000, 0x200B)]
    + ["\u2028", "\u2029", "\u202f", "\u205f", "\u3000"]
)


def _to_f32(value: float) -> float:
    """Round a number to single precision."""
    return struct.unpack("<f", struct.pack("<f", value))[0]


def check_threshold(n_decoded: int, n_skips: int, threshold: float) -> bool:
    """Tell whether the fraction of decoded tokens reaches the threshold."""
    total = n_decoded + n_skips
    if total == 0:
        return False
    ratio = _to_f32(_to_f32(n_decoded) / _to_f32(total))
    return ratio >= _to_f32(threshold)


def whitespace_tokenizer(text: str) -> Iterator[tuple[range, str]]:
    """Yield each whitespace-separated token with its character range."""
    start = None
    for idx, char in enumerate(text):
        if char in _WHITESPACE:
            if start is not None:
                yield range(start, idx), text[start:idx]
                start = None
        elif start is None:
            start = idx
    if start is not None:
        yield range(start, len(text)), text[start:]