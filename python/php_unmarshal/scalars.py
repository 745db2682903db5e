"""Consumers for the fixed-shape scalar tags: ``N``, ``b``, ``i`` and ``d``.

Each consumer takes the buffer and the offset of the tag byte and returns the
decoded value together with the offset just past the node's ``;``.
"""

import re
from typing import Tuple

from php_unmarshal.errors import CorruptStreamError, NumericParseError, UnexpectedTagError
from php_unmarshal.scanner import read_until

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_INT_RE = re.compile(r"[+-]?[0-9]+\Z")
_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)\Z",
    re.IGNORECASE,
)

_TAG_NAMES = {
    "N": "null",
    "b": "a boolean",
    "i": "an integer",
    "d": "a float",
    "s": "a string",
    "O": "an object",
}


def check_type(data: bytes, tag: str, offset: int, separator: str = ":") -> None:
    """Ensure ``data[offset]`` is ``tag`` followed by ``separator``.

    Raises:
        CorruptStreamError: If the buffer ends before the separator.
        UnexpectedTagError: If either byte is wrong.
    """
    if offset + 1 >= len(data):
        raise CorruptStreamError(f"truncated input, expected {_TAG_NAMES.get(tag, tag)}", offset)
    if data[offset] != ord(tag) or data[offset + 1] != ord(separator):
        found = data[offset:offset + 2].decode("ascii", errors="replace")
        raise UnexpectedTagError(f"not {_TAG_NAMES.get(tag, tag)}: found {found!r}", offset)


def _consume_literal(data: bytes, offset: int) -> Tuple[str, int]:
    literal, end = read_until(data, ord(";"), offset + 2)
    if end < 0:
        raise CorruptStreamError("missing ';' terminator", offset)
    return literal, end + 1


def consume_nil(data: bytes, offset: int) -> Tuple[None, int]:
    check_type(data, "N", offset, separator=";")
    return None, offset + 2


def consume_bool(data: bytes, offset: int) -> Tuple[bool, int]:
    check_type(data, "b", offset)
    if offset + 3 >= len(data):
        raise CorruptStreamError("truncated boolean", offset)
    if data[offset + 3] != ord(";"):
        raise CorruptStreamError("missing ';' terminator", offset)
    # Any payload other than '1' is false.
    return data[offset + 2] == ord("1"), offset + 4


def consume_int(data: bytes, offset: int) -> Tuple[int, int]:
    """Decode ``i:<digits>;`` as a signed 64-bit integer."""
    check_type(data, "i", offset)
    literal, new_offset = _consume_literal(data, offset)
    if not _INT_RE.match(literal):
        raise NumericParseError(f"invalid integer {literal!r}", offset)
    value = int(literal)
    if not INT64_MIN <= value <= INT64_MAX:
        raise NumericParseError(f"integer {literal} out of 64-bit range", offset)
    return value, new_offset


def consume_float(data: bytes, offset: int) -> Tuple[float, int]:
    """Decode ``d:<decimal>;``, including PHP's ``INF``, ``-INF`` and ``NAN``."""
    check_type(data, "d", offset)
    literal, new_offset = _consume_literal(data, offset)
    if not _FLOAT_RE.match(literal):
        raise NumericParseError(f"invalid float {literal!r}", offset)
    return float(literal), new_offset
