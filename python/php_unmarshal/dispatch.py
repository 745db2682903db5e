"""Routes a node to the consumer for its tag byte."""

from typing import Any, Callable, Dict, Tuple

from php_unmarshal.errors import CorruptStreamError, UnsupportedTagError
from php_unmarshal.scalars import consume_bool, consume_float, consume_int, consume_nil
from php_unmarshal.scanner import ErrorMode
from php_unmarshal.text import consume_string

_MAX_TAIL = 64

_SCALARS: Dict[int, Callable[[bytes, int], Tuple[Any, int]]] = {
    ord("N"): consume_nil,
    ord("b"): consume_bool,
    ord("i"): consume_int,
    ord("d"): consume_float,
}


def consume_next(data: bytes, offset: int, errors: ErrorMode = "replace") -> Tuple[Any, int]:
    """Decode the scalar or string node starting at ``offset``.

    Returns the value and the offset of the next sibling node.

    Raises:
        CorruptStreamError: If ``offset`` is at or past the end of ``data``.
        UnsupportedTagError: If the tag is not one of ``N``, ``b``, ``i``,
            ``d`` or ``s``.
    """
    if offset < 0 or offset >= len(data):
        raise CorruptStreamError("unexpected end of input", offset)

    tag = data[offset]
    if tag == ord("s"):
        return consume_string(data, offset, errors=errors)
    consumer = _SCALARS.get(tag)
    if consumer is not None:
        return consumer(data, offset)

    tail = data[offset:offset + _MAX_TAIL].decode("utf-8", errors="replace")
    if len(data) - offset > _MAX_TAIL:
        tail += "..."
    raise UnsupportedTagError(f"can not consume type {chr(tag)!r}: {tail}", offset)
