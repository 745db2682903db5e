"""Consumer for ``O`` nodes, projecting their properties into a destination."""

import logging
from typing import Any

from php_unmarshal.dispatch import consume_next
from php_unmarshal.errors import CorruptStreamError, FieldTypeMismatchError, InvalidKeyError, MalformedCountError
from php_unmarshal.fields import (
    Destination,
    DiscardSink,
    FloatSlot,
    IntSlot,
    OpaqueSlot,
    RecordSlot,
    Slot,
    UIntSlot,
    as_destination,
)
from php_unmarshal.scalars import check_type
from php_unmarshal.scanner import ErrorMode, read_count
from php_unmarshal.text import consume_string, consume_string_payload

logger = logging.getLogger(__name__)

# Deepest object nesting accepted; the decoder recurses once per level.
MAX_DEPTH = 256


def _expect(data: bytes, char: str, offset: int) -> int:
    if offset >= len(data):
        raise CorruptStreamError(f"unexpected end of input, expected {char!r}", offset)
    if data[offset] != ord(char):
        found = chr(data[offset])
        raise CorruptStreamError(f"expected {char!r}, found {found!r}", offset)
    return offset + 1


def consume_object(
    data: bytes,
    offset: int,
    destination: Any,
    errors: ErrorMode = "replace",
    depth: int = 0,
) -> int:
    """Decode the object node at ``offset`` into ``destination``.

    The class name is read only to skip over it. Each property whose key
    matches a field on ``destination`` is written there; unmatched properties
    are decoded into a :class:`DiscardSink` so the cursor stays in step.

    Args:
        data: The serialized buffer.
        offset: Offset of the ``O`` tag.
        destination: A record instance, dict or :class:`Destination`.
        errors: How to decode string payloads that are not valid UTF-8.
        depth: Nesting level of this node; the top-level object is 0.

    Returns:
        The offset just past the closing ``}``.

    Raises:
        CorruptStreamError: If objects nest deeper than :data:`MAX_DEPTH`.
        PhpDeserializeError: On any framing, key or type error. Fields written
            before the failure keep their new values.
    """
    check_type(data, "O", offset)
    if depth > MAX_DEPTH:
        raise CorruptStreamError(f"objects nested deeper than {MAX_DEPTH} levels", offset)
    dest = as_destination(destination)

    _, offset = consume_string_payload(data, offset + 2, terminator=b'":', errors=errors)

    start = offset
    length, offset = read_count(data, offset)
    if length < 0:
        raise MalformedCountError(f"negative property count {length}", start)

    offset = _expect(data, "{", offset)

    for _ in range(length):
        if offset >= len(data):
            raise CorruptStreamError("unexpected end of input inside object", offset)
        if data[offset] != ord("s"):
            raise InvalidKeyError(f"object key must be a string, found {chr(data[offset])!r}", offset)
        key, offset = consume_string(data, offset, errors=errors)
        if isinstance(key, bytes):
            key = key.decode("utf-8", errors="replace")

        slot = dest.lookup(key)
        if slot is None and not isinstance(dest, DiscardSink):
            logger.debug("discarding property %r: no matching field on %r", key, dest)

        if offset < len(data) and data[offset] == ord("O"):
            if slot is None:
                sub_dest: Destination = DiscardSink()
            else:
                sub_dest = _nested_destination(slot, offset)
            offset = consume_object(data, offset, sub_dest, errors=errors, depth=depth + 1)
        else:
            value_offset = offset
            value, offset = consume_next(data, offset, errors=errors)
            if slot is not None:
                set_field(slot, value, value_offset)

    return _expect(data, "}", offset)


def _nested_destination(slot: Slot, offset: int) -> Destination:
    try:
        nested = slot.nested()
    except Exception as exc:
        raise FieldTypeMismatchError(f"can not create {slot.hint!r} for field {slot.name!r}: {exc}", offset) from exc
    if nested is None:
        raise FieldTypeMismatchError(f"field {slot.name!r} of type {slot.hint!r} can not hold an object", offset)
    return nested


def _mismatch(slot: Slot, value: Any, offset: int) -> FieldTypeMismatchError:
    return FieldTypeMismatchError(
        f"can not assign {type(value).__name__} {value!r} to field {slot.name!r} of type {slot.hint!r}",
        offset,
    )


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def set_field(slot: Slot, value: Any, offset: int = -1) -> None:
    """Coerce ``value`` for the kind of ``slot`` and store it."""
    if value is None and slot.optional:
        slot.set(None)
    elif isinstance(slot, IntSlot):
        if not _is_int(value):
            raise _mismatch(slot, value, offset)
        slot.set(int(value))
    elif isinstance(slot, UIntSlot):
        if not _is_int(value) or value < 0:
            raise _mismatch(slot, value, offset)
        slot.set(int(value))
    elif isinstance(slot, FloatSlot):
        if not (_is_int(value) or isinstance(value, float)):
            raise _mismatch(slot, value, offset)
        slot.set(float(value))
    elif isinstance(slot, RecordSlot):
        raise _mismatch(slot, value, offset)
    elif isinstance(slot, OpaqueSlot):
        if not slot.accepts(value):
            raise _mismatch(slot, value, offset)
        slot.set(value)
    else:
        slot.set(value)
