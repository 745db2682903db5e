"""Consumer for the ``s`` tag and the length-prefixed payload framing.

The same ``<length>:"<bytes>"`` framing wraps object class names, so the
payload reader is shared with :mod:`php_unmarshal.objects`.
"""

from typing import Tuple, Union

from php_unmarshal.errors import CorruptStreamError, MalformedCountError, MalformedStringError
from php_unmarshal.scalars import check_type
from php_unmarshal.scanner import ErrorMode, decode_php_bytes, read_count

_QUOTE = ord('"')


def consume_string_payload(
    data: bytes,
    offset: int,
    terminator: bytes = b'";',
    errors: ErrorMode = "replace",
) -> Tuple[Union[str, bytes], int]:
    """Read ``<length>:"<payload>`` followed by ``terminator``.

    ``offset`` points at the first digit of the length. The length counts
    bytes, so the payload is sliced from the raw buffer before decoding.
    Returns the decoded payload and the offset just past ``terminator``.
    """
    try:
        length, offset = read_count(data, offset)
    except MalformedCountError as exc:
        raise MalformedStringError(f"invalid string length: {exc}", exc.offset) from exc
    if length < 0:
        raise MalformedStringError(f"negative string length {length}", offset)

    if offset >= len(data) or data[offset] != _QUOTE:
        raise MalformedStringError("missing opening quote", offset)
    # Skip over the opening '"'.
    offset += 1

    end = offset + length
    if end + len(terminator) > len(data):
        raise CorruptStreamError(f"string of {length} bytes runs past end of input", offset)
    if data[end:end + len(terminator)] != terminator:
        raise MalformedStringError(
            f"string of {length} bytes is not followed by {terminator.decode()!r}", end
        )

    try:
        value = decode_php_bytes(data[offset:end], errors)
    except MalformedStringError as exc:
        raise MalformedStringError(str(exc), offset) from exc
    return value, end + len(terminator)


def consume_string(
    data: bytes, offset: int, errors: ErrorMode = "replace"
) -> Tuple[Union[str, bytes], int]:
    check_type(data, "s", offset)
    return consume_string_payload(data, offset + 2, errors=errors)
