"""Low-level cursor helpers shared by every consumer."""

from typing import Literal, Tuple, Union

from php_unmarshal.errors import MalformedCountError, MalformedStringError

ErrorMode = Literal["strict", "replace", "bytes"]


def find_byte(data: bytes, byte: int, offset: int) -> int:
    """Return the index of the first ``byte`` at or after ``offset``, or -1."""
    if offset < 0 or offset > len(data):
        return -1
    return data.find(bytes((byte,)), offset)


def read_until(data: bytes, byte: int, offset: int) -> Tuple[str, int]:
    """Read ASCII text from ``offset`` up to (not including) ``byte``.

    Returns the text and the index of the delimiter, or ``("", -1)`` when the
    delimiter never occurs.
    """
    end = find_byte(data, byte, offset)
    if end < 0:
        return "", -1
    return data[offset:end].decode("ascii", errors="replace"), end


def _is_decimal(text: str) -> bool:
    digits = text[1:] if text[:1] in ("+", "-") else text
    return digits.isascii() and digits.isdigit()


def read_count(data: bytes, offset: int) -> Tuple[int, int]:
    """Parse the ``<digits>:`` field at ``offset``.

    Returns the integer and the offset just past the colon.

    Raises:
        MalformedCountError: If there is no colon or the digits do not parse.
    """
    raw, end = read_until(data, ord(":"), offset)
    if end < 0:
        raise MalformedCountError("count field is not terminated by ':'", offset)
    if not _is_decimal(raw):
        raise MalformedCountError(f"invalid count {raw!r}", offset)
    return int(raw), end + 1


def decode_php_bytes(raw: bytes, errors: ErrorMode = "replace") -> Union[str, bytes]:
    """Turn a string payload into text.

    PHP strings are byte strings; UTF-8 is by far the common case.
    """
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        if errors == "bytes":
            return raw
        if errors == "strict":
            raise MalformedStringError(f"payload is not valid UTF-8: {exc.reason}") from exc
        return raw.decode("utf-8", errors="replace")


def upper_case_first(s: str) -> str:
    return s[:1].upper() + s[1:]


def field_name(key: str) -> str:
    """Map a serialized property name onto a record field name.

    Private (``\\0Class\\0name``) and protected (``\\0*\\0name``) properties
    lose their prefix, then the first character is upper-cased.
    """
    if key.startswith("\0"):
        sep = key.find("\0", 1)
        if sep > 0:
            key = key[sep + 1:]
    return upper_case_first(key)
