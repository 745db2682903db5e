"""Top-level entry points over the node consumers."""

import json
import re
from typing import Any, Callable, Optional, TypeVar

from php_unmarshal.dispatch import consume_next
from php_unmarshal.errors import CorruptStreamError, PhpDeserializeError, UnexpectedTagError
from php_unmarshal.fields import as_destination
from php_unmarshal.objects import consume_object
from php_unmarshal.scanner import ErrorMode, field_name

__all__ = [
    "PhpDeserializeError",
    "is_serialized",
    "loads",
    "loads_json",
    "preprocess",
    "unmarshal",
    "version",
]

_VERSION = "0.3.0"

_SERIALIZED_RE = re.compile(
    rb"""
    N;
    | b:[01];
    | i:[+-]?[0-9]+;
    | d:[^;]+;
    | [sE]:[0-9]+:"
    | [aC]:[0-9]+:[{"]
    | O:[0-9]+:"
    | [Rr]:[0-9]+;
    """,
    re.VERBOSE,
)

T = TypeVar("T")


def version() -> str:
    return _VERSION


def _as_bytes(data: Any) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    if isinstance(data, (bytearray, memoryview)):
        return bytes(data)
    if not isinstance(data, bytes):
        raise TypeError(f"expected bytes, got {type(data).__name__}")
    return data


def is_serialized(data: bytes) -> bool:
    """Return True if ``data`` starts like a PHP serialized value.

    This is a shape check over every tag PHP emits, so it also accepts arrays
    and references that :func:`loads` does not decode.
    """
    return _SERIALIZED_RE.match(_as_bytes(data)) is not None


def preprocess(data: bytes) -> bytes:
    """Undo DB-export escaping: ``"s:3:""abc"";"`` becomes ``s:3:"abc";``.

    Data that is not wrapped in double quotes, or whose unescaped form does
    not look serialized, is returned unchanged.
    """
    data = _as_bytes(data)
    if len(data) < 2 or data[:1] != b'"' or data[-1:] != b'"':
        return data
    inner = data[1:-1].replace(b'""', b'"')
    if not is_serialized(inner):
        return data
    return inner


def loads(
    data: bytes,
    *,
    errors: ErrorMode = "replace",
    auto_unescape: bool = True,
) -> Any:
    """Deserialize a PHP scalar, string or object.

    Objects come back as dicts of their properties; nested objects become
    nested dicts and the class name is dropped.

    Raises:
        PhpDeserializeError: If the data cannot be parsed or has trailing bytes.
    """
    data = _as_bytes(data)
    if auto_unescape:
        data = preprocess(data)

    if data[:1] == b"O":
        value: Any = {}
        offset = consume_object(data, 0, value, errors=errors)
    else:
        value, offset = consume_next(data, 0, errors=errors)

    if offset != len(data):
        raise CorruptStreamError(f"{len(data) - offset} trailing bytes after value", offset)
    return value


def loads_json(data: bytes, *, auto_unescape: bool = True) -> str:
    """Deserialize PHP serialized data directly to a compact JSON string."""
    value = loads(data, errors="replace", auto_unescape=auto_unescape)
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def unmarshal(
    data: bytes,
    destination: T,
    *,
    errors: ErrorMode = "replace",
    auto_unescape: bool = True,
    key_to_field: Optional[Callable[[str], str]] = None,
) -> T:
    """Project a serialized object onto ``destination`` and return it.

    Properties are matched to fields by ``key_to_field`` (by default the
    first letter is upper-cased, so ``name`` fills ``Name``). Properties
    with no matching field are skipped.

    Example:
        >>> from dataclasses import dataclass
        >>> @dataclass
        ... class Person:
        ...     Name: str = ""
        ...     Age: int = 0
        >>> unmarshal(b'O:6:"Person":2:{s:4:"name";s:3:"Bob";s:3:"age";i:30;}', Person())
        Person(Name='Bob', Age=30)

    Raises:
        UnexpectedTagError: If the data is not an object.
        PhpDeserializeError: On any other decoding failure. ``destination``
            may already be partially written.
    """
    data = _as_bytes(data)
    if auto_unescape:
        data = preprocess(data)
    if data[:1] != b"O":
        raise UnexpectedTagError("unmarshal expects an object", 0)

    dest = as_destination(destination, key_to_field or field_name)

    offset = consume_object(data, 0, dest, errors=errors)
    if offset != len(data):
        raise CorruptStreamError(f"{len(data) - offset} trailing bytes after object", offset)
    return destination
