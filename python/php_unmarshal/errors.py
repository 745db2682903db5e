"""Exceptions raised while decoding PHP serialized data."""

from typing import Optional


class PhpDeserializeError(Exception):
    """Exception raised when PHP deserialization fails.

    Attributes:
        offset: Byte offset into the buffer where decoding failed, if known.
    """

    def __init__(self, message: str, offset: Optional[int] = None) -> None:
        if offset is not None:
            message = f"{message} (at offset {offset})"
        super().__init__(message)
        self.offset = offset


class UnexpectedTagError(PhpDeserializeError):
    """The byte at the expected position is not the tag being consumed."""


class MalformedCountError(PhpDeserializeError):
    """A ``<digits>:`` length or element count did not parse."""


class MalformedStringError(PhpDeserializeError):
    """String framing (length, quotes, terminator or payload) is invalid."""


class NumericParseError(PhpDeserializeError):
    """An integer or float literal is not valid for its kind."""


class InvalidKeyError(PhpDeserializeError):
    """An object key is not a string node."""


class FieldTypeMismatchError(PhpDeserializeError):
    """A decoded value cannot be assigned to the matched destination field."""


class CorruptStreamError(PhpDeserializeError):
    """The cursor ran past the end of the buffer, or bytes were left over."""


class UnsupportedTagError(PhpDeserializeError):
    """The tag byte is not one this decoder handles."""
