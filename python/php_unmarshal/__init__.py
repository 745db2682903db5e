"""
PHP serialize() decoder with record projection.

This module decodes PHP serialized scalars, strings and objects into Python
values, and can project an object straight onto a dataclass by matching
property names to field names.

Features:
    - Byte-accurate string lengths, including multi-byte UTF-8 payloads
    - Objects projected onto dataclasses, with nested records and numeric coercion
    - DB-exported (double-quote escaped) payloads unescaped automatically

Example:
    >>> from php_unmarshal import loads
    >>> loads(b'O:8:"stdClass":2:{s:4:"name";s:5:"Alice";s:3:"age";i:30;}')
    {'name': 'Alice', 'age': 30}

    >>> from dataclasses import dataclass
    >>> from php_unmarshal import unmarshal
    >>> @dataclass
    ... class Person:
    ...     Name: str = ""
    ...     Age: int = 0
    >>> unmarshal(b'O:6:"Person":2:{s:4:"Name";s:3:"Bob";s:3:"Age";i:30;}', Person())
    Person(Name='Bob', Age=30)
"""

from php_unmarshal._core import (
    is_serialized,
    loads,
    loads_json,
    preprocess,
    unmarshal,
    version,
)
from php_unmarshal.dispatch import consume_next
from php_unmarshal.errors import (
    CorruptStreamError,
    FieldTypeMismatchError,
    InvalidKeyError,
    MalformedCountError,
    MalformedStringError,
    NumericParseError,
    PhpDeserializeError,
    UnexpectedTagError,
    UnsupportedTagError,
)
from php_unmarshal.fields import DiscardSink, UInt
from php_unmarshal.objects import consume_object
from php_unmarshal.scanner import field_name

__all__ = [
    "CorruptStreamError",
    "DiscardSink",
    "FieldTypeMismatchError",
    "InvalidKeyError",
    "MalformedCountError",
    "MalformedStringError",
    "NumericParseError",
    "PhpDeserializeError",
    "UInt",
    "UnexpectedTagError",
    "UnsupportedTagError",
    "consume_next",
    "consume_object",
    "field_name",
    "is_serialized",
    "loads",
    "loads_json",
    "preprocess",
    "unmarshal",
    "version",
    "__version__",
]

__version__ = version()
