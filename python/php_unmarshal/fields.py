"""Destinations that decoded object properties are written into.

A destination answers ``lookup(key)`` with a :class:`Slot`, or ``None`` when
it has no field for that key. The slot's class tells the object consumer which
coercion applies: :class:`IntSlot`, :class:`UIntSlot`, :class:`FloatSlot`,
:class:`RecordSlot` or the catch-all :class:`OpaqueSlot`.

Example:
    >>> from dataclasses import dataclass
    >>> @dataclass
    ... class Person:
    ...     Name: str = ""
    ...     Age: int = 0
    >>> dest = as_destination(Person())
    >>> type(dest.lookup("age")).__name__
    'IntSlot'
"""

import dataclasses
import functools
import types
from typing import (
    Any,
    Callable,
    ClassVar,
    Dict,
    Mapping,
    NewType,
    Optional,
    Tuple,
    TypeVar,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from php_unmarshal.scanner import field_name

UInt = NewType("UInt", int)
"""Annotation for record fields that only take non-negative integers."""

_UNION_TYPES: Tuple[Any, ...] = (Union,)
if hasattr(types, "UnionType"):
    _UNION_TYPES += (types.UnionType,)


class Destination:
    """Something an object node can be projected into."""

    def lookup(self, key: str) -> Optional["Slot"]:
        raise NotImplementedError

    def read(self, name: str) -> Any:
        raise NotImplementedError

    def write(self, name: str, value: Any) -> None:
        raise NotImplementedError


class Slot:
    """A named, settable field on a destination."""

    def __init__(self, owner: Destination, name: str, hint: Any = Any, optional: bool = False) -> None:
        self.owner = owner
        self.name = name
        self.hint = hint
        self.optional = optional

    def get(self) -> Any:
        return self.owner.read(self.name)

    def set(self, value: Any) -> None:
        self.owner.write(self.name, value)

    def nested(self) -> Optional[Destination]:
        """Destination for an object node stored in this slot, if it can hold one."""
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, {self.hint!r})"


class IntSlot(Slot):
    pass


class UIntSlot(Slot):
    pass


class FloatSlot(Slot):
    pass


class RecordSlot(Slot):
    """A field typed as another record; object nodes recurse into it."""

    def nested(self) -> Destination:
        current = self.get()
        if current is None:
            current = self.hint()
            self.set(current)
        return as_destination(current, getattr(self.owner, "key_to_field", field_name))


class OpaqueSlot(Slot):
    """Any other field; values are stored unchanged when the annotation allows them."""

    def accepts(self, value: Any) -> bool:
        return _hint_accepts(self.hint, value)

    def nested(self) -> Optional[Destination]:
        if not _hint_accepts(self.hint, {}):
            return None
        mapping: Dict[str, Any] = {}
        self.set(mapping)
        return MappingDestination(mapping)


def _hint_accepts(hint: Any, value: Any) -> bool:
    if hint is Any or isinstance(hint, (str, TypeVar)):
        return True
    origin = get_origin(hint)
    if origin in _UNION_TYPES:
        return any(_hint_accepts(arg, value) for arg in get_args(hint))
    if hint is None or hint is type(None):
        return value is None
    target = origin if origin is not None else hint
    if isinstance(target, type):
        if target is float:
            return isinstance(value, (int, float)) and not isinstance(value, bool)
        return isinstance(value, target)
    if hasattr(hint, "__supertype__"):
        return _hint_accepts(hint.__supertype__, value)
    return True


def _unwrap_optional(hint: Any) -> Tuple[Any, bool]:
    if get_origin(hint) in _UNION_TYPES:
        args = [arg for arg in get_args(hint) if arg is not type(None)]
        if len(args) == 1 and len(args) != len(get_args(hint)):
            return args[0], True
    return hint, False


def _is_record_type(hint: Any) -> bool:
    if hint is Any or not isinstance(hint, type) or hint in (str, bytes, bool, int, float, dict, list, tuple, set):
        return False
    return dataclasses.is_dataclass(hint) or bool(getattr(hint, "__annotations__", None))


def slot_for(owner: Destination, name: str, hint: Any) -> Slot:
    """Pick the slot variant for a field annotated with ``hint``."""
    inner, optional = _unwrap_optional(hint)
    if inner is UInt:
        return UIntSlot(owner, name, inner, optional)
    if inner is int:
        return IntSlot(owner, name, inner, optional)
    if inner is float:
        return FloatSlot(owner, name, inner, optional)
    if _is_record_type(inner):
        return RecordSlot(owner, name, inner, optional)
    return OpaqueSlot(owner, name, hint, optional)


def _raw_annotations(cls: type) -> Dict[str, Any]:
    if dataclasses.is_dataclass(cls):
        return {f.name: f.type for f in dataclasses.fields(cls)}
    raw: Dict[str, Any] = {}
    for base in reversed(cls.__mro__):
        try:
            raw.update(getattr(base, "__annotations__", None) or {})
        except NameError:
            continue
    return raw


@functools.lru_cache(maxsize=256)
def _field_hints(cls: type) -> Mapping[str, Any]:
    try:
        hints = get_type_hints(cls)
    except (NameError, TypeError, SyntaxError):
        # Unresolvable forward references stay as strings and accept any value.
        hints = _raw_annotations(cls)
    if dataclasses.is_dataclass(cls):
        names = [f.name for f in dataclasses.fields(cls)]
    else:
        names = list(hints)
    return {
        name: hints.get(name, Any)
        for name in names
        if not name.startswith("_") and get_origin(hints.get(name)) is not ClassVar
    }


class RecordDestination(Destination):
    """Writes into the annotated attributes of an object, typically a dataclass."""

    def __init__(self, record: Any, key_to_field: Callable[[str], str] = field_name) -> None:
        self.record = record
        self.key_to_field = key_to_field

    def lookup(self, key: str) -> Optional[Slot]:
        name = self.key_to_field(key)
        hints = _field_hints(type(self.record))
        if name in hints:
            return slot_for(self, name, hints[name])
        return None

    def read(self, name: str) -> Any:
        return getattr(self.record, name, None)

    def write(self, name: str, value: Any) -> None:
        setattr(self.record, name, value)


class MappingDestination(Destination):
    """Collects every property of an object node into a dict, keyed as on the wire."""

    def __init__(self, mapping: Optional[Dict[Any, Any]] = None) -> None:
        self.mapping = {} if mapping is None else mapping

    def lookup(self, key: str) -> Slot:
        return OpaqueSlot(self, key)

    def read(self, name: str) -> Any:
        return self.mapping.get(name)

    def write(self, name: str, value: Any) -> None:
        self.mapping[name] = value


class DiscardSink(Destination):
    """Matches no key, so every property routed here is decoded and dropped."""

    def lookup(self, key: str) -> None:
        return None

    def read(self, name: str) -> Any:
        return None

    def write(self, name: str, value: Any) -> None:
        pass


def as_destination(target: Any, key_to_field: Callable[[str], str] = field_name) -> Destination:
    """Wrap a caller-owned record or dict as a :class:`Destination`."""
    if isinstance(target, Destination):
        return target
    if isinstance(target, dict):
        return MappingDestination(target)
    if target is None or isinstance(target, type):
        raise TypeError(f"destination must be a record instance or dict, not {target!r}")
    return RecordDestination(target, key_to_field)
