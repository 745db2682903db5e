"""Projection onto records whose annotations are postponed strings."""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest


@dataclass
class Reading:
    Sensor: str = ""
    Value: float = 0.0


class TestResolvableAnnotations:
    def test_module_level_record(self):
        """String annotations that resolve still pick the right slot kind."""
        from php_unmarshal import FieldTypeMismatchError, unmarshal

        reading = unmarshal(b'O:1:"R":2:{s:6:"sensor";s:2:"t1";s:5:"value";i:4;}', Reading())
        assert reading == Reading(Sensor="t1", Value=4.0)
        assert isinstance(reading.Value, float)

        with pytest.raises(FieldTypeMismatchError):
            unmarshal(b'O:1:"R":1:{s:6:"sensor";i:1;}', Reading())


class TestUnresolvableAnnotations:
    def test_local_nested_record(self):
        """Local classes can't be resolved; their fields accept values as decoded."""
        from php_unmarshal import unmarshal

        @dataclass
        class Inner:
            V: int = 0

        @dataclass
        class Outer:
            In: Inner = field(default_factory=Inner)
            Count: int = 0

        data = b'O:1:"O":2:{s:2:"in";O:1:"I":1:{s:1:"v";i:1;}s:5:"count";i:3;}'
        outer = unmarshal(data, Outer())
        assert outer.In == {"v": 1}
        assert outer.Count == 3

    def test_local_plain_class(self):
        from php_unmarshal import unmarshal

        class Missing:
            pass

        class Holder:
            Ref: Missing
            Name: str

            def __init__(self):
                self.Ref = None
                self.Name = ""

        holder = unmarshal(b'O:1:"H":2:{s:3:"ref";s:1:"x";s:4:"name";s:2:"ok";}', Holder())
        assert (holder.Ref, holder.Name) == ("x", "ok")
