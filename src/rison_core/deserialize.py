"""Deserialize layer: Visitor protocol and visitors for host types.

The parser knows nothing about target types. For every value it recognises
it calls exactly one group of methods on a :class:`Visitor`:

- ``visit_null()``, ``visit_bool(v)``, ``visit_number(v)``, ``visit_string(v)``
- ``begin_array()`` → accumulator; then per element ``element_visitor(acc)``
  supplies the child visitor and ``element(acc, value)`` receives the
  result; finally ``end_array(acc)``
- ``begin_object()`` → accumulator; then per pair ``entry_visitor(acc, key)``
  and ``entry(acc, key, value)``; finally ``end_object(acc)``

Every default implementation raises :class:`TypeMismatch`, so a visitor only
overrides the events that are an acceptable encoding of its target.
"""

from __future__ import annotations

import dataclasses
import enum
import types
import typing
from typing import Any

from .errors import MissingField, TypeMismatch
from .values import Null, Value, VArray, VBool, VNumber, VObject, VString


# ---------------------------------------------------------------------------
# Visitor base
# ---------------------------------------------------------------------------

class Visitor:
    expecting = "a value"

    def mismatch(self, found: str) -> TypeMismatch:
        return TypeMismatch(self.expecting, found)

    def visit_null(self):
        raise self.mismatch("null")

    def visit_bool(self, value: bool):
        raise self.mismatch("bool")

    def visit_number(self, value: int | float):
        raise self.mismatch("integer" if isinstance(value, int) else "decimal")

    def visit_string(self, value: str):
        raise self.mismatch("string")

    def begin_array(self):
        raise self.mismatch("array")

    def element_visitor(self, acc) -> "Visitor":
        raise self.mismatch("array")

    def element(self, acc, value) -> None:
        raise self.mismatch("array")

    def end_array(self, acc):
        return acc

    def begin_object(self):
        raise self.mismatch("object")

    def entry_visitor(self, acc, key: str) -> "Visitor":
        raise self.mismatch("object")

    def entry(self, acc, key: str, value) -> None:
        raise self.mismatch("object")

    def end_object(self, acc):
        return acc


# ---------------------------------------------------------------------------
# Untyped visitors
# ---------------------------------------------------------------------------

class ValueVisitor(Visitor):
    """Materialises a Value tree (the untyped decode path)."""

    def visit_null(self) -> Value:
        return Null

    def visit_bool(self, value: bool) -> Value:
        return VBool(value)

    def visit_number(self, value: int | float) -> Value:
        return VNumber(value)

    def visit_string(self, value: str) -> Value:
        return VString(value)

    def begin_array(self) -> list[Value]:
        return []

    def element_visitor(self, acc) -> Visitor:
        return self

    def element(self, acc: list[Value], value: Value) -> None:
        acc.append(value)

    def end_array(self, acc: list[Value]) -> Value:
        return VArray(acc)

    def begin_object(self) -> dict[str, Value]:
        return {}

    def entry_visitor(self, acc, key: str) -> Visitor:
        return self

    def entry(self, acc: dict[str, Value], key: str, value: Value) -> None:
        acc[key] = value

    def end_object(self, acc: dict[str, Value]) -> Value:
        return VObject(acc)


class PythonVisitor(Visitor):
    """Builds plain ``None/bool/int/float/str/list/dict`` values."""

    def visit_null(self):
        return None

    def visit_bool(self, value):
        return value

    def visit_number(self, value):
        return value

    def visit_string(self, value):
        return value

    def begin_array(self):
        return []

    def element_visitor(self, acc):
        return self

    def element(self, acc, value):
        acc.append(value)

    def begin_object(self):
        return {}

    def entry_visitor(self, acc, key):
        return self

    def entry(self, acc, key, value):
        acc[key] = value


class IgnoredAny(PythonVisitor):
    """Accepts any value and discards it (unknown record fields)."""

    def visit_null(self):
        return None

    def visit_bool(self, value):
        return None

    def visit_number(self, value):
        return None

    def visit_string(self, value):
        return None

    def begin_array(self):
        return None

    def element(self, acc, value):
        pass

    def end_array(self, acc):
        return None

    def begin_object(self):
        return None

    def entry(self, acc, key, value):
        pass

    def end_object(self, acc):
        return None


# ---------------------------------------------------------------------------
# Primitive visitors
# ---------------------------------------------------------------------------

class NoneVisitor(Visitor):
    expecting = "null"

    def visit_null(self):
        return None


class BoolVisitor(Visitor):
    expecting = "a bool"

    def visit_bool(self, value):
        return value


class IntVisitor(Visitor):
    expecting = "an integer"

    def visit_number(self, value):
        if isinstance(value, int):
            return value
        if value.is_integer():
            return int(value)
        raise self.mismatch("decimal")


class FloatVisitor(Visitor):
    expecting = "a number"

    def visit_number(self, value):
        return float(value)


class StrVisitor(Visitor):
    expecting = "a string"

    def visit_string(self, value):
        return value


# ---------------------------------------------------------------------------
# Composite visitors
# ---------------------------------------------------------------------------

class OptionalVisitor(Visitor):
    """``!n`` becomes ``None``; everything else goes to the inner visitor."""

    def __init__(self, inner: Visitor) -> None:
        self.inner = inner
        self.expecting = f"{inner.expecting} or null"

    def visit_null(self):
        return None

    def visit_bool(self, value):
        return self.inner.visit_bool(value)

    def visit_number(self, value):
        return self.inner.visit_number(value)

    def visit_string(self, value):
        return self.inner.visit_string(value)

    def begin_array(self):
        return self.inner.begin_array()

    def element_visitor(self, acc):
        return self.inner.element_visitor(acc)

    def element(self, acc, value):
        self.inner.element(acc, value)

    def end_array(self, acc):
        return self.inner.end_array(acc)

    def begin_object(self):
        return self.inner.begin_object()

    def entry_visitor(self, acc, key):
        return self.inner.entry_visitor(acc, key)

    def entry(self, acc, key, value):
        self.inner.entry(acc, key, value)

    def end_object(self, acc):
        return self.inner.end_object(acc)


class ListVisitor(Visitor):
    def __init__(self, item: Visitor, factory=list) -> None:
        self.item = item
        self.factory = factory
        self.expecting = f"an array of {item.expecting}"

    def begin_array(self):
        return []

    def element_visitor(self, acc):
        return self.item

    def element(self, acc, value):
        acc.append(value)

    def end_array(self, acc):
        return self.factory(acc)


class TupleVisitor(Visitor):
    """Fixed-length heterogeneous tuple, e.g. ``tuple[str, int]``."""

    def __init__(self, items: list[Visitor]) -> None:
        self.items = items
        self.expecting = f"an array of {len(items)} elements"

    def begin_array(self):
        return []

    def element_visitor(self, acc):
        if len(acc) >= len(self.items):
            raise self.mismatch("a longer array")
        return self.items[len(acc)]

    def element(self, acc, value):
        acc.append(value)

    def end_array(self, acc):
        if len(acc) != len(self.items):
            raise self.mismatch(f"an array of {len(acc)} elements")
        return tuple(acc)


class DictVisitor(Visitor):
    def __init__(self, value: Visitor, key_type: type = str) -> None:
        self.value = value
        self.key_type = key_type
        self.expecting = f"an object of {value.expecting}"

    def begin_object(self):
        return {}

    def entry_visitor(self, acc, key):
        return self.value

    def entry(self, acc, key, value):
        acc[self.key_type(key)] = value


class EnumVisitor(Visitor):
    """Unit variants: an Enum member is written as its name."""

    def __init__(self, cls: type[enum.Enum]) -> None:
        self.cls = cls
        self.expecting = f"one of {', '.join(cls.__members__)}"

    def visit_string(self, value):
        try:
            return self.cls[value]
        except KeyError:
            raise self.mismatch(f"string {value!r}") from None


class DataclassVisitor(Visitor):
    """Record: an object whose keys are the dataclass field names."""

    def __init__(self, cls: type) -> None:
        self.cls = cls
        self.expecting = f"an object for {cls.__name__}"
        hints = typing.get_type_hints(cls)
        self.fields = {f.name: f for f in dataclasses.fields(cls) if f.init}
        self.types = {name: hints.get(name, Any) for name in self.fields}
        self._visitors: dict[str, Visitor] = {}

    def begin_object(self):
        return {}

    def entry_visitor(self, acc, key):
        if key not in self.fields:
            return IgnoredAny()
        if key not in self._visitors:
            self._visitors[key] = visitor_for(self.types[key])
        return self._visitors[key]

    def entry(self, acc, key, value):
        if key in self.fields:
            acc[key] = value

    def end_object(self, acc):
        for name, f in self.fields.items():
            if name in acc:
                continue
            if f.default is not dataclasses.MISSING or f.default_factory is not dataclasses.MISSING:
                continue
            if _is_optional(self.types[name]):
                acc[name] = None
                continue
            raise MissingField(name)
        return self.cls(**acc)


class UnionVisitor(Visitor):
    """Tagged union of dataclasses, written as ``(VariantName:payload)``."""

    def __init__(self, variants: list[type]) -> None:
        self.variants = {cls.__name__: cls for cls in variants}
        self.expecting = f"a single-entry object tagged {' or '.join(self.variants)}"

    def begin_object(self):
        return {}

    def entry_visitor(self, acc, key):
        if acc:
            raise self.mismatch("an object with several entries")
        if key not in self.variants:
            raise self.mismatch(f"variant {key!r}")
        return visitor_for(self.variants[key])

    def entry(self, acc, key, value):
        acc[key] = value

    def end_object(self, acc):
        if not acc:
            raise self.mismatch("an empty object")
        (value,) = acc.values()
        return value


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

_PRIMITIVES: dict[object, type[Visitor]] = {
    type(None): NoneVisitor,
    None: NoneVisitor,
    bool: BoolVisitor,
    int: IntVisitor,
    float: FloatVisitor,
    str: StrVisitor,
    Any: PythonVisitor,
    object: PythonVisitor,
}

_UNION_TYPES = (typing.Union, types.UnionType)


def _is_optional(tp) -> bool:
    return typing.get_origin(tp) in _UNION_TYPES and type(None) in typing.get_args(tp)


def visitor_for(tp) -> Visitor:
    """Return the Visitor that decodes Rison into instances of *tp*."""
    if tp is Value:
        return ValueVisitor()
    if tp in _PRIMITIVES:
        return _PRIMITIVES[tp]()

    custom = getattr(tp, "__rison_visitor__", None)
    if custom is not None:
        return custom()

    origin = typing.get_origin(tp)
    args = typing.get_args(tp)

    if origin in _UNION_TYPES:
        members = [a for a in args if a is not type(None)]
        if len(members) < len(args):
            inner = members[0] if len(members) == 1 else typing.Union[tuple(members)]
            return OptionalVisitor(visitor_for(inner))
        if all(dataclasses.is_dataclass(m) for m in members):
            return UnionVisitor(members)
        raise TypeError(f"Only unions of dataclasses can be decoded, not {tp!r}")

    if origin is list or tp is list:
        return ListVisitor(visitor_for(args[0] if args else Any))
    if origin in (set, frozenset) or tp in (set, frozenset):
        return ListVisitor(visitor_for(args[0] if args else Any), factory=origin or tp)
    if origin is tuple or tp is tuple:
        if not args or (len(args) == 2 and args[1] is Ellipsis):
            return ListVisitor(visitor_for(args[0] if args else Any), factory=tuple)
        return TupleVisitor([visitor_for(a) for a in args])
    if origin is dict or tp is dict:
        key_type = args[0] if args else str
        if key_type is not str and not (isinstance(key_type, type) and issubclass(key_type, str)):
            raise TypeError(f"Object keys are strings; cannot decode keys as {key_type!r}")
        return DictVisitor(visitor_for(args[1] if args else Any), key_type)

    if isinstance(tp, type):
        if issubclass(tp, enum.Enum):
            return EnumVisitor(tp)
        if dataclasses.is_dataclass(tp):
            return DataclassVisitor(tp)

    raise TypeError(f"Don't know how to decode Rison into {tp!r}")
