"""Serialize layer: event protocol and host-type dispatch.

A producer describes a value to a :class:`Serializer` as exactly one of:

- ``serialize_null()``, ``serialize_bool(v)``, ``serialize_number(v)``,
  ``serialize_string(v)``
- ``begin_sequence(n)``, *n* nested values, ``end_sequence()``
- ``begin_map(n)``, *n* times ``serialize_key(k)`` + a nested value,
  ``end_map()``

``n`` may be ``None`` when the producer does not know the length up front.
"""

from __future__ import annotations

import dataclasses
import enum
import typing
from collections.abc import Mapping
from typing import Any, Protocol

from .deserialize import _UNION_TYPES
from .errors import UnsupportedValue
from .options import DEFAULT_OPTIONS, Options
from .values import Null, Value, VArray, VBool, VNumber, VObject, VString, _Null


class Serializer(Protocol):
    def serialize_null(self) -> None: ...

    def serialize_bool(self, value: bool) -> None: ...

    def serialize_number(self, value: int | float) -> None: ...

    def serialize_string(self, value: str) -> None: ...

    def begin_sequence(self, length: int | None) -> None: ...

    def end_sequence(self) -> None: ...

    def begin_map(self, length: int | None) -> None: ...

    def serialize_key(self, key: str) -> None: ...

    def end_map(self) -> None: ...


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

def serialize(obj, serializer: Serializer, tp: Any = None) -> None:
    """Describe *obj* to *serializer*.

    *tp* is the declared type of *obj* when known; it is only needed to
    write tagged unions, which cannot be recognised from the instance alone.
    """
    if tp is not None and typing.get_origin(tp) in _UNION_TYPES:
        members = [a for a in typing.get_args(tp) if a is not type(None)]
        # Optional[Record] is the bare record, as visitor_for reads it
        tagged = len(members) > 1 and all(dataclasses.is_dataclass(m) for m in members)
        if obj is not None and tagged:
            _serialize_variant(obj, serializer, members)
            return
        tp = members[0] if len(members) == 1 else None

    hook = getattr(obj, "__rison_serialize__", None)
    if hook is not None:
        hook(serializer)
    elif obj is None or isinstance(obj, _Null):
        serializer.serialize_null()
    elif isinstance(obj, bool):
        serializer.serialize_bool(obj)
    elif isinstance(obj, enum.Enum):
        serializer.serialize_string(obj.name)
    elif isinstance(obj, (int, float)):
        serializer.serialize_number(obj)
    elif isinstance(obj, str):
        serializer.serialize_string(obj)
    elif isinstance(obj, (VBool, VNumber, VString)):
        serialize(obj.value, serializer)
    elif isinstance(obj, VArray):
        _serialize_sequence(obj.items, serializer, None)
    elif isinstance(obj, VObject):
        _serialize_mapping(obj.entries, serializer, None)
    elif dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        _serialize_record(obj, serializer)
    elif isinstance(obj, Mapping):
        _serialize_mapping(obj, serializer, _type_arg(tp, 1))
    elif isinstance(obj, (list, tuple, set, frozenset)):
        _serialize_sequence(obj, serializer, _item_type(tp))
    else:
        raise UnsupportedValue(f"Cannot serialize {type(obj).__name__} as Rison")


def _type_arg(tp, index: int):
    args = typing.get_args(tp)
    return args[index] if len(args) > index else None


def _item_type(tp):
    args = typing.get_args(tp)
    if len(args) == 1 or (len(args) == 2 and args[1] is Ellipsis):
        return args[0]
    return None


def _serialize_sequence(items, serializer: Serializer, item_tp) -> None:
    items = list(items)
    serializer.begin_sequence(len(items))
    for item in items:
        serialize(item, serializer, item_tp)
    serializer.end_sequence()


def _serialize_mapping(mapping: Mapping, serializer: Serializer, value_tp) -> None:
    serializer.begin_map(len(mapping))
    for key, value in mapping.items():
        if not isinstance(key, str):
            raise UnsupportedValue(f"Object keys must be strings, not {type(key).__name__}")
        serializer.serialize_key(key)
        serialize(value, serializer, value_tp)
    serializer.end_map()


def _serialize_record(obj, serializer: Serializer) -> None:
    hints = typing.get_type_hints(type(obj))
    fields = dataclasses.fields(obj)
    serializer.begin_map(len(fields))
    for f in fields:
        serializer.serialize_key(f.name)
        serialize(getattr(obj, f.name), serializer, hints.get(f.name))
    serializer.end_map()


def _serialize_variant(obj, serializer: Serializer, variants: list[type]) -> None:
    if type(obj) not in variants:
        names = ", ".join(v.__name__ for v in variants)
        raise UnsupportedValue(f"{type(obj).__name__} is not one of the variants {names}")
    serializer.begin_map(1)
    serializer.serialize_key(type(obj).__name__)
    serialize(obj, serializer)
    serializer.end_map()


# ---------------------------------------------------------------------------
# ValueSerializer
# ---------------------------------------------------------------------------

class ValueSerializer:
    """A Serializer that builds a Value tree instead of text."""

    def __init__(self, options: Options = DEFAULT_OPTIONS) -> None:
        self.options = options
        self._stack: list[list] = []  # [container, pending key]
        self.result: Value | None = None

    def _emit(self, value: Value) -> None:
        if not self._stack:
            self.result = value
            return
        frame = self._stack[-1]
        container = frame[0]
        if isinstance(container, VArray):
            container.items.append(value)
        else:
            key, frame[1] = frame[1], None
            if key is None:
                raise UnsupportedValue("Map value emitted without a key")
            container.entries[key] = value

    def serialize_null(self) -> None:
        self._emit(Null)

    def serialize_bool(self, value: bool) -> None:
        self._emit(VBool(value))

    def serialize_number(self, value: int | float) -> None:
        self._emit(VNumber(value))

    def serialize_string(self, value: str) -> None:
        self._emit(VString(value))

    def _open(self, container: Value) -> None:
        if len(self._stack) >= self.options.max_depth:
            raise UnsupportedValue(f"Nesting deeper than {self.options.max_depth} levels")
        self._stack.append([container, None])

    def begin_sequence(self, length: int | None) -> None:
        self._open(VArray([]))

    def end_sequence(self) -> None:
        self._emit(self._stack.pop()[0])

    def begin_map(self, length: int | None) -> None:
        self._open(VObject({}))

    def serialize_key(self, key: str) -> None:
        self._stack[-1][1] = key

    def end_map(self) -> None:
        self._emit(self._stack.pop()[0])


def from_python(obj, tp: Any = None, options: Options = DEFAULT_OPTIONS) -> Value:
    """Build a Value from any serializable object."""
    builder = ValueSerializer(options)
    serialize(obj, builder, tp)
    return builder.result
