"""Encoder: writes Serialize events as canonical Rison text."""

from __future__ import annotations

import io
import math
from decimal import Decimal

from .errors import UnsupportedValue
from .lexer import NOT_IDENT_START, is_ident_char
from .options import DEFAULT_OPTIONS, Options


RESERVED_WORDS = frozenset(("true", "false", "null"))

_LITERALS = {None: "!n", True: "!t", False: "!f"}


def needs_quotes(s: str) -> bool:
    """True unless *s* can be written bare and read back as the same string."""
    if not s or s[0] in NOT_IDENT_START or s in RESERVED_WORDS:
        return True
    return not all(is_ident_char(c) for c in s)


def quote(s: str) -> str:
    return "'" + s.replace("!", "!!").replace("'", "!'") + "'"


def format_string(s: str) -> str:
    return quote(s) if needs_quotes(s) else s


def format_number(value: int | float) -> str:
    if isinstance(value, int):
        try:
            return str(value)
        except ValueError:
            # past the interpreter's int/str digit limit
            return format(Decimal(value), "f")
    if not math.isfinite(value):
        raise UnsupportedValue(f"Rison has no representation for {value!r}")
    if value.is_integer():
        return str(int(value))
    text = repr(value)
    if "e" in text or "E" in text:
        text = format(Decimal(text), "f")
    return text


class _Frame:
    __slots__ = ("declared", "count", "is_map", "keyed")

    def __init__(self, declared: int | None, is_map: bool) -> None:
        self.declared = declared
        self.count = 0
        self.is_map = is_map
        self.keyed = False


class Encoder:
    """A Serializer that accumulates canonical Rison text.

    Usage::

        enc = Encoder()
        serialize({"a": [1, 2]}, enc)
        enc.getvalue()   # → "(a:!(1,2))"
    """

    def __init__(self, options: Options = DEFAULT_OPTIONS) -> None:
        self.options = options
        self._buf = io.StringIO()
        self._stack: list[_Frame] = []

    def getvalue(self) -> str:
        if self._stack:
            raise UnsupportedValue("Unterminated sequence or map")
        return self._buf.getvalue()

    # -- Placement ------------------------------------------------------

    def _before_value(self) -> None:
        if not self._stack:
            if self._buf.tell():
                raise UnsupportedValue("Only one top-level value can be encoded")
            return
        frame = self._stack[-1]
        if frame.is_map:
            if not frame.keyed:
                raise UnsupportedValue("Map value emitted without a key")
            frame.keyed = False
        else:
            if frame.count:
                self._buf.write(",")
            frame.count += 1

    def _open(self, opener: str, length: int | None, is_map: bool) -> None:
        self._before_value()
        if len(self._stack) >= self.options.max_depth:
            raise UnsupportedValue(f"Nesting deeper than {self.options.max_depth} levels")
        self._buf.write(opener)
        self._stack.append(_Frame(length, is_map))

    def _close(self, is_map: bool) -> None:
        if not self._stack or self._stack[-1].is_map is not is_map:
            raise UnsupportedValue(f"Unbalanced end_{'map' if is_map else 'sequence'}")
        frame = self._stack.pop()
        if frame.is_map and frame.keyed:
            raise UnsupportedValue("Map key emitted without a value")
        if frame.declared is not None and frame.declared != frame.count:
            raise UnsupportedValue(
                f"Declared {frame.declared} elements but received {frame.count}"
            )
        self._buf.write(")")

    # -- Serializer events ----------------------------------------------

    def serialize_null(self) -> None:
        self._before_value()
        self._buf.write(_LITERALS[None])

    def serialize_bool(self, value: bool) -> None:
        self._before_value()
        self._buf.write(_LITERALS[bool(value)])

    def serialize_number(self, value: int | float) -> None:
        text = format_number(value)
        self._before_value()
        self._buf.write(text)

    def serialize_string(self, value: str) -> None:
        self._before_value()
        self._buf.write(format_string(value))

    def begin_sequence(self, length: int | None) -> None:
        self._open("!(", length, is_map=False)

    def end_sequence(self) -> None:
        self._close(is_map=False)

    def begin_map(self, length: int | None) -> None:
        self._open("(", length, is_map=True)

    def end_map(self) -> None:
        self._close(is_map=True)

    def serialize_key(self, key: str) -> None:
        if not self._stack or not self._stack[-1].is_map:
            raise UnsupportedValue("Map key emitted outside a map")
        if not isinstance(key, str):
            raise UnsupportedValue(f"Object keys must be strings, not {type(key).__name__}")
        frame = self._stack[-1]
        if frame.keyed:
            raise UnsupportedValue("Map key emitted without a value")
        if frame.count:
            self._buf.write(",")
        frame.count += 1
        frame.keyed = True
        self._buf.write(format_string(key))
        self._buf.write(":")
