"""Public entry points: decode/encode, typed and untyped."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, TypeVar

from .deserialize import ValueVisitor, visitor_for
from .encoder import Encoder
from .errors import InvalidUnicode, RisonError, UnsupportedValue
from .options import DEFAULT_OPTIONS, Options
from .parser import Parser
from .serialize import serialize
from .values import VALUE_TYPES, Value, VArray, VObject

logger = logging.getLogger(__name__)

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

def _as_text(text: str | bytes) -> str:
    if isinstance(text, (bytes, bytearray, memoryview)):
        try:
            return bytes(text).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidUnicode(exc.start) from None
    return text


def _parse(text: str | bytes, visitor, options: Options | None):
    try:
        return Parser(_as_text(text), options or DEFAULT_OPTIONS).parse(visitor)
    except RisonError as exc:
        logger.debug("Rison decode failed: %s", exc)
        raise


def decode(text: str | bytes, *, options: Options | None = None) -> Value:
    """Parse Rison *text* into a Value tree."""
    return _parse(text, ValueVisitor(), options)


def decode_typed(text: str | bytes, tp: type[T], *, options: Options | None = None) -> T:
    """Parse Rison *text* straight into an instance of *tp*.

    No intermediate Value is built: the parser drives the visitor for *tp*.
    """
    return _parse(text, visitor_for(tp), options)


def decode_object(text: str | bytes, *, options: Options | None = None) -> Value:
    """Decode O-Rison: the body of an object without its ``(`` ``)``."""
    return decode("(" + _as_text(text) + ")", options=options)


def decode_array(text: str | bytes, *, options: Options | None = None) -> Value:
    """Decode A-Rison: the body of an array without its ``!(`` ``)``."""
    return decode("!(" + _as_text(text) + ")", options=options)


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------

def _write(obj, tp, options: Options | None) -> str:
    encoder = Encoder(options or DEFAULT_OPTIONS)
    try:
        serialize(obj, encoder, tp)
        return encoder.getvalue()
    except RisonError as exc:
        logger.debug("Rison encode failed: %s", exc)
        raise


def encode(value: Value, *, options: Options | None = None) -> str:
    """Write a Value tree as canonical Rison."""
    if not isinstance(value, VALUE_TYPES):
        raise UnsupportedValue(
            f"encode() takes a Value, not {type(value).__name__}; use encode_typed()"
        )
    return _write(value, None, options)


def encode_typed(obj, tp: Any = None, *, options: Options | None = None) -> str:
    """Write any serializable object as canonical Rison.

    *tp* is the declared type, needed when *obj* is a variant of a tagged
    union (``Circle | Square``).
    """
    return _write(obj, tp, options)


def encode_object(obj, *, options: Options | None = None) -> str:
    """Encode a mapping (or VObject) as O-Rison, without its parentheses."""
    if not isinstance(obj, (Mapping, VObject)):
        raise UnsupportedValue(f"O-Rison needs an object, not {type(obj).__name__}")
    return _write(obj, None, options)[1:-1]


def encode_array(obj, *, options: Options | None = None) -> str:
    """Encode a sequence (or VArray) as A-Rison, without ``!(`` and ``)``."""
    if isinstance(obj, (str, bytes)) or not isinstance(obj, (Sequence, VArray)):
        raise UnsupportedValue(f"A-Rison needs an array, not {type(obj).__name__}")
    return _write(obj, None, options)[2:-1]
