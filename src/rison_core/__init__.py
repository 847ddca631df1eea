"""Rison Core: codec for Rison, the compact URI-friendly JSON dialect."""

import logging

from .codec import (
    decode,
    decode_array,
    decode_object,
    decode_typed,
    encode,
    encode_array,
    encode_object,
    encode_typed,
)
from .deserialize import Visitor, ValueVisitor, visitor_for
from .encoder import Encoder
from .errors import (
    DecodeError,
    DepthExceeded,
    DuplicateKey,
    EncodeError,
    InvalidEscape,
    InvalidNumber,
    InvalidUnicode,
    LexError,
    MissingField,
    RisonError,
    TrailingCharacters,
    TypeMismatch,
    UnexpectedToken,
    UnsupportedValue,
    UnterminatedString,
)
from .options import DEFAULT_OPTIONS, DuplicateKeys, NumberMode, Options
from .serialize import Serializer, ValueSerializer, from_python, serialize
from .values import (
    Null,
    Value,
    VArray,
    VBool,
    VNumber,
    VObject,
    VString,
    to_python,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "decode",
    "decode_array",
    "decode_object",
    "decode_typed",
    "encode",
    "encode_array",
    "encode_object",
    "encode_typed",
    "Visitor",
    "ValueVisitor",
    "visitor_for",
    "Encoder",
    "Serializer",
    "ValueSerializer",
    "serialize",
    "from_python",
    "to_python",
    "Options",
    "DEFAULT_OPTIONS",
    "DuplicateKeys",
    "NumberMode",
    "Null",
    "Value",
    "VArray",
    "VBool",
    "VNumber",
    "VObject",
    "VString",
    "RisonError",
    "DecodeError",
    "EncodeError",
    "LexError",
    "InvalidEscape",
    "UnterminatedString",
    "InvalidNumber",
    "UnexpectedToken",
    "DuplicateKey",
    "TrailingCharacters",
    "DepthExceeded",
    "TypeMismatch",
    "MissingField",
    "InvalidUnicode",
    "UnsupportedValue",
]
