"""Tests for typed decoding through visitors."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

import pytest

from rison_core import decode_typed
from rison_core.deserialize import (
    IntVisitor,
    OptionalVisitor,
    StrVisitor,
    ValueVisitor,
    Visitor,
    visitor_for,
)
from rison_core.errors import DuplicateKey, MissingField, TypeMismatch
from rison_core.parser import parse
from rison_core.values import Value, VArray, VNumber, VString


@dataclass
class Full:
    a: str
    b: str


@dataclass
class WithOptional:
    a: str
    b: Optional[str]


@dataclass
class WithDefaults:
    name: str
    tags: list[str] = field(default_factory=list)
    limit: int = 10


@dataclass
class Point:
    x: int
    y: int


@dataclass
class Circle:
    r: float


@dataclass
class Square:
    side: float


@dataclass
class Drawing:
    title: str
    shapes: list[Circle | Square]
    origin: Point | None = None


class Color(Enum):
    RED = 1
    GREEN = 2


class Celsius:
    """Custom Deserialize capability: a bare number of degrees."""

    def __init__(self, degrees):
        self.degrees = degrees

    class _Visitor(Visitor):
        expecting = "degrees"

        def visit_number(self, value):
            return Celsius(value)

    @classmethod
    def __rison_visitor__(cls):
        return cls._Visitor()


# ---------------------------------------------------------------------------
# Primitives
# ---------------------------------------------------------------------------

def test_bool():
    assert decode_typed("!t", bool) is True
    assert decode_typed("!f", bool) is False

def test_integer():
    assert decode_typed("12", int) == 12

def test_nonintegral_as_integer_fails():
    with pytest.raises(TypeMismatch) as exc:
        decode_typed("12.4", int)
    assert exc.value.expected == "an integer"
    assert exc.value.found == "decimal"

def test_integral_float():
    value = decode_typed("12", float)
    assert value == 12.0
    assert isinstance(value, float)

def test_float():
    assert decode_typed("12.4", float) == 12.4

def test_string_as_number_fails():
    with pytest.raises(TypeMismatch) as exc:
        decode_typed("abc", int)
    assert exc.value.found == "string"
    assert exc.value.offset == 0

def test_quoted_strings():
    assert decode_typed("''", str) == ""
    assert decode_typed("'hello, rison'", str) == "hello, rison"
    assert decode_typed("'hello, !'rison!'!!'", str) == "hello, 'rison'!"

def test_ident_string():
    assert decode_typed("hellorison", str) == "hellorison"

def test_none():
    assert decode_typed("!n", type(None)) is None


# ---------------------------------------------------------------------------
# Optional
# ---------------------------------------------------------------------------

def test_optional_none():
    assert decode_typed("!n", Optional[str]) is None

def test_optional_some():
    assert decode_typed("hellorison", Optional[str]) == "hellorison"

def test_pipe_optional():
    assert decode_typed("!n", int | None) is None
    assert decode_typed("3", int | None) == 3

def test_optional_expecting():
    assert OptionalVisitor(IntVisitor()).expecting == "an integer or null"


# ---------------------------------------------------------------------------
# Sequences and maps
# ---------------------------------------------------------------------------

def test_list():
    assert decode_typed("!(1,2,3)", list[int]) == [1, 2, 3]

def test_list_element_mismatch_offset():
    with pytest.raises(TypeMismatch) as exc:
        decode_typed("!(1,x)", list[int])
    assert exc.value.offset == 4

def test_tuple():
    assert decode_typed("!(hello,world)", tuple[str, str]) == ("hello", "world")

def test_tuple_wrong_length():
    with pytest.raises(TypeMismatch):
        decode_typed("!(a,b,c)", tuple[str, str])
    with pytest.raises(TypeMismatch):
        decode_typed("!(a)", tuple[str, str])

def test_variadic_tuple():
    assert decode_typed("!(1,2)", tuple[int, ...]) == (1, 2)

def test_set():
    assert decode_typed("!(a,b,a)", set[str]) == {"a", "b"}

def test_map():
    assert decode_typed("(a:hello,b:world)", dict[str, str]) == {"a": "hello", "b": "world"}

def test_array_for_map_fails():
    with pytest.raises(TypeMismatch) as exc:
        decode_typed("!(a)", dict[str, str])
    assert exc.value.found == "array"

def test_non_string_keys_unsupported():
    with pytest.raises(TypeError):
        visitor_for(dict[int, str])

def test_duplicate_key_in_typed_map():
    with pytest.raises(DuplicateKey):
        decode_typed("(a:1,a:2)", dict[str, int])


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

def test_empty_struct():
    @dataclass
    class Empty:
        pass

    assert decode_typed("()", Empty) == Empty()

def test_struct():
    assert decode_typed("(a:hello,b:world)", Full) == Full(a="hello", b="world")

def test_struct_optional_present():
    assert decode_typed("(a:hello,b:world)", WithOptional) == WithOptional("hello", "world")

def test_struct_optional_missing():
    assert decode_typed("(a:hello)", WithOptional) == WithOptional("hello", None)

def test_struct_defaults():
    assert decode_typed("(name:x)", WithDefaults) == WithDefaults("x", [], 10)

def test_struct_missing_field():
    with pytest.raises(MissingField) as exc:
        decode_typed("(a:hello)", Full)
    assert exc.value.name == "b"
    assert exc.value.offset == 0

def test_struct_unknown_field_ignored():
    value = decode_typed("(a:x,extra:(deep:!(1,2)),b:y)", Full)
    assert value == Full("x", "y")

def test_struct_field_type_checked():
    with pytest.raises(TypeMismatch):
        decode_typed("(x:1,y:two)", Point)


# ---------------------------------------------------------------------------
# Enums and tagged unions
# ---------------------------------------------------------------------------

def test_enum():
    assert decode_typed("RED", Color) is Color.RED

def test_enum_unknown_member():
    with pytest.raises(TypeMismatch) as exc:
        decode_typed("BLUE", Color)
    assert exc.value.expected == "one of RED, GREEN"

def test_tagged_union():
    assert decode_typed("(Circle:(r:1.5))", Circle | Square) == Circle(1.5)
    assert decode_typed("(Square:(side:2))", Circle | Square) == Square(2.0)

def test_tagged_union_unknown_variant():
    with pytest.raises(TypeMismatch):
        decode_typed("(Triangle:())", Circle | Square)

def test_tagged_union_needs_single_entry():
    with pytest.raises(TypeMismatch):
        decode_typed("()", Circle | Square)
    with pytest.raises(TypeMismatch):
        decode_typed("(Circle:(r:1),Square:(side:1))", Circle | Square)

def test_untagged_union_unsupported():
    with pytest.raises(TypeError):
        visitor_for(int | str)

def test_nested_record():
    text = "(title:t,shapes:!((Circle:(r:1)),(Square:(side:2))),origin:(x:0,y:-1))"
    assert decode_typed(text, Drawing) == Drawing(
        title="t",
        shapes=[Circle(1.0), Square(2.0)],
        origin=Point(0, -1),
    )


# ---------------------------------------------------------------------------
# Untyped targets and custom capability
# ---------------------------------------------------------------------------

def test_value_target():
    assert decode_typed("!(1,x)", Value) == VArray([VNumber(1), VString("x")])
    assert isinstance(visitor_for(Value), ValueVisitor)

def test_any_target():
    assert decode_typed("(hello:!(a,b,c),world:'it works')", Any) == {
        "hello": ["a", "b", "c"],
        "world": "it works",
    }

def test_custom_visitor():
    assert decode_typed("21.5", Celsius).degrees == 21.5

def test_custom_visitor_mismatch():
    with pytest.raises(TypeMismatch) as exc:
        decode_typed("warm", Celsius)
    assert exc.value.expected == "degrees"

def test_unknown_target():
    with pytest.raises(TypeError):
        visitor_for(bytes)

def test_str_visitor_rejects_null():
    with pytest.raises(TypeMismatch):
        decode_typed("!n", str)
    assert StrVisitor().expecting == "a string"

def test_partial_visitor_reports_mismatch():
    class ArrayOpener(Visitor):
        expecting = "something else"

        def begin_array(self):
            return []

    with pytest.raises(TypeMismatch) as exc:
        parse("!(1)", ArrayOpener())
    assert exc.value.expected == "something else"
    assert exc.value.found == "array"
