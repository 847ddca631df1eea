"""Value types for Rison Core."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union


class _Null:
    """Singleton for the Rison ``!n`` literal."""

    _instance: "_Null | None" = None

    def __new__(cls) -> "_Null":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "Null"

    def __bool__(self) -> bool:
        return False

    def __str__(self) -> str:
        return "null"


Null = _Null()


@dataclass
class VBool:
    value: bool

    def __str__(self) -> str:
        return str(self.value).lower()


@dataclass(eq=False)
class VNumber:
    """An exact integer (``int``) or a decimal (``float``).

    Equality is kind-sensitive: ``VNumber(3) != VNumber(3.0)``.
    """

    value: int | float

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise TypeError(f"VNumber expects int or float, got {type(self.value).__name__}")

    @property
    def is_integer(self) -> bool:
        return isinstance(self.value, int)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VNumber):
            return NotImplemented
        return self.is_integer == other.is_integer and self.value == other.value

    def __hash__(self) -> int:
        return hash((self.is_integer, self.value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass
class VString:
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass
class VArray:
    items: list["Value"] = field(default_factory=list)

    def __str__(self) -> str:
        return "[" + ", ".join(str(v) for v in self.items) + "]"


@dataclass(eq=False)
class VObject:
    """Ordered key/value record; equality also compares key order."""

    entries: dict[str, "Value"] = field(default_factory=dict)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VObject):
            return NotImplemented
        return list(self.entries.items()) == list(other.entries.items())

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return "{" + ", ".join(f"{k}: {v}" for k, v in self.entries.items()) + "}"


Value = Union[_Null, VBool, VNumber, VString, VArray, VObject]

VALUE_TYPES = (_Null, VBool, VNumber, VString, VArray, VObject)


def to_python(value: Value):
    """Convert a Value tree into plain ``None/bool/int/float/str/list/dict``."""
    if isinstance(value, _Null):
        return None
    if isinstance(value, (VBool, VNumber, VString)):
        return value.value
    if isinstance(value, VArray):
        return [to_python(v) for v in value.items]
    if isinstance(value, VObject):
        return {k: to_python(v) for k, v in value.entries.items()}
    raise TypeError(f"Not a Rison value: {value!r}")
