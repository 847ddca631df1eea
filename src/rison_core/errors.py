"""Exception hierarchy for Rison Core."""

from __future__ import annotations


class RisonError(ValueError):
    """Base class of every error raised by rison_core."""


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

class DecodeError(RisonError):
    """Raised when Rison text cannot be turned into a value."""

    def __init__(self, message: str, offset: int | None = None) -> None:
        self.offset = offset
        if offset is not None:
            message = f"{message} (at offset {offset})"
        super().__init__(message)


class LexError(DecodeError):
    def __init__(self, offset: int, char: str | None) -> None:
        self.char = char
        if char is None:
            reason = "Unexpected end of input"
        else:
            reason = f"Unexpected character {char!r}"
        super().__init__(reason, offset)


class InvalidEscape(DecodeError):
    def __init__(self, offset: int) -> None:
        super().__init__("Invalid escape: '!' may only precede '!' or \"'\"", offset)


class UnterminatedString(DecodeError):
    def __init__(self, offset: int) -> None:
        super().__init__("Unterminated quoted string", offset)


class InvalidNumber(DecodeError):
    def __init__(self, offset: int, text: str) -> None:
        self.text = text
        super().__init__(f"Invalid number {text!r}", offset)


class UnexpectedToken(DecodeError):
    def __init__(self, offset: int, expected: str, found: str) -> None:
        self.expected = expected
        self.found = found
        super().__init__(f"Expected {expected} but found {found}", offset)


class DuplicateKey(DecodeError):
    def __init__(self, offset: int, key: str) -> None:
        self.key = key
        super().__init__(f"Duplicate key {key!r}", offset)


class TrailingCharacters(DecodeError):
    def __init__(self, offset: int) -> None:
        super().__init__("Trailing characters after value", offset)


class DepthExceeded(DecodeError):
    def __init__(self, limit: int, offset: int | None = None) -> None:
        self.limit = limit
        super().__init__(f"Nesting deeper than {limit} levels", offset)


class TypeMismatch(DecodeError):
    """A grammar event cannot produce the requested target type."""

    def __init__(self, expected: str, found: str, offset: int | None = None) -> None:
        self.expected = expected
        self.found = found
        super().__init__(f"Expected {expected} but found {found}", offset)


class MissingField(DecodeError):
    def __init__(self, name: str, offset: int | None = None) -> None:
        self.name = name
        super().__init__(f"Missing field {name!r}", offset)


class InvalidUnicode(DecodeError):
    def __init__(self, offset: int) -> None:
        super().__init__("Invalid UTF-8 in input", offset)


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------

class EncodeError(RisonError):
    """Raised when a value cannot be written as Rison."""


class UnsupportedValue(EncodeError):
    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)
