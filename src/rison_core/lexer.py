"""Lexer: converts raw Rison text into grammar tokens."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from .errors import InvalidEscape, InvalidNumber, LexError, UnterminatedString


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------

class TokenType(Enum):
    LPAREN = "("
    RPAREN = ")"
    BANG_LPAREN = "!("
    COMMA = ","
    COLON = ":"
    IDENT = "IDENT"
    QUOTED_STRING = "QUOTED_STRING"
    NUMBER = "NUMBER"
    TRUE = "!t"
    FALSE = "!f"
    NULL = "!n"
    EOF = "EOF"


@dataclass(frozen=True, slots=True)
class Token:
    """One token; ``value`` is the decoded text for strings and numbers."""

    type: TokenType
    value: str | None
    offset: int

    def describe(self) -> str:
        if self.type is TokenType.EOF:
            return "end of input"
        if self.type is TokenType.QUOTED_STRING:
            return f"string {self.value!r}"
        if self.type in (TokenType.IDENT, TokenType.NUMBER):
            return f"{self.type.name.lower()} {self.value!r}"
        return repr(self.type.value)


# ---------------------------------------------------------------------------
# Alphabet
# ---------------------------------------------------------------------------

NOT_IDENT_CHARS = " '!:(),*@$"
NOT_IDENT_START = "-0123456789"

_NUMBER_RE = re.compile(r"-?[0-9]+(?:\.[0-9]+)?")
_STRING_RUN_RE = re.compile(r"[^'!]*")

_PUNCTUATION = {
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    ",": TokenType.COMMA,
    ":": TokenType.COLON,
}

_BANG = {
    "(": TokenType.BANG_LPAREN,
    "t": TokenType.TRUE,
    "f": TokenType.FALSE,
    "n": TokenType.NULL,
}


def is_ident_char(c: str) -> bool:
    return c not in NOT_IDENT_CHARS and not c.isspace()


def is_number_literal(s: str) -> bool:
    return _NUMBER_RE.fullmatch(s) is not None


def skip_whitespace(text: str, pos: int) -> int:
    n = len(text)
    while pos < n and text[pos].isspace():
        pos += 1
    return pos


# ---------------------------------------------------------------------------
# Scanning
# ---------------------------------------------------------------------------

def next_token(text: str, pos: int) -> tuple[Token, int]:
    """Scan one token starting at *pos*; return it with the new cursor."""
    pos = skip_whitespace(text, pos)
    if pos >= len(text):
        return Token(TokenType.EOF, None, pos), pos

    c = text[pos]
    if c in _PUNCTUATION:
        return Token(_PUNCTUATION[c], None, pos), pos + 1
    if c == "!":
        marker = text[pos + 1] if pos + 1 < len(text) else None
        if marker not in _BANG:
            raise LexError(pos + 1, marker)
        return Token(_BANG[marker], None, pos), pos + 2
    if c == "'":
        return _quoted_string(text, pos)
    if not is_ident_char(c):
        raise LexError(pos, c)

    end = _ident_end(text, pos)
    word = text[pos:end]
    if c in NOT_IDENT_START:
        if not is_number_literal(word):
            raise InvalidNumber(pos, word)
        return Token(TokenType.NUMBER, word, pos), end
    return Token(TokenType.IDENT, word, pos), end


def tokenize(text: str) -> list[Token]:
    """Scan all of *text*; the last token is always EOF."""
    tokens: list[Token] = []
    pos = 0
    while True:
        token, pos = next_token(text, pos)
        tokens.append(token)
        if token.type is TokenType.EOF:
            return tokens


def _ident_end(text: str, pos: int) -> int:
    n = len(text)
    while pos < n and is_ident_char(text[pos]):
        pos += 1
    return pos


def _quoted_string(text: str, start: int) -> tuple[Token, int]:
    """Decode ``'...'`` beginning at *start* (the opening quote)."""
    parts: list[str] = []
    pos = start + 1
    n = len(text)
    while True:
        run = _STRING_RUN_RE.match(text, pos)
        parts.append(run.group())
        pos = run.end()
        if pos >= n:
            raise UnterminatedString(start)
        if text[pos] == "'":
            return Token(TokenType.QUOTED_STRING, "".join(parts), start), pos + 1
        # text[pos] == "!"
        if pos + 1 >= n:
            raise UnterminatedString(start)
        escaped = text[pos + 1]
        if escaped not in "!'":
            raise InvalidEscape(pos)
        parts.append(escaped)
        pos += 2
