"""Parser: recursive-descent grammar engine driving a Visitor."""

from __future__ import annotations

from decimal import Decimal

from .deserialize import ValueVisitor, Visitor
from .errors import (
    DepthExceeded,
    DuplicateKey,
    InvalidNumber,
    MissingField,
    TrailingCharacters,
    TypeMismatch,
    UnexpectedToken,
)
from .lexer import Token, TokenType, next_token, skip_whitespace
from .options import DEFAULT_OPTIONS, DuplicateKeys, NumberMode, Options


_KEY_TOKENS = (TokenType.IDENT, TokenType.QUOTED_STRING)


class Parser:
    """Parses one complete Rison value from *text*.

    The same grammar code serves both decode paths: pass a
    :class:`ValueVisitor` to materialise a Value tree, or any typed visitor
    to build host objects directly.
    """

    def __init__(self, text: str, options: Options = DEFAULT_OPTIONS) -> None:
        self.text = text
        self.options = options
        self._pos = 0
        self._depth = 0
        self._peeked: Token | None = None

    # -- Entry points ---------------------------------------------------

    def parse(self, visitor: Visitor):
        result = self._value(visitor)
        pos = skip_whitespace(self.text, self._cursor())
        if pos != len(self.text):
            raise TrailingCharacters(pos)
        return result

    # -- Token stream ---------------------------------------------------

    def _next(self) -> Token:
        if self._peeked is not None:
            token, self._peeked = self._peeked, None
            return token
        token, self._pos = next_token(self.text, self._pos)
        return token

    def _peek(self) -> Token:
        if self._peeked is None:
            self._peeked, self._pos = next_token(self.text, self._pos)
        return self._peeked

    def _cursor(self) -> int:
        if self._peeked is not None:
            return self._peeked.offset
        return self._pos

    def _expect(self, token: Token, ttype: TokenType, expected: str) -> None:
        if token.type is not ttype:
            raise UnexpectedToken(token.offset, expected, token.describe())

    # -- Grammar --------------------------------------------------------

    def _value(self, visitor: Visitor):
        token = self._next()
        try:
            return self._dispatch(token, visitor)
        except (TypeMismatch, MissingField) as exc:
            if exc.offset is not None:
                raise
            if isinstance(exc, TypeMismatch):
                raise TypeMismatch(exc.expected, exc.found, token.offset) from None
            raise MissingField(exc.name, token.offset) from None

    def _dispatch(self, token: Token, visitor: Visitor):
        ttype = token.type
        if ttype is TokenType.NULL:
            return visitor.visit_null()
        if ttype is TokenType.TRUE:
            return visitor.visit_bool(True)
        if ttype is TokenType.FALSE:
            return visitor.visit_bool(False)
        if ttype is TokenType.NUMBER:
            return visitor.visit_number(self._number(token))
        if ttype in _KEY_TOKENS:
            return visitor.visit_string(token.value)
        if ttype is TokenType.LPAREN:
            return self._object(token, visitor)
        if ttype is TokenType.BANG_LPAREN:
            return self._array(token, visitor)
        raise UnexpectedToken(token.offset, "a value", token.describe())

    def _enter(self, token: Token) -> None:
        self._depth += 1
        if self._depth > self.options.max_depth:
            raise DepthExceeded(self.options.max_depth, token.offset)

    def _array(self, open_token: Token, visitor: Visitor):
        self._enter(open_token)
        acc = visitor.begin_array()
        if self._peek().type is TokenType.RPAREN:
            self._next()
        else:
            while True:
                visitor.element(acc, self._value(visitor.element_visitor(acc)))
                token = self._next()
                if token.type is TokenType.RPAREN:
                    break
                self._expect(token, TokenType.COMMA, "',' or ')'")
        self._depth -= 1
        return visitor.end_array(acc)

    def _object(self, open_token: Token, visitor: Visitor):
        self._enter(open_token)
        acc = visitor.begin_object()
        seen: set[str] = set()
        token = self._next()
        if token.type is not TokenType.RPAREN:
            while True:
                if token.type not in _KEY_TOKENS:
                    raise UnexpectedToken(token.offset, "an object key", token.describe())
                key = token.value
                if key in seen and self.options.duplicate_keys is DuplicateKeys.ERROR:
                    raise DuplicateKey(token.offset, key)
                seen.add(key)
                self._expect(self._next(), TokenType.COLON, "':'")
                visitor.entry(acc, key, self._value(visitor.entry_visitor(acc, key)))
                token = self._next()
                if token.type is TokenType.RPAREN:
                    break
                self._expect(token, TokenType.COMMA, "',' or ')'")
                token = self._next()
        self._depth -= 1
        return visitor.end_object(acc)

    def _number(self, token: Token) -> int | float:
        text = token.value
        if self.options.numbers is NumberMode.UNIFIED:
            value = float(text)
        else:
            whole, _, fraction = text.partition(".")
            if not fraction.strip("0"):
                return _to_int(whole)
            value = float(text)
        if value in (float("inf"), float("-inf")):
            raise InvalidNumber(token.offset, text)
        return value


def _to_int(digits: str) -> int:
    try:
        return int(digits)
    except ValueError:
        # past the interpreter's int/str digit limit; Decimal has none
        return int(Decimal(digits))


def parse(text: str, visitor: Visitor | None = None, options: Options = DEFAULT_OPTIONS):
    """Parse *text* completely, feeding *visitor* (default: build a Value)."""
    return Parser(text, options).parse(visitor if visitor is not None else ValueVisitor())
