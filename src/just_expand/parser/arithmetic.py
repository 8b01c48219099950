"""Arithmetic expression parser.

Precedence climbing over a C-like integer grammar. Lowest to highest:

    ,                      comma
    = += -= *= /= %= <<= >>= &= ^= |=   assignment (right)
    ?:                     ternary (right)
    ||  &&  |  ^  &        logical / bitwise
    == !=   < > <= >=      equality / relational
    << >>   + -   * / %    shift / additive / multiplicative
    **                     exponent (right)
    ! ~ - + ++ --          prefix unary
    ++ --                  postfix

``$name``, ``${...}`` and ``$(...)`` are delegated to the word parser
and become ArithSubstitution nodes; ``$((...))`` becomes ArithNested and
is evaluated recursively from its source text.
"""

import re
from dataclasses import dataclass
from typing import Optional

from ..ast.types import (
    ArithAssignment,
    ArithBinary,
    ArithExpr,
    ArithGroup,
    ArithmeticExpansionPart,
    ArithNested,
    ArithNumber,
    ArithSubstitution,
    ArithTernary,
    ArithUnary,
    ArithVariable,
)

_NUMBER_RE = re.compile(r"[0-9][0-9a-zA-Z_@#]*")
_NAME_RE = re.compile(r"[a-zA-Z_][a-zA-Z0-9_]*")

_OPERATORS = sorted(
    [
        "<<=", ">>=",
        "**", "<<", ">>", "<=", ">=", "==", "!=", "&&", "||", "++", "--",
        "+=", "-=", "*=", "/=", "%=", "&=", "^=", "|=",
        "+", "-", "*", "/", "%", "<", ">", "=", "!", "~", "&", "^", "|",
        "?", ":", "(", ")", ",",
    ],
    key=len,
    reverse=True,
)

_ASSIGNMENT_OPS = frozenset({"=", "+=", "-=", "*=", "/=", "%=", "<<=", ">>=", "&=", "^=", "|="})

_BINARY_PRECEDENCE = {
    "||": 1,
    "&&": 2,
    "|": 3,
    "^": 4,
    "&": 5,
    "==": 6, "!=": 6,
    "<": 7, ">": 7, "<=": 7, ">=": 7,
    "<<": 8, ">>": 8,
    "+": 9, "-": 9,
    "*": 10, "/": 10, "%": 10,
    "**": 11,
}
_RIGHT_ASSOCIATIVE = frozenset({"**"})


INT64_MASK = (1 << 64) - 1


def to_int64(value: int) -> int:
    """Wrap an integer to a signed 64-bit value."""
    value &= INT64_MASK
    return value - (1 << 64) if value >> 63 else value


class ArithmeticParseError(Exception):
    """Raised for a malformed arithmetic expression."""

    def __init__(self, message: str, token: str = ""):
        super().__init__(message)
        self.token = token


def parse_base_n(digits: str, base: int) -> int:
    """Parse digits in base 2..64.

    0-9 are 0-9, a-z are 10-35, A-Z are 36-61 (or 10-35 when base <= 36),
    '@' is 62 and '_' is 63.
    """
    if not digits:
        raise ValueError("invalid number")
    result = 0
    for char in digits:
        if char.isdigit():
            digit = int(char)
        elif "a" <= char <= "z":
            digit = ord(char) - ord("a") + 10
        elif "A" <= char <= "Z":
            if base <= 36:
                digit = ord(char.lower()) - ord("a") + 10
            else:
                digit = ord(char) - ord("A") + 36
        elif char == "@":
            digit = 62
        elif char == "_":
            digit = 63
        else:
            raise ValueError("invalid number")
        if digit >= base:
            raise ValueError("value too great for base")
        result = (result * base + digit) & INT64_MASK
    return to_int64(result)


def parse_integer_literal(text: str) -> int:
    """Parse a decimal, 0x hex, 0 octal or base#digits constant.

    Raises ValueError for anything else.
    """
    if text.startswith(("0x", "0X")):
        return parse_base_n(text[2:], 16)
    if "#" in text:
        base_text, digits = text.split("#", 1)
        if not base_text.isdigit() or len(base_text) > 2 or not 2 <= int(base_text) <= 64:
            raise ValueError("invalid arithmetic base")
        return parse_base_n(digits, int(base_text))
    if len(text) > 1 and text.startswith("0"):
        return parse_base_n(text[1:], 8)
    if text.isdigit():
        return parse_base_n(text, 10)
    raise ValueError("value too great for base")


@dataclass(frozen=True)
class _Tok:
    kind: str  # "num", "name", "op", "node", "eof"
    value: str
    node: Optional[ArithExpr] = None


class ArithmeticParser:
    """Parser for the text between $(( and ))."""

    def __init__(self, source: str):
        self.source = source
        self.tokens = self._tokenize(source)
        self.pos = 0

    # -------------------------------------------------------------------------
    # Tokenizer
    # -------------------------------------------------------------------------

    def _tokenize(self, source: str) -> list[_Tok]:
        from .word import WordParseError, WordParser

        tokens: list[_Tok] = []
        i = 0
        n = len(source)
        while i < n:
            c = source[i]
            if c in " \t\n":
                i += 1
                continue
            if c.isdigit():
                m = _NUMBER_RE.match(source, i)
                tokens.append(_Tok("num", m.group(0)))
                i = m.end()
                continue
            if c.isalpha() or c == "_":
                m = _NAME_RE.match(source, i)
                tokens.append(_Tok("name", m.group(0)))
                i = m.end()
                continue
            if c == "$":
                try:
                    part, j = WordParser(source).parse_dollar(i)
                except WordParseError as e:
                    raise ArithmeticParseError(str(e), source[i:]) from e
                if part is None:
                    raise ArithmeticParseError("syntax error: operand expected", source[i:])
                if isinstance(part, ArithmeticExpansionPart):
                    node: ArithExpr = ArithNested(source=part.source)
                else:
                    node = ArithSubstitution(part=part)
                tokens.append(_Tok("node", source[i:j], node))
                i = j
                continue
            op = next((o for o in _OPERATORS if source.startswith(o, i)), None)
            if op is None:
                raise ArithmeticParseError(
                    "syntax error: invalid arithmetic operator", source[i:]
                )
            tokens.append(_Tok("op", op))
            i += len(op)
        tokens.append(_Tok("eof", ""))
        return tokens

    # -------------------------------------------------------------------------
    # Grammar
    # -------------------------------------------------------------------------

    @property
    def current(self) -> _Tok:
        return self.tokens[self.pos]

    def _advance(self) -> _Tok:
        tok = self.tokens[self.pos]
        if tok.kind != "eof":
            self.pos += 1
        return tok

    def _is_op(self, *values: str) -> bool:
        return self.current.kind == "op" and self.current.value in values

    def _remaining(self) -> str:
        return " ".join(t.value for t in self.tokens[self.pos:] if t.kind != "eof")

    def _operand_expected(self) -> ArithmeticParseError:
        return ArithmeticParseError("syntax error: operand expected", self._remaining())

    def parse(self) -> ArithExpr:
        if self.current.kind == "eof":
            return ArithNumber(0)
        expr = self._parse_comma()
        if self.current.kind != "eof":
            raise ArithmeticParseError("syntax error in expression", self._remaining())
        return expr

    def _parse_comma(self) -> ArithExpr:
        left = self._parse_assignment()
        while self._is_op(","):
            self._advance()
            right = self._parse_assignment()
            left = ArithBinary(",", left, right)
        return left

    def _parse_assignment(self) -> ArithExpr:
        tok = self.current
        nxt = self.tokens[self.pos + 1] if self.pos + 1 < len(self.tokens) else None
        if tok.kind == "name" and nxt is not None and nxt.kind == "op" and nxt.value in _ASSIGNMENT_OPS:
            self._advance()
            op = self._advance().value
            value = self._parse_assignment()
            return ArithAssignment(op, tok.value, value)
        return self._parse_ternary()

    def _parse_ternary(self) -> ArithExpr:
        condition = self._parse_binary(1)
        if not self._is_op("?"):
            return condition
        self._advance()
        consequent = self._parse_assignment()
        if not self._is_op(":"):
            raise ArithmeticParseError("syntax error: `:' expected for conditional expression", self._remaining())
        self._advance()
        alternate = self._parse_assignment()
        return ArithTernary(condition, consequent, alternate)

    def _parse_binary(self, min_precedence: int) -> ArithExpr:
        left = self._parse_unary()
        while self.current.kind == "op" and self.current.value in _BINARY_PRECEDENCE:
            op = self.current.value
            precedence = _BINARY_PRECEDENCE[op]
            if precedence < min_precedence:
                break
            self._advance()
            next_min = precedence if op in _RIGHT_ASSOCIATIVE else precedence + 1
            right = self._parse_binary(next_min)
            left = ArithBinary(op, left, right)
        return left

    def _parse_unary(self) -> ArithExpr:
        if self._is_op("-", "+", "!", "~"):
            op = self._advance().value
            return ArithUnary(op, self._parse_unary())
        if self._is_op("++", "--"):
            op = self._advance().value
            if self.current.kind != "name":
                raise self._operand_expected()
            return ArithUnary(op, ArithVariable(self._advance().value), prefix=True)
        return self._parse_postfix()

    def _parse_postfix(self) -> ArithExpr:
        primary = self._parse_primary()
        if isinstance(primary, ArithVariable) and self._is_op("++", "--"):
            op = self._advance().value
            return ArithUnary(op, primary, prefix=False)
        return primary

    def _parse_primary(self) -> ArithExpr:
        tok = self.current
        if tok.kind == "num":
            self._advance()
            try:
                return ArithNumber(parse_integer_literal(tok.value))
            except ValueError as e:
                raise ArithmeticParseError(str(e), tok.value) from e
        if tok.kind == "name":
            self._advance()
            return ArithVariable(tok.value)
        if tok.kind == "node":
            self._advance()
            return tok.node
        if self._is_op("("):
            self._advance()
            expr = self._parse_comma()
            if not self._is_op(")"):
                raise ArithmeticParseError("syntax error: missing `)'", self._remaining())
            self._advance()
            return ArithGroup(expr)
        raise self._operand_expected()


def parse_arithmetic(source: str) -> ArithExpr:
    """Parse an arithmetic expression."""
    return ArithmeticParser(source).parse()
