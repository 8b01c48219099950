"""Lexer for shell scripts.

Splits source text into operator tokens and raw word tokens. A word
token keeps its quotes and expansions verbatim; ``parse_word`` turns the
raw text into a WordNode afterwards.

The scanning helpers at the top of this module (``skip_single_quoted``,
``skip_double_quoted``, ``skip_backtick``, ``find_matching_paren``,
``find_matching_brace``) are shared with the word parser so both agree
on where quoted regions and nested expansions end.
"""

import re
from dataclasses import dataclass
from enum import Enum

RESERVED_WORDS = frozenset({
    "if", "then", "else", "elif", "fi",
    "for", "while", "until", "do", "done",
    "case", "esac", "in", "select", "function",
    "{", "}", "!", "[[", "]]", "time",
})

# Metacharacters that end an unquoted word.
_WORD_BREAK = frozenset(" \t\n;&|()<>")

_NAME_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")
_ASSIGNMENT_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*\+?=")


def is_valid_name(name: str) -> bool:
    """Check if name is a valid shell variable name."""
    return bool(_NAME_RE.match(name))


def is_valid_assignment_lhs(word: str) -> bool:
    """Check if a raw word starts with NAME= or NAME+=."""
    return bool(_ASSIGNMENT_RE.match(word))


# =============================================================================
# Scanning helpers
# =============================================================================


def skip_single_quoted(text: str, i: int) -> int:
    """Return the index after the closing quote. i is just past the opening '.

    Returns -1 if the quote is unterminated.
    """
    end = text.find("'", i)
    return -1 if end < 0 else end + 1


def skip_backtick(text: str, i: int) -> int:
    """Return the index after the closing backtick, or -1."""
    n = len(text)
    while i < n:
        c = text[i]
        if c == "\\":
            i += 2
            continue
        if c == "`":
            return i + 1
        i += 1
    return -1


def skip_double_quoted(text: str, i: int) -> int:
    """Return the index after the closing double quote, or -1."""
    n = len(text)
    while i < n:
        c = text[i]
        if c == "\\":
            i += 2
            continue
        if c == '"':
            return i + 1
        if c == "$" and i + 1 < n and text[i + 1] == "(":
            j = find_matching_paren(text, i + 2)
            if j < 0:
                return -1
            i = j + 1
            continue
        if c == "$" and i + 1 < n and text[i + 1] == "{":
            j = find_matching_brace(text, i + 2)
            # An unbalanced ${ is left for the word parser to report
            i = j + 1 if j >= 0 else i + 2
            continue
        if c == "`":
            j = skip_backtick(text, i + 1)
            if j < 0:
                return -1
            i = j
            continue
        i += 1
    return -1


def find_matching_paren(text: str, i: int) -> int:
    """Find the ')' closing a '(' that ends just before index i, or -1."""
    depth = 1
    n = len(text)
    while i < n:
        c = text[i]
        if c == "\\":
            i += 2
            continue
        if c == "'":
            i = skip_single_quoted(text, i + 1)
            if i < 0:
                return -1
            continue
        if c == '"':
            i = skip_double_quoted(text, i + 1)
            if i < 0:
                return -1
            continue
        if c == "`":
            i = skip_backtick(text, i + 1)
            if i < 0:
                return -1
            continue
        if c == "$" and i + 1 < n and text[i + 1] == "{":
            j = find_matching_brace(text, i + 2)
            i = j + 1 if j >= 0 else i + 2
            continue
        if c == "(":
            depth += 1
        elif c == ")":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return -1


def find_matching_brace(text: str, i: int) -> int:
    """Find the '}' closing a '${' that ends just before index i, or -1."""
    depth = 1
    n = len(text)
    while i < n:
        c = text[i]
        if c == "\\":
            i += 2
            continue
        if c == "'":
            j = skip_single_quoted(text, i + 1)
            if j < 0:
                return -1
            i = j
            continue
        if c == '"':
            j = skip_double_quoted(text, i + 1)
            if j < 0:
                return -1
            i = j
            continue
        if c == "$" and i + 1 < n and text[i + 1] == "(":
            j = find_matching_paren(text, i + 2)
            if j < 0:
                return -1
            i = j + 1
            continue
        if c == "$" and i + 1 < n and text[i + 1] == "{":
            depth += 1
            i += 2
            continue
        if c == "}":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return -1


# =============================================================================
# Tokens
# =============================================================================


class TokenType(Enum):
    WORD = "WORD"
    NEWLINE = "NEWLINE"
    SEMI = "SEMI"
    AMP = "AMP"
    AND_IF = "AND_IF"
    OR_IF = "OR_IF"
    PIPE = "PIPE"
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"
    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: str
    pos: int
    line: int


class LexerError(Exception):
    """Raised for input the lexer cannot tokenize."""

    def __init__(self, message: str, line: int):
        super().__init__(message)
        self.line = line


class Lexer:
    """Tokenizer for shell scripts."""

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.tokens: list[Token] = []

    def tokenize(self) -> list[Token]:
        """Tokenize the whole source."""
        src = self.source
        n = len(src)
        while self.pos < n:
            c = src[self.pos]
            if c in " \t":
                self.pos += 1
            elif c == "\\" and src.startswith("\n", self.pos + 1):
                self.pos += 2
                self.line += 1
            elif c == "#":
                end = src.find("\n", self.pos)
                self.pos = n if end < 0 else end
            elif c == "\n":
                self._emit(TokenType.NEWLINE, "\n", 1)
                self.line += 1
            elif c == ";":
                if src.startswith(";;", self.pos):
                    raise LexerError("syntax error near unexpected token `;;'", self.line)
                self._emit(TokenType.SEMI, ";", 1)
            elif c == "&":
                if src.startswith("&&", self.pos):
                    self._emit(TokenType.AND_IF, "&&", 2)
                else:
                    self._emit(TokenType.AMP, "&", 1)
            elif c == "|":
                if src.startswith("||", self.pos):
                    self._emit(TokenType.OR_IF, "||", 2)
                else:
                    self._emit(TokenType.PIPE, "|", 1)
            elif c == "(":
                self._emit(TokenType.LPAREN, "(", 1)
            elif c == ")":
                self._emit(TokenType.RPAREN, ")", 1)
            elif c in "<>":
                raise LexerError("redirections are not supported", self.line)
            else:
                self._read_word()
        self.tokens.append(Token(TokenType.EOF, "", self.pos, self.line))
        return self.tokens

    def _emit(self, token_type: TokenType, value: str, length: int) -> None:
        self.tokens.append(Token(token_type, value, self.pos, self.line))
        self.pos += length

    def _read_word(self) -> None:
        src = self.source
        n = len(src)
        start = self.pos
        i = start
        while i < n:
            c = src[i]
            if c in _WORD_BREAK:
                break
            if c == "\\":
                i += 2
                continue
            if c == "'":
                j = skip_single_quoted(src, i + 1)
                if j < 0:
                    raise LexerError("unexpected EOF while looking for matching `''", self.line)
                i = j
                continue
            if c == '"':
                j = skip_double_quoted(src, i + 1)
                if j < 0:
                    raise LexerError('unexpected EOF while looking for matching `"\'', self.line)
                i = j
                continue
            if c == "`":
                j = skip_backtick(src, i + 1)
                if j < 0:
                    raise LexerError("unexpected EOF while looking for matching ``'", self.line)
                i = j
                continue
            if c == "$" and i + 1 < n and src[i + 1] == "(":
                j = find_matching_paren(src, i + 2)
                if j < 0:
                    raise LexerError("unexpected EOF while looking for matching `)'", self.line)
                i = j + 1
                continue
            if c == "$" and i + 1 < n and src[i + 1] == "{":
                j = find_matching_brace(src, i + 2)
                i = j + 1 if j >= 0 else i + 2
                continue
            i += 1
        value = src[start:i]
        self.tokens.append(Token(TokenType.WORD, value, start, self.line))
        self.line += value.count("\n")
        self.pos = i


def tokenize(source: str) -> list[Token]:
    """Tokenize source text."""
    return Lexer(source).tokenize()
