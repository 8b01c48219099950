"""Parser module for just-expand."""

from .lexer import (
    Lexer,
    Token,
    TokenType,
    tokenize,
    is_valid_name,
    is_valid_assignment_lhs,
    RESERVED_WORDS,
)
from .parser import (
    Parser,
    ParseException,
    parse,
    MAX_INPUT_SIZE,
    MAX_TOKENS,
)
from .word import WordParser, WordParseError, parse_word
from .arithmetic import ArithmeticParser, ArithmeticParseError, parse_arithmetic

__all__ = [
    # Lexer
    "Lexer",
    "Token",
    "TokenType",
    "tokenize",
    "is_valid_name",
    "is_valid_assignment_lhs",
    "RESERVED_WORDS",
    # Parser
    "Parser",
    "ParseException",
    "parse",
    "MAX_INPUT_SIZE",
    "MAX_TOKENS",
    # Words
    "WordParser",
    "WordParseError",
    "parse_word",
    # Arithmetic
    "ArithmeticParser",
    "ArithmeticParseError",
    "parse_arithmetic",
]
