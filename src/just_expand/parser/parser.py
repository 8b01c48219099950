"""Recursive-descent parser for shell scripts.

Grammar (a deliberately small subset of bash):

    script      := list EOF
    list        := statement ((';' | '&' | NEWLINE) statement)*
    statement   := pipeline (('&&' | '||') NEWLINE* pipeline)*
    pipeline    := ['!'] command ('|' NEWLINE* command)*
    command     := group | subshell | function_def | simple_command
    group       := '{' list '}'
    subshell    := '(' list ')'
    function_def:= NAME '(' ')' NEWLINE* (group | subshell)
                 | 'function' NAME ['(' ')'] NEWLINE* (group | subshell)
    simple_command := ASSIGNMENT* WORD*

Loops, conditionals, case and redirections are rejected with a
ParseException.
"""

import re
from dataclasses import replace
from typing import Optional

from ..ast.types import (
    AssignmentNode,
    FunctionDefNode,
    GroupNode,
    PipelineNode,
    ScriptNode,
    SimpleCommandNode,
    StatementNode,
    SubshellNode,
    WordNode,
)
from .lexer import Lexer, LexerError, Token, TokenType, is_valid_assignment_lhs, is_valid_name
from .word import WordParseError, parse_word

MAX_INPUT_SIZE = 1_000_000
MAX_TOKENS = 100_000

_ASSIGNMENT_RE = re.compile(r"^([a-zA-Z_][a-zA-Z0-9_]*)(\+?)=")

_UNSUPPORTED = frozenset({
    "if", "then", "else", "elif", "fi",
    "for", "while", "until", "do", "done",
    "case", "esac", "select", "[[", "]]", "time",
})


class ParseException(Exception):
    """Raised when a script cannot be parsed."""

    def __init__(self, message: str, line: Optional[int] = None):
        super().__init__(message)
        self.line = line


class Parser:
    """Parser over a token list."""

    def __init__(self, tokens: list[Token]):
        if len(tokens) > MAX_TOKENS:
            raise ParseException(f"too many tokens (>{MAX_TOKENS})")
        self.tokens = tokens
        self.pos = 0

    @property
    def current(self) -> Token:
        return self.tokens[self.pos]

    def _peek(self, offset: int = 1) -> Token:
        idx = min(self.pos + offset, len(self.tokens) - 1)
        return self.tokens[idx]

    def _advance(self) -> Token:
        tok = self.tokens[self.pos]
        if tok.type != TokenType.EOF:
            self.pos += 1
        return tok

    def _is_word(self, value: str) -> bool:
        return self.current.type == TokenType.WORD and self.current.value == value

    def _skip_newlines(self) -> None:
        while self.current.type == TokenType.NEWLINE:
            self._advance()

    def _error(self, tok: Optional[Token] = None) -> ParseException:
        tok = tok or self.current
        if tok.type == TokenType.EOF:
            return ParseException("syntax error: unexpected end of file", tok.line)
        value = "newline" if tok.type == TokenType.NEWLINE else tok.value
        return ParseException(f"syntax error near unexpected token `{value}'", tok.line)

    def _expect(self, token_type: TokenType, value: Optional[str] = None) -> Token:
        tok = self.current
        if tok.type != token_type or (value is not None and tok.value != value):
            raise self._error()
        return self._advance()

    # -------------------------------------------------------------------------
    # Grammar
    # -------------------------------------------------------------------------

    def parse_script(self) -> ScriptNode:
        script = self._parse_list(closer=None)
        if self.current.type != TokenType.EOF:
            raise self._error()
        return script

    def _at_closer(self, closer: Optional[str]) -> bool:
        if closer == "}":
            return self._is_word("}")
        if closer == ")":
            return self.current.type == TokenType.RPAREN
        return False

    def _parse_list(self, closer: Optional[str]) -> ScriptNode:
        statements: list[StatementNode] = []
        while True:
            self._skip_newlines()
            if self.current.type == TokenType.EOF or self._at_closer(closer):
                break
            statement = self._parse_statement()
            tok = self.current
            if tok.type in (TokenType.SEMI, TokenType.NEWLINE):
                self._advance()
            elif tok.type == TokenType.AMP:
                self._advance()
                statement = replace(statement, background=True)
            elif tok.type != TokenType.EOF and not self._at_closer(closer):
                raise self._error()
            statements.append(statement)
        return ScriptNode(statements=tuple(statements))

    def _parse_statement(self) -> StatementNode:
        pipelines = [self._parse_pipeline()]
        operators: list[str] = []
        while self.current.type in (TokenType.AND_IF, TokenType.OR_IF):
            operators.append(self._advance().value)
            self._skip_newlines()
            pipelines.append(self._parse_pipeline())
        return StatementNode(pipelines=tuple(pipelines), operators=tuple(operators))

    def _parse_pipeline(self) -> PipelineNode:
        negated = False
        if self._is_word("!"):
            self._advance()
            negated = True
        commands = [self._parse_command()]
        while self.current.type == TokenType.PIPE:
            self._advance()
            self._skip_newlines()
            commands.append(self._parse_command())
        return PipelineNode(commands=tuple(commands), negated=negated)

    def _parse_command(self):
        tok = self.current
        if tok.type == TokenType.LPAREN:
            return self._parse_subshell()
        if tok.type != TokenType.WORD:
            raise self._error()
        if tok.value == "{":
            return self._parse_group()
        if tok.value == "function":
            return self._parse_function_keyword()
        if tok.value in _UNSUPPORTED:
            raise ParseException(f"syntax error: `{tok.value}' is not supported", tok.line)
        if (is_valid_name(tok.value)
                and self._peek().type == TokenType.LPAREN
                and self._peek(2).type == TokenType.RPAREN):
            name = self._advance().value
            self._advance()
            self._advance()
            return self._parse_function_body(name)
        return self._parse_simple_command()

    def _parse_group(self) -> GroupNode:
        self._expect(TokenType.WORD, "{")
        body = self._parse_list(closer="}")
        self._expect(TokenType.WORD, "}")
        return GroupNode(body=body)

    def _parse_subshell(self) -> SubshellNode:
        self._expect(TokenType.LPAREN)
        body = self._parse_list(closer=")")
        self._expect(TokenType.RPAREN)
        return SubshellNode(body=body)

    def _parse_function_keyword(self) -> FunctionDefNode:
        self._advance()
        name_tok = self._expect(TokenType.WORD)
        if not is_valid_name(name_tok.value):
            raise ParseException(f"`{name_tok.value}': not a valid identifier", name_tok.line)
        if self.current.type == TokenType.LPAREN:
            self._advance()
            self._expect(TokenType.RPAREN)
        return self._parse_function_body(name_tok.value)

    def _parse_function_body(self, name: str) -> FunctionDefNode:
        self._skip_newlines()
        if self._is_word("{"):
            body = self._parse_group()
        elif self.current.type == TokenType.LPAREN:
            body = self._parse_subshell()
        else:
            raise self._error()
        return FunctionDefNode(name=name, body=body)

    def _parse_simple_command(self) -> SimpleCommandNode:
        line = self.current.line
        assignments: list[AssignmentNode] = []
        words: list[WordNode] = []
        while self.current.type == TokenType.WORD:
            raw = self._advance().value
            try:
                if not words and is_valid_assignment_lhs(raw):
                    assignments.append(_parse_assignment(raw))
                else:
                    words.append(parse_word(raw))
            except WordParseError as e:
                raise ParseException(str(e), line) from e
        if not assignments and not words:
            raise self._error()
        return SimpleCommandNode(
            assignments=tuple(assignments),
            name=words[0] if words else None,
            args=tuple(words[1:]),
            line=line,
        )


def _parse_assignment(raw: str) -> AssignmentNode:
    match = _ASSIGNMENT_RE.match(raw)
    value_text = raw[match.end():]
    return AssignmentNode(
        name=match.group(1),
        value=parse_word(value_text, base=match.end()),
        append=match.group(2) == "+",
    )


def parse(source: str) -> ScriptNode:
    """Parse a script into a ScriptNode."""
    if len(source) > MAX_INPUT_SIZE:
        raise ParseException(f"input too large (>{MAX_INPUT_SIZE} bytes)")
    try:
        tokens = Lexer(source).tokenize()
    except LexerError as e:
        raise ParseException(str(e), e.line) from e
    return Parser(tokens).parse_script()
