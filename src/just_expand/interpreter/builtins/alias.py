"""Alias builtin implementation.

Usage: alias [name[=value] ...]
       unalias [-a] name [...]

An alias replaces the command word of a simple command with the words of
its value. With no arguments, alias lists every definition in a form
that can be read back as input.
"""

import re
from typing import TYPE_CHECKING

from ...parser.lexer import LexerError, TokenType, tokenize
from ...parser.word import WordParseError, parse_word

if TYPE_CHECKING:
    from ..types import InterpreterContext
    from ...ast.types import WordNode
    from ...types import ExecResult

_ALIAS_NAME_RE = re.compile(r"""^[^\s/$`=\\'"|&;()<>]+$""")


def _quote(value: str) -> str:
    return "'" + value.replace("'", "'\\''") + "'"


def alias_words(value: str) -> list["WordNode"]:
    """Parse an alias value into words.

    Raises ValueError when the value holds anything other than words.
    """
    try:
        tokens = tokenize(value)
    except LexerError as e:
        raise ValueError(str(e)) from e
    words = []
    for token in tokens:
        if token.type in (TokenType.EOF, TokenType.NEWLINE):
            continue
        if token.type != TokenType.WORD:
            raise ValueError(f"unsupported token `{token.value}'")
        try:
            words.append(parse_word(token.value))
        except WordParseError as e:
            raise ValueError(str(e)) from e
    return words


async def handle_alias(ctx: "InterpreterContext", args: list[str]) -> "ExecResult":
    """Execute the alias builtin."""
    from ...types import ExecResult

    aliases = ctx.state.aliases
    if not args or args == ["-p"]:
        lines = [f"alias {name}={_quote(value)}\n" for name, value in sorted(aliases.items())]
        return ExecResult(stdout="".join(lines), stderr="", exit_code=0)

    stdout = ""
    stderr = ""
    exit_code = 0
    for arg in args:
        if arg == "-p":
            continue
        if "=" not in arg:
            if arg in aliases:
                stdout += f"alias {arg}={_quote(aliases[arg])}\n"
            else:
                stderr += f"bash: alias: {arg}: not found\n"
                exit_code = 1
            continue

        name, value = arg.split("=", 1)
        if not _ALIAS_NAME_RE.match(name):
            stderr += f"bash: alias: `{name}': invalid alias name\n"
            exit_code = 1
            continue
        try:
            alias_words(value)
        except ValueError as e:
            stderr += f"bash: alias: {name}: {e}\n"
            exit_code = 1
            continue
        aliases[name] = value

    return ExecResult(stdout=stdout, stderr=stderr, exit_code=exit_code)


async def handle_unalias(ctx: "InterpreterContext", args: list[str]) -> "ExecResult":
    """Execute the unalias builtin."""
    from ...types import ExecResult

    if not args:
        return ExecResult(
            stdout="",
            stderr="unalias: usage: unalias [-a] name [name ...]\n",
            exit_code=2,
        )
    if "-a" in args:
        ctx.state.aliases.clear()
        return ExecResult(stdout="", stderr="", exit_code=0)

    stderr = ""
    exit_code = 0
    for name in args:
        if ctx.state.aliases.pop(name, None) is None:
            stderr += f"bash: unalias: {name}: not found\n"
            exit_code = 1
    return ExecResult(stdout="", stderr=stderr, exit_code=exit_code)
