"""Unset builtin implementation.

Usage: unset [-f] [-v] [name ...]

Remove variables or functions.

Options:
  -v  Treat each name as a variable name (default)
  -f  Treat each name as a function name
"""

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..types import InterpreterContext
    from ...types import ExecResult

_NAME_RE = re.compile(r'^[a-zA-Z_][a-zA-Z0-9_]*$')


async def handle_unset(ctx: "InterpreterContext", args: list[str]) -> "ExecResult":
    """Execute the unset builtin."""
    from ...types import ExecResult

    mode = "variable"
    explicit_mode = False
    names = []

    for arg in args:
        if arg == "-v":
            mode = "variable"
            explicit_mode = True
        elif arg == "-f":
            mode = "function"
            explicit_mode = True
        elif arg.startswith("-"):
            # Skip unknown options
            pass
        else:
            names.append(arg)

    env = ctx.state.env
    exit_code = 0
    stderr_parts = []

    for name in names:
        if mode == "function":
            ctx.state.functions.pop(name, None)
            continue
        if not _NAME_RE.match(name):
            stderr_parts.append(f"bash: unset: `{name}': not a valid identifier\n")
            exit_code = 1
            continue
        if name in env:
            env.pop(name)
        elif not explicit_mode:
            # No such variable: fall back to removing a function (POSIX behavior)
            ctx.state.functions.pop(name, None)

    return ExecResult(stdout="", stderr="".join(stderr_parts), exit_code=exit_code)
