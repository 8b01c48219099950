"""Local builtin implementation.

Usage: local [name[=value] ...]

Create local variables for use within a function. When the function
returns, any local variables are restored to their previous values.
"""

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..types import InterpreterContext
    from ...types import ExecResult

_NAME_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


async def handle_local(ctx: "InterpreterContext", args: list[str]) -> "ExecResult":
    """Execute the local builtin."""
    from ...types import ExecResult

    # Check if we're inside a function
    if not ctx.state.local_scopes:
        return ExecResult(
            stdout="",
            stderr="bash: local: can only be used in a function\n",
            exit_code=1,
        )

    current_scope = ctx.state.local_scopes[-1]
    stderr = ""
    exit_code = 0

    for arg in args:
        if arg.startswith("-"):
            # Attribute flags are accepted and ignored
            continue
        if "=" in arg:
            name, value = arg.split("=", 1)
        else:
            name, value = arg, None

        if not _NAME_RE.match(name):
            stderr += f"bash: local: `{arg}': not a valid identifier\n"
            exit_code = 1
            continue

        # Save original value for restoration (if not already saved)
        if name not in current_scope:
            current_scope[name] = ctx.state.env.get(name)

        if value is not None:
            ctx.state.env.set(name, value)
        elif name not in ctx.state.env:
            ctx.state.env.set(name, "")

    return ExecResult(stdout="", stderr=stderr, exit_code=exit_code)
