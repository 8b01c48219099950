"""Control flow builtins: return, exit."""

from typing import TYPE_CHECKING

from ..errors import ExitError, ReturnError

if TYPE_CHECKING:
    from ..types import InterpreterContext
    from ...types import ExecResult


async def handle_return(ctx: "InterpreterContext", args: list[str]) -> "ExecResult":
    """Execute the return builtin.

    Usage: return [n]

    Return from a shell function. n is the return value (0-255). If n is
    omitted, the return value is the exit status of the last command
    executed.
    """
    exit_code = ctx.state.last_exit_code
    if args:
        try:
            exit_code = int(args[0]) & 255  # Mask to 0-255
        except ValueError:
            from ...types import ExecResult
            return ExecResult(
                stdout="",
                stderr=f"bash: return: {args[0]}: numeric argument required\n",
                exit_code=2,
            )

    raise ReturnError(exit_code)


async def handle_exit(ctx: "InterpreterContext", args: list[str]) -> "ExecResult":
    """Execute the exit builtin.

    Usage: exit [n]

    Exit the shell (or the current subshell) with status n.
    """
    exit_code = ctx.state.last_exit_code
    if args:
        try:
            exit_code = int(args[0]) & 255
        except ValueError:
            from ...types import ExecResult
            return ExecResult(
                stdout="",
                stderr=f"bash: exit: {args[0]}: numeric argument required\n",
                exit_code=1,
            )

    raise ExitError(exit_code)
