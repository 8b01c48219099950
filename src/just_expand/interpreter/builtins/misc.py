"""Miscellaneous builtins: colon, true, false."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..types import InterpreterContext
    from ...types import ExecResult


def _result(stdout: str, stderr: str, exit_code: int) -> "ExecResult":
    """Create an ExecResult."""
    from ...types import ExecResult
    return ExecResult(stdout=stdout, stderr=stderr, exit_code=exit_code)


async def handle_colon(
    ctx: "InterpreterContext", args: list[str]
) -> "ExecResult":
    """Execute the : (colon) builtin - null command, always succeeds.

    Its arguments are still expanded, so `: ${x:=default}` assigns.
    """
    return _result("", "", 0)


async def handle_true(
    ctx: "InterpreterContext", args: list[str]
) -> "ExecResult":
    """Execute the true builtin - always succeeds."""
    return _result("", "", 0)


async def handle_false(
    ctx: "InterpreterContext", args: list[str]
) -> "ExecResult":
    """Execute the false builtin - always fails."""
    return _result("", "", 1)
