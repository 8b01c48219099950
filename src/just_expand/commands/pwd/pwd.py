"""Pwd command implementation.

Usage: pwd [-LP]

Print the name of the current working directory. The in-memory
filesystem has no symbolic links, so -L and -P print the same path.
"""

from ...types import CommandContext, ExecResult


class PwdCommand:
    """The pwd command."""

    name = "pwd"

    async def execute(self, args: list[str], ctx: CommandContext) -> ExecResult:
        """Execute the pwd command."""
        for arg in args:
            if arg.startswith("-"):
                for c in arg[1:]:
                    if c not in "LP":
                        return ExecResult(
                            stdout="",
                            stderr=f"pwd: invalid option -- '{c}'\n",
                            exit_code=1,
                        )
        return ExecResult(stdout=f"{ctx.cwd}\n", stderr="", exit_code=0)
