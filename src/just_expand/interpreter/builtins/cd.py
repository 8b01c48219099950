"""Cd builtin implementation.

Usage: cd [dir]
       cd -

Change the current working directory to dir. If dir is not specified,
change to $HOME. If dir is -, change to $OLDPWD.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..types import InterpreterContext
    from ...types import ExecResult


async def handle_cd(ctx: "InterpreterContext", args: list[str]) -> "ExecResult":
    """Execute the cd builtin."""
    from ...types import ExecResult

    positional = [a for a in args if a != "--"]
    if len(positional) > 1:
        return ExecResult(
            stdout="",
            stderr="bash: cd: too many arguments\n",
            exit_code=1,
        )

    # Determine target directory
    if not positional:
        target = ctx.state.env.get("HOME", "/")
    elif positional[0] == "-":
        target = ctx.state.env.get("OLDPWD", "")
        if not target:
            return ExecResult(
                stdout="",
                stderr="bash: cd: OLDPWD not set\n",
                exit_code=1,
            )
    else:
        target = positional[0]

    new_dir = ctx.fs.resolve_path(ctx.state.cwd, target)

    if not await ctx.fs.exists(new_dir):
        return ExecResult(
            stdout="",
            stderr=f"bash: cd: {target}: No such file or directory\n",
            exit_code=1,
        )
    if not await ctx.fs.is_directory(new_dir):
        return ExecResult(
            stdout="",
            stderr=f"bash: cd: {target}: Not a directory\n",
            exit_code=1,
        )

    # Update state
    old_dir = ctx.state.cwd
    ctx.state.cwd = new_dir
    ctx.state.env["OLDPWD"] = old_dir
    ctx.state.env["PWD"] = new_dir

    # If cd - was used, print the new directory
    stdout = ""
    if positional and positional[0] == "-":
        stdout = new_dir + "\n"

    return ExecResult(stdout=stdout, stderr="", exit_code=0)
