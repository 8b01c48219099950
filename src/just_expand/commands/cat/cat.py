"""Cat command implementation.

Usage: cat [file ...]

Concatenate files to standard output. With no file, or when file is -,
read standard input.
"""

from ...types import CommandContext, ExecResult


class CatCommand:
    """The cat command."""

    name = "cat"

    async def execute(self, args: list[str], ctx: CommandContext) -> ExecResult:
        """Execute the cat command."""
        files = [a for a in args if a == "-" or not a.startswith("-")]
        if not files:
            return ExecResult(stdout=ctx.stdin, stderr="", exit_code=0)

        stdout = ""
        stderr = ""
        exit_code = 0
        for file in files:
            if file == "-":
                stdout += ctx.stdin
                continue
            path = ctx.fs.resolve_path(ctx.cwd, file)
            try:
                stdout += await ctx.fs.read_file(path)
            except FileNotFoundError:
                stderr += f"cat: {file}: No such file or directory\n"
                exit_code = 1
            except IsADirectoryError:
                stderr += f"cat: {file}: Is a directory\n"
                exit_code = 1
        return ExecResult(stdout=stdout, stderr=stderr, exit_code=exit_code)
