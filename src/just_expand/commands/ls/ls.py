"""Ls command implementation.

Usage: ls [-1aA] [file ...]

List directory contents, one entry per line.

Options:
  -a    Include entries starting with '.', plus '.' and '..'
  -A    Include entries starting with '.', but not '.' and '..'
  -1    One entry per line (always the case here)
"""

from ...types import CommandContext, ExecResult


class LsCommand:
    """The ls command."""

    name = "ls"

    async def execute(self, args: list[str], ctx: CommandContext) -> ExecResult:
        """Execute the ls command."""
        show_all = False
        almost_all = False
        paths: list[str] = []

        for arg in args:
            if arg.startswith("-") and len(arg) > 1:
                for c in arg[1:]:
                    if c == "a":
                        show_all = True
                    elif c == "A":
                        almost_all = True
                    elif c == "1":
                        pass
                    else:
                        return ExecResult(
                            stdout="",
                            stderr=f"ls: invalid option -- '{c}'\n",
                            exit_code=2,
                        )
            else:
                paths.append(arg)

        if not paths:
            paths = ["."]

        files: list[str] = []
        directories: list[str] = []
        stderr = ""
        exit_code = 0
        for path in paths:
            resolved = ctx.fs.resolve_path(ctx.cwd, path)
            if not await ctx.fs.exists(resolved):
                stderr += f"ls: cannot access '{path}': No such file or directory\n"
                exit_code = 2
            elif await ctx.fs.is_directory(resolved):
                directories.append(path)
            else:
                files.append(path)

        sections: list[str] = []
        if files:
            sections.append("".join(f"{f}\n" for f in sorted(files)))

        show_headers = len(paths) > 1
        for path in sorted(directories):
            entries = await ctx.fs.readdir(ctx.fs.resolve_path(ctx.cwd, path))
            if not (show_all or almost_all):
                entries = [e for e in entries if not e.startswith(".")]
            if show_all:
                entries = [".", ".."] + entries
            listing = "".join(f"{e}\n" for e in entries)
            if show_headers:
                listing = f"{path}:\n{listing}"
            sections.append(listing)

        return ExecResult(stdout="\n".join(sections), stderr=stderr, exit_code=exit_code)
