"""Printenv command implementation."""

from ...types import CommandContext, ExecResult

SPECIAL_PARAMETERS = frozenset("?#$!-*@")


class PrintenvCommand:
    """The printenv command - print environment variables.

    Sees the shell variables plus any prefix assignments (`X=1 printenv X`).
    """

    name = "printenv"

    async def execute(self, args: list[str], ctx: CommandContext) -> ExecResult:
        """Execute the printenv command."""
        env = {k: v for k, v in ctx.env.items() if not k.isdigit() and k not in SPECIAL_PARAMETERS}
        env.update(ctx.exported)
        var_names = [a for a in args if not a.startswith("-")]

        if not var_names:
            lines = [f"{k}={v}" for k, v in sorted(env.items())]
            return ExecResult(
                stdout="\n".join(lines) + "\n" if lines else "",
                stderr="",
                exit_code=0,
            )

        # Print specific variables; missing ones make the status 1
        output_lines = []
        exit_code = 0
        for name in var_names:
            if name in env:
                output_lines.append(env[name])
            else:
                exit_code = 1
        return ExecResult(
            stdout="\n".join(output_lines) + "\n" if output_lines else "",
            stderr="",
            exit_code=exit_code,
        )
