"""Set and shift builtin implementations.

set - Set or unset shell options and positional parameters.

Usage: set [options] [-- arg ...]
       set +o
       set -o [option]

Options:
  -e  errexit    Exit immediately if a command exits with non-zero status
  -u  nounset    Treat unset variables as an error when substituting
  -f  noglob     Disable pathname expansion

shift - Shift positional parameters.

Usage: shift [n]

Shift positional parameters to the left by n (default 1).
"""

import re
from typing import TYPE_CHECKING

from ..types import SPECIAL_PARAMETERS

if TYPE_CHECKING:
    from ..types import InterpreterContext
    from ...types import ExecResult

_SAFE_VALUE_RE = re.compile(r'^[a-zA-Z0-9_/.,:@%^+=~-]+$')

# Option name -> (ShellOptions attribute, short letter)
_OPTIONS = {
    "errexit": ("errexit", "e"),
    "noglob": ("noglob", "f"),
    "nounset": ("nounset", "u"),
}
_SHORT_OPTIONS = {letter: attr for attr, letter in _OPTIONS.values()}


def _shell_quote_value(value: str) -> str:
    """Quote a value for set output, matching bash behavior.

    Simple values (alphanumeric etc.) are unquoted.
    Empty values become ''.
    Values with special chars are single-quoted with embedded
    single quotes escaped as '\\''."""
    if not value:
        return "''"
    if _SAFE_VALUE_RE.match(value):
        return value
    return "'" + value.replace("'", "'\\''") + "'"


async def handle_set(ctx: "InterpreterContext", args: list[str]) -> "ExecResult":
    """Execute the set builtin."""
    from ...types import ExecResult

    # No arguments: print all variables
    if not args:
        lines = []
        for k, v in sorted(ctx.state.env.items()):
            if k in SPECIAL_PARAMETERS or k.isdigit():
                continue
            lines.append(f"{k}={_shell_quote_value(v)}")
        return ExecResult(stdout="\n".join(lines) + "\n", stderr="", exit_code=0)

    i = 0
    while i < len(args):
        arg = args[i]

        # Handle -- which starts positional parameters
        if arg == "--":
            ctx.state.env.set_positional_params(args[i + 1:])
            return ExecResult(stdout="", stderr="", exit_code=0)

        if arg in ("-o", "+o"):
            enable = arg == "-o"
            if i + 1 >= len(args):
                lister = _list_options if enable else _list_options_script
                return ExecResult(stdout=lister(ctx), stderr="", exit_code=0)
            i += 1
            result = _set_option(ctx, args[i], enable)
            if result:
                return result

        elif arg[:1] in ("-", "+") and len(arg) > 1:
            enable = arg[0] == "-"
            for c in arg[1:]:
                result = _set_short_option(ctx, c, enable)
                if result:
                    return result

        # Treat as positional parameter
        else:
            ctx.state.env.set_positional_params(args[i:])
            return ExecResult(stdout="", stderr="", exit_code=0)

        i += 1

    return ExecResult(stdout="", stderr="", exit_code=0)


def _set_option(ctx: "InterpreterContext", name: str, enable: bool) -> "ExecResult | None":
    """Set a named option. Returns error result if invalid option."""
    from ...types import ExecResult

    if name not in _OPTIONS:
        return ExecResult(
            stdout="",
            stderr=f"bash: set: {name}: invalid option name\n",
            exit_code=1,
        )
    setattr(ctx.state.options, _OPTIONS[name][0], enable)
    return None


def _set_short_option(ctx: "InterpreterContext", char: str, enable: bool) -> "ExecResult | None":
    """Set a short option like -e. Returns error result if invalid."""
    from ...types import ExecResult

    if char not in _SHORT_OPTIONS:
        return ExecResult(
            stdout="",
            stderr=f"bash: set: -{char}: invalid option\n",
            exit_code=1,
        )
    setattr(ctx.state.options, _SHORT_OPTIONS[char], enable)
    return None


def _list_options(ctx: "InterpreterContext") -> str:
    """List all options in human-readable format."""
    lines = []
    for name, (attr, _) in sorted(_OPTIONS.items()):
        enabled = getattr(ctx.state.options, attr)
        pad = " " * (15 - len(name))
        lines.append(f"{name}{pad} {'on' if enabled else 'off'}")
    return "\n".join(lines) + "\n"


def _list_options_script(ctx: "InterpreterContext") -> str:
    """List options in re-inputable script format."""
    lines = []
    for name, (attr, _) in sorted(_OPTIONS.items()):
        enabled = getattr(ctx.state.options, attr)
        lines.append(f"set {'-' if enabled else '+'}o {name}")
    return "\n".join(lines) + "\n"


async def handle_shift(ctx: "InterpreterContext", args: list[str]) -> "ExecResult":
    """Execute the shift builtin."""
    from ...types import ExecResult

    # Default shift count is 1
    n = 1
    if args:
        if len(args) > 1:
            return ExecResult(
                stdout="",
                stderr="bash: shift: too many arguments\n",
                exit_code=1,
            )
        try:
            n = int(args[0])
        except ValueError:
            return ExecResult(
                stdout="",
                stderr=f"bash: shift: {args[0]}: numeric argument required\n",
                exit_code=1,
            )

    params = ctx.state.env.positional_params()
    if n < 0 or n > len(params):
        return ExecResult(
            stdout="",
            stderr=f"bash: shift: {n}: shift count out of range\n",
            exit_code=1,
        )

    ctx.state.env.set_positional_params(params[n:])
    return ExecResult(stdout="", stderr="", exit_code=0)
