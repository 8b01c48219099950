"""Argv command implementation.

Usage: argv.py [arg ...]

Print the argument vector as a Python-style list of single-quoted
strings, one list per invocation. Field boundaries produced by word
expansion are visible exactly, which `echo` cannot show.

    $ x='a  b'; argv.py $x "$x" ''
    ['a', 'b', 'a  b', '']
"""

from ...types import CommandContext, ExecResult

_NAMED_ESCAPES = {
    ord("'"): "\\'",
    ord("\\"): "\\\\",
    ord("\n"): "\\n",
    ord("\t"): "\\t",
    ord("\r"): "\\r",
}


def format_arg(arg: str) -> str:
    """Quote one argument; non-printable and non-ASCII bytes become \\xNN."""
    out = []
    for byte in arg.encode("utf-8"):
        if byte in _NAMED_ESCAPES:
            out.append(_NAMED_ESCAPES[byte])
        elif 0x20 <= byte < 0x7F:
            out.append(chr(byte))
        else:
            out.append(f"\\x{byte:02x}")
    return "'" + "".join(out) + "'"


class ArgvCommand:
    """The argv.py command for inspecting expanded fields."""

    name = "argv.py"

    async def execute(self, args: list[str], ctx: CommandContext) -> ExecResult:
        """Execute the argv.py command."""
        output = "[" + ", ".join(format_arg(arg) for arg in args) + "]\n"
        return ExecResult(stdout=output, stderr="", exit_code=0)
