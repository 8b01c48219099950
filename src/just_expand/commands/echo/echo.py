"""Echo command implementation.

Usage: echo [-neE] [arg ...]

Write the arguments separated by single spaces, followed by a newline.

Options:
  -n    Do not output the trailing newline
  -e    Interpret backslash escapes
  -E    Do not interpret backslash escapes (default)
"""

from ...types import CommandContext, ExecResult

_ESCAPES = {
    "\\": "\\",
    "a": "\a",
    "b": "\b",
    "e": "\x1b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
}


def _interpret_escapes(text: str) -> tuple[str, bool]:
    """Process backslash escapes. Returns (text, stop) where stop is set by \\c."""
    out = []
    i = 0
    while i < len(text):
        c = text[i]
        if c == "\\" and i + 1 < len(text):
            nxt = text[i + 1]
            if nxt == "c":
                return "".join(out), True
            if nxt in _ESCAPES:
                out.append(_ESCAPES[nxt])
                i += 2
                continue
        out.append(c)
        i += 1
    return "".join(out), False


class EchoCommand:
    """The echo command."""

    name = "echo"

    async def execute(self, args: list[str], ctx: CommandContext) -> ExecResult:
        """Execute the echo command."""
        newline = True
        escapes = False

        # Leading option words made only of n, e, E
        while args and len(args[0]) > 1 and args[0][0] == "-" and set(args[0][1:]) <= set("neE"):
            for c in args[0][1:]:
                if c == "n":
                    newline = False
                elif c == "e":
                    escapes = True
                else:
                    escapes = False
            args = args[1:]

        output = " ".join(args)
        if escapes:
            output, stop = _interpret_escapes(output)
            if stop:
                newline = False
        if newline:
            output += "\n"
        return ExecResult(stdout=output, stderr="", exit_code=0)
