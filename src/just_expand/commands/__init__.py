"""Command implementations for just-expand.

Commands only see a CommandContext: the filesystem, the working
directory, a copy of the variables and stdin. Anything that must change
interpreter state is a builtin instead.
"""

from ..types import Command
from .argv.argv import ArgvCommand
from .cat.cat import CatCommand
from .echo.echo import EchoCommand
from .env.env import PrintenvCommand
from .ls.ls import LsCommand
from .pwd.pwd import PwdCommand

COMMAND_CLASSES = (
    ArgvCommand,
    CatCommand,
    EchoCommand,
    LsCommand,
    PrintenvCommand,
    PwdCommand,
)


def create_command_registry() -> dict[str, Command]:
    """Create a fresh registry of the built-in commands, keyed by name."""
    return {cls.name: cls() for cls in COMMAND_CLASSES}


__all__ = [
    "ArgvCommand",
    "CatCommand",
    "EchoCommand",
    "LsCommand",
    "PrintenvCommand",
    "PwdCommand",
    "create_command_registry",
]
