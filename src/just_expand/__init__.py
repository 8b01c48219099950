"""just-expand - POSIX shell word expansion in Python.

Parses and executes small shell scripts against an in-memory filesystem,
with the full word expansion pipeline: tilde, parameter, command and
arithmetic expansion, IFS field splitting, pathname expansion and quote
removal.
"""

from .fs import InMemoryFs
from .interpreter import (
    ArithmeticDivideByZero,
    ArithmeticSyntaxError,
    CommandSubstitutionFailure,
    MalformedParameterExpansion,
    ShellOptions,
    UnsetVariableError,
    WordExpansionError,
)
from .shell import Shell
from .types import CommandContext, ExecResult, ExecutionLimits, IFileSystem

__version__ = "0.1.0"

__all__ = [
    "Shell",
    "ShellOptions",
    "ExecResult",
    "ExecutionLimits",
    "CommandContext",
    "IFileSystem",
    "InMemoryFs",
    "WordExpansionError",
    "ArithmeticSyntaxError",
    "ArithmeticDivideByZero",
    "UnsetVariableError",
    "MalformedParameterExpansion",
    "CommandSubstitutionFailure",
]
