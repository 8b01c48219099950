"""Core types shared by the shell, the interpreter and commands."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Protocol, runtime_checkable


@dataclass
class ExecResult:
    """Result of executing a script, statement or command."""

    stdout: str
    stderr: str
    exit_code: int
    env: Optional[dict[str, str]] = None
    """Final environment (only populated for whole-script results)."""


@dataclass
class ExecutionLimits:
    """Execution limits guarding against runaway scripts."""

    max_command_count: int = 10000
    """Maximum number of statements executed in one script run."""

    max_call_depth: int = 100
    """Maximum nesting of function calls and command substitutions."""

    max_arithmetic_depth: int = 32
    """Maximum recursion when a variable's value is itself an expression."""

    command_substitution_timeout: Optional[float] = None
    """Seconds to wait for a command substitution; None waits forever."""


@runtime_checkable
class IFileSystem(Protocol):
    """Filesystem interface used by commands and pathname expansion."""

    def resolve_path(self, base: str, path: str) -> str: ...

    async def read_file(self, path: str) -> str: ...

    async def write_file(self, path: str, content: str) -> None: ...

    async def exists(self, path: str) -> bool: ...

    async def is_directory(self, path: str) -> bool: ...

    async def readdir(self, path: str) -> list[str]: ...

    async def mkdir(self, path: str, recursive: bool = False) -> None: ...


@dataclass
class CommandContext:
    """Context handed to a command's execute method."""

    fs: IFileSystem
    cwd: str
    env: dict[str, str]
    stdin: str = ""
    exported: dict[str, str] = field(default_factory=dict)
    """Prefix assignments (`NAME=value cmd`) visible only to this command."""


class Command(Protocol):
    """A command that can be run by the interpreter."""

    name: str

    async def execute(self, args: list[str], ctx: CommandContext) -> ExecResult: ...
