"""Interpreter types for just-expand."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Awaitable, Callable, Optional

if TYPE_CHECKING:
    from ..ast.types import FunctionDefNode, ScriptNode
    from ..types import Command, ExecResult, ExecutionLimits, IFileSystem


# Special parameters the interpreter maintains itself; never exported or
# listed by `set`.
SPECIAL_PARAMETERS = frozenset({"?", "#", "$", "!", "-", "*", "@", "0"})


class VariableStore(dict):
    """Dict subclass holding shell variables.

    Inherits from dict so the environment can be handed to commands as a
    plain mapping. Positional parameters are stored under the keys "1",
    "2", ... with their count under "#", the same way bash exposes them.
    """

    def set(self, name: str, value: str) -> None:
        """Assign a variable."""
        self[name] = value

    def positional_params(self) -> list[str]:
        """Return $1..$N as a list."""
        count = int(self.get("#", "0") or 0)
        return [self.get(str(i), "") for i in range(1, count + 1)]

    def set_positional_params(self, params: list[str]) -> None:
        """Replace $1..$N and update $#."""
        i = 1
        while str(i) in self:
            del self[str(i)]
            i += 1
        for i, param in enumerate(params, start=1):
            self[str(i)] = param
        self["#"] = str(len(params))

    def copy(self) -> VariableStore:
        """Create an independent copy."""
        return VariableStore(super().copy())

    def to_env_dict(self) -> dict[str, str]:
        """Return a plain dict copy (for CommandContext, ExecResult)."""
        return dict(self)


@dataclass
class ShellOptions:
    """Shell options (set -e, etc.)."""

    errexit: bool = False
    """set -e: Exit immediately if a command exits with non-zero status."""

    nounset: bool = False
    """set -u: Treat unset variables as an error when substituting."""

    noglob: bool = False
    """set -f: Disable pathname expansion."""

    strict_command_substitution: bool = False
    """Treat a non-zero command substitution status as an expansion error."""

    def flags(self) -> str:
        """Return the option letters for $-."""
        letters = ""
        if self.errexit:
            letters += "e"
        if self.noglob:
            letters += "f"
        if self.nounset:
            letters += "u"
        return letters


@dataclass
class InterpreterState:
    """Mutable state maintained by the interpreter."""

    env: VariableStore = field(default_factory=VariableStore)
    """Shell variables and positional parameters."""

    cwd: str = "/home/user"
    """Current working directory."""

    functions: dict[str, "FunctionDefNode"] = field(default_factory=dict)
    """Defined functions."""

    aliases: dict[str, str] = field(default_factory=dict)
    """Alias name to its unparsed value."""

    local_scopes: list[dict[str, Optional[str]]] = field(default_factory=list)
    """Stack of saved values for `local` variables, one per function call."""

    call_depth: int = 0
    """Current function call / command substitution nesting depth."""

    command_count: int = 0
    """Total statements executed (for limits)."""

    last_exit_code: int = 0
    """Exit code of last command."""

    last_background_pid: int = 0
    """Pseudo PID of the last background statement (for $!)."""

    options: ShellOptions = field(default_factory=ShellOptions)
    """Shell options."""

    expansion_stderr: str = ""
    """Stderr produced by command substitutions while expanding a command."""

    expansion_exit_code: Optional[int] = None
    """Exit code of the last command substitution run during expansion."""

    def fork(self) -> InterpreterState:
        """Snapshot the state for a subshell, command substitution or
        background statement. Nothing mutable is shared with the parent."""
        return InterpreterState(
            env=self.env.copy(),
            cwd=self.cwd,
            functions=dict(self.functions),
            aliases=dict(self.aliases),
            local_scopes=[dict(scope) for scope in self.local_scopes],
            call_depth=self.call_depth,
            command_count=self.command_count,
            last_exit_code=self.last_exit_code,
            last_background_pid=self.last_background_pid,
            options=replace(self.options),
        )


@dataclass
class InterpreterContext:
    """Context provided to interpreter methods."""

    state: InterpreterState
    """Mutable interpreter state."""

    fs: "IFileSystem"
    """Filesystem interface."""

    commands: dict[str, "Command"]
    """Command registry."""

    limits: "ExecutionLimits"
    """Execution limits."""

    run_capturing: Callable[["ScriptNode"], Awaitable["ExecResult"]]
    """Run a script on a forked state and return its captured output."""
