"""Main Shell class - the primary API for just-expand.

Example usage:
    from just_expand import Shell

    # Synchronous usage (for REPL, scripts)
    shell = Shell()
    result = shell.run('b=2; echo $((b+1))')
    print(result.stdout)  # "3\\n"

    # Async usage (for async applications)
    shell = Shell()
    result = await shell.exec('v=abcde; echo ${v/b?/BC}')
    print(result.stdout)  # "aBCde\\n"

    # Expanding a single word against the shell's state
    shell = Shell(files={"/home/user/a.txt": ""}, env={"IFS": ","})
    fields = await shell.expand('x$IFS"*.txt"')

    # With execution limits
    shell = Shell(limits=ExecutionLimits(command_substitution_timeout=5))
"""

import asyncio
import logging
from typing import Optional

import nest_asyncio  # type: ignore[import-untyped]

from .commands import create_command_registry
from .fs import InMemoryFs
from .interpreter import (
    ExecutionLimitError,
    ExitError,
    Interpreter,
    InterpreterState,
    ShellOptions,
    VariableStore,
    expand_word_fields,
)
from .parser import parse, parse_word
from .parser.parser import ParseException
from .parser.word import WordParseError
from .types import (
    Command,
    ExecResult,
    ExecutionLimits,
    IFileSystem,
)

logger = logging.getLogger(__name__)


class Shell:
    """Main shell class.

    Runs scripts against an in-memory virtual filesystem. Every simple
    command's words go through the full word expansion pipeline before
    the command runs.
    """

    def __init__(
        self,
        *,
        fs: Optional[IFileSystem] = None,
        files: Optional[dict[str, str | bytes]] = None,
        cwd: str = "/home/user",
        env: Optional[dict[str, str]] = None,
        args: Optional[list[str]] = None,
        limits: Optional[ExecutionLimits] = None,
        commands: Optional[dict[str, Command]] = None,
        errexit: bool = False,
        nounset: bool = False,
        noglob: bool = False,
        strict_command_substitution: bool = False,
    ):
        """Initialize the shell.

        Args:
            fs: Filesystem to use. If not provided, creates an InMemoryFs.
            files: Initial files to create (requires default InMemoryFs).
            cwd: Initial working directory.
            env: Additional variables.
            args: Initial positional parameters ($1, $2, ...).
            limits: Execution limits.
            commands: Custom command registry. If not provided, uses built-in commands.
            errexit: Enable errexit (set -e) mode.
            nounset: Enable nounset (set -u) mode.
            noglob: Disable pathname expansion (set -f).
            strict_command_substitution: Make a failing $(...) an expansion error.
        """
        # Set up filesystem
        if fs is not None:
            self._fs = fs
        else:
            self._fs = InMemoryFs(initial_files=files or {})

        self._limits = limits or ExecutionLimits()
        self._commands = commands or create_command_registry()

        default_env = VariableStore({
            "HOME": "/home/user",
            "USER": "user",
            "SHELL": "/bin/bash",
            "PWD": cwd,
            "?": "0",
        })
        if env:
            default_env.update(env)
        default_env.set_positional_params(list(args or []))

        self._initial_state = InterpreterState(
            env=default_env,
            cwd=cwd,
            options=ShellOptions(
                errexit=errexit,
                nounset=nounset,
                noglob=noglob,
                strict_command_substitution=strict_command_substitution,
            ),
        )
        self._interpreter = self._new_interpreter()

    def _new_interpreter(self) -> Interpreter:
        return Interpreter(
            fs=self._fs,
            commands=self._commands,
            limits=self._limits,
            state=self._initial_state.fork(),
        )

    @property
    def fs(self) -> IFileSystem:
        """Get the filesystem."""
        return self._fs

    @property
    def cwd(self) -> str:
        """Get the current working directory."""
        return self._interpreter.state.cwd

    @property
    def env(self) -> dict[str, str]:
        """Get the shell variables."""
        return self._interpreter.state.env

    @property
    def options(self) -> ShellOptions:
        """Get the live shell options."""
        return self._interpreter.state.options

    async def exec(
        self,
        script: str,
        *,
        env: Optional[dict[str, str]] = None,
        cwd: Optional[str] = None,
    ) -> ExecResult:
        """Execute a script.

        Args:
            script: The script to execute.
            env: Additional variables for this execution.
            cwd: Working directory for this execution.

        Returns:
            ExecResult with stdout, stderr, exit_code, and final env.
        """
        try:
            ast = parse(script)
        except ParseException as e:
            return ExecResult(
                stdout="",
                stderr=f"bash: {e}\n",
                exit_code=2,
                env=dict(self._interpreter.state.env),
            )

        state = self._interpreter.state
        if env:
            state.env.update(env)
        if cwd:
            state.cwd = cwd
            state.env["PWD"] = cwd

        # Limits are per script run
        state.command_count = 0

        try:
            return await self._interpreter.execute_script(ast)
        except ExitError as error:
            return ExecResult(
                stdout=error.stdout,
                stderr=error.stderr,
                exit_code=error.exit_code,
                env=dict(state.env),
            )
        except ExecutionLimitError as error:
            logger.debug("execution limit hit: %s", error.limit_type)
            return ExecResult(
                stdout=error.stdout,
                stderr=error.stderr + f"bash: {error}\n",
                exit_code=126,
                env=dict(state.env),
            )

    def run(
        self,
        script: str,
        *,
        env: Optional[dict[str, str]] = None,
        cwd: Optional[str] = None,
    ) -> ExecResult:
        """Execute a script synchronously.

        This is a convenience wrapper around exec() that works in any context,
        including Jupyter notebooks and async frameworks.

        Example:
            >>> shell = Shell()
            >>> result = shell.run('echo "Hello, World!"')
            >>> print(result.stdout)
            Hello, World!
        """
        try:
            asyncio.get_running_loop()
            # We're in an existing event loop (Jupyter, async framework, etc.)
            # Apply nest_asyncio to allow nested event loops
            nest_asyncio.apply()
        except RuntimeError:
            # No running event loop, asyncio.run() will work fine
            pass
        return asyncio.run(self.exec(script, env=env, cwd=cwd))

    async def expand(self, word: str) -> list[str]:
        """Expand one word against the shell's current state.

        Runs the whole pipeline (tilde, parameter, command and arithmetic
        expansion, field splitting, pathname expansion, quote removal)
        and returns the resulting fields. Side effects such as ${x:=v}
        persist in the shell.

        Raises:
            WordExpansionError: the word could not be expanded.
            ValueError: the word has an unterminated quote or substitution.
        """
        try:
            node = parse_word(word)
        except (WordParseError, ParseException) as e:
            raise ValueError(str(e)) from e
        self._interpreter.state.expansion_stderr = ""
        return await expand_word_fields(self._interpreter.ctx, node)

    def reset(self) -> None:
        """Reset the interpreter state to initial values."""
        self._interpreter = self._new_interpreter()
