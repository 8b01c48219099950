"""Interpreter - AST Execution Engine.

Main interpreter class that executes the script AST. It is the execution
collaborator of word expansion: every simple command has its words run
through the expansion pipeline before dispatch, and command substitution
calls back into run_capturing for a nested run on a forked state.

Delegates to specialized modules for:
- Word expansion (expansion.py)
- Built-in commands (builtins/)
"""

import logging
from dataclasses import replace
from typing import Optional

from ..ast.types import (
    CommandNode,
    FunctionDefNode,
    GroupNode,
    PipelineNode,
    ScriptNode,
    SimpleCommandNode,
    StatementNode,
    SubshellNode,
    WordNode,
)
from ..types import Command, CommandContext, ExecResult, ExecutionLimits, IFileSystem
from .builtins import BUILTINS, alias_words
from .errors import (
    ErrexitError,
    ExecutionLimitError,
    ExitError,
    ReturnError,
    WordExpansionError,
)
from .expansion import expand_word_string, expand_words
from .types import InterpreterContext, InterpreterState, VariableStore

logger = logging.getLogger(__name__)


def _ok() -> ExecResult:
    """Return a successful result."""
    return ExecResult(stdout="", stderr="", exit_code=0)


def _result(stdout: str, stderr: str, exit_code: int) -> ExecResult:
    """Create an ExecResult."""
    return ExecResult(stdout=stdout, stderr=stderr, exit_code=exit_code)


def _is_plain_word(word: WordNode) -> bool:
    return len(word.parts) == 1 and word.parts[0].type == "Literal"


class Interpreter:
    """AST interpreter for scripts."""

    def __init__(
        self,
        fs: IFileSystem,
        commands: dict[str, Command],
        limits: ExecutionLimits,
        state: Optional[InterpreterState] = None,
    ):
        """Initialize the interpreter.

        Args:
            fs: Filesystem interface
            commands: Command registry
            limits: Execution limits
            state: Optional initial state (creates default if not provided)
        """
        self._fs = fs
        self._commands = commands
        self._limits = limits
        self._state = state or InterpreterState(
            env=VariableStore({
                "HOME": "/home/user",
                "PWD": "/home/user",
                "?": "0",
            }),
            cwd="/home/user",
        )

        # Build the context
        self._ctx = InterpreterContext(
            state=self._state,
            fs=fs,
            commands=commands,
            limits=limits,
            run_capturing=self._run_capturing,
        )

    @property
    def state(self) -> InterpreterState:
        """Get the interpreter state."""
        return self._state

    @property
    def ctx(self) -> InterpreterContext:
        """Get the context handed to expansion and builtins."""
        return self._ctx

    def _fork(self, state: InterpreterState) -> "Interpreter":
        return Interpreter(
            fs=self._fs,
            commands=self._commands,
            limits=self._limits,
            state=state,
        )

    async def _run_capturing(self, body: ScriptNode) -> ExecResult:
        """Run a command substitution body on a copy of the state.

        Assignments, `cd` and function definitions inside the body are
        discarded with the copy.
        """
        if self._state.call_depth >= self._limits.max_call_depth:
            raise ExecutionLimitError(
                f"command substitution nesting exceeded ({self._limits.max_call_depth})",
                "call_depth",
            )
        state = self._state.fork()
        state.call_depth += 1
        sub_interpreter = self._fork(state)
        try:
            return await sub_interpreter.execute_script(body)
        except (ExitError, ErrexitError, ReturnError) as e:
            return _result(e.stdout, e.stderr, e.exit_code)
        finally:
            self._state.command_count = max(self._state.command_count, state.command_count)

    async def execute_script(self, node: ScriptNode) -> ExecResult:
        """Execute a script AST node."""
        stdout = ""
        stderr = ""
        exit_code = 0

        for statement in node.statements:
            try:
                result = await self.execute_statement(statement)
                stdout += result.stdout
                stderr += result.stderr
                exit_code = result.exit_code
                self._set_status(exit_code)
            except ExitError as error:
                # ExitError always propagates up to terminate the script
                error.prepend_output(stdout, stderr)
                raise
            except ExecutionLimitError:
                raise
            except ErrexitError as error:
                stdout += error.stdout
                stderr += error.stderr
                exit_code = error.exit_code
                self._set_status(exit_code)
                return ExecResult(
                    stdout=stdout,
                    stderr=stderr,
                    exit_code=exit_code,
                    env=dict(self._state.env),
                )
            except ReturnError as error:
                if not self._state.local_scopes:
                    # At top level - warn and use return's exit code
                    stdout += error.stdout
                    stderr += error.stderr + "bash: return: can only `return' from a function or sourced script\n"
                    exit_code = error.exit_code if error.exit_code != 0 else 1
                    self._set_status(exit_code)
                    continue
                error.prepend_output(stdout, stderr)
                raise

        return ExecResult(
            stdout=stdout,
            stderr=stderr,
            exit_code=exit_code,
            env=dict(self._state.env),
        )

    def _set_status(self, exit_code: int) -> None:
        self._state.last_exit_code = exit_code
        self._state.env["?"] = str(exit_code)

    async def execute_statement(self, node: StatementNode) -> ExecResult:
        """Execute a statement AST node."""
        self._state.command_count += 1
        if self._state.command_count > self._limits.max_command_count:
            raise ExecutionLimitError(
                f"too many commands executed (>{self._limits.max_command_count}), "
                "increase execution_limits.max_command_count",
                "commands",
            )

        if node.background:
            return await self._execute_background(node)

        stdout = ""
        stderr = ""
        exit_code = 0
        last_executed_index = -1
        last_pipeline_negated = False

        for i, pipeline in enumerate(node.pipelines):
            operator = node.operators[i - 1] if i > 0 else None

            if operator == "&&" and exit_code != 0:
                continue
            if operator == "||" and exit_code == 0:
                continue

            result = await self.execute_pipeline(pipeline)
            stdout += result.stdout
            stderr += result.stderr
            exit_code = result.exit_code
            last_executed_index = i
            last_pipeline_negated = pipeline.negated

            # Update $? after each pipeline
            self._set_status(exit_code)

        # A failure short-circuited out of an AND-OR list does not trigger errexit
        short_circuited = exit_code != 0 and last_executed_index < len(node.pipelines) - 1

        if (
            self._state.options.errexit
            and exit_code != 0
            and not short_circuited
            and not last_pipeline_negated
        ):
            raise ErrexitError(exit_code, stdout, stderr)

        return _result(stdout, stderr, exit_code)

    async def _execute_background(self, node: StatementNode) -> ExecResult:
        """Run `list &` to completion on its own snapshot of the state.

        The job sees the variables as they were when it started; nothing it
        assigns is visible to the parent. Its output is kept in order.
        """
        state = self._state.fork()
        sub_interpreter = self._fork(state)
        try:
            result = await sub_interpreter.execute_statement(replace(node, background=False))
        except (ExitError, ErrexitError, ReturnError) as e:
            result = _result(e.stdout, e.stderr, e.exit_code)
        finally:
            self._state.command_count = max(self._state.command_count, state.command_count)

        pid = max(self._state.last_background_pid, int(self._state.env.get("$", "1") or 1)) + 1
        self._state.last_background_pid = pid
        logger.debug("background job %d exited %d", pid, result.exit_code)
        return _result(result.stdout, result.stderr, 0)

    async def execute_pipeline(self, node: PipelineNode) -> ExecResult:
        """Execute a pipeline AST node."""
        stdin = ""
        last_result = _ok()

        for i, command in enumerate(node.commands):
            is_last = i == len(node.commands) - 1

            try:
                result = await self.execute_command(command, stdin)
            except ExitError as error:
                # In a multi-command pipeline, each command runs in subshell context
                if len(node.commands) > 1:
                    result = _result(error.stdout, error.stderr, error.exit_code)
                else:
                    raise

            if not is_last:
                stdin = result.stdout
                last_result = _result("", result.stderr, result.exit_code)
            else:
                last_result = _result(
                    result.stdout, last_result.stderr + result.stderr, result.exit_code
                )

        if node.negated:
            last_result = _result(
                last_result.stdout,
                last_result.stderr,
                1 if last_result.exit_code == 0 else 0,
            )

        return last_result

    async def execute_command(self, node: CommandNode, stdin: str) -> ExecResult:
        """Execute a command AST node."""
        if isinstance(node, SimpleCommandNode):
            return await self._execute_simple_command(node, stdin)
        elif isinstance(node, SubshellNode):
            return await self._execute_subshell(node)
        elif isinstance(node, GroupNode):
            return await self._execute_group(node)
        elif isinstance(node, FunctionDefNode):
            return await self._execute_function_def(node)
        return _ok()

    async def _execute_subshell(self, node: SubshellNode) -> ExecResult:
        """Execute a subshell command on a copy of the state."""
        state = self._state.fork()
        sub_interpreter = self._fork(state)
        try:
            result = await sub_interpreter.execute_script(node.body)
        except (ExitError, ErrexitError) as e:
            # exit inside a subshell only exits the subshell
            result = _result(e.stdout, e.stderr, e.exit_code)
        finally:
            self._state.command_count = max(self._state.command_count, state.command_count)
        return _result(result.stdout, result.stderr, result.exit_code)

    async def _execute_group(self, node: GroupNode) -> ExecResult:
        """Execute a command group { ... } in the current shell context."""
        stdout = ""
        stderr = ""
        exit_code = 0

        try:
            for stmt in node.body.statements:
                result = await self.execute_statement(stmt)
                stdout += result.stdout
                stderr += result.stderr
                exit_code = result.exit_code
        except (ReturnError, ErrexitError, ExitError) as error:
            # Prepend accumulated output before propagating control flow
            error.prepend_output(stdout, stderr)
            raise

        return _result(stdout, stderr, exit_code)

    async def _execute_function_def(self, node: FunctionDefNode) -> ExecResult:
        """Execute a function definition."""
        self._state.functions[node.name] = node
        return _ok()

    async def _execute_simple_command(
        self, node: SimpleCommandNode, stdin: str
    ) -> ExecResult:
        """Execute a simple command.

        The command name and arguments are expanded first, then prefix
        assignments left to right. Each word that fails to expand is
        reported on stderr and the command is not run.
        """
        # Clear expansion state
        self._state.expansion_stderr = ""
        self._state.expansion_exit_code = None

        words = (self._expand_alias(node.name) if node.name is not None else []) + list(node.args)
        fields, errors = await expand_words(self._ctx, words)

        # Temporary assignments for command environment
        temp_assignments: dict[str, Optional[str]] = {}
        assigned: dict[str, str] = {}

        for assignment in node.assignments:
            name = assignment.name
            try:
                value = ""
                if assignment.value is not None:
                    value = await expand_word_string(self._ctx, assignment.value)
            except WordExpansionError as e:
                errors.append(e)
                continue
            if assignment.append:
                value = self._state.env.get(name, "") + value
            if fields and name not in temp_assignments:
                temp_assignments[name] = self._state.env.get(name)
            self._state.env.set(name, value)
            assigned[name] = value

        stderr = self._state.expansion_stderr
        self._state.expansion_stderr = ""

        if errors:
            self._restore(temp_assignments)
            stderr += "".join(e.diagnostic() for e in errors)
            return _result("", stderr, 1)

        if not fields:
            # Assignment-only (or empty) command: the status is that of the
            # last command substitution, if any
            exit_code = self._state.expansion_exit_code or 0
            return _result("", stderr, exit_code)

        cmd_name, args = fields[0], fields[1:]
        try:
            result = await self._dispatch(cmd_name, args, stdin, assigned)
        except (ReturnError, ErrexitError, ExitError) as error:
            error.prepend_output("", stderr)
            raise
        finally:
            self._restore(temp_assignments)

        if stderr:
            result = _result(result.stdout, stderr + result.stderr, result.exit_code)
        return result

    def _expand_alias(self, name: WordNode) -> list[WordNode]:
        """Replace an unquoted command word that names an alias with the
        words of its value. The first word of the value is looked up again,
        but an alias is never expanded inside its own expansion."""
        words = [name]
        seen: set[str] = set()
        while words and _is_plain_word(words[0]):
            text = words[0].text
            if text in seen or text not in self._state.aliases:
                break
            seen.add(text)
            words = alias_words(self._state.aliases[text]) + words[1:]
        return words

    def _restore(self, saved: dict[str, Optional[str]]) -> None:
        for name, old_value in saved.items():
            if old_value is None:
                self._state.env.pop(name, None)
            else:
                self._state.env[name] = old_value

    async def _dispatch(
        self, cmd_name: str, args: list[str], stdin: str, assigned: dict[str, str]
    ) -> ExecResult:
        # Functions override builtins
        if cmd_name in self._state.functions:
            return await self._call_function(cmd_name, args, stdin)

        if cmd_name in BUILTINS:
            return await BUILTINS[cmd_name](self._ctx, args)

        if cmd_name in self._commands:
            cmd = self._commands[cmd_name]
            ctx = CommandContext(
                fs=self._fs,
                cwd=self._state.cwd,
                env=self._state.env.to_env_dict(),
                stdin=stdin,
                exported=dict(assigned),
            )
            return await cmd.execute(args, ctx)

        return _result("", f"bash: {cmd_name}: command not found\n", 127)

    async def _call_function(self, name: str, args: list[str], stdin: str) -> ExecResult:
        """Call a user-defined function."""
        func_def = self._state.functions[name]

        # Check call depth
        self._state.call_depth += 1
        if self._state.call_depth > self._limits.max_call_depth:
            self._state.call_depth -= 1
            raise ExecutionLimitError(
                f"function call depth exceeded ({self._limits.max_call_depth})",
                "call_depth",
            )

        env = self._state.env
        saved_params = env.positional_params()
        env.set_positional_params(args)

        # Create local scope
        self._state.local_scopes.append({})

        try:
            try:
                return await self.execute_command(func_def.body, stdin)
            except ReturnError as e:
                return _result(e.stdout, e.stderr, e.exit_code)
        finally:
            # Pop local scope and restore saved variables
            scope = self._state.local_scopes.pop()
            for var_name, original_value in scope.items():
                if original_value is None:
                    env.pop(var_name, None)
                else:
                    env[var_name] = original_value

            env.set_positional_params(saved_params)
            self._state.call_depth -= 1
