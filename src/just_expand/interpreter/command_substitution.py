"""Command substitution: $(...) and `...`.

The body runs on a forked copy of the interpreter state, so variable
assignments and `cd` inside it never leak into the caller. Exactly the
trailing run of newlines is stripped from the captured output.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from ..ast.types import CommandSubstitutionPart
from ..parser.word import file_read_target, parse_word
from .errors import CommandSubstitutionFailure

if TYPE_CHECKING:
    from .types import InterpreterContext

logger = logging.getLogger(__name__)


def _record_status(ctx: "InterpreterContext", exit_code: int) -> None:
    ctx.state.last_exit_code = exit_code
    ctx.state.env["?"] = str(exit_code)
    ctx.state.expansion_exit_code = exit_code


async def _read_file_shorthand(ctx: "InterpreterContext", target: str) -> str:
    """$(< file): the file's contents without trailing newlines."""
    from .expansion import expand_word_string

    path = await expand_word_string(ctx, parse_word(target))
    resolved = ctx.fs.resolve_path(ctx.state.cwd, path)
    try:
        content = await ctx.fs.read_file(resolved)
    except (FileNotFoundError, IsADirectoryError) as e:
        reason = "Is a directory" if isinstance(e, IsADirectoryError) else "No such file or directory"
        ctx.state.expansion_stderr += f"bash: {path}: {reason}\n"
        _record_status(ctx, 1)
        return ""
    _record_status(ctx, 0)
    return content.rstrip("\n")


async def run_command_substitution(ctx: "InterpreterContext", part: CommandSubstitutionPart) -> str:
    """Run the substitution body and return its captured stdout."""
    target = file_read_target(part.source)
    if target is not None:
        return await _read_file_shorthand(ctx, target)

    timeout = ctx.limits.command_substitution_timeout
    logger.debug("command substitution: %r", part.source)
    try:
        if timeout is None:
            result = await ctx.run_capturing(part.body)
        else:
            result = await asyncio.wait_for(ctx.run_capturing(part.body), timeout)
    except asyncio.TimeoutError as e:
        _record_status(ctx, 124)
        raise CommandSubstitutionFailure(
            part.source,
            124,
            message=f"command substitution timed out after {timeout}s",
        ) from e

    # The body's stderr belongs to the enclosing command
    ctx.state.expansion_stderr += result.stderr
    _record_status(ctx, result.exit_code)
    stdout = result.stdout.rstrip("\n")

    if result.exit_code != 0:
        logger.debug("command substitution %r exited %d", part.source, result.exit_code)
        if ctx.state.options.strict_command_substitution:
            raise CommandSubstitutionFailure(part.source, result.exit_code, stdout=stdout)
    return stdout
