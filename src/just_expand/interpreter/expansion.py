"""Word Expansion.

Handles shell word expansion including:
- Tilde expansion (~, ~+, ~-)
- Parameter expansion ($VAR, ${VAR}, ${VAR:-default}, ${VAR/pat/repl}, ...)
- Command substitution $(...) and `...`
- Arithmetic expansion $((...))
- Field splitting on IFS
- Pathname expansion (*, ?, [...])
- Quote removal

Each word is expanded in that order. Parts are expanded left to right so
later parts see side effects of earlier ones (${x:=v}, $((i++))). The
live value of IFS is read when splitting runs.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..ast.types import (
    ArithmeticExpansionPart,
    BadSubstitutionPart,
    CommandSubstitutionPart,
    DoubleQuotedPart,
    EscapedPart,
    LiteralPart,
    ParameterExpansionPart,
    SingleQuotedPart,
    TildeExpansionPart,
    WordNode,
    WordPart,
)
from .arithmetic import evaluate_arithmetic_text
from .command_substitution import run_command_substitution
from .errors import MalformedParameterExpansion, WordExpansionError
from .glob import glob_expand, segments_have_unquoted_glob, segments_to_glob_pattern
from .parameter import expand_parameter_segments
from .splitting import ExpandedSegment, split_segments

if TYPE_CHECKING:
    from .types import InterpreterContext

logger = logging.getLogger(__name__)

# Characters that are special to the ${var/pat} matcher
_PATTERN_SPECIAL = "*?\\"


def _is_bare_at(part: WordPart) -> bool:
    """"$@" with no operation expands to nothing when there are no params."""
    return (
        isinstance(part, ParameterExpansionPart)
        and part.parameter == "@"
        and part.operation is None
    )


def _expand_tilde(ctx: "InterpreterContext", part: TildeExpansionPart) -> str:
    env = ctx.state.env
    if part.user is None:
        return env.get("HOME", "/home/user")
    elif part.user == "+":
        return env.get("PWD", ctx.state.cwd)
    elif part.user == "-":
        return env.get("OLDPWD", "~-")
    elif part.user == "root":
        return "/root"
    return f"~{part.user}"


async def _expand_part_segments(
    ctx: "InterpreterContext", part: WordPart, in_double_quotes: bool = False
) -> list[ExpandedSegment]:
    """Expand a single part into segments preserving quoting context."""
    if isinstance(part, LiteralPart):
        return [ExpandedSegment(text=part.value, quoted=in_double_quotes)]

    elif isinstance(part, (SingleQuotedPart, EscapedPart)):
        return [ExpandedSegment(text=part.value, quoted=True)]

    elif isinstance(part, DoubleQuotedPart):
        segments: list[ExpandedSegment] = []
        for p in part.parts:
            segments.extend(await _expand_part_segments(ctx, p, in_double_quotes=True))
        if not segments and not any(_is_bare_at(p) for p in part.parts):
            # "" is still one (empty) field
            return [ExpandedSegment(text="", quoted=True)]
        return segments

    elif isinstance(part, TildeExpansionPart):
        # Tilde expansion result is not subject to further splitting
        return [ExpandedSegment(text=_expand_tilde(ctx, part), quoted=True)]

    elif isinstance(part, ParameterExpansionPart):
        return await expand_parameter_segments(ctx, part, in_double_quotes)

    elif isinstance(part, ArithmeticExpansionPart):
        value = await evaluate_arithmetic_text(ctx, part.source)
        return [ExpandedSegment(text=str(value), quoted=in_double_quotes, expanded=True)]

    elif isinstance(part, CommandSubstitutionPart):
        text = await run_command_substitution(ctx, part)
        return [ExpandedSegment(text=text, quoted=in_double_quotes, expanded=True)]

    elif isinstance(part, BadSubstitutionPart):
        raise MalformedParameterExpansion(part.text, part.message)

    return []


async def expand_word_segments(
    ctx: "InterpreterContext", word: WordNode, in_double_quotes: bool = False
) -> list[ExpandedSegment]:
    """Expand a word into a list of segments preserving quoting context.

    Errors are tagged with the offset of the part that raised them.
    """
    segments: list[ExpandedSegment] = []
    for part in word.parts:
        try:
            segments.extend(await _expand_part_segments(ctx, part, in_double_quotes))
        except WordExpansionError as e:
            e.annotate(None, getattr(part, "offset", None))
            raise
    return segments


def _segments_to_string(segments: list[ExpandedSegment]) -> str:
    """Flatten segments into a single string; field breaks become spaces."""
    return "".join(" " if seg.field_break else seg.text for seg in segments)


def _escape_pattern(text: str) -> str:
    return "".join("\\" + c if c in _PATTERN_SPECIAL else c for c in text)


async def expand_part_text(ctx: "InterpreterContext", part: WordPart) -> str:
    """Expand one part as if double-quoted (used inside arithmetic)."""
    return _segments_to_string(await _expand_part_segments(ctx, part, in_double_quotes=True))


async def word_to_string(ctx: "InterpreterContext", word: WordNode) -> str:
    """Expand a word without splitting or globbing."""
    return _segments_to_string(await expand_word_segments(ctx, word))


async def word_to_pattern(ctx: "InterpreterContext", word: WordNode) -> str:
    """Expand a pattern operand, escaping quoted wildcard characters."""
    segments = await expand_word_segments(ctx, word)
    return "".join(
        _escape_pattern(seg.text) if seg.quoted else seg.text
        for seg in segments
        if not seg.field_break
    )


async def _expand_fields(ctx: "InterpreterContext", word: WordNode) -> list[str]:
    segments = await expand_word_segments(ctx, word)
    fields = split_segments(segments, ctx.state.env.get("IFS"))

    values: list[str] = []
    for field in fields:
        text = "".join(seg.text for seg in field)
        if not ctx.state.options.noglob and segments_have_unquoted_glob(field):
            matches = await glob_expand(ctx, segments_to_glob_pattern(field))
            if matches:
                values.extend(matches)
                continue
        values.append(text)
    return values


# =============================================================================
# Entry points
# =============================================================================


async def expand_word_fields(ctx: "InterpreterContext", word: WordNode) -> list[str]:
    """Run the full pipeline on a word and return its fields.

    Raises WordExpansionError (annotated with the word's text) on failure;
    no partial result is produced.
    """
    try:
        return await _expand_fields(ctx, word)
    except WordExpansionError as e:
        e.annotate(word.text, None)
        raise


async def expand_word_string(ctx: "InterpreterContext", word: WordNode) -> str:
    """Expand a word to one string: no field splitting, no globbing.

    Used for assignment values and other single-string contexts.
    """
    try:
        return await word_to_string(ctx, word)
    except WordExpansionError as e:
        e.annotate(word.text, None)
        raise


async def expand_pattern(ctx: "InterpreterContext", word: WordNode) -> str:
    """Expand a word used as a ?/* pattern; quoted text matches literally."""
    try:
        return await word_to_pattern(ctx, word)
    except WordExpansionError as e:
        e.annotate(word.text, None)
        raise


async def expand_words(
    ctx: "InterpreterContext", words
) -> tuple[list[str], list[WordExpansionError]]:
    """Expand every word of a command.

    A failing word contributes no fields; its error is collected and the
    remaining words are still expanded.
    """
    fields: list[str] = []
    errors: list[WordExpansionError] = []
    for word in words:
        try:
            fields.extend(await expand_word_fields(ctx, word))
        except WordExpansionError as e:
            logger.debug("expansion of %r failed: %s", word.text, e.message)
            errors.append(e)
    return fields, errors
