"""Parameter expansion: $name, ${name} and ${name<op>word}."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from ..ast.types import ParameterExpansionPart
from .errors import UnsetVariableError
from .pattern import (
    remove_prefix,
    remove_suffix,
    replace_all,
    replace_first,
    replace_prefix,
    replace_suffix,
)
from .splitting import ExpandedSegment

if TYPE_CHECKING:
    from .types import InterpreterContext

# Parameters that are always set
_ALWAYS_SET = frozenset({"?", "#", "$", "!", "-", "0", "@", "*"})


def _join_star(ctx: "InterpreterContext", params: list[str]) -> str:
    """Join positional parameters the way "$*" does."""
    ifs = ctx.state.env.get("IFS")
    if ifs is None:
        sep = " "
    else:
        sep = ifs[0] if ifs else ""
    return sep.join(params)


def get_variable(ctx: "InterpreterContext", name: str, check_nounset: bool = True) -> str:
    """Get a variable value from the environment.

    Handles special parameters like $?, $#, $@, $*, $0-$9, etc. An unset
    variable is "" unless nounset is on and check_nounset is true.
    """
    env = ctx.state.env

    # Special parameters
    if name == "?":
        return str(ctx.state.last_exit_code)
    elif name == "#":
        return str(len(env.positional_params()))
    elif name == "@":
        return " ".join(env.positional_params())
    elif name == "*":
        return _join_star(ctx, env.positional_params())
    elif name == "0":
        return env.get("0", "bash")
    elif name == "$":
        return env.get("$", "1")
    elif name == "!":
        return str(ctx.state.last_background_pid) if ctx.state.last_background_pid else ""
    elif name == "-":
        return ctx.state.options.flags()

    value = env.get(name)
    if value is None:
        if check_nounset and ctx.state.options.nounset:
            raise UnsetVariableError(name)
        return ""
    return value


def is_set(ctx: "InterpreterContext", name: str) -> bool:
    """True if the parameter is set (possibly to the empty string)."""
    if name in _ALWAYS_SET:
        return True
    return name in ctx.state.env


def _positional_segments(
    params: list[str], in_double_quotes: bool
) -> list[ExpandedSegment]:
    """One segment per parameter with forced field breaks between them."""
    segments: list[ExpandedSegment] = []
    for i, param in enumerate(params):
        if i:
            segments.append(ExpandedSegment("", quoted=False, field_break=True))
        segments.append(ExpandedSegment(param, quoted=in_double_quotes, expanded=True))
    return segments


def _value_segment(value: str, in_double_quotes: bool) -> list[ExpandedSegment]:
    return [ExpandedSegment(value, quoted=in_double_quotes, expanded=True)]


async def _operand_segments(
    ctx: "InterpreterContext", word, in_double_quotes: bool
) -> list[ExpandedSegment]:
    """Expand the word of ${x:-word} / ${x:+word} / ${x:=word}.

    Unquoted operand text is subject to splitting like any other
    expansion result; inside double quotes the whole result is quoted.
    """
    from .expansion import expand_word_segments

    if word is None or not word.parts:
        return [ExpandedSegment("", quoted=True)] if in_double_quotes else []
    segments = await expand_word_segments(ctx, word)
    if in_double_quotes:
        text = "".join(seg.text for seg in segments if not seg.field_break)
        return [ExpandedSegment(text, quoted=True, expanded=True)]
    return [
        ExpandedSegment(seg.text, seg.quoted, expanded=True, field_break=seg.field_break)
        for seg in segments
    ]


async def _transform(ctx: "InterpreterContext", operation, value: str) -> str:
    """Apply a pattern removal or replacement to one value."""
    from .expansion import word_to_pattern, word_to_string

    if operation.type == "PatternRemoval":
        pattern = await word_to_pattern(ctx, operation.pattern)
        if operation.side == "prefix":
            return remove_prefix(value, pattern, operation.greedy)
        return remove_suffix(value, pattern, operation.greedy)

    pattern = await word_to_pattern(ctx, operation.pattern)
    replacement = ""
    if operation.replacement is not None:
        replacement = await word_to_string(ctx, operation.replacement)
    if operation.anchor == "start":
        return replace_prefix(value, pattern, replacement)
    if operation.anchor == "end":
        return replace_suffix(value, pattern, replacement)
    if operation.replace_all:
        return replace_all(value, pattern, replacement)
    return replace_first(value, pattern, replacement)


async def expand_parameter_segments(
    ctx: "InterpreterContext", part: ParameterExpansionPart, in_double_quotes: bool = False
) -> list[ExpandedSegment]:
    """Expand a parameter expansion into segments preserving quoting context.

    $@ and $* become one segment per positional parameter separated by
    field breaks, except "$*" which is joined into one quoted segment.
    """
    from .expansion import word_to_string

    parameter = part.parameter
    operation = part.operation
    positional = parameter in ("@", "*")

    def render(values: list[str]) -> list[ExpandedSegment]:
        if parameter == "*" and in_double_quotes:
            return _value_segment(_join_star(ctx, values), True)
        return _positional_segments(values, in_double_quotes)

    if operation is None:
        if positional:
            return render(ctx.state.env.positional_params())
        return _value_segment(get_variable(ctx, parameter), in_double_quotes)

    op_type = operation.type

    if op_type == "Length":
        if positional:
            return _value_segment(str(len(ctx.state.env.positional_params())), in_double_quotes)
        return _value_segment(str(len(get_variable(ctx, parameter))), in_double_quotes)

    if op_type in ("PatternRemoval", "PatternReplacement"):
        if positional:
            values = [await _transform(ctx, operation, v) for v in ctx.state.env.positional_params()]
            return render(values)
        value = get_variable(ctx, parameter)
        return _value_segment(await _transform(ctx, operation, value), in_double_quotes)

    # DefaultValue, AssignDefault, UseAlternative, ErrorIfUnset handle
    # unset variables themselves, so nounset does not apply
    value = get_variable(ctx, parameter, check_nounset=False)
    if positional:
        unset = not ctx.state.env.positional_params()
    else:
        unset = not is_set(ctx, parameter)
    missing = unset or (operation.check_empty and value == "")

    def current() -> list[ExpandedSegment]:
        if positional:
            return render(ctx.state.env.positional_params())
        return _value_segment(value, in_double_quotes)

    if op_type == "DefaultValue":
        if missing:
            return await _operand_segments(ctx, operation.word, in_double_quotes)
        return current()

    elif op_type == "AssignDefault":
        if missing:
            if positional or not _is_assignable(parameter):
                raise UnsetVariableError(parameter, "cannot assign in this way")
            default = ""
            if operation.word is not None:
                default = await word_to_string(ctx, operation.word)
            ctx.state.env.set(parameter, default)
            return _value_segment(default, in_double_quotes)
        return current()

    elif op_type == "UseAlternative":
        if missing:
            return [ExpandedSegment("", quoted=True)] if in_double_quotes else []
        return await _operand_segments(ctx, operation.word, in_double_quotes)

    elif op_type == "ErrorIfUnset":
        if missing:
            message: Optional[str] = None
            if operation.word is not None and operation.word.parts:
                message = await word_to_string(ctx, operation.word)
            raise UnsetVariableError(parameter, message or "parameter null or not set")
        return current()

    return current()


def _is_assignable(name: str) -> bool:
    return name[:1].isalpha() or name[:1] == "_"
