"""Word parser.

Turns the raw text of a word token into a WordNode: an ordered tuple of
literal, quoted and expansion parts. Directive parts record their
offset within the outermost word so expansion errors can point at them.
"""

import re
from typing import Optional

from ..ast.types import (
    ArithmeticExpansionPart,
    AssignDefaultOp,
    BadSubstitutionPart,
    CommandSubstitutionPart,
    DefaultValueOp,
    DoubleQuotedPart,
    ErrorIfUnsetOp,
    EscapedPart,
    LengthOp,
    LiteralPart,
    ParameterExpansionPart,
    PatternRemovalOp,
    PatternReplacementOp,
    ScriptNode,
    SingleQuotedPart,
    TildeExpansionPart,
    UseAlternativeOp,
    WordNode,
    WordPart,
)
from .lexer import (
    find_matching_brace,
    find_matching_paren,
    is_valid_name,
    skip_backtick,
    skip_double_quoted,
    skip_single_quoted,
)

_NAME_AT_RE = re.compile(r"[a-zA-Z_][a-zA-Z0-9_]*")
_BRACED_NAME_RE = re.compile(r"[a-zA-Z_][a-zA-Z0-9_]*|[0-9]+|[@*#?$!\-]")
_SPECIAL_PARAMS = "@*#?$!-0123456789"

# Longest operators first so "##" wins over "#".
_OPERATORS = (
    ":-", ":=", ":+", ":?",
    "-", "=", "+", "?",
    "##", "#", "%%", "%",
    "//", "/#", "/%", "/",
)

# Characters a backslash escapes inside double quotes.
_DQ_ESCAPABLE = '$`"\\\n'


_FILE_READ_RE = re.compile(r"^\s*<(?![<&>])\s*(.*?)\s*$", re.DOTALL)


class WordParseError(Exception):
    """Raised for unterminated quotes or substitutions inside a word."""


def file_read_target(source: str) -> Optional[str]:
    """Return the file word of a $(< file) body, or None."""
    match = _FILE_READ_RE.match(source)
    if match and match.group(1):
        return match.group(1)
    return None


def _parse_substitution_body(source: str, parse) -> ScriptNode:
    # $(< file) has no command to run; the expander reads the file
    if file_read_target(source) is not None:
        return ScriptNode()
    return parse(source)


class WordParser:
    """Parser for a single word's raw text."""

    def __init__(self, text: str, base: int = 0):
        self.text = text
        self.base = base

    def parse(self) -> WordNode:
        parts = self._parse_unquoted(0, len(self.text))
        return WordNode(parts=tuple(parts), text=self.text)

    # -------------------------------------------------------------------------
    # Unquoted and double-quoted regions
    # -------------------------------------------------------------------------

    def _parse_unquoted(self, i: int, end: int) -> list[WordPart]:
        text = self.text
        parts: list[WordPart] = []
        buf: list[str] = []

        def flush() -> None:
            if buf:
                parts.append(LiteralPart(value="".join(buf)))
                buf.clear()

        if i < end and text[i] == "~":
            tilde, i = self._parse_tilde(i, end)
            if tilde is not None:
                parts.append(tilde)
            else:
                buf.append("~")
                i += 1

        while i < end:
            c = text[i]
            if c == "\\":
                if i + 1 >= end:
                    buf.append("\\")
                    i += 1
                elif text[i + 1] == "\n":
                    i += 2
                else:
                    flush()
                    parts.append(EscapedPart(value=text[i + 1]))
                    i += 2
            elif c == "'":
                j = skip_single_quoted(text, i + 1)
                if j < 0 or j > end:
                    raise WordParseError("unexpected EOF while looking for matching `''")
                flush()
                parts.append(SingleQuotedPart(value=text[i + 1:j - 1]))
                i = j
            elif c == '"':
                j = skip_double_quoted(text, i + 1)
                if j < 0 or j > end:
                    raise WordParseError('unexpected EOF while looking for matching `"\'')
                flush()
                inner = self._parse_double_quoted(i + 1, j - 1)
                parts.append(DoubleQuotedPart(parts=tuple(inner)))
                i = j
            elif c == "`":
                part, i = self._parse_backtick(i, end, in_double_quotes=False)
                flush()
                parts.append(part)
            elif c == "$":
                part, j = self.parse_dollar(i, end)
                if part is None:
                    buf.append("$")
                    i += 1
                else:
                    flush()
                    parts.append(part)
                    i = j
            else:
                buf.append(c)
                i += 1
        flush()
        return parts

    def _parse_double_quoted(self, i: int, end: int) -> list[WordPart]:
        text = self.text
        parts: list[WordPart] = []
        buf: list[str] = []

        def flush() -> None:
            if buf:
                parts.append(LiteralPart(value="".join(buf)))
                buf.clear()

        while i < end:
            c = text[i]
            if c == "\\" and i + 1 < end and text[i + 1] in _DQ_ESCAPABLE:
                if text[i + 1] != "\n":
                    buf.append(text[i + 1])
                i += 2
            elif c == "`":
                part, i = self._parse_backtick(i, end, in_double_quotes=True)
                flush()
                parts.append(part)
            elif c == "$":
                part, j = self.parse_dollar(i, end)
                if part is None:
                    buf.append("$")
                    i += 1
                else:
                    flush()
                    parts.append(part)
                    i = j
            else:
                buf.append(c)
                i += 1
        flush()
        return parts

    def _parse_tilde(self, i: int, end: int) -> tuple[Optional[TildeExpansionPart], int]:
        j = i + 1
        while j < end and self.text[j] != "/":
            j += 1
        user = self.text[i + 1:j]
        if user == "":
            return TildeExpansionPart(user=None), j
        if user in ("+", "-") or is_valid_name(user):
            return TildeExpansionPart(user=user), j
        return None, i

    # -------------------------------------------------------------------------
    # Substitutions
    # -------------------------------------------------------------------------

    def _parse_backtick(self, i: int, end: int, in_double_quotes: bool) -> tuple[WordPart, int]:
        from .parser import parse

        j = skip_backtick(self.text, i + 1)
        if j < 0 or j > end:
            raise WordParseError("unexpected EOF while looking for matching ``'")
        raw = self.text[i + 1:j - 1]
        escapable = '$`\\"' if in_double_quotes else "$`\\"
        source = re.sub(r"\\([" + re.escape(escapable) + r"])", r"\1", raw)
        part = CommandSubstitutionPart(
            body=_parse_substitution_body(source, parse),
            source=source,
            backtick=True,
            offset=self.base + i,
        )
        return part, j

    def parse_dollar(self, i: int, end: Optional[int] = None) -> tuple[Optional[WordPart], int]:
        """Parse the expansion starting at the '$' at index i.

        Returns (part, index after it), or (None, i + 1) when the '$' is
        literal.
        """
        from .parser import parse

        text = self.text
        if end is None:
            end = len(text)
        offset = self.base + i
        if i + 1 >= end:
            return None, i + 1
        nxt = text[i + 1]

        if nxt == "(":
            if text.startswith("((", i + 1):
                close = self._find_arithmetic_end(i + 3, end)
                if close >= 0:
                    return ArithmeticExpansionPart(source=text[i + 3:close], offset=offset), close + 2
            j = find_matching_paren(text, i + 2)
            if j < 0 or j >= end:
                raise WordParseError("unexpected EOF while looking for matching `)'")
            source = text[i + 2:j]
            body = _parse_substitution_body(source, parse)
            return CommandSubstitutionPart(body=body, source=source, offset=offset), j + 1

        if nxt == "{":
            j = find_matching_brace(text, i + 2)
            if j < 0 or j >= end:
                return BadSubstitutionPart(text=text[i:end], offset=offset), end
            return self._parse_braced(i + 2, j, offset), j + 1

        if nxt in _SPECIAL_PARAMS:
            return ParameterExpansionPart(parameter=nxt, offset=offset), i + 2

        match = _NAME_AT_RE.match(text, i + 1, end)
        if match:
            return ParameterExpansionPart(parameter=match.group(0), offset=offset), match.end()

        return None, i + 1

    def _find_arithmetic_end(self, i: int, end: int) -> int:
        """Find the first ')' of the '))' closing a '$((' or -1.

        Parentheses are balanced, so '$((a + (b)))' closes at the last
        pair rather than the first '))'. A single ')' at depth zero means
        the text was a command substitution of a subshell instead.
        """
        text = self.text
        depth = 0
        while i < end:
            c = text[i]
            if c == "(":
                depth += 1
            elif c == ")":
                if depth == 0:
                    return i if i + 1 < end and text[i + 1] == ")" else -1
                depth -= 1
            i += 1
        return -1

    def _parse_braced(self, start: int, end: int, offset: int) -> WordPart:
        text = self.text
        content = text[start:end]
        raw = "${" + content + "}"

        def bad() -> BadSubstitutionPart:
            return BadSubstitutionPart(text=raw, offset=offset)

        if content.startswith("#") and len(content) > 1:
            name = content[1:]
            if _BRACED_NAME_RE.fullmatch(name):
                return ParameterExpansionPart(parameter=name, operation=LengthOp(), offset=offset)

        match = _BRACED_NAME_RE.match(content)
        if not match:
            return bad()
        name = match.group(0)
        rest_start = start + match.end()
        if rest_start == end:
            return ParameterExpansionPart(parameter=name, offset=offset)

        op = next((o for o in _OPERATORS if text.startswith(o, rest_start)), None)
        if op is None:
            return bad()
        operand_start = rest_start + len(op)

        if op.startswith("/"):
            split = self._find_replacement_slash(operand_start, end)
            if split < 0:
                pattern = self._sub_word(operand_start, end)
                replacement = None
            else:
                pattern = self._sub_word(operand_start, split)
                replacement = self._sub_word(split + 1, end)
            anchor = {"/#": "start", "/%": "end"}.get(op)
            operation = PatternReplacementOp(
                pattern=pattern,
                replacement=replacement,
                replace_all=op == "//",
                anchor=anchor,
            )
        elif op in ("#", "##", "%", "%%"):
            operation = PatternRemovalOp(
                pattern=self._sub_word(operand_start, end),
                side="prefix" if op[0] == "#" else "suffix",
                greedy=len(op) == 2,
            )
        else:
            check_empty = op.startswith(":")
            word = self._sub_word(operand_start, end)
            op_class = {
                "-": DefaultValueOp,
                "=": AssignDefaultOp,
                "+": UseAlternativeOp,
                "?": ErrorIfUnsetOp,
            }[op[-1]]
            operation = op_class(word=word, check_empty=check_empty)
        return ParameterExpansionPart(parameter=name, operation=operation, offset=offset)

    def _find_replacement_slash(self, i: int, end: int) -> int:
        """Find the unquoted '/' separating pattern from replacement."""
        text = self.text
        while i < end:
            c = text[i]
            if c == "\\":
                i += 2
                continue
            if c == "'":
                i = skip_single_quoted(text, i + 1)
                if i < 0:
                    return -1
                continue
            if c == '"':
                i = skip_double_quoted(text, i + 1)
                if i < 0:
                    return -1
                continue
            if c == "$" and i + 1 < end and text[i + 1] in "({":
                closer = find_matching_paren if text[i + 1] == "(" else find_matching_brace
                j = closer(text, i + 2)
                if j < 0:
                    return -1
                i = j + 1
                continue
            if c == "/":
                return i
            i += 1
        return -1

    def _sub_word(self, start: int, end: int) -> WordNode:
        sub = WordParser(self.text[start:end], base=self.base + start)
        return sub.parse()


def parse_word(text: str, base: int = 0) -> WordNode:
    """Parse the raw text of a word into a WordNode."""
    return WordParser(text, base).parse()
