"""AST node types produced by the parser.

Words are sequences of parts. Quoting is recorded by the part kind
(SingleQuotedPart, DoubleQuotedPart, EscapedPart) when the word is
parsed and is never re-derived during expansion.

Every node exposes a ``type`` string so callers can dispatch either on
``isinstance`` or on ``node.type``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union


# =============================================================================
# Word parts
# =============================================================================


@dataclass(frozen=True)
class LiteralPart:
    """Unquoted literal text."""

    value: str
    type: str = field(default="Literal", init=False)


@dataclass(frozen=True)
class SingleQuotedPart:
    """Text inside '...'."""

    value: str
    type: str = field(default="SingleQuoted", init=False)


@dataclass(frozen=True)
class EscapedPart:
    """A backslash-escaped character outside quotes."""

    value: str
    type: str = field(default="Escaped", init=False)


@dataclass(frozen=True)
class DoubleQuotedPart:
    """Parts inside "..."."""

    parts: tuple
    type: str = field(default="DoubleQuoted", init=False)


@dataclass(frozen=True)
class TildeExpansionPart:
    """Leading ~ or ~user."""

    user: Optional[str] = None
    type: str = field(default="TildeExpansion", init=False)


@dataclass(frozen=True)
class ParameterExpansionPart:
    """$name, ${name} or ${name<op>...}."""

    parameter: str
    operation: Optional["ParameterOperation"] = None
    offset: int = 0
    type: str = field(default="ParameterExpansion", init=False)


@dataclass(frozen=True)
class CommandSubstitutionPart:
    """$(...) or `...`."""

    body: "ScriptNode"
    source: str = ""
    backtick: bool = False
    offset: int = 0
    type: str = field(default="CommandSubstitution", init=False)


@dataclass(frozen=True)
class ArithmeticExpansionPart:
    """$((...)); the expression is parsed when it is evaluated."""

    source: str
    offset: int = 0
    type: str = field(default="ArithmeticExpansion", init=False)


@dataclass(frozen=True)
class BadSubstitutionPart:
    """A ${...} that could not be parsed; raises when expanded."""

    text: str
    message: str = "bad substitution"
    offset: int = 0
    type: str = field(default="BadSubstitution", init=False)


WordPart = Union[
    LiteralPart,
    SingleQuotedPart,
    EscapedPart,
    DoubleQuotedPart,
    TildeExpansionPart,
    ParameterExpansionPart,
    CommandSubstitutionPart,
    ArithmeticExpansionPart,
    BadSubstitutionPart,
]


@dataclass(frozen=True)
class WordNode:
    """A shell word: ordered parts plus the source text it came from."""

    parts: tuple
    text: str = ""
    type: str = field(default="Word", init=False)


# =============================================================================
# Parameter operations
# =============================================================================


@dataclass(frozen=True)
class DefaultValueOp:
    """${var:-word} / ${var-word}."""

    word: Optional[WordNode]
    check_empty: bool
    type: str = field(default="DefaultValue", init=False)


@dataclass(frozen=True)
class AssignDefaultOp:
    """${var:=word} / ${var=word}."""

    word: Optional[WordNode]
    check_empty: bool
    type: str = field(default="AssignDefault", init=False)


@dataclass(frozen=True)
class UseAlternativeOp:
    """${var:+word} / ${var+word}."""

    word: Optional[WordNode]
    check_empty: bool
    type: str = field(default="UseAlternative", init=False)


@dataclass(frozen=True)
class ErrorIfUnsetOp:
    """${var:?word} / ${var?word}."""

    word: Optional[WordNode]
    check_empty: bool
    type: str = field(default="ErrorIfUnset", init=False)


@dataclass(frozen=True)
class LengthOp:
    """${#var}."""

    type: str = field(default="Length", init=False)


@dataclass(frozen=True)
class PatternRemovalOp:
    """${var#pat}, ${var##pat}, ${var%pat}, ${var%%pat}."""

    pattern: WordNode
    side: str  # "prefix" or "suffix"
    greedy: bool
    type: str = field(default="PatternRemoval", init=False)


@dataclass(frozen=True)
class PatternReplacementOp:
    """${var/pat/repl}, ${var//pat/repl}, ${var/#pat/repl}, ${var/%pat/repl}."""

    pattern: WordNode
    replacement: Optional[WordNode]
    replace_all: bool = False
    anchor: Optional[str] = None  # "start", "end" or None
    type: str = field(default="PatternReplacement", init=False)


ParameterOperation = Union[
    DefaultValueOp,
    AssignDefaultOp,
    UseAlternativeOp,
    ErrorIfUnsetOp,
    LengthOp,
    PatternRemovalOp,
    PatternReplacementOp,
]


# =============================================================================
# Arithmetic expressions
# =============================================================================


@dataclass(frozen=True)
class ArithNumber:
    value: int
    type: str = field(default="ArithNumber", init=False)


@dataclass(frozen=True)
class ArithVariable:
    name: str
    type: str = field(default="ArithVariable", init=False)


@dataclass(frozen=True)
class ArithBinary:
    operator: str
    left: "ArithExpr"
    right: "ArithExpr"
    type: str = field(default="ArithBinary", init=False)


@dataclass(frozen=True)
class ArithUnary:
    operator: str
    operand: "ArithExpr"
    prefix: bool = True
    type: str = field(default="ArithUnary", init=False)


@dataclass(frozen=True)
class ArithTernary:
    condition: "ArithExpr"
    consequent: "ArithExpr"
    alternate: "ArithExpr"
    type: str = field(default="ArithTernary", init=False)


@dataclass(frozen=True)
class ArithAssignment:
    operator: str
    name: str
    value: "ArithExpr"
    type: str = field(default="ArithAssignment", init=False)


@dataclass(frozen=True)
class ArithGroup:
    expression: "ArithExpr"
    type: str = field(default="ArithGroup", init=False)


@dataclass(frozen=True)
class ArithNested:
    """A $((...)) inside an arithmetic expression."""

    source: str
    type: str = field(default="ArithNested", init=False)


@dataclass(frozen=True)
class ArithSubstitution:
    """$name, ${...} or $(...) inside an arithmetic expression."""

    part: WordPart
    type: str = field(default="ArithSubstitution", init=False)


ArithExpr = Union[
    ArithNumber,
    ArithVariable,
    ArithBinary,
    ArithUnary,
    ArithTernary,
    ArithAssignment,
    ArithGroup,
    ArithNested,
    ArithSubstitution,
]


# =============================================================================
# Commands and scripts
# =============================================================================


@dataclass(frozen=True)
class AssignmentNode:
    """NAME=value or NAME+=value."""

    name: str
    value: Optional[WordNode]
    append: bool = False
    type: str = field(default="Assignment", init=False)


@dataclass(frozen=True)
class SimpleCommandNode:
    assignments: tuple = ()
    name: Optional[WordNode] = None
    args: tuple = ()
    line: Optional[int] = None
    type: str = field(default="SimpleCommand", init=False)


@dataclass(frozen=True)
class GroupNode:
    """{ list; }"""

    body: "ScriptNode"
    type: str = field(default="Group", init=False)


@dataclass(frozen=True)
class SubshellNode:
    """( list )"""

    body: "ScriptNode"
    type: str = field(default="Subshell", init=False)


@dataclass(frozen=True)
class FunctionDefNode:
    name: str
    body: "CommandNode"
    type: str = field(default="FunctionDef", init=False)


CommandNode = Union[SimpleCommandNode, GroupNode, SubshellNode, FunctionDefNode]


@dataclass(frozen=True)
class PipelineNode:
    commands: tuple
    negated: bool = False
    type: str = field(default="Pipeline", init=False)


@dataclass(frozen=True)
class StatementNode:
    """Pipelines joined by && / ||, optionally run in the background."""

    pipelines: tuple
    operators: tuple = ()
    background: bool = False
    type: str = field(default="Statement", init=False)


@dataclass(frozen=True)
class ScriptNode:
    statements: tuple = ()
    type: str = field(default="Script", init=False)
