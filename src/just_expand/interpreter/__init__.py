"""Interpreter module for just-expand."""

from .errors import (
    ArithmeticDivideByZero,
    ArithmeticSyntaxError,
    CommandSubstitutionFailure,
    ErrexitError,
    ExecutionLimitError,
    ExitError,
    InterpreterError,
    MalformedParameterExpansion,
    ReturnError,
    UnsetVariableError,
    WordExpansionError,
)
from .expansion import expand_pattern, expand_word_fields, expand_word_string, expand_words
from .interpreter import Interpreter
from .pattern import Pattern, compile_pattern
from .splitting import ExpandedSegment, split_fields, split_segments
from .types import InterpreterContext, InterpreterState, ShellOptions, VariableStore

__all__ = [
    # Interpreter
    "Interpreter",
    "InterpreterContext",
    "InterpreterState",
    "ShellOptions",
    "VariableStore",
    # Expansion
    "expand_word_fields",
    "expand_word_string",
    "expand_pattern",
    "expand_words",
    "ExpandedSegment",
    "split_fields",
    "split_segments",
    "Pattern",
    "compile_pattern",
    # Errors
    "InterpreterError",
    "ExitError",
    "ReturnError",
    "ErrexitError",
    "ExecutionLimitError",
    "WordExpansionError",
    "ArithmeticSyntaxError",
    "ArithmeticDivideByZero",
    "UnsetVariableError",
    "MalformedParameterExpansion",
    "CommandSubstitutionFailure",
]
