"""Interpreter and word-expansion exceptions.

Control-flow exceptions (ExitError, ReturnError, ErrexitError) carry the
output accumulated so far so that callers can unwind without losing it.

WordExpansionError and its subclasses abort the expansion of a single
word. The orchestrator annotates them with the word's source text and
the offset of the failing part before they reach the interpreter.
"""

from typing import Optional


class InterpreterError(Exception):
    """Base class for errors that unwind through the interpreter."""

    def __init__(self, message: str = "", stdout: str = "", stderr: str = ""):
        super().__init__(message)
        self.stdout = stdout
        self.stderr = stderr

    def prepend_output(self, stdout: str, stderr: str) -> None:
        """Prepend output produced before this error was raised."""
        self.stdout = stdout + self.stdout
        self.stderr = stderr + self.stderr


class ExitError(InterpreterError):
    """Raised by `exit` to terminate the script."""

    def __init__(self, exit_code: int, stdout: str = "", stderr: str = ""):
        super().__init__(f"exit {exit_code}", stdout, stderr)
        self.exit_code = exit_code


class ReturnError(InterpreterError):
    """Raised by `return` to leave the current function."""

    def __init__(self, exit_code: int = 0, stdout: str = "", stderr: str = ""):
        super().__init__(f"return {exit_code}", stdout, stderr)
        self.exit_code = exit_code


class ErrexitError(InterpreterError):
    """Raised when `set -e` is active and a statement fails."""

    def __init__(self, exit_code: int, stdout: str = "", stderr: str = ""):
        super().__init__(f"errexit {exit_code}", stdout, stderr)
        self.exit_code = exit_code


class ExecutionLimitError(InterpreterError):
    """Raised when an execution limit is exceeded. Never caught by scripts."""

    def __init__(self, message: str, limit_type: str = "", stdout: str = "", stderr: str = ""):
        super().__init__(message, stdout, stderr)
        self.limit_type = limit_type


# =============================================================================
# Word expansion errors
# =============================================================================


class WordExpansionError(Exception):
    """Expansion of one word failed; the word produces no fields."""

    def __init__(
        self,
        message: str,
        subject: Optional[str] = None,
        word: Optional[str] = None,
        offset: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.subject = subject
        self.word = word
        self.offset = offset

    def annotate(self, word: Optional[str], offset: Optional[int]) -> "WordExpansionError":
        """Fill in word context that is not known where the error is raised."""
        if self.word is None:
            self.word = word
        if self.offset is None:
            self.offset = offset
        return self

    def diagnostic(self) -> str:
        """Format as a bash-style stderr line."""
        subject = self.subject if self.subject is not None else self.word
        if subject:
            return f"bash: {subject}: {self.message}\n"
        return f"bash: {self.message}\n"


class ArithmeticSyntaxError(WordExpansionError):
    """Malformed arithmetic expression or operand."""


class ArithmeticDivideByZero(WordExpansionError):
    """Division or modulo by zero in arithmetic."""

    def __init__(self, expression: Optional[str] = None, **kwargs):
        super().__init__("division by 0", subject=expression, **kwargs)


class UnsetVariableError(WordExpansionError):
    """Reference to an unset variable with nounset on, or ${var:?}."""

    def __init__(self, name: str, message: str = "unbound variable", **kwargs):
        super().__init__(message, subject=name, **kwargs)
        self.name = name


class MalformedParameterExpansion(WordExpansionError):
    """A ${...} form that cannot be expanded."""

    def __init__(self, text: str, message: str = "bad substitution", **kwargs):
        super().__init__(message, subject=text, **kwargs)


class CommandSubstitutionFailure(WordExpansionError):
    """A command substitution failed in strict mode or timed out."""

    def __init__(self, command: str, exit_code: int, stdout: str = "", message: Optional[str] = None, **kwargs):
        super().__init__(
            message or f"command substitution failed with exit status {exit_code}",
            subject=f"$({command})",
            **kwargs,
        )
        self.command = command
        self.exit_code = exit_code
        self.stdout = stdout
