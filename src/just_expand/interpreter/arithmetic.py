"""Arithmetic evaluation for $((...)).

Results wrap to signed 64 bits like C integers. Division and modulo
truncate toward zero, and shift counts are taken modulo 64. Variable
values are evaluated recursively: with a=b and b=3, $((a + 1)) is 4.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from ..parser.arithmetic import ArithmeticParseError, parse_arithmetic, parse_base_n, to_int64
from .errors import ArithmeticDivideByZero, ArithmeticSyntaxError

if TYPE_CHECKING:
    from .types import InterpreterContext

_DECIMAL_RE = re.compile(r"^[+-]?(0|[1-9][0-9]*)$")


def _div(left: int, right: int) -> int:
    if right == 0:
        raise ArithmeticDivideByZero()
    quotient = abs(left) // abs(right)
    return to_int64(quotient if (left >= 0) == (right >= 0) else -quotient)


def _mod(left: int, right: int) -> int:
    return to_int64(left - _div(left, right) * right)


def _shift(left: int, right: int, op: str) -> int:
    if right < 0:
        raise ArithmeticSyntaxError("negative shift count")
    right &= 63
    return to_int64(left << right) if op == "<<" else left >> right


def _apply_binary(op: str, left: int, right: int) -> int:
    if op == "+":
        return to_int64(left + right)
    elif op == "-":
        return to_int64(left - right)
    elif op == "*":
        return to_int64(left * right)
    elif op == "/":
        return _div(left, right)
    elif op == "%":
        return _mod(left, right)
    elif op == "**":
        if right < 0:
            raise ArithmeticSyntaxError("exponent less than 0")
        return to_int64(pow(left, right, 1 << 64))
    elif op in ("<<", ">>"):
        return _shift(left, right, op)
    elif op == "<":
        return 1 if left < right else 0
    elif op == ">":
        return 1 if left > right else 0
    elif op == "<=":
        return 1 if left <= right else 0
    elif op == ">=":
        return 1 if left >= right else 0
    elif op == "==":
        return 1 if left == right else 0
    elif op == "!=":
        return 1 if left != right else 0
    elif op == "&":
        return left & right
    elif op == "|":
        return left | right
    elif op == "^":
        return left ^ right
    raise ArithmeticSyntaxError(f"unknown operator `{op}'")


async def resolve_arith_value(ctx: "InterpreterContext", value: str, depth: int = 0) -> int:
    """Coerce a variable value or substitution result to an integer.

    Empty is 0, a decimal literal is itself, anything else (a name, an
    octal/hex constant, an expression) is parsed and evaluated one level
    deeper.
    """
    value = value.strip()
    if not value:
        return 0
    if _DECIMAL_RE.match(value):
        number = parse_base_n(value.lstrip("+-"), 10)
        return to_int64(-number) if value.startswith("-") else number
    if depth >= ctx.limits.max_arithmetic_depth:
        raise ArithmeticSyntaxError(
            "expression recursion level exceeded", subject=value
        )
    return await evaluate_arithmetic_text(ctx, value, depth + 1)


async def evaluate_arithmetic(ctx: "InterpreterContext", expr, depth: int = 0) -> int:
    """Evaluate a parsed arithmetic expression."""
    from .parameter import get_variable

    if expr.type == "ArithNumber":
        return expr.value
    elif expr.type == "ArithVariable":
        return await resolve_arith_value(ctx, get_variable(ctx, expr.name), depth)
    elif expr.type == "ArithGroup":
        return await evaluate_arithmetic(ctx, expr.expression, depth)
    elif expr.type == "ArithNested":
        return await evaluate_arithmetic_text(ctx, expr.source, depth)
    elif expr.type == "ArithSubstitution":
        from .expansion import expand_part_text

        text = await expand_part_text(ctx, expr.part)
        return await resolve_arith_value(ctx, text, depth)
    elif expr.type == "ArithBinary":
        op = expr.operator
        if op == "&&":
            if not await evaluate_arithmetic(ctx, expr.left, depth):
                return 0
            return 1 if await evaluate_arithmetic(ctx, expr.right, depth) else 0
        elif op == "||":
            if await evaluate_arithmetic(ctx, expr.left, depth):
                return 1
            return 1 if await evaluate_arithmetic(ctx, expr.right, depth) else 0
        elif op == ",":
            await evaluate_arithmetic(ctx, expr.left, depth)
            return await evaluate_arithmetic(ctx, expr.right, depth)
        left = await evaluate_arithmetic(ctx, expr.left, depth)
        right = await evaluate_arithmetic(ctx, expr.right, depth)
        return _apply_binary(op, left, right)
    elif expr.type == "ArithUnary":
        op = expr.operator
        if op in ("++", "--"):
            name = expr.operand.name
            current = await resolve_arith_value(ctx, get_variable(ctx, name), depth)
            new_value = to_int64(current + 1 if op == "++" else current - 1)
            ctx.state.env.set(name, str(new_value))
            return new_value if expr.prefix else current
        operand = await evaluate_arithmetic(ctx, expr.operand, depth)
        if op == "-":
            return to_int64(-operand)
        elif op == "+":
            return operand
        elif op == "!":
            return 0 if operand else 1
        elif op == "~":
            return ~operand
    elif expr.type == "ArithTernary":
        if await evaluate_arithmetic(ctx, expr.condition, depth):
            return await evaluate_arithmetic(ctx, expr.consequent, depth)
        return await evaluate_arithmetic(ctx, expr.alternate, depth)
    elif expr.type == "ArithAssignment":
        rhs = await evaluate_arithmetic(ctx, expr.value, depth)
        if expr.operator == "=":
            value = rhs
        else:
            current = await resolve_arith_value(ctx, get_variable(ctx, expr.name), depth)
            value = _apply_binary(expr.operator[:-1], current, rhs)
        ctx.state.env.set(expr.name, str(value))
        return value
    raise ArithmeticSyntaxError(f"unsupported arithmetic node {expr.type}")


async def evaluate_arithmetic_text(ctx: "InterpreterContext", text: str, depth: int = 0) -> int:
    """Parse and evaluate an expression string."""
    try:
        expr = parse_arithmetic(text)
    except ArithmeticParseError as e:
        message = str(e)
        if e.token:
            message += f' (error token is "{e.token}")'
        raise ArithmeticSyntaxError(message, subject=text.strip()) from e
    try:
        return await evaluate_arithmetic(ctx, expr, depth)
    except ArithmeticDivideByZero as e:
        if e.subject is None:
            e.subject = text.strip()
        raise
