"""
Recursive-descent expression evaluator.

Tiers, loosest to tightest: logical, relational, additive, multiplicative,
unary, primary. Every tier reads directly from the token stream it is given
and evaluates as it parses; nothing is materialized.
"""

from __future__ import annotations

from typing import List, Optional

from ..environment import Environment
from ..runtime import call_function, check_final, check_type_compatibility, require_number, stringify, type_name
from ..stream import TokenStream
from ..token_types import TT, Tok
from ..types import (
    NikBool,
    NikFunction,
    NikNumber,
    NikString,
    NikValue,
    NiklasRuntimeError,
    NiklasSyntaxError,
    NiklasTypeError,
    UnknownTokenError,
    UnknownVariableError,
    located,
)
from .common import syntax_error
from .helpers import is_truthy

Value = Optional[NikValue]

# ---------------- Tiers ----------------

def evaluate(stream: TokenStream, env: Environment) -> Value:
    """
    Logical tier. Right-associative by recursion and never short-circuits:
    the right operand is always evaluated, side effects included.
    """
    left = eval_relational(stream, env)
    op = stream.accept(TT.AND) or stream.accept(TT.OR)

    if op is None:
        return left

    right = evaluate(stream, env)

    if op.type == TT.AND:
        return right if is_truthy(left) else left

    return left if is_truthy(left) else right

def eval_relational(stream: TokenStream, env: Environment) -> Value:
    left = eval_additive(stream, env)

    if not stream.check(TT.EQ, TT.LT, TT.GT):
        return left

    op = stream.get()
    right = eval_additive(stream, env)

    try:
        return NikBool(compare_values(op.type, left, right))
    except NiklasRuntimeError as exc:
        raise located(exc, op)

def eval_additive(stream: TokenStream, env: Environment) -> Value:
    acc = eval_multiplicative(stream, env)

    while stream.check(TT.PLUS, TT.MINUS):
        op = stream.get()
        rhs = eval_multiplicative(stream, env)
        acc = _apply(op, acc, rhs)

    return acc

def eval_multiplicative(stream: TokenStream, env: Environment) -> Value:
    acc = eval_unary(stream, env)

    while stream.check(TT.STAR, TT.SLASH, TT.MOD):
        op = stream.get()
        rhs = eval_unary(stream, env)
        acc = _apply(op, acc, rhs)

    return acc

def eval_unary(stream: TokenStream, env: Environment) -> Value:
    op = stream.accept(TT.NEG)
    if op is not None:
        rhs = eval_unary(stream, env)

        if not isinstance(rhs, NikBool):
            raise located(NiklasTypeError("NOT-Operator (!) can only be applied to booleans"), op)

        return NikBool(not rhs.value)

    op = stream.accept(TT.MINUS)
    if op is not None:
        rhs = eval_unary(stream, env)

        if not isinstance(rhs, NikNumber):
            raise located(NiklasTypeError("Minus-Operator (-) can only be applied to numbers"), op)

        return NikNumber(-rhs.value)

    return eval_primary(stream, env)

def eval_primary(stream: TokenStream, env: Environment) -> Value:
    tok = stream.peek()

    if tok is None:
        raise located(NiklasSyntaxError("Unexpected end of input in expression"), stream.last())

    match tok.type:
        case TT.LPAR:
            stream.get()
            value = evaluate(stream, env)

            if stream.accept(TT.RPAR) is None:
                raise syntax_error("A parenthesis is not closed", stream.peek() or tok)

            return value
        case TT.STRING:
            stream.get()
            return NikString(tok.value[1:-1])
        case TT.TRUE | TT.FALSE:
            stream.get()
            return NikBool(tok.type == TT.TRUE)
        case TT.NUMBER:
            stream.get()
            return NikNumber(parse_number(tok.value))
        case TT.IDENT:
            return eval_identifier(stream, env)
        case _:
            raise located(UnknownTokenError(tok.value), tok)

# ---------------- Identifiers ----------------

def eval_identifier(stream: TokenStream, env: Environment) -> Value:
    """Read, call, assign or increment/decrement the named variable."""
    name_tok = stream.get()
    name = name_tok.value
    variable = env.get_variable(name)

    if variable is None:
        raise located(UnknownVariableError(name), name_tok)

    value = variable.value

    if isinstance(value, NikFunction) and stream.check(TT.LPAR):
        args = eval_call_args(stream, env)

        try:
            return call_function(value, args, env)
        except NiklasRuntimeError as exc:
            raise located(exc, name_tok)

    op = stream.accept(TT.ASSIGN)
    if op is not None:
        try:
            check_final(name, variable)
        except NiklasRuntimeError as exc:
            raise located(exc, op)

        result = evaluate(stream, env)

        try:
            check_type_compatibility(variable.type, result)
        except NiklasRuntimeError as exc:
            raise located(exc, op)

        variable.value = result
        return result

    op = stream.accept(TT.INCR) or stream.accept(TT.DECR)
    if op is not None:
        try:
            check_final(name, variable)
            current = require_number(value, f"Operand of {op.value}")
        except NiklasRuntimeError as exc:
            raise located(exc, op)

        delta = 1 if op.type == TT.INCR else -1
        variable.value = NikNumber(current + delta)
        return value

    return value

def eval_call_args(stream: TokenStream, env: Environment) -> List[Value]:
    """Evaluate `( expr, ... )` left to right in the caller's scope."""
    stream.expect(TT.LPAR, "Parameter list must start with parenthesis")
    args: List[Value] = []

    if stream.accept(TT.RPAR):
        return args

    while True:
        args.append(evaluate(stream, env))

        if stream.accept(TT.COMMA):
            continue

        stream.expect(TT.RPAR, "Function parameters must be separated by comma")
        return args

# ---------------- Operators ----------------

def parse_number(text: str) -> int:
    """Integer value of a numeric literal; any fraction is truncated."""
    whole = text.split('.', 1)[0]
    return int(whole) if whole else 0

def values_equal(lhs: Value, rhs: Value) -> bool:
    match (lhs, rhs):
        case (None, None):
            return True
        case (NikNumber(value=a), NikNumber(value=b)):
            return a == b
        case (NikString(value=a), NikString(value=b)):
            return a == b
        case (NikBool(value=a), NikBool(value=b)):
            return a == b
        case (NikFunction(), NikFunction()):
            return lhs is rhs
        case _:
            return False

def compare_values(op: TT, lhs: Value, rhs: Value) -> bool:
    if op == TT.EQ:
        return values_equal(lhs, rhs)

    match (lhs, rhs):
        case (NikNumber(value=a), NikNumber(value=b)) | (NikString(value=a), NikString(value=b)):
            return a < b if op == TT.LT else a > b
        case _:
            sym = '<' if op == TT.LT else '>'
            raise NiklasTypeError(f"Cannot compare {type_name(lhs)} {sym} {type_name(rhs)}")

def _apply(op: Tok, lhs: Value, rhs: Value) -> NikValue:
    try:
        return apply_binary_operator(op.type, lhs, rhs)
    except NiklasRuntimeError as exc:
        raise located(exc, op)

def apply_binary_operator(op: TT, lhs: Value, rhs: Value) -> NikValue:
    if op == TT.PLUS and (isinstance(lhs, NikString) or isinstance(rhs, NikString)):
        return NikString(stringify(lhs) + stringify(rhs))

    if not isinstance(lhs, NikNumber) or not isinstance(rhs, NikNumber):
        raise NiklasTypeError(
            f"Operator {_OP_SYMBOLS[op]} cannot be applied to {type_name(lhs)} and {type_name(rhs)}"
        )

    a, b = lhs.value, rhs.value

    match op:
        case TT.PLUS:
            return NikNumber(a + b)
        case TT.MINUS:
            return NikNumber(a - b)
        case TT.STAR:
            return NikNumber(a * b)
        case TT.SLASH:
            _require_divisor(b)
            return NikNumber(_trunc_div(a, b))
        case TT.MOD:
            _require_divisor(b)
            return NikNumber(a - b * _trunc_div(a, b))
        case _:
            raise NiklasRuntimeError(f"Unsupported operator {op.name}")

_OP_SYMBOLS = {
    TT.PLUS: '+',
    TT.MINUS: '-',
    TT.STAR: '*',
    TT.SLASH: '/',
    TT.MOD: '%',
}

def _require_divisor(b: int) -> None:
    if b == 0:
        raise NiklasRuntimeError("Division by zero")

def _trunc_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q
