"""Niklas: an embeddable interpreter for a small scripting language."""

from .evaluator import DEFAULT_HANDLERS, Interpreter, run
from .lexer import LexError, tokenize
from .types import (
    Applied,
    ConstantError,
    DECLINED,
    Handler,
    NikBool,
    NikFunction,
    NikNumber,
    NikString,
    NiklasArityError,
    NiklasAssertionError,
    NiklasRuntimeError,
    NiklasSyntaxError,
    NiklasTypeError,
    Param,
    Returned,
    UnknownTokenError,
    UnknownVariableError,
    Variable,
    VarType,
)

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_HANDLERS",
    "DECLINED",
    "Applied",
    "ConstantError",
    "Handler",
    "Interpreter",
    "LexError",
    "NikBool",
    "NikFunction",
    "NikNumber",
    "NikString",
    "NiklasArityError",
    "NiklasAssertionError",
    "NiklasRuntimeError",
    "NiklasSyntaxError",
    "NiklasTypeError",
    "Param",
    "Returned",
    "UnknownTokenError",
    "UnknownVariableError",
    "Variable",
    "VarType",
    "run",
    "tokenize",
]
