"""Built-in natives (print, println, assertions) registered via niklas.runtime."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

from .runtime import register_native, stringify, type_name
from .types import NikBool, NikValue, NiklasAssertionError, NiklasTypeError

if TYPE_CHECKING:
    from .evaluator import Interpreter

def _render(args: List[Optional[NikValue]]) -> str:
    return " ".join(stringify(arg) for arg in args)

def _message(args: List[Optional[NikValue]], default: str) -> str:
    if len(args) > 1 and args[1] is not None:
        return stringify(args[1])
    return default

@register_native("print")
def std_print(interp: 'Interpreter', args: List[Optional[NikValue]]) -> None:
    interp.write(_render(args))

@register_native("println")
def std_println(interp: 'Interpreter', args: List[Optional[NikValue]]) -> None:
    interp.write(_render(args) + "\n")

@register_native("checkNotNull")
def std_check_not_null(_interp, args: List[Optional[NikValue]]) -> NikValue:
    if not args or len(args) > 2:
        raise NiklasTypeError("checkNotNull(value[, message]) expects 1 or 2 arguments")

    value = args[0]

    if value is None:
        raise NiklasAssertionError(_message(args, "Value must not be none"))

    return value

@register_native("checkArgument")
def std_check_argument(_interp, args: List[Optional[NikValue]]) -> None:
    if not args or len(args) > 2:
        raise NiklasTypeError("checkArgument(condition[, message]) expects 1 or 2 arguments")

    condition = args[0]

    if not isinstance(condition, NikBool):
        raise NiklasTypeError(f"checkArgument expects a boolean condition, got {type_name(condition)}")

    if not condition.value:
        raise NiklasAssertionError(_message(args, "Illegal argument"))
