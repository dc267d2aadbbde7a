from __future__ import annotations

import importlib
from typing import Callable, Dict, List, Optional, Tuple

from .environment import Environment
from .types import (
    NikBool, NikFunction, NikNumber, NikString, NikValue, Param, VarType,
    Returned, Variable,
    ConstantError, NiklasArityError, NiklasSyntaxError, NiklasTypeError,
    is_nik_value, located,
)
from .token_types import Tok

_STDLIB_INITIALIZED = False

def init_stdlib() -> None:
    """Load stdlib modules (idempotent) so register_native hooks run."""
    global _STDLIB_INITIALIZED

    if _STDLIB_INITIALIZED:
        return

    importlib.import_module("niklas.stdlib")
    _STDLIB_INITIALIZED = True

class Builtins:
    # name => (params, fn); fn receives the owning interpreter, then the args
    natives: Dict[str, Tuple[Optional[Tuple[Param, ...]], Callable]] = {}

def register_native(name: str, params: Optional[List[Param]] = None):
    def dec(fn: Callable):
        Builtins.natives[name] = (None if params is None else tuple(params), fn)
        return fn

    return dec

# ---------- Types ----------

TYPE_NAMES: Dict[str, Optional[VarType]] = {
    "number": VarType.NUMBER,
    "string": VarType.STRING,
    "boolean": VarType.BOOLEAN,
    "function": VarType.FUNCTION,
    "any": None,
}

def parse_type(tok: Tok) -> Optional[VarType]:
    try:
        return TYPE_NAMES[tok.value]
    except KeyError:
        raise located(NiklasSyntaxError(f"Unknown type '{tok.value}'"), tok) from None

def type_name(value: Optional[NikValue]) -> str:
    match value:
        case NikNumber():
            return "number"
        case NikString():
            return "string"
        case NikBool():
            return "boolean"
        case NikFunction():
            return "function"
        case None:
            return "none"
        case _:
            raise NiklasTypeError(f"Unexpected value type {type(value).__name__}")

def type_matches(expected: Optional[VarType], value: Optional[NikValue]) -> bool:
    if expected is None:
        return True

    return type_name(value) == expected.value

def check_type_compatibility(expected: Optional[VarType], value: Optional[NikValue]) -> None:
    if not type_matches(expected, value):
        raise NiklasTypeError(f"TypeError: {expected.value} is not compatible to {type_name(value)}")

def check_final(name: str, variable: Variable) -> None:
    if variable.final:
        raise ConstantError(name)

def resolve_type(declared) -> Optional[VarType]:
    """Host-side type: a VarType, None, or one of the annotation names."""
    if not isinstance(declared, str):
        return declared

    if declared not in TYPE_NAMES:
        raise NiklasSyntaxError(f"Unknown type '{declared}'")

    return TYPE_NAMES[declared]

def to_value(value: object) -> Optional[NikValue]:
    """Coerce host-side Python values into runtime values."""
    if value is None or is_nik_value(value):
        return value

    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return NikBool(value)

    if isinstance(value, int):
        return NikNumber(value)

    if isinstance(value, str):
        return NikString(value)

    raise NiklasTypeError(f"Cannot convert {type(value).__name__} to a Niklas value")

def to_params(params) -> Optional[Tuple[Param, ...]]:
    """Accept Param records, bare names or (name, type-name) pairs from hosts."""
    if params is None:
        return None

    result = []

    for p in params:
        if isinstance(p, Param):
            result.append(p)
        elif isinstance(p, str):
            result.append(Param(p))
        else:
            name, declared = p
            result.append(Param(name, resolve_type(declared)))

    return tuple(result)

# ---------- Invocation ----------

def call_function(fn: NikFunction, args: List[Optional[NikValue]], caller: Environment) -> Optional[NikValue]:
    """
    Call semantics:
    - declared parameter lists require an exact argument count;
    - typed parameters check their argument structurally;
    - natives get the evaluated list and return immediately;
    - interpreted bodies run in one child scope of the caller, parameters
      bound final, and yield the first propagated return value.
    """
    if fn.params is not None:
        if len(args) != len(fn.params):
            raise NiklasArityError(
                f"Function {fn.name} expects {len(fn.params)} args; got {len(args)}"
            )

        for param, arg in zip(fn.params, args):
            if not type_matches(param.type, arg):
                raise NiklasTypeError(
                    f"Parameter {param.name} must be of type {param.type.value}, but was {type_name(arg)}"
                )

    if fn.native:
        return to_value(fn.body(args))

    from .eval.blocks import execute  # local import to avoid cycle
    from .stream import TokenStream

    with caller.child() as callee:
        for param, arg in zip(fn.params or (), args):
            callee.add_variable(True, param.name, param.type, arg)

        outcome = execute(callee, TokenStream(fn.body))

    if not isinstance(outcome, Returned):
        return None

    if outcome.value is not None and not type_matches(fn.return_type, outcome.value):
        raise NiklasTypeError(
            f"Function {fn.name} must return {fn.return_type.value}, but returned {type_name(outcome.value)}"
        )

    return outcome.value

def require_number(value: Optional[NikValue], what: str) -> int:
    if isinstance(value, NikNumber):
        return value.value

    raise NiklasTypeError(f"{what} must be of type number, but was {type_name(value)}")

def stringify(value: Optional[NikValue]) -> str:
    match value:
        case NikString(value=s):
            return s
        case NikNumber(value=n):
            return str(n)
        case NikBool(value=b):
            return "true" if b else "false"
        case None:
            return "none"
        case _:
            return repr(value)
