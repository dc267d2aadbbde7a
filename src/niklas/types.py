from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, List, Optional, Tuple, TypeVar, Union
from typing_extensions import TypeAlias, TypeGuard

if TYPE_CHECKING:
    from .environment import Environment
    from .stream import TokenStream
    from .token_types import Tok

# ---------- Value Model ----------

@dataclass
class NikNumber:
    value: int
    def __repr__(self) -> str:
        return str(self.value)

@dataclass
class NikString:
    value: str
    def __repr__(self) -> str:
        return f'"{self.value}"'

@dataclass
class NikBool:
    value: bool
    def __repr__(self) -> str:
        return "true" if self.value else "false"

class VarType(Enum):
    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    FUNCTION = "function"

@dataclass(frozen=True)
class Param:
    name: str
    type: Optional[VarType] = None

NativeFn = Callable[[List[Optional['NikValue']]], object]

@dataclass
class NikFunction:
    name: str
    params: Optional[Tuple[Param, ...]]  # None for variadic natives
    return_type: Optional[VarType]
    body: Union[Tuple['Tok', ...], NativeFn]

    @property
    def native(self) -> bool:
        return callable(self.body)

    def __repr__(self) -> str:
        if self.params is None:
            param_desc = "..."
        else:
            param_desc = ", ".join(p.name for p in self.params)
        label = "native" if self.native else "function"
        return f"<{label} {self.name}({param_desc})>"

NikValue: TypeAlias = NikNumber | NikString | NikBool | NikFunction

_NIK_VALUE_TYPES: Tuple[type, ...] = (NikNumber, NikString, NikBool, NikFunction)

def is_nik_value(value: object) -> TypeGuard[NikValue]:
    return isinstance(value, _NIK_VALUE_TYPES)

@dataclass
class Variable:
    final: bool
    type: Optional[VarType]
    value: Optional[NikValue]

# ---------- Handler outcomes ----------

@dataclass(frozen=True)
class Declined:
    """Handler did not recognise the statement and consumed nothing."""

@dataclass(frozen=True)
class Applied:
    """Statement consumed; value is the bare-expression result, if any."""
    value: Optional[NikValue] = None

@dataclass(frozen=True)
class Returned:
    """Statement consumed and a `return` must propagate."""
    value: Optional[NikValue]

DECLINED = Declined()
APPLIED = Applied()

HandlerResult: TypeAlias = Declined | Applied | Returned

@dataclass(frozen=True)
class Handler:
    name: str
    test: Callable[['Environment', 'TokenStream'], HandlerResult]

# ---------- Exceptions ----------

class NiklasRuntimeError(Exception):
    line: Optional[int]
    column: Optional[int]

    def __init__(self, message: str):
        super().__init__(message)
        self.line = None
        self.column = None

    def __str__(self) -> str:
        msg = super().__str__()

        if self.line is None:
            return msg

        if self.column is None:
            return f"{msg} (line {self.line})"

        return f"{msg} (line {self.line}, col {self.column})"

class NiklasSyntaxError(NiklasRuntimeError):
    pass

class UnknownTokenError(NiklasRuntimeError):
    def __init__(self, token: str):
        super().__init__(f"Could not handle unknown token '{token}'")
        self.token = token

class UnknownVariableError(NiklasRuntimeError):
    def __init__(self, name: str):
        super().__init__(f"Unknown variable '{name}'")
        self.name = name

class ConstantError(NiklasRuntimeError):
    def __init__(self, name: str):
        super().__init__(f"ConstantError: constant '{name}' may not change")
        self.name = name

class NiklasTypeError(NiklasRuntimeError):
    pass

class NiklasArityError(NiklasRuntimeError):
    pass

class NiklasAssertionError(NiklasRuntimeError):
    pass

E = TypeVar("E", bound=NiklasRuntimeError)

def located(err: E, tok: Optional['Tok']) -> E:
    """Attach a token's position to an error unless it already has one."""
    if tok is not None and err.line is None:
        err.line = tok.line
        err.column = tok.column
    return err
