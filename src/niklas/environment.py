from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Iterator, List, Optional, Sequence

from .types import (
    ConstantError,
    NikFunction,
    NikValue,
    NiklasRuntimeError,
    Param,
    Variable,
    VarType,
)

if TYPE_CHECKING:
    from .evaluator import Interpreter


@dataclass
class Scope:
    parent: Optional[int]
    depth: int
    vars: Dict[str, Variable] = field(default_factory=dict)


class ScopeArena:
    """
    Owns every live scope of one interpreter.

    Scopes refer to their parent by index, never by reference. Released
    slots are recycled through a free list.
    """

    def __init__(self) -> None:
        self._slots: List[Optional[Scope]] = []
        self._free: List[int] = []

    def __len__(self) -> int:
        return len(self._slots) - len(self._free)

    def allocate(self, parent: Optional[int]) -> int:
        depth = 0 if parent is None else self.scope(parent).depth + 1
        scope = Scope(parent=parent, depth=depth)

        if self._free:
            index = self._free.pop()
            self._slots[index] = scope
            return index

        self._slots.append(scope)
        return len(self._slots) - 1

    def release(self, index: int) -> None:
        if self._slots[index] is None:
            raise NiklasRuntimeError(f"Scope {index} released twice")

        self._slots[index] = None
        self._free.append(index)

    def scope(self, index: int) -> Scope:
        scope = self._slots[index]
        if scope is None:
            raise NiklasRuntimeError(f"Scope {index} is no longer alive")
        return scope

    def lookup(self, index: Optional[int], name: str) -> Optional[Variable]:
        while index is not None:
            scope = self.scope(index)
            found = scope.vars.get(name)

            if found is not None:
                return found

            index = scope.parent

        return None


class Environment:
    """Handle onto one scope of an interpreter's arena."""

    __slots__ = ("interp", "index")

    def __init__(self, interp: 'Interpreter', index: int):
        self.interp = interp
        self.index = index

    def __repr__(self) -> str:
        return f"Environment(index={self.index}, depth={self.depth})"

    @property
    def _scope(self) -> Scope:
        return self.interp.arena.scope(self.index)

    @property
    def depth(self) -> int:
        return self._scope.depth

    def is_root(self) -> bool:
        return self._scope.parent is None

    # ---------- Variables ----------

    def add_variable(self, final: bool, name: str, type: Optional[VarType], value: Optional[NikValue]) -> Variable:
        variable = Variable(final=final, type=type, value=value)
        self._scope.vars[name] = variable
        return variable

    def declare(self, final: bool, name: str, type: Optional[VarType], value: Optional[NikValue]) -> Variable:
        """Script-level declaration: may replace a name unless it is final here."""
        existing = self._scope.vars.get(name)

        if existing is not None and existing.final:
            raise ConstantError(name)

        return self.add_variable(final, name, type, value)

    def add_function(
        self,
        name: str,
        params: Optional[Sequence[Param]],
        body,
        return_type: Optional[VarType] = None,
    ) -> Variable:
        fn = NikFunction(
            name=name,
            params=None if params is None else tuple(params),
            return_type=return_type,
            body=body,
        )
        return self.add_variable(True, name, VarType.FUNCTION, fn)

    def get_variable(self, name: str) -> Optional[Variable]:
        return self.interp.arena.lookup(self.index, name)

    # ---------- Nesting ----------

    @contextmanager
    def child(self) -> Iterator['Environment']:
        """Open a child scope for one block execution, released on exit."""
        arena = self.interp.arena
        index = arena.allocate(self.index)

        try:
            yield Environment(self.interp, index)
        finally:
            arena.release(index)
