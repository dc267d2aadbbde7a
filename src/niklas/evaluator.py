"""
Interpreter and embedding API.

An Interpreter owns the scope arena, the root environment and the statement
handler chain. Hosts feed it source with run() and extend it with globals,
natives and extra handlers.
"""

from __future__ import annotations

import functools
import sys
import time
from typing import Callable, Iterable, List, Optional, Union

from .environment import Environment, ScopeArena
from .eval.blocks import execute
from .eval.control import handle_assert, handle_comment, handle_condition, handle_statement
from .eval.decl import handle_variable_declaration
from .eval.fn import handle_function_declaration
from .eval.loops import handle_from_to, handle_repeat, handle_while
from .lexer import tokenize
from .runtime import Builtins, init_stdlib, resolve_type, to_params, to_value
from .stream import TokenStream
from .types import (
    Handler,
    NikNumber,
    NikValue,
    NiklasRuntimeError,
    NiklasSyntaxError,
    Returned,
    Variable,
    VarType,
    located,
)

# Order matters: the first handler that accepts a statement wins, and
# `statement` accepts everything.
DEFAULT_HANDLERS = (
    Handler("comment", handle_comment),
    Handler("assert", handle_assert),
    Handler("repeat", handle_repeat),
    Handler("while", handle_while),
    Handler("fromTo", handle_from_to),
    Handler("condition", handle_condition),
    Handler("variableDeclaration", handle_variable_declaration),
    Handler("functionDeclaration", handle_function_declaration),
    Handler("statement", handle_statement),
)

class Interpreter:
    def __init__(self, sleep: Optional[Callable[[float], None]] = None, output=None):
        init_stdlib()

        self.arena = ScopeArena()
        self.root = Environment(self, self.arena.allocate(None))
        self.handlers: List[Handler] = list(DEFAULT_HANDLERS)
        self.sleep = sleep if sleep is not None else time.sleep
        self.output = output

        for name, (params, fn) in Builtins.natives.items():
            self.root.add_function(name, params, functools.partial(fn, self))

        self.root.add_variable(False, "delay", VarType.NUMBER, NikNumber(0))

    def write(self, text: str) -> None:
        """Send text to the output sink used by print/println."""
        sink = self.output if self.output is not None else sys.stdout
        sink.write(text)

    def run(self, source: str) -> Optional[NikValue]:
        """
        Tokenize and execute source in the root environment.

        Returns the value of the last bare-expression statement, or the value
        a top-level block returned. Repeated calls share the root scope.
        """
        stream = TokenStream(tokenize(source))

        try:
            outcome = execute(self.root, stream)
        except RecursionError:
            raise NiklasRuntimeError("maximum nesting depth exceeded") from None

        # A returned value ends the program; anything else left over is a stray `}`.
        if stream and not isinstance(outcome, Returned):
            raise located(NiklasSyntaxError("Unmatched closing brace '}'"), stream.peek())

        return outcome.value

    # ---------- Host registration ----------

    def add_variable(
        self,
        final: bool,
        name: str,
        type: Union[VarType, str, None],
        value: object,
    ) -> Variable:
        return self.root.add_variable(final, name, resolve_type(type), to_value(value))

    def get_variable(self, name: str) -> Optional[Variable]:
        return self.root.get_variable(name)

    def add_function(
        self,
        name: str,
        params: Optional[Iterable],
        body: Callable[[List[Optional[NikValue]]], object],
        return_type: Union[VarType, str, None] = None,
    ) -> Variable:
        """
        Register a host callable. params=None accepts any number of
        arguments; otherwise entries are names, (name, type) pairs or Param.
        """
        return self.root.add_function(name, to_params(params), body, resolve_type(return_type))

    def add_handler(self, handler: Handler, before: Optional[str] = "statement") -> None:
        """Insert handler ahead of the named one, or append when before is None."""
        if before is None:
            self.handlers.append(handler)
            return

        for idx, existing in enumerate(self.handlers):
            if existing.name == before:
                self.handlers.insert(idx, handler)
                return

        raise ValueError(f"No handler named '{before}'")

def run(source: str, **kwargs) -> Optional[NikValue]:
    """Run source in a fresh Interpreter; kwargs go to its constructor."""
    return Interpreter(**kwargs).run(source)
