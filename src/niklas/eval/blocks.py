from __future__ import annotations

from typing import Sequence

from ..environment import Environment
from ..stream import TokenStream
from ..token_types import TT, Tok
from ..types import (
    APPLIED,
    Applied,
    Declined,
    Handler,
    NikNumber,
    NiklasRuntimeError,
    NiklasSyntaxError,
    Returned,
    UnknownTokenError,
    located,
)
from .expr import evaluate

def execute(env: Environment, stream: TokenStream) -> Applied | Returned:
    """
    Run statements until the stream is exhausted or a `}` is reached.

    Returns the first propagated `Returned`, or `Applied` carrying the value
    of the last bare-expression statement.
    """
    handlers = env.interp.handlers
    apply_delay = not env.is_root()
    last = None

    while stream:
        tok = stream.peek()

        if tok.type == TT.RBRACE:
            break

        if tok.type == TT.RETURN:
            if env.is_root():
                raise located(NiklasSyntaxError("Invalid return statement: return outside of a block"), tok)

            stream.get()

            try:
                return Returned(evaluate(stream, env))
            except NiklasRuntimeError as exc:
                raise located(exc, tok)

        if apply_delay:
            pace(env)
        else:
            apply_delay = True

        result = dispatch(env, stream, handlers)

        if isinstance(result, Returned):
            return result

        # APPLIED marks statements that yield no expression value.
        if result is not APPLIED:
            last = result.value

    return Applied(last)

def dispatch(env: Environment, stream: TokenStream, handlers: Sequence[Handler]) -> Applied | Returned:
    """Offer the statement at the cursor to each handler in order."""
    tok = stream.peek()

    for handler in handlers:
        start = stream.pos

        try:
            result = handler.test(env, stream)
        except NiklasRuntimeError as exc:
            raise located(exc, tok)

        if isinstance(result, Declined):
            if stream.pos != start:
                raise NiklasRuntimeError(f"Handler '{handler.name}' declined after consuming tokens")
            continue

        if stream.pos == start:
            raise NiklasRuntimeError(f"Handler '{handler.name}' accepted without consuming tokens")

        return result

    raise located(UnknownTokenError(tok.value), tok)

def run_block(env: Environment, tokens: Sequence[Tok]) -> Applied | Returned:
    """Execute captured block tokens in a fresh child scope of env."""
    with env.child() as child:
        return execute(child, TokenStream(tokens))

def pace(env: Environment) -> None:
    """Inter-statement delay, in milliseconds, read from `delay`."""
    delay = env.get_variable('delay')

    if delay is None or not isinstance(delay.value, NikNumber):
        return

    if delay.value.value > 0:
        env.interp.sleep(delay.value.value / 1000.0)
