from __future__ import annotations

from ..environment import Environment
from ..stream import TokenStream
from ..token_types import TT
from ..types import (
    APPLIED,
    DECLINED,
    Applied,
    HandlerResult,
    NiklasAssertionError,
    Returned,
    located,
)
from .blocks import run_block
from .common import render_tokens
from .expr import evaluate
from .helpers import is_truthy

def handle_comment(env: Environment, stream: TokenStream) -> HandlerResult:
    if stream.check(TT.COMMENT):
        stream.get()
        return APPLIED

    if not stream.check(TT.COMMENT_OPEN):
        return DECLINED

    # An unterminated block comment runs to the end of the stream.
    while stream:
        if stream.get().type == TT.COMMENT_CLOSE:
            break

    return APPLIED

def handle_assert(env: Environment, stream: TokenStream) -> HandlerResult:
    if not stream.check(TT.ASSERT):
        return DECLINED

    tok = stream.get()
    start = stream.pos
    condition = evaluate(stream, env)

    if not is_truthy(condition):
        snippet = render_tokens(stream.tokens[start:stream.pos])
        raise located(NiklasAssertionError(f"Assertion failed: {snippet}"), tok)

    return APPLIED

def handle_condition(env: Environment, stream: TokenStream) -> HandlerResult:
    """
    if <cond> { } [else if <cond> { }]* [else { }]

    Branches are tried in order. Once one has run, the rest of the chain is
    skipped by brace counting; skipped conditions are never evaluated.
    """
    if not stream.check(TT.IF):
        return DECLINED

    stream.get()

    while True:
        condition = evaluate(stream, env)
        stream.expect(TT.LBRACE, "If-Block must begin with a brace {")

        if is_truthy(condition):
            result = run_block(env, stream.collect_block())
            _skip_remaining_branches(stream)
            return _propagate(result)

        stream.skip_block()

        if not _accept_else(stream):
            return APPLIED

        if stream.accept(TT.IF):
            continue

        stream.expect(TT.LBRACE, "Else-Block must begin with a brace {")
        return _propagate(run_block(env, stream.collect_block()))

def handle_statement(env: Environment, stream: TokenStream) -> HandlerResult:
    """Fallback: evaluate one expression for its side effects."""
    return Applied(evaluate(stream, env))

def _skip_remaining_branches(stream: TokenStream) -> None:
    while _accept_else(stream):
        if stream.accept(TT.IF):
            stream.collect_until_block()
            stream.skip_block()
            continue

        stream.expect(TT.LBRACE, "Else-Block must begin with a brace {")
        stream.skip_block()
        return

_COMMENT_TYPES = (TT.COMMENT, TT.COMMENT_OPEN, TT.COMMENT_CLOSE)

def _accept_else(stream: TokenStream) -> bool:
    """Consume an `else`, looking past comments between it and the previous `}`."""
    offset = 0
    tok = stream.peek()
    while tok is not None and tok.type in _COMMENT_TYPES:
        offset += 1
        tok = stream.peek(offset)

    if tok is None or tok.type != TT.ELSE:
        return False

    stream.pos += offset + 1
    return True

def _propagate(result: Applied | Returned) -> HandlerResult:
    if isinstance(result, Returned):
        return result

    return APPLIED
