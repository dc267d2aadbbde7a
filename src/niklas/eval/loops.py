from __future__ import annotations

from ..environment import Environment
from ..runtime import require_number
from ..stream import TokenStream
from ..token_types import TT
from ..types import APPLIED, DECLINED, HandlerResult, NikNumber, NiklasRuntimeError, Returned, VarType, located
from .blocks import execute, run_block
from .common import expect_ident_token
from .expr import evaluate
from .helpers import is_truthy

def handle_repeat(env: Environment, stream: TokenStream) -> HandlerResult:
    if not stream.check(TT.REPEAT):
        return DECLINED

    tok = stream.get()
    count = _number_operand(stream, env, "Argument after repeat", tok)
    stream.expect(TT.LBRACE, "After repeat must follow a block")
    body = stream.collect_block()

    for _ in range(count):
        result = run_block(env, body)

        if isinstance(result, Returned):
            return result

    return APPLIED

def handle_while(env: Environment, stream: TokenStream) -> HandlerResult:
    if not stream.check(TT.WHILE):
        return DECLINED

    stream.get()
    condition = stream.collect_until_block()
    body = stream.collect_block()

    while is_truthy(evaluate(TokenStream(condition), env)):
        result = run_block(env, body)

        if isinstance(result, Returned):
            return result

    return APPLIED

def handle_from_to(env: Environment, stream: TokenStream) -> HandlerResult:
    """from <expr> to <expr> [with <name>] { } over the half-open range."""
    if not stream.check(TT.FROM):
        return DECLINED

    tok = stream.get()
    start = _number_operand(stream, env, "Expression after from", tok)
    to_tok = stream.expect(TT.TO, "After from must follow a to")
    stop = _number_operand(stream, env, "Expression after to", to_tok)

    binder = None
    if stream.accept(TT.WITH):
        binder = expect_ident_token(stream, "Loop variable")

    stream.expect(TT.LBRACE, "From-To-Loop must have a body")
    body = stream.collect_block()

    for i in range(start, stop):
        with env.child() as child:
            if binder is not None:
                child.add_variable(True, binder, VarType.NUMBER, NikNumber(i))
            result = execute(child, TokenStream(body))

        if isinstance(result, Returned):
            return result

    return APPLIED

def _number_operand(stream: TokenStream, env: Environment, what: str, tok) -> int:
    value = evaluate(stream, env)

    try:
        return require_number(value, what)
    except NiklasRuntimeError as exc:
        raise located(exc, tok)
