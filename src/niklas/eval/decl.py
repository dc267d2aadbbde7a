from __future__ import annotations

from typing import Optional

from ..environment import Environment
from ..runtime import parse_type
from ..stream import TokenStream
from ..token_types import TT
from ..types import APPLIED, DECLINED, HandlerResult, NiklasRuntimeError, VarType, located
from .common import expect_ident_token, syntax_error
from .expr import evaluate

def handle_variable_declaration(env: Environment, stream: TokenStream) -> HandlerResult:
    """
    var|val <name> [: <type>] = <expr>

    `val` declares a constant. The annotation is recorded for later
    assignments; the initial value is not checked against it.
    """
    if not stream.check(TT.VAR, TT.VAL):
        return DECLINED

    keyword = stream.get()
    name = expect_ident_token(stream, "Variable name")
    declared = parse_annotation(stream)

    if stream.accept(TT.ASSIGN) is None:
        raise syntax_error("Variable declaration is missing '='", stream.peek() or keyword)

    value = evaluate(stream, env)

    try:
        env.declare(keyword.type == TT.VAL, name, declared, value)
    except NiklasRuntimeError as exc:
        raise located(exc, keyword)

    return APPLIED

def parse_annotation(stream: TokenStream) -> Optional[VarType]:
    """Optional `: <type>` suffix; absent or `any` means untyped."""
    if stream.accept(TT.COLON) is None:
        return None

    tok = stream.peek()

    if tok is None or tok.type != TT.IDENT:
        raise syntax_error("Type annotation must name a type", tok or stream.last())

    stream.get()
    return parse_type(tok)
