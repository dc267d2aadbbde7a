from __future__ import annotations

from typing import List

from ..environment import Environment
from ..stream import TokenStream
from ..token_types import TT
from ..types import APPLIED, DECLINED, HandlerResult, NikFunction, NiklasRuntimeError, Param, VarType, located
from .common import expect_ident_token, syntax_error
from .decl import parse_annotation

def handle_function_declaration(env: Environment, stream: TokenStream) -> HandlerResult:
    """def <name>( <params> ) [: <type>] { <body> }; the body is captured, not run."""
    if not stream.check(TT.DEF):
        return DECLINED

    keyword = stream.get()
    name = expect_ident_token(stream, "Function name")
    params = parse_params(stream)
    return_type = parse_annotation(stream)

    stream.expect(TT.LBRACE, "Function body must begin with a brace {")
    body = stream.collect_block()

    fn = NikFunction(name=name, params=tuple(params), return_type=return_type, body=body)

    try:
        env.declare(True, name, VarType.FUNCTION, fn)
    except NiklasRuntimeError as exc:
        raise located(exc, keyword)

    return APPLIED

def parse_params(stream: TokenStream) -> List[Param]:
    stream.expect(TT.LPAR, "Parameter list must start with parenthesis")
    params: List[Param] = []

    if stream.accept(TT.RPAR):
        return params

    while True:
        tok = stream.peek()
        name = expect_ident_token(stream, "Parameter name")

        if any(p.name == name for p in params):
            raise syntax_error(f"Duplicate parameter '{name}'", tok)

        params.append(Param(name, parse_annotation(stream)))

        if stream.accept(TT.COMMA):
            continue

        stream.expect(TT.RPAR, "Function parameters must be separated by comma")
        return params
