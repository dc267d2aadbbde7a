from __future__ import annotations

from typing import Iterable, Optional

from ..stream import TokenStream
from ..token_types import TT, Tok
from ..types import NiklasSyntaxError, located

def syntax_error(message: str, tok: Optional[Tok]) -> NiklasSyntaxError:
    return located(NiklasSyntaxError(message), tok)

def expect_ident_token(stream: TokenStream, context: str) -> str:
    tok = stream.peek()

    if tok is None or tok.type != TT.IDENT:
        got = "end of input" if tok is None else f"'{tok.value}'"
        raise syntax_error(f"{context} must be an identifier, got {got}", tok)

    stream.get()
    return tok.value

def render_tokens(tokens: Iterable[Tok]) -> str:
    return " ".join(tok.value for tok in tokens)
