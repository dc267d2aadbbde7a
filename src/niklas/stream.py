"""
Token streams for Niklas

A TokenStream is a cursor over an immutable tuple of tokens. Every parse
context (outer program, block body, loop condition) gets its own cursor, so
re-running a captured block never disturbs the stream it came from.
"""

from __future__ import annotations

from typing import Iterable, Optional, Tuple

from .token_types import TT, Tok
from .types import NiklasSyntaxError, located


class TokenStream:
    __slots__ = ("tokens", "pos")

    def __init__(self, tokens: Iterable[Tok], pos: int = 0):
        self.tokens: Tuple[Tok, ...] = tuple(tokens)
        self.pos = pos

    def __repr__(self) -> str:
        return f"TokenStream(pos={self.pos}, remaining={len(self.tokens) - self.pos})"

    def __bool__(self) -> bool:
        return self.pos < len(self.tokens)

    # ========================================================================
    # Cursor
    # ========================================================================

    def peek(self, offset: int = 0) -> Optional[Tok]:
        idx = self.pos + offset
        if idx < len(self.tokens):
            return self.tokens[idx]
        return None

    def check(self, *types: TT) -> bool:
        tok = self.peek()
        return tok is not None and tok.type in types

    def get(self) -> Tok:
        tok = self.peek()
        if tok is None:
            raise NiklasSyntaxError("Unexpected end of input")
        self.pos += 1
        return tok

    def accept(self, token_type: TT) -> Optional[Tok]:
        """Consume the next token only if it has the given type."""
        if self.check(token_type):
            return self.get()
        return None

    def expect(self, token_type: TT, message: str) -> Tok:
        tok = self.peek()
        if tok is None or tok.type != token_type:
            raise _syntax_error(message, tok)
        self.pos += 1
        return tok

    def last(self) -> Optional[Tok]:
        """Most recently consumed token."""
        return self.tokens[self.pos - 1] if self.pos > 0 else None

    # ========================================================================
    # Blocks
    # ========================================================================

    def collect_block(self) -> Tuple[Tok, ...]:
        """
        Capture the body of a block whose opening brace was just consumed.

        Consumes through the matching closing brace and returns the tokens
        strictly between the braces. Comment bodies are single tokens, so
        braces written inside comments never affect the count.
        """
        start = self.pos
        end = self._matching_brace()
        self.pos = end + 1
        return self.tokens[start:end]

    def skip_block(self) -> None:
        """Skip a block whose opening brace was just consumed."""
        self.pos = self._matching_brace() + 1

    def collect_until_block(self) -> Tuple[Tok, ...]:
        """
        Capture tokens up to the next `{` outside parentheses and consume it.

        Used for conditions that are re-evaluated on every loop iteration.
        """
        depth = 0
        idx = self.pos

        while idx < len(self.tokens):
            tok = self.tokens[idx]

            if tok.type == TT.LPAR:
                depth += 1
            elif tok.type == TT.RPAR:
                depth -= 1
            elif tok.type == TT.LBRACE and depth <= 0:
                captured = self.tokens[self.pos:idx]
                self.pos = idx + 1
                return captured
            idx += 1

        raise _syntax_error("Expected '{' to start a block", self.peek())

    def _matching_brace(self) -> int:
        depth = 1
        idx = self.pos

        while idx < len(self.tokens):
            tok_type = self.tokens[idx].type

            if tok_type == TT.LBRACE:
                depth += 1
            elif tok_type == TT.RBRACE:
                depth -= 1
                if depth == 0:
                    return idx
            idx += 1

        opener = self.tokens[self.pos - 1] if self.pos > 0 else None
        raise _syntax_error("Unmatched brace: block is never closed", opener)


def _syntax_error(message: str, tok: Optional[Tok]) -> NiklasSyntaxError:
    return located(NiklasSyntaxError(message if tok is None else f"{message}, got '{tok.value}'"), tok)
