"""prompt_toolkit lexer for live Niklas syntax highlighting in the REPL."""

from __future__ import annotations

from typing import Callable

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .lexer import Lexer as NikLexer, LexError
from .token_types import TT, Tok

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "boolean": "ansicyan",
    "number": "ansimagenta",
    "string": "ansigreen",
    "identifier": "",
    "function": "bold ansiyellow",
    "operator": "",
    "punctuation": "",
    "comment": "italic ansigray",
    "type": "bold ansiblue",
}

_TT_GROUP = {
    TT.VAR: "keyword",
    TT.VAL: "keyword",
    TT.DEF: "keyword",
    TT.IF: "keyword",
    TT.ELSE: "keyword",
    TT.FROM: "keyword",
    TT.TO: "keyword",
    TT.WITH: "keyword",
    TT.WHILE: "keyword",
    TT.REPEAT: "keyword",
    TT.RETURN: "keyword",
    TT.ASSERT: "keyword",
    TT.TRUE: "boolean",
    TT.FALSE: "boolean",
    TT.NUMBER: "number",
    TT.STRING: "string",
    TT.IDENT: "identifier",
    TT.PLUS: "operator",
    TT.MINUS: "operator",
    TT.STAR: "operator",
    TT.SLASH: "operator",
    TT.MOD: "operator",
    TT.EQ: "operator",
    TT.LT: "operator",
    TT.GT: "operator",
    TT.AND: "operator",
    TT.OR: "operator",
    TT.NEG: "operator",
    TT.ASSIGN: "operator",
    TT.INCR: "operator",
    TT.DECR: "operator",
    TT.LPAR: "punctuation",
    TT.RPAR: "punctuation",
    TT.LBRACE: "punctuation",
    TT.RBRACE: "punctuation",
    TT.COMMA: "punctuation",
    TT.COLON: "punctuation",
    TT.COMMENT: "comment",
    TT.COMMENT_OPEN: "comment",
    TT.COMMENT_CLOSE: "comment",
}

TYPE_WORDS = {"number", "string", "boolean", "function", "any"}


def _group_for(tokens: list[Tok], idx: int) -> str:
    tok = tokens[idx]
    group = _TT_GROUP.get(tok.type, "")

    if tok.type != TT.IDENT:
        return group

    prev_tok = tokens[idx - 1] if idx > 0 else None
    next_tok = tokens[idx + 1] if idx + 1 < len(tokens) else None

    # `: number` annotations
    if prev_tok is not None and prev_tok.type == TT.COLON and tok.value in TYPE_WORDS:
        return "type"

    # def name( ... ) and call sites
    if (prev_tok is not None and prev_tok.type == TT.DEF) or (next_tok is not None and next_tok.type == TT.LPAR):
        return "function"

    return group


def _highlight_document(text: str) -> list[StyleAndTextTuples]:
    """
    Tokenize a whole buffer and split the styled fragments back into lines.

    Comment bodies and strings are single tokens, so they keep their style
    on every line they span. On a lex error the tokens scanned so far are
    still styled; an unterminated string colours the rest of the buffer.
    """
    starts = [0]
    for i, ch in enumerate(text):
        if ch == "\n":
            starts.append(i + 1)

    lexer = NikLexer(text)
    end = len(text)
    tail_style = ""

    try:
        tokens = lexer.tokenize()
    except LexError as exc:
        tokens = lexer.tokens
        end = starts[exc.line - 1] + exc.column - 1
        if text.startswith('"', end):
            tail_style = GROUP_STYLE["string"]

    lines: list[StyleAndTextTuples] = [[]]

    def emit(style: str, chunk: str) -> None:
        for i, part in enumerate(chunk.split("\n")):
            if i:
                lines.append([])
            if part:
                lines[-1].append((style, part))

    pos = 0
    for i, tok in enumerate(tokens):
        if not tok.value:
            continue

        idx = starts[tok.line - 1] + tok.column - 1
        if idx < pos:
            continue

        # Unstyled gap before token.
        if idx > pos:
            emit("", text[pos:idx])

        emit(GROUP_STYLE.get(_group_for(tokens, i), ""), tok.value)
        pos = idx + len(tok.value)

    if pos < end:
        emit("", text[pos:end])
        pos = end

    if pos < len(text):
        emit(tail_style, text[pos:])

    return [fragments or [("", "")] for fragments in lines]


def _highlight_line(text: str) -> StyleAndTextTuples:
    """Highlight a single line of source."""
    return _highlight_document(text)[0]


class NiklasLexer(Lexer):
    """prompt_toolkit Lexer that highlights the whole Niklas buffer at once."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        cache: list[list[StyleAndTextTuples]] = []

        def get_line(lineno: int) -> StyleAndTextTuples:
            if not cache:
                cache.append(_highlight_document(document.text))

            lines = cache[0]
            return lines[lineno] if lineno < len(lines) else [("", "")]

        return get_line
