"""
Lexer for Niklas

Tokenizes Niklas source code into a flat list of tokens.

Features:
- Single-pass tokenization
- Longest-match operator table
- Position tracking (line, column)
- Block comments kept as delimiter tokens around a single body token
"""

from typing import List

from .token_types import TT, Tok
from .types import NiklasSyntaxError

# ============================================================================
# Lexer Implementation
# ============================================================================

class Lexer:
    """
    Niklas lexer.

    Whitespace and newlines never become tokens; they only move the
    position counters used for error reporting.
    """

    # Keyword mapping
    KEYWORDS = {
        'var': TT.VAR,
        'val': TT.VAL,
        'def': TT.DEF,
        'if': TT.IF,
        'else': TT.ELSE,
        'from': TT.FROM,
        'to': TT.TO,
        'with': TT.WITH,
        'while': TT.WHILE,
        'repeat': TT.REPEAT,
        'return': TT.RETURN,
        'assert': TT.ASSERT,
        'true': TT.TRUE,
        'false': TT.FALSE,
    }

    # Operator mapping: longest matches first to handle prefixes correctly
    OPERATORS = [
        # Two-character operators
        ('/*', TT.COMMENT_OPEN),
        ('*/', TT.COMMENT_CLOSE),
        ('==', TT.EQ),
        ('&&', TT.AND),
        ('||', TT.OR),
        ('++', TT.INCR),
        ('--', TT.DECR),

        # Single-character operators
        ('+', TT.PLUS),
        ('-', TT.MINUS),
        ('*', TT.STAR),
        ('/', TT.SLASH),
        ('%', TT.MOD),
        ('<', TT.LT),
        ('>', TT.GT),
        ('!', TT.NEG),
        ('=', TT.ASSIGN),
        ('(', TT.LPAR),
        (')', TT.RPAR),
        ('{', TT.LBRACE),
        ('}', TT.RBRACE),
        (',', TT.COMMA),
        (':', TT.COLON),
    ]

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Tok] = []

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def tokenize(self) -> List[Tok]:
        """Tokenize entire source, return token list"""
        while self.pos < len(self.source):
            self.scan_token()

        return self.tokens

    def scan_token(self):
        """Scan next token"""
        if self.skip_whitespace():
            return

        # Line comments
        if self.source.startswith('//', self.pos):
            self.scan_line_comment()
            return

        # Block comments
        if self.source.startswith('/*', self.pos):
            self.scan_block_comment()
            return

        # String literals
        if self.peek() == '"':
            self.scan_string()
            return

        # Numbers
        if _is_digit(self.peek()) or (self.peek() == '.' and _is_digit(self.peek(1))):
            self.scan_number()
            return

        # Identifiers and keywords
        if _is_ident_start(self.peek()):
            self.scan_identifier()
            return

        # Operators and punctuation
        self.scan_operator()

    # ========================================================================
    # Token Scanners
    # ========================================================================

    def scan_line_comment(self):
        """Scan // comment up to (not including) the end of line"""
        line, column = self.line, self.column
        value = ''

        while self.pos < len(self.source) and self.peek() not in ('\n', '\r'):
            value += self.advance()

        self.emit(TT.COMMENT, value, line, column)

    def scan_block_comment(self):
        """Scan /* ... */ as open delimiter, body text and close delimiter"""
        line, column = self.line, self.column
        self.emit(TT.COMMENT_OPEN, self.advance(2), line, column)
        line, column = self.line, self.column
        body = ''

        while self.pos < len(self.source) and not self.source.startswith('*/', self.pos):
            body += self.advance()

        if body.strip():
            self.emit(TT.COMMENT, body, line, column)

        if self.pos < len(self.source):
            line, column = self.line, self.column
            self.emit(TT.COMMENT_CLOSE, self.advance(2), line, column)

    def scan_string(self):
        """Scan string literal: "..." (no escape sequences)"""
        line, column = self.line, self.column
        value = self.advance()  # Keep opening quote

        while self.pos < len(self.source) and self.peek() != '"':
            value += self.advance()

        if self.pos >= len(self.source):
            raise LexError(f"Unterminated string at line {line}", line, column)

        value += self.advance()  # Closing quote
        self.emit(TT.STRING, value, line, column)

    def scan_number(self):
        """Scan number literal: digits with an optional single fraction"""
        line, column = self.line, self.column
        value = ''

        while _is_digit(self.peek()):
            value += self.advance()

        if self.peek() == '.' and _is_digit(self.peek(1)):
            value += self.advance()  # .
            while _is_digit(self.peek()):
                value += self.advance()

        self.emit(TT.NUMBER, value, line, column)

    def scan_identifier(self):
        """Scan identifier or keyword"""
        line, column = self.line, self.column
        value = ''

        while _is_ident_start(self.peek()) or _is_digit(self.peek()):
            value += self.advance()

        # Check if keyword
        token_type = self.KEYWORDS.get(value, TT.IDENT)
        self.emit(token_type, value, line, column)

    def scan_operator(self):
        """Scan operators and punctuation"""
        line, column = self.line, self.column

        for op_str, op_type in self.OPERATORS:
            if self.source.startswith(op_str, self.pos):
                self.advance(len(op_str))
                self.emit(op_type, op_str, line, column)
                return

        ch = self.peek()
        raise LexError(f"Unexpected character '{ch}' at line {self.line}, col {self.column}", line, column)

    # ========================================================================
    # Utilities
    # ========================================================================

    def peek(self, offset: int = 0) -> str:
        """Look ahead at character"""
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def advance(self, n: int = 1) -> str:
        """Consume n characters and return them as a string"""
        result = ''
        for _ in range(n):
            ch = self.source[self.pos] if self.pos < len(self.source) else '\0'
            result += ch
            self.pos += 1
            if ch == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
        return result

    def skip_whitespace(self) -> bool:
        """Skip whitespace including newlines, return True if any skipped"""
        skipped = False
        while self.pos < len(self.source) and self.peek().isspace():
            self.advance()
            skipped = True
        return skipped

    def emit(self, token_type: TT, value: str, line: int, column: int):
        """Emit a token starting at (line, column)"""
        tok = Tok(
            type=token_type,
            value=value,
            line=line,
            column=column,
        )
        self.tokens.append(tok)


class LexError(NiklasSyntaxError):
    """Lexical analysis error"""

    def __init__(self, message: str, line: int, column: int):
        super().__init__(message)
        self.line = line
        self.column = column

    def __str__(self) -> str:
        return Exception.__str__(self)


def _is_ident_start(ch: str) -> bool:
    return ch == '_' or ('a' <= ch <= 'z') or ('A' <= ch <= 'Z')


def _is_digit(ch: str) -> bool:
    return '0' <= ch <= '9'


def tokenize(source: str) -> List[Tok]:
    """Convenience function to tokenize source"""
    lexer = Lexer(source)
    return lexer.tokenize()
