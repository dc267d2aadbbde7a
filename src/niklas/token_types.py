"""
Token Types for Niklas

Shared between the lexer, the token stream and the REPL highlighter.
"""

from dataclasses import dataclass
from enum import Enum, auto


class TT(Enum):
    """Token Types - inferred by the lexer from the token's shape"""

    # Literals
    NUMBER = auto()
    STRING = auto()
    IDENT = auto()

    # Keywords
    VAR = auto()
    VAL = auto()
    DEF = auto()
    IF = auto()
    ELSE = auto()
    FROM = auto()
    TO = auto()
    WITH = auto()
    WHILE = auto()
    REPEAT = auto()
    RETURN = auto()
    ASSERT = auto()
    TRUE = auto()
    FALSE = auto()

    # Arithmetic
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    MOD = auto()

    # Comparison
    EQ = auto()
    LT = auto()
    GT = auto()

    # Logical
    AND = auto()
    OR = auto()
    NEG = auto()  # !

    # Assignment
    ASSIGN = auto()

    # Increment/Decrement
    INCR = auto()  # ++
    DECR = auto()  # --

    # Punctuation
    LPAR = auto()
    RPAR = auto()
    LBRACE = auto()
    RBRACE = auto()
    COMMA = auto()
    COLON = auto()

    # Comments
    COMMENT_OPEN = auto()  # /*
    COMMENT_CLOSE = auto()  # */
    COMMENT = auto()


@dataclass(frozen=True)
class Tok:
    """Token with position info"""

    type: TT
    value: str
    line: int = 0
    column: int = 0

    def __repr__(self):
        return f"Tok({self.type.name}, {self.value!r}, {self.line}:{self.column})"
