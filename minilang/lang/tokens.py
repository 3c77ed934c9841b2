"""Tokens produced by the Lexer. A Token identifies one lexical unit of minilang source and its (inclusive) span."""

from dataclasses import dataclass
from enum import Enum, auto


class TokenKind(Enum):
    # punctuation
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    LEFT_BRACE = auto()
    RIGHT_BRACE = auto()
    LEFT_BRACKET = auto()
    RIGHT_BRACKET = auto()
    SEMICOLON = auto()
    COMMA = auto()
    DOT = auto()

    # operators
    MINUS = auto()
    PLUS = auto()
    PERCENT = auto()
    CARET = auto()
    TILDE = auto()
    SLASH = auto()
    STAR = auto()
    STAR_STAR = auto()
    BANG = auto()
    BANG_EQUAL = auto()
    EQUAL = auto()
    EQUAL_EQUAL = auto()
    LESS = auto()
    LESS_EQUAL = auto()
    LESS_LESS = auto()
    GREATER = auto()
    GREATER_EQUAL = auto()
    GREATER_GREATER = auto()
    AMPERSAND = auto()
    AMPERSAND_AMPERSAND = auto()
    PIPE = auto()
    PIPE_PIPE = auto()

    # literals
    STRING_LITERAL = auto()
    INTEGER_LITERAL = auto()
    FLOAT_LITERAL = auto()
    IDENTIFIER = auto()

    # keywords
    PRINT = auto()
    TRUE = auto()
    FALSE = auto()
    NULL = auto()
    INT = auto()
    FLOAT = auto()
    IF = auto()
    ELSE = auto()
    END = auto()
    WHILE = auto()
    FOR = auto()
    IN = auto()
    FUNCTION = auto()
    RETURN = auto()

    EOF = auto()


KEYWORDS = {
    "print": TokenKind.PRINT,
    "true": TokenKind.TRUE,
    "false": TokenKind.FALSE,
    "null": TokenKind.NULL,
    "int": TokenKind.INT,
    "float": TokenKind.FLOAT,
    "if": TokenKind.IF,
    "else": TokenKind.ELSE,
    "end": TokenKind.END,
    "while": TokenKind.WHILE,
    "for": TokenKind.FOR,
    "in": TokenKind.IN,
    "function": TokenKind.FUNCTION,
    "return": TokenKind.RETURN,
}


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str   # lexeme, or the inner text of a string literal
    start: int
    end: int    # inclusive

    def __str__(self):
        return f"Token({self.kind.name}, '{self.text}', {self.start}..{self.end})"
