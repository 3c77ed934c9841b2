"""Lexical analysis for minilang: breaks a source string into a list of Tokens.

Tokens are matched greedily (maximal munch), so that `**` is preferred over `*`, `<<` and `<=` over `<`, `&&` over `&`,
and so on. Grammar of the literals can be loosely defined as follows:

```
<identifier> ::= [A-Za-z_] [A-Za-z0-9_]*    ; reclassified as a keyword if found in tokens.KEYWORDS
<integer>    ::= [0-9]+
<float>      ::= [0-9]+ "." [0-9]+          ; a bare trailing "." is not part of the number
<string>     ::= '"' <char>* '"'            ; no escape sequences, inner text is passed through as is
<comment>    ::= "//" <char>* "\n"
```
"""

from minilang.lang.error import LexicalError
from minilang.lang.tokens import KEYWORDS, Token, TokenKind


class Lexer:
    """Single left-to-right scanner with one character of lookahead (two when looking for floats)."""
    SINGLE = {
        "(": TokenKind.LEFT_PAREN,
        ")": TokenKind.RIGHT_PAREN,
        "{": TokenKind.LEFT_BRACE,
        "}": TokenKind.RIGHT_BRACE,
        "[": TokenKind.LEFT_BRACKET,
        "]": TokenKind.RIGHT_BRACKET,
        ";": TokenKind.SEMICOLON,
        ",": TokenKind.COMMA,
        ".": TokenKind.DOT,
        "-": TokenKind.MINUS,
        "+": TokenKind.PLUS,
        "%": TokenKind.PERCENT,
        "^": TokenKind.CARET,
        "~": TokenKind.TILDE,
    }

    # char: [(second char, kind), ...], fallback kind when no second char matches
    DOUBLE = {
        "*": ([("*", TokenKind.STAR_STAR)], TokenKind.STAR),
        "!": ([("=", TokenKind.BANG_EQUAL)], TokenKind.BANG),
        "=": ([("=", TokenKind.EQUAL_EQUAL)], TokenKind.EQUAL),
        "<": ([("=", TokenKind.LESS_EQUAL), ("<", TokenKind.LESS_LESS)], TokenKind.LESS),
        ">": ([("=", TokenKind.GREATER_EQUAL), (">", TokenKind.GREATER_GREATER)], TokenKind.GREATER),
        "&": ([("&", TokenKind.AMPERSAND_AMPERSAND)], TokenKind.AMPERSAND),
        "|": ([("|", TokenKind.PIPE_PIPE)], TokenKind.PIPE),
    }

    WHITESPACE = " \r\t\n"

    def __init__(self, source):
        self.source = source
        self.tokens = []
        self._start = 0
        self._current = 0

    def tokenize(self):
        """Scans the whole source. Always ends with exactly one EOF token spanning the empty range at len(source)."""
        while not self.at_end:
            self._start = self._current
            self._scan_token()

        self.tokens.append(Token(TokenKind.EOF, "", len(self.source), len(self.source)))
        return self.tokens

    def _scan_token(self):
        char = self._advance()

        if char in Lexer.SINGLE:
            self._emit(Lexer.SINGLE[char])

        elif char in Lexer.DOUBLE:
            seconds, fallback = Lexer.DOUBLE[char]
            for second, kind in seconds:
                if self._match(second):
                    self._emit(kind)
                    break
            else:
                self._emit(fallback)

        elif char == "/":
            if self._match("/"):
                self._skip_comment()
            else:
                self._emit(TokenKind.SLASH)

        elif char in Lexer.WHITESPACE:
            pass

        elif char == "\"":
            self._string()

        elif Lexer.is_digit(char):
            self._number()

        elif Lexer.is_alpha(char):
            self._identifier()

        else:
            raise LexicalError(f"Unrecognized character '{char}'.", self._start)

    def _identifier(self):
        while Lexer.is_alphanumeric(self._peek()):
            self._advance()

        text = self.source[self._start:self._current]
        self._emit(KEYWORDS.get(text, TokenKind.IDENTIFIER))

    def _number(self):
        while Lexer.is_digit(self._peek()):
            self._advance()

        if self._peek() == "." and Lexer.is_digit(self._peek_next()):
            self._advance()  # consume "."
            while Lexer.is_digit(self._peek()):
                self._advance()
            self._emit(TokenKind.FLOAT_LITERAL)
        else:
            self._emit(TokenKind.INTEGER_LITERAL)

    def _string(self):
        while not self.at_end and self._peek() != "\"":
            self._advance()

        if self.at_end:
            raise LexicalError("Unterminated string.", self._start)

        self._advance()  # closing "
        self._emit(TokenKind.STRING_LITERAL, self.source[self._start + 1:self._current - 1])

    def _skip_comment(self):
        while not self.at_end and self._peek() != "\n":
            self._advance()

    @staticmethod
    def is_digit(char):
        return "0" <= char <= "9"

    @staticmethod
    def is_alpha(char):
        return "a" <= char <= "z" or "A" <= char <= "Z" or char == "_"

    @staticmethod
    def is_alphanumeric(char):
        return Lexer.is_alpha(char) or Lexer.is_digit(char)

    @property
    def at_end(self):
        return self._current >= len(self.source)

    def _advance(self):
        self._current += 1
        return self.source[self._current - 1]

    def _match(self, expected):
        """Consumes the current character if it is expected."""
        if self.at_end or self.source[self._current] != expected:
            return False
        self._current += 1
        return True

    def _peek(self):
        return "\0" if self.at_end else self.source[self._current]

    def _peek_next(self):
        return "\0" if self._current + 1 >= len(self.source) else self.source[self._current + 1]

    def _emit(self, kind, text=None):
        if text is None:
            text = self.source[self._start:self._current]
        self.tokens.append(Token(kind, text, self._start, self._current - 1))
