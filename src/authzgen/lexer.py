"""Scanner for authorization schema files.

Turns schema text into a flat list of tokens. Comments are kept as their
own token type so tooling can see them; ``filter_comments`` strips them
before parsing.
"""

import logging
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class TokenType(Enum):
    # Special
    EOF = "EOF"
    ILLEGAL = "ILLEGAL"
    IDENTIFIER = "IDENTIFIER"
    COMMENT = "COMMENT"

    # Keywords
    DEFINITION = "definition"
    RELATION = "relation"
    PERMISSION = "permission"
    CAVEAT = "caveat"

    # Symbols
    LBRACE = "{"
    RBRACE = "}"
    LPAREN = "("
    RPAREN = ")"
    COLON = ":"
    PIPE = "|"
    AMPERSAND = "&"
    PLUS = "+"
    MINUS = "-"
    EQUALS = "="
    ARROW = "->"
    WILDCARD = ":*"


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: str
    line: int
    column: int


class Lexer:
    """Tokenizer for schema source.

    Never raises: characters outside the language become ILLEGAL tokens and
    the parser decides what to do with them.
    """

    KEYWORDS = {
        "definition": TokenType.DEFINITION,
        "relation": TokenType.RELATION,
        "permission": TokenType.PERMISSION,
        "caveat": TokenType.CAVEAT,
    }

    SINGLE_CHAR = {
        "{": TokenType.LBRACE,
        "}": TokenType.RBRACE,
        "(": TokenType.LPAREN,
        ")": TokenType.RPAREN,
        "|": TokenType.PIPE,
        "&": TokenType.AMPERSAND,
        "+": TokenType.PLUS,
        "=": TokenType.EQUALS,
    }

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: list[Token] = []

    def tokenize(self) -> list[Token]:
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens = []

        while True:
            self._skip_whitespace()
            if self.pos >= len(self.source):
                break

            ch = self.source[self.pos]

            if ch == "/":
                self._read_slash()
            elif self._is_identifier_part(ch):
                self._read_identifier()
            else:
                self._read_symbol()

        self.tokens.append(Token(TokenType.EOF, "", self.line, self.column))
        logger.debug("scanned %d tokens over %d lines", len(self.tokens), self.line)
        return self.tokens

    def _peek(self, offset: int = 0) -> str:
        pos = self.pos + offset
        if pos < len(self.source):
            return self.source[pos]
        return ""

    def _advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        if ch == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return ch

    def _emit(self, token_type: TokenType, value: str, line: int, column: int) -> None:
        self.tokens.append(Token(token_type, value, line, column))

    def _skip_whitespace(self) -> None:
        while self.pos < len(self.source) and self.source[self.pos].isspace():
            self._advance()

    @staticmethod
    def _is_identifier_part(ch: str) -> bool:
        return ch.isalpha() or ch.isdecimal() or ch == "_" or ch == "/"

    def _read_slash(self) -> None:
        start_line, start_col = self.line, self.column
        nxt = self._peek(1)

        if nxt == "/":
            while self.pos < len(self.source) and self.source[self.pos] != "\n":
                self._advance()
            self._emit(TokenType.COMMENT, "//", start_line, start_col)
        elif nxt == "*":
            self._advance()
            self._advance()
            while self.pos < len(self.source):
                if self._peek() == "*" and self._peek(1) == "/":
                    # The closing marker belongs to the comment region
                    self._advance()
                    self._advance()
                    break
                self._advance()
            self._emit(TokenType.COMMENT, "/*", start_line, start_col)
        else:
            self._advance()
            self._emit(TokenType.ILLEGAL, "/", start_line, start_col)

    def _read_identifier(self) -> None:
        start_line, start_col = self.line, self.column
        start = self.pos

        while self.pos < len(self.source) and self._is_identifier_part(self.source[self.pos]):
            self._advance()

        value = self.source[start : self.pos]
        token_type = self.KEYWORDS.get(value, TokenType.IDENTIFIER)
        self._emit(token_type, value, start_line, start_col)

    def _read_symbol(self) -> None:
        start_line, start_col = self.line, self.column
        ch = self._advance()

        # Two-character operators
        if ch == ":" and self._peek() == "*":
            self._advance()
            self._emit(TokenType.WILDCARD, ":*", start_line, start_col)
        elif ch == "-" and self._peek() == ">":
            self._advance()
            self._emit(TokenType.ARROW, "->", start_line, start_col)
        # Single-character operators
        elif ch == ":":
            self._emit(TokenType.COLON, ch, start_line, start_col)
        elif ch == "-":
            self._emit(TokenType.MINUS, ch, start_line, start_col)
        elif ch in self.SINGLE_CHAR:
            self._emit(self.SINGLE_CHAR[ch], ch, start_line, start_col)
        else:
            self._emit(TokenType.ILLEGAL, ch, start_line, start_col)


def tokenize(source: str) -> list[Token]:
    """Scan schema source into tokens, comments included."""
    return Lexer(source).tokenize()


def filter_comments(tokens: list[Token]) -> list[Token]:
    """Drop COMMENT tokens, keeping everything else in order."""
    return [tok for tok in tokens if tok.type is not TokenType.COMMENT]
