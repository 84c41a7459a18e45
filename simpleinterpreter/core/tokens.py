"""Lexical units of the language: token kinds, the keyword table and the immutable Token itself."""

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    # literals
    INT = auto()
    STRING = auto()

    # operators
    PLUS = auto()
    MINUS = auto()
    ASTERISK = auto()
    SLASH = auto()
    ASSIGN = auto()
    NEG = auto()
    LT = auto()
    GT = auto()
    EQ = auto()
    NEQ = auto()
    LTEQ = auto()
    GTEQ = auto()
    INCREMENT = auto()
    DECREMENT = auto()

    # delimiters
    LPAREN = auto()
    RPAREN = auto()
    LSQUARE = auto()
    RSQUARE = auto()
    LBRACE = auto()
    RBRACE = auto()
    COMMA = auto()

    # identifiers and keywords
    IDENTIFIER = auto()
    LET = auto()
    FUNCTION = auto()
    IF = auto()
    ELSE = auto()
    TRUE = auto()
    FALSE = auto()
    RETURN = auto()
    WHILE = auto()

    EOF = auto()
    ILLEGAL = auto()


KEYWORDS = {
    "let": TokenType.LET,
    "fn": TokenType.FUNCTION,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "return": TokenType.RETURN,
    "while": TokenType.WHILE,
}

# single character tokens that never start a two character operator
SINGLE = {
    "*": TokenType.ASTERISK,
    "/": TokenType.SLASH,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "[": TokenType.LSQUARE,
    "]": TokenType.RSQUARE,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    ",": TokenType.COMMA,
}

# first char: (single token, second char, two char token)
DOUBLE = {
    "+": (TokenType.PLUS, "+", TokenType.INCREMENT),
    "-": (TokenType.MINUS, "-", TokenType.DECREMENT),
    "=": (TokenType.ASSIGN, "=", TokenType.EQ),
    "!": (TokenType.NEG, "=", TokenType.NEQ),
    "<": (TokenType.LT, "=", TokenType.LTEQ),
    ">": (TokenType.GT, "=", TokenType.GTEQ),
}


def identify(identifier):
    """Returns the keyword kind of identifier, or IDENTIFIER if it is not a keyword."""
    return KEYWORDS.get(identifier, TokenType.IDENTIFIER)


@dataclass(frozen=True)
class Token:
    kind: TokenType
    lexeme: str

    def __str__(self):
        return f"({self.kind.name}, '{self.lexeme}')"


EOF_TOKEN = Token(TokenType.EOF, "")
