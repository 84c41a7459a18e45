"""Tokenizer: converts a source string into a lazy sequence of tokens. It knows nothing about grammar.

Lexical rules, loosely:

```
<int>        ::= <digit>+                            ; raw lexeme, overflow is the parser's business
<identifier> ::= (<letter> | "_") (<letter> | <digit> | "_")*
                                                     ; looked up in the keyword table first
<string>     ::= '"' <char>* '"'                     ; verbatim, whitespace included, no escapes
<operator>   ::= "+" | "-" | "*" | "/" | "!" | "<" | ">" | "="
               | "==" | "!=" | "<=" | ">=" | "++" | "--"
<delimiter>  ::= "(" | ")" | "[" | "]" | "{" | "}" | ","
```

Whitespace between tokens is skipped. Any other character becomes an ILLEGAL token, and so does a string that runs
into the end of input before its closing quote (carrying the partial content).
"""

from simpleinterpreter.core.tokens import DOUBLE, SINGLE, Token, TokenType, identify


class Lexer:
    """Single-pass token iterator over a source string. Once exhausted it cannot be restarted."""
    DQUOTE = "\""

    def __init__(self, source):
        self.source = source.strip()
        self.pos = 0

    def has_next(self):
        """Whether or not another token can be produced. Surrounding whitespace is stripped on construction, so any
        remaining character means at least one more token.
        """
        return self.pos < len(self.source)

    def __iter__(self):
        return self

    def __next__(self):
        if not self.has_next():
            raise StopIteration("already reached EOF")

        self._skip_whitespace()
        char = self.source[self.pos]

        if char in SINGLE:
            self.pos += 1
            return Token(SINGLE[char], char)

        elif char in DOUBLE:
            single, second, double = DOUBLE[char]
            if self._peek() == second:
                self.pos += 2
                return Token(double, char + second)
            self.pos += 1
            return Token(single, char)

        elif char == Lexer.DQUOTE:
            return self._read_string()

        elif char.isdigit():
            return Token(TokenType.INT, self._read_while(str.isdigit))

        elif Lexer.is_identifier_start(char):
            identifier = self._read_while(Lexer.is_identifier_middle)
            return Token(identify(identifier), identifier)

        self.pos += 1
        return Token(TokenType.ILLEGAL, char)

    def next(self):
        """Alias of next(lexer)."""
        return self.__next__()

    @staticmethod
    def is_identifier_start(char):
        return char.isalpha() or char == "_"

    @staticmethod
    def is_identifier_middle(char):
        return Lexer.is_identifier_start(char) or char.isdigit()

    def _peek(self):
        """Returns the character after the current one, or an empty string at the end of input."""
        return self.source[self.pos + 1:self.pos + 2]

    def _skip_whitespace(self):
        while self.pos < len(self.source) and self.source[self.pos].isspace():
            self.pos += 1

    def _read_while(self, predicate):
        start = self.pos
        while self.pos < len(self.source) and predicate(self.source[self.pos]):
            self.pos += 1
        return self.source[start:self.pos]

    def _read_string(self):
        self.pos += 1  # opening quote
        end = self.source.find(Lexer.DQUOTE, self.pos)

        if end == -1:
            content = self.source[self.pos:]
            self.pos = len(self.source)
            return Token(TokenType.ILLEGAL, content)

        content = self.source[self.pos:end]
        self.pos = end + 1
        return Token(TokenType.STRING, content)
