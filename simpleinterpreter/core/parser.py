"""Parser: builds an AST from a Lexer with one token of lookahead.

Statements are parsed by recursive descent, expressions by precedence climbing. Formally:

```
<program>    ::= <statement>*
<statement>  ::= "let" <identifier> "=" <expr>
               | "return" <expr>
               | "while" "(" <expr> ")" <block>
               | <expr>
<block>      ::= "{" <statement>* "}"
<expr>       ::= <prefix> (<infix> | <postfix>)*       ; loops while the next operator binds tighter
<prefix>     ::= <int> | <string> | <identifier> | "true" | "false"
               | ("-" | "!") <expr>
               | "(" <expr> ")"
               | "if" "(" <expr> ")" <block> ["else" <block>]
               | "fn" "(" [<identifier> ("," <identifier>)*] ")" <block>
               | "[" [<expr> ("," <expr>)*] "]"
<infix>      ::= <operator> <expr>
               | "(" [<expr> ("," <expr>)*] ")"        ; call, left side must be callable
               | "[" <expr> "]"                        ; index, left side must be indexable
<postfix>    ::= "++" | "--"
```

Binding strength, lowest to highest: comparison < summation < multiplication < prefix < postfix < call < index.

Errors are collected as strings in Parser.errors. Any error aborts the construct being parsed, and parse() returns None
once an error has been recorded.
"""

from enum import Enum, IntEnum

from simpleinterpreter.core import ast
from simpleinterpreter.core.tokens import EOF_TOKEN, TokenType


class Precedence(IntEnum):
    LOWEST = 0
    COMPARISON = 1
    SUMMATION = 2
    MULTIPLICATION = 3
    PREFIX = 4
    POSTFIX = 5
    CALL = 6
    INDEX = 7


class Operator(Enum):
    """Operators as they appear in the AST. The value is the operator's symbol."""
    PLUS = "+"
    MINUS = "-"
    ASTERISK = "*"
    SLASH = "/"
    NEG = "!"
    LT = "<"
    GT = ">"
    EQ = "=="
    NEQ = "!="
    LTEQ = "<="
    GTEQ = ">="
    INCREMENT = "++"
    DECREMENT = "--"

    @staticmethod
    def from_token(kind):
        """Returns the Operator for token kind, or None if kind is not an operator."""
        return _OPERATORS.get(kind)


_OPERATORS = {
    TokenType.PLUS: Operator.PLUS,
    TokenType.MINUS: Operator.MINUS,
    TokenType.ASTERISK: Operator.ASTERISK,
    TokenType.SLASH: Operator.SLASH,
    TokenType.NEG: Operator.NEG,
    TokenType.LT: Operator.LT,
    TokenType.GT: Operator.GT,
    TokenType.EQ: Operator.EQ,
    TokenType.NEQ: Operator.NEQ,
    TokenType.LTEQ: Operator.LTEQ,
    TokenType.GTEQ: Operator.GTEQ,
    TokenType.INCREMENT: Operator.INCREMENT,
    TokenType.DECREMENT: Operator.DECREMENT,
}

PRECEDENCES = {
    TokenType.LT: Precedence.COMPARISON,
    TokenType.GT: Precedence.COMPARISON,
    TokenType.EQ: Precedence.COMPARISON,
    TokenType.NEQ: Precedence.COMPARISON,
    TokenType.LTEQ: Precedence.COMPARISON,
    TokenType.GTEQ: Precedence.COMPARISON,
    TokenType.PLUS: Precedence.SUMMATION,
    TokenType.MINUS: Precedence.SUMMATION,
    TokenType.ASTERISK: Precedence.MULTIPLICATION,
    TokenType.SLASH: Precedence.MULTIPLICATION,
    TokenType.INCREMENT: Precedence.POSTFIX,
    TokenType.DECREMENT: Precedence.POSTFIX,
    TokenType.LPAREN: Precedence.CALL,
    TokenType.LSQUARE: Precedence.INDEX,
}

INT32_MAX = 2 ** 31 - 1


class Parser:
    """Pratt parser over a Lexer. Holds the current token and one token of lookahead."""

    def __init__(self, lexer):
        self.lexer = lexer
        self.errors = []

        self.current = None
        self.peek = None

        self.prefix_fns = {
            TokenType.INT: self.parse_integer,
            TokenType.STRING: self.parse_string,
            TokenType.TRUE: self.parse_boolean,
            TokenType.FALSE: self.parse_boolean,
            TokenType.IDENTIFIER: self.parse_identifier,
            TokenType.MINUS: self.parse_prefix,
            TokenType.NEG: self.parse_prefix,
            TokenType.LPAREN: self.parse_grouped,
            TokenType.IF: self.parse_conditional,
            TokenType.FUNCTION: self.parse_function,
            TokenType.LSQUARE: self.parse_array,
        }

        self.infix_fns = {kind: self.parse_infix for kind in PRECEDENCES}
        self.infix_fns[TokenType.INCREMENT] = self.parse_postfix
        self.infix_fns[TokenType.DECREMENT] = self.parse_postfix
        self.infix_fns[TokenType.LPAREN] = self.parse_call
        self.infix_fns[TokenType.LSQUARE] = self.parse_index

        self.next_token()  # loads lookahead

    def next_token(self):
        """Shifts lookahead into current. Stays on EOF once input is exhausted."""
        self.current = self.peek
        self.peek = next(self.lexer) if self.lexer.has_next() else EOF_TOKEN

    def parse(self):
        """Parses the whole input. Returns a Program, or None if any error was recorded."""
        statements = []

        while self.peek != EOF_TOKEN:
            self.next_token()

            statement = self.parse_statement()
            if statement is None:
                break
            statements.append(statement)

        if self.peek != EOF_TOKEN:
            self.add_error(f"An error occurred while parsing program: current token is {self.current}, peek token is "
                           f"{self.peek}")

        if self.errors:
            return None
        return ast.Program(tuple(statements))

    # statements

    def parse_statement(self):
        if self.current.kind is TokenType.LET:
            return self.parse_let()
        elif self.current.kind is TokenType.RETURN:
            return self.parse_return()
        elif self.current.kind is TokenType.WHILE:
            return self.parse_while()
        return self.parse_expression_statement()

    def parse_let(self):
        """let <identifier> = <expr>"""
        self.next_token()  # let -> identifier

        name = self.parse_identifier()
        if name is None:
            return None

        self.next_token()  # identifier -> =
        if not self.expect(TokenType.ASSIGN):
            return None

        self.next_token()  # = -> expr

        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            return None
        return ast.LetStatement(name, value)

    def parse_return(self):
        """return <expr>"""
        self.next_token()  # return -> expr

        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            return None
        return ast.ReturnStatement(value)

    def parse_while(self):
        """while (<expr>) <block>"""
        condition = self.parse_condition()
        if condition is None:
            return None

        self.next_token()  # ) -> {

        body = self.parse_block()
        if body is None:
            return None
        return ast.WhileStatement(condition, body)

    def parse_expression_statement(self):
        expression = self.parse_expression(Precedence.LOWEST)
        if expression is None:
            return None
        return ast.ExpressionStatement(expression)

    def parse_block(self):
        """{ <statement>* }"""
        if not self.expect(TokenType.LBRACE):
            return None

        self.next_token()  # { -> statement

        statements = []
        while self.current.kind not in (TokenType.RBRACE, TokenType.EOF):
            statement = self.parse_statement()
            if statement is None:
                return None
            statements.append(statement)

            self.next_token()

        if not self.expect(TokenType.RBRACE):
            return None
        return ast.BlockStatement(tuple(statements))

    # expressions

    def parse_expression(self, precedence):
        """Precedence climbing: parses a prefix expression, then folds in operators that bind tighter than
        precedence.
        """
        prefix_fn = self.prefix_fns.get(self.current.kind)
        if prefix_fn is None:
            self.add_error(f"Unknown prefix function for expression: {self.current}")
            return None

        left = prefix_fn()

        while left is not None and precedence < PRECEDENCES.get(self.peek.kind, Precedence.LOWEST):
            self.next_token()  # left -> operator
            left = self.infix_fns[self.current.kind](left)

        return left

    def parse_integer(self):
        try:
            value = int(self.current.lexeme)
        except ValueError:
            value = None

        if value is None or value > INT32_MAX:
            self.add_error(f"not valid integer in current token: {self.current}")
            return None
        return ast.IntegerLiteral(value)

    def parse_string(self):
        return ast.StringExpression(self.current.lexeme)

    def parse_boolean(self):
        return ast.BooleanLiteral(self.current.kind is TokenType.TRUE)

    def parse_identifier(self):
        if not self.expect(TokenType.IDENTIFIER):
            return None
        return ast.IdentifierExpression(self.current.lexeme)

    def parse_prefix(self):
        operator = Operator.from_token(self.current.kind)

        self.next_token()  # operator -> operand

        operand = self.parse_expression(Precedence.PREFIX)
        if operand is None:
            return None
        return ast.PrefixExpression(operator, operand)

    def parse_infix(self, left):
        operator = Operator.from_token(self.current.kind)
        precedence = PRECEDENCES[self.current.kind]

        self.next_token()  # operator -> right

        right = self.parse_expression(precedence)
        if right is None:
            return None
        return ast.InfixExpression(operator, left, right)

    def parse_postfix(self, left):
        return ast.PostfixExpression(Operator.from_token(self.current.kind), left)

    def parse_grouped(self):
        """( <expr> ), no node is kept for the parentheses."""
        self.next_token()  # ( -> expr

        expression = self.parse_expression(Precedence.LOWEST)
        if expression is None:
            return None

        self.next_token()  # expr -> )
        if not self.expect(TokenType.RPAREN):
            return None
        return expression

    def parse_condition(self):
        """( <expr> ) following a keyword. Leaves current on the closing parenthesis."""
        self.next_token()  # keyword -> (
        if not self.expect(TokenType.LPAREN):
            return None

        self.next_token()  # ( -> expr

        condition = self.parse_expression(Precedence.LOWEST)
        if condition is None:
            return None

        self.next_token()  # expr -> )
        if not self.expect(TokenType.RPAREN):
            return None
        return condition

    def parse_conditional(self):
        """if (<expr>) <block> [else <block>]"""
        condition = self.parse_condition()
        if condition is None:
            return None

        self.next_token()  # ) -> {

        then_block = self.parse_block()
        if then_block is None:
            return None

        if self.peek.kind is not TokenType.ELSE:
            return ast.ConditionalExpression(condition, then_block)

        self.next_token()  # } -> else
        self.next_token()  # else -> {

        else_block = self.parse_block()
        if else_block is None:
            return None
        return ast.ConditionalExpression(condition, then_block, else_block)

    def parse_function(self):
        """fn (<identifier>, ...) <block>"""
        self.next_token()  # fn -> (
        if not self.expect(TokenType.LPAREN):
            return None

        params = self.parse_list(TokenType.RPAREN, self.parse_identifier)
        if params is None:
            return None

        self.next_token()  # ) -> {

        body = self.parse_block()
        if body is None:
            return None
        return ast.FunctionExpression(params, body)

    def parse_call(self, left):
        """<callable>(<expr>, ...)"""
        if not isinstance(left, ast.CallableExpression):
            self.add_error(f"Expected callable expression in left-hand side of call expression, got '{left}'")
            return None

        args = self.parse_list(TokenType.RPAREN, lambda: self.parse_expression(Precedence.LOWEST))
        if args is None:
            return None
        return ast.CallExpression(left, args)

    def parse_array(self):
        """[<expr>, ...]"""
        elements = self.parse_list(TokenType.RSQUARE, lambda: self.parse_expression(Precedence.LOWEST))
        if elements is None:
            return None
        return ast.ArrayExpression(elements)

    def parse_index(self, left):
        """<indexable>[<expr>]"""
        if not isinstance(left, ast.IndexableExpression):
            self.add_error(f"Expected indexable expression in left-hand side of index expression, got '{left}'")
            return None

        self.next_token()  # [ -> expr

        index = self.parse_expression(Precedence.LOWEST)
        if index is None:
            return None

        self.next_token()  # expr -> ]
        if not self.expect(TokenType.RSQUARE):
            return None
        return ast.IndexExpression(left, index)

    def parse_list(self, closing, parse_item):
        """Parses a possibly empty, comma separated list of items. Expects current to be the opening delimiter and
        leaves current on closing. Returns a tuple of items, or None on error.
        """
        items = []

        if self.peek.kind is not closing:
            self.next_token()  # opening -> item
            item = parse_item()
            if item is None:
                return None
            items.append(item)

            while self.peek.kind is TokenType.COMMA:
                self.next_token()  # item -> ,
                self.next_token()  # , -> item
                item = parse_item()
                if item is None:
                    return None
                items.append(item)

        self.next_token()  # items -> closing
        if not self.expect(closing):
            return None
        return tuple(items)

    # errors

    def expect(self, *kinds):
        """Whether or not current is one of kinds. Records an error if it isn't."""
        if self.current.kind in kinds:
            return True

        expected = " or ".join(kind.name for kind in kinds)
        self.add_error(f"Unexpected token {self.current}, expected {expected}")
        return False

    def add_error(self, msg):
        self.errors.append(msg)
