"""Abstract syntax tree produced by the parser and walked by the evaluator.

Every node is immutable and owns its children. The string form of a node is the parser's textual rendering, e.g.
`1+2*3` renders as `((1 + (2 * 3)))` inside a program. The rendering is lossy: grouping parentheses are not kept.

Two marker mixins describe what may stand on the left of a call or an index:
    - CallableExpression: identifier, call, index and function expressions
    - IndexableExpression: identifier, call, index, array and string expressions
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


class Node(ABC):
    """Superclass of every AST node."""

    @abstractmethod
    def __str__(self):
        """This method should return the textual rendering of the node."""


class Statement(Node, ABC):
    """Superclass of nodes that can appear directly in a program or block."""


class Expression(Node, ABC):
    """Superclass of nodes that produce a value."""


class CallableExpression(Expression, ABC):
    """Expressions allowed on the left-hand side of a call expression."""


class IndexableExpression(Expression, ABC):
    """Expressions allowed on the left-hand side of an index expression."""


def _join(nodes, sep=","):
    return sep.join(str(node) for node in nodes)


# statements

@dataclass(frozen=True)
class Program(Node):
    statements: tuple = ()

    def __str__(self):
        return "{\n" + "".join(f"\t{statement}\n" for statement in self.statements) + "}"


@dataclass(frozen=True)
class BlockStatement(Statement):
    statements: tuple = ()

    def __str__(self):
        return "{ " + _join(self.statements, " ; ") + " }"


@dataclass(frozen=True)
class LetStatement(Statement):
    name: "IdentifierExpression"
    value: Expression

    def __str__(self):
        return f"({self.name} = {self.value})"


@dataclass(frozen=True)
class ReturnStatement(Statement):
    value: Expression

    def __str__(self):
        return f"(return {self.value})"


@dataclass(frozen=True)
class ExpressionStatement(Statement):
    expression: Expression

    def __str__(self):
        return f"({self.expression})"


@dataclass(frozen=True)
class WhileStatement(Statement):
    condition: Expression
    body: BlockStatement

    def __str__(self):
        return f"while ({self.condition}) {self.body}"


# expressions

@dataclass(frozen=True)
class IdentifierExpression(CallableExpression, IndexableExpression):
    name: str

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class IntegerLiteral(Expression):
    value: int

    def __str__(self):
        return str(self.value)


@dataclass(frozen=True)
class BooleanLiteral(Expression):
    value: bool

    def __str__(self):
        return "true" if self.value else "false"


@dataclass(frozen=True)
class StringExpression(IndexableExpression):
    value: str

    def __str__(self):
        return f"\"{self.value}\""


@dataclass(frozen=True)
class PrefixExpression(Expression):
    operator: "Operator"
    operand: Expression

    def __str__(self):
        return f"({self.operator.value}{self.operand})"


@dataclass(frozen=True)
class InfixExpression(Expression):
    operator: "Operator"
    left: Expression
    right: Expression

    def __str__(self):
        return f"({self.left} {self.operator.value} {self.right})"


@dataclass(frozen=True)
class PostfixExpression(Expression):
    operator: "Operator"
    operand: Expression

    def __str__(self):
        return f"({self.operand}{self.operator.value})"


@dataclass(frozen=True)
class ConditionalExpression(Expression):
    condition: Expression
    then_block: BlockStatement
    else_block: Optional[BlockStatement] = None

    def __str__(self):
        result = f"if ({self.condition}) {self.then_block}"
        if self.else_block is not None:
            result += f" else {self.else_block}"
        return result


@dataclass(frozen=True)
class FunctionExpression(CallableExpression):
    params: tuple
    body: BlockStatement

    def __str__(self):
        return f"fn({_join(self.params)}) {self.body}"


@dataclass(frozen=True)
class CallExpression(CallableExpression, IndexableExpression):
    callee: Expression
    args: tuple = ()

    def __str__(self):
        return f"{self.callee}({_join(self.args)})"


@dataclass(frozen=True)
class ArrayExpression(IndexableExpression):
    elements: tuple = ()

    def __str__(self):
        return f"[{_join(self.elements)}]"


@dataclass(frozen=True)
class IndexExpression(CallableExpression, IndexableExpression):
    target: Expression
    index: Expression

    def __str__(self):
        return f"{self.target}[{self.index}]"
