"""Tree-walking evaluator.

Evaluator.eval never raises for language-level problems: they become ErrorObjects. ErrorObjects and ReturnObjects are
signals: every step that combines sub-results checks for them and forwards them untouched, so a `return` nested in an
operand, an array element or an argument still leaves the enclosing function. A ReturnObject is unwrapped by a function
call or by the program itself.

Host stack exhaustion is only caught by Evaluator.run; calling eval directly lets RecursionError through.
"""

from simpleinterpreter.core import ast
from simpleinterpreter.core.builtin_functions import builtin_table
from simpleinterpreter.core.environment import Environment
from simpleinterpreter.core.objects import (NULL, ArrayObject, BooleanObject, BuiltinFunction, ErrorObject,
                                            FunctionObject, IntegerObject, ObjectType, ReturnObject, StringObject,
                                            int32)
from simpleinterpreter.core.parser import Operator


def is_error(obj):
    return isinstance(obj, ErrorObject)


def is_signal(obj):
    """Whether or not obj is an Error or a Return, which are forwarded unchanged instead of being used as data."""
    return isinstance(obj, (ErrorObject, ReturnObject))


class Evaluator:
    """Evaluates AST nodes against an Environment. Owns the builtin table."""

    def __init__(self, null_on_empty=True):
        self.builtins = builtin_table(null_on_empty)

        self.dispatch = {
            ast.Program: self.eval_program,
            ast.BlockStatement: self.eval_block,
            ast.ExpressionStatement: lambda node, env: self.eval(node.expression, env),
            ast.LetStatement: self.eval_let,
            ast.ReturnStatement: self.eval_return,
            ast.WhileStatement: self.eval_while,
            ast.IdentifierExpression: self.eval_identifier,
            ast.IntegerLiteral: lambda node, env: IntegerObject(node.value),
            ast.BooleanLiteral: lambda node, env: BooleanObject(node.value),
            ast.StringExpression: lambda node, env: StringObject(node.value),
            ast.PrefixExpression: self.eval_prefix,
            ast.InfixExpression: self.eval_infix,
            ast.PostfixExpression: self.eval_postfix,
            ast.ConditionalExpression: self.eval_conditional,
            ast.FunctionExpression: lambda node, env: FunctionObject(node.params, node.body, env),
            ast.CallExpression: self.eval_call,
            ast.ArrayExpression: self.eval_array,
            ast.IndexExpression: self.eval_index,
        }

    def eval(self, node, environment):
        """Evaluates node in environment and returns the resulting EvaluatedObject."""
        eval_fn = self.dispatch.get(type(node))
        if eval_fn is None:
            return ErrorObject(f"Unknown AST node: {node}")
        return eval_fn(node, environment)

    def run(self, node, environment=None):
        """Evaluates node, usually a whole program. A fresh global environment is used if environment is None.

        Unlike eval, run turns host stack exhaustion into an Error, and never hands back a Return.
        """
        if environment is None:
            environment = Environment()

        try:
            result = self.eval(node, environment)
        except RecursionError:
            return ErrorObject("Maximum recursion depth exceeded")

        if isinstance(result, ReturnObject):
            return result.value
        return result

    # statements

    def eval_program(self, program, environment):
        """Runs statements in order. Stops on an error, and unwraps a return into its value."""
        result = NULL
        for statement in program.statements:
            result = self.eval(statement, environment)
            if is_error(result):
                return result
            elif isinstance(result, ReturnObject):
                return result.value
        return result

    def eval_block(self, block, environment):
        """Runs statements in order. Stops on an error or a return, leaving the return wrapped so that it keeps
        bubbling up.
        """
        result = NULL
        for statement in block.statements:
            result = self.eval(statement, environment)
            if is_signal(result):
                return result
        return result

    def eval_let(self, let, environment):
        value = self.eval(let.value, environment)
        if is_signal(value):
            return value

        if let.name.name in self.builtins:
            return ErrorObject(f"Identifier '{let.name}' already used as a builtin function")

        environment.put(let.name.name, value)
        return NULL

    def eval_return(self, statement, environment):
        value = self.eval(statement.value, environment)
        if is_signal(value):
            return value
        return ReturnObject(value)

    def eval_while(self, statement, environment):
        """Re-tests the condition before every run of the body. The body runs in the enclosing environment."""
        while True:
            condition = self.eval(statement.condition, environment)
            if is_signal(condition):
                return condition
            elif not isinstance(condition, BooleanObject):
                return ErrorObject(f"While statement condition must be a {ObjectType.BOOLEAN.name} expression, got "
                                   f"{condition.type.name}")
            elif not condition.value:
                return NULL

            result = self.eval(statement.body, environment)
            if is_signal(result):
                return result

    # expressions

    def eval_identifier(self, identifier, environment):
        if identifier.name in self.builtins:
            return self.builtins[identifier.name]
        return environment.get(identifier.name)

    def eval_prefix(self, prefix, environment):
        operand = self.eval(prefix.operand, environment)
        if is_signal(operand):
            return operand

        if prefix.operator is Operator.MINUS:
            if isinstance(operand, IntegerObject):
                return IntegerObject(int32(-operand.value))
            return ErrorObject(f"Cannot apply prefix operator '-' to {operand.type.name}")

        elif prefix.operator is Operator.NEG:
            if isinstance(operand, BooleanObject):
                return BooleanObject(not operand.value)
            return ErrorObject(f"Cannot apply prefix operator '!' to {operand.type.name}")

        return ErrorObject(f"Unknown prefix operator {prefix.operator.value}{operand.type.name}")

    def eval_infix(self, infix, environment):
        left = self.eval(infix.left, environment)
        if is_signal(left):
            return left

        right = self.eval(infix.right, environment)
        if is_signal(right):
            return right

        operator = infix.operator
        if isinstance(left, IntegerObject) and isinstance(right, IntegerObject):
            return self._integer_infix(operator, left.value, right.value)

        elif isinstance(left, BooleanObject) and isinstance(right, BooleanObject):
            if operator is Operator.EQ:
                return BooleanObject(left.value == right.value)
            elif operator is Operator.NEQ:
                return BooleanObject(left.value != right.value)
            return ErrorObject(f"Unknown infix operator {left.type.name} {operator.value} {right.type.name}")

        return ErrorObject(f"Cannot solve infix expression {left.type.name} {operator.value} {right.type.name}")

    @staticmethod
    def _integer_infix(operator, left, right):
        comparisons = {
            Operator.LT: lambda: left < right,
            Operator.GT: lambda: left > right,
            Operator.EQ: lambda: left == right,
            Operator.NEQ: lambda: left != right,
            Operator.LTEQ: lambda: left <= right,
            Operator.GTEQ: lambda: left >= right,
        }
        if operator in comparisons:
            return BooleanObject(comparisons[operator]())

        if operator is Operator.PLUS:
            return IntegerObject(int32(left + right))
        elif operator is Operator.MINUS:
            return IntegerObject(int32(left - right))
        elif operator is Operator.ASTERISK:
            return IntegerObject(int32(left * right))
        elif operator is Operator.SLASH:
            if right == 0:
                return ErrorObject(f"Division by zero: {left} / {right}")
            quotient = abs(left) // abs(right)  # truncates toward zero
            return IntegerObject(int32(quotient if (left < 0) == (right < 0) else -quotient))

        return ErrorObject(f"Unknown infix operator {ObjectType.INTEGER.name} {operator.value} "
                           f"{ObjectType.INTEGER.name}")

    def eval_postfix(self, postfix, environment):
        """Rebinds the identifier to its value plus or minus one. The expression itself evaluates to NULL."""
        operator, operand = postfix.operator, postfix.operand
        if operator is Operator.INCREMENT:
            step = 1
        elif operator is Operator.DECREMENT:
            step = -1
        else:
            return ErrorObject(f"Unknown postfix operator {operand}{operator.value}")

        if not isinstance(operand, ast.IdentifierExpression):
            return ErrorObject(f"Cannot apply postfix operator '{operator.value}' to {operand}")

        value = environment.get(operand.name)
        if isinstance(value, IntegerObject):
            environment.put(operand.name, IntegerObject(int32(value.value + step)))
            return NULL
        elif value is NULL:
            return ErrorObject(f"Cannot apply postfix operator '{operator.value}' to {operand}: not declared")
        return ErrorObject(f"Cannot apply postfix operator '{operator.value}' to {operand}: not an integer")

    def eval_conditional(self, conditional, environment):
        condition = self.eval(conditional.condition, environment)
        if is_signal(condition):
            return condition
        elif not isinstance(condition, BooleanObject):
            return ErrorObject(f"Conditional expression condition must be a {ObjectType.BOOLEAN.name} expression, "
                               f"got {condition.type.name}")

        if condition.value:
            return self.eval(conditional.then_block, environment)
        elif conditional.else_block is not None:
            return self.eval(conditional.else_block, environment)
        return NULL

    def eval_call(self, call, environment):
        callee = self.eval(call.callee, environment)
        if is_signal(callee):
            return callee

        if isinstance(callee, BuiltinFunction):
            args = self.eval_expressions(call.args, environment)
            if is_signal(args):
                return args
            return callee(*args)

        elif isinstance(callee, FunctionObject):
            return self.call_function(callee, call.args, environment)

        return ErrorObject(f"Cannot invoke {callee.type.name}: not a {ObjectType.FUNCTION.name}")

    def call_function(self, function, arg_exprs, environment):
        """Arguments are evaluated in the caller's environment, then bound in a new scope chained to the environment
        the function captured (not the caller's).
        """
        if len(function.params) != len(arg_exprs):
            return ErrorObject(f"Formal parameters and actual parameters differ in length (formal "
                               f"{len(function.params)} != actual {len(arg_exprs)})")

        args = self.eval_expressions(arg_exprs, environment)
        if is_signal(args):
            return args

        inner = Environment(function.environment)
        for param, arg in zip(function.params, args):
            inner.put(param.name, arg)

        result = self.eval(function.body, inner)
        if isinstance(result, ReturnObject):
            return result.value
        return result

    def eval_expressions(self, expressions, environment):
        """Evaluates expressions in order. Returns the list of values, or the first Error or Return encountered."""
        values = []
        for expression in expressions:
            value = self.eval(expression, environment)
            if is_signal(value):
                return value
            values.append(value)
        return values

    def eval_array(self, array, environment):
        elements = self.eval_expressions(array.elements, environment)
        if is_signal(elements):
            return elements
        return ArrayObject(elements)

    def eval_index(self, index_expr, environment):
        target = self.eval(index_expr.target, environment)
        if is_signal(target):
            return target

        if isinstance(target, ArrayObject):
            sequence, kind = target.elements, "Array"
        elif isinstance(target, StringObject):
            sequence, kind = target.value, "String"
        else:
            return ErrorObject(f"Cannot index non-indexable object: {target.type.name}")

        index = self.eval(index_expr.index, environment)
        if is_signal(index):
            return index
        elif not isinstance(index, IntegerObject):
            return ErrorObject(f"Cannot use {index.type.name} as index")

        position = index.value
        if position >= len(sequence):
            return ErrorObject(f"{kind} index out of bounds: max index {len(sequence) - 1}, got {position}")
        elif position < 0:
            # counts from the back, -1 being the last element
            if -position > len(sequence):
                return ErrorObject(f"{kind} reverse index out of bounds: max reverse index -{len(sequence)}, got "
                                   f"{position}")
            element = sequence[::-1][-position - 1]
        else:
            element = sequence[position]

        if isinstance(target, StringObject):
            return StringObject(element)
        return element
