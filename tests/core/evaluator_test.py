import io
import unittest
from contextlib import redirect_stdout

from simpleinterpreter.core.environment import Environment
from simpleinterpreter.core.evaluator import Evaluator
from simpleinterpreter.core.lexer import Lexer
from simpleinterpreter.core.objects import (NULL, ArrayObject, BooleanObject, ErrorObject, FunctionObject,
                                            IntegerObject, StringObject)
from simpleinterpreter.core.parser import Parser


def evaluate(source, evaluator=None, environment=None):
    program = Parser(Lexer(source)).parse()
    assert program is not None, source
    return (evaluator or Evaluator()).run(program, environment)


class EvaluatorTestCase(unittest.TestCase):

    def assertResults(self, cases):
        for case, expected in cases.items():
            self.assertEqual(expected, evaluate(case), case)

    def assertErrors(self, cases):
        for case, expected in cases.items():
            result = evaluate(case)
            self.assertIsInstance(result, ErrorObject, case)
            self.assertIn(expected, result.message, case)

    def test_integers(self):
        self.assertResults({
            "5": IntegerObject(5),
            "-5": IntegerObject(-5),
            "1 + 2": IntegerObject(3),
            "1 + 2 * 4 / 6": IntegerObject(2),
            "(1 + 2) * 3": IntegerObject(9),
            "10 - 2 - 3": IntegerObject(5),
            "7 / 2": IntegerObject(3),
            "-7 / 2": IntegerObject(-3),
            "7 / -2": IntegerObject(-3),
            "2147483647 + 1": IntegerObject(-2147483648),
            "-2147483647 - 2": IntegerObject(2147483647),
            "65536 * 65536": IntegerObject(0),
        })

    def test_booleans(self):
        self.assertResults({
            "true": BooleanObject(True),
            "!true": BooleanObject(False),
            "!!false": BooleanObject(False),
            "1 < 2": BooleanObject(True),
            "1 > 2": BooleanObject(False),
            "2 <= 2": BooleanObject(True),
            "3 >= 4": BooleanObject(False),
            "1 == 1": BooleanObject(True),
            "1 != 1": BooleanObject(False),
            "true == false": BooleanObject(False),
            "true != false": BooleanObject(True),
            "(1 < 2) == true": BooleanObject(True),
        })

    def test_strings_and_arrays(self):
        self.assertResults({
            "\"hello world\"": StringObject("hello world"),
            "[1, 2 + 3, \"x\"]": ArrayObject([IntegerObject(1), IntegerObject(5), StringObject("x")]),
            "[]": ArrayObject([]),
            "[1, 2, 3][0]": IntegerObject(1),
            "[1, 2, 3][1 + 1]": IntegerObject(3),
            "[1, 2, 3][-1]": IntegerObject(3),
            "[1, 2, 3][-3]": IntegerObject(1),
            "let a = [1, [2, 3]] a[1][0]": IntegerObject(2),
            "\"abc\"[1]": StringObject("b"),
            "\"abc\"[-1]": StringObject("c"),
        })

    def test_let_and_identifiers(self):
        self.assertResults({
            "let a = 5 a": IntegerObject(5),
            "let a = 5 * 5 a": IntegerObject(25),
            "let a = 5 let b = a let c = a + b + 5 c": IntegerObject(15),
            "let a = 5": NULL,
            "unbound": NULL,
            "": NULL,
        })

    def test_conditionals(self):
        self.assertResults({
            "if (true) { 10 }": IntegerObject(10),
            "if (false) { 10 }": NULL,
            "if (1 < 2) { 10 } else { 20 }": IntegerObject(10),
            "if (1 > 2) { 10 } else { 20 }": IntegerObject(20),
            "if (true) { }": NULL,
        })

    def test_return(self):
        self.assertResults({
            "return 10": IntegerObject(10),
            "return 10 9": IntegerObject(10),
            "9 return 2 * 5 9": IntegerObject(10),
            "if (true) { if (true) { return 10 } return 1 }": IntegerObject(10),
            "let f = fn() { if (true) { return 1 } 2 } f() + 1": IntegerObject(2),
        })

    def test_functions(self):
        self.assertIsInstance(evaluate("fn(x) { x + 2 }"), FunctionObject)
        self.assertResults({
            "let identity = fn(x) { x } identity(5)": IntegerObject(5),
            "let double = fn(x) { x * 2 } double(5)": IntegerObject(10),
            "let add = fn(x, y) { x + y } add(5, add(5, 5))": IntegerObject(15),
            "fn(x) { x }(5)": IntegerObject(5),
            "let a = [fn(x) { x }, fn(x) { x * 2 }] a[1](2)": IntegerObject(4),
            "let f = fn() { 1 } f()": IntegerObject(1),
        })

    def test_closures(self):
        self.assertResults({
            "let adder = fn(x) { fn(y) { x + y } } let add2 = adder(2) add2(3)": IntegerObject(5),
            "let x = 1 let f = fn() { x } let g = fn(x) { f() } g(100)": IntegerObject(1),
            "let x = 1 let f = fn(x) { x } f(2) x": IntegerObject(1),
            "let f = fn() { let y = 7 y } f() y": NULL,
        })

    def test_recursion(self):
        self.assertResults({
            "let fib = fn(n) { if (n < 2) { n } else { fib(n - 1) + fib(n - 2) } } fib(12)": IntegerObject(144),
            "let fact = fn(n) { if (n == 0) { 1 } else { n * fact(n - 1) } } fact(5)": IntegerObject(120),
            "let map = fn(arr, f) { "
            "  let iter = fn(arr, acc) { "
            "    if (len(arr) == 0) { acc } else { iter(rest(arr), append(acc, f(first(arr)))) } "
            "  } "
            "  iter(arr, []) "
            "} "
            "map([1, 2, 3], fn(x) { x * 2 })": ArrayObject([IntegerObject(2), IntegerObject(4), IntegerObject(6)]),
        })

    def test_while(self):
        self.assertResults({
            "let i = 0 while (i < 10) { i++ } i": IntegerObject(10),
            "let i = 0 let s = 0 while (i < 5) { let s = s + i i++ } s": IntegerObject(10),
            "while (false) { 1 }": NULL,
            "let f = fn() { let i = 0 while (true) { if (i == 3) { return i } i++ } } f()": IntegerObject(3),
        })
        self.assertErrors({
            "while (1) { 1 }": "While statement condition must be a BOOLEAN expression, got INTEGER",
            "let i = 0 while (i < 3) { i++ if (i == 2) { -true } }": "Cannot apply prefix operator '-' to BOOLEAN",
        })

    def test_long_loop(self):
        self.assertEqual(IntegerObject(20000), evaluate("let i = 0 while (i < 20000) { i++ } i"))

    def test_postfix(self):
        self.assertResults({
            "let a = 1 a++ a": IntegerObject(2),
            "let a = 1 a-- a-- a": IntegerObject(-1),
            "let a = 1 a++": NULL,
            "let a = 2147483647 a++ a": IntegerObject(-2147483648),
        })
        self.assertErrors({
            "b++": "Cannot apply postfix operator '++' to b: not declared",
            "let b = true b--": "Cannot apply postfix operator '--' to b: not an integer",
            "1++": "Cannot apply postfix operator '++' to 1",
        })

    def test_errors(self):
        self.assertErrors({
            "-true": "Cannot apply prefix operator '-' to BOOLEAN",
            "!5": "Cannot apply prefix operator '!' to INTEGER",
            "true + false": "Unknown infix operator BOOLEAN + BOOLEAN",
            "5 + true": "Cannot solve infix expression INTEGER + BOOLEAN",
            "\"a\" + \"b\"": "Cannot solve infix expression STRING + STRING",
            "1 / 0": "Division by zero: 1 / 0",
            "if (1) { 2 }": "Conditional expression condition must be a BOOLEAN expression, got INTEGER",
            "let x = 1 x(1)": "Cannot invoke INTEGER: not a FUNCTION",
            "let f = fn(x, y) { x } f(1)": "Formal parameters and actual parameters differ in length (formal 2 != "
                                          "actual 1)",
            "let x = 1 x[0]": "Cannot index non-indexable object: INTEGER",
            "[1, 2][true]": "Cannot use BOOLEAN as index",
            "[1, 2, 3][3]": "Array index out of bounds: max index 2, got 3",
            "[1, 2, 3][-4]": "Array reverse index out of bounds: max reverse index -3, got -4",
            "\"ab\"[2]": "String index out of bounds: max index 1, got 2",
            "let len = 1": "Identifier 'len' already used as a builtin function",
        })

    def test_error_stops_program(self):
        env = Environment()
        result = evaluate("let a = 1 let b = -true let a = 2", environment=env)
        self.assertIsInstance(result, ErrorObject)
        self.assertEqual(IntegerObject(1), env.get("a"))
        self.assertIs(NULL, env.get("b"))

    def test_error_propagation(self):
        self.assertErrors({
            "(-true) + (1 / 0)": "Cannot apply prefix operator '-' to BOOLEAN",
            "[1, -true, 3]": "Cannot apply prefix operator '-' to BOOLEAN",
            "let f = fn(x) { x } f(-true)": "Cannot apply prefix operator '-' to BOOLEAN",
            "let f = fn() { -true 1 } f() + 1": "Cannot apply prefix operator '-' to BOOLEAN",
            "if (true) { -true } else { 1 }": "Cannot apply prefix operator '-' to BOOLEAN",
        })

    def test_nested_return(self):
        self.assertResults({
            "[if (true) { return 1 }]": IntegerObject(1),
            "1 + if (true) { return 2 }": IntegerObject(2),
            "let f = fn() { let x = if (true) { return 1 } 2 } f()": IntegerObject(1),
            "let f = fn() { [if (true) { return 1 }] } f()": IntegerObject(1),
            "let f = fn() { -if (true) { return 3 } } f()": IntegerObject(3),
            "let f = fn() { [1, 2][if (true) { return 0 }] } f()": IntegerObject(0),
            "let f = fn() { [1, 2][0] + [if (true) { return 6 }][0] } f()": IntegerObject(6),
            "let id = fn(x) { x } let f = fn() { id(if (true) { return 4 }) 5 } f()": IntegerObject(4),
            "let f = fn() { len(if (true) { return 5 }) } f()": IntegerObject(5),
            "let f = fn() { return if (true) { return 7 } } f()": IntegerObject(7),
            "let f = fn() { while (if (true) { return 8 }) { 1 } } f()": IntegerObject(8),
        })

        env = Environment()
        evaluate("let f = fn() { let x = if (true) { return 1 } 2 } let y = f()", environment=env)
        self.assertEqual(IntegerObject(1), env.get("y"))
        self.assertIs(NULL, env.get("x"))

    def test_recursion_limit(self):
        result = evaluate("let f = fn(n) { f(n + 1) } f(0)")
        self.assertEqual(ErrorObject("Maximum recursion depth exceeded"), result)

    def test_run(self):
        evaluator, env = Evaluator(), Environment()
        evaluate("let f = fn(n) { f(n + 1) }", evaluator, env)

        call = Parser(Lexer("f(0)")).parse().statements[0].expression
        self.assertEqual(ErrorObject("Maximum recursion depth exceeded"), evaluator.run(call, env))
        self.assertRaises(RecursionError, evaluator.eval, call, env)

        statement = Parser(Lexer("return 7")).parse().statements[0]
        self.assertEqual(IntegerObject(7), evaluator.run(statement, env))

    def test_shared_environment(self):
        evaluator, env = Evaluator(), Environment()
        evaluate("let add = fn(a, b) { a + b }", evaluator, env)
        evaluate("let x = add(1, 2)", evaluator, env)
        self.assertEqual(IntegerObject(6), evaluate("add(x, 3)", evaluator, env))

    def test_builtins(self):
        self.assertResults({
            "len(\"hello\")": IntegerObject(5),
            "len([1, 2, 3])": IntegerObject(3),
            "first([1, 2])": IntegerObject(1),
            "rest([1, 2, 3])": ArrayObject([IntegerObject(2), IntegerObject(3)]),
            "push([2], 1)": ArrayObject([IntegerObject(1), IntegerObject(2)]),
            "append(\"ab\", \"c\")": StringObject("abc"),
            "let a = [1, 2, 3] pop(a) a": ArrayObject([IntegerObject(2), IntegerObject(3)]),
            "let s = \"abc\" removeLast(s) s": StringObject("ab"),
            "let f = len f(\"ab\")": IntegerObject(2),
        })

    def test_print(self):
        out = io.StringIO()
        with redirect_stdout(out):
            result = evaluate("print(1, \"two\", [3])")
        self.assertIs(NULL, result)
        self.assertEqual("1\n\"two\"\n[3]\n", out.getvalue())

    def test_empty_sequences(self):
        self.assertResults({
            "first([])": NULL,
            "rest(\"\")": NULL,
        })

        evaluator = Evaluator(null_on_empty=False)
        self.assertEqual(ArrayObject([]), evaluate("rest([])", evaluator))
        self.assertEqual(StringObject(""), evaluate("first(\"\")", evaluator))


if __name__ == '__main__':
    unittest.main()
