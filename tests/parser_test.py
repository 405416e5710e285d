import unittest

from intcalc.lang.error import ParseError, SemanticError
from intcalc.lang.lexical import tokenize
from intcalc.lang.parser import Parser, parse, run
from intcalc.lang.tree import Add, Assignment, Identifier, Literal, Mul, Sub, Unary


def evaluate(source):
    return run(tokenize(source))


class ParserTestCase(unittest.TestCase):

    def test_parse(self):
        cases = {
            "x = 1;": [Assignment("x", Literal(1))],
            "x = 1 + 2 * 3;": [Assignment("x", Add(Literal(1), Mul(Literal(2), Literal(3))))],
            "x = 1 - 2 - 3;": [Assignment("x", Sub(Sub(Literal(1), Literal(2)), Literal(3)))],
            "x = (1 - 2) * 3;": [Assignment("x", Mul(Sub(Literal(1), Literal(2)), Literal(3)))],
            "x = ---y;": [Assignment("x", Unary("-", Unary("-", Unary("-", Identifier("y")))))],
            "x = +-y * 2;": [Assignment("x", Mul(Unary("+", Unary("-", Identifier("y"))), Literal(2)))],
            "a = 1; b = a;": [Assignment("a", Literal(1)), Assignment("b", Identifier("a"))],
            "": [],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, parse(tokenize(case)), case)

    def test_syntax_errors(self):
        should_raise = [
            "x = 0\ny = x;",    # missing terminator
            "x = 1",            # missing terminator at end of input
            "1 = x;",           # statement must start with identifier
            "= 1;",
            "x 1;",
            "x + 1;",           # only '=' assigns
            "x => 1;",
            "x = ;",
            "x = 1 +;",
            "x = 4 / 2;",       # '/' is lexed but never parsed
            "x = 1 * * 2;",
            "x = (1 + 2;",
            "x = 1 + 2);",
            "x = 1);",          # terminator must be ';'
            "x = 1(",
            "x = 2x;",
            ";",
        ]
        for case in should_raise:
            self.assertRaises(ParseError, parse, tokenize(case))
            self.assertRaises(ParseError, evaluate, case)

    def test_error_messages(self):
        cases = {
            "1 = x;": "expected identifier, found integer-literal '1'",
            "x + 1;": "expected operator '=', found operator '+'",
            "x = 1)": "expected bracket-or-separator ';', found bracket-or-separator ')'",
            "x = 1": "expected bracket-or-separator ';', found end of input",
            "x = *": "unexpected token '*'",
            "x = ": "unexpected end of input",
            "x = (1;": "expected bracket-or-separator ')', found bracket-or-separator ';'",
        }
        for case, expected in cases.items():
            with self.assertRaises(ParseError, msg=case) as context:
                parse(tokenize(case))
            self.assertEqual(expected, str(context.exception), case)

    def test_end_of_input_is_sticky(self):
        parser = Parser(tokenize("x"))
        parser.advance()
        self.assertEqual(parser.advance(), parser.advance())
        self.assertEqual(1, parser.pos)


class RunTestCase(unittest.TestCase):

    def test_run(self):
        cases = {
            "x_2 = 0;": {"x_2": 0},
            "x = 1;\ny = 2;\nz = ---(x+y)*(x+-y);": {"x": 1, "y": 2, "z": 3},
            "x = 2 + 3 * 4;": {"x": 14},
            "x = (2 + 3) * 4;": {"x": 20},
            "x = 10 - 4 - 3;": {"x": 3},
            "x = 2 * 3 * 4 - 1;": {"x": 23},
            "x = - - - 5;": {"x": -5},
            "x = - - 5;": {"x": 5},
            "x = -(2 * -3);": {"x": 6},
            "x = 1; x = x + 1; y = x * x;": {"x": 2, "y": 4},
            "a = 5;\n\n  b =\n a\n * 2\n;": {"a": 5, "b": 10},
            "": {},
        }
        for case, expected in cases.items():
            self.assertEqual(expected, evaluate(case), case)

    def test_uninitialized(self):
        should_raise = ["x = y;", "x = x;", "x = 1 + y * 2;", "y = x; x = 1;", "x = 1; y = z;"]
        for case in should_raise:
            self.assertRaises(SemanticError, evaluate, case)

        with self.assertRaises(SemanticError) as context:
            evaluate("x = 1;\ny = x + zed;")
        self.assertEqual("uninitialized variable zed", str(context.exception))
        self.assertEqual((2, 9), (context.exception.line, context.exception.col))

    def test_error_order(self):
        # the unbound reference comes before the bad token, so it is reported first
        self.assertRaises(SemanticError, evaluate, "x = y + ;")
        # the assignment is bound before its terminator is checked
        self.assertRaises(ParseError, evaluate, "x = 1 y = x;")
        self.assertRaises(SemanticError, evaluate, "x = q y = x;")

    def test_long_chains(self):
        cases = {
            "x = " + " + ".join(["1"] * 5000) + ";": {"x": 5000},
            "x = 100000 " + "- 1 " * 5000 + ";": {"x": 95000},
            "x = " + " * ".join(["1"] * 5000) + ";": {"x": 1},
            "x = 3; y = " + " + ".join(["x * 2"] * 5000) + ";": {"x": 3, "y": 30000},
        }
        for case, expected in cases.items():
            self.assertEqual(expected, evaluate(case), case[:20])

        expected = Literal(1)
        for __ in range(4999):
            expected = Add(expected, Literal(1))
        self.assertEqual([Assignment("x", expected)], parse(tokenize("x = " + " + ".join(["1"] * 5000) + ";")))

    def test_namespace(self):
        namespace = {"a": 3}
        self.assertIs(namespace, run(tokenize("b = a * 2;"), namespace))
        self.assertEqual({"a": 3, "b": 6}, namespace)

        partial = {}
        self.assertRaises(ParseError, run, tokenize("a = 1; b = 2 c = 3;"), partial)
        self.assertEqual({"a": 1, "b": 2}, partial)  # callers must discard this

    def test_insertion_order(self):
        self.assertEqual(["b", "a"], list(evaluate("b = 1; a = 2; b = 3;")))

    def test_overflow(self):
        overflowed = []
        self.assertEqual({"x": -2147483648}, run(tokenize("x = 2147483647 + 1;"), overflow=overflowed.append))
        self.assertEqual([Add(Literal(2147483647), Literal(1))], overflowed)

        self.assertEqual({"x": -128}, run(tokenize("x = 127 + 1;"), bits=8))
        self.assertEqual({"x": 0}, run(tokenize("x = 16 * 16;"), bits=8))
        self.assertEqual({"x": 2 ** 62}, run(tokenize("x = 2147483647 * 2147483647 - 2147483647 * 2147483647 "
                                                      "+ 1073741824 * 1073741824 * 4;"), bits=64))


if __name__ == '__main__':
    unittest.main()
