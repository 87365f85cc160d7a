import unittest

from nytric.lang import syntax
from nytric.lang.error import ParseError
from nytric.lang.lexical import tokenize
from nytric.lang.parser import Parser


def parse_source(source):
    return Parser(tokenize(source)).parse()


def num(value):
    return syntax.Literal(float(value))


class PrescanTestCase(unittest.TestCase):

    def test_prescan(self):
        cases = {
            "function add(a, b) { return + a b }": {"add": 2},
            "function none() { return 1 }": {"none": 0},
            "function nocommas(a b c) { return a }": {"nocommas": 3},
            "if 1 { while 1 { function deep(x) { return x } } }": {"deep": 1},
            "function tolerant(a, 1, b) { }": {"tolerant": 2},
            "function f(a) { } function f(a, b) { }": {"f": 2},
            "let function = 1": {},
            "print 1": {},
        }
        for case, expected in cases.items():
            self.assertEqual(expected, Parser.prescan(tokenize(case)), case)

    def test_arities_used_before_declaration(self):
        program = parse_source("twice 3 function twice(n) { return * 2 n }")
        self.assertEqual(syntax.Print(syntax.Call("twice", (num(3), )), "implicit"), program.body[0])


class ExpressionTestCase(unittest.TestCase):

    def parse_expr(self, source):
        stmt, = parse_source(source).body
        self.assertIsInstance(stmt, syntax.Print)
        return stmt.value

    def test_prefix(self):
        cases = {
            "+ 3 4": syntax.BinaryMath("+", num(3), num(4)),
            "- 10 5": syntax.BinaryMath("-", num(10), num(5)),
            "* + 1 2 3": syntax.BinaryMath("*", syntax.BinaryMath("+", num(1), num(2)), num(3)),
            "/ 1 * 2 3": syntax.BinaryMath("/", num(1), syntax.BinaryMath("*", num(2), num(3))),
            "== 5 \"5\"": syntax.Comparison("==", num(5), syntax.Literal("5")),
            "!= x 1": syntax.Comparison("!=", syntax.Variable("x"), num(1)),
            "SQRT 16": syntax.Unary("SQRT", num(16)),
            "LEN REVERSE \"ab\"": syntax.Unary("LEN", syntax.Unary("REVERSE", syntax.Literal("ab"))),
            "read": syntax.Read(),
            "x": syntax.Variable("x"),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, self.parse_expr(case), case)

    def test_call_arity(self):
        source = ("function add(a, b) { return + a b }\n"
                  "function square(n) { return * n n }\n"
                  "add 3 square 2")
        program = parse_source(source)

        expected = syntax.Call("add", (num(3), syntax.Call("square", (num(2), ))))
        self.assertEqual(syntax.Print(expected, "implicit"), program.body[-1])

    def test_call_deep_nesting(self):
        source = ("function add(a, b) { return + a b }\n"
                  "function square(n) { return * n n }\n"
                  "add square square 2 1")
        call = parse_source(source).body[-1].value

        inner = syntax.Call("square", (syntax.Call("square", (num(2), )), ))
        self.assertEqual(syntax.Call("add", (inner, num(1))), call)

    def test_string_literals(self):
        cases = {
            "\"plain\"": "plain",
            "'single'": "single",
            "\"say \\\"hi\\\"\"": "say \"hi\"",
            "'it\\'s'": "it's",
            "\"back\\\\slash\"": "back\\slash",
            "\"keep\\n\"": "keep\\n",
        }
        for case, expected in cases.items():
            self.assertEqual(syntax.Literal(expected), self.parse_expr(case), case)

    def test_pause_expression(self):
        stmt, = parse_source("let p = pause 5").body
        self.assertEqual(syntax.VarDecl("p", syntax.Pause(num(5))), stmt)


class StatementTestCase(unittest.TestCase):

    def test_statements(self):
        cases = {
            "let x = 5": syntax.VarDecl("x", num(5)),
            "print x": syntax.Print(syntax.Variable("x"), "print"),
            "say x": syntax.Print(syntax.Variable("x"), "say"),
            "return 1": syntax.Return(num(1)),
            "pause 100": syntax.Pause(num(100)),
            "wipe": syntax.Wipe(),
            "if x print 1": syntax.If(syntax.Variable("x"), (syntax.Print(num(1), "print"), )),
            "if x { print 1 } else { print 2 print 3 }": syntax.If(
                syntax.Variable("x"),
                (syntax.Print(num(1), "print"), ),
                (syntax.Print(num(2), "print"), syntax.Print(num(3), "print"))),
            "if x { } else say 2": syntax.If(syntax.Variable("x"), (), (syntax.Print(num(2), "say"), )),
            "while x { let x = - x 1 }": syntax.While(
                syntax.Variable("x"), (syntax.VarDecl("x", syntax.BinaryMath("-", syntax.Variable("x"), num(1))), )),
            "for i = 1 5 print i": syntax.For("i", num(1), num(5), (syntax.Print(syntax.Variable("i"), "print"), )),
            "function f(a, b) { return a }": syntax.FunctionDecl("f", ("a", "b"), (syntax.Return(syntax.Variable("a")), )),
        }
        for case, expected in cases.items():
            stmt, = parse_source(case).body
            self.assertEqual(expected, stmt, case)

    def test_program(self):
        program = parse_source("let x = 1\nprint x\nx")
        self.assertEqual(3, len(program.body))
        self.assertEqual(syntax.Print(syntax.Variable("x"), "implicit"), program.body[2])

    def test_parse_errors(self):
        should_raise = [
            "let = 5",
            "let x 5",
            "}",
            "+ 1",
            "print",
            "if 1 {",
            "for 1 = 1 2 print 1",
            "function f(a) return a",
            "function (a) { }",
            "function f(a, 1) { }",
            "else print 1",
            "=",
        ]
        for case in should_raise:
            self.assertRaises(ParseError, parse_source, case)

    def test_parse_error_context(self):
        with self.assertRaises(ParseError) as raised:
            parse_source("let 5 = 1")
        self.assertEqual("NUMBER", raised.exception.context.kind)
        self.assertIn("IDENTIFIER", str(raised.exception))


if __name__ == '__main__':
    unittest.main()
