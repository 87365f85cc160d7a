import unittest

from nytric.lang.error import OperandTypeError
from nytric.lang.numerical import EPSILON, is_number, render, to_number, truthy


class RenderTestCase(unittest.TestCase):

    def test_render(self):
        cases = [
            (7.0, "7"),
            (-2.0, "-2"),
            (0.0, "0"),
            (2.5, "2.5"),
            (0.1 + 0.2, "0.30000000000000004"),
            (1e20, "1e+20"),
            (float("inf"), "inf"),
            ("text", "text"),
            ("", ""),
            (True, "True"),
            (False, "False"),
            (None, ""),
        ]
        for case, expected in cases:
            self.assertEqual(expected, render(case), case)


class CoercionTestCase(unittest.TestCase):

    def test_to_number(self):
        cases = [
            (None, 0.0),
            (True, 1.0),
            (False, 0.0),
            (3.5, 3.5),
            ("16", 16.0),
            (" 2.5 ", 2.5),
            ("-2.5", -2.5),
            ("007", 7.0),
        ]
        for case, expected in cases:
            self.assertEqual(expected, to_number(case), case)

    def test_to_number_fails(self):
        should_raise = ["", "abc", "1,5", "nan", "inf", "-inf", "1_000", "1e3", "+5", ".5", "5.", "\u0663"]
        for case in should_raise:
            self.assertRaises(OperandTypeError, to_number, case)

    def test_is_number(self):
        self.assertTrue(is_number(1.0))
        self.assertFalse(is_number(True))
        self.assertFalse(is_number("1"))
        self.assertFalse(is_number(None))


class TruthinessTestCase(unittest.TestCase):

    def test_truthy(self):
        should_fail = [None, False, 0.0, -0.0, EPSILON / 10, -EPSILON / 10, EPSILON, ""]
        for case in should_fail:
            self.assertFalse(truthy(case), case)

        should_pass = [True, 1.0, -1.0, EPSILON * 10, "0", " ", "false", object()]
        for case in should_pass:
            self.assertTrue(truthy(case), case)


if __name__ == '__main__':
    unittest.main()
