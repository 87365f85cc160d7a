"""Tree-walking evaluator for the nytric language.

Scoping works on a single stack of frames: one global frame, plus one pushed per function call. `let` always binds
in the top frame, lookup searches the whole stack from the top down. if/while/for bodies run in the frame they appear
in, so their bindings outlive them. Because a callee's frame sits on top of its caller's, a function can see every
variable of the calls that are currently active below it (dynamic scoping).

`return` does not use Python exceptions. Every statement executor returns an ExecResult, and compound statements stop
and hand a returning result upward as soon as one of their statements produces it. Function calls are the only place
a returning result is consumed.
"""

import math
import random
import sys
import time
from dataclasses import dataclass
from typing import Any

from nytric.lang import syntax
from nytric.lang.error import (ArityMismatch, DivisionByZero, DomainError, OperandTypeError, UndefinedFunction,
                               UndefinedVariable, UnknownNodeKind)
from nytric.lang.numerical import is_number, render, to_number, truthy


CLEAR_SCREEN = "\033[2J\033[H"

MAX_CALL_DEPTH = 1500  # deepest chain of nytric calls guaranteed not to hit Python's recursion limit
FRAMES_PER_CALL = 10   # Python frames one nytric call can take (call, body, statement, nested expressions)


@dataclass(frozen=True)
class ExecResult:
    """Outcome of executing one statement: either normal completion or returning with value."""
    returning: bool = False
    value: Any = None


NORMAL = ExecResult()


class Evaluator:
    """Runs syntax.Programs. Owns the frame stack and the function registry, so separate Evaluators never share
    state. I/O can be redirected for testing.
    """

    def __init__(self, stdout=None, stdin=None, sleep=None, rng=None):
        self.frames = [{}]     # frames[0] is the global frame, frames[-1] the current one
        self.functions = {}    # dict of name: syntax.FunctionDecl that can currently be called

        self.stdout = stdout if stdout is not None else sys.stdout
        self.stdin = stdin if stdin is not None else sys.stdin
        self.sleep = sleep if sleep is not None else time.sleep
        self.rng = rng if rng is not None else random.Random()

    def evaluate(self, program):
        """Registers every top-level function declaration, then executes the top-level statements in order. Function
        declarations nested in other statements only become callable once those statements run them.
        """
        limit = MAX_CALL_DEPTH * FRAMES_PER_CALL
        if sys.getrecursionlimit() < limit:
            sys.setrecursionlimit(limit)

        for stmt in program.body:
            if isinstance(stmt, syntax.FunctionDecl):
                self.functions[stmt.name] = stmt

        for stmt in program.body:
            self.execute(stmt)  # a top-level return only ends its own statement

    def lookup(self, name, context=None):
        for frame in reversed(self.frames):
            if name in frame:
                return frame[name]
        raise UndefinedVariable("undefined variable '{}'", name, context=context)

    def bind(self, name, value):
        self.frames[-1][name] = value

    # statements

    def execute(self, node):
        """Executes a statement node and returns its ExecResult. Expression nodes are evaluated and discarded."""
        executor = getattr(self, f"_exec_{type(node).__name__}", None)
        if executor is not None:
            return executor(node)

        self.eval(node)
        return NORMAL

    def execute_body(self, body):
        """Runs body in the current frame, stopping at the first returning result."""
        for stmt in body:
            result = self.execute(stmt)
            if result.returning:
                return result
        return NORMAL

    def _exec_VarDecl(self, node):
        self.bind(node.name, self.eval(node.value))
        return NORMAL

    def _exec_Print(self, node):
        value = self.eval(node.value)
        if value is not None:
            self.stdout.write(render(value) + "\n")
        return NORMAL

    def _exec_If(self, node):
        if truthy(self.eval(node.cond)):
            return self.execute_body(node.then_body)
        elif node.else_body is not None:
            return self.execute_body(node.else_body)
        return NORMAL

    def _exec_While(self, node):
        while truthy(self.eval(node.cond)):
            result = self.execute_body(node.body)
            if result.returning:
                return result
        return NORMAL

    def _exec_For(self, node):
        start = to_number(self.eval(node.start), node)
        end = to_number(self.eval(node.end), node)

        counter = start
        while counter <= end:
            self.bind(node.var_name, counter)
            result = self.execute_body(node.body)
            if result.returning:
                return result
            counter += 1
        return NORMAL

    def _exec_FunctionDecl(self, node):
        self.functions[node.name] = node
        return NORMAL

    def _exec_Return(self, node):
        return ExecResult(True, self.eval(node.value))

    # expressions

    def eval(self, node):
        """Evaluates an expression node to a value."""
        evaluator = getattr(self, f"_eval_{type(node).__name__}", None)
        if evaluator is None:
            raise UnknownNodeKind("unknown expression kind '{}'", type(node).__name__, context=node)
        return evaluator(node)

    def _eval_Literal(self, node):
        return node.value

    def _eval_Variable(self, node):
        return self.lookup(node.name, node)

    def _eval_Read(self, node):
        line = self.stdin.readline()
        if not line:
            return None
        return line.rstrip("\r\n")

    def _eval_Pause(self, node):
        delay = to_number(self.eval(node.delay), node)
        if not math.isfinite(delay):
            raise DomainError("cannot pause for '{}' milliseconds", render(delay), context=node)
        self.sleep(max(delay, 0.0) / 1000)
        return None

    def _eval_Wipe(self, node):
        self.stdout.write(CLEAR_SCREEN)
        self.stdout.flush()
        return None

    def _eval_Call(self, node):
        if node.name not in self.functions:
            raise UndefinedFunction("undefined function '{}'", node.name, context=node)

        func = self.functions[node.name]
        if len(node.args) != len(func.params):
            msg = "function '{}' expects {} args, got {}"
            raise ArityMismatch(msg, (node.name, len(func.params), len(node.args)), context=node)

        args = [self.eval(arg) for arg in node.args]  # in the caller's frame
        self.frames.append(dict(zip(func.params, args)))

        result = self.execute_body(func.body)

        self.frames.pop()  # not reached on error: errors abort the whole run
        return result.value if result.returning else None

    def _eval_BinaryMath(self, node):
        left = self.eval(node.left)
        right = self.eval(node.right)

        if isinstance(left, str) or isinstance(right, str):
            if node.op != "+":
                raise OperandTypeError("operator '{}' not supported for text", node.op, context=node)
            return render(left) + render(right)

        left = to_number(left, node)
        right = to_number(right, node)

        if node.op == "+":
            return left + right
        elif node.op == "-":
            return left - right
        elif node.op == "*":
            return left * right
        elif node.op == "/":
            if right == 0:
                raise DivisionByZero("division by zero in '{}'", f"/ {render(left)} {render(right)}", context=node)
            return left / right
        raise UnknownNodeKind("unknown operator '{}'", node.op, context=node)

    def _eval_Comparison(self, node):
        left = self.eval(node.left)
        right = self.eval(node.right)

        if not (is_number(left) and is_number(right)):
            left, right = render(left), render(right)

        if node.op == "==":
            return left == right
        elif node.op == "!=":
            return left != right
        raise UnknownNodeKind("unknown comparison '{}'", node.op, context=node)

    def _eval_Unary(self, node):
        value = self.eval(node.operand)

        if node.op == "SQRT":
            number = to_number(value, node)
            if number < 0:
                raise DomainError("cannot take SQRT of negative number '{}'", render(number), context=node)
            return math.sqrt(number)
        elif node.op == "RANDOM":
            return self.rng.random() * to_number(value, node)
        elif node.op == "REVERSE":
            return render(value)[::-1]
        elif node.op == "LEN":
            return float(len(render(value)))
        raise UnknownNodeKind("unknown builtin '{}'", node.op, context=node)
