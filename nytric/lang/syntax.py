"""Abstract syntax tree for the nytric language. Nodes are immutable: the Parser builds them and the Evaluator only
reads them. Bodies are tuples of statements.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union


class Node:
    """Superclass of every syntax tree node."""


@dataclass(frozen=True)
class Literal(Node):
    value: Union[float, str]


@dataclass(frozen=True)
class Variable(Node):
    name: str


@dataclass(frozen=True)
class BinaryMath(Node):
    op: str
    left: Node
    right: Node


@dataclass(frozen=True)
class Unary(Node):
    """Builtin with one operand: SQRT, RANDOM, REVERSE or LEN."""
    op: str
    operand: Node


@dataclass(frozen=True)
class Comparison(Node):
    op: str
    left: Node
    right: Node


@dataclass(frozen=True)
class Call(Node):
    name: str
    args: Tuple[Node, ...]


@dataclass(frozen=True)
class Read(Node):
    pass


@dataclass(frozen=True)
class Pause(Node):
    """Blocks for delay milliseconds. Valid as a statement and as an expression."""
    delay: Node


@dataclass(frozen=True)
class Wipe(Node):
    pass


@dataclass(frozen=True)
class VarDecl(Node):
    name: str
    value: Node


@dataclass(frozen=True)
class Print(Node):
    """variant is "print", "say" or "implicit" (a bare expression statement)."""
    value: Node
    variant: str = "implicit"


@dataclass(frozen=True)
class If(Node):
    cond: Node
    then_body: Tuple[Node, ...]
    else_body: Optional[Tuple[Node, ...]] = None


@dataclass(frozen=True)
class While(Node):
    cond: Node
    body: Tuple[Node, ...]


@dataclass(frozen=True)
class For(Node):
    var_name: str
    start: Node
    end: Node
    body: Tuple[Node, ...]


@dataclass(frozen=True)
class FunctionDecl(Node):
    name: str
    params: Tuple[str, ...]
    body: Tuple[Node, ...]


@dataclass(frozen=True)
class Return(Node):
    value: Node


@dataclass(frozen=True)
class Program(Node):
    body: Tuple[Node, ...]
