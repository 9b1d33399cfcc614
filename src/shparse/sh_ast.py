"""
Defines the abstract syntax tree (AST) node variants for parsed shell source.

Every variant is a frozen dataclass carrying a `kind` tag. Nodes own their
children by composition; sequences are stored as tuples, so trees are
immutable, acyclic values that compare structurally.

Classes:
    Node: Common base providing rendering, traversal and serialization.
    Literal, Comment: Leaf text nodes.
    Command, Redirect: Simple commands and their redirections.
    Subshell, Block: `( ... )` and `{ ... }` groupings.
    IfStatement, ElifClause, WhileStatement: Control flow.
    BinaryExpr: `&&`, `||` and `|` chains (right-leaning).
    FuncDecl: `name() { ... }` definitions.
    Program: The top-level container returned by the parser.

Functions:
    walk(node): Pre-order iteration over a node and all of its descendants.

Example:
    >>> cmd = Command([Literal("echo"), Redirect(">", Literal("out"))])
    >>> cmd.render()
    'echo >out'
"""

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field, fields
from typing import Any, ClassVar

from shparse.printers.sh_printer import ShellPrinter

NodeDict = dict[str, Any]
"""Plain-dict form of a node, as produced by `Node.to_dict()`."""


class Node:
    """Base class for all AST variants.

    Subclasses are frozen dataclasses and set `kind`, the tag the printer
    dispatches on. Fields holding sequences of nodes are listed in
    `_sequences` and converted to tuples on construction.
    """

    kind: ClassVar[str] = "node"
    _sequences: ClassVar[tuple[str, ...]] = ()

    def __post_init__(self) -> None:
        for name in self._sequences:
            object.__setattr__(self, name, tuple(getattr(self, name)))

    def render(self) -> str:
        """Returns the canonical shell text for this node."""
        return ShellPrinter().render(self)

    def __str__(self) -> str:
        return self.render()

    def children(self) -> tuple["Node", ...]:
        """Returns the direct child nodes, in source order."""
        out: list[Node] = []
        for f in fields(self):  # type: ignore[arg-type]
            value = getattr(self, f.name)
            if isinstance(value, Node):
                out.append(value)
            elif isinstance(value, tuple):
                out.extend(value)
        return tuple(out)

    def to_dict(self) -> NodeDict:
        """Converts the node (and all descendants) into nested plain dictionaries."""
        d: NodeDict = {"kind": self.kind}
        for f in fields(self):  # type: ignore[arg-type]
            value = getattr(self, f.name)
            if isinstance(value, Node):
                value = value.to_dict()
            elif isinstance(value, tuple):
                value = [v.to_dict() for v in value]
            d[f.name] = value
        return d


@dataclass(frozen=True)
class Literal(Node):
    """An opaque word: identifier, quoted string or expansion form, uninterpreted."""

    kind: ClassVar[str] = "literal"
    text: str


@dataclass(frozen=True)
class Comment(Node):
    """Everything after `#` on a line, including a leading space if present."""

    kind: ClassVar[str] = "comment"
    text: str


@dataclass(frozen=True)
class Redirect(Node):
    kind: ClassVar[str] = "redirect"
    op: str
    target: Node


@dataclass(frozen=True)
class Command(Node):
    """A simple command: words and redirects, in the order they were written."""

    kind: ClassVar[str] = "command"
    _sequences: ClassVar[tuple[str, ...]] = ("args",)
    args: Sequence[Node]


@dataclass(frozen=True)
class Subshell(Node):
    kind: ClassVar[str] = "subshell"
    _sequences: ClassVar[tuple[str, ...]] = ("statements",)
    statements: Sequence[Node]


@dataclass(frozen=True)
class Block(Node):
    kind: ClassVar[str] = "block"
    _sequences: ClassVar[tuple[str, ...]] = ("statements",)
    statements: Sequence[Node]


@dataclass(frozen=True)
class ElifClause(Node):
    """One `elif <condition>; then <then_branch>` link of an IfStatement."""

    kind: ClassVar[str] = "elif"
    _sequences: ClassVar[tuple[str, ...]] = ("then_branch",)
    condition: Node
    then_branch: Sequence[Node]


@dataclass(frozen=True)
class IfStatement(Node):
    """
    Conditional with optional chained `elif` clauses and an optional `else`.

    Attributes:
        condition (Node): The chain tested by `if`.
        then_branch (tuple[Node, ...]): Statements run when the condition holds.
        elif_clauses (tuple[ElifClause, ...]): Further conditions, in order.
        else_branch (tuple[Node, ...]): Statements of the `else` part; empty if absent.
    """

    kind: ClassVar[str] = "if"
    _sequences: ClassVar[tuple[str, ...]] = ("then_branch", "elif_clauses", "else_branch")
    condition: Node
    then_branch: Sequence[Node]
    elif_clauses: Sequence[ElifClause] = field(default=())
    else_branch: Sequence[Node] = field(default=())


@dataclass(frozen=True)
class WhileStatement(Node):
    kind: ClassVar[str] = "while"
    _sequences: ClassVar[tuple[str, ...]] = ("do_branch",)
    condition: Node
    do_branch: Sequence[Node]


@dataclass(frozen=True)
class BinaryExpr(Node):
    """
    Two commands joined by `&&`, `||` or `|`.

    Longer chains nest in `right`: `a && b || c` is
    `BinaryExpr("&&", a, BinaryExpr("||", b, c))`.
    """

    kind: ClassVar[str] = "binary"
    operator: str
    left: Node
    right: Node


@dataclass(frozen=True)
class FuncDecl(Node):
    kind: ClassVar[str] = "func"
    name: Literal
    body: Block


@dataclass(frozen=True)
class Program(Node):
    """Top-level container; the unit returned by parsing."""

    kind: ClassVar[str] = "program"
    _sequences: ClassVar[tuple[str, ...]] = ("statements",)
    statements: Sequence[Node] = field(default=())


def walk(node: Node) -> Iterator[Node]:
    """Yields `node` and every descendant, depth first, in source order."""
    yield node
    for child in node.children():
        yield from walk(child)


__all__ = [
    "BinaryExpr",
    "Block",
    "Command",
    "Comment",
    "ElifClause",
    "FuncDecl",
    "IfStatement",
    "Literal",
    "Node",
    "NodeDict",
    "Program",
    "Redirect",
    "Subshell",
    "WhileStatement",
    "walk",
]
