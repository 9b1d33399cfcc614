"""
Renders shell AST nodes back into canonical shell text.

This module defines the `ShellPrinter` class, the inverse of the parser: for every
construct it produces exactly one spelling, the minimal single-line form the parser
accepts, so that `render(parse(text)) == text` for canonical input.

Canonical Forms:
    - Command: words and redirects joined by single spaces (`foo >a >>b <c`)
    - Statement lists: each statement terminated by `;` (`{ a; b; }`)
    - Control flow: `if a; then b; elif c; then d; else e; fi`, `while a; do b; done`
    - Chains: `a && b || c`, without parentheses; nesting is implicit
    - Functions: `name() { body; }`
    - Comments: `#` plus the stored text, always followed by a newline when
      another statement comes after them

Behavior:
    - Pure: no state survives between calls to `render()`.
    - Defined over well-formed trees only; there is no error path for them.

Raises:
    - `NotImplementedError`: If a node kind has no corresponding emitter.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shparse.sh_ast import (
        BinaryExpr,
        Block,
        Command,
        Comment,
        ElifClause,
        FuncDecl,
        IfStatement,
        Literal,
        Node,
        Program,
        Redirect,
        Subshell,
        WhileStatement,
    )


class ShellPrinter:
    """Emits canonical shell text from AST nodes.

    Each node kind `k` is handled by an `emit_k` method returning the text for
    that node; `render()` dispatches on `node.kind`.

    Methods:
        render(node): Returns the canonical text for any node, including a Program.
        emit_statements(stmts): Renders a `;`-terminated statement list.
    """

    def render(self, node: Node) -> str:
        return self._visit(node)

    def _visit(self, node: Node) -> str:
        """
        Dispatches a node to the matching `emit_<kind>` method.

        Raises
        ------
        NotImplementedError
            If no emitter is defined for the node kind.
        """
        meth = getattr(self, f"emit_{node.kind}", None)
        if not meth:
            raise NotImplementedError(f"ShellPrinter: no emitter for {node.kind}")
        return str(meth(node))

    def emit_statements(self, stmts: Sequence[Node]) -> str:
        """
        Renders the body of a grouping or control construct.

        Every statement is terminated with `;`, except comments, which run to
        the end of the line and are terminated with a newline instead.
        """
        parts = []
        for stmt in stmts:
            if stmt.kind == "comment":
                parts.append(self._visit(stmt) + "\n")
            else:
                parts.append(self._visit(stmt) + ";")
        return " ".join(parts)

    def emit_literal(self, node: Literal) -> str:
        return node.text

    def emit_comment(self, node: Comment) -> str:
        return f"#{node.text}"

    def emit_command(self, node: Command) -> str:
        return " ".join(self._visit(arg) for arg in node.args)

    def emit_redirect(self, node: Redirect) -> str:
        return f"{node.op}{self._visit(node.target)}"

    def emit_subshell(self, node: Subshell) -> str:
        return f"( {self.emit_statements(node.statements)} )"

    def emit_block(self, node: Block) -> str:
        return f"{{ {self.emit_statements(node.statements)} }}"

    def emit_elif(self, node: ElifClause) -> str:
        cond = self._visit(node.condition)
        return f"elif {cond}; then {self.emit_statements(node.then_branch)}"

    def emit_if(self, node: IfStatement) -> str:
        """
        Emits an `if` statement with its `elif` chain and optional `else` part.

        Parameters
        ----------
        node : IfStatement
            The conditional to render.

        Returns
        -------
        str
            e.g. `if a; then b; elif c; then d; else e; fi`
        """
        parts = [
            f"if {self._visit(node.condition)};",
            f"then {self.emit_statements(node.then_branch)}",
        ]
        parts.extend(self._visit(clause) for clause in node.elif_clauses)
        if node.else_branch:
            parts.append(f"else {self.emit_statements(node.else_branch)}")
        parts.append("fi")
        return " ".join(parts)

    def emit_while(self, node: WhileStatement) -> str:
        cond = self._visit(node.condition)
        return f"while {cond}; do {self.emit_statements(node.do_branch)} done"

    def emit_binary(self, node: BinaryExpr) -> str:
        # walk the right spine iteratively; chains can be arbitrarily long
        parts: list[str] = []
        right: Node = node
        while right.kind == "binary":
            parts += [self._visit(right.left), right.operator]  # type: ignore[attr-defined]
            right = right.right  # type: ignore[attr-defined]
        parts.append(self._visit(right))
        return " ".join(parts)

    def emit_func(self, node: FuncDecl) -> str:
        return f"{self._visit(node.name)}() {self._visit(node.body)}"

    def emit_program(self, node: Program) -> str:
        """
        Emits a whole program.

        Top-level statements are separated by `; ` without a trailing separator;
        a comment is separated from what follows by a newline.
        """
        out = ""
        for i, stmt in enumerate(node.statements):
            if i:
                out += "\n" if node.statements[i - 1].kind == "comment" else "; "
            out += self._visit(stmt)
        return out


__all__ = ["ShellPrinter"]
