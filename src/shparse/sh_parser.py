"""
Shell Parser

Parses shell tokens into an immutable abstract syntax tree (a `Program`).

This module implements a recursive-descent parser over the token stream produced by
`shparse.sh_lexer.Lexer`. Tokens are pulled from the lexer on demand, so a lexical
error is only reported once the parser reaches it.

Supported Constructs
--------------------
- Simple commands with interleaved words and redirects: `foo >a >>b <c`
- Chains: `a && b`, `a || b`, `a | b`, all right-associative on one tier
- Groupings: `( ... )` subshells and `{ ... }` blocks
- Control flow: `if`/`elif`/`else`/`fi`, `while`/`do`/`done`
- Functions: `name() { ... }`
- Comments, kept as statements

Grammar
-------
    Program          := (Statement Separator*)*
    Statement        := AndOrChain | Comment
    AndOrChain       := Unit (("&&" | "||" | "|") AndOrChain)?
    Unit             := Command | Subshell | Block | IfStatement | WhileStatement | FuncDecl
    Command          := (Word | Redirect)+
    Redirect         := (">" | ">>" | "<") Word
    Subshell         := "(" StatementList ")"
    Block            := "{" StatementList "}"
    IfStatement      := "if" AndOrChain Separator+ "then" StatementList
                        ("elif" AndOrChain Separator+ "then" StatementList)*
                        ("else" StatementList)? "fi"
    WhileStatement   := "while" AndOrChain Separator+ "do" StatementList "done"
    FuncDecl         := Word "(" ")" Block

Entry Points
------------
- `parse()`: Parse a text stream or string; returns `(Program, error)`.
- `Parser.parse()`: Parse a token stream; raises on the first error.

Raises
------
ShellSyntaxError
    Raised by `Parser` when the token stream does not match the grammar.
LexError
    Propagated from the lexer when the source cannot be tokenized.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import IO

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
from shparse.sh_constants import (
    chain_operators,
    closing_words,
    redirect_operators,
    separator_tokens,
)
from shparse.sh_errors import ParseError, ShellSyntaxError
from shparse.sh_lexer import CharacterStream, Lexer, Token

logger = logging.getLogger(__name__)


class Parser:
    """
    Shell Parser Class

    Transforms a stream of lexical tokens into a `Program`. The parser is
    fail-fast: the first mismatch raises and no partial tree is returned.

    Attributes
    ----------
    tokens : Iterator[Token]
        The remaining, not yet buffered, input tokens.
    buffer : list[Token]
        Lookahead tokens pulled from `tokens` but not consumed.
    name : str
        Label of the input, included in error messages.

    Methods
    -------
    parse() -> Program
        Parse a complete program.
    parse_statement_list(closers) -> list[Node]
        Parse statements until EOF or one of the expected closers.
    parse_statement() -> Node
        Parse a comment or a chain.
    parse_and_or() -> Node
        Parse a right-associative `&&`/`||`/`|` chain.
    parse_unit() -> Node
        Parse a command, grouping, control construct or function.
    """

    def __init__(self, tokens: Iterable[Token], name: str = "") -> None:
        self.tokens = iter(tokens)
        self.buffer: list[Token] = []
        self.name = name
        self.last: Token = Token("EOF", "", 1, 1)

    def _fill(self, count: int) -> None:
        while len(self.buffer) < count:
            if self.buffer and self.buffer[-1].type == "EOF":
                self.buffer.append(self.buffer[-1])
                continue
            tok = next(self.tokens, None)
            if tok is None:
                line, col = self.last.line, self.last.col
                tok = Token("EOF", "", line, col)
            self.buffer.append(tok)

    def current(self) -> Token:
        return self.peek(0)

    def peek(self, offset: int = 1) -> Token:
        self._fill(offset + 1)
        return self.buffer[offset]

    def advance(self) -> Token:
        tok = self.current()
        if tok.type != "EOF":
            self.buffer.pop(0)
        self.last = tok
        return tok

    def error(self, message: str, tok: Token | None = None) -> ShellSyntaxError:
        tok = tok or self.current()
        return ShellSyntaxError(message, name=self.name, line=tok.line, col=tok.col)

    def at_word(self, *values: str) -> bool:
        tok = self.current()
        return tok.type == "WORD" and (not values or tok.value in values)

    def match(self, *types: str) -> Token:
        tok = self.current()
        if tok.type in types:
            return self.advance()
        raise self.error(f"Expected one of {types}, got {tok.describe()}")

    def expect_closer(self, opener: Token, closer: str, tok_type: str = "WORD") -> Token:
        """Consumes the token closing `opener`, or raises naming the unclosed construct."""
        tok = self.current()
        if tok.type == tok_type and (tok_type != "WORD" or tok.value == closer):
            return self.advance()
        raise self.error(
            f"unclosed {opener.value!r} (opened at {opener.line}:{opener.col}): "
            f"expected {closer!r}, got {tok.describe()}"
        )

    def skip_separators(self) -> int:
        count = 0
        while self.current().type in separator_tokens:
            self.advance()
            count += 1
        return count

    def skip_newlines(self) -> None:
        while self.current().type == "NEWLINE":
            self.advance()

    def parse(self) -> Program:
        """Parse a full program and return it."""
        stmts = self.parse_statement_list()
        tok = self.current()
        if tok.type != "EOF":
            raise self.error(f"unexpected {tok.describe()}")
        return Program(stmts)

    def at_closer(self, closers: tuple[str, ...]) -> bool:
        tok = self.current()
        if tok.type == "WORD":
            return tok.value in closing_words and tok.value in closers
        return tok.type in closers

    def parse_statement_list(self, closers: tuple[str, ...] = ()) -> list[Node]:
        """
        Parse statements until EOF or a token in `closers`.

        `closers` holds reserved words (`fi`, `done`, ...) and/or token types
        (`RPAREN`, `RBRACE`). Separators between, before and after statements
        are consumed and discarded. The closer itself is left unconsumed.
        """
        stmts: list[Node] = []
        self.skip_separators()
        while self.current().type != "EOF" and not self.at_closer(closers):
            tok = self.current()
            if (tok.type == "WORD" and tok.value in closing_words) or tok.type in (
                "RPAREN",
                "RBRACE",
            ):
                raise self.error(f"unexpected {tok.describe()}")
            stmts.append(self.parse_statement())
            # a trailing comment needs no separator: `foo # note`
            if self.skip_separators() or self.current().type == "COMMENT":
                continue
            if self.current().type != "EOF" and not self.at_closer(closers):
                raise self.error(
                    f"expected ';' or newline after statement, got {self.current().describe()}"
                )
        return stmts

    def parse_body(self, opener: Token, closers: tuple[str, ...]) -> list[Node]:
        """Parse a statement list that must not be empty."""
        stmts = self.parse_statement_list(closers)
        if not stmts:
            raise self.error(f"{opener.value!r} body cannot be empty")
        return stmts

    def parse_statement(self) -> Node:
        tok = self.current()
        if tok.type == "COMMENT":
            self.advance()
            return Comment(tok.value)
        return self.parse_and_or()

    def parse_and_or(self) -> Node:
        """
        Parse a chain of units joined by `&&`, `||` or `|`.

        All three operators share one precedence tier; the remainder of the
        chain after an operator becomes the right operand, so the tree leans
        right: `a && b || c` is `&&(a, ||(b, c))`. The chain is read in a loop
        and folded from the right, so its length is not bounded by the stack.
        """
        units = [self.parse_unit()]
        ops: list[str] = []
        while self.current().type in chain_operators:
            ops.append(self.advance().value)
            self.skip_newlines()
            units.append(self.parse_unit())

        node = units.pop()
        while ops:
            node = BinaryExpr(ops.pop(), units.pop(), node)
        return node

    def parse_unit(self) -> Node:
        tok = self.current()
        if tok.type == "LPAREN":
            return self.parse_subshell()
        if tok.type == "LBRACE":
            return self.parse_block()
        if tok.type == "WORD":
            if tok.value == "if":
                return self.parse_if()
            if tok.value == "while":
                return self.parse_while()
            if self.peek().type == "LPAREN":
                return self.parse_func()
        if tok.type == "WORD" or tok.type in redirect_operators:
            return self.parse_command()
        raise self.error(f"expected a command, got {tok.describe()}")

    def parse_command(self) -> Command:
        """Parse words and redirects, keeping them in source order."""
        args: list[Node] = []
        while True:
            tok = self.current()
            if tok.type == "WORD":
                self.advance()
                args.append(Literal(tok.value))
            elif tok.type in redirect_operators:
                args.append(self.parse_redirect())
            else:
                break
        if not args:
            raise self.error(f"expected a command, got {self.current().describe()}")
        if self.current().type == "LPAREN":
            raise self.error("unexpected '(' after command words")
        return Command(args)

    def parse_redirect(self) -> Redirect:
        op_tok = self.advance()
        tok = self.current()
        if tok.type != "WORD":
            raise self.error(
                f"expected a word after {op_tok.value!r}, got {tok.describe()}"
            )
        self.advance()
        return Redirect(op_tok.value, Literal(tok.value))

    def parse_subshell(self) -> Subshell:
        opener = self.match("LPAREN")
        stmts = self.parse_body(opener, ("RPAREN",))
        self.expect_closer(opener, ")", "RPAREN")
        return Subshell(stmts)

    def parse_block(self) -> Block:
        opener = self.match("LBRACE")
        stmts = self.parse_body(opener, ("RBRACE",))
        self.expect_closer(opener, "}", "RBRACE")
        return Block(stmts)

    def parse_condition(self, opener: Token, keyword: str) -> Node:
        """Parse the chain after `if`/`elif`/`while` and the keyword that ends it."""
        cond = self.parse_and_or()
        if not self.skip_separators():
            raise self.error(
                f"expected ';' or newline before {keyword!r}, got {self.current().describe()}"
            )
        if not self.at_word(keyword):
            raise self.error(
                f"expected {keyword!r} after {opener.value!r} condition "
                f"(opened at {opener.line}:{opener.col}), got {self.current().describe()}"
            )
        self.advance()
        return cond

    def parse_if(self) -> IfStatement:
        """Parse `if ... then ... [elif ... then ...]* [else ...] fi`."""
        opener = self.advance()
        cond = self.parse_condition(opener, "then")
        then_branch = self.parse_body(opener, ("elif", "else", "fi"))

        elifs: list[ElifClause] = []
        while self.at_word("elif"):
            elif_tok = self.advance()
            elif_cond = self.parse_condition(elif_tok, "then")
            elif_body = self.parse_body(elif_tok, ("elif", "else", "fi"))
            elifs.append(ElifClause(elif_cond, elif_body))

        else_branch: list[Node] = []
        if self.at_word("else"):
            else_tok = self.advance()
            else_branch = self.parse_body(else_tok, ("fi",))

        self.expect_closer(opener, "fi")
        return IfStatement(cond, then_branch, elifs, else_branch)

    def parse_while(self) -> WhileStatement:
        opener = self.advance()
        cond = self.parse_condition(opener, "do")
        body = self.parse_body(opener, ("done",))
        self.expect_closer(opener, "done")
        return WhileStatement(cond, body)

    def parse_func(self) -> FuncDecl:
        """Parse `name() { ... }`. The parentheses must be empty."""
        name_tok = self.advance()
        self.match("LPAREN")
        if self.current().type != "RPAREN":
            raise self.error(
                f"function {name_tok.value!r} must be declared with empty '()', "
                f"got {self.current().describe()}"
            )
        self.advance()
        self.skip_newlines()
        if self.current().type != "LBRACE":
            raise self.error(
                f"function {name_tok.value!r} body must be a '{{ ... }}' block, "
                f"got {self.current().describe()}"
            )
        return FuncDecl(Literal(name_tok.value), self.parse_block())


def parse(source: str | IO[str], name: str = "") -> tuple[Program, ParseError | None]:
    """
    Parse shell source into a Program.

    Args:
        source: A text stream (anything with `read()`) or a string. The stream
            is read but not closed.
        name: Label for the source, included in error messages only.

    Returns:
        `(program, None)` on success, or `(Program(), error)` on the first
        lexical or syntax error. Groupings nested deeper than the interpreter
        stack allows are reported as a syntax error. The empty program must not
        be treated as meaningful when an error is returned.
    """
    text = source if isinstance(source, str) else source.read()
    logger.debug(f"Parsing {name or '<input>'} ({len(text)} chars)")
    parser = Parser(Lexer(CharacterStream(text), name), name)
    try:
        program = parser.parse()
    except ParseError as e:
        logger.debug(f"Parse failed: {e}")
        return Program(), e
    except RecursionError:
        err = parser.error("nesting too deep")
        logger.debug(f"Parse failed: {err}")
        return Program(), err
    logger.debug(f"Parsed {len(program.statements)} top-level statements")
    return program, None


__all__ = ["Parser", "parse"]
