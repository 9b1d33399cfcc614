"""
Error types raised while tokenizing and parsing shell source.

Classes:
    ParseError: Base class. Subclasses the built-in `SyntaxError` so callers
        catching `SyntaxError` keep working.
    LexError: Raised by the lexer (unterminated quote, invalid character).
    ShellSyntaxError: Raised by the parser (unexpected token, missing closer).

Every error carries the stream name and a 1-based line/column position.

Example:
    >>> str(LexError("unterminated quote", name="script.sh", line=2, col=6))
    'script.sh:2:6: unterminated quote'
"""


class ParseError(SyntaxError):
    """Base class for all shell parsing failures.

    Attributes:
        message (str): Human-readable description of the fault.
        name (str): Label of the input stream, as passed to the parser.
        line (int): 1-based line of the fault.
        col (int): 1-based column of the fault.
    """

    def __init__(self, message: str, name: str = "", line: int = 0, col: int = 0):
        super().__init__(message, (name or None, line, col, None))
        self.message = message
        self.name = name
        self.line = line
        self.col = col

    def __str__(self) -> str:
        prefix = f"{self.name}:" if self.name else ""
        return f"{prefix}{self.line}:{self.col}: {self.message}"


class LexError(ParseError):
    """Raised when the source cannot be split into tokens."""


class ShellSyntaxError(ParseError):
    """Raised when the token stream does not match the grammar."""


__all__ = ["LexError", "ParseError", "ShellSyntaxError"]
