"""
Lexical analyzer for shell source text.

This module provides core components for converting raw shell source into token streams:

Classes:
    CharacterStream: Stream abstraction for reading characters with line/column tracking.
    Token: Represents a single token with type, value, and source location.
    Lexer: Converts a CharacterStream into a sequence of tokens.

Features:
    - Collapses runs of blanks and backslash-newline continuations
    - Emits `#` comments as COMMENT tokens (text after the `#`, verbatim)
    - Keeps quoted regions opaque, quotes included
    - Longest-match recognition of operators (`&&` before `&`, `>>` before `>`)
    - Emits `;` and newline as separator tokens
    - Treats `{` and `}` as plain word text once a command has started

Raises:
    LexError: If an unterminated quote or a lone `&` is encountered.

Example:
    >>> lexer = Lexer(CharacterStream("echo hi"))
    >>> lexer.next_token()
    Token(WORD, echo)

Exports:
    - CharacterStream
    - Token
    - Lexer
    - tokenize
    - token_hashmap
"""

from collections.abc import Iterator
from typing import Any

from shparse.sh_constants import (
    quote_chars,
    redirect_operators,
    reserved_words,
    token_hashmap,
    word_breakers,
)
from shparse.sh_errors import LexError


class CharacterStream:
    """
    A utility for reading characters from a string source with line and column tracking.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Raises:
            EOFError: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise EOFError(
                f"Attempted to read past end of source at position=<{self.position}>, line=<{self.line}>"
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """Returns the character at `offset` without advancing, or "" when out of bounds."""
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


class Token:
    """Represents a single lexical token.

    Attributes:
        type (str): The token type (e.g. 'WORD', 'COMMENT', 'AND_IF', 'EOF').
        value (str): The raw text of the token. For COMMENT, the text after `#`.
        line (int): The 1-based line number where the token starts.
        col (int): The 1-based column number where the token starts.
    """

    def __init__(self, type_: str, value: str, line: int = 0, col: int = 0):
        self.type = type_
        self.value = value
        self.line = line
        self.col = col

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Token)
            and self.type == other.type
            and self.value == other.value
            and self.line == other.line
            and self.col == other.col
        )

    def describe(self) -> str:
        """Returns the token as it should appear in an error message."""
        if self.type == "EOF":
            return "EOF"
        if self.type == "NEWLINE":
            return "newline"
        if self.type == "COMMENT":
            return "comment"
        return repr(self.value)


class Lexer:
    """Lexical analyzer for shell source.

    The Lexer takes a CharacterStream and converts it into a stream of Token objects.
    Iterating over a Lexer yields tokens up to and including the final EOF token.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
        name (str): Label of the source, used in error messages.
        in_command (bool): True once a command word has been read, until the next
            operator or separator. Inside a command `{` and `}` are plain text.
    """

    def __init__(self, stream: CharacterStream, name: str = "") -> None:
        self.stream = stream
        self.name = name
        self.in_command = False

    def __iter__(self) -> Iterator[Token]:
        while True:
            tok = self.next_token()
            yield tok
            if tok.type == "EOF":
                return

    def peek(self, offset: int = 0) -> str:
        return self.stream.peek(offset)

    def advance(self) -> str:
        return self.stream.next()

    def error(self, message: str, line: int, col: int) -> LexError:
        return LexError(message, name=self.name, line=line, col=col)

    def at_continuation(self) -> bool:
        return self.peek() == "\\" and self.peek(1) == "\n"

    def skip_whitespace(self) -> None:
        """Skips blanks and line continuations. Newlines are tokens, not whitespace."""
        while not self.stream.end_of_file():
            if self.peek() in " \t\r":
                self.advance()
            elif self.at_continuation():
                self.advance()
                self.advance()
            else:
                break

    def read_comment(self) -> str:
        """Consumes a comment up to (not including) the end of the line."""
        self.advance()  # '#'
        text = ""
        while not self.stream.end_of_file() and self.peek() != "\n":
            text += self.advance()
        return text

    def read_quoted(self) -> str:
        """Consumes a quoted region, returning it with both quote characters.

        Raises:
            LexError: If the input ends before the closing quote.
        """
        line, col = self.stream.line, self.stream.column
        quote = self.advance()
        val = quote
        while not self.stream.end_of_file():
            ch = self.peek()
            if ch == quote:
                return val + self.advance()
            if ch == "\\" and quote == '"':
                val += self.advance()
                if not self.stream.end_of_file():
                    val += self.advance()
            else:
                val += self.advance()
        raise self.error(f"unterminated {quote} quote", line, col)

    def read_word(self) -> str:
        """Consumes a word: unquoted characters and quoted regions up to a word breaker."""
        word = ""
        while not self.stream.end_of_file():
            ch = self.peek()
            if ch in word_breakers or self.at_continuation():
                break
            if ch in quote_chars:
                word += self.read_quoted()
            elif ch == "\\":
                word += self.advance()
                if not self.stream.end_of_file():
                    word += self.advance()
            else:
                word += self.advance()
        return word

    def match_operator(self) -> Token | None:
        """Attempts to match the longest valid operator from the current position.

        Returns:
            Token | None: A Token if a match is found, otherwise None.
        """
        line, col = self.stream.line, self.stream.column
        max_token = None
        match_len = 0
        candidate = ""

        for i in range(2):  # longest operator is two characters
            ch = self.stream.peek(i)
            if ch == "":
                break
            candidate += ch
            if candidate in token_hashmap:
                max_token = candidate
                match_len = i + 1

        if max_token:
            for _ in range(match_len):
                self.advance()
            return Token(token_hashmap[max_token], max_token, line, col)

        return None

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the stream.

        Raises:
            LexError: If a malformed token is encountered.
        """
        self.skip_whitespace()

        line, col = self.stream.line, self.stream.column
        if self.stream.end_of_file():
            return Token("EOF", "", line, col)

        ch = self.peek()

        # 1. Comment
        if ch == "#":
            return Token("COMMENT", self.read_comment(), line, col)

        # 2. Operator; `{` and `}` only outside a command (`echo {a,b}` is a word)
        if not (self.in_command and ch in "{}"):
            token = self.match_operator()
            if token:
                if token.type not in redirect_operators:
                    self.in_command = False
                return token

        # 3. Lone `&`: background jobs are not part of the grammar
        if ch == "&":
            raise self.error("invalid character '&'", line, col)

        # 4. Word, possibly with embedded quoted regions. A reserved word at
        # command start (`then`, `do`, ...) does not open a command.
        word = self.read_word()
        if self.in_command or word not in reserved_words:
            self.in_command = True
        return Token("WORD", word, line, col)


def tokenize(source: str, name: str = "") -> list[Token]:
    """Tokenizes `source` eagerly, returning every token including the final EOF."""
    return list(Lexer(CharacterStream(source), name))


__all__ = ["CharacterStream", "Lexer", "Token", "token_hashmap", "tokenize"]
