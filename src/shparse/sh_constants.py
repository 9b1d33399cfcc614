"""
Static token tables shared by the shell lexer and parser.

Attributes:
    token_hashmap (dict[str, str]): Operator spelling to token type. The lexer
        uses it for longest-match operator recognition.
    separator_tokens (set[str]): Token types that end a statement.
    chain_operators (set[str]): Token types joining commands into a chain.
    redirect_operators (set[str]): Token types introducing a redirection.
    reserved_words (set[str]): Words with grammatical meaning at statement start.
    closing_words (set[str]): Reserved words that can only end a statement list.
    word_breakers (str): Characters that end an unquoted word.
    quote_chars (str): Characters opening an opaque quoted region.
"""

token_hashmap: dict[str, str] = {
    ";": "SEMI",
    "\n": "NEWLINE",
    "&&": "AND_IF",
    "||": "OR_IF",
    "|": "PIPE",
    "(": "LPAREN",
    ")": "RPAREN",
    "{": "LBRACE",
    "}": "RBRACE",
    ">": "GREAT",
    ">>": "DGREAT",
    "<": "LESS",
}

separator_tokens: set[str] = {"SEMI", "NEWLINE"}

chain_operators: set[str] = {"AND_IF", "OR_IF", "PIPE"}

redirect_operators: set[str] = {"GREAT", "DGREAT", "LESS"}

reserved_words: set[str] = {"if", "then", "elif", "else", "fi", "while", "do", "done"}

closing_words: set[str] = reserved_words - {"if", "while"}

# `{` and `}` only act as operators at the start of a token, so `${x}` and
# `s{s` stay single words.
word_breakers: str = " \t\r\n;&|()<>"

quote_chars: str = "'\""

__all__ = [
    "chain_operators",
    "closing_words",
    "quote_chars",
    "redirect_operators",
    "reserved_words",
    "separator_tokens",
    "token_hashmap",
    "word_breakers",
]
