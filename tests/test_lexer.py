import pytest
from hypothesis import given
from hypothesis import strategies as st

from shparse.sh_constants import reserved_words
from shparse.sh_errors import LexError
from shparse.sh_lexer import CharacterStream, Lexer, Token, tokenize


def types(source: str) -> list[str]:
    return [tok.type for tok in tokenize(source)]


def values(source: str) -> list[str]:
    return [tok.value for tok in tokenize(source) if tok.type != "EOF"]


def test_operator_tokens() -> None:
    code = "&& || | ( ) { } > >> < ;"
    expected = [
        "AND_IF",
        "OR_IF",
        "PIPE",
        "LPAREN",
        "RPAREN",
        "LBRACE",
        "RBRACE",
        "GREAT",
        "DGREAT",
        "LESS",
        "SEMI",
        "EOF",
    ]
    assert types(code) == expected


def test_two_char_operators_are_greedy() -> None:
    assert types(">>a") == ["DGREAT", "WORD", "EOF"]
    assert types("> >a") == ["GREAT", "GREAT", "WORD", "EOF"]
    assert types("a||b|c") == ["WORD", "OR_IF", "WORD", "PIPE", "WORD", "EOF"]


def test_operators_break_words() -> None:
    assert values("foo&&bar") == ["foo", "&&", "bar"]
    assert values("foo;bar") == ["foo", ";", "bar"]
    assert values("foo() {") == ["foo", "(", ")", "{"]


def test_newline_is_a_separator_token() -> None:
    assert types("foo\nbar") == ["WORD", "NEWLINE", "WORD", "EOF"]


def test_whitespace_runs_collapse() -> None:
    assert values(" foo  a \t b ") == ["foo", "a", "b"]


def test_line_continuation_is_whitespace() -> None:
    assert types("foo \\\n a b") == ["WORD", "WORD", "WORD", "EOF"]
    assert values("foo\\\nbar") == ["foo", "bar"]


def test_braces_only_open_tokens() -> None:
    assert values("$a ${b} s{s s=s") == ["$a", "${b}", "s{s", "s=s"]
    assert types("{foo;}") == ["LBRACE", "WORD", "SEMI", "RBRACE", "EOF"]


def test_braces_inside_command_are_words() -> None:
    assert values("echo {a,b} }") == ["echo", "{a,b}", "}"]
    assert types("echo >out {x}") == ["WORD", "GREAT", "WORD", "WORD", "EOF"]


def test_braces_after_keywords_and_operators() -> None:
    assert types("then { a; }") == ["WORD", "LBRACE", "WORD", "SEMI", "RBRACE", "EOF"]
    assert types("a && {") == ["WORD", "AND_IF", "LBRACE", "EOF"]
    assert types("f() {") == ["WORD", "LPAREN", "RPAREN", "LBRACE", "EOF"]
    assert types("a\n}") == ["WORD", "NEWLINE", "RBRACE", "EOF"]


def test_quoted_words_are_opaque() -> None:
    assert values("echo ' ' \"foo bar\"") == ["echo", "' '", '"foo bar"']


def test_quotes_inside_word() -> None:
    assert values('a"b c"d x') == ['a"b c"d', "x"]


def test_operators_inside_quotes_are_literal() -> None:
    assert values("echo 'a && b; c'") == ["echo", "'a && b; c'"]


def test_double_quote_escape() -> None:
    assert values('"a\\"b" c') == ['"a\\"b"', "c"]


def test_single_quote_has_no_escapes() -> None:
    assert values("'a\\' b") == ["'a\\'", "b"]


def test_backslash_escapes_breaker() -> None:
    assert values("a\\;b c") == ["a\\;b", "c"]


def test_comment_token() -> None:
    tokens = tokenize("# foo\nbar")
    assert tokens[0] == Token("COMMENT", " foo", 1, 1)
    assert tokens[1].type == "NEWLINE"
    assert tokens[2] == Token("WORD", "bar", 2, 1)


def test_comment_without_space() -> None:
    assert tokenize("#foo")[0].value == "foo"


def test_hash_inside_word_is_literal() -> None:
    assert values("foo#bar") == ["foo#bar"]


def test_line_and_column_tracking() -> None:
    tokens = tokenize("foo a\n  bar")
    assert (tokens[1].line, tokens[1].col) == (1, 5)
    assert (tokens[3].line, tokens[3].col) == (2, 3)


def test_reserved_words_are_plain_words() -> None:
    for word in reserved_words:
        assert tokenize(word)[0].type == "WORD"


def test_unterminated_single_quote() -> None:
    with pytest.raises(LexError) as e:
        tokenize("echo 'unterminated", "t.sh")
    assert e.value.name == "t.sh"
    assert (e.value.line, e.value.col) == (1, 6)
    assert "unterminated" in str(e.value)


def test_unterminated_double_quote() -> None:
    with pytest.raises(LexError):
        tokenize('echo "foo\nbar')


def test_lone_ampersand_is_invalid() -> None:
    with pytest.raises(LexError, match="&"):
        tokenize("sleep 1 &")


def test_iteration_stops_after_eof() -> None:
    tokens = list(Lexer(CharacterStream("a")))
    assert [t.type for t in tokens] == ["WORD", "EOF"]


def test_token_eof() -> None:
    lexer = Lexer(CharacterStream(""))
    assert lexer.next_token().type == "EOF"
    assert lexer.next_token().type == "EOF"


def test_character_stream_past_end() -> None:
    stream = CharacterStream("")
    with pytest.raises(EOFError):
        stream.next()
    assert stream.peek() == ""
    assert stream.end_of_file()


def test_token_equality() -> None:
    assert Token("WORD", "a", 1, 1) == Token("WORD", "a", 1, 1)
    assert Token("WORD", "a", 1, 1) != Token("WORD", "a", 1, 2)
    assert Token("WORD", "a", 1, 1) != "a"
    assert repr(Token("WORD", "a")) == "Token(WORD, a)"


words = st.from_regex(r"[a-zA-Z0-9_$=.,/-]{1,8}", fullmatch=True)
gaps = st.lists(st.sampled_from([" ", "\t", "\\\n"]), min_size=1, max_size=3).map("".join)


@given(st.lists(words, min_size=1, max_size=6), gaps)  # type: ignore[misc]
def test_words_survive_any_whitespace(ws: list[str], gap: str) -> None:
    assert values(gap.join(ws)) == ws
