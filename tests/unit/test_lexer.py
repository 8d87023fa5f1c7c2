import traceback

import pytest

import lexer as lx
from lexer import LexError, Token, TokenKind


def kinds(text):
    toks = lx.lex(text)
    assert toks[-1].kind == TokenKind.EOF
    return [tok.kind for tok in toks[:-1]]


def test_structural_characters_one_token_each():
    assert kinds("{}[]:,") == [
        TokenKind.LBRACE, TokenKind.RBRACE,
        TokenKind.LBRACKET, TokenKind.RBRACKET,
        TokenKind.COLON, TokenKind.COMMA,
    ]


def test_whitespace_produces_no_tokens():
    assert kinds(" \t\r\n ") == []
    assert kinds(" [ \n\t1 ,\r\n2 ] ") == [
        TokenKind.LBRACKET, TokenKind.NUMBER, TokenKind.COMMA,
        TokenKind.NUMBER, TokenKind.RBRACKET,
    ]


def test_keywords_carry_python_constants():
    toks = lx.lex("true false null")
    assert [(t.kind, t.value) for t in toks[:-1]] == [
        (TokenKind.TRUE, True),
        (TokenKind.FALSE, False),
        (TokenKind.NULL, None),
    ]


def test_numbers_are_floats():
    toks = lx.lex("30 -2 95.5 1e3 2.5E-2 -0")
    values = [t.value for t in toks[:-1]]
    assert values == [30.0, -2.0, 95.5, 1000.0, 0.025, -0.0]
    assert all(isinstance(v, float) for v in values)


def test_string_payload_is_verbatim():
    tok = lx.lex('"hello world"')[0]
    assert tok.kind == TokenKind.STRING
    assert tok.value == "hello world"


def test_backslash_kept_in_payload():
    tok = lx.lex(r'"C:\temp\n"')[0]
    assert tok.value == r"C:\temp\n"


def test_backslash_quote_still_terminates_string():
    # No escape handling: the string ends at the first quote after the backslash.
    toks = lx.lex(r'{"k":"a\"}')
    assert [t.kind for t in toks] == [
        TokenKind.LBRACE, TokenKind.STRING, TokenKind.COLON,
        TokenKind.STRING, TokenKind.RBRACE, TokenKind.EOF,
    ]
    assert toks[3].value == "a\\"


def test_backslash_quote_leaves_remainder_as_garbage():
    with pytest.raises(LexError) as ei:
        lx.lex(r'"a\"b"')
    assert "unknown literal 'b'" in str(ei.value)


def test_positions_track_offset_line_and_column():
    src = '{\n  "name": "Alice",\n  "age": 30\n}'
    toks = lx.lex(src)
    assert toks[0] == Token(TokenKind.LBRACE, "{", 0, 1, 1)
    name = toks[1]
    assert (name.value, name.offset, name.line, name.column) == ("name", 4, 2, 3)
    age_value = toks[7]
    assert (age_value.value, age_value.line, age_value.column) == (30.0, 3, 10)
    assert toks[-2].line == 4


def test_newline_inside_string_advances_line():
    toks = lx.lex('["a\nb", 1]')
    assert toks[1].value == "a\nb"
    assert toks[3].line == 2


def test_token_str_names_line():
    toks = lx.lex('\n\n[true]')
    assert str(toks[0]) == "'[' at line: 3"
    assert str(toks[1]) == "'true' at line: 3"


def test_unterminated_string_reports_offset():
    with pytest.raises(LexError) as ei:
        lx.lex('"abc')
    assert "unterminated string at offset 0" in str(ei.value)
    assert ei.value.offset == 0


def test_unterminated_string_after_other_tokens():
    with pytest.raises(LexError) as ei:
        lx.lex('["ok", "nope]')
    assert ei.value.offset == 7
    assert "unterminated string" in str(ei.value)


@pytest.mark.parametrize("bad", ["1.2.3", "1-2", "-", "1.", "1e", "2e+", "--1", "1e5e5"])
def test_malformed_numbers_rejected(bad):
    with pytest.raises(LexError) as ei:
        lx.lex(bad)
    assert f"invalid number '{bad}'" in str(ei.value)


def test_number_overflow_rejected():
    with pytest.raises(LexError) as ei:
        lx.lex("[1e999]")
    assert "out of range" in str(ei.value)
    assert ei.value.offset == 1


@pytest.mark.parametrize("word", ["True", "nul", "undefined", "truex", "NaN"])
def test_unknown_literals_rejected(word):
    with pytest.raises(LexError) as ei:
        lx.lex(f"[{word}]")
    assert f"unknown literal '{word}'" in str(ei.value)


@pytest.mark.parametrize("src, ch, offset", [
    ("[1, 2]  @", "@", 8),
    ("'single'", "'", 0),
    ("[.5]", ".", 1),
    ("[+1]", "+", 1),
    ("{\f}", "\f", 1),
])
def test_invalid_character_reports_offset(src, ch, offset):
    with pytest.raises(LexError) as ei:
        lx.lex(src)
    assert f"invalid character {ch!r}" in str(ei.value)
    assert ei.value.offset == offset


def test_error_message_includes_line_and_column():
    with pytest.raises(LexError) as ei:
        lx.lex('{\n  "a": #\n}')
    err = ei.value
    assert (err.line, err.column) == (2, 8)
    assert str(err).endswith("at offset 9 (line 2, column 8)")


def test_lex_error_is_a_syntax_error():
    with pytest.raises(SyntaxError):
        lx.lex("?")


def test_line_col_helper():
    assert lx.line_col("ab\ncd", 0) == (1, 1)
    assert lx.line_col("ab\ncd", 3) == (2, 1)
    assert lx.line_col("ab\ncd", 4) == (2, 2)


def test_tokenize_is_lazy():
    gen = lx.tokenize("[1, ?")
    assert next(gen).kind == TokenKind.LBRACKET
    assert next(gen).kind == TokenKind.NUMBER
    assert next(gen).kind == TokenKind.COMMA
    with pytest.raises(LexError):
        next(gen)


def test_lex_ends_with_eof_at_end_of_source():
    assert lx.lex("") == [Token(TokenKind.EOF, None, 0, 1, 1)]
    eof = lx.lex('[1,\n  2')[-1]
    assert (eof.kind, eof.offset, eof.line, eof.column) == (TokenKind.EOF, 7, 2, 4)
    assert str(eof) == "'EOF' at line: 2"


def test_number_token_text_drops_trailing_zero():
    toks = lx.lex("[76, 88.0, 95.5, 1e300]")
    assert [t.text for t in toks if t.kind == TokenKind.NUMBER] == ["76", "88", "95.5", "1e+300"]
    assert str(toks[1]) == "'76' at line: 1"


def test_uncaught_traceback_shows_position():
    with pytest.raises(LexError) as ei:
        lx.lex('[1,\n @]')
    err = ei.value
    assert err.reason == "invalid character '@'"
    last = traceback.format_exception_only(type(err), err)[-1]
    assert last == "lexer.LexError: invalid character '@' at offset 5 (line 2, column 2)\n"
