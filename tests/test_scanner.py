import io

from lox.errors import ErrorReporter
from lox.scanner import Scanner, scan
from lox.tokens import Token, TokenType


def types_of(tokens):
    return [t.type for t in tokens]


def test_scan_punctuation_and_operators():
    tokens, had_errors = scan('(){},.-+;*/ ! != = == < <= > >=')
    assert had_errors is False
    assert types_of(tokens) == [
        TokenType.LEFT_PAREN, TokenType.RIGHT_PAREN, TokenType.LEFT_BRACE,
        TokenType.RIGHT_BRACE, TokenType.COMMA, TokenType.DOT, TokenType.MINUS,
        TokenType.PLUS, TokenType.SEMICOLON, TokenType.STAR, TokenType.SLASH,
        TokenType.BANG, TokenType.BANG_EQUAL, TokenType.EQUAL, TokenType.EQUAL_EQUAL,
        TokenType.LESS, TokenType.LESS_EQUAL, TokenType.GREATER, TokenType.GREATER_EQUAL,
        TokenType.EOF,
    ]


def test_two_char_operators_match_longest():
    tokens, _ = scan('a<=b')
    assert [t.lexeme for t in tokens] == ['a', '<=', 'b', '']


def test_comment_runs_to_end_of_line():
    tokens, had_errors = scan('1 // ignored ; tokens\n2')
    assert had_errors is False
    assert types_of(tokens) == [TokenType.NUMBER, TokenType.NUMBER, TokenType.EOF]
    assert tokens[1].line == 2


def test_numbers_are_floats():
    tokens, _ = scan('12 3.25')
    assert tokens[0] == Token(TokenType.NUMBER, '12', 12.0, 1)
    assert tokens[1] == Token(TokenType.NUMBER, '3.25', 3.25, 1)


def test_trailing_dot_is_not_part_of_number():
    tokens, _ = scan('1.')
    assert types_of(tokens) == [TokenType.NUMBER, TokenType.DOT, TokenType.EOF]
    assert tokens[0].lexeme == '1'


def test_string_literal_value_excludes_quotes():
    tokens, had_errors = scan('"hi there"')
    assert had_errors is False
    assert tokens[0].type == TokenType.STRING
    assert tokens[0].lexeme == '"hi there"'
    assert tokens[0].literal == 'hi there'


def test_multiline_string_advances_line_counter():
    tokens, _ = scan('"a\nb"\nx')
    assert tokens[0].literal == 'a\nb'
    assert tokens[1].type == TokenType.IDENTIFIER
    assert tokens[1].line == 3
    assert tokens[-1].line == 3


def test_keywords_and_identifiers():
    tokens, _ = scan('var variable print _x1 nil orchid or')
    assert types_of(tokens) == [
        TokenType.VAR, TokenType.IDENTIFIER, TokenType.PRINT, TokenType.IDENTIFIER,
        TokenType.NIL, TokenType.IDENTIFIER, TokenType.OR, TokenType.EOF,
    ]
    assert tokens[0].literal is None


def test_eof_token_is_always_last_and_unique():
    for source in ('', '   ', 'print 1;', '\n\n'):
        tokens, _ = scan(source)
        assert [t.type for t in tokens].count(TokenType.EOF) == 1
        assert tokens[-1].type == TokenType.EOF
        assert tokens[-1].lexeme == ''
    tokens, _ = scan('\n\n')
    assert tokens[-1].line == 3


def test_unexpected_character_is_reported_and_scanning_continues():
    stream = io.StringIO()
    tokens, had_errors = scan('1 @ 2 # 3', ErrorReporter(stream))
    assert had_errors is True
    assert types_of(tokens) == [TokenType.NUMBER, TokenType.NUMBER, TokenType.NUMBER, TokenType.EOF]
    assert stream.getvalue() == (
        "[line 1] Error: unexpected character @\n"
        "[line 1] Error: unexpected character #\n"
    )


def test_unterminated_string_reports_starting_line(capsys):
    tokens, had_errors = scan('print "abc;\nmore\ntext')
    assert had_errors is True
    assert types_of(tokens) == [TokenType.PRINT, TokenType.EOF]
    err = capsys.readouterr().err
    assert err == "[line 1] Error: unterminated string\n"


def test_scanning_is_deterministic():
    source = 'var x = 1;\nprint x + 2;'
    assert scan(source) == scan(source)


def test_token_str():
    assert str(Token(TokenType.NUMBER, '1', 1.0, 1)) == 'NUMBER 1 1.0'
    assert str(Token(TokenType.SEMICOLON, ';', None, 1)) == 'SEMICOLON ; nil'


def test_scanner_tracks_error_count_on_reporter():
    reporter = ErrorReporter(io.StringIO())
    Scanner('$ $', reporter).scan_tokens()
    assert reporter.error_count == 2
