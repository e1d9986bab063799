import io

import pytest

from lox.ast import (
    Assign, Binary, ExpressionStmt, Grouping, Literal, PrintStmt, Unary,
    Variable, VarStmt,
)
from lox.errors import ErrorReporter
from lox.parser import Parser, parse
from lox.scanner import scan
from lox.tokens import Token, TokenType


def parse_source(source, stream=None):
    reporter = ErrorReporter(stream if stream is not None else io.StringIO())
    tokens, had_errors = scan(source, reporter)
    assert had_errors is False
    return parse(tokens, reporter)


def expr_of(source):
    statements, had_errors = parse_source(source)
    assert had_errors is False
    assert len(statements) == 1
    return statements[0].expression


def test_precedence_of_term_and_factor():
    expr = expr_of('1 + 2 * 3;')
    assert isinstance(expr, Binary)
    assert expr.operator.type == TokenType.PLUS
    assert expr.left == Literal(1.0)
    assert isinstance(expr.right, Binary)
    assert expr.right.operator.type == TokenType.STAR


def test_binary_operators_are_left_associative():
    expr = expr_of('1 - 2 - 3;')
    assert expr.operator.type == TokenType.MINUS
    assert isinstance(expr.left, Binary)
    assert expr.left.left == Literal(1.0)
    assert expr.right == Literal(3.0)


def test_equality_binds_looser_than_comparison():
    expr = expr_of('1 >= 2 == true;')
    assert expr.operator.type == TokenType.EQUAL_EQUAL
    assert expr.left.operator.type == TokenType.GREATER_EQUAL
    assert expr.right == Literal(True)


def test_unary_is_right_recursive():
    expr = expr_of('!!false;')
    assert isinstance(expr, Unary)
    assert isinstance(expr.right, Unary)
    assert expr.right.right == Literal(False)


def test_grouping_and_literals():
    expr = expr_of('("a" + nil);')
    assert isinstance(expr, Grouping)
    assert expr.expression.left == Literal('a')
    assert expr.expression.right == Literal(None)


def test_assignment_is_right_associative():
    expr = expr_of('a = b = 1;')
    assert isinstance(expr, Assign)
    assert expr.name.lexeme == 'a'
    assert isinstance(expr.value, Assign)
    assert expr.value.name.lexeme == 'b'
    assert expr.value.value == Literal(1.0)


def test_statement_kinds():
    statements, had_errors = parse_source('var a; var b = 2; print b; b;')
    assert had_errors is False
    assert [type(s) for s in statements] == [VarStmt, VarStmt, PrintStmt, ExpressionStmt]
    assert statements[0].initializer is None
    assert statements[1].initializer == Literal(2.0)
    assert statements[3].expression == Variable(Token(TokenType.IDENTIFIER, 'b', None, 1))


def test_empty_program():
    assert parse_source('') == ([], False)


def test_missing_semicolon_reports_at_end():
    stream = io.StringIO()
    statements, had_errors = parse_source('print 1', stream)
    assert statements == []
    assert had_errors is True
    assert stream.getvalue() == "[line 1] Error at end: Expect ';' after value.\n"


def test_missing_closing_paren():
    stream = io.StringIO()
    _, had_errors = parse_source('print (1 + 2;', stream)
    assert had_errors is True
    assert stream.getvalue() == "[line 1] Error at ';': Expect ')' after expression.\n"


def test_recovery_after_bad_declaration():
    stream = io.StringIO()
    statements, had_errors = parse_source('var ;\nprint 1;', stream)
    assert had_errors is True
    assert len(statements) == 1
    assert isinstance(statements[0], PrintStmt)
    assert stream.getvalue() == "[line 1] Error at ';': Expect variable name.\n"


def test_recovery_stops_before_statement_keyword():
    stream = io.StringIO()
    statements, had_errors = parse_source('1 + ; 2 3 print 4; var x = 5;', stream)
    assert had_errors is True
    # `1 + ;` fails, then `2 3` fails and resyncs in front of `print`
    assert [type(s) for s in statements] == [PrintStmt, VarStmt]
    assert stream.getvalue().count('Error') == 2


def test_each_bad_statement_is_reported():
    stream = io.StringIO()
    statements, had_errors = parse_source('print ;\nprint ;\nprint 3;', stream)
    assert had_errors is True
    assert len(statements) == 1
    assert stream.getvalue() == (
        "[line 1] Error at ';': Expect expression.\n"
        "[line 2] Error at ';': Expect expression.\n"
    )


def test_invalid_assignment_target_is_reported_but_not_fatal():
    stream = io.StringIO()
    statements, had_errors = parse_source('1 + 2 = 3; print 4;', stream)
    assert had_errors is True
    assert len(statements) == 2
    # the left-hand side survives as the statement's expression
    assert statements[0].expression.operator.type == TokenType.PLUS
    assert stream.getvalue() == "[line 1] Error at '=': Invalid assignment target.\n"


def test_bare_less_than_is_not_a_comparison():
    stream = io.StringIO()
    statements, had_errors = parse_source('print 1 < 2;', stream)
    assert had_errors is True
    assert statements == []
    assert stream.getvalue() == "[line 1] Error at '<': Expect ';' after value.\n"


def test_less_equal_is_a_comparison():
    expr = expr_of('1 <= 2;')
    assert expr.operator.type == TokenType.LESS_EQUAL


def test_braces_are_not_statements():
    stream = io.StringIO()
    statements, had_errors = parse_source('{ print 1; }', stream)
    assert had_errors is True
    assert stream.getvalue().startswith("[line 1] Error at '{': Expect expression.")


def test_parsing_is_deterministic():
    tokens, _ = scan('var x = 1; x = x + 2; print x;')
    assert parse(tokens) == parse(tokens)


def test_parser_requires_eof_token():
    with pytest.raises(ValueError):
        Parser([])
