"""Grammar-driven parser for the Lox language.

A second front end next to the hand-written recursive-descent parser. The
grammar below is handed to Lark (LALR) and fed the very same token list the
scanner produces, through a small custom lexer that wraps each `Token` in a
Lark token. The resulting parse tree is transformed into the same AST
dataclasses the recursive-descent parser builds, which lets the two parsers
check each other.

Unlike the recursive-descent parser there is no panic-mode recovery here: the
first syntax error is reported and the parse is abandoned.
"""

from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

from lark import Lark, Transformer
from lark import Token as LarkToken
from lark.exceptions import UnexpectedInput, VisitError
from lark.lexer import Lexer

from .ast import (
    Assign, Binary, ExpressionStmt, Grouping, Literal, PrintStmt, Stmt,
    Unary, Variable, VarStmt,
)
from .errors import ErrorReporter, ParseError
from .tokens import Token, TokenType


LOX_GRAMMAR = r"""
    start: declaration*

    ?declaration: var_decl
                | statement

    var_decl: VAR IDENTIFIER (EQUAL expression)? SEMICOLON

    ?statement: print_stmt
              | expr_stmt

    print_stmt: PRINT expression SEMICOLON
    expr_stmt: expression SEMICOLON

    // Expressions with precedence
    ?expression: assignment
    ?assignment: equality
               | equality EQUAL assignment -> assign
    ?equality: comparison ((BANG_EQUAL | EQUAL_EQUAL) comparison)*
    ?comparison: term ((GREATER | GREATER_EQUAL | LESS_EQUAL) term)*
    ?term: factor ((MINUS | PLUS) factor)*
    ?factor: unary ((SLASH | STAR) unary)*
    ?unary: (BANG | MINUS) unary
          | primary
    ?primary: NUMBER -> literal
            | STRING -> literal
            | TRUE -> literal
            | FALSE -> literal
            | NIL -> literal
            | IDENTIFIER -> variable
            | LEFT_PAREN expression RIGHT_PAREN -> grouping

    // Terminals come from the Lox scanner
    %declare LEFT_PAREN RIGHT_PAREN MINUS PLUS SEMICOLON SLASH STAR
    %declare BANG BANG_EQUAL EQUAL EQUAL_EQUAL GREATER GREATER_EQUAL LESS_EQUAL
    %declare IDENTIFIER STRING NUMBER
    %declare FALSE NIL PRINT TRUE VAR
"""


class TokenStreamLexer(Lexer):
    """Feeds already-scanned Lox tokens to Lark.

    Each Lark token keeps the original `Token` as its value so the
    transformer can put real tokens into the AST.
    """
    def __init__(self, lexer_conf):
        pass

    def lex(self, data: List[Token]) -> Iterator[LarkToken]:
        for token in data:
            if token.type == TokenType.EOF:
                break
            yield LarkToken(token.type.name, token, line=token.line)


LOX_PARSER = Lark(
    LOX_GRAMMAR,
    parser='lalr',
    lexer=TokenStreamLexer,
    maybe_placeholders=False,
)


def source_token(item: LarkToken) -> Token:
    return item.value


class ASTTransformer(Transformer):
    """Transforms the Lark parse tree into Lox AST nodes."""

    def start(self, items):
        return list(items)

    def var_decl(self, items):
        # VAR IDENTIFIER [EQUAL expression] SEMICOLON
        name = source_token(items[1])
        initializer = items[3] if len(items) == 5 else None
        return VarStmt(name, initializer)

    def print_stmt(self, items):
        return PrintStmt(items[1])

    def expr_stmt(self, items):
        return ExpressionStmt(items[0])

    def assign(self, items):
        target, equals, value = items
        if not isinstance(target, Variable):
            raise ParseError(source_token(equals), "Invalid assignment target.")
        return Assign(target.name, value)

    def binary(self, items):
        # left-associative fold over operand, operator, operand, ...
        left = items[0]
        i = 1
        while i < len(items):
            left = Binary(left, source_token(items[i]), items[i + 1])
            i += 2
        return left

    equality = binary
    comparison = binary
    term = binary
    factor = binary

    def unary(self, items):
        return Unary(source_token(items[0]), items[1])

    def literal(self, items):
        token = source_token(items[0])
        if token.type == TokenType.TRUE:
            return Literal(True)
        if token.type == TokenType.FALSE:
            return Literal(False)
        if token.type == TokenType.NIL:
            return Literal(None)
        return Literal(token.literal)

    def variable(self, items):
        return Variable(source_token(items[0]))

    def grouping(self, items):
        return Grouping(items[1])


def syntax_error(exc: UnexpectedInput, tokens: List[Token]) -> ParseError:
    token = getattr(exc, 'token', None)
    if token is None or not isinstance(token.value, Token):
        # '$END': the parser ran into the EOF token
        offending = tokens[-1]
    else:
        offending = token.value
    expected = getattr(exc, 'expected', None) or set()
    if 'SEMICOLON' in expected:
        return ParseError(offending, "Expect ';'.")
    if 'RIGHT_PAREN' in expected:
        return ParseError(offending, "Expect ')' after expression.")
    if 'IDENTIFIER' in expected and len(expected) == 1:
        return ParseError(offending, "Expect variable name.")
    return ParseError(offending, "Expect expression.")


def parse_tokens(tokens: List[Token], reporter: Optional[ErrorReporter] = None) -> Tuple[List[Stmt], bool]:
    """Parse a scanned token list with the Lark grammar.

    Returns the statements and a had-errors flag, like `lox.parser.parse`.
    On error nothing is returned but the report.
    """
    if reporter is None:
        reporter = ErrorReporter()
    try:
        tree = LOX_PARSER.parse(tokens)
        statements = ASTTransformer().transform(tree)
    except UnexpectedInput as exc:
        reporter.parse_error(syntax_error(exc, tokens))
        return [], True
    except VisitError as exc:
        if isinstance(exc.orig_exc, ParseError):
            reporter.parse_error(exc.orig_exc)
            return [], True
        raise
    return statements, False
