"""Recursive-descent parser for the Lox language.

Grammar, from lowest to highest precedence::

    program     -> declaration* EOF
    declaration -> varDecl | statement
    varDecl     -> "var" IDENTIFIER ( "=" expression )? ";"
    statement   -> printStmt | exprStmt
    printStmt   -> "print" expression ";"
    exprStmt    -> expression ";"
    expression  -> assignment
    assignment  -> equality ( "=" assignment )?
    equality    -> comparison ( ( "!=" | "==" ) comparison )*
    comparison  -> term ( ( ">" | ">=" | "<=" ) term )*
    term        -> factor ( ( "-" | "+" ) factor )*
    factor      -> unary ( ( "/" | "*" ) unary )*
    unary       -> ( "!" | "-" ) unary | primary
    primary     -> NUMBER | STRING | "true" | "false" | "nil"
                 | IDENTIFIER | "(" expression ")"

The comparison rule has never accepted a bare ``<``; such input is a syntax
error.

Each declaration is parsed inside its own error boundary. A `ParseError`
raised anywhere below `declaration` is reported, the parser skips ahead to
the next statement boundary and carries on, so one malformed statement does
not hide errors or valid code that follows it.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from .ast import (
    Assign, Binary, Expr, ExpressionStmt, Grouping, Literal, PrintStmt, Stmt,
    Unary, Variable, VarStmt,
)
from .errors import ErrorReporter, ParseError
from .tokens import Token, TokenType


# Tokens that begin a statement; synchronisation stops in front of them.
STATEMENT_STARTS = {
    TokenType.CLASS,
    TokenType.FUN,
    TokenType.VAR,
    TokenType.FOR,
    TokenType.IF,
    TokenType.WHILE,
    TokenType.PRINT,
    TokenType.RETURN,
}


class Parser:
    def __init__(self, tokens: List[Token], reporter: Optional[ErrorReporter] = None):
        if not tokens or tokens[-1].type != TokenType.EOF:
            raise ValueError("token list must end with an EOF token")
        self.tokens = tokens
        self.current = 0
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.error_count = 0

    def parse(self) -> Tuple[List[Stmt], bool]:
        statements: List[Stmt] = []
        while not self.is_at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)
        return statements, self.error_count > 0

    # Statements

    def declaration(self) -> Optional[Stmt]:
        try:
            if self.match(TokenType.VAR):
                return self.var_declaration()
            return self.statement()
        except ParseError as err:
            self.error(err)
            self.synchronize()
            return None

    def statement(self) -> Stmt:
        if self.match(TokenType.PRINT):
            return self.print_statement()
        return self.expression_statement()

    def var_declaration(self) -> Stmt:
        name = self.consume(TokenType.IDENTIFIER, "Expect variable name.")
        initializer = None
        if self.match(TokenType.EQUAL):
            initializer = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        return VarStmt(name, initializer)

    def print_statement(self) -> Stmt:
        value = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after value.")
        return PrintStmt(value)

    def expression_statement(self) -> Stmt:
        expr = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return ExpressionStmt(expr)

    # Expressions

    def expression(self) -> Expr:
        return self.assignment()

    def assignment(self) -> Expr:
        expr = self.equality()
        if self.match(TokenType.EQUAL):
            equals = self.previous()
            value = self.assignment()
            if isinstance(expr, Variable):
                return Assign(expr.name, value)
            # reported, but the parser is not confused so no resync is needed
            self.error(ParseError(equals, "Invalid assignment target."))
        return expr

    def equality(self) -> Expr:
        expr = self.comparison()
        while self.match(TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL):
            operator = self.previous()
            right = self.comparison()
            expr = Binary(expr, operator, right)
        return expr

    def comparison(self) -> Expr:
        expr = self.term()
        while self.match(TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.LESS_EQUAL):
            operator = self.previous()
            right = self.term()
            expr = Binary(expr, operator, right)
        return expr

    def term(self) -> Expr:
        expr = self.factor()
        while self.match(TokenType.MINUS, TokenType.PLUS):
            operator = self.previous()
            right = self.factor()
            expr = Binary(expr, operator, right)
        return expr

    def factor(self) -> Expr:
        expr = self.unary()
        while self.match(TokenType.SLASH, TokenType.STAR):
            operator = self.previous()
            right = self.unary()
            expr = Binary(expr, operator, right)
        return expr

    def unary(self) -> Expr:
        if self.match(TokenType.BANG, TokenType.MINUS):
            operator = self.previous()
            right = self.unary()
            return Unary(operator, right)
        return self.primary()

    def primary(self) -> Expr:
        if self.match(TokenType.FALSE):
            return Literal(False)
        if self.match(TokenType.TRUE):
            return Literal(True)
        if self.match(TokenType.NIL):
            return Literal(None)
        if self.match(TokenType.NUMBER, TokenType.STRING):
            return Literal(self.previous().literal)
        if self.match(TokenType.IDENTIFIER):
            return Variable(self.previous())
        if self.match(TokenType.LEFT_PAREN):
            expr = self.expression()
            self.consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expr)
        raise ParseError(self.peek(), "Expect expression.")

    # Error handling

    def error(self, err: ParseError):
        self.error_count += 1
        self.reporter.parse_error(err)

    def synchronize(self):
        """Discard tokens until the start of the next statement."""
        self.advance()
        while not self.is_at_end():
            if self.previous().type == TokenType.SEMICOLON:
                return
            if self.peek().type in STATEMENT_STARTS:
                return
            self.advance()

    # Token navigation

    def consume(self, token_type: TokenType, message: str) -> Token:
        if self.check(token_type):
            return self.advance()
        raise ParseError(self.peek(), message)

    def match(self, *types: TokenType) -> bool:
        for token_type in types:
            if self.check(token_type):
                self.advance()
                return True
        return False

    def check(self, token_type: TokenType) -> bool:
        if self.is_at_end():
            return False
        return self.peek().type == token_type

    def advance(self) -> Token:
        if not self.is_at_end():
            self.current += 1
        return self.previous()

    def is_at_end(self) -> bool:
        return self.peek().type == TokenType.EOF

    def peek(self) -> Token:
        return self.tokens[self.current]

    def previous(self) -> Token:
        return self.tokens[self.current - 1]


def parse(tokens: List[Token], reporter: Optional[ErrorReporter] = None) -> Tuple[List[Stmt], bool]:
    """Parse a token list into statements, returning them with a had-errors flag."""
    return Parser(tokens, reporter).parse()
