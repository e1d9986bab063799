"""Tree-walking interpreter for the Lox language.

This module evaluates the AST produced by the parser and ties the three
phases together. `run_source` scans, parses and executes a piece of source
text against an existing interpreter (the REPL keeps one interpreter for the
whole session); `run_program` and `run_file` are one-shot conveniences.

A runtime error stops the current `interpret` call: it is reported once and
the remaining statements are skipped. Bindings made before the error are kept.
"""

from __future__ import annotations

import math
from typing import Any, List, Optional, TextIO

from .ast import (
    Assign, Binary, BlockStmt, Expr, ExpressionStmt, Grouping, Literal,
    PrintStmt, Stmt, Unary, Variable, VarStmt,
)
from .environment import Environment
from .errors import ErrorReporter, LoxRuntimeError, PipelineError
from .parser import parse
from .scanner import scan
from .tokens import Token, TokenType
from .values import is_equal, is_truthy, stringify, type_name


PARSERS = ('descent', 'grammar')


class Interpreter:
    """Core interpreter that executes Lox statements."""
    def __init__(self, out: Optional[TextIO] = None, reporter: Optional[ErrorReporter] = None,
                 debug_level: int = 0, debug_file: str = 'debug.txt'):
        self.environment = Environment()
        self.out = out
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 else None

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg)

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    def __enter__(self) -> 'Interpreter':
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # Public API
    def interpret(self, statements: List[Stmt]) -> bool:
        """Execute `statements` in order; return True if a runtime error occurred."""
        try:
            for stmt in statements:
                self.execute(stmt)
        except LoxRuntimeError as err:
            self.debug(f"runtime error at line {err.token.line}: {err.message}")
            self.reporter.runtime_error(err)
            return True
        return False

    def execute(self, stmt: Stmt):
        if isinstance(stmt, ExpressionStmt):
            self.evaluate(stmt.expression)
            return
        if isinstance(stmt, PrintStmt):
            value = self.evaluate(stmt.expression)
            print(stringify(value), end='', file=self.out)
            return
        if isinstance(stmt, VarStmt):
            value = None
            if stmt.initializer is not None:
                value = self.evaluate(stmt.initializer)
            self.environment.define(stmt.name.lexeme, value)
            if self.debug_level >= 2:
                self.debug(f"define {stmt.name.lexeme}: {type_name(value)} = {stringify(value)}")
            return
        if isinstance(stmt, BlockStmt):
            # blocks carry no runtime behaviour yet: no scope, no execution
            if self.debug_level >= 3:
                self.debug(f"skip block of {len(stmt.statements)} statements")
            return
        raise NotImplementedError(f"execute: unexpected node type {type(stmt).__name__}")

    def evaluate(self, expr: Expr) -> Any:
        if isinstance(expr, Literal):
            return expr.value
        if isinstance(expr, Grouping):
            return self.evaluate(expr.expression)
        if isinstance(expr, Unary):
            right = self.evaluate(expr.right)
            if expr.operator.type == TokenType.BANG:
                return not is_truthy(right)
            if expr.operator.type == TokenType.MINUS:
                self.check_number_operand(expr.operator, right)
                return -right
            raise LoxRuntimeError(expr.operator, f"unsupported unary operator {expr.operator.lexeme}")
        if isinstance(expr, Binary):
            left = self.evaluate(expr.left)
            right = self.evaluate(expr.right)
            return self.apply_binary_op(expr.operator, left, right)
        if isinstance(expr, Variable):
            return self.environment.get(expr.name)
        if isinstance(expr, Assign):
            value = self.evaluate(expr.value)
            self.environment.assign(expr.name, value)
            if self.debug_level >= 2:
                self.debug(f"assign {expr.name.lexeme} = {stringify(value)}")
            return value
        raise NotImplementedError(f"evaluate: unexpected node type {type(expr).__name__}")

    def apply_binary_op(self, operator: Token, a: Any, b: Any) -> Any:
        op = operator.type
        if op == TokenType.PLUS:
            if isinstance(a, float) and isinstance(b, float):
                return a + b
            if isinstance(a, str) and isinstance(b, str):
                return a + b
            # no coercion between numbers and strings
            raise LoxRuntimeError(operator, "operands must be numbers.")
        if op == TokenType.MINUS:
            self.check_number_operands(operator, a, b)
            return a - b
        if op == TokenType.STAR:
            self.check_number_operands(operator, a, b)
            return a * b
        if op == TokenType.SLASH:
            self.check_number_operands(operator, a, b)
            return divide(a, b)
        if op == TokenType.GREATER:
            self.check_number_operands(operator, a, b)
            return a > b
        if op == TokenType.GREATER_EQUAL:
            self.check_number_operands(operator, a, b)
            return a >= b
        if op == TokenType.LESS:
            self.check_number_operands(operator, a, b)
            return a < b
        if op == TokenType.LESS_EQUAL:
            self.check_number_operands(operator, a, b)
            return a <= b
        if op == TokenType.EQUAL_EQUAL:
            return is_equal(a, b)
        if op == TokenType.BANG_EQUAL:
            return not is_equal(a, b)
        raise LoxRuntimeError(operator, f"unknown operator {operator.lexeme}")

    def check_number_operand(self, operator: Token, operand: Any):
        if isinstance(operand, float):
            return
        raise LoxRuntimeError(operator, "operand must be a number.")

    def check_number_operands(self, operator: Token, a: Any, b: Any):
        if isinstance(a, float) and isinstance(b, float):
            return
        raise LoxRuntimeError(operator, "operands must be numbers.")


def divide(a: float, b: float) -> float:
    """IEEE-754 division: a zero divisor gives an infinity or NaN."""
    try:
        return a / b
    except ZeroDivisionError:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)


###############################################################################
# Pipeline
###############################################################################


def parse_with(parser: str, tokens: List[Token], reporter: ErrorReporter):
    if parser == 'descent':
        return parse(tokens, reporter)
    if parser == 'grammar':
        from .grammar import parse_tokens
        return parse_tokens(tokens, reporter)
    raise ValueError(f"unknown parser {parser!r}; expected one of {PARSERS}")


def run_source(source: str, interpreter: Interpreter, parser: str = 'descent') -> None:
    """Scan, parse and execute `source` with `interpreter`.

    Raises `PipelineError` naming the phase that failed. Lexical errors stop
    the run before parsing. Statements recovered from a faulty parse are
    still executed, after which the parse failure is raised.
    """
    reporter = interpreter.reporter
    tokens, scan_errors = scan(source, reporter)
    interpreter.debug(f"scanned {len(tokens)} tokens, errors: {scan_errors}")
    if interpreter.debug_level >= 3:
        for token in tokens:
            interpreter.debug(f"  {token}")
    if scan_errors:
        raise PipelineError('scan', 'encountered errors while scanning')

    statements, parse_errors = parse_with(parser, tokens, reporter)
    interpreter.debug(f"parsed {len(statements)} statements with {parser} parser, errors: {parse_errors}")
    if interpreter.debug_level >= 3:
        for stmt in statements:
            interpreter.debug(f"  {stmt!r}")

    if interpreter.interpret(statements):
        raise PipelineError('interpret', 'encountered runtime errors')
    if parse_errors:
        raise PipelineError('parse', 'encountered errors while parsing')


def run_program(source: str, debug_level: int = 0, parser: str = 'descent') -> bool:
    """Run a complete Lox program; return True when every phase succeeded."""
    with Interpreter(debug_level=debug_level) as interpreter:
        try:
            run_source(source, interpreter, parser=parser)
        except PipelineError as err:
            interpreter.debug(f"{err.phase} failed: {err}")
            return False
    return True


def run_file(file_path: str, debug_level: int = 0, parser: str = 'descent') -> bool:
    """Read and run a Lox script from disk."""
    with open(file_path, 'r', encoding='utf-8') as f:
        source = f.read()
    return run_program(source, debug_level=debug_level, parser=parser)
