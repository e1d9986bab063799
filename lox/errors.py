"""Error types and diagnostic reporting for Lox.

Every phase reports problems in the same line-oriented format::

    [line 3] Error at 'foo': Expect ';' after value.

`ErrorReporter` owns the output stream and remembers whether anything was
reported, so callers can turn a run into a simple pass/fail signal.
"""

import sys
from typing import Optional, TextIO

from lox.tokens import Token, TokenType


class LoxError(Exception):
    """Base class for all errors raised by the Lox toolchain."""


class ScanError(LoxError):
    """Lexical error at a source line."""
    def __init__(self, line: int, message: str):
        super().__init__(message)
        self.line = line
        self.message = message


class ParseError(LoxError):
    """Syntax error located at a token."""
    def __init__(self, token: Token, message: str):
        super().__init__(message)
        self.token = token
        self.message = message


class LoxRuntimeError(LoxError):
    """Error raised while evaluating a program."""
    def __init__(self, token: Token, message: str):
        super().__init__(message)
        self.token = token
        self.message = message


class PipelineError(LoxError):
    """Raised by the run helpers when a phase finished with errors."""
    def __init__(self, phase: str, message: str):
        super().__init__(message)
        self.phase = phase


def format_error(line: int, where: str, message: str) -> str:
    return f"[line {line}] Error{where}: {message}\n"


def token_location(token: Token) -> str:
    if token.type == TokenType.EOF:
        return ' at end'
    return f" at '{token.lexeme}'"


class ErrorReporter:
    """Writes diagnostics and counts them.

    The stream defaults to whatever `sys.stderr` is at report time, which
    keeps the reporter usable under output capturing.
    """
    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream
        self.error_count = 0

    @property
    def had_error(self) -> bool:
        return self.error_count > 0

    def reset(self):
        self.error_count = 0

    def write(self, text: str):
        stream = self.stream if self.stream is not None else sys.stderr
        stream.write(text)
        stream.flush()

    def error(self, line: int, message: str):
        self.report(line, '', message)

    def report(self, line: int, where: str, message: str):
        self.error_count += 1
        self.write(format_error(line, where, message))

    def scan_error(self, err: ScanError):
        self.error(err.line, err.message)

    def parse_error(self, err: ParseError):
        self.report(err.token.line, token_location(err.token), err.message)

    def runtime_error(self, err: LoxRuntimeError):
        self.error_count += 1
        self.write(f"{err.message}\n[line {err.token.line}]\n")
