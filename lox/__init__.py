# Lox language package
# This package provides a scanner, parser and tree-walking interpreter for Lox.
from .errors import ErrorReporter, LoxError
from .interpreter import Interpreter, run_program, run_source
from .parser import parse
from .scanner import scan

__all__ = [
    'scan',
    'parse',
    'Interpreter',
    'run_source',
    'run_program',
    'LoxError',
    'ErrorReporter',
]
