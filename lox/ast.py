"""Abstract Syntax Tree (AST) definitions for the Lox language.

Two closed families of nodes: expressions (`Expr`) and statements (`Stmt`).
Nodes keep a reference to the tokens they came from so that the interpreter
can report errors against a source line and tell operators apart.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional

from .tokens import Token


@dataclass
class Expr:
    """Base class for expression nodes."""
    pass


@dataclass
class Literal(Expr):
    value: Any  # None, bool, float or str


@dataclass
class Grouping(Expr):
    expression: Expr


@dataclass
class Unary(Expr):
    operator: Token
    right: Expr


@dataclass
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass
class Variable(Expr):
    name: Token


@dataclass
class Assign(Expr):
    name: Token
    value: Expr


@dataclass
class Stmt:
    """Base class for statement nodes."""
    pass


@dataclass
class ExpressionStmt(Stmt):
    expression: Expr


@dataclass
class PrintStmt(Stmt):
    expression: Expr


@dataclass
class VarStmt(Stmt):
    name: Token
    initializer: Optional[Expr]


@dataclass
class BlockStmt(Stmt):
    statements: List[Stmt]
