"""JSON serialization/deserialization for the Lox AST.

This module converts between Lox AST dataclasses and plain Python
dict/list structures suitable for JSON encoding. Tokens are kept in full
(type, lexeme, literal, line) so that a program loaded back from JSON
reports runtime errors against the same lines as the original source.
"""

from __future__ import annotations

from typing import Any, Dict

from .ast import (
    Assign,
    Binary,
    BlockStmt,
    ExpressionStmt,
    Grouping,
    Literal,
    PrintStmt,
    Unary,
    Variable,
    VarStmt,
)
from .tokens import Token, TokenType


def token_to_obj(token: Token) -> Dict[str, Any]:
    return {
        "type": token.type.name,
        "lexeme": token.lexeme,
        "literal": token.literal,
        "line": token.line,
    }


def token_from_obj(o: Dict[str, Any]) -> Token:
    try:
        token_type = TokenType[o["type"]]
    except KeyError:
        raise ValueError(f"Unknown token type: {o.get('type')}")
    literal = o.get("literal")
    if token_type == TokenType.NUMBER and literal is not None:
        literal = float(literal)
    return Token(token_type, o["lexeme"], literal, int(o["line"]))


def literal_from_obj(value: Any) -> Any:
    # JSON has no separate float type; Lox numbers are always floats
    if isinstance(value, int) and not isinstance(value, bool):
        return float(value)
    return value


def ast_to_obj(node: Any) -> Any:
    if node is None:
        return None
    if isinstance(node, list):
        return [ast_to_obj(n) for n in node]
    if isinstance(node, Token):
        return token_to_obj(node)

    # Statements
    if isinstance(node, ExpressionStmt):
        return {"type": "ExpressionStmt", "expression": ast_to_obj(node.expression)}
    if isinstance(node, PrintStmt):
        return {"type": "PrintStmt", "expression": ast_to_obj(node.expression)}
    if isinstance(node, VarStmt):
        return {
            "type": "VarStmt",
            "name": token_to_obj(node.name),
            "initializer": ast_to_obj(node.initializer),
        }
    if isinstance(node, BlockStmt):
        return {"type": "BlockStmt", "statements": [ast_to_obj(s) for s in node.statements]}

    # Expressions
    if isinstance(node, Literal):
        return {"type": "Literal", "value": node.value}
    if isinstance(node, Grouping):
        return {"type": "Grouping", "expression": ast_to_obj(node.expression)}
    if isinstance(node, Unary):
        return {"type": "Unary", "operator": token_to_obj(node.operator), "right": ast_to_obj(node.right)}
    if isinstance(node, Binary):
        return {
            "type": "Binary",
            "left": ast_to_obj(node.left),
            "operator": token_to_obj(node.operator),
            "right": ast_to_obj(node.right),
        }
    if isinstance(node, Variable):
        return {"type": "Variable", "name": token_to_obj(node.name)}
    if isinstance(node, Assign):
        return {"type": "Assign", "name": token_to_obj(node.name), "value": ast_to_obj(node.value)}

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None:
        return None
    if isinstance(obj, list):
        return [ast_from_obj(o) for o in obj]
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    if t == "ExpressionStmt":
        return ExpressionStmt(expression=ast_from_obj(obj["expression"]))
    if t == "PrintStmt":
        return PrintStmt(expression=ast_from_obj(obj["expression"]))
    if t == "VarStmt":
        return VarStmt(name=token_from_obj(obj["name"]), initializer=ast_from_obj(obj.get("initializer")))
    if t == "BlockStmt":
        return BlockStmt(statements=[ast_from_obj(s) for s in obj["statements"]])
    if t == "Literal":
        return Literal(value=literal_from_obj(obj.get("value")))
    if t == "Grouping":
        return Grouping(expression=ast_from_obj(obj["expression"]))
    if t == "Unary":
        return Unary(operator=token_from_obj(obj["operator"]), right=ast_from_obj(obj["right"]))
    if t == "Binary":
        return Binary(
            left=ast_from_obj(obj["left"]),
            operator=token_from_obj(obj["operator"]),
            right=ast_from_obj(obj["right"]),
        )
    if t == "Variable":
        return Variable(name=token_from_obj(obj["name"]))
    if t == "Assign":
        return Assign(name=token_from_obj(obj["name"]), value=ast_from_obj(obj["value"]))

    raise ValueError(f"Unknown AST node type: {t}")
