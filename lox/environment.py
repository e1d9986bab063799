from typing import Any, Dict, List

from lox.errors import LoxRuntimeError
from lox.tokens import Token


class Environment:
    """Flat namespace mapping variable names to runtime values.

    One environment lives as long as the interpreter that owns it. There is
    no parent chain: every declaration lands in the same scope.
    """
    def __init__(self):
        self.values: Dict[str, Any] = {}

    def __contains__(self, name: str) -> bool:
        return name in self.values

    def names(self) -> List[str]:
        return list(self.values.keys())

    def define(self, name: str, value: Any):
        # redefinition simply overwrites
        self.values[name] = value

    def get(self, name: Token) -> Any:
        if name.lexeme in self.values:
            return self.values[name.lexeme]
        raise LoxRuntimeError(name, f"undefined variable '{name.lexeme}'.")

    def assign(self, name: Token, value: Any):
        if name.lexeme not in self.values:
            raise LoxRuntimeError(name, f"undefined variable '{name.lexeme}'.")
        self.values[name.lexeme] = value
