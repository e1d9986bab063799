"""Runtime value helpers for Lox.

Lox values map directly onto Python objects:

    nil     -> None
    boolean -> bool
    number  -> float
    string  -> str

This module holds the rules that give those objects their Lox meaning:
truthiness, equality without coercion and the textual form used by
``print``.
"""

from __future__ import annotations

import math
from typing import Any

# Integral floats below this magnitude print without an exponent.
_PLAIN_INTEGER_LIMIT = 1e21


def type_name(value: Any) -> str:
    if value is None:
        return 'nil'
    if isinstance(value, bool):
        return 'boolean'
    if isinstance(value, float):
        return 'number'
    if isinstance(value, str):
        return 'string'
    return type(value).__name__


def is_truthy(value: Any) -> bool:
    # only nil and false are falsy; 0 and "" are truthy
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(a: Any, b: Any) -> bool:
    if a is None and b is None:
        return True
    if a is None or b is None:
        return False
    # bool is an int subclass in Python; never let true == 1 slip through
    if type(a) is not type(b):
        return False
    return a == b


def format_number(value: float) -> str:
    if math.isnan(value):
        return 'NaN'
    if math.isinf(value):
        return '+Inf' if value > 0 else '-Inf'
    if value.is_integer() and abs(value) < _PLAIN_INTEGER_LIMIT:
        text = str(int(value))
        if value == 0 and math.copysign(1.0, value) < 0:
            return '-0'
        return text
    return repr(value)


def stringify(value: Any) -> str:
    if value is None:
        return 'nil'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        return format_number(value)
    return str(value)
