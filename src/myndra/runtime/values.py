"""
Runtime values for the Myndra interpreter.

Every value carries its runtime type alongside the Python data. There is
no implicit conversion between types: integers stay 64-bit signed
integers and never mix with floats.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from ..errors import EvaluationError


INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


class ValueType(Enum):
    INT = "int"
    FLOAT = "float"
    STRING = "string"
    BOOL = "bool"


@dataclass(frozen=True)
class Value:
    """
    A runtime value with its Myndra type.

    The `data` field holds the Python object (int, float, str or bool).
    Values are immutable; assignment and argument passing copy by value.
    """
    data: Union[int, float, str, bool]
    type: ValueType

    def __repr__(self) -> str:
        return f"Value({self.data!r}, {self.type.value})"

    def __str__(self) -> str:
        """String form used by print and input prompts."""
        if self.type == ValueType.BOOL:
            return "true" if self.data else "false"
        if self.type == ValueType.FLOAT:
            return f"{self.data:.6f}"
        return str(self.data)

    @property
    def is_number(self) -> bool:
        return self.type in (ValueType.INT, ValueType.FLOAT)

    def is_truthy(self) -> bool:
        """Check if this value is truthy in boolean context."""
        if self.type == ValueType.BOOL:
            return bool(self.data)
        if self.type == ValueType.STRING:
            return len(self.data) > 0
        return self.data != 0


# Convenience constructors for primitive values

def int_val(n: int) -> Value:
    """Create an integer value, failing if it leaves the 64-bit range."""
    n = int(n)
    if not INT64_MIN <= n <= INT64_MAX:
        raise EvaluationError("Integer overflow")
    return Value(n, ValueType.INT)


def float_val(x: float) -> Value:
    """Create a float value."""
    return Value(float(x), ValueType.FLOAT)


def bool_val(b: bool) -> Value:
    """Create a boolean value."""
    return Value(bool(b), ValueType.BOOL)


def string_val(s: str) -> Value:
    """Create a string value."""
    return Value(str(s), ValueType.STRING)
