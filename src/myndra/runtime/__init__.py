"""
Myndra runtime - tree-walking interpreter.

This module provides:
- Interpreter: Executes parsed Myndra programs
- Value: Runtime values with type metadata
- Environment / ExecutionContext: Lexical scope management and I/O streams
- BuiltinRegistry: print, input, length and substring
"""

from .values import (
    Value,
    ValueType,
    int_val,
    float_val,
    bool_val,
    string_val,
)

from .context import (
    Environment,
    ExecutionContext,
)

from .builtins import (
    BuiltinFunction,
    BuiltinRegistry,
    get_builtin_registry,
    call_builtin,
)

from .interpreter import (
    Interpreter,
    ExecutionResult,
    execute,
    compile_and_run,
)

__all__ = [
    # Values
    "Value",
    "ValueType",
    "int_val",
    "float_val",
    "bool_val",
    "string_val",
    # Context
    "Environment",
    "ExecutionContext",
    # Builtins
    "BuiltinFunction",
    "BuiltinRegistry",
    "get_builtin_registry",
    "call_builtin",
    # Interpreter
    "Interpreter",
    "ExecutionResult",
    "execute",
    "compile_and_run",
]
