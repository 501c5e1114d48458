"""
Built-in function registry for the Myndra interpreter.

The language exposes four host functions: print, input, length and
substring. Each implementation receives the execution context (for the
I/O streams) and the already-evaluated argument values.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from .values import Value, ValueType, int_val, string_val
from .context import ExecutionContext
from ..errors import EvaluationError


@dataclass
class BuiltinFunction:
    """
    A built-in function and its implementation.
    """
    name: str
    implementation: Callable[[ExecutionContext, List[Value]], Value]
    doc: str = ""


class BuiltinRegistry:
    """
    Registry of all built-in functions.

    Functions are registered by name and can be looked up for execution.
    """

    def __init__(self):
        self._functions: Dict[str, BuiltinFunction] = {}
        self._register_all()

    def get_function(self, name: str) -> Optional[BuiltinFunction]:
        """Look up a function by name."""
        return self._functions.get(name)

    def register(self, func: BuiltinFunction) -> None:
        """Register a function."""
        self._functions[func.name] = func

    def list_functions(self) -> List[str]:
        return sorted(self._functions)

    def _register_all(self) -> None:
        """Register all built-in functions."""
        self._register_io_functions()
        self._register_string_functions()

    # --- I/O Functions ---

    def _register_io_functions(self) -> None:

        def _print(ctx: ExecutionContext, args: List[Value]) -> Value:
            out = ctx.output
            out.write(" ".join(str(arg) for arg in args))
            out.write("\n")
            out.flush()
            return int_val(0)

        def _input(ctx: ExecutionContext, args: List[Value]) -> Value:
            if args:
                ctx.output.write(str(args[0]))
                ctx.output.flush()
            line = ctx.input.readline()
            if line.endswith("\n"):
                line = line[:-1]
            if line.endswith("\r"):
                line = line[:-1]
            return string_val(line)

        self.register(BuiltinFunction(
            "print", _print,
            "print(args...) - write arguments separated by spaces, then a newline",
        ))
        self.register(BuiltinFunction(
            "input", _input,
            "input(prompt?) - read one line of input, without its newline",
        ))

    # --- String Functions ---

    def _register_string_functions(self) -> None:

        def _length(ctx: ExecutionContext, args: List[Value]) -> Value:
            if len(args) != 1:
                raise EvaluationError("length() expects exactly 1 argument")
            value = args[0]
            if value.type != ValueType.STRING:
                raise EvaluationError("length() can only be called on strings")
            return int_val(len(value.data))

        def _substring(ctx: ExecutionContext, args: List[Value]) -> Value:
            if len(args) not in (2, 3):
                raise EvaluationError(
                    "substring() expects 2 or 3 arguments: substring(string, start, [length])")
            if args[0].type != ValueType.STRING:
                raise EvaluationError("substring() first argument must be a string")
            if args[1].type != ValueType.INT:
                raise EvaluationError("substring() second argument must be an integer")

            text = args[0].data
            start = args[1].data
            if start < 0 or start >= len(text):
                return string_val("")

            if len(args) == 3:
                if args[2].type != ValueType.INT:
                    raise EvaluationError("substring() third argument must be an integer")
                length = args[2].data
                if length < 0:
                    return string_val("")
                return string_val(text[start:start + length])
            return string_val(text[start:])

        self.register(BuiltinFunction(
            "length", _length,
            "length(s) - number of characters in a string",
        ))
        self.register(BuiltinFunction(
            "substring", _substring,
            "substring(s, start, length?) - slice of a string",
        ))


# Global registry instance
_registry: Optional[BuiltinRegistry] = None


def get_builtin_registry() -> BuiltinRegistry:
    """Get the global built-in function registry."""
    global _registry
    if _registry is None:
        _registry = BuiltinRegistry()
    return _registry


def call_builtin(name: str, ctx: ExecutionContext, args: List[Value]) -> Value:
    """
    Call a built-in function by name.

    Raises EvaluationError if the function is not defined.
    """
    func = get_builtin_registry().get_function(name)
    if func is None:
        raise EvaluationError(f"Function '{name}' is not defined")
    return func.implementation(ctx, args)
