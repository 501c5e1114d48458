"""
Execution context for the Myndra interpreter.

Manages the lexical environment chain, the table of defined functions and
the input/output streams used by the builtins.
"""

import sys
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Optional, TextIO

from .values import Value
from ..ast import FunctionDefinition
from ..errors import EvaluationError


@dataclass
class Environment:
    """
    A single scope containing variable bindings.

    Environments form a chain via the `parent` field for lexical scoping.
    """
    values: Dict[str, Value] = field(default_factory=dict)
    parent: Optional["Environment"] = None
    name: str = "block"  # For debugging

    def define(self, name: str, value: Value) -> None:
        """Bind a variable in this scope, shadowing any outer binding."""
        self.values[name] = value

    def get(self, name: str) -> Value:
        """Look up a variable in this scope or enclosing scopes."""
        env = self
        while env is not None:
            if name in env.values:
                return env.values[name]
            env = env.parent
        raise EvaluationError(f"Undefined variable '{name}'")

    def assign(self, name: str, value: Value) -> None:
        """
        Update an existing variable.

        Searches up the scope chain to find where the variable is defined.
        """
        env = self
        while env is not None:
            if name in env.values:
                env.values[name] = value
                return
            env = env.parent
        raise EvaluationError(f"Undefined variable '{name}'")

    def contains(self, name: str) -> bool:
        """Check if a variable exists in this scope or enclosing scopes."""
        env = self
        while env is not None:
            if name in env.values:
                return True
            env = env.parent
        return False


@dataclass
class ExecutionContext:
    """
    The full execution context for interpreting Myndra code.

    Tracks:
    - The global environment and the currently active one
    - Functions defined so far (recorded, not yet callable)
    - Streams used by print and input
    """
    globals: Environment = field(default_factory=lambda: Environment(name="global"))
    current: Optional[Environment] = None
    functions: Dict[str, FunctionDefinition] = field(default_factory=dict)
    stdout: Optional[TextIO] = None
    stdin: Optional[TextIO] = None

    def __post_init__(self):
        if self.current is None:
            self.current = self.globals

    @property
    def output(self) -> TextIO:
        return self.stdout if self.stdout is not None else sys.stdout

    @property
    def input(self) -> TextIO:
        return self.stdin if self.stdin is not None else sys.stdin

    @contextmanager
    def new_scope(self, name: str = "block"):
        """
        Context manager to create a new nested environment.

        The previous environment is restored however the block exits.

        Usage:
            with ctx.new_scope():
                ctx.current.define("x", int_val(0))
        """
        old_env = self.current
        self.current = Environment(parent=old_env, name=name)
        try:
            yield self.current
        finally:
            self.current = old_env

    @contextmanager
    def using_environment(self, env: Environment):
        """Temporarily make env the active environment."""
        old_env = self.current
        self.current = env
        try:
            yield env
        finally:
            self.current = old_env
