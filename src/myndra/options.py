"""
Compiler options for the Myndra command line.

Options come from the environment (MYNDRA_CONTEXT, MYNDRA_SHOW_AST) and
are then overridden by command-line flags.
"""

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

VALID_CONTEXTS = ("dev", "prod", "test")

_TRUE_STRINGS = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class CompilerOptions:
    """Settings that shape how the CLI runs a program."""
    context: str = "dev"        # Deployment context: dev, prod or test
    show_ast: bool = False      # Print the AST before running

    def __post_init__(self):
        if self.context not in VALID_CONTEXTS:
            raise ValueError(
                f"Unknown context '{self.context}' (expected one of: {', '.join(VALID_CONTEXTS)})")

    @property
    def print_ast(self) -> bool:
        """The dev context always shows the AST."""
        return self.show_ast or self.context == "dev"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "CompilerOptions":
        """Build options from MYNDRA_* environment variables."""
        environ = os.environ if environ is None else environ
        context = environ.get("MYNDRA_CONTEXT", "dev").strip().lower() or "dev"
        show_ast = environ.get("MYNDRA_SHOW_AST", "").strip().lower() in _TRUE_STRINGS
        return cls(context=context, show_ast=show_ast)

    def with_overrides(self, context: Optional[str] = None,
                       show_ast: Optional[bool] = None) -> "CompilerOptions":
        """Return a copy with any non-None overrides applied."""
        changes = {}
        if context is not None:
            changes["context"] = context
        if show_ast is not None:
            changes["show_ast"] = show_ast
        return replace(self, **changes)
