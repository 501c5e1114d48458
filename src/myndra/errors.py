"""
Myndra exceptions and diagnostic collection.

Two independent error channels exist:
- Lexer and parser diagnostics are non-fatal. They accumulate in a
  DiagnosticCollector and the caller decides whether to go on.
- Evaluation failures are fatal to the current execution. They are raised
  as EvaluationError and reported by the interpreter as a single message.
"""

from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class Diagnostic:
    """A single lexer or parser diagnostic."""
    message: str                    # Human-readable message
    line: int
    column: int
    lexeme: Optional[str] = None    # Offending lexeme (parser diagnostics)

    def format(self) -> str:
        """Format the diagnostic for display."""
        text = f"Line {self.line}, Column {self.column}: {self.message}"
        if self.lexeme is not None:
            text += f" (got '{self.lexeme}')"
        return text

    def __str__(self) -> str:
        return self.format()


class MyndraError(Exception):
    """Base exception for Myndra errors."""
    pass


class ParserError(MyndraError):
    """Raised inside the parser to abandon the current declaration.

    The diagnostic has already been recorded when this is raised; the
    parser catches it and resynchronizes at the next statement boundary.
    """

    def __init__(self, diagnostic: Diagnostic):
        self.diagnostic = diagnostic
        super().__init__(diagnostic.message)

    def __str__(self) -> str:
        return self.diagnostic.format()


class EvaluationError(MyndraError):
    """A fatal runtime failure; aborts the rest of the execution."""
    pass


class DiagnosticCollector:
    """Collects diagnostics, in order, during lexing or parsing."""

    def __init__(self):
        self.diagnostics: List[Diagnostic] = []

    def add(self, diagnostic: Diagnostic) -> None:
        """Add a diagnostic."""
        self.diagnostics.append(diagnostic)

    def report(self, message: str, line: int, column: int,
               lexeme: Optional[str] = None) -> Diagnostic:
        """Create, record and return a diagnostic."""
        diagnostic = Diagnostic(message, line, column, lexeme)
        self.add(diagnostic)
        return diagnostic

    @property
    def error_count(self) -> int:
        return len(self.diagnostics)

    @property
    def has_errors(self) -> bool:
        return bool(self.diagnostics)

    @property
    def messages(self) -> List[str]:
        """All diagnostics as formatted strings."""
        return [d.format() for d in self.diagnostics]
