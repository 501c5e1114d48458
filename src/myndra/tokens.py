"""
Token types for the Myndra lexer.

Token categories:
- Literals and identifiers
- Keywords (core language plus reserved words for future subsystems)
- Execution model annotations (@sync, @async, ...)
- Operators, punctuation and brackets
- Structural markers (EOF, NEWLINE, COMMENT, ERROR)
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Union


class TokenType(Enum):
    """All token types recognized by the lexer."""

    # --- Literals ---
    INTEGER = auto()            # 42
    FLOAT = auto()              # 3.14
    STRING = auto()             # "hello"
    BOOLEAN = auto()            # true, false
    NIL = auto()                # nil

    # --- Identifiers ---
    IDENTIFIER = auto()

    # --- Keywords ---
    LET = auto()
    MUT = auto()
    FN = auto()
    IF = auto()
    ELSE = auto()
    WHILE = auto()
    FOR = auto()
    IN = auto()
    RETURN = auto()
    IMPORT = auto()
    EXPORT = auto()
    WITH = auto()
    CAPABILITIES = auto()
    CAPSULE = auto()
    DSL = auto()
    FALLBACK = auto()
    RETRY = auto()
    CONTEXT = auto()
    OVER = auto()
    TAG = auto()                # 'tag' keyword and #semantic:tags
    DID = auto()
    EVOLVING = auto()

    # --- Execution model annotations ---
    AT_SYNC = auto()            # @sync
    AT_ASYNC = auto()           # @async
    AT_PARALLEL = auto()        # @parallel
    AT_REACTIVE = auto()        # @reactive
    AT_TEMPORAL = auto()        # @temporal

    # --- Arithmetic and assignment operators ---
    PLUS = auto()               # +
    MINUS = auto()              # -
    MULTIPLY = auto()           # *
    DIVIDE = auto()             # /
    MODULO = auto()             # %
    ASSIGN = auto()             # =
    PLUS_ASSIGN = auto()        # +=
    MINUS_ASSIGN = auto()       # -=
    ARROW = auto()              # ->
    FAT_ARROW = auto()          # =>

    # --- Comparison operators ---
    EQUAL = auto()              # ==
    NOT_EQUAL = auto()          # !=
    LESS = auto()               # <
    LESS_EQUAL = auto()         # <=
    GREATER = auto()            # >
    GREATER_EQUAL = auto()      # >=

    # --- Logical operators ---
    AND = auto()                # and
    OR = auto()                 # or
    NOT = auto()                # not, !

    # --- Punctuation ---
    SEMICOLON = auto()          # ;
    COMMA = auto()              # ,
    DOT = auto()                # .
    COLON = auto()              # :
    DOUBLE_COLON = auto()       # ::
    QUESTION = auto()           # ?

    # --- Brackets ---
    LEFT_PAREN = auto()         # (
    RIGHT_PAREN = auto()        # )
    LEFT_BRACE = auto()         # {
    RIGHT_BRACE = auto()        # }
    LEFT_BRACKET = auto()       # [
    RIGHT_BRACKET = auto()      # ]

    # --- Reactive / temporal / identity keywords (reserved) ---
    OBSERVABLE = auto()
    SUBSCRIBE = auto()
    EMIT = auto()
    TRANSITION = auto()
    TIMELINE = auto()
    VERIFY = auto()
    PROOF = auto()
    HAS_PROOF = auto()

    # --- Special ---
    HASH = auto()               # lone '#'
    EOF = auto()
    NEWLINE = auto()
    COMMENT = auto()            # never emitted by tokenize()
    ERROR = auto()


@dataclass(frozen=True)
class SourceLocation:
    """Represents a position in source code."""
    line: int           # 1-indexed line number
    column: int         # 1-indexed column number
    offset: int         # 0-indexed character offset from start

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class SourceSpan:
    """Represents a range in source code."""
    start: SourceLocation
    end: SourceLocation

    def __str__(self) -> str:
        return f"{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"


LiteralValue = Union[int, float, str, bool, None]


@dataclass(frozen=True)
class Token:
    """A single token from the lexer."""
    type: TokenType
    lexeme: str                 # The original source text
    literal: LiteralValue       # Payload for literal tokens, None otherwise
    span: SourceSpan            # Location in source

    @property
    def line(self) -> int:
        return self.span.start.line

    @property
    def column(self) -> int:
        return self.span.start.column

    @property
    def offset(self) -> int:
        return self.span.start.offset

    def __str__(self) -> str:
        if self.type in LITERAL_TYPES:
            return f"{self.type.name}({self.literal!r})"
        if self.type == TokenType.IDENTIFIER:
            return f"{self.type.name}({self.lexeme!r})"
        return self.type.name


LITERAL_TYPES = frozenset({
    TokenType.INTEGER,
    TokenType.FLOAT,
    TokenType.STRING,
    TokenType.BOOLEAN,
})


# Keyword mapping - maps string to token type
KEYWORDS: dict[str, TokenType] = {
    "let": TokenType.LET,
    "mut": TokenType.MUT,
    "fn": TokenType.FN,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "while": TokenType.WHILE,
    "for": TokenType.FOR,
    "in": TokenType.IN,
    "return": TokenType.RETURN,
    "import": TokenType.IMPORT,
    "export": TokenType.EXPORT,
    "with": TokenType.WITH,
    "capabilities": TokenType.CAPABILITIES,
    "capsule": TokenType.CAPSULE,
    "dsl": TokenType.DSL,
    "fallback": TokenType.FALLBACK,
    "retry": TokenType.RETRY,
    "context": TokenType.CONTEXT,
    "over": TokenType.OVER,
    "tag": TokenType.TAG,
    "did": TokenType.DID,
    "evolving": TokenType.EVOLVING,

    # Literals
    "true": TokenType.BOOLEAN,
    "false": TokenType.BOOLEAN,
    "nil": TokenType.NIL,

    # Logical operators
    "and": TokenType.AND,
    "or": TokenType.OR,
    "not": TokenType.NOT,

    # Reactive
    "observable": TokenType.OBSERVABLE,
    "subscribe": TokenType.SUBSCRIBE,
    "emit": TokenType.EMIT,

    # Temporal
    "transition": TokenType.TRANSITION,
    "timeline": TokenType.TIMELINE,

    # Identity
    "verify": TokenType.VERIFY,
    "proof": TokenType.PROOF,
    "has_proof": TokenType.HAS_PROOF,
}


ANNOTATIONS: dict[str, TokenType] = {
    "@sync": TokenType.AT_SYNC,
    "@async": TokenType.AT_ASYNC,
    "@parallel": TokenType.AT_PARALLEL,
    "@reactive": TokenType.AT_REACTIVE,
    "@temporal": TokenType.AT_TEMPORAL,
}


# Tokens that begin a new declaration; used by parser error recovery
DECLARATION_STARTS = frozenset({
    TokenType.FN,
    TokenType.LET,
    TokenType.IF,
    TokenType.WHILE,
    TokenType.FOR,
    TokenType.RETURN,
})
