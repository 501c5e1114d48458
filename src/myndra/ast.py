"""
Abstract Syntax Tree (AST) node definitions for Myndra.

The parser builds the tree bottom-up; the interpreter only reads it.
Every node carries the source span it was parsed from and renders itself
back to a compact, deterministic text form with to_string().
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, Any
from abc import ABC, abstractmethod
from .tokens import SourceSpan


# =============================================================================
# Base Classes
# =============================================================================

@dataclass
class AstNode(ABC):
    """Base class for all AST nodes."""
    span: SourceSpan  # Source location for error reporting

    @property
    def line(self) -> int:
        return self.span.start.line

    @property
    def column(self) -> int:
        return self.span.start.column

    def accept(self, visitor: "AstVisitor") -> Any:
        """Accept a visitor for traversal."""
        method_name = f"visit_{self.__class__.__name__}"
        method = getattr(visitor, method_name, visitor.generic_visit)
        return method(self)

    @abstractmethod
    def to_string(self) -> str:
        """Render the node as source-like text."""

    def __str__(self) -> str:
        return self.to_string()


class AstVisitor(ABC):
    """Base class for AST visitors."""

    def generic_visit(self, node: AstNode) -> Any:
        """Default visit method."""
        raise NotImplementedError(f"No visitor for {node.__class__.__name__}")


class BinaryOperator(Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    EQ = "=="
    NE = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="
    AND = "and"
    OR = "or"
    ASSIGN = "="


class UnaryOperator(Enum):
    NOT = "not"
    NEGATE = "-"
    PLUS = "+"


def _indent(text: str, prefix: str = "  ") -> str:
    return "\n".join(prefix + line for line in text.split("\n"))


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass
class Expression(AstNode):
    """Base class for all expressions."""
    pass


@dataclass
class IntegerLiteral(Expression):
    value: int

    def to_string(self) -> str:
        return str(self.value)


@dataclass
class FloatLiteral(Expression):
    value: float

    def to_string(self) -> str:
        return f"{self.value:.6f}"


@dataclass
class StringLiteral(Expression):
    value: str

    def to_string(self) -> str:
        return f'"{self.value}"'


@dataclass
class BooleanLiteral(Expression):
    value: bool

    def to_string(self) -> str:
        return "true" if self.value else "false"


@dataclass
class Identifier(Expression):
    """A variable or function name reference."""
    name: str

    def to_string(self) -> str:
        return self.name


@dataclass
class BinaryExpression(Expression):
    """A binary operation (e.g., a + b, x and y, x = 1)."""
    left: Expression
    operator: BinaryOperator
    right: Expression

    def to_string(self) -> str:
        return f"({self.left.to_string()} {self.operator.value} {self.right.to_string()})"


@dataclass
class UnaryExpression(Expression):
    """A unary operation (e.g., not x, -n)."""
    operator: UnaryOperator
    operand: Expression

    def to_string(self) -> str:
        if self.operator == UnaryOperator.NOT:
            return f"(not {self.operand.to_string()})"
        return f"({self.operator.value}{self.operand.to_string()})"


@dataclass
class FunctionCall(Expression):
    """A call (e.g., print(a, b))."""
    callee: Expression
    arguments: List[Expression] = field(default_factory=list)

    def to_string(self) -> str:
        args = ", ".join(arg.to_string() for arg in self.arguments)
        return f"{self.callee.to_string()}({args})"


@dataclass
class ArrayAccess(Expression):
    """Index access (e.g., items[0])."""
    array: Expression
    index: Expression

    def to_string(self) -> str:
        return f"{self.array.to_string()}[{self.index.to_string()}]"


@dataclass
class MemberAccess(Expression):
    """Member access (e.g., point.x)."""
    object: Expression
    member: str

    def to_string(self) -> str:
        return f"{self.object.to_string()}.{self.member}"


@dataclass
class ContextConditional(Expression):
    """An expression guarded by a deployment context.

    Written as: expr if context == == "dev"
    """
    expression: Expression
    context: str

    def to_string(self) -> str:
        return f'{self.expression.to_string()} if context == "{self.context}"'


# =============================================================================
# Statement Nodes
# =============================================================================

@dataclass
class Statement(AstNode):
    """Base class for all statements."""
    pass


@dataclass
class ExpressionStatement(Statement):
    """An expression evaluated for its side effects."""
    expression: Expression

    def to_string(self) -> str:
        return self.expression.to_string()


@dataclass
class VariableDeclaration(Statement):
    """
    Variable declaration:
        let name = value;
        let mut name: type = value;
    """
    name: str
    type_name: Optional[str] = None
    initializer: Optional[Expression] = None
    is_mutable: bool = False

    def to_string(self) -> str:
        text = "let "
        if self.is_mutable:
            text += "mut "
        text += self.name
        if self.type_name:
            text += f": {self.type_name}"
        if self.initializer is not None:
            text += f" = {self.initializer.to_string()}"
        return text


@dataclass
class Block(Statement):
    """A braced sequence of statements with its own scope."""
    statements: List[Statement] = field(default_factory=list)

    def to_string(self) -> str:
        if not self.statements:
            return "{\n}"
        body = "\n".join(_indent(stmt.to_string()) for stmt in self.statements)
        return "{\n" + body + "\n}"


@dataclass
class Parameter(AstNode):
    """A function parameter with its declared type."""
    name: str
    type_name: str

    def to_string(self) -> str:
        return f"{self.name}: {self.type_name}"


@dataclass
class FunctionDefinition(Statement):
    """
    Function definition:
        fn name(param: type, ...) -> return_type {
            body
        }
    """
    name: str
    parameters: List[Parameter]
    return_type: Optional[str]
    body: Block

    def to_string(self) -> str:
        params = ", ".join(p.to_string() for p in self.parameters)
        text = f"fn {self.name}({params})"
        if self.return_type:
            text += f" -> {self.return_type}"
        return f"{text} {self.body.to_string()}"


@dataclass
class ReturnStatement(Statement):
    value: Optional[Expression] = None

    def to_string(self) -> str:
        if self.value is None:
            return "return"
        return f"return {self.value.to_string()}"


@dataclass
class IfStatement(Statement):
    condition: Expression
    then_branch: Statement
    else_branch: Optional[Statement] = None

    def to_string(self) -> str:
        text = f"if {self.condition.to_string()} {self.then_branch.to_string()}"
        if self.else_branch is not None:
            text += f" else {self.else_branch.to_string()}"
        return text


@dataclass
class WhileStatement(Statement):
    condition: Expression
    body: Statement

    def to_string(self) -> str:
        return f"while {self.condition.to_string()} {self.body.to_string()}"


@dataclass
class ForStatement(Statement):
    """Range loop: for i in start..end body"""
    variable: str
    start: Expression
    end: Expression
    body: Statement

    def to_string(self) -> str:
        return (f"for {self.variable} in {self.start.to_string()}.."
                f"{self.end.to_string()} {self.body.to_string()}")


@dataclass
class Program(AstNode):
    """Root node: the top-level statements of one source unit."""
    statements: List[Statement] = field(default_factory=list)

    def to_string(self) -> str:
        return "".join(stmt.to_string() + "\n" for stmt in self.statements)
