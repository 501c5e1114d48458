"""
Tests for AST node rendering and visitor dispatch.
"""

import pytest
from myndra import (
    SourceLocation, SourceSpan, AstVisitor,
    IntegerLiteral, FloatLiteral, StringLiteral, BooleanLiteral, Identifier,
    BinaryExpression, BinaryOperator, UnaryExpression, UnaryOperator,
    FunctionCall, ArrayAccess, MemberAccess, ContextConditional,
    ExpressionStatement, VariableDeclaration, Block, Parameter,
    FunctionDefinition, ReturnStatement, IfStatement, WhileStatement,
    ForStatement, Program,
)

SPAN = SourceSpan(SourceLocation(3, 7, 20), SourceLocation(3, 9, 22))


def ident(name):
    return Identifier(SPAN, name)


def stmt(expr):
    return ExpressionStatement(SPAN, expr)


class TestExpressionRendering:
    """to_string for expression nodes."""

    def test_literals(self):
        """Literals render like source."""
        assert IntegerLiteral(SPAN, -3).to_string() == "-3"
        assert FloatLiteral(SPAN, 3.14).to_string() == "3.140000"
        assert StringLiteral(SPAN, "hi").to_string() == '"hi"'
        assert BooleanLiteral(SPAN, False).to_string() == "false"

    @pytest.mark.parametrize("operator,symbol", [
        (BinaryOperator.ADD, "+"),
        (BinaryOperator.MOD, "%"),
        (BinaryOperator.NE, "!="),
        (BinaryOperator.GE, ">="),
        (BinaryOperator.AND, "and"),
        (BinaryOperator.OR, "or"),
        (BinaryOperator.ASSIGN, "="),
    ])
    def test_binary(self, operator, symbol):
        """Binary expressions are parenthesized with their symbol."""
        node = BinaryExpression(SPAN, ident("a"), operator, ident("b"))
        assert node.to_string() == f"(a {symbol} b)"

    def test_unary(self):
        """Unary expressions."""
        assert UnaryExpression(SPAN, UnaryOperator.NOT, ident("x")).to_string() == "(not x)"
        assert UnaryExpression(SPAN, UnaryOperator.NEGATE, ident("x")).to_string() == "(-x)"
        assert UnaryExpression(SPAN, UnaryOperator.PLUS, ident("x")).to_string() == "(+x)"

    def test_postfix(self):
        """Calls, indexing and member access."""
        call = FunctionCall(SPAN, ident("f"), [IntegerLiteral(SPAN, 1), ident("y")])
        assert call.to_string() == "f(1, y)"
        assert ArrayAccess(SPAN, ident("xs"), IntegerLiteral(SPAN, 0)).to_string() == "xs[0]"
        assert MemberAccess(SPAN, ident("p"), "x").to_string() == "p.x"

    def test_context_conditional(self):
        """Context conditional shows the context name."""
        node = ContextConditional(SPAN, ident("x"), "dev")
        assert node.to_string() == 'x if context == "dev"'


class TestStatementRendering:
    """to_string for statement nodes."""

    def test_variable_declaration(self):
        """Optional parts are omitted when absent."""
        assert VariableDeclaration(SPAN, "x").to_string() == "let x"
        full = VariableDeclaration(SPAN, "x", "int", IntegerLiteral(SPAN, 1), True)
        assert full.to_string() == "let mut x: int = 1"

    def test_empty_block(self):
        """Empty block."""
        assert Block(SPAN, []).to_string() == "{\n}"

    def test_nested_block_indentation(self):
        """Nested blocks indent their contents."""
        inner = Block(SPAN, [stmt(ident("y"))])
        outer = Block(SPAN, [stmt(ident("x")), inner])
        assert outer.to_string() == "{\n  x\n  {\n    y\n  }\n}"

    def test_function_definition(self):
        """Function definition with parameters and return type."""
        body = Block(SPAN, [ReturnStatement(SPAN, ident("a"))])
        fn = FunctionDefinition(SPAN, "f", [Parameter(SPAN, "a", "int")], "int", body)
        assert fn.to_string() == "fn f(a: int) -> int {\n  return a\n}"

    def test_return(self):
        """Bare return."""
        assert ReturnStatement(SPAN).to_string() == "return"

    def test_if_else(self):
        """If with else branch."""
        node = IfStatement(SPAN, ident("c"), Block(SPAN, [stmt(ident("a"))]),
                           Block(SPAN, [stmt(ident("b"))]))
        assert node.to_string() == "if c {\n  a\n} else {\n  b\n}"

    def test_loops(self):
        """While and for loops."""
        body = Block(SPAN, [])
        assert WhileStatement(SPAN, ident("c"), body).to_string() == "while c {\n}"
        loop = ForStatement(SPAN, "i", IntegerLiteral(SPAN, 0), ident("n"), body)
        assert loop.to_string() == "for i in 0..n {\n}"

    def test_program(self):
        """Program renders one statement per line."""
        program = Program(SPAN, [stmt(ident("a")), stmt(ident("b"))])
        assert program.to_string() == "a\nb\n"
        assert str(program) == "a\nb\n"


class TestVisitor:
    """Visitor dispatch."""

    class NameCollector(AstVisitor):
        def __init__(self):
            self.names = []

        def visit_Identifier(self, node):
            self.names.append(node.name)
            return node.name

        def visit_BinaryExpression(self, node):
            node.left.accept(self)
            node.right.accept(self)
            return "binary"

    def test_dispatch_by_class_name(self):
        """accept calls visit_<ClassName>."""
        visitor = self.NameCollector()
        node = BinaryExpression(SPAN, ident("a"), BinaryOperator.ADD, ident("b"))
        assert node.accept(visitor) == "binary"
        assert visitor.names == ["a", "b"]

    def test_missing_visit_method(self):
        """Unhandled node kinds fall to generic_visit."""
        visitor = self.NameCollector()
        with pytest.raises(NotImplementedError, match="IntegerLiteral"):
            IntegerLiteral(SPAN, 1).accept(visitor)

    def test_position_properties(self):
        """Nodes expose their start line and column."""
        node = ident("a")
        assert node.line == 3
        assert node.column == 7
