"""
Tree-walking interpreter for Myndra.

Evaluates a parsed Program statement by statement against a chain of
lexical environments. The first evaluation failure aborts the run and is
reported through ExecutionResult.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, TextIO

from .values import (
    Value, ValueType, int_val, float_val, bool_val, string_val,
)
from .context import Environment, ExecutionContext
from .builtins import call_builtin, get_builtin_registry

from ..ast import (
    AstVisitor, Program, Statement, Expression,
    IntegerLiteral, FloatLiteral, StringLiteral, BooleanLiteral, Identifier,
    BinaryExpression, BinaryOperator, UnaryExpression, UnaryOperator,
    FunctionCall, ArrayAccess, MemberAccess, ContextConditional,
    ExpressionStatement, VariableDeclaration, Block, FunctionDefinition,
    ReturnStatement, IfStatement, WhileStatement, ForStatement,
)
from ..errors import EvaluationError

logger = logging.getLogger(__name__)


@dataclass
class ExecutionResult:
    """Result of executing a program."""
    success: bool
    error_message: Optional[str] = None
    diagnostics: List[str] = field(default_factory=list)


# Operator names used in "Invalid operands for ..." messages
ARITHMETIC_NAMES = {
    BinaryOperator.ADD: "addition",
    BinaryOperator.SUB: "subtraction",
    BinaryOperator.MUL: "multiplication",
    BinaryOperator.DIV: "division",
    BinaryOperator.MOD: "modulo",
}

COMPARISON_OPERATORS = {
    BinaryOperator.LT: lambda a, b: a < b,
    BinaryOperator.LE: lambda a, b: a <= b,
    BinaryOperator.GT: lambda a, b: a > b,
    BinaryOperator.GE: lambda a, b: a >= b,
}


def _truncating_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


def _truncating_mod(a: int, b: int) -> int:
    """Integer remainder taking the sign of the dividend."""
    remainder = abs(a) % abs(b)
    return -remainder if a < 0 else remainder


class Interpreter(AstVisitor):
    """
    Tree-walking interpreter for Myndra.

    Evaluates AST nodes by dispatching to visit_<NodeClass> methods.
    Expression visitors return a Value; statement visitors return None.
    One interpreter keeps its global environment across execute() calls,
    so a REPL can reuse it line by line.
    """

    def __init__(self, stdout: Optional[TextIO] = None, stdin: Optional[TextIO] = None):
        self.context = ExecutionContext(stdout=stdout, stdin=stdin)

    @property
    def globals(self) -> Environment:
        return self.context.globals

    def execute(self, program: Program,
                environment: Optional[Environment] = None) -> ExecutionResult:
        """
        Execute a program.

        Args:
            program: The parsed program
            environment: Environment to run in (default: the global one)

        Returns:
            ExecutionResult; on failure error_message holds the first error
        """
        env = environment if environment is not None else self.context.globals
        logger.debug("executing %d statements", len(program.statements))

        try:
            with self.context.using_environment(env):
                for stmt in program.statements:
                    self._execute(stmt)
        except EvaluationError as e:
            logger.debug("execution failed: %s", e)
            return ExecutionResult(success=False, error_message=str(e))
        except RecursionError:
            logger.debug("execution failed: recursion limit reached")
            return ExecutionResult(success=False,
                                   error_message="Maximum nesting depth exceeded")

        logger.debug("execution finished")
        return ExecutionResult(success=True)

    def evaluate(self, expr: Expression) -> Value:
        """Evaluate a single expression in the current environment."""
        return expr.accept(self)

    def _execute(self, stmt: Statement) -> None:
        stmt.accept(self)

    # =========================================================================
    # Statements
    # =========================================================================

    def visit_Program(self, node: Program) -> None:
        for stmt in node.statements:
            self._execute(stmt)

    def visit_ExpressionStatement(self, node: ExpressionStatement) -> None:
        self.evaluate(node.expression)

    def visit_VariableDeclaration(self, node: VariableDeclaration) -> None:
        if node.initializer is not None:
            value = self.evaluate(node.initializer)
        else:
            value = int_val(0)
        self.context.current.define(node.name, value)

    def visit_Block(self, node: Block) -> None:
        with self.context.new_scope():
            for stmt in node.statements:
                self._execute(stmt)

    def visit_IfStatement(self, node: IfStatement) -> None:
        if self.evaluate(node.condition).is_truthy():
            self._execute(node.then_branch)
        elif node.else_branch is not None:
            self._execute(node.else_branch)

    def visit_WhileStatement(self, node: WhileStatement) -> None:
        while self.evaluate(node.condition).is_truthy():
            self._execute(node.body)

    def visit_ForStatement(self, node: ForStatement) -> None:
        raise EvaluationError("For loops not yet implemented")

    def visit_ReturnStatement(self, node: ReturnStatement) -> None:
        raise EvaluationError("Return statements not yet implemented")

    def visit_FunctionDefinition(self, node: FunctionDefinition) -> None:
        self.context.functions[node.name] = node
        logger.info("Function '%s' defined (not yet executable)", node.name)

    # =========================================================================
    # Expressions
    # =========================================================================

    def visit_IntegerLiteral(self, node: IntegerLiteral) -> Value:
        return int_val(node.value)

    def visit_FloatLiteral(self, node: FloatLiteral) -> Value:
        return float_val(node.value)

    def visit_StringLiteral(self, node: StringLiteral) -> Value:
        return string_val(node.value)

    def visit_BooleanLiteral(self, node: BooleanLiteral) -> Value:
        return bool_val(node.value)

    def visit_Identifier(self, node: Identifier) -> Value:
        return self.context.current.get(node.name)

    def visit_BinaryExpression(self, node: BinaryExpression) -> Value:
        if node.operator == BinaryOperator.ASSIGN:
            return self._eval_assignment(node)

        left = self.evaluate(node.left)
        right = self.evaluate(node.right)
        op = node.operator

        if op in ARITHMETIC_NAMES:
            return self._eval_arithmetic(op, left, right)

        if op in COMPARISON_OPERATORS:
            if left.type != right.type or not left.is_number:
                raise EvaluationError("Invalid operands for comparison")
            return bool_val(COMPARISON_OPERATORS[op](left.data, right.data))

        if op == BinaryOperator.EQ:
            return bool_val(left.type == right.type and left.data == right.data)
        if op == BinaryOperator.NE:
            return bool_val(not (left.type == right.type and left.data == right.data))

        # Both operands are always evaluated; no short-circuit
        if op == BinaryOperator.AND:
            return bool_val(left.is_truthy() and right.is_truthy())
        if op == BinaryOperator.OR:
            return bool_val(left.is_truthy() or right.is_truthy())

        raise EvaluationError(f"Unknown binary operator: {op.value}")

    def _eval_assignment(self, node: BinaryExpression) -> Value:
        if not isinstance(node.left, Identifier):
            raise EvaluationError("Invalid assignment target")
        value = self.evaluate(node.right)
        self.context.current.assign(node.left.name, value)
        return value

    def _eval_arithmetic(self, op: BinaryOperator, left: Value, right: Value) -> Value:
        """Evaluate + - * / % on same-typed operands."""
        same_type = left.type == right.type
        if op == BinaryOperator.ADD and same_type and left.type == ValueType.STRING:
            return string_val(left.data + right.data)
        if not same_type or not left.is_number:
            raise EvaluationError(f"Invalid operands for {ARITHMETIC_NAMES[op]}")

        a, b = left.data, right.data
        is_int = left.type == ValueType.INT

        if op == BinaryOperator.ADD:
            result = a + b
        elif op == BinaryOperator.SUB:
            result = a - b
        elif op == BinaryOperator.MUL:
            result = a * b
        elif op == BinaryOperator.DIV:
            if b == 0:
                raise EvaluationError("Division by zero")
            result = _truncating_div(a, b) if is_int else a / b
        else:
            if b == 0:
                raise EvaluationError("Modulo by zero")
            if not is_int and math.isinf(a):
                raise EvaluationError("Modulo of infinite value")
            result = _truncating_mod(a, b) if is_int else math.fmod(a, b)

        return int_val(result) if is_int else float_val(result)

    def visit_UnaryExpression(self, node: UnaryExpression) -> Value:
        operand = self.evaluate(node.operand)

        if node.operator == UnaryOperator.NOT:
            return bool_val(not operand.is_truthy())
        if node.operator == UnaryOperator.NEGATE:
            if operand.type == ValueType.INT:
                return int_val(-operand.data)
            if operand.type == ValueType.FLOAT:
                return float_val(-operand.data)
            raise EvaluationError("Invalid operand for negation")
        if node.operator == UnaryOperator.PLUS:
            if not operand.is_number:
                raise EvaluationError("Invalid operand for unary plus")
            return operand
        raise EvaluationError(f"Unknown unary operator: {node.operator.value}")

    def visit_FunctionCall(self, node: FunctionCall) -> Value:
        if not isinstance(node.callee, Identifier):
            raise EvaluationError("Function calls with complex expressions not yet supported")

        name = node.callee.name
        if get_builtin_registry().get_function(name) is None:
            raise EvaluationError(f"Function '{name}' is not defined")

        args = [self.evaluate(arg) for arg in node.arguments]
        return call_builtin(name, self.context, args)

    def visit_ArrayAccess(self, node: ArrayAccess) -> Value:
        raise EvaluationError("Array access not yet implemented")

    def visit_MemberAccess(self, node: MemberAccess) -> Value:
        raise EvaluationError("Member access not yet implemented")

    def visit_ContextConditional(self, node: ContextConditional) -> Value:
        raise EvaluationError("Context conditionals not yet implemented")


# Convenience function for simple execution
def execute(program: Program, environment: Optional[Environment] = None) -> ExecutionResult:
    """
    Execute a program with a fresh interpreter on the standard streams.

    This is a convenience wrapper around Interpreter.execute().
    """
    interpreter = Interpreter()
    return interpreter.execute(program, environment)


def compile_and_run(source: str, interpreter: Optional[Interpreter] = None) -> ExecutionResult:
    """
    High-level API to tokenize, parse and run Myndra source in one call.

        from myndra import compile_and_run

        result = compile_and_run('let a = 2; print(a * 21);')
        if not result.success:
            print(f"Error: {result.error_message}")

    Lexer or parser diagnostics stop the run before anything executes;
    they are returned in ExecutionResult.diagnostics.

    Args:
        source: Myndra source code
        interpreter: Interpreter to run on (default: a fresh one)

    Returns:
        ExecutionResult
    """
    from ..lexer import tokenize
    from ..parser import parse

    tokens, lex_errors = tokenize(source)
    if lex_errors:
        return ExecutionResult(
            success=False,
            error_message=f"Lexer errors: {'; '.join(lex_errors)}",
            diagnostics=lex_errors,
        )

    program, parse_errors = parse(tokens)
    if parse_errors:
        return ExecutionResult(
            success=False,
            error_message=f"Parser errors: {'; '.join(parse_errors)}",
            diagnostics=parse_errors,
        )

    interpreter = interpreter or Interpreter()
    return interpreter.execute(program)
