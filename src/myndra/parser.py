"""
Recursive descent parser for Myndra.

Converts a token stream into an Abstract Syntax Tree (AST).

Errors are collected rather than raised: a failed expectation records a
diagnostic and parsing carries on from the same token. Only a missing
primary expression abandons the current declaration, after which the
parser skips ahead to the next statement boundary.
"""

import logging
from typing import Callable, Dict, List, Optional, Tuple

from .tokens import Token, TokenType, SourceLocation, SourceSpan, DECLARATION_STARTS
from .ast import (
    # Expressions
    Expression, IntegerLiteral, FloatLiteral, StringLiteral, BooleanLiteral,
    Identifier, BinaryExpression, BinaryOperator, UnaryExpression, UnaryOperator,
    FunctionCall, ArrayAccess, MemberAccess, ContextConditional,
    # Statements
    Statement, ExpressionStatement, VariableDeclaration, Block, Parameter,
    FunctionDefinition, ReturnStatement, IfStatement, WhileStatement,
    ForStatement, Program,
)
from .errors import ParserError, DiagnosticCollector

logger = logging.getLogger(__name__)

NESTED_TOO_DEEPLY = "Expression nested too deeply"

EQUALITY_OPERATORS = {
    TokenType.EQUAL: BinaryOperator.EQ,
    TokenType.NOT_EQUAL: BinaryOperator.NE,
}

COMPARISON_OPERATORS = {
    TokenType.LESS: BinaryOperator.LT,
    TokenType.LESS_EQUAL: BinaryOperator.LE,
    TokenType.GREATER: BinaryOperator.GT,
    TokenType.GREATER_EQUAL: BinaryOperator.GE,
}

TERM_OPERATORS = {
    TokenType.PLUS: BinaryOperator.ADD,
    TokenType.MINUS: BinaryOperator.SUB,
}

FACTOR_OPERATORS = {
    TokenType.MULTIPLY: BinaryOperator.MUL,
    TokenType.DIVIDE: BinaryOperator.DIV,
    TokenType.MODULO: BinaryOperator.MOD,
}

UNARY_OPERATORS = {
    TokenType.NOT: UnaryOperator.NOT,
    TokenType.MINUS: UnaryOperator.NEGATE,
    TokenType.PLUS: UnaryOperator.PLUS,
}


class Parser:
    """
    Recursive descent parser for Myndra.

    Usage:
        parser = Parser(tokens)
        program = parser.parse_program()
        if parser.has_errors:
            ...

    Expression precedence, lowest to highest:
        assignment (right-associative)
        or
        and
        == !=
        < <= > >=
        + -
        * / %
        unary (not ! - +)
        call, index, member access
        primary
    """

    def __init__(self, tokens: List[Token]):
        self.tokens = list(tokens)
        if not self.tokens or self.tokens[-1].type != TokenType.EOF:
            end = self.tokens[-1].span.end if self.tokens else SourceLocation(1, 1, 0)
            self.tokens.append(Token(TokenType.EOF, "", None, SourceSpan(end, end)))
        self.pos = 0
        self.diagnostics = DiagnosticCollector()

    @property
    def errors(self) -> List[str]:
        """Formatted diagnostics, in the order they were found."""
        return self.diagnostics.messages

    @property
    def has_errors(self) -> bool:
        return self.diagnostics.has_errors

    # =========================================================================
    # Token Navigation
    # =========================================================================

    def _current(self) -> Token:
        """Get current token."""
        if self.pos >= len(self.tokens):
            return self.tokens[-1]  # EOF
        return self.tokens[self.pos]

    def _peek(self, offset: int = 0) -> Token:
        """Peek at token at current position + offset."""
        idx = self.pos + offset
        if idx >= len(self.tokens):
            return self.tokens[-1]  # EOF
        return self.tokens[idx]

    def _previous(self) -> Token:
        return self.tokens[max(0, self.pos - 1)]

    def _is_at_end(self) -> bool:
        """Check if at end of tokens."""
        return self._current().type == TokenType.EOF

    def _check(self, token_type: TokenType) -> bool:
        """Check if current token is of given type."""
        return self._current().type == token_type

    def _advance(self) -> Token:
        """Consume and return current token."""
        token = self._current()
        if not self._is_at_end():
            self.pos += 1
        return token

    def _match(self, *token_types: TokenType) -> Optional[Token]:
        """Consume token if it matches any of the given types."""
        if self._current().type in token_types:
            return self._advance()
        return None

    def _consume(self, token_type: TokenType, message: str) -> Token:
        """Consume token of expected type.

        On mismatch the error is recorded and the current token is returned
        without advancing.
        """
        if self._check(token_type):
            return self._advance()
        self._error(message)
        return self._current()

    def _error(self, message: str, token: Optional[Token] = None):
        """Record a diagnostic at token (default: the current token)."""
        token = token or self._current()
        return self.diagnostics.report(message, token.line, token.column, token.lexeme)

    def _skip_newlines(self) -> None:
        """Skip any NEWLINE tokens."""
        while self._check(TokenType.NEWLINE):
            self._advance()

    def _span_from(self, start: Token) -> SourceSpan:
        """Create a span from start token to the end of the previous token."""
        end_token = self._previous() if self.pos > 0 else start
        return SourceSpan(start.span.start, end_token.span.end)

    def _synchronize(self) -> None:
        """Discard tokens up to the next likely statement boundary."""
        self._advance()
        while not self._is_at_end():
            if self._previous().type == TokenType.SEMICOLON:
                return
            if self._current().type in DECLARATION_STARTS:
                return
            self._advance()

    # =========================================================================
    # Program and Declarations
    # =========================================================================

    def parse_program(self) -> Program:
        """Parse all tokens into a Program."""
        start = self._current()
        statements: List[Statement] = []

        while not self._is_at_end():
            self._skip_newlines()
            if self._is_at_end():
                break
            stmt = self._parse_declaration()
            if stmt is not None:
                statements.append(stmt)

        logger.debug("parsed %d top-level statements (%d errors)",
                     len(statements), self.diagnostics.error_count)
        return Program(SourceSpan(start.span.start, self._current().span.end), statements)

    def parse_statement(self) -> Optional[Statement]:
        """Parse a single declaration or statement; None if it failed."""
        self._skip_newlines()
        return self._parse_declaration()

    def parse_expression(self) -> Optional[Expression]:
        """Parse a single expression; None if it failed."""
        try:
            return self._parse_expression()
        except ParserError:
            return None
        except RecursionError:
            self._error(NESTED_TOO_DEEPLY)
            return None

    def _parse_declaration(self) -> Optional[Statement]:
        try:
            start = self._current()
            if self._match(TokenType.FN):
                return self._parse_function_definition(start)
            if self._match(TokenType.LET):
                return self._parse_variable_declaration(start)
            return self._parse_statement()
        except ParserError:
            self._synchronize()
            return None
        except RecursionError:
            self._error(NESTED_TOO_DEEPLY)
            self._synchronize()
            return None

    def _parse_variable_declaration(self, start: Token) -> VariableDeclaration:
        """
        Parse variable declaration (after 'let'):
            let name = value;
            let mut name: type = value;
        """
        is_mutable = self._match(TokenType.MUT) is not None
        name = self._consume(TokenType.IDENTIFIER, "Expect variable name")

        type_name = None
        if self._match(TokenType.COLON):
            type_name = self._parse_type()

        initializer = None
        if self._match(TokenType.ASSIGN):
            initializer = self._parse_expression()

        self._consume(TokenType.SEMICOLON, "Expect ';' after variable declaration")
        return VariableDeclaration(self._span_from(start), name.lexeme, type_name,
                                   initializer, is_mutable)

    def _parse_function_definition(self, start: Token) -> FunctionDefinition:
        """
        Parse function definition (after 'fn'):
            fn name(param: type, ...) -> return_type { body }
        """
        name = self._consume(TokenType.IDENTIFIER, "Expect function name")
        self._consume(TokenType.LEFT_PAREN, "Expect '(' after function name")
        parameters = self._parse_parameters()
        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after parameters")

        return_type = None
        if self._match(TokenType.ARROW):
            return_type = self._parse_type()

        self._skip_newlines()
        body = self._parse_block(self._current())
        return FunctionDefinition(self._span_from(start), name.lexeme, parameters,
                                  return_type, body)

    def _parse_parameters(self) -> List[Parameter]:
        parameters: List[Parameter] = []
        if self._check(TokenType.RIGHT_PAREN):
            return parameters

        while True:
            start = self._current()
            name = self._consume(TokenType.IDENTIFIER, "Expect parameter name")
            self._consume(TokenType.COLON, "Expect ':' after parameter name")
            type_name = self._parse_type()
            parameters.append(Parameter(self._span_from(start), name.lexeme, type_name))
            if not self._match(TokenType.COMMA):
                break
        return parameters

    def _parse_type(self) -> str:
        """Parse a type name; types are plain identifiers."""
        token = self._match(TokenType.IDENTIFIER)
        if token is not None:
            return token.lexeme
        self._error("Expected type name")
        return ""

    # =========================================================================
    # Statements
    # =========================================================================

    def _parse_statement(self) -> Statement:
        self._skip_newlines()
        start = self._current()

        if self._match(TokenType.IF):
            return self._parse_if(start)
        if self._match(TokenType.WHILE):
            return self._parse_while(start)
        if self._match(TokenType.FOR):
            return self._parse_for(start)
        if self._match(TokenType.RETURN):
            return self._parse_return(start)
        if self._check(TokenType.LEFT_BRACE):
            return self._parse_block(start)

        return self._parse_expression_statement(start)

    def _parse_block(self, start: Token) -> Block:
        """Parse { statements }."""
        self._consume(TokenType.LEFT_BRACE, "Expect '{'")
        statements: List[Statement] = []

        while not self._check(TokenType.RIGHT_BRACE) and not self._is_at_end():
            self._skip_newlines()
            if self._check(TokenType.RIGHT_BRACE) or self._is_at_end():
                break
            stmt = self._parse_declaration()
            if stmt is not None:
                statements.append(stmt)

        self._consume(TokenType.RIGHT_BRACE, "Expect '}'")
        return Block(self._span_from(start), statements)

    def _parse_if(self, start: Token) -> IfStatement:
        condition = self._parse_expression()
        then_branch = self._parse_statement()

        else_branch = None
        # 'else' may sit on the line after the then-branch
        offset = 0
        while self._peek(offset).type == TokenType.NEWLINE:
            offset += 1
        if self._peek(offset).type == TokenType.ELSE:
            self._skip_newlines()
            self._advance()
            else_branch = self._parse_statement()

        return IfStatement(self._span_from(start), condition, then_branch, else_branch)

    def _parse_while(self, start: Token) -> WhileStatement:
        condition = self._parse_expression()
        body = self._parse_statement()
        return WhileStatement(self._span_from(start), condition, body)

    def _parse_for(self, start: Token) -> ForStatement:
        """Parse: for name in start..end body"""
        variable = self._consume(TokenType.IDENTIFIER, "Expect loop variable name")
        self._consume(TokenType.IN, "Expect 'in' after loop variable")
        range_start = self._parse_expression()
        self._consume(TokenType.DOT, "Expect '..' in range")
        self._consume(TokenType.DOT, "Expect '..' in range")
        range_end = self._parse_expression()
        body = self._parse_statement()
        return ForStatement(self._span_from(start), variable.lexeme, range_start,
                            range_end, body)

    def _parse_return(self, start: Token) -> ReturnStatement:
        value = None
        if not self._check(TokenType.SEMICOLON):
            value = self._parse_expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after return value")
        return ReturnStatement(self._span_from(start), value)

    def _parse_expression_statement(self, start: Token) -> ExpressionStatement:
        expr = self._parse_expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after expression")
        return ExpressionStatement(self._span_from(start), expr)

    # =========================================================================
    # Expressions
    # =========================================================================

    def _parse_expression(self) -> Expression:
        return self._parse_assignment()

    def _parse_assignment(self) -> Expression:
        """Parse assignment (right-associative, identifier targets only)."""
        expr = self._parse_or()

        equals = self._match(TokenType.ASSIGN)
        if equals is None:
            return expr

        value = self._parse_assignment()
        if isinstance(expr, Identifier):
            span = SourceSpan(expr.span.start, value.span.end)
            return BinaryExpression(span, expr, BinaryOperator.ASSIGN, value)

        self._error("Invalid assignment target", equals)
        return expr

    def _parse_binary(self, operand: Callable[[], Expression],
                      operators: Dict[TokenType, BinaryOperator]) -> Expression:
        """Parse one left-associative binary precedence level."""
        left = operand()
        while self._current().type in operators:
            operator = operators[self._advance().type]
            right = operand()
            span = SourceSpan(left.span.start, right.span.end)
            left = BinaryExpression(span, left, operator, right)
        return left

    def _parse_or(self) -> Expression:
        return self._parse_binary(self._parse_and, {TokenType.OR: BinaryOperator.OR})

    def _parse_and(self) -> Expression:
        return self._parse_binary(self._parse_equality, {TokenType.AND: BinaryOperator.AND})

    def _parse_equality(self) -> Expression:
        return self._parse_binary(self._parse_comparison, EQUALITY_OPERATORS)

    def _parse_comparison(self) -> Expression:
        return self._parse_binary(self._parse_term, COMPARISON_OPERATORS)

    def _parse_term(self) -> Expression:
        return self._parse_binary(self._parse_factor, TERM_OPERATORS)

    def _parse_factor(self) -> Expression:
        return self._parse_binary(self._parse_unary, FACTOR_OPERATORS)

    def _parse_unary(self) -> Expression:
        """Parse unary: not x, !x, -x, +x"""
        start = self._current()
        if start.type in UNARY_OPERATORS:
            self._advance()
            operand = self._parse_unary()
            span = SourceSpan(start.span.start, operand.span.end)
            return UnaryExpression(span, UNARY_OPERATORS[start.type], operand)
        return self._parse_postfix()

    def _parse_postfix(self) -> Expression:
        """Parse calls, indexing and member access, then a context suffix."""
        start = self._current()
        expr = self._parse_primary()

        while True:
            if self._match(TokenType.LEFT_PAREN):
                arguments = self._parse_arguments()
                self._consume(TokenType.RIGHT_PAREN, "Expect ')' after arguments")
                expr = FunctionCall(self._span_from(start), expr, arguments)
            elif self._match(TokenType.LEFT_BRACKET):
                index = self._parse_expression()
                self._consume(TokenType.RIGHT_BRACKET, "Expect ']' after array index")
                expr = ArrayAccess(self._span_from(start), expr, index)
            elif self._check(TokenType.DOT) and self._peek(1).type != TokenType.DOT:
                # '..' is a range separator, not member access
                self._advance()
                name = self._consume(TokenType.IDENTIFIER, "Expect property name after '.'")
                expr = MemberAccess(self._span_from(start), expr, name.lexeme)
            else:
                break

        if (self._check(TokenType.IF)
                and self._peek(1).type in (TokenType.IDENTIFIER, TokenType.CONTEXT)
                and self._peek(2).type == TokenType.EQUAL):
            return self._parse_context_conditional(start, expr)

        return expr

    def _parse_arguments(self) -> List[Expression]:
        arguments: List[Expression] = []
        if self._check(TokenType.RIGHT_PAREN):
            return arguments
        arguments.append(self._parse_expression())
        while self._match(TokenType.COMMA):
            arguments.append(self._parse_expression())
        return arguments

    def _parse_context_conditional(self, start: Token, expr: Expression) -> Expression:
        """
        Parse the context suffix of: expr if context == == "dev"

        Two '==' tokens are required.
        """
        self._consume(TokenType.IF, "Expected 'if' for context conditional")
        if not self._match(TokenType.IDENTIFIER, TokenType.CONTEXT):
            self._error("Expected 'context' identifier")
        self._consume(TokenType.EQUAL, "Expected '==' in context conditional")
        self._consume(TokenType.EQUAL, "Expected '==' in context conditional")

        context = self._match(TokenType.STRING)
        if context is None:
            self._error('Expected context string ("dev", "prod", or "test")')
            return expr

        return ContextConditional(self._span_from(start), expr, context.literal)

    def _parse_primary(self) -> Expression:
        """Parse literals, identifiers and parenthesized expressions."""
        token = self._current()

        if self._match(TokenType.BOOLEAN):
            return BooleanLiteral(token.span, token.literal)
        if self._match(TokenType.INTEGER):
            return IntegerLiteral(token.span, token.literal)
        if self._match(TokenType.FLOAT):
            return FloatLiteral(token.span, token.literal)
        if self._match(TokenType.STRING):
            return StringLiteral(token.span, token.literal)
        if self._match(TokenType.IDENTIFIER):
            return Identifier(token.span, token.lexeme)

        if self._match(TokenType.LEFT_PAREN):
            expr = self._parse_expression()
            self._consume(TokenType.RIGHT_PAREN, "Expect ')' after expression")
            return expr

        raise ParserError(self._error("Expect expression"))


def parse(tokens: List[Token]) -> Tuple[Program, List[str]]:
    """
    Convenience function to parse a token list.

    Args:
        tokens: Tokens from the lexer, ending in EOF

    Returns:
        (program, errors) where errors are formatted diagnostics
    """
    parser = Parser(tokens)
    program = parser.parse_program()
    return program, parser.errors
