"""
Myndra language front end and interpreter.

This module provides:
- Lexer: Tokenizes Myndra source code
- Parser: Builds an AST from tokens
- Interpreter: Evaluates the AST against lexical environments

Usage:
    from myndra import tokenize, parse, Interpreter

    tokens, lex_errors = tokenize('let a = 2; let b = 3; print(a + b);')
    program, parse_errors = parse(tokens)
    if not (lex_errors or parse_errors):
        result = Interpreter().execute(program)
        if not result.success:
            print(result.error_message)

Or in one call:
    from myndra import compile_and_run
    result = compile_and_run('print("hello");')
"""

import logging

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

from .tokens import (
    Token,
    TokenType,
    SourceLocation,
    SourceSpan,
    KEYWORDS,
)

from .lexer import (
    Lexer,
    tokenize,
)

from .parser import (
    Parser,
    parse,
)

from .ast import (
    # Base
    AstNode,
    AstVisitor,
    BinaryOperator,
    UnaryOperator,
    # Expressions
    Expression,
    IntegerLiteral,
    FloatLiteral,
    StringLiteral,
    BooleanLiteral,
    Identifier,
    BinaryExpression,
    UnaryExpression,
    FunctionCall,
    ArrayAccess,
    MemberAccess,
    ContextConditional,
    # Statements
    Statement,
    ExpressionStatement,
    VariableDeclaration,
    Block,
    Parameter,
    FunctionDefinition,
    ReturnStatement,
    IfStatement,
    WhileStatement,
    ForStatement,
    Program,
)

from .errors import (
    Diagnostic,
    DiagnosticCollector,
    MyndraError,
    ParserError,
    EvaluationError,
)

from .options import CompilerOptions

from .runtime import (
    Interpreter,
    ExecutionResult,
    Environment,
    Value,
    ValueType,
    execute,
    compile_and_run,
)

__all__ = [
    # Tokens
    "Token",
    "TokenType",
    "SourceLocation",
    "SourceSpan",
    "KEYWORDS",
    # Lexer
    "Lexer",
    "tokenize",
    # Parser
    "Parser",
    "parse",
    # AST
    "AstNode",
    "AstVisitor",
    "BinaryOperator",
    "UnaryOperator",
    "Expression",
    "IntegerLiteral",
    "FloatLiteral",
    "StringLiteral",
    "BooleanLiteral",
    "Identifier",
    "BinaryExpression",
    "UnaryExpression",
    "FunctionCall",
    "ArrayAccess",
    "MemberAccess",
    "ContextConditional",
    "Statement",
    "ExpressionStatement",
    "VariableDeclaration",
    "Block",
    "Parameter",
    "FunctionDefinition",
    "ReturnStatement",
    "IfStatement",
    "WhileStatement",
    "ForStatement",
    "Program",
    # Errors
    "Diagnostic",
    "DiagnosticCollector",
    "MyndraError",
    "ParserError",
    "EvaluationError",
    # Options
    "CompilerOptions",
    # Runtime
    "Interpreter",
    "ExecutionResult",
    "Environment",
    "Value",
    "ValueType",
    "execute",
    "compile_and_run",
]
