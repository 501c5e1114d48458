"""
Lexer for Myndra.

Converts source text into a flat list of tokens for the parser.
Supports:
- Significant newlines (NEWLINE tokens)
- Line comments (//) and block comments (/* */), dropped from the output
- Double-quoted string literals with escape sequences
- Integer and float literals
- Keywords, identifiers and boolean literals
- Execution model annotations (@sync, @async, ...)
- Semantic tags (#tag:auth)
- Single and two-character operators

The lexer never raises. Problems are recorded as diagnostics and the
offending input produces an ERROR token, which ends tokenization.
"""

import logging
from typing import List, Tuple

from .tokens import (
    Token, TokenType, SourceLocation, SourceSpan, LiteralValue,
    KEYWORDS, ANNOTATIONS,
)
from .errors import DiagnosticCollector

logger = logging.getLogger(__name__)

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

ESCAPE_CHARS = {
    'n': '\n',
    't': '\t',
    'r': '\r',
    '\\': '\\',
    '"': '"',
}

TWO_CHAR_TOKENS = {
    '+=': TokenType.PLUS_ASSIGN,
    '-=': TokenType.MINUS_ASSIGN,
    '->': TokenType.ARROW,
    '=>': TokenType.FAT_ARROW,
    '==': TokenType.EQUAL,
    '!=': TokenType.NOT_EQUAL,
    '<=': TokenType.LESS_EQUAL,
    '>=': TokenType.GREATER_EQUAL,
    '::': TokenType.DOUBLE_COLON,
}

SINGLE_CHAR_TOKENS = {
    '(': TokenType.LEFT_PAREN,
    ')': TokenType.RIGHT_PAREN,
    '{': TokenType.LEFT_BRACE,
    '}': TokenType.RIGHT_BRACE,
    '[': TokenType.LEFT_BRACKET,
    ']': TokenType.RIGHT_BRACKET,
    ',': TokenType.COMMA,
    '.': TokenType.DOT,
    ';': TokenType.SEMICOLON,
    '?': TokenType.QUESTION,
    ':': TokenType.COLON,
    '+': TokenType.PLUS,
    '-': TokenType.MINUS,
    '*': TokenType.MULTIPLY,
    '%': TokenType.MODULO,
    '=': TokenType.ASSIGN,
    '<': TokenType.LESS,
    '>': TokenType.GREATER,
    '!': TokenType.NOT,
}


def _is_alpha(ch: str) -> bool:
    return ch.isascii() and (ch.isalpha() or ch == '_')


def _is_digit(ch: str) -> bool:
    return ch.isascii() and ch.isdigit()


def _is_alnum(ch: str) -> bool:
    return _is_alpha(ch) or _is_digit(ch)


class Lexer:
    """
    Tokenizer for Myndra source.

    Usage:
        lexer = Lexer(source_code)
        tokens = lexer.tokenize()
        if lexer.has_errors:
            for message in lexer.errors:
                print(message)

    Or one token at a time:
        token = lexer.next_token()
    """

    def __init__(self, source: str):
        self.source = source
        self.pos = 0            # Current position in source
        self.line = 1           # Current line (1-indexed)
        self.column = 1         # Current column (1-indexed)
        self.diagnostics = DiagnosticCollector()

    @property
    def errors(self) -> List[str]:
        """Formatted diagnostics, in the order they were found."""
        return self.diagnostics.messages

    @property
    def has_errors(self) -> bool:
        return self.diagnostics.has_errors

    def _location(self) -> SourceLocation:
        """Get current source location."""
        return SourceLocation(self.line, self.column, self.pos)

    def _peek(self, offset: int = 0) -> str:
        """Look at character at current position + offset without consuming."""
        idx = self.pos + offset
        if idx >= len(self.source):
            return '\0'
        return self.source[idx]

    def _advance(self) -> str:
        """Consume and return current character."""
        if self.pos >= len(self.source):
            return '\0'
        ch = self.source[self.pos]
        self.pos += 1
        if ch == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return ch

    def _match(self, expected: str) -> bool:
        """Consume character if it matches expected."""
        if not self._is_at_end() and self._peek() == expected:
            self._advance()
            return True
        return False

    def _is_at_end(self) -> bool:
        return self.pos >= len(self.source)

    def _make_token(self, token_type: TokenType, start: SourceLocation,
                    literal: LiteralValue = None) -> Token:
        """Create a token spanning from start to the current position."""
        lexeme = self.source[start.offset:self.pos]
        return Token(token_type, lexeme, literal, SourceSpan(start, self._location()))

    def _error(self, message: str, location: SourceLocation) -> None:
        self.diagnostics.report(message, location.line, location.column)

    def _error_token(self, message: str, start: SourceLocation) -> Token:
        """Record a diagnostic at start and return an ERROR token."""
        self._error(message, start)
        return self._make_token(TokenType.ERROR, start)

    def _skip_whitespace(self) -> None:
        """Skip spaces, tabs and carriage returns (newlines are tokens)."""
        while self._peek() in ' \t\r' and not self._is_at_end():
            self._advance()

    def _skip_line_comment(self) -> None:
        while self._peek() != '\n' and not self._is_at_end():
            self._advance()

    def _scan_block_comment(self, start: SourceLocation) -> Token:
        """Skip the body of a /* ... */ comment; the opener is consumed."""
        while not self._is_at_end():
            if self._peek() == '*' and self._peek(1) == '/':
                self._advance()
                self._advance()
                return self._make_token(TokenType.COMMENT, start)
            self._advance()
        return self._error_token("Unterminated block comment", start)

    def _scan_string(self) -> Token:
        """Scan a double-quoted string literal."""
        start = self._location()
        self._advance()  # opening quote
        chars = []

        while not self._is_at_end() and self._peek() != '"':
            if self._peek() == '\\':
                escape_start = self._location()
                self._advance()  # backslash
                if self._is_at_end():
                    break
                escaped = self._advance()
                if escaped in ESCAPE_CHARS:
                    chars.append(ESCAPE_CHARS[escaped])
                else:
                    self._error(f"Unknown escape sequence: \\{escaped}", escape_start)
                    chars.append(escaped)
            else:
                chars.append(self._advance())

        if self._is_at_end():
            return self._error_token("Unterminated string", start)

        self._advance()  # closing quote
        return self._make_token(TokenType.STRING, start, ''.join(chars))

    def _scan_number(self) -> Token:
        """Scan an integer or float literal."""
        start = self._location()
        while _is_digit(self._peek()):
            self._advance()

        # A '.' only belongs to the number when a digit follows it
        is_float = False
        if self._peek() == '.' and _is_digit(self._peek(1)):
            is_float = True
            self._advance()
            while _is_digit(self._peek()):
                self._advance()

        lexeme = self.source[start.offset:self.pos]
        if is_float:
            return self._make_token(TokenType.FLOAT, start, float(lexeme))

        # int64 has at most 19 digits; bound the text before converting it
        if len(lexeme.lstrip('0')) > 19:
            return self._error_token("Integer literal out of range", start)
        value = int(lexeme)
        if not INT64_MIN <= value <= INT64_MAX:
            return self._error_token("Integer literal out of range", start)
        return self._make_token(TokenType.INTEGER, start, value)

    def _scan_identifier_or_keyword(self) -> Token:
        start = self._location()
        while _is_alnum(self._peek()):
            self._advance()

        text = self.source[start.offset:self.pos]
        token_type = KEYWORDS.get(text)
        if token_type is None:
            return self._make_token(TokenType.IDENTIFIER, start)
        if token_type == TokenType.BOOLEAN:
            return self._make_token(token_type, start, text == "true")
        return self._make_token(token_type, start)

    def _scan_annotation(self) -> Token:
        """Scan an @annotation against the fixed annotation table."""
        start = self._location()
        self._advance()  # '@'
        while _is_alnum(self._peek()):
            self._advance()

        text = self.source[start.offset:self.pos]
        token_type = ANNOTATIONS.get(text)
        if token_type is None:
            return self._error_token(f"Unknown annotation: {text}", start)
        return self._make_token(token_type, start)

    def _scan_tag_or_hash(self) -> Token:
        """Scan a #semantic:tag, or a lone '#'."""
        start = self._location()
        self._advance()  # '#'
        if not _is_alpha(self._peek()):
            return self._make_token(TokenType.HASH, start)
        while _is_alnum(self._peek()) or self._peek() == ':':
            self._advance()
        return self._make_token(TokenType.TAG, start)

    def next_token(self) -> Token:
        """Scan and return the next token, including COMMENT tokens."""
        self._skip_whitespace()
        start = self._location()

        if self._is_at_end():
            return self._make_token(TokenType.EOF, start)

        ch = self._peek()
        if ch == '"':
            return self._scan_string()
        if _is_digit(ch):
            return self._scan_number()
        if _is_alpha(ch):
            return self._scan_identifier_or_keyword()
        if ch == '@':
            return self._scan_annotation()
        if ch == '#':
            return self._scan_tag_or_hash()

        self._advance()

        if ch == '\n':
            return self._make_token(TokenType.NEWLINE, start)

        if ch == '/':
            if self._match('/'):
                self._skip_line_comment()
                return self._make_token(TokenType.COMMENT, start)
            if self._match('*'):
                return self._scan_block_comment(start)
            return self._make_token(TokenType.DIVIDE, start)

        two_char = TWO_CHAR_TOKENS.get(ch + self._peek())
        if two_char is not None:
            self._advance()
            return self._make_token(two_char, start)

        single_char = SINGLE_CHAR_TOKENS.get(ch)
        if single_char is not None:
            return self._make_token(single_char, start)

        return self._error_token(f"Unexpected character: {ch}", start)

    def tokenize(self) -> List[Token]:
        """Tokenize the entire source, returning a list of tokens.

        Stops at end of input or at the first ERROR token. The list always
        ends with exactly one EOF token.
        """
        tokens: List[Token] = []
        while True:
            token = self.next_token()
            if token.type != TokenType.COMMENT:
                tokens.append(token)
            if token.type in (TokenType.EOF, TokenType.ERROR):
                break

        if not tokens or tokens[-1].type != TokenType.EOF:
            end = self._location()
            tokens.append(Token(TokenType.EOF, "", None, SourceSpan(end, end)))

        logger.debug("tokenized %d characters into %d tokens (%d errors)",
                     len(self.source), len(tokens), self.diagnostics.error_count)
        return tokens


def tokenize(source: str) -> Tuple[List[Token], List[str]]:
    """
    Convenience function to tokenize source code.

    Args:
        source: The source code to tokenize

    Returns:
        (tokens, errors) where errors are formatted diagnostics
    """
    lexer = Lexer(source)
    tokens = lexer.tokenize()
    return tokens, lexer.errors
