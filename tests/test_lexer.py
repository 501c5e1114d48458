"""
Unit tests for the Myndra lexer.
"""

import pytest
from myndra import tokenize, Lexer, TokenType


def types_of(source):
    tokens, _ = tokenize(source)
    return [t.type for t in tokens]


class TestLexerBasics:
    """Test basic lexer functionality."""

    def test_empty_source(self):
        """Empty source produces only EOF."""
        tokens, errors = tokenize("")
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.EOF
        assert errors == []

    def test_whitespace_only(self):
        """Spaces, tabs and carriage returns produce no tokens."""
        assert types_of("  \t \r ") == [TokenType.EOF]

    def test_let_with_mixed_numbers(self):
        """Basic let statement tokenization."""
        tokens, errors = tokenize("let x = 42 + 3.14")
        assert [t.type for t in tokens] == [
            TokenType.LET,
            TokenType.IDENTIFIER,
            TokenType.ASSIGN,
            TokenType.INTEGER,
            TokenType.PLUS,
            TokenType.FLOAT,
            TokenType.EOF,
        ]
        assert tokens[3].literal == 42
        assert tokens[5].literal == 3.14
        assert errors == []

    def test_identifier_lexeme(self):
        """Identifier token keeps its source text and has no literal."""
        tokens, _ = tokenize("foo_bar123")
        assert tokens[0].type == TokenType.IDENTIFIER
        assert tokens[0].lexeme == "foo_bar123"
        assert tokens[0].literal is None

    def test_position_tracking(self):
        """Token positions point at the first character."""
        tokens, _ = tokenize("let x = 5;")
        assert tokens[0].line == 1
        assert tokens[0].column == 1
        assert tokens[1].column == 5
        assert tokens[1].offset == 4

    def test_newlines_are_tokens(self):
        """Newlines are emitted and reset the column."""
        tokens, _ = tokenize("a\n  b")
        assert [t.type for t in tokens] == [
            TokenType.IDENTIFIER, TokenType.NEWLINE, TokenType.IDENTIFIER, TokenType.EOF,
        ]
        assert tokens[2].line == 2
        assert tokens[2].column == 3

    def test_single_eof(self):
        """The token list always ends with exactly one EOF."""
        tokens, _ = tokenize("a b c")
        assert [t.type for t in tokens].count(TokenType.EOF) == 1
        assert tokens[-1].type == TokenType.EOF


class TestComments:
    """Test comment handling."""

    def test_line_comment_dropped(self):
        """Line comments do not appear in the output."""
        assert types_of("// a comment\nlet") == [
            TokenType.NEWLINE, TokenType.LET, TokenType.EOF,
        ]

    def test_block_comment_spans_lines(self):
        """Block comments may span lines and still advance the line count."""
        tokens, errors = tokenize("/* a\nb */ x")
        assert [t.type for t in tokens] == [TokenType.IDENTIFIER, TokenType.EOF]
        assert tokens[0].line == 2
        assert tokens[0].column == 6
        assert errors == []

    def test_unterminated_block_comment(self):
        """An unterminated block comment is an error."""
        tokens, errors = tokenize("x /* never closed")
        assert [t.type for t in tokens] == [
            TokenType.IDENTIFIER, TokenType.ERROR, TokenType.EOF,
        ]
        assert errors == ["Line 1, Column 3: Unterminated block comment"]

    def test_next_token_returns_comments(self):
        """The single-step primitive still reports COMMENT tokens."""
        lexer = Lexer("// hi")
        assert lexer.next_token().type == TokenType.COMMENT
        assert lexer.next_token().type == TokenType.EOF


class TestLiterals:
    """Test literal tokenization."""

    def test_string_escapes(self):
        """Escape sequences are decoded into the literal."""
        tokens, errors = tokenize(r'"a\nb\t\"q\"\\"')
        assert tokens[0].type == TokenType.STRING
        assert tokens[0].literal == 'a\nb\t"q"\\'
        assert tokens[0].lexeme == r'"a\nb\t\"q\"\\"'
        assert errors == []

    def test_unknown_escape_passes_through(self):
        """Unknown escapes are reported but keep the character."""
        tokens, errors = tokenize(r'"\q"')
        assert tokens[0].type == TokenType.STRING
        assert tokens[0].literal == "q"
        assert errors == [r"Line 1, Column 2: Unknown escape sequence: \q"]

    def test_unterminated_string(self):
        """An unterminated string yields an ERROR token and stops."""
        tokens, errors = tokenize('"abc')
        assert [t.type for t in tokens] == [TokenType.ERROR, TokenType.EOF]
        assert errors == ["Line 1, Column 1: Unterminated string"]

    def test_multiline_string(self):
        """Strings may contain newlines."""
        tokens, _ = tokenize('"a\nb" x')
        assert tokens[0].literal == "a\nb"
        assert tokens[1].line == 2

    def test_range_is_not_a_float(self):
        """A dot only belongs to a number when a digit follows."""
        assert types_of("0..10") == [
            TokenType.INTEGER, TokenType.DOT, TokenType.DOT, TokenType.INTEGER, TokenType.EOF,
        ]

    def test_largest_integer(self):
        """The largest 64-bit integer is accepted."""
        tokens, errors = tokenize("9223372036854775807")
        assert tokens[0].literal == 2 ** 63 - 1
        assert errors == []

    def test_integer_out_of_range(self):
        """Integer literals beyond 64 bits are errors."""
        tokens, errors = tokenize("9223372036854775808")
        assert tokens[0].type == TokenType.ERROR
        assert errors == ["Line 1, Column 1: Integer literal out of range"]

    def test_very_long_integer_literal(self):
        """Thousands of digits are reported, not converted."""
        tokens, errors = tokenize("let x = " + "9" * 5000 + ";")
        assert [t.type for t in tokens] == [
            TokenType.LET, TokenType.IDENTIFIER, TokenType.ASSIGN,
            TokenType.ERROR, TokenType.EOF,
        ]
        assert errors == ["Line 1, Column 9: Integer literal out of range"]

    def test_leading_zeros_do_not_count(self):
        """Leading zeros are ignored by the range check."""
        tokens, errors = tokenize("0" * 30 + "42")
        assert errors == []
        assert tokens[0].literal == 42

    def test_booleans_and_nil(self):
        """true/false are BOOLEAN tokens with bool literals."""
        tokens, _ = tokenize("true false nil")
        assert [t.type for t in tokens] == [
            TokenType.BOOLEAN, TokenType.BOOLEAN, TokenType.NIL, TokenType.EOF,
        ]
        assert tokens[0].literal is True
        assert tokens[1].literal is False


class TestKeywordsAndOperators:
    """Test keywords, annotations, tags and operators."""

    @pytest.mark.parametrize("word,token_type", [
        ("let", TokenType.LET),
        ("mut", TokenType.MUT),
        ("fn", TokenType.FN),
        ("in", TokenType.IN),
        ("context", TokenType.CONTEXT),
        ("has_proof", TokenType.HAS_PROOF),
        ("and", TokenType.AND),
        ("not", TokenType.NOT),
    ])
    def test_keywords(self, word, token_type):
        """Keywords map to their token types."""
        assert types_of(word) == [token_type, TokenType.EOF]

    def test_annotations(self):
        """Known annotations are recognized."""
        assert types_of("@sync @async @parallel @reactive @temporal") == [
            TokenType.AT_SYNC, TokenType.AT_ASYNC, TokenType.AT_PARALLEL,
            TokenType.AT_REACTIVE, TokenType.AT_TEMPORAL, TokenType.EOF,
        ]

    def test_unknown_annotation(self):
        """Unknown annotations are errors."""
        tokens, errors = tokenize("@bogus")
        assert tokens[0].type == TokenType.ERROR
        assert errors == ["Line 1, Column 1: Unknown annotation: @bogus"]

    def test_semantic_tag(self):
        """#name:sub is a single TAG token."""
        tokens, _ = tokenize("#tag:auth x")
        assert tokens[0].type == TokenType.TAG
        assert tokens[0].lexeme == "#tag:auth"
        assert tokens[0].literal is None
        assert tokens[1].type == TokenType.IDENTIFIER

    def test_lone_hash(self):
        """A # not followed by a letter is HASH."""
        assert types_of("# 1") == [TokenType.HASH, TokenType.INTEGER, TokenType.EOF]

    def test_two_char_operators(self):
        """Two-character operators win over their one-character prefixes."""
        assert types_of("+= -= -> => == != <= >= ::") == [
            TokenType.PLUS_ASSIGN, TokenType.MINUS_ASSIGN, TokenType.ARROW,
            TokenType.FAT_ARROW, TokenType.EQUAL, TokenType.NOT_EQUAL,
            TokenType.LESS_EQUAL, TokenType.GREATER_EQUAL, TokenType.DOUBLE_COLON,
            TokenType.EOF,
        ]

    def test_single_char_operators(self):
        """Single-character punctuation."""
        assert types_of("( ) { } [ ] , . ; ? : + - * / % = < > !") == [
            TokenType.LEFT_PAREN, TokenType.RIGHT_PAREN,
            TokenType.LEFT_BRACE, TokenType.RIGHT_BRACE,
            TokenType.LEFT_BRACKET, TokenType.RIGHT_BRACKET,
            TokenType.COMMA, TokenType.DOT, TokenType.SEMICOLON,
            TokenType.QUESTION, TokenType.COLON,
            TokenType.PLUS, TokenType.MINUS, TokenType.MULTIPLY,
            TokenType.DIVIDE, TokenType.MODULO, TokenType.ASSIGN,
            TokenType.LESS, TokenType.GREATER, TokenType.NOT,
            TokenType.EOF,
        ]


class TestLexerErrors:
    """Test error reporting."""

    def test_unexpected_character_stops(self):
        """An unexpected character ends tokenization."""
        lexer = Lexer("a $ b")
        tokens = lexer.tokenize()
        assert [t.type for t in tokens] == [
            TokenType.IDENTIFIER, TokenType.ERROR, TokenType.EOF,
        ]
        assert lexer.has_errors
        assert lexer.errors == ["Line 1, Column 3: Unexpected character: $"]

    def test_error_location_on_later_line(self):
        """Error positions account for earlier lines."""
        _, errors = tokenize("let x = 1;\n  $")
        assert errors == ["Line 2, Column 3: Unexpected character: $"]


class TestLexerProperties:
    """Properties that hold for any input."""

    SOURCE = (
        'let mut total: int = 0; // running sum\n'
        'fn add(a: int, b: int) -> int { return a + b; }\n'
        '/* block */ while total <= 10 { total = total + 1; }\n'
        'print("done\\n", 3.5, true) if context == == "dev";\n'
    )

    def test_lexemes_match_source(self):
        """Each lexeme is the exact source slice at its offset."""
        tokens, errors = tokenize(self.SOURCE)
        assert errors == []
        for token in tokens[:-1]:
            assert self.SOURCE[token.offset:token.offset + len(token.lexeme)] == token.lexeme

    def test_gaps_are_whitespace_or_comments(self):
        """Nothing but whitespace and comments lies between tokens."""
        tokens, _ = tokenize(self.SOURCE)
        pos = 0
        for token in tokens[:-1]:
            gap = self.SOURCE[pos:token.offset]
            stripped = gap.strip(" \t\r")
            assert stripped == "" or stripped.startswith(("//", "/*"))
            pos = token.offset + len(token.lexeme)

    def test_deterministic(self):
        """Tokenizing twice gives equal results."""
        assert tokenize(self.SOURCE) == tokenize(self.SOURCE)
