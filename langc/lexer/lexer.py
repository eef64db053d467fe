"""
langc Lexer - handles tokenizing source code

Single left-to-right scan over the source string. Whitespace and `//`
comments are dropped, operators are matched greedily, and bad input is
reported without stopping the scan so one pass shows every problem.

xwest
"""

import re
import logging
from typing import List, Optional

from .tokens import (
    Token, TokenType, SourceLocation, KEYWORDS, OPERATORS, MAX_OPERATOR_LENGTH,
    INT32_MAX
)
from .errors import (
    LexerError, create_invalid_character_error, create_invalid_number_error,
    create_number_overflow_error
)

logger = logging.getLogger(__name__)


class Lexer:
    """
    langc lexical analyzer.

    Converts source code text into a list of tokens terminated by a single
    EOF token. Errors are collected in ``self.errors`` in source order.
    """

    WHITESPACE = ' \t\r\n'

    def __init__(self, source: str, filename: str = "<string>"):
        """
        Initialize the lexer with source code.

        Args:
            source: Source code string
            filename: Name of source file for error reporting
        """
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Token] = []
        self.errors: List[LexerError] = []

        self._compile_patterns()

    def _compile_patterns(self):
        """Compile regex patterns used by the lexer."""

        # A digit run plus any identifier characters glued onto it; anything
        # past the digits makes the literal malformed (e.g. 12ab)
        self.number_pattern = re.compile(r'[0-9][A-Za-z0-9_]*')

        self.identifier_pattern = re.compile(r'[A-Za-z_][A-Za-z0-9_]*')

    def tokenize(self) -> List[Token]:
        """
        Tokenize the entire source code.

        Returns:
            List of tokens including the EOF token
        """
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens.clear()
        self.errors.clear()

        while self.pos < len(self.source):
            self._skip_whitespace_and_comments()

            if self.pos >= len(self.source):
                break

            start_pos = self.pos
            try:
                self.tokens.append(self._next_token())
            except LexerError as e:
                self.errors.append(e)
                # Skip the offending character unless the bad lexeme was already consumed
                if self.pos == start_pos:
                    self._advance()

        eof_location = SourceLocation(self.filename, self.line, self.column, self.pos)
        self.tokens.append(Token(TokenType.EOF, "", None, eof_location))

        logger.debug("lexed %s: %d tokens, %d errors",
                     self.filename, len(self.tokens), len(self.errors))
        return self.tokens

    def _next_token(self) -> Token:
        """Scan one token starting at the current position."""
        start_pos = self.pos
        start_line = self.line
        start_column = self.column
        location = SourceLocation(self.filename, start_line, start_column, start_pos)

        current_char = self.source[self.pos]

        if '0' <= current_char <= '9':
            return self._tokenize_number(location)

        if self.identifier_pattern.match(current_char):
            return self._tokenize_identifier_or_keyword(location)

        # Operators and punctuation, longest match first
        for op_len in range(MAX_OPERATOR_LENGTH, 0, -1):
            if self.pos + op_len <= len(self.source):
                potential_op = self.source[self.pos:self.pos + op_len]
                if potential_op in OPERATORS:
                    self._advance_by(op_len)
                    return Token(OPERATORS[potential_op], potential_op, None, location)

        raise create_invalid_character_error(current_char, location)

    def _tokenize_number(self, location: SourceLocation) -> Token:
        """Tokenize a decimal integer literal."""
        match = self.number_pattern.match(self.source, self.pos)
        lexeme = match.group(0)
        self._advance_by(len(lexeme))

        if not lexeme.isdigit():
            raise create_invalid_number_error(
                lexeme,
                location,
                "Numeric literals may only contain the digits 0-9."
            )

        value = int(lexeme)
        if value > INT32_MAX:
            raise create_number_overflow_error(lexeme, location, INT32_MAX)

        return Token(TokenType.INTEGER, lexeme, value, location)

    def _tokenize_identifier_or_keyword(self, location: SourceLocation) -> Token:
        """Tokenize an identifier, re-tagging reserved words as keywords."""
        match = self.identifier_pattern.match(self.source, self.pos)
        lexeme = match.group(0)
        self._advance_by(len(lexeme))

        token_type = KEYWORDS.get(lexeme, TokenType.IDENTIFIER)

        value: Optional[bool] = None
        if token_type in (TokenType.TRUE, TokenType.FALSE):
            value = token_type == TokenType.TRUE

        return Token(token_type, lexeme, value, location)

    def _skip_whitespace_and_comments(self):
        """Skip whitespace and line comments."""
        while self.pos < len(self.source):
            if self.source[self.pos] in self.WHITESPACE:
                self._advance()
                continue

            # Line comments run to the end of the line
            if self.source.startswith('//', self.pos):
                while self.pos < len(self.source) and self.source[self.pos] != '\n':
                    self._advance()
                continue

            break

    def _advance(self):
        """Advance position by one character, updating line/column."""
        if self.pos < len(self.source):
            if self.source[self.pos] == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def _advance_by(self, count: int):
        """Advance position by multiple characters."""
        for _ in range(count):
            self._advance()
