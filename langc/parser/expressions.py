"""
Precedence-climbing expression parser for langc.

Expressions are parsed with a table of prefix parsers (tokens that can start
an expression) and a table of binary operator precedences. After a prefix
expression is parsed, binary operators are folded in for as long as their
precedence is at least the current threshold; the right operand of a
left-associative operator is parsed one level tighter.

Binding power, loosest to tightest:

    ||  <  &&  <  == !=  <  < > <= >=  <  + -  <  * /  <  unary - !

Calls (``name(args)``) are recognized at the atom level and bind tighter
than any operator.

Author: xwest
"""

import logging
from typing import Callable, Dict, List, Optional
from enum import IntEnum

from ..lexer.tokens import Token, TokenType, SourceLocation
from .ast_nodes import (
    SourceSpan, Expression, BinaryOp, UnaryOp, FunctionCall, Identifier,
    IntegerLiteral, BooleanLiteral
)
from .errors import (
    create_unexpected_token_error, create_unterminated_expression_error,
    create_nesting_too_deep_error
)

logger = logging.getLogger(__name__)


# Nested sub-expressions (parentheses, unary operands, call arguments) allowed
# below one another; each level costs a few Python stack frames
MAX_EXPRESSION_DEPTH = 100


class Precedence(IntEnum):
    """Binary operator precedence levels; higher binds tighter."""
    NONE = 0
    OR = 1              # ||
    AND = 2             # &&
    EQUALITY = 3        # ==, !=
    COMPARISON = 4      # <, >, <=, >=
    TERM = 5            # +, -
    FACTOR = 6          # *, /
    UNARY = 7           # prefix -, !


# Tokens that may begin an expression, listed in 'expected ...' messages
EXPRESSION_STARTS = (
    TokenType.INTEGER,
    TokenType.TRUE,
    TokenType.FALSE,
    TokenType.IDENTIFIER,
    TokenType.LEFT_PAREN,
    TokenType.MINUS,
    TokenType.LOGICAL_NOT,
)


class ExpressionParser:
    """
    Cursor over a token list plus the expression grammar.

    The statement parser builds on this class; everything here only needs
    one token of lookahead and never backtracks.
    """

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.current = 0
        self.depth = 0

        self._init_parsing_tables()

    def _init_parsing_tables(self):
        """Initialize operator precedence and prefix parser tables."""

        # Prefix parsing functions (for tokens that can start expressions)
        self.prefix_parsers: Dict[TokenType, Callable[[], Expression]] = {
            # Literals
            TokenType.INTEGER: self._parse_integer_literal,
            TokenType.TRUE: self._parse_boolean_literal,
            TokenType.FALSE: self._parse_boolean_literal,

            # Identifiers and calls
            TokenType.IDENTIFIER: self._parse_identifier_or_call,

            # Unary operators
            TokenType.MINUS: self._parse_unary,
            TokenType.LOGICAL_NOT: self._parse_unary,

            # Grouping
            TokenType.LEFT_PAREN: self._parse_grouping,
        }

        # Binary operator precedence table; every entry is left-associative
        self.precedences: Dict[TokenType, Precedence] = {
            TokenType.LOGICAL_OR: Precedence.OR,

            TokenType.LOGICAL_AND: Precedence.AND,

            TokenType.EQUAL: Precedence.EQUALITY,
            TokenType.NOT_EQUAL: Precedence.EQUALITY,

            TokenType.LESS_THAN: Precedence.COMPARISON,
            TokenType.GREATER_THAN: Precedence.COMPARISON,
            TokenType.LESS_EQUAL: Precedence.COMPARISON,
            TokenType.GREATER_EQUAL: Precedence.COMPARISON,

            TokenType.PLUS: Precedence.TERM,
            TokenType.MINUS: Precedence.TERM,

            TokenType.MULTIPLY: Precedence.FACTOR,
            TokenType.DIVIDE: Precedence.FACTOR,
        }

    def parse_expression(self, min_precedence: Precedence = Precedence.OR) -> Expression:
        """
        Parse an expression whose binary operators all bind at least as
        tightly as ``min_precedence``.
        """
        self._trace("expression")
        return self._parse_precedence(min_precedence)

    def _parse_precedence(self, precedence: Precedence) -> Expression:
        """
        Parse expression with given minimum precedence.

        Operators of a left-associative chain are folded in the loop below,
        so only nesting (not chain length) adds to the depth.
        """
        token = self._peek()
        prefix_parser = self.prefix_parsers.get(token.type)
        if prefix_parser is None:
            if token.type == TokenType.EOF:
                raise create_unterminated_expression_error("an expression", token)
            raise create_unexpected_token_error(EXPRESSION_STARTS, token, what="expression")

        self.depth += 1
        try:
            if self.depth > MAX_EXPRESSION_DEPTH:
                raise create_nesting_too_deep_error(MAX_EXPRESSION_DEPTH, token)

            left = prefix_parser()

            while precedence <= self._get_precedence(self._peek().type):
                left = self._parse_binary(left)
        finally:
            self.depth -= 1

        return left

    def _get_precedence(self, token_type: TokenType) -> Precedence:
        """Get precedence for a token type; NONE for anything that is not a binary operator."""
        return self.precedences.get(token_type, Precedence.NONE)

    # Prefix parsers (tokens that can start expressions)

    def _parse_integer_literal(self) -> IntegerLiteral:
        token = self._advance()
        span = SourceSpan(token.location, token.location)
        return IntegerLiteral(token.value, span)

    def _parse_boolean_literal(self) -> BooleanLiteral:
        token = self._advance()
        span = SourceSpan(token.location, token.location)
        return BooleanLiteral(token.type == TokenType.TRUE, span)

    def _parse_identifier_or_call(self) -> Expression:
        """Parse an identifier, or a call when the name is followed by '('."""
        token = self._advance()

        if self._check(TokenType.LEFT_PAREN):
            return self._parse_function_call(token)

        span = SourceSpan(token.location, token.location)
        return Identifier(token.lexeme, span)

    def _parse_function_call(self, name_token: Token) -> FunctionCall:
        """Parse the argument list of a call; the callee name is already consumed."""
        self._trace("call")
        self._advance()  # Consume (

        args = []
        if not self._check(TokenType.RIGHT_PAREN):
            args.append(self.parse_expression())
            while self._match(TokenType.COMMA):
                args.append(self.parse_expression())

        end_token = self._consume_closing_paren()

        span = SourceSpan(name_token.location, end_token.location)
        return FunctionCall(name_token.lexeme, args, span)

    def _parse_unary(self) -> UnaryOp:
        """Parse unary operation."""
        operator_token = self._advance()
        operator = operator_token.lexeme

        # Operand binds tighter than any binary operator
        operand = self._parse_precedence(Precedence.UNARY)

        span = SourceSpan(operator_token.location, operand.span.end)
        return UnaryOp(operator, operand, span)

    def _parse_grouping(self) -> Expression:
        """Parse parenthesized expression."""
        self._advance()  # Consume (

        expr = self.parse_expression()

        self._consume_closing_paren()

        return expr

    # Infix parser

    def _parse_binary(self, left: Expression) -> BinaryOp:
        """Parse binary operation."""
        operator_token = self._advance()
        operator = operator_token.lexeme

        # Left associative: the right operand may only hold tighter operators
        precedence = self._get_precedence(operator_token.type)
        right = self._parse_precedence(Precedence(precedence + 1))

        span = SourceSpan(left.span.start, right.span.end)
        return BinaryOp(left, operator, right, span)

    # Utility methods

    def _match(self, token_type: TokenType) -> bool:
        """Check if current token matches type and consume if so."""
        if self._check(token_type):
            self._advance()
            return True
        return False

    def _check(self, token_type: TokenType) -> bool:
        """Check if current token matches type without consuming."""
        return self._peek().type == token_type

    def _advance(self) -> Token:
        """Consume and return current token."""
        if not self._is_at_end():
            self.current += 1
        return self._previous()

    def _is_at_end(self) -> bool:
        """Check if we've reached the end of tokens."""
        return self.current >= len(self.tokens) or self._peek().type == TokenType.EOF

    def _peek(self) -> Token:
        """Return current token without consuming."""
        return self._token_at(self.current)

    def _peek_next(self) -> Token:
        """Return the token after the current one."""
        return self._token_at(self.current + 1)

    def _token_at(self, index: int) -> Token:
        if index < len(self.tokens):
            return self.tokens[index]
        # Token lists without a trailing EOF behave as if they had one
        if self.tokens:
            return Token(TokenType.EOF, "", None, self.tokens[-1].location)
        return Token(TokenType.EOF, "", None, SourceLocation("<string>", 1, 1, 0))

    def _previous(self) -> Token:
        """Return previous token."""
        if self.current > 0:
            return self.tokens[self.current - 1]
        return self._peek()

    def _consume(self, token_type: TokenType) -> Token:
        """Consume token of expected type or raise error."""
        if self._check(token_type):
            return self._advance()

        raise create_unexpected_token_error([token_type], self._peek())

    def _consume_closing_paren(self) -> Token:
        """Consume ')'; running out of input first leaves the expression unterminated."""
        if self._check(TokenType.EOF):
            raise create_unterminated_expression_error("')'", self._peek())
        return self._consume(TokenType.RIGHT_PAREN)

    def _trace(self, production: str, token: Optional[Token] = None):
        """Emit a debug record for each grammar production entered."""
        if logger.isEnabledFor(logging.DEBUG):
            token = token or self._peek()
            logger.debug("parse_%s() at %s (%s)", production, token.location, token.type.name)
