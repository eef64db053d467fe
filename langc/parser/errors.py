"""
Error handling for the langc parser.

Provides syntax error reporting with source location information,
panic-mode recovery boundaries, and suggestions for common mistakes.

Author: xwest
"""

from enum import Enum
from typing import Optional, List, Sequence, Tuple

from ..lexer.tokens import Token, TokenType, SourceLocation, describe
from ..lexer.errors import Diagnostic, ErrorRecovery


class ParseErrorKind(Enum):
    """Categories of syntax errors."""
    UNEXPECTED_TOKEN = "unexpected token"
    UNTERMINATED_BLOCK = "unterminated block"
    UNTERMINATED_EXPRESSION = "unterminated expression"
    NESTING_TOO_DEEP = "nesting too deep"


class ParseError(Exception):
    """
    Exception raised when the parser encounters a syntax error.

    Carries the set of token descriptions that would have been accepted
    and the token actually found.
    """

    def __init__(
        self,
        kind: ParseErrorKind,
        message: str,
        location: SourceLocation,
        expected: Tuple[str, ...] = (),
        token: Optional[Token] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.kind = kind
        self.expected = expected
        self.token = token
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions,
            kind=kind
        )

    @property
    def found(self) -> Optional[Token]:
        return self.token

    @property
    def message(self) -> str:
        return self.diagnostic.message

    @property
    def location(self) -> SourceLocation:
        return self.diagnostic.location

    def __str__(self) -> str:
        return str(self.diagnostic)


class SyntaxErrorRecovery:
    """
    Utilities for error recovery in the parser.

    Panic mode discards tokens until one of these boundaries so parsing can
    resume at the next statement.
    """

    # Consumed by the parser when synchronizing
    STATEMENT_TERMINATORS = {
        TokenType.SEMICOLON,
    }

    # Left in place: the next statement, the enclosing block's end, or the next function
    STATEMENT_STARTS = {
        TokenType.LET,
        TokenType.IF,
        TokenType.WHILE,
        TokenType.RETURN,
        TokenType.PRINT,
    }

    BLOCK_BOUNDARIES = {
        TokenType.RIGHT_BRACKET,
        TokenType.FUNC,
        TokenType.EOF,
    }

    @staticmethod
    def is_resume_point(token_type: TokenType) -> bool:
        """Check if parsing can resume in front of this token without consuming it."""
        return (token_type in SyntaxErrorRecovery.STATEMENT_STARTS or
                token_type in SyntaxErrorRecovery.BLOCK_BOUNDARIES)

    @staticmethod
    def suggest_missing_token(expected: TokenType) -> List[str]:
        """Suggest what token might be missing."""
        token_suggestions = {
            TokenType.SEMICOLON: ["Add a semicolon ';' to end the statement"],
            TokenType.RIGHT_PAREN: ["Add a closing parenthesis ')'"],
            TokenType.RIGHT_BRACKET: ["Add a closing bracket ']' to end the block"],
            TokenType.LEFT_BRACKET: ["Add an opening bracket '[' to start a block"],
            TokenType.COLON: ["Add a colon ':' before the type annotation"],
            TokenType.ARROW: ["Add an arrow '->' before the return type"],
            TokenType.ASSIGN: ["Add an assignment operator '='"],
        }

        return list(token_suggestions.get(expected, []))

    @staticmethod
    def suggest_keyword_in_context(found: Token) -> List[str]:
        """Suggest a keyword when an identifier looks like a misspelled one."""
        if not found.is_identifier:
            return []
        return [f"Did you mean '{keyword}'?"
                for keyword in ErrorRecovery.suggest_keyword_corrections(found.lexeme)]


# Parser error codes for categorization
PARSER_ERROR_CODES = {
    "P001": "Unexpected token",
    "P004": "Unclosed block",
    "P010": "Unexpected end of input",
    "P011": "Expression nested too deeply",
}


def _describe_found(found: Token) -> str:
    if found.type == TokenType.EOF:
        return "end of file"
    return f"'{found.lexeme}'"


# Helper functions for creating common parser errors

def create_unexpected_token_error(expected: Sequence[TokenType], found: Token,
                                  what: Optional[str] = None) -> ParseError:
    """
    Create an error for an unexpected token.

    Args:
        expected: Token types that would have been accepted here
        found: The token actually seen
        what: Optional description replacing the expected list (e.g. "expression")
    """
    expected_names = tuple(describe(token_type) for token_type in expected)
    if what is not None:
        expected_str = what
    elif len(expected_names) == 1:
        expected_str = expected_names[0]
    else:
        expected_str = "one of " + ", ".join(expected_names)
    found_str = _describe_found(found)

    suggestions: List[str] = []
    for token_type in expected:
        suggestions.extend(SyntaxErrorRecovery.suggest_missing_token(token_type))
    suggestions.extend(SyntaxErrorRecovery.suggest_keyword_in_context(found))

    return ParseError(
        kind=ParseErrorKind.UNEXPECTED_TOKEN,
        message=f"Expected {expected_str}, found {found_str}",
        location=found.location,
        expected=expected_names if what is None else (what,),
        token=found,
        code="P001",
        help_text=f"The parser expected to see {expected_str} at this position, but found {found_str} instead.",
        suggestions=suggestions
    )


def create_unterminated_block_error(open_location: SourceLocation, found: Token) -> ParseError:
    """Create an error for a block whose closing ']' never appears."""
    return ParseError(
        kind=ParseErrorKind.UNTERMINATED_BLOCK,
        message="Unterminated block: missing ']'",
        location=found.location,
        expected=(describe(TokenType.RIGHT_BRACKET),),
        token=found,
        code="P004",
        help_text=f"The block opened with '[' at {open_location} was never closed.",
        suggestions=SyntaxErrorRecovery.suggest_missing_token(TokenType.RIGHT_BRACKET)
    )


def create_unterminated_expression_error(expected: str, found: Token) -> ParseError:
    """Create an error for an expression cut off by the end of input."""
    return ParseError(
        kind=ParseErrorKind.UNTERMINATED_EXPRESSION,
        message=f"Unexpected end of input, expected {expected}",
        location=found.location,
        expected=(expected,),
        token=found,
        code="P010",
        help_text=f"The parser reached the end of the file while expecting {expected}.",
        suggestions=[f"Add the missing {expected}", "Check for incomplete statements"]
    )


def create_nesting_too_deep_error(limit: int, found: Token) -> ParseError:
    """Create an error for an expression nested past the parser's depth limit."""
    return ParseError(
        kind=ParseErrorKind.NESTING_TOO_DEEP,
        message=f"Expression nested too deeply (limit is {limit} levels)",
        location=found.location,
        token=found,
        code="P011",
        help_text="Parentheses, unary operators and call arguments may only nest so far.",
        suggestions=["Split the expression using intermediate 'let' bindings"]
    )
