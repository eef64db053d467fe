"""
Error handling for the langc lexer.

Provides error reporting with source location information,
recovery suggestions, and the Diagnostic record shared by every stage.

Author: xwest
"""

from enum import Enum
from typing import Optional, List
from dataclasses import dataclass

from .tokens import SourceLocation


@dataclass(frozen=True)
class Diagnostic:
    """A single error report: what went wrong, where, and how to fix it."""
    message: str
    location: SourceLocation
    severity: str  # "error", "warning", "info", "hint"
    code: Optional[str] = None
    help_text: Optional[str] = None
    suggestions: Optional[List[str]] = None
    kind: Optional[Enum] = None

    def __str__(self) -> str:
        severity_prefix = self.severity.upper()
        if self.code:
            severity_prefix += f"[{self.code}]"
        result = f"{severity_prefix}: {self.message}\n"
        result += f"  --> {self.location}\n"

        if self.help_text:
            result += f"  help: {self.help_text}\n"

        if self.suggestions:
            result += "  suggestions:\n"
            for suggestion in self.suggestions:
                result += f"    - {suggestion}\n"

        return result


class LexErrorKind(Enum):
    """Categories of lexical errors."""
    INVALID_CHARACTER = "invalid character"
    MALFORMED_NUMERIC_LITERAL = "malformed numeric literal"


class LexerError(Exception):
    """
    Exception raised when the lexer cannot form a token.

    The lexer catches it, records it, and keeps scanning.
    """

    def __init__(
        self,
        kind: LexErrorKind,
        message: str,
        location: SourceLocation,
        lexeme: str = "",
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.kind = kind
        self.lexeme = lexeme
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
    def message(self) -> str:
        return self.diagnostic.message

    @property
    def location(self) -> SourceLocation:
        return self.diagnostic.location

    def __str__(self) -> str:
        return str(self.diagnostic)


class ErrorRecovery:
    """
    Suggestion helpers used when reporting lexical errors.
    """

    # Characters that are only valid as half of a two-character operator
    OPERATOR_HALVES = {
        '&': '&&',
        '|': '||',
    }

    @staticmethod
    def suggest_keyword_corrections(invalid_word: str) -> List[str]:
        """Suggest corrections for misspelled keywords using edit distance."""
        from .tokens import KEYWORDS

        suggestions = []
        for keyword in KEYWORDS.keys():
            distance = ErrorRecovery.edit_distance(invalid_word.lower(), keyword)
            if distance <= 2:  # Allow up to 2 character differences
                suggestions.append(keyword)

        return sorted(suggestions, key=lambda k: ErrorRecovery.edit_distance(invalid_word.lower(), k))[:3]

    @staticmethod
    def suggest_operator_completion(char: str) -> List[str]:
        """Suggest the full operator when only half of it was written."""
        if char in ErrorRecovery.OPERATOR_HALVES:
            return [ErrorRecovery.OPERATOR_HALVES[char]]
        return []

    @staticmethod
    def edit_distance(s1: str, s2: str) -> int:
        """Calculate Levenshtein distance between two strings."""
        if len(s1) < len(s2):
            return ErrorRecovery.edit_distance(s2, s1)

        if len(s2) == 0:
            return len(s1)

        previous_row = list(range(len(s2) + 1))
        for i, c1 in enumerate(s1):
            current_row = [i + 1]
            for j, c2 in enumerate(s2):
                insertions = previous_row[j + 1] + 1
                deletions = current_row[j] + 1
                substitutions = previous_row[j] + (c1 != c2)
                current_row.append(min(insertions, deletions, substitutions))
            previous_row = current_row

        return previous_row[-1]


# Lexer error codes for categorization
LEXER_ERROR_CODES = {
    "L001": "Invalid character",
    "L003": "Invalid numeric literal",
    "L007": "Number literal overflow",
}


# Helper functions for creating common errors

def create_invalid_character_error(char: str, location: SourceLocation) -> LexerError:
    """Create an error for a character that cannot start any token."""
    suggestions = ErrorRecovery.suggest_operator_completion(char)

    if suggestions:
        help_text = f"'{char}' on its own is not an operator. Did you mean '{suggestions[0]}'?"
    elif char.isprintable():
        help_text = f"The character '{char}' is not valid in source code."
    else:
        help_text = f"Non-printable character (Unicode: U+{ord(char):04X}) is not allowed."

    return LexerError(
        kind=LexErrorKind.INVALID_CHARACTER,
        message=f"Invalid character: '{char}'",
        location=location,
        lexeme=char,
        code="L001",
        help_text=help_text,
        suggestions=suggestions
    )


def create_invalid_number_error(lexeme: str, location: SourceLocation, reason: str) -> LexerError:
    """Create an error for a malformed numeric literal."""
    return LexerError(
        kind=LexErrorKind.MALFORMED_NUMERIC_LITERAL,
        message=f"Invalid numeric literal: '{lexeme}'",
        location=location,
        lexeme=lexeme,
        code="L003",
        help_text=reason,
        suggestions=["Separate the number from the following name with whitespace"]
    )


def create_number_overflow_error(lexeme: str, location: SourceLocation, limit: int) -> LexerError:
    """Create an error for an integer literal that does not fit in 32 bits."""
    return LexerError(
        kind=LexErrorKind.MALFORMED_NUMERIC_LITERAL,
        message=f"Integer literal out of range: '{lexeme}'",
        location=location,
        lexeme=lexeme,
        code="L007",
        help_text=f"Integer literals must not exceed {limit}.",
    )
