"""
Token definitions for the langc lexer.

This module defines every token type the language knows about:
- Keywords (declarations, control flow, types, boolean literals)
- Operators (arithmetic, comparison, logical, assignment)
- Literals (32-bit integers) and identifiers
- Punctuation and delimiters

Author: xwest
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any


class TokenType(Enum):
    """
    Enumeration of all token types in the language.

    Organized by category for clarity and maintainability.
    """

    # ========================================================================
    # Special Tokens
    # ========================================================================
    EOF = auto()                    # End of input

    # ========================================================================
    # Literals
    # ========================================================================
    INTEGER = auto()                # 42, 0, 2147483647
    TRUE = auto()                   # true
    FALSE = auto()                  # false

    # ========================================================================
    # Identifiers and Keywords
    # ========================================================================
    IDENTIFIER = auto()             # factorial, n, _tmp1

    # Declaration keywords
    FUNC = auto()                   # func
    LET = auto()                    # let

    # Control flow keywords
    IF = auto()                     # if
    ELSE = auto()                   # else
    WHILE = auto()                  # while
    RETURN = auto()                 # return
    PRINT = auto()                  # print

    # Type keywords
    I32 = auto()                    # i32
    BOOL = auto()                   # bool

    # ========================================================================
    # Operators
    # ========================================================================

    # Arithmetic operators
    PLUS = auto()                   # +
    MINUS = auto()                  # - (binary and unary)
    MULTIPLY = auto()               # *
    DIVIDE = auto()                 # /

    # Assignment
    ASSIGN = auto()                 # =

    # Comparison operators
    EQUAL = auto()                  # ==
    NOT_EQUAL = auto()              # !=
    LESS_THAN = auto()              # <
    GREATER_THAN = auto()           # >
    LESS_EQUAL = auto()             # <=
    GREATER_EQUAL = auto()          # >=

    # Logical operators
    LOGICAL_AND = auto()            # &&
    LOGICAL_OR = auto()             # ||
    LOGICAL_NOT = auto()            # !

    # ========================================================================
    # Punctuation and Delimiters
    # ========================================================================
    LEFT_PAREN = auto()             # (
    RIGHT_PAREN = auto()            # )
    LEFT_BRACKET = auto()           # [ (opens a block)
    RIGHT_BRACKET = auto()          # ] (closes a block)

    SEMICOLON = auto()              # ;
    COMMA = auto()                  # ,
    COLON = auto()                  # :
    ARROW = auto()                  # ->


@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in the source code.

    Lines and columns are 1-based; the offset is the 0-based character
    index into the source string.
    """
    filename: str
    line: int
    column: int
    offset: int

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    def __repr__(self) -> str:
        return f"SourceLocation({self.filename!r}, {self.line}, {self.column}, {self.offset})"


@dataclass(frozen=True)
class Token:
    """
    Represents a lexical token.

    Contains the token type, lexeme (raw text), semantic value,
    and source location for error reporting.
    """
    type: TokenType
    lexeme: str                     # Raw text from source
    value: Any                      # int for INTEGER, bool for TRUE/FALSE
    location: SourceLocation

    def __str__(self) -> str:
        if self.value is not None:
            return f"{self.type.name}({self.lexeme!r} -> {self.value!r})"
        return f"{self.type.name}({self.lexeme!r})"

    def __repr__(self) -> str:
        return (f"Token({self.type.name}, {self.lexeme!r}, "
                f"{self.value!r}, {self.location!r})")

    @property
    def is_identifier(self) -> bool:
        """Check if this token is an identifier."""
        return self.type == TokenType.IDENTIFIER


# Integer literals are signed 32-bit values
INT32_MIN = -2147483648
INT32_MAX = 2147483647

# Reserved words; identifiers matching one of these are re-tagged
KEYWORDS = {
    # Declarations
    "func": TokenType.FUNC,
    "let": TokenType.LET,

    # Control flow
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "while": TokenType.WHILE,
    "return": TokenType.RETURN,
    "print": TokenType.PRINT,

    # Types
    "i32": TokenType.I32,
    "bool": TokenType.BOOL,

    # Literals
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
}

OPERATORS = {
    # Arithmetic
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.MULTIPLY,
    "/": TokenType.DIVIDE,

    # Assignment
    "=": TokenType.ASSIGN,

    # Comparison
    "==": TokenType.EQUAL,
    "!=": TokenType.NOT_EQUAL,
    "<": TokenType.LESS_THAN,
    ">": TokenType.GREATER_THAN,
    "<=": TokenType.LESS_EQUAL,
    ">=": TokenType.GREATER_EQUAL,

    # Logical
    "&&": TokenType.LOGICAL_AND,
    "||": TokenType.LOGICAL_OR,
    "!": TokenType.LOGICAL_NOT,

    # Punctuation
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "[": TokenType.LEFT_BRACKET,
    "]": TokenType.RIGHT_BRACKET,
    ";": TokenType.SEMICOLON,
    ",": TokenType.COMMA,
    ":": TokenType.COLON,
    "->": TokenType.ARROW,
}

# Longest operator first so the lexer can match greedily
MAX_OPERATOR_LENGTH = max(len(op) for op in OPERATORS)

_TOKEN_TEXT = {token_type: text for text, token_type in {**KEYWORDS, **OPERATORS}.items()}

_TOKEN_DESCRIPTIONS = {
    TokenType.EOF: "end of file",
    TokenType.INTEGER: "integer literal",
    TokenType.IDENTIFIER: "identifier",
}


def describe(token_type: TokenType) -> str:
    """Human-readable name of a token type, used in 'expected ...' messages."""
    if token_type in _TOKEN_DESCRIPTIONS:
        return _TOKEN_DESCRIPTIONS[token_type]
    return f"'{_TOKEN_TEXT[token_type]}'"
