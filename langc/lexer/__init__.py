"""
langc Lexer Package

Lexical analyzer for the langc language. Turns source text into a list of
positioned tokens and reports malformed input without stopping early.

Key Features:
- Greedy longest-match operators (==, !=, <=, >=, &&, ||, ->)
- Reserved-word recognition for keywords and type names
- 32-bit integer literals with range checking
- Error recovery and diagnostics
- Source location tracking for every token

Author: xwest
"""

from .tokens import Token, TokenType, SourceLocation
from .lexer import Lexer
from .errors import Diagnostic, LexerError, LexErrorKind

__all__ = [
    "Lexer",
    "Token",
    "TokenType",
    "SourceLocation",
    "Diagnostic",
    "LexerError",
    "LexErrorKind",
]
