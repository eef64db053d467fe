"""
langc Compiler Front End

Lexer, parser and semantic analyzer for a small imperative language with
32-bit integers, booleans, functions, blocks in square brackets, and
if/while control flow.

Architecture:
    langc/
    ├── lexer/           # Tokenization and lexical analysis
    ├── parser/          # Syntax analysis and AST generation
    ├── analyzer/        # Scope resolution and type checking
    └── pipeline.py      # tokenize / parse / analyze entry points

Author: xwest
License: MIT
"""

__version__ = "0.1.0"
__author__ = "xwest"
__license__ = "MIT"

from .lexer import Lexer
from .parser import Parser
from .analyzer import SemanticAnalyzer
from .pipeline import tokenize, parse, analyze

__all__ = [
    # Core classes
    "Lexer",
    "Parser",
    "SemanticAnalyzer",

    # Pipeline
    "tokenize",
    "parse",
    "analyze",

    # Version info
    "__version__",
    "__author__",
    "__license__",
]
