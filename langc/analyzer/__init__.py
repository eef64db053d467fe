"""
langc Semantic Analyzer Package

Implements semantic analysis over the AST:
- Function signature collection ahead of body checking
- Lexically scoped name resolution on a stack of scopes
- Bottom-up type inference and checking for i32 and bool
- Call arity and argument type checking
- Error diagnostics with "did you mean" suggestions

Author: xwest
"""

from .semantic_analyzer import SemanticAnalyzer, AnalysisResult
from .symbol_table import SymbolTable, Symbol, SymbolKind, SymbolType, Scope, ScopeKind
from .errors import SemanticError, SemanticErrorKind

__all__ = [
    # Main analyzer
    "SemanticAnalyzer", "AnalysisResult",

    # Symbol management
    "SymbolTable", "Symbol", "SymbolKind", "SymbolType", "Scope", "ScopeKind",

    # Error handling
    "SemanticError", "SemanticErrorKind",
]
