"""
langc Parser Package

Recursive-descent parser for the langc language with a precedence-climbing
expression sub-parser. Produces an Abstract Syntax Tree with source spans.

Key Features:
- One method per grammar production, one token of lookahead
- Precedence climbing for binary and unary operators
- Panic-mode error recovery at statement boundaries
- Partial ASTs for programs with syntax errors

Author: xwest
"""

from .ast_nodes import *
from .expressions import ExpressionParser, Precedence
from .parser import Parser
from .errors import ParseError, ParseErrorKind

__all__ = [
    # Core parser
    "Parser", "ExpressionParser", "Precedence",

    # AST nodes
    "ASTNode", "ASTNodeType", "SourceSpan",
    "Program", "FunctionDecl", "Parameter", "TypeRef",
    "Statement", "Block", "LetStatement", "Assignment", "IfStatement",
    "WhileLoop", "ReturnStatement", "PrintStatement", "ExpressionStatement",
    "Expression", "BinaryOp", "UnaryOp", "FunctionCall", "Identifier",
    "IntegerLiteral", "BooleanLiteral",

    # Error handling
    "ParseError", "ParseErrorKind",
]
