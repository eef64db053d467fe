"""
Semantic analysis error handling for langc.

Provides error reporting for scope resolution, declaration and type
checking, with suggestions and links to related source locations.

Author: xwest
"""

from enum import Enum
from typing import Optional, List

from ..lexer.tokens import SourceLocation
from ..lexer.errors import Diagnostic
from ..parser.ast_nodes import ASTNode


class SemanticErrorKind(Enum):
    """Categories of semantic errors."""
    UNDECLARED_VARIABLE = "undeclared variable"
    UNDECLARED_FUNCTION = "undeclared function"
    REDECLARATION = "redeclaration"
    TYPE_MISMATCH = "type mismatch"
    ARITY_MISMATCH = "arity mismatch"
    NESTING_TOO_DEEP = "nesting too deep"


class SemanticError(Exception):
    """
    Exception raised when semantic analysis finds a problem.

    Contains detailed diagnostic information for error reporting.
    """

    def __init__(
        self,
        kind: SemanticErrorKind,
        message: str,
        location: SourceLocation,
        node: Optional[ASTNode] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None,
        related_locations: Optional[List[SourceLocation]] = None
    ):
        super().__init__(message)
        self.kind = kind
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions,
            kind=kind
        )
        self.node = node
        self.related_locations = related_locations or []

    @property
    def message(self) -> str:
        return self.diagnostic.message

    @property
    def location(self) -> SourceLocation:
        return self.diagnostic.location

    def __str__(self) -> str:
        result = str(self.diagnostic)

        if self.related_locations:
            result += "Related locations:\n"
            for loc in self.related_locations:
                result += f"  --> {loc}\n"

        return result


# Semantic error codes for categorization
SEMANTIC_ERROR_CODES = {
    "S001": "Type mismatch",
    "S010": "Undeclared variable",
    "S011": "Symbol redeclaration",
    "S015": "Undeclared function",
    "S050": "Arity mismatch",
    "S090": "Expression nested too deeply",
}


# Helper functions for creating specific semantic errors

def create_type_mismatch_error(
    expected: str,
    actual: str,
    location: SourceLocation,
    node: Optional[ASTNode] = None,
    context: Optional[str] = None
) -> SemanticError:
    """
    Create a type mismatch error.

    Args:
        expected: Name of the required type (or a description like "i32 or bool")
        actual: Name of the type found
        location: Where the offending expression starts
        node: The offending node
        context: What required the type, e.g. "if condition"
    """
    where = f" in {context}" if context else ""
    return SemanticError(
        kind=SemanticErrorKind.TYPE_MISMATCH,
        message=f"Type mismatch{where}: expected {expected}, found {actual}",
        location=location,
        node=node,
        code="S001",
        help_text=f"The expression has type '{actual}' but '{expected}' was expected.",
        suggestions=["Check the types in this expression"]
    )


def create_undeclared_variable_error(
    symbol: str,
    location: SourceLocation,
    node: Optional[ASTNode] = None,
    similar_names: Optional[List[str]] = None
) -> SemanticError:
    """Create an error for a use of a variable that is not in scope."""
    suggestions = []
    if similar_names:
        suggestions.extend([f"Did you mean '{name}'?" for name in similar_names[:3]])

    suggestions.append(f"Declare '{symbol}' with 'let' before using it")

    return SemanticError(
        kind=SemanticErrorKind.UNDECLARED_VARIABLE,
        message=f"Undeclared variable: '{symbol}'",
        location=location,
        node=node,
        code="S010",
        help_text=f"The variable '{symbol}' is not defined in the current scope.",
        suggestions=suggestions
    )


def create_undeclared_function_error(
    name: str,
    location: SourceLocation,
    node: Optional[ASTNode] = None,
    similar_names: Optional[List[str]] = None
) -> SemanticError:
    """Create an error for a call to a function that was never declared."""
    suggestions = []
    if similar_names:
        suggestions.extend([f"Did you mean '{candidate}'?" for candidate in similar_names[:3]])

    return SemanticError(
        kind=SemanticErrorKind.UNDECLARED_FUNCTION,
        message=f"Undeclared function: '{name}'",
        location=location,
        node=node,
        code="S015",
        help_text=f"No function named '{name}' is declared in this program.",
        suggestions=suggestions
    )


def create_redeclaration_error(
    name: str,
    what: str,
    location: SourceLocation,
    original_location: Optional[SourceLocation] = None,
    node: Optional[ASTNode] = None
) -> SemanticError:
    """Create an error for a name declared twice in the same scope."""
    related_locations = [original_location] if original_location else []
    help_text = f"'{name}' is already declared in this scope"
    if original_location:
        help_text += f" at {original_location}"

    return SemanticError(
        kind=SemanticErrorKind.REDECLARATION,
        message=f"{what.capitalize()} '{name}' is already declared",
        location=location,
        node=node,
        code="S011",
        help_text=help_text + ".",
        suggestions=[f"Rename this {what}"],
        related_locations=related_locations
    )


def create_arity_mismatch_error(
    function_name: str,
    expected_args: int,
    actual_args: int,
    location: SourceLocation,
    node: Optional[ASTNode] = None
) -> SemanticError:
    """Create a function arity mismatch error."""
    plural = "" if expected_args == 1 else "s"
    return SemanticError(
        kind=SemanticErrorKind.ARITY_MISMATCH,
        message=f"Function '{function_name}' expects {expected_args} argument{plural}, got {actual_args}",
        location=location,
        node=node,
        code="S050",
        help_text="The function call has the wrong number of arguments.",
        suggestions=[f"Provide exactly {expected_args} argument{plural}"]
    )


def create_nesting_too_deep_error(location: SourceLocation, node: Optional[ASTNode] = None) -> SemanticError:
    """Create an error for a statement too deeply nested to check."""
    return SemanticError(
        kind=SemanticErrorKind.NESTING_TOO_DEEP,
        message="Expression nested too deeply to check",
        location=location,
        node=node,
        code="S090",
        help_text="The analyzer ran out of stack while checking this statement.",
        suggestions=["Split the expression using intermediate 'let' bindings"]
    )
