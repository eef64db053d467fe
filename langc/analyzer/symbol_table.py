"""
Symbol table and scope management for langc semantic analysis.

Scopes form an explicit stack: the global scope (function signatures) sits
at the bottom, a function scope holding the parameters above it, and one
block scope per nested if/else/while body above that. Lookups walk the
stack from the innermost scope outward.

Author: xwest
"""

from typing import Dict, List, Optional
from dataclasses import dataclass, field
from enum import Enum

from ..lexer.tokens import SourceLocation
from ..lexer.errors import ErrorRecovery
from ..parser.ast_nodes import ASTNode, TypeRef
from .errors import create_redeclaration_error


class SymbolType(Enum):
    """The types an expression or symbol can have."""
    INT = "i32"
    BOOL = "bool"
    UNIT = "unit"
    ERROR = "<error>"  # Result of an expression that already failed to check

    def __str__(self) -> str:
        return self.value


# Surface type names as written in source
TYPE_NAMES = {
    "i32": SymbolType.INT,
    "bool": SymbolType.BOOL,
}


class SymbolKind(Enum):
    """Types of symbols in the symbol table."""
    VARIABLE = "variable"
    FUNCTION = "function"


@dataclass
class Symbol:
    """Represents a symbol in the symbol table."""
    name: str
    kind: SymbolKind
    symbol_type: SymbolType  # Return type for functions
    location: SourceLocation
    param_types: List[SymbolType] = field(default_factory=list)
    ast_node: Optional[ASTNode] = None

    def __str__(self) -> str:
        if self.kind == SymbolKind.FUNCTION:
            params = ", ".join(str(p) for p in self.param_types)
            return f"{self.name}({params}) -> {self.symbol_type}"
        return f"{self.name}: {self.symbol_type}"

    @property
    def arity(self) -> int:
        return len(self.param_types)


class ScopeKind(Enum):
    """Types of scopes."""
    GLOBAL = "global"
    FUNCTION = "function"
    BLOCK = "block"
    LOOP = "loop"


@dataclass
class Scope:
    """Represents one lexical scope: a single name -> symbol mapping."""
    kind: ScopeKind
    name: str
    symbols: Dict[str, Symbol] = field(default_factory=dict)

    # Declared return type, set on function scopes only
    return_type: Optional[SymbolType] = None

    def define_symbol(self, symbol: Symbol) -> None:
        """Define a symbol in this scope; redeclaring a name is an error."""
        if symbol.name in self.symbols:
            existing = self.symbols[symbol.name]
            raise create_redeclaration_error(
                symbol.name,
                symbol.kind.value,
                symbol.location,
                original_location=existing.location,
                node=symbol.ast_node
            )

        self.symbols[symbol.name] = symbol

    def lookup_symbol_local(self, name: str) -> Optional[Symbol]:
        """Look up a symbol only in this scope."""
        return self.symbols.get(name)

    def __str__(self) -> str:
        symbol_count = len(self.symbols)
        return f"Scope({self.kind.value}, {self.name}, {symbol_count} symbols)"


class SymbolTable:
    """
    Manages the stack of scopes.

    Provides scope entry and exit, symbol definition, and innermost-first
    resolution.
    """

    def __init__(self):
        """Initialize the symbol table with a global scope."""
        self.global_scope = Scope(ScopeKind.GLOBAL, "global")
        self.scopes: List[Scope] = [self.global_scope]

    @property
    def current_scope(self) -> Scope:
        return self.scopes[-1]

    @property
    def depth(self) -> int:
        """Number of scopes above the global scope."""
        return len(self.scopes) - 1

    def enter_scope(self, kind: ScopeKind, name: str,
                    return_type: Optional[SymbolType] = None) -> Scope:
        """Push a new scope."""
        new_scope = Scope(kind, name, return_type=return_type)
        self.scopes.append(new_scope)
        return new_scope

    def exit_scope(self) -> Optional[Scope]:
        """Pop the current scope. The global scope is never popped."""
        if len(self.scopes) > 1:
            return self.scopes.pop()
        return None

    def define_symbol(self, symbol: Symbol) -> None:
        """Define a symbol in the current scope."""
        self.current_scope.define_symbol(symbol)

    def define_variable(self, name: str, var_type: SymbolType, location: SourceLocation,
                        node: Optional[ASTNode] = None) -> Symbol:
        """Define a variable symbol in the current scope."""
        symbol = Symbol(
            name=name,
            kind=SymbolKind.VARIABLE,
            symbol_type=var_type,
            location=location,
            ast_node=node
        )
        self.define_symbol(symbol)
        return symbol

    def define_function(self, name: str, return_type: SymbolType, param_types: List[SymbolType],
                        location: SourceLocation, node: Optional[ASTNode] = None) -> Symbol:
        """Define a function signature in the global scope."""
        symbol = Symbol(
            name=name,
            kind=SymbolKind.FUNCTION,
            symbol_type=return_type,
            location=location,
            param_types=list(param_types),
            ast_node=node
        )
        self.global_scope.define_symbol(symbol)
        return symbol

    def lookup_symbol(self, name: str) -> Optional[Symbol]:
        """Look up a name from the innermost scope outward."""
        for scope in reversed(self.scopes):
            symbol = scope.lookup_symbol_local(name)
            if symbol is not None:
                return symbol
        return None

    def lookup_variable(self, name: str) -> Optional[Symbol]:
        """Resolve a name used as a value; function names do not count."""
        symbol = self.lookup_symbol(name)
        if symbol is not None and symbol.kind == SymbolKind.VARIABLE:
            return symbol
        return None

    def lookup_function(self, name: str) -> Optional[Symbol]:
        """Resolve a callee name; functions live in the global scope only."""
        symbol = self.global_scope.lookup_symbol_local(name)
        if symbol is not None and symbol.kind == SymbolKind.FUNCTION:
            return symbol
        return None

    def get_visible_names(self, kind: Optional[SymbolKind] = None) -> List[str]:
        """All names visible from the current scope, optionally of one kind."""
        names: Dict[str, None] = {}
        for scope in reversed(self.scopes):
            for symbol in scope.symbols.values():
                if kind is None or symbol.kind == kind:
                    names.setdefault(symbol.name, None)
        return list(names)

    def get_similar_names(self, name: str, kind: Optional[SymbolKind] = None,
                          max_distance: int = 2) -> List[str]:
        """Get visible names close to the given name (for error suggestions)."""
        similar_names = []

        for symbol_name in self.get_visible_names(kind):
            distance = ErrorRecovery.edit_distance(name.lower(), symbol_name.lower())
            if distance <= max_distance:
                similar_names.append((symbol_name, distance))

        # Sort by distance and return names only
        similar_names.sort(key=lambda x: x[1])
        return [similar for similar, _ in similar_names[:5]]

    def get_current_function_scope(self) -> Optional[Scope]:
        """Get the innermost function scope, if any."""
        for scope in reversed(self.scopes):
            if scope.kind == ScopeKind.FUNCTION:
                return scope
        return None

    def is_in_function(self) -> bool:
        """Check if currently inside a function."""
        return self.get_current_function_scope() is not None

    def resolve_type_from_ast(self, type_ref: TypeRef) -> SymbolType:
        """Resolve a type reference from the AST to a SymbolType."""
        return TYPE_NAMES.get(type_ref.name, SymbolType.ERROR)

    def __str__(self) -> str:
        return f"SymbolTable(current: {self.current_scope}, depth: {self.depth})"
