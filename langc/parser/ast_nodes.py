"""
Abstract Syntax Tree node definitions for langc.

Every node records the source span it was parsed from and lists its
children. The tree is strictly owned: no parent links, no shared subtrees.
Nodes compare and hash by identity, so they can key per-node tables such as
the analyzer's inferred types.

Author: xwest
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from dataclasses import dataclass
from enum import Enum

from ..lexer.tokens import SourceLocation


class ASTNodeType(Enum):
    """Enumeration of all AST node types."""

    # Top-level
    PROGRAM = "Program"
    FUNCTION_DECL = "FunctionDecl"

    # Statements
    BLOCK = "Block"
    LET_STATEMENT = "LetStatement"
    ASSIGNMENT = "Assignment"
    IF_STATEMENT = "IfStatement"
    WHILE_LOOP = "WhileLoop"
    RETURN_STATEMENT = "ReturnStatement"
    PRINT_STATEMENT = "PrintStatement"
    EXPRESSION_STMT = "ExpressionStatement"

    # Expressions
    BINARY_OP = "BinaryOp"
    UNARY_OP = "UnaryOp"
    FUNCTION_CALL = "FunctionCall"
    IDENTIFIER = "Identifier"
    INTEGER_LITERAL = "IntegerLiteral"
    BOOLEAN_LITERAL = "BooleanLiteral"

    # Types
    TYPE_REF = "TypeRef"


@dataclass
class SourceSpan:
    """Represents a span of source code (start and end locations)."""
    start: SourceLocation
    end: SourceLocation

    def __str__(self) -> str:
        if self.start.filename == self.end.filename:
            return f"{self.start.filename}:{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"
        return f"{self.start}-{self.end}"


class ASTNode(ABC):
    """Base class for all AST nodes."""

    def __init__(self, node_type: ASTNodeType, span: SourceSpan):
        self.node_type = node_type
        self.span = span

    @abstractmethod
    def children(self) -> List['ASTNode']:
        """Get all child nodes."""
        pass

    @property
    def location(self) -> SourceLocation:
        """Where the node starts."""
        return self.span.start

    def __str__(self) -> str:
        return f"{self.node_type.value}@{self.span}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(span={self.span})"


# ============================================================================
# Types
# ============================================================================

class TypeRef(ASTNode):
    """Reference to a built-in type by name: 'i32' or 'bool'."""
    name: str

    def __init__(self, name: str, span: SourceSpan):
        super().__init__(ASTNodeType.TYPE_REF, span)
        self.name = name

    def children(self) -> List[ASTNode]:
        return []


# ============================================================================
# Top-level nodes
# ============================================================================

class Program(ASTNode):
    """Root AST node: the ordered function declarations of one source file."""
    functions: List['FunctionDecl']

    def __init__(self, functions: List['FunctionDecl'], span: SourceSpan):
        super().__init__(ASTNodeType.PROGRAM, span)
        self.functions = functions

    def children(self) -> List[ASTNode]:
        return list(self.functions)


@dataclass
class Parameter:
    """Function parameter."""
    name: str
    type_annotation: TypeRef
    location: SourceLocation


class FunctionDecl(ASTNode):
    """Function declaration: name, typed parameters, return type and body."""
    name: str
    params: List[Parameter]
    return_type: TypeRef
    body: 'Block'

    def __init__(self, name: str, params: List[Parameter], return_type: TypeRef,
                 body: 'Block', span: SourceSpan):
        super().__init__(ASTNodeType.FUNCTION_DECL, span)
        self.name = name
        self.params = params
        self.return_type = return_type
        self.body = body

    def children(self) -> List[ASTNode]:
        children: List[ASTNode] = [param.type_annotation for param in self.params]
        children.append(self.return_type)
        children.append(self.body)
        return children


# ============================================================================
# Statements
# ============================================================================

class Statement(ASTNode):
    """Base class for statements."""
    pass


class Block(Statement):
    """Bracketed sequence of statements."""
    statements: List[Statement]

    def __init__(self, statements: List[Statement], span: SourceSpan):
        super().__init__(ASTNodeType.BLOCK, span)
        self.statements = statements

    def children(self) -> List[ASTNode]:
        return list(self.statements)


class LetStatement(Statement):
    """Variable declaration: let name: type = initializer;"""
    name: str
    type_annotation: TypeRef
    initializer: 'Expression'

    def __init__(self, name: str, type_annotation: TypeRef,
                 initializer: 'Expression', span: SourceSpan):
        super().__init__(ASTNodeType.LET_STATEMENT, span)
        self.name = name
        self.type_annotation = type_annotation
        self.initializer = initializer

    def children(self) -> List[ASTNode]:
        return [self.type_annotation, self.initializer]


class Assignment(Statement):
    """Assignment to an existing variable."""
    name: str
    value: 'Expression'

    def __init__(self, name: str, value: 'Expression', span: SourceSpan):
        super().__init__(ASTNodeType.ASSIGNMENT, span)
        self.name = name
        self.value = value

    def children(self) -> List[ASTNode]:
        return [self.value]


class IfStatement(Statement):
    """If statement with optional else block."""
    condition: 'Expression'
    then_block: Block
    else_block: Optional[Block] = None

    def __init__(self, condition: 'Expression', then_block: Block,
                 else_block: Optional[Block], span: SourceSpan):
        super().__init__(ASTNodeType.IF_STATEMENT, span)
        self.condition = condition
        self.then_block = then_block
        self.else_block = else_block

    def children(self) -> List[ASTNode]:
        children = [self.condition, self.then_block]
        if self.else_block:
            children.append(self.else_block)
        return children


class WhileLoop(Statement):
    """While loop statement."""
    condition: 'Expression'
    body: Block

    def __init__(self, condition: 'Expression', body: Block, span: SourceSpan):
        super().__init__(ASTNodeType.WHILE_LOOP, span)
        self.condition = condition
        self.body = body

    def children(self) -> List[ASTNode]:
        return [self.condition, self.body]


class ReturnStatement(Statement):
    """Return statement."""
    value: Optional['Expression']

    def __init__(self, value: Optional['Expression'], span: SourceSpan):
        super().__init__(ASTNodeType.RETURN_STATEMENT, span)
        self.value = value

    def children(self) -> List[ASTNode]:
        return [self.value] if self.value else []


class PrintStatement(Statement):
    """Print statement."""
    value: 'Expression'

    def __init__(self, value: 'Expression', span: SourceSpan):
        super().__init__(ASTNodeType.PRINT_STATEMENT, span)
        self.value = value

    def children(self) -> List[ASTNode]:
        return [self.value]


class ExpressionStatement(Statement):
    """Expression evaluated for its side effects."""
    expression: 'Expression'

    def __init__(self, expression: 'Expression', span: SourceSpan):
        super().__init__(ASTNodeType.EXPRESSION_STMT, span)
        self.expression = expression

    def children(self) -> List[ASTNode]:
        return [self.expression]


# ============================================================================
# Expressions
# ============================================================================

class Expression(ASTNode):
    """Base class for expressions."""
    pass


class BinaryOp(Expression):
    """Binary operation expression."""
    left: Expression
    operator: str
    right: Expression

    def __init__(self, left: Expression, operator: str, right: Expression, span: SourceSpan):
        super().__init__(ASTNodeType.BINARY_OP, span)
        self.left = left
        self.operator = operator
        self.right = right

    def children(self) -> List[ASTNode]:
        return [self.left, self.right]


class UnaryOp(Expression):
    """Unary operation expression ('-' or '!')."""
    operator: str
    operand: Expression

    def __init__(self, operator: str, operand: Expression, span: SourceSpan):
        super().__init__(ASTNodeType.UNARY_OP, span)
        self.operator = operator
        self.operand = operand

    def children(self) -> List[ASTNode]:
        return [self.operand]


class FunctionCall(Expression):
    """Call of a named function."""
    name: str
    args: List[Expression]

    def __init__(self, name: str, args: List[Expression], span: SourceSpan):
        super().__init__(ASTNodeType.FUNCTION_CALL, span)
        self.name = name
        self.args = args

    def children(self) -> List[ASTNode]:
        return list(self.args)


class Identifier(Expression):
    """Identifier expression."""
    name: str

    def __init__(self, name: str, span: SourceSpan):
        super().__init__(ASTNodeType.IDENTIFIER, span)
        self.name = name

    def children(self) -> List[ASTNode]:
        return []


class IntegerLiteral(Expression):
    value: int

    def __init__(self, value: int, span: SourceSpan):
        super().__init__(ASTNodeType.INTEGER_LITERAL, span)
        self.value = value

    def children(self) -> List[ASTNode]:
        return []


class BooleanLiteral(Expression):
    value: bool

    def __init__(self, value: bool, span: SourceSpan):
        super().__init__(ASTNodeType.BOOLEAN_LITERAL, span)
        self.value = value

    def children(self) -> List[ASTNode]:
        return []
