"""
Main semantic analyzer for langc.

Runs two passes over the AST:
- Declaration pass: every function signature is registered globally, so
  calls may refer to functions declared later in the file
- Body pass: each function body is walked with a scope stack, resolving
  names, inferring expression types bottom-up and checking them

Errors are collected, never thrown out of analyze(); a failing statement
does not stop the rest of its function, and a failing function does not
stop its siblings.

Author: xwest
"""

import logging
from typing import List, Dict, Optional
from dataclasses import dataclass

from ..parser.ast_nodes import (
    ASTNode, Program, FunctionDecl, Block, Statement, LetStatement, Assignment,
    IfStatement, WhileLoop, ReturnStatement, PrintStatement, ExpressionStatement,
    Expression, BinaryOp, UnaryOp, FunctionCall, Identifier, IntegerLiteral,
    BooleanLiteral
)
from .symbol_table import SymbolTable, SymbolType, SymbolKind, ScopeKind
from .errors import (
    SemanticError, create_type_mismatch_error, create_undeclared_variable_error,
    create_undeclared_function_error, create_arity_mismatch_error,
    create_nesting_too_deep_error
)

logger = logging.getLogger(__name__)


ARITHMETIC_OPS = {"+", "-", "*", "/"}
RELATIONAL_OPS = {"<", ">", "<=", ">="}
EQUALITY_OPS = {"==", "!="}
LOGICAL_OPS = {"&&", "||"}


@dataclass
class AnalysisResult:
    """Results of semantic analysis."""
    ast: Program
    symbol_table: SymbolTable
    errors: List[SemanticError]
    type_annotations: Dict[ASTNode, SymbolType]  # Inferred type of every checked expression

    def has_errors(self) -> bool:
        """Check if analysis found any errors."""
        return len(self.errors) > 0


class SemanticAnalyzer:
    """
    Main semantic analyzer for langc.

    Performs scope resolution, type checking, and declaration and arity
    checking on a (possibly partial) AST.
    """

    def __init__(self):
        """Initialize the semantic analyzer."""
        self.symbol_table = SymbolTable()
        self.errors: List[SemanticError] = []
        self.type_annotations: Dict[ASTNode, SymbolType] = {}

    def analyze(self, ast: Program) -> AnalysisResult:
        """
        Perform complete semantic analysis on the AST.

        Args:
            ast: The abstract syntax tree to analyze

        Returns:
            AnalysisResult containing the symbol table, inferred types and errors
        """
        self.symbol_table = SymbolTable()
        self.errors = []
        self.type_annotations = {}

        self._analyze_pass1_declarations(ast)
        self._analyze_pass2_bodies(ast)

        logger.debug("analyzed %d functions, %d errors", len(ast.functions), len(self.errors))
        return AnalysisResult(
            ast=ast,
            symbol_table=self.symbol_table,
            errors=self.errors,
            type_annotations=self.type_annotations
        )

    # ========================================================================
    # Pass 1: Function signatures
    # ========================================================================

    def _analyze_pass1_declarations(self, ast: Program):
        """
        Pass 1: Register every function signature in the global scope.

        A second function with the same name is a redeclaration; the first
        signature stays in effect.
        """
        for func in ast.functions:
            try:
                self.symbol_table.define_function(
                    func.name,
                    self.symbol_table.resolve_type_from_ast(func.return_type),
                    [self.symbol_table.resolve_type_from_ast(p.type_annotation) for p in func.params],
                    func.span.start,
                    node=func
                )
            except SemanticError as e:
                self.errors.append(e)

    # ========================================================================
    # Pass 2: Function bodies
    # ========================================================================

    def _analyze_pass2_bodies(self, ast: Program):
        """Pass 2: Check every function body against its own header."""
        for func in ast.functions:
            self._check_function(func)

    def _check_function(self, func: FunctionDecl):
        """Check a function's parameters and body in a fresh function scope."""
        return_type = self.symbol_table.resolve_type_from_ast(func.return_type)
        self.symbol_table.enter_scope(ScopeKind.FUNCTION, func.name, return_type=return_type)

        try:
            for param in func.params:
                try:
                    self.symbol_table.define_variable(
                        param.name,
                        self.symbol_table.resolve_type_from_ast(param.type_annotation),
                        param.location
                    )
                except SemanticError as e:
                    self.errors.append(e)

            # Body statements share the parameters' scope
            for stmt in func.body.statements:
                self._check_statement(stmt)

        finally:
            self.symbol_table.exit_scope()

    def _check_block(self, block: Block, kind: ScopeKind, name: str):
        """Check a nested block in its own scope."""
        self.symbol_table.enter_scope(kind, name)

        try:
            for stmt in block.statements:
                self._check_statement(stmt)
        finally:
            self.symbol_table.exit_scope()

    def _check_statement(self, stmt: Statement):
        """Check one statement, recording any error it raises."""
        try:
            if isinstance(stmt, LetStatement):
                self._check_let_statement(stmt)
            elif isinstance(stmt, Assignment):
                self._check_assignment(stmt)
            elif isinstance(stmt, IfStatement):
                self._check_if_statement(stmt)
            elif isinstance(stmt, WhileLoop):
                self._check_while_loop(stmt)
            elif isinstance(stmt, ReturnStatement):
                self._check_return_statement(stmt)
            elif isinstance(stmt, PrintStatement):
                self._check_expression(stmt.value)
            elif isinstance(stmt, ExpressionStatement):
                self._check_expression(stmt.expression)
        except SemanticError as e:
            self.errors.append(e)
        except RecursionError:
            self.errors.append(create_nesting_too_deep_error(stmt.span.start, stmt))

    def _check_let_statement(self, let_stmt: LetStatement):
        """
        Check a variable declaration.

        The initializer is checked before the name is bound, so
        ``let x: i32 = x;`` refers to an outer ``x``.
        """
        declared_type = self.symbol_table.resolve_type_from_ast(let_stmt.type_annotation)
        init_type = self._check_expression(let_stmt.initializer)

        if not self._types_compatible(declared_type, init_type):
            self.errors.append(create_type_mismatch_error(
                str(declared_type), str(init_type),
                let_stmt.initializer.span.start, let_stmt.initializer,
                context=f"initializer of '{let_stmt.name}'"
            ))

        self.type_annotations[let_stmt] = declared_type

        # Raises on a same-scope redeclaration; the earlier binding is kept
        self.symbol_table.define_variable(
            let_stmt.name,
            declared_type,
            let_stmt.span.start,
            node=let_stmt
        )

    def _check_assignment(self, assignment: Assignment):
        """Check an assignment to an existing variable."""
        symbol = self.symbol_table.lookup_variable(assignment.name)
        if symbol is None:
            self.errors.append(create_undeclared_variable_error(
                assignment.name, assignment.span.start, assignment,
                similar_names=self.symbol_table.get_similar_names(assignment.name, SymbolKind.VARIABLE)
            ))

        value_type = self._check_expression(assignment.value)

        if symbol is not None and not self._types_compatible(symbol.symbol_type, value_type):
            self.errors.append(create_type_mismatch_error(
                str(symbol.symbol_type), str(value_type),
                assignment.value.span.start, assignment.value,
                context=f"assignment to '{assignment.name}'"
            ))

    def _check_if_statement(self, if_stmt: IfStatement):
        """Check an if statement; each branch gets its own scope."""
        condition_type = self._check_expression(if_stmt.condition)
        self._expect_type(SymbolType.BOOL, condition_type, if_stmt.condition, "if condition")

        self._check_block(if_stmt.then_block, ScopeKind.BLOCK, "if")
        if if_stmt.else_block:
            self._check_block(if_stmt.else_block, ScopeKind.BLOCK, "else")

    def _check_while_loop(self, while_loop: WhileLoop):
        """Check a while loop."""
        condition_type = self._check_expression(while_loop.condition)
        self._expect_type(SymbolType.BOOL, condition_type, while_loop.condition, "while condition")

        self._check_block(while_loop.body, ScopeKind.LOOP, "while")

    def _check_return_statement(self, return_stmt: ReturnStatement):
        """Check a return value against the enclosing function's return type."""
        if return_stmt.value is not None:
            return_type = self._check_expression(return_stmt.value)
            location = return_stmt.value.span.start
        else:
            return_type = SymbolType.UNIT
            location = return_stmt.span.start

        func_scope = self.symbol_table.get_current_function_scope()
        if func_scope is None or func_scope.return_type is None:
            return

        if not self._types_compatible(func_scope.return_type, return_type):
            self.errors.append(create_type_mismatch_error(
                str(func_scope.return_type), str(return_type),
                location, return_stmt,
                context=f"return from '{func_scope.name}'"
            ))

    # ========================================================================
    # Expressions
    # ========================================================================

    def _check_expression(self, expr: Expression) -> SymbolType:
        """Check an expression and return its type (ERROR if it does not check)."""
        if isinstance(expr, IntegerLiteral):
            result_type = SymbolType.INT
        elif isinstance(expr, BooleanLiteral):
            result_type = SymbolType.BOOL
        elif isinstance(expr, Identifier):
            result_type = self._check_identifier(expr)
        elif isinstance(expr, BinaryOp):
            result_type = self._check_binary_op(expr)
        elif isinstance(expr, UnaryOp):
            result_type = self._check_unary_op(expr)
        elif isinstance(expr, FunctionCall):
            result_type = self._check_function_call(expr)
        else:
            result_type = SymbolType.ERROR

        self.type_annotations[expr] = result_type
        return result_type

    def _check_identifier(self, identifier: Identifier) -> SymbolType:
        """Check types for an identifier expression."""
        symbol = self.symbol_table.lookup_variable(identifier.name)
        if symbol is None:
            self.errors.append(create_undeclared_variable_error(
                identifier.name, identifier.span.start, identifier,
                similar_names=self.symbol_table.get_similar_names(identifier.name, SymbolKind.VARIABLE)
            ))
            return SymbolType.ERROR

        return symbol.symbol_type

    def _check_binary_op(self, binary_op: BinaryOp) -> SymbolType:
        """
        Check types for a binary operation.

        The left spine of a left-associative chain is walked with an explicit
        stack, so `1 + 1 + ... + 1` does not recurse once per operator.
        Errors come out in the same order as a recursive walk.
        """
        spine = []
        node: Expression = binary_op
        while isinstance(node, BinaryOp):
            spine.append(node)
            node = node.left

        left_type = self._check_expression(node)
        for op_node in reversed(spine):
            right_type = self._check_expression(op_node.right)
            left_type = self._binary_result_type(op_node, left_type, right_type)
            self.type_annotations[op_node] = left_type

        return left_type

    def _binary_result_type(self, binary_op: BinaryOp, left_type: SymbolType,
                            right_type: SymbolType) -> SymbolType:
        """Type of one operator application given its operand types."""
        # An operand that already failed has been reported
        if SymbolType.ERROR in (left_type, right_type):
            return SymbolType.ERROR

        operator = binary_op.operator
        if operator in EQUALITY_OPS:
            if left_type != right_type:
                self.errors.append(create_type_mismatch_error(
                    str(left_type), str(right_type),
                    binary_op.right.span.start, binary_op,
                    context=f"operands of '{operator}'"
                ))
                return SymbolType.ERROR
            return SymbolType.BOOL

        if operator in ARITHMETIC_OPS:
            operand_type, result_type = SymbolType.INT, SymbolType.INT
        elif operator in RELATIONAL_OPS:
            operand_type, result_type = SymbolType.INT, SymbolType.BOOL
        elif operator in LOGICAL_OPS:
            operand_type, result_type = SymbolType.BOOL, SymbolType.BOOL
        else:
            return SymbolType.ERROR

        for operand, actual in ((binary_op.left, left_type), (binary_op.right, right_type)):
            if actual != operand_type:
                self.errors.append(create_type_mismatch_error(
                    str(operand_type), str(actual),
                    operand.span.start, binary_op,
                    context=f"operand of '{operator}'"
                ))
                return SymbolType.ERROR

        return result_type

    def _check_unary_op(self, unary_op: UnaryOp) -> SymbolType:
        """Check types for a unary operation."""
        operand_type = self._check_expression(unary_op.operand)

        if operand_type == SymbolType.ERROR:
            return SymbolType.ERROR

        expected = SymbolType.BOOL if unary_op.operator == "!" else SymbolType.INT
        if operand_type != expected:
            self.errors.append(create_type_mismatch_error(
                str(expected), str(operand_type),
                unary_op.operand.span.start, unary_op,
                context=f"operand of unary '{unary_op.operator}'"
            ))
            return SymbolType.ERROR

        return expected

    def _check_function_call(self, call: FunctionCall) -> SymbolType:
        """
        Check a call against the callee's signature.

        With the wrong number of arguments only the arity error is reported;
        the arguments are still checked for their own errors, and the call
        keeps the declared return type.
        """
        symbol = self.symbol_table.lookup_function(call.name)
        arity_ok = True

        if symbol is None:
            self.errors.append(create_undeclared_function_error(
                call.name, call.span.start, call,
                similar_names=self.symbol_table.get_similar_names(call.name, SymbolKind.FUNCTION)
            ))
        elif symbol.arity != len(call.args):
            arity_ok = False
            self.errors.append(create_arity_mismatch_error(
                call.name, symbol.arity, len(call.args), call.span.start, call
            ))

        arg_types = [self._check_expression(arg) for arg in call.args]

        if symbol is None:
            return SymbolType.ERROR

        if arity_ok:
            for index, (arg, param_type, arg_type) in enumerate(zip(call.args, symbol.param_types, arg_types)):
                if not self._types_compatible(param_type, arg_type):
                    self.errors.append(create_type_mismatch_error(
                        str(param_type), str(arg_type),
                        arg.span.start, arg,
                        context=f"argument {index + 1} of '{call.name}'"
                    ))

        return symbol.symbol_type

    # ========================================================================
    # Helper Methods
    # ========================================================================

    def _expect_type(self, expected: SymbolType, actual: SymbolType, node: Expression, context: str):
        if not self._types_compatible(expected, actual):
            self.errors.append(create_type_mismatch_error(
                str(expected), str(actual), node.span.start, node, context=context
            ))

    def _types_compatible(self, expected: SymbolType, actual: SymbolType) -> bool:
        """Types must match exactly; ERROR on either side has already been reported."""
        if expected == SymbolType.ERROR or actual == SymbolType.ERROR:
            return True
        return expected == actual
