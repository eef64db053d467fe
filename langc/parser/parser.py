"""
langc Recursive-Descent Parser

One method per grammar production over a shared token cursor, with
expressions delegated to the precedence-climbing ExpressionParser.

    program    := function*
    function   := "func" IDENT "(" params? ")" "->" type block
    params     := param ("," param)*
    param      := IDENT ":" type
    type       := "i32" | "bool"
    block      := "[" statement* "]"
    statement  := let | assign | if | while | return | print | expr-stmt

Syntax errors are raised as ParseError inside a production, caught at the
statement (or top-level declaration) boundary, recorded, and followed by
panic-mode synchronization. parse() always returns a Program.

Author: xwest
"""

import logging
from typing import List, Optional

from ..lexer.tokens import Token, TokenType, SourceLocation
from .ast_nodes import (
    SourceSpan, Program, FunctionDecl, Parameter, TypeRef, Block, Statement,
    LetStatement, Assignment, IfStatement, WhileLoop, ReturnStatement,
    PrintStatement, ExpressionStatement
)
from .errors import (
    ParseError, SyntaxErrorRecovery, create_unexpected_token_error,
    create_unterminated_block_error, create_nesting_too_deep_error
)
from .expressions import ExpressionParser, MAX_EXPRESSION_DEPTH

logger = logging.getLogger(__name__)


TYPE_KEYWORDS = (TokenType.I32, TokenType.BOOL)


class Parser(ExpressionParser):
    """
    langc statement and declaration parser.

    Collects every syntax error in ``self.errors`` and keeps going, so a
    single run reports problems in all functions.
    """

    def __init__(self, tokens: List[Token]):
        """
        Initialize parser with a list of tokens.

        Args:
            tokens: List of tokens from the lexer, normally ending in EOF
        """
        super().__init__(tokens)
        self.errors: List[ParseError] = []

    def parse(self) -> Program:
        """
        Parse the token stream into an AST.

        Returns:
            Program node holding every function that could be parsed
        """
        self.current = 0
        self.depth = 0
        self.errors.clear()
        functions = []

        while not self._is_at_end():
            start = self.current
            try:
                functions.append(self._parse_function())
            except ParseError as e:
                self.errors.append(e)
                self._synchronize_to_function(start)

        start_location = self.tokens[0].location if self.tokens else SourceLocation("<string>", 1, 1, 0)
        end_location = self.tokens[-1].location if self.tokens else start_location
        program = Program(functions, SourceSpan(start_location, end_location))

        logger.debug("parsed %d functions, %d errors", len(functions), len(self.errors))
        return program

    def _parse_function(self) -> FunctionDecl:
        """Parse a function declaration."""
        self._trace("func")
        start_token = self._peek()
        if not self._check(TokenType.FUNC):
            raise create_unexpected_token_error([TokenType.FUNC], start_token)
        self._advance()

        name = self._consume(TokenType.IDENTIFIER).lexeme

        self._consume(TokenType.LEFT_PAREN)
        params = self._parse_parameter_list()
        self._consume(TokenType.RIGHT_PAREN)

        self._consume(TokenType.ARROW)
        return_type = self._parse_type_reference()

        body = self._parse_block()

        span = SourceSpan(start_token.location, self._previous().location)
        return FunctionDecl(name, params, return_type, body, span)

    def _parse_parameter_list(self) -> List[Parameter]:
        """Parse function parameter list."""
        params = []

        if not self._check(TokenType.RIGHT_PAREN):
            params.append(self._parse_parameter())

            while self._match(TokenType.COMMA):
                params.append(self._parse_parameter())

        return params

    def _parse_parameter(self) -> Parameter:
        """Parse a single function parameter."""
        self._trace("param")
        name_token = self._consume(TokenType.IDENTIFIER)
        self._consume(TokenType.COLON)
        type_annotation = self._parse_type_reference()

        return Parameter(
            name=name_token.lexeme,
            type_annotation=type_annotation,
            location=name_token.location
        )

    def _parse_type_reference(self) -> TypeRef:
        """Parse a type reference."""
        token = self._peek()
        if token.type not in TYPE_KEYWORDS:
            raise create_unexpected_token_error(TYPE_KEYWORDS, token)

        self._advance()
        span = SourceSpan(token.location, token.location)
        return TypeRef(token.lexeme, span)

    def _parse_block(self) -> Block:
        """
        Parse a bracketed block.

        A block cut off by the end of input (or by the next 'func') records
        an unterminated-block error and keeps the statements parsed so far.
        """
        self._trace("block")
        start_token = self._consume(TokenType.LEFT_BRACKET)
        statements = []

        while not self._check(TokenType.RIGHT_BRACKET) and not self._at_function_boundary():
            stmt = self._parse_statement()
            if stmt is not None:
                statements.append(stmt)

        if self._check(TokenType.RIGHT_BRACKET):
            end_token = self._advance()
        else:
            self.errors.append(create_unterminated_block_error(start_token.location, self._peek()))
            end_token = self._previous()

        span = SourceSpan(start_token.location, end_token.location)
        return Block(statements, span)

    def _parse_statement(self) -> Optional[Statement]:
        """Parse a statement, recovering from any syntax error inside it."""
        start = self.current
        try:
            if self._check(TokenType.LET):
                return self._parse_let_statement()
            elif self._check(TokenType.IF):
                return self._parse_if_statement()
            elif self._check(TokenType.WHILE):
                return self._parse_while_statement()
            elif self._check(TokenType.RETURN):
                return self._parse_return_statement()
            elif self._check(TokenType.PRINT):
                return self._parse_print_statement()
            elif self._check(TokenType.IDENTIFIER) and self._peek_next().type == TokenType.ASSIGN:
                return self._parse_assignment()
            else:
                return self._parse_expression_statement()

        except ParseError as e:
            self.errors.append(e)
        except RecursionError:
            # Deeply nested blocks can exhaust the stack below the expression limit
            self.errors.append(create_nesting_too_deep_error(MAX_EXPRESSION_DEPTH, self._peek()))

        self._synchronize()
        if self.current == start and not self._at_block_boundary():
            self._advance()
        return None

    def _parse_let_statement(self) -> LetStatement:
        """Parse a variable declaration statement."""
        self._trace("let")
        start_token = self._consume(TokenType.LET)

        name_token = self._consume(TokenType.IDENTIFIER)
        self._consume(TokenType.COLON)
        type_annotation = self._parse_type_reference()
        self._consume(TokenType.ASSIGN)
        initializer = self.parse_expression()
        self._consume(TokenType.SEMICOLON)

        span = SourceSpan(start_token.location, self._previous().location)
        return LetStatement(name_token.lexeme, type_annotation, initializer, span)

    def _parse_assignment(self) -> Assignment:
        """Parse an assignment to an existing variable."""
        self._trace("assign")
        name_token = self._consume(TokenType.IDENTIFIER)
        self._consume(TokenType.ASSIGN)
        value = self.parse_expression()
        self._consume(TokenType.SEMICOLON)

        span = SourceSpan(name_token.location, self._previous().location)
        return Assignment(name_token.lexeme, value, span)

    def _parse_if_statement(self) -> IfStatement:
        """Parse an if statement."""
        self._trace("if")
        start_token = self._consume(TokenType.IF)

        condition = self.parse_expression()
        then_block = self._parse_block()

        else_block = None
        if self._match(TokenType.ELSE):
            else_block = self._parse_block()

        span = SourceSpan(start_token.location, self._previous().location)
        return IfStatement(condition, then_block, else_block, span)

    def _parse_while_statement(self) -> WhileLoop:
        """Parse a while loop statement."""
        self._trace("while")
        start_token = self._consume(TokenType.WHILE)

        condition = self.parse_expression()
        body = self._parse_block()

        span = SourceSpan(start_token.location, self._previous().location)
        return WhileLoop(condition, body, span)

    def _parse_return_statement(self) -> ReturnStatement:
        """Parse a return statement."""
        self._trace("return")
        start_token = self._consume(TokenType.RETURN)

        value = None
        if not self._check(TokenType.SEMICOLON):
            value = self.parse_expression()

        self._consume(TokenType.SEMICOLON)

        span = SourceSpan(start_token.location, self._previous().location)
        return ReturnStatement(value, span)

    def _parse_print_statement(self) -> PrintStatement:
        self._trace("print")
        start_token = self._consume(TokenType.PRINT)

        value = self.parse_expression()
        self._consume(TokenType.SEMICOLON)

        span = SourceSpan(start_token.location, self._previous().location)
        return PrintStatement(value, span)

    def _parse_expression_statement(self) -> ExpressionStatement:
        self._trace("expr_stmt")
        expression = self.parse_expression()
        self._consume(TokenType.SEMICOLON)

        span = SourceSpan(expression.span.start, self._previous().location)
        return ExpressionStatement(expression, span)

    # Error recovery

    def _synchronize(self):
        """
        Panic mode: discard tokens up to and including the next ';', or up to
        (not including) the next statement keyword, ']', 'func' or EOF.
        """
        while not self._is_at_end():
            if self._match(TokenType.SEMICOLON):
                return
            if SyntaxErrorRecovery.is_resume_point(self._peek().type):
                return
            self._advance()

    def _synchronize_to_function(self, start: int):
        """Skip to the next 'func' keyword after an error outside any function body."""
        if self.current == start:
            self._advance()
        while not self._is_at_end() and not self._check(TokenType.FUNC):
            self._advance()

    def _at_function_boundary(self) -> bool:
        return self._check(TokenType.FUNC) or self._is_at_end()

    def _at_block_boundary(self) -> bool:
        return self._check(TokenType.RIGHT_BRACKET) or self._at_function_boundary()
