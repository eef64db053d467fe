"""
Convenience entry points that run the front-end stages in order.

Each function builds fresh stage objects, so calls share no state. Nothing
is raised for bad input: every diagnostic comes back in the error list, in
pipeline order (lexical, then syntax, then semantic).

Author: xwest
"""

import logging
from typing import List, Tuple, Union

from .lexer import Lexer, Token, LexerError
from .parser import Parser, Program, ParseError
from .analyzer import SemanticAnalyzer, SemanticError

logger = logging.getLogger(__name__)

CompileError = Union[LexerError, ParseError, SemanticError]


def tokenize(source: str, filename: str = "<string>") -> Tuple[List[Token], List[LexerError]]:
    """
    Tokenize a source string.

    Args:
        source: Source code string
        filename: Filename for error reporting

    Returns:
        The token list (always ending in EOF) and the lexical errors
    """
    lexer = Lexer(source, filename)
    tokens = lexer.tokenize()
    return tokens, list(lexer.errors)


def parse(source: str, filename: str = "<string>") -> Tuple[Program, List[Union[LexerError, ParseError]]]:
    """
    Tokenize and parse a source string.

    Returns:
        The (possibly partial) Program and the lexical errors followed by
        the syntax errors
    """
    tokens, lex_errors = tokenize(source, filename)
    parser = Parser(tokens)
    program = parser.parse()
    return program, lex_errors + parser.errors


def analyze(source: str, filename: str = "<string>") -> Tuple[Program, List[CompileError]]:
    """
    Run the full front end over a source string.

    Semantic analysis runs even when earlier stages reported errors, over
    whatever part of the program could be parsed.

    Returns:
        The Program and every error from all three stages
    """
    program, errors = parse(source, filename)
    result = SemanticAnalyzer().analyze(program)
    errors = errors + result.errors

    logger.debug("%s: %d errors", filename, len(errors))
    return program, errors
