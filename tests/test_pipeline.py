"""
End-to-end tests for the langc front end.

Runs whole programs through tokenize / parse / analyze and checks that
errors from every stage are collected in pipeline order.

Author: xwest
"""

import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

import langc
from langc.pipeline import tokenize, parse, analyze
from langc.lexer.tokens import TokenType
from langc.lexer.errors import LexerError, LexErrorKind, LEXER_ERROR_CODES
from langc.parser.errors import ParseError, ParseErrorKind, PARSER_ERROR_CODES
from langc.analyzer.errors import SemanticError, SemanticErrorKind, SEMANTIC_ERROR_CODES


FACTORIAL = """
// Recursive factorial
func factorial(n: i32) -> i32 [
    if n <= 1 [
        return 1;
    ] else [
        return n * factorial(n - 1);
    ]
]

func main() -> i32 [
    print factorial(5);
    return 0;
]
"""

# One problem per stage, each in a different function
THREE_STAGES = """
func lexical() -> i32 [
    let x: i32 = 1; $
    return x;
]

func syntax() -> i32 [
    return 1 +;
]

func semantic() -> i32 [
    print y;
    return 0;
]
"""


class TestPipeline(unittest.TestCase):
    """Full compilation pipeline tests."""

    def test_factorial_end_to_end(self):
        tokens, lex_errors = tokenize(FACTORIAL)
        self.assertEqual(lex_errors, [])
        self.assertEqual(tokens[-1].type, TokenType.EOF)

        program, parse_errors = parse(FACTORIAL)
        self.assertEqual(parse_errors, [])
        self.assertEqual([f.name for f in program.functions], ["factorial", "main"])

        program, errors = analyze(FACTORIAL)
        self.assertEqual(errors, [], "\n".join(str(e) for e in errors))

    def test_errors_from_every_stage(self):
        program, errors = analyze(THREE_STAGES, "prog.lc")

        self.assertEqual(len(errors), 3, "\n".join(str(e) for e in errors))
        self.assertIsInstance(errors[0], LexerError)
        self.assertIsInstance(errors[1], ParseError)
        self.assertIsInstance(errors[2], SemanticError)

        self.assertEqual(errors[0].kind, LexErrorKind.INVALID_CHARACTER)
        self.assertEqual(errors[1].kind, ParseErrorKind.UNEXPECTED_TOKEN)
        self.assertEqual(errors[2].kind, SemanticErrorKind.UNDECLARED_VARIABLE)

        self.assertEqual([e.location.line for e in errors], [3, 8, 12])
        self.assertTrue(all(e.location.filename == "prog.lc" for e in errors))
        self.assertEqual([f.name for f in program.functions], ["lexical", "syntax", "semantic"])

    def test_parse_reports_lexical_errors_first(self):
        _, errors = parse("func f() -> i32 [ return 1 ] @")
        self.assertIsInstance(errors[0], LexerError)
        self.assertIsInstance(errors[1], ParseError)

    def test_analysis_runs_on_partial_program(self):
        program, errors = analyze("func f() -> i32 [ print y;")

        self.assertEqual([type(e) for e in errors], [ParseError, SemanticError])
        self.assertEqual(errors[0].kind, ParseErrorKind.UNTERMINATED_BLOCK)
        self.assertEqual(errors[1].kind, SemanticErrorKind.UNDECLARED_VARIABLE)
        self.assertEqual(len(program.functions), 1)

    def test_malformed_literal_surfaces_downstream(self):
        """The bad literal produces no token, so the parser sees a missing operand."""
        _, errors = analyze("func f() -> i32 [ let x: i32 = 12ab; return 0; ]")

        self.assertEqual(errors[0].kind, LexErrorKind.MALFORMED_NUMERIC_LITERAL)
        self.assertEqual(errors[1].kind, ParseErrorKind.UNEXPECTED_TOKEN)
        self.assertEqual(len(errors), 2)

    def test_calls_are_independent(self):
        _, first = analyze(THREE_STAGES)
        _, second = analyze(FACTORIAL)
        _, third = analyze(THREE_STAGES)
        self.assertEqual(len(first), 3)
        self.assertEqual(second, [])
        self.assertEqual([e.message for e in first], [e.message for e in third])

    def test_empty_source(self):
        program, errors = analyze("")
        self.assertEqual(program.functions, [])
        self.assertEqual(errors, [])

    def test_debug_logging(self):
        with self.assertLogs("langc.pipeline", level="DEBUG") as logs:
            analyze(THREE_STAGES, "prog.lc")
        self.assertTrue(any("prog.lc: 3 errors" in line for line in logs.output))

    def test_long_and_deep_expressions_never_raise(self):
        long_sum = "func main() -> i32 [ return " + " + ".join(["1"] * 1000) + "; ]"
        _, errors = analyze(long_sum)
        self.assertEqual(errors, [])

        deep = "func main() -> i32 [ return " + "(" * 500 + "1" + ")" * 500 + "; ]"
        _, errors = analyze(deep)
        self.assertEqual([e.kind for e in errors], [ParseErrorKind.NESTING_TOO_DEEP])

    def test_error_codes_match_tables(self):
        """Every emitted code is listed in its stage's table and every table entry is emitted."""
        sources = [
            "func f() -> i32 [ let a: i32 = 2147483648; let b: i32 = 12ab; return 0 @; ]",
            "func f() -> i32 [ return (1",
            "func f() -> i32 [ return " + "(" * 200 + "1" + ")" * 200 + "; ]",
            """
            func g(a: i32) -> i32 [ return a; ]
            func g() -> i32 [ return 0; ]
            func f() -> i32 [ let x: i32 = true; print y; return g() + h(); ]
            """,
        ]
        tables = [
            (LexerError, LEXER_ERROR_CODES),
            (ParseError, PARSER_ERROR_CODES),
            (SemanticError, SEMANTIC_ERROR_CODES),
        ]

        emitted = set()
        for source in sources:
            _, errors = analyze(source)
            for error in errors:
                table = next(codes for error_class, codes in tables if isinstance(error, error_class))
                self.assertIn(error.diagnostic.code, table, str(error))
                emitted.add(error.diagnostic.code)

        all_codes = set(LEXER_ERROR_CODES) | set(PARSER_ERROR_CODES) | set(SEMANTIC_ERROR_CODES)
        # S090 is only reachable for trees deeper than the parser accepts
        self.assertEqual(emitted, all_codes - {"S090"})

    def test_package_exports(self):
        self.assertIs(langc.analyze, analyze)
        self.assertIs(langc.tokenize, tokenize)
        self.assertTrue(langc.__version__)


def run_pipeline_tests():
    """Run all pipeline tests."""
    loader = unittest.TestLoader()
    suite = unittest.TestSuite()
    suite.addTests(loader.loadTestsFromTestCase(TestPipeline))

    runner = unittest.TextTestRunner(verbosity=2)
    return runner.run(suite)


if __name__ == "__main__":
    print("Running langc Pipeline Tests...")
    print("=" * 60)

    result = run_pipeline_tests()

    print("\n" + "=" * 60)
    if result.wasSuccessful():
        print("✅ All tests passed!")
    else:
        print("❌ Some tests failed.")
