"""
Test suite for the langc semantic analyzer.

Tests cover:
- Symbol resolution and block scoping
- Type checking of statements and expressions
- Declaration, arity and redeclaration errors
- Error containment (one report per root cause)

Author: xwest
"""

import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from langc.lexer.lexer import Lexer
from langc.lexer.tokens import SourceLocation
from langc.parser.parser import Parser
from langc.analyzer.semantic_analyzer import SemanticAnalyzer
from langc.analyzer.symbol_table import SymbolTable, SymbolType, SymbolKind, ScopeKind
from langc.analyzer.errors import SemanticError, SemanticErrorKind
from langc.parser.ast_nodes import (
    SourceSpan, Program, FunctionDecl, TypeRef, Block, PrintStatement, UnaryOp,
    IntegerLiteral, Identifier
)


FACTORIAL = """
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


class TestSemanticAnalyzer(unittest.TestCase):
    """Test cases for the semantic analyzer."""

    def setUp(self):
        """Set up test fixtures."""
        self.analyzer = SemanticAnalyzer()

    def _analyze_code(self, code: str):
        """Helper to analyze a code snippet that is syntactically valid."""
        tokens = Lexer(code, "test.lc").tokenize()
        parser = Parser(tokens)
        ast = parser.parse()
        self.assertEqual(parser.errors, [], f"Unexpected syntax errors: {parser.errors}")
        return self.analyzer.analyze(ast)

    def _kinds(self, code: str):
        return [error.kind for error in self._analyze_code(code).errors]

    def test_factorial_has_no_errors(self):
        result = self._analyze_code(FACTORIAL)
        self.assertFalse(result.has_errors(), f"Unexpected errors: {result.errors}")

        factorial = result.symbol_table.lookup_function("factorial")
        self.assertIsNotNone(factorial)
        self.assertEqual(factorial.param_types, [SymbolType.INT])
        self.assertEqual(factorial.symbol_type, SymbolType.INT)

    def test_forward_call(self):
        """Functions may be called before they are declared."""
        code = """
        func main() -> i32 [ return helper(true); ]
        func helper(flag: bool) -> i32 [ if flag [ return 1; ] return 0; ]
        """
        self.assertEqual(self._kinds(code), [])

    def test_well_typed_statements(self):
        code = """
        func f(a: i32, b: bool) -> bool [
            let total: i32 = a * 2 - -a;
            let ok: bool = !b || total >= 10 && a != 3;
            while total > 0 [
                total = total - 1;
            ]
            print ok;
            print total;
            return ok == b;
        ]
        """
        self.assertEqual(self._kinds(code), [])

    def test_expression_types_are_recorded(self):
        code = "func f(a: i32) -> bool [ let x: i32 = a + 1; return x < 2; ]"
        result = self._analyze_code(code)
        statements = result.ast.functions[0].body.statements

        self.assertEqual(result.type_annotations[statements[0].initializer], SymbolType.INT)
        self.assertEqual(result.type_annotations[statements[1].value], SymbolType.BOOL)
        self.assertEqual(result.type_annotations[statements[1].value.left], SymbolType.INT)

    def test_analyzer_is_reusable(self):
        code = "func f() -> i32 [ print y; return 0; ]"
        first = self._analyze_code(code)
        second = self._analyze_code(code)
        self.assertEqual(len(first.errors), 1)
        self.assertEqual(len(second.errors), 1)


class TestScoping(unittest.TestCase):
    """Name resolution across nested scopes."""

    def _errors(self, code: str):
        ast = Parser(Lexer(code).tokenize()).parse()
        return SemanticAnalyzer().analyze(ast).errors

    def test_undeclared_variable(self):
        errors = self._errors("func f() -> i32 [ print y; return 0; ]")

        self.assertEqual(len(errors), 1)
        self.assertEqual(errors[0].kind, SemanticErrorKind.UNDECLARED_VARIABLE)
        self.assertEqual(errors[0].message, "Undeclared variable: 'y'")
        self.assertEqual(errors[0].diagnostic.code, "S010")

    def test_undeclared_variable_suggestion(self):
        errors = self._errors("func f(count: i32) -> i32 [ return cout; ]")
        self.assertIn("Did you mean 'count'?", errors[0].diagnostic.suggestions)

    def test_redeclaration_in_same_block(self):
        code = "func f() -> i32 [ let x: i32 = 1; let x: i32 = 2; return x; ]"
        errors = self._errors(code)

        self.assertEqual(len(errors), 1)
        error = errors[0]
        self.assertEqual(error.kind, SemanticErrorKind.REDECLARATION)
        self.assertEqual(error.message, "Variable 'x' is already declared")
        self.assertEqual(error.location.column, 35)
        self.assertEqual([loc.column for loc in error.related_locations], [19])
        self.assertIn("Related locations:", str(error))

    def test_earlier_binding_is_kept(self):
        """After a rejected redeclaration the first type stays in effect."""
        code = "func f() -> i32 [ let x: i32 = 1; let x: bool = true; return x; ]"
        kinds = [e.kind for e in self._errors(code)]
        self.assertEqual(kinds, [SemanticErrorKind.REDECLARATION])

    def test_let_cannot_redeclare_parameter_at_function_level(self):
        code = "func f(x: i32) -> i32 [ let x: i32 = 1; return x; ]"
        kinds = [e.kind for e in self._errors(code)]
        self.assertEqual(kinds, [SemanticErrorKind.REDECLARATION])

    def test_duplicate_parameter(self):
        code = "func f(a: i32, a: bool) -> i32 [ return 0; ]"
        kinds = [e.kind for e in self._errors(code)]
        self.assertEqual(kinds, [SemanticErrorKind.REDECLARATION])

    def test_shadowing_in_nested_block(self):
        """A nested block may reuse an outer name; the outer binding returns afterwards."""
        code = """
        func f(x: i32) -> i32 [
            if x > 0 [
                let x: bool = true;
                print !x;
            ]
            return x + 1;
        ]
        """
        self.assertEqual(self._errors(code), [])

    def test_initializer_sees_outer_binding(self):
        code = """
        func f(x: i32) -> i32 [
            while x > 0 [
                let x: bool = x > 10;
                print x;
            ]
            return x;
        ]
        """
        self.assertEqual(self._errors(code), [])

    def test_block_variable_not_visible_after_block(self):
        code = """
        func f() -> i32 [
            if true [
                let t: i32 = 1;
            ] else [
                print t;
            ]
            return t;
        ]
        """
        errors = self._errors(code)
        self.assertEqual([e.kind for e in errors], [SemanticErrorKind.UNDECLARED_VARIABLE] * 2)
        self.assertEqual([e.location.line for e in errors], [6, 8])

    def test_function_name_is_not_a_variable(self):
        code = "func f() -> i32 [ print f; return 0; ]"
        kinds = [e.kind for e in self._errors(code)]
        self.assertEqual(kinds, [SemanticErrorKind.UNDECLARED_VARIABLE])

    def test_variable_is_not_callable(self):
        code = "func f() -> i32 [ let g: i32 = 1; return g(); ]"
        kinds = [e.kind for e in self._errors(code)]
        self.assertEqual(kinds, [SemanticErrorKind.UNDECLARED_FUNCTION])

    def test_functions_do_not_share_locals(self):
        code = """
        func a() -> i32 [ let local: i32 = 1; return local; ]
        func b() -> i32 [ return local; ]
        """
        errors = self._errors(code)
        self.assertEqual(len(errors), 1)
        self.assertEqual(errors[0].location.line, 3)


class TestTypeChecking(unittest.TestCase):
    """Type errors in statements and expressions."""

    def _errors(self, body: str, header: str = "func f(n: i32, b: bool) -> i32"):
        code = f"{header} [ {body} ]"
        ast = Parser(Lexer(code).tokenize()).parse()
        return SemanticAnalyzer().analyze(ast).errors

    def assertSingleMismatch(self, body: str, message: str = None, **kwargs):
        errors = self._errors(body, **kwargs)
        self.assertEqual([e.kind for e in errors], [SemanticErrorKind.TYPE_MISMATCH], str(errors))
        if message is not None:
            self.assertEqual(errors[0].message, message)
        return errors[0]

    def test_let_initializer(self):
        self.assertSingleMismatch(
            "let x: i32 = true; return 0;",
            "Type mismatch in initializer of 'x': expected i32, found bool"
        )

    def test_assignment(self):
        self.assertSingleMismatch(
            "n = b; return 0;",
            "Type mismatch in assignment to 'n': expected i32, found bool"
        )

    def test_assignment_to_undeclared(self):
        errors = self._errors("z = 1; return 0;")
        self.assertEqual([e.kind for e in errors], [SemanticErrorKind.UNDECLARED_VARIABLE])

    def test_conditions_must_be_bool(self):
        self.assertSingleMismatch(
            "if n [ ] return 0;",
            "Type mismatch in if condition: expected bool, found i32"
        )
        self.assertSingleMismatch(
            "while n + 1 [ ] return 0;",
            "Type mismatch in while condition: expected bool, found i32"
        )

    def test_arithmetic_operands(self):
        error = self.assertSingleMismatch("return n + b;")
        self.assertIn("operand of '+'", error.message)

    def test_logical_operands(self):
        self.assertSingleMismatch("print n && b; return 0;")

    def test_relational_operands(self):
        self.assertSingleMismatch("print b < n; return 0;")

    def test_equality_needs_matching_types(self):
        self.assertSingleMismatch("print n == b; return 0;")
        self.assertEqual(self._errors("print b != true; print n == 1; return 0;"), [])

    def test_unary_operands(self):
        self.assertSingleMismatch("print !n; return 0;")
        self.assertSingleMismatch("print -b; return 0;")

    def test_return_type(self):
        self.assertSingleMismatch(
            "return b;",
            "Type mismatch in return from 'f': expected i32, found bool"
        )

    def test_bare_return_in_typed_function(self):
        self.assertSingleMismatch(
            "return;",
            "Type mismatch in return from 'f': expected i32, found unit"
        )

    def test_return_inside_nested_block(self):
        self.assertSingleMismatch("while b [ if b [ return true; ] ] return 0;")

    def test_mismatch_location(self):
        error = self.assertSingleMismatch("let x: bool = 1 + 2; return 0;", header="func f() -> i32")
        # Points at the initializer, not at 'let'
        self.assertEqual(error.location.column, 33)
        self.assertEqual(error.diagnostic.code, "S001")

    def test_no_cascade_from_undeclared_operand(self):
        """An operand that failed to resolve is reported once and poisons nothing else."""
        errors = self._errors("let x: bool = (y + 1) < 2 && !y; return 0;")
        self.assertEqual([e.kind for e in errors], [SemanticErrorKind.UNDECLARED_VARIABLE] * 2)

    def test_no_cascade_from_inner_mismatch(self):
        errors = self._errors("let x: i32 = (b + 1) * 2; return x;")
        self.assertEqual([e.kind for e in errors], [SemanticErrorKind.TYPE_MISMATCH])

    def test_print_accepts_any_type(self):
        self.assertEqual(self._errors("print n; print b; return 0;"), [])

    def test_errors_in_source_order(self):
        body = "let a: i32 = true; print q; n = false; return b;"
        errors = self._errors(body)
        columns = [e.location.column for e in errors]
        self.assertEqual(len(errors), 4)
        self.assertEqual(columns, sorted(columns))


class TestFunctionCalls(unittest.TestCase):
    """Call resolution, arity and argument checking."""

    ADD = "func add(a: i32, b: i32) -> i32 [ return a + b; ]\n"

    def _errors(self, main_body: str):
        code = self.ADD + f"func main() -> i32 [ {main_body} ]"
        ast = Parser(Lexer(code).tokenize()).parse()
        return SemanticAnalyzer().analyze(ast).errors

    def test_valid_call(self):
        self.assertEqual(self._errors("let r: i32 = add(1, add(2, 3)); return r;"), [])

    def test_arity_reported_once(self):
        errors = self._errors("return add(1);")

        self.assertEqual([e.kind for e in errors], [SemanticErrorKind.ARITY_MISMATCH])
        self.assertEqual(errors[0].message, "Function 'add' expects 2 arguments, got 1")
        self.assertEqual(errors[0].diagnostic.code, "S050")

    def test_arity_suppresses_argument_type_checks(self):
        errors = self._errors("return add(true, false, 3);")
        self.assertEqual([e.kind for e in errors], [SemanticErrorKind.ARITY_MISMATCH])

    def test_arguments_still_checked_on_arity_mismatch(self):
        errors = self._errors("return add(1, y, 2);")
        self.assertEqual([e.kind for e in errors], [
            SemanticErrorKind.ARITY_MISMATCH,
            SemanticErrorKind.UNDECLARED_VARIABLE,
        ])

    def test_call_keeps_return_type_on_arity_mismatch(self):
        errors = self._errors("let ok: bool = add(1); return 0;")
        self.assertEqual([e.kind for e in errors], [
            SemanticErrorKind.ARITY_MISMATCH,
            SemanticErrorKind.TYPE_MISMATCH,
        ])

    def test_argument_type(self):
        errors = self._errors("return add(1, true);")
        self.assertEqual([e.kind for e in errors], [SemanticErrorKind.TYPE_MISMATCH])
        self.assertIn("argument 2 of 'add'", errors[0].message)

    def test_undeclared_function(self):
        errors = self._errors("return ad(1, 2);")

        self.assertEqual([e.kind for e in errors], [SemanticErrorKind.UNDECLARED_FUNCTION])
        self.assertEqual(errors[0].message, "Undeclared function: 'ad'")
        self.assertIn("Did you mean 'add'?", errors[0].diagnostic.suggestions)

    def test_undeclared_function_arguments_checked(self):
        errors = self._errors("print nope(z); return 0;")
        self.assertEqual([e.kind for e in errors], [
            SemanticErrorKind.UNDECLARED_FUNCTION,
            SemanticErrorKind.UNDECLARED_VARIABLE,
        ])

    def test_duplicate_function(self):
        code = """
        func f() -> i32 [ return 1; ]
        func f(a: i32) -> bool [ print zz; return true; ]
        func main() -> i32 [ let r: i32 = f(); return r; ]
        """
        ast = Parser(Lexer(code).tokenize()).parse()
        errors = SemanticAnalyzer().analyze(ast).errors

        # First signature wins, and the second body is still checked
        self.assertEqual([e.kind for e in errors], [
            SemanticErrorKind.REDECLARATION,
            SemanticErrorKind.UNDECLARED_VARIABLE,
        ])
        self.assertEqual(errors[0].message, "Function 'f' is already declared")
        self.assertEqual(errors[0].location.line, 3)
        self.assertEqual(errors[0].related_locations[0].line, 2)


class TestSymbolTable(unittest.TestCase):
    """Direct tests of the scope stack."""

    def setUp(self):
        self.table = SymbolTable()
        self.location = SourceLocation("test.lc", 1, 1, 0)

    def test_innermost_first_lookup(self):
        self.table.enter_scope(ScopeKind.FUNCTION, "f", return_type=SymbolType.INT)
        self.table.define_variable("x", SymbolType.INT, self.location)
        self.table.enter_scope(ScopeKind.BLOCK, "if")
        self.table.define_variable("x", SymbolType.BOOL, self.location)

        self.assertEqual(self.table.lookup_variable("x").symbol_type, SymbolType.BOOL)
        self.table.exit_scope()
        self.assertEqual(self.table.lookup_variable("x").symbol_type, SymbolType.INT)

    def test_global_scope_is_never_popped(self):
        self.assertEqual(self.table.depth, 0)
        self.assertIsNone(self.table.exit_scope())
        self.assertIs(self.table.current_scope, self.table.global_scope)

    def test_redeclaration_raises(self):
        self.table.define_variable("x", SymbolType.INT, self.location)
        with self.assertRaises(SemanticError) as ctx:
            self.table.define_variable("x", SymbolType.INT, SourceLocation("test.lc", 2, 1, 10))

        self.assertEqual(ctx.exception.kind, SemanticErrorKind.REDECLARATION)
        self.assertEqual(ctx.exception.related_locations, [self.location])

    def test_functions_live_in_global_scope(self):
        self.table.enter_scope(ScopeKind.FUNCTION, "main")
        self.table.define_function("helper", SymbolType.BOOL, [SymbolType.INT], self.location)
        self.table.exit_scope()

        helper = self.table.lookup_function("helper")
        self.assertEqual(helper.kind, SymbolKind.FUNCTION)
        self.assertEqual(helper.arity, 1)
        self.assertEqual(str(helper), "helper(i32) -> bool")
        self.assertIsNone(self.table.lookup_variable("helper"))

    def test_current_function_scope(self):
        self.assertFalse(self.table.is_in_function())
        self.table.enter_scope(ScopeKind.FUNCTION, "f", return_type=SymbolType.BOOL)
        self.table.enter_scope(ScopeKind.LOOP, "while")

        scope = self.table.get_current_function_scope()
        self.assertEqual(scope.name, "f")
        self.assertEqual(scope.return_type, SymbolType.BOOL)

    def test_similar_names(self):
        self.table.enter_scope(ScopeKind.FUNCTION, "f")
        for name in ("counter", "count", "total"):
            self.table.define_variable(name, SymbolType.INT, self.location)

        self.assertEqual(self.table.get_similar_names("cont", SymbolKind.VARIABLE), ["count"])
        self.assertEqual(self.table.get_similar_names("zzz", SymbolKind.VARIABLE), [])


class TestDeepExpressions(unittest.TestCase):
    """Expression size and depth never escape the analyzer as an exception."""

    def _analyze(self, code: str):
        parser = Parser(Lexer(code).tokenize())
        ast = parser.parse()
        self.assertEqual(parser.errors, [])
        return SemanticAnalyzer().analyze(ast)

    def test_long_sum(self):
        code = "func main() -> i32 [ return " + " + ".join(["1"] * 1000) + "; ]"
        result = self._analyze(code)

        self.assertEqual(result.errors, [])
        sum_expr = result.ast.functions[0].body.statements[0].value
        self.assertEqual(result.type_annotations[sum_expr], SymbolType.INT)
        self.assertEqual(result.type_annotations[sum_expr.left.left], SymbolType.INT)

    def test_long_chain_reports_bad_operand_once(self):
        terms = ["n"] * 800 + ["true"] + ["n"] * 200
        code = "func main(n: i32) -> i32 [ return " + " - ".join(terms) + "; ]"
        errors = self._analyze(code).errors

        self.assertEqual([e.kind for e in errors], [SemanticErrorKind.TYPE_MISMATCH])
        self.assertEqual(errors[0].location.column, code.index("true") + 1)

    def test_long_logical_chain(self):
        code = "func main(b: bool) -> bool [ return " + " && ".join(["b"] * 1000) + " || b; ]"
        self.assertEqual(self._analyze(code).errors, [])

    def test_stack_exhaustion_is_recorded(self):
        """A tree too deep to walk is reported and the rest of the function is still checked."""
        location = SourceLocation("deep.lc", 1, 1, 0)
        span = SourceSpan(location, location)

        deep = IntegerLiteral(1, span)
        for _ in range(5000):
            deep = UnaryOp("-", deep, span)

        body = Block([
            PrintStatement(deep, span),
            PrintStatement(Identifier("missing", span), span),
        ], span)
        main = FunctionDecl("main", [], TypeRef("i32", span), body, span)
        result = SemanticAnalyzer().analyze(Program([main], span))

        self.assertEqual([e.kind for e in result.errors], [
            SemanticErrorKind.NESTING_TOO_DEEP,
            SemanticErrorKind.UNDECLARED_VARIABLE,
        ])
        self.assertEqual(result.errors[0].diagnostic.code, "S090")
        self.assertEqual(result.symbol_table.depth, 0)


def run_semantic_analyzer_tests():
    """Run all semantic analyzer tests."""
    loader = unittest.TestLoader()
    suite = unittest.TestSuite()
    suite.addTests(loader.loadTestsFromTestCase(TestSemanticAnalyzer))
    suite.addTests(loader.loadTestsFromTestCase(TestScoping))
    suite.addTests(loader.loadTestsFromTestCase(TestTypeChecking))
    suite.addTests(loader.loadTestsFromTestCase(TestFunctionCalls))
    suite.addTests(loader.loadTestsFromTestCase(TestSymbolTable))
    suite.addTests(loader.loadTestsFromTestCase(TestDeepExpressions))

    runner = unittest.TextTestRunner(verbosity=2)
    return runner.run(suite)


if __name__ == "__main__":
    print("Running langc Semantic Analyzer Tests...")
    print("=" * 60)

    result = run_semantic_analyzer_tests()

    print("\n" + "=" * 60)
    if result.wasSuccessful():
        print("✅ All tests passed!")
    else:
        print("❌ Some tests failed.")
        print(f"Failures: {len(result.failures)}")
        print(f"Errors: {len(result.errors)}")
