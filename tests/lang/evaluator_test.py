import sys
import unittest

from minilang import interpreter
from minilang.interpreter import run
from minilang.lang import nodes
from minilang.lang.error import ExecutionError
from minilang.lang.evaluator import Evaluator, Returning, display, is_truthy
from minilang.lang.runtime import Runtime


def i(value):
    return nodes.IntegerPrimitive(value, None)


def f(value):
    return nodes.FloatPrimitive(value, None)


def b(value):
    return nodes.BooleanPrimitive(value, None)


def s(value):
    return nodes.StringPrimitive(value, None)


NULL = nodes.NullPrimitive(None)
INT_DIGITS_LIMIT = getattr(sys, "get_int_max_str_digits", lambda: 0)()


def value_of(source, runtime=None):
    return run(source, runtime)[0]


def outputs_of(source, runtime=None):
    return run(source, runtime)[1]


class ArithmeticTestCase(unittest.TestCase):

    def test_precedence(self):
        cases = {
            "2 + 3 * 4;": i(14),
            "2 ** 3 ** 2;": i(512),
            "10 - 3 - 2;": i(5),
            "(2 + 3) * 4;": i(20),
            "-2 ** 2;": i(4),
            "2 ** 100;": i(2 ** 100),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, value_of(case), case)

    def test_coercion(self):
        cases = {
            "1 + 2.0;": f(3.0),
            "7 / 2;": i(3),
            "-7 / 2;": i(-4),
            "7.0 / 2;": f(3.5),
            "7 % 3;": i(1),
            "-7 % 3;": i(2),
            "2.5 * 2;": f(5.0),
            "2 ** -1;": f(0.5),
            "2.0 ** 2;": f(4.0),
            "-3;": i(-3),
            "-1.5;": f(-1.5),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, value_of(case), case)

    def test_int_and_float_differ(self):
        self.assertNotEqual(i(3), value_of("1 + 2.0;"))
        self.assertNotEqual(f(3.0), value_of("7 / 2;"))

    def test_bitwise(self):
        cases = {
            "6 & 3;": i(2),
            "6 | 3;": i(7),
            "6 ^ 3;": i(5),
            "~5;": i(-6),
            "1 << 10;": i(1024),
            "1024 >> 3;": i(128),
            "1 << 0;": i(1),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, value_of(case), case)

    def test_casts(self):
        cases = {
            "int(2.9);": i(2),
            "int(-2.9);": i(-2),
            "int(7);": i(7),
            "float(2);": f(2.0),
            "float(2.5);": f(2.5),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, value_of(case), case)

    def test_errors(self):
        should_raise = [
            "7 % 0;", "1 / 0;", "1.0 / 0;", "1 / 0.0;", "1 << -1;", "8 >> -2;", "\"a\" + 1;", "true * 2;",
            "1.5 % 2;", "1.5 & 1;", "1 | null;", "~1.5;", "-true;", "-\"a\";", "int(\"3\");", "float(null);",
            "\"a\" < 1;", "null >= 0;", "0 ** -1;", "(0 - 8.0) ** 0.5;",
        ]
        for case in should_raise:
            self.assertRaises(ExecutionError, run, case)

    @unittest.skipUnless(INT_DIGITS_LIMIT, "no integer string conversion limit")
    def test_huge_integers(self):
        source = f"x = 10 ** {INT_DIGITS_LIMIT}; print(x - x); print(x);"
        with self.assertRaises(ExecutionError) as ctx:
            run(source)
        self.assertEqual("integer too large to display", ctx.exception.reason)

        runtime = Runtime()
        root, __ = interpreter.parse(interpreter.tokenize(source))
        value, error = interpreter.evaluate(root, runtime)
        self.assertIsNone(value)
        self.assertIsInstance(error, ExecutionError)
        self.assertEqual(["0"], runtime.outputs)

    def test_error_location(self):
        with self.assertRaises(ExecutionError) as ctx:
            run("x = 1 / 0;")
        self.assertEqual((6, 6), (ctx.exception.start, ctx.exception.end))
        self.assertEqual("Runtime Error: division by zero at [6-6]", str(ctx.exception))


class LogicTestCase(unittest.TestCase):

    def test_truthiness(self):
        should_fail = [NULL, b(False)]
        for case in should_fail:
            self.assertFalse(is_truthy(case), case)

        should_pass = [b(True), i(0), f(0.0), s(""), i(-1)]
        for case in should_pass:
            self.assertTrue(is_truthy(case), case)

    def test_short_circuit(self):
        cases = {
            "0 || 5;": i(0),
            "false && (1 / 0);": b(False),
            "true || (1 / 0);": b(True),
            "null || \"x\";": s("x"),
            "null && 1;": NULL,
            "\"\" && 3;": i(3),
            "false || null;": NULL,
            "1 && 2.5;": f(2.5),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, value_of(case), case)

    def test_not(self):
        cases = {"!0;": b(False), "!null;": b(True), "!false;": b(True), "!!\"\";": b(True)}
        for case, expected in cases.items():
            self.assertEqual(expected, value_of(case), case)

    def test_equality(self):
        cases = {
            "1 == 1.0;": True,
            "1 == 2;": False,
            "\"a\" == \"a\";": True,
            "\"a\" == \"b\";": False,
            "1 == true;": False,
            "1 == \"1\";": False,
            "null == null;": True,
            "null == false;": False,
            "true == true;": True,
            "1 != 2;": True,
            "2.0 != 2;": False,
            "true != 1;": True,
        }
        for case, expected in cases.items():
            self.assertEqual(b(expected), value_of(case), case)

    def test_comparison(self):
        cases = {
            "1 < 2.5;": True,
            "2 <= 2;": True,
            "3 > 3.0;": False,
            "2 >= 2;": True,
            "-1 < 0;": True,
        }
        for case, expected in cases.items():
            self.assertEqual(b(expected), value_of(case), case)


class ControlFlowTestCase(unittest.TestCase):

    def test_block(self):
        self.assertEqual(NULL, value_of(""))
        self.assertEqual(i(3), value_of("1; 2; 3;"))
        self.assertEqual(i(2), value_of("{ 1; 2; }"))
        self.assertEqual(NULL, value_of("{ }"))

    def test_if(self):
        cases = {
            "if 0 1; else 2; end": i(1),
            "if false 1; else 2; end": i(2),
            "if null 1; end": NULL,
            "if true end": NULL,
            "x = 5; if x > 3 \"big\"; else \"small\"; end": s("big"),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, value_of(case), case)

    def test_while(self):
        runtime = Runtime()
        self.assertEqual(NULL, value_of("i = 0; while i < 3 i = i + 1; end", runtime))
        self.assertEqual(i(3), runtime.get("i"))

        source = """
        i = 1;
        sum = 0;
        while i <= 10
            sum = sum + i;
            i = i + 1;
        end
        print(sum);
        """
        self.assertEqual(["55"], outputs_of(source))
        self.assertEqual([], outputs_of("while false print(1); end"))

    def test_for(self):
        runtime = Runtime()
        value_of("sum = 0; for i in [1, 10] sum = sum + i; end", runtime)
        self.assertEqual(i(55), runtime.get("sum"))
        self.assertEqual(i(10), runtime.get("i"))

        self.assertEqual(i(6), value_of("for i in [1, 3] i * 2; end"))
        self.assertEqual(NULL, value_of("for i in [3, 1] print(i); end"))
        self.assertEqual(["5"], outputs_of("for i in [5, 5] print(i); end"))
        self.assertEqual(["-1", "0", "1"], outputs_of("for i in [-1, 1] print(i); end"))

        # range bounds are evaluated once
        self.assertEqual(["1", "2", "3"], outputs_of("n = 3; for i in [1, n] n = 10; print(i); end"))

    def test_for_errors(self):
        should_raise = ["for i in [1.0, 3] end", "for i in [1, \"3\"] end", "for i in [null, 3] end"]
        for case in should_raise:
            self.assertRaises(ExecutionError, run, case)

    def test_print(self):
        cases = {
            "print(1.5);": ["1.5"],
            "print(3.0);": ["3.0"],
            "print(7 / 2);": ["3"],
            "print(true); print(false);": ["true", "false"],
            "print(null);": ["null"],
            "print(\"hi there\");": ["hi there"],
            "print(10 * 6 - 10 % 4);": ["58"],
            "x = 5; print(x + x * x);": ["30"],
            "print((5 > 3) && !(2 > 8));": ["true"],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, outputs_of(case), case)
        self.assertEqual(NULL, value_of("print(1);"))

    def test_undefined_variable(self):
        with self.assertRaises(ExecutionError) as ctx:
            run("print(y);")
        self.assertIn("Undefined variable 'y'", str(ctx.exception))


class FunctionTestCase(unittest.TestCase):

    def test_fib(self):
        source = "function fib(n) if n <= 1 return n; end return fib(n-2)+fib(n-1); end print(fib(10));"
        self.assertEqual(["55"], outputs_of(source))

    def test_calls(self):
        cases = {
            "function double(x) return x + x; end double(4 + 1);": i(10),
            "function f() end f();": NULL,
            "function f() return; end f();": NULL,
            "function f() 1; 2; end f();": NULL,
            "function f() return 1; end function f() return 2; end f();": i(2),
            "function inner() return 1; end function outer() x = inner(); return x + 1; end outer();": i(2),
            "function add(a, b) return a + b; end add(1, 2.5);": f(3.5),
            "function first(a, b) return a; end first(\"x\", 1 / 1);": s("x"),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, value_of(case), case)

    def test_return_unwinds_to_call(self):
        source = """
        function f()
            for i in [1, 10]
                if i == 3
                    return i;
                end
            end
            return 0;
        end
        print(f());
        print(4);
        """
        self.assertEqual(["3", "4"], outputs_of(source))

        source = """
        function find(limit)
            i = 0;
            while true
                i = i + 1;
                { if i * i > limit return i; end }
            end
        end
        print(find(50));
        print(find(0));
        """
        self.assertEqual(["8", "1"], outputs_of(source))

    def test_return_inside_nested_calls(self):
        source = """
        function g() return 2; print("unreachable"); end
        function f() x = g(); print(x); return x * 10; end
        print(f());
        """
        self.assertEqual(["2", "20"], outputs_of(source))

    def test_top_level_return(self):
        self.assertEqual(i(5), value_of("return 5; print(1);"))
        self.assertEqual([], outputs_of("return 5; print(1);"))

    def test_scoping(self):
        # globals are visible and assignable from functions
        self.assertEqual(i(1), value_of("x = 1; function f() return x; end f();"))
        self.assertEqual(i(2), value_of("count = 0; function inc() count = count + 1; end inc(); inc(); count;"))

        # parameters shadow globals without overwriting them
        self.assertEqual(i(1), value_of("x = 1; function f(x) x = 5; return x; end f(0); x;"))

        # function locals do not leak, and callers' locals are not visible
        should_raise = [
            "function f() y = 5; end f(); y;",
            "function g() return z; end function f(z) return g(); end f(1);",
        ]
        for case in should_raise:
            self.assertRaises(ExecutionError, run, case)

    def test_errors(self):
        cases = {
            "f();": "Undefined function 'f'",
            "function f(a) end f();": "'f' expected 1 arguments but got 0",
            "function f(a) end f(1, 2);": "'f' expected 1 arguments but got 2",
            "function f() end f()();": "can only call functions by name",
            "(1 + 2)(3);": "can only call functions by name",
        }
        for case, msg in cases.items():
            with self.assertRaises(ExecutionError, msg=case) as ctx:
                run(case)
            self.assertIn(msg, str(ctx.exception), case)

    def test_unbounded_recursion(self):
        with self.assertRaises(ExecutionError) as ctx:
            run("function f(n) return f(n + 1); end print(f(0));")
        self.assertEqual("maximum recursion depth exceeded", ctx.exception.reason)

        runtime = Runtime()
        source = "function f() return g(); end function g() return f(); end f();"
        root, __ = interpreter.parse(interpreter.tokenize(source))
        value, error = interpreter.evaluate(root, runtime)
        self.assertIsNone(value)
        self.assertIn("maximum recursion depth exceeded", str(error))

    def test_function_table(self):
        runtime = Runtime()
        run("function f(a, b) return a; end", runtime)
        self.assertEqual(["a", "b"], runtime.get_function("f").params)


class EvaluatorTestCase(unittest.TestCase):

    def test_returning_does_not_escape_call(self):
        runtime = Runtime()
        run("function f() return 7; end", runtime)
        call = nodes.Call(nodes.Variable("f", None), [], None)
        self.assertEqual(i(7), call.accept(Evaluator(runtime)))

    def test_returning_signal(self):
        node = nodes.Block([nodes.Return(i(1), None), nodes.Print(i(2), None)], None)
        runtime = Runtime()
        result = node.accept(Evaluator(runtime))
        self.assertIsInstance(result, Returning)
        self.assertEqual(i(1), result.value)
        self.assertEqual([], runtime.outputs)

    def test_display(self):
        cases = {"1": i(1), "-2.5": f(-2.5), "true": b(True), "null": NULL, "a b": s("a b"), "0.1": f(0.1)}
        for expected, case in cases.items():
            self.assertEqual(expected, display(case), case)

    def test_visitor_is_total(self):
        class Partial(nodes.Visitor):
            def visit_integer(self, node):
                return node

        self.assertRaises(TypeError, Partial)


if __name__ == '__main__':
    unittest.main()
