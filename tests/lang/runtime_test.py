import unittest

from minilang.lang import nodes
from minilang.lang.error import ExecutionError
from minilang.lang.runtime import Runtime


def i(value):
    return nodes.IntegerPrimitive(value, None)


class RuntimeTestCase(unittest.TestCase):

    def setUp(self):
        self.root = Runtime()
        self.frame = Runtime(self.root)

    def test_root(self):
        self.assertTrue(self.root.is_root)
        self.assertFalse(self.frame.is_root)
        self.assertIs(self.root, self.frame.root)
        self.assertIs(self.root, Runtime(self.frame).root)

    def test_get(self):
        self.root.set("x", i(1))
        self.frame.set("y", i(2))

        self.assertEqual(i(1), self.frame.get("x"))
        self.assertEqual(i(2), self.frame.get("y"))
        self.assertRaises(ExecutionError, self.root.get, "y")
        self.assertRaises(ExecutionError, self.frame.get, "z")

    def test_get_error(self):
        with self.assertRaises(ExecutionError) as ctx:
            self.root.get("nope")
        self.assertEqual("Runtime Error: Undefined variable 'nope'", str(ctx.exception))
        self.assertIsNone(ctx.exception.start)

    def test_set_shadows(self):
        self.root.set("x", i(1))
        self.frame.set("x", i(2))
        self.assertEqual(i(2), self.frame.get("x"))
        self.assertEqual(i(1), self.root.get("x"))

        self.root.set("x", i(3))
        self.assertEqual(i(3), self.root.get("x"))

    def test_assign(self):
        self.root.set("x", i(1))
        self.frame.assign("x", i(5))
        self.assertEqual(i(5), self.root.get("x"))
        self.assertNotIn("x", self.frame.vars)

        self.frame.assign("y", i(6))
        self.assertEqual({"y": i(6)}, self.frame.vars)
        self.assertRaises(ExecutionError, self.root.get, "y")

    def test_outputs(self):
        self.frame.println("a")
        self.root.println("b")
        self.assertEqual(["a", "b"], self.root.outputs)
        self.assertEqual(["a", "b"], self.frame.outputs)

        self.root.outputs.append("c")  # copy
        self.assertEqual(["a", "b"], self.root.outputs)

    def test_functions(self):
        first = nodes.FunctionDef("f", [], nodes.Block([], None), None)
        second = nodes.FunctionDef("f", ["a"], nodes.Block([], None), None)

        self.frame.define_function("f", first)
        self.assertIs(first, self.root.get_function("f"))
        self.frame.define_function("f", second)
        self.assertIs(second, self.frame.get_function("f"))
        self.assertEqual(["f"], list(self.root.functions))

        with self.assertRaises(ExecutionError) as ctx:
            self.root.get_function("g")
        self.assertIn("Undefined function 'g'", str(ctx.exception))

    def test_reset(self):
        self.root.set("x", i(1))
        self.root.println("line")
        self.root.define_function("f", nodes.FunctionDef("f", [], nodes.Block([], None), None))

        self.frame.reset()
        self.assertEqual([], self.root.outputs)
        self.assertEqual(i(1), self.root.get("x"))
        self.assertIn("f", self.root.functions)

        self.root.reset(variables=True, functions=True)
        self.assertEqual({}, self.root.vars)
        self.assertEqual({}, self.root.functions)


if __name__ == '__main__':
    unittest.main()
