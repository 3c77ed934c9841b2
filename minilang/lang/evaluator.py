"""Tree-walking evaluator for minilang. Evaluator is a Visitor that reduces every node to a primitive node
(IntegerPrimitive, FloatPrimitive, BooleanPrimitive, StringPrimitive or NullPrimitive) against a Runtime.

Semantics worth knowing:
    - only null and false are falsy: 0, 0.0 and "" are truthy
    - arithmetic promotes to float if either operand is a float; integer division floors
    - %, bitwise and shift operators only accept integers
    - && and || short-circuit and return the last evaluated operand itself, not a boolean
    - functions only see the root frame, not the caller's frame

A return statement does not raise: it produces a Returning signal, which blocks and loops hand upwards instead of
continuing, and which a call turns into its own result. A signal therefore never crosses the call that produced it.
"""

from minilang.lang import nodes
from minilang.lang.error import ExecutionError
from minilang.lang.runtime import Runtime


class Returning:
    """Control signal produced by a return statement, carrying the returned value up to the enclosing call."""
    __slots__ = ("value",)

    def __init__(self, value):
        self.value = value

    def __repr__(self):
        return f"Returning({self.value!r})"


def is_truthy(value):
    return not isinstance(value, nodes.NullPrimitive) and not (
        isinstance(value, nodes.BooleanPrimitive) and not value.value
    )


def is_numeric(value):
    return isinstance(value, (nodes.IntegerPrimitive, nodes.FloatPrimitive))


def is_int(value):
    return isinstance(value, nodes.IntegerPrimitive)


def display(value):
    """Text that print emits for a primitive node."""
    if isinstance(value, nodes.BooleanPrimitive):
        return "true" if value.value else "false"
    elif isinstance(value, nodes.NullPrimitive):
        return "null"
    elif isinstance(value, nodes.FloatPrimitive):
        return repr(value.value)
    try:
        return str(value.value)
    except ValueError:  # longer than sys.get_int_max_str_digits()
        raise ExecutionError("integer too large to display", value.token) from None


class Evaluator(nodes.Visitor):
    """Evaluates nodes in the scope of runtime. Calls get an Evaluator of their own, bound to the call's frame."""

    def __init__(self, runtime):
        self.runtime = runtime

    def evaluate(self, node):
        """Evaluates node and returns the resulting primitive node. A return at the top level ends the program."""
        result = node.accept(self)
        if isinstance(result, Returning):
            return result.value
        return result

    # --------------------------------------------------------------------------------------------------------------
    # primitives evaluate to themselves

    def visit_integer(self, node):
        return node

    def visit_float(self, node):
        return node

    def visit_boolean(self, node):
        return node

    def visit_string(self, node):
        return node

    def visit_null(self, node):
        return node

    # --------------------------------------------------------------------------------------------------------------
    # variables and statements

    def visit_variable(self, node):
        return self.runtime.get(node.name, node.token)

    def visit_assign(self, node):
        value = node.expr.accept(self)
        self.runtime.assign(node.name, value)
        return value

    def visit_print(self, node):
        self.runtime.println(display(node.expr.accept(self)))
        return nodes.NullPrimitive(node.token)

    def visit_block(self, node):
        last = nodes.NullPrimitive(node.token)
        for statement in node.statements:
            last = statement.accept(self)
            if isinstance(last, Returning):
                return last
        return last

    def visit_if(self, node):
        if is_truthy(node.condition.accept(self)):
            return node.then_branch.accept(self)
        elif node.else_branch is not None:
            return node.else_branch.accept(self)
        return nodes.NullPrimitive(node.token)

    def visit_while(self, node):
        while is_truthy(node.condition.accept(self)):
            result = node.body.accept(self)
            if isinstance(result, Returning):
                return result
        return nodes.NullPrimitive(node.token)

    def visit_for(self, node):
        start = node.start.accept(self)
        end = node.end.accept(self)
        if not is_int(start) or not is_int(end):
            raise ExecutionError("for loop range must be integers", node.token)

        last = nodes.NullPrimitive(node.token)
        for i in range(start.value, end.value + 1):
            self.runtime.set(node.name, nodes.IntegerPrimitive(i, node.token))
            last = node.body.accept(self)
            if isinstance(last, Returning):
                return last
        return last

    # --------------------------------------------------------------------------------------------------------------
    # functions

    def visit_function_def(self, node):
        self.runtime.define_function(node.name, node)
        return nodes.NullPrimitive(node.token)

    def visit_return(self, node):
        if node.expr is None:
            return Returning(nodes.NullPrimitive(node.token))
        return Returning(node.expr.accept(self))

    def visit_call(self, node):
        if not isinstance(node.callee, nodes.Variable):
            raise ExecutionError("can only call functions by name", node.token)

        function_def = self.runtime.get_function(node.callee.name, node.callee.token)
        if len(node.args) != len(function_def.params):
            msg = f"'{function_def.name}' expected {len(function_def.params)} arguments but got {len(node.args)}"
            raise ExecutionError(msg, node.token)

        frame = Runtime(self.runtime.root)
        for param, arg in zip(function_def.params, node.args):
            frame.set(param, arg.accept(self))

        try:
            result = function_def.body.accept(Evaluator(frame))
        except RecursionError:
            raise ExecutionError("maximum recursion depth exceeded", node.token) from None
        if isinstance(result, Returning):
            return result.value
        return nodes.NullPrimitive(node.token)

    # --------------------------------------------------------------------------------------------------------------
    # arithmetic

    def _numeric_operands(self, node, symbol):
        """Evaluates both operands of node. Returns (left, right, is_float) with both values promoted to float if
        either of them is a float.
        """
        left, right = node.left.accept(self), node.right.accept(self)
        if not is_numeric(left) or not is_numeric(right):
            msg = f"'{symbol}' expects numeric operands, got {left.KIND} and {right.KIND}"
            raise ExecutionError(msg, node.token)

        if isinstance(left, nodes.FloatPrimitive) or isinstance(right, nodes.FloatPrimitive):
            try:
                return float(left.value), float(right.value), True
            except OverflowError:
                raise ExecutionError(f"integer operand of '{symbol}' too large for a float", node.token) from None
        return left.value, right.value, False

    @staticmethod
    def _number(value, is_float, token):
        if is_float:
            return nodes.FloatPrimitive(value, token)
        return nodes.IntegerPrimitive(value, token)

    def visit_add(self, node):
        a, b, is_float = self._numeric_operands(node, "+")
        return self._number(a + b, is_float, node.token)

    def visit_subtract(self, node):
        a, b, is_float = self._numeric_operands(node, "-")
        return self._number(a - b, is_float, node.token)

    def visit_multiply(self, node):
        a, b, is_float = self._numeric_operands(node, "*")
        return self._number(a * b, is_float, node.token)

    def visit_divide(self, node):
        a, b, is_float = self._numeric_operands(node, "/")
        if b == 0:
            raise ExecutionError("division by zero", node.token)
        return self._number(a / b if is_float else a // b, is_float, node.token)

    def visit_modulo(self, node):
        a, b = self._int_operands(node, "%")
        if b == 0:
            raise ExecutionError("modulo by zero", node.token)
        return nodes.IntegerPrimitive(a % b, node.token)

    def visit_exponent(self, node):
        a, b, is_float = self._numeric_operands(node, "**")
        try:
            result = a ** b
        except ZeroDivisionError:
            raise ExecutionError("zero raised to a negative power", node.token) from None
        except OverflowError:
            raise ExecutionError("exponent result out of range", node.token) from None

        if isinstance(result, complex):
            raise ExecutionError("negative base raised to a fractional power", node.token)
        return self._number(result, isinstance(result, float), node.token)

    def visit_negate(self, node):
        value = node.expr.accept(self)
        if not is_numeric(value):
            raise ExecutionError(f"'-' expects a numeric operand, got {value.KIND}", node.token)
        return type(value)(-value.value, node.token)

    # --------------------------------------------------------------------------------------------------------------
    # logical

    def visit_and(self, node):
        left = node.left.accept(self)
        return node.right.accept(self) if is_truthy(left) else left

    def visit_or(self, node):
        left = node.left.accept(self)
        return left if is_truthy(left) else node.right.accept(self)

    def visit_not(self, node):
        return nodes.BooleanPrimitive(not is_truthy(node.expr.accept(self)), node.token)

    # --------------------------------------------------------------------------------------------------------------
    # bitwise

    def _int_operands(self, node, symbol):
        left, right = node.left.accept(self), node.right.accept(self)
        if not is_int(left) or not is_int(right):
            msg = f"'{symbol}' expects integer operands, got {left.KIND} and {right.KIND}"
            raise ExecutionError(msg, node.token)
        return left.value, right.value

    def visit_bit_and(self, node):
        a, b = self._int_operands(node, "&")
        return nodes.IntegerPrimitive(a & b, node.token)

    def visit_bit_or(self, node):
        a, b = self._int_operands(node, "|")
        return nodes.IntegerPrimitive(a | b, node.token)

    def visit_bit_xor(self, node):
        a, b = self._int_operands(node, "^")
        return nodes.IntegerPrimitive(a ^ b, node.token)

    def visit_bit_not(self, node):
        value = node.expr.accept(self)
        if not is_int(value):
            raise ExecutionError(f"'~' expects an integer operand, got {value.KIND}", node.token)
        return nodes.IntegerPrimitive(~value.value, node.token)

    def visit_left_shift(self, node):
        a, b = self._int_operands(node, "<<")
        if b < 0:
            raise ExecutionError("shift by negative amount", node.token)
        return nodes.IntegerPrimitive(a << b, node.token)

    def visit_right_shift(self, node):
        a, b = self._int_operands(node, ">>")
        if b < 0:
            raise ExecutionError("shift by negative amount", node.token)
        return nodes.IntegerPrimitive(a >> b, node.token)

    # --------------------------------------------------------------------------------------------------------------
    # relational

    @staticmethod
    def _equal(left, right):
        if is_numeric(left) and is_numeric(right):
            return left.value == right.value
        return type(left) is type(right) and left.value == right.value

    def visit_equals(self, node):
        left, right = node.left.accept(self), node.right.accept(self)
        return nodes.BooleanPrimitive(self._equal(left, right), node.token)

    def visit_not_equals(self, node):
        left, right = node.left.accept(self), node.right.accept(self)
        return nodes.BooleanPrimitive(not self._equal(left, right), node.token)

    def _compare(self, node, symbol, compare):
        left, right = node.left.accept(self), node.right.accept(self)
        if not is_numeric(left) or not is_numeric(right):
            msg = f"'{symbol}' expects numeric operands, got {left.KIND} and {right.KIND}"
            raise ExecutionError(msg, node.token)
        return nodes.BooleanPrimitive(compare(left.value, right.value), node.token)

    def visit_less_than(self, node):
        return self._compare(node, "<", lambda a, b: a < b)

    def visit_less_eq(self, node):
        return self._compare(node, "<=", lambda a, b: a <= b)

    def visit_greater_than(self, node):
        return self._compare(node, ">", lambda a, b: a > b)

    def visit_greater_eq(self, node):
        return self._compare(node, ">=", lambda a, b: a >= b)

    # --------------------------------------------------------------------------------------------------------------
    # casts

    def visit_to_int(self, node):
        value = node.expr.accept(self)
        if not is_numeric(value):
            raise ExecutionError(f"int() expects a float or an int, got {value.KIND}", node.token)
        try:
            return nodes.IntegerPrimitive(int(value.value), node.token)
        except (OverflowError, ValueError):
            raise ExecutionError(f"cannot convert {display(value)} to int", node.token) from None

    def visit_to_float(self, node):
        value = node.expr.accept(self)
        if not is_numeric(value):
            raise ExecutionError(f"float() expects an int or a float, got {value.KIND}", node.token)
        try:
            return nodes.FloatPrimitive(float(value.value), node.token)
        except OverflowError:
            raise ExecutionError(f"cannot convert {display(value)} to float", node.token) from None
