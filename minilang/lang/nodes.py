"""Abstract syntax tree for minilang.

Every node stores the Token it originates from (used for error locations) and implements accept, which calls back the
visitor's handler for that specific node class (double dispatch). Visitor declares one abstract handler per node class,
so a visitor that forgets a node class cannot be instantiated.

Node families:
    - primitives:  IntegerPrimitive, FloatPrimitive, BooleanPrimitive, StringPrimitive, NullPrimitive
    - variables:   Variable, Assign
    - unary:       Negate, Not, BitNot, ToInt, ToFloat
    - binary:      Add, Subtract, Multiply, Divide, Modulo, Exponent, And, Or, BitAnd, BitOr, BitXor, LeftShift,
                   RightShift, Equals, NotEquals, LessThan, LessEq, GreaterThan, GreaterEq
    - statements:  Print, Block, If, While, For, FunctionDef, Return (an expression is its own statement)
    - Call
"""

from abc import ABC, abstractmethod


class Node(ABC):
    """Superclass of all AST nodes. FIELDS names the attributes that make up a node's structure."""
    FIELDS = ()

    def __init__(self, token):
        self.token = token
        self._cls = type(self).__name__

    @abstractmethod
    def accept(self, visitor):
        """Calls the handler of visitor that corresponds to this node's class."""

    def display(self, indents=0):
        """Recursively displays the tree with readable format.

        Format:
        <Node>(
            <field>=<Node>(...),
            <field>=[<Node>(...), ...],
            <field>=<value>
        )
        """
        pad = "    " * indents
        if not any(isinstance(getattr(self, field), (Node, list)) for field in self.FIELDS):
            return pad + repr(self)

        lines = []
        for field in self.FIELDS:
            value = getattr(self, field)
            if isinstance(value, Node):
                lines.append(f"{pad}    {field}=" + value.display(indents + 1).lstrip())
            elif isinstance(value, list) and value and isinstance(value[0], Node):
                items = "\n".join(node.display(indents + 2) + "," for node in value)
                lines.append(f"{pad}    {field}=[\n{items[:-1]}\n{pad}    ]")
            else:
                lines.append(f"{pad}    {field}={value!r}")
        return f"{pad}{self._cls}(\n" + ",\n".join(lines) + f"\n{pad})"

    def __repr__(self):
        fields = ", ".join(f"{field}={getattr(self, field)!r}" for field in self.FIELDS)
        return f"{self._cls}({fields})"

    def __eq__(self, other):
        """Structural equality: tokens are not compared."""
        if type(other) is not type(self):
            return False
        return all(getattr(self, field) == getattr(other, field) for field in self.FIELDS)

    __hash__ = None


# ------------------------------------------------------------------------------------------------------------------
# primitives

class Primitive(Node):
    """Runtime value. Primitives evaluate to themselves."""
    FIELDS = ("value",)
    KIND = "value"

    def __init__(self, value, token):
        super().__init__(token)
        self.value = value


class IntegerPrimitive(Primitive):
    KIND = "int"

    def accept(self, visitor):
        return visitor.visit_integer(self)


class FloatPrimitive(Primitive):
    KIND = "float"

    def accept(self, visitor):
        return visitor.visit_float(self)


class BooleanPrimitive(Primitive):
    KIND = "bool"

    def accept(self, visitor):
        return visitor.visit_boolean(self)


class StringPrimitive(Primitive):
    KIND = "string"

    def accept(self, visitor):
        return visitor.visit_string(self)


class NullPrimitive(Primitive):
    FIELDS = ()
    KIND = "null"

    def __init__(self, token):
        super().__init__(None, token)

    def accept(self, visitor):
        return visitor.visit_null(self)


# ------------------------------------------------------------------------------------------------------------------
# variables

class Variable(Node):
    """Reference to a variable (or, as a Call's callee, a function) by name."""
    FIELDS = ("name",)

    def __init__(self, name, token):
        super().__init__(token)
        self.name = name

    def accept(self, visitor):
        return visitor.visit_variable(self)


class Assign(Node):
    FIELDS = ("name", "expr")

    def __init__(self, name, expr, token):
        super().__init__(token)
        self.name = name
        self.expr = expr

    def accept(self, visitor):
        return visitor.visit_assign(self)


# ------------------------------------------------------------------------------------------------------------------
# operators

class UnaryOperator(Node):
    FIELDS = ("expr",)

    def __init__(self, expr, token):
        super().__init__(token)
        self.expr = expr


class BinaryOperator(Node):
    FIELDS = ("left", "right")

    def __init__(self, left, right, token):
        super().__init__(token)
        self.left = left
        self.right = right


class Negate(UnaryOperator):
    def accept(self, visitor):
        return visitor.visit_negate(self)


class Not(UnaryOperator):
    def accept(self, visitor):
        return visitor.visit_not(self)


class BitNot(UnaryOperator):
    def accept(self, visitor):
        return visitor.visit_bit_not(self)


class ToInt(UnaryOperator):
    def accept(self, visitor):
        return visitor.visit_to_int(self)


class ToFloat(UnaryOperator):
    def accept(self, visitor):
        return visitor.visit_to_float(self)


class Add(BinaryOperator):
    def accept(self, visitor):
        return visitor.visit_add(self)


class Subtract(BinaryOperator):
    def accept(self, visitor):
        return visitor.visit_subtract(self)


class Multiply(BinaryOperator):
    def accept(self, visitor):
        return visitor.visit_multiply(self)


class Divide(BinaryOperator):
    def accept(self, visitor):
        return visitor.visit_divide(self)


class Modulo(BinaryOperator):
    def accept(self, visitor):
        return visitor.visit_modulo(self)


class Exponent(BinaryOperator):
    def accept(self, visitor):
        return visitor.visit_exponent(self)


class And(BinaryOperator):
    def accept(self, visitor):
        return visitor.visit_and(self)


class Or(BinaryOperator):
    def accept(self, visitor):
        return visitor.visit_or(self)


class BitAnd(BinaryOperator):
    def accept(self, visitor):
        return visitor.visit_bit_and(self)


class BitOr(BinaryOperator):
    def accept(self, visitor):
        return visitor.visit_bit_or(self)


class BitXor(BinaryOperator):
    def accept(self, visitor):
        return visitor.visit_bit_xor(self)


class LeftShift(BinaryOperator):
    def accept(self, visitor):
        return visitor.visit_left_shift(self)


class RightShift(BinaryOperator):
    def accept(self, visitor):
        return visitor.visit_right_shift(self)


class Equals(BinaryOperator):
    def accept(self, visitor):
        return visitor.visit_equals(self)


class NotEquals(BinaryOperator):
    def accept(self, visitor):
        return visitor.visit_not_equals(self)


class LessThan(BinaryOperator):
    def accept(self, visitor):
        return visitor.visit_less_than(self)


class LessEq(BinaryOperator):
    def accept(self, visitor):
        return visitor.visit_less_eq(self)


class GreaterThan(BinaryOperator):
    def accept(self, visitor):
        return visitor.visit_greater_than(self)


class GreaterEq(BinaryOperator):
    def accept(self, visitor):
        return visitor.visit_greater_eq(self)


# ------------------------------------------------------------------------------------------------------------------
# statements

class Print(UnaryOperator):
    def accept(self, visitor):
        return visitor.visit_print(self)


class Block(Node):
    FIELDS = ("statements",)

    def __init__(self, statements, token):
        super().__init__(token)
        self.statements = statements

    def accept(self, visitor):
        return visitor.visit_block(self)


class If(Node):
    FIELDS = ("condition", "then_branch", "else_branch")

    def __init__(self, condition, then_branch, else_branch, token):
        super().__init__(token)
        self.condition = condition
        self.then_branch = then_branch
        self.else_branch = else_branch  # None if there is no else branch

    def accept(self, visitor):
        return visitor.visit_if(self)


class While(Node):
    FIELDS = ("condition", "body")

    def __init__(self, condition, body, token):
        super().__init__(token)
        self.condition = condition
        self.body = body

    def accept(self, visitor):
        return visitor.visit_while(self)


class For(Node):
    """for <name> in [<start>, <end>] <body> end. The range is inclusive on both ends."""
    FIELDS = ("name", "start", "end", "body")

    def __init__(self, name, start, end, body, token):
        super().__init__(token)
        self.name = name
        self.start = start
        self.end = end
        self.body = body

    def accept(self, visitor):
        return visitor.visit_for(self)


class FunctionDef(Node):
    FIELDS = ("name", "params", "body")

    def __init__(self, name, params, body, token):
        super().__init__(token)
        self.name = name
        self.params = params  # list of parameter names
        self.body = body

    def accept(self, visitor):
        return visitor.visit_function_def(self)


class Return(Node):
    FIELDS = ("expr",)

    def __init__(self, expr, token):
        super().__init__(token)
        self.expr = expr  # None for a bare return

    def accept(self, visitor):
        return visitor.visit_return(self)


class Call(Node):
    FIELDS = ("callee", "args")

    def __init__(self, callee, args, token):
        super().__init__(token)
        self.callee = callee
        self.args = args

    def accept(self, visitor):
        return visitor.visit_call(self)


# ------------------------------------------------------------------------------------------------------------------
# visitor

class Visitor(ABC):
    """A total function over the node classes above: one handler per class."""

    @abstractmethod
    def visit_integer(self, node): ...

    @abstractmethod
    def visit_float(self, node): ...

    @abstractmethod
    def visit_boolean(self, node): ...

    @abstractmethod
    def visit_string(self, node): ...

    @abstractmethod
    def visit_null(self, node): ...

    @abstractmethod
    def visit_variable(self, node): ...

    @abstractmethod
    def visit_assign(self, node): ...

    @abstractmethod
    def visit_negate(self, node): ...

    @abstractmethod
    def visit_not(self, node): ...

    @abstractmethod
    def visit_bit_not(self, node): ...

    @abstractmethod
    def visit_to_int(self, node): ...

    @abstractmethod
    def visit_to_float(self, node): ...

    @abstractmethod
    def visit_add(self, node): ...

    @abstractmethod
    def visit_subtract(self, node): ...

    @abstractmethod
    def visit_multiply(self, node): ...

    @abstractmethod
    def visit_divide(self, node): ...

    @abstractmethod
    def visit_modulo(self, node): ...

    @abstractmethod
    def visit_exponent(self, node): ...

    @abstractmethod
    def visit_and(self, node): ...

    @abstractmethod
    def visit_or(self, node): ...

    @abstractmethod
    def visit_bit_and(self, node): ...

    @abstractmethod
    def visit_bit_or(self, node): ...

    @abstractmethod
    def visit_bit_xor(self, node): ...

    @abstractmethod
    def visit_left_shift(self, node): ...

    @abstractmethod
    def visit_right_shift(self, node): ...

    @abstractmethod
    def visit_equals(self, node): ...

    @abstractmethod
    def visit_not_equals(self, node): ...

    @abstractmethod
    def visit_less_than(self, node): ...

    @abstractmethod
    def visit_less_eq(self, node): ...

    @abstractmethod
    def visit_greater_than(self, node): ...

    @abstractmethod
    def visit_greater_eq(self, node): ...

    @abstractmethod
    def visit_print(self, node): ...

    @abstractmethod
    def visit_block(self, node): ...

    @abstractmethod
    def visit_if(self, node): ...

    @abstractmethod
    def visit_while(self, node): ...

    @abstractmethod
    def visit_for(self, node): ...

    @abstractmethod
    def visit_function_def(self, node): ...

    @abstractmethod
    def visit_return(self, node): ...

    @abstractmethod
    def visit_call(self, node): ...
