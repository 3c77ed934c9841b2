"""Renders an AST back to canonical minilang source. Does not evaluate anything and cannot fail.

Canonical form:
    - binary and unary operators are fully parenthesized: (1 + (2 * 3)), (-x)
    - casts use call syntax: int(x), float(x)
    - strings are re-quoted, with '"' and '\\' escaped by a backslash
    - blocks are braces around one statement per (indented) line, bodies of if/while/for/function are blocks
    - print, return and expression statements are terminated by ';'

Rendered text lexes and parses back to a tree that evaluates to the same value and output.
"""

from decimal import Decimal

from minilang.lang import nodes


class Translator(nodes.Visitor):
    INDENT = "    "

    # statements that the grammar terminates with "end" or "}" instead of ";"
    SELF_TERMINATED = (nodes.Block, nodes.If, nodes.While, nodes.For, nodes.FunctionDef)

    def render(self, node):
        return node.accept(self)

    # --------------------------------------------------------------------------------------------------------------
    # primitives

    def visit_integer(self, node):
        return str(node.value)

    def visit_float(self, node):
        text = repr(node.value)
        if "e" in text:
            text = format(Decimal(text), "f")  # re-lexable positional notation
        if "." not in text and text[-1].isdigit():
            text += ".0"
        return text

    def visit_boolean(self, node):
        return "true" if node.value else "false"

    def visit_string(self, node):
        escaped = node.value.replace("\\", "\\\\").replace("\"", "\\\"")
        return f"\"{escaped}\""

    def visit_null(self, node):
        return "null"

    # --------------------------------------------------------------------------------------------------------------
    # variables and statements

    def visit_variable(self, node):
        return node.name

    def visit_assign(self, node):
        return f"{node.name} = {node.expr.accept(self)}"

    def visit_print(self, node):
        return f"print({node.expr.accept(self)})"

    def visit_block(self, node):
        if not node.statements:
            return "{\n}"
        lines = []
        for statement in node.statements:
            text = statement.accept(self)
            if not isinstance(statement, Translator.SELF_TERMINATED):
                text += ";"
            lines.extend(Translator.INDENT + line for line in text.split("\n"))
        return "{\n" + "\n".join(lines) + "\n}"

    def visit_if(self, node):
        text = f"if {node.condition.accept(self)} {node.then_branch.accept(self)}"
        if node.else_branch is not None:
            text += f" else {node.else_branch.accept(self)}"
        return text + " end"

    def visit_while(self, node):
        return f"while {node.condition.accept(self)} {node.body.accept(self)} end"

    def visit_for(self, node):
        start, end = node.start.accept(self), node.end.accept(self)
        return f"for {node.name} in [{start}, {end}] {node.body.accept(self)} end"

    def visit_function_def(self, node):
        return f"function {node.name}({', '.join(node.params)}) {node.body.accept(self)} end"

    def visit_return(self, node):
        if node.expr is None:
            return "return"
        return f"return {node.expr.accept(self)}"

    def visit_call(self, node):
        args = ", ".join(arg.accept(self) for arg in node.args)
        return f"{self._operand(node.callee)}({args})"

    # --------------------------------------------------------------------------------------------------------------
    # operators

    def _operand(self, node):
        """Assignments are the only expressions that are not self-delimiting, so they are wrapped as operands."""
        if isinstance(node, nodes.Assign):
            return f"({node.accept(self)})"
        return node.accept(self)

    def _binary(self, symbol, node):
        return f"({self._operand(node.left)} {symbol} {self._operand(node.right)})"

    def _unary(self, symbol, node):
        return f"({symbol}{self._operand(node.expr)})"

    def visit_negate(self, node):
        return self._unary("-", node)

    def visit_not(self, node):
        return self._unary("!", node)

    def visit_bit_not(self, node):
        return self._unary("~", node)

    def visit_to_int(self, node):
        return f"int({node.expr.accept(self)})"

    def visit_to_float(self, node):
        return f"float({node.expr.accept(self)})"

    def visit_add(self, node):
        return self._binary("+", node)

    def visit_subtract(self, node):
        return self._binary("-", node)

    def visit_multiply(self, node):
        return self._binary("*", node)

    def visit_divide(self, node):
        return self._binary("/", node)

    def visit_modulo(self, node):
        return self._binary("%", node)

    def visit_exponent(self, node):
        return self._binary("**", node)

    def visit_and(self, node):
        return self._binary("&&", node)

    def visit_or(self, node):
        return self._binary("||", node)

    def visit_bit_and(self, node):
        return self._binary("&", node)

    def visit_bit_or(self, node):
        return self._binary("|", node)

    def visit_bit_xor(self, node):
        return self._binary("^", node)

    def visit_left_shift(self, node):
        return self._binary("<<", node)

    def visit_right_shift(self, node):
        return self._binary(">>", node)

    def visit_equals(self, node):
        return self._binary("==", node)

    def visit_not_equals(self, node):
        return self._binary("!=", node)

    def visit_less_than(self, node):
        return self._binary("<", node)

    def visit_less_eq(self, node):
        return self._binary("<=", node)

    def visit_greater_than(self, node):
        return self._binary(">", node)

    def visit_greater_eq(self, node):
        return self._binary(">=", node)
