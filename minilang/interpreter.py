"""minilang interpreter.

Basic program flow:
    1. Lexer: breaks source text into Tokens (lang/lexer.py), fails fast with a LexicalError
    2. Parser: builds an AST rooted at an implicit Block (lang/parser.py), collecting one ParseError per malformed
       statement instead of stopping
    3. Evaluator: walks the AST against a Runtime (lang/evaluator.py, lang/runtime.py), printing into the root frame's
       output log

The Translator (lang/translator.py) is an alternate consumer of the AST that renders it back to canonical source.
"""

from minilang.lang.error import ExecutionError
from minilang.lang.evaluator import Evaluator
from minilang.lang.lexer import Lexer
from minilang.lang.parser import Parser
from minilang.lang.runtime import Runtime
from minilang.lang.translator import Translator


def tokenize(source):
    """Returns the Tokens of source. Raises LexicalError."""
    return Lexer(source).tokenize()


def parse(tokens, sink=None):
    """Returns (root Block, list of ParseErrors). sink, if given, is called with each ParseError as it is found."""
    parser = Parser(tokens, sink)
    root = parser.parse()
    return root, parser.diagnostics


def evaluate(root, runtime):
    """Returns (resulting primitive node, None), or (None, ExecutionError) if evaluation failed. Output is left in
    runtime.outputs.
    """
    try:
        return Evaluator(runtime).evaluate(root), None
    except ExecutionError as error:
        return None, error


def render(root):
    """Returns the canonical source text of root."""
    return Translator().render(root)


def run(source, runtime=None):
    """Runs source through the whole pipeline and returns (resulting primitive node, output lines). Raises the
    LexicalError, the first ParseError or the ExecutionError that stopped it.
    """
    if runtime is None:
        runtime = Runtime()

    root, diagnostics = parse(tokenize(source))
    if diagnostics:
        raise diagnostics[0]

    value, error = evaluate(root, runtime)
    if error is not None:
        raise error
    return value, runtime.outputs
