"""Session control for minilang. Drives the lexer/parser/evaluator pipeline, either in file interpretation mode or in
command-line mode, and reports problems through the session's ErrorHandler.
"""

from minilang.interpreter import parse, render, tokenize
from minilang.lang.error import GenericException
from minilang.lang.evaluator import Evaluator
from minilang.lang.runtime import Runtime
from minilang.lang.tokens import TokenKind


class Session:
    """Governs a minilang session. Every program added to a session shares one root Runtime, so variables and functions
    defined by one run are visible to the next (the output log is cleared in between).
    """
    OPENERS = (TokenKind.IF, TokenKind.WHILE, TokenKind.FOR, TokenKind.FUNCTION, TokenKind.LEFT_BRACE)
    CLOSERS = (TokenKind.END, TokenKind.RIGHT_BRACE)

    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler, path, cmd_line=False):
        self.error_handler = error_handler

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode

        self.runtime = Runtime()
        self.to_exec = []   # parsed programs (root Blocks) waiting to be run
        self.results = []   # output lines of every run so far, in order

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            try:
                with open(path, "r") as file:
                    source = file.read()
            except OSError:
                raise GenericException(f"'{path}' could not be opened", diagnosis=False)

            self.add(source)

        elif not cmd_line:
            raise GenericException("'<in>' is a reserved filename")

    @staticmethod
    def is_complete(source):
        """Whether or not source can be parsed as is. In command-line mode, lines are accumulated until this holds:
        every if/while/for/function must be closed by an 'end' and every '{' by a '}'.
        """
        try:
            tokens = tokenize(source)
        except GenericException:
            return True  # let add report it

        depth = 0
        for token in tokens:
            if token.kind in Session.OPENERS:
                depth += 1
            elif token.kind in Session.CLOSERS:
                depth -= 1
        return depth <= 0

    def add(self, source):
        """Tokenizes and parses source, reporting every syntax error. Evaluation is delayed until run is called; a
        program with syntax errors is never run.
        """
        self.error_handler.register_source(self.path, source)  # in case error is raised

        root, diagnostics = parse(tokenize(source), sink=self.error_handler.warn)
        if diagnostics:
            plural = "s" if len(diagnostics) > 1 else ""
            raise GenericException(f"'{self.path}' not run: {len(diagnostics)} syntax error{plural}", diagnosis=False)

        self.to_exec.append(root)
        return root

    def run(self):
        """Runs this session's pending programs in order and returns [(root, value), ...]. Output lines are printed (and
        kept in self.results) even if a runtime error is raised partway.
        """
        ran = []
        while self.to_exec:
            root = self.to_exec.pop(0)
            try:
                ran.append((root, Evaluator(self.runtime).evaluate(root)))
            finally:
                outputs = self.runtime.outputs
                self.runtime.reset()
                self.results.extend(outputs)
                for line in outputs:
                    print(line)

        self.error_handler.remove_source(self.path)  # error was not raised
        return ran

    def translate(self):
        """Canonical source of this session's pending programs."""
        return "\n".join(render(root) for root in self.to_exec)

    def reset(self):
        """Forgets all variables, functions and pending programs."""
        self.runtime = Runtime()
        self.to_exec = []
        self.results = []
