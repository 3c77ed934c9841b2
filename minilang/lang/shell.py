"""Handles interactive/command-line mode for the minilang interpreter. Uses cmd as backend."""

import cmd

from minilang import interpreter
from minilang.lang import nodes
from minilang.lang.evaluator import display
from minilang.lang.session import Session


class Shell(cmd.Cmd):
    """minilang interpreter shell."""
    intro = "minilang interpreter :: Python backend\nType '?' or 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    # statements whose value is not echoed back
    SILENT = (nodes.Assign, nodes.Print, nodes.FunctionDef, nodes.While)

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.sess = sess
        self._tmp_line = ""

    def default(self, line):
        """Executes arbitrary minilang code."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            source = self._tmp_line + line + "\n"

            if not Session.is_complete(source):
                self._tmp_line = source
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            self.sess.add(source)
            for root, value in self.sess.run():
                if root.statements and not isinstance(root.statements[-1], Shell.SILENT):
                    if not isinstance(value, nodes.NullPrimitive):
                        print(display(value))

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the minilang interpreter!\n\n"
              "minilang is a small dynamically-typed scripting language with integers, floats, booleans, strings\n"
              "and null, conditionals, loops and functions. Statements end with ';', blocks end with 'end'.\n\n"
              "Try it out by typing 'x = 6 * 7;'. This will bind 42 to 'x'. Next, try typing\n"
              "'if x > 40 print(\"big\"); end'. Type 'reset' to forget everything, 'translate CODE' to see the\n"
              "canonical form of CODE, and 'exit' to quit.")

    def do_reset(self, arg):
        """Forgets all variables and functions."""
        self.sess.reset()
        self._tmp_line = ""
        self.prompt = self._tmp_prompt

    def do_translate(self, arg):
        """Prints the canonical form of the code given as argument."""
        with self.sess.error_handler:
            self.sess.error_handler.register_source(Session.SH_FILE, arg)
            root, diagnostics = interpreter.parse(interpreter.tokenize(arg), sink=self.sess.error_handler.warn)
            if not diagnostics:
                print(interpreter.render(root))

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
