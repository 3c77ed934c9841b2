"""Error handling for the minilang language. Only GenericExceptions should be encountered during running: if another
type of error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Three kinds of language errors exist:
    1. LexicalError: fatal, tokenization stops at the first unrecognized character
    2. ParseError: recoverable, the parser collects one per malformed statement and keeps going
    3. ExecutionError: fatal to the current evaluation, propagates up through the visitor calls
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """Templates an error message so that it can be used to throw a minilang error. start and end are inclusive offsets
    into the source the error was found in.
    """

    def __init__(self, msg, start=None, end=None, diagnosis=True, internal=False):
        super().__init__(msg)
        self.msg = msg
        self.start = start
        self.end = end if end is not None else start
        self.diagnosis = diagnosis and start is not None
        self.internal = internal

    def __str__(self):
        return self.msg


class LexicalError(GenericException):
    """Raised by the Lexer on an unrecognized character or an unterminated string."""

    def __init__(self, msg, offset):
        super().__init__(f"Lexer Error at index {offset}: {msg}", start=offset)
        self.reason = msg
        self.offset = offset


class ParseError(GenericException):
    """Syntax error found by the Parser. The Parser never lets these escape: they are collected as diagnostics."""

    def __init__(self, token, expectation):
        msg = f"Parse Error at token '{token.text}' [{token.start}-{token.end}]: {expectation}"
        super().__init__(msg, start=token.start, end=token.end)
        self.token = token
        self.expectation = expectation


class ExecutionError(GenericException):
    """Runtime error raised while evaluating an AST (type mismatch, undefined name, division by zero, ...)."""

    def __init__(self, msg, token=None):
        if token is not None:
            super().__init__(f"Runtime Error: {msg} at [{token.start}-{token.end}]", start=token.start, end=token.end)
        else:
            super().__init__(f"Runtime Error: {msg}")
        self.reason = msg
        self.token = token


class ErrorHandler:
    """Context manager that will silently suppress Python errors and raise custom minilang errors/warnings."""
    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, fatal=True):
        self.fatal = fatal
        self.sources = {}  # path: source text, insertion-ordered so the newest source is last

    def register_source(self, path, source):
        """Registers source in traceback. Should be called before tokenizing source."""
        self.sources.pop(path, None)
        self.sources[path] = source

    def remove_source(self, path):
        """Removes source from traceback. Should be called after source was run successfully."""
        self.sources.pop(path, None)

    def locate(self, offset):
        """Returns (path, line, line_num, col) of offset in the most recently registered source."""
        if not self.sources:
            return None, "", 0, 0

        path, source = next(reversed(self.sources.items()))
        offset = min(offset, len(source))

        line_start = source.rfind("\n", 0, offset) + 1
        line_end = source.find("\n", offset)
        if line_end == -1:
            line_end = len(source)

        return path, source[line_start:line_end], source.count("\n", 0, offset) + 1, offset - line_start

    def diagnose(self, error, warning=False):
        """Returns offending line of source with the span of error highlighted and underlined."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR
        __, line, __, col = self.locate(error.start)

        end = col + max(error.end - error.start + 1, 1)
        end = max(min(end, len(line)), col + 1)

        diagnosis = "  " + line[:col]
        diagnosis += colored(line[col:end], color, attrs=["bold"])
        diagnosis += line[end:] + "\n"

        diagnosis += "  " + " " * col
        diagnosis += colored("^" + "~" * (end - col - 1), color, attrs=["bold"])

        return diagnosis

    def _header(self, error):
        """Returns 'path:line:col: ' prefix for error, or an empty string if error has no location."""
        if not self.sources or error.start is None:
            return ""
        path, __, line_num, col = self.locate(error.start)
        return colored(f"{path}:{line_num}:{col}: ", attrs=["bold"])

    def warn(self, error):
        """Prints a recoverable error (a parse diagnostic) without exiting."""
        error_msg = self._header(error) + colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        print(error_msg)

        if error.diagnosis and self.sources:
            print(self.diagnose(error))

    def throw(self, error):
        """Throws error using error and the registered sources. error must be a GenericException."""
        error_msg = "" if error.internal else self._header(error)

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        print(error_msg)

        if not error.internal and error.diagnosis and self.sources:
            print(self.diagnose(error))

        if self.fatal:
            sys.exit(1)
        self.sources = {}  # if error occurred, reset traceback (no need if error is fatal)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(GenericException("maximum recursion depth exceeded"))
        elif exc_type is not None and issubclass(exc_type, GenericException):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(GenericException(f"unknown error: '{exc_type.__name__}: {exc_val}'", internal=True))
            do_exit = True

        return not do_exit
