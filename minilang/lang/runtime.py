"""Runtime environment for minilang: a chain of variable frames. The root frame (the one without an enclosing frame)
also owns the ordered output log and the function table of the program run; every other frame reaches them by walking
up to the root.
"""

from minilang.lang.error import ExecutionError


class Runtime:
    """Single scope frame. Runtime() creates a root frame, Runtime(enclosing) a frame nested in enclosing."""

    def __init__(self, enclosing=None):
        self.enclosing = enclosing
        self.vars = {}  # name: primitive node

        if enclosing is None:
            self._outputs = []    # rendered print lines, in order
            self._functions = {}  # name: FunctionDef node

    @property
    def root(self):
        frame = self
        while frame.enclosing is not None:
            frame = frame.enclosing
        return frame

    @property
    def is_root(self):
        return self.enclosing is None

    def get(self, name, token=None):
        """Returns the value bound to name in the nearest frame that defines it."""
        frame = self
        while frame is not None:
            if name in frame.vars:
                return frame.vars[name]
            frame = frame.enclosing
        raise ExecutionError(f"Undefined variable '{name}'", token)

    def set(self, name, value):
        """Binds name to value in this frame. The last write wins."""
        self.vars[name] = value

    def assign(self, name, value):
        """Rebinds name in the nearest frame that defines it, or binds it in this frame if no frame does."""
        frame = self
        while frame is not None:
            if name in frame.vars:
                frame.vars[name] = value
                return
            frame = frame.enclosing
        self.vars[name] = value

    def println(self, text):
        """Appends a line of text to the root's output log."""
        self.root._outputs.append(text)

    @property
    def outputs(self):
        """Copy of the root's output log."""
        return list(self.root._outputs)

    def define_function(self, name, function_def):
        """Stores function_def in the root's function table, overwriting any previous definition of name."""
        self.root._functions[name] = function_def

    def get_function(self, name, token=None):
        try:
            return self.root._functions[name]
        except KeyError:
            raise ExecutionError(f"Undefined function '{name}'", token) from None

    @property
    def functions(self):
        """Copy of the root's function table."""
        return dict(self.root._functions)

    def reset(self, variables=False, functions=False):
        """Clears the root's output log between independent runs. Optionally also forgets the root's variables and the
        function table.
        """
        root = self.root
        root._outputs.clear()
        if variables:
            root.vars.clear()
        if functions:
            root._functions.clear()

    def __repr__(self):
        return f"Runtime(vars={self.vars!r}, root={self.is_root})"
