"""Mystery function harness: the user tries to reproduce a hidden reference implementation, and both are run against
the same test cases.

A definition file looks like:

```
int int                 ; whitespace-separated parameter types, bound to a, b, c, ... in order
return (a + b) / 2;     ; every following line is the reference implementation
```

Parameters are passed by prefixing an implementation with assignments (`a = 3; b = 4;`, string values are quoted). The
result of a case is the display form of the program's final value, or 'ERROR: ...' if it could not be run.
"""

from dataclasses import dataclass, field
from string import ascii_lowercase
from typing import Optional

from minilang import interpreter
from minilang.lang.error import GenericException
from minilang.lang.evaluator import display
from minilang.lang.runtime import Runtime


@dataclass
class Case:
    """Single test case: parameter values (as typed by the user) with the expected and actual results."""
    params: list
    expected: Optional[str] = None
    actual: Optional[str] = None
    outputs: list = field(default_factory=list)

    @property
    def passed(self):
        return self.actual is not None and self.actual == self.expected


class MysteryFunction:
    PARAM_NAMES = list(ascii_lowercase)

    def __init__(self, param_types, reference):
        if len(param_types) > len(MysteryFunction.PARAM_NAMES):
            raise GenericException(f"at most {len(MysteryFunction.PARAM_NAMES)} parameters are supported")

        self.param_types = param_types
        self.reference = reference
        self.cases = []

    @classmethod
    def load(cls, path):
        """Reads a definition file: parameter types on the first line, reference implementation on the rest."""
        try:
            with open(path, "r") as file:
                lines = file.read().split("\n")
        except OSError:
            raise GenericException(f"mystery function file '{path}' could not be opened", diagnosis=False)

        return cls(lines[0].split(), "\n".join(lines[1:]))

    @property
    def param_names(self):
        return MysteryFunction.PARAM_NAMES[:len(self.param_types)]

    def build_program(self, impl, params):
        """Prefixes impl with one assignment per parameter."""
        if len(params) != len(self.param_types):
            raise GenericException(f"expected {len(self.param_types)} parameters, got {len(params)}")

        assignments = []
        for name, param_type, value in zip(self.param_names, self.param_types, params):
            if param_type == "string":
                value = f"\"{value}\""
            assignments.append(f"{name} = {value};")
        return "\n".join(assignments) + "\n" + impl

    def execute(self, impl, params):
        """Runs impl with params in a fresh runtime. Returns (result, output lines)."""
        runtime = Runtime()
        try:
            value, outputs = interpreter.run(self.build_program(impl, params), runtime)
            return display(value), outputs
        except GenericException as error:
            return f"ERROR: {error.msg}", runtime.outputs

    def add_case(self, params):
        """Adds a case whose expected result comes from the reference implementation."""
        case = Case(list(params))
        case.expected, __ = self.execute(self.reference, case.params)
        self.cases.append(case)
        return case

    def check(self, impl):
        """Runs impl against every case. Returns whether all of them passed, stopping at the first case that errors."""
        all_passed = True
        for case in self.cases:
            case.actual, case.outputs = self.execute(impl, case.params)
            if not case.passed:
                all_passed = False
            if case.actual.startswith("ERROR:"):
                break
        return all_passed

    def table(self):
        """Test cases as tab-separated rows, header first."""
        rows = ["\t".join(self.param_names) + "\t| expected\t| actual"]
        for case in self.cases:
            expected = "N/A" if case.expected is None else case.expected
            actual = "N/A" if case.actual is None else case.actual
            rows.append("\t".join(case.params) + f"\t| {expected}\t| {actual}")
        return rows
