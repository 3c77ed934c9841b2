"""Uses the minilang interpreter to run program files, run in command-line mode, render canonical source or check a
mystery function implementation. Also uses the error handling context manager. Called from the minilang console script.
"""

import argparse
import os

from termcolor import colored

from minilang.lang.error import ErrorHandler, GenericException
from minilang.lang.mystery import MysteryFunction
from minilang.lang.session import Session
from minilang.lang.shell import Shell


def build_parser():
    parser = argparse.ArgumentParser(prog="minilang")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("--translate", help="print the canonical form of file instead of running it",
                        action="store_true")
    parser.add_argument("--ast", help="print the syntax tree of file instead of running it", action="store_true")
    parser.add_argument("--no-color", help="disable colored diagnostics", action="store_true")
    parser.add_argument("--mystery", help="mystery function definition file to check file against",
                        metavar="DEFINITION")
    parser.add_argument("--case", help="parameter values of one mystery function test case (repeatable)",
                        action="append", nargs="+", default=[], metavar="VALUE")
    return parser


def check_mystery(definition, path, cases):
    """Runs the implementation in path against every case of the mystery function in definition."""
    mystery = MysteryFunction.load(definition)
    try:
        with open(path, "r") as file:
            impl = file.read()
    except OSError:
        raise GenericException(f"'{path}' could not be opened", diagnosis=False)

    for params in cases:
        mystery.add_case(params)

    passed = mystery.check(impl)
    for row in mystery.table():
        print(row)

    if passed:
        print(colored("Success! All test cases passed.", "green", attrs=["bold"]))
    else:
        print(colored("Some test cases failed.", ErrorHandler.ERROR, attrs=["bold"]))
    return passed


def main(argv=None):
    """Runs minilang interpreter. Called from minilang executable script."""
    args = build_parser().parse_args(argv)
    if args.no_color:
        os.environ["NO_COLOR"] = "1"

    with ErrorHandler() as error_handler:
        if args.mystery is not None:
            if args.file is None:
                raise GenericException("--mystery expects an implementation FILE", diagnosis=False)
            if not check_mystery(args.mystery, args.file, args.case):
                raise SystemExit(1)

        elif args.file is not None:
            sess = Session(error_handler, args.file, cmd_line=False)
            if args.translate:
                print(sess.translate())
            elif args.ast:
                print("\n".join(root.display() for root in sess.to_exec))
            else:
                sess.run()

        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True)).cmdloop()


if __name__ == "__main__":
    main()
