"""Runs a source file, or the interactive shell if no file is given. Also uses the error handling context manager.
Installed as the `simpleinterpreter` console script.
"""

import argparse
import sys

from simpleinterpreter.lang.error import ErrorHandler
from simpleinterpreter.lang.session import Session
from simpleinterpreter.lang.shell import Shell

# every call in the language takes about ten host frames
DEFAULT_RECURSION_LIMIT = 20000


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="A simple language interpreter")
    parser.add_argument("file", help="file to run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("-m", "--mode", choices=Session.MODES, default=Session.EVALUATOR,
                        help="print tokens, print the syntax tree or evaluate (default: %(default)s)")
    parser.add_argument("--empty-sequences", choices=["null", "empty"], default="null",
                        help="what first/rest return for an empty array or string (default: %(default)s)")
    parser.add_argument("--recursion-limit", type=int, default=DEFAULT_RECURSION_LIMIT,
                        help="host recursion limit, bounds how deep user functions may recurse (default: %(default)s)")
    return parser.parse_args(argv)


def main(argv=None):
    """Runs the interpreter. Called from the simpleinterpreter console script."""
    with ErrorHandler() as error_handler:
        args = parse_args(argv)

        sys.setrecursionlimit(args.recursion_limit)

        null_on_empty = args.empty_sequences == "null"

        if args.file is not None:
            sess = Session(error_handler, args.file, args.mode, cmd_line=False, null_on_empty=null_on_empty)
            sess.run()

        else:
            sess = Session(error_handler, Session.SH_FILE, args.mode, cmd_line=True, null_on_empty=null_on_empty)
            Shell(sess).cmdloop()


if __name__ == "__main__":
    main()
