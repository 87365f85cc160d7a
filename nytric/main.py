"""Runs nytric programs from a file or from the command line, using the error handling context manager. Called from
the nytric console script.
"""

import argparse
import os
import sys

from nytric.lang.error import ErrorHandler
from nytric.lang.session import Session


def main(argv=None):
    """Runs the nytric interpreter. Returns the process exit status."""
    parser = argparse.ArgumentParser(prog="nytric", description="nytric language interpreter")
    parser.add_argument("file", help="file to interpret and run", nargs="?")
    parser.add_argument("-c", "--command", help="run COMMAND as a program instead of a file")
    parser.add_argument("--no-color", action="store_true", help="disable colored diagnostics")
    args = parser.parse_args(argv)

    if args.file is None and args.command is None:
        parser.error("either FILE or -c COMMAND is required")

    if args.no_color:
        os.environ["NO_COLOR"] = "1"  # honored by termcolor

    with ErrorHandler() as error_handler:
        if args.command is not None:
            Session(error_handler).run(args.command)
        else:
            Session(error_handler, args.file).run()

    return 0


if __name__ == "__main__":
    sys.exit(main())
