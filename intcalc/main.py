"""Uses the intcalc language implementation to interpret intcalc files/strings or run in command-line mode. Also uses
error handling context manager. Called from the intcalc console script.
"""

import argparse

from intcalc.demo import run_demo
from intcalc.lang.error import ErrorHandler
from intcalc.lang.numerical import INT_BITS, SUPPORTED_BITS
from intcalc.lang.session import Session
from intcalc.lang.shell import Shell


def main(argv=None):
    """Runs intcalc interpreter. Called from intcalc console script."""
    with ErrorHandler() as error_handler:
        parser = argparse.ArgumentParser(prog="intcalc", description="Interpreter for integer assignment programs.")
        parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
        parser.add_argument("-c", "--command", help="program passed in as a string")
        parser.add_argument("--int-bits", type=int, default=INT_BITS, choices=SUPPORTED_BITS,
                            help=f"width of signed integers (default: {INT_BITS})")
        parser.add_argument("--no-color", action="store_true", help="disable coloured diagnostics")
        parser.add_argument("--demo", action="store_true", help="run the bundled example programs")
        args = parser.parse_args(argv)

        error_handler.color = not args.no_color

        if args.demo:
            run_demo(color=error_handler.color)

        elif args.command is not None or args.file is not None:
            if args.command is not None:
                sess = Session(error_handler, Session.STR_FILE, args.command, bits=args.int_bits)
            else:
                sess = Session(error_handler, args.file, bits=args.int_bits)
            sess.run()

            for line in sess.render():
                print(line)

        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True, bits=args.int_bits)).cmdloop()


if __name__ == "__main__":
    main()
