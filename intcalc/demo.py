"""Runs the four reference intcalc programs and prints each one with either its bindings or its error."""

from intcalc.lang.error import ErrorHandler
from intcalc.lang.session import Session


PROGRAMS = [
    "x = 001;",                                # error
    "x_2 = 0;",                                # x_2 = 0
    "x = 0\ny = x;\nz = ---(x+y);",            # error
    "x = 1;\ny = 2;\nz = ---(x+y)*(x+-y);",    # x = 1, y = 2, z = 3
]


def run_demo(programs=PROGRAMS, color=True):
    """Prints an Input/Output block per program. Errors are reported and the next program is run."""
    for program in programs:
        print("Input:")
        print(program)
        print("Output:")

        with ErrorHandler(fatal=False, color=color) as error_handler:
            sess = Session(error_handler, Session.STR_FILE, program)
            sess.run()
            for line in sess.render():
                print(line)

        print()


if __name__ == "__main__":
    run_demo()
