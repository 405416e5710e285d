"""Error handling for the intcalc language. Only GenericExceptions should be encountered during running: if another
type of error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Errors come in three kinds, one per stage of the pipeline:
    1. LexError: malformed or unrecognized character sequence (raised by tokenize)
    2. ParseError: token sequence does not match the grammar
    3. SemanticError: grammatically valid reference to a variable that was never assigned
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """Templates an error/warning message so that it can be used to throw an intcalc error/warning. The message is
    kept plain; colouring happens when ErrorHandler renders it.
    """
    kind = "error"

    def __init__(self, msg, exprs=None, line=0, col=0, end=-1, diagnosis=True, internal=False):
        """Parses args for GenericException or warning. line and col are 1-based and point at the offending token,
        end is the column right after it (defaults to one past col).
        """
        if exprs is None:
            exprs = ""
        if isinstance(exprs, str):
            exprs = [exprs]

        self.template = msg
        self.exprs = [str(expr) for expr in exprs]
        self.msg = msg.format(*self.exprs)
        super().__init__(self.msg)

        self.line = line
        self.col = col
        self.end = end if end != -1 else col + 1  # needed for error display

        self.diagnosis = diagnosis
        self.internal = internal

    @classmethod
    def at(cls, token, msg, exprs=None, **kwargs):
        """Builds an error positioned on token (anything with line, col and value attributes)."""
        end = token.col + max(len(token.value), 1)
        return cls(msg, exprs, line=token.line, col=token.col, end=end, **kwargs)

    def styled(self, color=True):
        """Message with expr snippets in bold."""
        if not color:
            return self.msg
        return self.template.format(*(colored(expr, attrs=["bold"]) for expr in self.exprs))


class LexError(GenericException):
    kind = "lexical error"


class ParseError(GenericException):
    kind = "syntax error"


class SemanticError(GenericException):
    kind = "semantic error"


class ErrorHandler:
    """Context manager that will silently suppress Python errors and raise custom intcalc errors/warnings."""
    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, fatal=True, color=True):
        self.fatal = fatal
        self.color = color
        self.traceback = {}

    def register_file(self, path, source=None):
        """Registers path (and the source text being run from it) in traceback."""
        self.traceback[path] = source

    def remove_file(self, path):
        """Removes path from traceback. Should be called after a successful Session run."""
        self.traceback.pop(path, None)

    def _colored(self, text, color=None, attrs=None):
        return colored(text, color, attrs=attrs, no_color=not self.color)

    def diagnose(self, error, source, warning=False):
        """Returns offending line of source with the offending token highlighted and underlined."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        lines = source.splitlines()
        if not 0 < error.line <= len(lines):
            return ""  # end of input, nothing to point at
        line = lines[error.line - 1].expandtabs(1)

        start = error.col - 1
        end = max(error.end - 1, start + 1)

        diagnosis = "  " + line[:start]
        diagnosis += self._colored(line[start:end], color, attrs=["bold"])
        diagnosis += line[end:] + "\n"

        diagnosis += "  " + " " * start
        diagnosis += self._colored("^" + "~" * (end - start - 1), color, attrs=["bold"])

        return diagnosis

    def _location(self, error):
        """Returns '<file>:<line>:<col>: ' for the most recently registered file, if any."""
        if not self.traceback:
            return ""
        path = next(reversed(self.traceback))  # assumes dict is insertion-ordered
        if error.line:
            return self._colored(f"{path}:{error.line}:{error.col}: ", attrs=["bold"])
        return self._colored(f"{path}: ", attrs=["bold"])

    def _source(self):
        if not self.traceback:
            return None
        return self.traceback[next(reversed(self.traceback))]

    def warn(self, *args, **kwargs):
        """Generates and prints runtime warning message based on args."""
        error = GenericException(*args, **kwargs)

        error_msg = self._location(error)
        error_msg += self._colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + error.styled(self.color)
        print(error_msg)

        source = self._source()
        if error.diagnosis and error.line and source:
            diagnosis = self.diagnose(error, source, warning=True)
            if diagnosis:
                print(diagnosis)

    def throw(self, error):
        """Throws error using error and self.traceback. error must be a GenericException, and self.traceback must be a
        dict of file: source representing origination of error.
        """
        error_msg = self._location(error)

        if error.internal:
            error_msg += self._colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += self._colored(f"{error.kind}: ", ErrorHandler.ERROR, attrs=["bold"]) + error.styled(self.color)
        print(error_msg)

        source = self._source()
        if not error.internal and error.diagnosis and error.line and source:
            diagnosis = self.diagnose(error, source)
            if diagnosis:  # empty past the last line
                print(diagnosis)

        if self.fatal:
            sys.exit(1)
        self.traceback = {}  # if error occurred, reset traceback (no need if error is fatal)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt", diagnosis=False))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(GenericException("expression nested too deeply", diagnosis=False))
        elif exc_type is not None and issubclass(exc_type, GenericException):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(GenericException(f"unknown error: '{exc_type.__name__}: {exc_val}'", internal=True))
            do_exit = True

        return not do_exit
