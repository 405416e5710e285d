"""Session control for the intcalc language. A Session owns one binding table (its namespace) and runs programs
against it, either from a file, a string, or the command-line shell.
"""

from intcalc.lang.error import GenericException
from intcalc.lang.lexical import tokenize
from intcalc.lang.numerical import INT_BITS
from intcalc.lang.parser import run as run_tokens


class Session:
    """Governs an intcalc session. The namespace only ever holds the bindings of programs that ran to completion."""
    SH_FILE = "<in>"       # command-line interpreter filename
    STR_FILE = "<string>"  # filename for programs passed in as a string

    def __init__(self, error_handler, path, source=None, cmd_line=False, bits=INT_BITS):
        self.error_handler = error_handler
        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode
        self.bits = bits

        self.namespace = {}  # dict of name: value that exist in the current session
        self.source = source

        if self.cmd_line:
            self.error_handler.fatal = False

        if path == Session.SH_FILE and not cmd_line:
            raise GenericException("'<in>' is a reserved filename", diagnosis=False)

        if source is None and path not in (Session.SH_FILE, Session.STR_FILE):
            try:
                with open(path, "r") as file:
                    self.source = file.read()
            except OSError:
                raise GenericException("'{}' could not be opened", path, diagnosis=False)

    @staticmethod
    def preprocess_line(line, pending=""):
        """Preprocesses a line from the command-line, prepending any pending (unterminated) text. Returns updated value
        of line and whether the statement continues on the next line.
        """
        line = f"{pending}\n{line}" if pending else line
        stripped = line.strip()
        return line, bool(stripped) and not stripped.endswith(";")

    def run(self, source=None):
        """Runs source (or self.source) against a copy of the namespace, and commits it only if the whole program
        succeeded. Returns the new namespace. Any error is raised, leaving the namespace untouched.
        """
        if source is None:
            source = self.source
        if source is None:
            raise GenericException("nothing to run", diagnosis=False, internal=True)

        self.error_handler.register_file(self.path, source)  # in case error is raised

        def overflow(node):
            msg = "integer overflow in '{}' wrapped to {} bits"
            if node.token is None:
                self.error_handler.warn(msg, (node.expr, self.bits), diagnosis=False)
            else:
                token = node.token
                self.error_handler.warn(msg, (node.expr, self.bits), line=token.line, col=token.col,
                                        end=token.col + len(token.value))

        scoped = dict(self.namespace)
        run_tokens(tokenize(source, self.bits), scoped, self.bits, overflow)
        self.namespace = scoped

        self.error_handler.remove_file(self.path)  # error was not raised
        return self.namespace

    def reset(self):
        """Clears the namespace."""
        self.namespace = {}

    def render(self):
        """Returns namespace as 'name = value' lines, in the order names were first bound."""
        return [f"{name} = {value}" for name, value in self.namespace.items()]
