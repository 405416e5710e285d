"""Handles interactive/command-line mode for intcalc interpreter. Uses cmd as backend."""

import cmd


class Shell(cmd.Cmd):
    """Integer calculator shell."""
    intro = "intcalc interpreter :: Python backend\nType '?' or 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continutations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""

    def default(self, line):
        """Executes arbitrary intcalc statements."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            line, add_to_prev = self.sess.preprocess_line(line, self._tmp_line)

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            if line.strip():
                self.sess.run(line)

    def _is_statement(self, arg):
        """Whether a command's arg shows the line is really an assignment to a variable named like the command."""
        return arg.lstrip().startswith("=") or bool(self._tmp_line)

    def do_vars(self, arg):
        """Prints every bound variable."""
        if self._is_statement(arg):
            return self.default(f"vars {arg}")
        for line in self.sess.render():
            print(line)

    def do_reset(self, arg):
        """Forgets every bound variable."""
        if self._is_statement(arg):
            return self.default(f"reset {arg}")
        self.sess.reset()

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        if self._is_statement(arg):
            return self.default(f"help {arg}")
        print("Welcome to the intcalc interpreter!\n\n"
              "Programs are sequences of assignments over integers, each ending with ';'. \n"
              "Expressions support +, -, *, unary signs and parentheses. Values are \n"
              "fixed-width signed integers that wrap around on overflow.\n\n"
              "Try it out by typing 'x = 1 + 2 * 3;'. This will bind 7 to 'x'. Next, try \n"
              "typing 'y = -(x - 10);' and then 'vars' to see every binding. 'reset' \n"
              "forgets all of them.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        if arg and self._is_statement(arg):  # a bare EOF is the real end of input, even mid-statement
            return self.default(f"EOF {arg}")
        print()
        return True

    def do_exit(self, arg):
        """Exits interpreter."""
        if self._is_statement(arg):
            return self.default(f"exit {arg}")
        return True
