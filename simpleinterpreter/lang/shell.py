"""Handles interactive/command-line mode for the interpreter. Uses cmd as backend."""

import cmd

from simpleinterpreter.core.builtin_functions import builtin_table


class Shell(cmd.Cmd):
    """Interpreter shell."""
    intro = "Simple interpreter :: Python backend\nType 'help' for more information."
    prompt = ">> "
    secondary_prompt = ".. "  # used for line continuations
    _tmp_prompt = ">> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self.line_num = 0

    def default(self, line):
        """Runs an arbitrary line, or queues it until its brackets are balanced."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            line, add_to_prev = self.sess.preprocess_line(line, self._tmp_line)

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
            else:
                self._tmp_line = ""
                self.prompt = self._tmp_prompt

                self.sess.add(line, self.line_num)
                self.sess.run()

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro and the builtin functions."""
        print("Welcome to the simple interpreter!\n\n"
              "Integers, booleans, strings, arrays and first-class functions are supported, along with\n"
              "'let' bindings, 'if'/'else', 'while', 'return' and closures. Statements need no separator.\n\n"
              "Try it out by typing 'let add = fn(a, b) { a + b }' and then 'add(1, 2)'.\n"
              "Lines with unbalanced brackets are continued on the next line.\n\n"
              "Builtin functions:")
        for builtin in builtin_table().values():
            print(f"  {builtin}")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
