"""Session control: feeds source units through the pipeline in one of three modes, either from a file or from the
interactive shell.

    - lexer:     prints every token of a unit
    - parser:    prints the AST of a unit
    - evaluator: evaluates a unit and prints its value; bindings persist across units

A unit is a run of lines whose (), [] and {} are balanced, so definitions can span several lines.
"""

from simpleinterpreter.core.environment import Environment
from simpleinterpreter.core.evaluator import Evaluator
from simpleinterpreter.core.lexer import Lexer
from simpleinterpreter.core.objects import ErrorObject
from simpleinterpreter.core.parser import Parser
from simpleinterpreter.lang.error import GenericException

BRACKETS = ["()", "[]", "{}"]


def has_open_brackets(line):
    """Whether or not line opens more brackets of some kind than it closes. Brackets inside strings are ignored."""
    code = "".join(line.split("\"")[::2])
    return any(code.count(opening) > code.count(closing) for opening, closing in BRACKETS)


class Session:
    """Governs a session, with a single global environment shared by every unit it evaluates.

    Outside command-line mode the error handler stays fatal: the first unit that fails to parse or evaluate is reported
    and ends the process, so later units of the file never run. The shell reports the error and keeps going.
    """
    SH_FILE = "<in>"  # command-line interpreter filename
    LEXER, PARSER, EVALUATOR = "lexer", "parser", "evaluator"
    MODES = [LEXER, PARSER, EVALUATOR]

    def __init__(self, error_handler, path, mode=EVALUATOR, cmd_line=False, null_on_empty=True):
        if mode not in Session.MODES:
            raise GenericException("unknown mode '{}'", mode)

        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path          # used for error messages
        self.mode = mode
        self.cmd_line = cmd_line  # whether or not in command-line mode

        self.environment = Environment()
        self.evaluator = Evaluator(null_on_empty)
        self.to_run = {}  # dict of line num: unit to run

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            unit = ""
            try:
                with open(path, "r") as file:
                    for line_num, line in enumerate(file):
                        unit, add_to_prev = Session.preprocess_line(line, unit)
                        if unit and not add_to_prev:
                            self.add(unit, line_num + 1)
                            unit = ""
            except OSError:
                raise GenericException("'{}' could not be opened", path)

            if unit:
                self.add(unit, line_num + 1)  # unbalanced tail is still run so that its errors are reported

        elif not cmd_line:
            raise GenericException("'<in>' is a reserved filename")

    @staticmethod
    def preprocess_line(line, prev=""):
        """Joins line onto the unfinished unit prev. Returns the updated unit and whether or not it still needs a line
        continuation.
        """
        line = line.strip()
        if prev:
            line = f"{prev} {line}".strip()
        return line, has_open_brackets(line)

    def add(self, unit, line_num):
        """Queues unit to be run. Nothing is executed until run is called."""
        self.to_run[line_num] = unit

    def run(self):
        """Runs every queued unit in order, printing its output. Raises a GenericException for the first unit that
        fails.
        """
        for line_num, unit in list(self.to_run.items()):
            self.error_handler.register_line(self.path, unit, line_num)

            try:
                print(self.execute(unit))
            finally:
                del self.to_run[line_num]

            self.error_handler.remove_line(self.path)

    def execute(self, unit):
        """Runs unit according to self.mode and returns its textual output."""
        if self.mode == Session.LEXER:
            return "\n".join(str(token) for token in Lexer(unit))

        parser = Parser(Lexer(unit))
        program = parser.parse()
        if program is None:
            raise GenericException("'{}' could not be parsed", unit, details=parser.errors)

        if self.mode == Session.PARSER:
            return str(program)

        result = self.evaluator.run(program, self.environment)
        if isinstance(result, ErrorObject):
            raise GenericException(result.message)
        return str(result)
