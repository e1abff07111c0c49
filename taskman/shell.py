"""
TASKMAN - Interactive Shell
===========================
A read-eval-print loop where every line is a taskman command line
without the leading 'taskman'.
"""

import shlex
import sys
from cmd import Cmd
from typing import Optional

from . import __version__

EXIT_COMMANDS = ("exit", "quit", "q")


class TaskmanShell(Cmd):
    """Runs taskman command lines until 'exit' or end of input.

    Attributes:
        home (str):     taskman home directory handed to each command.
    """

    def __init__(self, home: Optional[str] = None, stdin=None, stdout=None):
        super().__init__(stdin=stdin, stdout=stdout)
        if stdin is not None:
            self.use_rawinput = False
        self.home = home
        self.prompt = "taskman> "
        self.intro = f"taskman {__version__}\n\nEnter a command (or 'help', 'exit')\n"
        self.last_status = 0

    # class method overrides
    def default(self, line):
        """Run the line as a taskman command line."""
        from .cli import execute

        try:
            arguments = shlex.split(line)
        except ValueError as e:
            print(f"Cannot parse the command line: {e}", file=sys.stderr)
            self.last_status = 1
            return False

        if arguments and arguments[0].lower() in EXIT_COMMANDS:
            return True
        self.last_status = execute(arguments, home=self.home)
        return False

    def do_help(self, arg):
        """Show taskman usage."""
        return self.default(f"help {arg}".strip())

    def do_EOF(self, arg):
        """Leave the shell at end of input."""
        print()
        return True

    def emptyline(self):
        """Ignore empty line entry."""
