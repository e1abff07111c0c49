#!/usr/bin/env python3
"""
TASKMAN - CLI Interface
=======================
Command-line tool for managing a to-do list.

Usage:
    taskman add Pay the loan --priority critical --due "next friday"
    taskman show --pending --orderby priority-id+
    taskman fin --id 3
    taskman update priority important --id 4-6
    taskman delete --finished
    taskman renumber
    taskman config sortorder isfinished+priority-id+

Command and flag names may be abbreviated to any unambiguous prefix.
"""

import logging
import sys
import traceback
from typing import Callable, List, Optional, Sequence

from rich.console import Console

from . import __version__
from .commands import CommandContext, build_commands
from .config import CONFIG_FILE, TASKS_SUBDIR, ConfigStore, taskman_home
from .exceptions import TaskmanError, UnknownNameError, AmbiguousNameError
from .flags import FlagSet
from .manager import TaskManager

logger = logging.getLogger("taskman")

DEFAULT_COMMAND = "show"


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def decapitalise(text: str) -> str:
    return text[:1].lower() + text[1:]


def usage_text(flags: FlagSet, arguments: Sequence[str] = ()) -> str:
    """General usage, or the usage of the command named in the arguments"""
    commands = build_commands(flags)

    if arguments:
        try:
            command = commands.resolve(arguments[0])
        except (UnknownNameError, AmbiguousNameError):
            command = None
        if command is not None:
            lines = [
                f"{command.description}.",
                "",
                f"Usage: {command.usage}",
                f"Aliases: {', '.join(command.aliases)}",
            ]
            if command.supported:
                lines.append("")
                lines.append("Flags:")
                for flag in command.supported:
                    lines.append(f"  {flag.usage:<32} {flag.description}")
            if command.is_read_update_delete:
                lines.append("")
                lines.append("Filters combine; --skip and --limit count positions after the other filters.")
            return "\n".join(lines)

    lines = [
        f"taskman {__version__} - command line to-do list",
        "",
        "Usage: taskman <command> [--flag[=value]]... [arguments]",
        "",
        "Commands:",
    ]
    for command in commands:
        lines.append(f"  {command.name:<10} {command.description} ({', '.join(command.aliases)})")
    lines.extend(["", "Flags:"])
    for flag in flags:
        lines.append(f"  {flag.usage:<32} {flag.description}")
    lines.extend([
        "",
        "Commands and flags may be abbreviated. Type 'taskman help <command>' for details.",
    ])
    return "\n".join(lines)


def execute(
    arguments: Sequence[str],
    home: Optional[str] = None,
    prompt: Callable[[str], str] = input,
    console: Optional[Console] = None,
    today=None,
) -> int:
    """Run one taskman command line and return its exit status"""
    operation = "parse the command line"
    flags = FlagSet(today)

    try:
        residual: List[str] = flags.scan(arguments)
        configure_logging(flags.verbose.get(False))
        flags.log_abbreviations()

        if flags.version.get(False):
            print(f"taskman version {__version__}")
            return 0

        operation = "recognize the command"
        commands = build_commands(flags)
        if residual:
            command = commands.resolve(residual[0])
            command_arguments = residual[1:]
        else:
            command = commands.get(DEFAULT_COMMAND)
            command_arguments = []

        if flags.help.get(False):
            print(usage_text(flags, [command.name] if residual else []))
            return 0

        operation = command.operation
        command.validate(flags, commands.global_flags)

        home_path = taskman_home(home)
        context = CommandContext(
            flags=flags,
            arguments=command_arguments,
            manager=TaskManager(str(home_path / TASKS_SUBDIR)),
            config=ConfigStore(home_path / CONFIG_FILE),
            console=console or Console(),
            prompt=prompt,
            today=today,
        )
        logger.debug(f"Running {command.name} with {flags.set_flags} and arguments {command_arguments}")
        command.run(context)

    except TaskmanError as e:
        print(f"Cannot {operation}: {decapitalise(e.message)}", file=sys.stderr)
        if flags.verbose.get(False):
            traceback.print_exc(file=sys.stderr)
        return 1

    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    return execute(sys.argv[1:] if argv is None else argv)


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    sys.exit(main())
