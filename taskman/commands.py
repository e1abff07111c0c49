"""
TASKMAN - Command Registry
==========================
Verb commands (add, show, update, finish, reopen, delete, ...), the flags
each one accepts, validation of an invocation, and the command actions.

Read/update/delete commands work on a selection: the task list sorted by
the active sort order, then narrowed by the set filter flags. Destructive
ones refuse to run without either a filter or an explicit --all.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

from pydantic import ValidationError
from rich.console import Console

from .config import ConfigStore
from .duedate import parse_due_date
from .exceptions import (
    FilterConflictsWithApplyAllError,
    MissingArgumentError,
    MissingDescriptionError,
    MissingRequiredFlagError,
    NoExplicitFilterError,
    TaskListReadError,
    UnexpectedArgumentsError,
    UnsupportedFlagForCommandError,
)
from .flags import Flag, FlagSet, compose_filters
from .manager import TaskManager
from .parsing import parse_bool, parse_priority
from .prototype import resolve, split_prototype
from .render import Format, parse_format, render_tasks
from .schema import Priority, Task, TaskList
from .sorting import SortStep, parse_sort_order, sort_tasks

logger = logging.getLogger("taskman")

NO_TASKS_MATCH = "There are no tasks matching the given conditions."
TASK_LIST_IS_EMPTY = "The task list is empty."
CONFIRMATION_PROMPT = "Confirm (y[es]/n[o]): "
CANCELLED = "Cancelled."

CLEAR_DUE_DATE = ("none", "never")


@dataclass
class CommandContext:
    """Everything a command action needs for one invocation"""
    flags: FlagSet
    arguments: List[str]
    manager: TaskManager
    config: ConfigStore
    console: Console = field(default_factory=Console)
    prompt: Callable[[str], str] = input
    today: Optional[date] = None
    _task_list: Optional[TaskList] = None

    @property
    def task_list(self) -> TaskList:
        if self._task_list is None:
            self._task_list = self.manager.load(self.config.get("list"))
        return self._task_list

    @property
    def sort_order(self) -> List[SortStep]:
        if self.flags.orderby.is_set:
            return self.flags.orderby.value
        configured = self.config.get("sortorder")
        return parse_sort_order(configured) if configured else []

    @property
    def output_format(self) -> Format:
        if self.flags.format.is_set:
            return self.flags.format.value
        return parse_format(self.config.get("format") or Format.TEXT.value)

    def save(self) -> None:
        self.manager.save(self.task_list, self.sort_order)

    def select(self) -> List[Task]:
        """Sort the task list and run it through the set filters"""
        ordered = sort_tasks(self.task_list.tasks, self.sort_order)
        return compose_filters(self.flags.filters, ordered)

    def confirm(self, tasks: Sequence[Task], action: str) -> bool:
        """With --interactive, show the affected tasks and ask before going on"""
        if not self.flags.interactive.get(False):
            return True
        print(f"The following task(s) will be {action}:")
        render_tasks(list(tasks), Format.TEXT, self.console)
        answer = self.prompt(CONFIRMATION_PROMPT)
        if answer.strip().lower() in ("y", "yes"):
            return True
        print(CANCELLED)
        return False


class Command:
    """A taskman verb command"""

    def __init__(
        self,
        name: str,
        prototype: str,
        description: str,
        operation: str,
        action: Callable[[CommandContext], None],
        supported: Sequence[Flag] = (),
        required: Sequence[Flag] = (),
        is_read_update_delete: bool = False,
        needs_selection: bool = False,
        usage: str = "",
    ):
        self.name = name
        self.prototype = prototype
        self.aliases = split_prototype(prototype)
        self.description = description
        self.operation = operation
        self.action = action
        self.supported = list(supported)
        self.required = list(required)
        self.is_read_update_delete = is_read_update_delete
        self.needs_selection = needs_selection
        self.usage = usage or name

    def __repr__(self) -> str:
        return f"Command({self.name})"

    def validate(self, flags: FlagSet, global_flags: Sequence[Flag] = ()) -> None:
        """Check the set flags against this command before anything runs"""
        allowed = set(self.supported) | set(self.required) | set(global_flags)

        for flag in flags.set_flags:
            if flag not in allowed:
                raise UnsupportedFlagForCommandError(flag.name, self.name)

        for flag in self.required:
            if not flag.is_set:
                raise MissingRequiredFlagError(flag.name, self.name)

        set_filters = flags.set_filters
        if flags.all.get(False) and set_filters:
            raise FilterConflictsWithApplyAllError(flag.name for flag in set_filters)

        if self.needs_selection and not flags.all.get(False) and not set_filters:
            raise NoExplicitFilterError(self.name)

    def run(self, context: CommandContext) -> None:
        self.action(context)


class CommandRegistry:
    """The commands of one invocation, bound to its flags"""

    def __init__(self, commands: Sequence[Command], global_flags: Sequence[Flag] = ()):
        seen: Dict[str, str] = {}
        for command in commands:
            for alias in command.aliases:
                owner = seen.setdefault(alias.lower(), command.name)
                if owner != command.name:
                    raise ValueError(f"Alias '{alias}' is used by both '{owner}' and '{command.name}'")
        self.commands = list(commands)
        self.global_flags = list(global_flags)

    def __iter__(self):
        return iter(self.commands)

    def resolve(self, token: str) -> Command:
        return resolve(token, self.commands, lambda command: command.aliases, "command").entity

    def get(self, name: str) -> Command:
        for command in self.commands:
            if command.name == name:
                return command
        raise KeyError(name)


# ========================================
# COMMAND ACTIONS
# ========================================


def _no_arguments(context: CommandContext, command: str) -> None:
    if context.arguments:
        raise UnexpectedArgumentsError(command, context.arguments)


def add_task(context: CommandContext) -> None:
    description = " ".join(context.arguments).strip()
    if not description:
        raise MissingDescriptionError()

    task = context.manager.add_task(
        context.task_list,
        description,
        priority=context.flags.priority.get(Priority.NORMAL),
        due_date=context.flags.due.get(),
    )
    context.save()
    print(f"Task [{task.description}] was added with an ID of {task.id}, priority: {task.priority.label}.")


def show_tasks(context: CommandContext) -> None:
    _no_arguments(context, "show")

    if not context.task_list.tasks:
        print(TASK_LIST_IS_EMPTY)
        return

    selected = context.select()
    if not selected:
        print(NO_TASKS_MATCH)
        return

    render_tasks(selected, context.output_format, context.console)


def _parse_description(text: str) -> str:
    if not text.strip():
        raise MissingDescriptionError()
    return text.strip()


def _parse_due_value(text: str, today: Optional[date] = None) -> Optional[date]:
    if text.strip().lower() in CLEAR_DUE_DATE:
        return None
    return parse_due_date(text, today)


UPDATABLE_PROPERTIES = ("description", "priority", "finished", "duedate")

UPDATE_USAGE = "taskman update <description|priority|finished|duedate> <value> [filters | --all]"


def update_tasks(context: CommandContext) -> None:
    if len(context.arguments) < 2:
        raise MissingArgumentError("update", UPDATE_USAGE)

    prop = resolve(context.arguments[0], UPDATABLE_PROPERTIES, lambda name: [name], "task property").entity
    raw = " ".join(context.arguments[1:])

    # Parse the new value before touching any task.
    parsers: Dict[str, Callable[[str], object]] = {
        "description": _parse_description,
        "priority": parse_priority,
        "finished": parse_bool,
        "duedate": lambda text: _parse_due_value(text, context.today),
    }
    value = parsers[prop](raw)
    attribute = {
        "description": "description",
        "priority": "priority",
        "finished": "is_finished",
        "duedate": "due_date",
    }[prop]

    selected = context.select()
    if not selected:
        print(NO_TASKS_MATCH)
        return
    if not context.confirm(selected, "updated"):
        return

    for task in selected:
        setattr(task, attribute, value)
    context.save()

    shown = "none" if value is None else str(value)
    logger.info(f"✏️ Set {prop} to '{shown}' on {len(selected)} task(s)")
    if len(selected) == 1:
        task = selected[0]
        print(f"Task {task.id} [{task.description}] has changed its '{prop}' value to '{shown}'.")
    else:
        print(f"Updated {len(selected)} task(s) with new '{prop}' value of '{shown}'.")


def _set_finished(context: CommandContext, finished: bool) -> None:
    _no_arguments(context, "finish" if finished else "reopen")

    selected = context.select()
    if not selected:
        print(NO_TASKS_MATCH)
        return
    if not context.confirm(selected, "finished" if finished else "reopened"):
        return

    for task in selected:
        task.is_finished = finished
    context.save()

    state = "finished" if finished else "pending"
    if len(selected) == 1:
        task = selected[0]
        print(f"Task with ID {task.id} [{task.description}] was successfully marked as {state}.")
    else:
        print(f"{len(selected)} tasks were successfully marked as {state}.")


def finish_tasks(context: CommandContext) -> None:
    _set_finished(context, True)


def reopen_tasks(context: CommandContext) -> None:
    _set_finished(context, False)


def delete_tasks(context: CommandContext) -> None:
    _no_arguments(context, "delete")

    selected = context.select()
    if not selected:
        print(NO_TASKS_MATCH)
        return
    if not context.confirm(selected, "deleted"):
        return

    deleted = context.manager.delete_tasks(context.task_list, selected)
    context.save()

    if len(deleted) == 1:
        task = deleted[0]
        print(f"Task with ID {task.id} [{task.description}] was successfully deleted.")
    else:
        print(f"{len(deleted)} tasks were successfully deleted.")


def renumber_tasks(context: CommandContext) -> None:
    _no_arguments(context, "renumber")

    if not context.task_list.tasks:
        print(TASK_LIST_IS_EMPTY)
        return
    if not context.confirm(sort_tasks(context.task_list.tasks, context.sort_order), "renumbered"):
        return

    changed = context.manager.renumber(context.task_list, context.sort_order)
    context.save()
    print(f"Renumbered {len(context.task_list.tasks)} task(s), {changed} ID(s) changed.")


def configure(context: CommandContext) -> None:
    arguments = context.arguments
    config = context.config

    if not arguments:
        for name, value in config.items():
            print(f"{name} = {'' if value is None else value}")
        return

    if len(arguments) == 1:
        parameter = config.resolve_parameter(arguments[0])
        value = config.get(parameter.name)
        print(f"{parameter.name} = {'' if value is None else value}")
        return

    value = " ".join(arguments[1:]).strip()
    if not value:
        parameter = config.unset(arguments[0])
        print(f"Parameter '{parameter.name}' was reset to its default.")
        return

    parameter = config.set(arguments[0], value)
    print(f"Parameter '{parameter.name}' was set to '{value}'.")


IMPORT_USAGE = "taskman import <file.json> [--append]"


def import_tasks(context: CommandContext) -> None:
    if len(context.arguments) != 1:
        raise MissingArgumentError("import", IMPORT_USAGE)

    path = Path(context.arguments[0]).expanduser()
    try:
        with open(path, 'r') as f:
            data = json.load(f)
        if isinstance(data, dict):
            data = data.get("tasks", [])
        tasks = [Task(**item) for item in data]
    except (OSError, json.JSONDecodeError, TypeError, ValidationError) as e:
        raise TaskListReadError(str(path), str(e)) from e

    append = bool(context.flags.append.get(False))
    if not context.confirm(tasks, "appended" if append else "imported, replacing the current list"):
        return

    imported = context.manager.replace_tasks(context.task_list, tasks, append=append)
    context.save()
    print(f"Imported {len(imported)} task(s) into '{context.task_list.name}'.")


def run_shell(context: CommandContext) -> None:
    _no_arguments(context, "shell")

    from .shell import TaskmanShell

    TaskmanShell(home=context.config.path.parent).cmdloop()


def show_help(context: CommandContext) -> None:
    from .cli import usage_text

    print(usage_text(context.flags, context.arguments))


# ========================================
# REGISTRY
# ========================================


def build_commands(flags: FlagSet) -> CommandRegistry:
    """Declare every command against the flags of this invocation"""
    selection = flags.filters + [flags.all, flags.orderby]

    commands = [
        Command(
            "add", "add|new|create", "Add a new task",
            "add a new task", add_task,
            supported=[flags.priority, flags.due],
            usage="taskman add <description> [--priority <level>] [--due <date>]",
        ),
        Command(
            "show", "show|display|view|list", "Show tasks",
            "show tasks", show_tasks,
            supported=selection + [flags.format],
            is_read_update_delete=True,
            usage="taskman show [filters | --all] [--orderby <steps>] [--format text|csv|json]",
        ),
        Command(
            "update", "update|set|change|modify", "Change a property of the selected tasks",
            "update tasks", update_tasks,
            supported=selection,
            is_read_update_delete=True, needs_selection=True,
            usage=UPDATE_USAGE,
        ),
        Command(
            "finish", "finish|complete|accomplish|done", "Mark the selected tasks as finished",
            "finish tasks", finish_tasks,
            supported=selection,
            is_read_update_delete=True, needs_selection=True,
            usage="taskman finish [filters | --all]",
        ),
        Command(
            "reopen", "reopen|unfinish", "Mark the selected tasks as pending again",
            "reopen tasks", reopen_tasks,
            supported=selection,
            is_read_update_delete=True, needs_selection=True,
            usage="taskman reopen [filters | --all]",
        ),
        Command(
            "delete", "delete|remove|rm", "Delete the selected tasks",
            "delete tasks", delete_tasks,
            supported=selection,
            is_read_update_delete=True, needs_selection=True,
            usage="taskman delete [filters | --all]",
        ),
        Command(
            "renumber", "renumber|reindex", "Reassign IDs 0..N-1 in sort order",
            "renumber tasks", renumber_tasks,
            supported=[flags.orderby],
            usage="taskman renumber [--orderby <steps>]",
        ),
        Command(
            "config", "config|configure", "Show or change configuration parameters",
            "configure taskman", configure,
            usage="taskman config [<name> [<value>]]",
        ),
        Command(
            "import", "import", "Import tasks from a JSON file",
            "import tasks", import_tasks,
            supported=[flags.append],
            usage=IMPORT_USAGE,
        ),
        Command(
            "shell", "shell|repl", "Start an interactive taskman shell",
            "run the shell", run_shell,
            usage="taskman shell",
        ),
        Command(
            "help", "help", "Show usage information",
            "display help text", show_help,
            usage="taskman help [<command>]",
        ),
    ]
    return CommandRegistry(commands, global_flags=[flags.verbose, flags.interactive, flags.help])
