"""
TASKMAN - Flag System
=====================
Typed command line flags, task filter flags, and the scanner that pulls
flags out of the raw argument list.

A FlagSet is built fresh for every invocation, so flag state never leaks
from one shell line to the next.
"""

import logging
import re
from datetime import date
from functools import partial
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple

from .duedate import parse_due_date
from .exceptions import FlagNotSetError, InvalidParameterValueError, MissingFlagValueError
from .parsing import parse_bool, parse_count, parse_priority, parse_task_ids
from .prototype import resolve, split_prototype
from .render import parse_format
from .schema import Task
from .sorting import parse_sort_order

logger = logging.getLogger("taskman")

FLAG_TOKEN_REGEX = re.compile(r"^--?(?P<name>[A-Za-z][A-Za-z0-9-]*)(?:=(?P<value>.*))?$", re.DOTALL)

END_OF_FLAGS = "--"


class Flag:
    """A named, aliasable command line switch.

    A flag without a parser is boolean: naming it sets it to True, and an
    explicit "=value" is read with parse_bool. Typed flags run their parser
    on the raw text when the arguments are scanned.
    """

    def __init__(
        self,
        name: str,
        prototype: str,
        description: str,
        parser: Optional[Callable[[str], Any]] = None,
    ):
        self.name = name
        self.prototype = prototype
        self.aliases = split_prototype(prototype)
        self.description = description
        self.parser = parser
        self._value: Any = None
        self.is_set = False

    @property
    def is_boolean(self) -> bool:
        return self.parser is None

    @property
    def value(self) -> Any:
        if not self.is_set:
            raise FlagNotSetError(self.name)
        return self._value

    def get(self, default: Any = None) -> Any:
        return self._value if self.is_set else default

    def set(self, value: Any) -> None:
        self._value = value
        self.is_set = True

    def parse(self, raw: Optional[str]) -> None:
        if self.is_boolean:
            self.set(True if raw is None else parse_bool(raw))
        else:
            self.set(self.parser(raw))

    @property
    def usage(self) -> str:
        spellings = ", ".join(
            f"-{alias}" if len(alias) == 1 else f"--{alias}" for alias in self.aliases
        )
        return spellings if self.is_boolean else f"{spellings} <value>"

    def __repr__(self) -> str:
        state = repr(self._value) if self.is_set else "unset"
        return f"{type(self).__name__}({self.name}={state})"


class TaskFilterFlag(Flag):
    """A flag that narrows a task sequence.

    The predicate receives the flag value, a task, and the task's position
    within the sequence handed to this filter. Filters run in ascending
    filter priority.
    """

    def __init__(
        self,
        name: str,
        prototype: str,
        description: str,
        parser: Optional[Callable[[str], Any]],
        filter_priority: int,
        predicate: Callable[[Any, Task, int], bool],
    ):
        super().__init__(name, prototype, description, parser)
        self.filter_priority = filter_priority
        self.predicate = predicate

    def filter(self, tasks: Iterable[Task]) -> List[Task]:
        value = self.value
        return [task for index, task in enumerate(tasks) if self.predicate(value, task, index)]


def compile_description_regex(text: str) -> "re.Pattern":
    try:
        return re.compile(text, re.IGNORECASE)
    except re.error:
        raise InvalidParameterValueError("like", text) from None


def _due_before(limit: date, task: Task, index: int) -> bool:
    return task.due_date is not None and task.due_date <= limit


class FlagSet:
    """All flags known to taskman, in declaration order"""

    def __init__(self, today: Optional[date] = None):
        due = partial(parse_due_date, today=today)

        # Task filters
        self.id = TaskFilterFlag(
            "id", "i|id", "Select tasks by ID, ID list (1,4,5) or range (2-7)",
            parse_task_ids, 0, lambda ids, task, index: task.id in ids)
        self.priority = TaskFilterFlag(
            "priority", "p|priority", "Task priority: normal, important or critical",
            parse_priority, 1, lambda priority, task, index: task.priority == priority)
        self.pending = TaskFilterFlag(
            "pending", "pending|unfinished", "Select unfinished tasks",
            None, 1, lambda pending, task, index: (not task.is_finished) == pending)
        self.finished = TaskFilterFlag(
            "finished", "f|finished", "Select finished tasks",
            None, 1, lambda finished, task, index: task.is_finished == finished)
        self.like = TaskFilterFlag(
            "like", "r|regex|like", "Select tasks whose description matches a regular expression",
            compile_description_regex, 1, lambda regex, task, index: regex.search(task.description) is not None)
        self.before = TaskFilterFlag(
            "before", "b|before", "Select tasks due on or before a date",
            due, 1, _due_before)
        self.skip = TaskFilterFlag(
            "skip", "s|skip", "Skip the first N selected tasks",
            parse_count, 2, lambda count, task, index: index >= count)
        self.limit = TaskFilterFlag(
            "limit", "l|limit", "Select at most N tasks",
            parse_count, 3, lambda count, task, index: index < count)

        # Plain flags
        self.all = Flag("all", "a|all", "Apply the command to every task")
        self.due = Flag("due", "d|due", "Due date, e.g. 2025-01-21, tomorrow, next friday::+1w", due)
        self.orderby = Flag("orderby", "o|orderby|sort", "Sort order, e.g. priority-id+", parse_sort_order)
        self.format = Flag("format", "format", "Output format: text, csv or json", parse_format)
        self.append = Flag("append", "append", "Append imported tasks instead of replacing the list")
        self.interactive = Flag("interactive", "interactive|confirm", "Ask for confirmation before changing tasks")
        self.verbose = Flag("verbose", "v|verbose", "Show diagnostic output")
        self.help = Flag("help", "h|help", "Show usage information")
        self.version = Flag("version", "version", "Show the program version")

        self.flags: List[Flag] = [
            self.id, self.priority, self.pending, self.finished, self.like,
            self.before, self.skip, self.limit,
            self.all, self.due, self.orderby, self.format, self.append,
            self.interactive, self.verbose, self.help, self.version,
        ]

        # (typed token, full spelling) of every flag given abbreviated
        self.abbreviations: List[Tuple[str, str]] = []

    def __iter__(self):
        return iter(self.flags)

    @property
    def filters(self) -> List[TaskFilterFlag]:
        return [flag for flag in self.flags if isinstance(flag, TaskFilterFlag)]

    @property
    def set_flags(self) -> List[Flag]:
        return [flag for flag in self.flags if flag.is_set]

    @property
    def set_filters(self) -> List[TaskFilterFlag]:
        return [flag for flag in self.filters if flag.is_set]

    def resolve(self, token: str) -> Flag:
        resolution = resolve(token, self.flags, lambda flag: flag.aliases, "flag", announce=False)
        if not resolution.exact:
            self.abbreviations.append((token, resolution.spelling))
        return resolution.entity

    def log_abbreviations(self) -> None:
        """Report the abbreviated flag names, once logging is configured"""
        for token, spelling in self.abbreviations:
            logger.info(f"Assuming flag '{spelling}' for '{token}'")

    def scan(self, arguments: Sequence[str]) -> List[str]:
        """Set every flag found in the arguments and return the rest.

        "--" stops flag scanning; everything after it is returned as is.
        """
        residual: List[str] = []
        tokens = list(arguments)
        position = 0

        while position < len(tokens):
            token = tokens[position]
            position += 1

            if token == END_OF_FLAGS:
                residual.extend(tokens[position:])
                break

            match = FLAG_TOKEN_REGEX.match(token)
            if not match:
                residual.append(token)
                continue

            flag = self.resolve(match.group("name"))
            raw = match.group("value")

            if raw is None and not flag.is_boolean:
                if position >= len(tokens):
                    raise MissingFlagValueError(flag.name)
                raw = tokens[position]
                position += 1

            flag.parse(raw)
            logger.debug(f"Flag {flag.name} set to {flag.get()!r}")

        return residual


def compose_filters(flags: Iterable[TaskFilterFlag], tasks: Iterable[Task]) -> List[Task]:
    """Run the set filters over the tasks, lowest filter priority first.

    Filters with equal priority run in declaration order. Each filter sees
    the output of the previous one, so position-based filters (skip, limit)
    count positions in the already narrowed sequence.
    """
    active = sorted((flag for flag in flags if flag.is_set), key=lambda flag: flag.filter_priority)
    result = list(tasks)
    for flag in active:
        result = flag.filter(result)
        logger.debug(f"Filter {flag.name} left {len(result)} task(s)")
    return result
