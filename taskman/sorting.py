"""
TASKMAN - Sort Order Resolver
=============================
A sort order is a string of steps with no separator, each step being a
task property prefix followed by '+' (ascending) or '-' (descending):

    "is+desc+pr-"   ascending by isfinished, then by description,
                    then descending by priority

Property prefixes are resolved the same way command names are.
"""

import re
from enum import Enum
from functools import cmp_to_key
from typing import Any, Callable, Dict, Iterable, List, NamedTuple, Optional

from .exceptions import (
    AmbiguousNameError,
    AmbiguousSortPropertyError,
    InvalidSortOrderError,
    NoSuchSortPropertyError,
    UnknownNameError,
)
from .prototype import resolve
from .schema import Task

SORT_ORDER_REGEX = re.compile(r"^(?:[A-Za-z][A-Za-z0-9]*[+-])+$")
SORT_STEP_REGEX = re.compile(r"([A-Za-z][A-Za-z0-9]*)([+-])")

# Sortable property name -> task attribute
SORTABLE_PROPERTIES: Dict[str, Callable[[Task], Any]] = {
    "id": lambda task: task.id,
    "isfinished": lambda task: task.is_finished,
    "duedate": lambda task: task.due_date,
    "description": lambda task: task.description,
    "priority": lambda task: task.priority.value,
}


class SortDirection(str, Enum):
    ASCENDING = "+"
    DESCENDING = "-"


class SortStep(NamedTuple):
    property_name: str
    direction: SortDirection

    def compare(self, first: Task, second: Task) -> int:
        selector = SORTABLE_PROPERTIES[self.property_name]
        result = compare_values(selector(first), selector(second))
        return result if self.direction is SortDirection.ASCENDING else -result


def compare_values(first: Any, second: Any) -> int:
    """Three-way comparison where a missing value sorts below any present one"""
    if first is None and second is None:
        return 0
    if first is None:
        return -1
    if second is None:
        return 1
    return (first > second) - (first < second)


def parse_sort_order(text: str) -> List[SortStep]:
    """Parse a sort order string into its comparison steps.

    Raises:
        InvalidSortOrderError: the string does not follow the step syntax
        NoSuchSortPropertyError: a prefix matches no task property
        AmbiguousSortPropertyError: a prefix matches several task properties
    """
    if not SORT_ORDER_REGEX.match(text):
        raise InvalidSortOrderError(text)

    steps = []
    for prefix, sign in SORT_STEP_REGEX.findall(text):
        try:
            resolution = resolve(prefix, list(SORTABLE_PROPERTIES), lambda name: [name], "sort property")
        except UnknownNameError:
            raise NoSuchSortPropertyError(text, prefix, sign) from None
        except AmbiguousNameError as e:
            raise AmbiguousSortPropertyError(text, prefix, sign, e.candidates) from None
        steps.append(SortStep(resolution.entity, SortDirection(sign)))
    return steps


def make_comparator(steps: Iterable[SortStep]) -> Callable[[Task, Task], int]:
    """Composite comparator: the first step with a non-zero result decides"""
    steps = list(steps)

    def compare(first: Task, second: Task) -> int:
        for step in steps:
            result = step.compare(first, second)
            if result:
                return result
        return 0

    return compare


def sort_tasks(tasks: Iterable[Task], steps: Optional[Iterable[SortStep]] = None) -> List[Task]:
    """Return the tasks ordered by the steps, or by natural order without any"""
    steps = list(steps or [])
    if not steps:
        return sorted(tasks)
    return sorted(tasks, key=cmp_to_key(make_comparator(steps)))
