"""
TASKMAN - Command Line To-Do List
=================================

Abbreviation-friendly task management: commands and flags resolve from
any unambiguous prefix, filters compose in a fixed priority order, and
sort orders and due dates have their own small expression languages.

Usage:
    from taskman import TaskManager, parse_due_date, parse_sort_order, sort_tasks

    manager = TaskManager("~/.taskman/tasks")
    task_list = manager.load("default")
    manager.add_task(task_list, "Pay the loan", due_date=parse_due_date("next friday"))
    manager.save(task_list, parse_sort_order("isfinished+priority-id+"))

Command line:
    taskman add Remember the milk --priority important --due tomorrow
    taskman show --pending --orderby due+
"""

from .schema import (
    TaskList,
    Task,
    Priority,
)

from .manager import TaskManager
from .duedate import parse_due_date
from .sorting import parse_sort_order, sort_tasks

__version__ = "1.0.0"
__all__ = [
    "TaskManager",
    "TaskList",
    "Task",
    "Priority",
    "parse_due_date",
    "parse_sort_order",
    "sort_tasks",
]
