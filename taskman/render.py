"""
TASKMAN - Task Rendering
========================
Writes task sequences to the console as a rich table, CSV or JSON.
"""

import csv
import io
import json
from enum import Enum
from typing import Iterable, List, Optional

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from .exceptions import UnknownFormatError
from .schema import Priority, Task


class Format(str, Enum):
    """Task display formats"""
    TEXT = "text"   # rich table for the console
    CSV = "csv"     # comma-separated values with a header
    JSON = "json"   # list of task objects


def parse_format(text: str) -> Format:
    try:
        return Format(text.strip().lower())
    except ValueError:
        raise UnknownFormatError(text) from None


PRIORITY_MARKERS = {
    Priority.NORMAL: " ",
    Priority.IMPORTANT: "!",
    Priority.CRITICAL: "#",
}

PRIORITY_STYLES = {
    Priority.NORMAL: "",
    Priority.IMPORTANT: "cyan",
    Priority.CRITICAL: "bold yellow",
}

FINISHED_STYLE = "dim"

CSV_COLUMNS = ["id", "description", "priority", "is_finished", "due_date"]


def task_style(task: Task) -> str:
    if task.is_finished:
        return FINISHED_STYLE
    return PRIORITY_STYLES[task.priority]


def build_table(tasks: Iterable[Task], title: Optional[str] = None) -> Table:
    table = Table(
        title=title,
        title_justify="left",
        box=box.SIMPLE,
        show_header=True,
        pad_edge=False,
    )
    table.add_column("", width=1)
    table.add_column("ID", justify="right")
    table.add_column("Status")
    table.add_column("Priority")
    table.add_column("Due")
    table.add_column("Description")

    for task in tasks:
        style = task_style(task)
        marker = "x" if task.is_finished else PRIORITY_MARKERS[task.priority]
        table.add_row(
            marker,
            str(task.id),
            "finished" if task.is_finished else "pending",
            task.priority.label,
            task.due_date.isoformat() if task.due_date else "",
            Text(task.description),
            style=style,
        )
    return table


def tasks_to_csv(tasks: Iterable[Task]) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=CSV_COLUMNS, lineterminator="\n")
    writer.writeheader()
    for task in tasks:
        row = task.model_dump(mode="json")
        row["priority"] = task.priority.label
        writer.writerow({column: row[column] for column in CSV_COLUMNS})
    return buffer.getvalue()


def tasks_to_json(tasks: Iterable[Task]) -> str:
    return json.dumps([task.model_dump(mode="json") for task in tasks], indent=2)


def render_tasks(
    tasks: List[Task],
    output_format: Format = Format.TEXT,
    console: Optional[Console] = None,
    title: Optional[str] = None,
) -> None:
    """Write the tasks in the requested format"""
    console = console or Console()

    if output_format is Format.JSON:
        console.out(tasks_to_json(tasks), highlight=False)
    elif output_format is Format.CSV:
        console.out(tasks_to_csv(tasks), highlight=False, end="")
    else:
        console.print(build_table(tasks, title))
