"""
TASKMAN - Task Schema Definition
================================
Task entity, priority levels and the persisted task list document.
"""

from enum import Enum
from typing import Optional, List, Dict
from datetime import date, datetime
from pydantic import BaseModel, Field


class Priority(int, Enum):
    """Task priority levels, ordered from least to most urgent"""
    NORMAL = 1
    IMPORTANT = 2
    CRITICAL = 3

    @property
    def label(self) -> str:
        return self.name.capitalize()

    def __str__(self) -> str:
        return self.label


# Every accepted spelling of a priority level.
PRIORITY_NAMES: Dict[str, Priority] = {
    "normal": Priority.NORMAL,
    "average": Priority.NORMAL,
    "1": Priority.NORMAL,
    "important": Priority.IMPORTANT,
    "2": Priority.IMPORTANT,
    "!": Priority.IMPORTANT,
    "critical": Priority.CRITICAL,
    "3": Priority.CRITICAL,
    "!!": Priority.CRITICAL,
}


class Task(BaseModel):
    """Individual task definition"""
    id: int = Field(ge=0)
    description: str
    priority: Priority = Priority.NORMAL
    is_finished: bool = False
    due_date: Optional[date] = None

    @property
    def natural_key(self):
        # Unfinished first, then most urgent, then oldest.
        return (self.is_finished, -self.priority.value, self.id, self.description)

    def __lt__(self, other: "Task") -> bool:
        if not isinstance(other, Task):
            return NotImplemented
        return self.natural_key < other.natural_key

    def __str__(self) -> str:
        due = f" (due {self.due_date.isoformat()})" if self.due_date else ""
        return f"[{self.id}] {self.description}{due}"


class TaskList(BaseModel):
    """Complete task list as stored on disk"""
    name: str = "default"

    # Metadata
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    # Tasks
    tasks: List[Task] = Field(default_factory=list)

    # Completion tracking
    @property
    def progress_pct(self) -> int:
        if not self.tasks:
            return 0
        finished = sum(1 for t in self.tasks if t.is_finished)
        return int((finished / len(self.tasks)) * 100)

    def next_id(self) -> int:
        """ID for the next added task"""
        if not self.tasks:
            return 0
        return max(task.id for task in self.tasks) + 1
