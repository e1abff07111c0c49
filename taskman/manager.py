"""
TASKMAN - Task Manager
======================
Handles persistence of named task lists and the list-level mutations
(add, delete with ID shifting, renumbering).
File-based storage: one JSON document per list, rewritten whole on save.
"""

import json
import os
import tempfile
from datetime import date, datetime
from pathlib import Path
from typing import Optional, List, Iterable
import logging

from pydantic import ValidationError

from .exceptions import TaskListReadError
from .schema import TaskList, Task, Priority
from .sorting import SortStep, sort_tasks

logger = logging.getLogger("taskman")


class TaskManager:
    """
    Task list storage and mutation

    Storage: {tasks_dir}/{list_name}.json

    The loaded list lives in memory until save() is called, so a failed
    command never leaves a half-modified list on disk.
    """

    def __init__(self, tasks_dir: str = "~/.taskman/tasks"):
        self.tasks_dir = Path(tasks_dir).expanduser()
        self.tasks_dir.mkdir(parents=True, exist_ok=True)

    # ========================================
    # PERSISTENCE OPERATIONS
    # ========================================

    def _get_task_file(self, list_name: str) -> Path:
        """Get path to task list JSON file"""
        return self.tasks_dir / f"{list_name}.json"

    def save(self, task_list: TaskList, order: Optional[Iterable[SortStep]] = None) -> None:
        """Sort and save the whole task list, replacing the previous file atomically"""
        task_list.tasks = sort_tasks(task_list.tasks, order)
        task_list.updated_at = datetime.now()

        file_path = self._get_task_file(task_list.name)
        fd, temp_path = tempfile.mkstemp(dir=self.tasks_dir, prefix=f".{task_list.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, 'w') as f:
                json.dump(task_list.model_dump(mode='json'), f, indent=2)
            os.replace(temp_path, file_path)
        except BaseException:
            Path(temp_path).unlink(missing_ok=True)
            raise

        logger.info(f"✅ Saved task list: {task_list.name} ({len(task_list.tasks)} tasks, {task_list.progress_pct}% finished)")

    def load(self, list_name: str) -> TaskList:
        """Load task list from file, or start an empty one"""
        file_path = self._get_task_file(list_name)

        if not file_path.exists():
            logger.info(f"Task list not found, starting empty: {list_name}")
            return TaskList(name=list_name)

        try:
            with open(file_path, 'r') as f:
                data = json.load(f)
            task_list = TaskList(**data)
        except (OSError, json.JSONDecodeError, TypeError, ValidationError) as e:
            raise TaskListReadError(str(file_path), str(e)) from e

        task_list.name = list_name
        logger.info(f"📂 Loaded task list: {task_list.name} ({len(task_list.tasks)} tasks)")
        return task_list

    # ========================================
    # TASK OPERATIONS
    # ========================================

    def add_task(
        self,
        task_list: TaskList,
        description: str,
        priority: Priority = Priority.NORMAL,
        due_date: Optional[date] = None
    ) -> Task:
        """Append a new task with the next available ID"""
        task = Task(
            id=task_list.next_id(),
            description=description,
            priority=priority,
            due_date=due_date
        )
        task_list.tasks.append(task)

        logger.info(f"➕ Added task: {task}")
        return task

    def delete_tasks(self, task_list: TaskList, tasks: Iterable[Task]) -> List[Task]:
        """Remove tasks and shift every larger ID down to close the gaps"""
        deleted_ids = sorted({task.id for task in tasks})
        deleted = [task for task in task_list.tasks if task.id in deleted_ids]

        task_list.tasks = [task for task in task_list.tasks if task.id not in deleted_ids]
        for task in task_list.tasks:
            shift = sum(1 for deleted_id in deleted_ids if deleted_id < task.id)
            task.id -= shift

        logger.info(f"🗑️ Deleted {len(deleted)} task(s): {deleted_ids}")
        return deleted

    def renumber(self, task_list: TaskList, order: Optional[Iterable[SortStep]] = None) -> int:
        """Reassign IDs 0..N-1 following the sort order; returns how many changed"""
        ordered = sort_tasks(task_list.tasks, order)
        changed = 0
        for new_id, task in enumerate(ordered):
            if task.id != new_id:
                changed += 1
            task.id = new_id
        task_list.tasks = ordered

        logger.info(f"🔢 Renumbered task list: {task_list.name} ({changed} IDs changed)")
        return changed

    def replace_tasks(self, task_list: TaskList, tasks: Iterable[Task], append: bool = False) -> List[Task]:
        """Import tasks, either replacing the list or appending with fresh IDs"""
        imported = [task.model_copy() for task in tasks]

        if append:
            next_id = task_list.next_id()
            for offset, task in enumerate(sorted(imported, key=lambda t: t.id)):
                task.id = next_id + offset
            task_list.tasks.extend(imported)
        else:
            if len({task.id for task in imported}) != len(imported):
                logger.warning("Imported task IDs are not unique, renumbering them")
                for new_id, task in enumerate(imported):
                    task.id = new_id
            task_list.tasks = imported

        logger.info(f"📥 Imported {len(imported)} task(s) into {task_list.name}")
        return imported
