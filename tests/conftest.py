"""Shared pytest fixtures for taskman tests."""

import json
import shlex
from datetime import date

import pytest

from taskman.cli import execute
from taskman.schema import Priority, Task

# A Wednesday; the week starts on Monday 2025-01-20.
TODAY = date(2025, 1, 22)


@pytest.fixture
def home(tmp_path):
    return tmp_path / "taskman-home"


@pytest.fixture
def run(home, capsys):
    """Run a taskman command line; returns (status, stdout, stderr)."""
    def _run(command_line, answers=()):
        replies = iter(answers)
        status = execute(
            shlex.split(command_line),
            home=str(home),
            prompt=lambda message: next(replies),
            today=TODAY,
        )
        captured = capsys.readouterr()
        return status, captured.out, captured.err
    return _run


@pytest.fixture
def saved_tasks(home):
    """Read the tasks of the default list straight from disk."""
    def _saved(list_name="default"):
        path = home / "tasks" / f"{list_name}.json"
        if not path.exists():
            return []
        with open(path) as f:
            return [Task(**item) for item in json.load(f)["tasks"]]
    return _saved


@pytest.fixture
def sample_tasks():
    return [
        Task(id=0, description="Remember the milk", priority=Priority.IMPORTANT),
        Task(id=1, description="Pay the loan", priority=Priority.CRITICAL, due_date=date(2025, 1, 24)),
        Task(id=2, description="Play Super Metroid"),
        Task(id=3, description="Prepare for the party", is_finished=True, due_date=date(2025, 2, 1)),
    ]
