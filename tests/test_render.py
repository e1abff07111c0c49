"""Tests for task output formats."""

import json

import pytest
from rich.console import Console

from taskman.exceptions import UnknownFormatError
from taskman.render import Format, parse_format, render_tasks, tasks_to_csv, tasks_to_json


def test_parse_format():
    assert parse_format("JSON") is Format.JSON
    with pytest.raises(UnknownFormatError):
        parse_format("xml")


def test_csv(sample_tasks):
    lines = tasks_to_csv(sample_tasks).splitlines()
    assert lines[0] == "id,description,priority,is_finished,due_date"
    assert lines[1] == "0,Remember the milk,Important,False,"
    assert lines[2] == "1,Pay the loan,Critical,False,2025-01-24"
    assert len(lines) == 5


def test_json(sample_tasks):
    data = json.loads(tasks_to_json(sample_tasks))
    assert data[3] == {
        "id": 3,
        "description": "Prepare for the party",
        "priority": 1,
        "is_finished": True,
        "due_date": "2025-02-01",
    }


def test_text_table(sample_tasks):
    console = Console(record=True, width=100)
    render_tasks(sample_tasks, Format.TEXT, console)
    text = console.export_text()
    assert "Pay the loan" in text
    assert "2025-01-24" in text
    assert "finished" in text
    assert "Critical" in text


def test_markup_in_descriptions_is_not_interpreted():
    from taskman.schema import Task

    console = Console(record=True, width=100)
    render_tasks([Task(id=0, description="[bold]literal[/bold]")], Format.TEXT, console)
    assert "[bold]literal[/bold]" in console.export_text()
