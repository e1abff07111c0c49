"""Tests for sort order parsing and multi-key comparison."""

from datetime import date

import pytest

from taskman.exceptions import AmbiguousSortPropertyError, InvalidSortOrderError, NoSuchSortPropertyError
from taskman.schema import Priority, Task
from taskman.sorting import (
    SortDirection,
    SortStep,
    compare_values,
    make_comparator,
    parse_sort_order,
    sort_tasks,
)


def test_parse_full_property_names():
    steps = parse_sort_order("priority+id-")
    assert steps == [
        SortStep("priority", SortDirection.ASCENDING),
        SortStep("id", SortDirection.DESCENDING),
    ]


def test_parse_abbreviated_property_names():
    steps = parse_sort_order("is+desc+pr-")
    assert [step.property_name for step in steps] == ["isfinished", "description", "priority"]
    assert [step.direction for step in steps] == [
        SortDirection.ASCENDING, SortDirection.ASCENDING, SortDirection.DESCENDING,
    ]


def test_parse_is_case_insensitive():
    assert parse_sort_order("DUE-")[0].property_name == "duedate"


def test_unknown_property_prefix():
    with pytest.raises(NoSuchSortPropertyError) as excinfo:
        parse_sort_order("id+colour-")
    assert excinfo.value.prefix == "colour"
    assert "colour-" in str(excinfo.value)


def test_ambiguous_property_prefix():
    with pytest.raises(AmbiguousSortPropertyError) as excinfo:
        parse_sort_order("d+")
    assert excinfo.value.candidates == ["duedate", "description"]


def test_exact_name_is_not_ambiguous_with_longer_property():
    # "i" starts both id and isfinished.
    assert parse_sort_order("id+")[0].property_name == "id"
    with pytest.raises(AmbiguousSortPropertyError):
        parse_sort_order("i+")


@pytest.mark.parametrize("text", ["", "priority", "+id", "id+,priority-", "1d+"])
def test_malformed_sort_orders(text):
    with pytest.raises(InvalidSortOrderError):
        parse_sort_order(text)


def test_priority_ascending_then_id_descending():
    tasks = [
        Task(id=1, description="a", priority=Priority.CRITICAL),
        Task(id=2, description="b", priority=Priority.NORMAL),
        Task(id=3, description="c", priority=Priority.CRITICAL),
        Task(id=4, description="d", priority=Priority.NORMAL),
    ]
    ordered = sort_tasks(tasks, parse_sort_order("priority+id-"))
    assert [task.id for task in ordered] == [4, 2, 3, 1]


def test_missing_values_sort_first_ascending():
    tasks = [
        Task(id=0, description="a", due_date=date(2025, 3, 1)),
        Task(id=1, description="b"),
        Task(id=2, description="c", due_date=date(2025, 2, 1)),
        Task(id=3, description="d"),
    ]
    ascending = sort_tasks(tasks, parse_sort_order("due+id+"))
    assert [task.id for task in ascending] == [1, 3, 2, 0]

    descending = sort_tasks(tasks, parse_sort_order("due-id+"))
    assert [task.id for task in descending] == [0, 2, 1, 3]


def test_compare_values():
    assert compare_values(None, None) == 0
    assert compare_values(None, 1) == -1
    assert compare_values(1, None) == 1
    assert compare_values("a", "b") == -1
    assert compare_values(2, 2) == 0


def test_comparator_all_steps_equal():
    compare = make_comparator(parse_sort_order("priority+"))
    first = Task(id=1, description="x")
    second = Task(id=2, description="y")
    assert compare(first, second) == 0


def test_natural_order_without_steps(sample_tasks):
    ordered = sort_tasks(reversed(sample_tasks))
    # Unfinished first, most urgent first, then by id.
    assert [task.id for task in ordered] == [1, 0, 2, 3]
