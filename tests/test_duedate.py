"""Tests for due date expressions.

All expressions are resolved against Wednesday 2025-01-22.
"""

from datetime import date

import pytest

from taskman.duedate import month_end, parse_absolute_date, parse_due_date, week_beginning
from taskman.exceptions import UnrecognizedDueDateExpressionError

TODAY = date(2025, 1, 22)


@pytest.mark.parametrize("expression, expected", [
    # absolute dates
    ("2025-03-04", date(2025, 3, 4)),
    ("2025/03/04", date(2025, 3, 4)),
    ("2025.03.04", date(2025, 3, 4)),
    ("2025-1-21", date(2025, 1, 21)),
    ("Jan 21 2025", date(2025, 1, 21)),
    ("21 January 2025", date(2025, 1, 21)),
    ("March 3", date(2025, 3, 3)),
    ("Jan 21 2025::+1d", date(2025, 1, 22)),
    # natural language
    ("today", date(2025, 1, 22)),
    ("tomorrow", date(2025, 1, 23)),
    ("this monday", date(2025, 1, 20)),
    ("this friday", date(2025, 1, 24)),
    ("next friday", date(2025, 1, 31)),
    ("this week", date(2025, 1, 26)),
    ("next week", date(2025, 2, 2)),
    ("next sunday", date(2025, 2, 2)),
    ("this month", date(2025, 1, 31)),
    ("next month", date(2025, 2, 28)),
    ("this year", date(2025, 12, 31)),
    ("next year", date(2026, 12, 31)),
    ("Next  Friday", date(2025, 1, 31)),
    # relative shifts
    ("+1d", date(2025, 1, 23)),
    ("-1y", date(2024, 1, 22)),
    ("+1m-2d", date(2025, 2, 20)),
    ("+1y+1m+1w+1d", date(2026, 3, 2)),
    # combined
    ("2025-01-21::+2w", date(2025, 2, 4)),
    ("tomorrow::+1d", date(2025, 1, 24)),
    ("next week::-1d", date(2025, 2, 1)),
    ("2024-01-31::+1m", date(2024, 2, 29)),
])
def test_parse_due_date(expression, expected):
    assert parse_due_date(expression, TODAY) == expected


@pytest.mark.parametrize("expression", [
    "garbage",
    "",
    "2025-02-30",
    "+9999y",
    "9999-12-31::+1d",
    "+1x",
    "this friday next friday",
])
def test_unrecognized_expressions(expression):
    with pytest.raises(UnrecognizedDueDateExpressionError):
        parse_due_date(expression, TODAY)


def test_parse_absolute_date():
    assert parse_absolute_date("2025-02-28") == date(2025, 2, 28)
    assert parse_absolute_date("28/02/2025") == date(2025, 2, 28)
    assert parse_absolute_date("Feb 28", TODAY) == date(2025, 2, 28)


@pytest.mark.parametrize("text", ["+1d", "tomorrow", "next friday", "nonsense", ""])
def test_absolute_stage_ignores_other_layers(text):
    assert parse_absolute_date(text, TODAY) is None


@pytest.mark.parametrize("today, expected", [
    (date(2025, 2, 10), date(2025, 3, 31)),
    (date(2025, 6, 30), date(2025, 7, 31)),
    (date(2025, 12, 5), date(2026, 1, 31)),
])
def test_next_month_is_the_last_day_of_the_following_month(today, expected):
    assert parse_due_date("next month", today) == expected


def test_week_and_month_helpers():
    assert week_beginning(date(2025, 1, 26)) == date(2025, 1, 20)
    assert week_beginning(date(2025, 1, 20)) == date(2025, 1, 20)
    assert month_end(date(2024, 2, 3)) == date(2024, 2, 29)
