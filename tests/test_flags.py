"""Tests for flag scanning and filter composition."""

import logging
from datetime import date

import pytest

from taskman.exceptions import (
    AmbiguousNameError,
    FlagNotSetError,
    InvalidParameterValueError,
    MissingFlagValueError,
    UnknownNameError,
)
from taskman.flags import FlagSet, compose_filters
from taskman.schema import Priority


@pytest.fixture
def flags():
    return FlagSet(today=date(2025, 1, 22))


def ids(tasks):
    return [task.id for task in tasks]


def test_scan_sets_flags_and_returns_residual(flags):
    residual = flags.scan(["show", "--id", "1-3", "-p=critical", "--fin"])
    assert residual == ["show"]
    assert set(flags.id.value) == {1, 2, 3}
    assert flags.priority.value is Priority.CRITICAL
    assert flags.finished.value is True
    assert not flags.limit.is_set


def test_abbreviations_are_reported_after_scanning(flags, caplog):
    with caplog.at_level(logging.INFO, logger="taskman"):
        flags.scan(["--verb", "--pend", "--id", "1"])
        assert caplog.text == ""
        flags.log_abbreviations()

    assert flags.abbreviations == [("verb", "verbose"), ("pend", "pending")]
    assert "Assuming flag 'verbose' for 'verb'" in caplog.text
    assert "Assuming flag 'pending' for 'pend'" in caplog.text


def test_arguments_between_flags_are_kept_in_order(flags):
    residual = flags.scan(["add", "Pay", "--priority", "!!", "the", "loan"])
    assert residual == ["add", "Pay", "the", "loan"]


def test_boolean_flag_with_explicit_value(flags):
    flags.scan(["--finished=no"])
    assert flags.finished.value is False


def test_end_of_flags_marker(flags):
    residual = flags.scan(["add", "--", "--not-a-flag", "-v"])
    assert residual == ["add", "--not-a-flag", "-v"]
    assert not flags.verbose.is_set


def test_negative_numbers_are_not_flags(flags):
    assert flags.scan(["update", "duedate", "-1y"]) == ["update", "duedate", "-1y"]


def test_typed_flag_without_value(flags):
    with pytest.raises(MissingFlagValueError):
        flags.scan(["show", "--limit"])


def test_unknown_and_ambiguous_flags(flags):
    with pytest.raises(UnknownNameError):
        flags.scan(["--colour", "red"])
    with pytest.raises(AmbiguousNameError):
        flags.scan(["--li", "2"])


def test_reading_unset_flag_is_a_programming_error(flags):
    with pytest.raises(FlagNotSetError) as excinfo:
        flags.limit.value
    assert str(excinfo.value) == "The limit flag value has not been set."
    assert flags.limit.get(7) == 7


def test_invalid_description_regex(flags):
    with pytest.raises(InvalidParameterValueError):
        flags.scan(["--like=("])


def test_flag_usage(flags):
    assert flags.id.usage == "-i, --id <value>"
    assert flags.all.usage == "-a, --all"


def test_filter_by_priority(flags, sample_tasks):
    flags.scan(["--priority", "important"])
    assert ids(compose_filters(flags.filters, sample_tasks)) == [0]


def test_filter_by_description(flags, sample_tasks):
    flags.scan(["--like", "^p"])
    assert ids(compose_filters(flags.filters, sample_tasks)) == [1, 2, 3]


def test_filter_by_due_date(flags, sample_tasks):
    flags.scan(["--before", "this friday"])
    assert ids(compose_filters(flags.filters, sample_tasks)) == [1]


def test_pending_and_finished_filters(flags, sample_tasks):
    flags.scan(["--pending"])
    assert ids(compose_filters(flags.filters, sample_tasks)) == [0, 1, 2]

    flags = FlagSet(today=date(2025, 1, 22))
    flags.scan(["--finished"])
    assert ids(compose_filters(flags.filters, sample_tasks)) == [3]


def test_no_filters_selects_everything(flags, sample_tasks):
    assert compose_filters(flags.filters, sample_tasks) == sample_tasks


@pytest.mark.parametrize("arguments", [
    ["--limit", "1", "--skip", "1", "--pending"],
    ["--pending", "--skip", "1", "--limit", "1"],
    ["--skip=1", "--pending", "--limit=1"],
])
def test_filters_run_in_priority_order(flags, sample_tasks, arguments):
    # pending leaves 0, 1, 2; skip drops 0; limit keeps 1.
    flags.scan(arguments)
    assert ids(compose_filters(flags.filters, sample_tasks)) == [1]


def test_id_filter_runs_before_skip(flags, sample_tasks):
    flags.scan(["--skip", "1", "--id", "2-3"])
    assert ids(compose_filters(flags.filters, sample_tasks)) == [3]


def test_limit_larger_than_selection(flags, sample_tasks):
    flags.scan(["--limit", "10"])
    assert ids(compose_filters(flags.filters, sample_tasks)) == [0, 1, 2, 3]
