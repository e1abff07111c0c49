"""
TASKMAN - Scalar Value Parsing
==============================
Text → value conversions used by flags and commands.
"""

import re
from typing import Collection, Dict

from .exceptions import (
    InvalidIdOrIdRangeError,
    InvalidIdRangeOrderError,
    InvalidNumberError,
    UnknownBooleanValueError,
    UnknownPriorityLevelError,
)
from .schema import PRIORITY_NAMES, Priority

ID_SEQUENCE_REGEX = re.compile(r"^\s*[0-9]+\s*(?:,\s*[0-9]+\s*)*$")
ID_RANGE_REGEX = re.compile(r"^\s*([0-9]+)\s*-\s*([0-9]+)\s*$")
COUNT_REGEX = re.compile(r"^[0-9]+$")

BOOLEAN_NAMES: Dict[str, bool] = {
    "true": True,
    "1": True,
    "yes": True,
    "y": True,
    "false": False,
    "0": False,
    "no": False,
    "n": False,
}


def parse_bool(text: str) -> bool:
    """Parse 'true'/'false', '1'/'0' or 'yes'/'no', case-insensitively"""
    try:
        return BOOLEAN_NAMES[text.strip().lower()]
    except KeyError:
        raise UnknownBooleanValueError(text) from None


def parse_priority(text: str) -> Priority:
    """Parse a priority level name ('critical'), number ('3') or marker ('!!')"""
    try:
        return PRIORITY_NAMES[text.strip().lower()]
    except KeyError:
        raise UnknownPriorityLevelError(text) from None


def parse_task_ids(text: str) -> Collection[int]:
    """Parse task IDs.

    Supports:
        1. single IDs like '5'
        2. ID lists like '5,6,7'
        3. ID ranges like '5-36', kept as a range so wide ones stay cheap
    """
    if ID_SEQUENCE_REGEX.match(text):
        return frozenset(int(part) for part in text.split(","))

    range_match = ID_RANGE_REGEX.match(text)
    if range_match:
        lower, upper = int(range_match.group(1)), int(range_match.group(2))
        if lower > upper:
            raise InvalidIdRangeOrderError(text)
        return range(lower, upper + 1)

    raise InvalidIdOrIdRangeError(text)


def parse_count(text: str) -> int:
    """Parse a non-negative whole number (skip/limit values)"""
    stripped = text.strip()
    if not COUNT_REGEX.match(stripped):
        raise InvalidNumberError(text)
    return int(stripped)
