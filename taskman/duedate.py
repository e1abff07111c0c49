"""
TASKMAN - Due Date Expressions
==============================
A due date expression combines three independent layers:

    1. an absolute date before any '::'      2025-01-21, Jan 21 2025
    2. a natural language key                next friday, this month
    3. a relative shift after '::' (or alone) +1y-2m+1w+3d

The shift is applied, years then months then weeks then days, on top of
the absolute or natural language date, or on top of today when neither is
given. Examples: "2025-01-21::+2w", "tomorrow", "+1m-2d", "next week::-1d".
"""

import logging
import re
from datetime import date, datetime, time, timedelta
from typing import Callable, Dict, List, Optional, Tuple

from dateutil import parser as dtparser
from dateutil.relativedelta import relativedelta

from .exceptions import UnrecognizedDueDateExpressionError

logger = logging.getLogger("taskman")

SHIFT_SEPARATOR = "::"
SHIFT_SIGNS = "+-"

DUE_DATE_SHIFT_REGEX = re.compile(
    r"(?:^|::)"
    r"(?:(?P<years>[+-][0-9]+)y)?"
    r"(?:(?P<months>[+-][0-9]+)m)?"
    r"(?:(?P<weeks>[+-][0-9]+)w)?"
    r"(?:(?P<days>[+-][0-9]+)d)?"
    r"$",
    re.IGNORECASE,
)

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def week_beginning(day: date) -> date:
    """Monday of the week containing the day"""
    return day - timedelta(days=day.weekday())


def month_end(day: date) -> date:
    return day + relativedelta(day=31)


def year_end(day: date) -> date:
    return date(day.year, 12, 31)


def _natural_language_dates() -> Dict[Tuple[str, ...], Callable[[date], date]]:
    table: Dict[Tuple[str, ...], Callable[[date], date]] = {
        ("today",): lambda today: today,
        ("tomorrow",): lambda today: today + timedelta(days=1),
    }
    for offset, weekday in enumerate(WEEKDAYS):
        this_keys: Tuple[str, ...] = (f"this {weekday}",)
        next_keys: Tuple[str, ...] = (f"next {weekday}",)
        if weekday == "sunday":
            this_keys += ("this week",)
            next_keys += ("next week",)
        table[this_keys] = lambda today, o=offset: week_beginning(today) + timedelta(days=o)
        table[next_keys] = lambda today, o=offset: week_beginning(today) + timedelta(days=o + 7)
    table[("this month",)] = month_end
    # Last day of the following month: from February that is March 31, not March 28.
    table[("next month",)] = lambda today: month_end(today + relativedelta(months=1))
    table[("this year",)] = year_end
    table[("next year",)] = lambda today: year_end(today + relativedelta(years=1))
    return table


NATURAL_LANGUAGE_DUE_DATES = _natural_language_dates()


def _normalise(text: str) -> str:
    return " ".join(text.lower().split())


def _natural_language_resolvers(text: str) -> List[Callable[[date], date]]:
    lowered = _normalise(text)
    return [
        resolver
        for keys, resolver in NATURAL_LANGUAGE_DUE_DATES.items()
        if any(key in lowered for key in keys)
    ]


def parse_absolute_date(text: str, today: Optional[date] = None) -> Optional[date]:
    """Parse a calendar date such as '2025-01-21', 'Jan 21 2025' or '21/01/2025'.

    Fields missing from the text are taken from today. Shift expressions and
    natural language keys are left to their own stages.
    """
    stripped = text.strip()
    if not stripped or stripped[0] in SHIFT_SIGNS or _natural_language_resolvers(stripped):
        return None

    default = datetime.combine(today or date.today(), time.min)
    try:
        return dtparser.parse(stripped, default=default).date()
    except (ValueError, OverflowError):
        return None


def match_natural_language(text: str, today: date) -> Optional[date]:
    """Date for the natural language key found in the text, if exactly one is"""
    matching = _natural_language_resolvers(text)
    if len(matching) > 1:
        raise UnrecognizedDueDateExpressionError(text)
    if matching:
        return matching[0](today)
    return None


def apply_shift(base: date, shift: re.Match) -> date:
    result = base
    if shift.group("years"):
        result += relativedelta(years=int(shift.group("years")))
    if shift.group("months"):
        result += relativedelta(months=int(shift.group("months")))
    if shift.group("weeks"):
        result += timedelta(weeks=int(shift.group("weeks")))
    if shift.group("days"):
        result += timedelta(days=int(shift.group("days")))
    return result


def parse_due_date(text: str, today: Optional[date] = None) -> date:
    """Resolve a due date expression into a date.

    Raises:
        UnrecognizedDueDateExpressionError: no layer of the expression matched
    """
    today = today or date.today()

    # Absolute date
    parts = [part for part in text.split(SHIFT_SEPARATOR) if part.strip()]
    absolute = parse_absolute_date(parts[0], today) if parts else None
    result = absolute or today

    # Natural language date
    natural = match_natural_language(text, today)
    if natural is not None:
        result = natural

    # Relative shift
    shift = DUE_DATE_SHIFT_REGEX.search(text.strip())
    if shift is not None and not any(shift.groupdict().values()):
        shift = None

    if absolute is None and natural is None and shift is None:
        raise UnrecognizedDueDateExpressionError(text)

    if shift is not None:
        try:
            result = apply_shift(result, shift)
        except (ValueError, OverflowError):
            # shifted past the representable calendar
            raise UnrecognizedDueDateExpressionError(text) from None

    logger.debug(f"Due date '{text}' resolved to {result.isoformat()}")
    return result
