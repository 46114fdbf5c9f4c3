"""Occurrence calculator — pure calendar arithmetic, never reads the clock.

A schedule is anchored at an instant: every occurrence keeps the anchor's
time of day and tzinfo, and only instants strictly after the anchor belong
to it. Callers pass both bounds explicitly.
"""

from __future__ import annotations

import calendar
from datetime import datetime, timedelta
from itertools import islice
from typing import Callable, Iterator

from app.planner.exceptions import InvalidInputError
from app.planner.models import FrequencyRule, RecurrencePattern

_ONE_DAY = timedelta(days=1)


def _ensure_comparable(a: datetime, b: datetime) -> None:
    if (a.tzinfo is None) != (b.tzinfo is None):
        raise InvalidInputError("Cannot compare naive and timezone-aware datetimes")


def _fixed_period(rule: FrequencyRule) -> timedelta | None:
    """Period for patterns that repeat every N days, None otherwise."""
    if rule.pattern in (RecurrencePattern.daily, RecurrencePattern.every_n_days):
        return timedelta(days=rule.interval)
    if rule.pattern == RecurrencePattern.weekly and rule.weekday is None:
        return timedelta(days=7 * rule.interval)
    return None


def _next_on_grid(first: datetime, period: timedelta, after: datetime) -> datetime:
    """Smallest ``first + k * period`` (k >= 0) strictly after ``after``."""
    if after < first:
        return first
    k = (after - first) // period + 1
    return first + k * period


def _next_fixed(rule: FrequencyRule, after: datetime, anchor: datetime) -> datetime:
    period = _fixed_period(rule)
    if period is None:
        raise InvalidInputError(f"Pattern {rule.pattern.value} has no fixed period")
    return _next_on_grid(anchor + period, period, after)


def _next_weekly(rule: FrequencyRule, after: datetime, anchor: datetime) -> datetime:
    if rule.weekday is None:
        return _next_fixed(rule, after, anchor)
    days_ahead = (rule.weekday - anchor.weekday()) % 7 or 7
    first = anchor + timedelta(days=days_ahead)
    return _next_on_grid(first, timedelta(days=7 * rule.interval), after)


def _next_weekday(rule: FrequencyRule, after: datetime, anchor: datetime) -> datetime:
    if after < anchor:
        candidate = anchor + _ONE_DAY
    else:
        candidate = anchor + ((after - anchor) // _ONE_DAY + 1) * _ONE_DAY
    # Saturday=5, Sunday=6
    while candidate.weekday() >= 5:
        candidate += _ONE_DAY
    return candidate


def month_instant(anchor: datetime, months: int, day: int) -> datetime:
    """``anchor`` shifted by ``months``, on ``day`` or the month's last day."""
    years, month_index = divmod(anchor.month - 1 + months, 12)
    year = anchor.year + years
    month = month_index + 1
    last_day = calendar.monthrange(year, month)[1]
    return anchor.replace(year=year, month=month, day=min(day, last_day))


def _next_monthly(rule: FrequencyRule, after: datetime, anchor: datetime) -> datetime:
    day = rule.day_of_month or anchor.day
    target = max(after, anchor)
    months_between = (target.year - anchor.year) * 12 + target.month - anchor.month
    k = months_between // rule.interval
    candidate = month_instant(anchor, k * rule.interval, day)
    while candidate <= target:
        k += 1
        candidate = month_instant(anchor, k * rule.interval, day)
    return candidate


STEPPERS: dict[RecurrencePattern, Callable[[FrequencyRule, datetime, datetime], datetime]] = {
    RecurrencePattern.daily: _next_fixed,
    RecurrencePattern.every_n_days: _next_fixed,
    RecurrencePattern.weekdays: _next_weekday,
    RecurrencePattern.weekly: _next_weekly,
    RecurrencePattern.monthly: _next_monthly,
}


def next_occurrence(
    rule: FrequencyRule,
    after: datetime,
    anchor: datetime | None = None,
) -> datetime:
    """First scheduled instant strictly after ``after``.

    The schedule grid is anchored at ``anchor`` (defaults to ``after``).
    """
    if anchor is None:
        anchor = after
    _ensure_comparable(after, anchor)
    stepper = STEPPERS.get(rule.pattern)
    if stepper is None:
        raise InvalidInputError(f"Unsupported recurrence pattern: {rule.pattern}")
    return stepper(rule, after, anchor)


def iter_occurrences(
    rule: FrequencyRule,
    start_exclusive: datetime,
    end_inclusive: datetime | None = None,
) -> Iterator[datetime]:
    """Yield the schedule anchored at ``start_exclusive`` in ascending order.

    Unbounded when ``end_inclusive`` is None; callers must cap it.
    """
    if end_inclusive is not None:
        _ensure_comparable(start_exclusive, end_inclusive)
    cursor = start_exclusive
    while True:
        cursor = next_occurrence(rule, cursor, anchor=start_exclusive)
        if end_inclusive is not None and cursor > end_inclusive:
            return
        yield cursor


def count_occurrences(
    rule: FrequencyRule,
    start_exclusive: datetime,
    end_inclusive: datetime,
) -> int:
    """Number of occurrences in ``(start_exclusive, end_inclusive]``. 0 for empty ranges."""
    _ensure_comparable(start_exclusive, end_inclusive)
    if end_inclusive <= start_exclusive:
        return 0
    period = _fixed_period(rule)
    if period is not None:
        return (end_inclusive - start_exclusive) // period
    return sum(1 for _ in iter_occurrences(rule, start_exclusive, end_inclusive))


def list_occurrences(
    rule: FrequencyRule,
    start_exclusive: datetime,
    end_inclusive: datetime,
    limit: int | None = None,
) -> list[datetime]:
    _ensure_comparable(start_exclusive, end_inclusive)
    if end_inclusive <= start_exclusive:
        return []
    return list(islice(iter_occurrences(rule, start_exclusive, end_inclusive), limit))
