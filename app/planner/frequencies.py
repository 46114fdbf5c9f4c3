"""Frequency catalogue — maps stored frequency names to recurrence rules.

Fixed names live in FREQUENCY_CATALOGUE; parameterised names
(every_3_days, weekly_friday, monthly_31, ...) are parsed by pattern.
"""

from __future__ import annotations

import re

from app.planner.exceptions import InvalidInputError
from app.planner.models import FrequencyRule, RecurrencePattern

WEEKDAY_NAMES: dict[str, int] = {
    "monday": 0,
    "tuesday": 1,
    "wednesday": 2,
    "thursday": 3,
    "friday": 4,
    "saturday": 5,
    "sunday": 6,
}

FREQUENCY_CATALOGUE: dict[str, FrequencyRule] = {
    "daily": FrequencyRule(pattern=RecurrencePattern.daily),
    "every_other_day": FrequencyRule(pattern=RecurrencePattern.every_n_days, interval=2),
    "weekdays": FrequencyRule(pattern=RecurrencePattern.weekdays),
    "weekly": FrequencyRule(pattern=RecurrencePattern.weekly),
    "biweekly": FrequencyRule(pattern=RecurrencePattern.weekly, interval=2),
    "monthly": FrequencyRule(pattern=RecurrencePattern.monthly),
    "quarterly": FrequencyRule(pattern=RecurrencePattern.monthly, interval=3),
}

_EVERY_N = re.compile(r"^every_(\d+)_(day|week|month)s?$")
_WEEKLY_ON = re.compile(r"^weekly_(" + "|".join(WEEKDAY_NAMES) + r")$")
_MONTHLY_ON = re.compile(r"^monthly_(\d{1,2})$")


def normalize_name(name: str) -> str:
    return re.sub(r"[\s\-]+", "_", name.strip().lower())


def resolve_rule(name: str) -> FrequencyRule:
    """Resolve a frequency name to its rule.

    Raises InvalidInputError for names outside the recognised patterns.
    """
    key = normalize_name(name)
    rule = FREQUENCY_CATALOGUE.get(key)
    if rule is not None:
        return rule

    match = _EVERY_N.match(key)
    if match:
        n = int(match.group(1))
        if n < 1:
            raise InvalidInputError(f"Frequency interval must be positive: '{name}'")
        unit = match.group(2)
        if unit == "day":
            pattern = RecurrencePattern.daily if n == 1 else RecurrencePattern.every_n_days
            return FrequencyRule(pattern=pattern, interval=n)
        if unit == "week":
            return FrequencyRule(pattern=RecurrencePattern.weekly, interval=n)
        return FrequencyRule(pattern=RecurrencePattern.monthly, interval=n)

    match = _WEEKLY_ON.match(key)
    if match:
        return FrequencyRule(pattern=RecurrencePattern.weekly, weekday=WEEKDAY_NAMES[match.group(1)])

    match = _MONTHLY_ON.match(key)
    if match:
        day = int(match.group(1))
        if not 1 <= day <= 31:
            raise InvalidInputError(f"Day of month out of range: '{name}'")
        return FrequencyRule(pattern=RecurrencePattern.monthly, day_of_month=day)

    raise InvalidInputError(f"Unrecognized frequency: '{name}'")


def try_resolve_rule(name: str) -> FrequencyRule | None:
    try:
        return resolve_rule(name)
    except InvalidInputError:
        return None


def list_patterns() -> list[str]:
    return list(FREQUENCY_CATALOGUE)
