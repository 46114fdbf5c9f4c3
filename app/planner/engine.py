"""Decomposition engine — pure, synchronous, no I/O.

Splits the remaining work of a goal across the occurrences of a recurrence
rule between ``now`` and the goal deadline, judges the pace against a
capacity policy and, when the pace is not achievable, looks for the
earliest deadline that would be.
"""

from __future__ import annotations

import math
from datetime import date, datetime, time, timedelta

from loguru import logger

from app.planner.capacity import CapacityPolicy, UnboundedCapacity
from app.planner.exceptions import InfeasibleError, InvalidInputError
from app.planner.models import DecompositionResult, FrequencyRule, GoalSnapshot
from app.planner.occurrences import count_occurrences, next_occurrence

DEFAULT_SEARCH_HORIZON_DAYS = 3650
DEFAULT_MAX_ITERATIONS = 10_000

_log = logger.bind(service="DecompositionEngine")


def _covers(total: float, remaining: float) -> bool:
    return total >= remaining or math.isclose(total, remaining, rel_tol=1e-9)


def resolve_deadline(deadline: datetime | date, now: datetime) -> datetime:
    """Deadline as a datetime comparable with ``now``.

    A bare date means the end of that day, in ``now``'s timezone. Aware
    deadlines are converted to ``now``'s timezone so schedule arithmetic
    runs on a single wall clock.
    """
    if isinstance(deadline, datetime):
        resolved = deadline
    elif isinstance(deadline, date):
        resolved = datetime.combine(deadline, time.max, tzinfo=now.tzinfo)
    else:
        raise InvalidInputError(f"Malformed deadline: {deadline!r}")
    if (resolved.tzinfo is None) != (now.tzinfo is None):
        raise InvalidInputError("Deadline cannot be compared to the current time")
    if now.tzinfo is not None and resolved.tzinfo is not now.tzinfo:
        try:
            resolved = resolved.astimezone(now.tzinfo)
        except OverflowError:
            raise InvalidInputError(f"Deadline out of supported range: {deadline!r}")
    return resolved


def _validate(goal: GoalSnapshot, quantity: float | None) -> None:
    if not math.isfinite(goal.target_quantity) or goal.target_quantity < 0:
        raise InvalidInputError(f"Target quantity must be a non-negative number, got {goal.target_quantity}")
    if not math.isfinite(goal.current_progress) or goal.current_progress < 0:
        raise InvalidInputError(f"Current progress must be a non-negative number, got {goal.current_progress}")
    if quantity is not None and (not math.isfinite(quantity) or quantity < 0):
        raise InvalidInputError(f"Quantity must be a non-negative number, got {quantity}")


def suggest_deadline(
    rule: FrequencyRule,
    now: datetime,
    deadline: datetime,
    remaining: float,
    pace: float,
    search_horizon_days: int = DEFAULT_SEARCH_HORIZON_DAYS,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> datetime | None:
    """Earliest occurrence after ``deadline`` by which ``pace`` covers ``remaining``.

    Returns None when the deadline already suffices. Raises InfeasibleError
    when the pace is non-positive or the search leaves its bounds.
    """
    if remaining <= 0:
        return None
    if pace <= 0:
        raise InfeasibleError("No positive pace is available, the remaining work can never be completed")

    start = max(now, deadline)
    done = count_occurrences(rule, now, start)
    if _covers(done * pace, remaining):
        return None

    try:
        horizon = start + timedelta(days=search_horizon_days)
        cursor = start
        for _ in range(max_iterations):
            cursor = next_occurrence(rule, cursor, anchor=now)
            if cursor > horizon:
                break
            done += 1
            if _covers(done * pace, remaining):
                return cursor
    except OverflowError:
        raise InvalidInputError(f"Deadline search leaves the supported date range after {start.isoformat()}")

    raise InfeasibleError(
        f"No workable deadline within {search_horizon_days} days at {pace:g} per occurrence"
    )


def decompose(
    goal: GoalSnapshot,
    rule: FrequencyRule,
    quantity: float | None = None,
    *,
    now: datetime,
    capacity_policy: CapacityPolicy | None = None,
    search_horizon_days: int = DEFAULT_SEARCH_HORIZON_DAYS,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> DecompositionResult:
    """Per-occurrence quantity, feasibility, suggested deadline and shortfall.

    ``quantity`` overrides the derived per-occurrence quantity; the result
    then reports whether that quantity fits within capacity. Shortfall and
    suggested deadline are always measured at capacity pace.
    """
    _validate(goal, quantity)
    deadline = resolve_deadline(goal.deadline, now)
    policy = capacity_policy or UnboundedCapacity()

    remaining = goal.remaining
    try:
        occurrences = count_occurrences(rule, now, deadline)
    except OverflowError:
        raise InvalidInputError(f"Deadline out of supported range: {deadline.isoformat()}")
    capacity = policy.capacity_for(goal, rule)
    _log.debug(
        f"goal={goal.id} rule={rule.pattern.value}/{rule.interval} remaining={remaining} "
        f"occurrences={occurrences} capacity={capacity} quantity={quantity}"
    )

    if remaining == 0:
        return DecompositionResult(
            required_quantity=0.0,
            feasible=True,
            occurrences=occurrences,
            capacity=capacity,
        )

    if occurrences == 0:
        suggested = None
        if quantity is None and capacity is not None:
            suggested = suggest_deadline(
                rule, now, deadline, remaining, capacity, search_horizon_days, max_iterations
            )
        return DecompositionResult(
            required_quantity=remaining,
            feasible=None,
            suggested_deadline=suggested,
            occurrences=0,
            capacity=capacity,
        )

    required = remaining / occurrences if quantity is None else quantity
    if capacity is None or required <= capacity:
        return DecompositionResult(
            required_quantity=required,
            feasible=True,
            occurrences=occurrences,
            capacity=capacity,
        )

    shortfall = max(0.0, remaining - capacity * occurrences)
    suggested = suggest_deadline(
        rule, now, deadline, remaining, capacity, search_horizon_days, max_iterations
    )
    _log.debug(f"goal={goal.id} infeasible shortfall={shortfall} suggested={suggested}")
    return DecompositionResult(
        required_quantity=required,
        feasible=False,
        suggested_deadline=suggested,
        value_shortfall=shortfall,
        occurrences=occurrences,
        capacity=capacity,
    )
