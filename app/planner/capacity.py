"""Feasibility threshold policies.

A policy maps a goal (and the chosen rule) to the largest quantity a person
can be assumed to deliver per occurrence. ``None`` means unbounded.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Protocol

from app.config import Settings
from app.planner.exceptions import InvalidInputError
from app.planner.models import FrequencyRule, GoalSnapshot


class CapacityPolicy(Protocol):
    def capacity_for(self, goal: GoalSnapshot, rule: FrequencyRule) -> float | None: ...


@dataclass(frozen=True, slots=True)
class UnboundedCapacity:
    def capacity_for(self, goal: GoalSnapshot, rule: FrequencyRule) -> float | None:
        return None


@dataclass(frozen=True, slots=True)
class DifficultyCapacity:
    """Capacity looked up by difficulty, nudged by importance.

    capacity = table[difficulty] * (1 + importance_bias * (importance - neutral_importance))

    Difficulties outside the table use the nearest configured level. The
    table must not increase with difficulty.
    """

    table: dict[int, float] = field(default_factory=dict)
    importance_bias: float = 0.0
    neutral_importance: int = 3

    def __post_init__(self) -> None:
        if not self.table:
            raise InvalidInputError("Capacity table must not be empty")
        levels = sorted(self.table)
        values = [self.table[level] for level in levels]
        if any(not math.isfinite(v) for v in values):
            raise InvalidInputError("Capacity table values must be finite")
        if any(later > earlier for earlier, later in zip(values, values[1:])):
            raise InvalidInputError("Capacity must not increase with difficulty")

    def _base(self, difficulty: int) -> float:
        if difficulty in self.table:
            return self.table[difficulty]
        nearest = min(self.table, key=lambda level: (abs(level - difficulty), level))
        return self.table[nearest]

    def capacity_for(self, goal: GoalSnapshot, rule: FrequencyRule) -> float | None:
        factor = 1.0 + self.importance_bias * (goal.importance - self.neutral_importance)
        return max(0.0, self._base(goal.difficulty) * factor)


def policy_from_settings(settings: Settings) -> CapacityPolicy:
    if not settings.planner_capacity_table:
        return UnboundedCapacity()
    return DifficultyCapacity(
        table=dict(settings.planner_capacity_table),
        importance_bias=settings.planner_importance_bias,
    )
