"""Goal decomposition contract — Pydantic v2 models."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts and emits camelCase keys, like the browser client."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RecurrencePattern(str, Enum):
    daily = "daily"
    every_n_days = "every_n_days"
    weekdays = "weekdays"
    weekly = "weekly"
    monthly = "monthly"


class FrequencyRule(CamelModel):
    """Parsed recurrence: pattern plus its parameters."""

    model_config = ConfigDict(frozen=True)

    pattern: RecurrencePattern
    interval: int = Field(default=1, ge=1)
    weekday: int | None = Field(default=None, ge=0, le=6)  # 0 = Monday
    day_of_month: int | None = Field(default=None, ge=1, le=31)


class GoalSnapshot(CamelModel):
    id: int
    name: str = ""
    target_quantity: float
    current_progress: float = 0.0
    deadline: datetime | date
    difficulty: int = 3
    importance: int = 3
    unit_code: str | None = None

    @property
    def remaining(self) -> float:
        """Work left, never negative."""
        return max(0.0, self.target_quantity - self.current_progress)


class FrequencySnapshot(CamelModel):
    id: int
    name: str


class FrequencyView(CamelModel):
    id: int
    name: str
    rule: FrequencyRule | None = None


class DecompositionRequest(CamelModel):
    goal_id: int
    frequency_id: int
    quantity: float | None = None


class DecompositionResult(CamelModel):
    """Outcome of one decomposition.

    ``feasible`` is tri-state: ``None`` means indeterminate (no occurrence
    left before the deadline while work remains).
    """

    required_quantity: float = Field(ge=0.0)
    feasible: bool | None
    suggested_deadline: datetime | None = None
    value_shortfall: float | None = Field(default=None, ge=0.0)
    occurrences: int = Field(default=0, ge=0)
    capacity: float | None = None

    @model_validator(mode="after")
    def _shortfall_only_when_infeasible(self) -> DecompositionResult:
        if (self.value_shortfall is not None) != (self.feasible is False):
            raise ValueError("value_shortfall must be set exactly when feasible is False")
        return self


class OccurrencePreview(CamelModel):
    frequency_id: int
    rule: FrequencyRule
    start: datetime
    end: datetime
    count: int
    occurrences: list[datetime] = Field(default_factory=list)
    truncated: bool = False
