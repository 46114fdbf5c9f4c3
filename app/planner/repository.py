"""Data access — async lookups of goal and frequency snapshots.

Tables:
  goals(id, name, target_quantity, current_progress, deadline, difficulty,
        importance, unit_code)
  frequencies(id, name)

Lookups raise NotFound errors; the engine never sees a missing row.
Rows that do not form a valid snapshot raise InvalidInputError.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.planner.exceptions import FrequencyNotFoundError, GoalNotFoundError, InvalidInputError
from app.planner.models import FrequencySnapshot, GoalSnapshot

SnapshotT = TypeVar("SnapshotT", bound=BaseModel)


async def _fetch_one(session: AsyncSession, query: str, params: dict[str, Any]) -> dict[str, Any] | None:
    result = await session.execute(text(query), params)
    row = result.fetchone()
    if row is None:
        return None
    columns = result.keys()
    return dict(zip(columns, row))


def _snapshot(model: type[SnapshotT], row: dict[str, Any], label: str) -> SnapshotT:
    try:
        return model.model_validate(row)
    except ValidationError as exc:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in exc.errors())
        raise InvalidInputError(f"Malformed {label} '{row.get('id')}': invalid {fields}")


async def load_goal(session: AsyncSession, goal_id: int) -> GoalSnapshot:
    row = await _fetch_one(
        session,
        "SELECT id, name, target_quantity, current_progress, deadline, "
        "difficulty, importance, unit_code "
        "FROM goals WHERE id = :goal_id",
        {"goal_id": goal_id},
    )
    if row is None:
        raise GoalNotFoundError(goal_id)
    # NULL columns fall back to model defaults; required ones fail validation
    return _snapshot(GoalSnapshot, {k: v for k, v in row.items() if v is not None}, "goal")


async def load_frequency(session: AsyncSession, frequency_id: int) -> FrequencySnapshot:
    row = await _fetch_one(
        session,
        "SELECT id, name FROM frequencies WHERE id = :frequency_id",
        {"frequency_id": frequency_id},
    )
    if row is None:
        raise FrequencyNotFoundError(frequency_id)
    return _snapshot(FrequencySnapshot, row, "frequency")


async def list_frequencies(session: AsyncSession) -> list[FrequencySnapshot]:
    result = await session.execute(text("SELECT id, name FROM frequencies ORDER BY id"))
    columns = result.keys()
    return [_snapshot(FrequencySnapshot, dict(zip(columns, r)), "frequency") for r in result.fetchall()]
