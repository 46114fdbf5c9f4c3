"""Planner HTTP router — decomposition & frequency catalogue."""

from __future__ import annotations

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, HTTPException, Query
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import verify_api_key
from app.config import settings
from app.db import get_session
from app.planner import engine, repository
from app.planner.capacity import CapacityPolicy, policy_from_settings
from app.planner.exceptions import InvalidInputError
from app.planner.frequencies import list_patterns, resolve_rule, try_resolve_rule
from app.planner.models import (
    DecompositionRequest,
    DecompositionResult,
    FrequencyView,
    GoalSnapshot,
    OccurrencePreview,
)
from app.planner.occurrences import count_occurrences, list_occurrences

router = APIRouter(tags=["planner"])

_log = logger.bind(service="PlannerRouter")

# Built once so a malformed PLANNER_CAPACITY_TABLE fails at startup
capacity_policy = policy_from_settings(settings)


def get_capacity_policy() -> CapacityPolicy:
    return capacity_policy


def _now() -> datetime:
    return datetime.now(ZoneInfo(settings.default_tz))


def _localize(goal: GoalSnapshot, tz: ZoneInfo) -> GoalSnapshot:
    """Naive deadlines from the store are read in the configured timezone."""
    if isinstance(goal.deadline, datetime) and goal.deadline.tzinfo is None:
        return goal.model_copy(update={"deadline": goal.deadline.replace(tzinfo=tz)})
    return goal


def _parse_instant(value: str, name: str, tz: ZoneInfo) -> datetime:
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Invalid date for '{name}': {value}")
    return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=tz)


# ---------------------------------------------------------------------------
# /goals/decompose
# ---------------------------------------------------------------------------


@router.post("/goals/decompose", response_model=DecompositionResult)
async def decompose_goal(
    request: DecompositionRequest,
    session: AsyncSession = Depends(get_session),
    policy: CapacityPolicy = Depends(get_capacity_policy),
    _: str = Depends(verify_api_key),
) -> DecompositionResult:
    tz = ZoneInfo(settings.default_tz)
    goal = _localize(await repository.load_goal(session, request.goal_id), tz)
    frequency = await repository.load_frequency(session, request.frequency_id)
    rule = resolve_rule(frequency.name)

    result = engine.decompose(
        goal,
        rule,
        request.quantity,
        now=_now(),
        capacity_policy=policy,
        search_horizon_days=settings.planner_search_horizon_days,
        max_iterations=settings.planner_max_iterations,
    )
    _log.info(
        f"Decomposed goal {goal.id} with '{frequency.name}': "
        f"required={result.required_quantity:g} feasible={result.feasible}"
    )
    return result


# ---------------------------------------------------------------------------
# /frequencies
# ---------------------------------------------------------------------------


@router.get("/frequencies", response_model=list[FrequencyView])
async def frequencies_list(
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
) -> list[FrequencyView]:
    return [
        FrequencyView(id=f.id, name=f.name, rule=try_resolve_rule(f.name))
        for f in await repository.list_frequencies(session)
    ]


@router.get("/frequencies/patterns")
async def frequency_patterns(
    _: str = Depends(verify_api_key),
) -> list[str]:
    return list_patterns()


@router.get("/frequencies/{frequency_id}/occurrences", response_model=OccurrencePreview)
async def frequency_occurrences(
    frequency_id: int,
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
    to_date: str = Query(..., alias="to", description="End of range, inclusive (ISO date or datetime)"),
    from_date: str | None = Query(default=None, alias="from", description="Start of range, exclusive (default: now)"),
    limit: int = Query(default=100, ge=1, le=1000),
) -> OccurrencePreview:
    tz = ZoneInfo(settings.default_tz)
    frequency = await repository.load_frequency(session, frequency_id)
    rule = resolve_rule(frequency.name)

    start = _parse_instant(from_date, "from", tz) if from_date else _now()
    end = _parse_instant(to_date, "to", tz)
    if end - start > timedelta(days=settings.planner_search_horizon_days):
        raise HTTPException(
            status_code=422,
            detail=f"Range may span at most {settings.planner_search_horizon_days} days",
        )

    try:
        total = count_occurrences(rule, start, end)
        instants = list_occurrences(rule, start, end, limit=limit)
    except OverflowError:
        raise InvalidInputError(f"Range leaves the supported date range: {end.isoformat()}")
    return OccurrencePreview(
        frequency_id=frequency.id,
        rule=rule,
        start=start,
        end=end,
        count=total,
        occurrences=instants,
        truncated=total > len(instants),
    )
