"""Shared fixtures for the test suite."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from app.db import get_session
from app.main import app

NOW = datetime(2026, 2, 15, 9, 0, tzinfo=timezone.utc)  # a Sunday


# ---------------------------------------------------------------------------
# Fake DB session (no real Postgres needed)
# ---------------------------------------------------------------------------

class FakeResult:
    def __init__(self, rows: list[dict[str, Any]]):
        self._rows = rows
        self._keys = list(rows[0].keys()) if rows else []

    def keys(self):
        return self._keys

    def fetchone(self):
        if not self._rows:
            return None
        return tuple(self._rows[0][k] for k in self._keys)

    def fetchall(self):
        return [tuple(r[k] for k in self._keys) for r in self._rows]


class FakeSession:
    """Minimal stand-in for AsyncSession: serves goals and frequencies by id."""

    def __init__(
        self,
        goals: list[dict[str, Any]] | None = None,
        frequencies: list[dict[str, Any]] | None = None,
    ):
        self.goals = goals or []
        self.frequencies = frequencies or []

    async def execute(self, stmt, params=None):
        sql = str(stmt)
        params = params or {}
        if "FROM goals" in sql:
            rows = self.goals
            if "goal_id" in params:
                rows = [r for r in rows if r["id"] == params["goal_id"]]
            return FakeResult(rows)
        if "FROM frequencies" in sql:
            rows = self.frequencies
            if "frequency_id" in params:
                rows = [r for r in rows if r["id"] == params["frequency_id"]]
            return FakeResult(rows)
        return FakeResult([])

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        pass


def make_goal_row(
    goal_id: int = 1,
    target_quantity: float = 100.0,
    current_progress: float = 20.0,
    deadline: datetime | None = None,
    difficulty: int | None = 3,
    importance: int | None = 3,
) -> dict[str, Any]:
    """Helper to build a fake goals row dict."""
    return {
        "id": goal_id,
        "name": f"Goal {goal_id}",
        "target_quantity": target_quantity,
        "current_progress": current_progress,
        "deadline": deadline if deadline is not None else NOW + timedelta(days=10),
        "difficulty": difficulty,
        "importance": importance,
        "unit_code": "pages",
    }


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def fake_session():
    return FakeSession(
        goals=[
            make_goal_row(1),
            make_goal_row(2, target_quantity=50.0, current_progress=50.0, deadline=NOW + timedelta(days=5)),
            make_goal_row(3, deadline=NOW - timedelta(days=3), difficulty=None, importance=None),
        ],
        frequencies=[
            {"id": 1, "name": "daily"},
            {"id": 2, "name": "Weekly"},
            {"id": 3, "name": "weekdays"},
            {"id": 9, "name": "hourly"},
        ],
    )


@pytest.fixture()
def override_session(fake_session):
    """Override the FastAPI dependency so no real DB is needed."""
    async def _override():
        yield fake_session

    app.dependency_overrides[get_session] = _override
    yield fake_session
    app.dependency_overrides.clear()


@pytest.fixture()
async def client(override_session):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
