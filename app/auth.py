"""API key verification for planner endpoints."""

from fastapi import Header, HTTPException

from app.config import settings


def _extract_key(x_api_key: str | None, authorization: str | None) -> str | None:
    if x_api_key is not None:
        return x_api_key
    if authorization and authorization.startswith("Bearer "):
        return authorization[7:].strip()
    return None


async def verify_api_key(
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
    authorization: str | None = Header(default=None),
) -> str:
    """Validate the caller's key (X-API-Key or Authorization: Bearer).

    With PLANNER_API_KEY unset every request passes.
    """
    if settings.planner_api_key is None:
        return ""

    key = _extract_key(x_api_key, authorization)
    if key != settings.planner_api_key:
        raise HTTPException(status_code=401, detail="Invalid or missing API key")
    return key
