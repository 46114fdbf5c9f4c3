"""Planner error kinds.

Each subclass carries the HTTP status and error code the API renders it
with, so routers never translate errors by hand.
"""

from fastapi import status


class PlannerError(Exception):
    """Base exception for all decomposition errors."""

    http_status_code: int = status.HTTP_400_BAD_REQUEST
    error_code: str = "PLANNER_ERROR"

    def __init__(self, message: str = "A planner error occurred"):
        self.message = message
        super().__init__(self.message)


class InvalidInputError(PlannerError):
    """Malformed goal, frequency or quantity data."""

    http_status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    error_code = "INVALID_INPUT"


class InfeasibleError(PlannerError):
    """Deadline search cannot converge."""

    http_status_code = status.HTTP_409_CONFLICT
    error_code = "INFEASIBLE"


class NotFoundError(PlannerError):
    """Raised by the data layer when a lookup misses."""

    http_status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"

    def __init__(self, entity_type: str, entity_id: int | str | None = None):
        message = f"{entity_type} not found"
        if entity_id is not None:
            message = f"{entity_type} with id '{entity_id}' not found"
        super().__init__(message)


class GoalNotFoundError(NotFoundError):
    def __init__(self, goal_id: int | str):
        super().__init__("Goal", goal_id)


class FrequencyNotFoundError(NotFoundError):
    def __init__(self, frequency_id: int | str):
        super().__init__("Frequency", frequency_id)
