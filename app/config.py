from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "postgresql+asyncpg://localhost:5432/goalplanner"
    default_tz: str = "UTC"
    planner_api_key: str | None = None
    log_level: str = "INFO"

    # Feasibility threshold: difficulty (1-5) -> per-occurrence capacity.
    # Empty means capacity is unbounded and every positive schedule is feasible.
    planner_capacity_table: dict[int, float] = {}
    planner_importance_bias: float = 0.0  # +bias per importance point above 3

    # Deadline search bounds
    planner_search_horizon_days: int = 3650
    planner_max_iterations: int = 10000

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
