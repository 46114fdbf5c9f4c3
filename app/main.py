from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from app.log import setup_logging
from app.planner.exceptions import PlannerError
from app.planner.router import router as planner_router

setup_logging()

app = FastAPI(title="GoalPlanner", version="0.1.0")
app.include_router(planner_router)


@app.exception_handler(PlannerError)
async def planner_error_handler(_request: Request, exc: PlannerError) -> JSONResponse:
    logger.warning(f"{exc.error_code}: {exc.message}")
    return JSONResponse(
        status_code=exc.http_status_code,
        content={"error": {"code": exc.error_code, "message": exc.message}},
    )


@app.get("/")
async def root() -> dict:
    return {
        "status": "ok",
        "docs": "/docs",
        "health": "/health",
        "planner": {
            "decompose": "/goals/decompose",
            "frequencies": "/frequencies",
            "frequency_patterns": "/frequencies/patterns",
            "frequency_occurrences": "/frequencies/{id}/occurrences",
        },
    }


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
