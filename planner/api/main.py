"""FastAPI application for the conditional market planner."""

from __future__ import annotations

import logging

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from planner import __version__
from planner.api.endpoints import router
from planner.config import PlannerConfig
from planner.errors import (
    AccountNotFound,
    IlliquidPool,
    NotFound,
    PlannerError,
    UpstreamUnavailable,
)

logger = structlog.get_logger()

CONFIG = PlannerConfig.from_env()

# Anything not listed is a client error (400)
ERROR_STATUS: dict[type[PlannerError], int] = {
    AccountNotFound: 404,
    NotFound: 404,
    IlliquidPool: 409,
    UpstreamUnavailable: 502,
}

app = FastAPI(
    title="Conditional Market Planner",
    description="Trade, split and redemption planning for PASS/FAIL conditional markets",
    version=__version__,
)


def status_for(exc: PlannerError) -> int:
    for error_type, status in ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return status
    return 400


@app.exception_handler(PlannerError)
async def planner_error_handler(request: Request, exc: PlannerError) -> JSONResponse:
    status = status_for(exc)
    log = logger.error if status >= 500 else logger.info
    log("request_failed", path=request.url.path, kind=exc.kind, status=status, error=exc.message)
    return JSONResponse(status_code=status, content={"success": False, **exc.to_dict()})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed bodies (missing amount, bad user key) as 400 validation errors."""
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": "validation_error",
            "message": "Invalid request",
            "detail": jsonable_encoder(exc.errors()),
        },
    )


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def configure_logging(level: str = "INFO") -> None:
    """Install the structlog processor chain used by the service."""
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper(), logging.INFO)
        ),
    )


def run() -> None:
    """Run the planner API server.

    Configuration via environment variables:
    - PLANNER_HOST: Host to bind to (default: 0.0.0.0)
    - PLANNER_PORT: Port to bind to (default: 9000)
    - PLANNER_DEBUG: Enable reload mode (default: false)
    - PLANNER_LOG_LEVEL: Log level (default: INFO)
    - PLANNER_SNAPSHOT_PATH: Chain state snapshot to serve
    """
    configure_logging(CONFIG.log_level)
    logger.info("starting_server", host=CONFIG.host, port=CONFIG.port)
    uvicorn.run(
        "planner.api.main:app",
        host=CONFIG.host,
        port=CONFIG.port,
        reload=CONFIG.debug,
    )


if __name__ == "__main__":
    run()
