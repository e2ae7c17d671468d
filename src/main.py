from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from src.adapters.api.controllers.fleet import router as fleet_router
from src.adapters.api.controllers.routes import router as routes_router
from src.adapters.api.dependencies import build_fleet_simulation_service

logger = logging.getLogger(__name__)


def _reveal_errors() -> bool:
    return (os.getenv("FLEETSIM_REVEAL_ERRORS") or "").strip().lower() in {"1", "true", "yes", "on"}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    service = build_fleet_simulation_service()
    app.state.fleet_simulation_service = service
    logger.info(
        "Fleet simulator ready: %d vehicle(s), %d route(s)",
        len(service.current_snapshot().vehicles),
        len(service.list_routes()),
    )
    try:
        yield
    finally:
        service.close()
        app.state.fleet_simulation_service = None


app = FastAPI(title="FleetSim", lifespan=lifespan)
app.include_router(routes_router)
app.include_router(fleet_router)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Ensure API errors are JSON so the dashboard can display them."""

    logging.getLogger("uvicorn.error").exception(
        "Unhandled exception", extra={"path": str(request.url.path)}
    )

    if _reveal_errors() or isinstance(exc, (FileNotFoundError, RuntimeError, ValueError)):
        detail = str(exc) or exc.__class__.__name__
    else:
        detail = "Internal Server Error"

    return JSONResponse(status_code=500, content={"detail": detail})


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
