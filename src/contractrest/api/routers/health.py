"""
Health router — liveness and readiness probes.

Endpoints:
    GET /health         Service status and synthesized route count
    GET /health/live    Liveness probe — always 200
    GET /health/ready   Readiness probe — 503 until the route tree is built
"""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from contractrest.api.deps import RouteTree, Settings
from contractrest.api.schemas import HealthResponse

router = APIRouter(prefix="/health", tags=["health"])


def _health(settings: Settings, tree: RouteTree) -> HealthResponse:
    return HealthResponse(
        status="healthy" if tree is not None else "starting",
        service=settings.api_title,
        version=settings.api_version,
        paths=tree.path_count if tree is not None else 0,
    )


@router.get("", response_model=HealthResponse)
def health(settings: Settings, tree: RouteTree) -> HealthResponse:
    """Service status and number of synthesized operation routes."""
    return _health(settings, tree)


@router.get("/live")
def liveness() -> dict[str, bool]:
    return {"ok": True}


@router.get("/ready", response_model=HealthResponse)
def readiness(settings: Settings, tree: RouteTree) -> JSONResponse:
    """503 until boot-time synthesis has completed."""
    body = _health(settings, tree)
    return JSONResponse(content=body.model_dump(), status_code=200 if tree is not None else 503)
