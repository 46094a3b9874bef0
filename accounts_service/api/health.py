"""Liveness and readiness probes.

/health answers "is the process up?" and reports dependency status; it
stays 200 when degraded so an orchestrator does not restart the pod over a
database blip.

/ready answers "should traffic be routed here?" and returns 503 while the
configured database is unreachable.
"""

from __future__ import annotations

from fastapi import APIRouter, Response, status

from accounts_service.db import engine as db

router = APIRouter(tags=["health"])


def _database_state(reachable: bool) -> str:
    if db.engine is None:
        return "not_configured"
    return "ok" if reachable else "degraded"


@router.get("/health")
async def health() -> dict:
    database = _database_state(await db.ping_database())
    return {
        "status": "degraded" if database == "degraded" else "ok",
        "checks": {"database": database},
    }


@router.get("/ready")
async def ready() -> Response:
    if not await db.ping_database():
        return Response(status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
    return Response(status_code=status.HTTP_200_OK)
