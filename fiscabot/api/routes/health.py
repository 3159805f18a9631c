"""
Health check endpoints.
"""

from typing import Dict

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from fiscabot.api.deps import ReportStore, get_store
from fiscabot.core.errors import PersistenceFailure

router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("/liveness", status_code=status.HTTP_200_OK)
async def liveness() -> Dict[str, str]:
    """Process is up and serving requests."""
    return {"status": "alive"}


@router.get("/readiness")
async def readiness(store: ReportStore = Depends(get_store)):
    """Ready once the complaint store answers."""
    checks: Dict[str, Dict[str, str]] = {}
    overall_status = status.HTTP_200_OK

    try:
        await store.healthcheck()
        checks["storage"] = {"status": "pass", "backend": store.backend}
    except PersistenceFailure as exc:
        checks["storage"] = {
            "status": "fail",
            "backend": store.backend,
            "reason": exc.details or exc.message,
        }
        overall_status = status.HTTP_503_SERVICE_UNAVAILABLE

    body = {
        "status": "ready" if overall_status == status.HTTP_200_OK else "not_ready",
        "checks": checks,
    }
    return JSONResponse(status_code=overall_status, content=body)
