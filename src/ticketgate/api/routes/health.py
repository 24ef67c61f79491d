"""Health check routes: liveness, readiness, and general health."""

from __future__ import annotations

import time
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from ticketgate.api.schemas.common import HealthResponse
from ticketgate.core.constants import CROSSFI_CHAINS

router = APIRouter()


def _network_name(chain_id: int) -> str | None:
    for chain in CROSSFI_CHAINS.values():
        if chain["chain_id"] == chain_id:
            return str(chain["name"])
    return None


@router.get("/health", response_model=HealthResponse)
def health_check(request: Request) -> dict[str, Any]:
    """Application health check endpoint."""
    settings = getattr(request.app.state, "settings", None)
    ledger = getattr(request.app.state, "ledger", None)
    return {
        "status": "ok",
        "environment": settings.app_env if settings else "unknown",
        "ledger": ledger.name if ledger is not None else "none",
        "network": _network_name(settings.ledger_chain_id) if settings else None,
    }


@router.get("/health/live")
def liveness_probe() -> dict[str, Any]:
    """Liveness probe: is the process alive and responding?"""
    return {"status": "alive"}


@router.get("/health/ready")
def readiness_probe(request: Request) -> Any:
    """Readiness probe: can the ledger serve reads right now?

    A stub ledger counts as ready outside production.
    """
    checks: dict[str, Any] = {}
    overall_ready = True
    settings = getattr(request.app.state, "settings", None)
    ledger = getattr(request.app.state, "ledger", None)

    if ledger is None:
        checks["ledger"] = {"status": "not_configured"}
        overall_ready = False
    else:
        start = time.perf_counter()
        reachable = ledger.ping()
        elapsed_ms = (time.perf_counter() - start) * 1000
        checks["ledger"] = {
            "status": "ok" if reachable else "error",
            "backend": ledger.name,
            "response_time_ms": round(elapsed_ms, 1),
        }
        if not reachable:
            overall_ready = False
        if settings and settings.is_production and not settings.ledger_configured:
            checks["ledger"]["status"] = "stub"
            overall_ready = False

    body = {
        "status": "ready" if overall_ready else "not_ready",
        "checks": checks,
    }
    if not overall_ready:
        return JSONResponse(content=body, status_code=503)
    return body
