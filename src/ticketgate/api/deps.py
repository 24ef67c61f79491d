"""Dependency injection for FastAPI routes."""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Depends, HTTPException, Query, Request

from ticketgate.core.config import Settings
from ticketgate.core.constants import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    UINT256_DIGITS,
    UINT256_MAX,
)
from ticketgate.ledger.base import BaseLedger
from ticketgate.services.access import TicketAccessService
from ticketgate.services.events import EventCatalogue
from ticketgate.services.tickets import TicketService
from ticketgate.services.verification import VerificationService


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    settings: Settings = request.app.state.settings
    return settings


def get_ledger(request: Request) -> BaseLedger:
    """Ledger reader the application was created with."""
    ledger: BaseLedger = request.app.state.ledger
    return ledger


@dataclass
class PaginationParams:
    """Pagination parameters parsed from query string."""

    page: int
    limit: int


def parse_path_id(raw: str, detail: str) -> int:
    """Parse a positive uint256 id from a path segment; 400 with ``detail`` otherwise."""
    # Length first: int() refuses strings past the interpreter digit limit
    if not raw or len(raw) > UINT256_DIGITS or not raw.isascii() or not raw.isdigit():
        raise HTTPException(status_code=400, detail=detail)
    value = int(raw)
    if not 1 <= value <= UINT256_MAX:
        raise HTTPException(status_code=400, detail=detail)
    return value


def get_pagination(
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Items per page"),
) -> PaginationParams:
    """Parse pagination query parameters."""
    return PaginationParams(page=page, limit=limit)


# ── Service Dependencies ────────────────────────────────────────────


def get_access_service(
    ledger: BaseLedger = Depends(get_ledger),
    settings: Settings = Depends(get_app_settings),
) -> TicketAccessService:
    return TicketAccessService(
        ledger=ledger,
        window_seconds=settings.challenge_window_seconds,
        allow_future=settings.challenge_allow_future,
    )


def get_ticket_service(ledger: BaseLedger = Depends(get_ledger)) -> TicketService:
    return TicketService(ledger)


def get_verification_service(ledger: BaseLedger = Depends(get_ledger)) -> VerificationService:
    return VerificationService(ledger)


def get_event_catalogue(
    ledger: BaseLedger = Depends(get_ledger),
    settings: Settings = Depends(get_app_settings),
) -> EventCatalogue:
    return EventCatalogue(ledger, max_event_scan=settings.max_event_scan)
