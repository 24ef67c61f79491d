"""Ticket routes: /api/v1/tickets (signed access, wallet listing, scanning)."""

from __future__ import annotations

import time
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from ticketgate.api.deps import (
    get_access_service,
    get_app_settings,
    get_ticket_service,
    get_verification_service,
    parse_path_id,
)
from ticketgate.api.middleware import rfc7807_error_response
from ticketgate.api.schemas.tickets import (
    ChallengeResponse,
    OrganizerVerifyRequest,
    OwnedTicketResponse,
    StaffVerifyRequest,
    TicketAccessRequest,
    UserTicketsResponse,
)
from ticketgate.core.config import Settings
from ticketgate.services.access import (
    AccessDecision,
    AccessReason,
    AccessRequest,
    TicketAccessService,
)
from ticketgate.services.tickets import TicketError, TicketService
from ticketgate.services.verification import VerificationError, VerificationService

router = APIRouter(prefix="/api/v1/tickets", tags=["tickets"])

# Ticket documents embed the QR payload; never let a proxy or browser keep one
NO_STORE_HEADERS: dict[str, str] = {
    "Cache-Control": "no-store, no-cache, must-revalidate, private",
    "Pragma": "no-cache",
    "Expires": "0",
}

DENIAL_STATUS: dict[AccessReason, int] = {
    AccessReason.MISSING_CREDENTIALS: 401,
    AccessReason.MALFORMED_MESSAGE: 400,
    AccessReason.TICKET_ID_MISMATCH: 403,
    AccessReason.EXPIRED_CHALLENGE: 401,
    AccessReason.SIGNATURE_INVALID: 401,
    AccessReason.SIGNER_MISMATCH: 403,
    AccessReason.TICKET_NOT_FOUND: 404,
    AccessReason.NOT_OWNER: 403,
    AccessReason.SERVICE_UNAVAILABLE: 503,
}

DENIAL_TITLE: dict[AccessReason, str] = {
    AccessReason.MISSING_CREDENTIALS: "Authentication required",
    AccessReason.MALFORMED_MESSAGE: "Invalid message format",
    AccessReason.TICKET_ID_MISMATCH: "Ticket ID mismatch",
    AccessReason.EXPIRED_CHALLENGE: "Expired signature",
    AccessReason.SIGNATURE_INVALID: "Signature verification failed",
    AccessReason.SIGNER_MISMATCH: "Signature verification failed",
    AccessReason.TICKET_NOT_FOUND: "Ticket not found",
    AccessReason.NOT_OWNER: "Access denied",
    AccessReason.SERVICE_UNAVAILABLE: "Service unavailable",
}


def parse_ticket_id(raw: str) -> int:
    """Parse a base-10 ticket id from the path; 400 if it is not one."""
    return parse_path_id(raw, "Invalid ticket ID")


def _denial_response(decision: AccessDecision) -> JSONResponse:
    return rfc7807_error_response(
        status=DENIAL_STATUS[decision.reason],
        title=DENIAL_TITLE[decision.reason],
        detail=decision.detail,
        extra={"reason": decision.reason.value},
        headers=NO_STORE_HEADERS,
    )


def _verification_error_response(err: VerificationError) -> JSONResponse:
    return rfc7807_error_response(
        status=err.status_code,
        title="Verification failed",
        detail=err.detail,
        extra=err.extra,
    )


def _open_ticket(
    request: AccessRequest,
    access: TicketAccessService,
    tickets: TicketService,
) -> JSONResponse:
    decision = access.authorize(request)
    if not decision.allowed or decision.ticket is None:
        return _denial_response(decision)
    try:
        view = tickets.get_owned_ticket(decision.ticket, now=request.observed_at)
    except TicketError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail) from e
    body = OwnedTicketResponse.model_validate(view).model_dump(by_alias=True)
    return JSONResponse(content=body, headers=NO_STORE_HEADERS)


# ── Challenge ───────────────────────────────────────────────────────


@router.get("/challenge/{ticket_id}", response_model=ChallengeResponse)
def get_challenge(
    ticket_id: str,
    svc: TicketService = Depends(get_ticket_service),
    settings: Settings = Depends(get_app_settings),
) -> dict[str, Any]:
    """Return the message the wallet must sign to open this ticket."""
    tid = parse_ticket_id(ticket_id)
    return svc.get_challenge(tid, window_seconds=settings.challenge_window_seconds)


# ── Wallet listing ──────────────────────────────────────────────────


@router.get("/user/{address}", response_model=UserTicketsResponse)
def list_user_tickets(
    address: str,
    svc: TicketService = Depends(get_ticket_service),
) -> dict[str, Any]:
    """List every ticket purchased by a wallet."""
    try:
        return svc.list_user_tickets(address)
    except TicketError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail) from e


# ── Scanning ────────────────────────────────────────────────────────


@router.post("/verify", response_model=None)
def verify_ticket(
    body: OrganizerVerifyRequest,
    svc: VerificationService = Depends(get_verification_service),
) -> dict[str, Any] | JSONResponse:
    """Verify a scanned QR payload as the event's organizer."""
    try:
        return svc.verify_for_organizer(
            qr_data=body.qr_data,
            organizer_address=body.organizer_address,
        )
    except VerificationError as e:
        return _verification_error_response(e)


@router.post("/staff-verify", response_model=None)
def staff_verify_ticket(
    body: StaffVerifyRequest,
    svc: VerificationService = Depends(get_verification_service),
) -> dict[str, Any] | JSONResponse:
    """Verify a scanned QR payload with a per-event staff code."""
    try:
        return svc.verify_for_staff(
            qr_data=body.qr_data,
            staff_code=body.staff_code,
            event_id=body.event_id,
        )
    except VerificationError as e:
        return _verification_error_response(e)


# ── Signed access ───────────────────────────────────────────────────


@router.post("/access")
def open_ticket_signed_body(
    body: TicketAccessRequest,
    access: TicketAccessService = Depends(get_access_service),
    tickets: TicketService = Depends(get_ticket_service),
) -> JSONResponse:
    """Open a ticket with credentials in the JSON body."""
    request = AccessRequest(
        ticket_id=body.ticket_id,
        claimed_address=body.address,
        signature=body.signature,
        message=body.message,
        observed_at=int(time.time()),
    )
    return _open_ticket(request, access, tickets)


@router.get("/{ticket_id}")
def open_ticket(
    ticket_id: str,
    address: str | None = Query(default=None),
    signature: str | None = Query(default=None),
    message: str | None = Query(default=None),
    access: TicketAccessService = Depends(get_access_service),
    tickets: TicketService = Depends(get_ticket_service),
) -> JSONResponse:
    """Open a ticket with credentials in the query string."""
    request = AccessRequest(
        ticket_id=parse_ticket_id(ticket_id),
        claimed_address=address,
        signature=signature,
        message=message,
        observed_at=int(time.time()),
    )
    return _open_ticket(request, access, tickets)
