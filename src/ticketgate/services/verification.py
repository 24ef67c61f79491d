"""Scanner verification: organizers and door staff checking a QR payload.

Both paths decode the scanned payload, authorise the scanner, read the
ticket from the ledger and return the ticket document with verification
metadata. Neither path marks the ticket as used; that is an on-chain
transaction signed by the organizer's own wallet.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from ticketgate.core.constants import STAFF_CODE_PREFIX
from ticketgate.core.security import addresses_equal, is_address
from ticketgate.ledger.base import (
    BaseLedger,
    EventNotFoundError,
    LedgerError,
    LedgerUnavailableError,
    TicketNotFoundError,
    TicketRecord,
)
from ticketgate.services.qr import QrTicketData, parse_qr_payload
from ticketgate.services.tickets import TicketService

logger = logging.getLogger(__name__)


class VerificationError(Exception):
    """Scan verification error with HTTP status hint and optional body fields."""

    def __init__(
        self,
        detail: str,
        status_code: int = 400,
        extra: dict[str, Any] | None = None,
    ) -> None:
        self.detail = detail
        self.status_code = status_code
        self.extra = extra or {}
        super().__init__(detail)


def expected_staff_code(event_id: int) -> str:
    return f"{STAFF_CODE_PREFIX}{event_id}"


def _wrong_event() -> VerificationError:
    return VerificationError(
        "Ticket does not belong to this event",
        extra={"valid": False, "reason": "Invalid event for this ticket"},
    )


class VerificationService:
    """Stateless service: receives the ledger via __init__."""

    def __init__(self, ledger: BaseLedger) -> None:
        self.ledger = ledger
        self.tickets = TicketService(ledger)

    # ── Organizer scan ──────────────────────────────────────────────

    def verify_for_organizer(
        self,
        *,
        qr_data: str,
        organizer_address: str,
        now: datetime | None = None,
    ) -> dict[str, Any]:
        """Verify a scanned ticket on behalf of the event's organizer."""
        if not qr_data or not organizer_address:
            raise VerificationError("Both qrData and organizerAddress are required")
        if not is_address(organizer_address):
            raise VerificationError("Invalid organizer address")

        scanned = self._decode(qr_data)
        if scanned.event_id is None:
            raise VerificationError("Invalid QR code format")

        ticket = self._read_ticket(scanned.ticket_id)
        if ticket.event_id != scanned.event_id:
            raise _wrong_event()
        try:
            event = self.ledger.get_event(ticket.event_id)
        except LedgerError as exc:
            raise self._ledger_failure(exc) from exc

        if not addresses_equal(event.organizer, organizer_address):
            logger.info(
                "Organizer scan rejected: %s is not organizer of event %s",
                organizer_address,
                event.event_id,
            )
            raise VerificationError(
                "Scanner is not the organizer of this ticket's event",
                status_code=403,
                extra={"valid": False, "reason": "Not the event organizer"},
            )

        result = self._ticket_view(ticket, qr_data, now)
        logger.info("Ticket %s verified by organizer %s", ticket.ticket_id, organizer_address)
        return result

    # ── Staff scan ──────────────────────────────────────────────────

    def verify_for_staff(
        self,
        *,
        qr_data: str,
        staff_code: str,
        event_id: int | None,
        now: datetime | None = None,
    ) -> dict[str, Any]:
        """Verify a scanned ticket with a per-event staff code."""
        if not qr_data or not staff_code or not event_id:
            raise VerificationError("QR code data, staff code, and event ID are required")

        scanned = self._decode(qr_data)

        if staff_code != expected_staff_code(event_id):
            logger.info("Staff scan rejected: bad staff code for event %s", event_id)
            raise VerificationError("Invalid staff code", status_code=401)

        ticket = self._read_ticket(scanned.ticket_id)
        if ticket.event_id != event_id:
            raise _wrong_event()

        result = self._ticket_view(ticket, qr_data, now)
        result["staffVerified"] = True
        logger.info("Ticket %s verified by staff for event %s", ticket.ticket_id, event_id)
        return result

    # ── Internals ───────────────────────────────────────────────────

    def _decode(self, qr_data: str) -> QrTicketData:
        scanned = parse_qr_payload(qr_data)
        if scanned is None:
            raise VerificationError("Invalid QR code format")
        return scanned

    def _read_ticket(self, ticket_id: int) -> TicketRecord:
        try:
            return self.ledger.get_ticket_info(ticket_id)
        except LedgerError as exc:
            raise self._ledger_failure(exc) from exc

    def _ticket_view(
        self,
        ticket: TicketRecord,
        qr_data: str,
        now: datetime | None,
    ) -> dict[str, Any]:
        if now is None:
            now = datetime.now(tz=UTC)
        try:
            view = self.tickets.build_ticket_view(ticket, int(now.timestamp()))
        except LedgerError as exc:
            raise self._ledger_failure(exc) from exc
        view.pop("qrData", None)
        view.update(
            {
                "ticketId": ticket.ticket_id,
                "qrData": qr_data,
                "timestamp": now.isoformat(),
                "blockchainVerified": True,
            }
        )
        return view

    def _ledger_failure(self, exc: LedgerError) -> VerificationError:
        if isinstance(exc, TicketNotFoundError):
            return VerificationError(
                "Ticket not found",
                status_code=404,
                extra={"valid": False, "reason": "Ticket does not exist on blockchain"},
            )
        if isinstance(exc, EventNotFoundError):
            return VerificationError(
                "Event not found",
                status_code=404,
                extra={"valid": False, "reason": "Associated event does not exist"},
            )
        if isinstance(exc, LedgerUnavailableError):
            logger.warning("Ledger unavailable during verification: %s", exc.detail)
            return VerificationError("Ticket ledger is unavailable", status_code=503)
        logger.warning("Ledger returned bad data during verification: %s", exc.detail)
        return VerificationError("Invalid ticket data from ledger", status_code=502)
