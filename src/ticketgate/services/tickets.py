"""Ticket service: wallet ticket listings, ticket documents and challenges.

Reads ticket, event and tier records from the ledger and assembles the
document served to the ticket holder, including its QR payload.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from ticketgate.core.constants import CHALLENGE_WINDOW_SECONDS
from ticketgate.core.security import is_address
from ticketgate.ledger.base import (
    BaseLedger,
    EventNotFoundError,
    LedgerError,
    LedgerUnavailableError,
    TicketRecord,
)
from ticketgate.services.challenge import format_challenge
from ticketgate.services.projector import project_ticket
from ticketgate.services.qr import build_qr_payload

logger = logging.getLogger(__name__)


class TicketError(Exception):
    """Ticket service error with HTTP status hint."""

    def __init__(self, detail: str, status_code: int = 400) -> None:
        self.detail = detail
        self.status_code = status_code
        super().__init__(detail)


def ledger_error_to_ticket_error(err: LedgerError) -> TicketError:
    """Map a ledger failure to the status a client should see."""
    if isinstance(err, EventNotFoundError):
        return TicketError("Event not found", status_code=404)
    if isinstance(err, LedgerUnavailableError):
        return TicketError("Ticket ledger is unavailable", status_code=503)
    return TicketError("Invalid ticket data from ledger", status_code=502)


class TicketService:
    """Stateless service: receives the ledger via __init__."""

    def __init__(self, ledger: BaseLedger) -> None:
        self.ledger = ledger

    def build_ticket_view(self, ticket: TicketRecord, now: int | None = None) -> dict[str, Any]:
        """Join a ticket with its event and tier and attach the QR payload.

        Raises LedgerError if the event or tier cannot be read.
        """
        event = self.ledger.get_event(ticket.event_id)
        tier = self.ledger.get_ticket_tier(ticket.event_id, ticket.tier_id)
        view = project_ticket(ticket, event, tier, now)
        view["qrData"] = build_qr_payload(view)
        return view

    def get_owned_ticket(self, ticket: TicketRecord, now: int | None = None) -> dict[str, Any]:
        """Ticket document for a holder who already passed the access gate."""
        try:
            view = self.build_ticket_view(ticket, now)
        except LedgerError as exc:
            logger.warning("Could not assemble ticket %s: %s", ticket.ticket_id, exc.detail)
            raise ledger_error_to_ticket_error(exc) from exc
        view.update(
            {
                "blockchainVerified": True,
                "purchaserVerified": True,
                "signatureValid": True,
            }
        )
        return view

    def list_user_tickets(self, address: str, now: int | None = None) -> dict[str, Any]:
        """All tickets purchased by ``address``.

        A ticket whose event or tier cannot be read is skipped (and logged)
        rather than failing the whole listing.
        """
        if not is_address(address):
            raise TicketError("Invalid user address")

        try:
            ticket_ids = self.ledger.get_user_tickets(address)
        except LedgerError as exc:
            logger.warning("Could not list tickets for %s: %s", address, exc.detail)
            raise ledger_error_to_ticket_error(exc) from exc

        logger.info("Found %d ticket ids for %s", len(ticket_ids), address)
        tickets: list[dict[str, Any]] = []
        for ticket_id in ticket_ids:
            try:
                record = self.ledger.get_ticket_info(ticket_id)
                tickets.append(self.build_ticket_view(record, now))
            except LedgerUnavailableError as exc:
                raise ledger_error_to_ticket_error(exc) from exc
            except LedgerError as exc:
                logger.warning("Skipping ticket %s for %s: %s", ticket_id, address, exc.detail)

        return {
            "tickets": tickets,
            "totalTickets": len(tickets),
            "userAddress": address,
            "blockchainVerified": True,
        }

    def get_challenge(
        self,
        ticket_id: int,
        now: int | None = None,
        window_seconds: int = CHALLENGE_WINDOW_SECONDS,
    ) -> dict[str, Any]:
        """The message a wallet must sign to open ``ticket_id`` right now."""
        if ticket_id < 1:
            raise TicketError("Invalid ticket ID")
        if now is None:
            now = int(time.time())
        return {
            "ticketId": ticket_id,
            "message": format_challenge(ticket_id, now),
            "issuedAt": now,
            "expiresAt": now + window_seconds,
        }
