"""Ticket access and scan verification schemas."""

from __future__ import annotations

from pydantic import Field

from ticketgate.api.schemas.common import CamelModel
from ticketgate.core.constants import UINT256_MAX


class TicketAccessRequest(CamelModel):
    """Body form of a signed ticket access request."""

    ticket_id: int | None = Field(default=None, ge=1, le=UINT256_MAX)
    address: str | None = None
    signature: str | None = None
    message: str | None = None


class OrganizerVerifyRequest(CamelModel):
    """Organizer scan: QR payload plus the scanning organizer's wallet."""

    qr_data: str = ""
    organizer_address: str = ""


class StaffVerifyRequest(CamelModel):
    """Staff scan: QR payload, per-event staff code and the event scanned for."""

    qr_data: str = ""
    staff_code: str = ""
    event_id: int | None = Field(default=None, le=UINT256_MAX)


class ChallengeResponse(CamelModel):
    """Message a wallet must sign to open a ticket."""

    ticket_id: int
    message: str
    issued_at: int
    expires_at: int


class TicketResponse(CamelModel):
    """Ticket document served to the holder and to scanners."""

    id: int
    event_id: int
    event_title: str
    event_location: str
    event_start_date: int
    event_end_date: int
    tier_name: str
    price_per_person: str
    attendee_count: int
    total_amount_paid: str
    token_type: str
    purchase_time: int
    used: bool
    valid: bool
    validation_reason: str
    event_status_at_purchase: str
    current_event_status: str
    purchaser: str
    status: str
    qr_data: str | None = None


class OwnedTicketResponse(TicketResponse):
    """Ticket document served to a holder who passed the access gate."""

    blockchain_verified: bool = True
    purchaser_verified: bool = True
    signature_valid: bool = True


class UserTicketsResponse(CamelModel):
    """All tickets held by one wallet."""

    tickets: list[TicketResponse]
    total_tickets: int
    user_address: str
    blockchain_verified: bool = True
