"""Projection of ledger records into the ticket and event documents clients read.

Field names are camelCase because wallet front-ends consume them as-is.
"""

from __future__ import annotations

import time
from decimal import Decimal
from typing import Any

from web3 import Web3

from ticketgate.core.constants import (
    DEFAULT_EVENT_STATUS,
    DEFAULT_TOKEN_TYPE,
    EVENT_STATUSES,
    TOKEN_TYPES,
)
from ticketgate.ledger.base import EventRecord, TicketRecord, TierRecord


def format_ether(wei: int) -> str:
    """Render a wei amount as a decimal ether string (``10**18`` -> ``"1.0"``)."""
    ether = Decimal(Web3.from_wei(wei, "ether"))
    text = format(ether.normalize(), "f")
    if "." not in text:
        text += ".0"
    return text


def token_type_name(index: int) -> str:
    if 0 <= index < len(TOKEN_TYPES):
        return TOKEN_TYPES[index]
    return DEFAULT_TOKEN_TYPE


def event_status_name(index: int) -> str:
    if 0 <= index < len(EVENT_STATUSES):
        return EVENT_STATUSES[index]
    return DEFAULT_EVENT_STATUS


def event_status(start_date: int, end_date: int, now: int | None = None) -> str:
    """Wall-clock status of an event: upcoming, live (inclusive bounds) or ended."""
    if now is None:
        now = int(time.time())
    if now < start_date:
        return "upcoming"
    if now <= end_date:
        return "live"
    return "ended"


def project_event(event: EventRecord, now: int | None = None) -> dict[str, Any]:
    """Event summary as listed in the catalogue."""
    return {
        "id": event.event_id,
        "organizer": event.organizer,
        "title": event.title,
        "description": event.description,
        "location": event.location,
        "startDate": event.start_date,
        "endDate": event.end_date,
        "metadataURI": event.metadata_uri,
        "active": event.active,
        "tierCount": event.tier_count,
        "status": event_status(event.start_date, event.end_date, now),
    }


def project_tier(tier_id: int, tier: TierRecord) -> dict[str, Any]:
    price = format_ether(tier.price_per_person_wei)
    return {
        "id": tier_id,
        "name": tier.name,
        "price": price,
        "pricePerPerson": price,
        "maxSupply": tier.max_supply,
        "currentSupply": tier.current_supply,
        "available": tier.available,
        "tokenType": token_type_name(tier.token_type),
        "active": tier.active,
    }


def project_ticket(
    ticket: TicketRecord,
    event: EventRecord,
    tier: TierRecord,
    now: int | None = None,
) -> dict[str, Any]:
    """Full ticket document: ticket, its event and its tier, flattened."""
    return {
        "id": ticket.ticket_id,
        "eventId": ticket.event_id,
        "eventTitle": event.title,
        "eventLocation": event.location,
        "eventStartDate": event.start_date,
        "eventEndDate": event.end_date,
        "tierName": tier.name,
        "pricePerPerson": format_ether(tier.price_per_person_wei),
        "attendeeCount": ticket.attendee_count,
        "totalAmountPaid": format_ether(ticket.total_amount_paid_wei),
        "tokenType": token_type_name(ticket.payment_token),
        "purchaseTime": ticket.purchase_timestamp,
        "used": ticket.used,
        "valid": ticket.valid,
        "validationReason": ticket.reason,
        "eventStatusAtPurchase": event_status_name(ticket.event_status_at_purchase),
        "currentEventStatus": event_status_name(ticket.current_event_status),
        "purchaser": ticket.purchaser,
        "status": event_status(event.start_date, event.end_date, now),
    }
