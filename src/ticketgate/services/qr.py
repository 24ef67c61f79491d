"""QR payload data contract.

The QR image itself is rendered client-side; this module owns only the
string encoded in it. Version 2.0 payloads are JSON. Older tickets carry a
bare ``ticketId: 12`` style string, which is still accepted when scanning.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any

from ticketgate.core.constants import QR_PLATFORM, QR_VERSION, UINT256_DIGITS, UINT256_MAX

# A run of digits longer than uint256 is rejected outright, never truncated
_LEGACY_TICKET_ID = re.compile(r"ticketId[:\s]*(\d{1,78})(?!\d)", re.IGNORECASE | re.ASCII)


@dataclass(frozen=True)
class QrTicketData:
    """Fields recovered from a scanned QR payload."""

    ticket_id: int
    event_id: int | None = None
    attendee_count: int | None = None
    purchaser: str | None = None
    total_amount_paid: str | None = None
    token_type: str | None = None
    purchase_timestamp: int | None = None
    event_status: str | None = None


def build_qr_payload(ticket_view: dict[str, Any]) -> str:
    """Serialize the QR payload for a projected ticket document."""
    return json.dumps(
        {
            "ticketId": ticket_view["id"],
            "eventId": ticket_view["eventId"],
            "attendeeCount": ticket_view["attendeeCount"],
            "purchaser": ticket_view["purchaser"],
            "totalAmountPaid": ticket_view["totalAmountPaid"],
            "tokenType": ticket_view["tokenType"],
            "purchaseTimestamp": ticket_view["purchaseTime"],
            "eventStatus": ticket_view["currentEventStatus"],
            "platform": QR_PLATFORM,
            "version": QR_VERSION,
        },
        separators=(",", ":"),
    )


def _positive_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, str) and value.isascii() and value.isdigit():
        value = int(value) if len(value) <= UINT256_DIGITS else None
    if isinstance(value, int) and 0 < value <= UINT256_MAX:
        return value
    return None


def _optional_str(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


def parse_qr_payload(qr_data: str) -> QrTicketData | None:
    """Recover ticket data from a scanned payload, or None if no ticket id."""
    if not qr_data:
        return None
    try:
        data = json.loads(qr_data)
    except (ValueError, RecursionError):
        match = _LEGACY_TICKET_ID.search(qr_data)
        legacy_id = _positive_int(match.group(1)) if match else None
        return QrTicketData(ticket_id=legacy_id) if legacy_id is not None else None

    if not isinstance(data, dict):
        return None
    ticket_id = _positive_int(data.get("ticketId"))
    if ticket_id is None:
        return None
    return QrTicketData(
        ticket_id=ticket_id,
        event_id=_positive_int(data.get("eventId")),
        attendee_count=_positive_int(data.get("attendeeCount")),
        purchaser=_optional_str(data.get("purchaser")),
        total_amount_paid=_optional_str(data.get("totalAmountPaid")),
        token_type=_optional_str(data.get("tokenType")),
        purchase_timestamp=_positive_int(data.get("purchaseTimestamp")),
        event_status=_optional_str(data.get("eventStatus")),
    )
