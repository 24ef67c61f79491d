"""JSON ABI for the EventManager view functions this service reads."""

from __future__ import annotations

from typing import Any


def _uint(name: str, bits: int = 256) -> dict[str, str]:
    return {"name": name, "type": f"uint{bits}"}


def _view(name: str, inputs: list[dict[str, str]], outputs: list[dict[str, str]]) -> dict[str, Any]:
    return {
        "type": "function",
        "name": name,
        "stateMutability": "view",
        "inputs": inputs,
        "outputs": outputs,
    }


EVENT_MANAGER_ABI: list[dict[str, Any]] = [
    _view(
        "getEvent",
        [_uint("eventId")],
        [
            _uint("id"),
            {"name": "organizer", "type": "address"},
            {"name": "title", "type": "string"},
            {"name": "description", "type": "string"},
            {"name": "location", "type": "string"},
            _uint("startDate"),
            _uint("endDate"),
            {"name": "metadataURI", "type": "string"},
            {"name": "active", "type": "bool"},
            _uint("tierCount"),
        ],
    ),
    _view(
        "getTicketTier",
        [_uint("eventId"), _uint("tierId")],
        [
            {"name": "name", "type": "string"},
            _uint("pricePerPerson"),
            _uint("maxSupply"),
            _uint("currentSupply"),
            _uint("tokenType", 8),
            {"name": "active", "type": "bool"},
        ],
    ),
    _view(
        "getTicketInfo",
        [_uint("ticketId")],
        [
            _uint("id"),
            _uint("eventId"),
            _uint("tierId"),
            {"name": "purchaser", "type": "address"},
            _uint("attendeeCount"),
            _uint("totalAmountPaid"),
            _uint("purchaseTimestamp"),
            _uint("paymentToken", 8),
            {"name": "used", "type": "bool"},
            _uint("eventStatusAtPurchase", 8),
            _uint("currentEventStatus", 8),
            {"name": "valid", "type": "bool"},
            {"name": "reason", "type": "string"},
        ],
    ),
    _view(
        "getUserTickets",
        [{"name": "user", "type": "address"}],
        [{"name": "", "type": "uint256[]"}],
    ),
]
