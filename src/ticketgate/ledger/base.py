"""Ledger boundary: typed EventManager records and the reader interface.

Contract view functions return positional tuples. Each tuple is decoded
once here into a record so callers never index into raw results.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from ticketgate.core.constants import ZERO_ADDRESS

logger = logging.getLogger(__name__)


# ── Errors ──────────────────────────────────────────────────────────


class LedgerError(Exception):
    """Base error for any failed ledger read."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(detail)


class TicketNotFoundError(LedgerError):
    """The contract reports that the ticket does not exist."""

    def __init__(self, ticket_id: int) -> None:
        self.ticket_id = ticket_id
        super().__init__(f"Ticket {ticket_id} does not exist")


class EventNotFoundError(LedgerError):
    """The contract reports that the event (or tier) does not exist."""

    def __init__(self, event_id: int, tier_id: int | None = None) -> None:
        self.event_id = event_id
        self.tier_id = tier_id
        what = f"Event {event_id}" if tier_id is None else f"Tier {tier_id} of event {event_id}"
        super().__init__(f"{what} does not exist")


class LedgerUnavailableError(LedgerError):
    """RPC endpoint unreachable, timed out, or contract not configured."""


class LedgerDataError(LedgerError):
    """A contract call returned a tuple of unexpected shape or type."""


# ── Records ─────────────────────────────────────────────────────────


def _as_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise LedgerDataError(f"{field_name}: expected integer, got bool")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise LedgerDataError(f"{field_name}: expected integer, got {value!r}") from exc


def _as_bool(value: Any, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise LedgerDataError(f"{field_name}: expected bool, got {value!r}")
    return value


def _as_str(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise LedgerDataError(f"{field_name}: expected string, got {value!r}")
    return value


def _check_length(raw: Sequence[Any], expected: int, what: str) -> None:
    if isinstance(raw, (str, bytes)) or not isinstance(raw, Sequence):
        raise LedgerDataError(f"Invalid {what} data from ledger: not a tuple")
    if len(raw) < expected:
        raise LedgerDataError(
            f"Invalid {what} data from ledger: expected {expected} fields, got {len(raw)}"
        )


@dataclass(frozen=True)
class TicketRecord:
    """Decoded ``getTicketInfo`` result."""

    ticket_id: int
    event_id: int
    tier_id: int
    purchaser: str
    attendee_count: int
    total_amount_paid_wei: int
    purchase_timestamp: int
    payment_token: int
    used: bool
    event_status_at_purchase: int
    current_event_status: int
    valid: bool
    reason: str

    FIELD_COUNT = 13

    @classmethod
    def from_contract(cls, raw: Sequence[Any]) -> TicketRecord:
        _check_length(raw, cls.FIELD_COUNT, "ticket")
        return cls(
            ticket_id=_as_int(raw[0], "ticket.id"),
            event_id=_as_int(raw[1], "ticket.eventId"),
            tier_id=_as_int(raw[2], "ticket.tierId"),
            purchaser=_as_str(raw[3], "ticket.purchaser"),
            attendee_count=_as_int(raw[4], "ticket.attendeeCount"),
            total_amount_paid_wei=_as_int(raw[5], "ticket.totalAmountPaid"),
            purchase_timestamp=_as_int(raw[6], "ticket.purchaseTimestamp"),
            payment_token=_as_int(raw[7], "ticket.paymentToken"),
            used=_as_bool(raw[8], "ticket.used"),
            event_status_at_purchase=_as_int(raw[9], "ticket.eventStatusAtPurchase"),
            current_event_status=_as_int(raw[10], "ticket.currentEventStatus"),
            valid=_as_bool(raw[11], "ticket.valid"),
            reason=_as_str(raw[12], "ticket.reason"),
        )


@dataclass(frozen=True)
class EventRecord:
    """Decoded ``getEvent`` result."""

    event_id: int
    organizer: str
    title: str
    description: str
    location: str
    start_date: int
    end_date: int
    metadata_uri: str
    active: bool
    tier_count: int

    FIELD_COUNT = 10

    @classmethod
    def from_contract(cls, raw: Sequence[Any]) -> EventRecord:
        _check_length(raw, cls.FIELD_COUNT, "event")
        return cls(
            event_id=_as_int(raw[0], "event.id"),
            organizer=_as_str(raw[1], "event.organizer"),
            title=_as_str(raw[2], "event.title"),
            description=_as_str(raw[3], "event.description"),
            location=_as_str(raw[4], "event.location"),
            start_date=_as_int(raw[5], "event.startDate"),
            end_date=_as_int(raw[6], "event.endDate"),
            metadata_uri=_as_str(raw[7], "event.metadataURI"),
            active=_as_bool(raw[8], "event.active"),
            tier_count=_as_int(raw[9], "event.tierCount"),
        )

    @property
    def exists(self) -> bool:
        """Unset storage slots come back as id 0 / zero organizer."""
        return self.event_id != 0 and self.organizer.lower() != ZERO_ADDRESS


@dataclass(frozen=True)
class TierRecord:
    """Decoded ``getTicketTier`` result."""

    name: str
    price_per_person_wei: int
    max_supply: int
    current_supply: int
    token_type: int
    active: bool

    FIELD_COUNT = 6

    @classmethod
    def from_contract(cls, raw: Sequence[Any]) -> TierRecord:
        _check_length(raw, cls.FIELD_COUNT, "tier")
        return cls(
            name=_as_str(raw[0], "tier.name"),
            price_per_person_wei=_as_int(raw[1], "tier.pricePerPerson"),
            max_supply=_as_int(raw[2], "tier.maxSupply"),
            current_supply=_as_int(raw[3], "tier.currentSupply"),
            token_type=_as_int(raw[4], "tier.tokenType"),
            active=_as_bool(raw[5], "tier.active"),
        )

    @property
    def available(self) -> int:
        return max(0, self.max_supply - self.current_supply)


# ── Reader interface ────────────────────────────────────────────────


class BaseLedger(ABC):
    """Read-only view of the EventManager contract.

    Implementations raise the ``LedgerError`` subclasses above and nothing
    else; callers decide how each maps to a response.
    """

    name: str = ""

    @abstractmethod
    def get_ticket_info(self, ticket_id: int) -> TicketRecord:
        """Read one ticket. Raises TicketNotFoundError if absent."""

    @abstractmethod
    def get_event(self, event_id: int) -> EventRecord:
        """Read one event. Raises EventNotFoundError if absent."""

    @abstractmethod
    def get_ticket_tier(self, event_id: int, tier_id: int) -> TierRecord:
        """Read one tier of an event."""

    @abstractmethod
    def get_user_tickets(self, address: str) -> list[int]:
        """Ticket ids purchased by ``address``."""

    def get_ticket_owner(self, ticket_id: int) -> str:
        """Purchaser address of a ticket."""
        return self.get_ticket_info(ticket_id).purchaser

    def ping(self) -> bool:
        """Return True if the ledger can currently serve reads."""
        return True
