"""In-memory EventManager reader.

Used when no contract address is configured (stub mode) and in tests.
Records are handed in explicitly; there is no shared module-level data.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ticketgate.ledger.base import (
    BaseLedger,
    EventNotFoundError,
    EventRecord,
    LedgerUnavailableError,
    TicketNotFoundError,
    TicketRecord,
    TierRecord,
)

logger = logging.getLogger(__name__)


class InMemoryLedger(BaseLedger):
    """Dictionary-backed ledger with the same error contract as Web3Ledger."""

    name = "memory"

    def __init__(
        self,
        tickets: Iterable[TicketRecord] = (),
        events: Iterable[EventRecord] = (),
        tiers: dict[tuple[int, int], TierRecord] | None = None,
    ) -> None:
        self.tickets: dict[int, TicketRecord] = {t.ticket_id: t for t in tickets}
        self.events: dict[int, EventRecord] = {e.event_id: e for e in events}
        self.tiers: dict[tuple[int, int], TierRecord] = dict(tiers or {})
        self.available = True
        self.calls: list[tuple[str, tuple[object, ...]]] = []

    # ── Seeding ─────────────────────────────────────────────────────

    def add_ticket(self, ticket: TicketRecord) -> None:
        self.tickets[ticket.ticket_id] = ticket

    def add_event(self, event: EventRecord, tiers: Iterable[TierRecord] = ()) -> None:
        self.events[event.event_id] = event
        for tier_id, tier in enumerate(tiers):
            self.tiers[(event.event_id, tier_id)] = tier

    # ── Reads ───────────────────────────────────────────────────────

    def get_ticket_info(self, ticket_id: int) -> TicketRecord:
        self._record("getTicketInfo", ticket_id)
        try:
            return self.tickets[ticket_id]
        except KeyError:
            raise TicketNotFoundError(ticket_id) from None

    def get_event(self, event_id: int) -> EventRecord:
        self._record("getEvent", event_id)
        event = self.events.get(event_id)
        if event is None or not event.exists:
            raise EventNotFoundError(event_id)
        return event

    def get_ticket_tier(self, event_id: int, tier_id: int) -> TierRecord:
        self._record("getTicketTier", event_id, tier_id)
        try:
            return self.tiers[(event_id, tier_id)]
        except KeyError:
            raise EventNotFoundError(event_id, tier_id) from None

    def get_user_tickets(self, address: str) -> list[int]:
        self._record("getUserTickets", address)
        owner = address.lower()
        return sorted(t.ticket_id for t in self.tickets.values() if t.purchaser.lower() == owner)

    def ping(self) -> bool:
        return self.available

    def _record(self, fn_name: str, *args: object) -> None:
        if not self.available:
            raise LedgerUnavailableError(f"{fn_name} failed: ledger unreachable")
        self.calls.append((fn_name, args))
