"""Event catalogue: active events and their tiers, read from the ledger."""

from __future__ import annotations

import logging
from typing import Any

from ticketgate.core.security import addresses_equal
from ticketgate.ledger.base import (
    BaseLedger,
    EventNotFoundError,
    LedgerError,
    LedgerUnavailableError,
)
from ticketgate.services.projector import project_event, project_tier

logger = logging.getLogger(__name__)


class CatalogueError(Exception):
    """Event catalogue error with HTTP status hint."""

    def __init__(self, detail: str, status_code: int = 400) -> None:
        self.detail = detail
        self.status_code = status_code
        super().__init__(detail)


class EventCatalogue:
    """Lists events by probing ids ``1..max_event_scan`` on the contract.

    The contract has no event counter view, so the catalogue scans a
    bounded id range and keeps the ids that resolve to active events.
    """

    def __init__(self, ledger: BaseLedger, max_event_scan: int = 100) -> None:
        self.ledger = ledger
        self.max_event_scan = max_event_scan

    def list_events(
        self,
        *,
        page: int = 1,
        limit: int = 10,
        organizer: str | None = None,
        now: int | None = None,
    ) -> dict[str, Any]:
        events: list[dict[str, Any]] = []
        for event_id in range(1, self.max_event_scan + 1):
            try:
                record = self.ledger.get_event(event_id)
            except EventNotFoundError:
                continue
            except LedgerUnavailableError as exc:
                logger.warning("Event scan aborted at id %d: %s", event_id, exc.detail)
                raise CatalogueError("Ticket ledger is unavailable", status_code=503) from exc
            except LedgerError as exc:
                logger.warning("Skipping event %d: %s", event_id, exc.detail)
                continue

            if not record.active:
                continue
            if organizer and not addresses_equal(record.organizer, organizer):
                continue
            events.append(project_event(record, now))

        events.sort(key=lambda e: e["id"], reverse=True)
        total = len(events)
        offset = (page - 1) * limit
        items = events[offset : offset + limit]
        total_pages = max(1, (total + limit - 1) // limit)
        logger.info("Event scan found %d active events", total)
        return {
            "items": items,
            "pagination": {
                "page": page,
                "limit": limit,
                "total_items": total,
                "total_pages": total_pages,
                "has_next": offset + limit < total,
                "has_prev": page > 1,
            },
            "blockchainVerified": True,
        }

    def get_event(self, event_id: int, now: int | None = None) -> dict[str, Any]:
        """One active event with all of its tiers."""
        try:
            record = self.ledger.get_event(event_id)
        except EventNotFoundError as exc:
            raise CatalogueError("Event not found", status_code=404) from exc
        except LedgerUnavailableError as exc:
            raise CatalogueError("Ticket ledger is unavailable", status_code=503) from exc
        except LedgerError as exc:
            raise CatalogueError("Invalid event data from ledger", status_code=502) from exc

        if not record.active:
            raise CatalogueError("Event not found", status_code=404)

        tiers: list[dict[str, Any]] = []
        for tier_id in range(record.tier_count):
            try:
                tiers.append(project_tier(tier_id, self.ledger.get_ticket_tier(event_id, tier_id)))
            except LedgerUnavailableError as exc:
                raise CatalogueError("Ticket ledger is unavailable", status_code=503) from exc
            except LedgerError as exc:
                logger.warning("Skipping tier %d of event %d: %s", tier_id, event_id, exc.detail)

        return {**project_event(record, now), "tiers": tiers}
