"""Tests for the ticket access gate: every denial reason and its precedence."""

from __future__ import annotations

from dataclasses import replace
from typing import Any

import pytest

from ticketgate.ledger.base import LedgerDataError, LedgerUnavailableError
from ticketgate.ledger.memory import InMemoryLedger
from ticketgate.services.access import (
    AccessDecision,
    AccessReason,
    AccessRequest,
    TicketAccessService,
)
from ticketgate.services.challenge import format_challenge
from tests.factories.data_factories import (
    OWNER_KEY,
    STRANGER_KEY,
    build_ledger,
    sign,
    wallet,
)

NOW = 1_760_000_000
TICKET_ID = 42


class FailingLedger(InMemoryLedger):
    """Ledger whose ticket reads raise a fixed error."""

    def __init__(self, error: Exception) -> None:
        super().__init__()
        self.error = error

    def get_ticket_info(self, ticket_id: int):  # type: ignore[no-untyped-def]
        raise self.error


def _request(
    key: str = OWNER_KEY,
    *,
    ticket_id: int | None = TICKET_ID,
    message_ticket_id: int = TICKET_ID,
    issued_at: int = NOW,
    observed_at: int = NOW,
    **overrides: Any,
) -> AccessRequest:
    message = format_challenge(message_ticket_id, issued_at)
    base = AccessRequest(
        ticket_id=ticket_id,
        claimed_address=wallet(key).address,
        signature=sign(key, message),
        message=message,
        observed_at=observed_at,
    )
    return replace(base, **overrides)


@pytest.fixture
def service() -> TicketAccessService:
    return TicketAccessService(ledger=build_ledger(owner=wallet(OWNER_KEY).address))


# ── Allowed ─────────────────────────────────────────────────────────


class TestAllowed:
    def test_owner_with_fresh_signature(self, service: TicketAccessService) -> None:
        decision = service.authorize(_request())
        assert decision.allowed is True
        assert decision.reason == AccessReason.ALLOWED
        assert decision.ticket is not None
        assert decision.ticket.ticket_id == TICKET_ID

    def test_lowercase_claimed_address(self, service: TicketAccessService) -> None:
        req = _request(claimed_address=wallet(OWNER_KEY).address.lower())
        assert service.authorize(req).reason == AccessReason.ALLOWED

    def test_uppercase_claimed_address(self, service: TicketAccessService) -> None:
        upper = "0x" + wallet(OWNER_KEY).address[2:].upper()
        assert service.authorize(_request(claimed_address=upper)).allowed

    def test_purchaser_stored_lowercase(self) -> None:
        ledger = build_ledger(owner=wallet(OWNER_KEY).address.lower())
        svc = TicketAccessService(ledger=ledger)
        assert svc.authorize(_request()).allowed

    @pytest.mark.parametrize("offset", [-300, 300])
    def test_window_edges(self, service: TicketAccessService, offset: int) -> None:
        assert service.authorize(_request(issued_at=NOW + offset)).allowed


# ── One flipped precondition → exactly one reason ──────────────────


class TestDenials:
    @pytest.mark.parametrize("field", ["claimed_address", "signature", "message"])
    @pytest.mark.parametrize("value", [None, ""])
    def test_missing_field(self, service: TicketAccessService, field: str, value: Any) -> None:
        decision = service.authorize(_request(**{field: value}))
        assert decision.reason == AccessReason.MISSING_CREDENTIALS
        assert decision.allowed is False

    @pytest.mark.parametrize("ticket_id", [None, 0, -1])
    def test_missing_ticket_id(self, service: TicketAccessService, ticket_id: Any) -> None:
        decision = service.authorize(_request(ticket_id=ticket_id))
        assert decision.reason == AccessReason.MISSING_CREDENTIALS

    def test_malformed_message(self, service: TicketAccessService) -> None:
        message = f"Accessing ticket {TICKET_ID} at {NOW} now"
        req = _request(message=message, signature=sign(OWNER_KEY, message))
        assert service.authorize(req).reason == AccessReason.MALFORMED_MESSAGE

    def test_oversized_number_is_malformed(self, service: TicketAccessService) -> None:
        message = f"Accessing ticket {'9' * 5000} at {NOW}"
        req = _request(message=message, signature=sign(OWNER_KEY, message))
        assert service.authorize(req).reason == AccessReason.MALFORMED_MESSAGE

    def test_ticket_id_mismatch(self, service: TicketAccessService) -> None:
        decision = service.authorize(_request(message_ticket_id=99))
        assert decision.reason == AccessReason.TICKET_ID_MISMATCH
        assert "99" in decision.detail

    @pytest.mark.parametrize("offset", [-301, 301])
    def test_expired(self, service: TicketAccessService, offset: int) -> None:
        decision = service.authorize(_request(issued_at=NOW + offset))
        assert decision.reason == AccessReason.EXPIRED_CHALLENGE

    def test_future_rejected_when_forward_only(self) -> None:
        svc = TicketAccessService(
            ledger=build_ledger(owner=wallet(OWNER_KEY).address), allow_future=False
        )
        assert svc.authorize(_request(issued_at=NOW + 5)).reason == AccessReason.EXPIRED_CHALLENGE
        assert svc.authorize(_request(issued_at=NOW - 5)).allowed

    def test_custom_window(self) -> None:
        svc = TicketAccessService(
            ledger=build_ledger(owner=wallet(OWNER_KEY).address), window_seconds=60
        )
        assert svc.authorize(_request(issued_at=NOW - 61)).reason == AccessReason.EXPIRED_CHALLENGE

    def test_signature_invalid(self, service: TicketAccessService) -> None:
        decision = service.authorize(_request(signature="0xdeadbeef"))
        assert decision.reason == AccessReason.SIGNATURE_INVALID

    def test_signer_mismatch(self, service: TicketAccessService) -> None:
        # Stranger signs, but claims to be the owner
        req = _request(STRANGER_KEY, claimed_address=wallet(OWNER_KEY).address)
        assert service.authorize(req).reason == AccessReason.SIGNER_MISMATCH

    def test_ticket_not_found(self, service: TicketAccessService) -> None:
        req = _request(ticket_id=7, message_ticket_id=7)
        assert service.authorize(req).reason == AccessReason.TICKET_NOT_FOUND

    def test_not_owner(self, service: TicketAccessService) -> None:
        decision = service.authorize(_request(STRANGER_KEY))
        assert decision.reason == AccessReason.NOT_OWNER
        assert decision.ticket is None

    def test_ledger_unavailable(self) -> None:
        svc = TicketAccessService(ledger=FailingLedger(LedgerUnavailableError("timed out")))
        assert svc.authorize(_request()).reason == AccessReason.SERVICE_UNAVAILABLE

    def test_ledger_bad_data(self) -> None:
        svc = TicketAccessService(ledger=FailingLedger(LedgerDataError("short tuple")))
        assert svc.authorize(_request()).reason == AccessReason.SERVICE_UNAVAILABLE


# ── Ordering ────────────────────────────────────────────────────────


class TestPrecedence:
    def test_mismatch_checked_before_expiry(self, service: TicketAccessService) -> None:
        req = _request(message_ticket_id=99, issued_at=NOW - 10_000)
        assert service.authorize(req).reason == AccessReason.TICKET_ID_MISMATCH

    def test_expiry_checked_before_signature(self, service: TicketAccessService) -> None:
        req = _request(issued_at=NOW - 10_000, signature="0xdeadbeef")
        assert service.authorize(req).reason == AccessReason.EXPIRED_CHALLENGE

    def test_signer_checked_before_ledger(self) -> None:
        ledger = build_ledger(owner=wallet(OWNER_KEY).address)
        svc = TicketAccessService(ledger=ledger)
        svc.authorize(_request(STRANGER_KEY, claimed_address=wallet(OWNER_KEY).address))
        assert ledger.calls == []

    def test_ledger_read_once_per_decision(self) -> None:
        ledger = build_ledger(owner=wallet(OWNER_KEY).address)
        svc = TicketAccessService(ledger=ledger)
        svc.authorize(_request())
        svc.authorize(_request())
        assert ledger.calls == [("getTicketInfo", (TICKET_ID,)), ("getTicketInfo", (TICKET_ID,))]


class TestDecision:
    def test_deny_helper(self) -> None:
        d = AccessDecision.deny(AccessReason.NOT_OWNER, "nope")
        assert d.allowed is False
        assert d.ticket is None

    def test_reason_values_are_distinct(self) -> None:
        values = [r.value for r in AccessReason]
        assert len(values) == len(set(values)) == 10

    def test_every_denial_has_detail(self, service: TicketAccessService) -> None:
        requests = [
            _request(signature=None),
            _request(message="x", signature=sign(OWNER_KEY, "x")),
            _request(message_ticket_id=1),
            _request(issued_at=0),
            _request(signature="0x00"),
            _request(STRANGER_KEY, claimed_address=wallet(OWNER_KEY).address),
            _request(ticket_id=5, message_ticket_id=5),
            _request(STRANGER_KEY),
        ]
        details = [service.authorize(r).detail for r in requests]
        assert all(details)
        assert len(set(details)) == len(details)
