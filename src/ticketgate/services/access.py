"""Ticket access gate: decides whether a signed request may open a ticket.

A wallet proves control of its address by signing a fresh challenge
(``"Accessing ticket {id} at {timestamp}"``). The gate checks, in order:

  1. every credential is present
  2. the message is a well-formed challenge
  3. the challenge names the requested ticket
  4. the challenge is inside the freshness window
  5. a signer can be recovered from the signature
  6. the signer is the claimed address
  7. the ticket exists on the ledger
  8. the claimed address purchased it

The first failing check decides the outcome. Denials are returned as
values, never raised, so route handlers must branch on ``reason``.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from ticketgate.core.constants import CHALLENGE_WINDOW_SECONDS
from ticketgate.core.security import (
    SignatureVerificationError,
    addresses_equal,
    recover_signer,
)
from ticketgate.ledger.base import (
    BaseLedger,
    LedgerError,
    TicketNotFoundError,
    TicketRecord,
)
from ticketgate.services.challenge import (
    MalformedMessageError,
    challenge_age,
    is_fresh,
    parse_challenge,
)

logger = logging.getLogger(__name__)


class AccessReason(enum.StrEnum):
    """Outcome of a ticket access check."""

    ALLOWED = "allowed"
    MISSING_CREDENTIALS = "missing_credentials"
    MALFORMED_MESSAGE = "malformed_message"
    TICKET_ID_MISMATCH = "ticket_id_mismatch"
    EXPIRED_CHALLENGE = "expired_challenge"
    SIGNATURE_INVALID = "signature_invalid"
    SIGNER_MISMATCH = "signer_mismatch"
    TICKET_NOT_FOUND = "ticket_not_found"
    NOT_OWNER = "not_owner"
    SERVICE_UNAVAILABLE = "service_unavailable"


@dataclass(frozen=True)
class AccessRequest:
    """One inbound attempt to open a ticket."""

    ticket_id: int | None
    claimed_address: str | None
    signature: str | None
    message: str | None
    observed_at: int


@dataclass(frozen=True)
class AccessDecision:
    """Result of ``TicketAccessService.authorize``."""

    allowed: bool
    reason: AccessReason
    detail: str
    ticket: TicketRecord | None = None

    @classmethod
    def deny(cls, reason: AccessReason, detail: str) -> AccessDecision:
        return cls(allowed=False, reason=reason, detail=detail)


class TicketAccessService:
    """Stateless gate: receives its ledger and window policy via __init__."""

    def __init__(
        self,
        ledger: BaseLedger,
        window_seconds: int = CHALLENGE_WINDOW_SECONDS,
        allow_future: bool = True,
    ) -> None:
        self.ledger = ledger
        self.window_seconds = window_seconds
        self.allow_future = allow_future

    def authorize(self, request: AccessRequest) -> AccessDecision:
        decision = self._evaluate(request)
        if decision.allowed:
            logger.info("Ticket %s opened by %s", request.ticket_id, request.claimed_address)
        else:
            logger.info(
                "Ticket access denied: ticket=%s address=%s reason=%s",
                request.ticket_id,
                request.claimed_address,
                decision.reason.value,
            )
        return decision

    def _evaluate(self, request: AccessRequest) -> AccessDecision:
        # 1. Credentials present
        if (
            request.ticket_id is None
            or request.ticket_id < 1
            or not request.claimed_address
            or not request.signature
            or not request.message
        ):
            return AccessDecision.deny(
                AccessReason.MISSING_CREDENTIALS,
                "Connect your wallet and sign the access request for this ticket",
            )
        ticket_id = request.ticket_id
        address = request.claimed_address

        # 2. Message format
        try:
            challenge = parse_challenge(request.message)
        except MalformedMessageError:
            return AccessDecision.deny(
                AccessReason.MALFORMED_MESSAGE,
                "Invalid message format; expected 'Accessing ticket {id} at {timestamp}'",
            )

        # 3. Message names this ticket
        if challenge.ticket_id != ticket_id:
            return AccessDecision.deny(
                AccessReason.TICKET_ID_MISMATCH,
                f"Message references ticket {challenge.ticket_id}, not ticket {ticket_id}",
            )

        # 4. Freshness
        if not is_fresh(
            challenge.issued_at,
            request.observed_at,
            window=self.window_seconds,
            allow_future=self.allow_future,
        ):
            age = challenge_age(challenge.issued_at, request.observed_at)
            return AccessDecision.deny(
                AccessReason.EXPIRED_CHALLENGE,
                f"Signature is {age} seconds old (max {self.window_seconds} allowed); sign again",
            )

        # 5. Signature decodes to some signer
        try:
            signer = recover_signer(request.message, request.signature)
        except SignatureVerificationError:
            return AccessDecision.deny(
                AccessReason.SIGNATURE_INVALID,
                "Signature could not be verified; sign the access request again",
            )

        # 6. Signer is the claimed wallet
        if not addresses_equal(signer, address):
            return AccessDecision.deny(
                AccessReason.SIGNER_MISMATCH,
                "Signer address does not match the provided address",
            )

        # 7. Ticket exists (fresh read, never cached)
        try:
            ticket = self.ledger.get_ticket_info(ticket_id)
        except TicketNotFoundError:
            return AccessDecision.deny(AccessReason.TICKET_NOT_FOUND, "Ticket not found")
        except LedgerError as exc:
            logger.warning("Ledger read failed for ticket %s: %s", ticket_id, exc.detail)
            return AccessDecision.deny(
                AccessReason.SERVICE_UNAVAILABLE,
                "Ticket ledger is unavailable; try again shortly",
            )

        # 8. Claimed wallet bought it
        if not addresses_equal(address, ticket.purchaser):
            return AccessDecision.deny(
                AccessReason.NOT_OWNER,
                "Connected wallet does not own this ticket",
            )

        return AccessDecision(
            allowed=True,
            reason=AccessReason.ALLOWED,
            detail="Access granted",
            ticket=ticket,
        )
