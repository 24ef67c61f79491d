"""Synthetic ledger data factories for testing: realistic fake on-chain records."""

from __future__ import annotations

import random
import time
from typing import Any

from eth_account import Account
from eth_account.messages import encode_defunct
from faker import Faker

from ticketgate.core.constants import EVENT_STATUSES, TOKEN_TYPES, WEI_PER_ETHER
from ticketgate.ledger.base import EventRecord, TicketRecord, TierRecord
from ticketgate.ledger.memory import InMemoryLedger
from ticketgate.services.challenge import format_challenge

fake = Faker()
Faker.seed(42)
random.seed(42)

# Fixed keys so failures are reproducible
OWNER_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
STRANGER_KEY = "0x8da4ef21b864d2cc526dbdb2a120bd2874c36c9d0a1fb7f8c63d7f7a8b41de8f"
ORGANIZER_KEY = "0x6370fd033278c143179d81c5526140625662b8daa446c22ee2d73db3707e620c"


def wallet(private_key: str) -> Any:
    """Local account for ``private_key``."""
    return Account.from_key(private_key)


def sign(private_key: str, message: str) -> str:
    """EIP-191 personal_sign signature as 0x-prefixed hex."""
    signed = Account.sign_message(encode_defunct(text=message), private_key=private_key)
    return "0x" + bytes(signed.signature).hex()


def _address() -> str:
    return str(Account.create(fake.pystr(min_chars=16)).address)


def _now() -> int:
    return int(time.time())


# ── Event Factory ───────────────────────────────────────────────────

def build_event(event_id: int = 1, **overrides: Any) -> EventRecord:
    """Generate an active event that starts in a week and runs a day."""
    start = _now() + 86400 * random.randint(1, 30)
    data: dict[str, Any] = {
        "event_id": event_id,
        "organizer": _address(),
        "title": fake.catch_phrase(),
        "description": fake.paragraph(),
        "location": f"{fake.city()}, {fake.country_code()}",
        "start_date": start,
        "end_date": start + 86400,
        "metadata_uri": f"ipfs://{fake.sha256()[:46]}",
        "active": True,
        "tier_count": 2,
    }
    data.update(overrides)
    return EventRecord(**data)


# ── Tier Factory ────────────────────────────────────────────────────

def build_tier(**overrides: Any) -> TierRecord:
    """Generate a tier priced between 0.1 and 5 tokens."""
    max_supply = random.randint(50, 500)
    data: dict[str, Any] = {
        "name": random.choice(["General", "VIP", "Backstage", "Early Bird"]),
        "price_per_person_wei": random.randint(1, 50) * WEI_PER_ETHER // 10,
        "max_supply": max_supply,
        "current_supply": random.randint(0, max_supply),
        "token_type": random.randrange(len(TOKEN_TYPES)),
        "active": True,
    }
    data.update(overrides)
    return TierRecord(**data)


# ── Ticket Factory ──────────────────────────────────────────────────

def build_ticket(ticket_id: int = 1, **overrides: Any) -> TicketRecord:
    """Generate a valid, unused ticket for event 1, tier 0."""
    attendees = random.randint(1, 4)
    data: dict[str, Any] = {
        "ticket_id": ticket_id,
        "event_id": 1,
        "tier_id": 0,
        "purchaser": _address(),
        "attendee_count": attendees,
        "total_amount_paid_wei": attendees * WEI_PER_ETHER // 2,
        "purchase_timestamp": _now() - random.randint(60, 86400 * 10),
        "payment_token": random.randrange(len(TOKEN_TYPES)),
        "used": False,
        "event_status_at_purchase": 0,
        "current_event_status": random.randrange(len(EVENT_STATUSES)),
        "valid": True,
        "reason": "Valid ticket",
    }
    data.update(overrides)
    return TicketRecord(**data)


def ticket_tuple(ticket: TicketRecord) -> list[Any]:
    """The raw ``getTicketInfo`` tuple a node would return for ``ticket``."""
    return [
        ticket.ticket_id,
        ticket.event_id,
        ticket.tier_id,
        ticket.purchaser,
        ticket.attendee_count,
        ticket.total_amount_paid_wei,
        ticket.purchase_timestamp,
        ticket.payment_token,
        ticket.used,
        ticket.event_status_at_purchase,
        ticket.current_event_status,
        ticket.valid,
        ticket.reason,
    ]


def event_tuple(event: EventRecord) -> list[Any]:
    """The raw ``getEvent`` tuple a node would return for ``event``."""
    return [
        event.event_id,
        event.organizer,
        event.title,
        event.description,
        event.location,
        event.start_date,
        event.end_date,
        event.metadata_uri,
        event.active,
        event.tier_count,
    ]


def tier_tuple(tier: TierRecord) -> list[Any]:
    """The raw ``getTicketTier`` tuple a node would return for ``tier``."""
    return [
        tier.name,
        tier.price_per_person_wei,
        tier.max_supply,
        tier.current_supply,
        tier.token_type,
        tier.active,
    ]


# ── Ledger Factory ──────────────────────────────────────────────────

def build_ledger(
    *,
    owner: str | None = None,
    organizer: str | None = None,
    ticket_ids: tuple[int, ...] = (42,),
) -> InMemoryLedger:
    """Ledger with event 1 (two tiers) and tickets owned by ``owner``."""
    owner = owner or wallet(OWNER_KEY).address
    organizer = organizer or wallet(ORGANIZER_KEY).address
    ledger = InMemoryLedger()
    ledger.add_event(
        build_event(1, organizer=organizer, title="CrossFi Developer Conference"),
        tiers=[
            build_tier(name="General", price_per_person_wei=WEI_PER_ETHER // 2, token_type=0),
            build_tier(name="VIP", price_per_person_wei=2 * WEI_PER_ETHER, token_type=1),
        ],
    )
    for ticket_id in ticket_ids:
        ledger.add_ticket(build_ticket(ticket_id, purchaser=owner))
    return ledger


# ── Signed access credentials ───────────────────────────────────────

def signed_params(
    private_key: str,
    ticket_id: int,
    *,
    issued_at: int | None = None,
    message_ticket_id: int | None = None,
    address: str | None = None,
) -> dict[str, str]:
    """Query parameters for a signed access request.

    ``message_ticket_id`` and ``address`` let a test sign for one ticket
    or wallet while presenting another.
    """
    if issued_at is None:
        issued_at = _now()
    message = format_challenge(
        message_ticket_id if message_ticket_id is not None else ticket_id, issued_at
    )
    return {
        "address": address or wallet(private_key).address,
        "signature": sign(private_key, message),
        "message": message,
    }
