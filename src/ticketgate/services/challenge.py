"""Challenge messages a wallet signs to open one of its tickets.

The wire format is fixed: ``"Accessing ticket {ticketId} at {issuedAt}"``
with both values as plain base-10 integers. Wallet front-ends build the
same string, so any change here is a breaking change for clients.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from ticketgate.core.constants import (
    CHALLENGE_PATTERN,
    CHALLENGE_TEMPLATE,
    CHALLENGE_WINDOW_SECONDS,
)

_CHALLENGE_RE = re.compile(CHALLENGE_PATTERN, re.ASCII)


class MalformedMessageError(Exception):
    """The message does not follow the challenge format."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__("Message does not match 'Accessing ticket {id} at {timestamp}'")


@dataclass(frozen=True)
class ChallengeMessage:
    """Logical content of a challenge message."""

    ticket_id: int
    issued_at: int


def format_challenge(ticket_id: int, issued_at: int) -> str:
    """Build the exact string a wallet must sign for ``ticket_id``."""
    if ticket_id < 0 or issued_at < 0:
        raise ValueError("ticket_id and issued_at must be non-negative")
    return CHALLENGE_TEMPLATE.format(ticket_id=int(ticket_id), issued_at=int(issued_at))


def parse_challenge(message: str) -> ChallengeMessage:
    """Parse a signed challenge back into its ticket id and timestamp.

    The whole string must match; a trailing newline or any extra text is
    rejected, as is a number longer than 78 digits (wider than uint256).
    Leading zeros in either number are tolerated on input.
    """
    # fullmatch: ``$`` alone would accept a trailing "\n"
    match = _CHALLENGE_RE.fullmatch(message) if isinstance(message, str) else None
    if match is None:
        raise MalformedMessageError(message)
    return ChallengeMessage(ticket_id=int(match.group(1)), issued_at=int(match.group(2)))


def is_fresh(
    issued_at: int,
    now: int,
    window: int = CHALLENGE_WINDOW_SECONDS,
    allow_future: bool = True,
) -> bool:
    """Check that a challenge stamped at ``issued_at`` is usable at ``now``.

    With ``allow_future`` the window is symmetric so wallets whose clocks
    run slightly ahead still pass; without it, future stamps are rejected.
    """
    if not allow_future and issued_at > now:
        return False
    return abs(now - issued_at) <= window


def challenge_age(issued_at: int, now: int) -> int:
    """Seconds between issue and evaluation (negative if stamped ahead)."""
    return now - issued_at
