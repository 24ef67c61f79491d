"""Choose the ledger implementation from settings."""

from __future__ import annotations

import logging

from ticketgate.core.config import Settings
from ticketgate.ledger.base import BaseLedger
from ticketgate.ledger.memory import InMemoryLedger

logger = logging.getLogger(__name__)


def build_ledger(settings: Settings) -> BaseLedger:
    """Return a Web3Ledger when a contract is configured, else a stub."""
    if not settings.ledger_configured:
        logger.warning(
            "EVENT_MANAGER_ADDRESS not set; ledger running in STUB mode (no tickets, no events)"
        )
        return InMemoryLedger()

    from ticketgate.ledger.web3_ledger import Web3Ledger

    return Web3Ledger(
        contract_address=settings.event_manager_address,
        rpc_url=settings.ledger_rpc_url,
        timeout=settings.ledger_timeout_seconds,
    )
