"""EventManager reader backed by a CrossFi JSON-RPC node via web3.py."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import requests
from web3 import Web3
from web3.exceptions import ContractLogicError, Web3Exception, Web3RPCError

from ticketgate.ledger.abi import EVENT_MANAGER_ABI
from ticketgate.ledger.base import (
    BaseLedger,
    EventNotFoundError,
    EventRecord,
    LedgerDataError,
    LedgerError,
    LedgerUnavailableError,
    TicketNotFoundError,
    TicketRecord,
    TierRecord,
)

logger = logging.getLogger(__name__)


def _is_missing_revert(exc: ContractLogicError) -> bool:
    return "does not exist" in str(exc).lower()


class Web3Ledger(BaseLedger):
    """Reads tickets, events and tiers from a deployed EventManager.

    Every call goes straight to the node; nothing is cached, so each
    decision sees the chain as of that read. The provider is built with
    retries disabled: one POST per read, bounded by ``timeout``.
    """

    name = "web3"

    def __init__(
        self,
        contract_address: str,
        rpc_url: str,
        timeout: float = 5.0,
        w3: Web3 | None = None,
    ) -> None:
        self.rpc_url = rpc_url
        self.timeout = timeout
        self.w3 = w3 or Web3(
            Web3.HTTPProvider(
                rpc_url,
                request_kwargs={"timeout": timeout},
                exception_retry_configuration=None,
            )
        )
        self.contract_address = Web3.to_checksum_address(contract_address.strip().lower())
        self.contract = self.w3.eth.contract(address=self.contract_address, abi=EVENT_MANAGER_ABI)
        logger.info("Using EventManager contract %s via %s", self.contract_address, rpc_url)

    # ── Reads ───────────────────────────────────────────────────────

    def get_ticket_info(self, ticket_id: int) -> TicketRecord:
        def on_revert(exc: ContractLogicError) -> LedgerError:
            if _is_missing_revert(exc):
                return TicketNotFoundError(ticket_id)
            return LedgerDataError(f"getTicketInfo({ticket_id}) reverted: {exc}")

        raw = self._call("getTicketInfo", (ticket_id,), on_revert)
        record = TicketRecord.from_contract(raw)
        # A never-minted id reads back as zeroed storage on some deployments
        if record.ticket_id == 0:
            raise TicketNotFoundError(ticket_id)
        return record

    def get_event(self, event_id: int) -> EventRecord:
        def on_revert(exc: ContractLogicError) -> LedgerError:
            return EventNotFoundError(event_id)

        record = EventRecord.from_contract(self._call("getEvent", (event_id,), on_revert))
        if not record.exists:
            raise EventNotFoundError(event_id)
        return record

    def get_ticket_tier(self, event_id: int, tier_id: int) -> TierRecord:
        def on_revert(exc: ContractLogicError) -> LedgerError:
            return EventNotFoundError(event_id, tier_id)

        return TierRecord.from_contract(self._call("getTicketTier", (event_id, tier_id), on_revert))

    def get_user_tickets(self, address: str) -> list[int]:
        def on_revert(exc: ContractLogicError) -> LedgerError:
            return LedgerDataError(f"getUserTickets reverted: {exc}")

        checksum = Web3.to_checksum_address(address.lower())
        raw = self._call("getUserTickets", (checksum,), on_revert)
        if isinstance(raw, (str, bytes)):
            raise LedgerDataError("Invalid ticket id list from ledger")
        try:
            return [int(t) for t in raw]
        except (TypeError, ValueError) as exc:
            raise LedgerDataError("Invalid ticket id list from ledger") from exc

    def ping(self) -> bool:
        try:
            return bool(self.w3.is_connected())
        except (requests.exceptions.RequestException, Web3Exception):
            return False

    # ── Internals ───────────────────────────────────────────────────

    def _call(
        self,
        fn_name: str,
        args: tuple[Any, ...],
        on_revert: Callable[[ContractLogicError], LedgerError],
    ) -> Any:
        """Invoke a view function, translating web3 errors to LedgerError."""
        try:
            return getattr(self.contract.functions, fn_name)(*args).call()
        except ContractLogicError as exc:
            raise on_revert(exc) from exc
        except requests.exceptions.Timeout as exc:
            logger.warning("Ledger call %s%s timed out after %.1fs", fn_name, args, self.timeout)
            raise LedgerUnavailableError(f"{fn_name} timed out") from exc
        except requests.exceptions.RequestException as exc:
            logger.warning("Ledger call %s%s failed: %s", fn_name, args, exc)
            raise LedgerUnavailableError(f"{fn_name} failed: ledger unreachable") from exc
        except Web3RPCError as exc:
            # Node-side JSON-RPC error (rate limit, overloaded node)
            logger.warning("Ledger call %s%s rejected by node: %s", fn_name, args, exc)
            raise LedgerUnavailableError(f"{fn_name} rejected by node") from exc
        except Web3Exception as exc:
            logger.warning("Ledger call %s%s returned an error: %s", fn_name, args, exc)
            raise LedgerDataError(f"{fn_name} failed: {exc}") from exc
