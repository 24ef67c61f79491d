"""Domain constants for the CrossFi ticket gate."""

from __future__ import annotations

# ── Access challenge ────────────────────────────────────────────────
CHALLENGE_TEMPLATE = "Accessing ticket {ticket_id} at {issued_at}"
# Contract ids and timestamps are uint256: at most 78 decimal digits
UINT256_MAX = 2**256 - 1
UINT256_DIGITS = 78

CHALLENGE_PATTERN = r"^Accessing ticket (\d{1,78}) at (\d{1,78})$"
CHALLENGE_WINDOW_SECONDS = 300

# ── Ledger enums (index = on-chain uint8) ───────────────────────────
TOKEN_TYPES: list[str] = ["XFI", "XUSD", "MPX"]
DEFAULT_TOKEN_TYPE = "XFI"

EVENT_STATUSES: list[str] = ["upcoming", "live", "ended"]
DEFAULT_EVENT_STATUS = "upcoming"

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

WEI_PER_ETHER = 10**18

# ── Chains ──────────────────────────────────────────────────────────
CROSSFI_CHAINS: dict[str, dict[str, object]] = {
    "testnet": {
        "chain_id": 4157,
        "name": "CrossFi Testnet",
        "rpc_url": "https://rpc.testnet.ms",
        "explorer": "https://scan.testnet.ms",
    },
    "mainnet": {
        "chain_id": 4158,
        "name": "CrossFi Mainnet",
        "rpc_url": "https://rpc.mainnet.ms",
        "explorer": "https://scan.ms",
    },
}

# ── QR payload ──────────────────────────────────────────────────────
QR_PLATFORM = "CrossFi-Tickets"
QR_VERSION = "2.0"

# ── Staff scanning ──────────────────────────────────────────────────
STAFF_CODE_PREFIX = "STAFF-"

# ── Pagination ──────────────────────────────────────────────────────
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
