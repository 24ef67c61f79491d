"""Wallet signature utilities: EIP-191 signer recovery and address checks."""

from __future__ import annotations

import logging

from eth_account import Account
from eth_account.messages import encode_defunct
from eth_utils import is_address as _is_address

logger = logging.getLogger(__name__)


class SignatureVerificationError(Exception):
    """The signature could not be decoded or no signer could be recovered."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(detail)


# ── Signer Recovery ─────────────────────────────────────────────────


def recover_signer(message: str, signature: str | bytes) -> str:
    """Recover the checksum address that signed ``message``.

    The message is hashed the way wallets sign with ``personal_sign``:
    ``"\\x19Ethereum Signed Message:\\n" + len(message) + message``.

    Raises:
        SignatureVerificationError: the signature is not 65 bytes of hex,
            carries an invalid recovery id, or does not map to a point on
            the curve.
    """
    if not signature:
        raise SignatureVerificationError("Signature is empty")
    try:
        signable = encode_defunct(text=message)
        return str(Account.recover_message(signable, signature=signature))
    except Exception as exc:
        logger.debug("Signer recovery failed: %s", type(exc).__name__)
        raise SignatureVerificationError(f"Signature verification failed: {exc}") from exc


# ── Address Helpers ─────────────────────────────────────────────────


def addresses_equal(a: str | None, b: str | None) -> bool:
    """Case-insensitive hex address comparison. Empty never matches."""
    if not a or not b:
        return False
    return a.strip().lower() == b.strip().lower()


def is_address(value: str | None) -> bool:
    """Check that ``value`` is a 20-byte hex address (any casing)."""
    if not value:
        return False
    return bool(_is_address(value.lower()))
