"""
EVM signer implementations backed by local private keys
"""

import logging
from typing import Any

from universal_relay.exceptions import InvalidKeyError, SignatureCreationError
from universal_relay.signers.base import DigestSigner, StructuredSigner
from universal_relay.utils.eip712 import build_typed_data

logger = logging.getLogger(__name__)


def _normalize_key(private_key: str) -> str:
    if not isinstance(private_key, str) or not private_key:
        raise InvalidKeyError("Private key must be a non-empty hex string")
    if not private_key.startswith("0x"):
        private_key = "0x" + private_key
    return private_key


def _derive_address(private_key: str) -> str:
    """Derive EVM address from private key"""
    from eth_account import Account

    try:
        return Account.from_key(private_key).address
    except Exception as e:
        # Do not echo the key material
        raise InvalidKeyError(f"Malformed private key: {type(e).__name__}") from None


def _to_hex(signature: bytes) -> str:
    return "0x" + bytes(signature).hex()


class EvmStructuredSigner(StructuredSigner):
    """EIP-712 signer for a locally held user key"""

    def __init__(self, private_key: str) -> None:
        self._private_key = _normalize_key(private_key)
        self._address = _derive_address(self._private_key)
        logger.debug("EvmStructuredSigner initialized", extra={"address": self._address})

    @classmethod
    def from_private_key(cls, private_key: str) -> "EvmStructuredSigner":
        """Create signer from private key."""
        return cls(private_key)

    def get_address(self) -> str:
        return self._address

    def __repr__(self) -> str:
        return f"EvmStructuredSigner(address={self._address})"

    async def sign_typed_data(
        self,
        domain: dict[str, Any],
        types: dict[str, Any],
        message: dict[str, Any],
        primary_type: str,
    ) -> str:
        """Sign EIP-712 typed data."""
        try:
            from eth_account import Account
            from eth_account.messages import encode_typed_data

            encoded = encode_typed_data(
                full_message=build_typed_data(domain, types, message, primary_type)
            )
            signed = Account.sign_message(encoded, private_key=self._private_key)
            return _to_hex(signed.signature)
        except Exception as e:
            raise SignatureCreationError(f"Failed to sign typed data: {e}") from e


class EvmDigestSigner(DigestSigner):
    """Operator signer over raw typed-data digests

    mode "eip191" signs the digest bytes with the personal_sign prefix,
    mode "raw" signs the digest as the message hash.
    """

    MODES = ("eip191", "raw")

    def __init__(self, private_key: str, mode: str = "eip191") -> None:
        if mode not in self.MODES:
            raise ValueError(f"Unknown operator signature mode: {mode}")
        self._private_key: str | None = _normalize_key(private_key)
        self._address = _derive_address(self._private_key)
        self._mode = mode
        logger.debug("EvmDigestSigner initialized", extra={"address": self._address, "mode": mode})

    @classmethod
    def from_private_key(cls, private_key: str, mode: str = "eip191") -> "EvmDigestSigner":
        """Create signer from private key"""
        return cls(private_key, mode)

    @property
    def mode(self) -> str:
        return self._mode

    def get_address(self) -> str:
        return self._address

    def __repr__(self) -> str:
        return f"EvmDigestSigner(address={self._address}, mode={self._mode})"

    def discard(self) -> None:
        """Drop the key reference, later signing raises InvalidKeyError"""
        self._private_key = None

    @property
    def discarded(self) -> bool:
        return self._private_key is None

    async def sign_digest(self, digest: bytes) -> str:
        if self._private_key is None:
            raise InvalidKeyError("Operator credential has been discarded")
        if len(digest) != 32:
            raise SignatureCreationError(f"Digest must be 32 bytes, got {len(digest)}")

        try:
            from eth_account import Account
            from eth_account.messages import encode_defunct

            if self._mode == "raw":
                signed = Account.unsafe_sign_hash(digest, private_key=self._private_key)
            else:
                signed = Account.sign_message(
                    encode_defunct(primitive=digest), private_key=self._private_key
                )
            return _to_hex(signed.signature)
        except Exception as e:
            raise SignatureCreationError(f"Failed to sign digest: {e}") from e
