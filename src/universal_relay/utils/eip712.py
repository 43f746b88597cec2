"""
EIP-712 helpers for the relay protocol.

Builds the relay domain and typed-data payload, computes the typed-data digest
and recovers signers for both signature kinds.
"""

from typing import Any

from eth_account import Account
from eth_account.messages import SignableMessage, encode_defunct, encode_typed_data
from eth_keys import keys
from eth_utils import keccak

from universal_relay.abi import (
    RELAY_DOMAIN_NAME,
    RELAY_DOMAIN_VERSION,
    RELAY_REQUEST_PRIMARY_TYPE,
)
from universal_relay.types import RelayRequest

# Canonical EIP-712 domain field order and types
_EIP712_DOMAIN_FIELDS: list[tuple[str, str]] = [
    ("name", "string"),
    ("version", "string"),
    ("chainId", "uint256"),
    ("verifyingContract", "address"),
    ("salt", "bytes32"),
]


def eip712_domain_type_from_keys(domain: dict[str, Any]) -> list[dict[str, str]]:
    """Build an EIP712Domain type array from the keys present in *domain*.

    Preserves the canonical field order defined in EIP-712.
    """
    return [{"name": name, "type": typ} for name, typ in _EIP712_DOMAIN_FIELDS if name in domain]


def build_relay_domain(chain_id: int, relay_address: str) -> dict[str, Any]:
    """Build the EIP-712 domain of the relay contract on chain_id"""
    return {
        "name": RELAY_DOMAIN_NAME,
        "version": RELAY_DOMAIN_VERSION,
        "chainId": chain_id,
        "verifyingContract": relay_address,
    }


def build_typed_data(
    domain: dict[str, Any],
    types: dict[str, Any],
    message: dict[str, Any],
    primary_type: str = RELAY_REQUEST_PRIMARY_TYPE,
) -> dict[str, Any]:
    """Assemble a full EIP-712 payload, adding EIP712Domain when absent"""
    full_types = dict(types)
    full_types.setdefault("EIP712Domain", eip712_domain_type_from_keys(domain))
    return {
        "types": full_types,
        "domain": domain,
        "primaryType": primary_type,
        "message": message,
    }


def encode_relay_typed_data(
    domain: dict[str, Any],
    types: dict[str, Any],
    message: dict[str, Any] | RelayRequest,
    primary_type: str = RELAY_REQUEST_PRIMARY_TYPE,
) -> SignableMessage:
    if isinstance(message, RelayRequest):
        message = message.to_eip712_message()
    return encode_typed_data(full_message=build_typed_data(domain, types, message, primary_type))


def hash_signable(signable: SignableMessage) -> bytes:
    """keccak256(0x19 ‖ version ‖ header ‖ body)"""
    return keccak(b"\x19" + signable.version + signable.header + signable.body)


def hash_typed_data(
    domain: dict[str, Any],
    types: dict[str, Any],
    message: dict[str, Any] | RelayRequest,
    primary_type: str = RELAY_REQUEST_PRIMARY_TYPE,
) -> bytes:
    """
    Compute the 32-byte EIP-712 digest of (domain, types, message).

    This is the hash a wallet signs for eth_signTypedData_v4 and the payload
    the operator signs.

    Returns:
        keccak256("\\x19\\x01" ‖ domainSeparator ‖ hashStruct(message))
    """
    return hash_signable(encode_relay_typed_data(domain, types, message, primary_type))


def domain_separator(domain: dict[str, Any], types: dict[str, Any], message: dict[str, Any]) -> bytes:
    """Domain separator, comparable with the contract's DOMAIN_SEPARATOR()"""
    return encode_relay_typed_data(domain, types, message).header


def _signature_bytes(signature: str | bytes) -> bytes:
    if isinstance(signature, bytes):
        return signature
    return bytes.fromhex(signature[2:] if signature.startswith("0x") else signature)


def recover_typed_data_signer(
    domain: dict[str, Any],
    types: dict[str, Any],
    message: dict[str, Any] | RelayRequest,
    signature: str | bytes,
) -> str:
    """Recover the address behind an EIP-712 signature"""
    signable = encode_relay_typed_data(domain, types, message)
    return Account.recover_message(signable, signature=_signature_bytes(signature))


def _recover_raw(digest: bytes, signature: bytes) -> str:
    if len(signature) != 65:
        raise ValueError(f"Expected a 65-byte signature, got {len(signature)} bytes")
    v = signature[64]
    # eth_keys wants the recovery id, wallets append 27 or 28
    if v >= 27:
        v -= 27
    vrs_signature = keys.Signature(signature_bytes=signature[:64] + bytes([v]))
    return vrs_signature.recover_public_key_from_msg_hash(digest).to_checksum_address()


def recover_digest_signer(digest: bytes, signature: str | bytes, mode: str = "eip191") -> str:
    """Recover the address behind an operator signature over *digest*

    Args:
        digest: 32-byte typed-data digest
        signature: 65-byte signature
        mode: "eip191" for a personal_sign over the digest bytes, "raw" for an
              unprefixed signature of the digest itself
    """
    if mode == "raw":
        return _recover_raw(digest, _signature_bytes(signature))
    return Account.recover_message(encode_defunct(primitive=digest), signature=_signature_bytes(signature))
