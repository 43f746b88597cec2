"""
ProviderStructuredSigner - EIP-712 signing delegated to a wallet or node
"""

import json
import logging
from typing import Any

from universal_relay.exceptions import SignatureCreationError, UserRejectedError
from universal_relay.signers.base import StructuredSigner
from universal_relay.utils.eip712 import build_typed_data

logger = logging.getLogger(__name__)

# EIP-1193 "User Rejected Request"
USER_REJECTED_CODE = 4001


def _is_integer_type(solidity_type: str) -> bool:
    return solidity_type.startswith(("uint", "int"))


def _stringify(values: dict[str, Any], fields: list[dict[str, str]]) -> dict[str, Any]:
    integer_fields = {f["name"] for f in fields if _is_integer_type(f["type"])}
    return {
        name: str(value) if name in integer_fields and isinstance(value, int) else value
        for name, value in values.items()
    }


def _integers_as_strings(typed: dict[str, Any]) -> dict[str, Any]:
    """Encode integer fields as decimal strings

    Wallets parse JSON numbers as doubles, which cannot hold uint256 values
    above 2**53.
    """
    types = typed["types"]
    return {
        **typed,
        "domain": _stringify(typed["domain"], types["EIP712Domain"]),
        "message": _stringify(typed["message"], types[typed["primaryType"]]),
    }


class ProviderStructuredSigner(StructuredSigner):
    """Signs through eth_signTypedData_v4 on an AsyncWeb3 provider.

    The account's key stays with the wallet; the holder may decline.
    """

    def __init__(self, w3: Any, account: str) -> None:
        self._w3 = w3
        self._account = account

    @classmethod
    def from_rpc_url(cls, rpc_url: str, account: str) -> "ProviderStructuredSigner":
        from web3 import AsyncHTTPProvider, AsyncWeb3

        return cls(AsyncWeb3(AsyncHTTPProvider(rpc_url)), account)

    def get_address(self) -> str:
        return self._account

    async def sign_typed_data(
        self,
        domain: dict[str, Any],
        types: dict[str, Any],
        message: dict[str, Any],
        primary_type: str,
    ) -> str:
        typed = build_typed_data(domain, types, message, primary_type)
        payload = json.dumps(_integers_as_strings(typed))
        try:
            response = await self._w3.provider.make_request(
                "eth_signTypedData_v4", [self._account, payload]
            )
        except Exception as e:
            raise SignatureCreationError(f"Signing request failed: {e}") from e

        error = response.get("error")
        if error:
            code = error.get("code") if isinstance(error, dict) else None
            text = error.get("message") if isinstance(error, dict) else str(error)
            if code == USER_REJECTED_CODE:
                logger.info("User rejected signing request", extra={"account": self._account})
                raise UserRejectedError(f"User rejected the signing request: {text}")
            raise SignatureCreationError(f"Wallet failed to sign typed data: {text}")

        signature = response.get("result")
        if not isinstance(signature, str):
            raise SignatureCreationError("Wallet returned no signature")
        return signature if signature.startswith("0x") else "0x" + signature
