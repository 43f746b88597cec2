"""
Web3Transport - ChainTransport implementation using web3.py
"""

import logging
from typing import Any

from universal_relay.exceptions import (
    ConfigurationError,
    SubmissionError,
    TransactionRevertedError,
    TransactionTimeoutError,
    TransportError,
)
from universal_relay.transport.base import ChainTransport

logger = logging.getLogger(__name__)

_REVERT_PREFIX = "execution reverted"


def revert_reason(error: Exception) -> str | None:
    """Extract the revert reason from a ContractLogicError"""
    message = getattr(error, "message", None) or str(error)
    if not message:
        return None
    if message.startswith(_REVERT_PREFIX):
        message = message[len(_REVERT_PREFIX) :].lstrip(": ").strip()
    return message or None


def _hex(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    value = str(value)
    return value if value.startswith("0x") else "0x" + value


class Web3Transport(ChainTransport):
    """
    Chain access through an AsyncWeb3 HTTP provider.

    With ``private_key`` transactions are signed locally and broadcast raw,
    otherwise the node signs them for ``account``.
    """

    def __init__(
        self,
        rpc_url: str | None = None,
        private_key: str | None = None,
        account: str | None = None,
        w3: Any = None,
    ) -> None:
        if w3 is None:
            if not rpc_url:
                raise ConfigurationError("Web3Transport requires rpc_url or a web3 instance")
            from web3 import AsyncHTTPProvider, AsyncWeb3
            from web3.middleware import ExtraDataToPOAMiddleware

            w3 = AsyncWeb3(AsyncHTTPProvider(rpc_url))
            w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)
        self._w3 = w3

        self._private_key = None
        if private_key is not None:
            from eth_account import Account

            if not private_key.startswith("0x"):
                private_key = "0x" + private_key
            self._private_key = private_key
            account = Account.from_key(private_key).address
        if account is None:
            raise ConfigurationError("Web3Transport requires private_key or account")
        self._account = account
        logger.debug("Web3Transport initialized", extra={"account": account, "rpc_url": rpc_url})

    @property
    def account(self) -> str:
        return self._account

    def _contract(self, contract_address: str, abi: list[dict[str, Any]]) -> Any:
        from web3 import Web3

        return self._w3.eth.contract(address=Web3.to_checksum_address(contract_address), abi=abi)

    async def get_chain_id(self) -> int:
        try:
            return int(await self._w3.eth.chain_id)
        except Exception as e:
            raise TransportError(f"Failed to read chain ID: {e}") from e

    async def call(
        self,
        contract_address: str,
        abi: list[dict[str, Any]],
        method: str,
        args: list[Any],
    ) -> Any:
        from web3.exceptions import ContractLogicError

        try:
            func = getattr(self._contract(contract_address, abi).functions, method)
            return await func(*args).call()
        except ContractLogicError as e:
            raise TransactionRevertedError(revert_reason(e)) from e
        except Exception as e:
            raise TransportError(f"Contract call {method} failed: {e}") from e

    async def send(
        self,
        contract_address: str,
        abi: list[dict[str, Any]],
        method: str,
        args: list[Any],
    ) -> str:
        from web3.exceptions import ContractLogicError

        w3 = self._w3
        try:
            func = getattr(self._contract(contract_address, abi).functions, method)(*args)
            if self._private_key is None:
                tx_hash = await func.transact({"from": self._account})
            else:
                tx = await func.build_transaction(
                    {
                        "from": self._account,
                        "nonce": await w3.eth.get_transaction_count(self._account, "pending"),
                        "chainId": await w3.eth.chain_id,
                    }
                )
                signed_tx = w3.eth.account.sign_transaction(tx, private_key=self._private_key)
                tx_hash = await w3.eth.send_raw_transaction(signed_tx.raw_transaction)
        except ContractLogicError as e:
            # Gas estimation surfaces the revert before broadcast
            raise TransactionRevertedError(revert_reason(e)) from e
        except Exception as e:
            logger.error(
                "Contract write failed: %s",
                e,
                extra={"method": method, "contract": contract_address},
            )
            raise SubmissionError(f"Failed to send {method} transaction: {e}") from e

        tx_hash_hex = _hex(tx_hash)
        logger.info(
            "Transaction sent",
            extra={"method": method, "contract": contract_address, "tx_hash": tx_hash_hex},
        )
        return tx_hash_hex

    async def wait_for_receipt(self, tx_hash: str, timeout: int = 120) -> dict[str, Any]:
        from web3.exceptions import TimeExhausted

        try:
            receipt = await self._w3.eth.wait_for_transaction_receipt(tx_hash, timeout=timeout)
        except TimeExhausted as e:
            raise TransactionTimeoutError(
                f"Transaction {tx_hash} not confirmed within {timeout}s"
            ) from e
        except Exception as e:
            raise SubmissionError(f"Failed to fetch receipt for {tx_hash}: {e}") from e

        return {
            "hash": tx_hash,
            "blockNumber": str(receipt["blockNumber"]),
            "status": "confirmed" if receipt["status"] == 1 else "failed",
            "receipt": receipt,
        }
