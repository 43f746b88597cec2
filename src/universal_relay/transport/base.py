"""
Chain transport interface
"""

from abc import ABC, abstractmethod
from typing import Any


class ChainTransport(ABC):
    """
    Abstract base class for chain access.

    Responsible for reading contract state and sending contract transactions
    from the user's account.
    """

    @abstractmethod
    async def get_chain_id(self) -> int:
        """Get the chain ID of the connected network"""
        pass

    @abstractmethod
    async def call(
        self,
        contract_address: str,
        abi: list[dict[str, Any]],
        method: str,
        args: list[Any],
    ) -> Any:
        """
        Execute a read-only contract call.

        Raises:
            TransactionRevertedError: If the call reverts
            TransportError: On RPC failure
        """
        pass

    @abstractmethod
    async def send(
        self,
        contract_address: str,
        abi: list[dict[str, Any]],
        method: str,
        args: list[Any],
    ) -> str:
        """
        Send a contract write transaction.

        Returns:
            Transaction hash (0x-prefixed)

        Raises:
            TransactionRevertedError: If the transaction would revert
            SubmissionError: If the transaction could not be sent
        """
        pass

    @abstractmethod
    async def wait_for_receipt(self, tx_hash: str, timeout: int = 120) -> dict[str, Any]:
        """
        Wait for transaction confirmation.

        Returns:
            {"hash", "blockNumber", "status": "confirmed" | "failed", "receipt"}

        Raises:
            TransactionTimeoutError: If not mined within timeout
            SubmissionError: On RPC failure
        """
        pass
