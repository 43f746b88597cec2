"""
AllowanceManager - ensures the relay can pull the payment token
"""

import logging

from universal_relay.abi import ERC20_ABI, MAX_UINT256
from universal_relay.config import DEFAULT_RECEIPT_TIMEOUT
from universal_relay.exceptions import ApprovalFailedError, TransactionError
from universal_relay.transport.base import ChainTransport

logger = logging.getLogger(__name__)


class AllowanceManager:
    """ERC20 allowance check and max approval"""

    def __init__(self, transport: ChainTransport, receipt_timeout: int = DEFAULT_RECEIPT_TIMEOUT):
        self._transport = transport
        self._receipt_timeout = receipt_timeout

    async def check_allowance(self, owner: str, spender: str, token: str) -> int:
        """Read allowance(owner, spender) of token"""
        return int(await self._transport.call(token, ERC20_ABI, "allowance", [owner, spender]))

    async def ensure_allowance(
        self,
        owner: str,
        spender: str,
        token: str,
        required_amount: int,
    ) -> str | None:
        """
        Make sure spender may pull required_amount of token from owner.

        Sends at most one approve(spender, MAX_UINT256) and waits for it.

        Returns:
            Approval transaction hash, or None when the allowance already suffices

        Raises:
            ApprovalFailedError: If the approval reverts, fails or is not confirmed
        """
        current = await self.check_allowance(owner, spender, token)
        if current >= required_amount:
            logger.debug(
                "Allowance sufficient",
                extra={"token": token, "spender": spender, "allowance": current},
            )
            return None

        logger.info(
            "Allowance insufficient, approving relay",
            extra={
                "token": token,
                "spender": spender,
                "allowance": current,
                "required": required_amount,
            },
        )
        try:
            tx_hash = await self._transport.send(token, ERC20_ABI, "approve", [spender, MAX_UINT256])
            receipt = await self._transport.wait_for_receipt(tx_hash, timeout=self._receipt_timeout)
        except TransactionError as e:
            raise ApprovalFailedError(f"ERC20 approval transaction failed: {e}") from e

        if receipt.get("status") != "confirmed":
            raise ApprovalFailedError(f"ERC20 approval transaction {tx_hash} reverted")

        logger.info("ERC20 approval successful", extra={"token": token, "tx_hash": tx_hash})
        return tx_hash
