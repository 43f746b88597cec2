"""
RelaySubmitter - sends executeRelay and waits for confirmation
"""

import logging
import time
from typing import Callable

from universal_relay.abi import RELAY_ABI
from universal_relay.config import DEFAULT_RECEIPT_TIMEOUT
from universal_relay.exceptions import (
    RelayExecutionError,
    RequestExpiredError,
    TransactionRevertedError,
)
from universal_relay.transport.base import ChainTransport
from universal_relay.types import RelayRequest, SignatureBundle

logger = logging.getLogger(__name__)


class RelaySubmitter:
    """Submits dual-signed requests to the relay contract"""

    def __init__(
        self,
        transport: ChainTransport,
        receipt_timeout: int = DEFAULT_RECEIPT_TIMEOUT,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._transport = transport
        self._receipt_timeout = receipt_timeout
        self._clock = clock

    async def submit(
        self,
        relay_address: str,
        request: RelayRequest,
        bundle: SignatureBundle,
    ) -> str:
        """
        Execute the relay request on-chain.

        Returns:
            Transaction hash of the confirmed executeRelay

        Raises:
            RequestExpiredError: If the deadline has already passed
            RelayExecutionError: If the relay contract reverts
            SubmissionError: On transport failure
        """
        now = int(self._clock())
        if request.is_expired(now):
            raise RequestExpiredError(request.deadline, now)

        user_signature, operator_signature = bundle.as_bytes()
        logger.info(
            "Submitting relay request",
            extra={
                "relay": relay_address,
                "user": request.user,
                "target_token": request.target_token,
                "amount": request.amount,
                "nonce": request.nonce,
            },
        )

        try:
            tx_hash = await self._transport.send(
                relay_address,
                RELAY_ABI,
                "executeRelay",
                [request.to_abi_tuple(), user_signature, operator_signature],
            )
        except TransactionRevertedError as e:
            raise RelayExecutionError(e.reason) from e

        receipt = await self._transport.wait_for_receipt(tx_hash, timeout=self._receipt_timeout)
        if receipt.get("status") != "confirmed":
            raise RelayExecutionError(None, tx_hash=tx_hash)

        logger.info(
            "Relay request executed",
            extra={"tx_hash": tx_hash, "block_number": receipt.get("blockNumber")},
        )
        return tx_hash
