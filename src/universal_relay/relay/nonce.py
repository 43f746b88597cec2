"""
NonceProvider - reads the user's relay nonce
"""

import logging

from universal_relay.abi import RELAY_ABI
from universal_relay.transport.base import ChainTransport

logger = logging.getLogger(__name__)


class NonceProvider:
    """
    Reads nonces(user) from the relay contract.

    The value is only valid until the next successful executeRelay for the
    same user; read it right before signing and re-read on any delay.
    """

    def __init__(self, transport: ChainTransport) -> None:
        self._transport = transport

    async def get_nonce(self, relay_address: str, user: str) -> int:
        nonce = int(await self._transport.call(relay_address, RELAY_ABI, "nonces", [user]))
        logger.debug("Fetched relay nonce", extra={"user": user, "nonce": nonce})
        return nonce
