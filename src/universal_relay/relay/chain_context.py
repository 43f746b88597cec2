"""
ChainContextResolver - maps the connected chain to its relay deployment
"""

import logging

from universal_relay.config import ChainProfile, RelayConfig
from universal_relay.transport.base import ChainTransport

logger = logging.getLogger(__name__)


class ChainContextResolver:
    """Pure lookup over an injected RelayConfig"""

    def __init__(self, config: RelayConfig) -> None:
        self._config = config

    def resolve(self, chain_id: int) -> ChainProfile:
        """
        Resolve the relay deployment for chain_id.

        Raises:
            UnsupportedChainError: If no relay is registered for chain_id
        """
        return self._config.get_profile(chain_id)

    async def resolve_active(self, transport: ChainTransport) -> ChainProfile:
        """Resolve the profile of the network the transport is connected to"""
        chain_id = await transport.get_chain_id()
        profile = self.resolve(chain_id)
        logger.debug(
            "Resolved chain context",
            extra={
                "chain_id": chain_id,
                "relay": profile.relay_address,
                "payment_token": profile.payment_token_address,
            },
        )
        return profile
