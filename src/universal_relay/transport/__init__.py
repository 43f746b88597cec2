"""
Chain transports
"""

from universal_relay.transport.base import ChainTransport
from universal_relay.transport.web3_transport import Web3Transport

__all__ = ["ChainTransport", "Web3Transport"]
