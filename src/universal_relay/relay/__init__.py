"""
Relay pipeline components
"""

from universal_relay.relay.allowance import AllowanceManager
from universal_relay.relay.authorizer import DualSignatureAuthorizer
from universal_relay.relay.builder import RelayRequestBuilder, validate_amount
from universal_relay.relay.chain_context import ChainContextResolver
from universal_relay.relay.nonce import NonceProvider
from universal_relay.relay.submitter import RelaySubmitter

__all__ = [
    "ChainContextResolver",
    "AllowanceManager",
    "NonceProvider",
    "RelayRequestBuilder",
    "validate_amount",
    "DualSignatureAuthorizer",
    "RelaySubmitter",
]
