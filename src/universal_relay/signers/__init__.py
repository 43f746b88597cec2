"""
Signers
"""

from universal_relay.signers.base import DigestSigner, StructuredSigner
from universal_relay.signers.credential import OperatorCredential
from universal_relay.signers.evm_signer import EvmDigestSigner, EvmStructuredSigner
from universal_relay.signers.provider_signer import ProviderStructuredSigner

__all__ = [
    "StructuredSigner",
    "DigestSigner",
    "EvmStructuredSigner",
    "EvmDigestSigner",
    "ProviderStructuredSigner",
    "OperatorCredential",
]
