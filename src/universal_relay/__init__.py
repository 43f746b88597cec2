"""
universal_relay - Gasless relay purchase SDK for Python

Builds, dual-signs and submits UniversalRelay requests on EVM chains.
"""

__version__ = "0.1.0"

from universal_relay.clients import UniversalRelayClient
from universal_relay.config import ChainProfile, RelayConfig
from universal_relay.exceptions import (
    AllowanceError,
    ApprovalFailedError,
    ConfigurationError,
    InvalidAmountError,
    InvalidKeyError,
    RelayError,
    RelayExecutionError,
    RelayFailureKind,
    RequestExpiredError,
    SignatureCreationError,
    SignatureError,
    SignerMismatchError,
    SubmissionError,
    TransactionError,
    TransactionRevertedError,
    TransactionTimeoutError,
    TransportError,
    UnsupportedChainError,
    UserRejectedError,
    ValidationError,
)
from universal_relay.signers import (
    DigestSigner,
    EvmDigestSigner,
    EvmStructuredSigner,
    OperatorCredential,
    ProviderStructuredSigner,
    StructuredSigner,
)
from universal_relay.transport import ChainTransport, Web3Transport
from universal_relay.types import RelayRequest, SignatureBundle, SignedRelayRequest

__all__ = [
    "__version__",
    # Client
    "UniversalRelayClient",
    # Config
    "ChainProfile",
    "RelayConfig",
    # Types
    "RelayRequest",
    "SignatureBundle",
    "SignedRelayRequest",
    # Signers
    "StructuredSigner",
    "DigestSigner",
    "EvmStructuredSigner",
    "EvmDigestSigner",
    "ProviderStructuredSigner",
    "OperatorCredential",
    # Transport
    "ChainTransport",
    "Web3Transport",
    # Exceptions
    "RelayError",
    "ConfigurationError",
    "UnsupportedChainError",
    "ValidationError",
    "InvalidAmountError",
    "SignerMismatchError",
    "SignatureError",
    "SignatureCreationError",
    "UserRejectedError",
    "InvalidKeyError",
    "AllowanceError",
    "ApprovalFailedError",
    "TransactionError",
    "TransportError",
    "SubmissionError",
    "TransactionTimeoutError",
    "TransactionRevertedError",
    "RelayExecutionError",
    "RequestExpiredError",
    "RelayFailureKind",
]
