"""
Universal relay exception hierarchy
"""

from enum import Enum


class RelayError(Exception):
    """Universal relay base exception

    ``chain_id`` and ``step`` are filled in by the client as the error
    leaves a pipeline step, the underlying failure is kept as ``__cause__``.
    """

    retryable = False

    def __init__(self, message: str = "", *, chain_id: int | None = None, step: str | None = None):
        super().__init__(message)
        self.chain_id = chain_id
        self.step = step

    def annotate(self, *, chain_id: int | None = None, step: str | None = None) -> "RelayError":
        """Attach pipeline context without overwriting context set closer to the failure"""
        if self.chain_id is None:
            self.chain_id = chain_id
        if self.step is None:
            self.step = step
        return self

    def __str__(self) -> str:
        message = super().__str__()
        context = []
        if self.step:
            context.append(f"step={self.step}")
        if self.chain_id is not None:
            context.append(f"chain_id={self.chain_id}")
        if context:
            return f"{message} ({', '.join(context)})"
        return message


class ConfigurationError(RelayError):
    """Configuration-related error"""

    pass


class UnsupportedChainError(ConfigurationError):
    """No relay registered for the chain"""

    def __init__(self, chain_id: int):
        super().__init__(f"Universal Relay not deployed on chain {chain_id}", chain_id=chain_id)


class ValidationError(RelayError):
    """Validation-related error"""

    pass


class InvalidAmountError(ValidationError):
    """Payment amount is not a positive integer"""

    def __init__(self, amount):
        self.amount = amount
        super().__init__(f"Payment amount must be greater than zero, got {amount!r}")


class SignerMismatchError(ValidationError):
    """Signature does not recover to the request's user"""

    pass


class SignatureError(RelayError):
    """Signature-related error"""

    pass


class SignatureCreationError(SignatureError):
    """Signature creation failed"""

    pass


class UserRejectedError(SignatureError):
    """User declined the signing request"""

    pass


class InvalidKeyError(SignatureError):
    """Operator key material is malformed or no longer available"""

    pass


class AllowanceError(RelayError):
    """Allowance-related error"""

    pass


class ApprovalFailedError(AllowanceError):
    """Approval transaction failed, reverted or was not confirmed"""

    retryable = True


class TransactionError(RelayError):
    """Transaction-related error"""

    pass


class TransportError(TransactionError):
    """RPC transport failure"""

    retryable = True


class SubmissionError(TransportError):
    """Transaction could not be sent or confirmed"""

    pass


class TransactionTimeoutError(SubmissionError):
    """Transaction was not confirmed in time"""

    pass


class TransactionRevertedError(TransactionError):
    """Contract call reverted"""

    def __init__(self, reason: str | None = None, tx_hash: str | None = None):
        self.reason = reason
        self.tx_hash = tx_hash
        super().__init__(f"Transaction reverted: {reason or 'no reason given'}")


class RelayFailureKind(str, Enum):
    """Classification of relay execution reverts"""

    STALE_NONCE = "stale_nonce"
    EXPIRED = "expired"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    INVALID_SIGNATURE = "invalid_signature"
    UNKNOWN = "unknown"


# Checked in order, first match wins
_REVERT_PATTERNS: list[tuple[RelayFailureKind, tuple[str, ...]]] = [
    (RelayFailureKind.STALE_NONCE, ("nonce",)),
    (RelayFailureKind.EXPIRED, ("expired", "deadline")),
    (RelayFailureKind.INVALID_SIGNATURE, ("signature", "signer")),
    (RelayFailureKind.INSUFFICIENT_FUNDS, ("allowance", "balance", "insufficient")),
]


def classify_revert_reason(reason: str | None) -> RelayFailureKind:
    """Map a relay revert reason string to a failure kind"""
    if not reason:
        return RelayFailureKind.UNKNOWN
    lowered = reason.lower()
    for kind, needles in _REVERT_PATTERNS:
        if any(needle in lowered for needle in needles):
            return kind
    return RelayFailureKind.UNKNOWN


class RelayExecutionError(TransactionError):
    """Relay contract rejected the request"""

    def __init__(
        self,
        reason: str | None = None,
        kind: RelayFailureKind | None = None,
        tx_hash: str | None = None,
    ):
        self.reason = reason
        self.kind = kind or classify_revert_reason(reason)
        self.tx_hash = tx_hash
        super().__init__(f"Relay execution failed ({self.kind.value}): {reason or 'no reason given'}")

    @property
    def retryable(self) -> bool:
        # Stale nonce and expiry are recoverable by re-running nonce fetch and signing
        return self.kind in (RelayFailureKind.STALE_NONCE, RelayFailureKind.EXPIRED)


class RequestExpiredError(RelayExecutionError):
    """Request deadline has passed, rejected before submission"""

    def __init__(self, deadline: int, now: int):
        self.deadline = deadline
        self.now = now
        super().__init__(
            f"Request expired at {deadline}, current time is {now}",
            kind=RelayFailureKind.EXPIRED,
        )
