"""
OperatorCredential - scoped access to the operator signing key
"""

import logging
import os
from contextlib import contextmanager
from typing import Callable, Iterator

from universal_relay.exceptions import InvalidKeyError
from universal_relay.signers.evm_signer import EvmDigestSigner

logger = logging.getLogger(__name__)


class OperatorCredential:
    """
    Handle to the operator key.

    The key is only turned into a signer inside ``acquire()``; the signer is
    discarded when the block exits, even on error.

    Example:
        with credential.acquire() as operator_signer:
            signature = await operator_signer.sign_digest(digest)
    """

    def __init__(self, key_source: Callable[[], str], label: str = "operator") -> None:
        self._key_source = key_source
        self._label = label

    @classmethod
    def from_private_key(cls, private_key: str) -> "OperatorCredential":
        return cls(lambda: private_key, label="inline")

    @classmethod
    def from_env(cls, variable: str = "UNIVERSAL_RELAY_OPERATOR_KEY") -> "OperatorCredential":
        """Credential read from *variable* at acquisition time"""

        def _read() -> str:
            value = os.environ.get(variable)
            if not value:
                raise InvalidKeyError(f"Environment variable {variable} is not set")
            return value

        return cls(_read, label=f"env:{variable}")

    def __repr__(self) -> str:
        return f"OperatorCredential({self._label})"

    @contextmanager
    def acquire(self, mode: str = "eip191") -> Iterator[EvmDigestSigner]:
        signer = EvmDigestSigner(self._key_source(), mode=mode)
        logger.debug(
            "Operator credential acquired",
            extra={"credential": self._label, "address": signer.get_address()},
        )
        try:
            yield signer
        finally:
            signer.discard()
            logger.debug("Operator credential released", extra={"credential": self._label})
