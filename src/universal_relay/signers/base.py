"""
Signer capability interfaces

The user and the operator sign with different primitives: the user signs
EIP-712 typed data, the operator signs the resulting 32-byte digest.
"""

from abc import ABC, abstractmethod
from typing import Any


class StructuredSigner(ABC):
    """
    Abstract base class for EIP-712 signers (the user's wallet).

    Implementations raise UserRejectedError when the holder declines.
    """

    @abstractmethod
    def get_address(self) -> str:
        """Get the signer's account address"""
        pass

    @abstractmethod
    async def sign_typed_data(
        self,
        domain: dict[str, Any],
        types: dict[str, Any],
        message: dict[str, Any],
        primary_type: str,
    ) -> str:
        """
        Sign EIP-712 typed data.

        Args:
            domain: EIP-712 domain
            types: Type definitions, without EIP712Domain
            message: Message to sign
            primary_type: Primary type name

        Returns:
            0x-prefixed 65-byte signature
        """
        pass


class DigestSigner(ABC):
    """
    Abstract base class for signers of arbitrary 32-byte payloads (the operator).
    """

    @abstractmethod
    def get_address(self) -> str:
        """Get the signer's account address"""
        pass

    @abstractmethod
    async def sign_digest(self, digest: bytes) -> str:
        """
        Sign a 32-byte digest.

        Returns:
            0x-prefixed 65-byte signature
        """
        pass
