"""
Type definitions for the universal relay protocol
"""

from typing import Any

from eth_utils import is_address, to_checksum_address
from pydantic import BaseModel, Field, field_validator

from universal_relay.abi import MAX_UINT256


def checksum_address(value: str) -> str:
    """Validate an EVM address and return its EIP-55 checksum form"""
    if not isinstance(value, str) or not is_address(value):
        raise ValueError(f"Invalid EVM address: {value!r}")
    return to_checksum_address(value)


class RelayRequest(BaseModel):
    """Relay request signed by both the user and the operator

    Field order is the EIP-712 schema order.
    """

    user: str
    target_contract: str = Field(alias="targetContract")
    target_token: str = Field(alias="targetToken")
    payment_token: str = Field(alias="paymentToken")
    amount: int = Field(ge=0, le=MAX_UINT256)
    nonce: int = Field(ge=0, le=MAX_UINT256)
    deadline: int = Field(ge=0, le=MAX_UINT256)

    class Config:
        populate_by_name = True
        frozen = True

    @field_validator("user", "target_contract", "target_token", "payment_token")
    @classmethod
    def _checksum(cls, value: str) -> str:
        return checksum_address(value)

    def to_eip712_message(self) -> dict[str, Any]:
        """Message dict for EIP-712 signing, keys in schema order"""
        return {
            "user": self.user,
            "targetContract": self.target_contract,
            "targetToken": self.target_token,
            "paymentToken": self.payment_token,
            "amount": self.amount,
            "nonce": self.nonce,
            "deadline": self.deadline,
        }

    def to_abi_tuple(self) -> tuple:
        """Struct argument for executeRelay"""
        return (
            self.user,
            self.target_contract,
            self.target_token,
            self.payment_token,
            self.amount,
            self.nonce,
            self.deadline,
        )

    def is_expired(self, now: int) -> bool:
        return now > self.deadline


def _hex_to_bytes(value: str) -> bytes:
    return bytes.fromhex(value[2:] if value.startswith("0x") else value)


class SignatureBundle(BaseModel):
    """User and operator signatures over one RelayRequest"""

    user_signature: str = Field(alias="userSignature")
    operator_signature: str = Field(alias="operatorSignature")

    class Config:
        populate_by_name = True
        frozen = True

    def as_bytes(self) -> tuple[bytes, bytes]:
        return _hex_to_bytes(self.user_signature), _hex_to_bytes(self.operator_signature)


class SignedRelayRequest(BaseModel):
    """Fully authorized request, ready for executeRelay"""

    chain_id: int = Field(alias="chainId")
    relay_address: str = Field(alias="relayAddress")
    request: RelayRequest
    bundle: SignatureBundle
    digest: str

    class Config:
        populate_by_name = True
        frozen = True
