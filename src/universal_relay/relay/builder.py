"""
RelayRequestBuilder - constructs the signed RelayRequest message
"""

import time
from typing import Callable

from universal_relay.config import DEFAULT_TTL_SECONDS
from universal_relay.exceptions import InvalidAmountError, ValidationError
from universal_relay.types import RelayRequest


def validate_amount(amount: int) -> int:
    """Return amount if it is a positive integer, raise InvalidAmountError otherwise"""
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise InvalidAmountError(amount)
    return amount


class RelayRequestBuilder:
    """Pure construction of RelayRequest values"""

    def __init__(
        self,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._ttl_seconds = ttl_seconds
        self._clock = clock

    @property
    def ttl_seconds(self) -> int:
        return self._ttl_seconds

    def now(self) -> int:
        return int(self._clock())

    def build(
        self,
        user: str,
        target_contract: str,
        target_token: str,
        payment_token: str,
        amount: int,
        nonce: int,
        ttl_seconds: int | None = None,
    ) -> RelayRequest:
        """
        Build a RelayRequest expiring ttl_seconds from now.

        Raises:
            InvalidAmountError: If amount is not > 0
            ValidationError: If the TTL is not positive or an address is invalid
        """
        validate_amount(amount)
        ttl = self._ttl_seconds if ttl_seconds is None else ttl_seconds
        if ttl <= 0:
            raise ValidationError(f"Request TTL must be positive, got {ttl}")

        try:
            return RelayRequest(
                user=user,
                targetContract=target_contract,
                targetToken=target_token,
                paymentToken=payment_token,
                amount=amount,
                nonce=nonce,
                deadline=self.now() + ttl,
            )
        except ValueError as e:
            raise ValidationError(f"Invalid relay request: {e}") from e
