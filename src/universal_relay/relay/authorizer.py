"""
DualSignatureAuthorizer - user EIP-712 signature plus operator digest signature
"""

import logging
from typing import Any

from universal_relay.abi import RELAY_REQUEST_PRIMARY_TYPE
from universal_relay.exceptions import SignatureCreationError, SignerMismatchError
from universal_relay.signers.base import DigestSigner, StructuredSigner
from universal_relay.types import RelayRequest, SignatureBundle
from universal_relay.utils.eip712 import hash_typed_data, recover_typed_data_signer

logger = logging.getLogger(__name__)


class DualSignatureAuthorizer:
    """
    Produces the SignatureBundle for one RelayRequest.

    The user signs the typed data through their wallet, which derives the
    EIP-712 digest itself. The operator signs the same digest computed here
    with a plain message signature, not a second EIP-712 signature.
    """

    @staticmethod
    def digest(domain: dict[str, Any], types: dict[str, Any], request: RelayRequest) -> bytes:
        """32-byte EIP-712 digest of (domain, types, request)"""
        return hash_typed_data(domain, types, request.to_eip712_message())

    async def authorize(
        self,
        domain: dict[str, Any],
        types: dict[str, Any],
        request: RelayRequest,
        user_signer: StructuredSigner,
        operator_signer: DigestSigner,
    ) -> SignatureBundle:
        """
        Sign request by both parties.

        Raises:
            UserRejectedError: If the user declines the signing prompt
            InvalidKeyError: If the operator key is malformed or discarded
            SignerMismatchError: If the user signature does not recover to request.user
        """
        message = request.to_eip712_message()

        logger.info(
            "Requesting user signature",
            extra={"user": request.user, "nonce": request.nonce, "deadline": request.deadline},
        )
        user_signature = await user_signer.sign_typed_data(
            domain=domain,
            types=types,
            message=message,
            primary_type=RELAY_REQUEST_PRIMARY_TYPE,
        )

        try:
            recovered = recover_typed_data_signer(domain, types, message, user_signature)
        except Exception as e:
            raise SignatureCreationError(f"User signature is malformed: {e}") from e
        if recovered.lower() != request.user.lower():
            raise SignerMismatchError(
                f"User signature recovers to {recovered}, request user is {request.user}"
            )

        digest = hash_typed_data(domain, types, message)
        operator_signature = await operator_signer.sign_digest(digest)

        logger.info(
            "Relay request authorized",
            extra={
                "user": request.user,
                "operator": operator_signer.get_address(),
                "digest": "0x" + digest.hex(),
            },
        )
        return SignatureBundle(userSignature=user_signature, operatorSignature=operator_signature)
