"""
UniversalRelayClient - gasless purchase pipeline
"""

import asyncio
import logging
import time
from contextlib import contextmanager
from typing import Callable, Iterator

from universal_relay.abi import get_relay_request_eip712_types
from universal_relay.config import RelayConfig
from universal_relay.exceptions import RelayError, ValidationError
from universal_relay.relay import (
    AllowanceManager,
    ChainContextResolver,
    DualSignatureAuthorizer,
    NonceProvider,
    RelayRequestBuilder,
    RelaySubmitter,
    validate_amount,
)
from universal_relay.signers.base import StructuredSigner
from universal_relay.signers.credential import OperatorCredential
from universal_relay.transport.base import ChainTransport
from universal_relay.types import SignedRelayRequest
from universal_relay.utils.eip712 import build_relay_domain

logger = logging.getLogger(__name__)

STEP_CHAIN_CONTEXT = "chain_context"
STEP_ALLOWANCE = "allowance"
STEP_NONCE = "nonce"
STEP_BUILD = "build"
STEP_AUTHORIZE = "authorize"
STEP_SUBMIT = "submit"


@contextmanager
def _pipeline_step(step: str, chain_id: int | None = None) -> Iterator[None]:
    """Tag RelayErrors leaving this block with the step and chain"""
    try:
        yield
    except RelayError as e:
        e.annotate(chain_id=chain_id, step=step)
        raise


class UniversalRelayClient:
    """
    Orchestrates a gasless purchase through the Universal Relay.

    Steps run strictly in order: chain context, allowance, nonce, build,
    authorize, submit. Nothing is retried here; every failure surfaces as a
    RelayError tagged with ``step`` and ``chain_id``.

    Attempts for the same user through one client are serialized. Attempts
    made through separate clients or processes race for the same on-chain
    nonce and the loser fails with RelayExecutionError(kind=stale_nonce).
    """

    def __init__(
        self,
        config: RelayConfig,
        transport: ChainTransport,
        signer: StructuredSigner,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._config = config
        self._transport = transport
        self._signer = signer
        self._resolver = ChainContextResolver(config)
        self._allowance = AllowanceManager(transport, receipt_timeout=config.receipt_timeout)
        self._nonces = NonceProvider(transport)
        self._builder = RelayRequestBuilder(ttl_seconds=config.ttl_seconds, clock=clock)
        self._authorizer = DualSignatureAuthorizer()
        self._submitter = RelaySubmitter(
            transport, receipt_timeout=config.receipt_timeout, clock=clock
        )
        # One user per client, so one lock serializes that user's attempts
        self._lock = asyncio.Lock()

    async def authorize_purchase(
        self,
        operator: OperatorCredential,
        target_token_address: str,
        payment_amount: int,
        target_contract: str | None = None,
    ) -> SignedRelayRequest:
        """
        Run chain context, allowance, nonce, build and authorize.

        Args:
            operator: Operator credential, acquired only while signing
            target_token_address: Token being purchased
            payment_amount: Payment token amount in base units (> 0)
            target_contract: Contract receiving the purchase, defaults to the token

        Returns:
            SignedRelayRequest ready for executeRelay
        """
        with _pipeline_step(STEP_BUILD):
            validate_amount(payment_amount)
        user = self._signer.get_address()
        target_contract = target_contract or target_token_address

        with _pipeline_step(STEP_CHAIN_CONTEXT):
            profile = await self._resolver.resolve_active(self._transport)
        chain_id = profile.chain_id

        logger.info(
            "Starting relay purchase",
            extra={
                "chain_id": chain_id,
                "user": user,
                "target_token": target_token_address,
                "amount": payment_amount,
            },
        )

        with _pipeline_step(STEP_ALLOWANCE, chain_id):
            await self._allowance.ensure_allowance(
                user, profile.relay_address, profile.payment_token_address, payment_amount
            )

        # Nonce is read after approval has settled and right before signing
        with _pipeline_step(STEP_NONCE, chain_id):
            nonce = await self._nonces.get_nonce(profile.relay_address, user)

        with _pipeline_step(STEP_BUILD, chain_id):
            request = self._builder.build(
                user=user,
                target_contract=target_contract,
                target_token=target_token_address,
                payment_token=profile.payment_token_address,
                amount=payment_amount,
                nonce=nonce,
            )

        domain = build_relay_domain(chain_id, profile.relay_address)
        types = get_relay_request_eip712_types()

        with _pipeline_step(STEP_AUTHORIZE, chain_id):
            with operator.acquire(self._config.operator_signature_mode) as operator_signer:
                bundle = await self._authorizer.authorize(
                    domain, types, request, self._signer, operator_signer
                )

        return SignedRelayRequest(
            chainId=chain_id,
            relayAddress=profile.relay_address,
            request=request,
            bundle=bundle,
            digest="0x" + self._authorizer.digest(domain, types, request).hex(),
        )

    async def submit_signed(self, signed: SignedRelayRequest) -> str:
        """Submit a previously authorized request on the connected chain"""
        chain_id = signed.chain_id
        with _pipeline_step(STEP_SUBMIT, chain_id):
            active = await self._transport.get_chain_id()
            if active != chain_id:
                raise ValidationError(
                    f"Request was authorized for chain {chain_id}, transport is on {active}"
                )
            return await self._submitter.submit(signed.relay_address, signed.request, signed.bundle)

    async def purchase_with_relay(
        self,
        operator: OperatorCredential,
        target_token_address: str,
        payment_amount: int,
        target_contract: str | None = None,
    ) -> str:
        """
        Buy target_token_address paying payment_amount of the chain's payment token.

        Returns:
            Transaction hash of the confirmed executeRelay
        """
        async with self._lock:
            signed = await self.authorize_purchase(
                operator, target_token_address, payment_amount, target_contract
            )
            with _pipeline_step(STEP_SUBMIT, signed.chain_id):
                tx_hash = await self._submitter.submit(
                    signed.relay_address, signed.request, signed.bundle
                )

        logger.info(
            "Relay purchase complete",
            extra={"chain_id": signed.chain_id, "tx_hash": tx_hash, "nonce": signed.request.nonce},
        )
        return tx_hash
