"""
Pytest configuration and fixtures
"""

import asyncio
import time
from typing import Any

import pytest
from eth_account import Account

from universal_relay.abi import get_relay_request_eip712_types
from universal_relay.config import RelayConfig
from universal_relay.exceptions import TransactionRevertedError
from universal_relay.transport.base import ChainTransport
from universal_relay.utils.eip712 import (
    build_relay_domain,
    hash_typed_data,
    recover_digest_signer,
    recover_typed_data_signer,
)

USER_KEY = "0x0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef"
USER_ADDRESS = "0xfcad0b19bb29d4674531d6f115237e16afce377c"
OPERATOR_KEY = "0x" + "11" * 32

POLYGON_USDC = "0x2791Bca1f2de4661ED88A30C99A7a9449Aa84174"
RELAY_ADDRESS = "0x" + "cc" * 20
TARGET_TOKEN = "0x" + "bb" * 20


class FakeRelayChain(ChainTransport):
    """In-memory relay chain: ERC20 allowances, relay nonces, signature checks"""

    def __init__(
        self,
        chain_id: int = 137,
        relay_address: str = RELAY_ADDRESS,
        allowance: int = 0,
        nonce: int = 0,
        operator_address: str | None = None,
        operator_mode: str = "eip191",
        approve_status: str = "confirmed",
        clock=time.time,
    ) -> None:
        self.chain_id = chain_id
        self.relay_address = relay_address
        self.allowances: dict[tuple[str, str], int] = {}
        self.default_allowance = allowance
        self.nonces: dict[str, int] = {}
        self.default_nonce = nonce
        self.operator_address = operator_address
        self.operator_mode = operator_mode
        self.approve_status = approve_status
        self.clock = clock
        self.events: list[str] = []
        self.sent: list[tuple[str, list[Any]]] = []
        self.consumed: set[tuple[str, int]] = set()
        self._statuses: dict[str, str] = {}

    def nonce_of(self, user: str) -> int:
        return self.nonces.get(user.lower(), self.default_nonce)

    def allowance_of(self, owner: str, spender: str) -> int:
        return self.allowances.get((owner.lower(), spender.lower()), self.default_allowance)

    async def get_chain_id(self) -> int:
        return self.chain_id

    async def call(self, contract_address, abi, method, args):
        self.events.append(f"call:{method}")
        if method == "allowance":
            result = self.allowance_of(args[0], args[1])
        elif method == "nonces":
            result = self.nonce_of(args[0])
        else:
            raise AssertionError(f"unexpected call {method}")
        # State is read before yielding, so concurrent attempts see the same value
        await asyncio.sleep(0)
        return result

    async def send(self, contract_address, abi, method, args):
        self.events.append(f"send:{method}")
        self.sent.append((method, list(args)))
        tx_hash = "0x" + f"{len(self.sent):064x}"
        status = "confirmed"
        if method == "approve":
            status = self.approve_status
            if status == "confirmed":
                self.allowances[(USER_ADDRESS.lower(), args[0].lower())] = args[1]
        elif method == "executeRelay":
            self._execute(*args)
        else:
            raise AssertionError(f"unexpected send {method}")
        self._statuses[tx_hash] = status
        return tx_hash

    async def wait_for_receipt(self, tx_hash, timeout=120):
        self.events.append("receipt")
        return {
            "hash": tx_hash,
            "blockNumber": "1",
            "status": self._statuses[tx_hash],
            "receipt": {},
        }

    def _execute(self, request: tuple, user_signature: bytes, operator_signature: bytes) -> None:
        user, target_contract, target_token, payment_token, amount, nonce, deadline = request
        if self.clock() > deadline:
            raise TransactionRevertedError("RelayRequest: expired")
        if nonce != self.nonce_of(user):
            raise TransactionRevertedError("RelayRequest: invalid nonce")

        domain = build_relay_domain(self.chain_id, self.relay_address)
        types = get_relay_request_eip712_types()
        message = {
            "user": user,
            "targetContract": target_contract,
            "targetToken": target_token,
            "paymentToken": payment_token,
            "amount": amount,
            "nonce": nonce,
            "deadline": deadline,
        }
        if recover_typed_data_signer(domain, types, message, user_signature).lower() != user.lower():
            raise TransactionRevertedError("RelayRequest: invalid user signature")

        digest = hash_typed_data(domain, types, message)
        operator = recover_digest_signer(digest, operator_signature, self.operator_mode)
        if self.operator_address and operator.lower() != self.operator_address.lower():
            raise TransactionRevertedError("RelayRequest: invalid operator signature")

        if self.allowance_of(user, self.relay_address) < amount:
            raise TransactionRevertedError("ERC20: insufficient allowance")

        self.nonces[user.lower()] = nonce + 1
        self.consumed.add((user.lower(), nonce))


@pytest.fixture
def user_private_key():
    """Mock EVM private key of the paying user"""
    return USER_KEY


@pytest.fixture
def operator_private_key():
    """Mock EVM private key of the relay operator"""
    return OPERATOR_KEY


@pytest.fixture
def operator_address():
    return Account.from_key(OPERATOR_KEY).address


@pytest.fixture
def relay_config():
    return RelayConfig.from_relay_addresses({137: RELAY_ADDRESS})


@pytest.fixture
def relay_domain():
    return build_relay_domain(137, RELAY_ADDRESS)


@pytest.fixture
def relay_types():
    return get_relay_request_eip712_types()
