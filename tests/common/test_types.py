"""
Tests for relay type definitions
"""

import pytest

from universal_relay.abi import RELAY_REQUEST_FIELDS, relay_request_type_string
from universal_relay.types import RelayRequest, SignatureBundle

USER = "0x" + "aa" * 20
TARGET = "0x" + "bb" * 20
USDC = "0x2791Bca1f2de4661ED88A30C99A7a9449Aa84174"


def make_request(**overrides):
    fields = {
        "user": USER,
        "targetContract": TARGET,
        "targetToken": TARGET,
        "paymentToken": USDC,
        "amount": 50_000000,
        "nonce": 3,
        "deadline": 1_700_003_600,
    }
    fields.update(overrides)
    return RelayRequest(**fields)


def test_eip712_message_follows_schema_order():
    message = make_request().to_eip712_message()
    assert list(message.keys()) == [f["name"] for f in RELAY_REQUEST_FIELDS]


def test_abi_tuple_follows_schema_order():
    request = make_request()
    assert request.to_abi_tuple() == tuple(request.to_eip712_message().values())


def test_type_string():
    assert relay_request_type_string() == (
        "RelayRequest(address user,address targetContract,address targetToken,"
        "address paymentToken,uint256 amount,uint256 nonce,uint256 deadline)"
    )


def test_addresses_checksummed():
    request = make_request(paymentToken=USDC.lower())
    assert request.payment_token == USDC


def test_snake_case_population():
    request = RelayRequest(
        user=USER,
        target_contract=TARGET,
        target_token=TARGET,
        payment_token=USDC,
        amount=1,
        nonce=0,
        deadline=1,
    )
    assert request.target_contract.lower() == TARGET


def test_rejects_invalid_address():
    with pytest.raises(ValueError):
        make_request(user="0x1234")


def test_rejects_uint256_overflow():
    with pytest.raises(ValueError):
        make_request(amount=2**256)


def test_is_expired_boundary():
    request = make_request(deadline=1000)
    assert request.is_expired(1001)
    assert not request.is_expired(1000)


def test_signature_bundle_bytes():
    bundle = SignatureBundle(userSignature="0x" + "ab" * 65, operatorSignature="cd" * 65)
    user_sig, operator_sig = bundle.as_bytes()
    assert user_sig == bytes.fromhex("ab" * 65)
    assert operator_sig == bytes.fromhex("cd" * 65)
