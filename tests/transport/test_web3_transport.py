"""
Tests for Web3Transport error mapping and receipt handling
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from web3.exceptions import ContractLogicError, TimeExhausted

from universal_relay.abi import ERC20_ABI
from universal_relay.exceptions import (
    ConfigurationError,
    SubmissionError,
    TransactionRevertedError,
    TransactionTimeoutError,
    TransportError,
)
from universal_relay.transport import Web3Transport
from universal_relay.transport.web3_transport import revert_reason

ACCOUNT = "0xfcad0b19bb29d4674531d6f115237e16afce377c"
TOKEN = "0x2791Bca1f2de4661ED88A30C99A7a9449Aa84174"
SPENDER = "0x" + "cc" * 20


async def _value(value):
    return value


@pytest.fixture
def mock_w3():
    w3 = MagicMock()
    contract = MagicMock()
    w3.eth.contract.return_value = contract
    return w3


def _function(w3, name):
    return getattr(w3.eth.contract.return_value.functions, name).return_value


def test_requires_account_or_key(mock_w3):
    with pytest.raises(ConfigurationError):
        Web3Transport(w3=mock_w3)


def test_requires_rpc_or_w3():
    with pytest.raises(ConfigurationError):
        Web3Transport(account=ACCOUNT)


def test_private_key_sets_account(mock_w3, user_private_key):
    transport = Web3Transport(w3=mock_w3, private_key=user_private_key)
    assert transport.account.lower() == ACCOUNT


def test_revert_reason_strips_prefix():
    error = ContractLogicError("execution reverted: RelayRequest: invalid nonce")
    assert revert_reason(error) == "RelayRequest: invalid nonce"


@pytest.mark.asyncio
async def test_get_chain_id(mock_w3):
    mock_w3.eth.chain_id = _value(137)
    assert await Web3Transport(w3=mock_w3, account=ACCOUNT).get_chain_id() == 137


@pytest.mark.asyncio
async def test_call(mock_w3):
    _function(mock_w3, "allowance").call = AsyncMock(return_value=5)
    transport = Web3Transport(w3=mock_w3, account=ACCOUNT)

    result = await transport.call(TOKEN, ERC20_ABI, "allowance", [ACCOUNT, SPENDER])

    assert result == 5
    mock_w3.eth.contract.return_value.functions.allowance.assert_called_once_with(ACCOUNT, SPENDER)


@pytest.mark.asyncio
async def test_call_revert(mock_w3):
    _function(mock_w3, "allowance").call = AsyncMock(
        side_effect=ContractLogicError("execution reverted: paused")
    )
    transport = Web3Transport(w3=mock_w3, account=ACCOUNT)

    with pytest.raises(TransactionRevertedError) as exc_info:
        await transport.call(TOKEN, ERC20_ABI, "allowance", [ACCOUNT, SPENDER])
    assert exc_info.value.reason == "paused"


@pytest.mark.asyncio
async def test_call_rpc_failure(mock_w3):
    _function(mock_w3, "allowance").call = AsyncMock(side_effect=ConnectionError("refused"))
    transport = Web3Transport(w3=mock_w3, account=ACCOUNT)

    with pytest.raises(TransportError):
        await transport.call(TOKEN, ERC20_ABI, "allowance", [ACCOUNT, SPENDER])


@pytest.mark.asyncio
async def test_send_through_node_account(mock_w3):
    _function(mock_w3, "approve").transact = AsyncMock(return_value=bytes.fromhex("ab" * 32))
    transport = Web3Transport(w3=mock_w3, account=ACCOUNT)

    tx_hash = await transport.send(TOKEN, ERC20_ABI, "approve", [SPENDER, 1])

    assert tx_hash == "0x" + "ab" * 32
    _function(mock_w3, "approve").transact.assert_awaited_once_with({"from": ACCOUNT})


@pytest.mark.asyncio
async def test_send_signed_locally(mock_w3, user_private_key):
    _function(mock_w3, "approve").build_transaction = AsyncMock(return_value={"to": TOKEN})
    mock_w3.eth.get_transaction_count = AsyncMock(return_value=7)
    mock_w3.eth.chain_id = _value(137)
    signed = MagicMock()
    signed.raw_transaction = b"raw"
    mock_w3.eth.account.sign_transaction.return_value = signed
    mock_w3.eth.send_raw_transaction = AsyncMock(return_value=bytes.fromhex("cd" * 32))
    transport = Web3Transport(w3=mock_w3, private_key=user_private_key)

    tx_hash = await transport.send(TOKEN, ERC20_ABI, "approve", [SPENDER, 1])

    assert tx_hash == "0x" + "cd" * 32
    tx_params = _function(mock_w3, "approve").build_transaction.call_args.args[0]
    assert tx_params["nonce"] == 7
    assert tx_params["chainId"] == 137
    mock_w3.eth.send_raw_transaction.assert_awaited_once_with(b"raw")


@pytest.mark.asyncio
async def test_send_revert_at_estimation(mock_w3):
    _function(mock_w3, "executeRelay").transact = AsyncMock(
        side_effect=ContractLogicError("execution reverted: RelayRequest: invalid nonce")
    )
    transport = Web3Transport(w3=mock_w3, account=ACCOUNT)

    with pytest.raises(TransactionRevertedError) as exc_info:
        await transport.send(SPENDER, [], "executeRelay", [(), b"", b""])
    assert exc_info.value.reason == "RelayRequest: invalid nonce"


@pytest.mark.asyncio
async def test_send_failure(mock_w3):
    _function(mock_w3, "approve").transact = AsyncMock(side_effect=ConnectionError("refused"))
    transport = Web3Transport(w3=mock_w3, account=ACCOUNT)

    with pytest.raises(SubmissionError):
        await transport.send(TOKEN, ERC20_ABI, "approve", [SPENDER, 1])


@pytest.mark.asyncio
@pytest.mark.parametrize("status, expected", [(1, "confirmed"), (0, "failed")])
async def test_wait_for_receipt(mock_w3, status, expected):
    mock_w3.eth.wait_for_transaction_receipt = AsyncMock(
        return_value={"blockNumber": 42, "status": status}
    )
    transport = Web3Transport(w3=mock_w3, account=ACCOUNT)

    receipt = await transport.wait_for_receipt("0x" + "ab" * 32, timeout=5)

    assert receipt["status"] == expected
    assert receipt["blockNumber"] == "42"
    mock_w3.eth.wait_for_transaction_receipt.assert_awaited_once_with("0x" + "ab" * 32, timeout=5)


@pytest.mark.asyncio
async def test_wait_for_receipt_timeout(mock_w3):
    mock_w3.eth.wait_for_transaction_receipt = AsyncMock(side_effect=TimeExhausted("slow"))
    transport = Web3Transport(w3=mock_w3, account=ACCOUNT)

    with pytest.raises(TransactionTimeoutError):
        await transport.wait_for_receipt("0x" + "ab" * 32, timeout=5)
