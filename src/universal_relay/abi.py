"""
Shared ABI and EIP-712 definitions for the relay and payment token contracts
"""

from typing import Any, List

MAX_UINT256 = 2**256 - 1

# EIP-712 domain of the relay contract, must match the deployed contract verbatim
RELAY_DOMAIN_NAME = "UniversalRelay"
RELAY_DOMAIN_VERSION = "1"

RELAY_REQUEST_PRIMARY_TYPE = "RelayRequest"

EIP712_DOMAIN_TYPE = [
    {"name": "name", "type": "string"},
    {"name": "version", "type": "string"},
    {"name": "chainId", "type": "uint256"},
    {"name": "verifyingContract", "type": "address"},
]

# Field order is part of the type hash
RELAY_REQUEST_FIELDS = [
    {"name": "user", "type": "address"},
    {"name": "targetContract", "type": "address"},
    {"name": "targetToken", "type": "address"},
    {"name": "paymentToken", "type": "address"},
    {"name": "amount", "type": "uint256"},
    {"name": "nonce", "type": "uint256"},
    {"name": "deadline", "type": "uint256"},
]

# ERC20 Token ABI
ERC20_ABI: List[dict[str, Any]] = [
    {
        "name": "allowance",
        "type": "function",
        "stateMutability": "view",
        "inputs": [
            {"name": "owner", "type": "address"},
            {"name": "spender", "type": "address"},
        ],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "name": "approve",
        "type": "function",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "spender", "type": "address"},
            {"name": "amount", "type": "uint256"},
        ],
        "outputs": [{"name": "", "type": "bool"}],
    },
]

# UniversalRelay contract ABI
RELAY_ABI: List[dict[str, Any]] = [
    {
        "name": "executeRelay",
        "type": "function",
        "stateMutability": "nonpayable",
        "inputs": [
            {
                "name": "request",
                "type": "tuple",
                "components": RELAY_REQUEST_FIELDS,
            },
            {"name": "userSignature", "type": "bytes"},
            {"name": "operatorSignature", "type": "bytes"},
        ],
        "outputs": [],
    },
    {
        "name": "nonces",
        "type": "function",
        "stateMutability": "view",
        "inputs": [{"name": "user", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
]


def get_relay_request_eip712_types() -> dict[str, Any]:
    """Get EIP-712 type definitions for RelayRequest

    Matches the contract typehash:
    "RelayRequest(address user,address targetContract,address targetToken,"
    "address paymentToken,uint256 amount,uint256 nonce,uint256 deadline)"

    EIP712Domain is not included, signers add it from the domain keys.
    """
    return {RELAY_REQUEST_PRIMARY_TYPE: [dict(field) for field in RELAY_REQUEST_FIELDS]}


def relay_request_type_string() -> str:
    """Canonical encodeType string of RelayRequest"""
    fields = ",".join(f"{f['type']} {f['name']}" for f in RELAY_REQUEST_FIELDS)
    return f"{RELAY_REQUEST_PRIMARY_TYPE}({fields})"
