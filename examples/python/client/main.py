import asyncio
import os
from pathlib import Path

from dotenv import load_dotenv

from universal_relay import (
    OperatorCredential,
    RelayConfig,
    RelayError,
    UniversalRelayClient,
)
from universal_relay.logging_config import setup_logging
from universal_relay.signers import EvmStructuredSigner
from universal_relay.transport import Web3Transport

load_dotenv(Path(__file__).parent.parent.parent.parent / ".env")

setup_logging(os.getenv("LOG_LEVEL", "DEBUG"))

USER_PRIVATE_KEY = os.getenv("USER_PRIVATE_KEY", "")
RPC_URL = os.getenv("RPC_URL", "https://polygon-rpc.com")
TARGET_TOKEN = os.getenv("TARGET_TOKEN", "")
# 1 USDC, 6 decimals
PAYMENT_AMOUNT = int(os.getenv("PAYMENT_AMOUNT", "1000000"))

if not USER_PRIVATE_KEY or not TARGET_TOKEN:
    print("\n❌ Error: USER_PRIVATE_KEY and TARGET_TOKEN must be set in .env file")
    print("\nAlso set UNIVERSAL_RELAY_ADDRESSES (or UNIVERSAL_RELAY_CONFIG)")
    print("and UNIVERSAL_RELAY_OPERATOR_KEY\n")
    exit(1)


async def main():
    config = RelayConfig.from_env()
    transport = Web3Transport(RPC_URL, private_key=USER_PRIVATE_KEY)
    signer = EvmStructuredSigner.from_private_key(USER_PRIVATE_KEY)
    operator = OperatorCredential.from_env()

    print("Initializing Universal Relay client...")
    print(f"  RPC: {RPC_URL}")
    print(f"  Chains: {config.supported_chain_ids()}")
    print(f"  User Address: {signer.get_address()}")

    client = UniversalRelayClient(config, transport, signer)

    print(f"\nPurchasing {TARGET_TOKEN} for {PAYMENT_AMOUNT} base units")
    try:
        signed = await client.authorize_purchase(operator, TARGET_TOKEN, PAYMENT_AMOUNT)
        print(f"\n📋 Relay Request:")
        print(f"  Chain: {signed.chain_id}")
        print(f"  Relay: {signed.relay_address}")
        print(f"  Nonce: {signed.request.nonce}")
        print(f"  Deadline: {signed.request.deadline}")
        print(f"  Digest: {signed.digest}")

        tx_hash = await client.submit_signed(signed)
        print(f"\n✅ Success!")
        print(f"Transaction: {tx_hash}")
    except RelayError as e:
        print(f"\n❌ Error at step {e.step}: {e}")
        if e.retryable:
            print("  The attempt can be retried")


if __name__ == "__main__":
    asyncio.run(main())
