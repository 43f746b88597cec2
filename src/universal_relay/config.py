"""
Universal Relay chain configuration

Relay and payment token addresses are held in an injected RelayConfig,
resolved once at startup.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Literal, Mapping, Optional

from pydantic import BaseModel, Field, field_validator

from universal_relay.exceptions import ConfigurationError, UnsupportedChainError
from universal_relay.types import checksum_address

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 3600
DEFAULT_RECEIPT_TIMEOUT = 120

POLYGON_MAINNET = 137
ARBITRUM_ONE = 42161
BASE_MAINNET = 8453
OPTIMISM_MAINNET = 10
POLYGON_AMOY = 80002

CHAIN_NAMES: Dict[int, str] = {
    POLYGON_MAINNET: "Polygon Mainnet",
    ARBITRUM_ONE: "Arbitrum",
    BASE_MAINNET: "Base",
    OPTIMISM_MAINNET: "Optimism",
    POLYGON_AMOY: "Polygon Amoy",
}

# USDC deployments used as the default payment token
USDC_ADDRESSES: Dict[int, str] = {
    POLYGON_MAINNET: "0x2791Bca1f2de4661ED88A30C99A7a9449Aa84174",
    ARBITRUM_ONE: "0xaf88d065e77c8cC2239327C5EDb3A432268e5831",
    BASE_MAINNET: "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913",
    OPTIMISM_MAINNET: "0x7F5c764cBc14f9669B88837ca1490cCa17c31607",
    POLYGON_AMOY: "0x41E94Eb019C0762f9Bfcf9Fb1E58725BfB0e7582",
}

ENV_CONFIG_PATH = "UNIVERSAL_RELAY_CONFIG"
ENV_RELAY_ADDRESSES = "UNIVERSAL_RELAY_ADDRESSES"
ENV_TTL_SECONDS = "UNIVERSAL_RELAY_TTL_SECONDS"

OperatorSignatureMode = Literal["eip191", "raw"]


class ChainProfile(BaseModel):
    """Relay deployment on one chain"""

    chain_id: int = Field(alias="chainId", gt=0)
    relay_address: str = Field(alias="relayAddress")
    payment_token_address: str = Field(alias="paymentTokenAddress")
    name: Optional[str] = None

    class Config:
        populate_by_name = True
        frozen = True

    @field_validator("relay_address", "payment_token_address")
    @classmethod
    def _checksum(cls, value: str) -> str:
        return checksum_address(value)


class RelayConfig(BaseModel):
    """Process-wide relay configuration"""

    chains: Dict[int, ChainProfile] = Field(default_factory=dict)
    ttl_seconds: int = Field(DEFAULT_TTL_SECONDS, alias="ttlSeconds", gt=0)
    receipt_timeout: int = Field(DEFAULT_RECEIPT_TIMEOUT, alias="receiptTimeout", gt=0)
    operator_signature_mode: OperatorSignatureMode = Field("eip191", alias="operatorSignatureMode")

    class Config:
        populate_by_name = True
        frozen = True

    @field_validator("chains")
    @classmethod
    def _keys_match_profiles(cls, chains: Dict[int, ChainProfile]) -> Dict[int, ChainProfile]:
        for chain_id, profile in chains.items():
            if chain_id != profile.chain_id:
                raise ValueError(
                    f"Chain key {chain_id} does not match profile chainId {profile.chain_id}"
                )
        return chains

    def get_profile(self, chain_id: int) -> ChainProfile:
        """Get the ChainProfile for chain_id

        Raises:
            UnsupportedChainError: If no relay is registered for chain_id
        """
        profile = self.chains.get(chain_id)
        if profile is None:
            raise UnsupportedChainError(chain_id)
        return profile

    def supported_chain_ids(self) -> list[int]:
        return sorted(self.chains)

    @classmethod
    def from_relay_addresses(
        cls,
        relay_addresses: Mapping[int, str],
        payment_tokens: Mapping[int, str] | None = None,
        **options: Any,
    ) -> "RelayConfig":
        """Build config from a chain -> relay address map

        Args:
            relay_addresses: Relay contract address per chain ID
            payment_tokens: Payment token per chain ID, defaults to USDC_ADDRESSES
            **options: Remaining RelayConfig fields (ttl_seconds, ...)

        Raises:
            ConfigurationError: If a chain has no known payment token or an address is invalid
        """
        tokens = dict(USDC_ADDRESSES)
        if payment_tokens:
            tokens.update(payment_tokens)

        chains: Dict[int, ChainProfile] = {}
        for raw_chain_id, relay_address in relay_addresses.items():
            chain_id = int(raw_chain_id)
            token = tokens.get(chain_id)
            if token is None:
                raise ConfigurationError(f"No payment token configured for chain {chain_id}")
            try:
                chains[chain_id] = ChainProfile(
                    chainId=chain_id,
                    relayAddress=relay_address,
                    paymentTokenAddress=token,
                    name=CHAIN_NAMES.get(chain_id),
                )
            except ValueError as e:
                raise ConfigurationError(f"Invalid profile for chain {chain_id}: {e}") from e

        return cls(chains=chains, **options)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RelayConfig":
        """Build config from a parsed JSON document

        Accepts either ``{"chains": {...}}`` with full profiles or
        ``{"relayAddresses": {...}, "paymentTokens": {...}}``.
        """
        options = {k: v for k, v in data.items() if k not in ("relayAddresses", "paymentTokens")}
        try:
            if "relayAddresses" in data:
                relay_addresses = {int(k): v for k, v in data["relayAddresses"].items()}
                payment_tokens = {int(k): v for k, v in (data.get("paymentTokens") or {}).items()}
                return cls.from_relay_addresses(relay_addresses, payment_tokens, **options)

            chains = {
                int(k): ChainProfile(**{"chainId": int(k), **v})
                for k, v in (data.get("chains") or {}).items()
            }
            options.pop("chains", None)
            return cls(chains=chains, **options)
        except ValueError as e:
            raise ConfigurationError(f"Invalid relay configuration: {e}") from e

    @classmethod
    def from_json_file(cls, path: str | Path) -> "RelayConfig":
        try:
            data = json.loads(Path(path).read_text())
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot read relay configuration {path}: {e}") from e
        config = cls.from_dict(data)
        logger.info(
            "Loaded relay configuration",
            extra={"path": str(path), "chains": config.supported_chain_ids()},
        )
        return config

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "RelayConfig":
        """Build config from environment variables

        UNIVERSAL_RELAY_CONFIG points to a JSON file; otherwise
        UNIVERSAL_RELAY_ADDRESSES holds a JSON ``{"chainId": "relayAddress"}`` map
        and UNIVERSAL_RELAY_TTL_SECONDS optionally overrides the TTL.
        """
        env = os.environ if environ is None else environ

        path = env.get(ENV_CONFIG_PATH)
        if path:
            return cls.from_json_file(path)

        raw = env.get(ENV_RELAY_ADDRESSES)
        if not raw:
            raise ConfigurationError(f"Neither {ENV_CONFIG_PATH} nor {ENV_RELAY_ADDRESSES} is set")
        try:
            relay_addresses = {int(k): v for k, v in json.loads(raw).items()}
        except (json.JSONDecodeError, AttributeError, ValueError) as e:
            raise ConfigurationError(f"Invalid {ENV_RELAY_ADDRESSES}: {e}") from e

        options: dict[str, Any] = {}
        ttl = env.get(ENV_TTL_SECONDS)
        if ttl:
            try:
                options["ttl_seconds"] = int(ttl)
            except ValueError as e:
                raise ConfigurationError(f"Invalid {ENV_TTL_SECONDS}: {ttl!r}") from e

        try:
            return cls.from_relay_addresses(relay_addresses, **options)
        except ValueError as e:
            raise ConfigurationError(f"Invalid relay configuration: {e}") from e
