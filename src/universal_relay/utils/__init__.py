"""
Utility functions for the universal relay protocol
"""

from universal_relay.utils.eip712 import (
    build_relay_domain,
    build_typed_data,
    domain_separator,
    eip712_domain_type_from_keys,
    encode_relay_typed_data,
    hash_signable,
    hash_typed_data,
    recover_digest_signer,
    recover_typed_data_signer,
)

__all__ = [
    "build_relay_domain",
    "build_typed_data",
    "domain_separator",
    "eip712_domain_type_from_keys",
    "encode_relay_typed_data",
    "hash_signable",
    "hash_typed_data",
    "recover_digest_signer",
    "recover_typed_data_signer",
]
