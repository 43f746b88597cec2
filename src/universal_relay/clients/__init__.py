"""
Universal relay clients
"""

from universal_relay.clients.relay_client import UniversalRelayClient

__all__ = ["UniversalRelayClient"]
