"""Explorer module - credentials for block explorer and RPC providers.

TokenLens reads balances, transfers and holders from Basescan/Routescan-style
explorer APIs. This module decides which credentials are used for a given
token.
"""

from .api_keys import describe_key_sources

__all__ = [
    "describe_key_sources",
]
