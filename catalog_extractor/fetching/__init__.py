"""
Network retrieval through relay proxies.

Modules:
    relay_fetcher - RelayChainFetcher, ordered fallback over relays
"""

from .relay_fetcher import RelayChainFetcher

__all__ = ['RelayChainFetcher']
