"""
Pool adapters for reading on-chain liquidity.
"""

from .v2 import bootstrap_graph, fetch_pool_async

__all__ = ["bootstrap_graph", "fetch_pool_async"]
