"""
Cycle Arbitrage Engine.

Tracks constant-product liquidity pools, searches for profitable token
cycles starting from a base token, and encodes them into a single executor
contract call submitted privately to a block builder relay.
"""

PROJECT_NAME = "cycle-arbitrage"

from cycle_arbitrage.version import __version__  # noqa: E402
from cycle_arbitrage.encoder import RouteEncoder  # noqa: E402
from cycle_arbitrage.engine import ArbitrageEngine  # noqa: E402
from cycle_arbitrage.evaluation import evaluate, passes_threshold  # noqa: E402
from cycle_arbitrage.graph import LiquidityGraph  # noqa: E402
from cycle_arbitrage.pricing import get_amount_out, quote  # noqa: E402
from cycle_arbitrage.search import find_arbitrage  # noqa: E402
from cycle_arbitrage.types import (  # noqa: E402
    BundlePayload,
    Hop,
    Opportunity,
    PoolEdge,
    ReserveUpdate,
    Route,
)

__all__ = [
    "PROJECT_NAME",
    "__version__",
    "ArbitrageEngine",
    "BundlePayload",
    "Hop",
    "LiquidityGraph",
    "Opportunity",
    "PoolEdge",
    "ReserveUpdate",
    "Route",
    "RouteEncoder",
    "evaluate",
    "find_arbitrage",
    "get_amount_out",
    "passes_threshold",
    "quote",
]
