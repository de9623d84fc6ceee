"""
Event driver: applies reserve updates and reacts to profitable cycles.

Each update runs to completion (graph mutation, search, threshold gate,
encoding, dispatch) before the next one is read, so the search always sees
the post-update state of the pool that triggered it. Only submission leaves
the loop, as a background task that owns its own copy of the payload.
"""

from typing import AsyncIterable, Dict, Optional, Protocol

from .encoder import RouteEncoder
from .evaluation import DEFAULT_BRIBE_PERCENT, evaluate
from .exceptions import EncodingError, UnknownPoolError
from .graph import LiquidityGraph
from .search import DEFAULT_MAX_DEPTH, find_arbitrage
from .types import BundlePayload, Opportunity, ReserveUpdate
from .utils import format_wei, get_logger

logger = get_logger(__name__)


class Submitter(Protocol):
    def dispatch(self, bundle: BundlePayload) -> object:
        ...


class ArbitrageEngine:
    """Single owner of the liquidity graph during the event loop."""

    def __init__(
        self,
        graph: LiquidityGraph,
        encoder: RouteEncoder,
        submitter: Submitter,
        base_token: str,
        input_amount: int,
        min_profit: int,
        bribe_percent: int = DEFAULT_BRIBE_PERCENT,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        self.graph = graph
        self.encoder = encoder
        self.submitter = submitter
        self.base_token = base_token
        self.input_amount = input_amount
        self.min_profit = min_profit
        self.bribe_percent = bribe_percent
        self.max_depth = max_depth

        self.updates_seen = 0
        self.updates_ignored = 0
        self.searches = 0
        self.opportunities = 0
        self.encoding_failures = 0
        self.dispatched = 0

    def handle_update(self, update: ReserveUpdate) -> Optional[Opportunity]:
        """
        Process one reserve update.

        Returns:
            The opportunity that was dispatched, or None
        """
        self.updates_seen += 1
        try:
            self.graph.update_reserves(update.pool_id, update.reserve_a, update.reserve_b)
        except UnknownPoolError:
            self.updates_ignored += 1
            return None
        except ValueError as e:
            self.updates_ignored += 1
            logger.debug(f"Rejected reserve update for {update.pool_id}: {e}")
            return None

        if not self.graph.has_token(self.base_token):
            return None

        self.searches += 1
        found = find_arbitrage(self.graph, self.base_token, self.input_amount, self.max_depth)
        if found is None:
            return None

        profit, route = found
        opportunity = evaluate(
            profit, route, self.input_amount, self.min_profit, self.bribe_percent
        )
        if opportunity is None:
            logger.debug(f"Cycle {route.describe()} below threshold: profit={profit}")
            return None

        self.opportunities += 1
        logger.info(
            f"💎 PROFIT: {format_wei(profit)} ETH | HOPS: {len(route)} | "
            f"bribe {format_wei(opportunity.bribe)} ETH | pools {', '.join(route.pool_ids)}"
        )

        try:
            bundle = self.encoder.encode(route, self.input_amount, opportunity.bribe)
        except EncodingError as e:
            self.encoding_failures += 1
            logger.debug(f"Dropping opportunity, encoding failed at hop {e.hop_index}: {e}")
            return None

        self.submitter.dispatch(bundle)
        self.dispatched += 1
        return opportunity

    async def run(self, feed: AsyncIterable[ReserveUpdate]) -> None:
        """Consume `feed` until it ends or raises; transport errors propagate."""
        async for update in feed:
            self.handle_update(update)

    def get_stats(self) -> Dict[str, int]:
        return {
            "updates_seen": self.updates_seen,
            "updates_ignored": self.updates_ignored,
            "searches": self.searches,
            "opportunities": self.opportunities,
            "encoding_failures": self.encoding_failures,
            "dispatched": self.dispatched,
        }
