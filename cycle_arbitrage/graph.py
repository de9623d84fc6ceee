"""
In-memory liquidity graph: tokens are nodes, pools are edges.

Built on a NetworkX MultiGraph so parallel pools between the same two
tokens stay separate edges, keyed by pool address. Reserve updates are O(1)
through a pool-id index.
"""

from typing import Dict, Iterator, List, Tuple

import networkx as nx

from .exceptions import UnknownPoolError
from .types import DEFAULT_FEE_NUMERATOR, FEE_DENOMINATOR, PoolEdge
from .utils import get_logger

logger = get_logger(__name__)


def _check_reserves(pool_id: str, reserve_a: int, reserve_b: int) -> None:
    if reserve_a < 0 or reserve_b < 0:
        raise ValueError(
            f"Pool {pool_id} reserves must not be negative: {reserve_a}, {reserve_b}"
        )


class LiquidityGraph:
    """
    Mutable token/pool graph owned by the event loop.

    Tokens and pools are only ever added; reserves are overwritten in place.
    """

    def __init__(self):
        self._graph = nx.MultiGraph()
        self._pools: Dict[str, PoolEdge] = {}
        # Per-token pool ids in edge creation order; drives neighbor order.
        self._incident: Dict[str, List[str]] = {}

    def __len__(self) -> int:
        return len(self._pools)

    def __contains__(self, token: str) -> bool:
        return self.has_token(token)

    def add_pool(
        self,
        pool_id: str,
        token_a: str,
        token_b: str,
        reserve_a: int,
        reserve_b: int,
        fee: int = DEFAULT_FEE_NUMERATOR,
    ) -> PoolEdge:
        """
        Add a pool edge, creating its token nodes on first sight.

        Adding a pool id that is already tracked is a no-op.

        Raises:
            ValueError: On a self-pair, negative reserves or a fee numerator
                outside (0, 1000]

        Returns:
            The tracked edge for `pool_id`
        """
        existing = self._pools.get(pool_id)
        if existing is not None:
            logger.debug(f"Pool {pool_id} already tracked, ignoring duplicate add")
            return existing

        if token_a == token_b:
            raise ValueError(f"Pool {pool_id} must join two distinct tokens")
        if not 0 < fee <= FEE_DENOMINATOR:
            raise ValueError(f"Pool {pool_id} fee numerator must be in (0, 1000]: {fee}")
        _check_reserves(pool_id, reserve_a, reserve_b)

        edge = PoolEdge(
            pool_id=pool_id,
            token_a=token_a,
            token_b=token_b,
            reserve_a=reserve_a,
            reserve_b=reserve_b,
            fee_numerator=fee,
        )

        for token in (token_a, token_b):
            if token not in self._incident:
                self._graph.add_node(token)
                self._incident[token] = []
            self._incident[token].append(pool_id)

        self._graph.add_edge(token_a, token_b, key=pool_id, pool=edge)
        self._pools[pool_id] = edge
        return edge

    def update_reserves(self, pool_id: str, reserve_a: int, reserve_b: int) -> PoolEdge:
        """
        Replace the reserves of a tracked pool.

        Raises:
            UnknownPoolError: If `pool_id` is not tracked
            ValueError: On negative reserves
        """
        edge = self._pools.get(pool_id)
        if edge is None:
            raise UnknownPoolError(pool_id)
        _check_reserves(pool_id, reserve_a, reserve_b)
        edge.set_reserves(reserve_a, reserve_b)
        return edge

    def neighbors(self, token: str) -> Iterator[Tuple[str, PoolEdge]]:
        """Yield (other_token, edge) for every pool touching `token`, oldest first."""
        for pool_id in self._incident.get(token, ()):
            edge = self._pools[pool_id]
            yield edge.other(token), edge

    def edge_between(self, token_a: str, token_b: str) -> List[PoolEdge]:
        """Return every pool joining the two tokens, oldest first."""
        if not self._graph.has_edge(token_a, token_b):
            return []
        keyed = self._graph.get_edge_data(token_a, token_b)
        return [self._pools[pool_id] for pool_id in self._incident[token_a] if pool_id in keyed]

    def pool(self, pool_id: str) -> PoolEdge:
        edge = self._pools.get(pool_id)
        if edge is None:
            raise UnknownPoolError(pool_id)
        return edge

    def has_pool(self, pool_id: str) -> bool:
        return pool_id in self._pools

    def has_token(self, token: str) -> bool:
        return token in self._incident

    @property
    def tokens(self) -> List[str]:
        return list(self._incident)

    @property
    def pools(self) -> List[PoolEdge]:
        return list(self._pools.values())

    def summary(self) -> Dict[str, int]:
        """Counts used in startup logging."""
        return {
            "tokens": self._graph.number_of_nodes(),
            "pools": self._graph.number_of_edges(),
            "components": nx.number_connected_components(self._graph),
        }
