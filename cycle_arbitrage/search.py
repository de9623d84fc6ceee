"""
Bounded-depth cycle search from a base token back to itself.

The search is depth-first in neighbor insertion order and returns the
first profitable cycle it meets. It does not look for the best cycle.
"""

from typing import Optional, Tuple

from .graph import LiquidityGraph
from .pricing import quote
from .types import Hop, Route

DEFAULT_MAX_DEPTH = 4
MIN_ROUTE_HOPS = 2


def find_arbitrage(
    graph: LiquidityGraph,
    base_token: str,
    input_amount: int,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Optional[Tuple[int, Route]]:
    """
    Find a cycle starting and ending at `base_token` that returns more than it spends.

    Args:
        graph: Liquidity graph, read only during the search
        base_token: Token the cycle starts and ends with
        input_amount: Amount of base token put into the first hop
        max_depth: Maximum number of hops

    Returns:
        (profit, route) for the first profitable cycle found, or None
    """
    if input_amount <= 0 or not graph.has_token(base_token):
        return None
    return _search(graph, base_token, base_token, input_amount, input_amount, max_depth, (), ())


def _search(
    graph: LiquidityGraph,
    current: str,
    base_token: str,
    carried: int,
    input_amount: int,
    remaining_depth: int,
    path: Tuple[Hop, ...],
    amounts: Tuple[int, ...],
) -> Optional[Tuple[int, Route]]:
    if current == base_token and path:
        if len(path) >= MIN_ROUTE_HOPS and carried > input_amount:
            return carried - input_amount, Route(hops=path, amounts=amounts)
        return None

    if remaining_depth == 0:
        return None

    visited = {hop.token_in for hop in path}
    used_pools = {hop.pool_id for hop in path}

    for next_token, edge in graph.neighbors(current):
        if edge.pool_id in used_pools:
            continue
        if next_token in visited and next_token != base_token:
            continue

        amount_out = quote(edge, current, carried)
        if amount_out == 0:
            continue

        found = _search(
            graph,
            next_token,
            base_token,
            amount_out,
            input_amount,
            remaining_depth - 1,
            path + (Hop(current, next_token, edge.pool_id),),
            amounts + (amount_out,),
        )
        if found is not None:
            return found

    return None
