"""
Route encoder: turns an accepted cycle into executor contract calls.

The executor receives `execute(mode, token, amount, strategy)` where
`strategy` is the ABI encoding of (address[] targets, bytes[] payloads,
uint256 bribe). The calls it replays are:

    token.transfer(first_pool, amount)
    pool_1.swap(amount0Out, amount1Out, pool_2, "")
    ...
    pool_n.swap(amount0Out, amount1Out, executor, "")

Each pool pays its output straight into the next pool, and the last one
pays the executor, which keeps the profit and pays the bribe.
"""

from typing import List, Tuple

from eth_abi import encode

from .abi import (
    EXECUTE_SELECTOR,
    EXECUTE_TYPES,
    STRATEGY_TYPES,
    SWAP_SELECTOR,
    SWAP_TYPES,
    TRANSFER_SELECTOR,
    TRANSFER_TYPES,
)
from .exceptions import EncodingError
from .graph import LiquidityGraph
from .pricing import quote
from .types import BundlePayload, PoolEdge, Route

EXECUTE_MODE_FLASH = 0


def encode_transfer(recipient: str, amount: int) -> bytes:
    return TRANSFER_SELECTOR + encode(TRANSFER_TYPES, [recipient, amount])


def encode_swap(amount0_out: int, amount1_out: int, to: str, data: bytes = b"") -> bytes:
    return SWAP_SELECTOR + encode(SWAP_TYPES, [amount0_out, amount1_out, to, data])


def encode_strategy(targets: List[str], payloads: List[bytes], bribe: int) -> bytes:
    return encode(STRATEGY_TYPES, [targets, payloads, bribe])


def encode_execute_call(mode: int, token: str, amount: int, strategy: bytes) -> bytes:
    return EXECUTE_SELECTOR + encode(EXECUTE_TYPES, [mode, token, amount, strategy])


class RouteEncoder:
    """Encodes routes against the reserves currently cached in the graph."""

    def __init__(self, graph: LiquidityGraph, executor_address: str, mode: int = EXECUTE_MODE_FLASH):
        self.graph = graph
        self.executor_address = executor_address
        self.mode = mode

    def encode(self, route: Route, input_amount: int, bribe: int) -> BundlePayload:
        """
        Build the bundle payload for `route`.

        Output amounts are recomputed hop by hop from the cached reserves, so
        they may differ from the amounts seen during search if reserves moved.

        Raises:
            EncodingError: If a hop's pool cannot be found between its tokens
        """
        if len(route) == 0:
            raise EncodingError("Cannot encode an empty route")
        if input_amount <= 0:
            raise EncodingError(f"Input amount must be positive: {input_amount}")

        edges = [self._locate_edge(route, i) for i in range(len(route))]

        funding_call = (route.base_token, encode_transfer(edges[0].pool_id, input_amount))

        swap_calls: List[Tuple[str, bytes]] = []
        hop_amounts: List[int] = []
        amount_in = input_amount
        for i, (hop, edge) in enumerate(zip(route.hops, edges)):
            amount_out = quote(edge, hop.token_in, amount_in)
            if amount_out == 0:
                raise EncodingError(
                    f"Hop {i} through {edge.pool_id} yields nothing", hop_index=i
                )

            if hop.token_out == edge.token_a:
                amount0_out, amount1_out = amount_out, 0
            else:
                amount0_out, amount1_out = 0, amount_out

            is_last = i == len(route) - 1
            to = self.executor_address if is_last else edges[i + 1].pool_id

            swap_calls.append((edge.pool_id, encode_swap(amount0_out, amount1_out, to)))
            hop_amounts.append(amount_out)
            amount_in = amount_out

        targets = [funding_call[0]] + [t for t, _ in swap_calls]
        payloads = [funding_call[1]] + [p for _, p in swap_calls]
        strategy = encode_strategy(targets, payloads, bribe)
        calldata = encode_execute_call(self.mode, route.base_token, input_amount, strategy)

        return BundlePayload(
            funding_call=funding_call,
            swap_calls=tuple(swap_calls),
            bribe=bribe,
            input_token=route.base_token,
            input_amount=input_amount,
            strategy=strategy,
            calldata=calldata,
            executor_address=self.executor_address,
            hop_amounts=tuple(hop_amounts),
        )

    def _locate_edge(self, route: Route, index: int) -> PoolEdge:
        hop = route.hops[index]
        for edge in self.graph.edge_between(hop.token_in, hop.token_out):
            if edge.pool_id == hop.pool_id:
                return edge
        raise EncodingError(
            f"No pool {hop.pool_id} between {hop.token_in} and {hop.token_out}",
            hop_index=index,
            details={"pool_id": hop.pool_id},
        )
