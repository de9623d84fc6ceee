"""
Core data types for cycle arbitrage detection and encoding.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

DEFAULT_FEE_NUMERATOR = 997
FEE_DENOMINATOR = 1000


@dataclass
class PoolEdge:
    """
    A constant-product pool modeled as an edge of the liquidity graph.

    Attributes:
        pool_id: On-chain address of the pair contract
        token_a: The pool's token0
        token_b: The pool's token1
        reserve_a: Reserve of token_a (native units)
        reserve_b: Reserve of token_b (native units)
        fee_numerator: Share of the input kept for the swap, out of 1000
    """

    pool_id: str
    token_a: str
    token_b: str
    reserve_a: int
    reserve_b: int
    fee_numerator: int = DEFAULT_FEE_NUMERATOR

    def set_reserves(self, reserve_a: int, reserve_b: int) -> None:
        """Replace both reserves at once."""
        self.reserve_a = reserve_a
        self.reserve_b = reserve_b

    def other(self, token: str) -> str:
        """Return the token on the opposite side of `token`."""
        if token == self.token_a:
            return self.token_b
        if token == self.token_b:
            return self.token_a
        raise ValueError(f"Token {token} is not part of pool {self.pool_id}")

    def reserves_for(self, token_in: str) -> Tuple[int, int]:
        """Return (reserve_in, reserve_out) for a swap that sells `token_in`."""
        if token_in == self.token_a:
            return self.reserve_a, self.reserve_b
        if token_in == self.token_b:
            return self.reserve_b, self.reserve_a
        raise ValueError(f"Token {token_in} is not part of pool {self.pool_id}")


@dataclass(frozen=True)
class Hop:
    """One swap of a route, pinned to the pool it traverses."""

    token_in: str
    token_out: str
    pool_id: str


@dataclass(frozen=True)
class Route:
    """
    A cycle of hops that starts and ends at the same base token.

    Attributes:
        hops: Ordered hops
        amounts: Output amount of each hop as computed during search
    """

    hops: Tuple[Hop, ...]
    amounts: Tuple[int, ...] = ()

    def __len__(self) -> int:
        return len(self.hops)

    @property
    def base_token(self) -> str:
        return self.hops[0].token_in

    @property
    def tokens(self) -> Tuple[str, ...]:
        """Tokens visited in order, base token at both ends."""
        return tuple(h.token_in for h in self.hops) + (self.hops[-1].token_out,)

    @property
    def pool_ids(self) -> Tuple[str, ...]:
        return tuple(h.pool_id for h in self.hops)

    def pairs(self) -> Tuple[Tuple[str, str], ...]:
        """(token_in, token_out) for every hop."""
        return tuple((h.token_in, h.token_out) for h in self.hops)

    def describe(self) -> str:
        return " -> ".join(self.tokens)


@dataclass(frozen=True)
class ReserveUpdate:
    """A decoded Sync event: new reserves for one pool."""

    pool_id: str
    reserve_a: int
    reserve_b: int
    block_number: Optional[int] = None


@dataclass(frozen=True)
class Opportunity:
    """A cycle that cleared the profit threshold."""

    profit: int
    route: Route
    input_amount: int
    bribe: int


@dataclass(frozen=True)
class BundlePayload:
    """
    Everything the executor call needs, owned by whoever submits it.

    Attributes:
        funding_call: (target, payload) moving the input token into the first pool
        swap_calls: One (target, payload) per hop, in route order
        bribe: Amount paid to the block builder
        input_token: Token borrowed/spent by the executor
        input_amount: Amount of input_token
        strategy: ABI encoded (targets, payloads, bribe)
        calldata: Complete executor `execute(...)` call data
        executor_address: Contract that receives the call
        hop_amounts: Per-hop output amounts embedded in the swap calls
    """

    funding_call: Tuple[str, bytes]
    swap_calls: Tuple[Tuple[str, bytes], ...]
    bribe: int
    input_token: str
    input_amount: int
    strategy: bytes
    calldata: bytes
    executor_address: str
    hop_amounts: Tuple[int, ...] = field(default_factory=tuple)

    @property
    def targets(self) -> Tuple[str, ...]:
        return (self.funding_call[0],) + tuple(t for t, _ in self.swap_calls)

    @property
    def payloads(self) -> Tuple[bytes, ...]:
        return (self.funding_call[1],) + tuple(p for _, p in self.swap_calls)
