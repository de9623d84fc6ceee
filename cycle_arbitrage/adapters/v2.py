"""
Uniswap V2 style pool bootstrap.

Reads token addresses and reserves from pair contracts and seeds the
liquidity graph with them.
"""

import asyncio
from typing import Iterable, Tuple

from web3 import AsyncWeb3, Web3
from web3.exceptions import Web3Exception

from ..abi import UNISWAP_V2_PAIR_ABI
from ..graph import LiquidityGraph
from ..types import DEFAULT_FEE_NUMERATOR
from ..utils import get_logger, short_address

logger = get_logger(__name__)


def _is_rate_limit(error_msg: str) -> bool:
    return (
        "429" in error_msg
        or "Too Many Requests" in error_msg
        or "-32005" in error_msg
        or "limit exceeded" in error_msg.lower()
    )


async def fetch_pool_async(
    w3: AsyncWeb3, pair_addr: str, max_retries: int = 3
) -> Tuple[str, str, int, int]:
    """
    Fetch token addresses and reserves from a Uniswap V2 style pair.

    Retries with exponential backoff on rate limit errors only.

    Args:
        w3: AsyncWeb3 instance connected to the chain
        pair_addr: Address of the pair contract
        max_retries: Maximum number of attempts

    Returns:
        Tuple of (token0, token1, reserve0, reserve1)

    Raises:
        Web3Exception: If RPC calls fail
        ValueError: If pair address is invalid
    """
    if not Web3.is_address(pair_addr):
        raise ValueError(f"Invalid pair address: {pair_addr}")

    pair = w3.eth.contract(address=Web3.to_checksum_address(pair_addr), abi=UNISWAP_V2_PAIR_ABI)
    last_error = None

    for attempt in range(max_retries):
        try:
            token0, token1, reserves = await asyncio.gather(
                pair.functions.token0().call(),
                pair.functions.token1().call(),
                pair.functions.getReserves().call(),
            )
            return (
                Web3.to_checksum_address(token0),
                Web3.to_checksum_address(token1),
                int(reserves[0]),
                int(reserves[1]),
            )
        except Exception as e:
            last_error = e
            if _is_rate_limit(str(e)) and attempt < max_retries - 1:
                await asyncio.sleep(2 ** (attempt + 1))
                continue
            raise Web3Exception(f"Failed to fetch pool {pair_addr}: {e}") from e

    raise Web3Exception(
        f"Failed to fetch pool {pair_addr} after {max_retries} retries: {last_error}"
    ) from last_error


async def bootstrap_graph(
    w3: AsyncWeb3,
    pool_addresses: Iterable[str],
    fee_numerator: int = DEFAULT_FEE_NUMERATOR,
    graph: LiquidityGraph = None,
) -> LiquidityGraph:
    """
    Load every configured pool into a liquidity graph.

    Pools that cannot be read are logged and left out.
    """
    graph = graph if graph is not None else LiquidityGraph()

    for pool_addr in pool_addresses:
        try:
            token0, token1, reserve0, reserve1 = await fetch_pool_async(w3, pool_addr)
        except (Web3Exception, ValueError) as e:
            logger.warning(f"Skipping pool {pool_addr}: {e}")
            continue

        graph.add_pool(
            Web3.to_checksum_address(pool_addr),
            token0,
            token1,
            reserve0,
            reserve1,
            fee_numerator,
        )
        logger.debug(
            f"Loaded pool {short_address(pool_addr)}: "
            f"{short_address(token0)}/{short_address(token1)} r0={reserve0} r1={reserve1}"
        )

    return graph
