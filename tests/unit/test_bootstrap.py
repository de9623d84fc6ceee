"""
Tests for V2 pool bootstrap against a fake AsyncWeb3.
"""

import pytest
from web3 import Web3
from web3.exceptions import Web3Exception

from cycle_arbitrage.adapters.v2 import bootstrap_graph, fetch_pool_async

A = Web3.to_checksum_address("0x00000000000000000000000000000000000000a1")
B = Web3.to_checksum_address("0x00000000000000000000000000000000000000b2")
GOOD_POOL = Web3.to_checksum_address("0x0000000000000000000000000000000000000f01")
BROKEN_POOL = Web3.to_checksum_address("0x0000000000000000000000000000000000000f02")


class FakeCall:
    def __init__(self, value):
        self.value = value

    async def call(self):
        if isinstance(self.value, Exception):
            raise self.value
        return self.value


class FakeFunctions:
    def __init__(self, state):
        self.state = state

    def token0(self):
        return FakeCall(self.state["token0"])

    def token1(self):
        return FakeCall(self.state["token1"])

    def getReserves(self):
        return FakeCall(self.state["reserves"])


class FakeContract:
    def __init__(self, state):
        self.functions = FakeFunctions(state)


class FakeEth:
    def __init__(self, pools):
        self.pools = pools

    def contract(self, address, abi):
        return FakeContract(self.pools[address])


class FakeW3:
    def __init__(self, pools):
        self.eth = FakeEth(pools)


POOLS = {
    GOOD_POOL: {"token0": A.lower(), "token1": B.lower(), "reserves": [1_000, 2_000, 1700000000]},
    BROKEN_POOL: {"token0": A, "token1": B, "reserves": ValueError("execution reverted")},
}


@pytest.mark.asyncio
async def test_fetch_pool_returns_checksummed_tokens_and_int_reserves():
    token0, token1, r0, r1 = await fetch_pool_async(FakeW3(POOLS), GOOD_POOL)
    assert (token0, token1) == (A, B)
    assert (r0, r1) == (1_000, 2_000)


@pytest.mark.asyncio
async def test_fetch_pool_wraps_rpc_errors():
    with pytest.raises(Web3Exception):
        await fetch_pool_async(FakeW3(POOLS), BROKEN_POOL)


@pytest.mark.asyncio
async def test_fetch_pool_rejects_bad_address():
    with pytest.raises(ValueError):
        await fetch_pool_async(FakeW3(POOLS), "0x1234")


@pytest.mark.asyncio
async def test_bootstrap_skips_unreadable_pools():
    graph = await bootstrap_graph(FakeW3(POOLS), [GOOD_POOL, BROKEN_POOL], fee_numerator=997)
    assert len(graph) == 1
    edge = graph.pool(GOOD_POOL)
    assert (edge.token_a, edge.token_b) == (A, B)
    assert (edge.reserve_a, edge.reserve_b) == (1_000, 2_000)
    assert not graph.has_pool(BROKEN_POOL)
