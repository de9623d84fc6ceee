"""
Tests for constant-product swap pricing.
"""

import unittest

import pytest

from cycle_arbitrage.pricing import get_amount_out, quote
from cycle_arbitrage.types import PoolEdge

TOKEN_A = "0x00000000000000000000000000000000000000a1"
TOKEN_B = "0x00000000000000000000000000000000000000b2"
POOL = "0x0000000000000000000000000000000000000f01"


class TestGetAmountOut(unittest.TestCase):
    """Exact integer results of the V2 formula."""

    def test_exact_small_pool(self):
        expected = (10 * 997 * 1000) // (1000 * 1000 + 10 * 997)
        self.assertEqual(get_amount_out(10, 1000, 1000, 997), expected)
        self.assertEqual(get_amount_out(10, 1000, 1000, 997), 9)

    def test_default_fee_is_30_bps(self):
        self.assertEqual(get_amount_out(10, 1000, 1000), get_amount_out(10, 1000, 1000, 997))

    def test_matches_uniswap_library_for_large_reserves(self):
        amount_in = 10**18
        reserve_in = 5_000 * 10**18
        reserve_out = 10_000_000 * 10**6
        fee_in = amount_in * 997
        expected = fee_in * reserve_out // (reserve_in * 1000 + fee_in)
        self.assertEqual(get_amount_out(amount_in, reserve_in, reserve_out), expected)

    def test_reserves_beyond_64_bits(self):
        reserve = 2**112 - 1
        out = get_amount_out(10**30, reserve, reserve)
        self.assertGreater(out, 0)
        self.assertLess(out, 10**30)

    def test_zero_reserve_in_returns_zero(self):
        for amount in (1, 10, 10**18):
            self.assertEqual(get_amount_out(amount, 0, 1000), 0)

    def test_zero_reserve_out_returns_zero(self):
        for amount in (1, 10, 10**18):
            self.assertEqual(get_amount_out(amount, 1000, 0), 0)

    def test_zero_input_returns_zero(self):
        self.assertEqual(get_amount_out(0, 1000, 1000), 0)

    def test_output_never_reaches_reserve(self):
        self.assertLess(get_amount_out(10**40, 1000, 1000), 1000)

    def test_no_fee(self):
        # 1000 in with no fee against 1000/1000 returns exactly half
        self.assertEqual(get_amount_out(1000, 1000, 1000, 1000), 500)


def test_negative_reserve_rejected():
    with pytest.raises(ValueError):
        get_amount_out(10, -1, 1000)


@pytest.mark.parametrize("fee", [0, -5, 1001])
def test_invalid_fee_rejected(fee):
    with pytest.raises(ValueError):
        get_amount_out(10, 1000, 1000, fee)


class TestQuoteDirection(unittest.TestCase):
    """Reserve selection must follow the direction of travel through the pool."""

    def setUp(self):
        self.edge = PoolEdge(POOL, TOKEN_A, TOKEN_B, reserve_a=1_000, reserve_b=4_000)

    def test_selling_token_a(self):
        self.assertEqual(quote(self.edge, TOKEN_A, 100), get_amount_out(100, 1_000, 4_000))

    def test_selling_token_b(self):
        self.assertEqual(quote(self.edge, TOKEN_B, 100), get_amount_out(100, 4_000, 1_000))

    def test_directions_differ_for_unbalanced_pool(self):
        self.assertNotEqual(quote(self.edge, TOKEN_A, 100), quote(self.edge, TOKEN_B, 100))
        self.assertEqual(quote(self.edge, TOKEN_A, 100), 362)
        self.assertEqual(quote(self.edge, TOKEN_B, 100), 24)

    def test_uses_edge_fee(self):
        edge = PoolEdge(POOL, TOKEN_A, TOKEN_B, 1_000, 1_000, fee_numerator=1000)
        self.assertEqual(quote(edge, TOKEN_A, 1_000), 500)

    def test_foreign_token_rejected(self):
        with self.assertRaises(ValueError):
            quote(self.edge, "0x00000000000000000000000000000000000000c3", 100)
