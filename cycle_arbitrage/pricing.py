"""
Constant-product swap pricing for Uniswap V2 style pools.

All amounts are integer native units. Python integers have arbitrary width,
so the intermediate products cannot overflow.
"""

from .types import DEFAULT_FEE_NUMERATOR, FEE_DENOMINATOR, PoolEdge


def get_amount_out(
    amount_in: int,
    reserve_in: int,
    reserve_out: int,
    fee_numerator: int = DEFAULT_FEE_NUMERATOR,
) -> int:
    """
    Calculate the output of a single swap.

    Formula (fee applied to the input, as in UniswapV2Library.getAmountOut):
        amountInWithFee = amountIn * feeNumerator
        amountOut = amountInWithFee * reserveOut / (reserveIn * 1000 + amountInWithFee)

    Args:
        amount_in: Input token amount
        reserve_in: Pool reserve of the input token
        reserve_out: Pool reserve of the output token
        fee_numerator: Share of the input kept, out of 1000 (997 = 0.3% fee)

    Returns:
        Output amount, floored. 0 means the hop is unusable (empty pool or
        nothing to swap).

    Raises:
        ValueError: On negative reserves or a fee numerator outside (0, 1000]
    """
    if reserve_in < 0 or reserve_out < 0:
        raise ValueError(
            f"Reserves must not be negative: in={reserve_in}, out={reserve_out}"
        )
    if not 0 < fee_numerator <= FEE_DENOMINATOR:
        raise ValueError(f"Fee numerator must be in (0, 1000]: {fee_numerator}")

    if amount_in <= 0 or reserve_in == 0 or reserve_out == 0:
        return 0

    amount_in_with_fee = amount_in * fee_numerator
    numerator = amount_in_with_fee * reserve_out
    denominator = reserve_in * FEE_DENOMINATOR + amount_in_with_fee
    return numerator // denominator


def quote(edge: PoolEdge, token_in: str, amount_in: int) -> int:
    """Price a swap of `amount_in` of `token_in` through `edge`."""
    reserve_in, reserve_out = edge.reserves_for(token_in)
    return get_amount_out(amount_in, reserve_in, reserve_out, edge.fee_numerator)
