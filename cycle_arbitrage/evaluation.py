"""
Profit threshold gate and bribe sizing for discovered cycles.
"""

from typing import Optional

from .types import Opportunity, Route

DEFAULT_BRIBE_PERCENT = 90


def passes_threshold(profit: int, minimum_profit: int) -> bool:
    """A cycle is worth submitting only when it strictly beats the threshold."""
    return profit > minimum_profit


def bribe_for(profit: int, bribe_percent: int = DEFAULT_BRIBE_PERCENT) -> int:
    """Share of the profit handed to the block builder, floored."""
    if not 0 <= bribe_percent <= 100:
        raise ValueError(f"Bribe percent must be in [0, 100]: {bribe_percent}")
    return profit * bribe_percent // 100


def evaluate(
    profit: int,
    route: Route,
    input_amount: int,
    minimum_profit: int,
    bribe_percent: int = DEFAULT_BRIBE_PERCENT,
) -> Optional[Opportunity]:
    """Turn a search result into an Opportunity, or None when it is too small."""
    if not passes_threshold(profit, minimum_profit):
        return None
    return Opportunity(
        profit=profit,
        route=route,
        input_amount=input_amount,
        bribe=bribe_for(profit, bribe_percent),
    )
