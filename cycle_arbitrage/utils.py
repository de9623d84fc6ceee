"""
Common helpers for the cycle arbitrage engine: loggers and amount formatting.
"""

import logging
from decimal import Decimal
from typing import Optional, Union

WEI_PER_ETHER = 10**18


def get_logger(
    name: str,
    level: Union[str, int] = logging.INFO,
    minimal: bool = False,
) -> logging.Logger:
    """
    Get a module logger with the engine's structured format.

    A handler is attached only when neither the logger nor the root logger
    has one, so `logging_config.setup()` stays in charge once it has run.

    Args:
        name: Logger name (typically __name__)
        level: Logging level applied when the logger has none
        minimal: If True, use simplified format (time + message only)

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)

    if logger.level == logging.NOTSET:
        logger.setLevel(level)

    if not logger.handlers and not logging.getLogger().handlers:
        handler = logging.StreamHandler()
        if minimal:
            format_str = "%(asctime)s | %(message)s"
        else:
            format_str = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
        handler.setFormatter(logging.Formatter(format_str, datefmt="%H:%M:%S"))
        logger.addHandler(handler)
        logger.propagate = False

    return logger


def to_wei(amount: Union[str, int, float, Decimal], decimals: int = 18) -> int:
    """Convert a human amount of a token into its integer base units."""
    return int(Decimal(str(amount)) * (Decimal(10) ** decimals))


def format_wei(amount: int, decimals: int = 18, places: int = 6) -> str:
    """Format integer base units as a decimal string, e.g. 3 * 10**17 -> '0.300000'."""
    value = Decimal(amount) / (Decimal(10) ** decimals)
    return f"{value:.{places}f}"


def short_address(address: Optional[str]) -> str:
    """Abbreviate an address for log lines: 0xC02a...6Cc2."""
    if not address:
        return "-"
    if len(address) <= 12:
        return address
    return f"{address[:6]}...{address[-4:]}"
