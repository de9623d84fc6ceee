"""Version information for the cycle arbitrage engine."""

__version__ = "0.1.0"
