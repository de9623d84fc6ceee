"""
Logging configuration for the arbitrage engine process.

Usage:
    import logging_config
    logging_config.setup()
"""

import logging
import sys


def setup(level=logging.INFO):
    """
    Configure root logging for console output.

    - Short timestamps (HH:MM:SS)
    - Quiets websocket/HTTP client chatter from web3 and aiohttp
    """
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(
        logging.Formatter(fmt="%(asctime)s | %(levelname)-7s | %(message)s", datefmt="%H:%M:%S")
    )
    root.addHandler(console)

    noisy_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in ("web3", "websockets", "aiohttp", "urllib3"):
        logging.getLogger(name).setLevel(noisy_level)

    # Engine loggers propagate to the root handler configured above.
    for name in list(logging.root.manager.loggerDict):
        if name.startswith("cycle_arbitrage"):
            package_logger = logging.getLogger(name)
            package_logger.handlers.clear()
            package_logger.propagate = True
            package_logger.setLevel(logging.NOTSET)
    logging.getLogger("cycle_arbitrage").setLevel(level)


def setup_minimal():
    """Only warnings and errors."""
    setup(level=logging.WARNING)


def setup_debug():
    """Verbose logging, including per-event skips and client traffic."""
    setup(level=logging.DEBUG)
