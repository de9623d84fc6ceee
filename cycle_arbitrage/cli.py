"""
Command line entry point for the cycle arbitrage engine.

Usage:
    cycle-arb --config config/arb.yaml

Secrets (PRIVATE_KEY, EXECUTOR_ADDRESS, WSS_URL) are read from the
environment or a .env file.
"""

import argparse
import asyncio
import sys
import time
from typing import List, Optional

from dotenv import load_dotenv
from web3 import AsyncWeb3, WebSocketProvider

import logging_config

from .adapters.v2 import bootstrap_graph
from .config import ArbConfig, load_config
from .encoder import RouteEncoder
from .engine import ArbitrageEngine
from .exceptions import ConfigurationError
from .feed import SyncLogFeed
from .submission import BundleSubmitter, RelayClient
from .utils import format_wei, get_logger, short_address
from .version import __version__

logger = get_logger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Watch V2 pools for cyclic arbitrage and submit bundles to a relay."
    )
    parser.add_argument("--config", help="YAML file with pools and tunables")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    parser.add_argument("--quiet", action="store_true", help="Warnings and errors only")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


async def run(config: ArbConfig) -> None:
    """Connect, bootstrap the graph and process Sync events until the feed fails."""
    async with AsyncWeb3(WebSocketProvider(config.wss_url)) as w3:
        logger.info(f"Initializing graph with {len(config.pools)} pools...")
        graph = await bootstrap_graph(w3, config.pools, config.fee_numerator)
        logger.info(f"Graph ready: {graph.summary()}")

        submitter = BundleSubmitter(
            w3,
            config.private_key,
            RelayClient(config.relay_url, config.relay_signing_key),
            gas_limit=config.gas_limit,
            simulate=config.simulate_bundles,
        )
        engine = ArbitrageEngine(
            graph=graph,
            encoder=RouteEncoder(graph, config.executor_address),
            submitter=submitter,
            base_token=config.base_token,
            input_amount=config.input_amount_wei,
            min_profit=config.min_profit_wei,
            bribe_percent=config.bribe_percent,
            max_depth=config.max_depth,
        )

        logger.info(
            f"Engine armed: base {short_address(config.base_token)}, "
            f"input {format_wei(config.input_amount_wei)} ETH, "
            f"min profit {format_wei(config.min_profit_wei)} ETH, depth {config.max_depth}"
        )
        try:
            await engine.run(SyncLogFeed(w3))
        finally:
            logger.info(f"Engine stopped: {engine.get_stats()}")
            await submitter.drain()


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    load_dotenv()

    if args.debug:
        logging_config.setup_debug()
    elif args.quiet:
        logging_config.setup_minimal()
    else:
        logging_config.setup()

    try:
        config = load_config(args.config)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        time.sleep(ArbConfig.model_fields["fatal_exit_delay"].default)
        return 1

    try:
        asyncio.run(run(config))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
        return 0
    except Exception as e:
        logger.error(f"FATAL: {e!r}", exc_info=True)
        time.sleep(config.fatal_exit_delay)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
