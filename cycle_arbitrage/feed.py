"""
Reserve-update feed built on Uniswap V2 `Sync(uint112,uint112)` logs.

The log data is two 32-byte big-endian words: reserve0 then reserve1.
Only the first two words are read; trailing bytes are ignored.
"""

from typing import Any, AsyncIterator, Mapping, Tuple, Union

from hexbytes import HexBytes
from web3 import AsyncWeb3, Web3

from .abi import SYNC_TOPIC
from .exceptions import DataError, FeedDisconnectedError
from .types import ReserveUpdate
from .utils import get_logger

logger = get_logger(__name__)

WORD_SIZE = 32
SYNC_DATA_SIZE = 2 * WORD_SIZE


def decode_sync_data(data: Union[bytes, str]) -> Tuple[int, int]:
    """
    Decode the reserves carried by a Sync log.

    Raises:
        DataError: If the payload is shorter than two words
    """
    raw = bytes(HexBytes(data))
    if len(raw) < SYNC_DATA_SIZE:
        raise DataError(
            f"Sync payload has {len(raw)} bytes, expected at least {SYNC_DATA_SIZE}",
            source="sync_log",
        )
    reserve0 = int.from_bytes(raw[0:WORD_SIZE], "big")
    reserve1 = int.from_bytes(raw[WORD_SIZE:SYNC_DATA_SIZE], "big")
    return reserve0, reserve1


def parse_sync_log(log: Mapping[str, Any]) -> ReserveUpdate:
    """Convert a raw log entry (dict or web3 AttributeDict) into a ReserveUpdate."""
    try:
        address = log["address"]
        data = log["data"]
    except KeyError as e:
        raise DataError(f"Log entry missing field {e}", source="sync_log") from e

    reserve0, reserve1 = decode_sync_data(data)

    block_number = log.get("blockNumber")
    if isinstance(block_number, str):
        block_number = int(block_number, 16)

    return ReserveUpdate(
        pool_id=Web3.to_checksum_address(address),
        reserve_a=reserve0,
        reserve_b=reserve1,
        block_number=block_number,
    )


class SyncLogFeed:
    """
    Async iterator over Sync events from a websocket-connected AsyncWeb3.

    Every pool's Sync is delivered; filtering untracked pools is the
    engine's job. The iterator raises FeedDisconnectedError when the
    subscription stream ends.
    """

    def __init__(self, w3: AsyncWeb3):
        self.w3 = w3
        self.subscription_id = None
        self.malformed = 0

    async def subscribe(self) -> str:
        self.subscription_id = await self.w3.eth.subscribe(
            "logs", {"topics": [Web3.to_hex(SYNC_TOPIC)]}
        )
        logger.info(f"Subscribed to Sync logs (subscription {self.subscription_id})")
        return self.subscription_id

    async def __aiter__(self) -> AsyncIterator[ReserveUpdate]:
        if self.subscription_id is None:
            await self.subscribe()

        async for message in self.w3.socket.process_subscriptions():
            result = message.get("result")
            if not result:
                continue
            try:
                yield parse_sync_log(result)
            except DataError as e:
                self.malformed += 1
                logger.debug(f"Skipping malformed Sync log: {e}")

        raise FeedDisconnectedError("Sync log subscription closed")
