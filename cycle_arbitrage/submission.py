"""
Bundle signing and private relay submission.

Submissions are fire-and-forget: `BundleSubmitter.dispatch` schedules an
asyncio task that signs the executor call and posts it to the relay as a
single-transaction bundle for the next block. The event loop never waits
for it and its outcome is dropped apart from counters and debug logs.
"""

import asyncio
import json
from typing import Any, Dict, List, Optional, Set

import aiohttp
from eth_account import Account
from eth_account.messages import encode_defunct
from eth_account.signers.local import LocalAccount
from web3 import AsyncWeb3, Web3

from .exceptions import SubmissionError
from .types import BundlePayload
from .utils import format_wei, get_logger

logger = get_logger(__name__)

DEFAULT_GAS_LIMIT = 500_000
RELAY_TIMEOUT_SECONDS = 10


def flashbots_headers(body: str, signer: LocalAccount) -> Dict[str, str]:
    """
    Authentication headers for a relay request.

    The relay expects `<address>:<signature>` where the signature is an
    EIP-191 personal signature over the hex keccak256 of the request body.
    """
    body_hash = Web3.to_hex(Web3.keccak(text=body))
    signed = signer.sign_message(encode_defunct(text=body_hash))
    return {
        "Content-Type": "application/json",
        "X-Flashbots-Signature": f"{signer.address}:{Web3.to_hex(signed.signature)}",
    }


def build_bundle_params(raw_txs: List[str], target_block: int) -> Dict[str, Any]:
    """Parameters for `eth_sendBundle`."""
    return {"txs": list(raw_txs), "blockNumber": hex(target_block)}


def build_call_bundle_params(
    raw_txs: List[str], target_block: int, state_block: int, timestamp: int = 0
) -> Dict[str, Any]:
    """Parameters for `eth_callBundle`, simulated on top of `state_block`."""
    return {
        "txs": list(raw_txs),
        "blockNumber": hex(target_block),
        "stateBlockNumber": hex(state_block),
        "timestamp": timestamp,
    }


class RelayClient:
    """Minimal JSON-RPC client for a Flashbots-compatible bundle relay."""

    def __init__(self, relay_url: str, signing_key: str):
        self.relay_url = relay_url
        self.signer: LocalAccount = Account.from_key(signing_key)
        self._request_id = 0

    async def request(self, method: str, params: List[Any]) -> Any:
        self._request_id += 1
        body = json.dumps(
            {"jsonrpc": "2.0", "id": self._request_id, "method": method, "params": params}
        )
        headers = flashbots_headers(body, self.signer)
        timeout = aiohttp.ClientTimeout(total=RELAY_TIMEOUT_SECONDS)

        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.post(self.relay_url, data=body, headers=headers) as response:
                if response.status >= 400:
                    text = await response.text()
                    raise SubmissionError(
                        f"Relay returned HTTP {response.status}: {text[:200]}",
                        endpoint=self.relay_url,
                        status_code=response.status,
                    )
                payload = await response.json(content_type=None)

        if "error" in payload:
            raise SubmissionError(
                f"Relay rejected {method}: {payload['error']}",
                endpoint=self.relay_url,
                details={"error": payload["error"]},
            )
        return payload.get("result")

    async def send_bundle(self, params: Dict[str, Any]) -> Any:
        return await self.request("eth_sendBundle", [params])

    async def call_bundle(self, params: Dict[str, Any]) -> Any:
        return await self.request("eth_callBundle", [params])


class BundleSubmitter:
    """Signs executor calls and hands them to the relay in background tasks."""

    def __init__(
        self,
        w3: AsyncWeb3,
        private_key: str,
        relay: RelayClient,
        gas_limit: int = DEFAULT_GAS_LIMIT,
        simulate: bool = False,
    ):
        self.w3 = w3
        self.account: LocalAccount = Account.from_key(private_key)
        self.relay = relay
        self.gas_limit = gas_limit
        self.simulate = simulate

        # Strong references keep running tasks from being garbage collected.
        self._tasks: Set[asyncio.Task] = set()

        self.submitted = 0
        self.failed = 0

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def dispatch(self, bundle: BundlePayload) -> asyncio.Task:
        """Schedule submission of `bundle` without waiting for it."""
        task = asyncio.get_running_loop().create_task(self.submit(bundle))
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            self.failed += 1
            logger.debug(f"Bundle submission dropped: {error}")
        else:
            self.submitted += 1

    async def drain(self) -> None:
        """Wait for in-flight submissions, e.g. on shutdown."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def sign(self, bundle: BundlePayload) -> str:
        """Fill and sign the executor transaction, returning the raw tx hex."""
        nonce, chain_id, gas_price = await asyncio.gather(
            self.w3.eth.get_transaction_count(self.account.address, "pending"),
            self.w3.eth.chain_id,
            self.w3.eth.gas_price,
        )
        tx = {
            "from": self.account.address,
            "to": bundle.executor_address,
            "data": bundle.calldata,
            "value": 0,
            "gas": self.gas_limit,
            "gasPrice": gas_price,
            "nonce": nonce,
            "chainId": chain_id,
        }
        signed = self.account.sign_transaction(tx)
        return Web3.to_hex(signed.raw_transaction)

    async def submit(self, bundle: BundlePayload) -> Optional[Any]:
        """Sign `bundle` and send it to the relay for inclusion in the next block."""
        raw_tx = await self.sign(bundle)
        block = await self.w3.eth.block_number

        if self.simulate:
            simulation = await self.relay.call_bundle(
                build_call_bundle_params([raw_tx], block + 1, block)
            )
            logger.debug(f"Bundle simulation result: {simulation}")

        result = await self.relay.send_bundle(build_bundle_params([raw_tx], block + 1))
        logger.info(
            f"Bundle sent for block {block + 1} "
            f"(bribe {format_wei(bundle.bribe)} ETH, {len(bundle.swap_calls)} hops)"
        )
        return result
