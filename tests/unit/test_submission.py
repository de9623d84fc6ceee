"""
Tests for bundle signing and relay submission.
"""

import json

import pytest
from aiohttp import web
from aiohttp import test_utils
from eth_account import Account
from eth_account.messages import encode_defunct
from web3 import Web3

from cycle_arbitrage.exceptions import SubmissionError
from cycle_arbitrage.submission import (
    BundleSubmitter,
    RelayClient,
    build_bundle_params,
    build_call_bundle_params,
    flashbots_headers,
)
from cycle_arbitrage.types import BundlePayload

SIGNER_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
RELAY_KEY = "0x" + "0" * 63 + "1"
EXECUTOR = Web3.to_checksum_address("0x00000000000000000000000000000000000000ee")
TOKEN = "0x00000000000000000000000000000000000000a1"


def make_bundle() -> BundlePayload:
    return BundlePayload(
        funding_call=(TOKEN, b"\xa9\x05\x9c\xbb"),
        swap_calls=(("0x0000000000000000000000000000000000000f01", b"\x02\x2c\x0d\x9f"),),
        bribe=9 * 10**16,
        input_token=TOKEN,
        input_amount=10**19,
        strategy=b"",
        calldata=b"\x12\x34\x56\x78",
        executor_address=EXECUTOR,
    )


class FakeEth:
    def __init__(self, block=100, chain_id=1, gas_price=30 * 10**9, nonce=5):
        self._block = block
        self._chain_id = chain_id
        self._gas_price = gas_price
        self._nonce = nonce

    @staticmethod
    async def _value(value):
        return value

    @property
    def block_number(self):
        return self._value(self._block)

    @property
    def chain_id(self):
        return self._value(self._chain_id)

    @property
    def gas_price(self):
        return self._value(self._gas_price)

    async def get_transaction_count(self, address, block_identifier="latest"):
        return self._nonce


class FakeW3:
    def __init__(self, **kwargs):
        self.eth = FakeEth(**kwargs)


class FakeRelay:
    def __init__(self, fail=False):
        self.fail = fail
        self.sent = []
        self.simulated = []

    async def send_bundle(self, params):
        if self.fail:
            raise SubmissionError("relay down", endpoint="fake")
        self.sent.append(params)
        return {"bundleHash": "0xabc"}

    async def call_bundle(self, params):
        self.simulated.append(params)
        return {"results": []}


def test_flashbots_header_recovers_signer():
    signer = Account.from_key(RELAY_KEY)
    body = json.dumps({"jsonrpc": "2.0", "id": 1, "method": "eth_sendBundle", "params": []})
    headers = flashbots_headers(body, signer)

    address, signature = headers["X-Flashbots-Signature"].split(":")
    assert address == signer.address
    message = encode_defunct(text=Web3.to_hex(Web3.keccak(text=body)))
    assert Account.recover_message(message, signature=signature) == signer.address


def test_bundle_params():
    assert build_bundle_params(["0xaa"], 101) == {"txs": ["0xaa"], "blockNumber": "0x65"}
    assert build_call_bundle_params(["0xaa"], 101, 100) == {
        "txs": ["0xaa"],
        "blockNumber": "0x65",
        "stateBlockNumber": "0x64",
        "timestamp": 0,
    }


@pytest.mark.asyncio
async def test_sign_produces_transaction_from_signer():
    submitter = BundleSubmitter(FakeW3(), SIGNER_KEY, FakeRelay(), gas_limit=400_000)
    raw_tx = await submitter.sign(make_bundle())
    assert Account.recover_transaction(raw_tx) == Account.from_key(SIGNER_KEY).address


@pytest.mark.asyncio
async def test_submit_targets_next_block():
    relay = FakeRelay()
    submitter = BundleSubmitter(FakeW3(block=100), SIGNER_KEY, relay, simulate=True)
    await submitter.submit(make_bundle())

    assert relay.sent[0]["blockNumber"] == hex(101)
    assert len(relay.sent[0]["txs"]) == 1
    assert relay.simulated[0]["stateBlockNumber"] == hex(100)


@pytest.mark.asyncio
async def test_dispatch_is_fire_and_forget():
    submitter = BundleSubmitter(FakeW3(), SIGNER_KEY, FakeRelay(fail=True))
    task = submitter.dispatch(make_bundle())
    assert submitter.pending == 1

    await submitter.drain()
    assert task.done()
    assert submitter.pending == 0
    assert submitter.failed == 1
    assert submitter.submitted == 0


@pytest.mark.asyncio
async def test_dispatch_success_counted():
    relay = FakeRelay()
    submitter = BundleSubmitter(FakeW3(), SIGNER_KEY, relay)
    submitter.dispatch(make_bundle())
    await submitter.drain()
    assert submitter.submitted == 1
    assert len(relay.sent) == 1


async def start_relay(handler):
    app = web.Application()
    app.router.add_post("/", handler)
    server = test_utils.TestServer(app)
    await server.start_server()
    return server


@pytest.mark.asyncio
async def test_relay_client_posts_signed_json_rpc():
    seen = {}

    async def handler(request):
        seen["body"] = await request.text()
        seen["signature"] = request.headers.get("X-Flashbots-Signature")
        return web.json_response({"jsonrpc": "2.0", "id": 1, "result": {"bundleHash": "0x1"}})

    server = await start_relay(handler)
    try:
        client = RelayClient(str(server.make_url("/")), RELAY_KEY)
        result = await client.send_bundle(build_bundle_params(["0xaa"], 5))
    finally:
        await server.close()

    assert result == {"bundleHash": "0x1"}
    payload = json.loads(seen["body"])
    assert payload["method"] == "eth_sendBundle"
    assert payload["params"] == [{"txs": ["0xaa"], "blockNumber": "0x5"}]
    assert seen["signature"].startswith(Account.from_key(RELAY_KEY).address + ":")


@pytest.mark.asyncio
async def test_relay_client_raises_on_rpc_error():
    async def handler(request):
        return web.json_response({"jsonrpc": "2.0", "id": 1, "error": {"message": "bad"}})

    server = await start_relay(handler)
    try:
        client = RelayClient(str(server.make_url("/")), RELAY_KEY)
        with pytest.raises(SubmissionError):
            await client.call_bundle(build_call_bundle_params(["0xaa"], 5, 4))
    finally:
        await server.close()


@pytest.mark.asyncio
async def test_relay_client_raises_on_http_error():
    async def handler(request):
        return web.Response(status=403, text="forbidden")

    server = await start_relay(handler)
    try:
        client = RelayClient(str(server.make_url("/")), RELAY_KEY)
        with pytest.raises(SubmissionError) as exc_info:
            await client.send_bundle(build_bundle_params(["0xaa"], 5))
    finally:
        await server.close()
    assert exc_info.value.status_code == 403
