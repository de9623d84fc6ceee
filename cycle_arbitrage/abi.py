"""
Contract ABIs and function selectors used by the engine.
"""

from eth_utils import event_abi_to_log_topic, function_signature_to_4byte_selector

# Uniswap V2 Pair ABI (minimal)
UNISWAP_V2_PAIR_ABI = [
    {
        "constant": True,
        "inputs": [],
        "name": "getReserves",
        "outputs": [
            {"name": "reserve0", "type": "uint112"},
            {"name": "reserve1", "type": "uint112"},
            {"name": "blockTimestampLast", "type": "uint32"},
        ],
        "type": "function",
    },
    {
        "constant": True,
        "inputs": [],
        "name": "token0",
        "outputs": [{"name": "", "type": "address"}],
        "type": "function",
    },
    {
        "constant": True,
        "inputs": [],
        "name": "token1",
        "outputs": [{"name": "", "type": "address"}],
        "type": "function",
    },
]

SYNC_EVENT_ABI = {
    "anonymous": False,
    "inputs": [
        {"indexed": False, "name": "reserve0", "type": "uint112"},
        {"indexed": False, "name": "reserve1", "type": "uint112"},
    ],
    "name": "Sync",
    "type": "event",
}

TRANSFER_SELECTOR = function_signature_to_4byte_selector("transfer(address,uint256)")
SWAP_SELECTOR = function_signature_to_4byte_selector("swap(uint256,uint256,address,bytes)")
EXECUTE_SELECTOR = function_signature_to_4byte_selector(
    "execute(uint256,address,uint256,bytes)"
)
SYNC_TOPIC = event_abi_to_log_topic(SYNC_EVENT_ABI)

STRATEGY_TYPES = ["address[]", "bytes[]", "uint256"]
EXECUTE_TYPES = ["uint256", "address", "uint256", "bytes"]
TRANSFER_TYPES = ["address", "uint256"]
SWAP_TYPES = ["uint256", "uint256", "address", "bytes"]
