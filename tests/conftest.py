from unittest.mock import AsyncMock

import pytest

from shadowlogs.core.models import EventLog
from shadowlogs.decoding.registry_builder import event_schema_from_signature
from shadowlogs.decoding.specs import EventSchema

TRANSFER_TOPIC0 = "0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef"
SENDER = "0x73ede13ab9c28bc4302e94c1d1e7f755988a9158"
RECIPIENT = "0x91364516d3cad16e1666261dbdbb39c881dbe9ee"
TOKEN = "0x6b175474e89094c44da98b954eedeac495271d0f"


def address_topic(address: str) -> str:
    return "0x" + "0" * 24 + address[2:].lower()


def uint_word(value: int) -> str:
    return value.to_bytes(32, "big").hex()


@pytest.fixture
def mock_rpc():
    rpc = AsyncMock()
    rpc.get_logs = AsyncMock(return_value=[])
    rpc.latest_block = AsyncMock(return_value=100)
    rpc.get_transaction_logs = AsyncMock(return_value=[])
    rpc.aclose = AsyncMock()
    return rpc


@pytest.fixture
def transfer_schema() -> EventSchema:
    return event_schema_from_signature("Transfer(address indexed from, address indexed to, uint256 value)")


@pytest.fixture
def transfer_log() -> EventLog:
    return EventLog(
        address=TOKEN,
        topics=(TRANSFER_TOPIC0, address_topic(SENDER), address_topic(RECIPIENT)),
        data_hex="0x" + uint_word(69 * 10**18),
        block_number=12,
        tx_hash="0x" + "ab" * 32,
        log_index=3,
    )


@pytest.fixture
def erc20_abi() -> list[dict]:
    return [
        {
            "type": "event",
            "name": "Transfer",
            "anonymous": False,
            "inputs": [
                {"name": "from", "type": "address", "indexed": True, "internalType": "address"},
                {"name": "to", "type": "address", "indexed": True, "internalType": "address"},
                {"name": "value", "type": "uint256", "indexed": False, "internalType": "uint256"},
            ],
        },
        {
            "type": "event",
            "name": "Approval",
            "anonymous": False,
            "inputs": [
                {"name": "owner", "type": "address", "indexed": True},
                {"name": "spender", "type": "address", "indexed": True},
                {"name": "value", "type": "uint256", "indexed": False},
            ],
        },
        {
            "type": "event",
            "name": "Debug",
            "anonymous": True,
            "inputs": [{"name": "", "type": "uint256", "indexed": False}],
        },
        {
            "type": "function",
            "name": "transfer",
            "inputs": [
                {"name": "to", "type": "address"},
                {"name": "amount", "type": "uint256"},
            ],
            "outputs": [{"name": "", "type": "bool"}],
            "stateMutability": "nonpayable",
        },
    ]
