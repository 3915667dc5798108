from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class WatchConfig:
    """Configuration for watching a shadow contract's events (CLI `events`)."""

    rpc_url: str
    contract: str  # "File.sol" or "File.sol:Contract"
    event_signature: str
    artifacts_dir: Path = Path("contracts/out")
    shadow_dir: Path = Path(".")
    from_block: int | str = "latest"
    poll_interval_s: float = 2.0
    timeout_s: int = 20
    jsonl_out: str = ""
    parquet_out: Path | None = None
    rows_per_shard: int = 10_000
    max_logs: int | None = None  # stop after this many delivered logs


@dataclass(frozen=True)
class DecodeTxConfig:
    """Configuration for decoding the logs of one mined transaction (CLI `decode-tx`)."""

    rpc_url: str
    tx_hash: str
    contract: str
    artifacts_dir: Path = Path("contracts/out")
    event_signature: str | None = None  # None → every event in the contract ABI
    timeout_s: int = 20


def parse_contract_string(contract: str) -> tuple[str, str]:
    """Split `File.sol[:Contract]` into (file name, contract name).

    Without an explicit contract name, the file stem is used.
    """
    file_name, sep, contract_name = contract.partition(":")
    if not sep:
        contract_name = file_name.split(".", 1)[0]
    return file_name, contract_name
