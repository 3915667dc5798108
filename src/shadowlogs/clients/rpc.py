"""Lightweight JSON-RPC client for Ethereum-compatible nodes.

This module provides:
- `RPC`: an async client with sane timeouts/connection limits
- `LogPoller`: a log subscription source built on `eth_getLogs` polling
- Helper utilities to format block numbers and topics

It returns `EventLog` records ready for downstream decoding.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Sequence
from typing import Any

import httpx

from shadowlogs.core.models import EventLog

logger = logging.getLogger(__name__)


def to_hex_block(x: int) -> str:
    """Return a 0x-prefixed hex block number."""
    return hex(x)


def topics_param(topic0s: Sequence[str]) -> list[list[str]]:
    """Format topic0 signatures for eth_getLogs RPC call (empty → any topic0)."""
    if not topic0s:
        return []
    return [[t.lower() for t in topic0s]]


def _to_event_log(rl: dict[str, Any]) -> EventLog:
    """Map one JSON-RPC log object to an `EventLog`."""
    topics = tuple((t if isinstance(t, str) else t.decode()).lower() for t in rl.get("topics", []))
    ts = rl.get("blockTimestamp")
    ts_i = (
        int(ts, 16)
        if isinstance(ts, str) and ts.startswith("0x")
        else (int(ts) if isinstance(ts, int) else None)
    )
    return EventLog(
        address=rl["address"].lower(),
        topics=topics,
        data_hex=str(rl.get("data") or "0x"),
        block_number=int(rl["blockNumber"], 16),
        tx_hash=(rl.get("transactionHash") or rl.get("transaction_hash") or "").lower(),
        log_index=int(rl["logIndex"], 16),
        block_timestamp=ts_i,
    )


class RPC:
    """Minimal async RPC client.

    Parameters
    ----------
    url : str
        RPC endpoint URL.
    timeout_s : int
        Per-operation timeout in seconds (connect/read/write).
    max_connections : int
        Maximum concurrent connections to keep in the pool.
    """

    def __init__(self, url: str, *, timeout_s: int = 20, max_connections: int = 16) -> None:
        self.url = url
        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(
                connect=timeout_s,
                read=timeout_s,
                write=timeout_s,
                pool=max(30, timeout_s * 3),
            ),
            limits=httpx.Limits(
                max_connections=max_connections,
                max_keepalive_connections=max(1, max_connections // 2),
            ),
            http2=True,
        )

    async def _call(self, method: str, params: list[Any]) -> Any:
        """POST one JSON-RPC request and return its `result`."""
        r = await self.client.post(
            self.url,
            json={"jsonrpc": "2.0", "id": 1, "method": method, "params": params},
        )
        r.raise_for_status()
        data = r.json()
        if "error" in data:
            e = data["error"]
            raise RuntimeError(f"RPC error: {e.get('code')} {e.get('message')}")
        return data.get("result")

    async def latest_block(self) -> int:
        """Return the latest block number as an int."""
        return int(await self._call("eth_blockNumber", []), 16)

    async def get_logs(
        self,
        *,
        address: str,
        topic0s: Sequence[str],
        from_block: int,
        to_block: int,
    ) -> list[EventLog]:
        """Fetch logs for an address and a set of topic0 signatures within a block range."""
        params = [
            {
                "address": address.lower(),
                "fromBlock": to_hex_block(from_block),
                "toBlock": to_hex_block(to_block),
                "topics": topics_param(topic0s),
            }
        ]
        result = await self._call("eth_getLogs", params)
        return [_to_event_log(rl) for rl in result or []]

    async def get_transaction_logs(self, tx_hash: str) -> list[EventLog]:
        """Return the logs of a mined transaction, from its receipt."""
        receipt = await self._call("eth_getTransactionReceipt", [tx_hash])
        if receipt is None:
            raise RuntimeError(f"Transaction receipt not found: {tx_hash}")
        return [_to_event_log(rl) for rl in receipt.get("logs", [])]

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()


class LogPoller:
    """Log subscription over `eth_getLogs` polling.

    Each poll fetches logs from the block after the last one seen up to the
    current head. Delivery is at-least-once; duplicates are not suppressed.
    """

    def __init__(
        self,
        rpc: RPC,
        *,
        from_block: int | str = "latest",
        poll_interval_s: float = 2.0,
    ) -> None:
        self.rpc = rpc
        self.from_block = from_block
        self.poll_interval_s = poll_interval_s

    async def _start_block(self) -> int:
        if isinstance(self.from_block, str) and self.from_block.lower() == "latest":
            return await self.rpc.latest_block() + 1
        if isinstance(self.from_block, str) and self.from_block.lower() in ("earliest", "genesis"):
            return 0
        return int(self.from_block)

    async def subscribe(
        self,
        *,
        address: str,
        topic0s: Sequence[str],
    ) -> AsyncIterator[EventLog]:
        next_block = await self._start_block()
        logger.info("polling logs for %s from block %d", address, next_block)
        while True:
            head = await self.rpc.latest_block()
            if head >= next_block:
                logs = await self.rpc.get_logs(
                    address=address,
                    topic0s=topic0s,
                    from_block=next_block,
                    to_block=head,
                )
                logger.debug("blocks %d-%d: %d logs", next_block, head, len(logs))
                for log in logs:
                    yield log
                next_block = head + 1
            await asyncio.sleep(self.poll_interval_s)
