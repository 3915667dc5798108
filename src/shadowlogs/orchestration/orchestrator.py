"""Wiring of concrete collaborators around the decode use cases.

The use cases in `shadowlogs.core.use_cases` depend only on interfaces.
The functions here build the concrete pieces (artifact store, shadow store,
RPC client, log poller, sinks) from a config object, run the use case and
manage their lifecycle, for CLI / script usage.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from shadowlogs.clients.rpc import RPC, LogPoller
from shadowlogs.core.config import DecodeTxConfig, WatchConfig, parse_contract_string
from shadowlogs.core.interfaces import IDecodedLogSink
from shadowlogs.core.use_cases.watch_events import (
    OnDecoded,
    ProcessStats,
    WatchEventsService,
    decode_logs,
)
from shadowlogs.decoding.decoder import DecodedLog
from shadowlogs.decoding.specs import EventRegistry
from shadowlogs.storage.artifacts import LocalArtifactStore
from shadowlogs.storage.jsonl import JsonlSink
from shadowlogs.storage.shadow import LocalShadowStore
from shadowlogs.storage.shards import ShardsDir, ShardWriter

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Output DTO
# ---------------------------------------------------------------------------


@dataclass(kw_only=True)
class DecodeTxOutput:
    decoded: list[DecodedLog] = field(default_factory=list)
    stats: ProcessStats


def _build_sinks(config: WatchConfig) -> list[IDecodedLogSink]:
    sinks: list[IDecodedLogSink] = []
    if config.jsonl_out:
        sinks.append(JsonlSink(config.jsonl_out))
    if config.parquet_out is not None:
        sinks.append(
            ShardWriter(
                ShardsDir(config.parquet_out),
                rows_per_shard=config.rows_per_shard,
            )
        )
    return sinks


async def watch_events(
    config: WatchConfig,
    *,
    on_decoded: OnDecoded | None = None,
) -> ProcessStats:
    """Resolve the shadow contract and event schema, then decode its logs as they arrive."""
    file_name, contract_name = parse_contract_string(config.contract)

    schema = LocalArtifactStore(config.artifacts_dir).get_event(
        file_name, contract_name, config.event_signature
    )
    contract = LocalShadowStore(config.shadow_dir).get_by_name(file_name, contract_name)
    logger.info("watching %s at %s for %s", contract_name, contract.address, schema.signature)

    rpc = RPC(config.rpc_url, timeout_s=config.timeout_s)
    try:
        poller = LogPoller(
            rpc,
            from_block=config.from_block,
            poll_interval_s=config.poll_interval_s,
        )
        return await WatchEventsService(poller).run(
            address=contract.address,
            schema=schema,
            sinks=_build_sinks(config),
            max_logs=config.max_logs,
            on_decoded=on_decoded,
        )
    finally:
        await rpc.aclose()


async def decode_tx(
    config: DecodeTxConfig,
    *,
    on_decoded: OnDecoded | None = None,
) -> DecodeTxOutput:
    """Decode the logs of one mined transaction against a contract's ABI."""
    file_name, contract_name = parse_contract_string(config.contract)
    store = LocalArtifactStore(config.artifacts_dir)

    registry: EventRegistry
    if config.event_signature:
        schema = store.get_event(file_name, contract_name, config.event_signature)
        registry = {schema.selector: schema}
    else:
        registry = store.get_registry(file_name, contract_name)

    rpc = RPC(config.rpc_url, timeout_s=config.timeout_s)
    try:
        logs = await rpc.get_transaction_logs(config.tx_hash)
    finally:
        await rpc.aclose()

    stats = ProcessStats()
    decoded = decode_logs(logs, registry, stats=stats, on_decoded=on_decoded)
    return DecodeTxOutput(decoded=decoded, stats=stats)
