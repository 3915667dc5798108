from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from shadowlogs.core.exceptions import ShadowLogsError
from shadowlogs.core.interfaces import IDecodedLogSink, ILogSubscription
from shadowlogs.core.models import EventLog, Meta
from shadowlogs.decoding.decoder import DecodedLog, decode_event, decode_event_log
from shadowlogs.decoding.specs import EventRegistry, EventSchema

logger = logging.getLogger(__name__)

OnDecoded = Callable[[DecodedLog], None]


# ---------------------------------------------------------------------------
# Stats
# ---------------------------------------------------------------------------


@dataclass(kw_only=True)
class ProcessStats:
    """
    Aggregated counters for a decode run.

    - how many logs were delivered
    - how many decoded / failed / were skipped (unknown selector)
    - how many files the sinks wrote
    """

    total_logs: int = 0
    decoded: int = 0
    failed: int = 0
    skipped: int = 0
    files_written: int = 0


# ---------------------------------------------------------------------------
# Per-log processing
# ---------------------------------------------------------------------------


def _emit(
    decoded: DecodedLog,
    sinks: Sequence[IDecodedLogSink],
    stats: ProcessStats,
    on_decoded: OnDecoded | None,
) -> None:
    stats.decoded += 1
    for sink in sinks:
        stats.files_written += len(sink.add(decoded))
    if on_decoded is not None:
        on_decoded(decoded)


def process_log(
    log: EventLog,
    schema: EventSchema,
    *,
    sinks: Sequence[IDecodedLogSink] = (),
    stats: ProcessStats,
    on_decoded: OnDecoded | None = None,
) -> DecodedLog | None:
    """
    Decode one delivered log and hand it to the sinks.

    A decoding failure is logged and counted; it never propagates, so one
    malformed log cannot stop the caller's loop.
    """
    stats.total_logs += 1
    try:
        decoded = decode_event_log(log, schema)
    except ShadowLogsError as e:
        stats.failed += 1
        logger.warning("Error processing log %s#%d: %s", log.tx_hash, log.log_index, e)
        return None

    _emit(decoded, sinks, stats, on_decoded)
    return decoded


def decode_logs(
    logs: Iterable[EventLog],
    registry: EventRegistry,
    *,
    sinks: Sequence[IDecodedLogSink] = (),
    stats: ProcessStats | None = None,
    on_decoded: OnDecoded | None = None,
) -> list[DecodedLog]:
    """
    Decode a batch of logs (e.g. one transaction receipt) via selector lookup.

    Logs with no topics or an unknown selector are skipped; decoding
    failures are logged and counted per log.
    """
    stats = stats if stats is not None else ProcessStats()
    out: list[DecodedLog] = []
    for log in logs:
        stats.total_logs += 1
        try:
            decoded = decode_event(
                topics=log.topics,
                data=log.data_hex,
                meta=Meta.from_event_log(log),
                registry=registry,
            )
        except ShadowLogsError as e:
            stats.failed += 1
            logger.warning("Error processing log %s#%d: %s", log.tx_hash, log.log_index, e)
            continue
        if decoded is None:
            stats.skipped += 1
            continue
        _emit(decoded, sinks, stats, on_decoded)
        out.append(decoded)
    return out


# ---------------------------------------------------------------------------
# Domain service: WatchEventsService
# ---------------------------------------------------------------------------


class WatchEventsService:
    """
    Domain service decoding every log a subscription delivers for one event.

    It depends only on the subscription interface and the sinks it is given;
    transport and persistence are wired by the caller.
    """

    def __init__(self, subscription: ILogSubscription) -> None:
        self._subscription = subscription

    async def run(
        self,
        *,
        address: str,
        schema: EventSchema,
        sinks: Sequence[IDecodedLogSink] = (),
        max_logs: int | None = None,
        on_decoded: OnDecoded | None = None,
    ) -> ProcessStats:
        """
        Consume the subscription until it ends or `max_logs` logs were delivered.

        Sinks are always closed, also when the run is cancelled.
        """
        stats = ProcessStats()
        topic0s = [] if schema.anonymous else [schema.selector]
        try:
            async for log in self._subscription.subscribe(address=address, topic0s=topic0s):
                process_log(log, schema, sinks=sinks, stats=stats, on_decoded=on_decoded)
                if max_logs is not None and stats.total_logs >= max_logs:
                    break
        finally:
            for sink in sinks:
                if sink.close() is not None:
                    stats.files_written += 1
        return stats
