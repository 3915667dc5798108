"""Concrete wiring for the watch and decode-tx use cases."""

from shadowlogs.orchestration.orchestrator import DecodeTxOutput, decode_tx, watch_events

__all__ = [
    "DecodeTxOutput",
    "decode_tx",
    "watch_events",
]
