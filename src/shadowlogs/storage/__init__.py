"""Storage components: schema catalog, shadow contract store and decoded-log sinks.

This package provides:
- LocalArtifactStore: event schemas from compiler artifacts
- LocalShadowStore: shadow contract records in shadow.json
- JsonlSink / ShardWriter: NDJSON and Parquet outputs for decoded logs
"""

from shadowlogs.storage.artifacts import LocalArtifactStore
from shadowlogs.storage.jsonl import JsonlSink
from shadowlogs.storage.shadow import LocalShadowStore
from shadowlogs.storage.shards import ShardsDir, ShardWriter

__all__ = [
    "LocalArtifactStore",
    "JsonlSink",
    "LocalShadowStore",
    "ShardsDir",
    "ShardWriter",
]
