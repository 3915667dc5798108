"""Core data models, configurations, interfaces and errors.

This package provides:
- Data models (EventLog, Meta, ShadowContract, Column)
- Configuration classes (WatchConfig, DecodeTxConfig)
- Error hierarchy (ShadowLogsError and subclasses)
"""

from shadowlogs.core.config import DecodeTxConfig, WatchConfig
from shadowlogs.core.exceptions import (
    ArtifactError,
    DecodeError,
    EventError,
    SchemaError,
    ShadowLogsError,
    ShadowStoreError,
)
from shadowlogs.core.models import Column, EventLog, Meta, ShadowContract

__all__ = [
    "WatchConfig",
    "DecodeTxConfig",
    "ArtifactError",
    "DecodeError",
    "EventError",
    "SchemaError",
    "ShadowLogsError",
    "ShadowStoreError",
    "Column",
    "EventLog",
    "Meta",
    "ShadowContract",
]
