from __future__ import annotations

from shadowlogs.core.exceptions import DecodeError, EventError, SchemaError, ShadowLogsError
from shadowlogs.core.models import EventLog, Meta
from shadowlogs.decoding.decoder import DecodedLog, decode_data, decode_event, decode_log, decode_topics
from shadowlogs.decoding.registry_builder import event_schema_from_signature, make_registry
from shadowlogs.decoding.specs import EventRegistry, EventSchema, ParameterSchema

__all__ = [
    "decode_log",
    "decode_topics",
    "decode_data",
    "decode_event",
    "DecodedLog",
    "event_schema_from_signature",
    "make_registry",
    "EventRegistry",
    "EventSchema",
    "ParameterSchema",
    "EventLog",
    "Meta",
    "ShadowLogsError",
    "SchemaError",
    "DecodeError",
    "EventError",
]
