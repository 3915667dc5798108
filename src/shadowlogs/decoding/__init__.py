"""Event log decoding.

This package provides:
- Type descriptors and the ABI type-string resolver
- Event schemas (ParameterSchema, EventSchema) and selector-keyed registries
- The word-slot decoder (data head/tail decoding, topic word decoding)
- The value renderer and the log assembler (`decode_log`)
"""

from shadowlogs.decoding.decoder import DecodedLog, decode_data, decode_event, decode_log, decode_topics
from shadowlogs.decoding.registry import add_event_schema, add_many
from shadowlogs.decoding.registry_builder import event_schema_from_signature, make_registry
from shadowlogs.decoding.render import render_typed, render_value, stringify
from shadowlogs.decoding.specs import EventRegistry, EventSchema, ParameterSchema
from shadowlogs.decoding.types import TypeDescriptor, resolve_type

__all__ = [
    "DecodedLog",
    "decode_data",
    "decode_event",
    "decode_log",
    "decode_topics",
    "add_event_schema",
    "add_many",
    "event_schema_from_signature",
    "make_registry",
    "render_typed",
    "render_value",
    "stringify",
    "EventRegistry",
    "EventSchema",
    "ParameterSchema",
    "TypeDescriptor",
    "resolve_type",
]
