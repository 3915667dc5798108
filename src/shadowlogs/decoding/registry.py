"""Event registry helpers.

This module exposes:
- `add_event_schema(registry, schema)` → insert one schema (keyed by selector)
- `add_many(registry, schemas)` → insert multiple
"""

from __future__ import annotations

from collections.abc import Iterable

from shadowlogs.decoding.specs import EventRegistry, EventSchema


def add_event_schema(registry: EventRegistry, schema: EventSchema) -> None:
    """Insert one schema into the registry keyed by lowercased selector."""
    registry[schema.selector.lower()] = schema


def add_many(registry: EventRegistry, schemas: Iterable[EventSchema]) -> None:
    """Insert many schemas into the registry."""
    for s in schemas:
        add_event_schema(registry, s)
