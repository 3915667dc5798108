import json
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel

from shadowlogs.decoding.registry import add_event_schema
from shadowlogs.decoding.specs import EventRegistry, EventSchema, ParameterSchema


class AbiParam(BaseModel):
    name: str = ""
    type: str
    indexed: bool = False
    internalType: str | None = None
    components: list["AbiParam"] = []


class AbiEvent(BaseModel):
    anonymous: bool = False
    inputs: Sequence[AbiParam]
    name: str
    type: Literal["event"]


def get_parameter_schema(param: AbiParam, position: int) -> ParameterSchema:
    return ParameterSchema.build(
        param.name,
        param.type,
        indexed=param.indexed,
        components=[get_parameter_schema(c, i) for i, c in enumerate(param.components)],
        fallback_name=f"arg{position}",
    )


def get_event_schema(event: AbiEvent) -> EventSchema:
    return EventSchema(
        name=event.name,
        params=tuple(get_parameter_schema(p, i) for i, p in enumerate(event.inputs)),
        anonymous=event.anonymous,
    )


def get_event_signature(event: AbiEvent) -> str:
    return get_event_schema(event).signature


def get_event_topic0(event: AbiEvent) -> str:
    return get_event_schema(event).selector


AbiJson = Iterable[dict[str, Any]]
AbiSpec = AbiJson | dict[str, Any] | Path


def _load_abi(abi: AbiSpec) -> AbiJson:
    """Accept an ABI list, a compiler artifact (`{"abi": [...]}`), or a path to either."""
    if isinstance(abi, Path):
        abi = json.loads(abi.read_text())
    if isinstance(abi, dict):
        return abi.get("abi", [])
    return abi


def get_events_from_abi(abi: AbiSpec) -> list[AbiEvent]:
    return [AbiEvent.model_validate(entry) for entry in _load_abi(abi) if entry.get("type") == "event"]


def make_event_registry_from_events(events: Iterable[AbiEvent]) -> EventRegistry:
    reg: EventRegistry = {}

    for event in events:
        # anonymous events carry no selector in topic0
        if event.anonymous:
            continue
        add_event_schema(
            reg,
            get_event_schema(event),
        )

    return reg


def make_event_registry_from_abi(abi: AbiSpec) -> EventRegistry:
    return make_event_registry_from_events(get_events_from_abi(abi))
