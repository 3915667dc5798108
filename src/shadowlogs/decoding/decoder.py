"""Log assembler: decode topics and data against an `EventSchema`.

Indexed parameters are read from the topic words (one word each, topic0 being
the selector), non-indexed parameters from the ABI-encoded data. Both halves
are rendered and merged back into one dict in declaration order:

    {
        "from": "0x73ede13ab9c28bc4302e94c1d1e7f755988a9158",
        "to": "0x91364516d3cad16e1666261dbdbb39c881dbe9ee",
        "value": "69000000000000000000"
    }
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from eth_utils import decode_hex, to_checksum_address

from shadowlogs.core.exceptions import DecodeError, EventError
from shadowlogs.core.models import EventLog, Meta
from shadowlogs.decoding.render import render_values
from shadowlogs.decoding.specs import EventRegistry, EventSchema
from shadowlogs.decoding.types import WORD_SIZE
from shadowlogs.decoding.words import decode_abi, decode_topic_words

HexOrBytes = str | bytes


# ---------- decoded log ----------


@dataclass(slots=True)
class DecodedLog:
    """Decoded event with its rendered parameter values."""

    name: str
    address: str
    meta: Meta
    values: dict[str, Any]


# ---------- helper functions ----------


def _to_bytes(value: HexOrBytes, what: str) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    try:
        return decode_hex(value)
    except (ValueError, TypeError) as e:
        raise DecodeError(f"Invalid hex for {what}: {value!r}") from e


def _indexed_words(
    schema: EventSchema,
    topics: Sequence[HexOrBytes],
    *,
    verify_selector: bool,
) -> bytes:
    """Validate topics and return the concatenated indexed-parameter words."""
    words = [_to_bytes(t, f"topic {i}") for i, t in enumerate(topics)]
    for i, w in enumerate(words):
        if len(w) != WORD_SIZE:
            raise DecodeError(f"Topic {i} is {len(w)} bytes, expected {WORD_SIZE}")

    # topic0 is the selector for non-anonymous events, never a parameter
    if not schema.anonymous:
        if not words:
            raise EventError(f"Log has no topics; expected selector for {schema.signature}")
        if verify_selector and "0x" + words[0].hex() != schema.selector:
            raise EventError(
                f"Selector mismatch for {schema.signature}: "
                f"got 0x{words[0].hex()}, expected {schema.selector}"
            )
        words = words[1:]

    expected = len(schema.indexed_params)
    if len(words) != expected:
        raise EventError(
            f"{schema.signature} has {expected} indexed parameters but log carries {len(words)} topic words"
        )
    return b"".join(words)


def _checksum(address: str) -> str:
    try:
        return to_checksum_address(address)
    except (ValueError, TypeError) as e:
        raise DecodeError(f"Invalid log address: {address!r}") from e


def merge(indexed: dict[str, Any], data: dict[str, Any]) -> dict[str, Any]:
    """Union of two disjoint name → value maps; a shared name is an error."""
    out = dict(indexed)
    for name, value in data.items():
        if name in out:
            raise EventError(f"Parameter {name!r} decoded from both topics and data")
        out[name] = value
    return out


# ---------- public decoding API ----------


def decode_topics(
    schema: EventSchema,
    topics: Sequence[HexOrBytes],
    *,
    verify_selector: bool = True,
    typed: bool = False,
) -> dict[str, Any]:
    """Decode indexed parameters from the log topics."""
    params = schema.indexed_params
    buf = _indexed_words(schema, topics, verify_selector=verify_selector)
    tokens, _ = decode_topic_words([p.type for p in params], buf)
    if len(tokens) != len(params):
        raise EventError(f"Decoded {len(tokens)} indexed values, expected {len(params)}")
    return render_values(params, tokens, typed=typed)


def decode_data(
    schema: EventSchema,
    data: HexOrBytes,
    *,
    typed: bool = False,
) -> dict[str, Any]:
    """Decode non-indexed parameters from the ABI-encoded log data."""
    params = schema.data_params
    tokens, _ = decode_abi([p.type for p in params], _to_bytes(data, "data"))
    return render_values(params, tokens, typed=typed)


def decode_log(
    schema: EventSchema,
    *,
    topics: Sequence[HexOrBytes],
    data: HexOrBytes,
    verify_selector: bool = True,
    typed: bool = False,
) -> dict[str, Any]:
    """Decode a raw log into one dict keyed by parameter name, in declaration order.

    Raises `EventError` on a topic count or selector mismatch and
    `DecodeError` on malformed topic words or data. Nothing is returned
    partially.
    """
    indexed = decode_topics(schema, topics, verify_selector=verify_selector, typed=typed)
    non_indexed = decode_data(schema, data, typed=typed)
    merged = merge(indexed, non_indexed)
    return {p.name: merged[p.name] for p in schema.params}


def decode_event_log(log: EventLog, schema: EventSchema) -> DecodedLog:
    """Decode an `EventLog` record against a known schema."""
    meta = Meta.from_event_log(log)
    values = decode_log(schema, topics=log.topics, data=log.data_hex)
    return DecodedLog(
        name=schema.name,
        address=_checksum(meta.address),
        meta=meta,
        values=values,
    )


def decode_event(
    *,
    topics: Sequence[str],
    data: HexOrBytes,
    meta: Meta,
    registry: EventRegistry,
) -> DecodedLog | None:
    """Decode a raw log via registry lookup on topic0.

    Returns None when the log has no topics or its selector is not registered;
    decoding errors for a registered selector propagate.
    """
    if not topics:
        return None
    schema = registry.get(topics[0].lower())
    if schema is None:
        return None

    values = decode_log(schema, topics=topics, data=data)
    return DecodedLog(
        name=schema.name,
        address=_checksum(meta.address),
        meta=meta,
        values=values,
    )
