"""Event schema primitives.

Defines lightweight frozen dataclasses describing how to decode events:
- `ParameterSchema`: one named, typed parameter (possibly with components)
- `EventSchema`: an event's ordered parameters, signature and topic0 selector
- `EventRegistry`: mapping from selector → EventSchema
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from functools import cached_property

from eth_utils import keccak

from shadowlogs.core.exceptions import SchemaError
from shadowlogs.decoding.types import TypeDescriptor, canonical_type, resolve_type


def _check_unique_names(params: Sequence[ParameterSchema], owner: str) -> None:
    seen: set[str] = set()
    for p in params:
        if p.name in seen:
            raise SchemaError(f"Duplicate parameter name {p.name!r} in {owner}")
        seen.add(p.name)


@dataclass(frozen=True)
class ParameterSchema:
    """Describe one event parameter (or one tuple component)."""

    name: str
    type_str: str  # declared ABI type, e.g. "uint256", "tuple[]", "address[3]"
    type: TypeDescriptor
    indexed: bool = False
    components: tuple[ParameterSchema, ...] = ()

    @classmethod
    def build(
        cls,
        name: str,
        type_str: str,
        *,
        indexed: bool = False,
        components: Sequence[ParameterSchema] = (),
        fallback_name: str = "",
    ) -> ParameterSchema:
        """Resolve `type_str` and build a parameter; empty names use `fallback_name`."""
        name = name or fallback_name
        if not name:
            raise SchemaError(f"Parameter of type {type_str!r} has no name")
        components = tuple(components)
        _check_unique_names(components, f"components of {name!r}")
        return cls(
            name=name,
            type_str=type_str,
            type=resolve_type(type_str, components),
            indexed=indexed,
            components=components,
        )

    @property
    def is_complex(self) -> bool:
        """True for tuples and (fixed) arrays of tuples."""
        return bool(self.components)

    @property
    def canonical_type(self) -> str:
        return canonical_type(self.type)


@dataclass(frozen=True)
class EventSchema:
    """One event: ordered parameters plus derived signature and selector."""

    name: str
    params: tuple[ParameterSchema, ...]
    anonymous: bool = False

    def __post_init__(self) -> None:
        if not self.name:
            raise SchemaError("Event name is empty")
        _check_unique_names(self.params, f"event {self.name!r}")

    @cached_property
    def signature(self) -> str:
        """Canonical signature, e.g. `Transfer(address,address,uint256)`."""
        return f"{self.name}({','.join(p.canonical_type for p in self.params)})"

    @cached_property
    def selector(self) -> str:
        """topic0: lowercased 0x-hex keccak256 of the canonical signature."""
        return "0x" + keccak(text=self.signature).hex()

    @property
    def indexed_params(self) -> list[ParameterSchema]:
        return [p for p in self.params if p.indexed]

    @property
    def data_params(self) -> list[ParameterSchema]:
        return [p for p in self.params if not p.indexed]


# The full registry keyed by selector (lowercased 0x-hex topic0).
EventRegistry = dict[str, EventSchema]

