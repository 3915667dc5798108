"""Core data models and dynamic column buffer.

This module defines:
- `EventLog`: minimal RPC log record handed to the decoder.
- `Meta`: per-log metadata carried alongside decoded values.
- `ShadowContract`: record of a shadow contract deployed on a local fork.
- `Column`: dynamic, append-only columnar buffer where every decoded
   parameter name becomes its own Parquet column.

Design notes
------------
- Dynamic columns are stored as strings for Arrow safety (big ints, hex).
  Nested values (tuples, arrays) are stored as compact JSON.
- Base columns are strongly typed and always present.
- Sorting is applied on (block_number, tx_hash, log_index) before write.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import pyarrow as pa
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# === Base schema (Arrow) ===

_BASE_FIELDS: list[tuple[str, pa.DataType]] = [
    ("block_number", pa.uint64()),
    ("tx_hash", pa.string()),
    ("log_index", pa.uint64()),
    ("contract", pa.string()),
    ("event", pa.string()),
]


# === RPC record ===


@dataclass(slots=True, frozen=True)
class EventLog:
    """Raw log as fetched from RPC, minimally normalized."""

    address: str  # lowercased 0x...
    topics: tuple[str, ...]  # lowercased 0x...
    data_hex: str  # "0x..."
    block_number: int
    tx_hash: str  # lowercased 0x...
    log_index: int
    block_timestamp: int | None = None


@dataclass(slots=True)
class Meta:
    """Lightweight metadata for a single log used during decoding."""

    block_number: int
    block_timestamp: int | None
    tx_hash: str
    log_index: int
    address: str

    @classmethod
    def from_event_log(cls, log: EventLog) -> Meta:
        return cls(
            block_number=log.block_number,
            block_timestamp=log.block_timestamp,
            tx_hash=log.tx_hash,
            log_index=log.log_index,
            address=log.address,
        )


# === Shadow contract record ===


class ShadowContract(BaseModel):
    """A shadow contract as persisted in `shadow.json` (camelCase keys)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    file_name: str
    contract_name: str
    address: str
    runtime_bytecode: str = ""


# === Dynamic column buffer ===


def _cell(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"))


@dataclass(slots=True)
class Column:
    """Dynamic columnar buffer.

    - Base columns are always present and strongly typed.
    - Dynamic columns are created lazily upon first key appearance.
    - All dynamic values are stored as *strings* (or None).
    """

    block_number: list[int] = field(default_factory=list)
    tx_hash: list[str] = field(default_factory=list)
    log_index: list[int] = field(default_factory=list)
    contract: list[str] = field(default_factory=list)
    event: list[str] = field(default_factory=list)

    # Dynamic columns created on-demand for any parameter name
    dyn: dict[str, list[str | None]] = field(default_factory=dict)
    _rows: int = 0

    @staticmethod
    def empty() -> Column:
        """Return an empty buffer."""
        return Column()

    def size(self) -> int:
        """Number of rows currently stored."""
        return self._rows

    def _append_base(self, meta: Meta, contract: str, event: str) -> None:
        """Append one row to base columns and pad existing dynamic cols."""
        self.block_number.append(meta.block_number)
        self.tx_hash.append(meta.tx_hash)
        self.log_index.append(meta.log_index)
        self.contract.append(contract)
        self.event.append(event)
        self._rows += 1
        for col in self.dyn.values():
            col.append(None)

    def _ensure_dyn_col(self, name: str) -> list[str | None]:
        """Ensure a dynamic column exists and is aligned to current row count."""
        col = self.dyn.get(name)
        if col is None:
            col = [None] * self._rows
            self.dyn[name] = col
        return col

    def append_decoded(
        self,
        *,
        event_name: str,
        meta: Meta,
        values: dict[str, Any],
        contract_addr: str,
    ) -> None:
        """Append a decoded event into the buffer (all keys become columns)."""
        self._append_base(meta, contract_addr, event_name)
        for k, v in values.items():
            self._ensure_dyn_col(k)[-1] = _cell(v)

    def take_first(self, n: int) -> Column:
        """Detach and return the first `n` rows as a new buffer slice."""
        out = Column()
        out.block_number, self.block_number = self.block_number[:n], self.block_number[n:]
        out.tx_hash, self.tx_hash = self.tx_hash[:n], self.tx_hash[n:]
        out.log_index, self.log_index = self.log_index[:n], self.log_index[n:]
        out.contract, self.contract = self.contract[:n], self.contract[n:]
        out.event, self.event = self.event[:n], self.event[n:]
        for k, col in self.dyn.items():
            out.dyn[k] = col[:n]
            self.dyn[k] = col[n:]
        out._rows = min(n, self._rows)
        self._rows -= out._rows
        return out

    def to_arrow_table(self) -> pa.Table:
        """Convert the buffer to a sorted Arrow table with deterministic schema."""
        fields = [pa.field(n, t) for n, t in _BASE_FIELDS]
        arrays: dict[str, pa.Array] = {
            "block_number": pa.array(self.block_number, type=pa.uint64()),
            "tx_hash": pa.array(self.tx_hash, type=pa.string()),
            "log_index": pa.array(self.log_index, type=pa.uint64()),
            "contract": pa.array(self.contract, type=pa.string()),
            "event": pa.array(self.event, type=pa.string()),
        }
        # Add dynamic columns in deterministic order; parameters shadowing a base column get a prefix
        for name in sorted(self.dyn.keys()):
            col_name = f"param_{name}" if name in arrays else name
            fields.append(pa.field(col_name, pa.string()))
            arrays[col_name] = pa.array(self.dyn[name], type=pa.string())
        schema = pa.schema(fields)
        return pa.Table.from_pydict(arrays, schema=schema).sort_by(
            [("block_number", "ascending"), ("tx_hash", "ascending"), ("log_index", "ascending")]
        )
