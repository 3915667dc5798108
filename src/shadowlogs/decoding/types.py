"""ABI type descriptors and the type-string resolver.

Defines the closed set of structural types a parameter can have:
- scalars: `AddressType`, `BoolType`, `StringType`, `BytesType`,
  `FixedBytesType`, `IntType`, `UintType`
- composites: `ArrayType`, `FixedArrayType`, `TupleType`

`resolve_type()` turns a declared ABI type string (plus components for
tuple types) into a descriptor. Descriptors are immutable and hashable.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from shadowlogs.core.exceptions import SchemaError

if TYPE_CHECKING:
    from shadowlogs.decoding.specs import ParameterSchema


WORD_SIZE = 32

_ARRAY_SUFFIX = re.compile(r"^(?P<base>.+)\[(?P<size>\d*)\]$")
_SIZED = re.compile(r"^(?P<kind>uint|int|bytes)(?P<size>\d*)$")


# ---- Descriptors ----


@dataclass(frozen=True)
class AddressType:
    pass


@dataclass(frozen=True)
class BoolType:
    pass


@dataclass(frozen=True)
class StringType:
    pass


@dataclass(frozen=True)
class BytesType:
    """Dynamic-length byte string."""


@dataclass(frozen=True)
class FixedBytesType:
    size: int  # 1..32


@dataclass(frozen=True)
class IntType:
    bits: int  # 8..256, multiple of 8


@dataclass(frozen=True)
class UintType:
    bits: int  # 8..256, multiple of 8


@dataclass(frozen=True)
class ArrayType:
    """Dynamic-length array (`T[]`)."""

    element: TypeDescriptor


@dataclass(frozen=True)
class FixedArrayType:
    """Fixed-length array (`T[N]`)."""

    element: TypeDescriptor
    length: int


@dataclass(frozen=True)
class TupleType:
    """Ordered tuple; each field keeps its name and nested schema."""

    fields: tuple[ParameterSchema, ...]


TypeDescriptor = (
    AddressType
    | BoolType
    | StringType
    | BytesType
    | FixedBytesType
    | IntType
    | UintType
    | ArrayType
    | FixedArrayType
    | TupleType
)


# ---- Resolver ----


def _parse_primitive(type_str: str) -> TypeDescriptor:
    """Parse a bare (non-array, non-tuple) ABI type string."""
    match type_str:
        case "address":
            return AddressType()
        case "bool":
            return BoolType()
        case "string":
            return StringType()
        case "bytes":
            return BytesType()
        case "tuple":
            raise SchemaError("tuple type requires components")

    m = _SIZED.match(type_str)
    if m is None:
        raise SchemaError(f"Unrecognized ABI type: {type_str!r}")

    kind, size = m["kind"], m["size"]
    if kind == "bytes":
        n = int(size)
        if not 1 <= n <= 32:
            raise SchemaError(f"Invalid fixed bytes width in {type_str!r} (expected 1..32)")
        return FixedBytesType(n)

    bits = int(size) if size else 256
    if not (8 <= bits <= 256 and bits % 8 == 0):
        raise SchemaError(f"Invalid integer width in {type_str!r} (expected 8..256, multiple of 8)")
    return UintType(bits) if kind == "uint" else IntType(bits)


def resolve_type(
    type_str: str,
    components: Sequence[ParameterSchema] = (),
) -> TypeDescriptor:
    """Resolve a declared ABI type string into a `TypeDescriptor`.

    The last bracket is the outermost dimension, so `uint256[2][]` is a
    dynamic array of `uint256[2]`, and `tuple[]` with components is an
    array of tuples.
    """
    s = type_str.strip()
    if not s:
        raise SchemaError("Empty ABI type")

    m = _ARRAY_SUFFIX.match(s)
    if m is not None:
        element = resolve_type(m["base"], components)
        size = m["size"]
        if size == "":
            return ArrayType(element)
        length = int(size)
        if length == 0:
            raise SchemaError(f"Fixed array length must be positive: {type_str!r}")
        return FixedArrayType(element, length)

    if components:
        return TupleType(tuple(components))

    return _parse_primitive(s)


# ---- Structural helpers ----


def canonical_type(t: TypeDescriptor) -> str:
    """Return the canonical type string used in event signatures."""
    match t:
        case AddressType():
            return "address"
        case BoolType():
            return "bool"
        case StringType():
            return "string"
        case BytesType():
            return "bytes"
        case FixedBytesType(size=size):
            return f"bytes{size}"
        case IntType(bits=bits):
            return f"int{bits}"
        case UintType(bits=bits):
            return f"uint{bits}"
        case ArrayType(element=element):
            return f"{canonical_type(element)}[]"
        case FixedArrayType(element=element, length=length):
            return f"{canonical_type(element)}[{length}]"
        case TupleType(fields=fields):
            return "(" + ",".join(canonical_type(f.type) for f in fields) + ")"
    raise SchemaError(f"Unsupported type descriptor: {t!r}")


def is_dynamic(t: TypeDescriptor) -> bool:
    """True when the type is encoded out-of-line (offset in head, payload in tail)."""
    match t:
        case StringType() | BytesType() | ArrayType():
            return True
        case FixedArrayType(element=element):
            return is_dynamic(element)
        case TupleType(fields=fields):
            return any(is_dynamic(f.type) for f in fields)
    return False


def head_size(t: TypeDescriptor) -> int:
    """Number of bytes the type occupies in its enclosing head region."""
    if is_dynamic(t):
        return WORD_SIZE
    match t:
        case FixedArrayType(element=element, length=length):
            return length * head_size(element)
        case TupleType(fields=fields):
            return sum(head_size(f.type) for f in fields)
    return WORD_SIZE


def is_hashed_in_topic(t: TypeDescriptor) -> bool:
    """True when an indexed parameter of this type is stored as a keccak hash."""
    return isinstance(t, (StringType, BytesType, ArrayType, FixedArrayType, TupleType))
