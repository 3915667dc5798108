"""Word-slot decoder: ABI head/tail decoding and per-topic word decoding.

Two entry points:
- `decode_abi(types, data)`: standard ABI (tail-encoded) decoding, used for the
  log `data` region. Dynamic values are reached through offsets relative to the
  start of their enclosing region, recursively at every nesting level.
- `decode_topic_words(types, data)`: one 32-byte word per type, no offset
  indirection. Types whose topic value is a hash come back as opaque words.

Both return `(tokens, consumed)` where `consumed` is the number of bytes read
from the start of `data`.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from shadowlogs.core.exceptions import DecodeError
from shadowlogs.decoding.types import (
    WORD_SIZE,
    AddressType,
    ArrayType,
    BoolType,
    BytesType,
    FixedArrayType,
    FixedBytesType,
    IntType,
    StringType,
    TupleType,
    TypeDescriptor,
    UintType,
    head_size,
    is_dynamic,
    is_hashed_in_topic,
)

# ---------- tokens ----------


@dataclass(frozen=True, slots=True)
class Primitive:
    """Scalar value: bytes for address/bytes types, int, bool or str otherwise.

    `hashed` marks an indexed topic word that only carries the keccak hash of
    the real value.
    """

    type: TypeDescriptor
    value: bytes | int | bool | str
    hashed: bool = False


@dataclass(frozen=True, slots=True)
class Composite:
    """Decoded tuple fields, in declaration order."""

    items: tuple[DecodedToken, ...]


@dataclass(frozen=True, slots=True)
class Sequence:
    """Decoded array elements (dynamic or fixed length)."""

    items: tuple[DecodedToken, ...]


DecodedToken = Primitive | Composite | Sequence


# ---------- buffer access ----------


def _read_word(data: bytes, pos: int) -> bytes:
    end = pos + WORD_SIZE
    if pos < 0 or end > len(data):
        raise DecodeError(f"Buffer too short: need 32 bytes at offset {pos}, have {len(data)} bytes")
    return data[pos:end]


def _read_uint(data: bytes, pos: int) -> int:
    return int.from_bytes(_read_word(data, pos), "big")


def _padded(n: int) -> int:
    return (n + WORD_SIZE - 1) // WORD_SIZE * WORD_SIZE


class _Budget:
    """Work allowance for one `decode_abi` call: one unit per data word.

    Every scalar read, offset followed and byte-string word costs one unit; a
    well-formed encoding never spends more units than it has words.
    """

    __slots__ = ("words", "remaining")

    def __init__(self, data: bytes) -> None:
        self.words = _padded(len(data)) // WORD_SIZE
        self.remaining = self.words

    def charge(self, units: int = 1) -> None:
        if units > self.remaining:
            raise DecodeError(f"Encoding references more values than its {self.words} words can hold")
        self.remaining -= units


# ---------- scalars ----------


def _decode_scalar(t: TypeDescriptor, word: bytes) -> Primitive:
    """Decode one static scalar from its 32-byte word."""
    match t:
        case AddressType():
            return Primitive(t, word[-20:])
        case BoolType():
            return Primitive(t, any(word))
        case FixedBytesType(size=size):
            return Primitive(t, word[:size])
        case UintType():
            return Primitive(t, int.from_bytes(word, "big", signed=False))
        case IntType():
            return Primitive(t, int.from_bytes(word, "big", signed=True))
    raise DecodeError(f"Not a static scalar type: {t!r}")


def _decode_byte_string(data: bytes, pos: int) -> tuple[bytes, int]:
    """Decode a length-prefixed byte string at `pos`; return (content, end)."""
    length = _read_uint(data, pos)
    start = pos + WORD_SIZE
    if length > len(data) - start:
        raise DecodeError(
            f"Length {length} at offset {pos} exceeds buffer ({len(data) - start} bytes available)"
        )
    end = min(start + _padded(length), len(data))
    return data[start : start + length], end


# ---------- tail-encoded (standard ABI) ----------


def _decode_sequence(
    types: Iterable[TypeDescriptor],
    data: bytes,
    base: int,
    budget: _Budget,
) -> tuple[list[DecodedToken], int]:
    """Decode `types` laid out as one head/tail region starting at `base`.

    Returns the tokens and the absolute end position of the furthest byte read.
    """
    tokens: list[DecodedToken] = []
    head = base
    end = base
    for t in types:
        if is_dynamic(t):
            offset = _read_uint(data, head)
            target = base + offset
            if target > len(data):
                raise DecodeError(f"Offset {offset} at {head} points outside buffer of {len(data)} bytes")
            budget.charge()
            token, tail_end = _decode_at(t, data, target, budget)
            end = max(end, tail_end)
        else:
            token, _ = _decode_at(t, data, head, budget)
        tokens.append(token)
        head += head_size(t)
        end = max(end, head)
    return tokens, end


def _decode_at(t: TypeDescriptor, data: bytes, pos: int, budget: _Budget) -> tuple[DecodedToken, int]:
    """Decode one value whose encoding starts at `pos`; return (token, end)."""
    match t:
        case StringType():
            raw, end = _decode_byte_string(data, pos)
            budget.charge(1 + _padded(len(raw)) // WORD_SIZE)
            return Primitive(t, raw.decode("utf-8", errors="replace")), end
        case BytesType():
            raw, end = _decode_byte_string(data, pos)
            budget.charge(1 + _padded(len(raw)) // WORD_SIZE)
            return Primitive(t, raw), end
        case ArrayType(element=element):
            count = _read_uint(data, pos)
            start = pos + WORD_SIZE
            available = len(data) - start
            if count * max(head_size(element), WORD_SIZE) > available:
                raise DecodeError(
                    f"Array at offset {pos} declares {count} elements "
                    f"but only {available} bytes remain"
                )
            items, end = _decode_sequence([element] * count, data, start, budget)
            return Sequence(tuple(items)), max(end, start)
        case FixedArrayType(element=element, length=length):
            items, end = _decode_sequence([element] * length, data, pos, budget)
            return Sequence(tuple(items)), end
        case TupleType(fields=fields):
            items, end = _decode_sequence([f.type for f in fields], data, pos, budget)
            return Composite(tuple(items)), end
    word = _read_word(data, pos)
    budget.charge()
    return _decode_scalar(t, word), pos + WORD_SIZE


def decode_abi(
    types: Iterable[TypeDescriptor],
    data: bytes,
) -> tuple[list[DecodedToken], int]:
    """Decode a standard ABI-encoded buffer into one token per type."""
    tokens, end = _decode_sequence(types, data, 0, _Budget(data))
    return tokens, end


# ---------- word-per-slot (topics) ----------


def decode_topic_words(
    types: Iterable[TypeDescriptor],
    data: bytes,
) -> tuple[list[DecodedToken], int]:
    """Decode concatenated topic words, one 32-byte word per type.

    Strings, bytes, arrays and tuples are only present as a hash of their
    encoding; those words are returned as opaque `bytes32` primitives.
    """
    tokens: list[DecodedToken] = []
    pos = 0
    for t in types:
        word = _read_word(data, pos)
        if is_hashed_in_topic(t):
            tokens.append(Primitive(FixedBytesType(WORD_SIZE), word, hashed=True))
        else:
            tokens.append(_decode_scalar(t, word))
        pos += WORD_SIZE
    return tokens, pos
