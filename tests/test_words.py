import pytest
from eth_abi import encode

from shadowlogs.core.exceptions import DecodeError
from shadowlogs.decoding.render import stringify
from shadowlogs.decoding.specs import ParameterSchema
from shadowlogs.decoding.types import (
    AddressType,
    ArrayType,
    BoolType,
    BytesType,
    FixedArrayType,
    FixedBytesType,
    IntType,
    StringType,
    TupleType,
    UintType,
    resolve_type,
)
from shadowlogs.decoding.words import Composite, Primitive, Sequence, decode_abi, decode_topic_words


def test_decode_static_scalars() -> None:
    addr = "0x" + "11" * 20
    data = encode(
        ["uint256", "int8", "bool", "address", "bytes4"],
        [7, -5, True, addr, b"\xde\xad\xbe\xef"],
    )
    tokens, end = decode_abi(
        [UintType(256), IntType(8), BoolType(), AddressType(), FixedBytesType(4)],
        data,
    )
    assert end == len(data) == 160
    assert tokens == [
        Primitive(UintType(256), 7),
        Primitive(IntType(8), -5),
        Primitive(BoolType(), True),
        Primitive(AddressType(), bytes.fromhex("11" * 20)),
        Primitive(FixedBytesType(4), b"\xde\xad\xbe\xef"),
    ]


def test_decode_dynamic_values() -> None:
    data = encode(["string", "uint256", "bytes"], ["hello", 42, b"\x01\x02\x03"])
    tokens, end = decode_abi([StringType(), UintType(256), BytesType()], data)
    assert end == len(data)
    assert tokens == [
        Primitive(StringType(), "hello"),
        Primitive(UintType(256), 42),
        Primitive(BytesType(), b"\x01\x02\x03"),
    ]


def test_decode_nested_dynamic_arrays() -> None:
    data = encode(["uint256[][]"], [[[1, 2], [3], []]])
    tokens, _ = decode_abi([resolve_type("uint256[][]")], data)
    assert stringify(tokens[0]) == "[[1,2],[3],[]]"


def test_decode_fixed_array_of_strings() -> None:
    data = encode(["string[2]"], [["x", "yz"]])
    tokens, end = decode_abi([FixedArrayType(StringType(), 2)], data)
    assert end == len(data)
    assert tokens[0] == Sequence((Primitive(StringType(), "x"), Primitive(StringType(), "yz")))


def test_decode_static_fixed_array_in_head() -> None:
    data = encode(["uint8[3]", "bool"], [[1, 2, 3], False])
    tokens, end = decode_abi([FixedArrayType(UintType(8), 3), BoolType()], data)
    assert end == 128
    assert stringify(tokens[0]) == "[1,2,3]"
    assert tokens[1] == Primitive(BoolType(), False)


def test_decode_dynamic_tuple_array() -> None:
    fields = (ParameterSchema.build("label", "string"), ParameterSchema.build("amount", "uint256"))
    t = ArrayType(TupleType(fields))
    data = encode(["(string,uint256)[]"], [[("a", 1), ("bc", 2)]])

    tokens, end = decode_abi([t], data)

    assert end == len(data)
    assert tokens[0] == Sequence(
        (
            Composite((Primitive(StringType(), "a"), Primitive(UintType(256), 1))),
            Composite((Primitive(StringType(), "bc"), Primitive(UintType(256), 2))),
        )
    )


def test_decode_is_deterministic() -> None:
    data = encode(["(uint8,string)[]", "bytes"], [[(1, "one"), (2, "two")], b"\xff"])
    types = [resolve_type("tuple[]", (ParameterSchema.build("n", "uint8"), ParameterSchema.build("s", "string"))), BytesType()]
    assert decode_abi(types, data) == decode_abi(types, data)


def test_decode_empty() -> None:
    assert decode_abi([], b"") == ([], 0)


def test_truncated_head_raises() -> None:
    with pytest.raises(DecodeError):
        decode_abi([UintType(256)], b"\x00" * 31)


def test_offset_out_of_range_raises() -> None:
    data = (1000).to_bytes(32, "big")
    with pytest.raises(DecodeError):
        decode_abi([StringType()], data)


def test_length_out_of_range_raises() -> None:
    data = (32).to_bytes(32, "big") + (500).to_bytes(32, "big") + b"abc".ljust(32, b"\x00")
    with pytest.raises(DecodeError):
        decode_abi([BytesType()], data)


def test_array_count_out_of_range_raises() -> None:
    data = (32).to_bytes(32, "big") + (2**200).to_bytes(32, "big")
    with pytest.raises(DecodeError):
        decode_abi([ArrayType(UintType(256))], data)


def test_decode_topic_words() -> None:
    addr_word = bytes(12) + bytes.fromhex("22" * 20)
    hash_word = bytes.fromhex("ab" * 32)
    value_word = (5).to_bytes(32, "big")

    tokens, consumed = decode_topic_words(
        [AddressType(), StringType(), UintType(256)],
        addr_word + hash_word + value_word,
    )

    assert consumed == 96
    assert tokens == [
        Primitive(AddressType(), bytes.fromhex("22" * 20)),
        Primitive(FixedBytesType(32), hash_word, hashed=True),
        Primitive(UintType(256), 5),
    ]


def test_decode_topic_words_short_buffer() -> None:
    with pytest.raises(DecodeError):
        decode_topic_words([AddressType(), AddressType()], bytes(40))


def test_static_tuple_is_inlined_in_head() -> None:
    who = "0x" + "ab" * 20
    fields = (ParameterSchema.build("who", "address"), ParameterSchema.build("amt", "uint256"))
    data = encode(["(address,uint256)", "bool"], [(who, 69 * 10**18), True])

    tokens, end = decode_abi([TupleType(fields), BoolType()], data)

    assert end == len(data) == 96
    assert tokens == [
        Composite((Primitive(AddressType(), bytes.fromhex("ab" * 20)), Primitive(UintType(256), 69 * 10**18))),
        Primitive(BoolType(), True),
    ]


def _reused_inner_array(n: int) -> bytes:
    """`uint256[][]` whose n inner offsets all point at one n-element array."""
    words = [32, n] + [n * 32] * n + [n] + list(range(n))
    return b"".join(w.to_bytes(32, "big") for w in words)


def test_reused_offsets_exhaust_budget() -> None:
    data = _reused_inner_array(200)
    with pytest.raises(DecodeError, match="more values"):
        decode_abi([resolve_type("uint256[][]")], data)


def test_reused_string_offsets_exhaust_budget() -> None:
    n = 50
    content = b"x" * (32 * n)
    # n head offsets, all pointing at the same long string
    words = [n * 32] * n + [len(content)]
    data = b"".join(w.to_bytes(32, "big") for w in words) + content
    with pytest.raises(DecodeError, match="more values"):
        decode_abi([StringType()] * n, data)


def test_single_inner_array_within_budget() -> None:
    data = _reused_inner_array(1)
    tokens, _ = decode_abi([resolve_type("uint256[][]")], data)
    assert stringify(tokens[0]) == "[[0]]"
