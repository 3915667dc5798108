from shadowlogs.decoding.render import render_typed, render_value, render_values, stringify
from shadowlogs.decoding.specs import ParameterSchema
from shadowlogs.decoding.types import AddressType, BoolType, BytesType, FixedBytesType, IntType, StringType, UintType
from shadowlogs.decoding.words import Composite, Primitive, Sequence

ADDR = bytes.fromhex("ab" * 20)


def test_stringify_scalars() -> None:
    assert stringify(Primitive(AddressType(), ADDR)) == "0x" + "ab" * 20
    assert stringify(Primitive(BytesType(), b"\x00\x0f")) == "000f"
    assert stringify(Primitive(FixedBytesType(2), b"\xca\xfe")) == "cafe"
    assert stringify(Primitive(UintType(256), 10**30)) == "1000000000000000000000000000000"
    assert stringify(Primitive(IntType(24), -3)) == "-3"
    assert stringify(Primitive(BoolType(), True)) == "true"
    assert stringify(Primitive(BoolType(), False)) == "false"
    assert stringify(Primitive(StringType(), "gm")) == "gm"


def test_stringify_nested() -> None:
    token = Sequence(
        (
            Composite((Primitive(UintType(8), 1), Primitive(AddressType(), ADDR))),
            Composite((Primitive(UintType(8), 2), Primitive(AddressType(), ADDR))),
        )
    )
    assert stringify(token) == f"[(1,0x{'ab' * 20}),(2,0x{'ab' * 20})]"


def test_render_plain_array_is_list_of_strings() -> None:
    param = ParameterSchema.build("ids", "uint256[]")
    token = Sequence((Primitive(UintType(256), 1), Primitive(UintType(256), 2)))
    assert render_value(param, token) == ["1", "2"]


def test_render_nested_plain_array_elements_are_bracketed() -> None:
    param = ParameterSchema.build("grid", "uint8[][]")
    token = Sequence(
        (
            Sequence((Primitive(UintType(8), 1), Primitive(UintType(8), 2))),
            Sequence((Primitive(UintType(8), 3),)),
        )
    )
    assert render_value(param, token) == ["[1,2]", "[3]"]


def test_render_tuple_and_tuple_array() -> None:
    components = (ParameterSchema.build("kind", "uint8"), ParameterSchema.build("who", "address"))
    single = ParameterSchema.build("item", "tuple", components=components)
    many = ParameterSchema.build("items", "tuple[]", components=components)
    item = Composite((Primitive(UintType(8), 2), Primitive(AddressType(), ADDR)))

    assert render_value(single, item) == {"kind": "2", "who": "0x" + "ab" * 20}
    assert render_value(many, Sequence((item, item))) == [
        {"kind": "2", "who": "0x" + "ab" * 20},
        {"kind": "2", "who": "0x" + "ab" * 20},
    ]
    assert render_value(many, Sequence(())) == []


def test_render_nested_tuple_components() -> None:
    inner = (ParameterSchema.build("x", "uint256"), ParameterSchema.build("ys", "bool[]"))
    outer = (ParameterSchema.build("inner", "tuple", components=inner), ParameterSchema.build("tag", "string"))
    param = ParameterSchema.build("root", "tuple", components=outer)
    token = Composite(
        (
            Composite((Primitive(UintType(256), 9), Sequence((Primitive(BoolType(), True),)))),
            Primitive(StringType(), "t"),
        )
    )
    assert render_value(param, token) == {"inner": {"x": "9", "ys": ["true"]}, "tag": "t"}


def test_render_hashed_topic_for_complex_param() -> None:
    components = (ParameterSchema.build("a", "uint8"),)
    param = ParameterSchema.build("item", "tuple", components=components, indexed=True)
    token = Primitive(FixedBytesType(32), b"\x11" * 32, hashed=True)
    assert render_value(param, token) == "11" * 32


def test_render_typed() -> None:
    components = (ParameterSchema.build("kind", "uint8"), ParameterSchema.build("ok", "bool"))
    param = ParameterSchema.build("items", "tuple[]", components=components)
    token = Sequence((Composite((Primitive(UintType(8), 4), Primitive(BoolType(), True))),))
    assert render_typed(param, token) == [{"kind": 4, "ok": True}]
    assert render_typed(ParameterSchema.build("v", "int8"), Primitive(IntType(8), -1)) == -1


def test_render_values_keeps_order() -> None:
    params = [ParameterSchema.build("b", "uint8"), ParameterSchema.build("a", "bool")]
    tokens = [Primitive(UintType(8), 1), Primitive(BoolType(), False)]
    rendered = render_values(params, tokens)
    assert list(rendered) == ["b", "a"]
    assert rendered == {"b": "1", "a": "false"}
