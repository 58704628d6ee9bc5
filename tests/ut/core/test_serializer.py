import pytest

from dynaval.core.errors import (
    BUILDER_FINALIZED,
    CodecError,
    KEY_MUST_BE_SET,
    KEY_MUST_BE_STRING,
    MAX_DEPTH_EXCEEDED,
)
from dynaval.core.models.wire import WireValue
from dynaval.core.ser.serializer import ValueSerializer, serialize
from tests.fake.fake_values import (
    DanglingKey,
    EndedTwice,
    Entries,
    Failing,
    Items,
    Leaky,
    Maybe,
    Pair,
    Record,
    Scalar,
    Tagged,
    TwoKeys,
    Unit,
    ValueWithoutKey,
    WriteAfterEnd,
    Wrapper,
)
from tests.helpers import lst, m, n, null, s, wire


@pytest.mark.ut
def test_serialize_bool():
    assert serialize(Scalar("bool", True)) == wire({"BOOL": True})
    assert serialize(Scalar("bool", False)) == wire({"BOOL": False})


@pytest.mark.ut
@pytest.mark.parametrize("op", ["i8", "i16", "i32", "i64", "u8", "u16", "u32", "u64"])
def test_every_integer_width_is_decimal_text(op):
    assert serialize(Scalar(op, 1)) == n("1")


@pytest.mark.ut
def test_serialize_floats():
    assert serialize(Scalar("f32", 1.234)) == n("1.234")
    assert serialize(Scalar("f64", 2.345)) == n("2.345")


@pytest.mark.ut
def test_serialize_text():
    assert serialize(Scalar("char", "a")) == s("a")
    assert serialize(Scalar("str", "hello")) == s("hello")


@pytest.mark.ut
def test_serialize_bytes_copies():
    payload = bytearray(b"\x00\xff")
    value = serialize(Scalar("bytes", payload))
    payload[0] = 1

    assert value == WireValue.of_bytes(b"\x00\xff")


@pytest.mark.ut
def test_option_is_not_wrapped():
    assert serialize(Maybe(Scalar("bool", True))) == wire({"BOOL": True})
    assert serialize(Maybe(None)) == null()


@pytest.mark.ut
def test_newtype_is_transparent():
    assert serialize(Wrapper(Scalar("u8", 7))) == n("7")


@pytest.mark.ut
def test_unit_shapes_are_null(encoder):
    assert serialize(Unit()) == null()
    assert encoder.serialize_unit_struct("Marker") == null()


@pytest.mark.ut
def test_serialize_sequence():
    value = Items(Scalar("i32", 1), Scalar("i32", 2), Scalar("i32", 3))

    assert serialize(value) == wire({"L": [{"N": "1"}, {"N": "2"}, {"N": "3"}]})
    assert serialize(Items()) == lst()


@pytest.mark.ut
def test_serialize_heterogeneous_tuple():
    value = Pair(Scalar("str", "hello"), Scalar("i32", 37))

    assert serialize(value) == wire({"L": [{"S": "hello"}, {"N": "37"}]})


@pytest.mark.ut
def test_serialize_tuple_struct(encoder):
    seq = encoder.serialize_tuple_struct("Point", 2)
    seq.serialize_element(Scalar("i32", 1))
    seq.serialize_field(Scalar("i32", 2))

    assert seq.end() == lst(n("1"), n("2"))


@pytest.mark.ut
def test_serialize_record():
    assert serialize(Record("hello", 1)) == wire({
        "M": {"a": {"S": "hello"}, "b": {"N": "1"}}
    })


@pytest.mark.ut
def test_struct_skip_field_writes_nothing(encoder):
    struct = encoder.serialize_struct("Sparse", 2)
    struct.serialize_field("a", Unit())
    struct.skip_field("b")

    assert struct.end() == m(a=null())


@pytest.mark.ut
def test_serialize_map():
    value = Entries([
        (Scalar("str", "x"), Scalar("i64", -1)),
        (Scalar("char", "y"), Maybe(None)),
    ])

    assert serialize(value) == m(x=n("-1"), y=null())


@pytest.mark.ut
def test_map_key_and_value_written_separately(encoder):
    builder = encoder.serialize_map()
    builder.serialize_key(Scalar("str", "k"))
    builder.serialize_value(Scalar("bool", True))

    assert builder.end() == m(k=WireValue.of_bool(True))


@pytest.mark.ut
@pytest.mark.parametrize("key", [Scalar("i32", 1), Scalar("bool", True), Unit(), Items()])
def test_map_key_must_be_string(key):
    with pytest.raises(CodecError) as exc:
        serialize(Entries([(key, Unit())]))

    assert exc.value == CodecError(KEY_MUST_BE_STRING)


@pytest.mark.ut
@pytest.mark.parametrize("value", [ValueWithoutKey(), DanglingKey(), TwoKeys()])
def test_map_key_must_be_set(value):
    with pytest.raises(CodecError) as exc:
        serialize(value)

    assert exc.value == CodecError(KEY_MUST_BE_SET)


@pytest.mark.ut
def test_map_value_errors_propagate():
    with pytest.raises(CodecError) as exc:
        serialize(Entries([(Scalar("str", "k"), Failing("no way"))]))

    assert exc.value == CodecError("no way")


@pytest.mark.ut
def test_unit_variant():
    assert serialize(Tagged("unit")) == wire({"M": {"Empty": {"NULL": True}}})


@pytest.mark.ut
def test_newtype_variant():
    assert serialize(Tagged("newtype", Scalar("str", "x"))) == m(Boxed=s("x"))


@pytest.mark.ut
def test_tuple_variant():
    value = Tagged("tuple", Scalar("i32", 1), Scalar("i32", 2))

    assert serialize(value) == wire({"M": {"Point": {"L": [{"N": "1"}, {"N": "2"}]}}})


@pytest.mark.ut
def test_struct_variant():
    value = Tagged("struct", Scalar("bool", True))

    assert serialize(value) == wire({"M": {"Named": {"M": {"f0": {"BOOL": True}}}}})


@pytest.mark.ut
@pytest.mark.parametrize("value", [EndedTwice(), WriteAfterEnd()])
def test_builder_cannot_be_reused(value):
    with pytest.raises(CodecError) as exc:
        serialize(value)

    assert exc.value == CodecError(BUILDER_FINALIZED)


@pytest.mark.ut
def test_custom_errors_propagate():
    with pytest.raises(CodecError) as exc:
        serialize(Items(Scalar("i8", 1), Failing("custom failure")))

    assert exc.value == CodecError("custom failure")


@pytest.mark.ut
def test_result_must_come_from_the_encoder():
    with pytest.raises(CodecError) as exc:
        serialize(Leaky())

    assert "expected the encoder result" in exc.value.message


@pytest.mark.ut
def test_depth_limit_counts_nesting():
    nested = Items(Items(Scalar("i8", 1)))

    assert serialize(nested, max_depth=2) == lst(lst(n("1")))

    with pytest.raises(CodecError) as exc:
        serialize(nested, max_depth=1)

    assert exc.value == CodecError(MAX_DEPTH_EXCEEDED)


@pytest.mark.ut
def test_depth_limit_zero_allows_scalars_and_empty_compounds():
    assert serialize(Scalar("i8", 1), max_depth=0) == n("1")
    assert serialize(Items(), max_depth=0) == lst()

    with pytest.raises(CodecError):
        serialize(Items(Scalar("i8", 1)), max_depth=0)


@pytest.mark.ut
def test_option_and_newtype_do_not_add_depth():
    value = Maybe(Wrapper(Items(Scalar("i8", 1))))

    assert serialize(value, max_depth=1) == lst(n("1"))


@pytest.mark.ut
def test_variant_payload_adds_one_level():
    assert serialize(Tagged("newtype", Scalar("i8", 1)), max_depth=1) == m(Boxed=n("1"))
    assert serialize(Tagged("tuple", Scalar("i8", 1)), max_depth=1) == m(Point=lst(n("1")))

    with pytest.raises(CodecError):
        serialize(Tagged("newtype", Scalar("i8", 1)), max_depth=0)


@pytest.mark.ut
def test_depth_limit_on_constructor():
    with pytest.raises(CodecError):
        ValueSerializer(max_depth=0, depth=1)
