import pytest

from dynaval.core.errors import CodecError
from dynaval.core.models.wire import WireValue
from tests.helpers import lst, m, n, null, s, wire


@pytest.mark.ut
def test_constructors_populate_one_field():
    assert WireValue.of_bool(True).kind == "BOOL"
    assert WireValue.of_number("1").kind == "N"
    assert WireValue.of_string("a").kind == "S"
    assert WireValue.of_bytes(b"\x00").kind == "B"
    assert WireValue.of_null().kind == "NULL"
    assert WireValue.of_list([]).kind == "L"
    assert WireValue.of_map({}).kind == "M"


@pytest.mark.ut
def test_kind_is_none_for_empty_or_ambiguous():
    assert WireValue().kind is None
    assert WireValue().populated() == []

    ambiguous = WireValue(boolean=True, string="x")
    assert ambiguous.kind is None
    assert ambiguous.populated() == ["BOOL", "S"]


@pytest.mark.ut
def test_construction_normalizes_containers():
    elements = [n("1")]
    entries = {"a": n("1")}
    value = WireValue(elements=elements, entries=entries, byte_string=bytearray(b"ab"))

    elements.append(n("2"))
    entries["b"] = n("2")

    assert value.elements == (n("1"),)
    assert value.entries == {"a": n("1")}
    assert value.byte_string == b"ab"
    assert isinstance(value.byte_string, bytes)


@pytest.mark.ut
def test_wire_value_is_frozen():
    value = n("1")

    with pytest.raises(AttributeError):
        value.number = "2"


@pytest.mark.ut
def test_map_entries_are_read_only():
    value = m(a=n("1"))

    with pytest.raises(TypeError):
        value.entries["b"] = n("2")

    assert dict(value.entries) == {"a": n("1")}


@pytest.mark.ut
def test_wire_values_are_hashable():
    first = m(a=n("1"), b=lst(s("x")))
    second = WireValue.of_map({"b": lst(s("x")), "a": n("1")})

    assert first == second
    assert hash(first) == hash(second)
    assert len({first, second, m(a=n("2"))}) == 2
    assert hash(WireValue()) == hash(WireValue())


@pytest.mark.ut
def test_to_dict_is_recursive():
    value = m(a=s("hello"), b=lst(n("1"), null()))

    assert value.to_dict() == {
        "M": {
            "a": {"S": "hello"},
            "b": {"L": [{"N": "1"}, {"NULL": True}]},
        }
    }


@pytest.mark.ut
def test_from_dict_rebuilds_tree():
    data = {"M": {"k": {"L": [{"B": b"\x01"}, {"BOOL": False}]}}}

    assert wire(data) == m(k=lst(WireValue.of_bytes(b"\x01"), WireValue.of_bool(False)))
    assert wire(data).to_dict() == data


@pytest.mark.ut
def test_from_dict_unknown_field():
    with pytest.raises(CodecError) as exc:
        wire({"SS": ["a"]})

    assert exc.value == CodecError("Unknown Wire Field 'SS'")


@pytest.mark.ut
@pytest.mark.parametrize("data, name", [
    ({"N": 1}, "N"),
    ({"BOOL": "true"}, "BOOL"),
    ({"B": "text"}, "B"),
    ({"L": {"a": 1}}, "L"),
    ({"M": {1: {"N": "1"}}}, "M"),
])
def test_from_dict_malformed_field(data, name):
    with pytest.raises(CodecError) as exc:
        wire(data)

    assert exc.value == CodecError(f"Malformed Wire Field '{name}'")


@pytest.mark.ut
def test_from_dict_rejects_non_mapping():
    with pytest.raises(CodecError) as exc:
        wire({"L": ["not a map"]})

    assert exc.value == CodecError("Malformed Wire Value")


@pytest.mark.ut
def test_from_dict_keeps_empty_value():
    assert wire({}) == WireValue()
