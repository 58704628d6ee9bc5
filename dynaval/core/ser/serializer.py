from typing import Any

from dynaval.core.errors import CodecError, MAX_DEPTH_EXCEEDED
from dynaval.core.helpers.numbers import format_f32, format_f64, format_int
from dynaval.core.models.wire import WireValue
from dynaval.core.ports.encoder import Serialize
from dynaval.core.ser.compound import (
    MapBuilder,
    SeqBuilder,
    StructBuilder,
    StructVariantBuilder,
    TupleVariantBuilder,
)


class ValueSerializer:
    """
    Encoder producing WireValue trees.

    Scalars map to the matching wire field; every integer width and both
    float widths travel as decimal text in `N`. Compound shapes hand out
    a fresh builder, and every nested value is described to a child
    serializer one level deeper so an optional depth limit can be enforced.
    """

    def __init__(self, max_depth: int | None = None, depth: int = 0) -> None:
        if max_depth is not None and depth > max_depth:
            raise CodecError(MAX_DEPTH_EXCEEDED)
        self._max_depth = max_depth
        self._depth = depth

    def nested(self) -> "ValueSerializer":
        """Serializer for a value one level below this one."""
        return ValueSerializer(max_depth=self._max_depth, depth=self._depth + 1)

    def describe(self, value: Serialize) -> WireValue:
        """Serialize a nested value."""
        return value.serialize(self.nested())

    # Scalars

    def serialize_bool(self, value: bool) -> WireValue:
        return WireValue.of_bool(bool(value))

    def _serialize_int(self, value: int) -> WireValue:
        return WireValue.of_number(format_int(value))

    serialize_i8 = _serialize_int
    serialize_i16 = _serialize_int
    serialize_i32 = _serialize_int
    serialize_i64 = _serialize_int
    serialize_u8 = _serialize_int
    serialize_u16 = _serialize_int
    serialize_u32 = _serialize_int
    serialize_u64 = _serialize_int

    def serialize_f32(self, value: float) -> WireValue:
        return WireValue.of_number(format_f32(value))

    def serialize_f64(self, value: float) -> WireValue:
        return WireValue.of_number(format_f64(value))

    def serialize_char(self, value: str) -> WireValue:
        return WireValue.of_string(value)

    def serialize_str(self, value: str) -> WireValue:
        return WireValue.of_string(value)

    def serialize_bytes(self, value: bytes) -> WireValue:
        return WireValue.of_bytes(value)

    # Option, unit and newtype

    def serialize_none(self) -> WireValue:
        return self.serialize_unit()

    def serialize_some(self, value: Serialize) -> WireValue:
        return value.serialize(self)

    def serialize_unit(self) -> WireValue:
        return WireValue.of_null()

    def serialize_unit_struct(self, name: str) -> WireValue:
        return self.serialize_unit()

    def serialize_newtype_struct(self, name: str, value: Serialize) -> WireValue:
        return value.serialize(self)

    # Variants are single-entry maps keyed by the variant name, so the
    # payload keeps the same wire shape it would have on its own.

    def serialize_unit_variant(self, name: str, index: int, variant: str) -> WireValue:
        return WireValue.of_map({variant: WireValue.of_null()})

    def serialize_newtype_variant(
        self,
        name: str,
        index: int,
        variant: str,
        value: Serialize
    ) -> WireValue:
        return WireValue.of_map({variant: self.describe(value)})

    # Compounds

    def serialize_seq(self, length: int | None = None) -> SeqBuilder:
        return SeqBuilder(self)

    def serialize_tuple(self, length: int) -> SeqBuilder:
        return SeqBuilder(self)

    def serialize_tuple_struct(self, name: str, length: int) -> SeqBuilder:
        return SeqBuilder(self)

    def serialize_tuple_variant(
        self,
        name: str,
        index: int,
        variant: str,
        length: int
    ) -> TupleVariantBuilder:
        return TupleVariantBuilder(self, variant)

    def serialize_map(self, length: int | None = None) -> MapBuilder:
        return MapBuilder(self)

    def serialize_struct(self, name: str, length: int) -> StructBuilder:
        return StructBuilder(self)

    def serialize_struct_variant(
        self,
        name: str,
        index: int,
        variant: str,
        length: int
    ) -> StructVariantBuilder:
        return StructVariantBuilder(self, variant)


def serialize(value: Serialize, max_depth: int | None = None) -> WireValue:
    """
    Describe `value` to a fresh ValueSerializer and return the WireValue.
    Raises CodecError on any failure.
    """
    result: Any = value.serialize(ValueSerializer(max_depth=max_depth))
    if not isinstance(result, WireValue):
        raise CodecError.custom(
            f"{type(value).__name__}.serialize returned {type(result).__name__}, "
            "expected the encoder result"
        )
    return result
