from typing import TYPE_CHECKING, Any, Iterator, Mapping, Sequence

from dynaval.core.errors import (
    CodecError,
    LIST_VALUE_EXPECTED,
    MAP_VALUE_EXPECTED,
    NULL_VALUE_EXPECTED,
    VALUE_EXPECTED,
)
from dynaval.core.models.wire import WireValue
from dynaval.core.ports.decoder import EXHAUSTED, Seed, Visitor

if TYPE_CHECKING:
    from dynaval.core.de.deserializer import ValueDeserializer


class SeqReader:
    """
    Cursor over a wire list. Each call decodes one element with a
    deserializer one level deeper; once the list is exhausted every
    further call returns EXHAUSTED.
    """

    def __init__(self, parent: "ValueDeserializer", values: Sequence[WireValue]) -> None:
        self._parent = parent
        self._values: Iterator[WireValue] = iter(values)
        self._remaining = len(values)

    def next_element(self, seed: Seed) -> Any:
        value = next(self._values, None)
        if value is None:
            return EXHAUSTED

        self._remaining -= 1
        return seed(self._parent.nested(value))

    def size_hint(self) -> int | None:
        return self._remaining


class MapReader:
    """
    Two cursors walking the keys and the values of the same wire map.

    A dict yields keys() and values() in the same order, so the cursors
    stay aligned as long as callers alternate next_key / next_value. The
    value cursor is never allowed to run ahead of the key cursor.
    """

    def __init__(self, parent: "ValueDeserializer", entries: Mapping[str, WireValue]) -> None:
        self._parent = parent
        self._keys: Iterator[str] = iter(entries.keys())
        self._values: Iterator[WireValue] = iter(entries.values())
        self._keys_read = 0
        self._values_read = 0
        self._size = len(entries)

    def next_key(self, seed: Seed) -> Any:
        key = next(self._keys, None)
        if key is None:
            return EXHAUSTED

        self._keys_read += 1
        return seed(KeyDecoder(key))

    def next_value(self, seed: Seed) -> Any:
        if self._values_read >= self._keys_read:
            raise CodecError(VALUE_EXPECTED)

        value = next(self._values, None)
        if value is None:
            raise CodecError(VALUE_EXPECTED)

        self._values_read += 1
        return seed(self._parent.nested(value))

    def size_hint(self) -> int | None:
        return self._size - self._keys_read


class EnumReader:
    """
    Reads a variant encoded as {tag: payload}: the tag goes through a
    KeyDecoder, the payload is handed to a VariantReader.
    """

    def __init__(self, parent: "ValueDeserializer", key: str, value: WireValue) -> None:
        self._parent = parent
        self._key = key
        self._value = value

    def variant(self, seed: Seed) -> tuple[Any, "VariantReader"]:
        tag = seed(KeyDecoder(self._key))
        return tag, VariantReader(self._parent, self._value)


class VariantReader:
    """Payload reader selected by the variant kind the target declares."""

    def __init__(self, parent: "ValueDeserializer", value: WireValue) -> None:
        self._parent = parent
        self._value = value

    def unit_variant(self) -> None:
        if self._value.null is not True:
            raise CodecError(NULL_VALUE_EXPECTED)

    def newtype_variant(self, seed: Seed) -> Any:
        return seed(self._parent.nested(self._value))

    def tuple_variant(self, length: int, visitor: Visitor) -> Any:
        if self._value.elements is None:
            raise CodecError(LIST_VALUE_EXPECTED)
        return visitor.visit_seq(SeqReader(self._parent, self._value.elements))

    def struct_variant(self, fields: Sequence[str], visitor: Visitor) -> Any:
        if self._value.entries is None:
            raise CodecError(MAP_VALUE_EXPECTED)
        return visitor.visit_map(MapReader(self._parent, self._value.entries))


class KeyDecoder:
    """
    Decoder over a map key or a variant tag. Keys are always text on the
    wire, so every request is answered with visit_str regardless of
    the shape asked for.
    """

    def __init__(self, key: str) -> None:
        self._key = key

    def deserialize_any(self, visitor: Visitor) -> Any:
        return visitor.visit_str(self._key)

    deserialize_bool = deserialize_any
    deserialize_i8 = deserialize_any
    deserialize_i16 = deserialize_any
    deserialize_i32 = deserialize_any
    deserialize_i64 = deserialize_any
    deserialize_u8 = deserialize_any
    deserialize_u16 = deserialize_any
    deserialize_u32 = deserialize_any
    deserialize_u64 = deserialize_any
    deserialize_f32 = deserialize_any
    deserialize_f64 = deserialize_any
    deserialize_char = deserialize_any
    deserialize_str = deserialize_any
    deserialize_string = deserialize_any
    deserialize_bytes = deserialize_any
    deserialize_byte_buf = deserialize_any
    deserialize_option = deserialize_any
    deserialize_unit = deserialize_any
    deserialize_seq = deserialize_any
    deserialize_map = deserialize_any
    deserialize_identifier = deserialize_any
    deserialize_ignored_any = deserialize_any

    def deserialize_unit_struct(self, name: str, visitor: Visitor) -> Any:
        return self.deserialize_any(visitor)

    def deserialize_newtype_struct(self, name: str, visitor: Visitor) -> Any:
        return self.deserialize_any(visitor)

    def deserialize_tuple(self, length: int, visitor: Visitor) -> Any:
        return self.deserialize_any(visitor)

    def deserialize_tuple_struct(self, name: str, length: int, visitor: Visitor) -> Any:
        return self.deserialize_any(visitor)

    def deserialize_struct(self, name: str, fields: Sequence[str], visitor: Visitor) -> Any:
        return self.deserialize_any(visitor)

    def deserialize_enum(self, name: str, variants: Sequence[str], visitor: Visitor) -> Any:
        return self.deserialize_any(visitor)
