from typing import Any, Sequence

from dynaval.core.de.access import EnumReader, MapReader, SeqReader
from dynaval.core.errors import (
    BOOLEAN_VALUE_EXPECTED,
    BYTE_VECTOR_EXPECTED,
    CHAR_STRING_EXPECTED,
    CodecError,
    KEY_VALUE_EXPECTED,
    LIST_VALUE_EXPECTED,
    MAP_VALUE_EXPECTED,
    MAX_DEPTH_EXCEEDED,
    NON_ZERO_LENGTH_STRING_EXPECTED,
    NULL_VALUE_EXPECTED,
    NUMBER_VALUE_EXPECTED,
    STRING_VALUE_EXPECTED,
    SUPPORTED_VALUE_EXPECTED,
)
from dynaval.core.helpers.numbers import INT_RANGES, parse_integer, parse_number
from dynaval.core.models.wire import WireValue
from dynaval.core.ports.decoder import Seed, Visitor


class ValueDeserializer:
    """
    Decoder positioned on one WireValue.

    `deserialize_any` is self-describing: it inspects which wire field is
    populated and picks the visitor callback. Every other entry point is
    shape-directed: the target declares what it expects, the matching
    field is required, and only then is the visitor called.

    The input tree is only read, never modified. Nested values get their
    own deserializer one level deeper.
    """

    def __init__(
        self,
        value: WireValue,
        max_depth: int | None = None,
        depth: int = 0
    ) -> None:
        if max_depth is not None and depth > max_depth:
            raise CodecError(MAX_DEPTH_EXCEEDED)
        self._value = value
        self._max_depth = max_depth
        self._depth = depth

    def nested(self, value: WireValue) -> "ValueDeserializer":
        return ValueDeserializer(value, max_depth=self._max_depth, depth=self._depth + 1)

    # Self-describing dispatch

    def deserialize_any(self, visitor: Visitor) -> Any:
        value = self._value

        if value.boolean is not None:
            return visitor.visit_bool(value.boolean)
        if value.elements is not None:
            return visitor.visit_seq(SeqReader(self, value.elements))
        if value.entries is not None:
            return visitor.visit_map(MapReader(self, value.entries))
        if value.number is not None:
            return self._visit_number(value.number, visitor)
        if value.null is not None:
            return visitor.visit_unit()
        if value.string is not None:
            return visitor.visit_str(value.string)

        raise CodecError(SUPPORTED_VALUE_EXPECTED)

    @staticmethod
    def _visit_number(text: str, visitor: Visitor, unsigned: bool = False) -> Any:
        if unsigned:
            # above the i64 range an unsigned target still reads exact digits
            low, high = INT_RANGES["u64"]
            number = parse_integer(text)
            if number is not None and low <= number <= high:
                return visitor.visit_u64(number)

        number = parse_number(text)
        if isinstance(number, int):
            return visitor.visit_i64(number)
        return visitor.visit_f64(number)

    # Shape-directed dispatch

    def _require(self, attr: str, message: str) -> Any:
        found = getattr(self._value, attr)
        if found is None:
            raise CodecError(message)
        return found

    def deserialize_bool(self, visitor: Visitor) -> Any:
        return visitor.visit_bool(self._require("boolean", BOOLEAN_VALUE_EXPECTED))

    def _deserialize_number(self, visitor: Visitor) -> Any:
        return self._visit_number(self._require("number", NUMBER_VALUE_EXPECTED), visitor)

    def _deserialize_unsigned(self, visitor: Visitor) -> Any:
        return self._visit_number(
            self._require("number", NUMBER_VALUE_EXPECTED),
            visitor,
            unsigned=True
        )

    deserialize_i8 = _deserialize_number
    deserialize_i16 = _deserialize_number
    deserialize_i32 = _deserialize_number
    deserialize_i64 = _deserialize_number
    deserialize_f32 = _deserialize_number
    deserialize_f64 = _deserialize_number
    deserialize_u8 = _deserialize_unsigned
    deserialize_u16 = _deserialize_unsigned
    deserialize_u32 = _deserialize_unsigned
    deserialize_u64 = _deserialize_unsigned

    def deserialize_char(self, visitor: Visitor) -> Any:
        text = self._require("string", CHAR_STRING_EXPECTED)
        if not text:
            raise CodecError(NON_ZERO_LENGTH_STRING_EXPECTED)
        # longer strings are accepted, the first character wins
        return visitor.visit_char(text[0])

    def deserialize_str(self, visitor: Visitor) -> Any:
        return visitor.visit_str(self._require("string", STRING_VALUE_EXPECTED))

    deserialize_string = deserialize_str

    def deserialize_bytes(self, visitor: Visitor) -> Any:
        return visitor.visit_bytes(self._require("byte_string", BYTE_VECTOR_EXPECTED))

    deserialize_byte_buf = deserialize_bytes

    def deserialize_option(self, visitor: Visitor) -> Any:
        # Only an explicit NULL: true means absent. Anything else, an empty
        # value included, is "present" and decoded again as the inner shape.
        if self._value.null is True:
            return visitor.visit_none()
        return visitor.visit_some(self)

    def deserialize_unit(self, visitor: Visitor) -> Any:
        self._require("null", NULL_VALUE_EXPECTED)
        return visitor.visit_unit()

    def deserialize_unit_struct(self, name: str, visitor: Visitor) -> Any:
        return self.deserialize_unit(visitor)

    def deserialize_newtype_struct(self, name: str, visitor: Visitor) -> Any:
        return visitor.visit_newtype_struct(self)

    def deserialize_seq(self, visitor: Visitor) -> Any:
        return visitor.visit_seq(SeqReader(self, self._require("elements", LIST_VALUE_EXPECTED)))

    def deserialize_tuple(self, length: int, visitor: Visitor) -> Any:
        return self.deserialize_seq(visitor)

    def deserialize_tuple_struct(self, name: str, length: int, visitor: Visitor) -> Any:
        return self.deserialize_seq(visitor)

    def deserialize_map(self, visitor: Visitor) -> Any:
        return visitor.visit_map(MapReader(self, self._require("entries", MAP_VALUE_EXPECTED)))

    def deserialize_struct(self, name: str, fields: Sequence[str], visitor: Visitor) -> Any:
        return self.deserialize_map(visitor)

    def deserialize_enum(self, name: str, variants: Sequence[str], visitor: Visitor) -> Any:
        entries = self._require("entries", MAP_VALUE_EXPECTED)
        # Only the first entry is read. A conforming writer emits exactly
        # one; extra entries from other writers are not detected.
        first = next(iter(entries.items()), None)
        if first is None:
            raise CodecError(KEY_VALUE_EXPECTED)

        key, value = first
        return visitor.visit_enum(EnumReader(self, key, value))

    def deserialize_identifier(self, visitor: Visitor) -> Any:
        return self.deserialize_str(visitor)

    def deserialize_ignored_any(self, visitor: Visitor) -> Any:
        return visitor.visit_unit()


def deserialize(value: WireValue, seed: Seed, max_depth: int | None = None) -> Any:
    """
    Rebuild a value from `value` with the target shape's `seed`.
    Raises CodecError on any failure.
    """
    return seed(ValueDeserializer(value, max_depth=max_depth))
