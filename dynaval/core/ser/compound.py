from typing import TYPE_CHECKING

from dynaval.core.errors import (
    BUILDER_FINALIZED,
    CodecError,
    KEY_MUST_BE_SET,
    KEY_MUST_BE_STRING,
)
from dynaval.core.models.wire import WireValue
from dynaval.core.ports.encoder import Serialize

if TYPE_CHECKING:
    from dynaval.core.ser.serializer import ValueSerializer


class _Builder:
    """
    Accumulator owned by a single serialize call.
    Once `end()` has produced the WireValue the builder is spent.
    """

    def __init__(self, serializer: "ValueSerializer") -> None:
        self._serializer = serializer
        self._finished = False

    def _check_open(self) -> None:
        if self._finished:
            raise CodecError(BUILDER_FINALIZED)

    def _finish(self) -> None:
        self._check_open()
        self._finished = True


class SeqBuilder(_Builder):
    """
    Builds `L` for sequences, tuples and tuple-structs. Tuples are written
    as lists too, so a heterogeneous tuple becomes a heterogeneous list.
    """

    def __init__(self, serializer: "ValueSerializer") -> None:
        super().__init__(serializer)
        self._values: list[WireValue] = []

    def serialize_element(self, value: Serialize) -> None:
        self._check_open()
        self._values.append(self._serializer.describe(value))

    # tuple-structs name their positional slots "fields"
    serialize_field = serialize_element

    def end(self) -> WireValue:
        self._finish()
        return WireValue.of_list(self._values)


class MapBuilder(_Builder):
    """
    Builds `M` for string-keyed maps.

    Each key is serialized on its own and must come out as a wire string.
    The key is then held until its value arrives; a value without a key,
    or a key never followed by a value, is rejected.
    """

    def __init__(self, serializer: "ValueSerializer") -> None:
        super().__init__(serializer)
        self._key: str | None = None
        self._values: dict[str, WireValue] = {}

    def serialize_key(self, key: Serialize) -> None:
        self._check_open()
        if self._key is not None:
            raise CodecError(KEY_MUST_BE_SET)

        encoded = key.serialize(self._serializer.nested())
        if not isinstance(encoded, WireValue) or encoded.string is None:
            raise CodecError(KEY_MUST_BE_STRING)

        self._key = encoded.string

    def serialize_value(self, value: Serialize) -> None:
        self._check_open()
        if self._key is None:
            raise CodecError(KEY_MUST_BE_SET)

        self._values[self._key] = self._serializer.describe(value)
        self._key = None

    def serialize_entry(self, key: Serialize, value: Serialize) -> None:
        self.serialize_key(key)
        self.serialize_value(value)

    def end(self) -> WireValue:
        if self._key is not None:
            raise CodecError(KEY_MUST_BE_SET)
        self._finish()
        return WireValue.of_map(self._values)


class StructBuilder(_Builder):
    """
    Builds `M` for records. Field names are already strings, so no key
    check is needed.
    """

    def __init__(self, serializer: "ValueSerializer") -> None:
        super().__init__(serializer)
        self._values: dict[str, WireValue] = {}

    def serialize_field(self, name: str, value: Serialize) -> None:
        self._check_open()
        self._values[name] = self._serializer.describe(value)

    def skip_field(self, name: str) -> None:
        self._check_open()

    def end(self) -> WireValue:
        self._finish()
        return WireValue.of_map(self._values)


class TupleVariantBuilder(SeqBuilder):
    """{variant: {L: [...]}}"""

    def __init__(self, serializer: "ValueSerializer", variant: str) -> None:
        super().__init__(serializer)
        self._variant = variant

    def end(self) -> WireValue:
        return WireValue.of_map({self._variant: super().end()})


class StructVariantBuilder(StructBuilder):
    """{variant: {M: {...}}}"""

    def __init__(self, serializer: "ValueSerializer", variant: str) -> None:
        super().__init__(serializer)
        self._variant = variant

    def end(self) -> WireValue:
        return WireValue.of_map({self._variant: super().end()})
