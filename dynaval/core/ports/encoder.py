from typing import Any, Protocol


class Serialize(Protocol):
    """
    A value able to describe its own shape.

    `serialize` must drive exactly one operation of the given Encoder
    (one scalar emit, or one builder opened, filled and ended) and return
    whatever that operation returns.
    """

    def serialize(self, encoder: "Encoder") -> Any:
        ...


class SerializeSeq(Protocol):
    """
    Builder returned for sequences, tuples, tuple-structs and tuple variants.
    """

    def serialize_element(self, value: Serialize) -> None:
        """Append one element, described by `value`."""

    def end(self) -> Any:
        """Finalize the builder. It cannot be used afterwards."""


class SerializeMap(Protocol):
    """
    Builder returned for string-keyed maps. Keys and values alternate:
    each `serialize_key` must be followed by exactly one `serialize_value`.
    """

    def serialize_key(self, key: Serialize) -> None:
        ...

    def serialize_value(self, value: Serialize) -> None:
        ...

    def serialize_entry(self, key: Serialize, value: Serialize) -> None:
        ...

    def end(self) -> Any:
        ...


class SerializeStruct(Protocol):
    """
    Builder returned for records with named fields and struct variants.
    """

    def serialize_field(self, name: str, value: Serialize) -> None:
        ...

    def skip_field(self, name: str) -> None:
        ...

    def end(self) -> Any:
        ...


class Encoder(Protocol):
    """
    Encode side of the visitation protocol.

    A value describes itself by calling one of these operations. Scalar
    operations return the finished output directly; compound operations
    return a builder which the value fills and then ends.

    `name` is the declared name of a record or union type, `index` the
    position of a variant within its union and `variant` its tag. Encoders
    may ignore any of them.
    """

    def serialize_bool(self, value: bool) -> Any: ...

    def serialize_i8(self, value: int) -> Any: ...

    def serialize_i16(self, value: int) -> Any: ...

    def serialize_i32(self, value: int) -> Any: ...

    def serialize_i64(self, value: int) -> Any: ...

    def serialize_u8(self, value: int) -> Any: ...

    def serialize_u16(self, value: int) -> Any: ...

    def serialize_u32(self, value: int) -> Any: ...

    def serialize_u64(self, value: int) -> Any: ...

    def serialize_f32(self, value: float) -> Any: ...

    def serialize_f64(self, value: float) -> Any: ...

    def serialize_char(self, value: str) -> Any: ...

    def serialize_str(self, value: str) -> Any: ...

    def serialize_bytes(self, value: bytes) -> Any: ...

    def serialize_none(self) -> Any: ...

    def serialize_some(self, value: Serialize) -> Any: ...

    def serialize_unit(self) -> Any: ...

    def serialize_unit_struct(self, name: str) -> Any: ...

    def serialize_unit_variant(self, name: str, index: int, variant: str) -> Any: ...

    def serialize_newtype_struct(self, name: str, value: Serialize) -> Any: ...

    def serialize_newtype_variant(
        self,
        name: str,
        index: int,
        variant: str,
        value: Serialize
    ) -> Any: ...

    def serialize_seq(self, length: int | None) -> SerializeSeq: ...

    def serialize_tuple(self, length: int) -> SerializeSeq: ...

    def serialize_tuple_struct(self, name: str, length: int) -> SerializeSeq: ...

    def serialize_tuple_variant(
        self,
        name: str,
        index: int,
        variant: str,
        length: int
    ) -> SerializeSeq: ...

    def serialize_map(self, length: int | None) -> SerializeMap: ...

    def serialize_struct(self, name: str, length: int) -> SerializeStruct: ...

    def serialize_struct_variant(
        self,
        name: str,
        index: int,
        variant: str,
        length: int
    ) -> SerializeStruct: ...
