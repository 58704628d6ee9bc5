from typing import Any, Callable, Protocol, Sequence


class _Exhausted:
    """Sentinel returned by cursors once every item has been read."""

    _instance: "_Exhausted | None" = None

    def __new__(cls) -> "_Exhausted":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "EXHAUSTED"

    def __bool__(self) -> bool:
        return False


EXHAUSTED: Any = _Exhausted()
"""
End-of-cursor marker for SeqAccess.next_element and MapAccess.next_key.
A plain None cannot be used because None is a legitimate decoded value.
"""


Seed = Callable[["Decoder"], Any]
"""
Reconstruction entry point of a target shape: given a Decoder positioned
on one value, drive it with a Visitor and return the rebuilt value.
"""


class Visitor(Protocol):
    """
    Decode side of the visitation protocol, implemented by a target shape.

    The decoder invokes exactly one visit_* callback per value. Visitors
    reject callbacks they do not support by raising CodecError.
    """

    expecting: str

    def visit_bool(self, value: bool) -> Any: ...

    def visit_i64(self, value: int) -> Any: ...

    def visit_u64(self, value: int) -> Any: ...

    def visit_f64(self, value: float) -> Any: ...

    def visit_char(self, value: str) -> Any: ...

    def visit_str(self, value: str) -> Any: ...

    def visit_bytes(self, value: bytes) -> Any: ...

    def visit_none(self) -> Any: ...

    def visit_some(self, decoder: "Decoder") -> Any: ...

    def visit_unit(self) -> Any: ...

    def visit_newtype_struct(self, decoder: "Decoder") -> Any: ...

    def visit_seq(self, access: "SeqAccess") -> Any: ...

    def visit_map(self, access: "MapAccess") -> Any: ...

    def visit_enum(self, access: "EnumAccess") -> Any: ...


class SeqAccess(Protocol):
    """Cursor over the elements of a sequence, in stored order."""

    def next_element(self, seed: Seed) -> Any:
        """Decode the next element with `seed`, or return EXHAUSTED."""

    def size_hint(self) -> int | None:
        """Number of elements left, when known."""


class MapAccess(Protocol):
    """
    Pair of synchronized cursors over the keys and the values of a map.
    Each next_key must be followed by exactly one next_value.
    """

    def next_key(self, seed: Seed) -> Any:
        """Decode the next key with `seed`, or return EXHAUSTED."""

    def next_value(self, seed: Seed) -> Any:
        """Decode the value belonging to the last key read."""

    def size_hint(self) -> int | None:
        ...


class VariantAccess(Protocol):
    """Payload reader for a variant whose tag has already been read."""

    def unit_variant(self) -> None: ...

    def newtype_variant(self, seed: Seed) -> Any: ...

    def tuple_variant(self, length: int, visitor: Visitor) -> Any: ...

    def struct_variant(self, fields: Sequence[str], visitor: Visitor) -> Any: ...


class EnumAccess(Protocol):
    """Entry point of a tagged union: yields the tag and a payload reader."""

    def variant(self, seed: Seed) -> tuple[Any, VariantAccess]: ...


class Decoder(Protocol):
    """
    Decoder positioned on exactly one value.

    `deserialize_any` inspects the data to pick the visitor callback; every
    other method states what the target shape expects so the decoder can
    validate it first. A decoder is consumed by the call.
    """

    def deserialize_any(self, visitor: Visitor) -> Any: ...

    def deserialize_bool(self, visitor: Visitor) -> Any: ...

    def deserialize_i8(self, visitor: Visitor) -> Any: ...

    def deserialize_i16(self, visitor: Visitor) -> Any: ...

    def deserialize_i32(self, visitor: Visitor) -> Any: ...

    def deserialize_i64(self, visitor: Visitor) -> Any: ...

    def deserialize_u8(self, visitor: Visitor) -> Any: ...

    def deserialize_u16(self, visitor: Visitor) -> Any: ...

    def deserialize_u32(self, visitor: Visitor) -> Any: ...

    def deserialize_u64(self, visitor: Visitor) -> Any: ...

    def deserialize_f32(self, visitor: Visitor) -> Any: ...

    def deserialize_f64(self, visitor: Visitor) -> Any: ...

    def deserialize_char(self, visitor: Visitor) -> Any: ...

    def deserialize_str(self, visitor: Visitor) -> Any: ...

    def deserialize_bytes(self, visitor: Visitor) -> Any: ...

    def deserialize_option(self, visitor: Visitor) -> Any: ...

    def deserialize_unit(self, visitor: Visitor) -> Any: ...

    def deserialize_unit_struct(self, name: str, visitor: Visitor) -> Any: ...

    def deserialize_newtype_struct(self, name: str, visitor: Visitor) -> Any: ...

    def deserialize_seq(self, visitor: Visitor) -> Any: ...

    def deserialize_tuple(self, length: int, visitor: Visitor) -> Any: ...

    def deserialize_tuple_struct(self, name: str, length: int, visitor: Visitor) -> Any: ...

    def deserialize_map(self, visitor: Visitor) -> Any: ...

    def deserialize_struct(self, name: str, fields: Sequence[str], visitor: Visitor) -> Any: ...

    def deserialize_enum(self, name: str, variants: Sequence[str], visitor: Visitor) -> Any: ...

    def deserialize_identifier(self, visitor: Visitor) -> Any: ...

    def deserialize_ignored_any(self, visitor: Visitor) -> Any: ...
