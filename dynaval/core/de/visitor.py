from typing import Any

from dynaval.core.errors import CodecError
from dynaval.core.ports.decoder import Decoder, EnumAccess, MapAccess, SeqAccess


class BaseVisitor:
    """
    Visitor with every callback rejecting its input.

    Subclasses override the callbacks their shape accepts. Narrow numeric
    and text callbacks fall back to their wide counterpart, so a visitor
    accepting i64 also accepts every smaller signed width.
    """

    expecting: str = "a value"

    def invalid_type(self, unexpected: str) -> CodecError:
        return CodecError.custom(f"invalid type: {unexpected}, expected {self.expecting}")

    def visit_bool(self, value: bool) -> Any:
        raise self.invalid_type(f"boolean `{str(value).lower()}`")

    def visit_i8(self, value: int) -> Any:
        return self.visit_i64(value)

    def visit_i16(self, value: int) -> Any:
        return self.visit_i64(value)

    def visit_i32(self, value: int) -> Any:
        return self.visit_i64(value)

    def visit_i64(self, value: int) -> Any:
        raise self.invalid_type(f"integer `{value}`")

    def visit_u8(self, value: int) -> Any:
        return self.visit_u64(value)

    def visit_u16(self, value: int) -> Any:
        return self.visit_u64(value)

    def visit_u32(self, value: int) -> Any:
        return self.visit_u64(value)

    def visit_u64(self, value: int) -> Any:
        raise self.invalid_type(f"integer `{value}`")

    def visit_f32(self, value: float) -> Any:
        return self.visit_f64(value)

    def visit_f64(self, value: float) -> Any:
        raise self.invalid_type(f"floating point `{value!r}`")

    def visit_char(self, value: str) -> Any:
        return self.visit_str(value)

    def visit_str(self, value: str) -> Any:
        raise self.invalid_type(f"string {value!r}")

    def visit_string(self, value: str) -> Any:
        return self.visit_str(value)

    def visit_bytes(self, value: bytes) -> Any:
        raise self.invalid_type("byte array")

    def visit_byte_buf(self, value: bytes) -> Any:
        return self.visit_bytes(value)

    def visit_none(self) -> Any:
        raise self.invalid_type("Option value")

    def visit_some(self, decoder: Decoder) -> Any:
        raise self.invalid_type("Option value")

    def visit_unit(self) -> Any:
        raise self.invalid_type("unit value")

    def visit_newtype_struct(self, decoder: Decoder) -> Any:
        raise self.invalid_type("newtype struct")

    def visit_seq(self, access: SeqAccess) -> Any:
        raise self.invalid_type("sequence")

    def visit_map(self, access: MapAccess) -> Any:
        raise self.invalid_type("map")

    def visit_enum(self, access: EnumAccess) -> Any:
        raise self.invalid_type("enum")


class IgnoredAny(BaseVisitor):
    """Accepts and discards whatever it is given."""

    expecting = "anything at all"

    def visit_bool(self, value: bool) -> None:
        return None

    def visit_i64(self, value: int) -> None:
        return None

    def visit_u64(self, value: int) -> None:
        return None

    def visit_f64(self, value: float) -> None:
        return None

    def visit_str(self, value: str) -> None:
        return None

    def visit_bytes(self, value: bytes) -> None:
        return None

    def visit_none(self) -> None:
        return None

    def visit_some(self, decoder: Decoder) -> None:
        return decoder.deserialize_ignored_any(self)

    def visit_unit(self) -> None:
        return None

    def visit_newtype_struct(self, decoder: Decoder) -> None:
        return decoder.deserialize_ignored_any(self)

    def visit_seq(self, access: SeqAccess) -> None:
        return None

    def visit_map(self, access: MapAccess) -> None:
        return None


def ignore(decoder: Decoder) -> None:
    """Seed skipping one value without looking at it."""
    return decoder.deserialize_ignored_any(IgnoredAny())
