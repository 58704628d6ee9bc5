from typing import Any

from dynaval.core.de.visitor import BaseVisitor
from dynaval.core.ports.decoder import EXHAUSTED, Decoder, EnumAccess, MapAccess, SeqAccess


class RecordingVisitor(BaseVisitor):
    """
    Accepts every callback and answers with (callback, payload), so tests
    can see which callback the decoder picked. Compound payloads are
    drained recursively with the same visitor through deserialize_any.
    """

    expecting = "anything"

    def visit_bool(self, value: bool) -> Any:
        return "bool", value

    def visit_i64(self, value: int) -> Any:
        return "i64", value

    def visit_u64(self, value: int) -> Any:
        return "u64", value

    def visit_f64(self, value: float) -> Any:
        return "f64", value

    def visit_char(self, value: str) -> Any:
        return "char", value

    def visit_str(self, value: str) -> Any:
        return "str", value

    def visit_bytes(self, value: bytes) -> Any:
        return "bytes", value

    def visit_none(self) -> Any:
        return "none", None

    def visit_some(self, decoder: Decoder) -> Any:
        return "some", decoder.deserialize_any(self)

    def visit_unit(self) -> Any:
        return "unit", None

    def visit_newtype_struct(self, decoder: Decoder) -> Any:
        return "newtype", decoder.deserialize_any(self)

    def visit_seq(self, access: SeqAccess) -> Any:
        items = []
        while (item := access.next_element(record)) is not EXHAUSTED:
            items.append(item)
        return "seq", items

    def visit_map(self, access: MapAccess) -> Any:
        entries = {}
        while (key := access.next_key(record)) is not EXHAUSTED:
            entries[key[1]] = access.next_value(record)
        return "map", entries

    def visit_enum(self, access: EnumAccess) -> Any:
        tag, variant = access.variant(record)
        return "enum", tag[1], variant


def record(decoder: Decoder) -> Any:
    return decoder.deserialize_any(RecordingVisitor())


class ValueFirstVisitor(BaseVisitor):
    """Reads a map value before any key."""

    expecting = "a map"

    def visit_map(self, access: MapAccess) -> Any:
        return access.next_value(record)


class TwoValuesVisitor(BaseVisitor):
    """Reads one key followed by two values."""

    expecting = "a map"

    def visit_map(self, access: MapAccess) -> Any:
        access.next_key(record)
        access.next_value(record)
        return access.next_value(record)
