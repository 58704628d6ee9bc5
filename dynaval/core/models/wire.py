from dataclasses import dataclass, fields
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from dynaval.core.errors import CodecError


# Attribute name -> wire field name, in the order `populated()` reports them.
WIRE_FIELDS: dict[str, str] = {
    "boolean": "BOOL",
    "number": "N",
    "string": "S",
    "byte_string": "B",
    "null": "NULL",
    "elements": "L",
    "entries": "M",
}


@dataclass(frozen=True)
class WireValue:
    """
    Tagged-union attribute value exchanged with the store.

    Exactly one field is expected to be populated. The codec never emits
    anything else, but consumers must tolerate empty or multiply-populated
    values coming from other producers: readers check fields in their own
    precedence and fail when nothing matches.

    Instances are immutable, hashable trees: lists are frozen into tuples
    and maps are copied into read-only mappings on construction, so a
    finalized value never aliases the builder state it came from.
    """
    boolean: bool | None = None
    """
    Wire field `BOOL`.
    """

    number: str | None = None
    """
    Wire field `N`. Numbers travel as decimal text.
    """

    string: str | None = None
    """
    Wire field `S`.
    """

    byte_string: bytes | None = None
    """
    Wire field `B`, raw bytes.
    """

    null: bool | None = None
    """
    Wire field `NULL`, `True` when the value is null.
    """

    elements: tuple["WireValue", ...] | None = None
    """
    Wire field `L`, ordered.
    """

    entries: Mapping[str, "WireValue"] | None = None
    """
    Wire field `M`, keyed by string. Order carries no meaning.
    """

    def __post_init__(self) -> None:
        if self.byte_string is not None and not isinstance(self.byte_string, bytes):
            object.__setattr__(self, "byte_string", bytes(self.byte_string))
        if self.elements is not None and not isinstance(self.elements, tuple):
            object.__setattr__(self, "elements", tuple(self.elements))
        if self.entries is not None:
            object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    def __hash__(self) -> int:
        entries = None
        if self.entries is not None:
            entries = frozenset(self.entries.items())
        return hash((
            self.boolean,
            self.number,
            self.string,
            self.byte_string,
            self.null,
            self.elements,
            entries,
        ))

    @classmethod
    def of_bool(cls, value: bool) -> "WireValue":
        return cls(boolean=value)

    @classmethod
    def of_number(cls, text: str) -> "WireValue":
        return cls(number=text)

    @classmethod
    def of_string(cls, value: str) -> "WireValue":
        return cls(string=value)

    @classmethod
    def of_bytes(cls, value: bytes | bytearray | memoryview) -> "WireValue":
        return cls(byte_string=bytes(value))

    @classmethod
    def of_null(cls) -> "WireValue":
        return cls(null=True)

    @classmethod
    def of_list(cls, values: Iterable["WireValue"]) -> "WireValue":
        return cls(elements=tuple(values))

    @classmethod
    def of_map(cls, values: Mapping[str, "WireValue"]) -> "WireValue":
        return cls(entries=dict(values))

    def populated(self) -> list[str]:
        """Wire names of the populated fields."""
        return [
            wire_name
            for attr, wire_name in WIRE_FIELDS.items()
            if getattr(self, attr) is not None
        ]

    @property
    def kind(self) -> str | None:
        """
        The wire name of the single populated field, or None when the
        value is empty or carries more than one field.
        """
        populated = self.populated()
        if len(populated) != 1:
            return None
        return populated[0]

    def to_dict(self) -> dict[str, Any]:
        """
        Return the attribute-value form used by the store, e.g.
        {"M": {"a": {"S": "hello"}}}.
        """
        data: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            wire_name = WIRE_FIELDS[f.name]
            if wire_name == "L":
                data[wire_name] = [item.to_dict() for item in value]
            elif wire_name == "M":
                data[wire_name] = {key: item.to_dict() for key, item in value.items()}
            else:
                data[wire_name] = value
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "WireValue":
        """Reconstruct a WireValue from its attribute-value form."""
        if not isinstance(data, Mapping):
            raise CodecError("Malformed Wire Value")

        by_wire_name = {wire_name: attr for attr, wire_name in WIRE_FIELDS.items()}
        kwargs: dict[str, Any] = {}

        for wire_name, raw in data.items():
            attr = by_wire_name.get(wire_name)
            if attr is None:
                raise CodecError(f"Unknown Wire Field '{wire_name}'")
            kwargs[attr] = cls._decode_field(wire_name, raw)

        return cls(**kwargs)

    @classmethod
    def _decode_field(cls, wire_name: str, raw: Any) -> Any:
        if wire_name in ("BOOL", "NULL"):
            ok = isinstance(raw, bool)
        elif wire_name in ("N", "S"):
            ok = isinstance(raw, str)
        elif wire_name == "B":
            ok = isinstance(raw, (bytes, bytearray, memoryview))
        elif wire_name == "L":
            ok = isinstance(raw, (list, tuple))
            if ok:
                return tuple(cls.from_dict(item) for item in raw)
        else:
            ok = isinstance(raw, Mapping) and all(isinstance(k, str) for k in raw)
            if ok:
                return {key: cls.from_dict(item) for key, item in raw.items()}

        if not ok:
            raise CodecError(f"Malformed Wire Field '{wire_name}'")
        return raw
