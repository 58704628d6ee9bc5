from collections.abc import Mapping
from enum import Enum
from typing import Any, get_args, get_origin

from dynaval.core.errors import CodecError
from dynaval.core.helpers.numbers import I64_MAX, check_int_range
from dynaval.core.ports.encoder import Encoder
from dynaval.core.reflect.hints import (
    is_dataclass_type,
    is_namedtuple,
    is_newtype,
    optional_inner,
    strip_annotated,
    struct_fields,
    variant_index,
    variant_kind,
)
from dynaval.core.reflect.types import Char, Variant, VariantKind, Width


class Shaped:
    """
    Adapts a plain Python value to the Serialize protocol.

    The runtime type decides the shape; the optional type hint refines it
    (numeric width, Optional, NewType) and provides hints for nested
    values such as dataclass fields and container items.
    """

    __slots__ = ("value", "hint")

    def __init__(self, value: Any, hint: Any = None) -> None:
        self.value = value
        self.hint = hint

    def serialize(self, encoder: Encoder) -> Any:
        return describe(self.value, self.hint, encoder)

    def __repr__(self) -> str:
        return f"Shaped({self.value!r}, {self.hint!r})"


def describe(value: Any, hint: Any, encoder: Encoder) -> Any:
    own = getattr(value, "serialize", None)
    if callable(own) and not isinstance(value, type):
        return own(encoder)

    hint, width = strip_annotated(hint)

    if is_newtype(hint):
        return encoder.serialize_newtype_struct(hint.__name__, Shaped(value, hint.__supertype__))

    inner = optional_inner(hint)
    if inner is not None:
        if value is None:
            return encoder.serialize_none()
        return encoder.serialize_some(Shaped(value, inner))

    if value is None:
        return encoder.serialize_unit()
    if isinstance(value, bool):
        return encoder.serialize_bool(value)
    if isinstance(value, Enum):
        return _describe_enum(value, encoder)
    if isinstance(value, Variant):
        return _describe_variant(value, encoder)
    if isinstance(value, int):
        return _describe_int(value, hint, width, encoder)
    if isinstance(value, float):
        if width is Width.f32:
            return encoder.serialize_f32(value)
        return encoder.serialize_f64(value)
    if isinstance(value, str):
        if isinstance(value, Char) or (hint is Char and len(value) == 1):
            return encoder.serialize_char(value)
        return encoder.serialize_str(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return encoder.serialize_bytes(bytes(value))
    if is_namedtuple(type(value)):
        return _describe_tuple_struct(value, encoder)
    if isinstance(value, tuple):
        return _describe_tuple(value, hint, encoder)
    if isinstance(value, (list, set, frozenset)):
        return _describe_seq(value, hint, encoder)
    if isinstance(value, Mapping):
        return _describe_map(value, hint, encoder)
    if is_dataclass_type(type(value)):
        return _describe_struct(value, encoder)

    raise CodecError.custom(f"unsupported type: {type(value).__name__}")


def _describe_int(value: int, hint: Any, width: Width | None, encoder: Encoder) -> Any:
    if width is None and hint is float:
        return encoder.serialize_f64(float(value))
    if width is not None and width.is_float:
        return getattr(encoder, f"serialize_{width}")(float(value))

    if width is None:
        width = Width.u64 if value > I64_MAX else Width.i64

    check_int_range(value, width)
    return getattr(encoder, f"serialize_{width}")(value)


def _item_hint(hint: Any, position: int = 0) -> Any:
    args = get_args(hint)
    if len(args) > position:
        return args[position]
    return None


def _describe_seq(value: Any, hint: Any, encoder: Encoder) -> Any:
    item_hint = _item_hint(hint)
    builder = encoder.serialize_seq(len(value))
    for item in value:
        builder.serialize_element(Shaped(item, item_hint))
    return builder.end()


def _describe_tuple(value: tuple, hint: Any, encoder: Encoder) -> Any:
    args = get_args(hint) if get_origin(hint) is tuple else ()
    if len(args) == 2 and args[1] is Ellipsis:
        item_hints: list[Any] = [args[0]] * len(value)
    elif len(args) == len(value):
        item_hints = list(args)
    else:
        item_hints = [None] * len(value)

    builder = encoder.serialize_tuple(len(value))
    for item, item_hint in zip(value, item_hints):
        builder.serialize_element(Shaped(item, item_hint))
    return builder.end()


def _describe_tuple_struct(value: tuple, encoder: Encoder) -> Any:
    fields = struct_fields(type(value))
    builder = encoder.serialize_tuple_struct(type(value).__name__, len(fields))
    for info, item in zip(fields, value):
        builder.serialize_element(Shaped(item, info.hint))
    return builder.end()


def _describe_map(value: Mapping, hint: Any, encoder: Encoder) -> Any:
    key_hint = _item_hint(hint, 0)
    value_hint = _item_hint(hint, 1)
    builder = encoder.serialize_map(len(value))
    for key, item in value.items():
        builder.serialize_entry(Shaped(key, key_hint), Shaped(item, value_hint))
    return builder.end()


def _describe_struct(value: Any, encoder: Encoder) -> Any:
    cls = type(value)
    fields = struct_fields(cls)
    if not fields:
        return encoder.serialize_unit_struct(cls.__name__)

    builder = encoder.serialize_struct(cls.__name__, len(fields))
    for info in fields:
        builder.serialize_field(info.name, Shaped(getattr(value, info.name), info.hint))
    return builder.end()


def _describe_enum(value: Enum, encoder: Encoder) -> Any:
    cls = type(value)
    index = list(cls.__members__).index(value.name)
    return encoder.serialize_unit_variant(cls.__name__, index, value.name)


def _describe_variant(value: Variant, encoder: Encoder) -> Any:
    case = type(value)
    if case.is_variant_root():
        raise CodecError.custom(f"{case.__name__} is a union, encode one of its cases")

    root = case.__variant_root__.__name__
    index = variant_index(case)
    kind = variant_kind(case)
    fields = struct_fields(case) if is_dataclass_type(case) else ()

    if kind is VariantKind.unit:
        return encoder.serialize_unit_variant(root, index, case.__name__)

    if kind is VariantKind.newtype:
        info = fields[0]
        payload = Shaped(getattr(value, info.name), info.hint)
        return encoder.serialize_newtype_variant(root, index, case.__name__, payload)

    if kind is VariantKind.tuple:
        seq = encoder.serialize_tuple_variant(root, index, case.__name__, len(fields))
        for info in fields:
            seq.serialize_element(Shaped(getattr(value, info.name), info.hint))
        return seq.end()

    struct = encoder.serialize_struct_variant(root, index, case.__name__, len(fields))
    for info in fields:
        struct.serialize_field(info.name, Shaped(getattr(value, info.name), info.hint))
    return struct.end()


def to_serialize(value: Any, hint: Any = None) -> Any:
    """Return `value` itself when it describes itself, else wrap it."""
    own = getattr(value, "serialize", None)
    if callable(own) and not isinstance(value, type):
        return value
    return Shaped(value, hint)


