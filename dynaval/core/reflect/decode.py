import dataclasses
from collections.abc import Mapping, MutableMapping, MutableSequence, Sequence
from enum import Enum
from functools import lru_cache
from typing import Any, Callable, get_args, get_origin

from dynaval.core.de.visitor import BaseVisitor, ignore
from dynaval.core.errors import CodecError
from dynaval.core.helpers.numbers import check_int_range, narrow_f32
from dynaval.core.ports.decoder import (
    EXHAUSTED,
    Decoder,
    EnumAccess,
    MapAccess,
    Seed,
    SeqAccess,
)
from dynaval.core.reflect.hints import (
    field_default,
    is_dataclass_type,
    is_namedtuple,
    is_newtype,
    optional_inner,
    strip_annotated,
    struct_fields,
    variant_kind,
)
from dynaval.core.reflect.types import Char, Variant, VariantKind, Width


# Visitors hold hints, not seeds. Nested seeds are resolved at decode time
# so recursive types stay finite.


class AnyVisitor(BaseVisitor):
    """Rebuilds plain Python data from self-describing dispatch."""

    expecting = "any value"

    def visit_bool(self, value: bool) -> bool:
        return value

    def visit_i64(self, value: int) -> int:
        return value

    def visit_u64(self, value: int) -> int:
        return value

    def visit_f64(self, value: float) -> float:
        return value

    def visit_str(self, value: str) -> str:
        return value

    def visit_bytes(self, value: bytes) -> bytes:
        return value

    def visit_none(self) -> None:
        return None

    def visit_some(self, decoder: Decoder) -> Any:
        return decoder.deserialize_any(self)

    def visit_unit(self) -> None:
        return None

    def visit_newtype_struct(self, decoder: Decoder) -> Any:
        return decoder.deserialize_any(self)

    def visit_seq(self, access: SeqAccess) -> list[Any]:
        return _drain(access, decode_any)

    def visit_map(self, access: MapAccess) -> dict[str, Any]:
        result = {}
        while (key := access.next_key(decode_str)) is not EXHAUSTED:
            result[key] = access.next_value(decode_any)
        return result


class BoolVisitor(BaseVisitor):
    expecting = "a boolean"

    def visit_bool(self, value: bool) -> bool:
        return value


class IntVisitor(BaseVisitor):
    def __init__(self, width: Width) -> None:
        self._width = width
        self.expecting = f"{width}"

    def visit_i64(self, value: int) -> int:
        return check_int_range(value, self._width)

    def visit_u64(self, value: int) -> int:
        return check_int_range(value, self._width)


class PlainIntVisitor(BaseVisitor):
    """
    Plain `int`: any i64, or any u64 above it. Mirrors the width picked
    when an int without a width hint is encoded.
    """

    expecting = "i64 or u64"

    def visit_i64(self, value: int) -> int:
        return value

    def visit_u64(self, value: int) -> int:
        return check_int_range(value, Width.u64)


class FloatVisitor(BaseVisitor):
    def __init__(self, width: Width) -> None:
        self._width = width
        self.expecting = f"{width}"

    def visit_i64(self, value: int) -> float:
        return self.visit_f64(float(value))

    def visit_u64(self, value: int) -> float:
        return self.visit_f64(float(value))

    def visit_f64(self, value: float) -> float:
        if self._width is Width.f32:
            return narrow_f32(value)
        return value


class StrVisitor(BaseVisitor):
    expecting = "a string"

    def visit_str(self, value: str) -> str:
        return value


class CharVisitor(BaseVisitor):
    expecting = "a character"

    def visit_char(self, value: str) -> Char:
        return Char(value)

    def visit_str(self, value: str) -> Char:
        return Char(value)


class BytesVisitor(BaseVisitor):
    expecting = "a byte array"

    def __init__(self, factory: type = bytes) -> None:
        self._factory = factory

    def visit_bytes(self, value: bytes) -> bytes:
        return self._factory(value)


class UnitVisitor(BaseVisitor):
    expecting = "unit"

    def __init__(self, factory: Callable[[], Any] = lambda: None) -> None:
        self._factory = factory

    def visit_unit(self) -> Any:
        return self._factory()


class OptionVisitor(BaseVisitor):
    def __init__(self, inner: Any) -> None:
        self._inner = inner
        self.expecting = "option"

    def visit_none(self) -> None:
        return None

    def visit_some(self, decoder: Decoder) -> Any:
        return seed_for(self._inner)(decoder)


class NewtypeVisitor(BaseVisitor):
    def __init__(self, name: str, inner: Any) -> None:
        self._inner = inner
        self.expecting = f"newtype struct {name}"

    def visit_newtype_struct(self, decoder: Decoder) -> Any:
        return seed_for(self._inner)(decoder)


class SeqVisitor(BaseVisitor):
    expecting = "a sequence"

    def __init__(self, item: Any, factory: Callable[[list[Any]], Any]) -> None:
        self._item = item
        self._factory = factory

    def visit_seq(self, access: SeqAccess) -> Any:
        return self._factory(_drain(access, seed_for(self._item)))


class TupleVisitor(BaseVisitor):
    """Fixed-length sequence with one hint per position."""

    def __init__(self, items: Sequence[Any], factory: Callable[..., Any], expecting: str) -> None:
        self._items = tuple(items)
        self._factory = factory
        self.expecting = expecting

    def visit_seq(self, access: SeqAccess) -> Any:
        values = []
        for position, item in enumerate(self._items):
            value = access.next_element(seed_for(item))
            if value is EXHAUSTED:
                raise CodecError.custom(f"invalid length {position}, expected {self.expecting}")
            values.append(value)

        if access.next_element(ignore) is not EXHAUSTED:
            raise CodecError.custom(f"trailing elements, expected {self.expecting}")

        return self._factory(*values)


class MapVisitor(BaseVisitor):
    expecting = "a map"

    def __init__(self, key: Any, value: Any, factory: Callable[[dict[Any, Any]], Any]) -> None:
        self._key = key
        self._value = value
        self._factory = factory

    def visit_map(self, access: MapAccess) -> Any:
        key_seed = seed_for(self._key)
        value_seed = seed_for(self._value)
        result = {}
        while (key := access.next_key(key_seed)) is not EXHAUSTED:
            result[key] = access.next_value(value_seed)
        return self._factory(result)


class StructVisitor(BaseVisitor):
    """
    Dataclass from a map of named fields. Unknown keys are skipped;
    missing fields take their default, Optional fields default to None.
    """

    def __init__(self, cls: type) -> None:
        self._cls = cls
        self.expecting = f"struct {cls.__name__}"

    def visit_map(self, access: MapAccess) -> Any:
        fields = {info.name: info for info in struct_fields(self._cls)}
        values: dict[str, Any] = {}

        while (key := access.next_key(decode_str)) is not EXHAUSTED:
            info = fields.get(key)
            if info is None:
                access.next_value(ignore)
                continue
            values[key] = access.next_value(seed_for(info.hint))

        for name, info in fields.items():
            if name in values:
                continue
            default = field_default(info)
            if default is not dataclasses.MISSING:
                values[name] = default
            elif optional_inner(strip_annotated(info.hint)[0]) is not None:
                values[name] = None
            else:
                raise CodecError.custom(f"missing field '{name}'")

        return self._cls(**values)


class EnumVisitor(BaseVisitor):
    """Enum member from a unit variant tagged by the member name."""

    def __init__(self, cls: type[Enum]) -> None:
        self._cls = cls
        self.expecting = f"enum {cls.__name__}"

    def visit_enum(self, access: EnumAccess) -> Enum:
        tag, variant = access.variant(decode_str)
        member = self._cls.__members__.get(tag)
        if member is None:
            raise _unknown_variant(tag, list(self._cls.__members__))
        variant.unit_variant()
        return member


class VariantVisitor(BaseVisitor):
    """Case of a Variant union, dispatched on the case's declared kind."""

    def __init__(self, root: type[Variant]) -> None:
        self._root = root
        self.expecting = f"enum {root.__name__}"

    def visit_enum(self, access: EnumAccess) -> Variant:
        cases = self._root.__variant_cases__
        tag, variant = access.variant(decode_str)
        case = cases.get(tag)
        if case is None:
            raise _unknown_variant(tag, list(cases))

        kind = variant_kind(case)
        fields = struct_fields(case) if is_dataclass_type(case) else ()

        if kind is VariantKind.unit:
            variant.unit_variant()
            return case()
        if kind is VariantKind.newtype:
            return case(variant.newtype_variant(seed_for(fields[0].hint)))
        if kind is VariantKind.tuple:
            expecting = f"tuple variant {self._root.__name__}::{tag}"
            visitor = TupleVisitor([info.hint for info in fields], case, expecting)
            return variant.tuple_variant(len(fields), visitor)
        return variant.struct_variant([info.name for info in fields], StructVisitor(case))


def _unknown_variant(tag: str, expected: list[str]) -> CodecError:
    names = ", ".join(f"'{name}'" for name in expected)
    return CodecError.custom(f"unknown variant '{tag}', expected one of {names}")


def _drain(access: SeqAccess, seed: Seed) -> list[Any]:
    values = []
    while (value := access.next_element(seed)) is not EXHAUSTED:
        values.append(value)
    return values


def decode_any(decoder: Decoder) -> Any:
    return decoder.deserialize_any(AnyVisitor())


def decode_str(decoder: Decoder) -> str:
    return decoder.deserialize_str(StrVisitor())


def seed_for(hint: Any) -> Seed:
    """
    Return the reconstruction entry point for a type hint. Seeds for
    hashable hints are memoised.
    """
    try:
        return _cached_seed(hint)
    except TypeError:
        # unhashable hint; build it every time
        return _build_seed(hint)


@lru_cache(maxsize=512)
def _cached_seed(hint: Any) -> Seed:
    return _build_seed(hint)


def _build_seed(hint: Any) -> Seed:
    if hint is None or hint is Any or hint is object:
        return decode_any

    own = getattr(hint, "deserialize", None)
    if isinstance(hint, type) and callable(own):
        return own

    base, width = strip_annotated(hint)
    if width is not None:
        return _numeric_seed(width)

    if is_newtype(base):
        name = base.__name__
        visitor = NewtypeVisitor(name, base.__supertype__)
        return lambda decoder: decoder.deserialize_newtype_struct(name, visitor)

    inner = optional_inner(base)
    if inner is not None:
        option = OptionVisitor(inner)
        return lambda decoder: decoder.deserialize_option(option)

    origin = get_origin(base) or base
    args = get_args(base)

    if base is type(None):
        return lambda decoder: decoder.deserialize_unit(UnitVisitor())
    if base is bool:
        return lambda decoder: decoder.deserialize_bool(BoolVisitor())
    if base is int:
        plain = PlainIntVisitor()
        return lambda decoder: decoder.deserialize_u64(plain)
    if base is float:
        return _numeric_seed(Width.f64)
    if base is Char:
        return lambda decoder: decoder.deserialize_char(CharVisitor())
    if base is str:
        return decode_str
    if base in (bytes, bytearray):
        return lambda decoder: decoder.deserialize_bytes(BytesVisitor(base))

    if isinstance(base, type) and issubclass(base, Enum):
        names = list(base.__members__)
        return lambda decoder: decoder.deserialize_enum(base.__name__, names, EnumVisitor(base))
    if isinstance(base, type) and issubclass(base, Variant):
        return _variant_seed(base)

    if is_namedtuple(base):
        fields = struct_fields(base)
        expecting = f"tuple struct {base.__name__}"
        visitor = TupleVisitor([info.hint for info in fields], base, expecting)
        return lambda decoder: decoder.deserialize_tuple_struct(base.__name__, len(fields), visitor)

    if origin is tuple:
        return _tuple_seed(args)
    if origin in (list, set, frozenset) or origin in (Sequence, MutableSequence):
        factory = list if origin in (Sequence, MutableSequence) else origin
        visitor = SeqVisitor(args[0] if args else None, factory)
        return lambda decoder: decoder.deserialize_seq(visitor)
    if origin in (dict, Mapping, MutableMapping):
        key, value = args if args else (str, None)
        visitor = MapVisitor(key, value, dict)
        return lambda decoder: decoder.deserialize_map(visitor)

    if is_dataclass_type(base):
        return _struct_seed(base)

    raise CodecError.custom(f"unsupported type hint: {hint!r}")


def _numeric_seed(width: Width) -> Seed:
    visitor: BaseVisitor = FloatVisitor(width) if width.is_float else IntVisitor(width)
    method = f"deserialize_{width}"
    return lambda decoder: getattr(decoder, method)(visitor)


def _tuple_seed(args: tuple[Any, ...]) -> Seed:
    if len(args) == 2 and args[1] is Ellipsis:
        visitor: BaseVisitor = SeqVisitor(args[0], tuple)
        return lambda decoder: decoder.deserialize_seq(visitor)
    if not args:
        visitor = SeqVisitor(None, tuple)
        return lambda decoder: decoder.deserialize_seq(visitor)

    expecting = f"a tuple of size {len(args)}"
    visitor = TupleVisitor(args, lambda *values: tuple(values), expecting)
    return lambda decoder: decoder.deserialize_tuple(len(args), visitor)


def _struct_seed(cls: type) -> Seed:
    if not struct_fields(cls):
        return lambda decoder: decoder.deserialize_unit_struct(cls.__name__, UnitVisitor(cls))

    visitor = StructVisitor(cls)
    return lambda decoder: decoder.deserialize_struct(
        cls.__name__,
        [info.name for info in struct_fields(cls)],
        visitor
    )


def _variant_seed(cls: type[Variant]) -> Seed:
    root = cls.__variant_root__
    names = list(root.__variant_cases__)
    visitor = VariantVisitor(root)

    def seed(decoder: Decoder) -> Variant:
        value = decoder.deserialize_enum(root.__name__, names, visitor)
        if not isinstance(value, cls):
            raise CodecError.custom(
                f"invalid variant '{type(value).__name__}', expected {cls.__name__}"
            )
        return value

    return seed
