import dataclasses
import types
from functools import lru_cache
from typing import Annotated, Any, NamedTuple, Union, get_args, get_origin, get_type_hints

from dynaval.core.errors import CodecError
from dynaval.core.reflect.types import Variant, VariantKind, Width


class FieldInfo(NamedTuple):
    name: str
    hint: Any
    default: Any
    """dataclasses.MISSING when the field has no default."""

    factory: Any = dataclasses.MISSING


def strip_annotated(hint: Any) -> tuple[Any, Width | None]:
    """
    Split Annotated[T, Width.x] into (T, Width.x). Other metadata is ignored.

    >>> strip_annotated(Annotated[int, Width.u8])
    (<class 'int'>, <Width.u8: 'u8'>)
    >>> strip_annotated(str)
    (<class 'str'>, None)
    """
    if get_origin(hint) is not Annotated:
        return hint, None

    base, *metadata = get_args(hint)
    width = next((item for item in metadata if isinstance(item, Width)), None)
    return base, width


def optional_inner(hint: Any) -> Any | None:
    """
    Return T for Optional[T] / T | None, None for anything else.
    Unions of several non-None members are not supported.
    """
    origin = get_origin(hint)
    if origin is not Union and origin is not types.UnionType:
        return None

    args = [arg for arg in get_args(hint) if arg is not type(None)]
    if len(args) != 1 or len(args) == len(get_args(hint)):
        raise CodecError.custom(f"unsupported type hint: {hint!r}, only Optional unions are supported")
    return args[0]


def is_newtype(hint: Any) -> bool:
    return hasattr(hint, "__supertype__")


def is_namedtuple(cls: Any) -> bool:
    return isinstance(cls, type) and issubclass(cls, tuple) and hasattr(cls, "_fields")


def is_dataclass_type(cls: Any) -> bool:
    return isinstance(cls, type) and dataclasses.is_dataclass(cls)


@lru_cache(maxsize=256)
def struct_fields(cls: type) -> tuple[FieldInfo, ...]:
    """
    Fields of a dataclass or NamedTuple with their resolved hints.
    Dataclass fields with init=False are derived state and are left out.
    """
    hints = get_type_hints(cls, include_extras=True)

    if is_namedtuple(cls):
        defaults = getattr(cls, "_field_defaults", {})
        return tuple(
            FieldInfo(name, hints.get(name, Any), defaults.get(name, dataclasses.MISSING))
            for name in cls._fields
        )

    return tuple(
        FieldInfo(f.name, hints.get(f.name, Any), f.default, f.default_factory)
        for f in dataclasses.fields(cls)
        if f.init
    )


def field_default(info: FieldInfo) -> Any:
    """Value for a field missing from the wire map, or MISSING."""
    if info.factory is not dataclasses.MISSING:
        return info.factory()
    return info.default


def variant_kind(case: type[Variant]) -> VariantKind:
    kind = case.__variant_kind__
    count = len(struct_fields(case)) if is_dataclass_type(case) else 0

    if kind is None:
        return VariantKind.unit if count == 0 else VariantKind.struct
    if kind is VariantKind.unit and count != 0:
        raise CodecError.custom(f"unit case {case.__name__} cannot have fields")
    if kind is VariantKind.newtype and count != 1:
        raise CodecError.custom(f"newtype case {case.__name__} needs exactly one field")
    return kind


def variant_index(case: type[Variant]) -> int:
    return list(case.__variant_root__.__variant_cases__).index(case.__name__)
