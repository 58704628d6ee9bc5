from enum import StrEnum
from typing import Annotated, Any, ClassVar

from dynaval.core.errors import CodecError


class Width(StrEnum):
    """
    Numeric width a Python int or float stands for. Attached to a hint
    with Annotated, e.g. Annotated[int, Width.u8].
    """
    i8 = "i8"
    i16 = "i16"
    i32 = "i32"
    i64 = "i64"
    u8 = "u8"
    u16 = "u16"
    u32 = "u32"
    u64 = "u64"
    f32 = "f32"
    f64 = "f64"

    @property
    def is_float(self) -> bool:
        return self in (Width.f32, Width.f64)


I8 = Annotated[int, Width.i8]
I16 = Annotated[int, Width.i16]
I32 = Annotated[int, Width.i32]
I64 = Annotated[int, Width.i64]
U8 = Annotated[int, Width.u8]
U16 = Annotated[int, Width.u16]
U32 = Annotated[int, Width.u32]
U64 = Annotated[int, Width.u64]
F32 = Annotated[float, Width.f32]
F64 = Annotated[float, Width.f64]


class Char(str):
    """A str holding exactly one character, encoded as a char."""

    def __new__(cls, value: str) -> "Char":
        if len(value) != 1:
            raise CodecError.custom(f"invalid value: string {value!r}, expected a character")
        return super().__new__(cls, value)


class VariantKind(StrEnum):
    """
    Payload shape of a tagged-union case.
    """
    unit = "unit"
    """No payload. The case dataclass has no fields."""

    newtype = "newtype"
    """One payload value. The case dataclass has exactly one field."""

    tuple = "tuple"
    """Positional payloads, written in field order."""

    struct = "struct"
    """Named payloads, written by field name."""


class Variant:
    """
    Base class for tagged unions.

    A direct subclass is the union itself; dataclasses deriving from it
    are its cases, tagged by class name:

        class Shape(Variant):
            pass

        @dataclass
        class Circle(Shape):
            radius: float

        @dataclass
        class Point(Shape, kind=VariantKind.tuple):
            x: int
            y: int

    Cases without an explicit kind are unit cases when they have no
    fields and struct cases otherwise. The kind is resolved lazily
    because @dataclass runs after class creation.
    """

    __variant_root__: ClassVar[type["Variant"]]
    __variant_cases__: ClassVar[dict[str, type["Variant"]]]
    __variant_kind__: ClassVar[VariantKind | None] = None

    def __init_subclass__(cls, kind: VariantKind | None = None, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)

        if Variant in cls.__bases__:
            if kind is not None:
                raise TypeError(f"{cls.__name__} is a union root and cannot declare a kind")
            cls.__variant_root__ = cls
            cls.__variant_cases__ = {}
            return

        root = cls.__variant_root__
        if cls.__name__ in root.__variant_cases__:
            raise TypeError(f"{root.__name__} already has a case named {cls.__name__}")

        cls.__variant_kind__ = kind
        root.__variant_cases__[cls.__name__] = cls

    @classmethod
    def is_variant_root(cls) -> bool:
        return cls.__variant_root__ is cls
