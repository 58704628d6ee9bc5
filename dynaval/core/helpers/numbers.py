import math
import re
import struct

from dynaval.core.errors import CodecError, NUMERIC_VALUE_EXPECTED


I64_MIN = -(1 << 63)
I64_MAX = (1 << 63) - 1

INT_RANGES: dict[str, tuple[int, int]] = {
    "i8": (-(1 << 7), (1 << 7) - 1),
    "i16": (-(1 << 15), (1 << 15) - 1),
    "i32": (-(1 << 31), (1 << 31) - 1),
    "i64": (I64_MIN, I64_MAX),
    "u8": (0, (1 << 8) - 1),
    "u16": (0, (1 << 16) - 1),
    "u32": (0, (1 << 32) - 1),
    "u64": (0, (1 << 64) - 1),
}

# Nine significant digits always identify a binary32 value.
_F32_MAX_DIGITS = 9

F32_MAX = struct.unpack("<f", b"\xff\xff\x7f\x7f")[0]
# Doubles below FLT_MAX + half an ulp still round to FLT_MAX.
_F32_OVERFLOW = F32_MAX + 2.0 ** 103

# ASCII only: no whitespace, no "_" separators, no non-ASCII digits.
_INT_TEXT = re.compile(r"[+-]?[0-9]+")
_FLOAT_TEXT = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE
)


def format_int(value: int) -> str:
    return str(int(value))


def format_f64(value: float) -> str:
    """
    Shortest text that parses back to the same binary64 value.
    repr() already guarantees this for Python floats.
    """
    return repr(float(value))


def narrow_f32(value: float) -> float:
    """
    Round a double to the nearest binary32 value.

    struct refuses doubles just above FLT_MAX even when they round down
    to it, so those are mapped to FLT_MAX here. Anything further out does
    not fit an f32.
    """
    try:
        return struct.unpack("<f", struct.pack("<f", value))[0]
    except OverflowError:
        if abs(value) < _F32_OVERFLOW:
            return math.copysign(F32_MAX, value)
        raise CodecError.custom(f"invalid value: float {value!r}, expected f32") from None


def format_f32(value: float) -> str:
    """
    Shortest text that parses back to the same binary32 value.

    repr() of the widened double would print every digit of the binary64
    expansion (1.2339999675750732 for 1.234f32), so search the shortest
    precision whose text narrows to identical binary32 bits, then let
    repr() lay the digits out in the same style as format_f64.
    """
    single = narrow_f32(value)
    if not math.isfinite(single):
        return repr(single)

    packed = struct.pack("<f", single)
    for precision in range(1, _F32_MAX_DIGITS + 1):
        text = f"{single:.{precision}g}"
        try:
            candidate = narrow_f32(float(text))
        except CodecError:
            # rounding the digits up can leave the f32 range
            continue
        if struct.pack("<f", candidate) == packed:
            return repr(float(text))

    return repr(single)


def parse_integer(text: str) -> int | None:
    """Integer value of plain ASCII decimal text, None for anything else."""
    if _INT_TEXT.fullmatch(text) is None:
        return None
    return int(text)


def parse_number(text: str) -> int | float:
    """
    Parse wire number text: signed 64-bit integer first, then 64-bit float.
    """
    number = parse_integer(text)
    if number is not None and I64_MIN <= number <= I64_MAX:
        return number

    if _FLOAT_TEXT.fullmatch(text) is None:
        raise CodecError(NUMERIC_VALUE_EXPECTED)
    return float(text)


def check_int_range(value: int, width: str) -> int:
    low, high = INT_RANGES[width]
    if not low <= value <= high:
        raise CodecError.custom(f"invalid value: integer {value}, expected {width}")
    return value
