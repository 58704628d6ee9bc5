from typing import Any

from dynaval.core.models.wire import WireValue


def wire(data: dict[str, Any]) -> WireValue:
    """Build a WireValue from its attribute-value form, e.g. wire({"N": "1"})."""
    return WireValue.from_dict(data)


def n(text: str) -> WireValue:
    return WireValue.of_number(text)


def s(text: str) -> WireValue:
    return WireValue.of_string(text)


def null() -> WireValue:
    return WireValue.of_null()


def lst(*values: WireValue) -> WireValue:
    return WireValue.of_list(values)


def m(**entries: WireValue) -> WireValue:
    return WireValue.of_map(entries)
