import base64
import json
from typing import Any

from dynaval.core.models.wire import WireValue


class FakeJSONEncoder(json.JSONEncoder):
    """
    JSON encoder that supports bytes (encoded as base64).
    """

    def default(self, obj):
        if isinstance(obj, bytes):
            return {"__bytes__": base64.b64encode(obj).decode()}
        return super().default(obj)


def _hook(obj: dict[str, Any]) -> Any:
    if "__bytes__" in obj:
        return base64.b64decode(obj["__bytes__"])
    return obj


class JsonSerializer:
    """Serializer port over JSON, counting the calls it receives."""

    def __init__(self) -> None:
        self.serialize_calls = 0
        self.deserialize_calls = 0

    def serialize(self, value: WireValue) -> bytes:
        self.serialize_calls += 1
        return json.dumps(value.to_dict(), cls=FakeJSONEncoder).encode()

    def deserialize(self, data: bytes) -> WireValue:
        self.deserialize_calls += 1
        return WireValue.from_dict(json.loads(data.decode(), object_hook=_hook))
