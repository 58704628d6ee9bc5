import msgpack

from dynaval.core.errors import CodecError
from dynaval.core.models.wire import WireValue
from dynaval.core.ports.serializer import Serializer


class MsgPackSerializer(Serializer):
    """
    MsgPack-based implementation of the Serializer interface.

    WireValues are packed in their attribute-value form ({"N": "1"}),
    with `B` payloads kept as native msgpack binaries.

    - deterministic binary encoding
    - compact
    - fast
    """
    def serialize(self, value: WireValue) -> bytes:
        return msgpack.packb(value.to_dict(), use_bin_type=True)

    def deserialize(self, data: bytes) -> WireValue:
        try:
            raw = msgpack.unpackb(data, raw=False)
        except ValueError as ex:
            # msgpack reports truncated, extra and malformed data as ValueError
            raise CodecError.custom(f"Malformed Wire Payload: {ex}") from ex

        return WireValue.from_dict(raw)
