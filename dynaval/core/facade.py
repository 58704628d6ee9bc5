import logging
from typing import Any, TypeVar, overload

from dynaval.core.de.deserializer import deserialize
from dynaval.core.errors import CodecError
from dynaval.core.models.wire import WireValue
from dynaval.core.ports.serializer import Serializer
from dynaval.core.reflect.decode import seed_for
from dynaval.core.reflect.encode import to_serialize
from dynaval.core.ser.serializer import serialize
from dynaval.infra.msgpack_serializer import MsgPackSerializer

T = TypeVar("T")


class WireCodec:
    """
    Entry point tying the codec together.

    `encode` and `decode` convert between Python values and WireValue
    trees; `dumps` and `loads` additionally cross the byte boundary via
    a Serializer (msgpack by default). The codec keeps no state between
    calls, so one instance can be shared freely across threads.
    """

    def __init__(
        self,
        max_depth: int | None = None,
        serializer: Serializer | None = None
    ) -> None:
        self._max_depth = max_depth
        self._serializer = serializer or MsgPackSerializer()
        self._logger = logging.getLogger("core.facade")

    @property
    def max_depth(self) -> int | None:
        return self._max_depth

    def encode(self, value: Any, hint: Any = None) -> WireValue:
        """
        Serialize `value`. Objects exposing `serialize(encoder)` describe
        themselves; anything else goes through the reflection bridge, with
        `hint` refining numeric widths and nested shapes.
        """
        try:
            return serialize(to_serialize(value, hint), max_depth=self._max_depth)
        except CodecError as ex:
            self._logger.debug(f"Failed to encode {type(value).__name__}: {ex}")
            raise

    @overload
    def decode(self, wire: WireValue, hint: type[T]) -> T: ...

    @overload
    def decode(self, wire: WireValue, hint: Any = ...) -> Any: ...

    def decode(self, wire: WireValue, hint: Any = Any) -> Any:
        """
        Rebuild a value of shape `hint` from `wire`. With no hint (or Any)
        the wire value decodes into plain Python data.
        """
        try:
            return deserialize(wire, seed_for(hint), max_depth=self._max_depth)
        except CodecError as ex:
            self._logger.debug(f"Failed to decode {wire.kind or 'unknown'} value as {hint!r}: {ex}")
            raise

    def dumps(self, value: Any, hint: Any = None) -> bytes:
        return self._serializer.serialize(self.encode(value, hint))

    def loads(self, data: bytes, hint: Any = Any) -> Any:
        return self.decode(self._serializer.deserialize(data), hint)
