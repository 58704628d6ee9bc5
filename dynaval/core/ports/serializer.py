from typing import Protocol

from dynaval.core.models.wire import WireValue


class Serializer(Protocol):
    """
    Defines the interface for turning wire values into bytes and back,
    at the boundary with whatever transport carries them to the store.

    Implementations must be:
    - deterministic
    - pure (no side effects)
    - safe against malformed input (raise CodecError, never crash)
    """

    def serialize(self, value: WireValue) -> bytes:
        """Encode a WireValue into bytes suitable for transport."""

    def deserialize(self, data: bytes) -> WireValue:
        """Decode bytes received from the transport into a WireValue."""
