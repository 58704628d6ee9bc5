from typing import Any


KEY_MUST_BE_STRING = "Key Must Be String"
KEY_MUST_BE_SET = "Key Must Be Set and Value Must Be Serializable"
BUILDER_FINALIZED = "Builder Already Finalized"
MAX_DEPTH_EXCEEDED = "Maximum Depth Exceeded"

SUPPORTED_VALUE_EXPECTED = "Supported Value Expected"
NUMERIC_VALUE_EXPECTED = "Numeric Value Expected"
BOOLEAN_VALUE_EXPECTED = "Boolean Value Expected"
NUMBER_VALUE_EXPECTED = "Number Value Expected"
STRING_VALUE_EXPECTED = "String Value Expected"
CHAR_STRING_EXPECTED = "String Value Expected (Char)"
NON_ZERO_LENGTH_STRING_EXPECTED = "Non-Zero Length String Expected"
BYTE_VECTOR_EXPECTED = "Byte Vector Value Expected"
LIST_VALUE_EXPECTED = "List Value Expected"
MAP_VALUE_EXPECTED = "Map Value Expected"
NULL_VALUE_EXPECTED = "Null Value Expected"
KEY_VALUE_EXPECTED = "Key/Value Expected"
VALUE_EXPECTED = "Value Expected"


class CodecError(Exception):
    """
    Single error kind raised by both the encode and the decode path.

    The codec never distinguishes failures by type: shape mismatches,
    numeric parse failures, map contract violations and free-form
    messages bubbled up from a value's own description all surface as
    a CodecError carrying a message. Two errors with the same message
    compare equal.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @classmethod
    def custom(cls, message: Any) -> "CodecError":
        """Build an error from any object with a string form."""
        return cls(f"{message}")

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"CodecError({self.message!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CodecError):
            return NotImplemented
        return self.message == other.message

    def __hash__(self) -> int:
        return hash(self.message)


class ConfigurationError(ValueError):
    """Invalid codec settings (environment, YAML file or init arguments)."""
