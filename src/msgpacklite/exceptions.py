"""Exception hierarchy for msgpacklite.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from MsgpackliteError for easy catching of any
msgpacklite-specific error. Errors raised by the underlying byte sink or
source (``OSError`` and friends) are never wrapped.
"""

from __future__ import annotations

from typing import Any


class MsgpackliteError(Exception):
    """Base exception for all msgpacklite errors."""

    pass


class EncodeError(MsgpackliteError):
    """Raised when a value cannot be written to the wire.

    Examples:
        - Value of an unrecognized kind
        - Integer outside the 64-bit range of the format
        - String, binary or container longer than 2^32-1
    """

    pass


class UnsupportedValueError(EncodeError, TypeError):
    """Raised when the encoder is given a value of an unrecognized kind."""

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(f"Cannot serialize value of type {type(value).__name__}")


class OutOfRangeError(EncodeError, ValueError):
    """Raised when an integer or a length does not fit any wire form."""

    pass


class DecodeError(MsgpackliteError):
    """Raised when decoding binary data fails.

    Examples:
        - Truncated data (insufficient bytes after the tag)
        - Tag byte that matches no wire form
        - Invalid UTF-8 in a string payload
        - Length or depth beyond a caller-supplied limit
    """

    pass


class UnknownTagError(DecodeError):
    """Raised when a tag byte matches none of the defined ranges."""

    def __init__(self, tag: int) -> None:
        self.tag = tag
        super().__init__(f"Unknown tag byte 0x{tag:02x}")


class TruncatedInputError(DecodeError):
    """Raised when the source supplies fewer bytes than a value requires.

    Attributes:
        expected: Number of bytes requested
        received: Number of bytes actually available
    """

    def __init__(self, expected: int, received: int) -> None:
        self.expected = expected
        self.received = received
        super().__init__(
            f"{expected} bytes were expected but only {received} could be read"
        )


class InvalidPayloadError(DecodeError):
    """Raised when a payload is well-framed but its contents are invalid."""

    pass


class LimitExceededError(DecodeError):
    """Raised when input breaches a limit configured in UnpackerOptions."""

    pass


class ExtraDataError(DecodeError):
    """Raised by one-shot decoding when bytes remain after the first value.

    Attributes:
        value: The value decoded from the start of the input
        extra: The unconsumed trailing bytes
    """

    def __init__(self, value: Any, extra: bytes) -> None:
        self.value = value
        self.extra = extra
        super().__init__(f"{len(extra)} unconsumed bytes after the decoded value")
