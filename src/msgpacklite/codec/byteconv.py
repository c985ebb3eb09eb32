"""Fixed-width big-endian conversions.

This module converts between Python numbers and the 2, 4 and 8 byte
big-endian fields used by the wire format. All functions are pure.

The only precondition is that ``unpack_*`` receives exactly the width of its
type; any other length raises ``struct.error``.
"""

from __future__ import annotations

import struct

_INT16 = struct.Struct(">h")
_UINT16 = struct.Struct(">H")
_INT32 = struct.Struct(">i")
_UINT32 = struct.Struct(">I")
_INT64 = struct.Struct(">q")
_UINT64 = struct.Struct(">Q")
_FLOAT32 = struct.Struct(">f")
_FLOAT64 = struct.Struct(">d")


def pack_int16(value: int) -> bytes:
    """Pack a signed 16-bit integer."""
    return _INT16.pack(value)


def unpack_int16(data: bytes) -> int:
    """Unpack a signed 16-bit integer."""
    return _INT16.unpack(data)[0]


def pack_uint16(value: int) -> bytes:
    """Pack an unsigned 16-bit integer."""
    return _UINT16.pack(value)


def unpack_uint16(data: bytes) -> int:
    """Unpack an unsigned 16-bit integer."""
    return _UINT16.unpack(data)[0]


def pack_int32(value: int) -> bytes:
    """Pack a signed 32-bit integer."""
    return _INT32.pack(value)


def unpack_int32(data: bytes) -> int:
    """Unpack a signed 32-bit integer."""
    return _INT32.unpack(data)[0]


def pack_uint32(value: int) -> bytes:
    """Pack an unsigned 32-bit integer."""
    return _UINT32.pack(value)


def unpack_uint32(data: bytes) -> int:
    """Unpack an unsigned 32-bit integer.

    The sign bit is never extended: ``b"\\xff\\xff\\xff\\xff"`` is 4294967295.
    """
    return _UINT32.unpack(data)[0]


def pack_int64(value: int) -> bytes:
    """Pack a signed 64-bit integer."""
    return _INT64.pack(value)


def unpack_int64(data: bytes) -> int:
    """Unpack a signed 64-bit integer."""
    return _INT64.unpack(data)[0]


def pack_uint64(value: int) -> bytes:
    """Pack an unsigned 64-bit integer."""
    return _UINT64.pack(value)


def unpack_uint64(data: bytes) -> int:
    """Unpack an unsigned 64-bit integer."""
    return _UINT64.unpack(data)[0]


def pack_float32(value: float) -> bytes:
    """Pack an IEEE-754 single precision float.

    Raises:
        OverflowError: If the value is finite but too large for 32 bits
    """
    return _FLOAT32.pack(value)


def unpack_float32(data: bytes) -> float:
    """Unpack an IEEE-754 single precision float, widened to a Python float."""
    return _FLOAT32.unpack(data)[0]


def pack_float64(value: float) -> bytes:
    """Pack an IEEE-754 double precision float."""
    return _FLOAT64.pack(value)


def unpack_float64(data: bytes) -> float:
    """Unpack an IEEE-754 double precision float."""
    return _FLOAT64.unpack(data)[0]


def fits_float32(value: float) -> bool:
    """Check whether a float survives a round trip through 32 bits unchanged.

    NaN never compares equal to itself, so it is always reported as not
    fitting and is written at double precision.

    Args:
        value: Float to test

    Returns:
        True if packing to float32 and back yields the same value
    """
    try:
        narrowed = unpack_float32(pack_float32(value))
    except OverflowError:
        return False
    return narrowed == value
