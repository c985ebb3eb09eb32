"""Hex rendering for diagnostics."""

from __future__ import annotations


def to_hex(data: bytes | bytearray | memoryview, sep: str = "") -> str:
    """Render bytes as lowercase hex, two digits per byte.

    Example:
        >>> to_hex(b"\\x94\\x05\\x0a", sep=" ")
        '94 05 0a'
    """
    if sep:
        return bytes(data).hex(sep)
    return bytes(data).hex()
