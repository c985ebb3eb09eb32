"""Encoded size calculation utilities.

This module provides functions to calculate the encoded size of values
without keeping the encoded bytes.
"""

from __future__ import annotations

from typing import Any

from ..codec.encoder import Packer
from ..codec.streams import CountingSink
from ..config import PackerOptions


def encoded_size(value: Any, options: PackerOptions | None = None) -> int:
    """Calculate the encoded size of a value in bytes.

    The value is run through the encoder into a CountingSink, so the result
    always agrees with len(encode(value, options)).

    Args:
        value: Value to measure (anything encode() accepts)
        options: Encoding options (float precision changes the size)

    Returns:
        Size in bytes

    Raises:
        EncodeError: If the value cannot be encoded

    Example:
        >>> encoded_size(5)
        1
        >>> encoded_size([5, 10, 20, 200])
        6
    """
    sink = CountingSink()
    Packer(sink, options).write_value(value)
    return sink.count
