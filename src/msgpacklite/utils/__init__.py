"""Utility functions for msgpacklite.

This module provides size calculation and hex rendering helpers.
"""

from __future__ import annotations

from .hexdump import to_hex
from .sizing import encoded_size

__all__ = [
    "encoded_size",
    "to_hex",
]
