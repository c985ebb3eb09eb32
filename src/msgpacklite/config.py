"""Encoder and decoder options.

Options are immutable pydantic models, validated when they are built.
Invalid values raise ``pydantic.ValidationError``.
"""

from __future__ import annotations

from typing import Any, Callable, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

FloatPrecision = Literal["auto", "single", "double"]


class PackerOptions(BaseModel):
    """Options controlling how values are written.

    Attributes:
        float_precision: How native floats and FloatValues are written.
            "auto" writes float32 only when the value survives a 32-bit round
            trip unchanged, otherwise float64. "single" always writes float32
            (values too large for 32 bits raise OutOfRangeError). "double"
            always writes float64.
        default: Optional hook called with any object of an unrecognized
            kind. It must return a replacement of a recognized kind; it is
            never applied to its own result twice in a row.

    Example:
        >>> from datetime import date
        >>> options = PackerOptions(default=lambda obj: obj.isoformat())
        >>> encode(date(2024, 1, 2), options)
        b'\\xaa2024-01-02'
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    float_precision: FloatPrecision = "auto"
    default: Optional[Callable[[Any], Any]] = None


class UnpackerOptions(BaseModel):
    """Limits applied while decoding untrusted input.

    Every limit defaults to None (unlimited). Lengths are compared against the
    header before any payload is read, so an oversized claim fails without
    consuming or allocating its payload.

    Attributes:
        max_depth: Maximum container nesting (a top-level array is depth 1)
        max_str_len: Maximum string length in bytes
        max_bin_len: Maximum binary length in bytes
        max_array_len: Maximum array element count
        max_map_len: Maximum map pair count
        max_ext_len: Maximum extension payload length in bytes
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_depth: Optional[int] = Field(default=None, ge=0)
    max_str_len: Optional[int] = Field(default=None, ge=0)
    max_bin_len: Optional[int] = Field(default=None, ge=0)
    max_array_len: Optional[int] = Field(default=None, ge=0)
    max_map_len: Optional[int] = Field(default=None, ge=0)
    max_ext_len: Optional[int] = Field(default=None, ge=0)


DEFAULT_PACKER_OPTIONS = PackerOptions()
DEFAULT_UNPACKER_OPTIONS = UnpackerOptions()
