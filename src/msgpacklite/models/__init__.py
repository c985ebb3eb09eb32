"""Value model for msgpacklite.

This module exports the Value variants produced by the decoder and accepted
by the encoder, plus conversion from native Python objects.
"""

from __future__ import annotations

from .values import (
    END_OF_INPUT,
    NIL,
    ArrayValue,
    BinValue,
    BoolValue,
    EndOfInput,
    ExtensionValue,
    FloatValue,
    IntValue,
    MapValue,
    NilValue,
    StrValue,
    Value,
    from_python,
)

__all__ = [
    "Value",
    "NilValue",
    "BoolValue",
    "IntValue",
    "FloatValue",
    "StrValue",
    "BinValue",
    "ArrayValue",
    "MapValue",
    "ExtensionValue",
    "EndOfInput",
    "END_OF_INPUT",
    "NIL",
    "from_python",
]
