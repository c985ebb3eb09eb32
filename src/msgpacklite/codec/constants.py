"""MessagePack wire format constants.

Tag byte values are the interoperability contract with every other
MessagePack implementation and must not change.
See https://github.com/msgpack/msgpack/blob/master/spec.md
"""

from __future__ import annotations

# Single-byte forms carrying their payload in the tag's low bits
POSITIVE_FIXINT_MAX = 0x7F
FIXMAP_PREFIX = 0x80
FIXARRAY_PREFIX = 0x90
FIXSTR_PREFIX = 0xA0
NEGATIVE_FIXINT_PREFIX = 0xE0

FIXMAP_MASK = 0x0F
FIXARRAY_MASK = 0x0F
FIXSTR_MASK = 0x1F
NEGATIVE_FIXINT_MASK = 0x1F

NIL = 0xC0
NEVER_USED = 0xC1
FALSE = 0xC2
TRUE = 0xC3

BIN8 = 0xC4
BIN16 = 0xC5
BIN32 = 0xC6

EXT8 = 0xC7
EXT16 = 0xC8
EXT32 = 0xC9

FLOAT32 = 0xCA
FLOAT64 = 0xCB

UINT8 = 0xCC
UINT16 = 0xCD
UINT32 = 0xCE
UINT64 = 0xCF

INT8 = 0xD0
INT16 = 0xD1
INT32 = 0xD2
INT64 = 0xD3

FIXEXT1 = 0xD4
FIXEXT2 = 0xD5
FIXEXT4 = 0xD6
FIXEXT8 = 0xD7
FIXEXT16 = 0xD8

STR8 = 0xD9
STR16 = 0xDA
STR32 = 0xDB

ARRAY16 = 0xDC
ARRAY32 = 0xDD

MAP16 = 0xDE
MAP32 = 0xDF

# Maximum element count / byte length for each header width
FIXSTR_MAX_LEN = (1 << 5) - 1
FIXCONTAINER_MAX_LEN = (1 << 4) - 1
UINT8_MAX = (1 << 8) - 1
UINT16_MAX = (1 << 16) - 1
UINT32_MAX = (1 << 32) - 1
UINT64_MAX = (1 << 64) - 1
INT64_MIN = -(1 << 63)

# Width of the length field following each variable-length tag
LENGTH_FIELD_WIDTH: dict[int, int] = {
    BIN8: 1,
    BIN16: 2,
    BIN32: 4,
    EXT8: 1,
    EXT16: 2,
    EXT32: 4,
    STR8: 1,
    STR16: 2,
    STR32: 4,
    ARRAY16: 2,
    ARRAY32: 4,
    MAP16: 2,
    MAP32: 4,
}

# Payload size of the fixed-size extension forms
FIXEXT_SIZES: dict[int, int] = {
    FIXEXT1: 1,
    FIXEXT2: 2,
    FIXEXT4: 4,
    FIXEXT8: 8,
    FIXEXT16: 16,
}
FIXEXT_TAGS: dict[int, int] = {size: tag for tag, size in FIXEXT_SIZES.items()}

EXT_TYPE_MIN = -128
EXT_TYPE_MAX = 127
