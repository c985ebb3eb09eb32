"""Unit tests for the decoder."""

from __future__ import annotations

import io

import pytest

from msgpacklite import (
    END_OF_INPUT,
    NIL,
    ArrayValue,
    BinValue,
    BoolValue,
    ExtensionValue,
    ExtraDataError,
    FloatValue,
    IntValue,
    InvalidPayloadError,
    LimitExceededError,
    MapValue,
    StrValue,
    TruncatedInputError,
    UnknownTagError,
    Unpacker,
    UnpackerOptions,
    decode,
    iter_decode,
    unpack,
)
from msgpacklite.codec.streams import ByteSource
from msgpacklite.exceptions import DecodeError


class TestScalars:
    """Test nil, booleans and fixints."""

    def test_nil_and_booleans(self) -> None:
        """0xc0, 0xc2 and 0xc3."""
        assert decode(b"\xc0") == NIL
        assert decode(b"\xc2") == BoolValue(False)
        assert decode(b"\xc3") == BoolValue(True)

    def test_positive_fixint(self) -> None:
        """0x00-0x7f decode to their own value."""
        assert decode(b"\x00") == IntValue(0)
        assert decode(b"\x7f") == IntValue(127)

    def test_negative_fixint(self) -> None:
        """0xe0-0xff decode to tag - 256."""
        assert decode(b"\xe0") == IntValue(-32)
        assert decode(b"\xff") == IntValue(-1)


class TestIntegers:
    """Test sized integer forms."""

    @pytest.mark.parametrize(
        "data, expected",
        [
            (b"\xcc\xff", 255),
            (b"\xcd\xff\xff", 65535),
            (b"\xce\xff\xff\xff\xff", 4294967295),
            (b"\xcf\xff\xff\xff\xff\xff\xff\xff\xff", 2**64 - 1),
            (b"\xd0\x80", -128),
            (b"\xd0\x7f", 127),
            (b"\xd1\x80\x00", -32768),
            (b"\xd2\xff\xff\xff\xff", -1),
            (b"\xd3\xff\xff\xff\xff\xff\xff\xff\xff", -1),
            (b"\xd3\x80\x00\x00\x00\x00\x00\x00\x00", -(2**63)),
        ],
    )
    def test_sized_forms(self, data: bytes, expected: int) -> None:
        """Signed forms are sign-extended, unsigned forms never are."""
        assert decode(data) == IntValue(expected)

    def test_uint32_sign_bit(self) -> None:
        """A uint32 with its top bit set is a large positive number."""
        value = decode(b"\xce\xff\xff\xff\xff")
        assert isinstance(value, IntValue)
        assert value.value == 4294967295

    def test_uint16_sign_bit(self) -> None:
        """A uint16 with its top bit set is a large positive number."""
        assert decode(b"\xcd\x80\x00") == IntValue(32768)


class TestFloats:
    """Test float forms."""

    def test_float32_widened(self) -> None:
        """float 32 is widened to a Python float."""
        value = decode(b"\xca\x3f\xc0\x00\x00")
        assert value == FloatValue(1.5)

    def test_float64(self) -> None:
        """float 64 keeps full precision."""
        assert decode(b"\xcb\x3f\xb9\x99\x99\x99\x99\x99\x9a") == FloatValue(0.1)


class TestStringsAndBinary:
    """Test str and bin forms."""

    @pytest.mark.parametrize(
        "data",
        [b"\xa3abc", b"\xd9\x03abc", b"\xda\x00\x03abc", b"\xdb\x00\x00\x00\x03abc"],
    )
    def test_str_forms(self, data: bytes) -> None:
        """fixstr, str 8, str 16 and str 32 all carry the same string."""
        assert decode(data) == StrValue("abc")

    def test_empty_string(self) -> None:
        """An empty fixstr is an empty string."""
        assert decode(b"\xa0") == StrValue("")

    def test_str16_length_is_unsigned(self) -> None:
        """A str 16 length with its top bit set is not negative."""
        value = decode(b"\xda\x80\x00" + b"a" * 32768)
        assert value == StrValue("a" * 32768)

    def test_utf8(self) -> None:
        """Payloads are UTF-8."""
        assert decode(b"\xa2\xc3\xa9") == StrValue("é")

    def test_invalid_utf8(self) -> None:
        """Invalid UTF-8 is an error, never replacement characters."""
        with pytest.raises(InvalidPayloadError):
            decode(b"\xa1\xff")

    @pytest.mark.parametrize(
        "data",
        [b"\xc4\x02xy", b"\xc5\x00\x02xy", b"\xc6\x00\x00\x00\x02xy"],
    )
    def test_bin_forms(self, data: bytes) -> None:
        """bin 8, bin 16 and bin 32 all carry the same bytes."""
        assert decode(data) == BinValue(b"xy")


class TestContainers:
    """Test arrays and maps."""

    def test_fixarray(self) -> None:
        """Reference fixarray from the format description."""
        value = decode(b"\x94\x05\x0a\x14\xcc\xc8")
        assert value == ArrayValue([IntValue(5), IntValue(10), IntValue(20), IntValue(200)])

    def test_array16_and_array32(self) -> None:
        """Sized array headers."""
        expected = ArrayValue([IntValue(1), IntValue(2)])
        assert decode(b"\xdc\x00\x02\x01\x02") == expected
        assert decode(b"\xdd\x00\x00\x00\x02\x01\x02") == expected

    def test_fixmap(self) -> None:
        """A one-pair fixmap."""
        value = decode(b"\x81\xa6schema\x00")
        assert isinstance(value, MapValue)
        assert len(value) == 1
        assert value[StrValue("schema")] == IntValue(0)

    def test_map16_and_map32(self) -> None:
        """Sized map headers."""
        expected = MapValue({StrValue("a"): IntValue(1)})
        assert decode(b"\xde\x00\x01\xa1a\x01") == expected
        assert decode(b"\xdf\x00\x00\x00\x01\xa1a\x01") == expected

    def test_map_order_preserved(self) -> None:
        """Keys come back in wire order."""
        value = decode(bytes.fromhex("82a7636f6d70616374c3a6736368656d6100"))
        assert list(value.keys()) == [StrValue("compact"), StrValue("schema")]

    def test_duplicate_keys_last_wins(self) -> None:
        """A repeated key keeps the last value."""
        value = decode(b"\x82\xa1a\x01\xa1a\x02")
        assert len(value) == 1
        assert value[StrValue("a")] == IntValue(2)

    def test_signed_zero_keys_are_distinct(self) -> None:
        """0.0 and -0.0 keys are separate pairs."""
        data = b"\x82\xcb" + b"\x00" * 8 + b"\x01\xcb\x80" + b"\x00" * 7 + b"\x02"
        value = decode(data)
        assert len(value) == 2
        assert value[FloatValue(0.0)] == IntValue(1)
        assert value[FloatValue(-0.0)] == IntValue(2)

    def test_container_key(self) -> None:
        """Keys may be containers."""
        value = decode(b"\x81\x92\x01\x02\xc0")
        assert value[ArrayValue([IntValue(1), IntValue(2)])] == NIL

    def test_nested(self) -> None:
        """Containers recurse."""
        value = decode(b"\x92\x91\x01\x81\xa1a\x90")
        assert value.to_python() == [[1], {"a": []}]


class TestExtensions:
    """Test ext forms."""

    @pytest.mark.parametrize("tag, size", [(0xD4, 1), (0xD5, 2), (0xD6, 4), (0xD7, 8), (0xD8, 16)])
    def test_fixext(self, tag: int, size: int) -> None:
        """fixext forms have an implied payload size."""
        data = bytes((tag, 7)) + b"\x01" * size
        assert decode(data) == ExtensionValue(7, b"\x01" * size)

    def test_ext8_negative_type(self) -> None:
        """The type byte is signed."""
        assert decode(b"\xc7\x03\xffabc") == ExtensionValue(-1, b"abc")

    def test_ext16_and_ext32(self) -> None:
        """Sized ext headers."""
        assert decode(b"\xc8\x00\x01\x02z") == ExtensionValue(2, b"z")
        assert decode(b"\xc9\x00\x00\x00\x01\x02z") == ExtensionValue(2, b"z")


class TestMalformedInput:
    """Test unknown tags, truncation and trailing data."""

    def test_unknown_tag(self) -> None:
        """0xc1 is never used."""
        with pytest.raises(UnknownTagError) as exc_info:
            decode(b"\xc1")
        assert exc_info.value.tag == 0xC1

    def test_unknown_tag_nested(self) -> None:
        """Unknown tags inside containers are reported too."""
        with pytest.raises(UnknownTagError):
            decode(b"\x91\xc1")

    def test_truncated_str16_header(self) -> None:
        """str 16 tag with one of its two length bytes fails, never a partial string."""
        with pytest.raises(TruncatedInputError) as exc_info:
            decode(b"\xda\x00")
        assert exc_info.value.expected == 2
        assert exc_info.value.received == 1

    @pytest.mark.parametrize(
        "data",
        [
            b"\xa3ab",  # fixstr payload short
            b"\xcd\x01",  # uint 16 short
            b"\xcb\x00\x00",  # float 64 short
            b"\xc4",  # bin 8 missing length
            b"\x92\x01",  # array missing an element
            b"\x81\xa1a",  # map missing a value
            b"\xd4\x01",  # fixext missing payload
            b"\xc7\x03",  # ext 8 missing type byte
        ],
    )
    def test_truncated(self, data: bytes) -> None:
        """Any short read after the tag is TruncatedInputError."""
        with pytest.raises(TruncatedInputError):
            decode(data)

    def test_hostile_length(self) -> None:
        """A huge claimed length fails on the short read."""
        with pytest.raises(TruncatedInputError) as exc_info:
            decode(b"\xdb\xff\xff\xff\xff")
        assert exc_info.value.expected == 2**32 - 1
        assert exc_info.value.received == 0

    def test_hostile_length_stream(self) -> None:
        """Same through a stream source."""
        with pytest.raises(TruncatedInputError):
            unpack(io.BytesIO(b"\xc6\xff\xff\xff\xffabc"))

    def test_truncated_is_decode_error(self) -> None:
        """Truncation belongs to the DecodeError family."""
        with pytest.raises(DecodeError):
            decode(b"\xda\x00")

    def test_extra_data(self) -> None:
        """One-shot decode rejects trailing bytes but reports the value."""
        with pytest.raises(ExtraDataError) as exc_info:
            decode(b"\x01\x02\x03")
        assert exc_info.value.value == IntValue(1)
        assert exc_info.value.extra == b"\x02\x03"


class TestEndOfInput:
    """Test the clean end-of-input case."""

    def test_empty_buffer(self) -> None:
        """A zero-byte source is END_OF_INPUT, not an error."""
        assert decode(b"") is END_OF_INPUT

    def test_empty_stream(self) -> None:
        """Same for streams."""
        assert unpack(io.BytesIO()) is END_OF_INPUT

    def test_after_last_value(self, sample_stream: bytes) -> None:
        """END_OF_INPUT follows the last complete value."""
        unpacker = Unpacker(sample_stream)
        assert unpacker.read_value() == IntValue(5)
        assert unpacker.read_value() == StrValue("hi")
        assert unpacker.read_value() == ArrayValue([IntValue(1), IntValue(2)])
        assert unpacker.read_value() is END_OF_INPUT
        assert unpacker.read_value() is END_OF_INPUT

    def test_iter_decode(self, sample_stream: bytes) -> None:
        """iter_decode stops cleanly at END_OF_INPUT."""
        values = list(iter_decode(io.BytesIO(sample_stream)))
        assert [v.to_python() for v in values] == [5, "hi", [1, 2]]

    def test_iter_decode_truncated_tail(self) -> None:
        """A partial trailing value is an error, not a clean stop."""
        iterator = iter_decode(b"\x05\xa2h")
        assert next(iterator) == IntValue(5)
        with pytest.raises(TruncatedInputError):
            next(iterator)


class TestLimits:
    """Test caller-supplied decoding limits."""

    def test_no_limits_by_default(self) -> None:
        """Deep nesting is accepted without options."""
        data = b"\x91" * 50 + b"\x01"
        value = decode(data)
        for _ in range(50):
            assert isinstance(value, ArrayValue)
            value = value[0]
        assert value == IntValue(1)

    def test_unbounded_nesting_fails_cleanly(self) -> None:
        """Nesting deeper than the interpreter stack is a LimitExceededError."""
        data = b"\x91" * 100000 + b"\x01"
        with pytest.raises(LimitExceededError):
            decode(data)

    def test_decoder_recovers_after_deep_nesting(self) -> None:
        """A later decode works normally after a deep-nesting failure."""
        with pytest.raises(LimitExceededError):
            decode(b"\x91" * 100000 + b"\x01")
        assert decode(b"\x91\x01") == ArrayValue([IntValue(1)])

    def test_max_depth(self) -> None:
        """Nesting beyond max_depth fails."""
        options = UnpackerOptions(max_depth=1)
        assert decode(b"\x91\x01", options) == ArrayValue([IntValue(1)])
        with pytest.raises(LimitExceededError):
            decode(b"\x91\x91\x01", options)

    def test_max_depth_zero_allows_scalars(self) -> None:
        """max_depth=0 allows only scalars."""
        options = UnpackerOptions(max_depth=0)
        assert decode(b"\x05", options) == IntValue(5)
        with pytest.raises(LimitExceededError):
            decode(b"\x80", options)

    @pytest.mark.parametrize(
        "field, data",
        [
            ("max_str_len", b"\xa3abc"),
            ("max_bin_len", b"\xc4\x03abc"),
            ("max_array_len", b"\x93\x01\x02\x03"),
            ("max_map_len", b"\x83\x01\x01\x02\x02\x03\x03"),
            ("max_ext_len", b"\xc7\x03\x01abc"),
        ],
    )
    def test_length_limits(self, field: str, data: bytes) -> None:
        """Lengths beyond the configured limit fail; at the limit they pass."""
        with pytest.raises(LimitExceededError):
            decode(data, UnpackerOptions(**{field: 2}))
        decode(data, UnpackerOptions(**{field: 3}))

    def test_limit_checked_before_payload(self) -> None:
        """An oversized claim fails on the header, before the short read."""
        with pytest.raises(LimitExceededError):
            decode(b"\xdb\xff\xff\xff\xff", UnpackerOptions(max_str_len=1024))


class TestSources:
    """Test interaction with sources."""

    def test_source_errors_propagate(self) -> None:
        """Transport failures are not wrapped in codec errors."""

        class BrokenSource(ByteSource):
            def read_byte(self) -> int | None:
                return 0xDA

            def read_exact(self, size: int) -> bytes:
                raise OSError("link down")

        with pytest.raises(OSError, match="link down"):
            Unpacker(BrokenSource()).read_value()

    def test_short_stream_reads_are_retried(self) -> None:
        """A stream returning one byte per read still decodes."""

        class Trickle(io.RawIOBase):
            def __init__(self, data: bytes) -> None:
                self._data = data

            def readable(self) -> bool:
                return True

            def read(self, size: int = -1) -> bytes:
                chunk, self._data = self._data[:1], self._data[1:]
                return chunk

        assert unpack(Trickle(b"\xa5hello")) == StrValue("hello")
