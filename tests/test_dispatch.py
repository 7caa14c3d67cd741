"""End-to-end tests through the dispatcher entry points.

WHY: The dispatcher is the only surface external callers use. Round-trip
through every format, cross-format conversion and format-name handling
are the product's whole purpose.

HOW: decode/encode with io.BytesIO streams for every format, plus
extension inference and the unsupported-format path.
"""

import io

import pytest

from ypbank_converter.codecs import CODECS
from ypbank_converter.codecs.base import BaseCodec, RecordFormat
from ypbank_converter.dispatch import (
    decode,
    decode_bytes,
    encode,
    encode_bytes,
    format_from_filename,
)
from ypbank_converter.errors import ParseError, UnsupportedFormatError

FORMATS = ["csv", "txt", "bin"]


class UntouchableStream(io.RawIOBase):
    """Fails the test if anything reads from or writes to it."""

    def read(self, size=-1):
        pytest.fail("stream was read")

    def readline(self, size=-1):
        pytest.fail("stream was read")

    def write(self, data):
        pytest.fail("stream was written")


class TestRegistry:
    def test_every_format_registered(self):
        assert set(CODECS) == set(RecordFormat)
        for codec_cls in CODECS.values():
            assert issubclass(codec_cls, BaseCodec)
            assert codec_cls().name

    @pytest.mark.parametrize("name", ["csv", "CSV", "Txt", "BIN"])
    def test_resolve_case_insensitive(self, name):
        assert RecordFormat.resolve(name).value == name.lower()


class TestRoundTrip:
    @pytest.mark.parametrize("fmt", FORMATS)
    def test_round_trip_preserves_values_and_order(self, fmt, sample_records):
        buffer = io.BytesIO()
        encode(buffer, sample_records, fmt)
        buffer.seek(0)
        assert decode(buffer, fmt) == sample_records

    @pytest.mark.parametrize("fmt", FORMATS)
    def test_reversed_order_survives(self, fmt, sample_records):
        records = list(reversed(sample_records))
        assert decode_bytes(encode_bytes(records, fmt), fmt) == records

    @pytest.mark.parametrize("fmt", FORMATS)
    def test_duplicate_tx_ids_kept(self, fmt, scenario_record):
        records = [scenario_record, scenario_record]
        assert decode_bytes(encode_bytes(records, fmt), fmt) == records

    def test_csv_to_bin_to_txt(self, sample_records):
        from_csv = decode_bytes(encode_bytes(sample_records, "csv"), "csv")
        from_bin = decode_bytes(encode_bytes(from_csv, "bin"), "bin")
        from_txt = decode_bytes(encode_bytes(from_bin, "txt"), "txt")
        for original, converted in zip(sample_records, from_txt):
            assert converted.tx_id == original.tx_id
            assert converted.amount == original.amount
            assert converted.tx_type is original.tx_type
            assert converted.status is original.status
        assert from_txt == sample_records

    def test_scenario_csv_to_bin(self, scenario_csv):
        records = decode_bytes(scenario_csv, "csv")
        data = encode_bytes(records, "bin")
        assert data[:4] == b"\x59\x50\x42\x4e"
        assert len(data) == 8 + 46 + len("Test transaction")


class TestEmptyEncode:
    @pytest.mark.parametrize("fmt", FORMATS)
    def test_empty_sequence_never_produces_output(self, fmt):
        buffer = io.BytesIO()
        with pytest.raises(ParseError):
            encode(buffer, [], fmt)
        assert buffer.getvalue() == b""


class TestUnsupportedFormat:
    def test_decode_does_not_touch_stream(self):
        with pytest.raises(UnsupportedFormatError) as exc_info:
            decode(UntouchableStream(), "xml")
        assert exc_info.value.format_name == "xml"

    def test_encode_does_not_touch_stream(self, sample_records):
        with pytest.raises(UnsupportedFormatError):
            encode(UntouchableStream(), sample_records, "json")


class TestFormatFromFilename:
    @pytest.mark.parametrize("path,expected", [
        ("data.csv", "csv"),
        ("data.txt", "txt"),
        ("data.bin", "bin"),
        ("DATA.BIN", "bin"),
        ("/tmp/archive.2024.txt", "txt"),
        ("data.xml", "csv"),
        ("data", "csv"),
        ("", "csv"),
    ])
    def test_extension_mapping(self, path, expected):
        assert format_from_filename(path) == expected
