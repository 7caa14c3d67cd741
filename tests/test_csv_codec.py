"""Unit tests for the CSV codec.

WHY: The CSV header and column order are a fixed contract with external
tools. Header checks, field-count checks and description quoting are the
places where a silent mistake would produce files nobody else can read.

HOW: Decode hand-written CSV bytes and encode sample records through
CsvCodec directly, using io.BytesIO streams.
"""

import dataclasses
import io
import logging

import pytest

from ypbank_converter.codecs.csv_codec import CSV_HEADER, CsvCodec, split_csv_line
from ypbank_converter.core.record import Status, TransactionType
from ypbank_converter.errors import ParseError, WrongCsvHeaderError


def _decode(data: bytes):
    return CsvCodec().decode(io.BytesIO(data))


def _encode(records) -> bytes:
    buffer = io.BytesIO()
    CsvCodec().encode(buffer, records)
    return buffer.getvalue()


class TestSplitCsvLine:
    def test_plain(self):
        assert split_csv_line("a,b,c") == ["a", "b", "c"]

    def test_comma_inside_quotes(self):
        assert split_csv_line('1,"x,y",2') == ["1", "x,y", "2"]

    def test_quotes_are_dropped(self):
        assert split_csv_line('"abc"') == ["abc"]

    def test_trailing_empty_field(self):
        assert split_csv_line("a,b,") == ["a", "b", ""]


class TestCsvDecode:
    def test_scenario_record(self, scenario_csv, scenario_record):
        records = _decode(scenario_csv)
        assert len(records) == 1
        record = records[0]
        assert record.tx_id == 123
        assert record.tx_type is TransactionType.DEPOSIT
        assert record.amount == 1000
        assert record.status is Status.SUCCESS
        assert record == scenario_record

    def test_header_is_case_insensitive_and_trimmed(self, scenario_record):
        data = ("  " + CSV_HEADER.lower() + "  \r\n"
                "123,DEPOSIT,456,789,1000,1640995200,SUCCESS,Test transaction\r\n").encode()
        assert _decode(data) == [scenario_record]

    def test_empty_stream(self):
        with pytest.raises(ParseError) as exc_info:
            _decode(b"")
        assert not isinstance(exc_info.value, WrongCsvHeaderError)
        assert "Empty file" in str(exc_info.value)

    def test_wrong_header(self):
        data = b"ID,TYPE,FROM,TO,AMOUNT,TS,STATUS,DESC\n"
        with pytest.raises(WrongCsvHeaderError) as exc_info:
            _decode(data)
        assert exc_info.value.header.startswith("ID,TYPE")

    def test_header_only_yields_no_records(self):
        assert _decode((CSV_HEADER + "\n").encode()) == []

    @pytest.mark.parametrize("row", [
        "123,Deposit,456,789,1000,1640995200,Success",
        "123,Deposit,456,789,1000,1640995200,Success,Test,extra",
    ])
    def test_wrong_field_count(self, row):
        data = (CSV_HEADER + "\n" + row + "\n").encode()
        with pytest.raises(ParseError) as exc_info:
            _decode(data)
        assert row in str(exc_info.value)

    def test_unknown_transaction_type(self):
        data = (CSV_HEADER + "\n"
                "123,REFUND,456,789,1000,1640995200,Success,x\n").encode()
        with pytest.raises(ParseError) as exc_info:
            _decode(data)
        assert exc_info.value.field == "tx_type"
        assert exc_info.value.raw == "REFUND"

    def test_bad_integer_fails_whole_decode(self):
        data = (CSV_HEADER + "\n"
                "1,Deposit,1,2,10,0,Success,ok\n"
                "2,Deposit,1,2,ten,0,Success,bad\n").encode()
        with pytest.raises(ParseError) as exc_info:
            _decode(data)
        assert exc_info.value.field == "amount"

    def test_quoted_description_with_comma(self):
        data = (CSV_HEADER + "\n"
                '5,Transfer,1,2,-30,10,Pending,"Refund, partial"\n').encode()
        records = _decode(data)
        assert records[0].description == "Refund, partial"
        assert records[0].amount == -30

    def test_undecodable_line_is_skipped(self, caplog):
        data = (CSV_HEADER + "\n").encode() + b"\xff\xfe garbage\n" + (
            "1,Deposit,1,2,10,0,Success,ok\n").encode()
        with caplog.at_level(logging.WARNING):
            records = _decode(data)
        assert [r.tx_id for r in records] == [1]
        assert "line 2" in caplog.text

    def test_order_preserved(self, sample_records):
        assert _decode(_encode(sample_records)) == sample_records


class TestCsvEncode:
    def test_empty_sequence_fails(self):
        with pytest.raises(ParseError) as exc_info:
            _encode([])
        assert "No records to write" in str(exc_info.value)

    def test_header_and_line_layout(self, scenario_record):
        text = _encode([scenario_record]).decode()
        assert text == (
            CSV_HEADER + "\n"
            "123,DEPOSIT,456,789,1000,1640995200,SUCCESS,Test transaction\n"
        )

    @pytest.mark.parametrize("description", ["a,b", "note: x"])
    def test_quotes_description_with_comma_or_colon(self, scenario_record, description):
        record = dataclasses.replace(scenario_record, description=description)
        line = _encode([record]).decode().splitlines()[1]
        assert line.endswith(',"{}"'.format(description))

    def test_plain_description_not_quoted(self, scenario_record):
        line = _encode([scenario_record]).decode().splitlines()[1]
        assert '"' not in line
