"""CSV codec: one header line, then one comma-separated line per record.

WHY: CSV is the interchange format spreadsheets and bank exports speak.
The layout is fixed: a canonical header and eight positional columns.

HOW: The first line must equal the canonical header (trimmed, case-
insensitive). Each following line is split by ``split_csv_line``, a
small quote-aware splitter, and the eight fields go through the shared
textual grammar. Encoding writes the header and one line per record,
quoting descriptions that contain a comma or a colon.

RULES:
- Empty input → ParseError("Empty file"); wrong header → WrongCsvHeaderError
- A line that is not exactly 8 fields fails the whole decode
- A line whose bytes are not UTF-8 is logged and skipped (not fatal)
- ``"`` toggles the quoted state and is never kept; there is no escape
  for a literal quote, so descriptions containing ``"`` do not round-trip
- Descriptions containing line breaks do not round-trip either
- Encoding an empty sequence raises ParseError; no header-only output
"""

from __future__ import annotations

import logging
from typing import BinaryIO, Sequence

from ypbank_converter.codecs.base import BaseCodec, read_lines, write_bytes
from ypbank_converter.core.grammar import FIELD_NAMES, format_fields, record_from_fields
from ypbank_converter.core.record import Record
from ypbank_converter.errors import ParseError, WrongCsvHeaderError

logger = logging.getLogger(__name__)

CSV_HEADER = "TX_ID,TX_TYPE,FROM_USER_ID,TO_USER_ID,AMOUNT,TIMESTAMP,STATUS,DESCRIPTION"

_QUOTE_TRIGGERS = (",", ":")


def split_csv_line(line: str) -> list[str]:
    """Split a CSV line on commas that are outside double quotes.

    Quote characters only switch the in-quotes state; they are dropped
    from the output. ``a,"b,c",d`` → ``["a", "b,c", "d"]``.
    """
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    for ch in line:
        if ch == '"':
            in_quotes = not in_quotes
        elif ch == "," and not in_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(ch)
    fields.append("".join(current))
    return fields


def is_csv_header(line: str) -> bool:
    """True if ``line`` is the CSV header, ignoring case and surrounding whitespace."""
    return line.strip().upper() == CSV_HEADER


def parse_csv_line(line: str) -> Record:
    """Parse one CSV body line into a Record.

    Raises:
        ParseError: wrong field count, or a field fails the grammar.
    """
    parts = split_csv_line(line)
    if len(parts) != len(FIELD_NAMES):
        raise ParseError(
            f"Invalid record, expect {len(FIELD_NAMES)} fields, got: {line}"
        )
    return record_from_fields(dict(zip(FIELD_NAMES, parts)))


def format_csv_line(record: Record) -> str:
    """Render one record as a CSV line (no newline).

    RULES:
    - Only the description is ever quoted
    - It is quoted when it contains a comma or a colon
    - Embedded double quotes are written as-is (the format has no escape)
    """
    fields = format_fields(record)
    description = fields[-1]
    if any(trigger in description for trigger in _QUOTE_TRIGGERS):
        fields[-1] = f'"{description}"'
    return ",".join(fields)


class CsvCodec(BaseCodec):
    """Codec for the YPBank CSV format."""

    @property
    def name(self) -> str:
        return "YPBank CSV"

    def decode(self, stream: BinaryIO) -> list[Record]:
        lines = read_lines(stream)

        first = next(lines, None)
        if first is None:
            raise ParseError("Empty file")
        _, header = first
        if header is None:
            raise ParseError("Header line is not valid UTF-8")
        if not is_csv_header(header):
            raise WrongCsvHeaderError(header)

        records: list[Record] = []
        for line_no, line in lines:
            if line is None:
                logger.warning("Error reading line %d: not valid UTF-8, skipping", line_no)
                continue
            records.append(parse_csv_line(line))

        logger.debug("Decoded %d CSV records", len(records))
        return records

    def encode(self, stream: BinaryIO, records: Sequence[Record]) -> None:
        if not records:
            raise ParseError("No records to write")

        write_bytes(stream, (CSV_HEADER + "\n").encode("utf-8"))
        for record in records:
            write_bytes(stream, (format_csv_line(record) + "\n").encode("utf-8"))

        logger.debug("Encoded %d CSV records", len(records))
