"""TXT codec: ``#``-delimited sections of ``key: value`` lines.

WHY: Operators read and hand-edit transaction dumps. The TXT format puts
one record per section with every field labelled, so it survives
copy/paste and reordering of keys within a section.

HOW: ``read_sections`` groups lines into sections (a ``#`` line closes a
section and is dropped, blank lines are dropped). ``parse_section`` turns
each section into a key → value dict, and the record is built by looking
up the eight required keys through the shared textual grammar.

RULES:
- Records come out in physical section order
- Lines before the first ``#`` form a section of their own
- Every kept line must contain ``:``; the key is split on the first one,
  trimmed and lower-cased; the value is trimmed
- Repeated keys: last value wins. Unknown keys are ignored
- A missing key raises its field-specific Missing*Error
- A line whose bytes are not UTF-8 is logged and skipped
- Encoding: ``# Record <i> (<TX_TYPE>)``, eight ``key: value`` lines,
  one blank line between records and none after the last
- Descriptions are trimmed on decode and must not contain line breaks
"""

from __future__ import annotations

import logging
from typing import BinaryIO, Sequence

from ypbank_converter.codecs.base import BaseCodec, read_lines, write_bytes
from ypbank_converter.core.grammar import FIELD_NAMES, format_fields, record_from_fields
from ypbank_converter.core.record import Record
from ypbank_converter.errors import (
    MissingAmountError,
    MissingDescriptionError,
    MissingFieldError,
    MissingFromUserIdError,
    MissingStatusError,
    MissingTimestampError,
    MissingToUserIdError,
    MissingTransactionTypeError,
    MissingTxIdError,
    ParseError,
)

logger = logging.getLogger(__name__)

SECTION_MARKER = "#"

MISSING_ERRORS: dict[str, type[MissingFieldError]] = {
    "tx_id": MissingTxIdError,
    "tx_type": MissingTransactionTypeError,
    "from_user_id": MissingFromUserIdError,
    "to_user_id": MissingToUserIdError,
    "amount": MissingAmountError,
    "timestamp": MissingTimestampError,
    "status": MissingStatusError,
    "description": MissingDescriptionError,
}


def read_sections(stream: BinaryIO) -> list[list[str]]:
    """Group the stream's non-blank lines into ``#``-delimited sections."""
    sections: list[list[str]] = []
    current: list[str] = []

    for line_no, line in read_lines(stream):
        if line is None:
            logger.warning("Error reading line %d: not valid UTF-8, skipping", line_no)
            continue
        if line.startswith(SECTION_MARKER):
            if current:
                sections.append(current)
                current = []
            continue
        if line.strip():
            current.append(line)

    if current:
        sections.append(current)
    return sections


def parse_section(lines: list[str]) -> dict[str, str]:
    """Split each ``key: value`` line of a section into a dict.

    Raises:
        ParseError: a line has no colon.
    """
    values: dict[str, str] = {}
    for line in lines:
        key, sep, value = line.partition(":")
        if not sep:
            raise ParseError(f"Invalid line format: {line}")
        values[key.strip().lower()] = value.strip()
    return values


def record_from_section(values: dict[str, str]) -> Record:
    """Build a Record from one parsed section.

    Every key is checked for presence before any value is parsed, so a
    section lacking a key reports that key even if another value is bad.

    Raises:
        MissingFieldError: the field-specific subclass for the first
            absent key, in FIELD_NAMES order.
        ParseError: a present value fails the grammar.
    """
    for name in FIELD_NAMES:
        if name not in values:
            raise MISSING_ERRORS[name](name)
    return record_from_fields(values)


def format_section(index: int, record: Record) -> str:
    """Render one record as a ``# Record N (TYPE)`` section ending in a newline."""
    lines = [f"# Record {index} ({record.tx_type.name})"]
    for name, value in zip(FIELD_NAMES, format_fields(record)):
        lines.append(f"{name}: {value}")
    return "\n".join(lines) + "\n"


class TxtCodec(BaseCodec):
    """Codec for the YPBank TXT format."""

    @property
    def name(self) -> str:
        return "YPBank TXT"

    def decode(self, stream: BinaryIO) -> list[Record]:
        sections = read_sections(stream)
        records = [record_from_section(parse_section(section)) for section in sections]
        logger.debug("Decoded %d TXT records from %d sections", len(records), len(sections))
        return records

    def encode(self, stream: BinaryIO, records: Sequence[Record]) -> None:
        if not records:
            raise ParseError("No records to write")

        for index, record in enumerate(records):
            if index:
                write_bytes(stream, b"\n")
            write_bytes(stream, format_section(index, record).encode("utf-8"))

        logger.debug("Encoded %d TXT records", len(records))
