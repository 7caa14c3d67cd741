"""Format dispatcher: the single entry point for decoding and encoding.

WHY: Callers know a format only as a name ("csv", "txt", "bin"), usually
taken from a CLI flag or a file extension. The dispatcher turns that
name into a codec once, so nothing below it deals in strings.

HOW: ``RecordFormat.resolve`` maps the name to a tag (or raises
UnsupportedFormatError before the stream is touched); the tag selects a
codec class from the CODECS registry.

RULES:
- Format names are case-insensitive
- An unknown format never reads from or writes to the stream
- Streams are binary file-like objects
- decode_bytes/encode_bytes are in-memory conveniences over BytesIO
"""

from __future__ import annotations

import io
import logging
import os
from pathlib import Path
from typing import BinaryIO, Sequence

from ypbank_converter.codecs import CODECS
from ypbank_converter.codecs.base import RecordFormat
from ypbank_converter.config import DEFAULT_FORMAT, EXTENSION_FORMATS
from ypbank_converter.core.record import Record

logger = logging.getLogger(__name__)


def decode(stream: BinaryIO, fmt: str | RecordFormat) -> list[Record]:
    """Decode every record in ``stream`` using the named format.

    Args:
        stream: Readable binary stream.
        fmt: "csv", "txt" or "bin" (any case), or a RecordFormat.

    Returns:
        Records in the order they appear in the stream.

    Raises:
        UnsupportedFormatError: ``fmt`` is not a known format.
        ParserError: any decode failure (the whole decode is aborted).
    """
    record_format = RecordFormat.resolve(fmt)
    codec = CODECS[record_format]()
    logger.debug("Decoding with %s", codec.name)
    return codec.decode(stream)


def encode(stream: BinaryIO, records: Sequence[Record], fmt: str | RecordFormat) -> None:
    """Encode ``records`` to ``stream`` using the named format.

    Raises:
        UnsupportedFormatError: ``fmt`` is not a known format.
        ParseError: ``records`` is empty.
        ParserError: any other encode failure.
    """
    record_format = RecordFormat.resolve(fmt)
    codec = CODECS[record_format]()
    logger.debug("Encoding %d records with %s", len(records), codec.name)
    codec.encode(stream, records)


def decode_bytes(data: bytes, fmt: str | RecordFormat) -> list[Record]:
    return decode(io.BytesIO(data), fmt)


def encode_bytes(records: Sequence[Record], fmt: str | RecordFormat) -> bytes:
    buffer = io.BytesIO()
    encode(buffer, records, fmt)
    return buffer.getvalue()


def format_from_filename(path: str | os.PathLike) -> str:
    """Infer the format name from a file extension.

    ``.csv``, ``.txt`` and ``.bin`` (any case) map to their format; any
    other extension, or none at all, maps to DEFAULT_FORMAT.
    """
    suffix = Path(path).suffix.lower()
    return EXTENSION_FORMATS.get(suffix, DEFAULT_FORMAT)
