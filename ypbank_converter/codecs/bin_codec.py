"""BIN codec: one length-prefixed, magic-tagged frame per record.

WHY: The binary format is the compact, exact-width representation used
for archival and bulk transfer. Each frame is self-delimiting, so the
stream is just frames back to back with no header or footer.

HOW: Frame layout (all integers big-endian)::

    MAGIC        4  b"YPBN"
    RECORD_SIZE  4  u32, length of the body that follows
    --- body ---
    TX_ID        8  u64
    TX_TYPE      1  0=DEPOSIT 1=TRANSFER 2=WITHDRAWAL
    FROM_USER_ID 8  u64
    TO_USER_ID   8  u64
    AMOUNT       8  i64 (two's complement)
    TIMESTAMP    8  u64
    STATUS       1  0=SUCCESS 1=FAILURE 2=PENDING
    DESC_LEN     4  u32
    DESCRIPTION  DESC_LEN bytes of UTF-8, no terminator

The fixed body prefix is MIN_BODY_SIZE (46) bytes, so a frame written by
this codec has RECORD_SIZE = 46 + DESC_LEN.

RULES:
- Zero bytes where a header is expected ends the stream cleanly
- A partial header or short body raises UnexpectedEofError
- Bad magic is fatal (InvalidMagicError); there is no resync
- RECORD_SIZE is bounds-checked before the body is read
- DESC_LEN may not exceed RECORD_SIZE - 46 (DescriptionOverflowError);
  any body bytes after the description are ignored
- Encoding counts DESC_LEN in UTF-8 bytes, not characters
"""

from __future__ import annotations

import logging
import struct
from typing import BinaryIO, Sequence

from ypbank_converter.codecs.base import BaseCodec, write_bytes
from ypbank_converter.core.record import Record, Status, TransactionType
from ypbank_converter.errors import (
    DescriptionOverflowError,
    InvalidMagicError,
    ParseError,
    RecordTooLargeError,
    RecordTooSmallError,
    StreamIOError,
    UnexpectedEofError,
    Utf8Error,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Wire constants
# ---------------------------------------------------------------------------

MAGIC = b"YPBN"
HEADER_SIZE = 8
MIN_BODY_SIZE = 46
MAX_RECORD_SIZE = 10 * 1024 * 1024

_HEADER = struct.Struct(">4sI")
# TX_ID, TX_TYPE, FROM, TO, AMOUNT, TIMESTAMP, STATUS, DESC_LEN
_BODY_PREFIX = struct.Struct(">QBQQqQBI")


def read_exact(stream: BinaryIO, size: int) -> bytes:
    """Read exactly ``size`` bytes, or fewer only if the stream ends.

    Raises:
        StreamIOError: the stream itself failed to read.
    """
    chunks: list[bytes] = []
    remaining = size
    while remaining > 0:
        try:
            chunk = stream.read(remaining)
        except OSError as exc:
            raise StreamIOError(f"IO error: {exc}") from exc
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def parse_header(header: bytes) -> int:
    """Validate a frame header and return its RECORD_SIZE.

    Raises:
        InvalidMagicError: the first four bytes are not ``YPBN``.
        RecordTooSmallError: RECORD_SIZE < MIN_BODY_SIZE.
        RecordTooLargeError: RECORD_SIZE > MAX_RECORD_SIZE.
    """
    magic, record_size = _HEADER.unpack(header)
    if magic != MAGIC:
        raise InvalidMagicError(magic)
    if record_size < MIN_BODY_SIZE:
        raise RecordTooSmallError(record_size, MIN_BODY_SIZE)
    if record_size > MAX_RECORD_SIZE:
        raise RecordTooLargeError(record_size, MAX_RECORD_SIZE)
    return record_size


def parse_body(body: bytes) -> Record:
    """Parse one frame body into a Record.

    Raises:
        UnexpectedEofError: body shorter than MIN_BODY_SIZE.
        WrongTransactionTypeError / WrongStatusTypeError: bad enum byte.
        DescriptionOverflowError: DESC_LEN runs past the body.
        Utf8Error: description is not valid UTF-8.
    """
    if len(body) < MIN_BODY_SIZE:
        raise UnexpectedEofError(MIN_BODY_SIZE, len(body))

    (
        tx_id,
        tx_type_byte,
        from_user_id,
        to_user_id,
        amount,
        timestamp,
        status_byte,
        desc_len,
    ) = _BODY_PREFIX.unpack_from(body)

    tx_type = TransactionType.from_byte(tx_type_byte)
    status = Status.from_byte(status_byte)

    remaining = len(body) - MIN_BODY_SIZE
    if desc_len > remaining:
        raise DescriptionOverflowError(desc_len, remaining)

    raw_description = body[MIN_BODY_SIZE:MIN_BODY_SIZE + desc_len]
    try:
        description = raw_description.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise Utf8Error(exc) from exc

    return Record(
        tx_id=tx_id,
        tx_type=tx_type,
        from_user_id=from_user_id,
        to_user_id=to_user_id,
        amount=amount,
        timestamp=timestamp,
        status=status,
        description=description,
    )


def build_frame(record: Record) -> bytes:
    """Serialise one record as a complete frame (header + body).

    Raises:
        RecordTooLargeError: the body would exceed MAX_RECORD_SIZE.
        ParseError: an integer field is out of its u64/i64 range.
    """
    description = record.description.encode("utf-8")
    record_size = MIN_BODY_SIZE + len(description)
    if record_size > MAX_RECORD_SIZE:
        raise RecordTooLargeError(record_size, MAX_RECORD_SIZE)

    try:
        prefix = _BODY_PREFIX.pack(
            record.tx_id,
            record.tx_type.to_byte(),
            record.from_user_id,
            record.to_user_id,
            record.amount,
            record.timestamp,
            record.status.to_byte(),
            len(description),
        )
    except struct.error as exc:
        raise ParseError(f"Failed to encode record {record.tx_id}: {exc}") from exc

    return _HEADER.pack(MAGIC, record_size) + prefix + description


class BinCodec(BaseCodec):
    """Codec for the YPBank BIN format."""

    @property
    def name(self) -> str:
        return "YPBank BIN"

    def decode(self, stream: BinaryIO) -> list[Record]:
        records: list[Record] = []

        while True:
            header = read_exact(stream, HEADER_SIZE)
            if not header:
                break
            if len(header) < HEADER_SIZE:
                raise UnexpectedEofError(HEADER_SIZE, len(header))

            record_size = parse_header(header)

            body = read_exact(stream, record_size)
            if len(body) < record_size:
                raise UnexpectedEofError(record_size, len(body))

            records.append(parse_body(body))

        logger.debug("Decoded %d BIN frames", len(records))
        return records

    def encode(self, stream: BinaryIO, records: Sequence[Record]) -> None:
        if not records:
            raise ParseError("No records to write")

        for record in records:
            write_bytes(stream, build_frame(record))

        logger.debug("Encoded %d BIN frames", len(records))
