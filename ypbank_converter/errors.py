"""Exception taxonomy for the record codecs.

WHY: Callers (CLI, comparer, tests) need to tell apart *why* a decode or
encode failed: a broken stream, a corrupt BIN frame, a missing TXT key, a
field that does not parse. One typed exception per failure kind makes the
reason inspectable without string matching.

HOW: Every error derives from ParserError. Errors that carry data
(observed bytes, sizes, field names) store it as attributes and build a
readable message for ``str(exc)``.

RULES:
- Codecs raise; only the CLI catches, prints and exits
- Every failure aborts the whole decode/encode (no partial results)
- Stream failures are StreamIOError (UnexpectedEofError for short reads)
- Missing TXT keys raise the field-specific Missing*Error, never ParseError
"""

from __future__ import annotations


class ParserError(Exception):
    """Base class for every codec and dispatcher failure."""


# ---------------------------------------------------------------------------
# I/O
# ---------------------------------------------------------------------------


class StreamIOError(ParserError):
    """Raised when the underlying stream fails to read or write.

    The original OSError (when there is one) is chained as ``__cause__``.
    """


class UnexpectedEofError(StreamIOError):
    """Raised when a stream ends in the middle of a BIN header or body.

    RULES:
    - expected: number of bytes the frame layout required
    - actual: number of bytes the stream delivered before EOF
    """

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Unexpected EOF: expected {expected} bytes, got {actual} bytes"
        )


# ---------------------------------------------------------------------------
# Shape / grammar
# ---------------------------------------------------------------------------


class ParseError(ParserError):
    """Raised when input text or records do not fit the format grammar.

    WHY: Wrong field counts, unparseable integers, unknown enum names and
    empty inputs all share one kind; the message carries the specifics.

    HOW: ``field``, ``raw`` and ``cause`` are set when the failure concerns
    a single named field (see core.grammar.parse_field); otherwise None.
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        raw: str | None = None,
        cause: str | None = None,
    ) -> None:
        self.field = field
        self.raw = raw
        self.cause = cause
        super().__init__(message)


class WrongCsvHeaderError(ParseError):
    """Raised when the first CSV line is not the canonical header."""

    def __init__(self, header: str) -> None:
        self.header = header
        super().__init__(f"Wrong CSV header: {header!r}")


class UnsupportedFormatError(ParserError):
    """Raised when a format name is not one of csv, txt, bin."""

    def __init__(self, format_name: str) -> None:
        self.format_name = format_name
        super().__init__(f"Unsupported format: {format_name}")


# ---------------------------------------------------------------------------
# Field presence (TXT)
# ---------------------------------------------------------------------------


class MissingFieldError(ParserError):
    """Raised when a TXT section lacks a required key."""

    label = "field"

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Missing {self.label}")


class MissingTxIdError(MissingFieldError):
    label = "TxId"


class MissingTransactionTypeError(MissingFieldError):
    label = "Transaction Type"


class MissingFromUserIdError(MissingFieldError):
    label = "From User Id"


class MissingToUserIdError(MissingFieldError):
    label = "To User Id"


class MissingAmountError(MissingFieldError):
    label = "Amount"


class MissingTimestampError(MissingFieldError):
    label = "Timestamp"


class MissingStatusError(MissingFieldError):
    label = "Status"


class MissingDescriptionError(MissingFieldError):
    label = "Description"


# ---------------------------------------------------------------------------
# Enum bytes (BIN)
# ---------------------------------------------------------------------------


class WrongTransactionTypeError(ParserError):
    """Raised when a BIN TX_TYPE byte is not 0, 1 or 2."""

    def __init__(self, value: int) -> None:
        self.value = value
        super().__init__(f"Wrong transaction type: {value}")


class WrongStatusTypeError(ParserError):
    """Raised when a BIN STATUS byte is not 0, 1 or 2."""

    def __init__(self, value: int) -> None:
        self.value = value
        super().__init__(f"Wrong status type: {value}")


# ---------------------------------------------------------------------------
# BIN framing
# ---------------------------------------------------------------------------


class InvalidMagicError(ParserError):
    """Raised when a BIN frame does not start with ``YPBN``.

    Fatal to the whole decode; the codec never tries to resynchronise.
    """

    def __init__(self, magic: bytes) -> None:
        self.magic = bytes(magic)
        super().__init__(
            f"Invalid magic bytes: expected YPBN (59 50 42 4E), got {self.magic.hex(' ').upper()}"
        )


class RecordTooSmallError(ParserError):
    """Raised when a BIN header declares RECORD_SIZE below the fixed body size."""

    def __init__(self, size: int, minimum: int) -> None:
        self.size = size
        self.minimum = minimum
        super().__init__(f"Record size too small: {size} bytes (minimum: {minimum})")


class RecordTooLargeError(ParserError):
    """Raised when a BIN frame body exceeds MAX_RECORD_SIZE.

    Checked on decode before the body is read, and on encode before
    its frame is written.
    """

    def __init__(self, size: int, maximum: int) -> None:
        self.size = size
        self.maximum = maximum
        super().__init__(f"Record size too large: {size} bytes (maximum: {maximum})")


class DescriptionOverflowError(ParserError):
    """Raised when DESC_LEN exceeds the bytes left in the frame body."""

    def __init__(self, desc_len: int, remaining: int) -> None:
        self.desc_len = desc_len
        self.remaining = remaining
        super().__init__(
            f"Description length overflow: desc_len = {desc_len}, remaining bytes = {remaining}"
        )


class Utf8Error(ParserError):
    """Raised when BIN description bytes are not valid UTF-8."""

    def __init__(self, error: UnicodeDecodeError) -> None:
        self.error = error
        super().__init__(f"UTF-8 decoding error: {error}")
