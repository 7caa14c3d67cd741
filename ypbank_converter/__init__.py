"""YPBank record converter: CSV, TXT and BIN transaction codecs.

WHY: Bank transaction exports arrive as delimited text, human-readable
key/value sections, or compact binary frames. Tools downstream need a
single, loss-free way to move records between those representations.

HOW: Three layers: the Record model (core), one codec per wire format
(codecs), and a dispatcher (dispatch) that picks a codec from a format
name. The CLI and the comparer are thin callers of the dispatcher.

RULES:
- All codecs consume and produce the same Record model
- Adding a wire format = one new codec module + one registry line
- Every decode/encode either completes or raises a ParserError
"""

from ypbank_converter.core.record import Record, Status, TransactionType
from ypbank_converter.dispatch import (
    decode,
    decode_bytes,
    encode,
    encode_bytes,
    format_from_filename,
)

__version__ = "0.1.0"

__all__ = [
    "Record",
    "Status",
    "TransactionType",
    "decode",
    "decode_bytes",
    "encode",
    "encode_bytes",
    "format_from_filename",
]
