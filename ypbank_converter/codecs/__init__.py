"""Codec registry: one codec class per wire format.

WHY: The dispatcher, the CLI and the comparer need a single lookup to
find the codec for a format. A central dict keeps the set closed and
makes adding a format a one-line change.

HOW: CODECS maps RecordFormat tags to codec *classes* (not instances).
Callers instantiate as needed: ``codec = CODECS[RecordFormat.CSV]()``.

RULES:
- Keys are RecordFormat members; string names are resolved beforehand
- Values are BaseCodec subclasses
- Every codec listed here must be importable without side effects
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ypbank_converter.codecs.base import RecordFormat
from ypbank_converter.codecs.bin_codec import BinCodec
from ypbank_converter.codecs.csv_codec import CsvCodec
from ypbank_converter.codecs.txt_codec import TxtCodec

if TYPE_CHECKING:
    from ypbank_converter.codecs.base import BaseCodec

CODECS: dict[RecordFormat, type[BaseCodec]] = {
    RecordFormat.CSV: CsvCodec,
    RecordFormat.TXT: TxtCodec,
    RecordFormat.BIN: BinCodec,
}
