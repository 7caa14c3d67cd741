"""Abstract base codec and the closed set of format tags.

WHY: Every wire format consumes and produces the same list of Records
but lays bytes out differently. A common interface lets the dispatcher,
the CLI and the comparer work with any codec generically.

HOW: BaseCodec is an ABC with two requirements, ``decode()`` and
``encode()``, both operating on binary streams. RecordFormat is the
closed set of format tags; format *names* are resolved to a tag once, at
the dispatcher boundary, and never passed around as strings after that.

RULES:
- Codecs are stateless; one instance may serve any number of calls
- Streams are binary (``read()``/``write()`` of bytes)
- ``encode()`` of an empty sequence raises ParseError in every codec
- To add a wire format:
  1. Create a new module in codecs/
  2. Subclass BaseCodec and implement decode() and encode()
  3. Add a RecordFormat member and register it in codecs/__init__.py
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import BinaryIO, Iterator, Sequence

from ypbank_converter.core.record import Record
from ypbank_converter.errors import StreamIOError, UnsupportedFormatError


class RecordFormat(str, Enum):
    """Supported wire formats. Values double as file extensions."""

    CSV = "csv"
    TXT = "txt"
    BIN = "bin"

    @classmethod
    def resolve(cls, name: str | RecordFormat) -> RecordFormat:
        """Resolve a case-insensitive format name to its tag.

        Raises:
            UnsupportedFormatError: name is not csv, txt or bin.
        """
        if isinstance(name, RecordFormat):
            return name
        try:
            return cls(str(name).lower())
        except ValueError:
            raise UnsupportedFormatError(str(name)) from None


class BaseCodec(ABC):
    """Abstract base for all record codecs."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'YPBank CSV'."""

    @abstractmethod
    def decode(self, stream: BinaryIO) -> list[Record]:
        """Read every record from ``stream`` in physical order.

        Raises:
            ParserError: on any I/O, framing, presence or grammar failure.
        """

    @abstractmethod
    def encode(self, stream: BinaryIO, records: Sequence[Record]) -> None:
        """Write ``records`` to ``stream`` in order.

        Raises:
            ParseError: ``records`` is empty.
            ParserError: on any other failure.
        """


def write_bytes(stream: BinaryIO, data: bytes) -> None:
    """Write to ``stream``, converting OSError into StreamIOError."""
    try:
        stream.write(data)
    except OSError as exc:
        raise StreamIOError(f"IO error: {exc}") from exc


def read_lines(stream: BinaryIO) -> Iterator[tuple[int, str | None]]:
    """Yield ``(line_number, text)`` for each line of a binary stream.

    Line numbers are 1-based. The trailing ``\\n`` or ``\\r\\n`` is removed.
    ``text`` is None when the line's bytes are not valid UTF-8; the caller
    decides whether that line is fatal or skippable.

    Raises:
        StreamIOError: the stream itself failed to read.
    """
    line_no = 0
    while True:
        try:
            raw = stream.readline()
        except OSError as exc:
            raise StreamIOError(f"IO error: {exc}") from exc
        if not raw:
            return
        line_no += 1
        if raw.endswith(b"\n"):
            raw = raw[:-1]
            if raw.endswith(b"\r"):
                raw = raw[:-1]
        try:
            text: str | None = raw.decode("utf-8")
        except UnicodeDecodeError:
            text = None
        yield line_no, text
