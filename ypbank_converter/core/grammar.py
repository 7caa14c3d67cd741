"""Textual grammar for record fields, shared by the CSV and TXT codecs.

WHY: CSV columns and TXT values spell integers and enum names the same
way. Python's ``int()`` is far more permissive than the wire formats
(it accepts ``+1``, ``1_000`` and surrounding whitespace), so the
grammar is checked explicitly before converting.

HOW: ``parse_u64``/``parse_i64`` match a strict decimal pattern and then
range-check. ``parse_field`` applies any of these parsers and wraps a
failure into a ParseError that names the field and its raw text.

RULES:
- Unsigned: ``[0-9]+`` within 0..2**64-1
- Signed: ``-?[0-9]+`` within -2**63..2**63-1
- No leading ``+``, no separators, no whitespace
- Enum names parse case-insensitively via TransactionType/Status.parse
"""

from __future__ import annotations

import re
from typing import Callable, TypeVar

from ypbank_converter.core.record import Record, Status, TransactionType
from ypbank_converter.errors import ParseError

T = TypeVar("T")

U64_MAX = 2**64 - 1
I64_MIN = -(2**63)
I64_MAX = 2**63 - 1

_UNSIGNED_RE = re.compile(r"[0-9]+")
_SIGNED_RE = re.compile(r"-?[0-9]+")

# Field order for CSV columns and TXT keys
FIELD_NAMES = (
    "tx_id",
    "tx_type",
    "from_user_id",
    "to_user_id",
    "amount",
    "timestamp",
    "status",
    "description",
)


def parse_u64(text: str) -> int:
    """Parse an unsigned 64-bit decimal.

    Raises:
        ValueError: not plain digits, or above U64_MAX.
    """
    if not _UNSIGNED_RE.fullmatch(text):
        raise ValueError("invalid digit found in string")
    value = int(text)
    if value > U64_MAX:
        raise ValueError("number too large to fit in target type")
    return value


def parse_i64(text: str) -> int:
    """Parse a signed 64-bit decimal; only a leading ``-`` is allowed."""
    if not _SIGNED_RE.fullmatch(text):
        raise ValueError("invalid digit found in string")
    value = int(text)
    if value < I64_MIN:
        raise ValueError("number too small to fit in target type")
    if value > I64_MAX:
        raise ValueError("number too large to fit in target type")
    return value


def parse_text(text: str) -> str:
    return text


FIELD_PARSERS: dict[str, Callable[[str], object]] = {
    "tx_id": parse_u64,
    "tx_type": TransactionType.parse,
    "from_user_id": parse_u64,
    "to_user_id": parse_u64,
    "amount": parse_i64,
    "timestamp": parse_u64,
    "status": Status.parse,
    "description": parse_text,
}


def parse_field(name: str, raw: str, parser: Callable[[str], T]) -> T:
    """Parse one field, turning any failure into a ParseError.

    Args:
        name: Field name used in the error message (e.g. ``"amount"``).
        raw: The field text exactly as it appeared in the input.
        parser: Callable raising ValueError on bad input.

    Raises:
        ParseError: with ``field``, ``raw`` and ``cause`` populated.
    """
    try:
        return parser(raw)
    except ValueError as exc:
        raise ParseError(
            f"Failed to parse {name}: {raw} error: {exc}",
            field=name,
            raw=raw,
            cause=str(exc),
        ) from exc


def record_from_fields(values: dict[str, str]) -> Record:
    """Build a Record from raw text values keyed by field name.

    The caller guarantees every key in FIELD_NAMES is present.
    """
    parsed = {
        name: parse_field(name, values[name], FIELD_PARSERS[name])
        for name in FIELD_NAMES
    }
    return Record(**parsed)


def format_fields(record: Record) -> list[str]:
    """Render a record's fields as text, in FIELD_NAMES order."""
    return [
        str(record.tx_id),
        record.tx_type.name,
        str(record.from_user_id),
        str(record.to_user_id),
        str(record.amount),
        str(record.timestamp),
        record.status.name,
        record.description,
    ]
