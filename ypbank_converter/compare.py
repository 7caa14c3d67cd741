"""Record-level diff of two record sequences, keyed by tx_id.

WHY: After a conversion (or between two exports of the same ledger),
users need to confirm that the same transactions came out the other
side, regardless of which format each file is in.

HOW: Each side is indexed by tx_id. Ids present on both sides are
compared by value; ids present on one side only are reported as
missing from the other.

RULES:
- Duplicate tx_ids within one side: the last record wins
- Diff order: left ids in first-seen order, then right-only ids in
  first-seen order
- Comparison is by full Record value (all eight fields)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ypbank_converter.core.record import Record

CHANGED = "changed"
MISSING_RIGHT = "missing_right"
MISSING_LEFT = "missing_left"


@dataclass(frozen=True)
class RecordDiff:
    """One difference between the two sides.

    RULES:
    - kind: CHANGED, MISSING_RIGHT (only in left) or MISSING_LEFT (only in right)
    - left/right: the record on that side, or None when absent
    """

    kind: str
    tx_id: int
    left: Record | None
    right: Record | None


def index_by_tx_id(records: Sequence[Record]) -> dict[int, Record]:
    """Map tx_id to record in first-seen order.

    A later duplicate replaces the earlier record but keeps its position.
    """
    indexed: dict[int, Record] = {}
    for record in records:
        indexed[record.tx_id] = record
    return indexed


def compare_records(left: Sequence[Record], right: Sequence[Record]) -> list[RecordDiff]:
    """Return every difference between ``left`` and ``right``.

    An empty list means both sides hold the same transactions.
    """
    left_index = index_by_tx_id(left)
    right_index = index_by_tx_id(right)

    diffs: list[RecordDiff] = []
    for tx_id, left_record in left_index.items():
        right_record = right_index.get(tx_id)
        if right_record is None:
            diffs.append(RecordDiff(MISSING_RIGHT, tx_id, left_record, None))
        elif right_record != left_record:
            diffs.append(RecordDiff(CHANGED, tx_id, left_record, right_record))

    for tx_id, right_record in right_index.items():
        if tx_id not in left_index:
            diffs.append(RecordDiff(MISSING_LEFT, tx_id, None, right_record))

    return diffs
