"""Shared test fixtures for the ypbank_converter test suite.

WHY: Every codec test needs the same small set of realistic records,
including the edge cases that matter for the wire formats: negative
amounts, u64 extremes, multi-byte UTF-8, and descriptions that force
CSV quoting.

HOW: Pytest fixtures return fresh lists of Records plus the canonical
single-record scenario (tx 123, "Test transaction") as CSV text.

RULES:
- Descriptions avoid ``"`` and line breaks (known non-round-trip cases)
- Descriptions have no leading/trailing whitespace (TXT trims values)
"""

from typing import List

import pytest

from ypbank_converter.core.record import Record, Status, TransactionType

CSV_HEADER_LINE = "TX_ID,TX_TYPE,FROM_USER_ID,TO_USER_ID,AMOUNT,TIMESTAMP,STATUS,DESCRIPTION"

SCENARIO_RECORD = Record(
    tx_id=123,
    tx_type=TransactionType.DEPOSIT,
    from_user_id=456,
    to_user_id=789,
    amount=1000,
    timestamp=1640995200,
    status=Status.SUCCESS,
    description="Test transaction",
)

SAMPLE_RECORDS: List[Record] = [
    SCENARIO_RECORD,
    Record(
        tx_id=1001,
        tx_type=TransactionType.TRANSFER,
        from_user_id=42,
        to_user_id=43,
        amount=-2500,
        timestamp=1700000000,
        status=Status.PENDING,
        description="Refund, partial: order 77",
    ),
    Record(
        tx_id=2**64 - 1,
        tx_type=TransactionType.WITHDRAWAL,
        from_user_id=0,
        to_user_id=2**64 - 1,
        amount=-(2**63),
        timestamp=0,
        status=Status.FAILURE,
        description="Снятие наличных 💳",
    ),
    Record(
        tx_id=7,
        tx_type=TransactionType.DEPOSIT,
        from_user_id=0,
        to_user_id=99,
        amount=2**63 - 1,
        timestamp=1640995200,
        status=Status.SUCCESS,
        description="",
    ),
]


@pytest.fixture
def scenario_record():
    """The single Deposit record used by the documented scenarios."""
    return SCENARIO_RECORD


@pytest.fixture
def scenario_csv():
    """CSV bytes for the scenario record under the canonical header."""
    return (
        CSV_HEADER_LINE + "\n"
        "123,Deposit,456,789,1000,1640995200,Success,Test transaction\n"
    ).encode("utf-8")


@pytest.fixture
def sample_records():
    """Four records covering sign, range, UTF-8 and quoting edge cases."""
    return list(SAMPLE_RECORDS)
