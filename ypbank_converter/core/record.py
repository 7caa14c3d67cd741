"""The transaction record shared by every codec.

WHY: CSV, TXT and BIN each spell a transaction differently, but they all
carry the same eight fields. One immutable model lets any codec decode
into it and any other codec encode from it, so conversion is just
``encode(decode(src))``.

HOW: Record is a frozen dataclass. The two closed enumerations,
TransactionType and Status, are plain ``Enum`` classes whose values are
their BIN wire bytes.

RULES:
- All eight fields are mandatory; there are no defaults
- Field order matches the CSV column order and the BIN body layout
- TransactionType and Status are independent: both use 0/1/2 on the
  wire, but DEPOSIT != SUCCESS and they never share a lookup
- Textual names are upper-case; parsing is case-insensitive
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ypbank_converter.errors import WrongStatusTypeError, WrongTransactionTypeError


class TransactionType(Enum):
    """Kind of money movement. Values are the BIN TX_TYPE byte."""

    DEPOSIT = 0
    TRANSFER = 1
    WITHDRAWAL = 2

    @classmethod
    def from_byte(cls, value: int) -> TransactionType:
        """Map a BIN TX_TYPE byte to its member.

        Raises:
            WrongTransactionTypeError: value is not 0, 1 or 2.
        """
        if value == 0:
            return cls.DEPOSIT
        if value == 1:
            return cls.TRANSFER
        if value == 2:
            return cls.WITHDRAWAL
        raise WrongTransactionTypeError(value)

    def to_byte(self) -> int:
        return self.value

    @classmethod
    def parse(cls, text: str) -> TransactionType:
        """Parse a case-insensitive name such as ``deposit`` or ``TRANSFER``."""
        member = cls.__members__.get(text.upper())
        if member is None:
            raise ValueError("Wrong transaction type")
        return member


class Status(Enum):
    """Outcome of a transaction. Values are the BIN STATUS byte."""

    SUCCESS = 0
    FAILURE = 1
    PENDING = 2

    @classmethod
    def from_byte(cls, value: int) -> Status:
        """Map a BIN STATUS byte to its member.

        Raises:
            WrongStatusTypeError: value is not 0, 1 or 2.
        """
        if value == 0:
            return cls.SUCCESS
        if value == 1:
            return cls.FAILURE
        if value == 2:
            return cls.PENDING
        raise WrongStatusTypeError(value)

    def to_byte(self) -> int:
        return self.value

    @classmethod
    def parse(cls, text: str) -> Status:
        """Parse a case-insensitive name such as ``pending`` or ``SUCCESS``."""
        member = cls.__members__.get(text.upper())
        if member is None:
            raise ValueError("Wrong status")
        return member


@dataclass(frozen=True)
class Record:
    """One bank transaction.

    WHY: The unit of exchange between codecs. A list of Records keeps the
    physical order of the source stream and is re-encoded in that order.

    RULES:
    - tx_id, from_user_id, to_user_id, timestamp: unsigned 64-bit
    - amount: signed 64-bit; negative values are allowed (reversals)
    - timestamp: seconds since an epoch the caller chooses
    - description: any text; BIN stores its UTF-8 length as a u32 prefix
    - tx_id is not required to be unique within a stream
    """

    tx_id: int
    tx_type: TransactionType
    from_user_id: int
    to_user_id: int
    amount: int
    timestamp: int
    status: Status
    description: str
