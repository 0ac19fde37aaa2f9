"""
Shared enumerations for database models.

Using Python enums mapped to database enums ensures that
only valid values can be stored. An invalid entry_type or
transaction_type is caught at the database level, not just
in Python validation.
"""

import enum


class EntryType(str, enum.Enum):
    """Direction of a ledger entry."""
    DEBIT = "DEBIT"
    CREDIT = "CREDIT"


class TransactionType(str, enum.Enum):
    DEPOSIT = "DEPOSIT"
    WITHDRAWAL = "WITHDRAWAL"
    TRANSFER = "TRANSFER"


class TransactionStatus(str, enum.Enum):
    """
    Outcome of a transaction.

    There is no PENDING: a transaction row is only written once
    its entries are final, in the same database transaction.
    """
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


# Entries each transaction type must own, as (role, entry type).
# "source" and "destination" name the transaction's account columns.
ENTRY_SHAPES: dict[TransactionType, tuple[tuple[str, EntryType], ...]] = {
    TransactionType.DEPOSIT: (("destination", EntryType.CREDIT),),
    TransactionType.WITHDRAWAL: (("source", EntryType.DEBIT),),
    TransactionType.TRANSFER: (
        ("source", EntryType.DEBIT),
        ("destination", EntryType.CREDIT),
    ),
}
