"""
Ledger entry model.

Each entry moves value into (CREDIT) or out of (DEBIT) one
account. The amount is always positive; direction lives in
entry_type. Entries are immutable: once posted, they are never
modified or deleted.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    DateTime, Numeric, ForeignKey, CheckConstraint,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledger_engine.models.base import Base, utcnow
from ledger_engine.models.enums import EntryType


class LedgerEntry(Base):
    """
    An immutable debit or credit entry in the ledger.

    Entries only ever exist as part of a Transaction and are
    written in the same flush as it. The id is monotonic, so
    (created_at, id) is the creation order.
    """

    __tablename__ = "ledger_entries"
    __table_args__ = (
        CheckConstraint("amount > 0", name="check_positive_amount"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    account_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.id"), nullable=False, index=True
    )
    transaction_id: Mapped[int] = mapped_column(
        ForeignKey("transactions.id"), nullable=False, index=True
    )
    entry_type: Mapped[EntryType] = mapped_column(
        SAEnum(EntryType, name="entry_type_enum", create_constraint=True),
        nullable=False,
    )
    amount: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )

    transaction: Mapped["Transaction"] = relationship(
        back_populates="entries"
    )

    def __repr__(self) -> str:
        return (
            f"<LedgerEntry {self.entry_type.value} "
            f"{self.amount} account={self.account_id}>"
        )
