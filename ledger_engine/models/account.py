"""
Account model.

An account is a named bucket of ledger entries owned by a user.
It has no balance column: the balance is always summed from its
entries. Account metadata never changes after creation, and
accounts are never deleted.
"""

import uuid
from datetime import datetime

from sqlalchemy import String, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from ledger_engine.models.base import Base, utcnow


class Account(Base):
    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(primary_key=True)
    external_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, unique=True, nullable=False, default=uuid.uuid4
    )
    user_id: Mapped[str] = mapped_column(
        String(50), nullable=False, index=True
    )
    account_type: Mapped[str] = mapped_column(String(20), nullable=False)
    currency: Mapped[str] = mapped_column(
        String(3), nullable=False, default="USD"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )

    def __repr__(self) -> str:
        return f"<Account {self.id} {self.account_type} {self.currency}>"
