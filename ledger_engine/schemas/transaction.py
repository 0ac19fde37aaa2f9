"""
Pydantic schemas for transaction operations.

Request amounts are taken as raw JSON values. Money.parse decides
what is a valid amount, so a non-numeric, non-finite, null or
boolean amount is reported as INVALID_AMOUNT, not as a schema error.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field

from ledger_engine.models.enums import TransactionType, TransactionStatus
from ledger_engine.schemas.ledger import LedgerEntryResponse


class DepositRequest(BaseModel):
    account_id: int
    amount: Any
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    idempotency_key: str | None = Field(default=None, min_length=1, max_length=100)


class WithdrawalRequest(BaseModel):
    account_id: int
    amount: Any
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    idempotency_key: str | None = Field(default=None, min_length=1, max_length=100)


class TransferRequest(BaseModel):
    source_account_id: int
    destination_account_id: int
    amount: Any
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    idempotency_key: str | None = Field(default=None, min_length=1, max_length=100)


class TransactionResponse(BaseModel):
    id: int
    external_id: uuid.UUID
    transaction_type: TransactionType
    status: TransactionStatus
    source_account_id: int | None
    destination_account_id: int | None
    amount: Decimal
    idempotency_key: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class TransactionDetailResponse(TransactionResponse):
    """A transaction together with the entries it owns."""
    entries: list[LedgerEntryResponse]
