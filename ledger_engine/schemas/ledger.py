"""
Pydantic schemas for ledger reads.

These define the API contract: what data goes out. They are
separate from the database models because the API shape and the
storage shape are often different (entry_id vs id, for one).
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from ledger_engine.models.enums import EntryType


class LedgerEntryResponse(BaseModel):
    """Single entry in API responses."""
    entry_id: int = Field(validation_alias="id")
    transaction_id: int
    account_id: int
    entry_type: EntryType
    amount: Decimal
    created_at: datetime

    model_config = {"from_attributes": True, "populate_by_name": True}


class IntegrityReport(BaseModel):
    """Ledger-wide double-entry check."""
    is_balanced: bool
    total_debits: Decimal
    total_credits: Decimal
    external_inflow: Decimal
    external_outflow: Decimal
    difference: Decimal
    transaction_count: int
    malformed_transactions: list[int]
