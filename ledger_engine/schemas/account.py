"""
Pydantic schemas for account operations.
"""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class AccountCreate(BaseModel):
    """Request to open a new account."""
    user_id: str = Field(min_length=1, max_length=50)
    account_type: str = Field(min_length=1, max_length=20)
    currency: str | None = Field(default=None, min_length=3, max_length=3)


class AccountResponse(BaseModel):
    account_id: int = Field(validation_alias="id")
    external_id: uuid.UUID
    user_id: str
    account_type: str
    currency: str
    created_at: datetime

    model_config = {"from_attributes": True, "populate_by_name": True}


class AccountDetailResponse(BaseModel):
    """Account metadata plus the balance derived from its entries."""
    account_id: int
    external_id: uuid.UUID
    user_id: str
    account_type: str
    currency: str
    balance: Decimal
    created_at: datetime
