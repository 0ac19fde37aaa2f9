"""
Account API endpoints.

The API layer is thin. It handles HTTP concerns (status codes,
response formatting) and delegates everything else to the
services. Ledger errors raised by the services are turned into
responses by the handlers registered in main.py.
"""

from fastapi import APIRouter, Depends

from ledger_engine.api.dependencies import get_account_service, get_ledger_service
from ledger_engine.schemas.account import (
    AccountCreate,
    AccountResponse,
    AccountDetailResponse,
)
from ledger_engine.schemas.ledger import LedgerEntryResponse
from ledger_engine.services.account_service import AccountService
from ledger_engine.services.ledger_service import LedgerService

router = APIRouter(prefix="/accounts", tags=["Accounts"])


@router.post("", response_model=AccountResponse, status_code=201)
def create_account(
    request: AccountCreate,
    service: AccountService = Depends(get_account_service),
):
    """Open a new account. Currency defaults to the configured one."""
    return service.create_account(request)


@router.get("/{account_id}", response_model=AccountDetailResponse)
def get_account(
    account_id: int,
    service: LedgerService = Depends(get_ledger_service),
):
    """
    Get account details with its current balance.

    Balance is calculated from entries, not stored.
    """
    detail = service.get_account_detail(account_id)
    account = detail.account
    return AccountDetailResponse(
        account_id=account.id,
        external_id=account.external_id,
        user_id=account.user_id,
        account_type=account.account_type,
        currency=account.currency,
        balance=detail.balance.amount,
        created_at=account.created_at,
    )


@router.get("/{account_id}/ledger", response_model=list[LedgerEntryResponse])
def get_account_ledger(
    account_id: int,
    service: LedgerService = Depends(get_ledger_service),
):
    """Get all ledger entries for an account, oldest first."""
    return service.get_account_ledger(account_id)
