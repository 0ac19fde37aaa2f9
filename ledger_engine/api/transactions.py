"""
Transaction API endpoints.
"""

from fastapi import APIRouter, Depends

from ledger_engine.api.dependencies import get_transaction_service
from ledger_engine.services.transaction_service import TransactionService
from ledger_engine.schemas.transaction import (
    DepositRequest,
    WithdrawalRequest,
    TransferRequest,
    TransactionResponse,
    TransactionDetailResponse,
)

router = APIRouter(prefix="/transactions", tags=["Transactions"])


@router.post("/deposit", response_model=TransactionResponse, status_code=201)
def deposit(
    request: DepositRequest,
    service: TransactionService = Depends(get_transaction_service),
):
    """Deposit money into an account."""
    return service.deposit(request)


@router.post("/withdraw", response_model=TransactionResponse, status_code=201)
def withdraw(
    request: WithdrawalRequest,
    service: TransactionService = Depends(get_transaction_service),
):
    """
    Withdraw money from an account.

    Answers 422 INSUFFICIENT_FUNDS when the balance does not cover
    the amount; nothing is recorded in that case.
    """
    return service.withdraw(request)


@router.post("/transfer", response_model=TransactionResponse, status_code=201)
def transfer(
    request: TransferRequest,
    service: TransactionService = Depends(get_transaction_service),
):
    """Transfer money between two accounts."""
    return service.transfer(request)


@router.get("/{transaction_id}", response_model=TransactionDetailResponse)
def get_transaction(
    transaction_id: int,
    service: TransactionService = Depends(get_transaction_service),
):
    """Get transaction details, including its entries."""
    return service.get_transaction(transaction_id)
