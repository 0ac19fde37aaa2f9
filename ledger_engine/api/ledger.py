"""
Ledger-wide API endpoints.
"""

from fastapi import APIRouter, Depends

from ledger_engine.api.dependencies import get_ledger_service
from ledger_engine.schemas.ledger import IntegrityReport
from ledger_engine.services.ledger_service import LedgerService

router = APIRouter(prefix="/ledger", tags=["Ledger"])


@router.get("/integrity", response_model=IntegrityReport)
def check_integrity(
    service: LedgerService = Depends(get_ledger_service),
):
    """
    Check that the ledger as a whole balances.

    Reports entry totals, the value that entered and left through
    deposits and withdrawals, and any transaction whose entries do
    not match its type.
    """
    return service.check_integrity()
