"""
Typed failures raised by the ledger engine.

Every failure carries a stable machine-readable code and the
HTTP status the shell should answer with. Services raise these;
only main.py knows how to turn them into responses.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ledger_engine.money import Money


class LedgerError(Exception):
    """Base ledger error with a stable machine-readable code."""

    def __init__(self, message: str, code: str, status_code: int = 400) -> None:
        self.message = message
        self.code = code
        self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> dict[str, str]:
        return {"error": self.message, "code": self.code}


class ValidationError(LedgerError):
    """Malformed or missing input."""

    def __init__(self, reason: str) -> None:
        super().__init__(message=reason, code="VALIDATION_ERROR")


class InvalidAmountError(LedgerError):
    """Amount is unparsable, zero, negative or too precise."""

    def __init__(self, reason: str) -> None:
        super().__init__(message=reason, code="INVALID_AMOUNT")


class InvalidTransferError(LedgerError):
    """Degenerate transfer: same account, unknown account, currency mismatch."""

    def __init__(self, reason: str) -> None:
        super().__init__(message=reason, code="INVALID_TRANSFER")


class NotFoundError(LedgerError):

    def __init__(self, resource: str) -> None:
        super().__init__(
            message=f"{resource} not found", code="NOT_FOUND", status_code=404
        )


class InsufficientFundsError(LedgerError):
    """
    The account cannot cover the requested debit.

    This is an expected business outcome, not a system fault.
    Retrying without a change in balance will fail the same way.
    """

    def __init__(
        self, account_id: int, available: "Money", requested: "Money"
    ) -> None:
        self.account_id = account_id
        self.available = available
        self.requested = requested
        super().__init__(
            message=(
                f"Insufficient funds in account {account_id}: "
                f"available={available}, requested={requested}"
            ),
            code="INSUFFICIENT_FUNDS",
            status_code=422,
        )


class StoreFailureError(LedgerError):
    """The database was unavailable or rejected the atomic write."""

    def __init__(self, reason: str) -> None:
        super().__init__(message=reason, code="STORE_FAILURE", status_code=503)
