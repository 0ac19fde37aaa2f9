"""
Ledger service: the read side of the ledger.

Balances are never stored. Every balance returned here is the
fold of the account's entries, read from a single snapshot.
"""

from dataclasses import dataclass

from ledger_engine.models.account import Account
from ledger_engine.models.ledger_entry import LedgerEntry
from ledger_engine.money import Money
from ledger_engine.services.balance import calculate_balance
from ledger_engine.services.ledger_store import SqlLedgerStore


@dataclass(frozen=True)
class AccountDetail:
    account: Account
    balance: Money


class LedgerService:

    def __init__(self, store: SqlLedgerStore):
        self.store = store

    def get_account_detail(self, account_id: int) -> AccountDetail:
        """
        Account metadata with its derived balance.

        Raises NotFoundError if the account does not exist.
        """
        account, entries = self.store.read_account_entries(account_id)
        return AccountDetail(account=account, balance=calculate_balance(entries))

    def get_account_ledger(self, account_id: int) -> list[LedgerEntry]:
        """
        All entries for an account, oldest first.

        An account without entries yields an empty list; an unknown
        account raises NotFoundError.
        """
        return self.store.read_entries(account_id)

    def check_integrity(self) -> dict:
        """
        Verify the ledger as a whole.

        Deposits and withdrawals move value across the ledger's
        boundary, so credits minus debits must equal deposits minus
        withdrawals (and credits equal debits when only transfers
        were made). Every transaction must also own exactly the
        entries its type calls for, each for the transaction amount.
        """
        totals = self.store.ledger_totals()
        debits = totals["total_debits"]
        credits = totals["total_credits"]
        inflow = totals["deposits"]
        outflow = totals["withdrawals"]
        difference = (credits - debits) - (inflow - outflow)

        return {
            "is_balanced": (
                difference == Money.zero()
                and not totals["malformed_transactions"]
            ),
            "total_debits": debits.amount,
            "total_credits": credits.amount,
            "external_inflow": inflow.amount,
            "external_outflow": outflow.amount,
            "difference": difference.amount,
            "transaction_count": totals["transaction_count"],
            "malformed_transactions": totals["malformed_transactions"],
        }
