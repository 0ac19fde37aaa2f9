"""Balance derivation: a pure fold over an account's entries."""

from typing import Iterable

from ledger_engine.models.enums import EntryType
from ledger_engine.money import Money


def calculate_balance(entries: Iterable) -> Money:
    """
    Return Σ credits − Σ debits.

    Accepts anything with entry_type and amount attributes, in any
    order. Does no I/O; the caller decides how consistent the
    entries it passes in are.
    """
    balance = Money.zero()
    for entry in entries:
        amount = Money.of(entry.amount)
        if entry.entry_type == EntryType.CREDIT:
            balance = balance + amount
        else:
            balance = balance - amount
    return balance
