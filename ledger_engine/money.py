"""
Fixed-point money value.

Amounts are Decimals with exactly four fractional digits, the
same precision as the Numeric(19, 4) columns they are stored in.
Binary floats never enter a sum.
"""

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from ledger_engine.errors import InvalidAmountError


SCALE = 4
QUANTUM = Decimal(1).scaleb(-SCALE)  # Decimal("0.0001")
# Numeric(19, 4) leaves fifteen integer digits
MAX_AMOUNT = Decimal(10) ** (19 - SCALE)
# ISO 4217 style: three upper-case letters
CURRENCY_CODE = re.compile(r"^[A-Z]{3}$")


@dataclass(frozen=True, order=True)
class Money:
    amount: Decimal

    def __post_init__(self):
        object.__setattr__(self, "amount", self.amount.quantize(QUANTUM))

    @classmethod
    def zero(cls) -> "Money":
        return cls(Decimal(0))

    @classmethod
    def of(cls, value) -> "Money":
        """Wrap an exact value already trusted by the ledger (stored amounts, sums)."""
        return cls(Decimal(str(value)) if isinstance(value, float) else Decimal(value))

    @classmethod
    def parse(cls, value) -> "Money":
        """
        Parse an amount coming from outside the engine.

        Accepts Decimal, int, str and float (via its shortest repr).
        The result must be finite, strictly positive and carry no more
        than four fractional digits; anything else raises
        InvalidAmountError rather than being rounded.
        """
        if isinstance(value, bool) or not isinstance(value, (Decimal, int, float, str)):
            raise InvalidAmountError(f"Amount must be a number, got {value!r}")

        try:
            if isinstance(value, float):
                value = repr(value)
            parsed = Decimal(value.strip() if isinstance(value, str) else value)
        except (InvalidOperation, TypeError, ValueError):
            raise InvalidAmountError(f"Amount must be a number, got {value!r}")

        if not parsed.is_finite():
            raise InvalidAmountError(f"Amount must be finite, got {value!r}")
        if parsed <= 0:
            raise InvalidAmountError(f"Amount must be positive, got {parsed}")
        if parsed.as_tuple().exponent < -SCALE:
            raise InvalidAmountError(
                f"Amount {parsed} has more than {SCALE} decimal places"
            )
        if parsed >= MAX_AMOUNT:
            raise InvalidAmountError(f"Amount {parsed} exceeds the ledger maximum")
        return cls(parsed)

    def __add__(self, other: "Money") -> "Money":
        return Money(self.amount + other.amount)

    def __sub__(self, other: "Money") -> "Money":
        return Money(self.amount - other.amount)

    def less_than(self, other: "Money") -> bool:
        return self.amount < other.amount

    def greater_or_equal(self, other: "Money") -> bool:
        return self.amount >= other.amount

    def is_negative(self) -> bool:
        return self.amount < 0

    def __str__(self) -> str:
        return str(self.amount)
