"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from orderdesk.domain.exceptions import ValidationError

CENT = Decimal("0.01")
# largest amount the NUMERIC(10, 2) columns can store
MAX_AMOUNT = Decimal("99999999.99")


@dataclass(frozen=True)
class Money:
    """Non-negative monetary amount with a fixed two-decimal scale.

    Uses Decimal to avoid floating-point rounding errors that would be
    unacceptable in financial calculations.  Every instance is quantized
    to cents on construction, so ``Money.of("9.5")`` and
    ``Money.of("9.50")`` are equal.
    """

    amount: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if not self.amount.is_finite():
            raise ValidationError(f"Money amount must be finite, got {self.amount}")
        if self.amount < Decimal("0"):
            raise ValidationError(
                f"Money amount cannot be negative, got {self.amount}"
            )
        try:
            quantized = self.amount.quantize(CENT, rounding=ROUND_HALF_UP)
        except InvalidOperation as exc:
            raise ValidationError(f"Money amount is too large, got {self.amount}") from exc
        # frozen dataclass: bypass __setattr__ to normalise the scale
        object.__setattr__(self, "amount", quantized)

    # --- Arithmetic helpers ---------------------------------------------------

    def __add__(self, other: Money) -> Money:
        return Money(self.amount + other.amount)

    def __mul__(self, factor: int) -> Money:
        if isinstance(factor, bool) or not isinstance(factor, int):
            raise TypeError(f"Can only multiply Money by int, got {type(factor).__name__}")
        return Money(self.amount * factor)

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.amount:.2f}"

    # --- Factories ------------------------------------------------------------

    @staticmethod
    def zero() -> Money:
        return Money(Decimal("0"))

    @staticmethod
    def of(amount: str | float | int | Decimal) -> Money:
        """Convenient factory that coerces to Decimal safely."""
        if isinstance(amount, bool):
            raise ValidationError(f"Invalid money amount: {amount!r}")
        try:
            return Money(Decimal(str(amount).strip()))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc
