"""Domain Value Objects - Immutable, self-validating primitives."""

from .points import Points, round_half_up
from .currency import Currency
from .conversion_rate import ConversionRate
from .money import Money
from .context import AMOUNT_CONTEXT_KEY, TransactionContext

__all__ = [
    "Points",
    "round_half_up",
    "Currency",
    "ConversionRate",
    "Money",
    "AMOUNT_CONTEXT_KEY",
    "TransactionContext",
]
