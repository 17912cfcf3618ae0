"""Supported currencies and their display metadata."""

from enum import Enum

from loyalty_ledger.domain.exceptions import ValidationException


_CURRENCY_METADATA = {
    "USD": {"symbol": "$", "name": "US Dollar", "decimals": 2},
    "EUR": {"symbol": "€", "name": "Euro", "decimals": 2},
    "GBP": {"symbol": "£", "name": "British Pound", "decimals": 2},
    "CAD": {"symbol": "C$", "name": "Canadian Dollar", "decimals": 2},
    "AUD": {"symbol": "A$", "name": "Australian Dollar", "decimals": 2},
    "JPY": {"symbol": "¥", "name": "Japanese Yen", "decimals": 0},
    "NGN": {"symbol": "₦", "name": "Nigerian Naira", "decimals": 2},
}


class Currency(str, Enum):
    """ISO 4217 currencies accepted by the ledger."""

    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    CAD = "CAD"
    AUD = "AUD"
    JPY = "JPY"
    NGN = "NGN"

    @classmethod
    def from_code(cls, code: str) -> "Currency":
        """Parse a currency code, ignoring case and surrounding whitespace."""
        normalized = code.strip().upper()

        if len(normalized) != 3:
            raise ValidationException("Currency code must be 3 characters")

        if normalized not in _CURRENCY_METADATA:
            raise ValidationException(f"Unsupported currency code: {normalized}")

        return cls(normalized)

    @classmethod
    def supported_codes(cls) -> list[str]:
        return [currency.value for currency in cls]

    @property
    def code(self) -> str:
        return self.value

    @property
    def symbol(self) -> str:
        return _CURRENCY_METADATA[self.value]["symbol"]

    @property
    def display_name(self) -> str:
        return _CURRENCY_METADATA[self.value]["name"]

    @property
    def decimals(self) -> int:
        return _CURRENCY_METADATA[self.value]["decimals"]

    def format_amount(self, amount: float, include_symbol: bool = True) -> str:
        """Format an amount expressed in major units, e.g. ``$1,234.50``."""
        formatted = f"{amount:,.{self.decimals}f}"
        if not include_symbol:
            return formatted
        return f"{self.symbol}{formatted}"

    def __str__(self) -> str:
        return self.value
