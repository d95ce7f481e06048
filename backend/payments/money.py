"""
Currency unit helpers for payment gateways.

Orders store whole major-unit amounts (rupees). Gateways such as Stripe
expect integers in minor units (paise), so conversion happens only at the
gateway boundary.

Key Principles:
1. NEVER use float for money
2. Convert with Decimal and an explicit currency exponent
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Union

# Currency minor unit exponents (how many decimal places)
CURRENCY_EXPONENT = {
    "INR": 2,  # Indian Rupee (paise)
    "USD": 2,  # United States Dollar (cents)
    "EUR": 2,  # Euro (cents)
    "GBP": 2,  # British Pound (pence)

    # Zero-decimal currencies
    "JPY": 0,  # Japanese Yen (no subunit)
    "KRW": 0,  # South Korean Won (no subunit)

    # 3-decimal currencies
    "KWD": 3,  # Kuwaiti Dinar (fils)
    "BHD": 3,  # Bahraini Dinar (fils)
}


def currency_exponent(currency: str) -> int:
    """
    Get the number of decimal places for a currency.

    Examples:
        >>> currency_exponent("inr")
        2
        >>> currency_exponent("JPY")
        0
    """
    return CURRENCY_EXPONENT.get(currency.upper(), 2)


def to_minor(currency: str, amount: Union[Decimal, str, int]) -> int:
    """
    Convert a major-unit amount to gateway minor units.

    Examples:
        >>> to_minor("inr", 336)
        33600
        >>> to_minor("JPY", 336)
        336
    """
    scaled = Decimal(amount) * (10 ** currency_exponent(currency))
    return int(scaled.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
