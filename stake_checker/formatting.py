"""
Fixed-point rendering of token magnitudes.

Balances on chain are integers in the smallest unit (planck for DOT). The
token's decimals say how many of the low-order digits are the fractional part.
"""


def with_decimal_point(digits: str, decimals: int) -> str:
    """
    Insert a decimal point ``decimals`` places from the right of ``digits``.

    Short inputs are left-padded with zeros so that exactly one digit sits
    before the point. With ``decimals == 0`` the point is appended.

    Args:
        digits: Decimal digits of a non-negative integer, no sign or prefix
        decimals: Number of fractional digits

    Returns:
        str: e.g. ``with_decimal_point("123", 10) == "0.0000000123"``
    """
    if decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {decimals}")
    if len(digits) <= decimals:
        digits = "0" * (decimals - len(digits) + 1) + digits
    split = len(digits) - decimals
    return digits[:split] + "." + digits[split:]


def format_balance(amount: int, decimals: int) -> str:
    """Render an integer magnitude with ``decimals`` fractional digits."""
    if amount < 0:
        raise ValueError(f"amount must be non-negative, got {amount}")
    return with_decimal_point(str(amount), decimals)
