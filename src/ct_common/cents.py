"""Integer arithmetic utilities for cents-based money.

All prices, totals, and balances use int (cents). No float, no Decimal.
"""


def validate_amount(amount: int) -> None:
    """Validate that a money amount is a non-negative whole number of cents."""
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValueError(f"Amount must be an integer number of cents, got {amount!r}")
    if amount < 0:
        raise ValueError(f"Amount must be non-negative, got {amount}")


def cents_to_display(cents: int) -> str:
    """Convert cents to display string: 6500 -> '$65.00', -1200 -> '-$12.00'."""
    if cents < 0:
        abs_cents = -cents
        return f"-${abs_cents // 100:,}.{abs_cents % 100:02d}"
    return f"${cents // 100:,}.{cents % 100:02d}"


def line_total(price: int, quantity: int) -> int:
    """price x quantity for one order or cart line."""
    return price * quantity
