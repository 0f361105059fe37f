from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
    """Coerce a stored REAL, str or Decimal into a 2-place Decimal."""
    if value is None:
        return ZERO
    if isinstance(value, float):
        value = repr(value)
    try:
        return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
    except (InvalidOperation, TypeError, ValueError):
        raise ValueError(f"Invalid amount: {value!r}") from None


def has_two_places(value) -> bool:
    """True if value has no more than two decimal places."""
    try:
        d = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return False
    return d == d.quantize(CENT)


def format_currency(amount, symbol: str = "$") -> str:
    """Format an amount as currency string, e.g. '$1,234.56'."""
    return f"{symbol}{to_money(amount):,.2f}"


def format_signed(amount, symbol: str = "$") -> str:
    """Format with +/- sign."""
    amount = to_money(amount)
    sign = "+" if amount >= 0 else "-"
    return f"{sign}{symbol}{abs(amount):,.2f}"
