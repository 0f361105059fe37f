from decimal import Decimal

from utils.currency import has_two_places, to_money
from utils.errors import ValidationError


def require_text(value: str | None, max_length: int, label: str = "Name") -> str:
    """Strip and check a mandatory text field."""
    value = (value or "").strip()
    if not value:
        raise ValidationError(f"{label} cannot be empty.")
    if len(value) > max_length:
        raise ValidationError(f"{label} must be at most {max_length} characters.")
    return value


def optional_text(value: str | None, max_length: int, label: str) -> str | None:
    value = (value or "").strip()
    if len(value) > max_length:
        raise ValidationError(f"{label} must be at most {max_length} characters.")
    return value or None


def require_amount(value, label: str = "Amount", allow_zero: bool = False) -> Decimal:
    """Positive (or non-negative) amount with at most two decimal places."""
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{label} is required.")
    if not has_two_places(value):
        raise ValidationError(f"{label} must have at most two decimal places.")
    try:
        amount = to_money(value)
    except ValueError:
        raise ValidationError(f"{label} must be a number.") from None
    if amount < 0 or (amount == 0 and not allow_zero):
        raise ValidationError(f"{label} must be {'0 or greater' if allow_zero else 'positive'}.")
    return amount


def require_day(value, label: str = "Day") -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 31:
        raise ValidationError(f"{label} must be between 1 and 31.")
    return value
