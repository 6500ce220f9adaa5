import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Callable, Optional

from django.core.exceptions import ValidationError
from django.utils import timezone

CENT = Decimal("0.01")

# amounts are stored as max_digits=12, decimal_places=2
MAX_AMOUNT = Decimal(10) ** 10

# A clock is any zero-argument callable returning today's date
Clock = Callable[[], datetime.date]


def today(clock: Optional[Clock] = None) -> datetime.date:
    return (clock or timezone.localdate)()


def to_money(value) -> Decimal:
    """Quantize to 2 fraction digits, the way amounts are stored."""
    try:
        return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValidationError(f"{value} is too large to store as an amount")


def parse_decimal(value, field: str, error_class=ValidationError) -> Decimal:
    """
    Accept Decimal, int or numeric strings ("45000", "79999.50").
    Floats go through str() so 0.1 stays 0.1.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise error_class(f"{field} is required")
    if isinstance(value, bool):
        raise error_class(f"{field} must be numeric")
    if isinstance(value, float):
        value = str(value)
    try:
        result = Decimal(str(value).strip()) if isinstance(value, str) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise error_class(f"{field} must be numeric")
    if not result.is_finite():
        raise error_class(f"{field} must be numeric")
    if abs(result) >= MAX_AMOUNT:
        raise error_class(f"{field} must be less than {MAX_AMOUNT:,}")
    return result


def parse_int(value, field: str) -> int:
    if value is None or value == "" or isinstance(value, bool):
        raise ValidationError(f"{field} is required")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be an integer")


def parse_period(month, year) -> tuple[int, int]:
    """Validate a (month, year) billing period."""
    month = parse_int(month, "month")
    year = parse_int(year, "year")
    if not 1 <= month <= 12:
        raise ValidationError("month must be between 1 and 12")
    if year < 1:
        raise ValidationError("year must be positive")
    return month, year
