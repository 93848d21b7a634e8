"""
Helper utility functions
"""
from datetime import datetime, date, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union
import math

from config import settings


DateLike = Union[str, date, datetime]


def format_currency(amount: float, symbol: Optional[str] = None) -> str:
    """Format a number as currency"""
    symbol = settings.CURRENCY_SYMBOL if symbol is None else symbol
    if amount < 0:
        return f"-{symbol}{abs(amount):,.2f}"
    return f"{symbol}{amount:,.2f}"


def format_percentage(value: float) -> str:
    """Format a decimal as percentage"""
    return f"{value * 100:.1f}%"


def format_date(value: Optional[datetime]) -> str:
    """Format a date for display (e.g., '2024-01-31')"""
    if not value:
        return ""
    return value.strftime(settings.DATE_FORMAT)


def parse_date(value: DateLike) -> Optional[datetime]:
    """
    Parse various date formats to a naive datetime.

    Accepts date/datetime objects, ISO-8601 strings (with or without a time
    part, 'Z' suffix allowed) and a few common day-first/month-first forms.
    Timezone-aware values are converted to UTC and made naive so that all
    dates compare against each other.
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        return _as_naive_utc(value)

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)

    text = str(value).strip()
    if not text:
        return None

    try:
        return _as_naive_utc(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except ValueError:
        pass

    formats = [
        "%Y/%m/%d",  # 2024/02/01
        "%m/%d/%Y",  # 02/01/2024
        "%b %d, %Y",  # Feb 01, 2024
        "%B %d, %Y",  # February 01, 2024
    ]

    for fmt in formats:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue

    return None


def _as_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def parse_amount(value) -> Optional[float]:
    """
    Parse a money amount from form input.
    Examples: "300", "1,234.56", "¥300", 300
    Returns None when the value is not a finite number.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float, Decimal)):
        amount = float(value)
    else:
        text = str(value).strip().replace(",", "").replace(settings.CURRENCY_SYMBOL, "")
        try:
            amount = float(text)
        except ValueError:
            return None

    if math.isnan(amount) or math.isinf(amount):
        return None
    return amount


def round_money(amount: Union[float, Decimal], digits: Optional[int] = None) -> float:
    """Round a money amount half-up to the configured number of decimals"""
    digits = settings.MONEY_DECIMALS if digits is None else digits
    quantum = Decimal(1).scaleb(-digits)
    if not isinstance(amount, Decimal):
        amount = Decimal(str(amount))
    return float(amount.quantize(quantum, rounding=ROUND_HALF_UP))


def room_label(index: int) -> str:
    """Default room name for the n-th room: 'Room A', 'Room B', ..."""
    return f"{settings.DEFAULT_ROOM_PREFIX} {chr(65 + index % 26)}"


def generate_id(prefix: str = "") -> str:
    """Generate a unique ID"""
    from uuid import uuid4
    unique = str(uuid4())
    if prefix:
        return f"{prefix}_{unique}"
    return unique
