"""Value formatting for rendered notifications.

Amounts, dates and field labels appear in several templates and generated
tables; they are all formatted here so output stays identical everywhere.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Union
from zoneinfo import ZoneInfo

Number = Union[int, float, Decimal]

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")
_LABEL_SEPARATORS = re.compile(r"[_\s]+")


@dataclass(frozen=True)
class Money:
    """An amount rendered with the configured currency symbol."""

    amount: Number

    def __bool__(self) -> bool:
        return bool(self.amount)


def _to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        # Floats without a fractional part render like integers
        return Decimal(int(value)) if value.is_integer() else Decimal(repr(value))
    return Decimal(int(value))


def group_digits(value: Number, grouping: str = "indian") -> str:
    """Insert thousands separators.

    Decimal places are kept only when the source value carries them.

    Example:
        >>> group_digits(100000)
        '1,00,000'
        >>> group_digits(100000, "western")
        '100,000'
        >>> group_digits(Decimal("1234.50"))
        '1,234.50'
    """
    amount = _to_decimal(value)
    sign = "-" if amount < 0 else ""
    text = format(abs(amount), "f")
    whole, _, fraction = text.partition(".")

    if grouping == "indian" and len(whole) > 3:
        head, tail = whole[:-3], whole[-3:]
        pairs = []
        while len(head) > 2:
            pairs.insert(0, head[-2:])
            head = head[:-2]
        if head:
            pairs.insert(0, head)
        whole = ",".join(pairs + [tail])
    else:
        whole = f"{int(whole):,}"

    return f"{sign}{whole}.{fraction}" if fraction else f"{sign}{whole}"


def format_label(key: str) -> str:
    """Turn a machine field name into a human label.

    Example:
        >>> format_label("universityName")
        'University Name'
        >>> format_label("jersey_number")
        'Jersey Number'
        >>> format_label("category2")
        'Category 2'
    """
    if key.startswith("category"):
        return f"Category {key[-1]}"
    spaced = _CAMEL_BOUNDARY.sub(" ", key)
    words = [word for word in _LABEL_SEPARATORS.split(spaced) if word]
    return " ".join(word[:1].upper() + word[1:].lower() for word in words)


class ValueFormatter:
    """Formats context values according to their semantic type."""

    def __init__(
        self,
        timezone_name: str = "Asia/Kolkata",
        currency_symbol: str = "₹",
        grouping: str = "indian",
    ):
        self.tz = ZoneInfo(timezone_name)
        self.currency_symbol = currency_symbol
        self.grouping = grouping

    def currency(self, amount: Number) -> str:
        """Example: ``₹2,400``."""
        return f"{self.currency_symbol}{group_digits(amount, self.grouping)}"

    def number(self, value: Number) -> str:
        return group_digits(value, self.grouping)

    def long_date(self, value: Union[date, datetime]) -> str:
        """Render a date, or a datetime with its time and zone abbreviation.

        Naive datetimes are taken to be UTC. The result never depends on the
        host's local timezone.

        Example:
            ``October 19, 2026`` or ``October 19, 2026 at 3:04 PM IST``
        """
        if not isinstance(value, datetime):
            return f"{value:%B} {value.day}, {value.year}"

        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        local = value.astimezone(self.tz)
        hour = local.hour % 12 or 12
        meridiem = "AM" if local.hour < 12 else "PM"
        return (
            f"{local:%B} {local.day}, {local.year} at "
            f"{hour}:{local.minute:02d} {meridiem} {local.tzname()}"
        )

    def format(self, value: Any) -> str:
        """Render any context value as text (not yet HTML-escaped)."""
        if value is None:
            return ""
        if isinstance(value, Money):
            return self.currency(value.amount)
        if isinstance(value, bool):
            return "Yes" if value else "No"
        if isinstance(value, (int, float, Decimal)):
            return self.number(value)
        if isinstance(value, (date, datetime)):
            return self.long_date(value)
        if isinstance(value, (list, tuple)):
            return ", ".join(self.format(item) for item in value)
        return str(value)
