from __future__ import annotations

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

# Fixed names so output does not depend on the process locale.
_WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
_MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

CURRENCY_SYMBOL = "Rp"
# id-ID places a no-break space between the symbol and the amount.
CURRENCY_SEPARATOR = "\u00a0"


def _to_decimal(value) -> Decimal:  # noqa: ANN001
    try:
        parsed = Decimal(str(value if value not in (None, "") else 0))
    except (InvalidOperation, ValueError):
        return Decimal(0)
    return parsed if parsed.is_finite() else Decimal(0)


def group_thousands(value: int) -> str:
    return f"{abs(int(value)):,}".replace(",", ".")


def format_rupiah(amount) -> str:  # noqa: ANN001
    rounded = _to_decimal(amount).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    return f"{sign}{CURRENCY_SYMBOL}{CURRENCY_SEPARATOR}{group_thousands(int(rounded))}"


def format_percent(progress) -> str:  # noqa: ANN001
    value = _to_decimal(progress).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    return f"{int(value)}%"


def format_long_date(value: date | datetime) -> str:
    return f"{_WEEKDAYS[value.weekday()]}, {_MONTHS[value.month - 1]} {value.day}, {value.year}"


