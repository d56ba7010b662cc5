"""Money and time helpers shared by every billing computation."""

from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from dateutil.relativedelta import relativedelta

from site_rental.config import BillingConfig
from site_rental.exceptions import InvalidAmountError

ONE_DAY = timedelta(days=1)

_DEFAULT_BILLING = BillingConfig()


def days_remaining(end_date: datetime | None, now: datetime | None = None) -> int | None:
    """Whole days left until ``end_date``, rounded up.

    Parameters
    ----------
    end_date : datetime | None
        Paid-through boundary of a rental.
    now : datetime | None
        Reference time (default: ``datetime.now()``).

    Returns
    -------
    int | None
        ``None`` when there is no end date. Negative values mean the rental
        expired that many days ago and are returned as-is.
    """
    if end_date is None:
        return None
    if now is None:
        now = datetime.now()
    delta = end_date - now
    # ceil via floor division on the negated delta keeps the math exact
    return -((-delta) // ONE_DAY)


def add_months(moment: datetime, months: int) -> datetime:
    """Add calendar months, clamping to the last day of the target month."""
    return moment + relativedelta(months=months)


def to_decimal(value: Any) -> Decimal:
    """Coerce ints, strings and floats to Decimal without binary drift."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def format_currency(amount: Any, config: BillingConfig | None = None) -> str:
    """Render an amount in whole currency units, e.g. ``₸12 500``.

    ``None`` and zero both render as the zero amount. Values that are not
    numbers, or are NaN or infinite, raise ``InvalidAmountError``.
    """
    billing = config or _DEFAULT_BILLING
    try:
        value = Decimal("0") if amount is None else to_decimal(amount)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidAmountError(f"Cannot format {amount!r} as money") from None
    if not value.is_finite():
        raise InvalidAmountError(f"Cannot format non-finite amount {amount!r}")

    whole = int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    digits = f"{abs(whole):,}".replace(",", billing.thousands_separator)
    sign = "-" if whole < 0 else ""

    if billing.symbol_first:
        return f"{sign}{billing.currency_symbol}{digits}"
    return f"{sign}{digits} {billing.currency_symbol}"
