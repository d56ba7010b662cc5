"""Payment ledger arithmetic.

The ledger is append-only: a rental's ``payments`` list only ever grows and
each :class:`Payment` is frozen. Running totals on the rental are
cross-checked against the entries with :func:`check_ledger`.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Iterable

from site_rental.exceptions import LedgerMismatchError
from site_rental.models.rental import Payment, Rental


def derive_period_months(
    amount: Decimal,
    monthly_price: Decimal | None,
    explicit: int | None = None,
) -> int:
    """Number of months a payment covers.

    Parameters
    ----------
    amount : Decimal
        Payment amount (positive).
    monthly_price : Decimal | None
        Rental monthly price.
    explicit : int | None
        Operator override; used verbatim when positive.

    Returns
    -------
    int
        ``floor(amount / monthly_price)``, never less than 1.
    """
    if explicit is not None and explicit > 0:
        return int(explicit)
    if not monthly_price or monthly_price <= 0:
        return 1
    return max(1, int(amount // monthly_price))


def ledger_total(payments: Iterable[Payment]) -> Decimal:
    """Sum of all payment amounts."""
    return sum((p.amount for p in payments), Decimal("0"))


def latest_payment_date(payments: Iterable[Payment]) -> datetime | None:
    """Most recent payment date, or None for an empty ledger."""
    return max((p.payment_date for p in payments), default=None)


def covered_months(payments: Iterable[Payment]) -> int:
    """Total months bought across the ledger."""
    return sum(p.period_months for p in payments)


def check_ledger(rental: Rental) -> None:
    """Raise LedgerMismatchError if running totals drifted from the entries."""
    expected_total = ledger_total(rental.payments)
    if rental.total_paid != expected_total:
        raise LedgerMismatchError(
            f"Rental {rental.rental_id} total_paid={rental.total_paid} "
            f"but ledger sums to {expected_total}"
        )

    expected_last = latest_payment_date(rental.payments)
    if rental.last_payment_date != expected_last:
        raise LedgerMismatchError(
            f"Rental {rental.rental_id} last_payment_date={rental.last_payment_date} "
            f"but latest ledger entry is {expected_last}"
        )
