"""Apply a payment to a rental: extend coverage, update totals and status."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any

from site_rental.billing.ledger import derive_period_months, latest_payment_date
from site_rental.billing.lifecycle import activate
from site_rental.billing.money import add_months, to_decimal
from site_rental.config import BillingConfig
from site_rental.exceptions import InvalidAmountError, InvalidTransitionError
from site_rental.models.rental import Payment, PaymentMethod, Rental, RentalStatus

logger = logging.getLogger(__name__)

_DEFAULT_BILLING = BillingConfig()


@dataclass
class ReconciliationResult:
    """Outcome of a single reconciliation."""

    rental: Rental
    applied_period_months: int
    payment: Payment


def _positive_decimal(value: Any, what: str) -> Decimal:
    if isinstance(value, bool):
        raise InvalidAmountError(f"Invalid {what} {value!r}")
    try:
        result = to_decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidAmountError(f"Invalid {what} {value!r}") from None
    if not result.is_finite() or result <= 0:
        raise InvalidAmountError(f"{what.capitalize()} must be positive, got {value!r}")
    return result


def parse_amount(amount: Any) -> Decimal:
    """Validate a payment amount, returning it as a positive Decimal."""
    return _positive_decimal(amount, "payment amount")


def parse_price(price: Any) -> Decimal:
    """Validate a monthly price, returning it as a positive Decimal."""
    return _positive_decimal(price, "monthly price")


def preview_period(amount: Any, monthly_price: Decimal | None) -> int:
    """Months an operator would see implied for ``amount`` before submitting."""
    return derive_period_months(parse_amount(amount), monthly_price)


def record_payment(
    rental: Rental,
    amount: Any,
    method: PaymentMethod | str = PaymentMethod.BANK_TRANSFER,
    explicit_period_months: int | None = None,
    notes: str = "",
    now: datetime | None = None,
    config: BillingConfig | None = None,
) -> ReconciliationResult:
    """Reconcile a payment against a rental snapshot.

    The input rental is left untouched; the caller commits the returned
    snapshot as one unit.

    Parameters
    ----------
    rental : Rental
        Current rental snapshot.
    amount : Any
        Payment amount; must be positive.
    method : PaymentMethod | str
        Payment method.
    explicit_period_months : int | None
        Operator override for the covered period.
    notes : str
        Free-text payment notes.
    now : datetime | None
        Reconciliation time (default: ``datetime.now()``).
    config : BillingConfig | None
        Billing thresholds (next-payment lead time).

    Returns
    -------
    ReconciliationResult
        New rental snapshot, months applied and the ledger entry.
    """
    value = parse_amount(amount)
    payment_method = PaymentMethod(method)
    if rental.status == RentalStatus.CANCELLED:
        raise InvalidTransitionError(
            f"Rental {rental.rental_id} is cancelled; payments cannot reactivate it"
        )

    billing = config or _DEFAULT_BILLING
    if now is None:
        now = datetime.now()

    months = derive_period_months(value, rental.monthly_price, explicit_period_months)

    # Renewals before expiry stack on top of the remaining time
    current_end = rental.rental_end_date
    base = current_end if current_end is not None and current_end > now else now
    new_end = add_months(base, months)

    payment = Payment(
        payment_id=uuid.uuid4().hex,
        amount=value,
        payment_method=payment_method,
        period_months=months,
        payment_date=now,
        notes=notes,
    )
    payments = [*rental.payments, payment]

    updated = replace(
        rental,
        payments=payments,
        total_paid=rental.total_paid + value,
        last_payment_date=latest_payment_date(payments),
        rental_start_date=rental.rental_start_date or now,
        rental_end_date=new_end,
        next_payment_date=new_end - timedelta(days=billing.next_payment_lead_days),
        last_notification_date=None,
    )
    if updated.status in (RentalStatus.PENDING, RentalStatus.PAYMENT_DUE):
        updated = activate(updated, now)

    logger.debug(
        "Reconciled payment %s on rental %s: %s months, end %s -> %s",
        value,
        rental.rental_id,
        months,
        current_end,
        new_end,
    )
    return ReconciliationResult(rental=updated, applied_period_months=months, payment=payment)
