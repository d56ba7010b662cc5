"""Read-only rental rows for admin tables and the client dashboard."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from site_rental.billing.lifecycle import status_label
from site_rental.billing.money import days_remaining, format_currency
from site_rental.billing.stats import is_expiring_soon
from site_rental.config import BillingConfig
from site_rental.models.rental import Rental, RentalStatus, Site

SITE_UNAVAILABLE = "Site unavailable"


@dataclass
class RentalSummary:
    """One rental as a dashboard shows it."""

    rental_id: str
    site_id: str
    site_title: str
    site_available: bool
    client_name: str
    client_email: str
    status: RentalStatus
    status_label: str
    monthly_price: str
    total_paid: str
    rental_end_date: datetime | None
    days_remaining: int | None
    expiring_soon: bool
    highlight: bool
    needs_notification: bool
    payments_count: int


def summarize_rental(
    rental: Rental,
    site: Site | None,
    now: datetime | None = None,
    config: BillingConfig | None = None,
) -> RentalSummary:
    """Build the dashboard row for a rental.

    A deleted site is shown with the ``SITE_UNAVAILABLE`` marker. Negative
    day counts are passed through for the caller to render.
    """
    billing = config or BillingConfig()
    if now is None:
        now = datetime.now()

    remaining = days_remaining(rental.rental_end_date, now)
    is_active = rental.status == RentalStatus.ACTIVE

    return RentalSummary(
        rental_id=rental.rental_id,
        site_id=rental.site_id,
        site_title=site.title if site is not None else SITE_UNAVAILABLE,
        site_available=site is not None,
        client_name=rental.client_contact.name,
        client_email=rental.client_contact.email,
        status=rental.status,
        status_label=status_label(rental.status),
        monthly_price=format_currency(rental.monthly_price, billing),
        total_paid=format_currency(rental.total_paid, billing),
        rental_end_date=rental.rental_end_date,
        days_remaining=remaining,
        expiring_soon=is_expiring_soon(rental, now, billing.expiring_soon_days),
        highlight=is_active and remaining is not None and remaining <= billing.highlight_days,
        needs_notification=(
            is_active and remaining is not None and 0 <= remaining <= billing.reminder_days
        ),
        payments_count=len(rental.payments),
    )
