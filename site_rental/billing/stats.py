"""Fleet-wide rental statistics, derived purely from a rental collection."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Iterable, Mapping

from site_rental.billing.lifecycle import parse_status
from site_rental.billing.money import add_months, days_remaining
from site_rental.config import BillingConfig
from site_rental.models.rental import Rental, RentalStatus, Site

_DEFAULT_BILLING = BillingConfig()


@dataclass(frozen=True)
class RentalScope:
    """Which rentals a listing or statistics request covers.

    All criteria are optional and combined with AND. ``search`` matches
    client name, client email or site title, case-insensitively.
    """

    client_id: str | None = None
    status: RentalStatus | str | None = None
    search: str | None = None

    def matches(self, rental: Rental, site: Site | None = None) -> bool:
        if self.client_id is not None and rental.client_id != self.client_id:
            return False
        if self.status not in (None, "", "all") and rental.status != parse_status(self.status):
            return False
        if self.search:
            needle = self.search.strip().lower()
            haystack = [rental.client_contact.name, rental.client_contact.email]
            if site is not None:
                haystack.append(site.title)
            if not any(needle in value.lower() for value in haystack):
                return False
        return True


ALL_RENTALS = RentalScope()


def select_rentals(
    rentals: Iterable[Rental],
    scope: RentalScope | None = None,
    sites: Mapping[str, Site] | None = None,
) -> list[Rental]:
    """Filter rentals down to a scope."""
    scope = scope or ALL_RENTALS
    sites = sites or {}
    return [r for r in rentals if scope.matches(r, sites.get(r.site_id))]


@dataclass
class RentalStats:
    """Aggregate counts and revenue over a set of rentals."""

    total: int = 0
    pending: int = 0
    active: int = 0
    payment_due: int = 0
    cancelled: int = 0
    expiring_soon: int = 0
    total_revenue: Decimal = Decimal("0")
    monthly_revenue: Decimal = Decimal("0")

    def to_dict(self) -> dict[str, Any]:
        """Transport-layer representation."""
        return {
            "total": self.total,
            "pending": self.pending,
            "active": self.active,
            "paymentDue": self.payment_due,
            "cancelled": self.cancelled,
            "expiringSoon": self.expiring_soon,
            "totalRevenue": self.total_revenue,
            "monthlyRevenue": self.monthly_revenue,
        }


def is_expiring_soon(rental: Rental, now: datetime, within_days: int) -> bool:
    """Active rental with between 1 and ``within_days`` days left."""
    if rental.status != RentalStatus.ACTIVE:
        return False
    remaining = days_remaining(rental.rental_end_date, now)
    return remaining is not None and 0 < remaining <= within_days


def compute_stats(
    rentals: Iterable[Rental],
    now: datetime | None = None,
    config: BillingConfig | None = None,
) -> RentalStats:
    """Compute statistics for a rental collection.

    Revenue counts every rental's ``total_paid``, cancelled ones included:
    money already received stays received.

    Parameters
    ----------
    rentals : Iterable[Rental]
        Rental collection (any snapshot).
    now : datetime | None
        Reference time (default: ``datetime.now()``).
    config : BillingConfig | None
        Threshold for the expiring-soon count.

    Returns
    -------
    RentalStats
        Aggregated statistics.
    """
    billing = config or _DEFAULT_BILLING
    if now is None:
        now = datetime.now()
    month_ago = add_months(now, -1)

    stats = RentalStats()
    for rental in rentals:
        stats.total += 1
        if rental.status == RentalStatus.PENDING:
            stats.pending += 1
        elif rental.status == RentalStatus.ACTIVE:
            stats.active += 1
        elif rental.status == RentalStatus.PAYMENT_DUE:
            stats.payment_due += 1
        elif rental.status == RentalStatus.CANCELLED:
            stats.cancelled += 1

        if is_expiring_soon(rental, now, billing.expiring_soon_days):
            stats.expiring_soon += 1

        stats.total_revenue += rental.total_paid
        if rental.last_payment_date is not None and rental.last_payment_date >= month_ago:
            stats.monthly_revenue += rental.total_paid

    return stats
