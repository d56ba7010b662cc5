"""Rental service: the operations admin screens and the client dashboard call.

Each write loads a snapshot from :class:`RentalStore`, runs the billing
engine on it and commits the result in one step under the rental's lock.
Passing ``expected_version`` turns the write into an optimistic one that
fails with :class:`ConcurrentModificationError` if someone else got there
first.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable

from site_rental.billing import lifecycle, reconcile
from site_rental.billing.money import days_remaining
from site_rental.billing.stats import RentalScope, RentalStats, compute_stats, select_rentals
from site_rental.billing.sweep import sweep_expirations
from site_rental.config import SiteRentalConfig
from site_rental.exceptions import SiteUnavailableError
from site_rental.models.base import ClientContact, Event, SessionContext
from site_rental.models.rental import PaymentMethod, Rental, RentalStatus
from site_rental.sinks import EventSink
from site_rental.store.rental import RentalStore
from site_rental.views import SITE_UNAVAILABLE, RentalSummary, summarize_rental

logger = logging.getLogger(__name__)


class RentalService:
    """Rental lifecycle operations over a shared store.

    Parameters
    ----------
    store : RentalStore | None
        Shared rental store (a new empty one by default).
    config : SiteRentalConfig | None
        Billing thresholds, event topic prefix and source name.
    sink : EventSink | None
        Where domain events are published; None disables publishing.
    clock : Callable[[], datetime] | None
        Time source (default: ``datetime.now``).
    """

    def __init__(
        self,
        store: RentalStore | None = None,
        config: SiteRentalConfig | None = None,
        sink: EventSink | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.store = store if store is not None else RentalStore()
        self.config = config or SiteRentalConfig()
        self.sink = sink
        self._clock = clock or datetime.now

    @property
    def billing(self):
        return self.config.billing

    def now(self) -> datetime:
        return self._clock()

    # Writes
    def create_rental(
        self,
        site_id: str,
        client_contact: ClientContact,
        client_id: str | None = None,
        notes: str = "",
        monthly_price: Any = None,
        context: SessionContext | None = None,
    ) -> Rental:
        """Open a pending rental request for a catalog site.

        Raises
        ------
        SiteUnavailableError
            If the site is missing or not offered for rent.
        InvalidAmountError
            If an explicit monthly price is not a positive number.
        """
        site = self.store.get_site(site_id)
        if site is None or not site.is_available:
            raise SiteUnavailableError(f"Site {site_id} not found or unavailable for rent")

        price = site.price if monthly_price is None else reconcile.parse_price(monthly_price)

        now = self.now()
        rental = self.store.add_rental(
            Rental(
                rental_id=uuid.uuid4().hex,
                site_id=site_id,
                client_contact=client_contact,
                monthly_price=price,
                client_id=client_id,
                status=RentalStatus.PENDING,
                notes=notes,
                created_at=now,
            )
        )

        logger.info("Created rental %s for site %s (%s)", rental.rental_id, site_id, site.title)
        self._publish(
            "rental.created",
            rental,
            {
                "site_id": site_id,
                "site_title": site.title,
                "client_id": client_id,
                "client_contact": client_contact,
                "monthly_price": price,
            },
            context,
        )
        return rental

    def record_payment(
        self,
        rental_id: str,
        amount: Any,
        method: PaymentMethod | str = PaymentMethod.BANK_TRANSFER,
        period_months: int | None = None,
        notes: str = "",
        expected_version: int | None = None,
        context: SessionContext | None = None,
    ) -> Rental:
        """Record a payment and extend the rental's paid-through date.

        The number of months applied is on the new ledger entry,
        ``rental.payments[-1].period_months``.
        """
        now = self.now()
        outcome: list[reconcile.ReconciliationResult] = []

        def apply(current: Rental) -> Rental:
            result = reconcile.record_payment(
                current,
                amount,
                method=method,
                explicit_period_months=period_months,
                notes=notes,
                now=now,
                config=self.billing,
            )
            outcome.append(result)
            return result.rental

        rental = self.store.update(rental_id, apply, expected_version)
        result = outcome[0]

        logger.info(
            "Payment %s recorded on rental %s: %d months, paid through %s",
            result.payment.amount,
            rental_id,
            result.applied_period_months,
            rental.rental_end_date.isoformat(),
        )
        self._publish(
            "rental.payment_recorded",
            rental,
            {
                "payment": result.payment,
                "applied_period_months": result.applied_period_months,
                "total_paid": rental.total_paid,
                "rental_end_date": rental.rental_end_date,
                "status": rental.status,
            },
            context,
        )
        return rental

    def set_status(
        self,
        rental_id: str,
        new_status: RentalStatus | str,
        expected_version: int | None = None,
        context: SessionContext | None = None,
    ) -> Rental:
        """Administrator status override (no date arithmetic)."""
        now = self.now()
        previous: list[RentalStatus] = []

        def apply(current: Rental) -> Rental:
            previous.append(current.status)
            return lifecycle.set_status(current, new_status, now)

        rental = self.store.update(rental_id, apply, expected_version)
        if rental.status != previous[0]:
            logger.info("Rental %s status %s -> %s", rental_id, previous[0].value, rental.status.value)
            self._publish(
                "rental.status_changed",
                rental,
                {"from": previous[0], "to": rental.status},
                context,
            )
        return rental

    def reactivate(
        self,
        rental_id: str,
        new_status: RentalStatus | str = RentalStatus.PENDING,
        expected_version: int | None = None,
        context: SessionContext | None = None,
    ) -> Rental:
        """Bring a cancelled rental back (explicit administrative override)."""
        rental = self.store.update(
            rental_id, lambda r: lifecycle.reactivate(r, new_status), expected_version
        )
        logger.warning("Rental %s reactivated as %s", rental_id, rental.status.value)
        self._publish(
            "rental.status_changed",
            rental,
            {"from": RentalStatus.CANCELLED, "to": rental.status, "override": True},
            context,
        )
        return rental

    def set_dates(
        self,
        rental_id: str,
        start: datetime | None = None,
        end: datetime | None = None,
        expected_version: int | None = None,
        context: SessionContext | None = None,
    ) -> Rental:
        """Manually set rental dates, bypassing reconciliation arithmetic."""
        if start is None and end is None:
            raise ValueError("set_dates needs a start date, an end date or both")

        def apply(current: Rental) -> Rental:
            return replace(
                current,
                rental_start_date=start if start is not None else current.rental_start_date,
                rental_end_date=end if end is not None else current.rental_end_date,
            )

        rental = self.store.update(rental_id, apply, expected_version)
        logger.info("Rental %s dates set manually: %s - %s", rental_id, start, end)
        self._publish(
            "rental.dates_changed",
            rental,
            {
                "rental_start_date": rental.rental_start_date,
                "rental_end_date": rental.rental_end_date,
            },
            context,
        )
        return rental

    def update_notes(
        self,
        rental_id: str,
        notes: str,
        expected_version: int | None = None,
    ) -> Rental:
        """Replace the administrator notes on a rental."""
        return self.store.update(rental_id, lambda r: replace(r, notes=notes), expected_version)

    # Reads
    def get_rental(self, rental_id: str) -> Rental:
        return self.store.get(rental_id)

    def scope_for(self, context: SessionContext) -> RentalScope:
        """Clients only ever see their own rentals."""
        if context.is_admin:
            return RentalScope()
        return RentalScope(client_id=context.user_id)

    def list_rentals(self, scope: RentalScope | None = None) -> list[Rental]:
        """Rentals in scope, newest first."""
        rentals = select_rentals(self.store.snapshot(), scope, self.store.sites)
        return sorted(rentals, key=lambda r: r.created_at or datetime.min, reverse=True)

    def get_stats(self, scope: RentalScope | None = None) -> RentalStats:
        """Aggregate statistics, recomputed from the current rentals."""
        return compute_stats(self.list_rentals(scope), self.now(), self.billing)

    def summarize(self, scope: RentalScope | None = None) -> list[RentalSummary]:
        """Dashboard rows for the rentals in scope."""
        now = self.now()
        return [
            summarize_rental(r, self.store.get_site(r.site_id), now, self.billing)
            for r in self.list_rentals(scope)
        ]

    # Periodic jobs
    def sweep_expirations(self, now: datetime | None = None) -> int:
        """Demote lapsed active rentals; returns how many were transitioned."""
        now = now or self.now()
        expired = sweep_expirations(self.store, now)
        for rental in expired:
            self._publish(
                "rental.expired",
                rental,
                {
                    "rental_end_date": rental.rental_end_date,
                    "days_remaining": days_remaining(rental.rental_end_date, now),
                },
            )
        return len(expired)

    def send_expiry_reminders(
        self,
        within_days: int | None = None,
        now: datetime | None = None,
    ) -> list[Rental]:
        """Publish a reminder for active rentals about to run out.

        A rental is reminded once per paid period: recording a payment clears
        ``last_notification_date``. A reminder that could not be published is
        not marked as sent and is retried on the next run.
        """
        within = self.billing.reminder_days if within_days is None else within_days
        now = now or self.now()

        def due(rental: Rental) -> bool:
            remaining = days_remaining(rental.rental_end_date, now)
            return (
                rental.status == RentalStatus.ACTIVE
                and rental.last_notification_date is None
                and remaining is not None
                and 0 <= remaining <= within
            )

        reminded: list[Rental] = []
        for rental in [r for r in self.store.snapshot() if due(r)]:
            site = self.store.get_site(rental.site_id)
            published = self._publish(
                "rental.expiring",
                rental,
                {
                    "client_contact": rental.client_contact,
                    "site_title": site.title if site is not None else SITE_UNAVAILABLE,
                    "rental_end_date": rental.rental_end_date,
                    "days_remaining": days_remaining(rental.rental_end_date, now),
                },
            )
            if not published:
                continue

            marked = self.store.update(
                rental.rental_id,
                lambda r: replace(r, last_notification_date=now) if due(r) else None,
            )
            if marked is not None:
                reminded.append(marked)

        logger.info("Sent %d expiry reminders (within %d days)", len(reminded), within)
        return reminded

    def _publish(
        self,
        event_type: str,
        rental: Rental,
        data: dict,
        context: SessionContext | None = None,
    ) -> bool:
        """Publish a domain event; failures are logged, never undo the write."""
        if self.sink is None:
            return True

        event = Event(
            event_id=uuid.uuid4().hex,
            event_type=event_type,
            event_time=self.now(),
            source=self.config.source,
            subject=rental.rental_id,
            data=data,
            metadata={
                "version": rental.version,
                "actor": context.user_id if context is not None else None,
            },
        )
        try:
            self.sink.send(self.config.kafka.topic("events"), event)
        except Exception:
            logger.exception(
                "Failed to publish %s for rental %s", event_type, rental.rental_id
            )
            return False
        return True
