"""Rental portfolio scenario: a store with rentals in every lifecycle state."""

from __future__ import annotations

import logging
import random
from datetime import datetime, timedelta
from decimal import Decimal

from site_rental.config import ScenarioConfig, SiteRentalConfig
from site_rental.generators import RentalRequestGenerator, SiteGenerator
from site_rental.models.rental import RentalStatus
from site_rental.service import RentalService
from site_rental.sinks import EventSink
from site_rental.store.rental import RentalStore

logger = logging.getLogger(__name__)


class RentalPortfolioScenario:
    """Generate a realistic rental portfolio by replaying its history.

    Requests, payments, cancellations and site removals go through
    :class:`RentalService` on a simulated clock, so the result obeys every
    ledger and lifecycle rule. This scenario creates:
    - A site catalog, some sites unavailable for new rentals
    - Pending requests that were never paid
    - Rentals with one or more payments, some still active and some lapsed
    - Cancelled rentals that keep their payment history
    - Rentals whose site was later removed from the catalog
    """

    def __init__(
        self,
        num_sites: int = 12,
        num_requests: int = 40,
        activation_rate: float = 0.6,
        cancellation_rate: float = 0.1,
        removed_site_rate: float = 0.05,
        history_days: int = 240,
        seed: int | None = None,
        now: datetime | None = None,
        sink: EventSink | None = None,
        *,
        config: ScenarioConfig | None = None,
        service_config: SiteRentalConfig | None = None,
    ) -> None:
        """Initialize rental portfolio scenario.

        Parameters
        ----------
        num_sites : int
            Number of catalog sites.
        num_requests : int
            Number of rental requests.
        activation_rate : float
            Share of requests that receive at least one payment.
        cancellation_rate : float
            Share of requests cancelled by an administrator.
        removed_site_rate : float
            Share of sites removed from the catalog afterwards.
        history_days : int
            How far back the simulated history starts.
        seed : int | None
            Random seed for reproducibility.
        now : datetime | None
            End of the simulated history (default: ``datetime.now()``).
        sink : EventSink | None
            Receives the domain events emitted while replaying.
        config : ScenarioConfig | None
            Optional scenario configuration; overrides the counts and rates.
        service_config : SiteRentalConfig | None
            Configuration for the underlying service.
        """
        if config is not None:
            num_sites = config.num_sites
            num_requests = config.num_requests
            activation_rate = config.activation_rate
            cancellation_rate = config.cancellation_rate
            removed_site_rate = config.removed_site_rate

        self.num_sites = num_sites
        self.num_requests = num_requests
        self.activation_rate = activation_rate
        self.cancellation_rate = cancellation_rate
        self.removed_site_rate = removed_site_rate
        self.history_days = history_days
        self.seed = seed
        self.end_time = now or datetime.now()

        self._random = random.Random(seed)
        self._clock = self.end_time - timedelta(days=history_days)

        self.store = RentalStore()
        self.service = RentalService(
            self.store,
            config=service_config,
            sink=sink,
            clock=lambda: self._clock,
        )
        self._site_gen = SiteGenerator(seed=seed)
        self._request_gen = RentalRequestGenerator(seed=seed)

    def generate(self) -> RentalStore:
        """Generate all data for the rental portfolio scenario.

        Returns
        -------
        RentalStore
            Store containing all generated data.
        """
        logger.info(
            "Starting rental portfolio scenario: %d sites, %d requests",
            self.num_sites,
            self.num_requests,
        )

        for site in self._site_gen.generate_batch(self.num_sites):
            self.store.add_site(site)

        available = [s for s in self.store.sites.values() if s.is_available]
        if not available:
            # Always keep something to rent
            first = next(iter(self.store.sites.values()))
            first.is_available = True
            available = [first]

        start = self._clock
        request_times = sorted(
            start + timedelta(minutes=self._random.randint(0, self.history_days * 24 * 60))
            for _ in range(self.num_requests)
        )

        for requested_at in request_times:
            self._clock = requested_at
            site = self._random.choice(available)
            rental = self.service.create_rental(
                site.site_id,
                self._request_gen.generate_contact(),
                client_id=self._request_gen.generate_client_id(),
                notes=self._request_gen.generate_message(),
            )

            if self._random.random() < self.activation_rate:
                self._replay_payments(rental.rental_id, rental.monthly_price, requested_at)

            if self._random.random() < self.cancellation_rate:
                self._clock = min(self.end_time, self._clock + timedelta(days=1))
                self.service.set_status(rental.rental_id, RentalStatus.CANCELLED)

        self._clock = self.end_time
        self._remove_sites()
        expired = self.service.sweep_expirations(self.end_time)

        logger.info("Generated portfolio: %s (%d lapsed)", self.store.summary(), expired)
        return self.store

    def _replay_payments(
        self, rental_id: str, monthly_price: Decimal, requested_at: datetime
    ) -> None:
        """Pay once, then keep renewing while the paid period is still running."""
        paid_at = requested_at + timedelta(days=self._random.randint(0, 5))
        while paid_at < self.end_time:
            self._clock = paid_at
            amount, method = self._request_gen.generate_payment(monthly_price)
            rental = self.service.record_payment(rental_id, amount, method=method)

            # Some clients renew a few days early, some stop paying
            if self._random.random() < 0.3:
                break
            paid_at = rental.rental_end_date - timedelta(days=self._random.randint(0, 5))

    def _remove_sites(self) -> None:
        """Delete a few catalog sites that already have rentals."""
        rented = sorted({r.site_id for r in self.store.snapshot()})
        count = int(len(rented) * self.removed_site_rate)
        for site_id in self._random.sample(rented, count):
            self.store.remove_site(site_id)
