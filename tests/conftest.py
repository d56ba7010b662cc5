"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any

import pytest

from site_rental.models.base import ClientContact
from site_rental.models.rental import Rental, RentalStatus, Site
from site_rental.service import RentalService
from site_rental.store.rental import RentalStore

NOW = datetime(2025, 3, 15, 12, 0, 0)


class FakeClock:
    """Settable time source for the service."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: Any) -> None:
        self.now += timedelta(**kwargs)


class RecordingSink:
    """Event sink that keeps everything it is sent."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, Any]] = []
        self.closed = False

    def send(self, topic: str, record: Any) -> None:
        self.sent.append((topic, record))

    def close(self) -> None:
        self.closed = True

    @property
    def event_types(self) -> list[str]:
        return [record.event_type for _, record in self.sent]


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def now() -> datetime:
    """Fixed reference time."""
    return NOW


@pytest.fixture
def clock() -> FakeClock:
    """Service clock starting at the reference time."""
    return FakeClock(NOW)


@pytest.fixture
def contact() -> ClientContact:
    """Sample client contact."""
    return ClientContact(name="Test Client", email="client@test.com", phone="+77011234567")


@pytest.fixture
def sample_site() -> Site:
    """Sample catalog site priced at 1000 a month."""
    return Site(
        site_id="site-test-001",
        title="Coffee Shop Landing",
        category="Landing page",
        price=Decimal("1000"),
        created_at=NOW - timedelta(days=100),
    )


@pytest.fixture
def store(sample_site: Site) -> RentalStore:
    """Store with the sample site in its catalog."""
    store = RentalStore()
    store.add_site(sample_site)
    return store


@pytest.fixture
def sink() -> RecordingSink:
    """Recording event sink."""
    return RecordingSink()


@pytest.fixture
def service(store: RentalStore, sink: RecordingSink, clock: FakeClock) -> RentalService:
    """Service over the sample store with a fixed clock."""
    return RentalService(store, sink=sink, clock=clock)


def _make_rental(
    rental_id: str = "rental-test-001",
    status: RentalStatus = RentalStatus.PENDING,
    monthly_price: Decimal = Decimal("500"),
    total_paid: Decimal = Decimal("0"),
    **kwargs: Any,
) -> Rental:
    """Build a rental directly, bypassing the service."""
    return Rental(
        rental_id=rental_id,
        site_id=kwargs.pop("site_id", "site-test-001"),
        client_contact=kwargs.pop(
            "client_contact", ClientContact(name="Test Client", email="client@test.com")
        ),
        monthly_price=monthly_price,
        status=status,
        total_paid=total_paid,
        **kwargs,
    )


@pytest.fixture(name="make_rental")
def make_rental_fixture():
    """Factory for rentals built directly, bypassing the service."""
    return _make_rental
