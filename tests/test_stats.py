"""Tests for rental statistics and scoping."""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from site_rental.billing.stats import (
    RentalScope,
    compute_stats,
    is_expiring_soon,
    select_rentals,
)
from site_rental.config import BillingConfig
from site_rental.exceptions import InvalidTransitionError
from site_rental.models.base import ClientContact
from site_rental.models.rental import RentalStatus, Site


class TestComputeStats:
    """Tests for aggregate statistics."""

    def test_status_counts_and_revenue(self, make_rental, now: datetime) -> None:
        rentals = [
            make_rental("r1", status=RentalStatus.ACTIVE, total_paid=Decimal("100")),
            make_rental("r2", status=RentalStatus.ACTIVE, total_paid=Decimal("200")),
            make_rental("r3", status=RentalStatus.PENDING, total_paid=Decimal("0")),
            make_rental("r4", status=RentalStatus.PAYMENT_DUE, total_paid=Decimal("300")),
            make_rental("r5", status=RentalStatus.CANCELLED, total_paid=Decimal("50")),
        ]
        stats = compute_stats(rentals, now)

        assert stats.total == 5
        assert stats.active == 2
        assert stats.pending == 1
        assert stats.payment_due == 1
        assert stats.cancelled == 1
        assert stats.expiring_soon == 0
        assert stats.total_revenue == Decimal("650")

    def test_empty(self, now: datetime) -> None:
        stats = compute_stats([], now)
        assert stats.total == 0
        assert stats.total_revenue == Decimal("0")
        assert stats.monthly_revenue == Decimal("0")

    def test_expiring_soon_count(self, make_rental, now: datetime) -> None:
        rentals = [
            make_rental("soon", status=RentalStatus.ACTIVE, rental_end_date=now + timedelta(days=3)),
            make_rental("edge", status=RentalStatus.ACTIVE, rental_end_date=now + timedelta(days=7)),
            make_rental(
                "later", status=RentalStatus.ACTIVE, rental_end_date=now + timedelta(days=7, hours=1)
            ),
            make_rental("lapsed", status=RentalStatus.ACTIVE, rental_end_date=now - timedelta(hours=1)),
            make_rental(
                "due", status=RentalStatus.PAYMENT_DUE, rental_end_date=now + timedelta(days=2)
            ),
        ]
        assert compute_stats(rentals, now).expiring_soon == 2

    def test_expiring_soon_threshold_is_configurable(self, make_rental, now: datetime) -> None:
        rental = make_rental(status=RentalStatus.ACTIVE, rental_end_date=now + timedelta(days=10))
        assert compute_stats([rental], now).expiring_soon == 0
        assert compute_stats([rental], now, BillingConfig(expiring_soon_days=14)).expiring_soon == 1

    def test_monthly_revenue(self, make_rental, now: datetime) -> None:
        rentals = [
            make_rental("recent", total_paid=Decimal("1000"), last_payment_date=now - timedelta(days=10)),
            make_rental("old", total_paid=Decimal("700"), last_payment_date=now - timedelta(days=40)),
            make_rental("unpaid"),
        ]
        stats = compute_stats(rentals, now)
        assert stats.monthly_revenue == Decimal("1000")
        assert stats.total_revenue == Decimal("1700")

    def test_to_dict_keys(self, now: datetime) -> None:
        data = compute_stats([], now).to_dict()
        assert set(data) == {
            "total",
            "pending",
            "active",
            "paymentDue",
            "cancelled",
            "expiringSoon",
            "totalRevenue",
            "monthlyRevenue",
        }

    def test_is_expiring_soon_requires_end_date(self, make_rental, now: datetime) -> None:
        assert not is_expiring_soon(make_rental(status=RentalStatus.ACTIVE), now, 7)


class TestRentalScope:
    """Tests for listing scope filters."""

    @pytest.fixture
    def rentals(self, make_rental) -> list:
        return [
            make_rental("a1", client_id="alice", status=RentalStatus.ACTIVE),
            make_rental(
                "a2",
                client_id="alice",
                site_id="site-2",
                client_contact=ClientContact("Alice Smith", "alice@example.com"),
            ),
            make_rental(
                "b1",
                client_id="bob",
                status=RentalStatus.ACTIVE,
                client_contact=ClientContact("Bob Jones", "bob@example.com"),
            ),
        ]

    def test_default_scope_is_everything(self, rentals: list) -> None:
        assert len(select_rentals(rentals)) == 3

    def test_client_scope(self, rentals: list) -> None:
        selected = select_rentals(rentals, RentalScope(client_id="alice"))
        assert [r.rental_id for r in selected] == ["a1", "a2"]

    def test_status_filter(self, rentals: list) -> None:
        selected = select_rentals(rentals, RentalScope(status="active"))
        assert [r.rental_id for r in selected] == ["a1", "b1"]
        assert len(select_rentals(rentals, RentalScope(status="all"))) == 3

    def test_unknown_status_filter(self, rentals: list) -> None:
        with pytest.raises(InvalidTransitionError):
            select_rentals(rentals, RentalScope(status="archived"))

    def test_search_contact(self, rentals: list) -> None:
        selected = select_rentals(rentals, RentalScope(search="  BOB@example "))
        assert [r.rental_id for r in selected] == ["b1"]

    def test_search_site_title(self, rentals: list) -> None:
        sites = {
            "site-2": Site(site_id="site-2", title="Dental Clinic", category="Medical", price=Decimal("800"))
        }
        selected = select_rentals(rentals, RentalScope(search="dental"), sites)
        assert [r.rental_id for r in selected] == ["a2"]

    def test_criteria_combine(self, rentals: list) -> None:
        scope = RentalScope(client_id="alice", status=RentalStatus.ACTIVE)
        assert [r.rental_id for r in select_rentals(rentals, scope)] == ["a1"]

    def test_stats_over_scope(self, rentals: list, now: datetime) -> None:
        stats = compute_stats(select_rentals(rentals, RentalScope(client_id="bob")), now)
        assert stats.total == 1
        assert stats.active == 1
