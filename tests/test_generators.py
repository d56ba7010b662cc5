"""Tests for synthetic data generators."""

from decimal import Decimal

import pytest

from site_rental.generators import RentalRequestGenerator, SiteGenerator
from site_rental.models.base import ClientContact
from site_rental.models.rental import PaymentMethod, Site


class TestSiteGenerator:
    """Tests for SiteGenerator."""

    def test_generate_single(self, seed: int) -> None:
        """Test generating a single site."""
        site = SiteGenerator(seed=seed).generate()

        assert isinstance(site, Site)
        assert site.site_id
        assert site.category in SiteGenerator.CATEGORIES
        assert site.title.startswith(site.category)
        assert site.demo_url.startswith("https://")
        assert site.created_at is not None

    def test_prices_within_category_range(self, seed: int) -> None:
        """Test that prices are round and within the category range."""
        for site in SiteGenerator(seed=seed).generate_batch(50):
            low, high = SiteGenerator.PRICE_RANGES[site.category]
            assert isinstance(site.price, Decimal)
            assert low <= site.price <= high
            assert site.price % 500 == 0

    def test_batch_size(self, seed: int) -> None:
        """Test generating a batch."""
        sites = list(SiteGenerator(seed=seed).generate_batch(10))

        assert len(sites) == 10
        assert len({s.site_id for s in sites}) == 10

    def test_reproducibility(self, seed: int) -> None:
        """Test that the same seed produces the same catalog."""
        first = [(s.site_id, s.title, s.price) for s in SiteGenerator(seed=seed).generate_batch(5)]
        second = [(s.site_id, s.title, s.price) for s in SiteGenerator(seed=seed).generate_batch(5)]

        assert first == second


class TestRentalRequestGenerator:
    """Tests for RentalRequestGenerator."""

    def test_generate_contact(self, seed: int) -> None:
        """Test contact snapshots are normalized."""
        contact = RentalRequestGenerator(seed=seed).generate_contact()

        assert isinstance(contact, ClientContact)
        assert contact.name
        assert "@" in contact.email
        assert contact.email == contact.email.lower()

    @pytest.mark.parametrize("rate,expected", [(0.0, False), (1.0, True)])
    def test_registered_rate(self, seed: int, rate: float, expected: bool) -> None:
        """Test anonymous versus registered requests."""
        gen = RentalRequestGenerator(seed=seed, registered_rate=rate)

        ids = [gen.generate_client_id() for _ in range(20)]

        assert all((client_id is not None) is expected for client_id in ids)

    def test_generate_payment(self, seed: int) -> None:
        """Test payment amounts are whole months or a partial installment."""
        gen = RentalRequestGenerator(seed=seed)
        price = Decimal("10000")

        for _ in range(100):
            amount, method = gen.generate_payment(price)
            assert isinstance(method, PaymentMethod)
            assert amount > 0
            assert amount == Decimal("5000") or (amount % price == 0 and amount // price in (1, 2, 3, 6))

    def test_generate_message(self, seed: int) -> None:
        """Test request message."""
        assert RentalRequestGenerator(seed=seed).generate_message()
