"""Catalog site generator."""

from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Iterator

from site_rental.generators.base import BaseGenerator
from site_rental.models.rental import Site


class SiteGenerator(BaseGenerator):
    """Generate synthetic catalog sites."""

    CATEGORIES = [
        "Landing page",
        "Online store",
        "Corporate",
        "Portfolio",
        "Services",
        "Education",
    ]

    # Monthly prices by category (KZT)
    PRICE_RANGES = {
        "Landing page": (5000, 15000),
        "Online store": (20000, 60000),
        "Corporate": (15000, 40000),
        "Portfolio": (5000, 12000),
        "Services": (10000, 30000),
        "Education": (12000, 35000),
    }

    def generate(self) -> Site:
        """Generate a single site.

        Returns
        -------
        Site
            Generated site.
        """
        category = self.random.choice(self.CATEGORIES)
        low, high = self.PRICE_RANGES[category]
        # Catalog prices are round to the nearest 500
        price = self.random.randint(low // 500, high // 500) * 500

        return Site(
            site_id=self.fake.uuid4(),
            title=f"{category}: {self.fake.company()}",
            category=category,
            price=Decimal(price),
            is_available=self.random.random() > 0.1,
            demo_url=f"https://{self.fake.domain_name()}",
            created_at=datetime.now() - timedelta(days=self.random.randint(30, 720)),
        )

    def generate_batch(self, count: int) -> Iterator[Site]:
        """Generate multiple sites.

        Parameters
        ----------
        count : int
            Number of sites to generate.

        Yields
        ------
        Site
            Generated sites.
        """
        for _ in range(count):
            yield self.generate()
