"""Catalog site model for rental domain."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass
class Site:
    """Pre-built website offered for rent."""

    site_id: str
    title: str
    category: str
    price: Decimal  # Monthly price
    is_available: bool = True
    demo_url: str = ""
    created_at: datetime | None = None
