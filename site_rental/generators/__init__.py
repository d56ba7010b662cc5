"""Synthetic catalog and rental-request generators."""

from site_rental.generators.rental import RentalRequestGenerator
from site_rental.generators.site import SiteGenerator

__all__ = ["RentalRequestGenerator", "SiteGenerator"]
