"""Scenarios for generating realistic rental data sets."""

from site_rental.scenarios.rental_portfolio import RentalPortfolioScenario

__all__ = ["RentalPortfolioScenario"]
