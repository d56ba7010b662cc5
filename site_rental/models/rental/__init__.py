"""Rental domain models."""

from site_rental.models.rental.enums import PaymentMethod, RentalStatus
from site_rental.models.rental.payment import Payment
from site_rental.models.rental.rental import Rental
from site_rental.models.rental.site import Site

__all__ = [
    "Payment",
    "PaymentMethod",
    "Rental",
    "RentalStatus",
    "Site",
]
