"""In-memory data stores for rentals and the site catalog."""

from site_rental.store.rental import RentalStore

__all__ = ["RentalStore"]
