"""Domain models for site rentals."""

from site_rental.models.base import ClientContact, Event, SessionContext

__all__ = ["ClientContact", "Event", "SessionContext"]
