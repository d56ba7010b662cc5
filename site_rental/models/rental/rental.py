"""Rental model for rental domain."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from site_rental.models.base import ClientContact
from site_rental.models.rental.enums import RentalStatus
from site_rental.models.rental.payment import Payment


@dataclass
class Rental:
    """Lease of one catalog site to one client."""

    rental_id: str
    site_id: str  # Site may be deleted later
    client_contact: ClientContact
    monthly_price: Decimal
    client_id: str | None = None  # None for anonymous requests
    status: RentalStatus = RentalStatus.PENDING
    rental_start_date: datetime | None = None
    rental_end_date: datetime | None = None  # Paid-through boundary
    total_paid: Decimal = Decimal("0")
    last_payment_date: datetime | None = None
    next_payment_date: datetime | None = None
    last_notification_date: datetime | None = None
    notes: str = ""
    payments: list[Payment] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None
    version: int = 0  # Bumped by the store on each committed write
