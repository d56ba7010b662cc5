"""Payment ledger entry for rental domain."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from site_rental.models.rental.enums import PaymentMethod


@dataclass(frozen=True)
class Payment:
    """Money received against a rental. Never modified once recorded."""

    payment_id: str
    amount: Decimal
    payment_method: PaymentMethod
    period_months: int  # Months this payment is deemed to cover
    payment_date: datetime
    notes: str = ""
