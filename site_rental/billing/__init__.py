"""Rental lifecycle and billing reconciliation engine."""

from site_rental.billing.ledger import check_ledger, derive_period_months
from site_rental.billing.money import add_months, days_remaining, format_currency
from site_rental.billing.reconcile import ReconciliationResult, record_payment
from site_rental.billing.stats import RentalScope, RentalStats, compute_stats
from site_rental.billing.sweep import sweep_expirations

__all__ = [
    "ReconciliationResult",
    "RentalScope",
    "RentalStats",
    "add_months",
    "check_ledger",
    "compute_stats",
    "days_remaining",
    "derive_period_months",
    "format_currency",
    "record_payment",
    "sweep_expirations",
]
