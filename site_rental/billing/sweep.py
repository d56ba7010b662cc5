"""Expiration sweep: demote active rentals whose paid period ran out."""

from __future__ import annotations

import logging
from datetime import datetime

from site_rental.billing.lifecycle import mark_payment_due
from site_rental.billing.money import days_remaining
from site_rental.models.rental import Rental, RentalStatus
from site_rental.store.rental import RentalStore

logger = logging.getLogger(__name__)


def is_lapsed(rental: Rental, now: datetime) -> bool:
    """True for an active rental with no days left."""
    if rental.status != RentalStatus.ACTIVE:
        return False
    remaining = days_remaining(rental.rental_end_date, now)
    return remaining is not None and remaining <= 0


def expire_if_lapsed(rental: Rental, now: datetime) -> Rental | None:
    """Return the demoted rental, or None when nothing changes."""
    if not is_lapsed(rental, now):
        return None
    return mark_payment_due(rental)


def sweep_expirations(store: RentalStore, now: datetime | None = None) -> list[Rental]:
    """Move every lapsed active rental to payment_due.

    Candidates come from a lock-free snapshot; each one is then re-checked
    under its own lock, so a payment that landed in between is never
    overridden. Running the sweep again right away changes nothing.

    Parameters
    ----------
    store : RentalStore
        Rental store.
    now : datetime | None
        Reference time (default: ``datetime.now()``).

    Returns
    -------
    list[Rental]
        Rentals that were transitioned, as committed.
    """
    if now is None:
        now = datetime.now()

    candidates = [r.rental_id for r in store.snapshot() if is_lapsed(r, now)]
    expired: list[Rental] = []

    for rental_id in candidates:
        committed = store.update(rental_id, lambda r: expire_if_lapsed(r, now))
        if committed is None:
            logger.debug("Rental %s changed before sweep, skipped", rental_id)
            continue
        expired.append(committed)

    logger.info(
        "Expiration sweep at %s: %d candidates, %d moved to payment_due",
        now.isoformat(),
        len(candidates),
        len(expired),
    )
    return expired
