"""Rental status state machine.

``cancelled`` is terminal: the only way out is :func:`reactivate`, an
explicit administrative override. Every other request between the
non-terminal states is accepted, including setting the current status again.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from site_rental.exceptions import InvalidTransitionError
from site_rental.models.rental import Rental, RentalStatus

STATUS_LABELS: dict[RentalStatus, str] = {
    RentalStatus.PENDING: "Pending",
    RentalStatus.ACTIVE: "Active",
    RentalStatus.PAYMENT_DUE: "Payment due",
    RentalStatus.CANCELLED: "Cancelled",
}


def parse_status(value: RentalStatus | str) -> RentalStatus:
    """Convert a raw status value, rejecting unknown ones."""
    try:
        return RentalStatus(value)
    except ValueError:
        raise InvalidTransitionError(f"Unknown rental status {value!r}") from None


def is_terminal(status: RentalStatus) -> bool:
    return status == RentalStatus.CANCELLED


def status_label(status: RentalStatus | str) -> str:
    try:
        return STATUS_LABELS[RentalStatus(status)]
    except ValueError:
        return str(status)


def _ensure_not_terminal(rental: Rental, target: RentalStatus) -> None:
    if is_terminal(rental.status):
        raise InvalidTransitionError(
            f"Rental {rental.rental_id} is cancelled and cannot move to {target.value}"
        )


def set_status(
    rental: Rental,
    new_status: RentalStatus | str,
    now: datetime | None = None,
) -> Rental:
    """Administrator override between any non-terminal states.

    End dates are never touched here. An active rental always has a start
    date, so activating one that never started stamps ``now``.

    Returns
    -------
    Rental
        The same object when the status is unchanged, else an updated copy.
    """
    target = parse_status(new_status)
    _ensure_not_terminal(rental, target)

    if target == rental.status:
        return rental

    changes: dict = {"status": target}
    if target == RentalStatus.ACTIVE and rental.rental_start_date is None:
        changes["rental_start_date"] = now or datetime.now()
    return replace(rental, **changes)


def activate(rental: Rental, now: datetime) -> Rental:
    """Reconciliation-driven move to active (from pending or payment_due)."""
    _ensure_not_terminal(rental, RentalStatus.ACTIVE)
    return replace(
        rental,
        status=RentalStatus.ACTIVE,
        rental_start_date=rental.rental_start_date or now,
    )


def mark_payment_due(rental: Rental) -> Rental:
    """Demote an active rental whose paid period ran out."""
    if rental.status != RentalStatus.ACTIVE:
        raise InvalidTransitionError(
            f"Rental {rental.rental_id} is {rental.status.value}, only active rentals lapse"
        )
    return replace(rental, status=RentalStatus.PAYMENT_DUE)


def reactivate(rental: Rental, new_status: RentalStatus | str = RentalStatus.PENDING) -> Rental:
    """Explicit administrative override that brings back a cancelled rental."""
    target = parse_status(new_status)
    if not is_terminal(rental.status):
        raise InvalidTransitionError(
            f"Rental {rental.rental_id} is {rental.status.value}, not cancelled"
        )
    if is_terminal(target):
        raise InvalidTransitionError("Reactivation target must be a non-cancelled status")
    return replace(rental, status=target)
