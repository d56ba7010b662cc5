"""Tests for the rental status state machine."""

from datetime import datetime, timedelta

import pytest

from site_rental.billing.lifecycle import (
    activate,
    is_terminal,
    mark_payment_due,
    parse_status,
    reactivate,
    set_status,
    status_label,
)
from site_rental.exceptions import InvalidTransitionError
from site_rental.models.rental import RentalStatus


class TestParseStatus:
    """Tests for raw status parsing."""

    def test_enum_and_string(self) -> None:
        assert parse_status(RentalStatus.ACTIVE) == RentalStatus.ACTIVE
        assert parse_status("payment_due") == RentalStatus.PAYMENT_DUE

    def test_unknown_status(self) -> None:
        with pytest.raises(InvalidTransitionError, match="archived"):
            parse_status("archived")

    def test_labels(self) -> None:
        assert status_label(RentalStatus.PAYMENT_DUE) == "Payment due"
        assert status_label("active") == "Active"
        assert status_label("archived") == "archived"

    def test_only_cancelled_is_terminal(self) -> None:
        assert is_terminal(RentalStatus.CANCELLED)
        assert not any(
            is_terminal(s) for s in RentalStatus if s != RentalStatus.CANCELLED
        )


class TestSetStatus:
    """Tests for the administrator override."""

    @pytest.mark.parametrize(
        "source,target",
        [
            (RentalStatus.PENDING, RentalStatus.ACTIVE),
            (RentalStatus.PENDING, RentalStatus.CANCELLED),
            (RentalStatus.ACTIVE, RentalStatus.PAYMENT_DUE),
            (RentalStatus.ACTIVE, RentalStatus.PENDING),
            (RentalStatus.PAYMENT_DUE, RentalStatus.ACTIVE),
            (RentalStatus.PAYMENT_DUE, RentalStatus.CANCELLED),
        ],
    )
    def test_allowed_between_non_terminal_states(
        self, make_rental, source: RentalStatus, target: RentalStatus, now: datetime
    ) -> None:
        rental = make_rental(status=source, rental_start_date=now - timedelta(days=5))
        assert set_status(rental, target, now).status == target

    def test_same_status_is_noop(self, make_rental, now: datetime) -> None:
        rental = make_rental(status=RentalStatus.ACTIVE, rental_start_date=now)
        assert set_status(rental, RentalStatus.ACTIVE, now) is rental

    def test_input_is_not_mutated(self, make_rental, now: datetime) -> None:
        rental = make_rental()
        set_status(rental, RentalStatus.CANCELLED, now)
        assert rental.status == RentalStatus.PENDING

    @pytest.mark.parametrize(
        "target", [RentalStatus.PENDING, RentalStatus.ACTIVE, RentalStatus.PAYMENT_DUE]
    )
    def test_cancelled_is_terminal(self, make_rental, target: RentalStatus, now: datetime) -> None:
        rental = make_rental(status=RentalStatus.CANCELLED)
        with pytest.raises(InvalidTransitionError):
            set_status(rental, target, now)

    def test_cancelled_to_cancelled_rejected(self, make_rental, now: datetime) -> None:
        rental = make_rental(status=RentalStatus.CANCELLED)
        with pytest.raises(InvalidTransitionError):
            set_status(rental, RentalStatus.CANCELLED, now)

    def test_activation_stamps_missing_start_date(self, make_rental, now: datetime) -> None:
        updated = set_status(make_rental(), RentalStatus.ACTIVE, now)
        assert updated.rental_start_date == now
        assert updated.rental_end_date is None

    def test_activation_keeps_existing_dates(self, make_rental, now: datetime) -> None:
        start = now - timedelta(days=60)
        end = now - timedelta(days=3)
        rental = make_rental(
            status=RentalStatus.PAYMENT_DUE, rental_start_date=start, rental_end_date=end
        )
        updated = set_status(rental, RentalStatus.ACTIVE, now)
        assert updated.rental_start_date == start
        assert updated.rental_end_date == end


class TestEngineTransitions:
    """Tests for reconciliation and sweep transitions."""

    def test_activate_pending(self, make_rental, now: datetime) -> None:
        updated = activate(make_rental(), now)
        assert updated.status == RentalStatus.ACTIVE
        assert updated.rental_start_date == now

    def test_activate_cancelled_rejected(self, make_rental, now: datetime) -> None:
        with pytest.raises(InvalidTransitionError):
            activate(make_rental(status=RentalStatus.CANCELLED), now)

    def test_mark_payment_due(self, make_rental) -> None:
        rental = make_rental(status=RentalStatus.ACTIVE)
        assert mark_payment_due(rental).status == RentalStatus.PAYMENT_DUE

    @pytest.mark.parametrize(
        "status", [RentalStatus.PENDING, RentalStatus.PAYMENT_DUE, RentalStatus.CANCELLED]
    )
    def test_mark_payment_due_only_from_active(self, make_rental, status: RentalStatus) -> None:
        with pytest.raises(InvalidTransitionError):
            mark_payment_due(make_rental(status=status))


class TestReactivate:
    """Tests for bringing back a cancelled rental."""

    def test_default_target_is_pending(self, make_rental) -> None:
        rental = make_rental(status=RentalStatus.CANCELLED)
        assert reactivate(rental).status == RentalStatus.PENDING

    def test_explicit_target(self, make_rental) -> None:
        rental = make_rental(status=RentalStatus.CANCELLED)
        assert reactivate(rental, "payment_due").status == RentalStatus.PAYMENT_DUE

    def test_requires_cancelled_source(self, make_rental) -> None:
        with pytest.raises(InvalidTransitionError, match="not cancelled"):
            reactivate(make_rental(status=RentalStatus.ACTIVE))

    def test_target_cannot_be_cancelled(self, make_rental) -> None:
        rental = make_rental(status=RentalStatus.CANCELLED)
        with pytest.raises(InvalidTransitionError):
            reactivate(rental, RentalStatus.CANCELLED)
