"""Rental request and payment generators."""

from __future__ import annotations

from decimal import Decimal

from site_rental.generators.base import BaseGenerator
from site_rental.models.base import ClientContact
from site_rental.models.rental import PaymentMethod


class RentalRequestGenerator(BaseGenerator):
    """Generate who asks for a site and how they pay for it."""

    PAYMENT_METHODS = list(PaymentMethod)
    PAYMENT_METHOD_WEIGHTS = [0.55, 0.30, 0.10, 0.05]

    # Most clients pay one month at a time, some prepay a quarter or half-year
    MONTHS_PAID = [1, 2, 3, 6]
    MONTHS_WEIGHTS = [0.60, 0.15, 0.15, 0.10]

    def __init__(
        self,
        seed: int | None = None,
        registered_rate: float = 0.5,
    ) -> None:
        super().__init__(seed)
        self.registered_rate = registered_rate

    def generate_contact(self) -> ClientContact:
        """Generate the contact snapshot of a rental request."""
        return ClientContact(
            name=self.fake.name(),
            email=self.fake.email(),
            phone=self.fake.phone_number(),
        )

    def generate_client_id(self) -> str | None:
        """Account id for registered clients, None for anonymous requests."""
        if self.random.random() < self.registered_rate:
            return self.fake.uuid4()
        return None

    def generate_message(self) -> str:
        return self.fake.sentence(nb_words=10)

    def generate_payment(self, monthly_price: Decimal) -> tuple[Decimal, PaymentMethod]:
        """Amount and method of one installment.

        Returns
        -------
        tuple[Decimal, PaymentMethod]
            Usually a whole number of months; occasionally a partial amount
            that still buys one month.
        """
        method = self.random.choices(
            self.PAYMENT_METHODS, weights=self.PAYMENT_METHOD_WEIGHTS, k=1
        )[0]
        if self.random.random() < 0.05:
            return (monthly_price / 2).quantize(Decimal("1")), method

        months = self.random.choices(self.MONTHS_PAID, weights=self.MONTHS_WEIGHTS, k=1)[0]
        return monthly_price * months, method
