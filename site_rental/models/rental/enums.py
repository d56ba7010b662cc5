"""Enumeration types for rental domain entities."""

from enum import Enum


class RentalStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    PAYMENT_DUE = "payment_due"
    CANCELLED = "cancelled"


class PaymentMethod(str, Enum):
    BANK_TRANSFER = "bank_transfer"
    CARD = "card"
    CASH = "cash"
    OTHER = "other"
