"""Custom exception hierarchy for site-rental."""


class SiteRentalError(Exception):
    """Base exception for all site-rental errors."""


class EntityNotFoundError(SiteRentalError):
    """Raised when a referenced entity does not exist."""


class RentalNotFoundError(EntityNotFoundError):
    """Raised when a rental id is not present in the store."""


class SiteUnavailableError(EntityNotFoundError):
    """Raised when a new rental references a missing or unavailable site."""


class InvalidAmountError(SiteRentalError):
    """Raised when a payment amount is not a positive number."""


class InvalidEntityStateError(SiteRentalError):
    """Raised when an entity is in an invalid state for the operation."""


class InvalidTransitionError(InvalidEntityStateError):
    """Raised when a status change is not allowed (e.g. out of cancelled)."""


class LedgerMismatchError(InvalidEntityStateError):
    """Raised when running totals disagree with the payment ledger."""


class ConcurrentModificationError(SiteRentalError):
    """Raised when a write is based on a stale rental version."""

    def __init__(self, rental_id: str, expected: int, actual: int) -> None:
        super().__init__(
            f"Rental {rental_id} was modified concurrently "
            f"(expected version {expected}, found {actual})"
        )
        self.rental_id = rental_id
        self.expected = expected
        self.actual = actual


class ConfigurationError(SiteRentalError):
    """Raised when configuration is invalid or missing."""


class SinkError(SiteRentalError):
    """Raised when a sink operation fails."""
