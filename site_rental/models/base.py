"""Base models shared across domains."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class ClientContact:
    """Contact snapshot captured when a rental is requested.

    Kept on the rental even if the client account later changes, so the
    audit trail shows who actually asked for the site.
    """

    name: str
    email: str
    phone: str = ""

    def __post_init__(self) -> None:
        self.name = self.name.strip()
        self.email = self.email.strip().lower()
        self.phone = self.phone.strip()


@dataclass(frozen=True)
class SessionContext:
    """Identity of whoever is calling the service, passed explicitly."""

    user_id: str
    is_admin: bool = False


@dataclass
class Event:
    """Standard event envelope for streaming."""

    event_id: str
    event_type: str  # entity.action (e.g., rental.payment_recorded)
    event_time: datetime
    source: str  # Service/system that generated
    subject: str  # Entity ID affected
    data: dict
    metadata: dict = field(default_factory=dict)
