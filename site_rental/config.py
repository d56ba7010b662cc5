"""Configuration management for site-rental."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from site_rental.exceptions import ConfigurationError


@dataclass
class BillingConfig:
    """Currency display and billing thresholds."""

    currency_symbol: str = "₸"
    thousands_separator: str = " "
    symbol_first: bool = True
    expiring_soon_days: int = 7  # aggregate "expiring soon" count
    highlight_days: int = 3  # dashboard emphasis only
    reminder_days: int = 3
    next_payment_lead_days: int = 7


@dataclass
class KafkaConfig:
    """Kafka producer configuration."""

    bootstrap_servers: str = "localhost:9092"
    acks: str = "all"
    batch_size: int = 16384
    linger_ms: int = 5
    compression: str = "snappy"
    retries: int = 3
    topic_prefix: str = "dev.rentals"

    def to_dict(self) -> dict[str, Any]:
        """Convert to confluent-kafka config dict."""
        return {
            "bootstrap.servers": self.bootstrap_servers,
            "acks": self.acks,
            "batch.size": self.batch_size,
            "linger.ms": self.linger_ms,
            "compression.type": self.compression,
            "retries": self.retries,
        }

    def topic(self, name: str) -> str:
        """Return the fully qualified topic for an event stream."""
        return f"{self.topic_prefix}.{name}" if self.topic_prefix else name


@dataclass
class OutputConfig:
    """Output configuration."""

    json_output_dir: Path = field(default_factory=lambda: Path("output"))
    pretty_json: bool = False


@dataclass
class ScenarioConfig:
    """Configuration for sample portfolio generation."""

    name: str = "rental_portfolio"
    num_sites: int = 12
    num_requests: int = 40
    activation_rate: float = 0.6
    cancellation_rate: float = 0.1
    removed_site_rate: float = 0.05


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc


@dataclass
class SiteRentalConfig:
    """Main configuration for site-rental."""

    billing: BillingConfig = field(default_factory=BillingConfig)
    kafka: KafkaConfig = field(default_factory=KafkaConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    scenario: ScenarioConfig | None = None
    source: str = "site-rental"
    seed: int | None = None
    log_level: str = "INFO"
    log_format: str = "standard"

    @classmethod
    def from_env(cls) -> "SiteRentalConfig":
        """Create config from environment variables."""
        billing = BillingConfig(
            currency_symbol=os.getenv("CURRENCY_SYMBOL", "₸"),
            expiring_soon_days=_env_int("EXPIRING_SOON_DAYS", 7),
            highlight_days=_env_int("HIGHLIGHT_DAYS", 3),
            reminder_days=_env_int("REMINDER_DAYS", 3),
            next_payment_lead_days=_env_int("NEXT_PAYMENT_LEAD_DAYS", 7),
        )
        if billing.expiring_soon_days < 1:
            raise ConfigurationError("EXPIRING_SOON_DAYS must be at least 1")

        kafka = KafkaConfig(
            bootstrap_servers=os.getenv("KAFKA_BOOTSTRAP_SERVERS", "localhost:9092"),
            acks=os.getenv("KAFKA_ACKS", "all"),
            topic_prefix=os.getenv("TOPIC_PREFIX", "dev.rentals"),
        )

        output = OutputConfig(
            json_output_dir=Path(os.getenv("OUTPUT_DIR", "output")),
            pretty_json=os.getenv("PRETTY_JSON", "false").lower() == "true",
        )

        return cls(
            billing=billing,
            kafka=kafka,
            output=output,
            source=os.getenv("EVENT_SOURCE", "site-rental"),
            seed=_env_int("SEED", 0) if os.getenv("SEED") else None,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )
