"""Kafka sink for streaming rental events to Kafka topics."""

import json
import logging
from dataclasses import dataclass, is_dataclass
from typing import Any

from confluent_kafka import Producer

from site_rental.config import KafkaConfig
from site_rental.exceptions import SinkError
from site_rental.sinks.serialization import to_dict

logger = logging.getLogger(__name__)


# Low-volume preset: each event is sent as soon as it is produced
EVENT_BY_EVENT = KafkaConfig(
    bootstrap_servers="localhost:9092",
    acks="all",
    batch_size=1,
    linger_ms=0,
)


@dataclass
class ProducerStats:
    """Track producer delivery statistics."""

    sent: int = 0
    delivered: int = 0
    failed: int = 0

    @property
    def success_rate(self) -> float:
        """Calculate success rate."""
        total = self.delivered + self.failed
        return self.delivered / total if total > 0 else 0.0


class KafkaSink:
    """Output rental events and snapshots to Kafka topics."""

    # Topic suffix to key field mapping, so one rental's messages share a partition
    KEY_FIELDS = {
        "events": "subject",
        "rentals": "rental_id",
        "sites": "site_id",
    }

    def __init__(self, config: KafkaConfig | str) -> None:
        """Initialize Kafka sink.

        Parameters
        ----------
        config : KafkaConfig | str
            Producer configuration or bootstrap servers string.
        """
        if isinstance(config, str):
            config = KafkaConfig(bootstrap_servers=config)

        self.config = config
        self.producer = self._create_producer()
        self.stats = ProducerStats()

    def _create_producer(self) -> Producer:
        """Create Kafka producer with configuration."""
        return Producer(self.config.to_dict())

    def _delivery_callback(self, err: Any, msg: Any) -> None:
        """Handle delivery reports."""
        if err:
            self.stats.failed += 1
            logger.error("Delivery failed: %s", err)
        else:
            self.stats.delivered += 1
            logger.debug("Delivered to %s[%d]@%d", msg.topic(), msg.partition(), msg.offset())

    def _get_key(self, topic: str, record: Any) -> str | None:
        """Extract message key from record based on topic."""
        key_field = self.KEY_FIELDS.get(topic.split(".")[-1])
        if not key_field:
            return None

        if is_dataclass(record):
            return getattr(record, key_field, None)
        elif isinstance(record, dict):
            return record.get(key_field)
        return None

    def send(self, topic: str, record: Any, key: str | None = None) -> None:
        """Send a single record to Kafka topic."""
        value = json.dumps(to_dict(record), ensure_ascii=False, default=str).encode("utf-8")

        if key is None:
            key = self._get_key(topic, record)

        self.producer.produce(
            topic=topic,
            key=key.encode("utf-8") if key else None,
            value=value,
            callback=self._delivery_callback,
        )
        self.stats.sent += 1
        self.producer.poll(0)

    def write_batch(self, topic: str, records: list[Any]) -> None:
        """Write a batch of records to a Kafka topic."""
        logger.info("Writing batch to %s: %d records", topic, len(records))

        for record in records:
            self.send(topic, record)

        self.flush()
        logger.info("Batch complete: sent=%d, delivered=%d, failed=%d",
                    self.stats.sent, self.stats.delivered, self.stats.failed)

    def flush(self, timeout: float = 30.0) -> None:
        """Flush pending messages."""
        remaining = self.producer.flush(timeout)
        if remaining:
            raise SinkError(f"{remaining} messages still queued after {timeout}s flush")

    def close(self) -> None:
        """Flush and close the producer."""
        self.flush()
        logger.info(
            "Kafka sink closed: sent=%d, delivered=%d, failed=%d",
            self.stats.sent,
            self.stats.delivered,
            self.stats.failed,
        )
