"""Output sinks for rental events and exports."""

from typing import Any, Protocol

from site_rental.sinks.console import ConsoleSink
from site_rental.sinks.json_file import JsonFileSink
from site_rental.sinks.kafka import KafkaSink


class EventSink(Protocol):
    """Anything the rental service can publish events to."""

    def send(self, topic: str, record: Any) -> None: ...

    def close(self) -> None: ...


__all__ = ["ConsoleSink", "EventSink", "JsonFileSink", "KafkaSink"]
