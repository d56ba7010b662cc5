#!/usr/bin/env python3
"""Run the daily rental check: expiration sweep plus expiry reminders.

Active rentals whose paid period ran out are moved to payment_due, and
clients whose rental ends within the reminder window get one reminder per
paid period. Events go to the console, a JSON Lines directory or Kafka.

Without a persistent store behind it, the check runs against a replayed
sample portfolio, which makes it a convenient end-to-end smoke test:

    python scripts/run_daily_check.py --sink console
    python scripts/run_daily_check.py --sink kafka --kafka-bootstrap localhost:9092
"""

import argparse
import sys
from dataclasses import replace
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from site_rental.billing.money import format_currency
from site_rental.config import SiteRentalConfig
from site_rental.logging import get_logger, setup_logging
from site_rental.scenarios import RentalPortfolioScenario
from site_rental.sinks import ConsoleSink, JsonFileSink, KafkaSink
from site_rental.sinks.kafka import EVENT_BY_EVENT

logger = get_logger(__name__)


def build_sink(args: argparse.Namespace, config: SiteRentalConfig):
    """Create the event sink selected on the command line."""
    if args.sink == "kafka":
        config.kafka = replace(
            EVENT_BY_EVENT,
            bootstrap_servers=args.kafka_bootstrap,
            topic_prefix=config.kafka.topic_prefix,
        )
        return KafkaSink(config.kafka)
    if args.sink == "json":
        return JsonFileSink(args.output_dir, pretty=config.output.pretty_json)
    return ConsoleSink(pretty=False)


def main() -> None:
    """Parse arguments and run the check."""
    parser = argparse.ArgumentParser(
        description="Run the rental expiration sweep and send expiry reminders",
    )
    parser.add_argument(
        "--sink",
        choices=["console", "json", "kafka"],
        default="console",
        help="Where to publish rental events (default: console)",
    )
    parser.add_argument(
        "--kafka-bootstrap",
        default="localhost:9092",
        help="Kafka bootstrap servers (default: localhost:9092)",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("output"),
        help="Directory for the json sink (default: output)",
    )
    parser.add_argument(
        "--reminder-days",
        type=int,
        default=None,
        help="Remind rentals ending within this many days (default: from config)",
    )
    parser.add_argument(
        "--requests",
        type=int,
        default=40,
        help="Rental requests in the sample portfolio (default: 40)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for the sample portfolio",
    )
    args = parser.parse_args()

    config = SiteRentalConfig.from_env()
    setup_logging(config.log_level, config.log_format)

    sink = build_sink(args, config)
    try:
        scenario = RentalPortfolioScenario(
            num_requests=args.requests,
            seed=args.seed if args.seed is not None else config.seed,
            service_config=config,
        )
        scenario.generate()

        service = scenario.service
        service.sink = sink

        expired = service.sweep_expirations()
        reminded = service.send_expiry_reminders(within_days=args.reminder_days)
        stats = service.get_stats()

        logger.info(
            "Daily check done: %d moved to payment_due, %d reminders sent",
            expired,
            len(reminded),
        )
        logger.info(
            "Portfolio: %d rentals, %d active, %d expiring soon, revenue %s",
            stats.total,
            stats.active,
            stats.expiring_soon,
            format_currency(stats.total_revenue, config.billing),
        )
    finally:
        sink.close()


if __name__ == "__main__":
    main()
