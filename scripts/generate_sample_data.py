#!/usr/bin/env python3
"""Generate sample rental data files for validation.

This script replays a synthetic rental portfolio and writes JSON files to the
local/ folder: the site catalog, every rental with its payment ledger, the
dashboard rows, the aggregate statistics and the domain events emitted while
replaying. These files can be used for manual validation and testing.
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from site_rental.billing.ledger import check_ledger
from site_rental.billing.stats import compute_stats
from site_rental.logging import get_logger, setup_logging
from site_rental.scenarios import RentalPortfolioScenario
from site_rental.sinks import JsonFileSink
from site_rental.views import summarize_rental

logger = get_logger(__name__)


def print_summary(data: dict[str, int], output_dir: Path) -> None:
    """Print generation summary."""
    print("\n" + "=" * 60)
    print("Summary")
    print("=" * 60)
    for name, count in data.items():
        print(f"{name + ':':18}{count}")
    print(f"\nAll files saved to: {output_dir}")
    print("=" * 60)


def main() -> None:
    """Generate all sample data files."""
    setup_logging("INFO")

    output_dir = project_root / "local"
    sink = JsonFileSink(output_dir, pretty=True)

    print("=" * 60)
    print("Generating Sample Rental Data for Validation")
    print("=" * 60)

    scenario = RentalPortfolioScenario(num_sites=10, num_requests=30, seed=42, sink=sink)
    store = scenario.generate()
    service = scenario.service

    rentals = store.snapshot()
    for rental in rentals:
        check_ledger(rental)

    now = service.now()
    summaries = [
        summarize_rental(r, store.get_site(r.site_id), now, service.billing) for r in rentals
    ]
    stats = compute_stats(rentals, now, service.billing)

    sink.write_batch("sites", list(store.sites.values()))
    sink.write_batch("rentals", rentals)
    sink.write_batch("dashboard", summaries)
    sink.write_batch("stats", [stats.to_dict()])

    logger.info("Stats: %s", stats.to_dict())
    print_summary(store.summary(), output_dir)


if __name__ == "__main__":
    main()
