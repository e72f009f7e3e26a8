#!/usr/bin/env python3
"""
Catalog Scan Script

Scans a store category through the catalog search endpoint (via the relay
chain) and prints a summary. Products can be written to a JSON file.

Press Ctrl-C once to stop after the current request; the products found so
far are kept. Press it again to abort immediately.

Usage:
    python3 scripts/scan_catalog.py --store climario
    python3 scripts/scan_catalog.py --store leveros --url https://www.leveros.com.br/ar-condicionado
    python3 scripts/scan_catalog.py --store climario --fast --output output/climario.json
"""

import argparse
import json
import logging
import os
import signal
import sys

# Add project root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from dotenv import load_dotenv

from catalog_extractor.common import setup_logging
from catalog_extractor.common.config_loader import load_relays, load_scan_settings, load_stores
from catalog_extractor.fetching import RelayChainFetcher
from catalog_extractor.models import ScanSession, ScanStatus
from catalog_extractor.scanning import CatalogScanner

load_dotenv()

logger = logging.getLogger(__name__)


def print_summary(session: ScanSession) -> None:
    stats = session.stats()
    lowest = stats["lowest_cash_price"]

    print("\n" + "=" * 60)
    print("Scan Summary")
    print("=" * 60)
    print(f"  Status:           {session.status.value}")
    print(f"  Ended by:         {session.termination_reason.value}")
    print(f"  Pages read:       {session.page_index}")
    print(f"  Products:         {stats['total']}")
    print(f"  Average price:    R$ {stats['average_cash_price']}")
    print(f"  Lowest price:     {f'R$ {lowest}' if lowest is not None else '-'}")
    print(f"  Out of stock:     {stats['unavailable']}")
    if session.error_message:
        print(f"  Error:            {session.error_message}")


def write_output(session: ScanSession, output_path: str) -> None:
    directory = os.path.dirname(output_path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(session.to_dict(), f, ensure_ascii=False, indent=2)
    logger.info("Wrote %d products to %s", len(session.accumulated), output_path)


def main():
    parser = argparse.ArgumentParser(
        description="Scan a VTEX store category through the relay chain"
    )
    parser.add_argument(
        "--store", "-s",
        required=True,
        help="Store key from config/stores.yaml (e.g. climario, leveros)"
    )
    parser.add_argument(
        "--url", "-u",
        help="Category link to scan (default: the store's default link)"
    )
    parser.add_argument(
        "--fast",
        action="store_true",
        help="Use the shorter delay between pages"
    )
    parser.add_argument(
        "--output", "-o",
        help="Write the session and products to this JSON file"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) logging"
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress info messages, show only warnings and errors"
    )

    args = parser.parse_args()
    setup_logging(verbose=args.verbose, quiet=args.quiet)

    stores = load_stores()
    store = stores.get(args.store)
    if store is None:
        print(f"Unknown store: {args.store}. Available: {', '.join(stores)}")
        sys.exit(1)

    category_path = store.category_path(args.url)
    if not category_path:
        print("No category to scan: pass --url or set default_link for the store")
        sys.exit(1)

    settings = load_scan_settings()

    print("=" * 60)
    print("Catalog Scan")
    print("=" * 60)
    print(f"  Store:            {store.name} ({store.base_url})")
    print(f"  Category:         {category_path}")
    print(f"  Mode:             {'fast' if args.fast else 'safe'}")
    print(f"  Page size:        {settings.page_size}")
    print(f"  Page limit:       {settings.max_pages}")

    session = ScanSession(store.base_url, category_path, safe_mode=not args.fast)

    def request_stop(signum, frame):
        print("\nStopping after the current request... (Ctrl-C again to abort)")
        session.request_stop()
        signal.signal(signal.SIGINT, signal.default_int_handler)

    signal.signal(signal.SIGINT, request_stop)

    with RelayChainFetcher(
        load_relays(),
        retry_delay=settings.relay_retry_delay,
        blocking_markers=settings.blocking_markers,
    ) as fetcher:
        scanner = CatalogScanner(
            fetcher,
            store_name=store.name,
            settings=settings,
            sales_channel=store.sales_channel,
        )
        scanner.run(session, on_progress=lambda s: print(f"  {s.progress_message}"))

    print_summary(session)

    if args.output:
        write_output(session, args.output)

    if session.status is ScanStatus.FAILED:
        sys.exit(1)


if __name__ == "__main__":
    main()
