#!/usr/bin/env python3
"""
Snapshot Extraction Script

Extracts products from a listing page saved from the browser (File > Save
Page As, or a copied outerHTML). Use it when the catalog endpoint blocks the
relay chain.

Usage:
    python3 scripts/extract_snapshot.py --file climario.html --store climario
    python3 scripts/extract_snapshot.py --file climario.html   # store detected from the page URL
    python3 scripts/extract_snapshot.py --file page.html --base-url https://www.leveros.com.br
    python3 scripts/extract_snapshot.py --file page.html --store leveros --output output/leveros.json
"""

import argparse
import json
import logging
import os
import sys

# Add project root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from dotenv import load_dotenv

from catalog_extractor.common import setup_logging
from catalog_extractor.common.config_loader import load_scan_settings, load_stores
from catalog_extractor.extraction import detect_store, extract_from_snapshot
from catalog_extractor.models import ExtractionResult, ScanStatus

load_dotenv()

logger = logging.getLogger(__name__)


def read_snapshot(path: str) -> str:
    """Snapshot text, or '' when the file is missing or unreadable."""
    if not os.path.exists(path):
        logger.warning("Snapshot file not found: %s", path)
        return ""
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return f.read()


def print_summary(result: ExtractionResult) -> None:
    stats = result.stats()
    lowest = stats["lowest_cash_price"]

    print("\n" + "=" * 60)
    print("Extraction Summary")
    print("=" * 60)
    print(f"  Status:           {result.status.value}")
    for name, count in result.strategy_counts.items():
        print(f"  {name + ' candidates:':<18}{count}")
    print(f"  Products:         {stats['total']}")
    print(f"  Average price:    R$ {stats['average_cash_price']}")
    print(f"  Lowest price:     {f'R$ {lowest}' if lowest is not None else '-'}")
    if result.error_message:
        print(f"  Error:            {result.error_message}")


def main():
    parser = argparse.ArgumentParser(
        description="Extract products from a saved listing page"
    )
    parser.add_argument(
        "--file", "-f",
        required=True,
        help="Saved HTML page"
    )
    parser.add_argument(
        "--store", "-s",
        help="Store key from config/stores.yaml (default: detected from the page URL)"
    )
    parser.add_argument(
        "--base-url",
        help="Base URL for relative links (default: store URL or the page's canonical link)"
    )
    parser.add_argument(
        "--output", "-o",
        help="Write the result and products to this JSON file"
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

    snapshot = read_snapshot(args.file)
    stores = load_stores()

    if args.store:
        store = stores.get(args.store)
        if store is None:
            print(f"Unknown store: {args.store}. Available: {', '.join(stores)}")
            sys.exit(1)
    else:
        store = detect_store(snapshot, stores)

    store_name = store.name if store else ""
    base_url = args.base_url or (store.base_url if store else "")

    print("=" * 60)
    print("Snapshot Extraction")
    print("=" * 60)
    print(f"  File:             {args.file}")
    print(f"  Store:            {store_name or '-'}")
    print(f"  Base URL:         {base_url or '(from page)'}")

    result = extract_from_snapshot(
        snapshot,
        store_name=store_name,
        base_url=base_url,
        settings=load_scan_settings(),
    )

    print_summary(result)

    if args.output:
        directory = os.path.dirname(args.output)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump(result.to_dict(), f, ensure_ascii=False, indent=2)
        logger.info("Wrote %d products to %s", len(result.products), args.output)

    if result.status is ScanStatus.FAILED:
        sys.exit(1)


if __name__ == "__main__":
    main()
