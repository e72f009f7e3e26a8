"""
Snapshot Parser

Extracts products from a saved listing page (an HTML snapshot captured by
the user when live retrieval is blocked).

Strategies run in priority order:
1. Structured metadata (JSON-LD) - always
2. Visual heuristic (product cards) - only while fewer than a handful of
   candidates have been found

Their candidates are merged first-seen-wins by product identity and then
filtered with the same listing rules as the catalog scan.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from bs4 import BeautifulSoup

from ..common.config_loader import ScanSettings, get_store_for_url
from ..exceptions import CatalogError, ParseYieldedEmpty, SnapshotMissing
from ..models import ExtractionResult, Product, ScanStatus, StoreConfig
from ..validation import filter_listable
from .strategies import ExtractionStrategy, SnapshotDocument, default_strategies, merge_candidates

logger = logging.getLogger(__name__)


def detect_base_url(soup: BeautifulSoup) -> str:
    """Page URL declared by the snapshot itself (canonical, og:url or <base>)."""
    canonical = soup.select_one('link[rel="canonical"][href]')
    if canonical is not None:
        return canonical['href'].strip()

    og_url = soup.select_one('meta[property="og:url"][content]')
    if og_url is not None:
        return og_url['content'].strip()

    base = soup.select_one('base[href]')
    if base is not None:
        return base['href'].strip()

    return ""


def detect_store(
    document_text: Optional[str],
    stores: Optional[Dict[str, StoreConfig]] = None,
) -> Optional[StoreConfig]:
    """
    Registered store a snapshot was saved from, judged by the page URL it
    declares. None when the page names no URL or a store we do not know.
    """
    if not document_text or not document_text.strip():
        return None

    page_url = detect_base_url(BeautifulSoup(document_text, 'lxml'))
    if not page_url:
        return None

    try:
        return get_store_for_url(page_url, stores)
    except ValueError as e:
        logger.info("Snapshot store not detected: %s", e)
        return None


class SnapshotParser:
    """
    Runs extraction strategies over one page snapshot.

    Usage:
        parser = SnapshotParser(store_name="Clima Rio",
                                base_url="https://www.climario.com.br")
        products = parser.extract_products(html)
        print(parser.strategy_counts)   # {'structured': 24}
    """

    def __init__(
        self,
        store_name: str = "",
        base_url: str = "",
        strategies: Optional[Sequence[ExtractionStrategy]] = None,
        settings: Optional[ScanSettings] = None,
    ):
        """
        Initialize the parser.

        Args:
            store_name: Default brand for products that carry none
            base_url: Resolves relative links; detected from the page if empty
            strategies: Strategies in priority order (default: structured, heuristic)
            settings: Sufficiency threshold and name length rule
        """
        self.store_name = store_name
        self.base_url = base_url
        self.strategies = list(strategies) if strategies is not None else default_strategies()
        self.settings = settings or ScanSettings()
        self.strategy_counts: dict[str, int] = {}

    def parse_document(self, document_text: str) -> SnapshotDocument:
        soup = BeautifulSoup(document_text, 'lxml')
        base_url = self.base_url or detect_base_url(soup)
        return SnapshotDocument(soup=soup, store_name=self.store_name, base_url=base_url)

    def extract_products(self, document_text: Optional[str]) -> List[Product]:
        """
        Extract listable products from a snapshot.

        Args:
            document_text: Serialized HTML document

        Returns:
            Products in structured-then-heuristic order, unique by identity,
            each with a positive cash price (may be empty)

        Raises:
            SnapshotMissing: document_text is None or blank
        """
        if not document_text or not document_text.strip():
            raise SnapshotMissing()

        document = self.parse_document(document_text)
        self.strategy_counts = {}
        merged: List[Product] = []

        for strategy in self.strategies:
            if strategy.fallback and len(merged) > self.settings.structured_sufficient_count:
                logger.debug("Skipping %s strategy: %d candidates already", strategy.name, len(merged))
                continue

            candidates = strategy.extract(document)
            self.strategy_counts[strategy.name] = len(candidates)
            logger.info("%s strategy: %d candidates", strategy.name, len(candidates))
            merged = merge_candidates(merged, candidates)

        products = filter_listable(merged, self.settings.min_name_length)
        logger.info("Snapshot extraction: %d products (%d candidates after merge)",
                    len(products), len(merged))
        return products


def extract_from_snapshot(
    document_text: Optional[str],
    store_name: str = "",
    base_url: str = "",
    settings: Optional[ScanSettings] = None,
) -> ExtractionResult:
    """
    Extract products from a snapshot and report the outcome as a status.

    Never raises for a bad or empty snapshot: a missing document and a
    document without products both give a FAILED result, with different
    error messages.

    Args:
        document_text: Serialized HTML document
        store_name: Default brand
        base_url: Store or page URL for relative links

    Returns:
        ExtractionResult
    """
    parser = SnapshotParser(store_name=store_name, base_url=base_url, settings=settings)

    try:
        products = parser.extract_products(document_text)
        if not products:
            raise ParseYieldedEmpty(sum(parser.strategy_counts.values()))
    except CatalogError as e:
        logger.error("Snapshot extraction failed: %s", e.message)
        return ExtractionResult(
            products=[],
            status=ScanStatus.FAILED,
            error=e,
            strategy_counts=dict(parser.strategy_counts),
        )

    return ExtractionResult(
        products=products,
        status=ScanStatus.SUCCESS,
        strategy_counts=dict(parser.strategy_counts),
    )
