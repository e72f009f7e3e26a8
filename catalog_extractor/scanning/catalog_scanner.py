"""
Catalog Scanner

Drives the relay fetcher across successive result windows of a store's
catalog search endpoint, accumulating normalized products in a ScanSession
until the catalog is exhausted, the page cap is hit, failures persist or
the caller asks to stop.

Features:
- Fixed page size and "top sale" ordering so windows stay stable
- Courtesy delay between pages (longer in safe mode)
- Linear backoff on failed pages, abort after N consecutive failures
- Cooperative cancellation between relay attempts and between pages
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional
from urllib.parse import quote

from ..common.config_loader import ScanSettings
from ..common.constants import SEARCH_API_PATH, SEARCH_ORDER
from ..exceptions import (
    CatalogError,
    FetchCancelled,
    MalformedPayload,
    PersistentFailure,
    RelayExhausted,
    ScanInProgress,
)
from ..fetching import RelayChainFetcher
from ..models import ScanSession, TerminationReason
from ..validation import filter_listable
from .normalizer import normalize_catalog_item

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ScanSession], None]


def page_window(page_index: int, page_size: int) -> tuple[int, int]:
    """Inclusive [from, to] item offsets of a zero-based page."""
    start = page_index * page_size
    return start, start + page_size - 1


def build_search_url(
    base_url: str,
    category_path: str,
    start: int,
    end: int,
    sales_channel: Optional[int] = 1,
) -> str:
    """
    Build the catalog search endpoint URL for one result window.

    Example:
        build_search_url("https://www.climario.com.br", "ar-condicionado", 0, 23)
        -> "https://www.climario.com.br/api/catalog_system/pub/products/search/
            ar-condicionado?_from=0&_to=23&O=OrderByTopSaleDESC&sc=1"
    """
    path = quote(category_path.strip('/'), safe='/%')
    url = f"{base_url.rstrip('/')}{SEARCH_API_PATH}/{path}?_from={start}&_to={end}&O={SEARCH_ORDER}"
    if sales_channel is not None:
        url += f"&sc={sales_channel}"
    return url


class CatalogScanner:
    """
    Paginated catalog scan through a relay chain.

    One scanner runs one scan at a time. Each scan gets a fresh ScanSession,
    which the caller may keep a reference to in order to watch progress or
    call request_stop().

    Usage:
        scanner = CatalogScanner(RelayChainFetcher(load_relays()), store_name="Clima Rio")
        session = scanner.scan_catalog("https://www.climario.com.br",
                                       "ar-condicionado/multi-split", safe_mode=True)
        print(session.status, len(session.accumulated))
    """

    def __init__(
        self,
        fetcher: RelayChainFetcher,
        store_name: str = "",
        settings: Optional[ScanSettings] = None,
        sales_channel: Optional[int] = 1,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.fetcher = fetcher
        self.store_name = store_name
        self.settings = settings or ScanSettings()
        self.sales_channel = sales_channel
        self._sleep = sleep
        self.session: Optional[ScanSession] = None
        self._running = False

    def scan_catalog(
        self,
        base_url: str,
        category_path: str,
        safe_mode: bool = True,
        on_progress: Optional[ProgressCallback] = None,
    ) -> ScanSession:
        """
        Scan a category from its first page, replacing any previous session.

        Args:
            base_url: Store root URL (e.g., "https://www.climario.com.br")
            category_path: Category path (e.g., "ar-condicionado/multi-split")
            safe_mode: Use the longer inter-page delay
            on_progress: Called with the session after every page outcome

        Returns:
            The terminated ScanSession
        """
        return self.run(ScanSession(base_url, category_path, safe_mode), on_progress)

    def run(self, session: ScanSession, on_progress: Optional[ProgressCallback] = None) -> ScanSession:
        """
        Run a scan on a caller-created session.

        Raises:
            ScanInProgress: Another scan is running on this scanner
            ValueError: The session already ran
        """
        if self._running:
            raise ScanInProgress()
        if session.terminated or session.page_index:
            raise ValueError("ScanSession already used; create a new one for each scan")

        self._running = True
        self.session = session
        try:
            self._scan(session, on_progress)
        finally:
            self._running = False
        return session

    def request_stop(self) -> None:
        """Ask the current scan (if any) to stop before its next step."""
        if self.session is not None:
            self.session.request_stop()

    def _scan(self, session: ScanSession, on_progress: Optional[ProgressCallback]) -> None:
        s = self.settings
        logger.info("Starting scan: %s/%s (safe_mode=%s, store=%s)",
                    session.base_url, session.category_path, session.safe_mode, self.store_name)
        session.progress_message = "Connecting..."

        while not session.terminated:
            if session.stop_requested:
                self._finish(session, TerminationReason.CANCELLED, "Scan stopped")
                break

            if session.page_index >= s.max_pages:
                self._finish(session, TerminationReason.PAGE_CAP_REACHED,
                             f"Page limit reached ({s.max_pages} pages)")
                break

            start, end = page_window(session.page_index, s.page_size)
            session.progress_message = f"Reading page {session.page_index + 1}... (items {start}-{end})"
            url = build_search_url(session.base_url, session.category_path, start, end,
                                   self.sales_channel)

            try:
                items = self._as_items(self.fetcher.fetch(url, should_stop=session.is_stop_requested))
            except FetchCancelled:
                self._finish(session, TerminationReason.CANCELLED, "Scan stopped")
                break
            except (RelayExhausted, MalformedPayload) as e:
                self._record_failure(session, e)
                self._notify(on_progress, session)
                continue

            if not items:
                self._finish(session, TerminationReason.EXHAUSTED, "Scan finished")
                self._notify(on_progress, session)
                break

            products = [normalize_catalog_item(item, self.store_name)
                        for item in items if isinstance(item, dict)]
            added = session.add_products(filter_listable(products, s.min_name_length))

            session.consecutive_failures = 0
            session.page_index += 1
            session.progress_message = (
                f"Page {session.page_index} read: {added} new products ({len(session.accumulated)} total)"
            )
            logger.info("Page %d: %d items, %d added (total %d)",
                        session.page_index, len(items), added, len(session.accumulated))
            self._notify(on_progress, session)

            self._sleep(s.safe_page_delay if session.safe_mode else s.fast_page_delay)

        logger.info("Scan ended: %s, %d products in %d pages",
                    session.termination_reason.value, len(session.accumulated), session.page_index)

    @staticmethod
    def _as_items(payload: Any) -> list:
        """The search endpoint answers with a JSON array; anything else is malformed."""
        if payload is None:
            return []
        if not isinstance(payload, list):
            raise MalformedPayload(None, f"expected a list of items, got {type(payload).__name__}")
        return payload

    def _record_failure(self, session: ScanSession, error: CatalogError) -> None:
        s = self.settings
        session.consecutive_failures += 1
        session.last_error = error
        failures = session.consecutive_failures
        delay = s.failure_backoff_step * failures

        logger.warning("Page %d failed (%d/%d): %s", session.page_index + 1,
                       failures, s.max_consecutive_failures, error.message)
        session.progress_message = (
            f"Error ({error.message}). Retrying in {delay:g}s... "
            f"({failures}/{s.max_consecutive_failures})"
        )
        self._sleep(delay)

        if failures >= s.max_consecutive_failures:
            failure = PersistentFailure(failures, error)
            logger.error("Scan aborted: %s", failure.message)
            session.terminate(TerminationReason.PERSISTENT_FAILURE, failure)

    @staticmethod
    def _finish(session: ScanSession, reason: TerminationReason, message: str) -> None:
        session.progress_message = message
        session.terminate(reason)

    @staticmethod
    def _notify(on_progress: Optional[ProgressCallback], session: ScanSession) -> None:
        if on_progress is not None:
            on_progress(session)
