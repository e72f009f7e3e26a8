"""
Relay Chain Fetcher

Issues one logical GET through an ordered chain of relay proxies and
returns the first payload that decodes as JSON catalog data.

Relays are always tried in configured order, one at a time. A relay
failure is logged and absorbed; only when every relay has failed does the
caller see RelayExhausted.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Callable, Optional, Sequence

import requests

from ..common.constants import BLOCKING_MARKERS, RELAY_RETRY_DELAY
from ..exceptions import (
    ContentBlocked,
    FetchCancelled,
    MalformedPayload,
    RelayError,
    RelayExhausted,
    RelayRejected,
    RelayTimeout,
)
from ..models import RelayDescriptor, ResponseShape

logger = logging.getLogger(__name__)


class RelayChainFetcher:
    """
    Fetches JSON through a fallback chain of relay proxies.

    Usage:
        fetcher = RelayChainFetcher(load_relays())
        items = fetcher.fetch("https://www.store.com.br/api/...?_from=0&_to=23")
    """

    CACHE_BUST_PARAM = "_t"
    HEADERS = {
        "Accept": "application/json",
        "User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36",
    }

    def __init__(
        self,
        relays: Sequence[RelayDescriptor],
        session: requests.Session | None = None,
        retry_delay: float = RELAY_RETRY_DELAY,
        blocking_markers: Sequence[str] = BLOCKING_MARKERS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Args:
            relays: Relay chain, tried first to last
            session: Shared requests session (created if not given)
            retry_delay: Seconds to wait after a failed relay attempt
            blocking_markers: Substrings identifying an anti-bot challenge page
            sleep: Sleep function (injected in tests)
        """
        self.relays = tuple(relays)
        self.session = session or requests.Session()
        self.retry_delay = retry_delay
        self.blocking_markers = tuple(blocking_markers)
        self._sleep = sleep
        self._last_token = 0

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.session.close()

    def close(self):
        self.session.close()

    def _cache_bust_token(self) -> int:
        """Millisecond timestamp, strictly increasing across calls."""
        token = int(time.time() * 1000)
        if token <= self._last_token:
            token = self._last_token + 1
        self._last_token = token
        return token

    def with_cache_buster(self, target_url: str) -> str:
        """Append a per-call cache-busting parameter to the target URL."""
        separator = '&' if '?' in target_url else '?'
        return f"{target_url}{separator}{self.CACHE_BUST_PARAM}={self._cache_bust_token()}"

    def fetch(self, target_url: str, should_stop: Optional[Callable[[], bool]] = None) -> Any:
        """
        Fetch and decode target_url through the relay chain.

        Args:
            target_url: Upstream URL returning JSON
            should_stop: Checked before every relay after the first; when it
                returns True the call is abandoned with FetchCancelled

        Returns:
            Decoded JSON payload from the first relay that succeeds

        Raises:
            RelayExhausted: Every relay failed; carries the last failure
            FetchCancelled: should_stop fired between attempts
        """
        busted_url = self.with_cache_buster(target_url)
        last_error: RelayError | None = None
        attempts = 0

        last_index = len(self.relays) - 1

        for index, relay in enumerate(self.relays):
            if attempts and should_stop is not None and should_stop():
                raise FetchCancelled(target_url)

            attempts += 1
            try:
                payload = self._attempt(relay, busted_url)
            except RelayError as e:
                last_error = e
                logger.warning("Relay %s failed: %s", relay.name, e.message)
                # No courtesy delay once the chain is exhausted
                if index < last_index:
                    self._sleep(self.retry_delay)
                continue

            logger.debug("Relay %s succeeded for %s", relay.name, target_url)
            return payload

        raise RelayExhausted(target_url, last_error, attempts)

    def _attempt(self, relay: RelayDescriptor, target_url: str) -> Any:
        """Single relay attempt. Raises a RelayError subclass on any failure."""
        request_url = relay.build_url(target_url)
        logger.debug("Trying relay %s: %s", relay.name, request_url)

        try:
            response = self.session.get(
                request_url,
                headers=self.HEADERS,
                timeout=relay.timeout_seconds,
            )
        except requests.exceptions.Timeout:
            raise RelayTimeout(relay.name, relay.timeout_ms)
        except requests.RequestException as e:
            raise RelayRejected(relay.name, None, f"{type(e).__name__}: {str(e)[:100]}")

        if not 200 <= response.status_code < 300:
            raise RelayRejected(relay.name, response.status_code)

        if relay.response_shape is ResponseShape.WRAPPED:
            return self._decode_wrapped(relay, response)
        return self._decode_raw(relay, response.text)

    def _decode_wrapped(self, relay: RelayDescriptor, response: requests.Response) -> Any:
        """Decode {"status": {"http_code": N}, "contents": "<json string>"}."""
        try:
            envelope = response.json()
        except ValueError:
            raise MalformedPayload(relay.name, "relay envelope is not JSON")

        if not isinstance(envelope, dict):
            raise MalformedPayload(relay.name, "relay envelope is not an object")

        status = envelope.get("status")
        upstream_status = status.get("http_code") if isinstance(status, dict) else None
        if isinstance(upstream_status, int) and upstream_status >= 400:
            raise MalformedPayload(relay.name, f"store refused connection ({upstream_status})",
                                   upstream_status)

        contents = envelope.get("contents")
        if not contents:
            raise MalformedPayload(relay.name, "empty contents", upstream_status)

        try:
            return json.loads(contents)
        except (TypeError, ValueError):
            raise MalformedPayload(relay.name, "contents are not JSON", upstream_status)

    def _decode_raw(self, relay: RelayDescriptor, text: str) -> Any:
        """Decode a pass-through body, rejecting HTML challenge pages."""
        stripped = text.strip()
        if stripped.startswith('<'):
            raise ContentBlocked(relay.name, "markup")
        if '<!doctype' in stripped.lower():
            raise ContentBlocked(relay.name, "<!DOCTYPE")
        for marker in self.blocking_markers:
            if marker in text:
                raise ContentBlocked(relay.name, marker)

        try:
            return json.loads(stripped)
        except ValueError:
            raise MalformedPayload(relay.name, "malformed JSON")
