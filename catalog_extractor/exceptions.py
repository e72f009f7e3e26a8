"""
Exceptions for catalog retrieval and snapshot extraction.

Per-attempt relay failures (RelayTimeout, RelayRejected, ContentBlocked,
MalformedPayload) are absorbed by the relay fetcher. RelayExhausted reaches
the catalog scanner as a single page failure. PersistentFailure,
ParseYieldedEmpty and SnapshotMissing end up as status values on the
session or extraction result; they are never allowed to escape to the host.
"""

from typing import Any, Dict, Optional


class CatalogError(Exception):
    """
    Base class for all catalog extractor errors.

    Attributes:
        message: Human-readable error message
        error_code: Stable code for logs and JSON output
        context: Extra diagnostic data
    """

    def __init__(self, message: str, error_code: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.context = context or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Converts the exception to a dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "context": self.context,
        }


# ── Per-relay classifications ────────────────────────────────────────────────

class RelayError(CatalogError):
    """A single relay attempt failed; the next relay should be tried."""

    def __init__(self, message: str, relay: Optional[str] = None,
                 error_code: str = "RELAY_ERROR", **context):
        self.relay = relay
        super().__init__(message, error_code, {"relay": relay, **context})


class RelayTimeout(RelayError):
    """The relay did not answer within its timeout."""

    def __init__(self, relay: Optional[str] = None, timeout_ms: Optional[int] = None):
        super().__init__(
            f"Relay {relay} timed out after {timeout_ms} ms",
            relay, "TIMEOUT", timeout_ms=timeout_ms,
        )


class RelayRejected(RelayError):
    """The relay answered with a non-success status, or could not be reached."""

    def __init__(self, relay: Optional[str] = None, status: Optional[int] = None,
                 detail: str = ""):
        self.status = status
        if status is None:
            message = f"Relay {relay} unreachable: {detail}" if detail else f"Relay {relay} unreachable"
        else:
            message = f"Relay {relay} returned status {status}"
        super().__init__(message, relay, "RELAY_REJECTED", status=status)


class ContentBlocked(RelayError):
    """The upstream site served an anti-automation page instead of data."""

    def __init__(self, relay: Optional[str] = None, marker: str = ""):
        self.marker = marker
        super().__init__(
            f"Content blocked behind {relay} (security challenge: {marker})",
            relay, "CONTENT_BLOCKED", marker=marker,
        )


class MalformedPayload(RelayError):
    """The relay answered, but the payload could not be decoded as catalog data."""

    def __init__(self, relay: Optional[str] = None, detail: str = "",
                 upstream_status: Optional[int] = None):
        self.upstream_status = upstream_status
        super().__init__(
            f"Malformed payload from {relay}: {detail}",
            relay, "MALFORMED_PAYLOAD", detail=detail, upstream_status=upstream_status,
        )


# ── Logical call / scan outcomes ────────────────────────────────────────────

class RelayExhausted(CatalogError):
    """Every configured relay failed for one logical request."""

    def __init__(self, target_url: str, last_error: Optional[RelayError] = None,
                 attempts: int = 0):
        self.target_url = target_url
        self.last_error = last_error
        self.attempts = attempts
        reason = last_error.message if last_error else "no relay configured"
        super().__init__(
            f"All relays failed ({attempts} tried). Last error: {reason}",
            "RELAY_EXHAUSTED",
            {"target_url": target_url, "attempts": attempts,
             "last_error": last_error.to_dict() if last_error else None},
        )


class FetchCancelled(CatalogError):
    """A stop was requested between relay attempts."""

    def __init__(self, target_url: str):
        super().__init__("Fetch cancelled by caller", "FETCH_CANCELLED",
                         {"target_url": target_url})


class PersistentFailure(CatalogError):
    """Pagination aborted after too many consecutive page failures."""

    def __init__(self, failures: int, last_error: Optional[CatalogError] = None):
        self.failures = failures
        self.last_error = last_error
        reason = last_error.message if last_error else "unknown"
        super().__init__(
            f"Persistent connection failure after {failures} attempts. Reason: {reason}",
            "PERSISTENT_FAILURE",
            {"failures": failures,
             "last_error": last_error.to_dict() if last_error else None},
        )


class ScanInProgress(CatalogError):
    """A scan was started while another one is still running on the same scanner."""

    def __init__(self):
        super().__init__("A catalog scan is already running", "SCAN_IN_PROGRESS")


# ── Snapshot path ───────────────────────────────────────────────────────────

class SnapshotMissing(CatalogError):
    """No snapshot document was supplied."""

    def __init__(self):
        super().__init__("No page snapshot was supplied", "SNAPSHOT_MISSING")


class ParseYieldedEmpty(CatalogError):
    """The snapshot was parsed but contained no valid product."""

    def __init__(self, candidates: int = 0):
        super().__init__(
            "No valid products found in the page snapshot",
            "PARSE_YIELDED_EMPTY",
            {"candidates": candidates},
        )
