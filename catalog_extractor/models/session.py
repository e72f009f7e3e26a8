"""
Scan session and extraction result models.

ScanSession is the single mutable accumulator of a catalog scan. It is
created by the caller (or by the scanner) and passed explicitly; nothing
in the package keeps it in module state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Iterable, Optional

from ..exceptions import CatalogError
from .product import Product


class ScanStatus(Enum):
    SUCCESS = "success"
    PARTIAL = "partial"
    FAILED = "failed"


class TerminationReason(Enum):
    EXHAUSTED = "exhausted"                     # Empty page: end of catalog
    PERSISTENT_FAILURE = "persistent_failure"   # Too many consecutive failures
    PAGE_CAP_REACHED = "page_cap_reached"       # Hard page limit hit
    CANCELLED = "cancelled"                     # Caller requested a stop


def catalog_summary(products: list[Product]) -> dict:
    """
    Summary figures for presentation: item count, average and lowest
    cash price among priced items, unavailable count.
    """
    priced = [p.cash_price for p in products if p.cash_price > 0]
    average = (sum(priced, Decimal("0")) / len(priced)).quantize(Decimal("0.01")) if priced else Decimal("0.00")
    return {
        "total": len(products),
        "average_cash_price": average,
        "lowest_cash_price": min(priced) if priced else None,
        "unavailable": sum(1 for p in products if not p.available),
    }


@dataclass
class ScanSession:
    """
    State of one catalog scan.

    accumulated only grows and keeps first-seen order; a product whose
    identity is already present is dropped.
    """

    base_url: str
    category_path: str
    safe_mode: bool = True
    accumulated: list[Product] = field(default_factory=list)
    page_index: int = 0
    consecutive_failures: int = 0
    terminated: bool = False
    termination_reason: Optional[TerminationReason] = None
    last_error: Optional[CatalogError] = None
    progress_message: str = ""
    stop_requested: bool = False
    _seen: set[str] = field(default_factory=set, repr=False)

    def add_products(self, products: Iterable[Product]) -> int:
        """Append products not seen before. Returns how many were added."""
        added = 0
        for product in products:
            key = product.identity
            if key in self._seen:
                continue
            self._seen.add(key)
            self.accumulated.append(product)
            added += 1
        return added

    def request_stop(self) -> None:
        """Ask the running scan to stop before its next step."""
        self.stop_requested = True

    def is_stop_requested(self) -> bool:
        return self.stop_requested

    def terminate(self, reason: TerminationReason, error: Optional[CatalogError] = None) -> None:
        self.terminated = True
        self.termination_reason = reason
        if error is not None:
            self.last_error = error

    @property
    def status(self) -> Optional[ScanStatus]:
        """None while the scan is still running."""
        if not self.terminated:
            return None
        if self.termination_reason is TerminationReason.EXHAUSTED:
            return ScanStatus.SUCCESS
        if self.termination_reason is TerminationReason.PAGE_CAP_REACHED:
            return ScanStatus.PARTIAL
        return ScanStatus.PARTIAL if self.accumulated else ScanStatus.FAILED

    @property
    def error_message(self) -> Optional[str]:
        if self.termination_reason is TerminationReason.PERSISTENT_FAILURE and self.last_error:
            return self.last_error.message
        return None

    def stats(self) -> dict:
        return catalog_summary(self.accumulated)

    def to_dict(self) -> dict:
        status = self.status
        return {
            "base_url": self.base_url,
            "category_path": self.category_path,
            "safe_mode": self.safe_mode,
            "pages_scanned": self.page_index,
            "status": status.value if status else "running",
            "termination_reason": self.termination_reason.value if self.termination_reason else None,
            "error_message": self.error_message,
            "last_error": self.last_error.to_dict() if self.last_error else None,
            "total_products": len(self.accumulated),
            "products": [p.to_dict() for p in self.accumulated],
        }


@dataclass
class ExtractionResult:
    """Outcome of snapshot extraction."""

    products: list[Product] = field(default_factory=list)
    status: ScanStatus = ScanStatus.SUCCESS
    error: Optional[CatalogError] = None
    strategy_counts: dict[str, int] = field(default_factory=dict)

    @property
    def error_message(self) -> Optional[str]:
        return self.error.message if self.error else None

    def stats(self) -> dict:
        return catalog_summary(self.products)

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "error_message": self.error_message,
            "error": self.error.to_dict() if self.error else None,
            "strategy_counts": dict(self.strategy_counts),
            "total_products": len(self.products),
            "products": [p.to_dict() for p in self.products],
        }
