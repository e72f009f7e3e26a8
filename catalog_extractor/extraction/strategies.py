"""
Extraction strategies for page snapshots.

A strategy turns a parsed snapshot into product candidates. The snapshot
parser runs strategies in priority order and merges their output with
merge_candidates; which strategy wins for a duplicated product is decided
there, by order alone.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Protocol, runtime_checkable

from bs4 import BeautifulSoup

from ..models import Product
from .parsers import ProductCardParser, StructuredDataParser


@dataclass
class SnapshotDocument:
    """A parsed snapshot plus what strategies need to build products."""
    soup: BeautifulSoup
    store_name: str = ""
    base_url: str = ""


@runtime_checkable
class ExtractionStrategy(Protocol):
    """
    Protocol for snapshot extraction strategies.

    fallback strategies only run when the strategies before them produced
    too few candidates.
    """

    name: str
    fallback: bool

    def extract(self, document: SnapshotDocument) -> List[Product]: ...


class StructuredMetadataStrategy:
    """Candidates from JSON-LD Product blocks."""

    name = "structured"
    fallback = False

    def extract(self, document: SnapshotDocument) -> List[Product]:
        parser = StructuredDataParser(document.store_name, document.base_url)
        return parser.parse(document.soup)


class VisualHeuristicStrategy:
    """Candidates from product card markup."""

    name = "heuristic"
    fallback = True

    def extract(self, document: SnapshotDocument) -> List[Product]:
        parser = ProductCardParser(document.store_name, document.base_url)
        return parser.parse(document.soup)


def default_strategies() -> List[ExtractionStrategy]:
    return [StructuredMetadataStrategy(), VisualHeuristicStrategy()]


def merge_candidates(*candidate_lists: Iterable[Product]) -> List[Product]:
    """
    Concatenate candidate lists and drop repeated identities.

    The first occurrence of an identity is kept with its values; later ones
    are discarded, not merged. Order is preserved, so merging an already
    merged list returns it unchanged.
    """
    seen = set()
    merged = []
    for candidates in candidate_lists:
        for product in candidates:
            key = product.identity
            if key in seen:
                continue
            seen.add(key)
            merged.append(product)
    return merged
