"""
Product extraction from listing page snapshots.

Modules:
    snapshot_parser - SnapshotParser and extract_from_snapshot
    strategies - Strategy protocol, built-in strategies, merge_candidates
    parsers - Specialized parsers for different data sources
"""

from .parsers import ProductCardParser, StructuredDataParser
from .snapshot_parser import SnapshotParser, detect_base_url, detect_store, extract_from_snapshot
from .strategies import (
    ExtractionStrategy,
    SnapshotDocument,
    StructuredMetadataStrategy,
    VisualHeuristicStrategy,
    default_strategies,
    merge_candidates,
)

__all__ = [
    # Snapshot parsing
    'SnapshotParser',
    'extract_from_snapshot',
    'detect_base_url',
    'detect_store',
    # Strategies
    'ExtractionStrategy',
    'SnapshotDocument',
    'StructuredMetadataStrategy',
    'VisualHeuristicStrategy',
    'default_strategies',
    'merge_candidates',
    # Parsers
    'StructuredDataParser',
    'ProductCardParser',
]
