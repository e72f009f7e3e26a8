"""
Data models for catalog extraction.

This module contains data classes with no network or parsing logic.
"""

from .product import Product
from .relay import RelayDescriptor, ResponseShape, StoreConfig
from .session import (
    ExtractionResult,
    ScanSession,
    ScanStatus,
    TerminationReason,
    catalog_summary,
)

__all__ = [
    'Product',
    'RelayDescriptor',
    'ResponseShape',
    'StoreConfig',
    'ExtractionResult',
    'ScanSession',
    'ScanStatus',
    'TerminationReason',
    'catalog_summary',
]
