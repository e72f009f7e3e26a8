"""
Catalog search endpoint scanning.

Modules:
    catalog_scanner - CatalogScanner pagination loop, URL and window helpers
    normalizer      - normalize_catalog_item, raw search item -> Product
"""

from .catalog_scanner import CatalogScanner, build_search_url, page_window
from .normalizer import normalize_catalog_item

__all__ = [
    'CatalogScanner',
    'build_search_url',
    'page_window',
    'normalize_catalog_item',
]
