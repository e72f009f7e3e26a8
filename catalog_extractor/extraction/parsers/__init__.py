"""
Specialized parsers for listing page snapshots.

Each parser handles a specific data source:
- StructuredDataParser: JSON-LD structured data (schema.org)
- ProductCardParser: visual product cards in the page markup
"""

from .card_parser import ProductCardParser
from .structured_data import (
    ItemListNode,
    ProductNode,
    StructuredDataParser,
    UnknownNode,
    classify_node,
)

__all__ = [
    'StructuredDataParser',
    'ProductCardParser',
    'ProductNode',
    'ItemListNode',
    'UnknownNode',
    'classify_node',
]
