"""
Structured Data Parser

Extracts product candidates from JSON-LD structured data (schema.org).
This is the highest priority source on a listing page: stores publish it
for search engines, so it survives layout changes that break card scraping.

Blocks are classified into typed nodes before anything reads them:
- ProductNode:  @type Product (or a list of types containing it)
- ItemListNode: ItemList / @graph / bare JSON array / ListItem wrapper
- UnknownNode:  anything else (Organization, BreadcrumbList, ...)

A recursive visitor walks the nodes; every ProductNode with an offer price
greater than zero becomes a Product.
"""

import json
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterator, List, Optional, Union

from bs4 import BeautifulSoup

from ...common.constants import MISSING_REFERENCE
from ...common.price_utils import to_decimal
from ...common.text_utils import absolute_url, clean_text
from ...models import Product

logger = logging.getLogger(__name__)


@dataclass
class ProductNode:
    data: dict


@dataclass
class ItemListNode:
    children: List[Any] = field(default_factory=list)


@dataclass
class UnknownNode:
    data: Any = None


Node = Union[ProductNode, ItemListNode, UnknownNode]


def _types_of(data: dict) -> List[str]:
    raw = data.get('@type')
    if isinstance(raw, list):
        return [str(t) for t in raw]
    if raw:
        return [str(raw)]
    return []


def classify_node(data: Any) -> Node:
    """
    Classify a decoded JSON-LD value.

    Nested Products inside an unknown wrapper (e.g. WebPage.mainEntity)
    are reached through ItemListNode children.
    """
    if isinstance(data, list):
        return ItemListNode(list(data))

    if not isinstance(data, dict):
        return UnknownNode(data)

    types = _types_of(data)

    if 'Product' in types:
        return ProductNode(data)

    if '@graph' in data:
        return ItemListNode(list(data['@graph'] or []))

    if 'ItemList' in types or 'OfferCatalog' in types or 'itemListElement' in data:
        elements = data.get('itemListElement') or []
        if isinstance(elements, dict):
            elements = [elements]
        return ItemListNode(list(elements))

    if 'ListItem' in types and data.get('item') is not None:
        return ItemListNode([data['item']])

    if isinstance(data.get('mainEntity'), (dict, list)):
        return ItemListNode([data['mainEntity']])

    return UnknownNode(data)


class StructuredDataParser:
    """
    Parses product candidates from JSON-LD blocks of a listing page.

    Usage:
        parser = StructuredDataParser(store_name="Clima Rio",
                                      base_url="https://www.climario.com.br")
        products = parser.parse(soup)
    """

    MAX_DEPTH = 10

    def __init__(self, store_name: str = "", base_url: str = ""):
        """
        Initialize the parser.

        Args:
            store_name: Brand used when a product has none
            base_url: Used to resolve relative product and image links
        """
        self.store_name = store_name
        self.base_url = base_url

    def parse(self, soup: BeautifulSoup) -> List[Product]:
        """
        Extract all priced products from the page's JSON-LD blocks.

        Args:
            soup: BeautifulSoup object of the page

        Returns:
            Products in document order (may contain duplicates)
        """
        products = []
        for data in self.load_blocks(soup):
            products.extend(self.visit(classify_node(data)))
        return products

    def load_blocks(self, soup: BeautifulSoup) -> Iterator[Any]:
        """Yield the decoded content of every JSON-LD script tag."""
        for script in soup.find_all('script', type='application/ld+json'):
            text = script.string or script.get_text()
            if not text or not text.strip():
                continue
            try:
                yield json.loads(text)
            except json.JSONDecodeError as e:
                logger.debug("Skipping unparsable JSON-LD block: %s", e)

    def visit(self, node: Node, depth: int = 0) -> Iterator[Product]:
        """Depth-first walk yielding a Product for each priced ProductNode."""
        if depth > self.MAX_DEPTH:
            return

        if isinstance(node, ProductNode):
            product = self.build_product(node.data)
            if product is not None:
                yield product
        elif isinstance(node, ItemListNode):
            for child in node.children:
                yield from self.visit(classify_node(child), depth + 1)

    def build_product(self, data: dict) -> Optional[Product]:
        """
        Build a Product from a schema.org Product object.

        Defaults: sku "N/A", brand = store name, installment price = cash
        price, available = True (present on the page).

        Returns:
            Product, or None if the offer has no price above zero
        """
        price = self.extract_price(data.get('offers'))
        if price is None or price <= 0:
            return None

        return Product(
            name=clean_text(data.get('name')),
            brand=self.extract_brand(data) or self.store_name,
            cash_price=price,
            installment_price=price,
            reference_code=str(data.get('sku') or data.get('mpn') or MISSING_REFERENCE),
            available=True,
            link=absolute_url(self._first_str(data.get('url')), self.base_url),
            image_url=absolute_url(self.extract_image(data), self.base_url),
        )

    def extract_price(self, offers: Any) -> Optional[Decimal]:
        """
        Resolve the offer price.

        Accepts a single Offer, a list of offers (first priced one wins) or
        an AggregateOffer (lowPrice, then price).
        """
        if isinstance(offers, list):
            for offer in offers:
                price = self.extract_price(offer)
                if price is not None and price > 0:
                    return price
            return None

        if not isinstance(offers, dict):
            return None

        if 'AggregateOffer' in _types_of(offers):
            price = to_decimal(offers.get('lowPrice'))
            if price is not None and price > 0:
                return price

        price = to_decimal(offers.get('price'))
        if price is not None:
            return price

        # Offer nested one level down (AggregateOffer.offers)
        if offers.get('offers') is not None:
            return self.extract_price(offers['offers'])

        return None

    def extract_brand(self, data: dict) -> str:
        brand = data.get('brand')
        if isinstance(brand, dict):
            return clean_text(brand.get('name'))
        if isinstance(brand, str):
            return clean_text(brand)
        return ""

    def extract_image(self, data: dict) -> str:
        image = data.get('image')
        if isinstance(image, list):
            image = image[0] if image else None
        if isinstance(image, dict):
            image = image.get('url') or image.get('contentUrl')
        return self._first_str(image)

    @staticmethod
    def _first_str(value: Any) -> str:
        if isinstance(value, list):
            value = value[0] if value else ""
        return value if isinstance(value, str) else ""
