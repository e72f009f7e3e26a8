"""
Product Card Parser

Extracts product candidates from the visual product cards of a listing page
(VTEX IO product summaries, legacy VTEX shelves, generic product tiles).

Used when structured data is missing or too thin. Card markup varies by
store and theme, so every field is looked up through a prioritized list of
selectors, and the price falls back to the lowest currency amount quoted
anywhere in the card.
"""

import logging
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from bs4 import BeautifulSoup, Tag

from ...common.price_utils import find_currency_amounts, parse_installment_total, parse_price
from ...common.text_utils import absolute_url, clean_text
from ...models import Product

logger = logging.getLogger(__name__)

# Card containers, most specific first. Only the first selector that
# matches anything is used, so nested wrappers are not counted twice.
CONTAINER_SELECTORS = [
    'section.vtex-product-summary-2-x-container',
    'article.vtex-product-summary-2-x-element',
    'div.vtex-search-result-3-x-galleryItem',
    '[class*="product-summary"]',
    '.shelf-item',
    '.product-item',
    '.product-card',
    'li.product',
    '[data-product-id]',
]

# (selector, attribute); attribute None means element text
NAME_SELECTORS: List[Tuple[str, Optional[str]]] = [
    ('[class*="productBrand"]', None),
    ('[class*="productName"]', None),
    ('.product-name', None),
    ('.shelf-item__title', None),
    ('[itemprop="name"]', None),
    ('h2', None),
    ('h3', None),
    ('a[title]', 'title'),
    ('img[alt]', 'alt'),
]

PRICE_SELECTORS: List[Tuple[str, Optional[str]]] = [
    ('[class*="spotPrice"]', None),
    ('[class*="sellingPriceValue"]', None),
    ('[class*="sellingPrice"]', None),
    ('.best-price', None),
    ('.price-best', None),
    ('[itemprop="price"]', 'content'),
    ('.price', None),
]

INSTALLMENT_SELECTORS = [
    '[class*="installments"]',
    '.installment',
    '.parcelamento',
]

IMAGE_ATTRIBUTES = ('src', 'data-src', 'data-lazy', 'data-original')


class ProductCardParser:
    """
    Parses product cards from listing page HTML.

    Usage:
        parser = ProductCardParser(store_name="Leveros",
                                   base_url="https://www.leveros.com.br")
        products = parser.parse(soup)
    """

    def __init__(self, store_name: str = "", base_url: str = ""):
        """
        Initialize the card parser.

        Args:
            store_name: Brand assigned to every card (cards rarely show one)
            base_url: Used to resolve relative product and image links
        """
        self.store_name = store_name
        self.base_url = base_url

    def parse(self, soup: BeautifulSoup) -> List[Product]:
        """
        Extract every card with a name and a positive cash price.

        Args:
            soup: BeautifulSoup object of the page

        Returns:
            Products in document order (may contain duplicates)
        """
        containers = self.find_containers(soup)
        products = []
        for card in containers:
            product = self.parse_card(card)
            if product is not None:
                products.append(product)

        logger.debug("Card parser: %d containers, %d products", len(containers), len(products))
        return products

    def find_containers(self, soup: BeautifulSoup) -> List[Tag]:
        for selector in CONTAINER_SELECTORS:
            found = soup.select(selector)
            if found:
                logger.debug("Card containers matched %r (%d)", selector, len(found))
                return found
        return []

    def parse_card(self, card: Tag) -> Optional[Product]:
        """
        Build a Product from one card container.

        Returns:
            Product, or None when the card has no name or no positive price
        """
        name = self.extract_name(card)
        if not name:
            return None

        cash_price = self.extract_cash_price(card)
        if cash_price is None or cash_price <= 0:
            return None

        return Product(
            name=name,
            brand=self.store_name,
            cash_price=cash_price,
            installment_price=self.extract_installment_price(card),
            available=True,
            link=self.extract_link(card),
            image_url=self.extract_image(card),
        )

    def extract_name(self, card: Tag) -> str:
        return self._select_text(card, NAME_SELECTORS)

    def extract_link(self, card: Tag) -> str:
        anchor = card if card.name == 'a' and card.get('href') else card.select_one('a[href]')
        if anchor is None:
            return ""
        return absolute_url(anchor.get('href'), self.base_url)

    def extract_image(self, card: Tag) -> str:
        img = card.find('img')
        if img is None:
            return ""
        for attr in IMAGE_ATTRIBUTES:
            src = img.get(attr)
            if src and not src.startswith('data:'):
                return absolute_url(src, self.base_url)
        return ""

    def extract_cash_price(self, card: Tag) -> Optional[Decimal]:
        """
        Cash price from the dedicated price element, else the lowest
        currency amount in the card's visible text.

        The lowest-amount fallback assumes installment and list prices are
        higher than the cash price; a smaller unrelated figure (freight,
        per-installment value) in the card wins over the real price.
        """
        # VTEX IO renders one span per amount part, so join without spaces
        text = self._select_text(card, PRICE_SELECTORS, separator='')
        if text:
            price = parse_price(text)
            if price is not None and price > 0:
                return price

        amounts = [a for a in find_currency_amounts(card.get_text(' ')) if a > 0]
        return min(amounts) if amounts else None

    def extract_installment_price(self, card: Tag) -> Optional[Decimal]:
        """Financed total from an "N x de R$ V" phrase, or None."""
        for selector in INSTALLMENT_SELECTORS:
            element = card.select_one(selector)
            if element is not None:
                total = parse_installment_total(clean_text(element.get_text(' ')))
                if total is not None:
                    return total
        return parse_installment_total(clean_text(card.get_text(' ')))

    @staticmethod
    def _select_text(
        card: Tag,
        selectors: Sequence[Tuple[str, Optional[str]]],
        separator: str = ' ',
    ) -> str:
        for selector, attr in selectors:
            element = card.select_one(selector)
            if element is None:
                continue
            value = element.get(attr) if attr else element.get_text(separator)
            value = clean_text(value if isinstance(value, str) else "")
            if value:
                return value
        return ""
