"""
Product data model.

The canonical record produced by both acquisition paths (catalog scan and
snapshot extraction). Price defaulting lives here so it is applied once,
whatever path built the record.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..common.constants import MISSING_REFERENCE
from ..common.price_utils import fill_missing_prices
from ..common.text_utils import canonical_link, clean_text

ZERO = Decimal("0.00")


@dataclass
class Product:
    """
    Canonical product record.

    Prices are Decimal magnitudes in the store's currency. When only one of
    cash_price / installment_price is known, the other takes its value
    (see fill_missing_prices). A record is listable only when cash_price > 0
    and its name survives trimming; that check belongs to the validator,
    not to construction.
    """

    name: str
    brand: str
    cash_price: Optional[Decimal]
    installment_price: Optional[Decimal] = None
    reference_code: str = MISSING_REFERENCE
    list_price: Optional[Decimal] = None    # Pre-discount "De" price
    available: bool = True
    link: str = ""
    image_url: str = ""
    product_id: str = ""
    sku_id: str = MISSING_REFERENCE

    def __post_init__(self):
        self.name = clean_text(self.name)
        self.brand = clean_text(self.brand)
        self.reference_code = clean_text(str(self.reference_code or "")) or MISSING_REFERENCE

        cash, installment = fill_missing_prices(self.cash_price, self.installment_price)
        self.cash_price = cash if cash is not None else ZERO
        self.installment_price = installment if installment is not None else ZERO

        if self.list_price is not None and self.list_price <= 0:
            self.list_price = None

    @property
    def identity(self) -> str:
        """Deduplication key: canonical link, else name + cash price."""
        link = canonical_link(self.link)
        if link:
            return link
        return f"{self.name}|{self.cash_price}"

    def to_dict(self) -> dict:
        """Serialize for JSON output; decimals become strings."""
        return {
            "name": self.name,
            "brand": self.brand,
            "reference_code": self.reference_code,
            "cash_price": str(self.cash_price),
            "installment_price": str(self.installment_price),
            "list_price": str(self.list_price) if self.list_price is not None else None,
            "available": self.available,
            "link": self.link,
            "image_url": self.image_url,
            "product_id": self.product_id,
            "sku_id": self.sku_id,
        }
