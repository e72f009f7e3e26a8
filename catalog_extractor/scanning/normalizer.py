"""
Catalog Normalizer

Maps one item of the VTEX catalog search response to a Product.

Expected item shape:
    {productId, productName, productReference, brand, link,
     items: [{itemId, images: [{imageUrl}],
              sellers: [{commertialOffer: {Price, SpotPrice, ListPrice,
                                           AvailableQuantity}}]}]}
"""

from __future__ import annotations

from typing import Any

from ..common.constants import MISSING_REFERENCE
from ..common.price_utils import to_decimal
from ..models import Product


def _first(value) -> dict:
    """First element of a list if it is a dict, else {}."""
    if isinstance(value, list) and value and isinstance(value[0], dict):
        return value[0]
    return {}


def normalize_catalog_item(item: dict[str, Any], store_name: str = "") -> Product:
    """
    Build a Product from a raw catalog search item.

    Cash price is the first seller's SpotPrice (pix/boleto price), falling
    back to Price, falling back to 0. Installment price is Price.

    Args:
        item: One element of the search endpoint's JSON array
        store_name: Brand used when the item has none

    Returns:
        Product (not yet validated; cash_price may be 0)
    """
    sku = _first(item.get("items"))
    seller = _first(sku.get("sellers"))
    offer = seller.get("commertialOffer")
    if not isinstance(offer, dict):
        offer = {}

    base_price = to_decimal(offer.get("Price"))
    spot_price = to_decimal(offer.get("SpotPrice"))
    cash_price = spot_price if spot_price else base_price

    quantity = offer.get("AvailableQuantity")
    available = isinstance(quantity, (int, float)) and not isinstance(quantity, bool) and quantity > 0

    image = _first(sku.get("images"))

    return Product(
        name=item.get("productName") or "",
        brand=item.get("brand") or store_name,
        cash_price=cash_price,
        installment_price=base_price,
        reference_code=item.get("productReference") or MISSING_REFERENCE,
        list_price=to_decimal(offer.get("ListPrice")),
        available=available,
        link=item.get("link") or "",
        image_url=image.get("imageUrl") or "",
        product_id=str(item.get("productId") or ""),
        sku_id=str(sku.get("itemId") or MISSING_REFERENCE),
    )
