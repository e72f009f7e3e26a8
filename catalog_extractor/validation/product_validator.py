"""
Product Validator

Decides which products may be listed. Both acquisition paths run their
output through filter_listable before handing it to callers.
"""

from __future__ import annotations

import logging
from typing import Iterable

from ..common.constants import MIN_NAME_LENGTH
from ..models import Product

logger = logging.getLogger(__name__)


class ProductValidator:
    """Validates a single product against the listing rules."""

    def __init__(self, product: Product, min_name_length: int = MIN_NAME_LENGTH):
        self.product = product
        self.min_name_length = min_name_length

    def validate(self) -> dict:
        """
        Run all validations.

        Returns a dict with keys:
          valid    - False if any error fires
          errors   - blocking problems; the product must not be listed
          warnings - non-blocking observations
        """
        errors: list[str] = []
        warnings: list[str] = []
        p = self.product

        if len(p.name) < self.min_name_length:
            errors.append(f"name: too short ({len(p.name)} chars)")

        if p.cash_price is None or p.cash_price <= 0:
            errors.append(f"cash_price: must be positive (got {p.cash_price})")

        if p.installment_price is None or p.installment_price <= 0:
            errors.append(f"installment_price: must be positive (got {p.installment_price})")

        if not p.link:
            warnings.append("link: missing, identity falls back to name + price")

        if p.list_price is not None and p.cash_price and p.list_price < p.cash_price:
            warnings.append(f"list_price: {p.list_price} below cash price {p.cash_price}")

        return {
            "valid": not errors,
            "errors": errors,
            "warnings": warnings,
        }

    def is_valid(self) -> bool:
        return self.validate()["valid"]


def filter_listable(products: Iterable[Product], min_name_length: int = MIN_NAME_LENGTH) -> list[Product]:
    """
    Keep only products that pass validation, preserving order.

    Args:
        products: Candidate products
        min_name_length: Names shorter than this after trimming are rejected

    Returns:
        Listable products
    """
    listable = []
    for product in products:
        result = ProductValidator(product, min_name_length).validate()
        if result["valid"]:
            listable.append(product)
        else:
            logger.debug("Dropped %r: %s", product.name[:50], "; ".join(result["errors"]))
    return listable
