from .product_validator import ProductValidator, filter_listable

__all__ = ['ProductValidator', 'filter_listable']
