"""
Models package for the Gearnix storefront
Contains data models and type definitions
"""

from .product import Product, ProductStatus
from .cart import CartLine, CartSummary
from .wishlist import WishlistEntry
from .checkout import (
    CheckoutStep, CheckoutEvent, CheckoutSession,
    CustomerDetails, PaymentDetails, OrderResult
)
from .order import NormalizedOrder, NormalizedOrderItem, OrderStatus, OrderStats
from .review import Review

__all__ = [
    'Product', 'ProductStatus',
    'CartLine', 'CartSummary',
    'WishlistEntry',
    'CheckoutStep', 'CheckoutEvent', 'CheckoutSession',
    'CustomerDetails', 'PaymentDetails', 'OrderResult',
    'NormalizedOrder', 'NormalizedOrderItem', 'OrderStatus', 'OrderStats',
    'Review'
]
