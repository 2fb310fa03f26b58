"""
Services package for the Gearnix storefront
Contains business logic services
"""

from .product_service import ProductService
from .cart_store import CartStore
from .wishlist_store import WishlistStore
from .checkout_workflow import CheckoutWorkflow
from .order_service import OrderService
from .review_service import ReviewService
from .review_eligibility import ReviewEligibilityTracker

__all__ = [
    'ProductService', 'CartStore', 'WishlistStore', 'CheckoutWorkflow',
    'OrderService', 'ReviewService', 'ReviewEligibilityTracker'
]
