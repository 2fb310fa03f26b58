"""
Core package for the Gearnix storefront
"""

from .storefront import GearnixStorefront, ShopperSession

__all__ = ['GearnixStorefront', 'ShopperSession']
