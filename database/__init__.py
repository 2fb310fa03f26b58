"""
Database package for the Gearnix storefront
Contains database connection and repository classes
"""

from .connection import DatabaseConnection
from .repository import ProductRepository, StorageRepository, OrderRepository, ReviewRepository

__all__ = [
    'DatabaseConnection',
    'ProductRepository', 'StorageRepository', 'OrderRepository', 'ReviewRepository'
]
