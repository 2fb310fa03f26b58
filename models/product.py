"""
Product related data models
"""
from dataclasses import dataclass
from typing import Optional, Dict, Any
from enum import Enum


class ProductStatus(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


@dataclass
class Product:
    """Catalog product as seen by the cart"""
    product_id: str
    name: str
    category: str
    brand: str
    price: float
    stock: int = 0
    status: str = ProductStatus.ACTIVE.value
    image: Optional[str] = None
    description: Optional[str] = None
    sold: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the storefront's product payload"""
        return {
            "id": self.product_id,
            "name": self.name,
            "category": self.category,
            "brand": self.brand,
            "price": self.price,
            "stock": self.stock,
            "status": self.status,
            "image": self.image,
            "description": self.description,
            "sold": self.sold
        }
