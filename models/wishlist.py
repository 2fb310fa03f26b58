"""
Wishlist related data models
"""
from dataclasses import dataclass
from typing import Optional, Dict, Any, Mapping

from .coerce import parse_float, parse_int


@dataclass
class WishlistEntry:
    """Product snapshot taken when it was saved"""
    product_id: str
    name: str
    price: float
    image: Optional[str]
    stock: int
    date_added: str
    brand: str = "Unknown"
    rating: float = 0.0
    category: Optional[str] = None

    @property
    def in_stock(self) -> bool:
        return self.stock > 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted/wire form"""
        return {
            "id": self.product_id,
            "name": self.name,
            "price": self.price,
            "image": self.image,
            "stock": self.stock,
            "inStock": self.in_stock,
            "brand": self.brand,
            "rating": self.rating,
            "category": self.category,
            "dateAdded": self.date_added
        }

    def to_product(self) -> Dict[str, Any]:
        """Product-shaped payload for adding the snapshot to a cart"""
        return {
            "id": self.product_id,
            "name": self.name,
            "price": self.price,
            "image": self.image,
            "stock": self.stock,
            "brand": self.brand,
            "category": self.category
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "WishlistEntry":
        return cls(
            product_id=str(data["id"]),
            name=str(data.get("name") or "Unknown Product"),
            price=parse_float(data.get("price")),
            image=data.get("image"),
            stock=parse_int(data.get("stock")),
            date_added=str(data.get("dateAdded") or ""),
            brand=data.get("brand") or "Unknown",
            rating=parse_float(data.get("rating")),
            category=data.get("category")
        )
