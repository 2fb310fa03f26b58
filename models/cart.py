"""
Cart related data models
"""
from dataclasses import dataclass
from typing import Optional, Dict, Any, Mapping

from .coerce import parse_float, parse_int

DEFAULT_BRAND = "Gearnix"


@dataclass
class CartLine:
    """One product entry in the cart"""
    product_id: str
    name: str
    unit_price: float
    quantity: int
    stock: int = 0
    active: bool = True
    category: Optional[str] = None
    brand: str = DEFAULT_BRAND
    image: Optional[str] = None

    @property
    def in_stock(self) -> bool:
        return self.stock > 0

    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted/wire form"""
        return {
            "id": self.product_id,
            "name": self.name,
            "price": self.unit_price,
            "quantity": self.quantity,
            "stock": self.stock,
            "inStock": self.in_stock,
            "status": "active" if self.active else "inactive",
            "category": self.category,
            "brand": self.brand,
            "image": self.image
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CartLine":
        """Rebuild a line from its persisted form, coercing numeric fields"""
        return cls(
            product_id=str(data["id"]),
            name=str(data.get("name") or ""),
            unit_price=parse_float(data.get("price")),
            quantity=max(parse_int(data.get("quantity")), 0),
            stock=parse_int(data.get("stock")),
            active=(data.get("status") or "active") == "active",
            category=data.get("category"),
            brand=data.get("brand") or DEFAULT_BRAND,
            image=data.get("image")
        )


@dataclass
class CartSummary:
    """Cart totals including shipping and tax"""
    item_count: int
    subtotal: float
    shipping: float
    tax: float
    total: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "item_count": self.item_count,
            "subtotal": self.subtotal,
            "shipping": self.shipping,
            "tax": self.tax,
            "total": self.total
        }
