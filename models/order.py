"""
Order related data models
"""
from dataclasses import dataclass, field
from typing import Tuple, Optional, Dict, Any
from enum import Enum


def format_order_number(year: int, order_id: int) -> str:
    """Customer-facing order number, e.g. ORD-2024-007"""
    return f"ORD-{year}-{order_id:03d}"


class OrderStatus(Enum):
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    @classmethod
    def parse(cls, value: Any) -> "OrderStatus":
        """Map a backend status string to a known status (processing if unknown)"""
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.PROCESSING


@dataclass(frozen=True)
class NormalizedOrderItem:
    """Order line in one consistent shape"""
    order_item_id: Any
    product_id: str
    name: str
    quantity: int
    unit_price: float
    image: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "order_item_id": self.order_item_id,
            "product_id": self.product_id,
            "name": self.name,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "image": self.image
        }


@dataclass(frozen=True)
class NormalizedOrder:
    """Server order record reshaped regardless of the backend's field names"""
    id: Any
    display_number: str
    created_at: Optional[str]
    status: OrderStatus
    items: Tuple[NormalizedOrderItem, ...]
    subtotal: float
    shipping: float
    tax: float
    total: float
    customer_name: str = "Unknown Customer"
    payment_method: str = "Bank Transfer"
    time_ago: str = "Unknown time"
    estimated_delivery: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "id": self.id,
            "display_number": self.display_number,
            "created_at": self.created_at,
            "status": self.status.value,
            "items": [item.to_dict() for item in self.items],
            "subtotal": self.subtotal,
            "shipping": self.shipping,
            "tax": self.tax,
            "total": self.total,
            "customer_name": self.customer_name,
            "payment_method": self.payment_method,
            "time_ago": self.time_ago,
            "estimated_delivery": self.estimated_delivery
        }


@dataclass(frozen=True)
class OrderStats:
    """Spending summary over a user's orders"""
    total_orders: int
    total_spent: float
    this_month_count: int
    this_month_spent: float
    recent_orders: Tuple[NormalizedOrder, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_orders": self.total_orders,
            "total_spent": self.total_spent,
            "this_month_count": self.this_month_count,
            "this_month_spent": self.this_month_spent,
            "recent_orders": [order.to_dict() for order in self.recent_orders]
        }
