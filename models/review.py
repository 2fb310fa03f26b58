"""
Review related data models
"""
from dataclasses import dataclass
from typing import Optional, Dict, Any


@dataclass
class Review:
    """Product review left for one order"""
    review_id: int
    user_id: str
    product_id: str
    order_id: int
    order_item_id: Optional[int]
    rating: int
    title: Optional[str] = None
    comment: Optional[str] = None
    recommend: Optional[bool] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the review service's payload"""
        return {
            "id": self.review_id,
            "userId": self.user_id,
            "productId": self.product_id,
            "orderId": self.order_id,
            "orderItemId": self.order_item_id,
            "rating": self.rating,
            "title": self.title,
            "comment": self.comment,
            "recommend": self.recommend,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at
        }
