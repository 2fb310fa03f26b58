"""
Review eligibility tracker - which (product, order) pairs may still be reviewed
"""
from typing import Dict, Any, Iterable, Mapping, Optional, Set, Tuple

import structlog

from models.order import OrderStatus

logger = structlog.get_logger()

ReviewKey = Tuple[str, str]


def review_key(product_id: Any, order_id: Any) -> ReviewKey:
    return str(product_id), str(order_id)


def _product_id_of(item: Any) -> Any:
    # dict(productId) 또는 NormalizedOrderItem(product_id) 모두 허용
    if isinstance(item, Mapping):
        return item.get("productId", item.get("product_id"))
    return getattr(item, "product_id", None)


class ReviewEligibilityTracker:
    # 작성된 리뷰 기준으로 리뷰 가능 여부 판단 (로드 실패 시 모두 불가)

    def __init__(self, review_service=None):
        # ReviewService 주입 (load()만 쓸 때는 없어도 됨)
        self.review_service = review_service
        self._reviewed: Set[ReviewKey] = set()
        self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    def load(self, reviews: Iterable[Mapping[str, Any]]):
        # 리뷰 목록으로 작성 완료 집합 재구성
        self._reviewed = {
            review_key(review.get("productId"), review.get("orderId"))
            for review in reviews
            if isinstance(review, Mapping)
        }
        self._loaded = True

    def refresh(self, user_id: str) -> bool:
        # 서버에서 리뷰 목록을 다시 받아 동기화
        try:
            response = self.review_service.fetch_user_reviews(user_id)
        except Exception as e:
            return self._deny_all(user_id, str(e))

        if not isinstance(response, Mapping) or not response.get("success"):
            message = response.get("message") if isinstance(response, Mapping) else None
            return self._deny_all(user_id, message or "review fetch failed")

        self.load(response.get("reviews") or [])
        logger.info("review_eligibility_loaded", user_id=str(user_id), reviewed=len(self._reviewed))
        return True

    def _deny_all(self, user_id: str, error: str) -> bool:
        self._reviewed = set()
        self._loaded = False
        logger.warning("review_eligibility_unavailable", user_id=str(user_id), error=error)
        return False

    def is_reviewed(self, item: Any, order_id: Any) -> bool:
        return review_key(_product_id_of(item), order_id) in self._reviewed

    def is_reviewable(self, item: Any, order_status: Any, order_id: Any) -> bool:
        if not self._loaded:
            return False
        status = order_status.value if isinstance(order_status, OrderStatus) else order_status
        return status == OrderStatus.DELIVERED.value and not self.is_reviewed(item, order_id)

    def mark_reviewed(self, product_id: Any, order_id: Any):
        # 제출 성공 직후 바로 반영 (다음 refresh 때 서버와 맞춰짐)
        self._reviewed.add(review_key(product_id, order_id))

    def unmark_reviewed(self, product_id: Any, order_id: Any):
        # 리뷰 삭제 직후 다시 리뷰 가능으로 반영
        self._reviewed.discard(review_key(product_id, order_id))

    def submit(self, user_id: str, item: Any, order_id: Any, order_status: Any, rating: Any,
               title: Optional[str] = None, comment: Optional[str] = None,
               recommend: Optional[bool] = None, order_item_id: Any = None) -> Dict[str, Any]:
        # 리뷰 제출 (이미 작성했거나 배송 전이면 서버 호출 없이 거절)
        product_id = _product_id_of(item)
        if not self.is_reviewable(item, order_status, order_id):
            return {
                "success": False,
                "message": "This item cannot be reviewed"
            }

        if not isinstance(rating, int) or isinstance(rating, bool) or not 1 <= rating <= 5:
            return {
                "success": False,
                "message": "Please select a rating"
            }

        if order_item_id is None:
            if isinstance(item, Mapping):
                order_item_id = item.get("orderItemId", item.get("order_item_id"))
            else:
                order_item_id = getattr(item, "order_item_id", None)

        try:
            response = self.review_service.submit_review(user_id, {
                "productId": product_id,
                "orderId": order_id,
                "orderItemId": order_item_id,
                "rating": rating,
                "title": title or None,
                "comment": comment or None,
                "recommend": recommend
            })
        except Exception as e:
            logger.error("review_submit_error", product_id=str(product_id), order_id=str(order_id), error=str(e))
            return {
                "success": False,
                "message": f"Failed to submit review: {e}"
            }

        if not isinstance(response, Mapping) or not response.get("success"):
            message = response.get("message") if isinstance(response, Mapping) else None
            return {
                "success": False,
                "message": message or "Failed to submit review"
            }

        self.mark_reviewed(product_id, order_id)
        return {
            "success": True,
            "message": "Thank you for your review! It has been submitted successfully."
        }

    def delete(self, user_id: str, review_id: Any) -> Dict[str, Any]:
        # 리뷰 삭제 (성공하면 해당 상품/주문 조합을 다시 열어줌)
        try:
            response = self.review_service.delete_review(user_id, review_id)
        except Exception as e:
            logger.error("review_delete_error", review_id=str(review_id), error=str(e))
            return {
                "success": False,
                "message": f"Failed to delete review: {e}"
            }

        if not isinstance(response, Mapping) or not response.get("success"):
            message = response.get("message") if isinstance(response, Mapping) else None
            return {
                "success": False,
                "message": message or "Failed to delete review"
            }

        review = response.get("review") or {}
        self.unmark_reviewed(review.get("productId"), review.get("orderId"))
        return {
            "success": True,
            "message": response.get("message") or "Review deleted successfully"
        }
