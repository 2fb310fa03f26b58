"""
Review service - handles product reviews for delivered orders
"""
from datetime import datetime, timezone
from typing import Dict, Any, Mapping

import structlog

from models.coerce import parse_int
from models.order import OrderStatus
from models.review import Review
from database.repository import OrderRepository, ReviewRepository

logger = structlog.get_logger()


class ReviewService:
    # 리뷰 관련 비즈니스 로직을 처리하는 서비스 클래스

    def __init__(self, review_repository: ReviewRepository, order_repository: OrderRepository):
        # ReviewRepository와 OrderRepository 인스턴스 주입
        self.review_repo = review_repository
        self.order_repo = order_repository

    def fetch_user_reviews(self, user_id: str) -> Dict[str, Any]:
        # 사용자가 작성한 리뷰 목록 조회
        try:
            reviews = self.review_repo.get_user_reviews(user_id)
            return {
                "success": True,
                "reviews": [review.to_dict() for review in reviews]
            }

        except Exception as e:
            logger.error("review_fetch_failed", user_id=str(user_id), error=str(e))
            return {
                "success": False,
                "reviews": [],
                "message": str(e)
            }

    def submit_review(self, user_id: str, data: Mapping[str, Any]) -> Dict[str, Any]:
        # 배송 완료된 주문의 상품에 대해서만 리뷰 저장
        try:
            rating = parse_int(data.get("rating"))
            if rating < 1 or rating > 5:
                return {
                    "success": False,
                    "message": "Rating must be between 1 and 5"
                }

            product_id = str(data.get("productId") or "")
            order_id = parse_int(data.get("orderId"))
            order = self.order_repo.get_order(order_id)
            if not order or order["userId"] != str(user_id):
                return {
                    "success": False,
                    "message": "Order not found"
                }

            if order["status"] != OrderStatus.DELIVERED.value:
                return {
                    "success": False,
                    "message": "You can only review products from delivered orders"
                }

            # 주문에 포함된 상품인지 확인
            order_item = next((item for item in order["items"] if item["productId"] == product_id), None)
            if not order_item:
                return {
                    "success": False,
                    "message": "Product is not part of this order"
                }

            recommend = data.get("recommend")
            review_id = self.review_repo.add_review(Review(
                review_id=0,
                user_id=str(user_id),
                product_id=product_id,
                order_id=order_id,
                order_item_id=parse_int(data.get("orderItemId"), order_item["id"]),
                rating=rating,
                title=data.get("title") or None,
                comment=data.get("comment") or None,
                recommend=None if recommend is None else bool(recommend),
                created_at=datetime.now(timezone.utc).isoformat()
            ))

            if review_id is None:
                return {
                    "success": False,
                    "message": "You have already reviewed this product for this order"
                }

            logger.info("review_submitted", review_id=review_id, product_id=product_id, order_id=order_id)
            return {
                "success": True,
                "review": {"id": review_id, "productId": product_id, "orderId": order_id, "rating": rating},
                "message": "Review submitted successfully"
            }

        except Exception as e:
            logger.error("review_submit_failed", user_id=str(user_id), error=str(e))
            return {
                "success": False,
                "message": str(e)
            }

    def update_review(self, user_id: str, review_id: Any, data: Mapping[str, Any]) -> Dict[str, Any]:
        # 본인 리뷰 수정 (전달된 항목만 변경)
        try:
            rating = data.get("rating")
            if rating is not None:
                rating = parse_int(rating)
                if rating < 1 or rating > 5:
                    return {
                        "success": False,
                        "message": "Rating must be between 1 and 5"
                    }

            review = self.review_repo.get_review(parse_int(review_id), user_id)
            if review is None:
                return {
                    "success": False,
                    "message": "Review not found or you do not have permission to update it"
                }

            if rating is not None:
                review.rating = rating
            if "title" in data:
                review.title = data.get("title") or None
            if "comment" in data:
                review.comment = data.get("comment") or None
            if "recommend" in data:
                recommend = data.get("recommend")
                review.recommend = None if recommend is None else bool(recommend)
            review.updated_at = datetime.now(timezone.utc).isoformat()

            if not self.review_repo.update_review(review):
                return {
                    "success": False,
                    "message": "Failed to update review"
                }

            logger.info("review_updated", review_id=review.review_id, rating=review.rating)
            return {
                "success": True,
                "review": review.to_dict(),
                "message": "Review updated successfully"
            }

        except Exception as e:
            logger.error("review_update_failed", user_id=str(user_id), review_id=review_id, error=str(e))
            return {
                "success": False,
                "message": str(e)
            }

    def delete_review(self, user_id: str, review_id: Any) -> Dict[str, Any]:
        # 본인 리뷰 삭제 (삭제된 상품/주문 조합은 다시 리뷰 가능)
        try:
            review = self.review_repo.get_review(parse_int(review_id), user_id)
            if review is None or not self.review_repo.delete_review(review.review_id, user_id):
                return {
                    "success": False,
                    "message": "Review not found or you do not have permission to delete it"
                }

            logger.info("review_deleted", review_id=review.review_id, product_id=review.product_id,
                        order_id=review.order_id)
            return {
                "success": True,
                "review": {"id": review.review_id, "productId": review.product_id, "orderId": review.order_id},
                "message": "Review deleted successfully"
            }

        except Exception as e:
            logger.error("review_delete_failed", user_id=str(user_id), review_id=review_id, error=str(e))
            return {
                "success": False,
                "message": str(e)
            }

    def check_eligibility(self, user_id: str, data: Mapping[str, Any]) -> Dict[str, Any]:
        # 배송 완료 + 주문 포함 + 미작성 여부로 리뷰 가능 판단
        try:
            product_id = str(data.get("productId") or "")
            order_id = parse_int(data.get("orderId"))
            if not product_id or not order_id:
                return {
                    "success": False,
                    "message": "Product ID and Order ID are required"
                }

            order = self.order_repo.get_order(order_id)
            if (not order or order["userId"] != str(user_id)
                    or order["status"] != OrderStatus.DELIVERED.value
                    or not any(item["productId"] == product_id for item in order["items"])):
                return {
                    "success": True,
                    "eligible": False,
                    "reason": "Order not found, not delivered, or does not contain this product"
                }

            existing = self.review_repo.find_review(user_id, product_id, order_id)
            if existing is not None:
                return {
                    "success": True,
                    "eligible": False,
                    "reason": "You have already reviewed this product for this order",
                    "existingReview": {"id": existing.review_id, "rating": existing.rating, "title": existing.title}
                }

            return {
                "success": True,
                "eligible": True,
                "message": "You can review this product"
            }

        except Exception as e:
            logger.error("review_eligibility_check_failed", user_id=str(user_id), error=str(e))
            return {
                "success": False,
                "message": str(e)
            }
