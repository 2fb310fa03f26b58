"""
Order service - handles order creation and order history
"""
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Any

import structlog

from models.coerce import parse_float, parse_int
from models.order import OrderStatus
from database.repository import OrderRepository
from .product_service import ProductService

logger = structlog.get_logger()

# 주문일로부터 예상 배송일까지
DELIVERY_DAYS = 5


class OrderService:
    # 주문 관련 비즈니스 로직을 처리하는 서비스 클래스

    def __init__(self, order_repository: OrderRepository, product_service: ProductService):
        # OrderRepository와 ProductService 인스턴스 주입
        self.order_repo = order_repository
        self.product_service = product_service

    def create_order(self, user_id: str, cart_items: List[Dict[str, Any]],
                     customer_details: Optional[Dict[str, Any]],
                     payment_details: Optional[Dict[str, Any]],
                     totals: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        # 장바구니 내용으로 주문 생성 (재고 확인 후 차감)
        try:
            if not user_id:
                return {
                    "success": False,
                    "message": "User not authenticated"
                }

            if not cart_items:
                return {
                    "success": False,
                    "message": "Cart is empty"
                }

            if not customer_details or not payment_details or not totals:
                return {
                    "success": False,
                    "message": "Missing required order information"
                }

            # 각 상품의 존재 여부와 재고 확인
            items = []
            for cart_item in cart_items:
                quantity = parse_int(cart_item.get("quantity"))
                product = self.product_service.get_product_by_id(cart_item.get("id"))
                if not product:
                    return {
                        "success": False,
                        "message": f"Product {cart_item.get('name')} not found"
                    }

                if product["stock"] < quantity:
                    return {
                        "success": False,
                        "message": f"Insufficient stock for {product['name']}. "
                                   f"Available: {product['stock']}, Requested: {quantity}"
                    }

                items.append({
                    "product_id": product["id"],
                    "name": cart_item.get("name") or product["name"],
                    "image": cart_item.get("image") or product["image"],
                    "category": cart_item.get("category") or product["category"],
                    "brand": cart_item.get("brand") or product["brand"],
                    "price": parse_float(cart_item.get("price")),
                    "quantity": quantity
                })

            # 주문번호(ORD-연도-id)는 저장소가 행 id로 부여
            now = datetime.now(timezone.utc)
            total = parse_float(totals.get("total"))

            created = self.order_repo.create_order({
                "year": now.year,
                "user_id": str(user_id),
                "status": OrderStatus.PROCESSING.value,
                "subtotal": parse_float(totals.get("subtotal")),
                "shipping": parse_float(totals.get("shipping")),
                "tax": parse_float(totals.get("tax")),
                "total": total,
                "customer_details": customer_details,
                "payment_details": payment_details,
                "created_at": now.isoformat(),
                "estimated_delivery": (now + timedelta(days=DELIVERY_DAYS)).isoformat()
            }, items)

            if created is None:
                return {
                    "success": False,
                    "message": "Failed to create order"
                }

            order_id, order_number = created["id"], created["order_number"]
            logger.info("order_created", order_id=order_id, order_number=order_number,
                        user_id=str(user_id), total=total)
            return {
                "success": True,
                "order": {
                    "id": order_id,
                    "orderNumber": order_number,
                    "total": total
                },
                "message": "Order created successfully"
            }

        except Exception as e:
            logger.error("order_create_failed", user_id=str(user_id), error=str(e))
            return {
                "success": False,
                "message": str(e)
            }

    def fetch_orders(self, user_id: str) -> Dict[str, Any]:
        # 사용자의 주문 내역 조회 (원본 레코드 형태)
        try:
            orders = self.order_repo.get_user_orders(user_id)
            return {
                "success": True,
                "orders": orders,
                "count": len(orders)
            }

        except Exception as e:
            logger.error("order_fetch_failed", user_id=str(user_id), error=str(e))
            return {
                "success": False,
                "orders": [],
                "message": str(e)
            }

    def get_order(self, order_id: Any) -> Optional[Dict[str, Any]]:
        return self.order_repo.get_order(parse_int(order_id))

    def update_order_status(self, order_id: Any, status: str) -> Dict[str, Any]:
        # 주문 상태 변경 (배송완료 시 배송일 기록)
        try:
            new_status = OrderStatus(str(status).lower())
        except ValueError:
            return {
                "success": False,
                "message": f"Invalid status: {status}"
            }

        delivered_at = None
        if new_status is OrderStatus.DELIVERED:
            delivered_at = datetime.now(timezone.utc).isoformat()

        if not self.order_repo.update_status(parse_int(order_id), new_status.value, delivered_at):
            return {
                "success": False,
                "message": "Order not found"
            }

        logger.info("order_status_updated", order_id=order_id, status=new_status.value)
        return {
            "success": True,
            "message": f"Order status updated to {new_status.value}"
        }
