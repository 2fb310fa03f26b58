"""
Main GearnixStorefront class - orchestrates all services
"""
import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Dict, Any, Optional

import structlog

from config import Settings
from database.connection import DatabaseConnection
from database.repository import ProductRepository, StorageRepository, OrderRepository, ReviewRepository
from models.checkout import CheckoutStep
from models.coerce import parse_int
from services.product_service import ProductService
from services.cart_store import CartStore
from services.wishlist_store import WishlistStore
from services.checkout_workflow import CheckoutWorkflow
from services.order_service import OrderService
from services.review_service import ReviewService
from services.review_eligibility import ReviewEligibilityTracker
from services.order_projection import project_order, project_orders, summarize_orders

logger = structlog.get_logger()


@dataclass
class ShopperSession:
    """Everything one browser session owns"""
    session_id: str
    cart: CartStore
    wishlist: WishlistStore
    reviews: ReviewEligibilityTracker
    user_id: Optional[str] = None
    checkout: Optional[CheckoutWorkflow] = field(default=None, repr=False)


class GearnixStorefront:
    # 메인 스토어프론트 클래스 - 모든 서비스를 조율하는 중앙 관리자

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings.from_env()

        # 데이터베이스 연결 초기화
        self.db_connection = DatabaseConnection(self.settings.db_path)

        # 리포지토리 레이어 초기화 (데이터 접근 계층)
        self.product_repo = ProductRepository(self.db_connection)
        self.order_repo = OrderRepository(self.db_connection)
        self.review_repo = ReviewRepository(self.db_connection)

        # 서비스 레이어 초기화 (비즈니스 로직 계층)
        self.product_service = ProductService(self.product_repo, self.settings.asset_base_url)
        self.order_service = OrderService(self.order_repo, self.product_service)
        self.review_service = ReviewService(self.review_repo, self.order_repo)

        self._sessions: "OrderedDict[str, ShopperSession]" = OrderedDict()
        self._sessions_lock = threading.Lock()

    # === 세션 관리 ===
    def open_session(self, session_id: str, user_id: Optional[str] = None) -> ShopperSession:
        # 세션별 장바구니/위시리스트/체크아웃을 한 번만 생성해서 재사용
        with self._sessions_lock:
            shopper = self._sessions.get(session_id)
            if shopper is not None:
                self._sessions.move_to_end(session_id)
            else:
                storage = StorageRepository(self.db_connection, session_id)
                cart = CartStore(storage, self.settings.cart_storage_key)
                shopper = ShopperSession(
                    session_id=session_id,
                    cart=cart,
                    wishlist=WishlistStore(storage, self.settings.wishlist_storage_key),
                    reviews=ReviewEligibilityTracker(self.review_service)
                )
                shopper.checkout = CheckoutWorkflow(
                    cart,
                    lambda cart_items, customer, payment, totals: self.order_service.create_order(
                        shopper.user_id, cart_items, customer, payment, totals
                    ),
                    self.settings
                )
                self._sessions[session_id] = shopper
                logger.info("session_opened", session_id=session_id)
                self._evict_idle_sessions()

            if user_id is not None and shopper.user_id != str(user_id):
                shopper.user_id = str(user_id)
                shopper.reviews.refresh(shopper.user_id)

            return shopper

    def _evict_idle_sessions(self):
        # 오래 안 쓴 세션부터 정리 (결제 처리 중인 세션은 유지, 장바구니는 저장소에서 복원됨)
        for session_id in list(self._sessions):
            if len(self._sessions) <= self.settings.max_sessions:
                break
            shopper = self._sessions[session_id]
            if shopper.checkout.step is CheckoutStep.PROCESSING:
                continue
            del self._sessions[session_id]
            logger.info("session_evicted", session_id=session_id)

    def _cart_details(self, shopper: ShopperSession) -> Dict[str, Any]:
        lines = shopper.cart.lines
        return {
            "success": True,
            "cart_items": [line.to_dict() for line in lines],
            "summary": shopper.cart.summary(self.settings).to_dict(),
            "message": f"{len(lines)} item(s) in your cart" if lines else "Your cart is empty"
        }

    # === 장바구니 관련 메서드들 ===
    def get_cart_details(self, session_id: str) -> Dict[str, Any]:
        return self._cart_details(self.open_session(session_id))

    def add_to_cart(self, session_id: str, product_id: str, quantity: int = 1) -> Dict[str, Any]:
        # 재고/판매 상태 확인 후 장바구니에 추가
        shopper = self.open_session(session_id)
        product = self.product_service.get_product_by_id(product_id)
        if not product:
            return {
                "success": False,
                "error": "Product not found"
            }

        if product["status"] != "active":
            return {
                "success": False,
                "error": f"{product['name']} is not available"
            }

        existing = shopper.cart.get(product["id"])
        requested = (existing.quantity if existing else 0) + max(parse_int(quantity, 1), 1)
        if product["stock"] < requested:
            return {
                "success": False,
                "error": f"Insufficient stock. Available: {product['stock']}"
            }

        line = shopper.cart.add_item(product, quantity)
        result = self._cart_details(shopper)
        result["message"] = f"{line.name} added to cart"
        return result

    def update_cart_item(self, session_id: str, product_id: str, quantity: Any) -> Dict[str, Any]:
        shopper = self.open_session(session_id)
        if not shopper.cart.contains(product_id):
            return {
                "success": False,
                "error": "Item not found in cart"
            }

        shopper.cart.set_quantity(product_id, quantity)
        return self._cart_details(shopper)

    def remove_from_cart(self, session_id: str, product_id: str) -> Dict[str, Any]:
        shopper = self.open_session(session_id)
        shopper.cart.remove_item(product_id)
        return self._cart_details(shopper)

    def clear_cart(self, session_id: str) -> Dict[str, Any]:
        shopper = self.open_session(session_id)
        shopper.cart.clear()
        return self._cart_details(shopper)

    # === 위시리스트 관련 메서드들 ===
    def get_wishlist(self, session_id: str) -> Dict[str, Any]:
        shopper = self.open_session(session_id)
        return {
            "success": True,
            "items": [entry.to_dict() for entry in shopper.wishlist.entries],
            "count": shopper.wishlist.count()
        }

    def toggle_wishlist(self, session_id: str, product_id: str) -> Dict[str, Any]:
        # 위시리스트 토글 (추가 시 현재 카탈로그 정보로 스냅샷 저장)
        shopper = self.open_session(session_id)
        if shopper.wishlist.contains(product_id):
            shopper.wishlist.remove(product_id)
            added = False
        else:
            product = self.product_service.get_product_by_id(product_id)
            if not product:
                return {
                    "success": False,
                    "error": "Product not found"
                }
            added = shopper.wishlist.toggle(product)

        result = self.get_wishlist(session_id)
        result["added"] = added
        return result

    def remove_from_wishlist(self, session_id: str, product_id: str) -> Dict[str, Any]:
        shopper = self.open_session(session_id)
        shopper.wishlist.remove(product_id)
        return self.get_wishlist(session_id)

    def move_wishlist_item_to_cart(self, session_id: str, product_id: str) -> Dict[str, Any]:
        shopper = self.open_session(session_id)
        if not shopper.wishlist.move_to_cart(product_id, shopper.cart):
            return {
                "success": False,
                "error": "Item not found in wishlist"
            }
        return self._cart_details(shopper)

    # === 체크아웃 관련 메서드들 ===
    def _checkout_state(self, shopper: ShopperSession, success: bool = True) -> Dict[str, Any]:
        session = shopper.checkout.session
        return {
            "success": success,
            "checkout": session.to_dict() if session else None,
            "summary": shopper.checkout.totals().to_dict()
        }

    def begin_checkout(self, session_id: str) -> Dict[str, Any]:
        shopper = self.open_session(session_id)
        shopper.checkout.begin()
        return self._checkout_state(shopper)

    def get_checkout(self, session_id: str) -> Dict[str, Any]:
        return self._checkout_state(self.open_session(session_id))

    def update_checkout_details(self, session_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        shopper = self.open_session(session_id)
        shopper.checkout.update_customer_details(**fields)
        return self._checkout_state(shopper)

    def update_checkout_payment(self, session_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        shopper = self.open_session(session_id)
        shopper.checkout.update_payment_details(**fields)
        return self._checkout_state(shopper)

    def advance_checkout(self, session_id: str) -> Dict[str, Any]:
        # 현재 단계에 맞는 다음 동작 실행 (검토 -> 정보 -> 결제 -> 주문)
        shopper = self.open_session(session_id)
        workflow = shopper.checkout
        step = workflow.step

        if step is CheckoutStep.REVIEW:
            workflow.proceed_to_details()
            advanced = True
        elif step is CheckoutStep.DETAILS:
            advanced = workflow.proceed_to_payment()
        else:
            advanced = workflow.submit_payment()

        return self._checkout_state(shopper, advanced)

    def checkout_back(self, session_id: str) -> Dict[str, Any]:
        shopper = self.open_session(session_id)
        shopper.checkout.go_back()
        return self._checkout_state(shopper)

    def close_checkout(self, session_id: str) -> Dict[str, Any]:
        shopper = self.open_session(session_id)
        shopper.checkout.close()
        return self._checkout_state(shopper)

    # === 주문 관련 메서드들 ===
    def get_order_history(self, session_id: str) -> Dict[str, Any]:
        # 주문 내역 정규화 + 항목별 리뷰 가능 여부 표시
        shopper = self.open_session(session_id)
        response = self.order_service.fetch_orders(shopper.user_id)
        if not response["success"]:
            return {
                "success": False,
                "error": response.get("message") or "Failed to fetch orders",
                "orders": []
            }

        shopper.reviews.refresh(shopper.user_id)
        orders = []
        for order in project_orders(response):
            data = order.to_dict()
            for item, item_data in zip(order.items, data["items"]):
                item_data["reviewed"] = shopper.reviews.is_reviewed(item, order.id)
                item_data["reviewable"] = shopper.reviews.is_reviewable(item, order.status, order.id)
            orders.append(data)

        return {
            "success": True,
            "orders": orders
        }

    def get_order_stats(self, session_id: str) -> Dict[str, Any]:
        shopper = self.open_session(session_id)
        response = self.order_service.fetch_orders(shopper.user_id)
        stats = summarize_orders(project_orders(response))
        return {
            "success": response["success"],
            "stats": stats.to_dict()
        }

    def update_order_status(self, order_id: Any, status: str) -> Dict[str, Any]:
        return self.order_service.update_order_status(order_id, status)

    # === 리뷰 관련 메서드들 ===
    def get_user_reviews(self, session_id: str) -> Dict[str, Any]:
        shopper = self.open_session(session_id)
        return self.review_service.fetch_user_reviews(shopper.user_id)

    def submit_review(self, session_id: str, order_id: Any, product_id: str, rating: Any,
                      title: Optional[str] = None, comment: Optional[str] = None,
                      recommend: Optional[bool] = None) -> Dict[str, Any]:
        # 주문/상품 확인 후 리뷰 제출 (성공 시 즉시 리뷰 완료로 표시)
        shopper = self.open_session(session_id)
        raw_order = self.order_service.get_order(order_id)
        if not raw_order or raw_order.get("userId") != shopper.user_id:
            return {
                "success": False,
                "error": "Order not found"
            }

        order = project_order(raw_order)
        item = next((item for item in order.items if item.product_id == str(product_id)), None)
        if item is None:
            return {
                "success": False,
                "error": "Product is not part of this order"
            }

        if not shopper.reviews.loaded:
            shopper.reviews.refresh(shopper.user_id)

        result = shopper.reviews.submit(shopper.user_id, item, order.id, order.status, parse_int(rating),
                                        title=title, comment=comment, recommend=recommend)
        if not result["success"]:
            return {
                "success": False,
                "error": result["message"]
            }
        return result

    def update_review(self, session_id: str, review_id: Any, data: Dict[str, Any]) -> Dict[str, Any]:
        shopper = self.open_session(session_id)
        result = self.review_service.update_review(shopper.user_id, review_id, data)
        if not result["success"]:
            return {
                "success": False,
                "error": result["message"]
            }
        return result

    def delete_review(self, session_id: str, review_id: Any) -> Dict[str, Any]:
        # 삭제 성공 시 해당 상품은 다시 리뷰 가능
        shopper = self.open_session(session_id)
        result = shopper.reviews.delete(shopper.user_id, review_id)
        if not result["success"]:
            return {
                "success": False,
                "error": result["message"]
            }
        return result

    def check_review_eligibility(self, session_id: str, order_id: Any, product_id: Any) -> Dict[str, Any]:
        shopper = self.open_session(session_id)
        result = self.review_service.check_eligibility(shopper.user_id, {"orderId": order_id, "productId": product_id})
        if not result["success"]:
            return {
                "success": False,
                "error": result["message"]
            }
        return result
