"""
Cart store - holds cart lines and keeps them in client storage
"""
import json
from typing import Dict, List, Any, Optional, Mapping

import structlog

from config import Settings
from models.cart import CartLine, CartSummary, DEFAULT_BRAND
from models.coerce import parse_float, parse_int

logger = structlog.get_logger()

# 저장소에 남아 있을 수 있는 "빈 값" 표현들
EMPTY_MARKERS = (None, "", "undefined", "null")


def load_json_list(storage, key: str) -> Optional[List[Dict[str, Any]]]:
    # 저장소에서 JSON 배열 읽기 (손상된 경우 레코드 삭제 후 None 반환)
    raw = storage.get_item(key)
    if raw in EMPTY_MARKERS:
        return []

    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        logger.warning("storage_record_corrupt", key=key, error=str(e))
        storage.remove_item(key)
        return None

    if not isinstance(data, list) or not all(isinstance(entry, dict) and "id" in entry for entry in data):
        logger.warning("storage_record_invalid_shape", key=key)
        storage.remove_item(key)
        return None

    return data


def compute_summary(subtotal: float, item_count: int, settings: Settings) -> CartSummary:
    # 배송비(기준 금액 초과 시 무료, 빈 장바구니는 0)와 세금을 포함한 합계 계산
    if item_count <= 0 or subtotal <= 0 or subtotal > settings.free_shipping_threshold:
        shipping = 0.0
    else:
        shipping = settings.shipping_fee
    tax = subtotal * settings.tax_rate
    return CartSummary(
        item_count=item_count,
        subtotal=round(subtotal, 2),
        shipping=round(shipping, 2),
        tax=round(tax, 2),
        total=round(subtotal + shipping + tax, 2)
    )


class CartStore:
    # 세션 하나가 소유하는 장바구니 (변경될 때마다 저장소에 기록)

    def __init__(self, storage, storage_key: str = "gearnix_cart"):
        # 저장소 주입 후 기존 장바구니 복원
        self.storage = storage
        self.storage_key = storage_key
        self._lines: List[CartLine] = []
        self._load()

    @property
    def lines(self) -> List[CartLine]:
        return list(self._lines)

    def _load(self):
        # 저장된 장바구니 복원 (가격/수량/재고는 숫자로 변환)
        data = load_json_list(self.storage, self.storage_key)
        if not data:
            return

        for entry in data:
            line = CartLine.from_dict(entry)
            if line.quantity <= 0 or self.contains(line.product_id):
                continue
            self._lines.append(line)

        logger.info("cart_loaded", key=self.storage_key, lines=len(self._lines))

    def _persist(self):
        # 전체 라인 목록을 직렬화해서 저장
        payload = json.dumps([line.to_dict() for line in self._lines])
        if not self.storage.set_item(self.storage_key, payload):
            logger.error("cart_save_failed", key=self.storage_key, lines=len(self._lines))

    def add_item(self, product: Mapping[str, Any], quantity: Any = 1) -> CartLine:
        # 상품 추가 (이미 있으면 수량만 증가)
        product_id = str(product["id"])
        quantity = parse_int(quantity, 1)
        if quantity <= 0:
            quantity = 1

        line = self.get(product_id)
        if line:
            line.quantity += quantity
        else:
            line = CartLine(
                product_id=product_id,
                name=str(product.get("name") or ""),
                unit_price=parse_float(product.get("price")),
                quantity=quantity,
                stock=parse_int(product.get("stock")),
                active=(product.get("status") or "active") == "active",
                category=product.get("category"),
                brand=product.get("brand") or DEFAULT_BRAND,
                image=product.get("image")
            )
            self._lines.append(line)

        self._persist()
        logger.info("cart_item_added", product_id=product_id, quantity=line.quantity)
        return line

    def set_quantity(self, product_id: Any, quantity: Any):
        # 수량 변경 (0 이하이면 삭제와 동일)
        quantity = parse_int(quantity)
        if quantity <= 0:
            self.remove_item(product_id)
            return

        line = self.get(product_id)
        if line:
            line.quantity = quantity
            self._persist()

    def remove_item(self, product_id: Any):
        # 해당 상품 라인 삭제 (없으면 아무것도 하지 않음)
        product_id = str(product_id)
        remaining = [line for line in self._lines if line.product_id != product_id]
        if len(remaining) != len(self._lines):
            self._lines = remaining
            self._persist()
            logger.info("cart_item_removed", product_id=product_id)

    def clear(self):
        # 장바구니 전체 비우기 (주문 완료 후 사용)
        self._lines = []
        self._persist()
        logger.info("cart_cleared", key=self.storage_key)

    def total(self) -> float:
        return sum(parse_float(line.unit_price) * parse_int(line.quantity) for line in self._lines)

    def item_count(self) -> int:
        return sum(parse_int(line.quantity) for line in self._lines)

    def contains(self, product_id: Any) -> bool:
        return self.get(product_id) is not None

    def get(self, product_id: Any) -> Optional[CartLine]:
        product_id = str(product_id)
        for line in self._lines:
            if line.product_id == product_id:
                return line
        return None

    def summary(self, settings: Settings) -> CartSummary:
        return compute_summary(self.total(), self.item_count(), settings)

    def to_order_payload(self) -> List[Dict[str, Any]]:
        # 주문 생성 API 형식으로 변환 (영수증용 카테고리/브랜드 포함)
        return [
            {
                "id": line.product_id,
                "name": line.name,
                "price": line.unit_price,
                "quantity": line.quantity,
                "image": line.image,
                "category": line.category,
                "brand": line.brand,
                "status": "active" if line.active else "inactive"
            }
            for line in self._lines
        ]

    def validate_items(self) -> Dict[str, Any]:
        # 저장된 재고/상태 기준으로 주문 불가 항목 확인
        invalid_items = [
            line.to_dict() for line in self._lines
            if not line.in_stock or line.stock < line.quantity or not line.active
        ]
        return {
            "is_valid": not invalid_items,
            "invalid_items": invalid_items
        }

    def update_item_stock(self, product_id: Any, stock: Any, status: Optional[str] = None):
        # 실시간 재고/판매 상태 반영
        line = self.get(product_id)
        if line:
            line.stock = parse_int(stock)
            line.active = (status or "active") == "active"
            self._persist()
