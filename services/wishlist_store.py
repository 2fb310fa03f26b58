"""
Wishlist store - saved product snapshots kept in client storage
"""
import json
from datetime import datetime, timezone
from typing import List, Any, Optional, Mapping

import structlog

from models.coerce import parse_float, parse_int
from models.wishlist import WishlistEntry
from .cart_store import CartStore, load_json_list

logger = structlog.get_logger()


class WishlistStore:
    # 세션 하나가 소유하는 위시리스트 (장바구니와 독립적으로 저장)

    def __init__(self, storage, storage_key: str = "gamestore_wishlist"):
        # 저장소 주입 후 기존 위시리스트 복원
        self.storage = storage
        self.storage_key = storage_key
        self._entries: List[WishlistEntry] = []
        self._load()

    @property
    def entries(self) -> List[WishlistEntry]:
        return list(self._entries)

    def _load(self):
        data = load_json_list(self.storage, self.storage_key)
        if not data:
            return

        for entry in data:
            snapshot = WishlistEntry.from_dict(entry)
            if not self.contains(snapshot.product_id):
                self._entries.append(snapshot)

        logger.info("wishlist_loaded", key=self.storage_key, entries=len(self._entries))

    def _persist(self):
        payload = json.dumps([entry.to_dict() for entry in self._entries])
        if not self.storage.set_item(self.storage_key, payload):
            logger.error("wishlist_save_failed", key=self.storage_key, entries=len(self._entries))

    def add(self, product: Mapping[str, Any]) -> Optional[WishlistEntry]:
        # 상품 스냅샷 저장 (이미 있으면 무시)
        product_id = str(product["id"])
        if self.contains(product_id):
            logger.info("wishlist_item_exists", product_id=product_id)
            return None

        entry = WishlistEntry(
            product_id=product_id,
            name=str(product.get("name") or "Unknown Product"),
            price=parse_float(product.get("price")),
            image=product.get("image"),
            stock=parse_int(product.get("stock")),
            date_added=datetime.now(timezone.utc).isoformat(),
            brand=product.get("brand") or "Unknown",
            rating=parse_float(product.get("rating")),
            category=product.get("category")
        )
        self._entries.append(entry)
        self._persist()
        logger.info("wishlist_item_added", product_id=product_id)
        return entry

    def remove(self, product_id: Any):
        product_id = str(product_id)
        remaining = [entry for entry in self._entries if entry.product_id != product_id]
        if len(remaining) != len(self._entries):
            self._entries = remaining
            self._persist()
            logger.info("wishlist_item_removed", product_id=product_id)

    def toggle(self, product: Mapping[str, Any]) -> bool:
        # 있으면 삭제, 없으면 추가 (추가된 경우 True)
        if self.contains(product["id"]):
            self.remove(product["id"])
            return False
        self.add(product)
        return True

    def contains(self, product_id: Any) -> bool:
        return self.get(product_id) is not None

    def get(self, product_id: Any) -> Optional[WishlistEntry]:
        product_id = str(product_id)
        for entry in self._entries:
            if entry.product_id == product_id:
                return entry
        return None

    def count(self) -> int:
        return len(self._entries)

    def clear(self):
        self._entries = []
        self._persist()

    def move_to_cart(self, product_id: Any, cart: CartStore, quantity: int = 1) -> bool:
        # 저장된 스냅샷을 장바구니로 옮기기
        entry = self.get(product_id)
        if not entry:
            return False

        cart.add_item(entry.to_product(), quantity)
        self.remove(entry.product_id)
        return True
