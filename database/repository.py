"""
Database repository classes
"""
import sqlite3
import json
import uuid
from typing import List, Optional, Dict, Any
from models.product import Product
from models.order import format_order_number
from models.review import Review
from .connection import DatabaseConnection


class ProductRepository:
    # 제품 데이터 접근 계층 (장바구니/주문에서 필요한 조회만 담당)

    def __init__(self, db_connection: DatabaseConnection):
        # DatabaseConnection 인스턴스 주입
        self.db = db_connection

    def get_product_by_id(self, product_id: str) -> Optional[Product]:
        # 제품 ID로 특정 제품 상세 정보 조회
        with self.db.get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute("""
            SELECT product_id, name, category, brand, price, stock, status, image, description, sold
            FROM Products WHERE product_id = ?
            """, (str(product_id),))

            result = cursor.fetchone()
            if result:
                return Product(
                    product_id=result[0],
                    name=result[1],
                    category=result[2],
                    brand=result[3],
                    price=result[4],
                    stock=result[5],
                    status=result[6],
                    image=result[7],
                    description=result[8],
                    sold=result[9]
                )
            return None

    def upsert_product(self, product: Product) -> bool:
        # 제품 등록 또는 갱신 (초기 데이터 적재용)
        with self.db.get_connection() as conn:
            cursor = conn.cursor()

            try:
                cursor.execute("""
                INSERT OR REPLACE INTO Products (
                    product_id, name, category, brand, price, stock, status, image, description, sold
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    product.product_id, product.name, product.category, product.brand,
                    product.price, product.stock, product.status, product.image, product.description,
                    product.sold
                ))

                conn.commit()
                return True

            except sqlite3.Error:
                return False

    def count_products(self) -> int:
        with self.db.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT COUNT(*) FROM Products")
            return cursor.fetchone()[0]


class StorageRepository:
    # 세션별 키/값 저장소 (브라우저 localStorage 와 같은 의미)

    def __init__(self, db_connection: DatabaseConnection, session_id: str):
        # DatabaseConnection 인스턴스와 세션 ID 주입
        self.db = db_connection
        self.session_id = session_id

    def get_item(self, key: str) -> Optional[str]:
        # 저장된 원본 문자열 반환 (없으면 None)
        with self.db.get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute("""
            SELECT value FROM Client_Storage WHERE session_id = ? AND storage_key = ?
            """, (self.session_id, key))

            result = cursor.fetchone()
            return result[0] if result else None

    def set_item(self, key: str, value: str) -> bool:
        # 값 저장 (기존 값 덮어쓰기)
        with self.db.get_connection() as conn:
            cursor = conn.cursor()

            try:
                cursor.execute("""
                INSERT INTO Client_Storage (session_id, storage_key, value, updated_at)
                VALUES (?, ?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(session_id, storage_key)
                DO UPDATE SET value = excluded.value, updated_at = CURRENT_TIMESTAMP
                """, (self.session_id, key, value))

                conn.commit()
                return True

            except sqlite3.Error:
                return False

    def remove_item(self, key: str) -> bool:
        # 키 삭제 (없어도 성공으로 처리)
        with self.db.get_connection() as conn:
            cursor = conn.cursor()

            try:
                cursor.execute("""
                DELETE FROM Client_Storage WHERE session_id = ? AND storage_key = ?
                """, (self.session_id, key))

                conn.commit()
                return True

            except sqlite3.Error:
                return False


class OrderRepository:
    # 주문 데이터 접근 계층 (주문 생성 및 조회)

    def __init__(self, db_connection: DatabaseConnection):
        # DatabaseConnection 인스턴스 주입
        self.db = db_connection

    def create_order(self, order: Dict[str, Any], items: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        # 주문과 주문 아이템을 하나의 트랜잭션으로 저장하고 재고 차감 (id와 주문번호 반환)
        with self.db.get_connection() as conn:
            cursor = conn.cursor()

            try:
                cursor.execute("""
                INSERT INTO Orders (
                    order_number, user_id, status, subtotal, shipping, tax, total,
                    customer_details, payment_details, created_at, estimated_delivery
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    f"PENDING-{uuid.uuid4().hex}", order["user_id"], order["status"],
                    order["subtotal"], order["shipping"], order["tax"], order["total"],
                    json.dumps(order["customer_details"]),  # 고객 정보를 JSON으로 직렬화
                    json.dumps(order["payment_details"]),
                    order["created_at"], order.get("estimated_delivery")
                ))
                order_id = cursor.lastrowid

                # 행 id가 정해진 뒤 최종 주문번호 부여
                order_number = format_order_number(order["year"], order_id)
                cursor.execute("UPDATE Orders SET order_number = ? WHERE id = ?", (order_number, order_id))

                for item in items:
                    cursor.execute("""
                    INSERT INTO Order_Items (
                        order_id, product_id, product_name, product_image,
                        category, brand, price, quantity
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """, (
                        order_id, item["product_id"], item["name"], item.get("image"),
                        item.get("category"), item.get("brand"), item["price"], item["quantity"]
                    ))

                    # 재고가 충분할 때만 차감 (동시 주문 대비)
                    cursor.execute("""
                    UPDATE Products SET stock = stock - ?, sold = sold + ?
                    WHERE product_id = ? AND stock >= ?
                    """, (item["quantity"], item["quantity"], item["product_id"], item["quantity"]))
                    if cursor.rowcount != 1:
                        conn.rollback()
                        return None

                conn.commit()
                return {"id": order_id, "order_number": order_number}

            except sqlite3.Error:
                conn.rollback()
                return None

    def get_user_orders(self, user_id: str) -> List[Dict[str, Any]]:
        # 사용자의 주문 목록 조회 (최신순, 백엔드 응답 형식)
        with self.db.get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute("""
            SELECT id FROM Orders WHERE user_id = ?
            ORDER BY created_at DESC, id DESC
            """, (str(user_id),))

            order_ids = [row[0] for row in cursor.fetchall()]

        return [self.get_order(order_id) for order_id in order_ids]

    def get_order(self, order_id: int) -> Optional[Dict[str, Any]]:
        # 주문 상세 정보 조회 (주문정보 + 주문아이템들)
        with self.db.get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute("""
            SELECT id, order_number, user_id, status, subtotal, shipping, tax, total,
                   customer_details, payment_details, created_at, delivered_at, estimated_delivery
            FROM Orders WHERE id = ?
            """, (order_id,))

            order_row = cursor.fetchone()
            if not order_row:
                return None

            # 해당 주문의 아이템들 가져오기
            cursor.execute("""
            SELECT id, product_id, product_name, product_image, category, brand, price, quantity
            FROM Order_Items WHERE order_id = ?
            ORDER BY id
            """, (order_id,))

            items = []
            for item_row in cursor.fetchall():
                items.append({
                    "id": item_row[0],
                    "productId": item_row[1],
                    "productName": item_row[2],
                    "productImage": item_row[3],
                    "category": item_row[4],
                    "brand": item_row[5],
                    "price": item_row[6],
                    "quantity": item_row[7]
                })

            # JSON 컬럼은 원본 문자열 그대로 전달 (파싱은 소비자 몫)
            return {
                "id": order_row[0],
                "orderNumber": order_row[1],
                "userId": order_row[2],
                "status": order_row[3],
                "subtotal": order_row[4],
                "shipping": order_row[5],
                "tax": order_row[6],
                "total": order_row[7],
                "customerDetails": order_row[8],
                "paymentDetails": order_row[9],
                "createdAt": order_row[10],
                "deliveredDate": order_row[11],
                "estimatedDelivery": order_row[12],
                "items": items
            }

    def update_status(self, order_id: int, status: str, delivered_at: Optional[str] = None) -> bool:
        # 주문 상태 변경 (배송완료 시 배송일 기록)
        with self.db.get_connection() as conn:
            cursor = conn.cursor()

            try:
                cursor.execute("""
                UPDATE Orders SET status = ?, delivered_at = COALESCE(?, delivered_at)
                WHERE id = ?
                """, (status, delivered_at, order_id))

                conn.commit()
                return cursor.rowcount == 1

            except sqlite3.Error:
                return False


class ReviewRepository:
    # 리뷰 데이터 접근 계층

    COLUMNS = """id, user_id, product_id, order_id, order_item_id, rating,
                 title, comment, recommend, created_at, updated_at"""

    def __init__(self, db_connection: DatabaseConnection):
        # DatabaseConnection 인스턴스 주입
        self.db = db_connection

    @staticmethod
    def _to_review(row) -> Review:
        return Review(
            review_id=row[0],
            user_id=row[1],
            product_id=row[2],
            order_id=row[3],
            order_item_id=row[4],
            rating=row[5],
            title=row[6],
            comment=row[7],
            recommend=None if row[8] is None else bool(row[8]),
            created_at=row[9],
            updated_at=row[10]
        )

    def get_user_reviews(self, user_id: str) -> List[Review]:
        # 사용자가 작성한 리뷰 목록 조회
        with self.db.get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute(f"""
            SELECT {self.COLUMNS}
            FROM Reviews WHERE user_id = ?
            ORDER BY created_at DESC, id DESC
            """, (str(user_id),))

            return [self._to_review(row) for row in cursor.fetchall()]

    def get_review(self, review_id: int, user_id: str) -> Optional[Review]:
        # 본인이 작성한 리뷰만 조회 (없거나 남의 리뷰면 None)
        with self.db.get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute(f"""
            SELECT {self.COLUMNS}
            FROM Reviews WHERE id = ? AND user_id = ?
            """, (review_id, str(user_id)))

            row = cursor.fetchone()
            return self._to_review(row) if row else None

    def find_review(self, user_id: str, product_id: str, order_id: int) -> Optional[Review]:
        # 사용자/상품/주문 조합으로 기존 리뷰 조회
        with self.db.get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute(f"""
            SELECT {self.COLUMNS}
            FROM Reviews WHERE user_id = ? AND product_id = ? AND order_id = ?
            """, (str(user_id), str(product_id), order_id))

            row = cursor.fetchone()
            return self._to_review(row) if row else None

    def add_review(self, review: Review) -> Optional[int]:
        # 리뷰 저장 (같은 사용자/상품/주문 조합이 있으면 None)
        with self.db.get_connection() as conn:
            cursor = conn.cursor()

            try:
                cursor.execute("""
                INSERT INTO Reviews (
                    user_id, product_id, order_id, order_item_id, rating,
                    title, comment, recommend, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    review.user_id, review.product_id, review.order_id, review.order_item_id,
                    review.rating, review.title, review.comment,
                    None if review.recommend is None else int(review.recommend),
                    review.created_at
                ))

                conn.commit()
                return cursor.lastrowid

            except sqlite3.IntegrityError:
                return None

    def update_review(self, review: Review) -> bool:
        # 평점/제목/내용/추천 여부 수정 (작성자 본인 것만)
        with self.db.get_connection() as conn:
            cursor = conn.cursor()

            try:
                cursor.execute("""
                UPDATE Reviews
                SET rating = ?, title = ?, comment = ?, recommend = ?, updated_at = ?
                WHERE id = ? AND user_id = ?
                """, (
                    review.rating, review.title, review.comment,
                    None if review.recommend is None else int(review.recommend),
                    review.updated_at, review.review_id, review.user_id
                ))

                conn.commit()
                return cursor.rowcount == 1

            except sqlite3.Error:
                return False

    def delete_review(self, review_id: int, user_id: str) -> bool:
        # 리뷰 삭제 (작성자 본인 것만)
        with self.db.get_connection() as conn:
            cursor = conn.cursor()

            try:
                cursor.execute("DELETE FROM Reviews WHERE id = ? AND user_id = ?", (review_id, str(user_id)))

                conn.commit()
                return cursor.rowcount == 1

            except sqlite3.Error:
                return False
