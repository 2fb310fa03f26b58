"""
Database connection management
"""
import sqlite3
from contextlib import contextmanager
from typing import Generator


class DatabaseConnection:
    # 데이터베이스 연결을 관리하는 클래스

    def __init__(self, db_path: str = "gearnix.db"):
        # 데이터베이스 파일 경로 설정 및 초기화
        self.db_path = db_path
        self.init_database()

    def init_database(self):
        # 데이터베이스 연결 초기화 및 필요한 테이블 생성
        with self.get_connection() as conn:
            cursor = conn.cursor()

            # 장바구니가 참조하는 상품 카탈로그 테이블 생성
            cursor.execute('''
            CREATE TABLE IF NOT EXISTS Products (
                product_id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                category TEXT,
                brand TEXT,
                price REAL NOT NULL,
                stock INTEGER NOT NULL DEFAULT 0,
                sold INTEGER NOT NULL DEFAULT 0,
                status TEXT NOT NULL DEFAULT 'active',
                image TEXT,
                description TEXT
            )
            ''')

            # 세션별 클라이언트 저장소 (장바구니/위시리스트 JSON)
            cursor.execute('''
            CREATE TABLE IF NOT EXISTS Client_Storage (
                session_id TEXT NOT NULL,
                storage_key TEXT NOT NULL,
                value TEXT,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                PRIMARY KEY (session_id, storage_key)
            )
            ''')

            # 주문 정보를 저장하는 테이블 생성
            cursor.execute('''
            CREATE TABLE IF NOT EXISTS Orders (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                order_number TEXT UNIQUE NOT NULL,
                user_id TEXT NOT NULL,
                status TEXT NOT NULL DEFAULT 'processing',
                subtotal REAL NOT NULL,
                shipping REAL NOT NULL DEFAULT 0,
                tax REAL NOT NULL DEFAULT 0,
                total REAL NOT NULL,
                customer_details TEXT,
                payment_details TEXT,
                created_at TEXT NOT NULL,
                estimated_delivery TEXT,
                delivered_at TEXT
            )
            ''')

            # 주문 아이템 상세 정보를 저장하는 테이블 생성
            cursor.execute('''
            CREATE TABLE IF NOT EXISTS Order_Items (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                order_id INTEGER NOT NULL,
                product_id TEXT NOT NULL,
                product_name TEXT NOT NULL,
                product_image TEXT,
                category TEXT,
                brand TEXT,
                price REAL NOT NULL,
                quantity INTEGER NOT NULL,
                FOREIGN KEY(order_id) REFERENCES Orders(id)
            )
            ''')

            # 리뷰 테이블 (사용자/상품/주문 조합당 1개)
            cursor.execute('''
            CREATE TABLE IF NOT EXISTS Reviews (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id TEXT NOT NULL,
                product_id TEXT NOT NULL,
                order_id INTEGER NOT NULL,
                order_item_id INTEGER,
                rating INTEGER NOT NULL,
                title TEXT,
                comment TEXT,
                recommend INTEGER,
                created_at TEXT NOT NULL,
                updated_at TEXT,
                UNIQUE (user_id, product_id, order_id),
                FOREIGN KEY(order_id) REFERENCES Orders(id)
            )
            ''')

            conn.commit()

    @contextmanager
    def get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        # 컨텍스트 매니저를 사용하여 데이터베이스 연결 자동 관리
        conn = sqlite3.connect(self.db_path)
        try:
            yield conn
        finally:
            conn.close()
