#!/usr/bin/env python3
"""
데이터베이스 초기화 스크립트
테이블을 생성하고 기본 게이밍 기어 카탈로그를 등록합니다.
"""
from config import Settings
from database.connection import DatabaseConnection
from database.repository import ProductRepository
from models.product import Product

CATALOG = [
    Product("1", "Apex Pro Mechanical Keyboard", "Keyboards", "SteelSeries", 199.99, 25,
            image="apex-pro.jpg", description="Adjustable OmniPoint switches"),
    Product("2", "G Pro X Superlight", "Mice", "Logitech", 149.99, 40,
            image="gpro-superlight.jpg", description="Sub-63g wireless esports mouse"),
    Product("3", "Cloud II Headset", "Headsets", "HyperX", 99.99, 30,
            image="cloud-ii.jpg", description="7.1 virtual surround sound"),
    Product("4", "QcK Heavy Mousepad", "Accessories", "SteelSeries", 29.99, 100,
            image="qck-heavy.jpg", description="Thick cloth gaming surface"),
    Product("5", "Odyssey G7 27\" Monitor", "Monitors", "Samsung", 699.99, 8,
            image="odyssey-g7.jpg", description="240Hz curved QHD panel"),
    Product("6", "Seiren Mini Microphone", "Audio", "Razer", 49.99, 15,
            image="seiren-mini.jpg", description="Compact USB condenser mic"),
    Product("7", "DualSense Controller", "Controllers", "Sony", 69.99, 0,
            image="dualsense.jpg", description="Haptic feedback controller"),
    Product("8", "Legacy RGB Mouse", "Mice", "Gearnix", 19.99, 12, status="inactive",
            image="legacy-rgb.jpg", description="Discontinued"),
]


def init_database(db_path: str) -> bool:
    """Create tables and seed the product catalog"""
    try:
        db = DatabaseConnection(db_path)
        repo = ProductRepository(db)

        failed = [product.name for product in CATALOG if not repo.upsert_product(product)]
        if failed:
            print(f"❌ 상품 등록 실패: {', '.join(failed)}")
            return False

        print("✅ 데이터베이스 초기화 완료!")
        print(f"📊 Products 테이블: {repo.count_products()}개 상품")
        return True

    except Exception as e:
        print(f"❌ 데이터베이스 초기화 실패: {str(e)}")
        return False


if __name__ == "__main__":
    settings = Settings.from_env()
    print("=== Gearnix 데이터베이스 초기화 ===")
    if init_database(settings.db_path):
        print("\n이제 app.py를 실행할 수 있습니다!")
    else:
        print("\n초기화에 실패했습니다. GEARNIX_DB_PATH 설정을 확인해주세요.")
