"""
Product service - product lookup for the cart and order flows
"""
from typing import Dict, Any, Optional

from database.repository import ProductRepository

PLACEHOLDER_IMAGE = "/api/placeholder/150/150"


def resolve_image_url(image: Optional[str], base_url: str) -> str:
    # 상품 이미지 경로를 절대 URL로 변환 (없으면 플레이스홀더)
    if not image or image == "/api/placeholder/80/80":
        return PLACEHOLDER_IMAGE
    if image.startswith("http"):
        return image
    if not image.startswith("/"):
        image = f"/{image}"
    return f"{base_url.rstrip('/')}{image}"


class ProductService:
    # 제품 관련 비즈니스 로직을 처리하는 서비스 클래스

    def __init__(self, product_repository: ProductRepository, asset_base_url: str = "http://localhost:5000"):
        # ProductRepository 인스턴스를 주입받아 데이터 접근 계층과 연결
        self.product_repo = product_repository
        self.asset_base_url = asset_base_url

    def get_product_by_id(self, product_id: Any) -> Optional[Dict[str, Any]]:
        # 제품 ID로 특정 제품의 상세 정보 조회 (이미지 URL 정규화 포함)
        if product_id is None:
            return None

        product = self.product_repo.get_product_by_id(str(product_id))
        if not product:
            return None

        data = product.to_dict()
        data["image"] = resolve_image_url(product.image, self.asset_base_url)
        return data
