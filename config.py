"""
Runtime configuration for the Gearnix storefront
Values come from the environment (and an optional .env file)
"""
import os
from dataclasses import dataclass, field
from typing import Tuple

from dotenv import load_dotenv

load_dotenv()


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, default))
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    """Storefront settings"""
    db_path: str = "gearnix.db"
    secret_key: str = "your-secret-key-here"
    port: int = 5000
    debug: bool = False
    log_level: str = "INFO"
    asset_base_url: str = "http://localhost:5000"
    free_shipping_threshold: float = 100.0
    shipping_fee: float = 9.99
    tax_rate: float = 0.08
    account_types: Tuple[str, ...] = field(default=("checking", "savings"))
    cart_storage_key: str = "gearnix_cart"
    wishlist_storage_key: str = "gamestore_wishlist"
    max_sessions: int = 1000
    admin_user_ids: Tuple[str, ...] = field(default=())

    @classmethod
    def from_env(cls) -> "Settings":
        # 환경 변수에서 설정값 읽기 (없으면 기본값 사용)
        account_types = os.getenv("ACCOUNT_TYPES", "checking,savings")
        admin_user_ids = os.getenv("ADMIN_USER_IDS", "")
        return cls(
            db_path=os.getenv("GEARNIX_DB_PATH", cls.db_path),
            secret_key=os.getenv("SECRET_KEY", cls.secret_key),
            port=int(os.getenv("PORT", cls.port)),
            debug=os.getenv("DEBUG", "False").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
            asset_base_url=os.getenv("ASSET_BASE_URL", cls.asset_base_url),
            free_shipping_threshold=_env_float("FREE_SHIPPING_THRESHOLD", cls.free_shipping_threshold),
            shipping_fee=_env_float("SHIPPING_FEE", cls.shipping_fee),
            tax_rate=_env_float("TAX_RATE", cls.tax_rate),
            account_types=tuple(t.strip() for t in account_types.split(",") if t.strip()),
            cart_storage_key=os.getenv("CART_STORAGE_KEY", cls.cart_storage_key),
            wishlist_storage_key=os.getenv("WISHLIST_STORAGE_KEY", cls.wishlist_storage_key),
            max_sessions=int(os.getenv("MAX_SESSIONS", cls.max_sessions)),
            admin_user_ids=tuple(u.strip() for u in admin_user_ids.split(",") if u.strip()),
        )
