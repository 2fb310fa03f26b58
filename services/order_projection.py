"""
Order projection - reshapes order records from the order service into NormalizedOrder

Backend order records are not consistent about field names: the total may
live under any of several keys, items may carry their price directly or on a
nested product, and customer details may be a dict or a JSON string.
Everything here is pure and never raises for a field-shape mismatch; bad
values fall back to zero, empty, or a fixed label.
"""
import json
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, List, Mapping, Optional

import structlog

from models.coerce import parse_float, parse_int
from models.order import NormalizedOrder, NormalizedOrderItem, OrderStatus, OrderStats

logger = structlog.get_logger()

UNKNOWN_CUSTOMER = "Unknown Customer"
DEFAULT_PAYMENT_METHOD = "Bank Transfer"
ITEM_PLACEHOLDER_IMAGE = "/api/placeholder/80/80"

# 합계 후보 필드 (앞에 있을수록 우선)
TOTAL_FIELDS = ("total", "totalAmount", "subtotal", "price", "amount", "finalAmount", "grandTotal")

TotalExtractor = Callable[[Mapping[str, Any]], Optional[float]]


def _positive_field(name: str) -> TotalExtractor:
    def extract(raw: Mapping[str, Any]) -> Optional[float]:
        value = parse_float(raw.get(name), default=None)
        if value is not None and value > 0:
            return value
        return None

    extract.__name__ = f"field_{name}"
    return extract


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _items(raw: Mapping[str, Any]) -> List[Mapping[str, Any]]:
    items = raw.get("items")
    if not isinstance(items, (list, tuple)):
        return []
    return [item for item in items if isinstance(item, Mapping)]


def _item_price(item: Mapping[str, Any]) -> float:
    price = item.get("price") or item.get("unitPrice") or _mapping(item.get("product")).get("price")
    return parse_float(price)


def items_total(raw: Mapping[str, Any]) -> Optional[float]:
    """Sum of price x quantity over the order's items (None when it has none)"""
    items = _items(raw)
    if not items:
        return None
    return round(sum(_item_price(item) * parse_int(item.get("quantity")) for item in items), 2)


TOTAL_EXTRACTORS: List[TotalExtractor] = [_positive_field(name) for name in TOTAL_FIELDS] + [items_total]


def resolve_total(raw: Mapping[str, Any]) -> float:
    """First extractor that yields a value wins; 0.0 when none does"""
    raw = _mapping(raw)
    for extractor in TOTAL_EXTRACTORS:
        value = extractor(raw)
        if value is not None:
            return value
    return 0.0


def _load_json_object(value: Any, event: str) -> Mapping[str, Any]:
    # dict 또는 JSON 문자열을 dict로 (실패 시 로그만 남기고 빈 dict)
    if isinstance(value, Mapping):
        return value
    if not isinstance(value, str) or not value.strip():
        return {}
    try:
        parsed = json.loads(value)
    except ValueError:
        logger.warning(event, value=value[:200])
        return {}
    return parsed if isinstance(parsed, Mapping) else {}


def customer_name(raw: Mapping[str, Any]) -> str:
    raw = _mapping(raw)
    user = raw.get("user")
    if isinstance(user, Mapping):
        name = f"{user.get('firstName') or ''} {user.get('lastName') or ''}".strip()
        return name or user.get("username") or user.get("email") or UNKNOWN_CUSTOMER

    if raw.get("customerDetails"):
        details = _load_json_object(raw["customerDetails"], "customer_details_unparseable")
        name = f"{details.get('firstName') or ''} {details.get('lastName') or ''}".strip()
        return name or details.get("name") or details.get("email") or UNKNOWN_CUSTOMER

    return UNKNOWN_CUSTOMER


def payment_method(raw: Mapping[str, Any]) -> str:
    details = _load_json_object(_mapping(raw).get("paymentDetails"), "payment_details_unparseable")
    return details.get("method") or DEFAULT_PAYMENT_METHOD


def _as_utc(value: datetime) -> datetime:
    # naive datetime은 UTC로 간주
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def parse_timestamp(value: Any) -> Optional[datetime]:
    """ISO string, datetime or epoch milliseconds -> aware datetime (None if unparseable)"""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    return _as_utc(parsed)


def format_time_ago(created_at: Any, now: Optional[datetime] = None) -> str:
    if created_at is None or created_at == "":
        return "Unknown time"

    date = parse_timestamp(created_at)
    if date is None:
        return "Invalid date"

    now = _as_utc(now) if now else datetime.now(timezone.utc)
    seconds = (now - date).total_seconds()
    minutes = int(seconds // 60)
    hours = int(seconds // 3600)
    days = int(seconds // 86400)

    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes}m ago"
    if hours < 24:
        return f"{hours}h ago"
    if days == 1:
        return "Yesterday"
    if days < 7:
        return f"{days} days ago"
    return f"{date.month}/{date.day}/{date.year}"


def _project_item(item: Mapping[str, Any]) -> NormalizedOrderItem:
    product = _mapping(item.get("product"))
    return NormalizedOrderItem(
        order_item_id=item.get("id"),
        product_id=str(item.get("productId") or product.get("id") or ""),
        name=item.get("productName") or product.get("name") or item.get("name") or "Unknown Product",
        quantity=parse_int(item.get("quantity")),
        unit_price=_item_price(item),
        image=item.get("productImage") or product.get("image") or ITEM_PLACEHOLDER_IMAGE
    )


def project_order(raw: Any, now: Optional[datetime] = None) -> NormalizedOrder:
    """Normalize one order record from the order service"""
    raw = _mapping(raw)
    created_at = raw.get("createdAt") or raw.get("created_at") or raw.get("date")

    subtotal = parse_float(raw.get("subtotal"), default=None)
    if subtotal is None:
        subtotal = items_total(raw) or 0.0

    return NormalizedOrder(
        id=raw.get("id"),
        display_number=str(raw.get("orderNumber") or raw.get("id") or ""),
        created_at=str(created_at) if created_at else None,
        status=OrderStatus.parse(raw.get("status") or OrderStatus.PROCESSING.value),
        items=tuple(_project_item(item) for item in _items(raw)),
        subtotal=subtotal,
        shipping=parse_float(raw.get("shipping")),
        tax=parse_float(raw.get("tax")),
        total=resolve_total(raw),
        customer_name=customer_name(raw),
        payment_method=payment_method(raw),
        time_ago=format_time_ago(created_at, now),
        estimated_delivery=raw.get("estimatedDelivery") or None
    )


def project_orders(response: Any, now: Optional[datetime] = None) -> List[NormalizedOrder]:
    """Normalize every order in a fetch response (or a bare list of records)"""
    if isinstance(response, Mapping):
        if response.get("success") is False:
            return []
        records = response.get("orders")
        if records is None:
            records = _mapping(response.get("data")).get("orders")
    else:
        records = response

    if not isinstance(records, (list, tuple)):
        return []
    return [project_order(record, now) for record in records if isinstance(record, Mapping)]


def summarize_orders(orders: Iterable[NormalizedOrder], now: Optional[datetime] = None,
                     recent_limit: int = 3) -> OrderStats:
    # 전체/이번 달 주문 수와 지출액, 최근 주문 집계
    now = _as_utc(now) if now else datetime.now(timezone.utc)
    orders = list(orders)
    epoch = datetime.min.replace(tzinfo=timezone.utc)

    this_month = []
    for order in orders:
        created = parse_timestamp(order.created_at)
        if created and created.year == now.year and created.month == now.month:
            this_month.append(order)

    recent = sorted(orders, key=lambda order: parse_timestamp(order.created_at) or epoch, reverse=True)

    return OrderStats(
        total_orders=len(orders),
        total_spent=round(sum(order.total for order in orders), 2),
        this_month_count=len(this_month),
        this_month_spent=round(sum(order.total for order in this_month), 2),
        recent_orders=tuple(recent[:recent_limit])
    )
