"""
Tests for order record normalization
"""
import unittest
from datetime import datetime, timedelta, timezone

from models.order import OrderStatus
from services.order_projection import (
    resolve_total, customer_name, payment_method, format_time_ago,
    project_order, project_orders, summarize_orders, UNKNOWN_CUSTOMER
)

NOW = datetime(2024, 5, 10, 12, 0, tzinfo=timezone.utc)


def ago(**kwargs):
    return (NOW - timedelta(**kwargs)).isoformat()


class TestResolveTotal(unittest.TestCase):
    """Which field an order total is read from"""

    def test_falls_back_to_item_sum(self):
        raw = {"items": [
            {"price": 10, "quantity": 2},
            {"product": {"price": 5}, "quantity": 1}
        ]}
        self.assertEqual(resolve_total(raw), 25.0)

    def test_first_positive_field_wins(self):
        raw = {"total": 0, "totalAmount": "42.50", "subtotal": 40, "items": [{"price": 1, "quantity": 1}]}
        self.assertEqual(resolve_total(raw), 42.5)

    def test_unit_price_and_missing_quantity(self):
        raw = {"items": [{"unitPrice": "7.25", "quantity": "2"}, {"price": 100}]}
        self.assertEqual(resolve_total(raw), 14.5)

    def test_nothing_usable_is_zero(self):
        self.assertEqual(resolve_total({}), 0.0)
        self.assertEqual(resolve_total({"total": "n/a", "items": []}), 0.0)
        self.assertEqual(resolve_total(None), 0.0)


class TestCustomerAndPayment(unittest.TestCase):

    def test_user_object_preferred(self):
        raw = {"user": {"username": "ada99"}, "customerDetails": {"firstName": "Grace"}}
        self.assertEqual(customer_name(raw), "ada99")

    def test_customer_details_json_string(self):
        raw = {"customerDetails": '{"firstName": "Ada", "lastName": "Lovelace"}'}
        self.assertEqual(customer_name(raw), "Ada Lovelace")

    def test_unparseable_details_fall_back(self):
        self.assertEqual(customer_name({"customerDetails": "{bad"}), UNKNOWN_CUSTOMER)
        self.assertEqual(customer_name({}), UNKNOWN_CUSTOMER)

    def test_payment_method(self):
        self.assertEqual(payment_method({}), "Bank Transfer")
        self.assertEqual(payment_method({"paymentDetails": '{"method": "savings account ending in 1234"}'}),
                         "savings account ending in 1234")


class TestFormatTimeAgo(unittest.TestCase):

    def test_buckets(self):
        self.assertEqual(format_time_ago(ago(seconds=30), NOW), "Just now")
        self.assertEqual(format_time_ago(ago(minutes=5), NOW), "5m ago")
        self.assertEqual(format_time_ago(ago(hours=3), NOW), "3h ago")
        self.assertEqual(format_time_ago(ago(hours=30), NOW), "Yesterday")
        self.assertEqual(format_time_ago(ago(days=3), NOW), "3 days ago")
        self.assertEqual(format_time_ago(ago(days=10), NOW), "4/30/2024")

    def test_missing_and_invalid(self):
        self.assertEqual(format_time_ago(None, NOW), "Unknown time")
        self.assertEqual(format_time_ago("", NOW), "Unknown time")
        self.assertEqual(format_time_ago("not a date", NOW), "Invalid date")

    def test_naive_now_is_treated_as_utc(self):
        naive_now = datetime(2024, 5, 2, 11, 0)
        self.assertEqual(format_time_ago("2024-05-01T10:00:00Z", naive_now), "Yesterday")
        self.assertEqual(format_time_ago(datetime(2024, 5, 2, 10, 30), naive_now), "30m ago")

        order = project_order({"id": 1, "total": 5, "createdAt": "2024-05-02T08:00:00Z"}, naive_now)
        self.assertEqual(order.time_ago, "3h ago")
        self.assertEqual(summarize_orders([order], naive_now).this_month_count, 1)

    def test_zulu_suffix_and_epoch_millis(self):
        self.assertEqual(format_time_ago("2024-05-10T11:00:00Z", NOW), "1h ago")
        epoch_ms = int((NOW - timedelta(minutes=2)).timestamp() * 1000)
        self.assertEqual(format_time_ago(epoch_ms, NOW), "2m ago")


class TestProjectOrders(unittest.TestCase):

    def test_project_order(self):
        order = project_order({
            "id": 12,
            "orderNumber": "ORD-2024-012",
            "status": "DELIVERED",
            "createdAt": ago(hours=2),
            "items": [{"id": 40, "productId": 3, "productName": "Cloud II Headset", "price": 99.99, "quantity": 1}],
            "shipping": 0,
            "tax": 8.0,
            "total": 107.99,
            "estimatedDelivery": "2024-05-15T10:00:00+00:00"
        }, NOW)

        self.assertEqual(order.display_number, "ORD-2024-012")
        self.assertIs(order.status, OrderStatus.DELIVERED)
        self.assertEqual(order.subtotal, 99.99)
        self.assertEqual(order.total, 107.99)
        self.assertEqual(order.items[0].product_id, "3")
        self.assertEqual(order.items[0].order_item_id, 40)
        self.assertEqual(order.time_ago, "2h ago")
        self.assertEqual(order.estimated_delivery, "2024-05-15T10:00:00+00:00")

    def test_unknown_status_and_missing_item_fields(self):
        order = project_order({"id": 1, "status": "lost", "items": [{"product": {"id": "9"}}]}, NOW)

        self.assertIs(order.status, OrderStatus.PROCESSING)
        self.assertEqual(order.display_number, "1")
        self.assertEqual(order.items[0].name, "Unknown Product")
        self.assertEqual(order.items[0].quantity, 0)
        self.assertEqual(order.items[0].image, "/api/placeholder/80/80")

    def test_response_shapes(self):
        record = {"id": 1, "total": 5}
        self.assertEqual(len(project_orders({"success": True, "orders": [record]}, NOW)), 1)
        self.assertEqual(len(project_orders({"data": {"orders": [record, "junk"]}}, NOW)), 1)
        self.assertEqual(len(project_orders([record, record], NOW)), 2)
        self.assertEqual(project_orders({"success": False, "orders": [record]}, NOW), [])
        self.assertEqual(project_orders({"orders": None}, NOW), [])

    def test_summarize_orders(self):
        orders = project_orders([
            {"id": 1, "total": 10, "createdAt": ago(days=2)},
            {"id": 2, "total": 20.5, "createdAt": ago(days=40)},
            {"id": 3, "total": 5, "createdAt": ago(minutes=1)},
            {"id": 4, "total": 1}
        ], NOW)

        stats = summarize_orders(orders, NOW, recent_limit=2)
        self.assertEqual(stats.total_orders, 4)
        self.assertEqual(stats.total_spent, 36.5)
        self.assertEqual(stats.this_month_count, 2)
        self.assertEqual(stats.this_month_spent, 15.0)
        self.assertEqual([order.id for order in stats.recent_orders], [3, 1])


if __name__ == '__main__':
    unittest.main()
