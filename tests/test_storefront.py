"""
Integration tests for GearnixStorefront over a temporary database
"""
import unittest
import tempfile
import os

from config import Settings
from core.storefront import GearnixStorefront
from models.checkout import CheckoutSession, CheckoutStep
from models.product import Product
from services.exceptions import EmptyCartError
from tests.fakes import VALID_DETAILS, VALID_PAYMENT


class TestGearnixStorefront(unittest.TestCase):
    """Test cases for GearnixStorefront"""

    def setUp(self):
        """Set up test database"""
        self.test_db = tempfile.NamedTemporaryFile(delete=False, suffix='.db')
        self.test_db.close()
        self.settings = Settings(db_path=self.test_db.name)
        self.store = GearnixStorefront(self.settings)
        self.store.product_repo.upsert_product(
            Product("1", "Apex Pro Mechanical Keyboard", "Keyboards", "SteelSeries", 50.0, 10, image="apex.jpg"))
        self.store.product_repo.upsert_product(
            Product("2", "Legacy RGB Mouse", "Mice", "Gearnix", 19.99, 5, status="inactive"))
        self.session_id = "test_session"

    def tearDown(self):
        """Clean up test database"""
        os.unlink(self.test_db.name)

    def place_order(self, user_id="u1"):
        self.store.open_session(self.session_id, user_id)
        self.assertTrue(self.store.add_to_cart(self.session_id, "1")["success"])
        self.store.begin_checkout(self.session_id)
        self.store.advance_checkout(self.session_id)
        self.store.update_checkout_details(self.session_id, VALID_DETAILS)
        self.store.advance_checkout(self.session_id)
        self.store.update_checkout_payment(self.session_id, VALID_PAYMENT)
        return self.store.advance_checkout(self.session_id)

    def test_empty_cart_details(self):
        result = self.store.get_cart_details(self.session_id)

        self.assertTrue(result["success"])
        self.assertEqual(result["cart_items"], [])
        self.assertEqual(result["summary"]["total"], 0)
        self.assertEqual(result["message"], "Your cart is empty")

    def test_add_to_cart_checks_catalog(self):
        self.assertEqual(self.store.add_to_cart(self.session_id, "404")["error"], "Product not found")
        self.assertIn("not available", self.store.add_to_cart(self.session_id, "2")["error"])

        self.assertTrue(self.store.add_to_cart(self.session_id, "1", 8)["success"])
        result = self.store.add_to_cart(self.session_id, "1", 3)
        self.assertFalse(result["success"])
        self.assertEqual(result["error"], "Insufficient stock. Available: 10")

    def test_cart_image_is_resolved(self):
        result = self.store.add_to_cart(self.session_id, "1")
        self.assertEqual(result["cart_items"][0]["image"], "http://localhost:5000/apex.jpg")

    def test_cart_survives_restart(self):
        self.store.add_to_cart(self.session_id, "1", 2)

        restarted = GearnixStorefront(self.settings)
        self.assertEqual(restarted.get_cart_details(self.session_id)["summary"]["item_count"], 2)
        self.assertEqual(restarted.get_cart_details("other_session")["cart_items"], [])

    def test_wishlist_round_trip(self):
        self.assertTrue(self.store.toggle_wishlist(self.session_id, "1")["added"])
        self.assertEqual(self.store.get_wishlist(self.session_id)["count"], 1)

        result = self.store.move_wishlist_item_to_cart(self.session_id, "1")
        self.assertTrue(result["success"])
        self.assertEqual(result["summary"]["item_count"], 1)
        self.assertEqual(self.store.get_wishlist(self.session_id)["count"], 0)

    def test_checkout_needs_items(self):
        with self.assertRaises(EmptyCartError):
            self.store.begin_checkout(self.session_id)

    def test_checkout_without_user_fails_and_keeps_cart(self):
        result = self.place_order(user_id=None)

        self.assertFalse(result["success"])
        self.assertEqual(result["checkout"]["step"], CheckoutStep.PAYMENT.value)
        self.assertIn("User not authenticated", result["checkout"]["error_message"])
        self.assertEqual(self.store.get_cart_details(self.session_id)["summary"]["item_count"], 1)

    def test_order_to_review_lifecycle(self):
        result = self.place_order()

        self.assertTrue(result["success"])
        self.assertEqual(result["checkout"]["step"], CheckoutStep.SUCCESS.value)
        self.assertEqual(result["checkout"]["order_result"]["total"], 63.99)
        self.assertEqual(self.store.get_cart_details(self.session_id)["cart_items"], [])
        product = self.store.product_service.get_product_by_id("1")
        self.assertEqual(product["stock"], 9)
        self.assertEqual(product["sold"], 1)

        history = self.store.get_order_history(self.session_id)
        self.assertTrue(history["success"])
        order = history["orders"][0]
        self.assertRegex(order["display_number"], r"^ORD-\d{4}-001$")
        self.assertEqual(order["display_number"], result["checkout"]["order_result"]["order_number"])
        self.assertIsNotNone(order["estimated_delivery"])
        self.assertEqual(order["status"], "processing")
        self.assertEqual(order["customer_name"], "Ada Lovelace")
        self.assertEqual(order["payment_method"], "checking account ending in 5678")
        self.assertFalse(order["items"][0]["reviewable"])

        # 배송 완료 전에는 리뷰 불가
        early = self.store.submit_review(self.session_id, order["id"], "1", 5)
        self.assertFalse(early["success"])

        self.assertTrue(self.store.update_order_status(order["id"], "delivered")["success"])
        order = self.store.get_order_history(self.session_id)["orders"][0]
        self.assertTrue(order["items"][0]["reviewable"])

        review = self.store.submit_review(self.session_id, order["id"], "1", "5", title="Clicky")
        self.assertTrue(review["success"])

        order = self.store.get_order_history(self.session_id)["orders"][0]
        self.assertTrue(order["items"][0]["reviewed"])
        self.assertFalse(order["items"][0]["reviewable"])

        again = self.store.submit_review(self.session_id, order["id"], "1", 4)
        self.assertEqual(again["error"], "This item cannot be reviewed")
        self.assertEqual(len(self.store.get_user_reviews(self.session_id)["reviews"]), 1)

    def test_order_stats(self):
        self.place_order()
        stats = self.store.get_order_stats(self.session_id)["stats"]

        self.assertEqual(stats["total_orders"], 1)
        self.assertEqual(stats["total_spent"], 63.99)
        self.assertEqual(stats["this_month_count"], 1)

    def test_review_for_someone_elses_order(self):
        self.place_order()
        order_id = self.store.get_order_history(self.session_id)["orders"][0]["id"]
        self.store.update_order_status(order_id, "delivered")

        self.store.open_session("intruder", "u2")
        result = self.store.submit_review("intruder", order_id, "1", 5)
        self.assertEqual(result["error"], "Order not found")

    def test_invalid_order_status(self):
        result = self.store.update_order_status(1, "teleported")
        self.assertFalse(result["success"])

    def test_order_numbers_follow_row_ids(self):
        first = self.place_order()["checkout"]["order_result"]["order_number"]
        self.store.close_checkout(self.session_id)
        second = self.place_order()["checkout"]["order_result"]["order_number"]

        self.assertRegex(first, r"^ORD-\d{4}-001$")
        self.assertEqual(second, first[:-3] + "002")
        self.assertEqual(self.store.product_service.get_product_by_id("1")["sold"], 2)

    def test_deleted_review_can_be_written_again(self):
        self.place_order()
        order_id = self.store.get_order_history(self.session_id)["orders"][0]["id"]
        self.store.update_order_status(order_id, "delivered")
        self.assertTrue(self.store.submit_review(self.session_id, order_id, "1", 4)["success"])
        review_id = self.store.get_user_reviews(self.session_id)["reviews"][0]["id"]

        updated = self.store.update_review(self.session_id, review_id, {"rating": 2, "comment": "Keycaps wore out"})
        self.assertEqual(updated["review"]["rating"], 2)
        self.assertEqual(updated["review"]["comment"], "Keycaps wore out")
        self.assertIsNotNone(updated["review"]["updatedAt"])
        self.assertEqual(self.store.update_review(self.session_id, review_id, {"rating": 9})["error"],
                         "Rating must be between 1 and 5")

        self.store.open_session("other", "u2")
        self.assertFalse(self.store.delete_review("other", review_id)["success"])

        self.assertTrue(self.store.delete_review(self.session_id, review_id)["success"])
        item = self.store.get_order_history(self.session_id)["orders"][0]["items"][0]
        self.assertFalse(item["reviewed"])
        self.assertTrue(item["reviewable"])
        self.assertTrue(self.store.submit_review(self.session_id, order_id, "1", 5)["success"])

    def test_review_eligibility_check(self):
        self.place_order()
        order_id = self.store.get_order_history(self.session_id)["orders"][0]["id"]

        missing = self.store.check_review_eligibility(self.session_id, None, "1")
        self.assertEqual(missing["error"], "Product ID and Order ID are required")

        early = self.store.check_review_eligibility(self.session_id, order_id, "1")
        self.assertFalse(early["eligible"])
        self.assertEqual(early["reason"], "Order not found, not delivered, or does not contain this product")

        self.store.update_order_status(order_id, "delivered")
        self.assertTrue(self.store.check_review_eligibility(self.session_id, order_id, "1")["eligible"])
        self.assertFalse(self.store.check_review_eligibility(self.session_id, order_id, "2")["eligible"])

    def test_session_map_is_bounded(self):
        store = GearnixStorefront(Settings(db_path=self.test_db.name, max_sessions=2))
        store.add_to_cart("s1", "1", 2)
        store.open_session("s2")
        store.open_session("s3")

        self.assertEqual(list(store._sessions), ["s2", "s3"])
        # 정리된 세션의 장바구니는 저장소에서 복원
        self.assertEqual(store.get_cart_details("s1")["summary"]["item_count"], 2)
        self.assertEqual(list(store._sessions), ["s3", "s1"])

    def test_session_in_checkout_processing_is_kept(self):
        store = GearnixStorefront(Settings(db_path=self.test_db.name, max_sessions=1))
        busy = store.open_session("busy")
        busy.checkout.session = CheckoutSession(step=CheckoutStep.PROCESSING)
        store.open_session("next")

        self.assertIn("busy", store._sessions)


if __name__ == '__main__':
    unittest.main()
