"""
Tests for the Flask API
"""
import unittest
import tempfile
import os

from app import create_app
from config import Settings
from models.product import Product
from tests.fakes import VALID_DETAILS, VALID_PAYMENT


class TestStorefrontApi(unittest.TestCase):
    """Test cases for the HTTP routes"""

    def setUp(self):
        """Set up test database and client"""
        self.test_db = tempfile.NamedTemporaryFile(delete=False, suffix='.db')
        self.test_db.close()
        self.app = create_app(Settings(db_path=self.test_db.name, secret_key="test-secret",
                                       admin_user_ids=("admin1",), max_sessions=5))
        self.app.config["TESTING"] = True
        self.app.config["STOREFRONT"].product_repo.upsert_product(
            Product("1", "G Pro X Superlight", "Mice", "Logitech", 50.0, 3))
        self.client = self.app.test_client()

    def tearDown(self):
        """Clean up test database"""
        os.unlink(self.test_db.name)

    def login(self, user_id="u1", client=None):
        response = (client or self.client).post('/api/session', json={'userId': user_id})
        self.assertEqual(response.status_code, 200)

    def test_health(self):
        response = self.client.get('/health')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()['status'], 'ok')

    def test_cart_routes(self):
        response = self.client.post('/api/cart/items', json={'productId': '1', 'quantity': 2})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()['summary']['item_count'], 2)

        response = self.client.patch('/api/cart/items/1', json={'quantity': 1})
        self.assertEqual(response.get_json()['summary']['item_count'], 1)

        response = self.client.post('/api/cart/items', json={'productId': '1', 'quantity': 5})
        self.assertEqual(response.status_code, 400)

        response = self.client.delete('/api/cart/items/1')
        self.assertEqual(response.get_json()['cart_items'], [])

        response = self.client.patch('/api/cart/items/1', json={'quantity': 1})
        self.assertEqual(response.status_code, 404)

    def test_checkout_requires_user(self):
        self.client.post('/api/cart/items', json={'productId': '1'})
        response = self.client.post('/api/checkout')
        self.assertEqual(response.status_code, 401)

    def test_checkout_errors_map_to_conflict(self):
        self.login()
        self.assertEqual(self.client.post('/api/checkout').status_code, 409)

        self.client.post('/api/cart/items', json={'productId': '1'})
        self.assertEqual(self.client.post('/api/checkout').status_code, 200)
        self.assertEqual(self.client.post('/api/checkout/back').status_code, 409)

    def test_checkout_flow(self):
        self.login()
        self.client.post('/api/cart/items', json={'productId': '1'})
        self.client.post('/api/checkout')
        self.assertEqual(self.client.post('/api/checkout/next').get_json()['checkout']['step'], 'details')

        self.client.put('/api/checkout/details', json=dict(VALID_DETAILS, phone='123'))
        response = self.client.post('/api/checkout/next')
        self.assertEqual(response.status_code, 422)
        self.assertIn('phone', response.get_json()['checkout']['validation_errors'])

        self.client.put('/api/checkout/details', json={'phone': '555-123-4567'})
        self.assertEqual(self.client.post('/api/checkout/next').status_code, 200)

        self.client.put('/api/checkout/payment', json=VALID_PAYMENT)
        response = self.client.post('/api/checkout/next')
        self.assertEqual(response.status_code, 200)
        data = response.get_json()
        self.assertEqual(data['checkout']['step'], 'success')
        self.assertEqual(data['checkout']['order_result']['total'], 63.99)

        orders = self.client.get('/api/orders').get_json()['orders']
        self.assertEqual(len(orders), 1)
        self.assertEqual(self.client.get('/api/orders/stats').get_json()['stats']['total_orders'], 1)

        order_id = orders[0]['id']
        self.assertRegex(orders[0]['display_number'], r'^ORD-\d{4}-001$')
        admin = self.app.test_client()
        self.login('admin1', admin)
        response = admin.patch(f'/api/orders/{order_id}/status', json={'status': 'delivered'})
        self.assertEqual(response.status_code, 200)

        eligibility = {'orderId': order_id, 'productId': '1'}
        self.assertTrue(self.client.post('/api/reviews/check-eligibility', json=eligibility).get_json()['eligible'])

        response = self.client.post('/api/reviews', json={'orderId': order_id, 'productId': '1', 'rating': 5})
        self.assertEqual(response.status_code, 200)
        reviews = self.client.get('/api/reviews').get_json()['reviews']
        self.assertEqual(len(reviews), 1)

        data = self.client.post('/api/reviews/check-eligibility', json=eligibility).get_json()
        self.assertFalse(data['eligible'])
        self.assertEqual(data['existingReview']['id'], reviews[0]['id'])

        response = self.client.put(f"/api/reviews/{reviews[0]['id']}", json={'rating': 3, 'title': 'Grew on me'})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()['review']['rating'], 3)

        # 다른 사용자는 수정/삭제 불가
        self.assertEqual(admin.delete(f"/api/reviews/{reviews[0]['id']}").status_code, 404)

        self.assertEqual(self.client.delete(f"/api/reviews/{reviews[0]['id']}").status_code, 200)
        self.assertEqual(self.client.get('/api/reviews').get_json()['reviews'], [])
        self.assertTrue(self.client.post('/api/reviews/check-eligibility', json=eligibility).get_json()['eligible'])

    def test_order_status_route_is_admin_only(self):
        response = self.client.patch('/api/orders/1/status', json={'status': 'delivered'})
        self.assertEqual(response.status_code, 401)

        self.login()
        response = self.client.patch('/api/orders/1/status', json={'status': 'delivered'})
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.get_json()['error'], 'Access denied. Admin role required.')

    def test_decorated_views_keep_their_names(self):
        self.assertEqual(self.app.view_functions['update_order_status'].__name__, 'update_order_status')
        self.assertEqual(self.app.view_functions['list_orders'].__wrapped__.__name__, 'list_orders')

    def test_anonymous_sessions_are_bounded(self):
        store = self.app.config["STOREFRONT"]
        for _ in range(20):
            self.assertEqual(self.app.test_client().get('/api/cart').status_code, 200)
        self.assertEqual(len(store._sessions), 5)

    def test_evicted_session_keeps_its_user(self):
        self.login()
        self.client.post('/api/cart/items', json={'productId': '1'})
        for _ in range(10):
            self.app.test_client().get('/api/cart')

        self.assertEqual(self.client.get('/api/orders').status_code, 200)
        self.assertEqual(self.client.get('/api/cart').get_json()['summary']['item_count'], 1)

    def test_wishlist_routes(self):
        response = self.client.post('/api/wishlist/toggle', json={'productId': '1'})
        self.assertTrue(response.get_json()['added'])

        response = self.client.post('/api/wishlist/1/move-to-cart')
        self.assertEqual(response.get_json()['summary']['item_count'], 1)
        self.assertEqual(self.client.get('/api/wishlist').get_json()['count'], 0)

        response = self.client.post('/api/wishlist/toggle', json={'productId': '999'})
        self.assertEqual(response.status_code, 404)


if __name__ == '__main__':
    unittest.main()
