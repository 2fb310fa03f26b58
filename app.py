from flask import Flask, request, jsonify, session
from functools import wraps
from typing import Optional
import uuid

import structlog

from config import Settings
from core.log import configure_logging
from core.storefront import GearnixStorefront
from services.exceptions import CheckoutError

logger = structlog.get_logger()


def create_app(settings: Optional[Settings] = None, storefront: Optional[GearnixStorefront] = None) -> Flask:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    app = Flask(__name__)
    app.secret_key = settings.secret_key
    app.config["STOREFRONT"] = storefront or GearnixStorefront(settings)

    def store() -> GearnixStorefront:
        return app.config["STOREFRONT"]

    def session_id() -> str:
        # Get or create session ID
        if 'session_id' not in session:
            session['session_id'] = str(uuid.uuid4())
        return session['session_id']

    def reply(result, error_status: int = 400):
        return jsonify(result), (200 if result.get("success") else error_status)

    def body() -> dict:
        return request.get_json(silent=True) or {}

    def requires_user(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            shopper = store().open_session(session_id(), session.get('user_id'))
            if not shopper.user_id:
                return jsonify({'success': False, 'error': 'User not authenticated'}), 401
            return view(*args, **kwargs)

        return wrapper

    def requires_admin(view):
        @wraps(view)
        @requires_user
        def wrapper(*args, **kwargs):
            if session.get('user_id') not in store().settings.admin_user_ids:
                return jsonify({'success': False, 'error': 'Access denied. Admin role required.'}), 403
            return view(*args, **kwargs)

        return wrapper

    @app.errorhandler(CheckoutError)
    def checkout_error(e):
        logger.info("checkout_request_rejected", error=str(e), error_type=e.__class__.__name__)
        return jsonify({'success': False, 'error': str(e)}), 409

    @app.route('/api/session', methods=['POST'])
    def attach_user():
        """Attach a user id to the current browser session"""
        user_id = str(body().get('userId') or '').strip()
        if not user_id:
            return jsonify({'success': False, 'error': 'userId is required'}), 400

        session['user_id'] = user_id
        store().open_session(session_id(), user_id)
        return jsonify({'success': True, 'session_id': session_id(), 'user_id': user_id})

    # Cart
    @app.route('/api/cart', methods=['GET'])
    def get_cart():
        return reply(store().get_cart_details(session_id()))

    @app.route('/api/cart', methods=['DELETE'])
    def clear_cart():
        return reply(store().clear_cart(session_id()))

    @app.route('/api/cart/items', methods=['POST'])
    def add_cart_item():
        data = body()
        return reply(store().add_to_cart(session_id(), data.get('productId'), data.get('quantity', 1)))

    @app.route('/api/cart/items/<product_id>', methods=['PATCH'])
    def update_cart_item(product_id):
        return reply(store().update_cart_item(session_id(), product_id, body().get('quantity')), 404)

    @app.route('/api/cart/items/<product_id>', methods=['DELETE'])
    def remove_cart_item(product_id):
        return reply(store().remove_from_cart(session_id(), product_id))

    # Wishlist
    @app.route('/api/wishlist', methods=['GET'])
    def get_wishlist():
        return reply(store().get_wishlist(session_id()))

    @app.route('/api/wishlist/toggle', methods=['POST'])
    def toggle_wishlist():
        return reply(store().toggle_wishlist(session_id(), body().get('productId')), 404)

    @app.route('/api/wishlist/<product_id>', methods=['DELETE'])
    def remove_wishlist_item(product_id):
        return reply(store().remove_from_wishlist(session_id(), product_id))

    @app.route('/api/wishlist/<product_id>/move-to-cart', methods=['POST'])
    def move_wishlist_item(product_id):
        return reply(store().move_wishlist_item_to_cart(session_id(), product_id), 404)

    # Checkout
    @app.route('/api/checkout', methods=['POST'])
    @requires_user
    def begin_checkout():
        return reply(store().begin_checkout(session_id()))

    @app.route('/api/checkout', methods=['GET'])
    def get_checkout():
        return reply(store().get_checkout(session_id()))

    @app.route('/api/checkout', methods=['DELETE'])
    def close_checkout():
        return reply(store().close_checkout(session_id()))

    @app.route('/api/checkout/details', methods=['PUT'])
    def update_checkout_details():
        return reply(store().update_checkout_details(session_id(), body()))

    @app.route('/api/checkout/payment', methods=['PUT'])
    def update_checkout_payment():
        return reply(store().update_checkout_payment(session_id(), body()))

    @app.route('/api/checkout/next', methods=['POST'])
    @requires_user
    def advance_checkout():
        return reply(store().advance_checkout(session_id()), 422)

    @app.route('/api/checkout/back', methods=['POST'])
    def checkout_back():
        return reply(store().checkout_back(session_id()))

    # Orders
    @app.route('/api/orders', methods=['GET'])
    @requires_user
    def list_orders():
        return reply(store().get_order_history(session_id()), 502)

    @app.route('/api/orders/stats', methods=['GET'])
    @requires_user
    def order_stats():
        return reply(store().get_order_stats(session_id()), 502)

    @app.route('/api/orders/<int:order_id>/status', methods=['PATCH'])
    @requires_admin
    def update_order_status(order_id):
        return reply(store().update_order_status(order_id, body().get('status')))

    # Reviews
    @app.route('/api/reviews', methods=['GET'])
    @requires_user
    def list_reviews():
        return reply(store().get_user_reviews(session_id()), 502)

    @app.route('/api/reviews', methods=['POST'])
    @requires_user
    def submit_review():
        data = body()
        return reply(store().submit_review(
            session_id(),
            data.get('orderId'),
            data.get('productId'),
            data.get('rating'),
            title=data.get('title'),
            comment=data.get('comment'),
            recommend=data.get('recommend')
        ))

    @app.route('/api/reviews/<int:review_id>', methods=['PUT'])
    @requires_user
    def update_review(review_id):
        return reply(store().update_review(session_id(), review_id, body()))

    @app.route('/api/reviews/<int:review_id>', methods=['DELETE'])
    @requires_user
    def delete_review(review_id):
        return reply(store().delete_review(session_id(), review_id), 404)

    @app.route('/api/reviews/check-eligibility', methods=['POST'])
    @requires_user
    def check_review_eligibility():
        data = body()
        return reply(store().check_review_eligibility(session_id(), data.get('orderId'), data.get('productId')))

    @app.route('/health')
    def health():
        """Health check endpoint"""
        return jsonify({'status': 'ok', 'message': 'Gearnix storefront is running!'})

    return app


if __name__ == '__main__':
    settings = Settings.from_env()
    app = create_app(settings)

    print("=== Gearnix Storefront Server ===")
    print(f"Starting server on http://localhost:{settings.port}")
    print("Press Ctrl+C to stop")

    app.run(
        host='0.0.0.0',
        port=settings.port,
        debug=settings.debug
    )
