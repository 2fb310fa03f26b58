"""
Checkout workflow - walks a cart through review, details, payment and order placement
"""
import threading
from typing import Dict, Any, Callable, Mapping, Optional

import structlog

from config import Settings
from models.cart import CartSummary
from models.checkout import (
    CheckoutStep, CheckoutEvent, CheckoutSession, OrderResult,
    CUSTOMER_FIELDS, PAYMENT_FIELDS
)
from models.coerce import parse_float
from .cart_store import CartStore
from .exceptions import (
    EmptyCartError, IllegalTransitionError, CheckoutInProgressError, NoActiveCheckoutError
)
from .validators import validate_customer_details, validate_payment_details

logger = structlog.get_logger()

Step = CheckoutStep
Event = CheckoutEvent

# 허용되는 (현재 단계, 이벤트) -> 다음 단계 전이표
TRANSITIONS: Dict[tuple, CheckoutStep] = {
    (Step.REVIEW, Event.PROCEED): Step.DETAILS,
    (Step.DETAILS, Event.CONFIRM_DETAILS): Step.PAYMENT,
    (Step.DETAILS, Event.BACK): Step.REVIEW,
    (Step.PAYMENT, Event.BACK): Step.DETAILS,
    (Step.PAYMENT, Event.SUBMIT_PAYMENT): Step.PROCESSING,
    (Step.PROCESSING, Event.ORDER_PLACED): Step.SUCCESS,
    (Step.PROCESSING, Event.ORDER_FAILED): Step.PAYMENT,
}

# create_order(cart_payload, customer_details, payment_details, totals) -> 응답 dict
CreateOrder = Callable[[Any, Dict[str, Any], Dict[str, Any], Dict[str, Any]], Mapping[str, Any]]


class CheckoutWorkflow:
    # 체크아웃 상태 머신 (검증 통과 시에만 다음 단계로 이동)

    def __init__(self, cart: CartStore, create_order: CreateOrder, settings: Optional[Settings] = None):
        # 장바구니와 주문 생성 함수 주입
        self.cart = cart
        self.create_order = create_order
        self.settings = settings or Settings()
        self.session: Optional[CheckoutSession] = None
        self._submit_lock = threading.Lock()

    @property
    def step(self) -> Optional[CheckoutStep]:
        return self.session.step if self.session else None

    def _require_session(self) -> CheckoutSession:
        if self.session is None:
            raise NoActiveCheckoutError("Checkout has not been started")
        return self.session

    def _check(self, event: CheckoutEvent) -> CheckoutStep:
        # 전이표에 없는 조합이면 예외
        session = self._require_session()
        target = TRANSITIONS.get((session.step, event))
        if target is None:
            raise IllegalTransitionError(session.step, event)
        return target

    def _apply(self, event: CheckoutEvent) -> CheckoutStep:
        target = self._check(event)
        logger.info("checkout_transition", checkout_event=event.value,
                    from_step=self.session.step.value, to_step=target.value)
        self.session.step = target
        return target

    def begin(self) -> CheckoutSession:
        # 새 체크아웃 시작 (빈 장바구니는 불가)
        if self.session and self.session.step is Step.PROCESSING:
            raise CheckoutInProgressError("An order is already being placed")
        if self.cart.item_count() <= 0:
            raise EmptyCartError("Cart is empty")

        self.session = CheckoutSession()
        logger.info("checkout_started", items=self.cart.item_count())
        return self.session

    def totals(self) -> CartSummary:
        return self.cart.summary(self.settings)

    def proceed_to_details(self) -> CheckoutStep:
        self._require_session().validation_errors = {}
        return self._apply(Event.PROCEED)

    def update_customer_details(self, **fields) -> CheckoutSession:
        # 고객 정보 입력 (입력한 필드의 오류 메시지는 지움)
        session = self._require_session()
        self._update_form(session, session.customer_details, CUSTOMER_FIELDS, fields)
        return session

    def update_payment_details(self, **fields) -> CheckoutSession:
        # 결제 정보 입력 (입력한 필드의 오류 메시지는 지움)
        session = self._require_session()
        self._update_form(session, session.payment_details, PAYMENT_FIELDS, fields)
        return session

    def _update_form(self, session: CheckoutSession, form, field_map: Dict[str, str], values: Dict[str, Any]):
        if session.step is Step.PROCESSING:
            raise CheckoutInProgressError("Details cannot change while the order is being placed")

        attributes = {attr: name for name, attr in field_map.items()}
        for key, value in values.items():
            name = key if key in field_map else attributes.get(key)
            if name is None:
                continue
            setattr(form, field_map[name], "" if value is None else str(value))
            session.validation_errors.pop(name, None)

    def proceed_to_payment(self) -> bool:
        # 고객 정보 검증 후 결제 단계로 이동
        session = self._require_session()
        self._check(Event.CONFIRM_DETAILS)

        errors = validate_customer_details(session.customer_details)
        if errors:
            session.validation_errors = errors
            logger.info("checkout_details_rejected", fields=sorted(errors))
            return False

        session.validation_errors = {}
        self._apply(Event.CONFIRM_DETAILS)
        return True

    def go_back(self) -> CheckoutStep:
        self._require_session().validation_errors = {}
        return self._apply(Event.BACK)

    def submit_payment(self) -> bool:
        # 결제 정보 검증 후 주문 생성 (진행 중인 제출이 있으면 무시)
        session = self._require_session()
        if not self._submit_lock.acquire(blocking=False):
            logger.warning("checkout_submit_ignored", reason="submission in flight")
            return False

        try:
            if session.step is Step.PROCESSING:
                logger.warning("checkout_submit_ignored", reason="already processing")
                return False
            self._check(Event.SUBMIT_PAYMENT)

            errors = validate_payment_details(session.payment_details, self.settings.account_types)
            if errors:
                session.validation_errors = errors
                logger.info("checkout_payment_rejected", fields=sorted(errors))
                return False

            session.validation_errors = {}
            session.error_message = None
            self._apply(Event.SUBMIT_PAYMENT)
            return self._place_order(session)

        finally:
            self._submit_lock.release()

    def _place_order(self, session: CheckoutSession) -> bool:
        summary = self.totals()
        totals = {
            "subtotal": summary.subtotal,
            "shipping": summary.shipping,
            "tax": summary.tax,
            "total": summary.total
        }

        try:
            response = self.create_order(
                self.cart.to_order_payload(),
                session.customer_details.to_dict(),
                session.payment_details.masked(),
                totals
            )
        except Exception as e:
            return self._fail(session, str(e) or e.__class__.__name__)

        if not isinstance(response, Mapping) or not response.get("success"):
            message = response.get("message") if isinstance(response, Mapping) else None
            return self._fail(session, message or "Failed to create order")

        order = response.get("order") or {}
        session.order_result = OrderResult(
            order_id=order.get("id"),
            order_number=str(order.get("orderNumber") or order.get("id") or ""),
            total=parse_float(order.get("total"), summary.total)
        )
        self._apply(Event.ORDER_PLACED)

        # 성공 단계로 바꾼 뒤 장바구니 비우기
        self.cart.clear()
        logger.info("checkout_order_placed", order_number=session.order_result.order_number,
                    total=session.order_result.total)
        return True

    def _fail(self, session: CheckoutSession, message: str) -> bool:
        # 결제 단계로 되돌리고 장바구니는 그대로 유지
        session.error_message = f"Payment processing failed: {message}. Please try again."
        self._apply(Event.ORDER_FAILED)
        logger.warning("checkout_order_failed", error=message)
        return False

    def close(self):
        # 체크아웃 종료 (주문 처리 중에는 닫을 수 없음)
        if self.session is None:
            return
        if self.session.step is Step.PROCESSING:
            raise CheckoutInProgressError("Checkout cannot be closed while the order is being placed")

        logger.info("checkout_closed", step=self.session.step.value)
        self.session = None
