"""
Checkout related data models
"""
from dataclasses import dataclass, field
from typing import Optional, Dict, Any
from enum import Enum


class CheckoutStep(Enum):
    REVIEW = "review"
    DETAILS = "details"
    PAYMENT = "payment"
    PROCESSING = "processing"
    SUCCESS = "success"


class CheckoutEvent(Enum):
    PROCEED = "proceed"
    CONFIRM_DETAILS = "confirm_details"
    BACK = "back"
    SUBMIT_PAYMENT = "submit_payment"
    ORDER_PLACED = "order_placed"
    ORDER_FAILED = "order_failed"


@dataclass
class CustomerDetails:
    """Shipping contact entered at the details step"""
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "address": self.address
        }


@dataclass
class PaymentDetails:
    """Bank account entered at the payment step"""
    account_number: str = ""
    account_holder_name: str = ""
    account_type: str = "checking"
    bank_name: str = ""

    def masked(self) -> Dict[str, Any]:
        """Payment summary safe to send with the order (no full account number)"""
        last_four = self.account_number.replace(" ", "")[-4:]
        return {
            "method": f"{self.account_type} account ending in {last_four}",
            "accountType": self.account_type,
            "bankName": self.bank_name
        }

    def to_dict(self) -> Dict[str, Any]:
        data = self.masked()
        data["accountHolderName"] = self.account_holder_name
        return data


# 화면/API 필드명(camelCase)과 모델 속성명 매핑
CUSTOMER_FIELDS = {
    "firstName": "first_name",
    "lastName": "last_name",
    "email": "email",
    "phone": "phone",
    "address": "address",
}

PAYMENT_FIELDS = {
    "accountNumber": "account_number",
    "accountHolderName": "account_holder_name",
    "accountType": "account_type",
    "bankName": "bank_name",
}


@dataclass
class OrderResult:
    """What the order service reported for a placed order"""
    order_id: Any
    order_number: str
    total: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "order_id": self.order_id,
            "order_number": self.order_number,
            "total": self.total
        }


@dataclass
class CheckoutSession:
    """State of one attempt to turn the cart into an order"""
    step: CheckoutStep = CheckoutStep.REVIEW
    customer_details: CustomerDetails = field(default_factory=CustomerDetails)
    payment_details: PaymentDetails = field(default_factory=PaymentDetails)
    validation_errors: Dict[str, str] = field(default_factory=dict)
    order_result: Optional[OrderResult] = None
    error_message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "step": self.step.value,
            "customer_details": self.customer_details.to_dict(),
            "payment_details": self.payment_details.to_dict(),
            "validation_errors": dict(self.validation_errors),
            "order_result": self.order_result.to_dict() if self.order_result else None,
            "error_message": self.error_message
        }
