"""
Tests for the checkout form validators
"""
import unittest

from models.checkout import CustomerDetails, PaymentDetails
from services.validators import (
    is_valid_name, is_valid_email, is_valid_phone, is_valid_account_number,
    validate_customer_details, validate_payment_details
)
from tests.fakes import VALID_DETAILS, VALID_PAYMENT

ACCOUNT_TYPES = ("checking", "savings")


def customer(**overrides):
    data = dict(VALID_DETAILS, **overrides)
    return CustomerDetails(
        first_name=data["firstName"],
        last_name=data["lastName"],
        email=data["email"],
        phone=data["phone"],
        address=data["address"]
    )


def payment(**overrides):
    data = dict(VALID_PAYMENT, **overrides)
    return PaymentDetails(
        account_number=data["accountNumber"],
        account_holder_name=data["accountHolderName"],
        account_type=data["accountType"],
        bank_name=data["bankName"]
    )


class TestFieldRules(unittest.TestCase):
    """Single field checks"""

    def test_names(self):
        self.assertFalse(is_valid_name("A"))
        self.assertTrue(is_valid_name("Al"))
        self.assertFalse(is_valid_name("Ada2"))
        self.assertTrue(is_valid_name("  Mary Ann  "))
        self.assertFalse(is_valid_name("  A  "))

    def test_email(self):
        self.assertTrue(is_valid_email("ada@example.com"))
        self.assertFalse(is_valid_email("ada@example"))
        self.assertFalse(is_valid_email("ada lovelace@example.com"))

    def test_phone(self):
        self.assertTrue(is_valid_phone("5551234567"))
        self.assertFalse(is_valid_phone("555123456"))
        self.assertFalse(is_valid_phone("0551234567"))
        self.assertTrue(is_valid_phone("+15551234567"))
        self.assertTrue(is_valid_phone("+1 (555) 123-4567"))
        self.assertFalse(is_valid_phone("555.123.4567"))

    def test_account_number_length(self):
        self.assertFalse(is_valid_account_number("1" * 7))
        self.assertTrue(is_valid_account_number("1" * 8))
        self.assertTrue(is_valid_account_number("1" * 17))
        self.assertFalse(is_valid_account_number("1" * 18))

    def test_account_number_spaces_and_symbols(self):
        self.assertTrue(is_valid_account_number("1234 5678 9012"))
        self.assertFalse(is_valid_account_number("1234-5678"))


class TestCustomerDetails(unittest.TestCase):

    def test_valid_details_have_no_errors(self):
        self.assertEqual(validate_customer_details(customer()), {})

    def test_required_fields(self):
        errors = validate_customer_details(CustomerDetails())

        self.assertEqual(errors["firstName"], "First name is required")
        self.assertEqual(errors["phone"], "Phone number is required")
        self.assertEqual(len(errors), 5)

    def test_address_needs_ten_characters(self):
        errors = validate_customer_details(customer(address="12 Elm St"))
        self.assertEqual(errors["address"], "Please enter a complete address (minimum 10 characters)")
        self.assertEqual(validate_customer_details(customer(address="12 Elm St.")), {})

    def test_name_and_phone_messages(self):
        errors = validate_customer_details(customer(firstName="A", phone="0123456789"))

        self.assertEqual(errors["firstName"], "First name must be at least 2 characters and contain only letters")
        self.assertEqual(errors["phone"], "Please enter a valid phone number (minimum 10 digits)")
        self.assertNotIn("lastName", errors)


class TestPaymentDetails(unittest.TestCase):

    def test_valid_payment_has_no_errors(self):
        self.assertEqual(validate_payment_details(payment(), ACCOUNT_TYPES), {})

    def test_bank_name_needs_two_characters(self):
        errors = validate_payment_details(payment(bankName="B"), ACCOUNT_TYPES)
        self.assertEqual(errors, {"bankName": "Bank name must be at least 2 characters"})

    def test_account_number_message(self):
        errors = validate_payment_details(payment(accountNumber="1234567"), ACCOUNT_TYPES)
        self.assertEqual(errors["accountNumber"], "Account number must be 8-17 digits")

    def test_account_type_must_be_configured(self):
        errors = validate_payment_details(payment(accountType="business"), ACCOUNT_TYPES)
        self.assertEqual(errors["accountType"], "Please select an account type")
        self.assertEqual(validate_payment_details(payment(accountType="business"), ("business",)), {})


if __name__ == '__main__':
    unittest.main()
