"""
Field validation for the checkout forms
Each validator returns a dict of field name -> message (empty when valid)
"""
import re
from typing import Dict, Iterable

from models.checkout import CustomerDetails, PaymentDetails

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^\+?[1-9]\d{0,15}$")
PHONE_SEPARATORS = re.compile(r"[\s\-()]")
NAME_PATTERN = re.compile(r"^[a-zA-Z\s]+$")
DIGITS_PATTERN = re.compile(r"^\d+$")


def is_valid_name(name: str) -> bool:
    name = name.strip()
    return len(name) >= 2 and bool(NAME_PATTERN.fullmatch(name))


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.fullmatch(email))


def is_valid_phone(phone: str) -> bool:
    clean_phone = PHONE_SEPARATORS.sub("", phone)
    return len(clean_phone) >= 10 and bool(PHONE_PATTERN.fullmatch(clean_phone))


def is_valid_account_number(account_number: str) -> bool:
    clean_number = re.sub(r"\s", "", account_number)
    return 8 <= len(clean_number) <= 17 and bool(DIGITS_PATTERN.fullmatch(clean_number))


def validate_customer_details(details: CustomerDetails) -> Dict[str, str]:
    errors = {}

    if not details.first_name.strip():
        errors["firstName"] = "First name is required"
    elif not is_valid_name(details.first_name):
        errors["firstName"] = "First name must be at least 2 characters and contain only letters"

    if not details.last_name.strip():
        errors["lastName"] = "Last name is required"
    elif not is_valid_name(details.last_name):
        errors["lastName"] = "Last name must be at least 2 characters and contain only letters"

    if not details.email.strip():
        errors["email"] = "Email is required"
    elif not is_valid_email(details.email):
        errors["email"] = "Please enter a valid email address"

    if not details.phone.strip():
        errors["phone"] = "Phone number is required"
    elif not is_valid_phone(details.phone):
        errors["phone"] = "Please enter a valid phone number (minimum 10 digits)"

    if not details.address.strip():
        errors["address"] = "Address is required"
    elif len(details.address.strip()) < 10:
        errors["address"] = "Please enter a complete address (minimum 10 characters)"

    return errors


def validate_payment_details(details: PaymentDetails, account_types: Iterable[str]) -> Dict[str, str]:
    errors = {}

    if not details.account_holder_name.strip():
        errors["accountHolderName"] = "Account holder name is required"
    elif not is_valid_name(details.account_holder_name):
        errors["accountHolderName"] = "Account holder name must contain only letters and be at least 2 characters"

    if not details.account_number.strip():
        errors["accountNumber"] = "Account number is required"
    elif not is_valid_account_number(details.account_number):
        errors["accountNumber"] = "Account number must be 8-17 digits"

    if not details.bank_name.strip():
        errors["bankName"] = "Bank name is required"
    elif len(details.bank_name.strip()) < 2:
        errors["bankName"] = "Bank name must be at least 2 characters"

    if details.account_type not in tuple(account_types):
        errors["accountType"] = "Please select an account type"

    return errors
